"""
Convert a spreadsheet of locations (as written by PhotoGPS) into GeoJSON.

Usage:
    photogps-excel2geojson data.xlsx
    photogps-excel2geojson data.xlsx --output track.geojson --precision 4
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .dedup import deduplicate
from .generators import GeoJsonExporter
from .importer import ExcelImporter
from .reprojection import wgs84_to_gcj02

logger = logging.getLogger(__name__)


def convert(
    excel_path: Path,
    output_path: Optional[Path] = None,
    precision: Optional[int] = None,
    reproject: bool = False,
) -> Path:
    """Read ``excel_path`` and write a GeoJSON FeatureCollection.

    Rows are kept in spreadsheet order. With ``precision`` the records are
    de-duplicated on their rounded coordinates first.
    """
    excel_path = Path(excel_path)
    output_path = Path(output_path) if output_path else excel_path.with_suffix(".geojson")

    records = ExcelImporter().parse_excel(excel_path)
    if precision is not None:
        records = deduplicate(records, precision)

    exporter = GeoJsonExporter(transform=wgs84_to_gcj02 if reproject else None)
    return exporter.save(records, output_path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert a PhotoGPS spreadsheet (Latitude/Longitude/Altitude/Timestamp) to GeoJSON.",
    )
    parser.add_argument("excel_path", type=Path, help="Spreadsheet to read (.xlsx)")
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="GeoJSON file to write (default: next to the spreadsheet, .geojson suffix)",
    )
    parser.add_argument(
        "--precision",
        type=int,
        default=None,
        help="Drop points that repeat after rounding to this many decimal digits",
    )
    parser.add_argument(
        "--reproject",
        action="store_true",
        help="Convert WGS-84 coordinates to GCJ-02 (only affects points inside China)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not args.excel_path.is_file():
        print(f"ERROR: File not found: {args.excel_path}")
        return 1

    try:
        output = convert(args.excel_path, args.output, args.precision, args.reproject)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1
    except Exception as e:
        logger.exception("Conversion failed")
        print(f"ERROR: Unexpected error: {e}")
        return 1

    print(f"GeoJSON file created at: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
