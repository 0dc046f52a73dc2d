#!/usr/bin/env python3
"""
Inspect the GPS and EXIF tag groups of a photo.

CLI tool to check what PhotoGPS reads from a single file: the raw tags of
each group and the resulting location record.

Usage:
    python scripts/read_metadata.py --file "photo.jpg"
    python scripts/read_metadata.py --dir "./photos" --file "photo.jpg"
"""

import argparse
import sys
from pathlib import Path

from PIL import ExifTags

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / "src"))

from photogps.extractor import PhotoMetadataAdapter, read_metadata
from photogps.models import TagGroupKind


def show_metadata(file_path: Path) -> None:
    """Print the tag groups and the extracted record of an image file."""
    print(f"\n--- Processing file: {file_path} ---")

    try:
        groups = read_metadata(file_path)
    except Exception as e:
        print(f"\nERROR: Could not read metadata: {e}")
        sys.exit(1)

    gps = groups.get_group(TagGroupKind.GPS)
    exif = groups.get_group(TagGroupKind.EXIF)

    if exif is None:
        print("No EXIF sub-group found.")
    else:
        print("\n--- EXIF DATA ---")
        for tag_id, value in sorted(exif.tags.items()):
            name = ExifTags.TAGS.get(tag_id, tag_id)
            if "Date" in str(name) or "Offset" in str(name):
                print(f"{name}: {value}")

    if gps is None:
        print("\nNo GPS data found in this image.")
        return

    print("\n--- GPS DATA ---")
    for tag_id, value in sorted(gps.tags.items()):
        name = ExifTags.GPSTAGS.get(tag_id, tag_id)
        description = gps.description(tag_id)
        suffix = f" ({description})" if description else ""
        print(f"{name}: {value}{suffix}")

    record = PhotoMetadataAdapter(reader=lambda _path: groups).extract_record(file_path)
    print("\n--- RESULT ---")
    if record is None:
        print("GPS tags exist, but no valid location could be resolved.")
    else:
        print(f"Latitude:  {record.latitude}")
        print(f"Longitude: {record.longitude}")
        print(f"Altitude:  {record.altitude if record.altitude is not None else '-'}")
        print(f"Timestamp: {record.timestamp if record.timestamp is not None else '-'}")


def main() -> None:
    """Main entry point for the CLI tool."""
    parser = argparse.ArgumentParser(
        description="Show the GPS/EXIF metadata PhotoGPS reads from a photo.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/read_metadata.py --file "photo.jpg"
  python scripts/read_metadata.py --dir "./photos" --file "IMG_0001.HEIC"
        """,
    )
    parser.add_argument(
        "--dir",
        type=str,
        default=".",
        help="Directory containing the photo (default: current directory)",
    )
    parser.add_argument(
        "--file",
        type=str,
        required=True,
        help="Filename of the photo to analyze (required)",
    )

    args = parser.parse_args()
    file_path = Path(args.dir) / args.file

    if not file_path.exists():
        print(f"\nERROR: File not found: {file_path}")
        sys.exit(1)

    show_metadata(file_path)


if __name__ == "__main__":
    main()
