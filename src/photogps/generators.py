import csv
import io
import logging
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import geojson
import openpyxl
from openpyxl.styles import Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .constants import (
    EXCEL_HEADER_FILL,
    EXCEL_MAX_COLUMN_WIDTH,
    EXCEL_MIN_COLUMN_WIDTH,
    EXCEL_SHEET_TITLE,
    FILE_INFO_HEADERS,
    GEOJSON_COORDINATE_PRECISION,
    TABULAR_HEADERS,
)
from .models import LocationRecord

logger = logging.getLogger(__name__)

CoordinateTransform = Callable[[float, float], Tuple[float, float]]


def tabular_headers(include_file_info: bool = False) -> List[str]:
    return TABULAR_HEADERS + (FILE_INFO_HEADERS if include_file_info else [])


def tabular_row(record: LocationRecord, include_file_info: bool = False) -> list:
    """One spreadsheet/CSV row; absent optional fields become empty strings."""
    row = [
        record.latitude,
        record.longitude,
        record.altitude if record.altitude is not None else "",
        record.timestamp if record.timestamp is not None else "",
    ]
    if include_file_info:
        row += [record.filename, record.source_path or ""]
    return row


class RecordExporter:
    """Serializes a sequence of records to bytes and writes them to a file."""

    def render(self, records: Sequence[LocationRecord]) -> bytes:
        raise NotImplementedError

    def save(self, records: Sequence[LocationRecord], path) -> Path:
        path = Path(path)
        path.write_bytes(self.render(records))
        logger.info(f"{type(self).__name__}: {len(records)} records written to {path}")
        return path


class ExcelExporter(RecordExporter):
    def __init__(self, include_file_info: bool = False, title: str = EXCEL_SHEET_TITLE):
        self.include_file_info = include_file_info
        self.title = title
        self.thin_border = Border(
            left=Side(style="thin"), right=Side(style="thin"), top=Side(style="thin"), bottom=Side(style="thin")
        )
        self.header_fill = PatternFill(fill_type="solid", start_color=EXCEL_HEADER_FILL, end_color=EXCEL_HEADER_FILL)

    def build_workbook(self, records: Sequence[LocationRecord]) -> openpyxl.Workbook:
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = self.title

        headers = tabular_headers(self.include_file_info)
        for col_idx, text in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col_idx, value=text)
            cell.font = Font(bold=True)
            cell.fill = self.header_fill
            cell.border = self.thin_border

        for row_idx, record in enumerate(records, start=2):
            for col_idx, val in enumerate(tabular_row(record, self.include_file_info), start=1):
                c = ws.cell(row=row_idx, column=col_idx, value=val)
                # Text such as "=name.jpg" stays text, never a formula
                if isinstance(val, str):
                    c.data_type = "s"
                c.border = self.thin_border

        self._autosize_columns(ws)
        return wb

    def _autosize_columns(self, ws) -> None:
        # openpyxl has no autofit; size each column to its longest rendered value
        for col_idx, column in enumerate(ws.iter_cols(), start=1):
            longest = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            width = min(max(longest + 2, EXCEL_MIN_COLUMN_WIDTH), EXCEL_MAX_COLUMN_WIDTH)
            ws.column_dimensions[get_column_letter(col_idx)].width = width

    def render(self, records: Sequence[LocationRecord]) -> bytes:
        buffer = io.BytesIO()
        self.build_workbook(records).save(buffer)
        return buffer.getvalue()


class CsvExporter(RecordExporter):
    def __init__(self, include_file_info: bool = False):
        self.include_file_info = include_file_info

    def render(self, records: Sequence[LocationRecord]) -> bytes:
        buffer = io.StringIO(newline="")
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(tabular_headers(self.include_file_info))
        for record in records:
            writer.writerow(tabular_row(record, self.include_file_info))
        return buffer.getvalue().encode("utf-8")


class GeoJsonExporter(RecordExporter):
    """FeatureCollection of Point features, coordinates in [lon, lat(, alt)] order."""

    def __init__(
        self,
        transform: Optional[CoordinateTransform] = None,
        indent: Optional[int] = 4,
        precision: int = GEOJSON_COORDINATE_PRECISION,
    ):
        self.transform = transform
        self.indent = indent
        self.precision = precision

    def build_feature(self, record: LocationRecord) -> geojson.Feature:
        lat, lon = record.latitude, record.longitude
        if self.transform is not None:
            lat, lon = self.transform(lat, lon)

        coordinates = [lon, lat]
        if record.altitude is not None:
            coordinates.append(record.altitude)

        # Absent timestamp is omitted, not written as null
        properties = {}
        if record.timestamp is not None:
            properties["timestamp"] = record.timestamp

        return geojson.Feature(geometry=geojson.Point(coordinates, precision=self.precision), properties=properties)

    def build_feature_collection(self, records: Sequence[LocationRecord]) -> geojson.FeatureCollection:
        return geojson.FeatureCollection([self.build_feature(record) for record in records])

    def render(self, records: Sequence[LocationRecord]) -> bytes:
        collection = self.build_feature_collection(records)
        return geojson.dumps(collection, indent=self.indent, ensure_ascii=False, allow_nan=False).encode("utf-8")
