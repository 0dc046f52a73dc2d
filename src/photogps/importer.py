import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import openpyxl

from .models import LocationRecord

logger = logging.getLogger(__name__)


class ExcelImporter:
    """Reads location records back from a spreadsheet written by ExcelExporter.

    Reads headers dynamically (case-insensitive) and supports columns whose
    text contains: "Latitude", "Longitude", "Altitude", "Timestamp", "FilePath".
    """

    HEADER_KEYS = {
        "latitude": ["latitude", "latitud", "lat"],
        "longitude": ["longitude", "longitud", "long", "lng", "lon"],
        "altitude": ["altitude", "altitud", "elevation", "alt"],
        "timestamp": ["timestamp", "datetime", "date", "time"],
        "filepath": ["filepath", "file path", "path", "ruta"],
    }

    def parse_excel(self, excel_path: Path | str) -> List[LocationRecord]:
        excel_path = Path(excel_path)
        wb = openpyxl.load_workbook(excel_path, data_only=True)
        ws = wb.active

        # Map headers from row 1; first matching column wins
        header_map: Dict[str, int] = {}
        for cell in ws[1]:
            if cell.value is None:
                continue
            text = str(cell.value).strip().lower()
            if not text:
                continue
            for key, variants in self.HEADER_KEYS.items():
                if key not in header_map and any(v in text for v in variants):
                    header_map[key] = cell.column  # 1-based index
                    break

        logger.info(f"Detected header map: {header_map}")

        missing = [k for k in ("latitude", "longitude") if k not in header_map]
        if missing:
            raise ValueError(
                f"Missing critical columns in Excel: {', '.join(missing)}. "
                "Make sure to include columns for 'Latitude' and 'Longitude'."
            )

        results: List[LocationRecord] = []

        for row_idx in range(2, ws.max_row + 1):

            def _val(col_key: str):
                col = header_map.get(col_key)
                return ws.cell(row=row_idx, column=col).value if col else None

            raw_lat = _val("latitude")
            raw_lon = _val("longitude")

            if raw_lat in (None, "") or raw_lon in (None, ""):
                logger.warning(f"Row {row_idx}: Missing coordinates. Skipping.")
                continue

            try:
                lat = self._to_float(raw_lat)
                lon = self._to_float(raw_lon)
            except ValueError:
                logger.warning(f"Row {row_idx}: Invalid coordinates (Lat/Lon). Skipping.")
                continue

            if not (math.isfinite(lat) and math.isfinite(lon)):
                logger.warning(f"Row {row_idx}: Non-finite coordinates. Skipping.")
                continue

            alt_val = _val("altitude")
            try:
                altitude = self._to_float(alt_val) if alt_val not in (None, "") else None
            except ValueError:
                altitude = None
            if altitude is not None and not math.isfinite(altitude):
                altitude = None

            filepath = _val("filepath")

            results.append(
                LocationRecord(
                    latitude=lat,
                    longitude=lon,
                    altitude=altitude,
                    timestamp=self._parse_timestamp(_val("timestamp")),
                    source_path=str(filepath).strip() if filepath not in (None, "") else None,
                )
            )

        return results

    def _to_float(self, value) -> float:
        if isinstance(value, (int, float)):
            return float(value)
        s = str(value).strip().replace(",", ".")
        return float(s)

    def _parse_timestamp(self, value) -> Optional[int]:
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            moment = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
            return int(moment.timestamp())
        try:
            return int(self._to_float(value))
        except (ValueError, OverflowError):
            pass
        txt = str(value).strip()
        for fmt in ("%Y-%m-%d %H:%M:%S", "%Y:%m:%d %H:%M:%S", "%d/%m/%Y %H:%M:%S", "%Y-%m-%d"):
            try:
                return int(datetime.strptime(txt, fmt).replace(tzinfo=timezone.utc).timestamp())
            except ValueError:
                pass
        logger.warning(f"Unrecognized timestamp value: {txt}")
        return None
