import logging
import math
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

from PIL import Image
from PIL.ExifTags import IFD
import pillow_heif

from .constants import (
    ALTITUDE_REF_DESCRIPTIONS,
    BELOW_SEA_LEVEL,
    EXIF_DATETIME_FORMAT,
    GPS_ALTITUDE,
    GPS_ALTITUDE_REF,
    GPS_LATITUDE,
    GPS_LATITUDE_REF,
    GPS_LONGITUDE,
    GPS_LONGITUDE_REF,
    TAG_DATETIME,
    TAG_OFFSET_TIME,
    TIMESTAMP_TAGS,
)
from .exceptions import FileProcessingError
from .models import ExtractionResult, LocationRecord, MetadataGroups, TagGroup, TagGroupKind

# Register HEIF opener
pillow_heif.register_heif_opener()

logger = logging.getLogger(__name__)

MetadataReader = Callable[[Path], MetadataGroups]


def read_metadata(file_path: Path) -> MetadataGroups:
    """
    Reads the GPS and EXIF tag groups of an image with Pillow.

    Raises whatever Pillow raises for unreadable or unsupported files.
    """
    with Image.open(file_path) as image:
        exif = image.getexif()
        groups = []

        gps_info = exif.get_ifd(IFD.GPSInfo)
        if gps_info:
            tags = dict(gps_info)
            descriptions = {}
            ref_code = _ref_code(tags.get(GPS_ALTITUDE_REF))
            if ref_code in ALTITUDE_REF_DESCRIPTIONS:
                descriptions[GPS_ALTITUDE_REF] = ALTITUDE_REF_DESCRIPTIONS[ref_code]
            groups.append(TagGroup(TagGroupKind.GPS, tags, descriptions))

        exif_tags = dict(exif.get_ifd(IFD.Exif))
        # DateTime (306) and its offset normally live in the base IFD
        for tag in (TAG_DATETIME, TAG_OFFSET_TIME):
            if tag not in exif_tags and tag in exif:
                exif_tags[tag] = exif[tag]
        if exif_tags:
            groups.append(TagGroup(TagGroupKind.EXIF, exif_tags))

    return MetadataGroups(groups)


def _ref_code(value: Any) -> Optional[int]:
    """Numeric altitude reference (0 = above, 1 = below) from int, byte or digit text."""
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, (bytes, bytearray)):
        return value[0] if len(value) == 1 else None
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _to_float(value: Any) -> float:
    # Pillow gives IFDRational; other readers may give (num, den)
    if isinstance(value, tuple):
        return float(value[0]) / float(value[1])
    return float(value)


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value).decode("ascii", errors="ignore")
    return str(value).strip("\x00 ").strip()


class PhotoMetadataAdapter:
    """Turns the tag groups of one file into a LocationRecord.

    ``extract`` never raises: every failure is mapped to an ExtractionResult.
    """

    def __init__(self, reader: Optional[MetadataReader] = None) -> None:
        self._reader = reader or read_metadata

    def extract(self, file_path: Path) -> ExtractionResult:
        file_path = Path(file_path)
        try:
            groups = self._reader(file_path)
        except Exception as e:
            logger.debug(f"Could not read metadata from {file_path.name}: {e}")
            return ExtractionResult.failure(file_path, FileProcessingError(file_path, e))

        try:
            record = self._build_record(groups, file_path)
        except Exception as e:
            logger.warning(f"Error resolving location for {file_path.name}: {e}")
            return ExtractionResult.failure(file_path, FileProcessingError(file_path, e))

        if record is None:
            return ExtractionResult.skipped(file_path)
        return ExtractionResult.success(file_path, record)

    def extract_record(self, file_path: Path) -> Optional[LocationRecord]:
        return self.extract(file_path).record

    def _build_record(self, groups: MetadataGroups, file_path: Path) -> Optional[LocationRecord]:
        gps = groups.get_group(TagGroupKind.GPS)
        if gps is None:
            logger.debug(f"No GPS info found for {file_path.name}")
            return None

        location = self._get_lat_lon(gps)
        if location is None:
            logger.debug(f"No resolvable location for {file_path.name}")
            return None

        latitude, longitude = location
        return LocationRecord(
            latitude=latitude,
            longitude=longitude,
            altitude=self._get_altitude(gps),
            timestamp=self._get_timestamp(groups.get_group(TagGroupKind.EXIF)),
            source_path=str(file_path),
        )

    def _get_lat_lon(self, gps: TagGroup) -> Optional[Tuple[float, float]]:
        lat_dms = gps.get(GPS_LATITUDE)
        lat_ref = _to_text(gps.get(GPS_LATITUDE_REF))
        lon_dms = gps.get(GPS_LONGITUDE)
        lon_ref = _to_text(gps.get(GPS_LONGITUDE_REF))

        if not (lat_dms and lat_ref and lon_dms and lon_ref):
            return None

        lat = self._to_decimal(lat_dms, lat_ref)
        lon = self._to_decimal(lon_dms, lon_ref)
        if lat is None or lon is None:
            return None

        if not (math.isfinite(lat) and math.isfinite(lon)):
            return None
        if abs(lat) > 90.0 or abs(lon) > 180.0:
            logger.warning(f"GPS coordinates out of range: {lat}, {lon}")
            return None
        # Validate 0.0, 0.0 coordinates (GPS signal error)
        if lat == 0.0 and lon == 0.0:
            logger.warning("GPS coordinates are (0.0, 0.0). Treating as no GPS.")
            return None
        return lat, lon

    def _to_decimal(self, dms_tuple: Any, ref: str) -> Optional[float]:
        try:
            d = _to_float(dms_tuple[0])
            m = _to_float(dms_tuple[1])
            s = _to_float(dms_tuple[2])

            decimal = d + (m / 60.0) + (s / 3600.0)

            if ref.upper() in ["S", "W"]:
                decimal = -decimal
            return decimal
        except Exception as e:
            logger.warning(f"Error converting DMS to decimal: {dms_tuple} {ref} - {e}")
            return None

    def _get_altitude(self, gps: TagGroup) -> Optional[float]:
        if GPS_ALTITUDE not in gps:
            return None
        try:
            altitude = abs(_to_float(gps.get(GPS_ALTITUDE)))
            if not math.isfinite(altitude):
                return None

            code = _ref_code(gps.get(GPS_ALTITUDE_REF))
            if code is not None:
                below = code == 1
            else:
                description = gps.description(GPS_ALTITUDE_REF) or ""
                below = description.strip().lower() == BELOW_SEA_LEVEL
            return -altitude if below else altitude
        except Exception as e:
            logger.debug(f"Error processing altitude: {e}")
            return None

    def _get_timestamp(self, exif: Optional[TagGroup]) -> Optional[int]:
        if exif is None:
            return None
        for date_tag, offset_tag in TIMESTAMP_TAGS:
            moment = self._parse_date(exif.get(date_tag), exif.get(offset_tag))
            if moment is not None:
                return int(moment.timestamp())
        return None

    def _parse_date(self, raw_date: Any, raw_offset: Any) -> Optional[datetime]:
        date_str = _to_text(raw_date)
        if not date_str:
            return None
        try:
            moment = datetime.strptime(date_str[:19], EXIF_DATETIME_FORMAT)
        except ValueError:
            logger.debug(f"Invalid date format: {date_str}")
            return None
        return moment.replace(tzinfo=self._parse_offset(_to_text(raw_offset)))

    def _parse_offset(self, offset: Optional[str]) -> timezone:
        # EXIF 2.31 offsets look like "+02:00"; anything else means UTC
        if not offset or len(offset) < 6 or offset[0] not in "+-":
            return timezone.utc
        try:
            delta = timedelta(hours=int(offset[1:3]), minutes=int(offset[4:6]))
            return timezone(-delta if offset[0] == "-" else delta)
        except ValueError:
            return timezone.utc
