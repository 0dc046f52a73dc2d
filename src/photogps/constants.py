# --- Main Configuration ---
# Photo and TIFF-based camera raw extensions Pillow can open
# (lowercase, compared case-insensitively)
PHOTO_EXTENSIONS = frozenset(
    {
        ".jpg", ".jpeg", ".jpe", ".png", ".tif", ".tiff", ".heic", ".heif", ".webp",
        ".dng", ".cr2", ".nef", ".arw", ".srw", ".pef",
    }
)

# --- EXIF tag ids ---
# GPS IFD: 1=LatRef, 2=Lat, 3=LonRef, 4=Lon, 5=AltRef, 6=Alt
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4
GPS_ALTITUDE_REF = 5
GPS_ALTITUDE = 6

# Exif sub-IFD / base IFD
TAG_DATETIME = 306
TAG_DATETIME_ORIGINAL = 36867
TAG_DATETIME_DIGITIZED = 36868
TAG_OFFSET_TIME = 36880
TAG_OFFSET_TIME_ORIGINAL = 36881
TAG_OFFSET_TIME_DIGITIZED = 36882

# (datetime tag, offset tag) in priority order
TIMESTAMP_TAGS = (
    (TAG_DATETIME_ORIGINAL, TAG_OFFSET_TIME_ORIGINAL),
    (TAG_DATETIME_DIGITIZED, TAG_OFFSET_TIME_DIGITIZED),
    (TAG_DATETIME, TAG_OFFSET_TIME),
)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

ALTITUDE_REF_DESCRIPTIONS = {0: "Above sea level", 1: "Below sea level"}
BELOW_SEA_LEVEL = "below sea level"

# --- Pipeline ---
DEFAULT_GEO_PRECISION = 4
DISCOVERY_PROGRESS_INTERVAL = 0.25  # seconds
PROCESSING_PROGRESS_INTERVAL = 0.5  # seconds

# --- Export ---
TABULAR_HEADERS = ["Latitude", "Longitude", "Altitude", "Timestamp"]
FILE_INFO_HEADERS = ["FileName", "FilePath"]

EXCEL_FILENAME = "data.xlsx"
CSV_FILENAME = "data.csv"
GEOJSON_FILENAME = "data.geojson"
# Decimal places kept in GeoJSON coordinates (geojson rounds to 6 by default)
GEOJSON_COORDINATE_PRECISION = 15

EXCEL_SHEET_TITLE = "Data"
EXCEL_HEADER_FILL = "D3D3D3"  # light gray
EXCEL_MIN_COLUMN_WIDTH = 8
EXCEL_MAX_COLUMN_WIDTH = 80

# --- Console ---
APP_TITLE = "Photo GPS Metadata Extractor"


class ConsoleMessages:
    PROMPT = "Folder path (or drag folder here): "
    DISCOVERING = "\nDiscovering photo files..."
    PROCESSING = "\n\nProcessing files..."
    EXPORTING = "\n\nExporting results..."
    NO_PHOTOS = "No supported photo files found!"
    FATAL = "\nFatal error: {}"
    EXPORT_FAILED = "\nExport failed: {}"
