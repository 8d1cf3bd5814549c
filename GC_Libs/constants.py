"""
Constants and configuration values for Gear Cutout.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Segmentation defaults
DEFAULT_TOLERANCE = 50
DEFAULT_EROSION_ITERATIONS = 0
MIN_TOLERANCE = 15
MAX_TOLERANCE = 150
MAX_EROSION_ITERATIONS = 4

# Feathering band is [tolerance, tolerance * FEATHER_FACTOR)
FEATHER_FACTOR = 1.3
# Seeded flood fill accepts pixels closer than tolerance * FLOOD_FACTOR
FLOOD_FACTOR = 1.5

# Forced-transparent bottom-right region (fraction of width and height)
DEFAULT_CORNER_FRACTION = 0.08

# Component filter
DEFAULT_MIN_ALPHA = 20
DEFAULT_MIN_COMPONENT_SIZE = 50

# Output sizes
DEFAULT_FULL_SIZE = 2048
DEFAULT_TIGHT_SIZE = 1024
FULL_VIEW_MARGIN = 0.04
OUTLINE_SPACING_DIVISOR = 500
OUTLINE_COLOR = (0, 0, 0)

# File naming
DEFAULT_OUTPUT_FORMAT = "PNG"
OUTPUT_EXTENSION = ".png"
THUMBNAIL_SUFFIX = "_サムネ"
ACCESSORY_SUFFIX = "_overlap"
ACCESSORY_MARKER = "アクセサリー"
DEFAULT_ITEM_NAME = "装備"
UNSAFE_FILENAME_CHARS = '\\/:*?"<>|'

# Supported input formats
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}

# Naming service
NAMING_API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"
NAMING_MODEL = "gemini-2.5-flash-preview-09-2025"
NAMING_RETRIES = 3
NAMING_BACKOFF_SECONDS = 1.5
NAMING_TIMEOUT_SECONDS = 30.0
MAX_ITEM_NAME_LENGTH = 25
NAMING_DEFAULT_NAME = "新装備"
NAMING_FAILED_NAME = "解析失敗"

# Settings file
SETTINGS_FILE_NAME = "settings.json"
FIELD_API_KEY = "user_gemini_api_key"

# Session file
SCHEMA_VERSION = 1
FIELD_SCHEMA_VERSION = "schema_version"
FIELD_CREATED_AT = "created_at"
FIELD_ITEMS = "items"
FIELD_SOURCE_PATH = "source_path"
FIELD_TOLERANCE = "tolerance"
FIELD_EROSION = "erosion"
FIELD_OUTLINE = "outline"
FIELD_CATEGORY_ID = "category_id"
FIELD_ITEM_NAME = "item_name"
