"""
Constants and configuration values for the portrait editor.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the engine.
"""

# Color adjustment parameters (percent)
ADJUSTMENT_MIN = 0
ADJUSTMENT_MAX = 200
ADJUSTMENT_DEFAULT = 100

# Geometry
ROTATION_STEP = 90
FULL_TURN = 360
DEFAULT_ROTATION = 0

# Color math
CHANNEL_MIN = 0
CHANNEL_MAX = 255
MID_GRAY = 128
# Rec. 709 luma weights
LUMINANCE_WEIGHTS = (0.2126, 0.7152, 0.0722)

# Pixel layout
PIXEL_MODE = "RGBA"
PIXEL_CHANNELS = 4
TRANSPARENT_PIXEL = (0, 0, 0, 0)

# Export
DEFAULT_EXPORT_FORMAT = "PNG"
DEFAULT_EXPORT_QUALITY = 95
LOSSY_FORMATS = {"JPEG", "WEBP"}
FORMAT_MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "BMP": "image/bmp",
    "GIF": "image/gif",
    "TIFF": "image/tiff",
}
FORMAT_ALIASES = {"JPG": "JPEG", "TIF": "TIFF"}

# Decoding guard (pixels); matches Pillow's decompression bomb threshold
DEFAULT_MAX_SOURCE_PIXELS = 89_478_485

# Session status names
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_ERROR = "error"
STATUS_CLOSED = "closed"

# Placeholder text shown by the host while no preview is available
LOADING_PLACEHOLDER = "Loading image..."
DECODE_ERROR_PLACEHOLDER = "Could not load image"
