"""
Configuration constants for the media importer.
"""

# --- File Type Definitions ---
IMAGE_EXTS = {'jpg', 'jpeg', 'png', 'tif', 'tiff'}
VIDEO_EXTS = {'mp4', 'mov', 'avi', 'mpg', 'wmv'}

# Allow-list checked case-insensitively, without the leading dot
MEDIA_EXTS = IMAGE_EXTS | VIDEO_EXTS

# Names starting with this are treated as hidden (files and folders alike)
HIDDEN_PREFIX = '.'

# --- Metadata Parsing ---
CAPTURE_DATE_TAG = 'EXIF DateTimeOriginal'
CAPTURE_DATE_LAYOUT = "%Y-%m-%d %H:%M:%S"

# Container fields tried in order for videos without EXIF
VIDEO_DATE_FIELDS = ["recorded_date", "encoded_date", "tagged_date"]

# --- Naming ---
DEFAULT_TEMPLATE = "%Y-%m-%d_%H%M%S"
PREVIEW_EXT = "jpg"

# Highest numeric suffix tried before giving up on a name (`_1` ... `_9999`)
MAX_COLLISION_SUFFIX = 9999

# strftime directives accepted in templates. Anything else is rejected
# instead of being passed through to the platform's strftime.
TEMPLATE_DIRECTIVES = set("aAbBcdfHIjmMpSUwWxXyYzZ%")
