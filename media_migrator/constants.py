"""Shared constants for the media migration tool."""

HTTP_OK_MIN = 200
HTTP_OK_MAX = 299

DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY_MS = 1000
BACKOFF_MULTIPLIER = 2
DEFAULT_REQUEST_TIMEOUT = 60

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Extension (without dot, lower case) -> MIME type
CONTENT_TYPES = {
    "mp3": "audio/mpeg",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}

AUDIO_EXTENSIONS = (".mp3",)
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")

# S3 error codes that mean "no such object" on a HeadObject call
NOT_FOUND_ERROR_CODES = frozenset({"404", "NoSuchKey", "NotFound"})

STORAGE_PUBLIC_PATH = "storage/v1/object/public"
# Characters left unescaped in an object key path segment, as encodeURIComponent does
URI_COMPONENT_SAFE = "!'()*~"
STORAGE_LIST_PATH = "storage/v1/object/list"
REST_PATH = "rest/v1"

DEFAULT_RECORDS_TABLE = "tracks"
