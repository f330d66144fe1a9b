"""HTTP constants for the fetch layer.

Centralizes all HTTP-related constants to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_REDIRECT_MIN = 300
HTTP_STATUS_REDIRECT_MAX = 400
HTTP_STATUS_NO_CONTENT = 204
HTTP_STATUS_RESET_CONTENT = 205

# Responses that never carry a body, regardless of method
BODYLESS_SUCCESS_STATUSES = frozenset({HTTP_STATUS_NO_CONTENT, HTTP_STATUS_RESET_CONTENT})

# Response Size Limits
MEGABYTE = 1024 * 1024
DEFAULT_MAX_SIZE_BYTES = 10 * MEGABYTE

# Redirect ceiling (checked against the length of the visited history)
MAX_ATTEMPTS = 5

# Timeouts in seconds
DEFAULT_OPEN_TIMEOUT_SECONDS = 10.0
DEFAULT_READ_TIMEOUT_SECONDS = 20.0

# Chunk size for streaming reads
DEFAULT_CHUNK_SIZE = 8192

# Extension hints longer than this are path fragments, not file extensions
MAX_SUFFIX_HINT_LENGTH = 12

# Prefix for temporary body files
SINK_FILE_PREFIX = "url_fetcher"

SUPPORTED_SCHEMES = frozenset({"http", "https"})
