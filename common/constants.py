"""Project-wide constants (piece sizes, content types, upstream headers)."""

STREAM_PIECE_SIZE_BYTES: int = 64 * 1024  # 64 KiB per forwarded body piece

DEFAULT_MANIFEST_PATH: str = "/config.json"

OCTET_STREAM: str = "application/octet-stream"

# Compression must stay off upstream so declared chunk sizes are bit-exact.
IDENTITY_HEADERS: dict = {"Accept-Encoding": "identity"}

NOT_FOUND_MESSAGE: str = "404 not found"
