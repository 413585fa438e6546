"""Configuration settings for the streaming gateway."""

import os
from common.constants import DEFAULT_MANIFEST_PATH


GATEWAY_HOST = os.environ.get("CHUNKSTITCH_HOST", "0.0.0.0")

GATEWAY_PORT = int(os.environ.get("CHUNKSTITCH_PORT", "8000"))

# Unset means manifest and chunks live on the same origin as the request.
UPSTREAM_ORIGIN = os.environ.get("CHUNKSTITCH_UPSTREAM_ORIGIN") or None

MANIFEST_PATH = os.environ.get("CHUNKSTITCH_MANIFEST_PATH", DEFAULT_MANIFEST_PATH)

# 0 disables upstream timeouts.
UPSTREAM_TIMEOUT_SECONDS = float(os.environ.get("CHUNKSTITCH_UPSTREAM_TIMEOUT_SECONDS", "0"))

STREAM_BUFFER_PIECES = int(os.environ.get("CHUNKSTITCH_STREAM_BUFFER_PIECES", "4"))
