"""Service layer for chunk streaming."""

from gateway.services.stream_service import StreamService
from gateway.services.chunk_pipe import pipe_chunks

__all__ = [
    "StreamService",
    "pipe_chunks",
]
