"""Stream service: stitches chunks into one ordered byte stream."""

from typing import AsyncGenerator, AsyncIterator, List, Optional

import httpx

from common.logging_config import get_logger
from common.types import ByteInterval, ChunkFetch, FileDescriptor
from gateway.chunk_resolver import plan_full_fetches, plan_range_fetches, resolve_chunk_window
from gateway.chunk_store_client import ChunkStoreClient
from gateway.config import STREAM_BUFFER_PIECES
from gateway.exceptions import ChunkFetchError
from gateway.manifest_client import ManifestClient
from gateway.range_parser import parse_range_header
from gateway.services.chunk_pipe import pipe_chunks

logger = get_logger(__name__)


class StreamService:
    def __init__(self, http_client: httpx.AsyncClient, buffer_pieces: int = STREAM_BUFFER_PIECES):
        self.manifest_client = ManifestClient(http_client)
        self.chunk_store = ChunkStoreClient(http_client)
        self.buffer_pieces = buffer_pieces

    async def open_file(self, origin: str, file_name: str) -> FileDescriptor:
        return await self.manifest_client.get_file_descriptor(origin, file_name)

    def parse_range(self, descriptor: FileDescriptor, range_header: Optional[str]) -> Optional[ByteInterval]:
        return parse_range_header(range_header, descriptor.total_size)

    def plan_range(self, descriptor: FileDescriptor, interval: ByteInterval) -> List[ChunkFetch]:
        window = resolve_chunk_window(interval, descriptor.chunk_sizes)
        logger.info(
            f"Range {interval.start}-{interval.end} of {descriptor.name} maps to chunks "
            f"{window.first_chunk_index}@{window.first_chunk_offset}.."
            f"{window.last_chunk_index}@{window.last_chunk_offset}"
        )
        return plan_range_fetches(descriptor, window)

    def stitch_range(self, descriptor: FileDescriptor, interval: ByteInterval) -> AsyncIterator[bytes]:
        """
        Stream exactly the bytes [interval.start, interval.end] of a file.

        Planning happens eagerly so a bad window fails before any
        response is started. A failed chunk aborts the stream.
        """
        fetches = self.plan_range(descriptor, interval)
        return pipe_chunks(
            self._read_sequentially(descriptor, fetches, interval.length),
            self.buffer_pieces,
        )

    def combine_full(self, descriptor: FileDescriptor) -> AsyncIterator[bytes]:
        """
        Stream every chunk of a file, whole and in order.

        A failed chunk aborts the stream rather than being skipped, so
        the body never silently falls short of Content-Length.
        """
        fetches = plan_full_fetches(descriptor)
        return pipe_chunks(
            self._read_sequentially(descriptor, fetches, descriptor.total_size),
            self.buffer_pieces,
        )

    async def _read_sequentially(
        self,
        descriptor: FileDescriptor,
        fetches: List[ChunkFetch],
        expected_bytes: int,
    ) -> AsyncGenerator[bytes, None]:
        # Each fetch starts only after the previous one is fully forwarded.
        total_fetches = len(fetches)
        bytes_streamed = 0

        logger.info(
            f"Starting stream of {descriptor.name} ({total_fetches} chunks, {expected_bytes} bytes)"
        )

        for position, fetch in enumerate(fetches, start=1):
            logger.debug(
                f"Streaming chunk {position}/{total_fetches} (index={fetch.index}, "
                f"range={fetch.range_header or 'full'})"
            )
            chunk_stream = self.chunk_store.read_chunk(fetch)
            try:
                async for piece in chunk_stream:
                    bytes_streamed += len(piece)
                    yield piece
            except ChunkFetchError as e:
                logger.error(
                    f"Error streaming chunk {fetch.index} of {descriptor.name}: {e}. "
                    f"Streamed {bytes_streamed}/{expected_bytes} bytes before failure."
                )
                raise
            finally:
                # Releases the upstream response if we are closed mid-chunk.
                await chunk_stream.aclose()

        logger.info(f"Successfully streamed {descriptor.name}: {bytes_streamed} bytes total")
