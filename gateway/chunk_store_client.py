"""HTTP client for reading chunks, whole or by sub-range, from the chunk store."""

from typing import AsyncGenerator

import httpx

from common.constants import IDENTITY_HEADERS, STREAM_PIECE_SIZE_BYTES
from common.logging_config import get_logger
from common.types import ChunkFetch
from gateway.exceptions import ChunkFetchError

logger = get_logger(__name__)

PARTIAL_CONTENT = 206


class ChunkStoreClient:
    """
    Streams chunk bodies from the chunk store.

    Each read is attempted exactly once. The upstream response is
    released on every exit path, including cancellation of the caller.
    """

    def __init__(self, http_client: httpx.AsyncClient, piece_size: int = STREAM_PIECE_SIZE_BYTES):
        self.http_client = http_client
        self.piece_size = piece_size

    async def read_chunk(self, fetch: ChunkFetch) -> AsyncGenerator[bytes, None]:
        """
        Read the bytes planned by a ChunkFetch.

        A 206 response is taken as the requested sub-range. Any other
        success status on a ranged read means the store ignored the
        Range header, so the leading bytes are dropped here instead.
        Output is capped at fetch.length bytes.

        Args:
            fetch: Planned read (location is an absolute URL)

        Yields:
            Body pieces in upstream order

        Raises:
            ChunkFetchError: On transport errors, non-success status or a short body
        """
        headers = dict(IDENTITY_HEADERS)
        range_header = fetch.range_header
        if range_header:
            headers["Range"] = range_header

        logger.debug(f"Fetching chunk {fetch.index} from {fetch.location} range={range_header or 'full'}")

        remaining = fetch.length
        try:
            async with self.http_client.stream("GET", fetch.location, headers=headers) as response:
                if not response.is_success:
                    raise ChunkFetchError(
                        f"fetch chunk failed: {fetch.location} (status {response.status_code})"
                    )

                skip = 0
                if range_header and response.status_code != PARTIAL_CONTENT:
                    logger.warning(
                        f"Chunk store ignored Range for chunk {fetch.index} "
                        f"(status {response.status_code}), trimming locally"
                    )
                    skip = fetch.start

                async for piece in response.aiter_bytes(self.piece_size):
                    if skip:
                        if len(piece) <= skip:
                            skip -= len(piece)
                            continue
                        piece = piece[skip:]
                        skip = 0
                    if len(piece) > remaining:
                        piece = piece[:remaining]
                    if piece:
                        remaining -= len(piece)
                        yield piece
                    if remaining == 0:
                        break
        except httpx.HTTPError as e:
            raise ChunkFetchError(f"fetch chunk failed: {fetch.location} ({e})") from e

        if remaining:
            raise ChunkFetchError(
                f"Chunk {fetch.index} at {fetch.location} ended {remaining} bytes short "
                f"of the expected {fetch.length}"
            )
