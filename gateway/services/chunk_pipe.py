"""Bounded producer/consumer pipe between upstream chunk reads and the response writer."""

import asyncio
from contextlib import suppress
from typing import AsyncGenerator, AsyncIterator, Union

from common.logging_config import get_logger

logger = get_logger(__name__)


class _EndOfStream:
    pass


class _StreamFailure:
    def __init__(self, error: BaseException):
        self.error = error


_END = _EndOfStream()


async def pipe_chunks(source: AsyncGenerator[bytes, None], max_pending: int = 4) -> AsyncIterator[bytes]:
    """
    Drain source in a background task into a bounded queue and yield from it.

    The producer can read ahead up to max_pending pieces while the
    consumer is still sending earlier ones. Exactly one terminal item
    (end of stream or the producer's error) is queued. If the consumer
    stops early the producer task is cancelled and awaited, which
    releases any upstream response it holds.

    Args:
        source: Async iterator of body pieces, in output order
        max_pending: Queue capacity in pieces

    Yields:
        The pieces of source, in order

    Raises:
        Whatever exception the source raised
    """
    queue: "asyncio.Queue[Union[bytes, _EndOfStream, _StreamFailure]]" = asyncio.Queue(
        maxsize=max(1, max_pending)
    )

    async def produce():
        try:
            async for piece in source:
                await queue.put(piece)
        except Exception as e:
            await queue.put(_StreamFailure(e))
        else:
            await queue.put(_END)
        finally:
            await source.aclose()

    producer = asyncio.create_task(produce())

    try:
        while True:
            item = await queue.get()
            if item is _END:
                return
            if isinstance(item, _StreamFailure):
                raise item.error
            yield item
    finally:
        if not producer.done():
            logger.info("Output stream closed early, cancelling upstream reads")
            producer.cancel()
            with suppress(asyncio.CancelledError):
                await producer
