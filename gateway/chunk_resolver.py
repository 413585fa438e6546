"""Mapping of byte intervals onto chunks and planning of upstream fetches."""

from typing import List, Sequence

from common.types import ByteInterval, ChunkFetch, ChunkWindow, FileDescriptor


def resolve_chunk_window(interval: ByteInterval, chunk_sizes: Sequence[int]) -> ChunkWindow:
    """
    Find the chunks covering an interval with one prefix-sum scan.

    Chunk i covers [acc, acc + size_i). The scan records where start and
    end fall and stops as soon as the chunk holding end is found.

    Args:
        interval: Inclusive byte interval inside the file
        chunk_sizes: Ordered chunk sizes of the file

    Returns:
        ChunkWindow for the interval

    Raises:
        ValueError: If the chunk sizes do not cover the interval
    """
    first_index = None
    first_offset = 0
    acc = 0

    for index, size in enumerate(chunk_sizes):
        chunk_end = acc + size
        if first_index is None and acc <= interval.start < chunk_end:
            first_index = index
            first_offset = interval.start - acc
        if acc <= interval.end < chunk_end:
            if first_index is None:
                break
            return ChunkWindow(
                first_chunk_index=first_index,
                first_chunk_offset=first_offset,
                last_chunk_index=index,
                last_chunk_offset=interval.end - acc,
            )
        acc = chunk_end

    raise ValueError(
        f"Interval {interval.start}-{interval.end} is not covered by chunks totalling {acc} bytes"
    )


def plan_range_fetches(descriptor: FileDescriptor, window: ChunkWindow) -> List[ChunkFetch]:
    """
    Plan the reads for the chunks inside a window, in order.

    Only the first and last chunk get a sub-range; interior chunks are
    read whole. Chunks outside the window are never touched.
    """
    first = window.first_chunk_index
    last = window.last_chunk_index

    if window.is_single_chunk:
        return [
            ChunkFetch(
                index=first,
                location=descriptor.chunk_locations[first],
                length=window.last_chunk_offset - window.first_chunk_offset + 1,
                start=window.first_chunk_offset,
                end=window.last_chunk_offset,
            )
        ]

    fetches = [
        ChunkFetch(
            index=first,
            location=descriptor.chunk_locations[first],
            length=descriptor.chunk_sizes[first] - window.first_chunk_offset,
            start=window.first_chunk_offset,
        )
    ]
    for index in range(first + 1, last):
        fetches.append(
            ChunkFetch(
                index=index,
                location=descriptor.chunk_locations[index],
                length=descriptor.chunk_sizes[index],
            )
        )
    fetches.append(
        ChunkFetch(
            index=last,
            location=descriptor.chunk_locations[last],
            length=window.last_chunk_offset + 1,
            start=0,
            end=window.last_chunk_offset,
        )
    )
    return fetches


def plan_full_fetches(descriptor: FileDescriptor) -> List[ChunkFetch]:
    """Plan whole-chunk reads for every chunk of the file."""
    return [
        ChunkFetch(index=index, location=location, length=size)
        for index, (location, size) in enumerate(
            zip(descriptor.chunk_locations, descriptor.chunk_sizes)
        )
    ]
