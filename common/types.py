"""Shared data type definitions (FileDescriptor, ByteInterval, ChunkWindow, ChunkFetch)."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class FileDescriptor:
    """
    A logical file as described by the manifest.

    chunk_locations and chunk_sizes are parallel and ordered; the sizes
    sum to total_size.
    """
    name: str
    chunk_locations: Tuple[str, ...]
    total_size: int
    chunk_sizes: Tuple[int, ...]

    @property
    def chunk_count(self) -> int:
        return len(self.chunk_locations)


@dataclass(frozen=True)
class ByteInterval:
    """
    Inclusive byte span [start, end] inside a file.
    """
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class ChunkWindow:
    """
    Chunks covering a ByteInterval, with the offsets of the interval
    bounds inside the first and last chunk.
    """
    first_chunk_index: int
    first_chunk_offset: int
    last_chunk_index: int
    last_chunk_offset: int

    @property
    def is_single_chunk(self) -> bool:
        return self.first_chunk_index == self.last_chunk_index


@dataclass(frozen=True)
class ChunkFetch:
    """
    One planned upstream read.

    start is None for a whole-chunk read; end is None for an open-ended
    read from start to the end of the chunk. length is the exact number
    of bytes this read contributes to the output.
    """
    index: int
    location: str
    length: int
    start: Optional[int] = None
    end: Optional[int] = None

    @property
    def range_header(self) -> Optional[str]:
        if self.start is None:
            return None
        end = "" if self.end is None else str(self.end)
        return f"bytes={self.start}-{end}"
