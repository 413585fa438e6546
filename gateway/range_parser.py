"""HTTP Range header parsing."""

import re
from typing import Optional

from common.types import ByteInterval
from gateway.exceptions import RangeNotSatisfiableError

_RANGE_PATTERN = re.compile(r'^\s*bytes\s*=\s*(\d*)\s*-\s*(\d*)\s*$', re.IGNORECASE)


def parse_range_header(range_header: Optional[str], total_size: int) -> Optional[ByteInterval]:
    """
    Parse a single-range header such as "bytes=100-199" into a ByteInterval.

    Either bound may be empty: a missing start means 0, a missing end
    means the last byte of the file. Headers that are absent, blank or
    not of the form bytes=<start>-<end> (other units, several ranges)
    are ignored and None is returned, meaning the whole file is served.

    Args:
        range_header: Raw Range header value, or None
        total_size: Size of the file in bytes

    Returns:
        ByteInterval, or None when there is no usable range

    Raises:
        RangeNotSatisfiableError: If start > end or end >= total_size
    """
    if not range_header or not range_header.strip():
        return None

    match = _RANGE_PATTERN.match(range_header)
    if match is None:
        return None

    start_text, end_text = match.groups()

    # A bound with more digits than total_size lies past the end of the file.
    max_digits = len(str(total_size))
    if any(len(text.lstrip("0")) > max_digits for text in (start_text, end_text)):
        raise RangeNotSatisfiableError(
            total_size,
            f"Range bound out of bounds for {total_size} bytes"
        )

    start = int(start_text) if start_text else 0
    end = int(end_text) if end_text else total_size - 1

    if start > end or end >= total_size:
        raise RangeNotSatisfiableError(
            total_size,
            f"Range {range_header.strip()!r} not satisfiable for {total_size} bytes"
        )

    return ByteInterval(start=start, end=end)
