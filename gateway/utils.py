"""Utility helper functions for the gateway."""

import uuid
from urllib.parse import quote


def generate_uuid() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def is_absolute_url(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def resolve_chunk_url(origin: str, location: str) -> str:
    """
    Turn a manifest chunk location into a fetchable URL.

    Args:
        origin: Upstream origin, e.g. "https://files.example.com"
        location: Absolute URL or path relative to the origin

    Returns:
        Absolute chunk URL
    """
    if is_absolute_url(location):
        return location
    return f"{origin.rstrip('/')}/{location.lstrip('/')}"


def content_disposition(file_name: str) -> str:
    """
    Build an attachment Content-Disposition header for a file name.

    Non-ASCII names also get an RFC 5987 filename* parameter.
    """
    quoted = file_name.replace("\\", "\\\\").replace('"', '\\"')
    try:
        quoted.encode("ascii")
    except UnicodeEncodeError:
        fallback = quoted.encode("ascii", "replace").decode("ascii")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name)}"
    return f'attachment; filename="{quoted}"'
