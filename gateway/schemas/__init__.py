"""Pydantic schemas for the manifest and API responses."""

from gateway.schemas.manifest import (
    Manifest,
    ManifestEntry,
    ManifestMetadata
)
from gateway.schemas.common import ErrorResponse

__all__ = [
    "Manifest",
    "ManifestEntry",
    "ManifestMetadata",
    "ErrorResponse"
]
