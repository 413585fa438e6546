"""Pydantic schemas for the upstream manifest document."""

from typing import Any, Dict, List
from pydantic import BaseModel, Field, model_validator


class ManifestMetadata(BaseModel):
    """Size information of one manifest entry."""
    size: int = Field(ge=0)
    chunks_size: List[int] = Field(alias="chunksSize")


class ManifestEntry(BaseModel):
    """One file of the manifest: ordered chunk locations plus sizes."""
    chunks: List[str]
    metadata: ManifestMetadata

    @model_validator(mode="after")
    def check_sizes(self) -> "ManifestEntry":
        sizes = self.metadata.chunks_size
        if len(sizes) != len(self.chunks):
            raise ValueError(
                f"{len(self.chunks)} chunks but {len(sizes)} chunk sizes"
            )
        if any(size <= 0 for size in sizes):
            raise ValueError("chunk sizes must be positive")
        if sum(sizes) != self.metadata.size:
            raise ValueError(
                f"chunk sizes sum to {sum(sizes)}, declared size is {self.metadata.size}"
            )
        return self


class Manifest(BaseModel):
    """
    Top-level manifest document.

    Entries are kept raw and validated one at a time on lookup.
    """
    files: Dict[str, Any] = Field(default_factory=dict)
