"""HTTP client that resolves file names through the upstream manifest."""

import json
from typing import Optional

import httpx
from pydantic import ValidationError

from common.constants import IDENTITY_HEADERS
from common.logging_config import get_logger
from common.types import FileDescriptor
from gateway.config import MANIFEST_PATH
from gateway.exceptions import (
    FileNotInManifestError,
    ManifestCorruptError,
    UpstreamUnavailableError
)
from gateway.schemas.manifest import Manifest, ManifestEntry
from gateway.utils import resolve_chunk_url

logger = get_logger(__name__)


class ManifestClient:
    """
    Fetches the manifest document and turns one of its entries into a
    validated FileDescriptor.

    The manifest is fetched fresh for every lookup and never cached.
    """

    def __init__(self, http_client: httpx.AsyncClient, manifest_path: Optional[str] = None):
        self.http_client = http_client
        self.manifest_path = manifest_path or MANIFEST_PATH

    async def fetch_manifest(self, origin: str) -> Manifest:
        """
        Download and parse the manifest.

        Args:
            origin: Upstream origin serving the manifest

        Returns:
            Parsed Manifest

        Raises:
            UpstreamUnavailableError: On transport errors, non-success status or invalid JSON
        """
        url = resolve_chunk_url(origin, self.manifest_path)

        try:
            response = await self.http_client.get(url, headers=IDENTITY_HEADERS)
        except httpx.HTTPError as e:
            logger.error(f"Manifest request to {url} failed: {e}")
            raise UpstreamUnavailableError(f"Unable to fetch file list: {e}") from e

        if not response.is_success:
            logger.error(f"Manifest request to {url} returned status {response.status_code}")
            raise UpstreamUnavailableError(
                f"Unable to fetch file list (status {response.status_code})"
            )

        try:
            document = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error(f"Manifest at {url} is not valid JSON: {e}")
            raise UpstreamUnavailableError("Manifest is not valid JSON") from e

        if not isinstance(document, dict):
            raise UpstreamUnavailableError("Manifest must be a JSON object")

        files = document.get("files")
        if not isinstance(files, dict):
            logger.warning(f"Manifest at {url} has no 'files' map")
            return Manifest()

        return Manifest(files=files)

    async def get_file_descriptor(self, origin: str, file_name: str) -> FileDescriptor:
        """
        Resolve a file name to its chunk layout.

        Chunk locations in the returned descriptor are absolute URLs.

        Raises:
            UpstreamUnavailableError: If the manifest cannot be fetched
            FileNotInManifestError: If the manifest has no such file
            ManifestCorruptError: If the entry is malformed or inconsistent
        """
        manifest = await self.fetch_manifest(origin)

        raw_entry = manifest.files.get(file_name)
        if not raw_entry:
            raise FileNotInManifestError(f"File {file_name} not found in manifest")

        try:
            entry = ManifestEntry.model_validate(raw_entry)
        except ValidationError as e:
            logger.error(f"Manifest entry for {file_name} is invalid: {e}")
            raise ManifestCorruptError(f"Manifest entry for {file_name} is invalid") from e

        descriptor = FileDescriptor(
            name=file_name,
            chunk_locations=tuple(resolve_chunk_url(origin, chunk) for chunk in entry.chunks),
            total_size=entry.metadata.size,
            chunk_sizes=tuple(entry.metadata.chunks_size),
        )

        logger.debug(
            f"Resolved {file_name}: {descriptor.chunk_count} chunks, {descriptor.total_size} bytes"
        )
        return descriptor
