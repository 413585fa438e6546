"""Shared pytest fixtures for all tests."""

import json
import re

import httpx
import pytest
from fastapi.testclient import TestClient

from gateway.dependencies import get_http_client
from gateway.main import app

CHUNK_0 = bytes(range(100))
CHUNK_1 = bytes((i * 7 + 3) % 256 for i in range(200))

SAMPLE_MANIFEST = {
    "files": {
        "a.mp4": {
            "chunks": ["c0", "c1"],
            "metadata": {"size": 300, "chunksSize": [100, 200]},
        }
    }
}

_RANGE = re.compile(r"bytes=(\d+)-(\d*)")


class FakeChunkStore:
    """
    In-memory manifest and chunk store behind an httpx.MockTransport.

    Honors single Range headers with 206 unless ignore_range is set,
    and records every request it sees.
    """

    def __init__(self, manifest=None, chunks=None):
        self.manifest = SAMPLE_MANIFEST if manifest is None else manifest
        self.chunks = {"/c0": CHUNK_0, "/c1": CHUNK_1} if chunks is None else chunks
        self.manifest_status = 200
        self.manifest_body = None
        self.failing = set()
        self.ignore_range = False
        self.requests = []

    @property
    def chunk_requests(self):
        return [r for r in self.requests if r.url.path != "/config.json"]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/config.json":
            if self.manifest_body is not None:
                return httpx.Response(self.manifest_status, content=self.manifest_body)
            return httpx.Response(self.manifest_status, content=json.dumps(self.manifest).encode())

        if path in self.failing or path not in self.chunks:
            return httpx.Response(404, content=b"missing")

        data = self.chunks[path]
        range_header = request.headers.get("range")
        if range_header and not self.ignore_range:
            match = _RANGE.fullmatch(range_header)
            start = int(match.group(1))
            end = int(match.group(2)) if match.group(2) else len(data) - 1
            return httpx.Response(
                206,
                content=data[start:end + 1],
                headers={"Content-Range": f"bytes {start}-{end}/{len(data)}"},
            )
        return httpx.Response(200, content=data)


@pytest.fixture
def store():
    """Fake upstream serving the two-chunk sample file."""
    return FakeChunkStore()


@pytest.fixture
def http_client(store):
    """AsyncClient wired to the fake upstream."""
    return httpx.AsyncClient(transport=httpx.MockTransport(store.handle))


@pytest.fixture
def client(http_client):
    """
    Create FastAPI test client with the upstream client overridden.
    """
    app.dependency_overrides[get_http_client] = lambda: http_client
    yield TestClient(app)
    app.dependency_overrides.clear()
