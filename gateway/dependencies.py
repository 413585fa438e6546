"""FastAPI dependencies shared by the routes."""

import httpx
from fastapi import Request


def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Return the pooled upstream client created at application startup.

    Tests override this dependency to plug in an httpx.MockTransport.
    """
    return request.app.state.http_client
