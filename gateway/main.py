"""Entry point for the streaming gateway service."""

import time

import httpx
import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from common.constants import NOT_FOUND_MESSAGE
from common.logging_config import setup_logging
from gateway.config import GATEWAY_HOST, GATEWAY_PORT, UPSTREAM_ORIGIN, UPSTREAM_TIMEOUT_SECONDS
from gateway.exceptions import (
    GatewayException,
    BadRequestError,
    FileNotInManifestError,
    RangeNotSatisfiableError,
    UpstreamUnavailableError,
    ManifestCorruptError
)
from gateway.routes.stream_routes import router as stream_router
from gateway.schemas.common import ErrorResponse
from gateway.utils import generate_uuid

logger = setup_logging('gateway')

app = FastAPI(
    title="Chunkstitch Gateway",
    description="Serves chunked files as single objects, with Range support",
    version="1.0.0"
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.

    Also the single catch-all: unexpected errors raised before the
    response starts become a plain-text 500.
    """
    request_id = generate_uuid()
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} "
        f"range={request.headers.get('range', '-')} [request_id={request_id}]"
    )

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            f"Unhandled error: {e} [request_id={request_id}] path={request.url.path}",
            exc_info=True
        )
        response = PlainTextResponse(
            f"Server Error: {e}",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


@app.on_event("startup")
async def startup_event():
    """
    Create the pooled upstream HTTP client.
    """
    timeout = httpx.Timeout(UPSTREAM_TIMEOUT_SECONDS) if UPSTREAM_TIMEOUT_SECONDS > 0 else httpx.Timeout(None)
    app.state.http_client = httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    logger.info(
        f"Gateway starting up (upstream={UPSTREAM_ORIGIN or 'same origin'}, "
        f"timeout={UPSTREAM_TIMEOUT_SECONDS or 'none'})"
    )


@app.on_event("shutdown")
async def shutdown_event():
    """
    Close the upstream HTTP client.
    """
    logger.info("Gateway shutting down...")
    http_client = getattr(app.state, "http_client", None)
    if http_client is not None:
        await http_client.aclose()
        logger.info("Upstream client closed")


@app.exception_handler(BadRequestError)
async def bad_request_handler(request: Request, exc: BadRequestError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Bad request: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return PlainTextResponse(str(exc), status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(FileNotInManifestError)
async def file_not_found_handler(request: Request, exc: FileNotInManifestError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"File not found error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content=ErrorResponse(error=NOT_FOUND_MESSAGE).model_dump()
    )


@app.exception_handler(RangeNotSatisfiableError)
async def range_not_satisfiable_handler(request: Request, exc: RangeNotSatisfiableError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Range not satisfiable: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return PlainTextResponse(
        "Range Not Satisfiable",
        status_code=status.HTTP_416_REQUESTED_RANGE_NOT_SATISFIABLE,
        headers={"Content-Range": f"bytes */{exc.total_size}"}
    )


@app.exception_handler(UpstreamUnavailableError)
async def upstream_unavailable_handler(request: Request, exc: UpstreamUnavailableError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Upstream unavailable error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return PlainTextResponse(
        f"Server Error: {exc}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


@app.exception_handler(ManifestCorruptError)
async def manifest_corrupt_handler(request: Request, exc: ManifestCorruptError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Manifest corrupt error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return PlainTextResponse(
        f"Server Error: {exc}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


@app.exception_handler(GatewayException)
async def gateway_exception_handler(request: Request, exc: GatewayException):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Gateway exception: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return PlainTextResponse(
        f"Server Error: {exc}",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


app.include_router(stream_router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint for container healthchecks.
    Returns 200 if service is alive.
    """
    return {"status": "healthy", "service": "gateway"}


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "gateway.main:app",
        host=GATEWAY_HOST,
        port=GATEWAY_PORT
    )


if __name__ == "__main__":
    main()
