"""Streaming API routes."""

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import StreamingResponse

from common.constants import OCTET_STREAM
from common.logging_config import get_logger
from common.types import ByteInterval, FileDescriptor
from gateway.config import UPSTREAM_ORIGIN
from gateway.dependencies import get_http_client
from gateway.exceptions import BadRequestError
from gateway.schemas.common import ErrorResponse
from gateway.services.stream_service import StreamService
from gateway.utils import content_disposition

logger = get_logger(__name__)

router = APIRouter(tags=["Streaming"])

ERROR_RESPONSES = {
    400: {"description": "Missing file name"},
    404: {"model": ErrorResponse, "description": "File not in manifest"},
    500: {"description": "Manifest unavailable or corrupt"},
}


def extract_file_name(file_path: str) -> str:
    """
    Take the file name from the path after the route prefix.

    Only the first segment counts; anything after it is ignored.

    Raises:
        BadRequestError: If no file name was given
    """
    file_name = file_path.split("/", 1)[0]
    if not file_name:
        raise BadRequestError("Missing file name parameter")
    return file_name


def upstream_origin(request: Request) -> str:
    """Origin serving the manifest and chunks; defaults to the request's own."""
    if UPSTREAM_ORIGIN:
        return UPSTREAM_ORIGIN.rstrip("/")
    return f"{request.url.scheme}://{request.url.netloc}"


def full_file_response(service: StreamService, descriptor: FileDescriptor) -> StreamingResponse:
    return StreamingResponse(
        service.combine_full(descriptor),
        status_code=status.HTTP_200_OK,
        media_type=OCTET_STREAM,
        headers={
            "Content-Disposition": content_disposition(descriptor.name),
            "Content-Length": str(descriptor.total_size),
        }
    )


def partial_file_response(
    service: StreamService,
    descriptor: FileDescriptor,
    interval: ByteInterval
) -> StreamingResponse:
    return StreamingResponse(
        service.stitch_range(descriptor, interval),
        status_code=status.HTTP_206_PARTIAL_CONTENT,
        media_type=OCTET_STREAM,
        headers={
            "Content-Disposition": content_disposition(descriptor.name),
            "Content-Range": f"bytes {interval.start}-{interval.end}/{descriptor.total_size}",
            "Content-Length": str(interval.length),
            "Accept-Ranges": "bytes",
        }
    )


@router.get("/stream/{file_path:path}", responses=ERROR_RESPONSES)
async def stream_file(
    request: Request,
    file_path: str,
    http_client: httpx.AsyncClient = Depends(get_http_client)
):
    """
    Download a whole file, assembled from its chunks in order.

    Parameters:
        - file_path: File name as listed in the manifest

    Returns:
        - 200 StreamingResponse with the concatenated chunks

    Raises:
        - 400: Missing file name
        - 404: File not in manifest
        - 500: Manifest unavailable or corrupt
    """
    file_name = extract_file_name(file_path)
    service = StreamService(http_client)

    descriptor = await service.open_file(upstream_origin(request), file_name)

    return full_file_response(service, descriptor)


@router.get("/range/{file_path:path}", responses={
    **ERROR_RESPONSES,
    416: {"description": "Range outside the file"},
})
async def range_file(
    request: Request,
    file_path: str,
    http_client: httpx.AsyncClient = Depends(get_http_client)
):
    """
    Download a file, honouring a single-range Range header.

    Parameters:
        - file_path: File name as listed in the manifest
        - Range header: bytes=<start>-<end> (either bound optional)

    Returns:
        - 206 StreamingResponse with the requested bytes, or
        - 200 with the whole file when no Range header is sent

    Raises:
        - 400: Missing file name
        - 404: File not in manifest
        - 416: Range not satisfiable
        - 500: Manifest unavailable or corrupt
    """
    file_name = extract_file_name(file_path)
    service = StreamService(http_client)

    descriptor = await service.open_file(upstream_origin(request), file_name)

    interval = service.parse_range(descriptor, request.headers.get("range"))
    if interval is None:
        return full_file_response(service, descriptor)

    return partial_file_response(service, descriptor, interval)
