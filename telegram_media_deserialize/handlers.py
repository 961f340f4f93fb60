import asyncio
import logging
from functools import partial
from typing import Optional

from fastapi import HTTPException, Request, Response

from .configs import settings
from .deserializer import DeserializeError, DestinationOverflowError, ReconstructionResult, build_report, reconstruct

logger = logging.getLogger(__name__)


def handle_exceptions(exception: Exception) -> Response:
    """
    Handle exceptions and return appropriate HTTP responses.

    Args:
        exception (Exception): The exception that was raised.

    Returns:
        Response: An HTTP response corresponding to the exception type.
    """
    if isinstance(exception, DestinationOverflowError):
        logger.error(f"Cache rejected: {exception}")
        return Response(status_code=422, content=f"Destination overflow: {exception}")
    elif isinstance(exception, DeserializeError):
        logger.error(f"Error deserializing cache: {exception}")
        return Response(status_code=422, content=str(exception))
    else:
        logger.exception(f"Internal server error while handling request: {exception}")
        return Response(status_code=500, content=f"Internal server error: {exception}")


async def read_cache_body(request: Request) -> bytes:
    """
    Read the serialized cache from the request body, enforcing ``settings.max_input_size``.

    Raises:
        HTTPException: 413 if the body is too large, 400 if it is empty.
    """
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > settings.max_input_size:
        raise HTTPException(status_code=413, detail=f"Cache larger than {settings.max_input_size} bytes")

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > settings.max_input_size:
            raise HTTPException(status_code=413, detail=f"Cache larger than {settings.max_input_size} bytes")

    if not body:
        raise HTTPException(status_code=400, detail="Empty request body, expected a serialized cache")
    return bytes(body)


async def run_reconstruction(data: bytes, byte_order: Optional[str]) -> ReconstructionResult:
    """Run the blocking reconstruction in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None, partial(reconstruct, data, byte_order, max_destination_size=settings.max_output_size)
    )


def reconstruction_headers(result: ReconstructionResult) -> dict[str, str]:
    return {
        "x-last-contiguous-offset": str(result.last_contiguous_offset),
        "x-trailing-byte-count": str(result.trailing_byte_count),
        "x-buffer-size": str(result.buffer_size),
    }


async def handle_deserialize_request(request: Request, byte_order: Optional[str], truncate: bool) -> Response:
    """
    Deserialize the cache in the request body and return the media bytes.

    Args:
        request (Request): The incoming request carrying the cache as its body.
        byte_order (Optional[str]): Header byte order, ``settings.byte_order`` when None.
        truncate (bool): Return only the gap-free prefix.

    Returns:
        Response: The reconstructed stream, with reconstruction metadata in headers.
    """
    data = await read_cache_body(request)
    try:
        result = await run_reconstruction(data, byte_order)
    except Exception as e:
        return handle_exceptions(e)

    content = memoryview(result.buffer)
    if truncate:
        content = content[: result.last_contiguous_offset]
    return Response(
        content=content,
        media_type="application/octet-stream",
        headers=reconstruction_headers(result),
    )


async def handle_report_request(request: Request, byte_order: Optional[str]):
    """Deserialize the cache in the request body and return its ``CacheReport``."""
    data = await read_cache_body(request)
    try:
        result = await run_reconstruction(data, byte_order)
    except Exception as e:
        return handle_exceptions(e)
    return build_report(result, byte_order or settings.byte_order)
