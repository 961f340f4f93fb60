from typing import Annotated, Literal, Optional

from fastapi import APIRouter, Query, Request

from telegram_media_deserialize.handlers import handle_deserialize_request, handle_report_request
from telegram_media_deserialize.schemas import CacheReport

deserialize_router = APIRouter()

ByteOrderQuery = Annotated[
    Optional[Literal["little", "big"]],
    Query(description="Byte order of the cache header fields. Defaults to the configured byte order."),
]


@deserialize_router.post(
    "",
    summary="Deserialize a streaming cache",
    response_description="The reconstructed media stream",
)
async def deserialize_cache(
    request: Request,
    byte_order: ByteOrderQuery = None,
    truncate: Annotated[bool, Query(description="Only return the gap-free prefix of the stream.")] = False,
):
    """
    Reconstruct the media stream from a serialized Telegram Desktop cache sent as the request body.

    The last contiguous offset and trailing byte count are returned in the
    ``X-Last-Contiguous-Offset`` and ``X-Trailing-Byte-Count`` headers.
    """
    return await handle_deserialize_request(request, byte_order, truncate)


@deserialize_router.post("/report", summary="Report on a streaming cache", response_model=CacheReport)
async def report_cache(request: Request, byte_order: ByteOrderQuery = None):
    """Reconstruct the cache sent as the request body and describe its coverage."""
    return await handle_report_request(request, byte_order)
