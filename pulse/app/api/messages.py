"""Message endpoints."""

from fastapi import APIRouter, Depends, Query

from pulse.app.api.deps import RequestContext, get_request_context
from pulse.app.config import settings
from pulse.app.schemas.message import MessageCreate, MessageResponse
from pulse.app.services import message_store

router = APIRouter(prefix="/channels/{channel_id}/messages", tags=["messages"])


@router.get("", response_model=list[MessageResponse])
async def get_messages(
    channel_id: int,
    limit: int = Query(default=settings.message_history_default_limit, ge=1),
    before: int | None = Query(default=None),
    ctx: RequestContext = Depends(get_request_context),
) -> list[MessageResponse]:
    # Oversized windows are served at the cap rather than rejected.
    limit = min(limit, settings.message_history_max_limit)
    return await message_store.list_messages(
        ctx.db,
        channel_id,
        ctx.identity.subject,
        ctx.profiles,
        limit=limit,
        before=before,
    )


@router.post("", response_model=MessageResponse, status_code=201)
async def send_message(
    channel_id: int,
    data: MessageCreate,
    ctx: RequestContext = Depends(get_request_context),
) -> MessageResponse:
    return await message_store.post_message(
        ctx.db,
        channel_id,
        ctx.identity.subject,
        data,
        ctx.profiles,
        max_content_length=settings.message_content_max_length,
    )
