"""Channel endpoints."""

from fastapi import APIRouter, Depends

from pulse.app.api.deps import RequestContext, get_request_context
from pulse.app.config import settings
from pulse.app.models.channel import Channel
from pulse.app.schemas.channel import ChannelCreate, ChannelResponse
from pulse.app.services import channel_directory

router = APIRouter(prefix="/channels", tags=["channels"])


@router.get("", response_model=list[ChannelResponse])
async def list_channels(ctx: RequestContext = Depends(get_request_context)) -> list[Channel]:
    return await channel_directory.list_channels(ctx.db)


@router.post("", response_model=ChannelResponse, status_code=201)
async def create_channel(
    data: ChannelCreate,
    ctx: RequestContext = Depends(get_request_context),
) -> Channel:
    return await channel_directory.create_channel(
        ctx.db,
        data.name,
        data.description,
        policy=settings.channel_name_policy,
    )
