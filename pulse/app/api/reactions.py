"""Reaction endpoints."""

from fastapi import APIRouter, Depends

from pulse.app.api.deps import RequestContext, get_request_context
from pulse.app.config import settings
from pulse.app.schemas.reaction import ReactionSummary, ReactionToggle
from pulse.app.services import reactions

router = APIRouter(prefix="/messages/{message_id}/reactions", tags=["reactions"])


@router.post("", response_model=list[ReactionSummary])
async def toggle_reaction(
    message_id: int,
    data: ReactionToggle,
    ctx: RequestContext = Depends(get_request_context),
) -> list[ReactionSummary]:
    """Add the caller's reaction if absent, remove it if present."""
    return await reactions.toggle_reaction(
        ctx.db,
        message_id,
        ctx.identity.subject,
        data.emoji,
        max_length=settings.reaction_emoji_max_length,
    )
