"""Message persistence and channel feeds."""

import logging
from datetime import UTC, datetime

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.app.db import commit_or_raise
from pulse.app.errors import PersistenceError, ValidationError
from pulse.app.models.message import Message
from pulse.app.schemas.message import MessageCreate, MessageResponse
from pulse.app.schemas.profile import ProfileSnapshot
from pulse.app.schemas.reaction import ReactionSummary
from pulse.app.services.channel_directory import get_channel
from pulse.app.services.profiles import ProfileLookup
from pulse.app.services.reactions import summarize

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50


def _to_response(
    msg: Message,
    reactions: list[ReactionSummary],
    author: ProfileSnapshot | None,
) -> MessageResponse:
    return MessageResponse(
        id=msg.id,
        channel_id=msg.channel_id,
        user_id=msg.user_id,
        content=msg.content,
        attachment_url=msg.attachment_url,
        attachment_name=msg.attachment_name,
        attachment_type=msg.attachment_type,
        attachment_size=msg.attachment_size,
        created_at=msg.created_at,
        updated_at=msg.updated_at,
        reactions=reactions,
        user_data=author,
    )


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


async def list_messages(
    db: AsyncSession,
    channel_id: int,
    caller_id: str,
    profiles: ProfileLookup,
    limit: int = DEFAULT_HISTORY_LIMIT,
    before: int | None = None,
) -> list[MessageResponse]:
    """The latest ``limit`` messages of a channel, oldest first.

    ``before`` restricts the window to messages older than that message id;
    an id that does not belong to the channel is ignored.
    """
    await get_channel(db, channel_id)

    query = select(Message).where(Message.channel_id == channel_id)
    if before is not None:
        cursor = await db.execute(
            select(Message.id).where(Message.id == before, Message.channel_id == channel_id)
        )
        if cursor.scalar_one_or_none() is not None:
            query = query.where(Message.id < before)

    query = query.order_by(desc(Message.created_at), desc(Message.id)).limit(limit)
    result = await db.execute(query)
    rows = list(result.scalars().all())
    if not rows:
        return []

    # Reverse to chronological order (oldest first)
    rows.reverse()

    reactions = await summarize(db, [m.id for m in rows], caller_id)
    authors = await profiles.lookup_many({m.user_id for m in rows})
    return [_to_response(m, reactions.get(m.id, []), authors.get(m.user_id)) for m in rows]


async def post_message(
    db: AsyncSession,
    channel_id: int,
    author_id: str,
    data: MessageCreate,
    profiles: ProfileLookup,
    *,
    max_content_length: int | None = None,
) -> MessageResponse:
    """Validate and persist one message, returned with the author's profile."""
    content = _clean(data.content)
    attachment_url = _clean(data.attachment_url)
    if content is None and attachment_url is None:
        raise ValidationError("Message must include text or an attachment")
    if content is not None and max_content_length is not None and len(content) > max_content_length:
        raise ValidationError(f"Message must be at most {max_content_length} characters")
    if data.attachment_size is not None and data.attachment_size < 0:
        raise ValidationError("Attachment size must not be negative")

    await get_channel(db, channel_id)

    now = datetime.now(UTC).isoformat()
    msg = Message(
        channel_id=channel_id,
        user_id=author_id,
        content=content,
        attachment_url=attachment_url,
        attachment_name=data.attachment_name or None,
        attachment_type=data.attachment_type or None,
        attachment_size=data.attachment_size,
        created_at=now,
        updated_at=now,
    )
    db.add(msg)
    try:
        await db.flush()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Failed to persist message in channel %s", channel_id)
        raise PersistenceError("Failed to send message.") from exc
    await commit_or_raise(db, "Failed to send message.")

    logger.info("Message posted: id=%s channel=%s user=%s", msg.id, channel_id, author_id)
    author = await profiles.lookup(author_id)
    return _to_response(msg, [], author)
