"""Reaction toggling and per-emoji aggregation.

Summaries are always computed from the reaction rows on read; nothing is
cached.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import UTC, datetime

from sqlalchemy import case, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.app.db import commit_or_raise
from pulse.app.errors import NotFoundError, ValidationError
from pulse.app.models.message import Message
from pulse.app.models.reaction import Reaction
from pulse.app.schemas.reaction import ReactionSummary

logger = logging.getLogger(__name__)

DEFAULT_EMOJI_MAX_LENGTH = 16


def validate_emoji(emoji: str, max_length: int = DEFAULT_EMOJI_MAX_LENGTH) -> str:
    """Return the emoji token or raise ``ValidationError``.

    A token is any non-empty run of non-whitespace characters up to
    ``max_length`` code points, which leaves room for ZWJ sequences and
    skin-tone modifiers while keeping arbitrary text out.
    """
    if not isinstance(emoji, str) or not emoji:
        raise ValidationError("Emoji is required")
    if any(ch.isspace() for ch in emoji):
        raise ValidationError("Emoji must not contain whitespace")
    if len(emoji) > max_length:
        raise ValidationError(f"Emoji must be at most {max_length} characters")
    return emoji


async def summarize(
    db: AsyncSession,
    message_ids: Iterable[int],
    caller_id: str,
) -> dict[int, list[ReactionSummary]]:
    """Per-message reaction summaries scoped to ``caller_id``.

    Emojis are listed in the order they were first used on each message.
    Messages without reactions are absent from the result.
    """
    ids = list(message_ids)
    if not ids:
        return {}

    first_seen = func.min(Reaction.id)
    query = (
        select(
            Reaction.message_id,
            Reaction.emoji,
            func.count(Reaction.id).label("count"),
            func.max(case((Reaction.user_id == caller_id, 1), else_=0)).label("mine"),
        )
        .where(Reaction.message_id.in_(ids))
        .group_by(Reaction.message_id, Reaction.emoji)
        .order_by(Reaction.message_id, first_seen)
    )
    result = await db.execute(query)

    summaries: dict[int, list[ReactionSummary]] = defaultdict(list)
    for message_id, emoji, count, mine in result.all():
        summaries[message_id].append(
            ReactionSummary(emoji=emoji, count=count, reacted_by_me=bool(mine))
        )
    return dict(summaries)


async def _insert_if_absent(db: AsyncSession, values: dict) -> None:
    """Insert one reaction row, treating a uniqueness conflict as success.

    A concurrent toggle that inserted the same triple first leaves the fact
    present, which is what this caller asked for.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    elif dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        try:
            async with db.begin_nested():
                db.add(Reaction(**values))
        except IntegrityError:
            logger.debug("Reaction %s already present", values)
        return

    stmt = insert(Reaction).values(**values).on_conflict_do_nothing(
        index_elements=["message_id", "user_id", "emoji"]
    )
    await db.execute(stmt)


async def toggle_reaction(
    db: AsyncSession,
    message_id: int,
    reactor_id: str,
    emoji: str,
    *,
    max_length: int = DEFAULT_EMOJI_MAX_LENGTH,
) -> list[ReactionSummary]:
    """Remove the caller's ``emoji`` reaction if present, add it otherwise.

    Returns the message's full summary after the change.
    """
    emoji = validate_emoji(emoji, max_length)

    exists = await db.execute(select(Message.id).where(Message.id == message_id))
    if exists.scalar_one_or_none() is None:
        raise NotFoundError("Message not found")

    # Each step is a single statement; see _insert_if_absent for the race.
    removed = await db.execute(
        delete(Reaction).where(
            Reaction.message_id == message_id,
            Reaction.user_id == reactor_id,
            Reaction.emoji == emoji,
        )
    )
    if removed.rowcount:
        logger.info("Reaction removed: %s by %s on message %s", emoji, reactor_id, message_id)
    else:
        await _insert_if_absent(
            db,
            {
                "message_id": message_id,
                "user_id": reactor_id,
                "emoji": emoji,
                "created_at": datetime.now(UTC).isoformat(),
            },
        )
        logger.info("Reaction added: %s by %s on message %s", emoji, reactor_id, message_id)

    summaries = await summarize(db, [message_id], reactor_id)
    await commit_or_raise(db, "Failed to toggle reaction.")
    return summaries.get(message_id, [])
