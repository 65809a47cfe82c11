"""Channel directory: listing and creating channels."""

import logging
from datetime import UTC, datetime

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.app.config import ChannelNamePolicy
from pulse.app.core.slug import MAX_NAME_LENGTH, normalize_channel_name
from pulse.app.db import commit_or_raise
from pulse.app.errors import ConflictError, NotFoundError, ValidationError
from pulse.app.models.channel import Channel

logger = logging.getLogger(__name__)


async def list_channels(db: AsyncSession) -> list[Channel]:
    """All channels, the general channel first, then by name."""
    result = await db.execute(select(Channel).order_by(desc(Channel.is_general), Channel.name))
    return list(result.scalars().all())


async def get_channel(db: AsyncSession, channel_id: int) -> Channel:
    channel = await db.get(Channel, channel_id)
    if channel is None:
        raise NotFoundError("Channel not found")
    return channel


async def create_channel(
    db: AsyncSession,
    name: str,
    description: str | None = None,
    *,
    policy: ChannelNamePolicy = "trim",
) -> Channel:
    normalized = normalize_channel_name(name, policy)
    if not normalized:
        raise ValidationError("Channel name is required")
    if len(normalized) > MAX_NAME_LENGTH:
        raise ValidationError(f"Channel name must be at most {MAX_NAME_LENGTH} characters")
    description = description.strip() if description else None

    existing = await db.execute(select(Channel.id).where(Channel.name == normalized))
    if existing.scalar_one_or_none() is not None:
        raise ConflictError(f"Channel {normalized} already exists")

    now = datetime.now(UTC).isoformat()
    channel = Channel(
        name=normalized,
        description=description or None,
        is_general=False,
        created_at=now,
        updated_at=now,
    )
    db.add(channel)
    # A concurrent create with the same name surfaces here as a conflict.
    await commit_or_raise(
        db,
        "Failed to create channel.",
        conflict=f"Channel {normalized} already exists",
    )

    logger.info("Channel created: id=%s name=%s", channel.id, channel.name)
    return channel
