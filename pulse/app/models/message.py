from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pulse.app.db import Base


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    channel_id: Mapped[int] = mapped_column(Integer, ForeignKey("channels.id"), nullable=False)
    # Subject of the author's credential; not checked against any user table.
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str | None] = mapped_column(String, nullable=True)

    attachment_url: Mapped[str | None] = mapped_column(String, nullable=True)
    attachment_name: Mapped[str | None] = mapped_column(String, nullable=True)
    attachment_type: Mapped[str | None] = mapped_column(String, nullable=True)
    attachment_size: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[str] = mapped_column(String, nullable=False)
    updated_at: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        Index("idx_messages_channel_created", "channel_id", "created_at"),
    )

    # Relationships
    channel: Mapped[Channel] = relationship("Channel", back_populates="messages")
    reactions: Mapped[list[Reaction]] = relationship(
        "Reaction",
        back_populates="message",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
