from __future__ import annotations

from sqlalchemy import Boolean, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pulse.app.db import Base


class Channel(Base):
    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String, nullable=True)
    is_general: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # ISO 8601 UTC strings, like every other timestamp in the schema.
    created_at: Mapped[str] = mapped_column(String, nullable=False)
    updated_at: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        # At most one landing channel.
        Index(
            "uq_channels_single_general",
            "is_general",
            unique=True,
            sqlite_where=text("is_general = 1"),
            postgresql_where=text("is_general"),
        ),
    )

    # Relationships
    messages: Mapped[list[Message]] = relationship("Message", back_populates="channel")
