from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from pulse.app.db import Base


class UserProfile(Base):
    """Read-only mirror of the identity provider's user records.

    Rows are written by the identity provider, never by this service.
    """

    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    picture: Mapped[str | None] = mapped_column(String, nullable=True)
    updated_at: Mapped[str] = mapped_column(String, nullable=False)
