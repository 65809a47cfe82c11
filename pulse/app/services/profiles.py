"""Author profile lookup.

Profiles belong to the identity provider. The service only reads them, at
write time and at read time, and makes no attempt to keep them consistent
with message rows: whatever the provider holds *now* is what callers see.
"""

from collections.abc import Iterable
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.app.models.profile import UserProfile
from pulse.app.schemas.profile import ProfileSnapshot


class ProfileLookup(Protocol):
    async def lookup(self, identity: str) -> ProfileSnapshot | None: ...

    async def lookup_many(self, identities: Iterable[str]) -> dict[str, ProfileSnapshot]: ...


def _snapshot(profile: UserProfile) -> ProfileSnapshot:
    return ProfileSnapshot(
        sub=profile.id,
        email=profile.email,
        name=profile.name,
        picture=profile.picture,
    )


class SqlProfileLookup:
    """Reads the provider's ``user_profiles`` table through the request session."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def lookup(self, identity: str) -> ProfileSnapshot | None:
        profile = await self._db.get(UserProfile, identity)
        return _snapshot(profile) if profile else None

    async def lookup_many(self, identities: Iterable[str]) -> dict[str, ProfileSnapshot]:
        wanted = set(identities)
        if not wanted:
            return {}
        result = await self._db.execute(select(UserProfile).where(UserProfile.id.in_(wanted)))
        return {p.id: _snapshot(p) for p in result.scalars().all()}
