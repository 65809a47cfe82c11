"""Per-request context: identity first, then a storage session.

FastAPI resolves the parameters of ``get_request_context`` in order, so a
request without a valid credential is rejected before a session is checked
out of the pool.
"""

from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.app.core.security import Identity, verify_token
from pulse.app.db import get_db
from pulse.app.services.profiles import ProfileLookup, SqlProfileLookup

bearer_scheme = HTTPBearer(auto_error=False)


async def require_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Identity:
    token = credentials.credentials if credentials else None
    return verify_token(token)


def get_profile_lookup(db: AsyncSession = Depends(get_db)) -> ProfileLookup:
    return SqlProfileLookup(db)


@dataclass(slots=True)
class RequestContext:
    identity: Identity
    db: AsyncSession
    profiles: ProfileLookup


async def get_request_context(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db),
    profiles: ProfileLookup = Depends(get_profile_lookup),
) -> RequestContext:
    return RequestContext(identity=identity, db=db, profiles=profiles)
