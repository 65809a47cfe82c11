"""Bearer credential verification.

Tokens are issued by the external identity provider and signed with a key
shared with this service. Verification never touches storage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from pulse.app.config import Settings, settings
from pulse.app.errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Identity:
    """The authenticated caller for one request."""

    subject: str


def verify_token(token: str | None, cfg: Settings = settings) -> Identity:
    """Verify a bearer token and return the caller identity.

    Raises ``AuthError("missing")`` when no token was presented and
    ``AuthError("invalid")`` for malformed, badly signed or expired tokens,
    or tokens without a ``sub`` claim.
    """
    if not token:
        raise AuthError("missing")

    options = {"require": ["sub"], "verify_aud": cfg.jwt_audience is not None}
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            cfg.jwt_secret,
            algorithms=[cfg.jwt_algorithm],
            audience=cfg.jwt_audience,
            options=options,
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("invalid", "Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected bearer token: %s", type(exc).__name__)
        raise AuthError("invalid") from exc

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        raise AuthError("invalid")
    return Identity(subject=subject)


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
    cfg: Settings = settings,
    **claims: Any,
) -> str:
    """Mint a token signed with the configured key (development and tests)."""
    now = datetime.now(UTC)
    to_encode: dict[str, Any] = {"sub": subject, "iat": now, **claims}
    to_encode["exp"] = now + (expires_delta if expires_delta is not None else timedelta(hours=1))
    if cfg.jwt_audience is not None and "aud" not in to_encode:
        to_encode["aud"] = cfg.jwt_audience
    return jwt.encode(to_encode, cfg.jwt_secret, algorithm=cfg.jwt_algorithm)
