"""Cross-origin allow-list enforcement."""

import logging
from collections.abc import Callable, Iterable

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """Reject browser requests whose ``Origin`` is not on the allow-list.

    Requests without an ``Origin`` header (curl, server-to-server) pass
    through; the CORS middleware behind this one only decorates responses.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]) -> None:
        super().__init__(app)
        self.allowed_origins = {origin.rstrip("/") for origin in allowed_origins}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        origin = request.headers.get("origin")
        if origin is not None and origin.rstrip("/") not in self.allowed_origins:
            logger.info("Rejected request from origin %s to %s", origin, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={"error": "forbidden_origin", "detail": "Origin not allowed"},
            )
        return await call_next(request)
