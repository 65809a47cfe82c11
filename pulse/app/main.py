"""FastAPI application: the main entrypoint for Pulse.

Every request passes through the same ordered pipeline:

1. ``OriginGuardMiddleware`` rejects origins outside the allow-list.
2. ``CORSMiddleware`` answers preflights and decorates responses.
3. ``require_identity`` verifies the bearer token (``/api`` routes only).
4. ``get_db`` checks a session out of the pool for the rest of the request.
5. The route handler calls into the channel, message or reaction services.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy import text

from pulse.app.api.channels import router as channels_router
from pulse.app.api.messages import router as messages_router
from pulse.app.api.reactions import router as reactions_router
from pulse.app.config import settings
from pulse.app.db import engine, init_db
from pulse.app.errors import AuthError, PulseError
from pulse.app.middleware import OriginGuardMiddleware

logger = logging.getLogger(__name__)

# Configure logging for our app modules so INFO/DEBUG logs are visible.
# Uvicorn's log_level="info" only affects its own logger, not ours.
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(levelname)s:%(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    await init_db()
    yield
    # Shutdown: return pooled connections
    await engine.dispose()


app = FastAPI(
    title="Pulse",
    description="Channel messaging backend",
    version="0.1.0",
    lifespan=lifespan,
)

# Middleware added last runs first: the origin guard wraps CORS.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)
app.add_middleware(OriginGuardMiddleware, allowed_origins=settings.cors_origins)


# --- Exception handlers ---


@app.exception_handler(PulseError)
async def _pulse_error_handler(request: Request, exc: PulseError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "detail": exc.detail},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "detail": f"{location}: {message}" if location else message,
        },
    )


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch unhandled exceptions and return a clean JSON 500 instead of a stack trace."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "server_error", "detail": "Internal server error"},
    )


# Include routers
app.include_router(channels_router, prefix="/api")
app.include_router(messages_router, prefix="/api")
app.include_router(reactions_router, prefix="/api")


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Pulse worker is online!"


# --- Health check ---


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check with DB connectivity verification."""
    db_ok = "ok"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        db_ok = "error"
        logger.exception("Health check: database connectivity failed")

    return {
        "status": "ok" if db_ok == "ok" else "degraded",
        "database": db_ok,
    }
