import logging
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import event, select
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from pulse.app.config import Settings, settings
from pulse.app.errors import ConflictError, PersistenceError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def _is_memory_db(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def _engine_kwargs(cfg: Settings) -> dict[str, Any]:
    kwargs: dict[str, Any] = {"echo": False, "pool_pre_ping": True}
    if cfg.uses_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
    if not _is_memory_db(cfg.storage_url):
        # One logical session per request, checked out of a bounded pool.
        kwargs.update(
            pool_size=cfg.db_pool_size,
            max_overflow=cfg.db_max_overflow,
            pool_timeout=cfg.db_pool_timeout,
        )
    return kwargs


def install_sqlite_pragmas(target: AsyncEngine) -> None:
    """Apply per-connection SQLite pragmas (foreign keys are off by default)."""

    @event.listens_for(target.sync_engine, "connect")
    def _set_pragmas(dbapi_connection: Any, _record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.execute("PRAGMA busy_timeout = 5000")
        cursor.close()


engine = create_async_engine(settings.storage_url, **_engine_kwargs(settings))
if settings.uses_sqlite:
    install_sqlite_pragmas(engine)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Services commit their own writes with ``commit_or_raise`` before returning,
    so the commit here only closes out read-only transactions.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def commit_or_raise(
    db: AsyncSession,
    failure: str,
    *,
    conflict: str | None = None,
) -> None:
    """Commit the request transaction or raise a ``PulseError``.

    A uniqueness violation becomes ``ConflictError(conflict)`` when ``conflict``
    is given; every other storage failure becomes ``PersistenceError(failure)``.
    """
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if conflict is not None:
            raise ConflictError(conflict) from exc
        logger.exception("Commit failed: %s", failure)
        raise PersistenceError(failure) from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Commit failed: %s", failure)
        raise PersistenceError(failure) from exc


async def init_db() -> None:
    """Create all tables and seed the general channel."""
    import pulse.app.models  # noqa: F401 (registers the models)

    if settings.uses_sqlite and not _is_memory_db(settings.storage_url):
        settings.data_dir.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        await seed_defaults(session)
        await session.commit()


async def seed_defaults(session: AsyncSession) -> None:
    """Create the ``general`` landing channel if no general channel exists yet."""
    from pulse.app.models.channel import Channel

    result = await session.execute(select(Channel).where(Channel.is_general.is_(True)))
    if result.scalar_one_or_none() is not None:
        return

    now = datetime.now(UTC).isoformat()
    session.add(
        Channel(
            name="general",
            description="Company-wide announcements and chatter",
            is_general=True,
            created_at=now,
            updated_at=now,
        )
    )
    await session.flush()
    logger.info("Seeded default general channel")
