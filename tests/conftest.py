"""Shared fixtures: in-memory database, HTTP client, tokens and row factories."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pulse.app.core.security import create_access_token
from pulse.app.db import Base, get_db, install_sqlite_pragmas
from pulse.app.main import app
from pulse.app.models import Channel, Message, Reaction, UserProfile

ALICE = "0b7c6f1e-5a43-4a36-9d0e-2f3a1c9e0a01"
BOB = "6d1f2a4b-8c9e-4f10-a2b3-c4d5e6f70802"


def auth_headers(subject: str = ALICE) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(subject)}"}


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    install_sqlite_pragmas(test_engine)
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def sessions_opened() -> list[int]:
    """One entry per storage session the app checked out during a test."""
    return []


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    sessions_opened: list[int],
) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        sessions_opened.append(1)
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Row factories
# ---------------------------------------------------------------------------


def _now() -> str:
    return datetime.now(UTC).isoformat()


async def create_channel(
    db: AsyncSession,
    name: str = "general",
    description: str | None = None,
    is_general: bool = False,
) -> Channel:
    now = _now()
    channel = Channel(
        name=name,
        description=description,
        is_general=is_general,
        created_at=now,
        updated_at=now,
    )
    db.add(channel)
    await db.flush()
    return channel


async def create_message(
    db: AsyncSession,
    channel_id: int,
    user_id: str = ALICE,
    content: str | None = "hello",
    created_at: str | None = None,
    **attachment: object,
) -> Message:
    ts = created_at or _now()
    msg = Message(
        channel_id=channel_id,
        user_id=user_id,
        content=content,
        created_at=ts,
        updated_at=ts,
        **attachment,
    )
    db.add(msg)
    await db.flush()
    return msg


async def create_reaction(
    db: AsyncSession,
    message_id: int,
    user_id: str = ALICE,
    emoji: str = "👍",
) -> Reaction:
    reaction = Reaction(message_id=message_id, user_id=user_id, emoji=emoji, created_at=_now())
    db.add(reaction)
    await db.flush()
    return reaction


async def create_profile(
    db: AsyncSession,
    user_id: str = ALICE,
    name: str | None = "Alice",
    email: str | None = "alice@example.com",
    picture: str | None = None,
) -> UserProfile:
    profile = UserProfile(
        id=user_id,
        name=name,
        email=email,
        picture=picture,
        updated_at=_now(),
    )
    db.add(profile)
    await db.flush()
    return profile
