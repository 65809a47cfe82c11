"""End-to-end flows across channels, messages and reactions.

Two users share one channel through the HTTP API only; every step is
verified from each user's point of view.
"""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from pulse.app.db import seed_defaults
from tests.conftest import ALICE, BOB, auth_headers, create_profile


async def _general_id(client: AsyncClient) -> int:
    resp = await client.get("/api/channels", headers=auth_headers())
    general = resp.json()[0]
    assert general["is_general"] is True
    return general["id"]


async def test_hello_and_thumbs_up(client: AsyncClient, db: AsyncSession):
    """A posts, B reacts and un-reacts; each view sees the right summary."""
    await seed_defaults(db)
    await create_profile(db, user_id=ALICE, name="Alice")
    await create_profile(db, user_id=BOB, name="Bob", email="bob@example.com")
    await db.commit()
    general = await _general_id(client)
    feed = f"/api/channels/{general}/messages"

    # A posts "hello"
    posted = await client.post(feed, json={"content": "hello"}, headers=auth_headers(ALICE))
    assert posted.status_code == 201
    message_id = posted.json()["id"]

    listed = (await client.get(feed, headers=auth_headers(ALICE))).json()
    assert len(listed) == 1
    assert listed[0]["content"] == "hello"
    assert listed[0]["reactions"] == []
    assert listed[0]["user_data"]["name"] == "Alice"

    # B reacts with a thumbs up
    reacted = await client.post(
        f"/api/messages/{message_id}/reactions",
        json={"emoji": "👍"},
        headers=auth_headers(BOB),
    )
    assert reacted.json() == [{"emoji": "👍", "count": 1, "reactedByMe": True}]

    a_view = (await client.get(feed, headers=auth_headers(ALICE))).json()[0]["reactions"]
    b_view = (await client.get(feed, headers=auth_headers(BOB))).json()[0]["reactions"]
    assert a_view == [{"emoji": "👍", "count": 1, "reactedByMe": False}]
    assert b_view == [{"emoji": "👍", "count": 1, "reactedByMe": True}]

    # B reacts again: the reaction is withdrawn
    withdrawn = await client.post(
        f"/api/messages/{message_id}/reactions",
        json={"emoji": "👍"},
        headers=auth_headers(BOB),
    )
    assert withdrawn.json() == []
    assert (await client.get(feed, headers=auth_headers(ALICE))).json()[0]["reactions"] == []


async def test_conversation_keeps_insertion_order(client: AsyncClient, db: AsyncSession):
    """Messages from several authors come back in the order they were sent."""
    created = await client.post("/api/channels", json={"name": "standup"}, headers=auth_headers())
    feed = f"/api/channels/{created.json()['id']}/messages"

    sent = []
    for author, text in [(ALICE, "morning"), (BOB, "hey"), (ALICE, "shipping today"), (BOB, "🚀")]:
        resp = await client.post(feed, json={"content": text}, headers=auth_headers(author))
        assert resp.status_code == 201
        sent.append(resp.json()["id"])

    listed = (await client.get(feed, headers=auth_headers(BOB))).json()
    assert [m["id"] for m in listed] == sent
    assert [m["content"] for m in listed] == ["morning", "hey", "shipping today", "🚀"]
    timestamps = [m["created_at"] for m in listed]
    assert timestamps == sorted(timestamps)


async def test_channel_conflict_leaves_first_channel_usable(client: AsyncClient):
    """A rejected duplicate should not affect the original channel."""
    first = await client.post("/api/channels", json={"name": "design"}, headers=auth_headers())
    dup = await client.post("/api/channels", json={"name": "design"}, headers=auth_headers(BOB))
    assert dup.status_code == 409

    feed = f"/api/channels/{first.json()['id']}/messages"
    posted = await client.post(feed, json={"content": "still here"}, headers=auth_headers(BOB))
    assert posted.status_code == 201
