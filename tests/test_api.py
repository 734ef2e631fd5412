"""Tests for the HTTP endpoints."""
import json

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from reconned.api import server
from reconned.api.server import app
from reconned.platforms.instagram.fetcher import RawResponse
from reconned.resolver import BatchResolver

pytestmark = pytest.mark.asyncio

TOKEN = "test-token"


class RecordingFetcher:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def __call__(self, username: str) -> RawResponse:
        self.calls.append(username)
        body = {"data": {"user": {"full_name": username.upper(), "is_verified": True}}}
        return RawResponse(200, json.dumps(body))


@pytest.fixture
def fetcher(monkeypatch):
    f = RecordingFetcher()
    monkeypatch.setenv("AUTH_TOKEN", TOKEN)
    monkeypatch.setattr(server, "_resolver", BatchResolver(f))
    return f


@pytest_asyncio.fixture
async def client(fetcher):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


async def test_rejects_wrong_token(client, fetcher):
    r = await client.get("/api/instagram_posts", params={"token": "nope", "username": "alice"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid token"
    assert fetcher.calls == []


async def test_missing_username_is_bad_request(client):
    r = await client.get("/api/instagram_posts", params={"token": TOKEN})
    assert r.status_code == 400
    assert r.json()["detail"] == "No username provided"


async def test_single_username(client):
    r = await client.get("/api/instagram_posts", params={"token": TOKEN, "username": "alice"})
    assert r.status_code == 200
    [profile] = r.json()
    assert profile["username"] == "alice"
    assert profile["full_name"] == "ALICE"
    assert profile["is_verified"] is True
    assert profile["posts"] == []


async def test_usernames_list_preserves_order(client, fetcher):
    r = await client.get(
        "/api/instagram_posts",
        params={"token": TOKEN, "usernames": " carol, alice ,,bob", "username": "ignored"},
    )
    assert r.status_code == 200
    assert [p["username"] for p in r.json()] == ["carol", "alice", "bob"]
    assert "ignored" not in fetcher.calls


async def test_snapshot_has_every_field(client):
    r = await client.get("/api/instagram_posts", params={"token": TOKEN, "username": "alice"})
    assert set(r.json()[0]) == {
        "username", "full_name", "biography", "profile_pic_url", "is_private",
        "is_verified", "followers_count", "following_count", "posts_count", "posts",
    }


async def test_repeat_request_is_cached(client, fetcher):
    for _ in range(2):
        await client.get("/api/instagram_posts", params={"token": TOKEN, "username": "alice"})
    assert fetcher.calls == ["alice"]


async def test_health_reports_cache_size(client):
    await client.get("/api/instagram_posts", params={"token": TOKEN, "usernames": "a,b"})
    r = await client.get("/api/health")
    assert r.json() == {"status": "ok", "cached": 2}


async def test_health_does_not_build_resolver(monkeypatch):
    monkeypatch.setattr(server, "_resolver", None)
    monkeypatch.setattr(server, "_client", None)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        r = await c.get("/api/health")
    assert r.json() == {"status": "ok", "cached": 0}
    assert server._resolver is None
    assert server._client is None
