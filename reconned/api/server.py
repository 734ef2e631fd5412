"""FastAPI server exposing batched Instagram profile lookups."""
import logging
import secrets

from fastapi import FastAPI, HTTPException

from reconned.cache import SnapshotCache
from reconned.config import get_auth_token
from reconned.models import ProfileSnapshot
from reconned.platforms.instagram.fetcher import InstagramClient
from reconned.resolver import BatchResolver

_log = logging.getLogger(__name__)

app = FastAPI(title="reconned API")

# ── Process-wide resolver ────────────────────────────────────────────────────
# Built on first use so importing the module opens no connections.

_client: InstagramClient | None = None
_resolver: BatchResolver | None = None


def get_resolver() -> BatchResolver:
    global _client, _resolver
    if _resolver is None:
        _client = InstagramClient()
        _resolver = BatchResolver(_client, SnapshotCache())
    return _resolver


@app.on_event("shutdown")
async def _close_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def _parse_usernames(usernames: str | None, username: str | None) -> list[str]:
    """``usernames`` (comma-separated) takes precedence over ``username``."""
    if usernames is not None:
        return [u.strip() for u in usernames.split(",") if u.strip()]
    if username is not None and username.strip():
        return [username.strip()]
    return []


# ── Endpoints ────────────────────────────────────────────────────────────────

@app.get("/api/instagram_posts", response_model=list[ProfileSnapshot])
async def instagram_posts(token: str, usernames: str | None = None, username: str | None = None):
    """Return one snapshot per requested username, in request order."""
    if not secrets.compare_digest(token.encode(), get_auth_token().encode()):
        raise HTTPException(status_code=401, detail="Invalid token")

    names = _parse_usernames(usernames, username)
    if not names:
        raise HTTPException(status_code=400, detail="No username provided")

    _log.info("Resolving %d username(s)", len(names))
    return await get_resolver().resolve_batch(names)


@app.get("/api/health")
async def health():
    cached = len(_resolver.cache) if _resolver is not None else 0
    return {"status": "ok", "cached": cached}
