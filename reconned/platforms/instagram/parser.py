"""Turn an untrusted web_profile_info document into a ProfileSnapshot.

Parsing happens in two stages. ``parse_document`` walks the JSON once and
keeps every field it understands as a typed value, or ``None`` when the
field is missing, null or of the wrong type. ``build_snapshot`` is the only
place where ``None`` becomes a default. Nothing in this module raises on
bad input.
"""
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from reconned.models import MAX_POSTS, PostSummary, ProfileSnapshot

UNKNOWN_DATE = "Unknown date"
POST_URL = "https://www.instagram.com/p/{shortcode}/"


@dataclass
class RawPost:
    display_url: str | None = None
    is_video: bool | None = None
    shortcode: str | None = None
    taken_at: int | None = None


@dataclass
class RawProfile:
    full_name: str | None = None
    biography: str | None = None
    profile_pic_url: str | None = None
    is_private: bool | None = None
    is_verified: bool | None = None
    followers: int | None = None
    following: int | None = None
    media_count: int | None = None
    posts: list[RawPost] = field(default_factory=list)


# ── Typed accessors ──────────────────────────────────────────────────────────

def _obj(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _int(value: Any) -> int | None:
    # bool is an int subclass; JSON true is not a count.
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


# ── Stage 1: parse ───────────────────────────────────────────────────────────

def _parse_post(node: dict[str, Any]) -> RawPost:
    return RawPost(
        display_url=_str(node.get("display_url")),
        is_video=_bool(node.get("is_video")),
        shortcode=_str(node.get("shortcode")),
        taken_at=_int(node.get("taken_at_timestamp")),
    )


def parse_document(doc: Any) -> RawProfile:
    """Extract known fields from ``data.user`` of a web_profile_info document.

    Only the first MAX_POSTS edges are read, in upstream order. Edges
    without a ``node`` key are skipped; a ``node`` that is not an object
    yields a post with every field defaulted.
    """
    user = _obj(_obj(_obj(doc).get("data")).get("user"))
    media = _obj(user.get("edge_owner_to_timeline_media"))
    edges = media.get("edges")

    posts: list[RawPost] = []
    if isinstance(edges, list):
        for edge in edges[:MAX_POSTS]:
            if isinstance(edge, dict) and "node" in edge:
                posts.append(_parse_post(_obj(edge["node"])))

    return RawProfile(
        full_name=_str(user.get("full_name")),
        biography=_str(user.get("biography")),
        profile_pic_url=_str(user.get("profile_pic_url")),
        is_private=_bool(user.get("is_private")),
        is_verified=_bool(user.get("is_verified")),
        followers=_int(_obj(user.get("edge_followed_by")).get("count")),
        following=_int(_obj(user.get("edge_follow")).get("count")),
        media_count=_int(media.get("count")),
        posts=posts,
    )


# ── Stage 2: defaults ────────────────────────────────────────────────────────

def format_timestamp(value: int | None) -> str:
    """Format unix seconds as ``YYYY-MM-DD HH:MM:SS UTC``."""
    if value is None or value <= 0:
        return UNKNOWN_DATE
    try:
        dt = datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return UNKNOWN_DATE
    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


def _build_post(raw: RawPost) -> PostSummary:
    image_url = raw.display_url or ""
    return PostSummary(
        image_url=image_url,
        # Upstream has no separate preview asset for videos.
        video_preview_url=image_url if raw.is_video else None,
        direct_link=POST_URL.format(shortcode=raw.shortcode or ""),
        date=format_timestamp(raw.taken_at),
    )


def build_snapshot(username: str, raw: RawProfile) -> ProfileSnapshot:
    """Apply the default for every field the parse stage left as None."""
    return ProfileSnapshot(
        username=username,
        full_name=raw.full_name or "",
        biography=raw.biography or "",
        profile_pic_url=raw.profile_pic_url or "",
        is_private=bool(raw.is_private),
        is_verified=bool(raw.is_verified),
        followers_count=raw.followers or 0,
        following_count=raw.following or 0,
        posts_count=raw.media_count or 0,
        posts=[_build_post(p) for p in raw.posts[:MAX_POSTS]],
    )


def snapshot_from_document(username: str, doc: Any) -> ProfileSnapshot:
    return build_snapshot(username, parse_document(doc))


def normalize_response(username: str, status_code: int, body: str) -> ProfileSnapshot:
    """Normalize one upstream response.

    A non-2xx status or a body that is not JSON yields the empty snapshot:
    callers cannot tell a failed call from an empty account.
    """
    if not 200 <= status_code < 300:
        return ProfileSnapshot.empty(username)
    try:
        doc = json.loads(body)
    except (ValueError, RecursionError):
        return ProfileSnapshot.empty(username)
    return snapshot_from_document(username, doc)
