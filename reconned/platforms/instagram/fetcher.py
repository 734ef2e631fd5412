import logging
from dataclasses import dataclass

import httpx

from reconned.config import FETCH_TIMEOUT

_log = logging.getLogger(__name__)

PROFILE_URL = "https://www.instagram.com/api/v1/users/web_profile_info/"

# Header set the web app sends; without X-IG-App-ID the endpoint answers 4xx.
HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:137.0) Gecko/20100101 Firefox/137.0",
    "Accept": "*/*",
    "Accept-Language": "en-US,en;q=0.5",
    "X-IG-App-ID": "936619743392459",
    "X-ASBD-ID": "359341",
    "X-IG-WWW-Claim": "0",
    "X-Web-Device-Id": "D08769DB-E84E-4D0D-AF5D-C16D7ED28411",
    "X-Web-Session-ID": "session",
    "X-Requested-With": "XMLHttpRequest",
    "Sec-GPC": "1",
}


class TransportError(Exception):
    """The request never produced an upstream response (network error, timeout)."""

    def __init__(self, username: str, cause: Exception) -> None:
        super().__init__(f"fetch failed for {username!r}: {cause!r}")
        self.username = username
        self.cause = cause


@dataclass(frozen=True)
class RawResponse:
    status_code: int
    body: str


class InstagramClient:
    """Fetches raw profile documents from the Instagram web API.

    Owns one pooled httpx.AsyncClient; close it with ``aclose()`` or use
    the instance as an async context manager.
    """

    def __init__(self, *, timeout: float = FETCH_TIMEOUT, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._client = httpx.AsyncClient(headers=HEADERS, timeout=timeout, transport=transport)

    async def __call__(self, username: str) -> RawResponse:
        _log.info("Fetching Instagram data for user: %s", username)
        try:
            resp = await self._client.get(PROFILE_URL, params={"username": username})
            # Body read errors count as transport failures too.
            return RawResponse(status_code=resp.status_code, body=resp.text)
        except httpx.HTTPError as exc:
            raise TransportError(username, exc) from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "InstagramClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
