"""Fetcher protocol: the interface the resolver calls for each cache miss."""
from typing import Protocol

from reconned.platforms.instagram.fetcher import RawResponse


class ProfileFetcher(Protocol):
    """One outbound request per username.

    Returns the upstream status and body whenever the request reached the
    platform, whatever the status. Network errors and timeouts are raised
    as TransportError.
    """

    async def __call__(self, username: str) -> RawResponse: ...
