import httpx
import pytest

from reconned.platforms.instagram.fetcher import HEADERS, InstagramClient, RawResponse, TransportError

pytestmark = pytest.mark.asyncio


async def test_returns_status_and_body_with_expected_request():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text='{"data": {}}')

    async with InstagramClient(transport=httpx.MockTransport(handler)) as client:
        raw = await client("alice")

    assert raw == RawResponse(200, '{"data": {}}')
    req = seen[0]
    assert req.url.path == "/api/v1/users/web_profile_info/"
    assert req.url.params["username"] == "alice"
    assert req.headers["X-IG-App-ID"] == HEADERS["X-IG-App-ID"]


async def test_error_status_is_not_a_transport_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(429, text="slow down"))
    async with InstagramClient(transport=transport) as client:
        raw = await client("alice")
    assert raw == RawResponse(429, "slow down")


async def test_network_error_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    async with InstagramClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TransportError) as info:
            await client("alice")
    assert info.value.username == "alice"
    assert isinstance(info.value.cause, httpx.ConnectError)


async def test_timeout_raises_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    async with InstagramClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(TransportError):
            await client("alice")
