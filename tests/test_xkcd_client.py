import httpx
import pytest

from adapters.http_client import build_async_client
from adapters.xkcd_client import XkcdClient
from conftest import make_payload
from core.config import AppSettings
from core.domain.errors import ComicNotFound, UpstreamError


def _client(settings: AppSettings, handler) -> XkcdClient:
    transport = httpx.MockTransport(handler)
    return XkcdClient(settings, client=build_async_client(settings, transport=transport))


@pytest.mark.asyncio
async def test_fetch_latest_normalizes_missing_transcript(settings):
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(
            200,
            json={
                "num": 2750,
                "title": "Test Comic",
                "img": "https://imgs.xkcd.com/comics/test.png",
                "alt": "Test alt text",
                "year": "2023",
                "month": "4",
                "day": "1",
                "safe_title": "Test Comic",
            },
        )

    comic = await _client(settings, handler).fetch_latest()

    assert seen == ["https://xkcd.test/info.0.json"]
    assert comic.model_dump(mode="json") == {
        "id": 2750,
        "title": "Test Comic",
        "img": "https://imgs.xkcd.com/comics/test.png",
        "alt": "Test alt text",
        "transcript": "",
        "year": "2023",
        "month": "4",
        "day": "1",
        "safe_title": "Test Comic",
    }


@pytest.mark.asyncio
async def test_fetch_by_id_uses_per_comic_url_and_keeps_transcript(settings):
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json=make_payload(614, transcript="[[A woodpecker]]"))

    comic = await _client(settings, handler).fetch_by_id(614)

    assert seen == ["/614/info.0.json"]
    assert comic.id == 614
    assert comic.transcript == "[[A woodpecker]]"


@pytest.mark.asyncio
async def test_null_transcript_becomes_empty_string(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=make_payload(5, transcript=None))

    comic = await _client(settings, handler).fetch_by_id(5)

    assert comic.transcript == ""


@pytest.mark.asyncio
async def test_404_maps_to_comic_not_found(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404)

    with pytest.raises(ComicNotFound) as excinfo:
        await _client(settings, handler).fetch_by_id(999999)

    assert excinfo.value.comic_id == 999999


@pytest.mark.asyncio
async def test_500_maps_to_upstream_error_with_status_and_reason(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500)

    with pytest.raises(UpstreamError) as excinfo:
        await _client(settings, handler).fetch_latest()

    err = excinfo.value
    assert err.status_code == 500
    assert err.reason == "Internal Server Error"
    assert err.message == "Failed to fetch latest comic: HTTP 500: Internal Server Error"
    assert err.transient is True
    assert not isinstance(err, ComicNotFound)


@pytest.mark.asyncio
async def test_other_client_errors_are_permanent(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403)

    with pytest.raises(UpstreamError) as excinfo:
        await _client(settings, handler).fetch_by_id(1)

    assert excinfo.value.status_code == 403
    assert excinfo.value.transient is False


@pytest.mark.asyncio
async def test_transport_failure_maps_to_upstream_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(UpstreamError) as excinfo:
        await _client(settings, handler).fetch_latest()

    err = excinfo.value
    assert err.status_code is None
    assert err.detail == "Connection refused"
    assert "Connection refused" not in err.message
    assert err.transient is True


@pytest.mark.asyncio
async def test_timeout_is_flagged(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamError) as excinfo:
        await _client(settings, handler).fetch_by_id(3)

    assert excinfo.value.timed_out is True
    assert excinfo.value.transient is True


@pytest.mark.asyncio
async def test_malformed_payload_is_upstream_error(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>not json</html>")

    with pytest.raises(UpstreamError) as excinfo:
        await _client(settings, handler).fetch_latest()

    assert excinfo.value.transient is False


@pytest.mark.asyncio
async def test_mismatched_comic_number_is_rejected(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=make_payload(8))

    with pytest.raises(UpstreamError):
        await _client(settings, handler).fetch_by_id(7)


@pytest.mark.asyncio
async def test_shared_client_sends_json_accept_and_user_agent(settings):
    seen: list[httpx.Headers] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers)
        return httpx.Response(200, json=make_payload(1))

    await _client(settings, handler).fetch_by_id(1)

    assert seen[0]["accept"] == "application/json"
    assert seen[0]["user-agent"] == settings.user_agent
