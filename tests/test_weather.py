"""Tests for the weather client."""

import httpx
import pytest

from calendar_assistant.digest.weather import WeatherClient
from calendar_assistant.errors import RemoteServiceError


def make_client(handler, api_key="k123"):
    transport = httpx.MockTransport(handler)
    return WeatherClient(
        api_key=api_key,
        base_url="https://weather.test/v1/",
        client=httpx.AsyncClient(transport=transport),
    )


@pytest.mark.asyncio
async def test_current_conditions():
    seen = {}

    def handler(request):
        seen["url"] = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json={"current": {"temp_f": 54.4, "temp_c": 12.4, "condition": {"text": "Partly cloudy"}}},
        )

    client = make_client(handler)
    report = await client.current("Denver, CO")
    await client.close()

    assert seen["url"] == "https://weather.test/v1/current.json"
    assert seen["params"] == {"key": "k123", "q": "Denver, CO"}
    assert report.temperature_f == 54.4
    assert report.temperature_c == 12.4
    assert report.condition == "Partly cloudy"


@pytest.mark.asyncio
async def test_missing_key_fails_without_request():
    def handler(request):
        raise AssertionError("no request expected")

    client = make_client(handler, api_key=None)
    with pytest.raises(RemoteServiceError, match="not configured"):
        await client.current("Denver")


@pytest.mark.asyncio
async def test_http_error_status():
    client = make_client(lambda request: httpx.Response(403, json={"error": {"message": "bad key"}}))

    with pytest.raises(RemoteServiceError) as exc_info:
        await client.current("Denver")
    assert exc_info.value.code == "403"


@pytest.mark.asyncio
async def test_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = make_client(handler)
    with pytest.raises(RemoteServiceError, match="Weather request failed"):
        await client.current("Denver")


@pytest.mark.asyncio
async def test_unexpected_payload():
    client = make_client(lambda request: httpx.Response(200, json={"location": {}}))

    with pytest.raises(RemoteServiceError, match="Unexpected weather response"):
        await client.current("Denver")
