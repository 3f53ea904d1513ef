from __future__ import annotations

from typing import Any

import httpx
import pytest

from sports_hub.ingestion.providers.api_sports.client import ApiSportsClient, ApiSportsRateLimiter
from sports_hub.ingestion.providers.base.client import BaseHttpClient
from sports_hub.ingestion.providers.base.errors import ProviderMappingError, ProviderResponseError


def _recording_sleep(sleeps: list[float]):
    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    return fake_sleep


@pytest.mark.asyncio
async def test_api_sports_rate_limiter_paces_requests() -> None:
    sleeps: list[float] = []
    t = 0.0

    def fake_monotonic() -> float:
        return t

    limiter = ApiSportsRateLimiter(_sleep=_recording_sleep(sleeps), _monotonic=fake_monotonic)
    limiter.min_interval_s = 1.0
    limiter.last_request_monotonic = 0.0

    t = 0.25
    await limiter.before_request()
    assert sleeps == [0.75]


@pytest.mark.asyncio
async def test_api_sports_rate_limiter_uses_headers_for_minute_cooldown() -> None:
    sleeps: list[float] = []

    limiter = ApiSportsRateLimiter(
        _sleep=_recording_sleep(sleeps),
        _monotonic=lambda: 123.0,
        minute_limit_low_watermark=2,
    )

    await limiter.after_response({"X-RateLimit-Limit": "300", "X-RateLimit-Remaining": "1"})
    assert limiter.min_interval_s > 0.0
    assert 60.0 in sleeps


@pytest.mark.asyncio
async def test_api_sports_rate_limiter_tracks_daily_quota() -> None:
    limiter = ApiSportsRateLimiter(_sleep=_recording_sleep([]), _monotonic=lambda: 1.0)
    await limiter.after_response({"x-ratelimit-requests-remaining": "7"})
    assert limiter.daily_remaining == 7


def _api_sports_client(payload: dict[str, Any], seen: list[httpx.Request]) -> ApiSportsClient:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json=payload,
            headers={"X-RateLimit-Limit": "300", "X-RateLimit-Remaining": "299"},
        )

    http = BaseHttpClient(
        base_url="https://api-basketball.p.rapidapi.com", transport=httpx.MockTransport(handler)
    )
    return ApiSportsClient(
        http=http,
        api_key="k",
        host="api-basketball.p.rapidapi.com",
        rate_limiter=ApiSportsRateLimiter(_sleep=_recording_sleep([])),
    )


@pytest.mark.asyncio
async def test_api_sports_client_sends_rapidapi_headers_and_reads_limits() -> None:
    seen: list[httpx.Request] = []
    client = _api_sports_client({"response": [], "errors": []}, seen)

    await client.get("/games", params={"date": "2025-07-15"})

    assert seen[0].headers["x-rapidapi-key"] == "k"
    assert seen[0].headers["x-rapidapi-host"] == "api-basketball.p.rapidapi.com"
    assert client.rate_limiter.min_interval_s > 0.0


@pytest.mark.asyncio
async def test_api_sports_client_raises_on_body_errors() -> None:
    client = _api_sports_client({"response": [], "errors": {"token": "invalid"}}, [])
    with pytest.raises(ProviderResponseError):
        await client.get("/games")


@pytest.mark.asyncio
async def test_api_sports_client_requires_response_list() -> None:
    client = _api_sports_client({"results": 0}, [])
    with pytest.raises(ProviderMappingError):
        await client.get_response_items("/games")
