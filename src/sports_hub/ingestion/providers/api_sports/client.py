from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sports_hub.ingestion.providers.base.adapter import require_list
from sports_hub.ingestion.providers.base.client import BaseHttpClient
from sports_hub.ingestion.providers.base.errors import ProviderResponseError

logger = logging.getLogger(__name__)


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class ApiSportsRateLimiter:
    """Proactive pacing based on API-Sports / RapidAPI rate limit headers.

    API-Sports reports a per-minute bucket (`X-RateLimit-*`); RapidAPI adds a
    daily request quota (`x-ratelimit-requests-*`). We pace to the minute bucket
    and only log when the daily quota runs low. A 429 is never retried here.
    """

    minute_limit_low_watermark: int = 2
    daily_low_watermark: int = 10
    min_interval_s: float = 0.0
    last_request_monotonic: float | None = None
    daily_remaining: int | None = None

    _sleep: Any = field(default=asyncio.sleep, repr=False)
    _monotonic: Any = field(default=time.monotonic, repr=False)

    async def before_request(self) -> None:
        if self.min_interval_s <= 0.0:
            return
        now = float(self._monotonic())
        if self.last_request_monotonic is None:
            return
        elapsed = now - self.last_request_monotonic
        remaining = self.min_interval_s - elapsed
        if remaining > 0:
            await self._sleep(remaining)

    async def after_response(self, headers: Mapping[str, str]) -> None:
        limit = _parse_int(headers.get("X-RateLimit-Limit"))
        remaining = _parse_int(headers.get("X-RateLimit-Remaining"))

        if limit and limit > 0:
            self.min_interval_s = max(self.min_interval_s, 60.0 / float(limit))

        # Close to exhausting the minute bucket: back off before the next call.
        if remaining is not None and remaining <= self.minute_limit_low_watermark:
            cooldown = 60.0 if remaining <= 1 else 10.0
            await self._sleep(cooldown)

        daily = _parse_int(headers.get("x-ratelimit-requests-remaining"))
        if daily is not None:
            self.daily_remaining = daily
            if daily <= self.daily_low_watermark:
                logger.warning("RapidAPI daily quota nearly exhausted: %d requests left", daily)

        self.last_request_monotonic = float(self._monotonic())


@dataclass
class ApiSportsClient:
    http: BaseHttpClient
    api_key: str
    host: str
    rate_limiter: ApiSportsRateLimiter = field(default_factory=ApiSportsRateLimiter)

    def _headers(self) -> dict[str, str]:
        return {"x-rapidapi-key": self.api_key, "x-rapidapi-host": self.host}

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        await self.rate_limiter.before_request()

        data, headers = await self.http.get_json_with_headers(
            path, params=params, headers=self._headers()
        )
        await self.rate_limiter.after_response(headers)

        # api-sports reports application errors as a list or a dict in a 200 body.
        errors = data.get("errors") or []
        if errors:
            raise ProviderResponseError(f"api-sports returned errors: {errors}")

        return data

    async def get_response_items(
        self, path: str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        payload = await self.get(path, params=params)
        return require_list(payload, "response", sport=self.host)
