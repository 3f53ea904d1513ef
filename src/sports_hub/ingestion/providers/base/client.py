from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

import httpx

from .errors import (
    ProviderAuthError,
    ProviderMappingError,
    ProviderRateLimited,
    ProviderRequestError,
    ProviderUnreachable,
)

logger = logging.getLogger(__name__)

Json = dict[str, Any]


def _safe_url(url: object) -> str:
    """Strip query params (may contain API keys) for safe logging."""
    parsed = urlparse(str(url))
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"


@dataclass
class BaseHttpClient:
    """
    Provider-agnostic async HTTP client wrapper.

    - Uses a single underlying httpx.AsyncClient for connection pooling.
    - Maps transport failures and status codes onto the provider error taxonomy.
    - Never retries; retrying is the caller's decision.
    """

    base_url: str
    timeout_s: float = 30.0
    connect_timeout_s: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)

    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self.base_url.rstrip("/") + "/",
            timeout=httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s),
            headers=dict(self.headers),
            transport=self.transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> BaseHttpClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        url = path.lstrip("/")
        try:
            resp = await self._client.request(method, url, params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.error("Timeout on %s %s: %s", method, _safe_url(self.base_url + "/" + url), e)
            raise ProviderUnreachable(f"Timed out calling {method} {url}") from e
        except httpx.TransportError as e:
            logger.error(
                "Network error on %s %s: %s", method, _safe_url(self.base_url + "/" + url), e
            )
            raise ProviderUnreachable(f"No response from {method} {url}: {e}") from e
        except httpx.RequestError as e:
            logger.error(
                "Request failed on %s %s: %s", method, _safe_url(self.base_url + "/" + url), e
            )
            raise ProviderUnreachable(f"Request to {method} {url} failed: {e}") from e

        status = resp.status_code
        if status == 429:
            logger.warning("Rate limited (429) on %s %s", method, _safe_url(resp.request.url))
            raise ProviderRateLimited("Provider rate limited the request (HTTP 429).")
        if status in (401, 403):
            logger.error("Auth failure (%d) on %s %s", status, method, _safe_url(resp.request.url))
            raise ProviderAuthError(
                f"Provider rejected credentials (HTTP {status}). Check the API key."
            )
        if status >= 500:
            logger.error("Server error %d on %s %s", status, method, _safe_url(resp.request.url))
            raise ProviderUnreachable(f"HTTP {status} for {method} {_safe_url(resp.request.url)}")

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ProviderRequestError(
                f"HTTP {status} for {method} {_safe_url(resp.request.url)}"
            ) from e

        return resp

    async def get_json_with_headers(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> tuple[Json, Mapping[str, str]]:
        resp = await self.request("GET", path, params=params, headers=headers)

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderMappingError(
                "Response was not valid JSON.", {"url": _safe_url(resp.request.url)}
            ) from e

        if not isinstance(data, dict):
            raise ProviderMappingError(
                f"Expected JSON object, got {type(data).__name__}",
                {"url": _safe_url(resp.request.url)},
            )

        return data, resp.headers

    async def get_json(
        self,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Json:
        data, _ = await self.get_json_with_headers(path, params=params, headers=headers)
        return data
