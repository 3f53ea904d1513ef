from __future__ import annotations

from collections.abc import Iterator

from .adapter import RacingAdapter, SportAdapter
from .client import BaseHttpClient
from .errors import ProviderCapabilityError


class AdapterRegistry:
    """Sport id -> adapter instance. Owns the HTTP clients handed to it."""

    def __init__(self) -> None:
        self._adapters: dict[str, SportAdapter] = {}
        self._clients: list[BaseHttpClient] = []

    def own(self, http: BaseHttpClient) -> BaseHttpClient:
        self._clients.append(http)
        return http

    async def aclose(self) -> None:
        for http in self._clients:
            await http.aclose()
        self._clients.clear()

    def register(self, sport: str, adapter: SportAdapter) -> None:
        if sport in self._adapters:
            raise ValueError(f"Duplicate adapter registration: {sport}")
        self._adapters[sport] = adapter

    def get(self, sport: str) -> SportAdapter:
        adapter = self._adapters.get(sport)
        if adapter is None:
            raise ProviderCapabilityError(f"Sport not found: {sport}")
        return adapter

    def get_racing(self, sport: str) -> RacingAdapter:
        adapter = self.get(sport)
        if not isinstance(adapter, RacingAdapter):
            raise ProviderCapabilityError(
                f"Participants are only available for racing, not {sport}"
            )
        return adapter

    def __contains__(self, sport: object) -> bool:
        return sport in self._adapters

    def __iter__(self) -> Iterator[str]:
        return iter(self._adapters)
