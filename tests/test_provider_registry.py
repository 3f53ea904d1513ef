from __future__ import annotations

from typing import Any

import httpx
import pytest

from sports_hub.core.config import Settings, build_sports_config, list_sports
from sports_hub.ingestion.providers.api_sports.adapters.football import ApiFootballAdapter
from sports_hub.ingestion.providers.base.adapter import RacingAdapter
from sports_hub.ingestion.providers.base.errors import ProviderCapabilityError
from sports_hub.ingestion.providers.base.registry import AdapterRegistry
from sports_hub.ingestion.providers.pmu.adapter import PmuHorseAdapter
from sports_hub.ingestion.providers.provider import build_default_registry

ALL_SPORTS = [
    "football",
    "basketball",
    "rugby",
    "handball",
    "volleyball",
    "baseball",
    "hockey",
    "tennis",
    "horse",
]


def _settings(**overrides: Any) -> Settings:
    return Settings(_env_file=None, **overrides)


def test_list_sports_covers_every_adapter() -> None:
    sports = list_sports(build_sports_config(_settings(RAPID_API_KEY="k")))

    assert [s["id"] for s in sports] == ALL_SPORTS
    assert sports[-1] == {"id": "horse", "name": "Courses Hippiques", "icon": "🏇"}


def test_tennis_key_falls_back_to_rapid_key() -> None:
    configs = build_sports_config(_settings(RAPID_API_KEY="k"))
    assert configs["tennis"].api_key == "k"

    configs = build_sports_config(_settings(RAPID_API_KEY="k", RAPID_API_KEY_TENNIS="t"))
    assert configs["tennis"].api_key == "t"
    assert configs["football"].base_url == "https://api-football-v1.p.rapidapi.com/v3"


@pytest.mark.asyncio
async def test_registry_wires_every_sport_when_keyed() -> None:
    settings = _settings(RAPID_API_KEY="k")
    registry = build_default_registry(build_sports_config(settings), settings)

    assert list(registry) == ALL_SPORTS
    assert isinstance(registry.get("football"), ApiFootballAdapter)
    assert registry.get("football").source == "api-football"
    assert isinstance(registry.get_racing("horse"), RacingAdapter)
    with pytest.raises(ProviderCapabilityError):
        registry.get_racing("football")

    await registry.aclose()


@pytest.mark.asyncio
async def test_registry_without_keys_only_serves_horse_racing() -> None:
    settings = _settings(RAPID_API_KEY=None)
    registry = build_default_registry(build_sports_config(settings), settings)

    assert list(registry) == ["horse"]
    assert "football" not in registry
    with pytest.raises(ProviderCapabilityError, match="Sport not found: football"):
        registry.get("football")

    await registry.aclose()


@pytest.mark.asyncio
async def test_registry_clients_use_given_transport(pmu_programme: dict[str, Any]) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=pmu_programme)

    settings = _settings(RAPID_API_KEY=None)
    registry = build_default_registry(
        build_sports_config(settings), settings, transport=httpx.MockTransport(handler)
    )

    raw = await registry.get("horse").fetch_fixtures("2025-07-15")
    await registry.aclose()

    assert seen == ["https://online.turfinfo.api.pmu.fr/rest/client/61/programme/15072025"]
    assert "programme" in raw


def test_duplicate_registration_is_rejected() -> None:
    registry = AdapterRegistry()
    adapter = PmuHorseAdapter(client=None)  # type: ignore[arg-type]
    registry.register("horse", adapter)

    with pytest.raises(ValueError):
        registry.register("horse", adapter)
