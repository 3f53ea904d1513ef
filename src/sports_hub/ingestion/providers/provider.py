from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from sports_hub.core.config import Settings, SportConfig
from sports_hub.core.enums import SportEnum
from sports_hub.ingestion.providers.api_sports.adapters.baseball import ApiBaseballAdapter
from sports_hub.ingestion.providers.api_sports.adapters.basketball import ApiBasketballAdapter
from sports_hub.ingestion.providers.api_sports.adapters.football import ApiFootballAdapter
from sports_hub.ingestion.providers.api_sports.adapters.handball import ApiHandballAdapter
from sports_hub.ingestion.providers.api_sports.adapters.hockey import ApiHockeyAdapter
from sports_hub.ingestion.providers.api_sports.adapters.rugby import ApiRugbyAdapter
from sports_hub.ingestion.providers.api_sports.adapters.volleyball import ApiVolleyballAdapter
from sports_hub.ingestion.providers.api_sports.client import ApiSportsClient
from sports_hub.ingestion.providers.base.adapter import SportAdapter
from sports_hub.ingestion.providers.base.client import BaseHttpClient
from sports_hub.ingestion.providers.base.registry import AdapterRegistry
from sports_hub.ingestion.providers.pmu.adapter import PmuHorseAdapter
from sports_hub.ingestion.providers.pmu.client import PmuClient
from sports_hub.ingestion.providers.tennis.adapter import TennisAdapter
from sports_hub.ingestion.providers.tennis.client import TennisApiClient

logger = logging.getLogger(__name__)

API_SPORTS_ADAPTERS: dict[str, Callable[..., SportAdapter]] = {
    SportEnum.FOOTBALL.value: ApiFootballAdapter,
    SportEnum.BASKETBALL.value: ApiBasketballAdapter,
    SportEnum.BASEBALL.value: ApiBaseballAdapter,
    SportEnum.HOCKEY.value: ApiHockeyAdapter,
    SportEnum.RUGBY.value: ApiRugbyAdapter,
    SportEnum.HANDBALL.value: ApiHandballAdapter,
    SportEnum.VOLLEYBALL.value: ApiVolleyballAdapter,
}


def build_default_registry(
    configs: dict[str, SportConfig],
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AdapterRegistry:
    """
    Wire one adapter per configured sport.

    RapidAPI sports without an API key are left out of the registry, so
    asking for them fails like any unknown sport. `transport` is handed to
    every HTTP client (tests use `httpx.MockTransport`).
    """

    registry = AdapterRegistry()

    def make_http(config: SportConfig) -> BaseHttpClient:
        return registry.own(
            BaseHttpClient(
                base_url=config.base_url,
                timeout_s=settings.http_timeout_s,
                connect_timeout_s=settings.http_connect_timeout_s,
                transport=transport,
            )
        )

    for sport_id, config in configs.items():
        if sport_id == SportEnum.HORSE.value:
            adapter: SportAdapter = PmuHorseAdapter(
                client=PmuClient(http=make_http(config)), source=config.source
            )
        elif not config.api_key:
            logger.warning("No API key configured for %s; sport disabled", sport_id)
            continue
        elif sport_id == SportEnum.TENNIS.value:
            adapter = TennisAdapter(
                client=TennisApiClient(
                    http=make_http(config), api_key=config.api_key, host=config.host
                ),
                source=config.source,
            )
        elif sport_id in API_SPORTS_ADAPTERS:
            client = ApiSportsClient(
                http=make_http(config), api_key=config.api_key, host=config.host
            )
            adapter = API_SPORTS_ADAPTERS[sport_id](client=client, source=config.source)
        else:
            logger.warning("No adapter for configured sport %s", sport_id)
            continue

        registry.register(sport_id, adapter)

    return registry
