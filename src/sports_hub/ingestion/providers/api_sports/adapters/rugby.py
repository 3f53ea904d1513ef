from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sports_hub.core.enums import SportEnum
from sports_hub.ingestion.providers.api_sports.client import ApiSportsClient
from sports_hub.ingestion.providers.api_sports.normalize import (
    game_fixture,
    home_away,
    normalize_items,
)
from sports_hub.ingestion.providers.base.indexes import IndexBuilder
from sports_hub.ingestion.providers.base.types import Fixture, Json, RugbyExtras, Snapshot

logger = logging.getLogger(__name__)

_PERIODS = ("first", "second", "overtime", "second_overtime")


@dataclass(frozen=True)
class ApiRugbyAdapter:
    client: ApiSportsClient
    sport: str = SportEnum.RUGBY.value
    source: str = "api-rugby"

    async def fetch_fixtures(self, date: str) -> Json:
        logger.info("Fetching rugby games for %s", date)
        return await self.client.get("/games", params={"date": date})

    async def normalize(self, raw: Json, date: str) -> Snapshot:
        return normalize_items(
            raw, date, sport=self.sport, source=self.source, to_fixture=self._to_fixture
        )

    def _to_fixture(self, item: dict[str, Any], indexes: IndexBuilder) -> Fixture:
        scores = item.get("scores") or {}
        periods = item.get("periods") or {}
        by_period = {p: home_away(periods.get(p)) for p in _PERIODS}

        return game_fixture(
            item,
            indexes,
            score_home=scores.get("home"),
            score_away=scores.get("away"),
            details={"periods": by_period},
            extras=RugbyExtras(
                week=item.get("week"),
                timestamp=item.get("timestamp"),
                periods=by_period,
            ),
        )
