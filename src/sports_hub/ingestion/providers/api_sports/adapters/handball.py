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
from sports_hub.ingestion.providers.base.types import Fixture, HandballExtras, Json, Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiHandballAdapter:
    client: ApiSportsClient
    sport: str = SportEnum.HANDBALL.value
    source: str = "api-handball"

    async def fetch_fixtures(self, date: str) -> Json:
        logger.info("Fetching handball games for %s", date)
        return await self.client.get("/games", params={"date": date})

    async def normalize(self, raw: Json, date: str) -> Snapshot:
        return normalize_items(
            raw, date, sport=self.sport, source=self.source, to_fixture=self._to_fixture
        )

    def _to_fixture(self, item: dict[str, Any], indexes: IndexBuilder) -> Fixture:
        scores = item.get("scores") or {}
        periods = item.get("periods") or {}
        halves = {
            "first": home_away(periods.get("first")),
            "second": home_away(periods.get("second")),
        }

        return game_fixture(
            item,
            indexes,
            score_home=scores.get("home"),
            score_away=scores.get("away"),
            details={"periods": halves},
            extras=HandballExtras(
                week=item.get("week"),
                timestamp=item.get("timestamp"),
                periods=halves,
            ),
        )
