from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sports_hub.core.enums import SportEnum
from sports_hub.ingestion.providers.api_sports.client import ApiSportsClient
from sports_hub.ingestion.providers.api_sports.normalize import game_fixture, normalize_items
from sports_hub.ingestion.providers.base.indexes import IndexBuilder
from sports_hub.ingestion.providers.base.types import BaseballExtras, Fixture, Json, Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiBaseballAdapter:
    client: ApiSportsClient
    sport: str = SportEnum.BASEBALL.value
    source: str = "api-baseball"

    async def fetch_fixtures(self, date: str) -> Json:
        logger.info("Fetching baseball games for %s", date)
        return await self.client.get("/games", params={"date": date})

    async def normalize(self, raw: Json, date: str) -> Snapshot:
        return normalize_items(
            raw, date, sport=self.sport, source=self.source, to_fixture=self._to_fixture
        )

    def _to_fixture(self, item: dict[str, Any], indexes: IndexBuilder) -> Fixture:
        scores = item.get("scores") or {}
        home = scores.get("home") or {}
        away = scores.get("away") or {}

        return game_fixture(
            item,
            indexes,
            score_home=home.get("total"),
            score_away=away.get("total"),
            details={
                "home": {k: home.get(k) for k in ("hits", "errors", "innings")},
                "away": {k: away.get(k) for k in ("hits", "errors", "innings")},
            },
            extras=BaseballExtras(
                time=item.get("time"),
                timestamp=item.get("timestamp"),
                timezone=item.get("timezone"),
                week=item.get("week"),
                innings={"home": home.get("innings"), "away": away.get("innings")},
            ),
        )
