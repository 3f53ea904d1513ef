from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sports_hub.core.enums import SportEnum
from sports_hub.ingestion.providers.api_sports.client import ApiSportsClient
from sports_hub.ingestion.providers.api_sports.normalize import game_fixture, normalize_items
from sports_hub.ingestion.providers.base.indexes import IndexBuilder
from sports_hub.ingestion.providers.base.types import BasketballExtras, Fixture, Json, Snapshot

logger = logging.getLogger(__name__)

_QUARTERS = ("quarter_1", "quarter_2", "quarter_3", "quarter_4")


def _quarters(side: dict[str, Any]) -> dict[str, Any]:
    out = {q: side.get(q) for q in _QUARTERS}
    out["overtime"] = side.get("over_time")
    return out


@dataclass(frozen=True)
class ApiBasketballAdapter:
    client: ApiSportsClient
    sport: str = SportEnum.BASKETBALL.value
    source: str = "api-basketball"

    async def fetch_fixtures(self, date: str) -> Json:
        logger.info("Fetching basketball games for %s", date)
        return await self.client.get("/games", params={"date": date})

    async def normalize(self, raw: Json, date: str) -> Snapshot:
        return normalize_items(
            raw, date, sport=self.sport, source=self.source, to_fixture=self._to_fixture
        )

    def _to_fixture(self, item: dict[str, Any], indexes: IndexBuilder) -> Fixture:
        scores = item.get("scores") or {}
        home = scores.get("home") or {}
        away = scores.get("away") or {}
        status = item.get("status") or {}

        return game_fixture(
            item,
            indexes,
            score_home=home.get("total"),
            score_away=away.get("total"),
            details={"home": _quarters(home), "away": _quarters(away)},
            extras=BasketballExtras(
                overtime={"home": home.get("over_time"), "away": away.get("over_time")},
                week=item.get("week"),
                timer=status.get("timer"),
            ),
        )
