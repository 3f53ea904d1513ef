from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sports_hub.core.enums import SportEnum, map_status
from sports_hub.ingestion.providers.api_sports.client import ApiSportsClient
from sports_hub.ingestion.providers.api_sports.normalize import (
    API_SPORTS_STATUS,
    country_of,
    home_away,
    league_of,
    normalize_items,
    teams_of,
)
from sports_hub.ingestion.providers.base.indexes import IndexBuilder
from sports_hub.ingestion.providers.base.types import (
    Fixture,
    FootballExtras,
    Json,
    Score,
    Snapshot,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiFootballAdapter:
    """
    API-Football (RapidAPI v3) adapter.

    Unlike the other api-sports feeds, match data is nested under `fixture`,
    goals and per-period scores are split, and the country is a plain string
    on `league`.
    """

    client: ApiSportsClient
    sport: str = SportEnum.FOOTBALL.value
    source: str = "api-football"

    async def fetch_fixtures(self, date: str) -> Json:
        logger.info("Fetching football fixtures for %s", date)
        return await self.client.get("/fixtures", params={"date": date})

    async def normalize(self, raw: Json, date: str) -> Snapshot:
        return normalize_items(
            raw, date, sport=self.sport, source=self.source, to_fixture=self._to_fixture
        )

    def _to_fixture(self, item: dict[str, Any], indexes: IndexBuilder) -> Fixture:
        fixture = item["fixture"]
        league = item["league"]
        status = fixture.get("status") or {}
        score = item.get("score") or {}
        goals = item.get("goals") or {}

        country_name, _ = country_of(league.get("country"))
        flag = league.get("flag")
        country_id = indexes.add(country_name, flag, league.get("name"))

        return Fixture(
            id=str(fixture["id"]),
            date=fixture.get("date"),
            league=league_of(item, country_name=country_name, country_id=country_id, flag=flag),
            status=map_status(status.get("short"), API_SPORTS_STATUS),
            teams=teams_of(item),
            venue=fixture.get("venue"),
            score=Score(
                home=goals.get("home"),
                away=goals.get("away"),
                details={
                    "halftime": home_away(score.get("halftime")),
                    "fulltime": home_away(score.get("fulltime")),
                    "extratime": home_away(score.get("extratime")),
                    "penalty": home_away(score.get("penalty")),
                },
            ),
            sport_specific=FootballExtras(
                elapsed=status.get("elapsed"),
                referee=fixture.get("referee"),
                round=league.get("round"),
                season=league.get("season"),
            ),
        )
