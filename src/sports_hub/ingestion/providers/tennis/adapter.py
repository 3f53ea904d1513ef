from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sports_hub.core.enums import FixtureStatusEnum, SportEnum
from sports_hub.core.text import flag_url
from sports_hub.ingestion.dates import parse_iso_datetime
from sports_hub.ingestion.providers.base.adapter import require_list
from sports_hub.ingestion.providers.base.errors import ProviderError, ProviderMappingError
from sports_hub.ingestion.providers.base.indexes import IndexBuilder
from sports_hub.ingestion.providers.base.types import (
    Fixture,
    Json,
    LeagueRef,
    Score,
    Snapshot,
    TeamRef,
    Teams,
    TennisExtras,
)

from .client import TennisApiClient

logger = logging.getLogger(__name__)

INTERNATIONAL = "International"

COUNTRY_FLAG_CODES: dict[str, str] = {
    "france": "fr",
    "united states": "us",
    "united kingdom": "gb",
    "spain": "es",
    "italy": "it",
    "germany": "de",
    "australia": "au",
    "brazil": "br",
    "argentina": "ar",
    "russia": "ru",
    "canada": "ca",
    "switzerland": "ch",
    "netherlands": "nl",
    "belgium": "be",
    "austria": "at",
    "serbia": "rs",
    "croatia": "hr",
    "czech republic": "cz",
    "poland": "pl",
    "greece": "gr",
    "international": "xx",
}


def country_flag(country_name: str) -> str:
    return flag_url(COUNTRY_FLAG_CODES.get(country_name.lower()))


def _placeholder_tournament(tournament_id: Any) -> Json:
    return {
        "id": tournament_id,
        "name": f"Tournament {tournament_id}",
        "coutry": {"acronym": "INT", "name": INTERNATIONAL},
        "court": {"name": "Unknown"},
        "round": {"name": "Unknown"},
    }


def _tournament_country(info: Json) -> Json | None:
    # The provider spells this key "coutry"; accept the correct spelling too.
    country = info.get("coutry") or info.get("country")
    return country if isinstance(country, dict) else None


def _nested_name(info: Json, key: str) -> str | None:
    value = info.get(key)
    return value.get("name") if isinstance(value, dict) else None


def _player(match: Json, n: int) -> Json:
    player = match.get(f"player{n}")
    return player if isinstance(player, dict) else {}


@dataclass
class TennisAdapter:
    """
    ATP fixtures adapter.

    The fixtures feed carries only tournament ids, so normalization looks up
    each distinct tournament once and caches the result on the adapter.
    """

    client: TennisApiClient
    sport: str = SportEnum.TENNIS.value
    source: str = "tennis-api-atp-wta-itf"
    _tournaments: dict[Any, Json] = field(default_factory=dict, repr=False)

    async def fetch_fixtures(self, date: str) -> Json:
        logger.info("Fetching tennis fixtures for %s", date)
        return await self.client.get_fixtures(date)

    async def tournament_info(self, tournament_id: Any) -> Json:
        cached = self._tournaments.get(tournament_id)
        if cached is not None:
            return cached

        try:
            info = await self.client.get_tournament_info(tournament_id)
        except ProviderError as e:
            logger.warning("Failed to fetch tournament info for %s: %s", tournament_id, e)
            return _placeholder_tournament(tournament_id)

        if not info:
            return _placeholder_tournament(tournament_id)

        self._tournaments[tournament_id] = info
        return info

    async def normalize(self, raw: Json, date: str) -> Snapshot:
        matches = require_list(raw, "data", sport=self.sport)

        unique_ids = list(dict.fromkeys(m.get("tournamentId") for m in matches))
        logger.info(
            "Found %d unique tournaments in %d tennis matches", len(unique_ids), len(matches)
        )
        infos = {tid: await self.tournament_info(tid) for tid in unique_ids}

        indexes = IndexBuilder()
        fixtures: list[Fixture] = []
        for match in matches:
            try:
                fixtures.append(self._to_fixture(match, infos[match.get("tournamentId")], indexes))
            except (KeyError, TypeError, AttributeError, ValueError, OverflowError) as e:
                raise ProviderMappingError(
                    f"Unexpected tennis item shape: {e!r}",
                    {"sport": self.sport, "item_id": match.get("id")},
                ) from e

        return Snapshot(
            sport=self.sport,
            date=date,
            source=self.source,
            matches=tuple(fixtures),
            indexes=indexes.build(),
            last_updated=datetime.now(tz=UTC).isoformat(),
            meta={
                "pagination": {
                    "hasNextPage": bool(raw.get("hasNextPage", False)),
                    "totalMatches": len(fixtures),
                    "uniqueTournaments": len(unique_ids),
                },
                "apiCallsUsed": len(unique_ids) + 1,
            },
        )

    def _to_fixture(self, match: Json, info: Json, indexes: IndexBuilder) -> Fixture:
        tournament_id = match["tournamentId"]
        country = _tournament_country(info) or {}
        country_name = country.get("name") or INTERNATIONAL
        tournament_name = info.get("name") or f"Tournament {tournament_id}"
        flag = country_flag(country_name)
        country_id = indexes.add(country_name, flag, tournament_name)

        p1 = _player(match, 1)
        p2 = _player(match, 2)
        started = parse_iso_datetime(match.get("date"))
        name = info.get("name")

        return Fixture(
            id=str(match["id"]),
            date=match.get("date"),
            league=LeagueRef(
                id=str(tournament_id),
                name=tournament_name,
                country=country_name,
                country_id=country_id,
                logo=None,
                flag=flag,
                season=started.year if started else None,
            ),
            # No status in the fixtures feed.
            status=FixtureStatusEnum.NOT_STARTED.value,
            teams=Teams(
                home=TeamRef(
                    id=str(match["player1Id"]),
                    name=p1.get("name") or "Player 1",
                    country=p1.get("countryAcr") or "Unknown",
                ),
                away=TeamRef(
                    id=str(match["player2Id"]),
                    name=p2.get("name") or "Player 2",
                    country=p2.get("countryAcr") or "Unknown",
                ),
            ),
            venue={
                "name": name,
                "city": name.split(" - ")[1] if isinstance(name, str) and " - " in name else None,
                "country": country_name,
            },
            score=Score(
                details={
                    "sets": None,
                    "home": {f"set{i}": None for i in range(1, 6)},
                    "away": {f"set{i}": None for i in range(1, 6)},
                }
            ),
            sport_specific=TennisExtras(
                round_id=match.get("roundId"),
                tournament_id=tournament_id,
                tournament_info={
                    "name": name,
                    "courtType": _nested_name(info, "court"),
                    "roundType": _nested_name(info, "round"),
                    "country": _tournament_country(info),
                },
                player1={
                    "id": match.get("player1Id"),
                    "name": p1.get("name"),
                    "countryAcr": p1.get("countryAcr"),
                },
                player2={
                    "id": match.get("player2Id"),
                    "name": p2.get("name"),
                    "countryAcr": p2.get("countryAcr"),
                },
            ),
        )
