from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from sports_hub.core.enums import FixtureStatusEnum, SportEnum, map_status
from sports_hub.ingestion.dates import epoch_ms_to_iso
from sports_hub.ingestion.providers.base.errors import ProviderMappingError
from sports_hub.ingestion.providers.base.indexes import IndexBuilder
from sports_hub.ingestion.providers.base.types import (
    Fixture,
    HorseRaceExtras,
    Json,
    LeagueRef,
    Score,
    Snapshot,
)

from .client import PmuClient
from .participants import RaceParticipants, normalize_participants

logger = logging.getLogger(__name__)

# `categorieStatut` is the coarse race state; `statut` is used when it is absent.
PMU_STATUS: dict[str, FixtureStatusEnum] = {
    "A_PARTIR": FixtureStatusEnum.NOT_STARTED,
    "PROGRAMMEE": FixtureStatusEnum.NOT_STARTED,
    "EN_COURS": FixtureStatusEnum.LIVE,
    "COURSE_EN_COURS": FixtureStatusEnum.LIVE,
    "ARRIVEE": FixtureStatusEnum.FINISHED,
    "FIN_COURSE": FixtureStatusEnum.FINISHED,
    "ARRIVEE_DEFINITIVE": FixtureStatusEnum.FINISHED,
    "ANNULEE": FixtureStatusEnum.CANCELLED,
    "COURSE_ANNULEE": FixtureStatusEnum.CANCELLED,
}


def race_fixture_id(reunion: Any, course: Any) -> str:
    return f"R{reunion}-C{course}"


def _cents(value: Any) -> float | None:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return value / 100.0
    return None


def _reunions(raw: Json) -> list[Json]:
    programme = raw.get("programme")
    if isinstance(programme, dict):
        reunions = programme.get("reunions")
    else:
        reunions = raw.get("reunions")
    if not isinstance(reunions, list):
        raise ProviderMappingError(
            "Invalid horse payload: missing programme/reunions", {"sport": "horse"}
        )
    return [r for r in reunions if isinstance(r, dict)]


def _bet_types(course: Json) -> list[Json]:
    out: list[Json] = []
    for pari in course.get("paris") or []:
        if not isinstance(pari, dict):
            continue
        out.append(
            {
                "type": pari.get("typePari") or pari.get("codePari"),
                "baseStake": _cents(pari.get("miseBase")),
                "available": bool(pari.get("enVente", False)),
            }
        )
    return out


def _weather(reunion: Json) -> Json | None:
    meteo = reunion.get("meteo")
    if not isinstance(meteo, dict):
        return None
    return {
        "temperature": meteo.get("temperature"),
        "wind": meteo.get("forceVent"),
        "windDirection": meteo.get("directionVent"),
        "sky": meteo.get("nebulositeLibelleCourt"),
    }


@dataclass
class PmuHorseAdapter:
    """
    PMU turfinfo adapter.

    Races are the fixtures: one per course, grouped under the hippodrome
    (league) of their reunion. Participants are fetched per race and are not
    part of the snapshot.
    """

    client: PmuClient
    sport: str = SportEnum.HORSE.value
    source: str = "pmu-turfinfo"

    async def fetch_fixtures(self, date: str) -> Json:
        logger.info("Fetching PMU programme for %s", date)
        return await self.client.get_programme(date)

    async def fetch_participants(self, date: str, race_id: str) -> Json:
        logger.info("Fetching PMU participants for %s on %s", race_id, date)
        raw = await self.client.get_participants(date, race_id)
        raw.setdefault("raceId", race_id)
        return raw

    def normalize_participants(self, raw: Json) -> RaceParticipants:
        race_id = raw.get("raceId")
        return normalize_participants(raw, race_id=race_id if isinstance(race_id, str) else None)

    async def normalize(self, raw: Json, date: str) -> Snapshot:
        indexes = IndexBuilder()
        fixtures: list[Fixture] = []

        for reunion in _reunions(raw):
            for course in reunion.get("courses") or []:
                if not isinstance(course, dict):
                    continue
                try:
                    fixtures.append(self._to_fixture(reunion, course, indexes))
                except (KeyError, TypeError, AttributeError, ValueError, OverflowError) as e:
                    raise ProviderMappingError(
                        f"Unexpected horse race shape: {e!r}",
                        {
                            "sport": self.sport,
                            "reunion": reunion.get("numOfficiel"),
                            "course": course.get("numOrdre"),
                        },
                    ) from e

        return Snapshot(
            sport=self.sport,
            date=date,
            source=self.source,
            matches=tuple(fixtures),
            indexes=indexes.build(),
            last_updated=datetime.now(tz=UTC).isoformat(),
        )

    def _to_fixture(self, reunion: Json, course: Json, indexes: IndexBuilder) -> Fixture:
        hippodrome = reunion["hippodrome"]
        pays = reunion.get("pays") or {}
        country_name = pays.get("libelle") or "FRANCE"
        venue_code = hippodrome["code"]
        venue_name = hippodrome.get("libelleCourt") or venue_code
        country_id = indexes.add(country_name, None, venue_name)

        reunion_number = course.get("numReunion") or reunion["numOfficiel"]
        course_number = course["numOrdre"]
        status = course.get("categorieStatut") or course.get("statut")
        arrival = course.get("ordreArrivee")
        # An arrival that is not yet definitive is still under stewards' inquiry.
        inquiry = bool(arrival) and course.get("arriveeDefinitive") is False

        return Fixture(
            id=race_fixture_id(reunion_number, course_number),
            date=epoch_ms_to_iso(
                course.get("heureDepart"), tz_offset_ms=course.get("timezoneOffset")
            ),
            league=LeagueRef(
                id=str(venue_code),
                name=venue_name,
                country=country_name,
                country_id=country_id,
                logo=None,
                flag=None,
            ),
            status=map_status(status, PMU_STATUS),
            teams=None,
            venue={
                "name": hippodrome.get("libelleLong") or venue_name,
                "city": hippodrome.get("libelleCourt"),
                "country": country_name,
            },
            score=Score(
                details={
                    "finishingOrder": arrival,
                    "inquiry": inquiry,
                }
            ),
            sport_specific=HorseRaceExtras(
                reunion_number=f"R{reunion_number}",
                course_number=course_number,
                course_name=course.get("libelle"),
                course_name_short=course.get("libelleCourt"),
                discipline=course.get("discipline"),
                distance=course.get("distance"),
                track=course.get("corde"),
                runners=course.get("nombreDeclaresPartants"),
                conditions=course.get("conditions"),
                prize={
                    "total": course.get("montantPrix"),
                    "first": course.get("montantOffert1er"),
                    "second": course.get("montantOffert2eme") or course.get("montantOffert2e"),
                    "third": course.get("montantOffert3eme") or course.get("montantOffert3e"),
                },
                betting_types=_bet_types(course),
                weather=_weather(reunion),
                meeting_type=reunion.get("nature"),
                race_duration=course.get("dureeCourse"),
            ),
        )
