from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from sports_hub.core.enums import FixtureStatusEnum
from sports_hub.ingestion.dates import parse_iso_datetime
from sports_hub.ingestion.providers.base.types import Fixture, HorseRaceExtras

QUINTE_MARKERS = ("multi", "quinte", "quinté")

DEFAULT_EMOJI = "🏇"

HIPPODROME_EMOJI: dict[str, str] = {
    "LSO": "🌊",
    "SSB": "🏔️",
    "LON": "🏛️",
    "CAE": "🌾",
    "BOR": "🍷",
    "DEA": "⭐",
    "MAR": "🏰",
    "LYO": "🦁",
    "NAN": "🏰",
    "TOU": "🌸",
}

RACE_STATUS_LABELS: dict[str, str] = {
    FixtureStatusEnum.NOT_STARTED.value: "Programmée",
    FixtureStatusEnum.LIVE.value: "En cours",
    FixtureStatusEnum.FINISHED.value: "Terminée",
    FixtureStatusEnum.CANCELLED.value: "Annulée",
}


def hippodrome_emoji(code: str | None) -> str:
    return HIPPODROME_EMOJI.get(code or "", DEFAULT_EMOJI)


def race_status_label(status: str | None) -> str | None:
    if status is None:
        return None
    return RACE_STATUS_LABELS.get(status, status)


def race_number_prefix(fixture_id: str) -> str:
    """Reunion part of a race id: `"R1-C3"` -> `"R1"`."""

    return fixture_id.split("-")[0]


def _reunion_sort_key(prefix: str) -> int:
    digits = prefix.lstrip("Rr")
    return int(digits) if digits.isdigit() else 0


@dataclass
class VenueSummary:
    id: str
    name: str
    reunion_number: str
    races_count: int = 0
    disciplines: set[str] = field(default_factory=set)
    special_races: list[str] = field(default_factory=list)
    weather: Any = None
    next_race_time: str | None = None

    @property
    def logo(self) -> str:
        return hippodrome_emoji(self.id)

    @property
    def display_name(self) -> str:
        return f"{self.reunion_number} {self.name.upper()}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "logo": self.logo,
            "reunionNumber": self.reunion_number,
            "racesCount": self.races_count,
            "disciplines": sorted(self.disciplines),
            "specialRaces": list(self.special_races),
            "weather": self.weather,
            "nextRaceTime": self.next_race_time,
            "displayName": self.display_name,
        }


def _has_quinte(extras: HorseRaceExtras) -> bool:
    for bet in extras.betting_types or []:
        bet_type = str(bet.get("type") or "").lower()
        if any(marker in bet_type for marker in QUINTE_MARKERS):
            return True
    return False


def group_races_by_venue(
    fixtures: Iterable[Fixture], *, now: datetime | None = None
) -> list[VenueSummary]:
    """Aggregate races into one summary per hippodrome, ordered by reunion number."""

    now = now or datetime.now(tz=UTC)
    venues: dict[str, VenueSummary] = {}

    for fixture in fixtures:
        venue = venues.get(fixture.league.id)
        extras = fixture.sport_specific
        if not isinstance(extras, HorseRaceExtras):
            extras = HorseRaceExtras()

        if venue is None:
            venue = VenueSummary(
                id=fixture.league.id,
                name=fixture.league.name,
                reunion_number=race_number_prefix(fixture.id),
                weather=extras.weather,
            )
            venues[fixture.league.id] = venue

        venue.races_count += 1
        if extras.discipline:
            venue.disciplines.add(extras.discipline)
        if _has_quinte(extras) and "Q+" not in venue.special_races:
            venue.special_races.append("Q+")

        start = parse_iso_datetime(fixture.date)
        if start is not None and start > now:
            current = parse_iso_datetime(venue.next_race_time)
            if current is None or start < current:
                venue.next_race_time = fixture.date

    return sorted(venues.values(), key=lambda v: _reunion_sort_key(v.reunion_number))


def _race_result(fixture: Fixture) -> dict[str, Any] | None:
    details = fixture.score.details or {}
    if not details.get("finishingOrder"):
        return None
    return {"finishing": details["finishingOrder"], "inquiry": details.get("inquiry")}


def format_venue_races(fixtures: list[Fixture], venue_id: str) -> dict[str, Any]:
    """Race card for one hippodrome: venue header plus its races by course number."""

    if not fixtures:
        raise ValueError(f"No races for venue {venue_id}")

    first = fixtures[0]
    first_extras = first.sport_specific
    if not isinstance(first_extras, HorseRaceExtras):
        first_extras = None
    venue = first.venue or {}

    races = []
    for fixture in fixtures:
        extras = fixture.sport_specific
        if not isinstance(extras, HorseRaceExtras):
            extras = HorseRaceExtras()
        races.append(
            {
                "id": fixture.id,
                "raceNumber": extras.course_number,
                "name": extras.course_name,
                "shortName": extras.course_name_short,
                "startTime": fixture.date,
                "discipline": extras.discipline,
                "distance": extras.distance,
                "track": extras.track,
                "status": race_status_label(fixture.status),
                "runners": extras.runners,
                "conditions": extras.conditions,
                "prize": extras.prize,
                "betting": [
                    {
                        "type": b.get("type"),
                        "stake": b.get("baseStake"),
                        "available": b.get("available"),
                    }
                    for b in extras.betting_types or []
                ],
                "result": _race_result(fixture),
                "duration": extras.race_duration,
            }
        )
    races.sort(key=lambda r: r["raceNumber"] if isinstance(r["raceNumber"], int) else 0)

    return {
        "hippodrome": {
            "id": venue_id,
            "name": first.league.name,
            "fullName": venue.get("name"),
            "city": venue.get("city"),
            "emoji": hippodrome_emoji(venue_id),
        },
        "date": first.date.split("T")[0] if first.date else None,
        "weather": first_extras.weather if first_extras else None,
        "meetingType": first_extras.meeting_type if first_extras else None,
        "races": races,
        "totalRaces": len(races),
    }
