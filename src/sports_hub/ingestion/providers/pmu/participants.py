from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sports_hub.ingestion.providers.base.adapter import require_list
from sports_hub.ingestion.providers.base.errors import ProviderMappingError

Json = dict[str, Any]

NON_RUNNER_STATUS = "NON_PARTANT"


@dataclass(frozen=True)
class Participant:
    """One runner. Everything beyond number and name is passed through untouched."""

    number: int
    name: str
    race_id: str | None = None
    attributes: Json = field(default_factory=dict)

    def to_dict(self) -> Json:
        return {
            "raceId": self.race_id,
            "number": self.number,
            "name": self.name,
            "attributes": self.attributes,
        }


@dataclass(frozen=True)
class RaceParticipants:
    total_runners: int
    participants: tuple[Participant, ...]
    non_runners: tuple[Participant, ...] = ()
    race_id: str | None = None

    def numbers(self) -> list[int]:
        return [p.number for p in self.participants]

    def to_dict(self) -> Json:
        return {
            "raceId": self.race_id,
            "totalRunners": self.total_runners,
            "participants": [p.to_dict() for p in self.participants],
            "nonRunners": [p.to_dict() for p in self.non_runners],
        }


def _rapport(value: Any) -> Any:
    return value.get("rapport") if isinstance(value, dict) else None


def _name(value: Any) -> Any:
    # driver/trainer are plain strings in most payloads, objects in a few.
    if isinstance(value, dict):
        return value.get("nom") or value.get("name")
    return value


def _attributes(raw: Json) -> Json:
    gains = raw.get("gainsParticipant")
    return {
        "status": raw.get("statut"),
        "age": raw.get("age"),
        "sex": raw.get("sexe"),
        "breed": raw.get("race"),
        "driver": _name(raw.get("driver") or raw.get("jockey")),
        "trainer": _name(raw.get("entraineur")),
        "owner": _name(raw.get("proprietaire")),
        "form": raw.get("musique"),
        "races": raw.get("nombreCourses"),
        "wins": raw.get("nombreVictoires"),
        "places": raw.get("nombrePlaces"),
        "earnings": gains.get("gainsCarriere") if isinstance(gains, dict) else None,
        "odds": _rapport(raw.get("dernierRapportDirect")),
        "referenceOdds": _rapport(raw.get("dernierRapportReference")),
        "weight": raw.get("handicapPoids"),
        "distance": raw.get("handicapDistance"),
        "blinkers": raw.get("oeilleres"),
        "shoeing": raw.get("deferre"),
    }


def normalize_participants(raw: Json, *, race_id: str | None = None) -> RaceParticipants:
    """
    Split declared runners into starters and scratched horses.

    `total_runners` counts starters only; it drives the bet-type gates.
    """
    items = require_list(raw, "participants", sport="horse")

    runners: list[Participant] = []
    scratched: list[Participant] = []
    seen: set[int] = set()

    for item in items:
        number = item.get("numPmu")
        if not isinstance(number, int) or isinstance(number, bool):
            raise ProviderMappingError(
                "Participant without a numeric runner number",
                {"race_id": race_id, "name": item.get("nom")},
            )
        if number in seen:
            raise ProviderMappingError(
                f"Duplicate runner number {number}", {"race_id": race_id}
            )
        seen.add(number)

        participant = Participant(
            number=number,
            name=str(item.get("nom") or f"#{number}"),
            race_id=race_id,
            attributes=_attributes(item),
        )
        if item.get("statut") == NON_RUNNER_STATUS:
            scratched.append(participant)
        else:
            runners.append(participant)

    runners.sort(key=lambda p: p.number)
    scratched.sort(key=lambda p: p.number)

    return RaceParticipants(
        total_runners=len(runners),
        participants=tuple(runners),
        non_runners=tuple(scratched),
        race_id=race_id,
    )
