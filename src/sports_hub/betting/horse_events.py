from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from math import comb
from typing import Any

from sports_hub.core.enums import BetEventTypeEnum
from sports_hub.ingestion.providers.pmu.participants import Participant

Json = dict[str, Any]

SIMPLE_PLACE_STAKE = 1.50
DEUX_SUR_QUATRE_STAKE = 3.00
QUINTE_STAKE = 2.00

DEUX_SUR_QUATRE_MIN_RUNNERS = 10
QUINTE_MIN_RUNNERS = 8
QUINTE_SIZE = 5
QUINTE_BASE_MIN_BASES = 3
QUINTE_ELARGI_MIN_RUNNERS = 5

CATEGORY = "horse_racing"

_number_re = re.compile(r"^\d+$")
_deux_sur_quatre_re = re.compile(r"^(?P<base>[^xX]*)[xX](?P<associates>.*)$")
_quinte_base_re = re.compile(r"^(?P<bases>.*)xx$", re.IGNORECASE)

MIN_RUNNERS: dict[BetEventTypeEnum, tuple[int, str]] = {
    BetEventTypeEnum.DEUX_SUR_QUATRE_BASE: (
        DEUX_SUR_QUATRE_MIN_RUNNERS,
        "2 sur 4 en Base nécessite au moins 10 partants",
    ),
    BetEventTypeEnum.QUINTE_BASE: (
        QUINTE_MIN_RUNNERS,
        "Quinté en Base nécessite au moins 8 partants",
    ),
    BetEventTypeEnum.QUINTE_ELARGI: (
        QUINTE_MIN_RUNNERS,
        "Quinté Élargi nécessite au moins 8 partants",
    ),
}


class InvalidBetFormula(ValueError):
    """User input that does not describe a valid bet for this race."""

    status_code = 400

    def __init__(self, event_type: str, token: str | None, message: str) -> None:
        super().__init__(message)
        self.event_type = event_type
        self.token = token
        self.message = message


def paid_places(total_runners: int) -> int:
    return 3 if total_runners >= QUINTE_MIN_RUNNERS else 2


# -----------------------------
# Event catalogue
# -----------------------------


@dataclass(frozen=True)
class AvailableEvent:
    type: BetEventTypeEnum
    label: Json
    category: str
    description: Json
    selection_mode: str
    available: bool
    stake_unit: float
    unavailable_reason: str | None = None
    format_example: str | None = None
    paid_places: int | None = None
    selectable_horses: tuple[int, ...] = ()

    def to_dict(self) -> Json:
        rules: Json = {"stakeUnit": self.stake_unit}
        if self.paid_places is not None:
            rules["paidPlaces"] = self.paid_places
        if self.format_example is not None:
            rules["formatExample"] = self.format_example
        return {
            "id": self.type.value,
            "type": self.type.value,
            "label": dict(self.label),
            "category": self.category,
            "description": dict(self.description),
            "selectionMode": self.selection_mode,
            "available": self.available,
            "unavailableReason": self.unavailable_reason,
            "selectableHorses": list(self.selectable_horses),
            "pmuRules": rules,
        }


def _gated(min_runners: int, total_runners: int) -> tuple[bool, str | None]:
    if total_runners >= min_runners:
        return True, None
    return False, f"Nécessite au moins {min_runners} partants"


def generate_horse_events(
    total_runners: int, participants: Sequence[Participant] = ()
) -> list[AvailableEvent]:
    """
    The four PMU bet types, each flagged available or not for this field size.

    Simple placé is always offered; 2 sur 4 needs 10 starters; both quinté
    variants need 8.
    """
    deux_ok, deux_reason = _gated(DEUX_SUR_QUATRE_MIN_RUNNERS, total_runners)
    quinte_ok, quinte_reason = _gated(QUINTE_MIN_RUNNERS, total_runners)

    return [
        AvailableEvent(
            type=BetEventTypeEnum.SIMPLE_PLACE,
            label={"fr": "Simple Placé", "en": "Show Bet"},
            category="placement",
            description={
                "fr": "Sélectionnez un cheval qui finira placé",
                "en": "Select a horse that will finish in the places",
            },
            selection_mode="horse_selection",
            available=True,
            stake_unit=SIMPLE_PLACE_STAKE,
            paid_places=paid_places(total_runners),
            selectable_horses=tuple(p.number for p in participants),
        ),
        AvailableEvent(
            type=BetEventTypeEnum.DEUX_SUR_QUATRE_BASE,
            label={"fr": "2 sur 4 en Base", "en": "2 out of 4 with Base"},
            category="combination",
            description={
                "fr": "Saisissez votre formule (ex: 14x 5-9)",
                "en": "Enter your formula (ex: 14x 5-9)",
            },
            selection_mode="user_input",
            available=deux_ok,
            unavailable_reason=deux_reason,
            stake_unit=DEUX_SUR_QUATRE_STAKE,
            format_example="14x 5-9",
        ),
        AvailableEvent(
            type=BetEventTypeEnum.QUINTE_BASE,
            label={"fr": "Quinté en Base", "en": "Quinté with Base"},
            category="combination",
            description={
                "fr": "Saisissez votre formule (ex: 14-5-9xx)",
                "en": "Enter your formula (ex: 14-5-9xx)",
            },
            selection_mode="user_input",
            available=quinte_ok,
            unavailable_reason=quinte_reason,
            stake_unit=QUINTE_STAKE,
            format_example="14-5-9xx",
        ),
        AvailableEvent(
            type=BetEventTypeEnum.QUINTE_ELARGI,
            label={"fr": "Quinté Élargi", "en": "Quinté Extended"},
            category="combination",
            description={
                "fr": "Saisissez vos chevaux (ex: 9-5-3-7-14-15-4-10)",
                "en": "Enter your horses (ex: 9-5-3-7-14-15-4-10)",
            },
            selection_mode="user_input",
            available=quinte_ok,
            unavailable_reason=quinte_reason,
            stake_unit=QUINTE_STAKE,
            format_example="9-5-3-7-14-15-4-10",
        ),
    ]


# -----------------------------
# Built events
# -----------------------------


def _text(fr: str, en: str) -> Json:
    return {"fr": fr, "en": en, "current": fr}


@dataclass(frozen=True)
class PmuCompliance:
    stake_unit: float
    combination_count: int
    board_lines: tuple[str | None, str | None] = (None, None)

    @property
    def total_cost(self) -> float:
        return round(self.stake_unit * self.combination_count, 2)

    def to_dict(self) -> Json:
        return {
            "stakeUnit": self.stake_unit,
            "combinationCount": self.combination_count,
            "totalCost": self.total_cost,
            "pmuRules": True,
            "boardDisplay": {"line1": self.board_lines[0], "line2": self.board_lines[1]},
        }


@dataclass(frozen=True)
class BetEvent:
    """An immutable, priced bet slip for one race. Never persisted."""

    id: str
    event_type: BetEventTypeEnum
    label: Json
    description: Json
    expression: str
    pmu_compliant: PmuCompliance
    horse_specific: Json = field(default_factory=dict)
    category: str = CATEGORY
    position: int = 1
    priority: str = "high"

    def to_dict(self) -> Json:
        return {
            "id": self.id,
            "eventType": self.event_type.value,
            "position": self.position,
            "priority": self.priority,
            "label": dict(self.label),
            "expression": self.expression,
            "category": self.category,
            "description": dict(self.description),
            "pmuCompliant": self.pmu_compliant.to_dict(),
            "horseSpecific": _jsonable(self.horse_specific),
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_jsonable(v) for v in value]
    return value


# -----------------------------
# Formula parsing
# -----------------------------


def _parse_numbers(event_type: BetEventTypeEnum, text: str, example: str) -> tuple[int, ...]:
    """`"5-9-12"` -> `(5, 9, 12)`; any non-numeric token is rejected as-is."""

    numbers: list[int] = []
    for token in text.split("-"):
        token = token.strip()
        if not _number_re.match(token):
            raise InvalidBetFormula(
                event_type.value,
                token,
                f"Format invalide ({token!r}). Utilisez le format: {example}",
            )
        numbers.append(int(token))
    return tuple(numbers)


def _require_unique(event_type: BetEventTypeEnum, numbers: Sequence[int]) -> None:
    seen: set[int] = set()
    for n in numbers:
        if n in seen:
            raise InvalidBetFormula(
                event_type.value, str(n), f"Cheval n°{n} sélectionné deux fois"
            )
        seen.add(n)


def _require_runners(
    event_type: BetEventTypeEnum, numbers: Sequence[int], valid: Sequence[int]
) -> None:
    valid_set = set(valid)
    invalid = [n for n in numbers if n not in valid_set]
    if invalid:
        raise InvalidBetFormula(
            event_type.value,
            str(invalid[0]),
            f"Numéros de chevaux invalides: {', '.join(map(str, invalid))}. "
            f"Numéros valides: {', '.join(map(str, sorted(valid_set)))}",
        )


def _require_input(event_type: BetEventTypeEnum, user_input: str | None, example: str) -> str:
    if not isinstance(user_input, str) or not user_input.strip():
        raise InvalidBetFormula(
            event_type.value, None, f"Ce pari nécessite une saisie utilisateur (ex: {example})"
        )
    return user_input


def _joined(numbers: Sequence[int], sep: str = "_") -> str:
    return sep.join(str(n) for n in numbers)


# -----------------------------
# Builders
# -----------------------------


def build_simple_place_event(
    selected_horses: Sequence[int] | None,
    participants: Sequence[Participant],
    total_runners: int,
    race_id: str,
) -> BetEvent:
    event_type = BetEventTypeEnum.SIMPLE_PLACE
    selected = list(selected_horses or [])
    if len(selected) != 1:
        raise InvalidBetFormula(
            event_type.value,
            _joined(selected, "-") or None,
            "Simple Placé nécessite exactement 1 cheval sélectionné",
        )

    number = selected[0]
    runner = next((p for p in participants if p.number == number), None)
    if runner is None:
        raise InvalidBetFormula(
            event_type.value, str(number), f"Cheval n°{number} introuvable dans cette course"
        )

    places = paid_places(total_runners)
    return BetEvent(
        id=f"simple_place_{race_id}_{number}",
        event_type=event_type,
        label={
            "fr": f"Simple Placé - {runner.name} ({number})",
            "en": f"Show Bet - {runner.name} ({number})",
            "current": f"Simple Placé - {runner.name} ({number})",
        },
        description=_text(
            f"Le cheval n°{number} ({runner.name}) finit dans les {places} premiers",
            f"Horse #{number} ({runner.name}) finishes in top {places}",
        ),
        expression=f"placement_{number}_top{places}",
        pmu_compliant=PmuCompliance(
            stake_unit=SIMPLE_PLACE_STAKE,
            combination_count=1,
            board_lines=(str(number), None),
        ),
        horse_specific={
            "raceId": race_id,
            "eventType": event_type.value,
            "selectedHorse": number,
            "selectedParticipant": {"number": runner.number, "name": runner.name},
            "totalRunners": total_runners,
            "paidPlaces": places,
        },
    )


def build_deux_sur_quatre_base_event(
    user_input: str | None,
    participants: Sequence[Participant],
    total_runners: int,
    race_id: str,
) -> BetEvent:
    """`"14x 5-9"`: base 14 paired with each associate, one combination per associate."""

    event_type = BetEventTypeEnum.DEUX_SUR_QUATRE_BASE
    example = "14x 5-9"
    user_input = _require_input(event_type, user_input, example)

    compact = re.sub(r"\s+", "", user_input)
    m = _deux_sur_quatre_re.match(compact)
    if not m or not _number_re.match(m.group("base")):
        token = m.group("base") if m else compact
        raise InvalidBetFormula(
            event_type.value, token, f"Format invalide. Utilisez le format: {example}"
        )

    base = int(m.group("base"))
    associates = _parse_numbers(event_type, m.group("associates"), example)
    _require_unique(event_type, associates)
    if base in associates:
        raise InvalidBetFormula(
            event_type.value, str(base), f"Le cheval de base n°{base} ne peut pas être associé"
        )
    _require_runners(event_type, (base, *associates), [p.number for p in participants])

    ordered = sorted(associates)
    combinations = tuple((base, a) for a in associates)

    return BetEvent(
        id=f"deux_sur_quatre_base_{race_id}_{base}_{_joined(ordered)}",
        event_type=event_type,
        label={
            "fr": f"2 sur 4 Base - {user_input}",
            "en": f"2 out of 4 Base - {user_input}",
            "current": f"2 sur 4 Base - {user_input}",
        },
        description=_text(
            f"Base {base} avec {_joined(associates, ', ')} - "
            f"{len(combinations)} combinaison(s)",
            f"Base {base} with {_joined(associates, ', ')} - "
            f"{len(combinations)} combination(s)",
        ),
        expression=f"deux_sur_quatre_base_{base}_{_joined(ordered)}",
        pmu_compliant=PmuCompliance(
            stake_unit=DEUX_SUR_QUATRE_STAKE,
            combination_count=len(combinations),
            board_lines=(f"{base}x", _joined(associates, "-")),
        ),
        horse_specific={
            "raceId": race_id,
            "eventType": event_type.value,
            "userInput": user_input,
            "baseHorse": base,
            "associatedHorses": associates,
            "combinations": combinations,
            "totalRunners": total_runners,
            "paidPlaces": 4,
        },
    )


def quinte_base_combinations(total_runners: int, bases: int) -> int:
    """Base horses complete with every remaining runner; five or more bases is one ticket."""

    if bases >= QUINTE_SIZE:
        return 1
    return comb(max(total_runners - bases, 0), QUINTE_SIZE - bases)


def build_quinte_base_event(
    user_input: str | None,
    participants: Sequence[Participant],
    total_runners: int,
    race_id: str,
) -> BetEvent:
    """`"14-5-9xx"`: at least three base horses plus the full remaining field."""

    event_type = BetEventTypeEnum.QUINTE_BASE
    example = "14-5-9xx"
    user_input = _require_input(event_type, user_input, example)

    compact = re.sub(r"\s+", "", user_input)
    m = _quinte_base_re.match(compact)
    if not m:
        raise InvalidBetFormula(
            event_type.value, compact, f"Format invalide. Utilisez le format: {example}"
        )

    bases = _parse_numbers(event_type, m.group("bases"), example)
    _require_unique(event_type, bases)
    _require_runners(event_type, bases, [p.number for p in participants])
    if len(bases) < QUINTE_BASE_MIN_BASES:
        raise InvalidBetFormula(
            event_type.value,
            compact,
            "Quinté en Base nécessite au moins 3 chevaux de base",
        )

    ordered = sorted(bases)
    return BetEvent(
        id=f"quinte_base_{race_id}_{_joined(ordered)}",
        event_type=event_type,
        label={
            "fr": f"Quinté Base - {user_input}",
            "en": f"Quinté Base - {user_input}",
            "current": f"Quinté Base - {user_input}",
        },
        description=_text(
            f"Quinté avec base {_joined(bases, ', ')} et champ total",
            f"Quinté with base {_joined(bases, ', ')} and full field",
        ),
        expression=f"quinte_base_{_joined(ordered)}",
        pmu_compliant=PmuCompliance(
            stake_unit=QUINTE_STAKE,
            combination_count=quinte_base_combinations(total_runners, len(bases)),
            board_lines=(_joined(bases, "-") + "xx", "CHAMP TOTAL"),
        ),
        horse_specific={
            "raceId": race_id,
            "eventType": event_type.value,
            "userInput": user_input,
            "baseHorses": bases,
            "fullField": True,
            "totalRunners": total_runners,
            "paidPlaces": QUINTE_SIZE,
        },
    )


def build_quinte_elargi_event(
    user_input: str | None,
    participants: Sequence[Participant],
    total_runners: int,
    race_id: str,
) -> BetEvent:
    event_type = BetEventTypeEnum.QUINTE_ELARGI
    example = "9-5-3-7-14-15-4-10"
    user_input = _require_input(event_type, user_input, example)

    selected = _parse_numbers(event_type, re.sub(r"\s+", "", user_input), example)
    _require_unique(event_type, selected)
    _require_runners(event_type, selected, [p.number for p in participants])
    if len(selected) < QUINTE_ELARGI_MIN_RUNNERS:
        raise InvalidBetFormula(
            event_type.value, user_input, "Quinté Élargi nécessite au moins 5 chevaux"
        )

    ordered = sorted(selected)
    return BetEvent(
        id=f"quinte_elargi_{race_id}_{_joined(ordered)}",
        event_type=event_type,
        label={
            "fr": f"Quinté Élargi - {user_input}",
            "en": f"Quinté Extended - {user_input}",
            "current": f"Quinté Élargi - {user_input}",
        },
        description=_text(
            f"Quinté élargi avec les chevaux {_joined(selected, ', ')}",
            f"Extended Quinté with horses {_joined(selected, ', ')}",
        ),
        expression=f"quinte_elargi_{_joined(ordered)}",
        pmu_compliant=PmuCompliance(
            stake_unit=QUINTE_STAKE,
            combination_count=comb(len(selected), QUINTE_SIZE),
            board_lines=(_joined(selected, "-"), None),
        ),
        horse_specific={
            "raceId": race_id,
            "eventType": event_type.value,
            "userInput": user_input,
            "selectedHorses": selected,
            "totalRunners": total_runners,
            "paidPlaces": QUINTE_SIZE,
        },
    )


def build_horse_event(
    event_type: str,
    selected_horses: Sequence[int] | None,
    user_input: str | None,
    participants: Sequence[Participant],
    total_runners: int,
    race_id: str,
) -> BetEvent:
    """Validate the bet type against the field size, then parse and price the selection."""

    try:
        kind = BetEventTypeEnum(event_type)
    except ValueError:
        supported = ", ".join(t.value for t in BetEventTypeEnum)
        raise InvalidBetFormula(
            str(event_type),
            str(event_type),
            f"Type d'événement non supporté: {event_type}. Types supportés: {supported}",
        ) from None

    gate = MIN_RUNNERS.get(kind)
    if gate is not None and total_runners < gate[0]:
        raise InvalidBetFormula(kind.value, None, gate[1])

    if kind is BetEventTypeEnum.SIMPLE_PLACE:
        return build_simple_place_event(selected_horses, participants, total_runners, race_id)
    if kind is BetEventTypeEnum.DEUX_SUR_QUATRE_BASE:
        return build_deux_sur_quatre_base_event(user_input, participants, total_runners, race_id)
    if kind is BetEventTypeEnum.QUINTE_BASE:
        return build_quinte_base_event(user_input, participants, total_runners, race_id)
    return build_quinte_elargi_event(user_input, participants, total_runners, race_id)
