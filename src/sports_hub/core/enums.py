from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class SportEnum(StrEnum):
    FOOTBALL = "football"
    BASKETBALL = "basketball"
    RUGBY = "rugby"
    HANDBALL = "handball"
    VOLLEYBALL = "volleyball"
    BASEBALL = "baseball"
    HOCKEY = "hockey"
    TENNIS = "tennis"
    HORSE = "horse"


class FixtureStatusEnum(StrEnum):
    NOT_STARTED = "NOT_STARTED"
    LIVE = "LIVE"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"


class BetEventTypeEnum(StrEnum):
    SIMPLE_PLACE = "simple_place"
    DEUX_SUR_QUATRE_BASE = "deux_sur_quatre_base"
    QUINTE_BASE = "quinte_base"
    QUINTE_ELARGI = "quinte_elargi"


def map_status(code: str | None, mapping: Mapping[str, FixtureStatusEnum]) -> str | None:
    """Canonical lifecycle status for a provider code.

    Unknown codes are returned unchanged so new provider states survive
    normalization instead of failing it.
    """
    if code is None:
        return None
    status = mapping.get(code.upper())
    if status is None:
        return code
    return status.value
