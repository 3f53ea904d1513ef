from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from sports_hub.core.enums import FixtureStatusEnum, map_status
from sports_hub.core.text import flag_url
from sports_hub.ingestion.providers.base.adapter import require_list
from sports_hub.ingestion.providers.base.errors import ProviderMappingError
from sports_hub.ingestion.providers.base.indexes import IndexBuilder
from sports_hub.ingestion.providers.base.types import (
    Fixture,
    LeagueRef,
    Score,
    Snapshot,
    TeamRef,
    Teams,
)

ApiItem = dict[str, Any]

DEFAULT_COUNTRY = "World"

_LIVE_CODES = {
    "LIVE",
    "1H", "HT", "2H", "ET", "BT", "P",
    "Q1", "Q2", "Q3", "Q4", "OT",
    "P1", "P2", "P3", "PT",
    "S1", "S2", "S3", "S4", "S5",
    "IN1", "IN2", "IN3", "IN4", "IN5", "IN6", "IN7", "IN8", "IN9",
}  # fmt: skip

API_SPORTS_STATUS: dict[str, FixtureStatusEnum] = {
    "NS": FixtureStatusEnum.NOT_STARTED,
    "TBD": FixtureStatusEnum.NOT_STARTED,
    "FT": FixtureStatusEnum.FINISHED,
    "AET": FixtureStatusEnum.FINISHED,
    "PEN": FixtureStatusEnum.FINISHED,
    "AOT": FixtureStatusEnum.FINISHED,
    "AP": FixtureStatusEnum.FINISHED,
    "CANC": FixtureStatusEnum.CANCELLED,
    **{code: FixtureStatusEnum.LIVE for code in _LIVE_CODES},
}


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


def status_code(item: ApiItem) -> str | None:
    status = item.get("status")
    if isinstance(status, dict):
        return status.get("short")
    return None


def country_of(country: Any) -> tuple[str, str]:
    """(display name, flag url) of an api-sports `country` object, with a World fallback."""

    if isinstance(country, dict):
        name = country.get("name") or DEFAULT_COUNTRY
        return name, country.get("flag") or flag_url(country.get("code"))
    if isinstance(country, str) and country:
        return country, flag_url(None)
    return DEFAULT_COUNTRY, flag_url(None)


def teams_of(item: ApiItem) -> Teams:
    teams = item.get("teams") or {}
    return Teams(home=TeamRef.from_raw(teams.get("home")), away=TeamRef.from_raw(teams.get("away")))


def league_of(
    item: ApiItem,
    *,
    country_name: str,
    country_id: str,
    flag: str | None,
) -> LeagueRef:
    league = item.get("league") or {}
    return LeagueRef(
        id=str(league["id"]),
        name=league["name"],
        country=country_name,
        country_id=country_id,
        logo=league.get("logo"),
        flag=flag,
        season=league.get("season"),
    )


def home_away(payload: Any) -> dict[str, Any]:
    payload = payload if isinstance(payload, dict) else {}
    return {"home": payload.get("home"), "away": payload.get("away")}


def normalize_items(
    raw: ApiItem,
    date: str,
    *,
    sport: str,
    source: str,
    to_fixture: Callable[[ApiItem, IndexBuilder], Fixture],
) -> Snapshot:
    """
    Shared api-sports normalization loop.

    `to_fixture` maps one raw item and registers its country/league on the
    index builder; the loop owns error wrapping and snapshot assembly.
    """
    items = require_list(raw, "response", sport=sport)

    indexes = IndexBuilder()
    matches: list[Fixture] = []
    for item in items:
        try:
            matches.append(to_fixture(item, indexes))
        except (KeyError, TypeError, AttributeError, ValueError, OverflowError) as e:
            raise ProviderMappingError(
                f"Unexpected {sport} item shape: {e!r}",
                {"sport": sport, "item_id": _item_id(item)},
            ) from e

    return Snapshot(
        sport=sport,
        date=date,
        source=source,
        matches=tuple(matches),
        indexes=indexes.build(),
        last_updated=datetime.now(tz=UTC).isoformat(),
    )


def _item_id(item: ApiItem) -> str | None:
    if "fixture" in item and isinstance(item["fixture"], dict):
        return _opt_str(item["fixture"].get("id"))
    return _opt_str(item.get("id"))


def game_fixture(
    item: ApiItem,
    indexes: IndexBuilder,
    *,
    score_home: Any,
    score_away: Any,
    details: dict[str, Any],
    extras: Any,
) -> Fixture:
    """Fixture for the `/games` family (everything except football)."""

    country_name, flag = country_of(item.get("country"))
    league = item.get("league") or {}
    country_id = indexes.add(country_name, flag, league.get("name"))

    return Fixture(
        id=str(item["id"]),
        date=item.get("date"),
        league=league_of(item, country_name=country_name, country_id=country_id, flag=flag),
        status=map_status(status_code(item), API_SPORTS_STATUS),
        teams=teams_of(item),
        venue=None,
        score=Score(home=score_home, away=score_away, details=details),
        sport_specific=extras,
    )
