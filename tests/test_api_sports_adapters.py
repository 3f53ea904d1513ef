from __future__ import annotations

from typing import Any

import pytest

from sports_hub.core.enums import FixtureStatusEnum
from sports_hub.ingestion.providers.api_sports.adapters.basketball import ApiBasketballAdapter
from sports_hub.ingestion.providers.api_sports.adapters.football import ApiFootballAdapter
from sports_hub.ingestion.providers.api_sports.adapters.volleyball import ApiVolleyballAdapter
from sports_hub.ingestion.providers.base.errors import ProviderMappingError
from sports_hub.ingestion.providers.base.types import (
    BasketballExtras,
    FootballExtras,
    VolleyballExtras,
)


def _game(game_id: int, **overrides: Any) -> dict[str, Any]:
    item: dict[str, Any] = {
        "id": game_id,
        "date": "2025-07-15T18:00:00+00:00",
        "timestamp": 1752602400,
        "week": None,
        "status": {"short": "Q2", "timer": "7"},
        "league": {"id": 12, "name": "NBA", "season": "2024-2025", "logo": "nba.png"},
        "country": {"id": 5, "name": "USA", "code": "US", "flag": "us.svg"},
        "teams": {
            "home": {"id": 145, "name": "Boston Celtics", "logo": "bos.png"},
            "away": {"id": 147, "name": "Brooklyn Nets", "logo": "bkn.png"},
        },
        "scores": {
            "home": {"quarter_1": 30, "quarter_2": 12, "over_time": None, "total": 42},
            "away": {"quarter_1": 25, "quarter_2": 10, "over_time": None, "total": 35},
        },
    }
    item.update(overrides)
    return item


@pytest.mark.asyncio
async def test_football_normalize_builds_fixtures_and_extras(
    football_payload: dict[str, Any],
) -> None:
    adapter = ApiFootballAdapter(client=None)  # type: ignore[arg-type]
    snapshot = await adapter.normalize(football_payload, "2025-07-15")

    assert snapshot.sport == "football"
    assert snapshot.date == "2025-07-15"
    assert snapshot.source == "api-football"
    assert [m.id for m in snapshot.matches] == ["123", "124", "200"]

    first = snapshot.matches[0]
    assert first.league.country_id == "england"
    assert first.league.id == "39"
    assert first.status == FixtureStatusEnum.NOT_STARTED.value
    assert first.teams is not None and first.teams.home.id == "33"
    assert first.venue == {"id": 556, "name": "Old Trafford", "city": "Manchester"}
    assert set(first.score.details) == {"halftime", "fulltime", "extratime", "penalty"}
    assert isinstance(first.sport_specific, FootballExtras)
    assert first.sport_specific.referee == "M. Oliver"

    assert snapshot.matches[2].status == FixtureStatusEnum.LIVE.value
    assert snapshot.indexes.leagues["england"] == ("Championship", "Premier League")
    assert snapshot.indexes.leagues["united-states"] == ("MLS",)


@pytest.mark.asyncio
async def test_football_normalize_requires_response_field() -> None:
    adapter = ApiFootballAdapter(client=None)  # type: ignore[arg-type]
    with pytest.raises(ProviderMappingError):
        await adapter.normalize({"errors": []}, "2025-07-15")


@pytest.mark.asyncio
async def test_football_normalize_wraps_bad_items(make_football_item) -> None:
    item = make_football_item(1)
    del item["fixture"]["id"]
    adapter = ApiFootballAdapter(client=None)  # type: ignore[arg-type]
    with pytest.raises(ProviderMappingError):
        await adapter.normalize({"response": [item]}, "2025-07-15")


@pytest.mark.asyncio
async def test_basketball_normalize_quarters_and_country_fallback() -> None:
    raw = {"response": [_game(1), _game(2, country=None, status={"short": "XYZ"})]}
    adapter = ApiBasketballAdapter(client=None)  # type: ignore[arg-type]

    snapshot = await adapter.normalize(raw, "2025-07-15")

    live, unknown = snapshot.matches
    assert live.status == FixtureStatusEnum.LIVE.value
    assert live.score.home == 42 and live.score.away == 35
    assert live.score.details["home"]["quarter_1"] == 30
    assert isinstance(live.sport_specific, BasketballExtras)
    assert live.sport_specific.timer == "7"

    assert unknown.status == "XYZ"
    assert unknown.league.country == "World"
    assert unknown.league.country_id == "world"
    assert {c.id for c in snapshot.indexes.countries} == {"usa", "world"}


@pytest.mark.asyncio
async def test_volleyball_normalize_sets() -> None:
    game = _game(
        9,
        scores={"home": 3, "away": 1},
        periods={"first": {"home": 25, "away": 20}, "second": {"home": 23, "away": 25}},
        status={"short": "FT"},
    )
    adapter = ApiVolleyballAdapter(client=None)  # type: ignore[arg-type]

    snapshot = await adapter.normalize({"response": [game]}, "2025-07-15")

    fixture = snapshot.matches[0]
    assert fixture.status == FixtureStatusEnum.FINISHED.value
    assert fixture.score.details["sets"]["first"] == {"home": 25, "away": 20}
    assert fixture.score.details["sets"]["fifth"] == {"home": None, "away": None}
    assert isinstance(fixture.sport_specific, VolleyballExtras)
    assert fixture.sport_specific.sets_won == {"home": 3, "away": 1}
