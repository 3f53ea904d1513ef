from __future__ import annotations

import httpx
import pytest

from sports_hub.core.enums import FixtureStatusEnum
from sports_hub.ingestion.providers.base.client import BaseHttpClient
from sports_hub.ingestion.providers.base.types import TennisExtras
from sports_hub.ingestion.providers.tennis.adapter import TennisAdapter
from sports_hub.ingestion.providers.tennis.client import TennisApiClient

HOST = "tennis-api-atp-wta-itf.p.rapidapi.com"


def _match(match_id: int, tournament_id: int) -> dict:
    return {
        "id": match_id,
        "date": "2025-07-15T10:00:00.000Z",
        "roundId": 5,
        "player1Id": 100 + match_id,
        "player2Id": 200 + match_id,
        "tournamentId": tournament_id,
        "player1": {"id": 100 + match_id, "name": "Carlos Alcaraz", "countryAcr": "ESP"},
        "player2": {"id": 200 + match_id, "name": "Jannik Sinner", "countryAcr": "ITA"},
    }


def _adapter(calls: list[str]) -> TennisAdapter:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        assert request.headers["x-rapidapi-host"] == HOST
        if request.url.path.endswith("/fixtures/2025-07-15"):
            assert request.url.params["pageSize"] == "1000"
            return httpx.Response(
                200,
                json={"data": [_match(1, 7), _match(2, 7), _match(3, 9)], "hasNextPage": False},
            )
        if request.url.path.endswith("/tournament/info/7"):
            return httpx.Response(
                200,
                json={
                    "data": {
                        "id": 7,
                        "name": "Wimbledon - London",
                        "coutry": {"acronym": "GBR", "name": "United Kingdom"},
                        "court": {"name": "Grass"},
                        "round": {"name": "Grand Slam"},
                    }
                },
            )
        return httpx.Response(500, json={})

    http = BaseHttpClient(base_url=f"https://{HOST}", transport=httpx.MockTransport(handler))
    return TennisAdapter(client=TennisApiClient(http=http, api_key="k", host=HOST))


@pytest.mark.asyncio
async def test_tennis_looks_up_each_tournament_once() -> None:
    calls: list[str] = []
    adapter = _adapter(calls)

    raw = await adapter.fetch_fixtures("2025-07-15")
    snapshot = await adapter.normalize(raw, "2025-07-15")

    info_calls = [c for c in calls if "/tournament/info/" in c]
    assert sorted(info_calls) == [
        "/tennis/v2/atp/tournament/info/7",
        "/tennis/v2/atp/tournament/info/9",
    ]
    assert snapshot.meta["pagination"]["uniqueTournaments"] == 2
    assert snapshot.meta["apiCallsUsed"] == 3

    wimbledon = snapshot.matches[0]
    assert wimbledon.status == FixtureStatusEnum.NOT_STARTED.value
    assert wimbledon.league.name == "Wimbledon - London"
    assert wimbledon.league.country_id == "united-kingdom"
    assert wimbledon.league.flag == "https://media.api-sports.io/flags/gb.svg"
    assert wimbledon.venue is not None and wimbledon.venue["city"] == "London"
    assert isinstance(wimbledon.sport_specific, TennisExtras)
    assert wimbledon.sport_specific.is_individual_sport is True

    await adapter.normalize(raw, "2025-07-15")
    assert len([c for c in calls if c.endswith("/info/7")]) == 1


@pytest.mark.asyncio
async def test_tennis_failed_tournament_lookup_uses_placeholder() -> None:
    adapter = _adapter([])
    raw = {"data": [_match(3, 9)]}

    snapshot = await adapter.normalize(raw, "2025-07-15")

    fixture = snapshot.matches[0]
    assert fixture.league.name == "Tournament 9"
    assert fixture.league.country == "International"
    assert fixture.league.flag == "https://media.api-sports.io/flags/xx.svg"
