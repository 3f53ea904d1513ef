from __future__ import annotations

from typing import Any

import pytest


def football_item(
    fixture_id: int,
    *,
    country: str = "England",
    league: str = "Premier League",
    league_id: int = 39,
    status: str = "NS",
) -> dict[str, Any]:
    return {
        "fixture": {
            "id": fixture_id,
            "date": "2025-07-15T19:00:00+00:00",
            "referee": "M. Oliver",
            "status": {"short": status, "elapsed": None},
            "venue": {"id": 556, "name": "Old Trafford", "city": "Manchester"},
        },
        "league": {
            "id": league_id,
            "name": league,
            "country": country,
            "logo": f"https://media.api-sports.io/football/leagues/{league_id}.png",
            "flag": "https://media.api-sports.io/flags/gb.svg",
            "season": 2025,
            "round": "Regular Season - 1",
        },
        "teams": {
            "home": {"id": 33, "name": "Manchester United", "logo": "mu.png"},
            "away": {"id": 40, "name": "Liverpool", "logo": "liv.png"},
        },
        "goals": {"home": None, "away": None},
        "score": {
            "halftime": {"home": None, "away": None},
            "fulltime": {"home": None, "away": None},
            "extratime": {"home": None, "away": None},
            "penalty": {"home": None, "away": None},
        },
    }


@pytest.fixture
def football_payload() -> dict[str, Any]:
    return {
        "errors": [],
        "results": 3,
        "response": [
            football_item(123),
            football_item(124, league="Championship", league_id=40),
            football_item(
                200, country="United States", league="MLS", league_id=253, status="2H"
            ),
        ],
    }


def pmu_course(
    reunion: int,
    course: int,
    *,
    start_ms: int = 1752588000000,
    paris: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    return {
        "numReunion": reunion,
        "numOrdre": course,
        "libelle": f"PRIX {reunion}-{course}",
        "libelleCourt": f"P{reunion}{course}",
        "heureDepart": start_ms,
        "timezoneOffset": 7200000,
        "discipline": "ATTELE",
        "distance": 2700,
        "corde": "CORDE_GAUCHE",
        "nombreDeclaresPartants": 12,
        "categorieStatut": "A_PARTIR",
        "montantPrix": 50000,
        "paris": (
            paris
            if paris is not None
            else [{"typePari": "E_SIMPLE_PLACE", "miseBase": 150, "enVente": True}]
        ),
    }


@pytest.fixture
def pmu_programme() -> dict[str, Any]:
    return {
        "programme": {
            "date": 1752530400000,
            "reunions": [
                {
                    "numOfficiel": 2,
                    "nature": "DIURNE",
                    "hippodrome": {
                        "code": "ENG",
                        "libelleCourt": "ENGHIEN",
                        "libelleLong": "HIPPODROME D'ENGHIEN SOISY",
                    },
                    "pays": {"code": "FRA", "libelle": "FRANCE"},
                    "courses": [pmu_course(2, 1), pmu_course(2, 2)],
                },
                {
                    "numOfficiel": 1,
                    "nature": "DIURNE",
                    "hippodrome": {
                        "code": "VIN",
                        "libelleCourt": "VINCENNES",
                        "libelleLong": "HIPPODROME DE PARIS-VINCENNES",
                    },
                    "pays": {"code": "FRA", "libelle": "FRANCE"},
                    "meteo": {"temperature": 21, "forceVent": 10, "directionVent": "NO"},
                    "courses": [
                        pmu_course(
                            1,
                            1,
                            paris=[{"typePari": "MULTI", "miseBase": 300, "enVente": True}],
                        )
                    ],
                },
            ],
        }
    }


def pmu_participant(
    number: int, *, name: str | None = None, status: str = "PARTANT"
) -> dict[str, Any]:
    return {
        "numPmu": number,
        "nom": name or f"HORSE {number}",
        "statut": status,
        "age": 5,
        "sexe": "MALES",
        "driver": "J. DOE",
        "entraineur": "A. TRAINER",
        "musique": "1a2a3a",
        "dernierRapportDirect": {"rapport": 4.5},
    }


@pytest.fixture
def pmu_participants() -> dict[str, Any]:
    return {"participants": [pmu_participant(n) for n in range(1, 15)]}


@pytest.fixture
def make_football_item():
    return football_item


@pytest.fixture
def make_pmu_participant():
    return pmu_participant
