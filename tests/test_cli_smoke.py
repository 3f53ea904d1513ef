from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from sports_hub.cli import common
from sports_hub.cli.app import app
from sports_hub.ingestion.providers.api_sports.adapters.football import ApiFootballAdapter
from sports_hub.ingestion.providers.provider import build_default_registry

runner = CliRunner()


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.setenv("RAPID_API_KEY", "test-key")
    return tmp_path


@pytest.fixture
def stored_football(data_dir: Path, football_payload: dict[str, Any]) -> Path:
    snapshot = asyncio.run(
        ApiFootballAdapter(client=None).normalize(  # type: ignore[arg-type]
            football_payload, "2025-07-15"
        )
    )
    path = data_dir / "football" / "2025-07-15.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps(snapshot.to_dict()), encoding="utf-8")
    return path


def test_cli_help_smoke() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "data" in result.stdout
    assert "horse" in result.stdout


def test_data_sports(data_dir: Path) -> None:
    result = runner.invoke(app, ["data", "sports"])

    assert result.exit_code == 0
    ids = [s["id"] for s in json.loads(result.stdout)]
    assert ids[0] == "football"
    assert ids[-1] == "horse"


def test_data_snapshot_served_from_store(stored_football: Path) -> None:
    result = runner.invoke(app, ["data", "snapshot", "football", "2025-07-15"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["sport"] == "football"
    assert [m["id"] for m in payload["matches"]] == ["123", "124", "200"]


def test_data_browse_commands(stored_football: Path) -> None:
    dates = runner.invoke(app, ["data", "dates", "football"])
    leagues = runner.invoke(app, ["data", "leagues", "football", "2025-07-15", "england"])
    fixture = runner.invoke(app, ["data", "fixture", "football", "124"])

    assert json.loads(dates.stdout) == ["2025-07-15"]
    assert [lg["id"] for lg in json.loads(leagues.stdout)] == ["40", "39"]
    assert json.loads(fixture.stdout)["league"]["name"] == "Championship"


def test_data_errors_map_to_exit_codes(stored_football: Path) -> None:
    bad_date = runner.invoke(app, ["data", "snapshot", "football", "2025-7-15"])
    unknown_sport = runner.invoke(app, ["data", "snapshot", "curling", "2025-07-15"])
    unknown_country = runner.invoke(app, ["data", "leagues", "football", "2025-07-15", "narnia"])

    assert bad_date.exit_code == common.EXIT_INVALID_INPUT
    assert unknown_sport.exit_code == common.EXIT_ERROR
    assert unknown_country.exit_code == common.EXIT_ERROR


def test_horse_build_event(
    data_dir: Path,
    monkeypatch: pytest.MonkeyPatch,
    pmu_participants: dict[str, Any],
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/programme/15072025/R1/C4/participants")
        return httpx.Response(200, json=pmu_participants)

    def registry_with_mock(configs, settings, *, transport=None):
        return build_default_registry(
            configs, settings, transport=httpx.MockTransport(handler)
        )

    monkeypatch.setattr(common, "build_default_registry", registry_with_mock)

    ok = runner.invoke(
        app,
        ["horse", "build-event", "2025-07-15", "R1-C4", "--type", "deux_sur_quatre_base",
         "--input", "14x 5-9"],
    )
    bad = runner.invoke(
        app,
        ["horse", "build-event", "2025-07-15", "R1-C4", "--type", "quinte_base",
         "--input", "14-5xx"],
    )

    assert ok.exit_code == 0
    event = json.loads(ok.stdout)["event"]
    assert event["id"] == "deux_sur_quatre_base_R1-C4_14_5_9"
    assert event["pmuCompliant"]["totalCost"] == 6.0
    assert bad.exit_code == common.EXIT_INVALID_INPUT
