from __future__ import annotations

import typer

from sports_hub.cli.common import Runtime, echo_json, fail, run_command
from sports_hub.core.config import Settings, build_sports_config, list_sports
from sports_hub.core.enums import SportEnum
from sports_hub.ingestion.providers.pmu.venues import format_venue_races
from sports_hub.services.aggregator import countries, fixtures_for_league, leagues_for_country

app = typer.Typer(help="Browse normalized fixture snapshots (fetched on cache miss).")

FORCE = typer.Option(False, "--force", help="Bypass the stored snapshot and refetch upstream.")


@app.command("sports")
def sports_cmd() -> None:
    """List supported sports."""

    echo_json(list_sports(build_sports_config(Settings())))


@app.command("snapshot")
def snapshot_cmd(
    sport: str = typer.Argument(..., help="Sport id (e.g. football, horse)."),
    date: str = typer.Argument(..., help="Date as YYYY-MM-DD."),
    force: bool = FORCE,
) -> None:
    """Print the full snapshot for one sport and date."""

    async def _cmd(rt: Runtime) -> None:
        snapshot = await rt.aggregator.get_snapshot(sport, date, force_refresh=force)
        echo_json(snapshot.to_dict())

    run_command(_cmd)


@app.command("dates")
def dates_cmd(sport: str = typer.Argument(..., help="Sport id.")) -> None:
    """Dates with a stored snapshot, oldest first."""

    async def _cmd(rt: Runtime) -> None:
        echo_json(await rt.aggregator.list_dates(sport))

    run_command(_cmd)


@app.command("stats")
def stats_cmd(
    sport: str = typer.Argument(..., help="Sport id."),
    date: str = typer.Argument(..., help="Date as YYYY-MM-DD."),
) -> None:
    async def _cmd(rt: Runtime) -> None:
        stats = await rt.aggregator.get_data_stats(sport, date)
        if stats is None:
            fail(f"No data available for {sport} on {date}")
        echo_json(stats)

    run_command(_cmd)


@app.command("fixture")
def fixture_cmd(
    sport: str = typer.Argument(..., help="Sport id."),
    fixture_id: str = typer.Argument(..., help="Fixture id (race id such as R1-C3 for horse)."),
    date: str | None = typer.Option(None, "--date", help="Date to search first."),
    force: bool = FORCE,
) -> None:
    """Look a fixture up by id across stored dates."""

    async def _cmd(rt: Runtime) -> None:
        fixture = await rt.aggregator.find_fixture_by_id(
            sport, fixture_id, date=date, force_update=force
        )
        if fixture is None:
            fail(f"Match not found: {fixture_id}")
        echo_json(fixture.to_dict())

    run_command(_cmd)


@app.command("countries")
def countries_cmd(
    sport: str = typer.Argument(..., help="Sport id."),
    date: str = typer.Argument(..., help="Date as YYYY-MM-DD."),
    force: bool = FORCE,
) -> None:
    async def _cmd(rt: Runtime) -> None:
        snapshot = await rt.aggregator.get_snapshot(sport, date, force_refresh=force)
        echo_json([c.to_dict() for c in countries(snapshot)])

    run_command(_cmd)


@app.command("leagues")
def leagues_cmd(
    sport: str = typer.Argument(..., help="Sport id."),
    date: str = typer.Argument(..., help="Date as YYYY-MM-DD."),
    country: str = typer.Argument(..., help="Country id (e.g. united-kingdom)."),
    force: bool = FORCE,
) -> None:
    """Leagues of one country (hippodromes for horse racing)."""

    async def _cmd(rt: Runtime) -> None:
        snapshot = await rt.aggregator.get_snapshot(sport, date, force_refresh=force)
        echo_json(leagues_for_country(snapshot, country))

    run_command(_cmd)


@app.command("fixtures")
def fixtures_cmd(
    sport: str = typer.Argument(..., help="Sport id."),
    date: str = typer.Argument(..., help="Date as YYYY-MM-DD."),
    country: str = typer.Argument(..., help="Country id."),
    league: str = typer.Argument(..., help="League id (hippodrome code for horse)."),
    force: bool = FORCE,
) -> None:
    async def _cmd(rt: Runtime) -> None:
        snapshot = await rt.aggregator.get_snapshot(sport, date, force_refresh=force)
        fixtures = fixtures_for_league(snapshot, country, league)
        if sport == SportEnum.HORSE.value:
            echo_json(format_venue_races(fixtures, league))
        else:
            echo_json([f.to_dict() for f in fixtures])

    run_command(_cmd)
