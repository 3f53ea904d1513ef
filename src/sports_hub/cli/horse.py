from __future__ import annotations

import typer

from sports_hub.betting.horse_events import build_horse_event, generate_horse_events
from sports_hub.cli.common import Runtime, echo_json, run_command
from sports_hub.core.enums import SportEnum
from sports_hub.ingestion.dates import validate_iso_date
from sports_hub.ingestion.providers.pmu import RaceParticipants

app = typer.Typer(help="Horse-racing participants and PMU bet events.")

DATE = typer.Argument(..., help="Race date as YYYY-MM-DD.")
RACE_ID = typer.Argument(..., help="Race id, e.g. R1-C3.")


async def _participants(rt: Runtime, date: str, race_id: str) -> RaceParticipants:
    adapter = rt.registry.get_racing(SportEnum.HORSE.value)
    raw = await adapter.fetch_participants(validate_iso_date(date), race_id)
    return adapter.normalize_participants(raw)


@app.command("participants")
def participants_cmd(date: str = DATE, race_id: str = RACE_ID) -> None:
    """Starters and non-runners of one race."""

    async def _cmd(rt: Runtime) -> None:
        parsed = await _participants(rt, date, race_id)
        echo_json({**parsed.to_dict(), "raceId": race_id, "date": date})

    run_command(_cmd)


@app.command("events")
def events_cmd(date: str = DATE, race_id: str = RACE_ID) -> None:
    """Bet types on offer for one race, given its number of starters."""

    async def _cmd(rt: Runtime) -> None:
        parsed = await _participants(rt, date, race_id)
        events = generate_horse_events(parsed.total_runners, parsed.participants)
        echo_json(
            {
                "raceId": race_id,
                "date": date,
                "totalRunners": parsed.total_runners,
                "availableEvents": [e.to_dict() for e in events],
            }
        )

    run_command(_cmd)


@app.command("build-event")
def build_event_cmd(
    date: str = DATE,
    race_id: str = RACE_ID,
    event_type: str = typer.Option(
        ..., "--type", help="simple_place, deux_sur_quatre_base, quinte_base or quinte_elargi."
    ),
    horses: list[int] = typer.Option(
        [], "--horse", help="Selected runner number (simple_place). Repeatable."
    ),
    formula: str | None = typer.Option(
        None, "--input", help='Bet formula, e.g. "14x 5-9" or "14-5-9xx".'
    ),
) -> None:
    """Validate a bet selection against the race field and price it."""

    async def _cmd(rt: Runtime) -> None:
        parsed = await _participants(rt, date, race_id)
        event = build_horse_event(
            event_type,
            horses,
            formula,
            parsed.participants,
            parsed.total_runners,
            race_id,
        )
        echo_json({"event": event.to_dict()})

    run_command(_cmd)
