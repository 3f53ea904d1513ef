from __future__ import annotations

import typer

from sports_hub.cli.data import app as data_app
from sports_hub.cli.horse import app as horse_app
from sports_hub.core.config import Settings
from sports_hub.core.logging import setup_logging

app = typer.Typer(no_args_is_help=True)
app.add_typer(data_app, name="data")
app.add_typer(horse_app, name="horse")


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Overrides LOG_LEVEL."),
) -> None:
    """Sports fixture aggregation and PMU bet building."""

    setup_logging(log_level or Settings().log_level)
