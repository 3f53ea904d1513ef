from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, NoReturn, TypeVar

import httpx
import typer

from sports_hub.betting.horse_events import InvalidBetFormula
from sports_hub.core.config import Settings, SportConfig, build_sports_config
from sports_hub.ingestion.providers.base.errors import ProviderError
from sports_hub.ingestion.providers.base.registry import AdapterRegistry
from sports_hub.ingestion.providers.provider import build_default_registry
from sports_hub.services.aggregator import NotFoundError, SnapshotAggregator
from sports_hub.storage.base import StorageError
from sports_hub.storage.file_store import FileSnapshotStore

T = TypeVar("T")

EXIT_ERROR = 1
EXIT_INVALID_INPUT = 2


@dataclass
class Runtime:
    settings: Settings
    configs: dict[str, SportConfig]
    registry: AdapterRegistry
    aggregator: SnapshotAggregator


@asynccontextmanager
async def runtime_scope(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[Runtime]:
    """
    Everything a CLI command needs, built once per invocation.
    HTTP clients are closed on exit.
    """
    settings = settings or Settings()
    configs = build_sports_config(settings)
    registry = build_default_registry(configs, settings, transport=transport)
    store = FileSnapshotStore(settings.data_dir)
    try:
        yield Runtime(
            settings=settings,
            configs=configs,
            registry=registry,
            aggregator=SnapshotAggregator(registry, store, settings),
        )
    finally:
        await registry.aclose()


def echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def fail(message: str, code: int = EXIT_ERROR) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=code)


def run_command(command: Callable[[Runtime], Awaitable[T]]) -> T:
    """Run an async command against a fresh runtime, mapping domain errors to exit codes."""

    async def _main() -> T:
        async with runtime_scope() as rt:
            return await command(rt)

    try:
        return asyncio.run(_main())
    except typer.Exit:
        raise
    except InvalidBetFormula as e:
        fail(f"{e.event_type}: {e.message}", EXIT_INVALID_INPUT)
    except (ProviderError, StorageError, NotFoundError) as e:
        fail(str(e))
    except ValueError as e:
        fail(str(e), EXIT_INVALID_INPUT)
    except RuntimeError as e:
        fail(str(e))
