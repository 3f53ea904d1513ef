from __future__ import annotations

from typing import Protocol, runtime_checkable

from sports_hub.ingestion.providers.base.types import Snapshot


class StorageError(RuntimeError):
    """A stored snapshot exists but cannot be read or written."""

    status_code = 500


class SnapshotNotFound(StorageError, LookupError):
    """`load` on a (sport, date) key with nothing stored."""

    status_code = 404

    def __init__(self, sport: str, date: str) -> None:
        super().__init__(f"No snapshot stored for {sport}/{date}")
        self.sport = sport
        self.date = date


@runtime_checkable
class SnapshotStore(Protocol):
    """Persistence for one normalized snapshot per (sport, date); whole-snapshot overwrite."""

    async def exists(self, sport: str, date: str) -> bool: ...

    async def save(self, sport: str, date: str, snapshot: Snapshot) -> None: ...

    async def load(self, sport: str, date: str) -> Snapshot: ...

    async def list_dates(self, sport: str) -> list[str]: ...


def key(sport: str, date: str) -> str:
    return f"{sport}/{date}"
