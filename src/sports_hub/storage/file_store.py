from __future__ import annotations

import asyncio
import json
import logging
import os
import re
import tempfile
from pathlib import Path

from sports_hub.ingestion.dates import is_iso_date, validate_iso_date
from sports_hub.ingestion.providers.base.types import Snapshot

from .base import SnapshotNotFound, StorageError, key

logger = logging.getLogger(__name__)

_sport_re = re.compile(r"^[a-z0-9_-]+$")


class FileSnapshotStore:
    """
    One JSON document per (sport, date) at `{base_path}/{sport}/{date}.json`.

    Writes go to a temporary file in the same directory and are moved into
    place with `os.replace`, so readers never see a half-written snapshot.
    Disk I/O runs in a worker thread.
    """

    def __init__(self, base_path: Path | str) -> None:
        self.base_path = Path(base_path)

    def path_for(self, sport: str, date: str) -> Path:
        if not _sport_re.match(sport):
            raise ValueError(f"Invalid sport id {sport!r}")
        validate_iso_date(date)
        return self.base_path / sport / f"{date}.json"

    async def exists(self, sport: str, date: str) -> bool:
        return await asyncio.to_thread(self.path_for(sport, date).is_file)

    async def save(self, sport: str, date: str, snapshot: Snapshot) -> None:
        path = self.path_for(sport, date)
        payload = json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)
        try:
            await asyncio.to_thread(_write_atomic, path, payload)
        except OSError as e:
            raise StorageError(f"Could not write snapshot {key(sport, date)}: {e}") from e
        logger.info("Saved %s snapshot (%d fixtures)", key(sport, date), len(snapshot.matches))

    async def load(self, sport: str, date: str) -> Snapshot:
        path = self.path_for(sport, date)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError as e:
            raise SnapshotNotFound(sport, date) from e
        except OSError as e:
            raise StorageError(f"Could not read snapshot {key(sport, date)}: {e}") from e

        try:
            return Snapshot.from_dict(json.loads(text))
        except (ValueError, KeyError, TypeError) as e:
            raise StorageError(f"Corrupt snapshot {key(sport, date)}: {e}") from e

    async def list_dates(self, sport: str) -> list[str]:
        if not _sport_re.match(sport):
            raise ValueError(f"Invalid sport id {sport!r}")
        return await asyncio.to_thread(self._list_dates, self.base_path / sport)

    @staticmethod
    def _list_dates(directory: Path) -> list[str]:
        if not directory.is_dir():
            return []
        dates = [
            p.stem for p in directory.iterdir() if p.suffix == ".json" and is_iso_date(p.stem)
        ]
        return sorted(dates)


def _write_atomic(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise
