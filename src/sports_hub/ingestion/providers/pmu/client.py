from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from sports_hub.ingestion.dates import to_pmu_date
from sports_hub.ingestion.providers.base.client import BaseHttpClient

RACE_ID_RE = re.compile(r"^R(\d+)-C(\d+)$")


def parse_race_id(race_id: str) -> tuple[int, int]:
    """`"R2-C1"` -> `(2, 1)`."""

    m = RACE_ID_RE.match(race_id or "")
    if not m:
        raise ValueError(f"Invalid race ID format {race_id!r}. Expected: R2-C1")
    return int(m.group(1)), int(m.group(2))


@dataclass
class PmuClient:
    """PMU turfinfo programme API (public, no auth)."""

    http: BaseHttpClient

    async def get_programme(self, date: str) -> dict[str, Any]:
        return await self.http.get_json(f"/programme/{to_pmu_date(date)}")

    async def get_participants(self, date: str, race_id: str) -> dict[str, Any]:
        reunion, course = parse_race_id(race_id)
        return await self.http.get_json(
            f"/programme/{to_pmu_date(date)}/R{reunion}/C{course}/participants"
        )
