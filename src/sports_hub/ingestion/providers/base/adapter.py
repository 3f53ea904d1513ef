from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .errors import ProviderMappingError
from .types import Json, Snapshot

if TYPE_CHECKING:
    from sports_hub.ingestion.providers.pmu.participants import RaceParticipants


@runtime_checkable
class SportAdapter(Protocol):
    """
    Orchestration depends on this, not on any HTTP client.

    One implementation per sport; the orchestrator looks them up by sport id.
    """

    sport: str
    source: str

    async def fetch_fixtures(self, date: str) -> Json:
        """Raw upstream payload for one calendar date (network call)."""
        ...

    async def normalize(self, raw: Json, date: str) -> Snapshot:
        """
        Transform a raw payload into a Snapshot.

        Pure transformation for every sport except tennis, which enriches
        fixtures with (cached) tournament lookups.
        """
        ...


@runtime_checkable
class RacingAdapter(SportAdapter, Protocol):
    async def fetch_participants(self, date: str, race_id: str) -> Json:
        ...

    def normalize_participants(self, raw: Json) -> RaceParticipants:
        ...


def require_list(raw: Any, key: str, *, sport: str) -> list[Json]:
    """Top-level list of items in a raw payload, or a mapping error when absent."""

    if not isinstance(raw, dict) or key not in raw:
        raise ProviderMappingError(
            f"Invalid {sport} payload: missing '{key}' field", {"sport": sport}
        )
    items = raw[key]
    if not isinstance(items, list):
        raise ProviderMappingError(
            f"Invalid {sport} payload: '{key}' is not a list", {"sport": sport}
        )
    return [i for i in items if isinstance(i, dict)]
