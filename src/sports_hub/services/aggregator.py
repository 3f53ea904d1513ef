from __future__ import annotations

import asyncio
import logging
from typing import Any

from sports_hub.core.config import Settings
from sports_hub.core.enums import SportEnum
from sports_hub.ingestion.dates import validate_iso_date
from sports_hub.ingestion.providers.base.adapter import SportAdapter
from sports_hub.ingestion.providers.base.errors import ProviderError, ProviderResponseError
from sports_hub.ingestion.providers.base.registry import AdapterRegistry
from sports_hub.ingestion.providers.base.types import Country, Fixture, Snapshot
from sports_hub.ingestion.providers.pmu import group_races_by_venue
from sports_hub.storage.base import SnapshotNotFound, SnapshotStore, StorageError, key

logger = logging.getLogger(__name__)

# Per-date failures that a cross-date fixture scan skips over.
LOOKUP_SKIPPABLE = (ProviderError, StorageError, ValueError)


class NotFoundError(LookupError):
    """Unknown country, league or fixture in a browse request."""

    status_code = 404


class SnapshotAggregator:
    """
    Cache-first access to normalized snapshots.

    A snapshot is served from the store when one with at least one fixture
    exists, otherwise fetched through the sport's adapter and saved. When a
    fetch fails, any stored snapshot for the key is returned instead of the
    error. Concurrent requests for the same (sport, date, force) key share a
    single fetch.
    """

    def __init__(
        self,
        registry: AdapterRegistry,
        store: SnapshotStore,
        settings: Settings | None = None,
    ) -> None:
        self.registry = registry
        self.store = store
        self.settings = settings or Settings()
        self._inflight: dict[tuple[str, str, bool], asyncio.Task[Snapshot]] = {}

    # -----------------------------
    # Snapshots
    # -----------------------------

    async def get_snapshot(self, sport: str, date: str, force_refresh: bool = False) -> Snapshot:
        adapter = self.registry.get(sport)
        validate_iso_date(date)

        inflight_key = (sport, date, force_refresh)
        task = self._inflight.get(inflight_key)
        if task is None:
            task = asyncio.create_task(self._get_snapshot(adapter, sport, date, force_refresh))
            self._inflight[inflight_key] = task
            task.add_done_callback(lambda t: self._forget(inflight_key, t))
        else:
            logger.info("Joining in-flight fetch for %s", key(sport, date))

        # One caller being cancelled must not cancel the shared fetch.
        return await asyncio.shield(task)

    def _forget(self, inflight_key: tuple[str, str, bool], task: asyncio.Task[Snapshot]) -> None:
        if self._inflight.get(inflight_key) is task:
            del self._inflight[inflight_key]
        # Mark the error retrieved; every waiter may have been cancelled.
        if not task.cancelled():
            task.exception()

    async def _get_snapshot(
        self, adapter: SportAdapter, sport: str, date: str, force_refresh: bool
    ) -> Snapshot:
        logger.info("Getting %s snapshot (force=%s)", key(sport, date), force_refresh)

        if not force_refresh:
            cached = await self._load_cached(sport, date)
            if cached is not None and cached.matches:
                logger.info(
                    "Loaded %d fixtures from cache for %s", len(cached.matches), key(sport, date)
                )
                return cached
            if cached is not None:
                logger.warning("Cached %s snapshot has no fixtures, refreshing", key(sport, date))

        try:
            snapshot = await self._fetch(adapter, sport, date)
        except ProviderError as e:
            logger.error("Error fetching %s: %s", key(sport, date), e)
            if force_refresh and not self.settings.fallback_on_force_refresh:
                raise
            fallback = await self._load_cached(sport, date)
            if fallback is None:
                raise
            logger.warning(
                "Upstream failed, serving cached %s (%d fixtures)",
                key(sport, date),
                len(fallback.matches),
            )
            return fallback

        try:
            await self.store.save(sport, date, snapshot)
        except StorageError as e:
            logger.error("Could not persist %s: %s", key(sport, date), e)
        return snapshot

    async def _fetch(self, adapter: SportAdapter, sport: str, date: str) -> Snapshot:
        logger.info("Fetching fresh %s data from upstream", key(sport, date))
        raw = await adapter.fetch_fixtures(date)
        snapshot = await adapter.normalize(raw, date)
        if not snapshot.matches:
            raise ProviderResponseError(f"No fixtures returned for {sport} on {date}")
        logger.info("Normalized %d fixtures for %s", len(snapshot.matches), key(sport, date))
        return snapshot

    async def _load_cached(self, sport: str, date: str) -> Snapshot | None:
        try:
            return await self.store.load(sport, date)
        except SnapshotNotFound:
            return None
        except StorageError as e:
            logger.error("Cached %s is unreadable: %s", key(sport, date), e)
            return None

    # -----------------------------
    # Lookups
    # -----------------------------

    async def list_dates(self, sport: str) -> list[str]:
        try:
            dates = await self.store.list_dates(sport)
        except (StorageError, OSError, ValueError) as e:
            logger.error("Error listing dates for %s: %s", sport, e)
            return []
        logger.info("Found %d available dates for %s", len(dates), sport)
        return sorted(dates)

    async def find_fixture_by_id(
        self,
        sport: str,
        fixture_id: str,
        date: str | None = None,
        force_update: bool = False,
    ) -> Fixture | None:
        """
        Search `date` first, then every stored date in chronological order.

        Dates that fail to load are logged and skipped. The scan stops after
        `settings.fixture_lookup_max_dates` stored dates when that is set.
        """
        self.registry.get(sport)
        logger.info("Searching for fixture %s in %s (date=%s)", fixture_id, sport, date)

        if date:
            found = await self._find_on(sport, fixture_id, date, force_update)
            if found is not None:
                return found

        dates = [d for d in await self.list_dates(sport) if d != date]
        limit = self.settings.fixture_lookup_max_dates
        if limit is not None and len(dates) > limit:
            logger.warning(
                "Fixture scan for %s limited to %d of %d dates", sport, limit, len(dates)
            )
            dates = dates[:limit]

        for candidate in dates:
            found = await self._find_on(sport, fixture_id, candidate, force_update)
            if found is not None:
                return found

        logger.warning("Fixture %s not found in any stored %s data", fixture_id, sport)
        return None

    async def _find_on(
        self, sport: str, fixture_id: str, date: str, force_update: bool
    ) -> Fixture | None:
        try:
            snapshot = await self.get_snapshot(sport, date, force_update)
        except LOOKUP_SKIPPABLE as e:
            logger.warning("Skipping date %s for %s: %s", date, sport, e)
            return None
        found = snapshot.find(fixture_id)
        if found is not None:
            logger.info("Fixture %s found on %s", fixture_id, date)
        return found

    async def get_data_stats(self, sport: str, date: str) -> dict[str, Any] | None:
        try:
            snapshot = await self.get_snapshot(sport, date)
        except (ProviderError, StorageError, ValueError) as e:
            logger.error("Error getting stats for %s: %s", key(sport, date), e)
            return None
        return {
            "sport": sport,
            "date": date,
            "totalMatches": len(snapshot.matches),
            "countries": len(snapshot.indexes.countries),
            "leagues": len(snapshot.indexes.leagues),
            "lastUpdated": snapshot.last_updated or "unknown",
        }


# -----------------------------
# Browsing: sport -> date -> country -> league -> fixture
# -----------------------------


def countries(snapshot: Snapshot) -> list[Country]:
    return list(snapshot.indexes.countries)


def leagues_for_country(snapshot: Snapshot, country_id: str) -> list[dict[str, Any]]:
    """Leagues of one country; hippodromes (one entry per reunion) for racing."""

    if country_id not in snapshot.indexes.country_ids():
        raise NotFoundError(f"Country not found: {country_id}")

    fixtures = [m for m in snapshot.matches if m.league.country_id == country_id]

    if snapshot.sport == SportEnum.HORSE.value:
        return [v.to_dict() for v in group_races_by_venue(fixtures)]

    leagues: dict[str, dict[str, Any]] = {}
    for fixture in fixtures:
        leagues.setdefault(
            fixture.league.id,
            {"id": fixture.league.id, "name": fixture.league.name, "logo": fixture.league.logo},
        )
    return sorted(leagues.values(), key=lambda lg: str(lg["name"]))


def fixtures_for_league(snapshot: Snapshot, country_id: str, league_id: str) -> list[Fixture]:
    fixtures = [
        m
        for m in snapshot.matches
        if m.league.country_id == country_id and m.league.id == league_id
    ]
    if not fixtures:
        raise NotFoundError(f"No fixtures found for league: {league_id}")
    return fixtures
