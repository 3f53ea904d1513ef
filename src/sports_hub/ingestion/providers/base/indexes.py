from __future__ import annotations

from sports_hub.core.text import flag_url, slugify_country

from .types import Country, SnapshotIndexes


class IndexBuilder:
    """
    Accumulates the country -> league-names multimap while fixtures are normalized.

    The first flag seen for a country wins; later fixtures only add league names.
    """

    def __init__(self) -> None:
        self._countries: dict[str, Country] = {}
        self._leagues: dict[str, set[str]] = {}

    def add(self, country_name: str, flag: str | None, league_name: str | None) -> str:
        country_id = slugify_country(country_name)

        if country_id not in self._countries:
            self._countries[country_id] = Country(
                id=country_id, name=country_name, flag=flag or flag_url(None)
            )

        names = self._leagues.setdefault(country_id, set())
        if league_name:
            names.add(league_name)

        return country_id

    def build(self) -> SnapshotIndexes:
        countries = tuple(sorted(self._countries.values(), key=lambda c: c.name))
        leagues = {cid: tuple(sorted(names)) for cid, names in self._leagues.items()}
        return SnapshotIndexes(countries=countries, leagues=leagues)
