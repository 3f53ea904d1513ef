from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

Json = dict[str, Any]


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _opt_str(value: Any) -> str | None:
    return None if value is None else str(value)


# ---------------------------------------------------------------------------
# Sport-specific extension payloads.
#
# One typed class per sport, tagged by `sport`, so consumers can dispatch on
# the tag instead of probing arbitrary keys. Values are kept JSON-native.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SportExtras:
    sport: ClassVar[str] = ""

    def to_dict(self) -> Json:
        out: Json = {"sport": self.sport}
        for f in dataclasses.fields(self):
            out[_camel(f.name)] = getattr(self, f.name)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SportExtras:
        kwargs = {f.name: data.get(_camel(f.name)) for f in dataclasses.fields(cls)}
        return cls(**kwargs)


@dataclass(frozen=True)
class FootballExtras(SportExtras):
    sport: ClassVar[str] = "football"

    elapsed: int | None = None
    referee: str | None = None
    round: str | None = None
    season: int | None = None


@dataclass(frozen=True)
class BasketballExtras(SportExtras):
    sport: ClassVar[str] = "basketball"

    overtime: Json | None = None
    week: str | None = None
    timer: str | None = None


@dataclass(frozen=True)
class BaseballExtras(SportExtras):
    sport: ClassVar[str] = "baseball"

    time: str | None = None
    timestamp: int | None = None
    timezone: str | None = None
    week: str | None = None
    innings: Json | None = None


@dataclass(frozen=True)
class HockeyExtras(SportExtras):
    sport: ClassVar[str] = "hockey"

    timer: str | None = None
    week: str | None = None
    timestamp: int | None = None
    periods: Json | None = None


@dataclass(frozen=True)
class RugbyExtras(SportExtras):
    sport: ClassVar[str] = "rugby"

    week: str | None = None
    timestamp: int | None = None
    periods: Json | None = None


@dataclass(frozen=True)
class HandballExtras(SportExtras):
    sport: ClassVar[str] = "handball"

    week: str | None = None
    timestamp: int | None = None
    periods: Json | None = None


@dataclass(frozen=True)
class VolleyballExtras(SportExtras):
    sport: ClassVar[str] = "volleyball"

    week: str | None = None
    timestamp: int | None = None
    sets_won: Json | None = None


@dataclass(frozen=True)
class TennisExtras(SportExtras):
    sport: ClassVar[str] = "tennis"

    round_id: int | None = None
    tournament_id: int | None = None
    tournament_info: Json | None = None
    player1: Json | None = None
    player2: Json | None = None
    is_individual_sport: bool = True


@dataclass(frozen=True)
class HorseRaceExtras(SportExtras):
    sport: ClassVar[str] = "horse"

    reunion_number: str | None = None
    course_number: int | None = None
    course_name: str | None = None
    course_name_short: str | None = None
    discipline: str | None = None
    distance: int | None = None
    track: str | None = None
    runners: int | None = None
    conditions: str | None = None
    prize: Json | None = None
    betting_types: list[Json] | None = None
    weather: Json | None = None
    meeting_type: str | None = None
    race_duration: int | None = None


EXTRAS_BY_SPORT: dict[str, type[SportExtras]] = {
    cls.sport: cls
    for cls in (
        FootballExtras,
        BasketballExtras,
        BaseballExtras,
        HockeyExtras,
        RugbyExtras,
        HandballExtras,
        VolleyballExtras,
        TennisExtras,
        HorseRaceExtras,
    )
}


def extras_from_dict(data: Mapping[str, Any] | None) -> SportExtras | None:
    if not data:
        return None
    cls = EXTRAS_BY_SPORT.get(str(data.get("sport")))
    if cls is None:
        raise ValueError(f"Unknown sportSpecific tag: {data.get('sport')!r}")
    return cls.from_dict(data)


# ---------------------------------------------------------------------------
# Core fixture schema
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Country:
    id: str
    name: str
    flag: str | None = None

    def to_dict(self) -> Json:
        return {"id": self.id, "name": self.name, "flag": self.flag}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Country:
        return cls(id=data["id"], name=data["name"], flag=data.get("flag"))


@dataclass(frozen=True)
class LeagueRef:
    id: str
    name: str
    country: str
    country_id: str
    logo: str | None = None
    flag: str | None = None
    season: int | str | None = None

    def to_dict(self) -> Json:
        return {
            "id": self.id,
            "name": self.name,
            "country": self.country,
            "countryId": self.country_id,
            "logo": self.logo,
            "flag": self.flag,
            "season": self.season,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LeagueRef:
        return cls(
            id=data["id"],
            name=data["name"],
            country=data["country"],
            country_id=data["countryId"],
            logo=data.get("logo"),
            flag=data.get("flag"),
            season=data.get("season"),
        )


@dataclass(frozen=True)
class TeamRef:
    id: str | None
    name: str | None
    logo: str | None = None
    country: str | None = None

    def to_dict(self) -> Json:
        out: Json = {"id": self.id, "name": self.name, "logo": self.logo}
        if self.country is not None:
            out["country"] = self.country
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TeamRef:
        return cls(
            id=data.get("id"),
            name=data.get("name"),
            logo=data.get("logo"),
            country=data.get("country"),
        )

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None) -> TeamRef:
        raw = raw or {}
        return cls(id=_opt_str(raw.get("id")), name=raw.get("name"), logo=raw.get("logo"))


@dataclass(frozen=True)
class Teams:
    home: TeamRef
    away: TeamRef

    def to_dict(self) -> Json:
        return {"home": self.home.to_dict(), "away": self.away.to_dict()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Teams:
        return cls(home=TeamRef.from_dict(data["home"]), away=TeamRef.from_dict(data["away"]))


@dataclass(frozen=True)
class Score:
    home: Any = None
    away: Any = None
    details: Json = field(default_factory=dict)

    def to_dict(self) -> Json:
        return {"home": self.home, "away": self.away, "details": self.details}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Score:
        data = data or {}
        return cls(
            home=data.get("home"), away=data.get("away"), details=dict(data.get("details") or {})
        )


@dataclass(frozen=True)
class Fixture:
    """One normalized match or race."""

    id: str
    date: str | None
    league: LeagueRef
    status: str | None
    teams: Teams | None = None
    venue: Json | None = None
    score: Score = field(default_factory=Score)
    sport_specific: SportExtras | None = None

    def to_dict(self) -> Json:
        return {
            "id": self.id,
            "date": self.date,
            "league": self.league.to_dict(),
            "teams": self.teams.to_dict() if self.teams is not None else None,
            "venue": self.venue,
            "status": self.status,
            "score": self.score.to_dict(),
            "sportSpecific": (
                self.sport_specific.to_dict() if self.sport_specific is not None else None
            ),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Fixture:
        teams = data.get("teams")
        return cls(
            id=str(data["id"]),
            date=data.get("date"),
            league=LeagueRef.from_dict(data["league"]),
            status=data.get("status"),
            teams=Teams.from_dict(teams) if teams else None,
            venue=data.get("venue"),
            score=Score.from_dict(data.get("score")),
            sport_specific=extras_from_dict(data.get("sportSpecific")),
        )


@dataclass(frozen=True)
class SnapshotIndexes:
    countries: tuple[Country, ...] = ()
    leagues: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def to_dict(self) -> Json:
        return {
            "countries": [c.to_dict() for c in self.countries],
            "leagues": {cid: list(names) for cid, names in self.leagues.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> SnapshotIndexes:
        data = data or {}
        return cls(
            countries=tuple(Country.from_dict(c) for c in data.get("countries") or []),
            leagues={cid: tuple(names) for cid, names in (data.get("leagues") or {}).items()},
        )

    def country_ids(self) -> set[str]:
        return {c.id for c in self.countries}


@dataclass(frozen=True)
class Snapshot:
    """Normalized result for one (sport, date) key; persisted and replaced wholesale."""

    sport: str
    date: str | None
    source: str
    matches: tuple[Fixture, ...]
    indexes: SnapshotIndexes
    last_updated: str | None = None
    meta: Json = field(default_factory=dict)

    def to_dict(self) -> Json:
        return {
            "sport": self.sport,
            "date": self.date,
            "source": self.source,
            "matches": [m.to_dict() for m in self.matches],
            "indexes": self.indexes.to_dict(),
            "lastUpdated": self.last_updated,
            "meta": self.meta,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Snapshot:
        return cls(
            sport=data["sport"],
            date=data.get("date"),
            source=data.get("source") or "",
            matches=tuple(Fixture.from_dict(m) for m in data.get("matches") or []),
            indexes=SnapshotIndexes.from_dict(data.get("indexes")),
            last_updated=data.get("lastUpdated"),
            meta=dict(data.get("meta") or {}),
        )

    def find(self, fixture_id: str) -> Fixture | None:
        for match in self.matches:
            if match.id == fixture_id:
                return match
        return None
