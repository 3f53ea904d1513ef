from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sports_hub.core.enums import SportEnum


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # RapidAPI (api-sports family + tennis)
    rapid_api_key: str | None = Field(default=None, repr=False, validation_alias="RAPID_API_KEY")
    rapid_api_key_tennis: str | None = Field(
        default=None, repr=False, validation_alias="RAPID_API_KEY_TENNIS"
    )

    # PMU turfinfo (no auth)
    pmu_base_url: str = "https://online.turfinfo.api.pmu.fr/rest/client/61"

    # Snapshot store
    data_dir: Path = Path("data") / "sports"

    http_timeout_s: float = 30.0
    http_connect_timeout_s: float = 10.0

    # None scans every cached date in fixture lookups.
    fixture_lookup_max_dates: int | None = None

    # A failed forced refresh still serves the stored snapshot when one exists.
    fallback_on_force_refresh: bool = True

    log_level: str = "INFO"


@dataclass(frozen=True)
class SportConfig:
    sport_id: str
    name: str
    icon: str
    base_url: str
    host: str
    source: str
    api_key: str | None = None


def _rapid(sport: SportEnum, name: str, icon: str, host: str, key: str | None) -> SportConfig:
    return SportConfig(
        sport_id=sport.value,
        name=name,
        icon=icon,
        base_url=f"https://{host}",
        host=host,
        source=host.split(".")[0],
        api_key=key,
    )


def build_sports_config(settings: Settings) -> dict[str, SportConfig]:
    """Provider configuration for every supported sport, built once at startup."""

    key = settings.rapid_api_key
    tennis_key = settings.rapid_api_key_tennis or key

    football_host = "api-football-v1.p.rapidapi.com"
    configs = [
        SportConfig(
            sport_id=SportEnum.FOOTBALL.value,
            name="Football",
            icon="⚽",
            base_url=f"https://{football_host}/v3",
            host=football_host,
            source="api-football",
            api_key=key,
        ),
        _rapid(SportEnum.BASKETBALL, "Basketball", "🏀", "api-basketball.p.rapidapi.com", key),
        _rapid(SportEnum.RUGBY, "Rugby", "🏉", "api-rugby.p.rapidapi.com", key),
        _rapid(SportEnum.HANDBALL, "Handball", "🤾", "api-handball.p.rapidapi.com", key),
        _rapid(SportEnum.VOLLEYBALL, "Volleyball", "🏐", "api-volleyball.p.rapidapi.com", key),
        _rapid(SportEnum.BASEBALL, "Baseball", "⚾", "api-baseball.p.rapidapi.com", key),
        _rapid(SportEnum.HOCKEY, "Hockey", "🏒", "api-hockey.p.rapidapi.com", key),
        SportConfig(
            sport_id=SportEnum.TENNIS.value,
            name="Tennis",
            icon="🎾",
            base_url="https://tennis-api-atp-wta-itf.p.rapidapi.com",
            host="tennis-api-atp-wta-itf.p.rapidapi.com",
            source="tennis-api-atp-wta-itf",
            api_key=tennis_key,
        ),
        SportConfig(
            sport_id=SportEnum.HORSE.value,
            name="Courses Hippiques",
            icon="🏇",
            base_url=settings.pmu_base_url,
            host="online.turfinfo.api.pmu.fr",
            source="pmu-turfinfo",
            api_key=None,
        ),
    ]
    return {c.sport_id: c for c in configs}


def list_sports(configs: dict[str, SportConfig]) -> list[dict[str, str]]:
    return [{"id": c.sport_id, "name": c.name, "icon": c.icon} for c in configs.values()]
