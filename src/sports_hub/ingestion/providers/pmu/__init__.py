from sports_hub.ingestion.providers.pmu.adapter import PmuHorseAdapter
from sports_hub.ingestion.providers.pmu.client import PmuClient, parse_race_id
from sports_hub.ingestion.providers.pmu.participants import (
    Participant,
    RaceParticipants,
    normalize_participants,
)
from sports_hub.ingestion.providers.pmu.venues import group_races_by_venue, race_number_prefix

__all__ = [
    "Participant",
    "PmuClient",
    "PmuHorseAdapter",
    "RaceParticipants",
    "group_races_by_venue",
    "normalize_participants",
    "parse_race_id",
    "race_number_prefix",
]
