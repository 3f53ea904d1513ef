from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from sports_hub.ingestion.providers.base.client import BaseHttpClient

FIXTURES_PATH = "/tennis/v2/atp/fixtures"
TOURNAMENT_INFO_PATH = "/tennis/v2/atp/tournament/info"


@dataclass
class TennisApiClient:
    """tennis-api-atp-wta-itf on RapidAPI."""

    http: BaseHttpClient
    api_key: str
    host: str

    def _headers(self) -> dict[str, str]:
        return {"x-rapidapi-key": self.api_key, "x-rapidapi-host": self.host}

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return await self.http.get_json(path, params=params, headers=self._headers())

    async def get_fixtures(
        self, date: str, *, page_size: int = 1000, page: int = 1
    ) -> dict[str, Any]:
        return await self.get(
            f"{FIXTURES_PATH}/{date}", params={"pageSize": page_size, "pageNo": page}
        )

    async def get_tournament_info(self, tournament_id: int | str) -> dict[str, Any]:
        payload = await self.get(f"{TOURNAMENT_INFO_PATH}/{tournament_id}")
        data = payload.get("data")
        return data if isinstance(data, dict) else {}
