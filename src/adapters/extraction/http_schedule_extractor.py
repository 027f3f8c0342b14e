from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from src.adapters.settings import TransitRuntimeConfig
from src.app.ports.output import IScheduleExtractor
from src.domain.exceptions import ExtractionFailed

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class HttpScheduleExtractor(IScheduleExtractor):
    """Client for the external AI timetable extraction service.

    Env vars:
      - SCHEDULE_EXTRACTOR_URL: endpoint accepting a multipart `file` upload
      - SCHEDULE_EXTRACTOR_API_KEY: optional bearer token
      - SCHEDULE_EXTRACTOR_TIMEOUT_S: request timeout (default 120)

    The service answers with `{"data": [...]}` (or a bare list) of
    `{route, operator, type, stops: [{name, time, conditions, direction, run}]}`.
    """

    url: str | None = None
    api_key: str | None = None
    timeout_s: float | None = None
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        cfg = TransitRuntimeConfig.from_env()
        if self.url is None:
            self.url = cfg.extractor_url
        if self.api_key is None:
            self.api_key = cfg.extractor_api_key
        if self.timeout_s is None:
            self.timeout_s = cfg.extractor_timeout_s

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    async def extract(
        self, *, filename: str, content_type: str, content: bytes
    ) -> list[Mapping[str, Any]]:
        if not self.url:
            raise ExtractionFailed("Schedule extractor not configured")

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.post(
                    self.url,
                    headers=self._headers(),
                    files={"file": (filename, content, content_type)},
                )
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("Extractor returned HTTP %s", exc.response.status_code)
            raise ExtractionFailed(
                f"Extractor returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ExtractionFailed(f"Extractor unreachable: {exc}") from exc
        except ValueError as exc:
            raise ExtractionFailed("Extractor returned invalid JSON") from exc

        records = payload.get("data") if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise ExtractionFailed("Extractor response has no schedule list")
        return records
