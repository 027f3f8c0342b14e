from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping


class IScheduleExtractor(ABC):
    """Port for the external AI extraction of schedules from images/PDFs."""

    @abstractmethod
    async def extract(
        self, *, filename: str, content_type: str, content: bytes
    ) -> list[Mapping[str, Any]]:
        """Return raw `{route, operator, type, stops: [...]}` records."""
