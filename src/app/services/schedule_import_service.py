from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from src.app.ports.output import IScheduleExtractor
from src.domain.exceptions import ExtractionFailed, UnsupportedImportFile

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def is_supported_content_type(content_type: str | None) -> bool:
    if not content_type:
        return False
    ct = content_type.split(";", 1)[0].strip().lower()
    return ct.startswith("image/") or ct == "application/pdf"


@dataclass(slots=True)
class ScheduleImportService:
    """Checks an uploaded timetable file and hands it to the extractor."""

    extractor: IScheduleExtractor
    max_bytes: int = MAX_UPLOAD_BYTES

    def check_upload(
        self, *, filename: str | None, content_type: str | None, size: int | None
    ) -> None:
        """Reject an upload from its metadata. `size` may be unknown (None)."""

        if not filename:
            raise UnsupportedImportFile("No file uploaded")
        if not is_supported_content_type(content_type):
            raise UnsupportedImportFile(
                "Unsupported file type. Please upload an image or PDF."
            )
        if size is not None and size > self.max_bytes:
            raise UnsupportedImportFile("File too large (max 10MB)")

    async def extract(
        self, *, filename: str | None, content_type: str | None, content: bytes | None
    ) -> list[Mapping[str, Any]]:
        if content is None:
            raise UnsupportedImportFile("No file uploaded")
        self.check_upload(filename=filename, content_type=content_type, size=len(content))

        logger.info(
            "Extracting schedules from %s (%s, %d bytes)",
            filename,
            content_type,
            len(content),
        )
        try:
            return await self.extractor.extract(
                filename=filename, content_type=str(content_type), content=content
            )
        except ExtractionFailed:
            raise
        except Exception as exc:
            raise ExtractionFailed(str(exc) or exc.__class__.__name__) from exc
