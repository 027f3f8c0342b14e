from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from src.adapters.api.dependencies import get_schedule_import_service
from src.adapters.api.schemas.schedule_import import (
    ImportedScheduleSchema,
    ImportResponseSchema,
)
from src.app.services.schedule_import_service import ScheduleImportService
from src.domain.exceptions import ExtractionFailed, UnsupportedImportFile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/schedules", tags=["schedules"])

_IMPORTED = TypeAdapter(list[ImportedScheduleSchema])


@router.post("/import", response_model=ImportResponseSchema)
async def import_schedule(
    file: UploadFile | None = File(default=None),
    service: ScheduleImportService = Depends(get_schedule_import_service),
):
    try:
        if file is None:
            raise UnsupportedImportFile("No file uploaded")
        # Reject on the declared size before buffering the whole upload.
        service.check_upload(
            filename=file.filename, content_type=file.content_type, size=file.size
        )
        content = await file.read()
        records = await service.extract(
            filename=file.filename, content_type=file.content_type, content=content
        )
        data = _IMPORTED.validate_python(records)
    except UnsupportedImportFile as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    except (ExtractionFailed, ValidationError) as exc:
        logger.warning("Schedule import failed: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process file", "details": str(exc)},
        )

    return ImportResponseSchema(data=data)
