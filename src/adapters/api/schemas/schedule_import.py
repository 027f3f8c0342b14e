from __future__ import annotations

from pydantic import BaseModel, field_validator

from src.domain.models import TransportType


class ImportedStopSchema(BaseModel):
    name: str
    time: str
    conditions: list[str] = []
    direction: str | None = None
    run: int | None = None


class ImportedScheduleSchema(BaseModel):
    route: str
    operator: str
    type: TransportType = TransportType.BUS
    stops: list[ImportedStopSchema] = []

    @field_validator("type", mode="before")
    @classmethod
    def _default_type(cls, value: object) -> object:
        return value or TransportType.BUS


class ImportResponseSchema(BaseModel):
    data: list[ImportedScheduleSchema]
