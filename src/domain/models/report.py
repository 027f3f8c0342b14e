from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .geo import Coordinates

MAX_DESCRIPTION_LENGTH = 255


class ReportSeverity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


class ReportType(str, Enum):
    DELAY = "delay"
    ACCIDENT = "accident"
    PRESS = "press"
    FAILURE = "failure"
    DID_NOT_ARRIVE = "did_not_arrive"
    CHANGE = "change"
    OTHER = "other"
    # Upstream spelling.
    DIFFRENT_STOP_LOCATION = "diffrent_stop_location"
    REQUEST_STOP = "request_stop"

    @property
    def severity(self) -> ReportSeverity:
        if self in _CRITICAL:
            return ReportSeverity.CRITICAL
        if self in _WARNING:
            return ReportSeverity.WARNING
        return ReportSeverity.INFO

    @property
    def label(self) -> str:
        return _LABELS[self]


_CRITICAL = frozenset(
    {ReportType.ACCIDENT, ReportType.FAILURE, ReportType.DID_NOT_ARRIVE}
)
_WARNING = frozenset({ReportType.DELAY, ReportType.PRESS})

_LABELS: dict[ReportType, str] = {
    ReportType.DELAY: "Opóźnienie",
    ReportType.ACCIDENT: "Wypadek",
    ReportType.PRESS: "Tłok",
    ReportType.FAILURE: "Awaria",
    ReportType.DID_NOT_ARRIVE: "Nie przyjechał",
    ReportType.CHANGE: "Zmiana",
    ReportType.OTHER: "Inne",
    ReportType.DIFFRENT_STOP_LOCATION: "Inna lokalizacja przystanku",
    ReportType.REQUEST_STOP: "Przystanek na żądanie",
}


@dataclass(frozen=True, slots=True)
class Report:
    """A rider-submitted incident. Immutable once created."""

    id: int
    type: ReportType | None = None
    route_id: int | None = None
    run: int | None = None
    description: str | None = None
    coordinates: Coordinates | None = None
    created_at: datetime | None = None

    @property
    def severity(self) -> ReportSeverity:
        if self.type is None:
            return ReportSeverity.INFO
        return self.type.severity


@dataclass(frozen=True, slots=True)
class NewReport:
    type: ReportType
    coordinates: Coordinates
    description: str | None = None
    run: int | None = None

    def __post_init__(self) -> None:
        if self.description is not None and len(self.description) > MAX_DESCRIPTION_LENGTH:
            raise ValueError(
                f"Description longer than {MAX_DESCRIPTION_LENGTH} characters"
            )
