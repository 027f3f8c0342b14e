from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .geo import Coordinates
from .report import Report, ReportType
from .stop import Stop


class TransportType(str, Enum):
    BUS = "bus"
    TRAIN = "train"
    TRAM = "tram"


@dataclass(frozen=True, slots=True)
class JourneyEndpoint:
    """Boarding or alighting point of a journey (or of a single leg)."""

    name: str
    id: int
    coordinates: Coordinates
    time: str
    distance: float | None = None


@dataclass(frozen=True, slots=True)
class Route:
    """A transit line.

    When returned as a leg of a journey search, `run`, `departure`,
    `arrival` and `reports` describe that specific circulation.
    """

    id: int
    name: str
    operator: str | None = None
    type: TransportType | None = None
    destinations: tuple[str, ...] = ()
    stops: tuple[Stop, ...] = ()
    run: int | None = None
    reports: tuple[Report, ...] = ()
    departure: JourneyEndpoint | None = None
    arrival: JourneyEndpoint | None = None
    travel_time: float | None = None

    @property
    def display_type(self) -> TransportType:
        return self.type or TransportType.BUS

    @property
    def is_active(self) -> bool:
        # Dashboard counts only explicitly typed bus/train lines.
        return self.type in (TransportType.BUS, TransportType.TRAIN)

    def has_report_of_type(self, report_type: ReportType) -> bool:
        return any(r.type == report_type for r in self.reports)


@dataclass(frozen=True, slots=True)
class JourneySearchResult:
    """One candidate multi-leg journey; `routes` are legs in travel order."""

    departure: JourneyEndpoint
    arrival: JourneyEndpoint
    travel_time: float
    transfers: int
    routes: tuple[Route, ...] = ()

    def __post_init__(self) -> None:
        if self.routes and self.transfers != len(self.routes) - 1:
            raise ValueError(
                f"transfers={self.transfers} does not match {len(self.routes)} legs"
            )
