from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.models import (
    MAX_DESCRIPTION_LENGTH,
    Condition,
    Coordinates,
    JourneyEndpoint,
    JourneySearchResult,
    NewReport,
    Report,
    ReportSeverity,
    ReportType,
    Route,
    Schedule,
    Stop,
    Track,
    TransportType,
)

# HH:MM with optional seconds, as sent by the transit API.
TIME_PATTERN = r"^\d{1,2}:\d{2}(:\d{2})?$"


class CoordinatesSchema(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)

    def to_domain(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)

    @classmethod
    def from_domain(cls, c: Coordinates | None) -> "CoordinatesSchema | None":
        if c is None:
            return None
        return cls(latitude=c.latitude, longitude=c.longitude)


def _coords(schema: CoordinatesSchema | None) -> Coordinates | None:
    return schema.to_domain() if schema is not None else None


class ConditionSchema(BaseModel):
    id: int
    name: str
    description: str | None = None


class ScheduleSchema(BaseModel):
    id: int
    time: str = Field(..., pattern=TIME_PATTERN)
    run: int | None = None
    destination: str | None = None
    sequence: int | None = None
    conditions: list[ConditionSchema] | None = None

    def to_domain(self) -> Schedule:
        return Schedule(
            id=self.id,
            time=self.time,
            run=self.run,
            destination=self.destination,
            sequence=self.sequence,
            conditions=tuple(
                Condition(id=c.id, name=c.name, description=c.description)
                for c in self.conditions or ()
            ),
        )

    @classmethod
    def from_domain(cls, s: Schedule) -> "ScheduleSchema":
        return cls(
            id=s.id,
            time=s.time,
            run=s.run,
            destination=s.destination,
            sequence=s.sequence,
            conditions=[
                ConditionSchema(id=c.id, name=c.name, description=c.description)
                for c in s.conditions
            ],
        )


class StopSchema(BaseModel):
    id: int
    name: str
    type: str | None = None
    coordinates: CoordinatesSchema | None = None
    schedules: list[ScheduleSchema] | None = None

    def to_domain(self) -> Stop:
        return Stop(
            id=self.id,
            name=self.name,
            type=self.type,
            coordinates=_coords(self.coordinates),
            schedules=tuple(s.to_domain() for s in self.schedules or ()),
        )

    @classmethod
    def from_domain(cls, s: Stop, *, with_schedules: bool = True) -> "StopSchema":
        return cls(
            id=s.id,
            name=s.name,
            type=s.type,
            coordinates=CoordinatesSchema.from_domain(s.coordinates),
            schedules=(
                [ScheduleSchema.from_domain(x) for x in s.schedules]
                if with_schedules
                else None
            ),
        )


class ReportSchema(BaseModel):
    id: int
    type: ReportType | None = None
    route_id: int | None = None
    run: int | None = None
    description: str | None = None
    coordinates: CoordinatesSchema | None = None
    created_at: datetime | None = None

    def to_domain(self) -> Report:
        return Report(
            id=self.id,
            type=self.type,
            route_id=self.route_id,
            run=self.run,
            description=self.description,
            coordinates=_coords(self.coordinates),
            created_at=self.created_at,
        )


class ReportViewSchema(ReportSchema):
    label: str
    severity: ReportSeverity

    @classmethod
    def from_domain(cls, r: Report) -> "ReportViewSchema":
        return cls(
            id=r.id,
            type=r.type,
            route_id=r.route_id,
            run=r.run,
            description=r.description,
            coordinates=CoordinatesSchema.from_domain(r.coordinates),
            created_at=r.created_at,
            label=r.type.label if r.type is not None else "",
            severity=r.severity,
        )


class CreateReportSchema(BaseModel):
    """Report creation input, validated before anything is sent upstream."""

    type: ReportType
    coordinates: CoordinatesSchema
    description: str | None = Field(default=None, max_length=MAX_DESCRIPTION_LENGTH)
    run: int | None = None

    def to_domain(self) -> NewReport:
        return NewReport(
            type=self.type,
            coordinates=self.coordinates.to_domain(),
            description=self.description,
            run=self.run,
        )

    @classmethod
    def from_domain(cls, r: NewReport) -> "CreateReportSchema":
        return cls(
            type=r.type,
            coordinates=CoordinatesSchema(
                latitude=r.coordinates.latitude, longitude=r.coordinates.longitude
            ),
            description=r.description,
            run=r.run,
        )


class TrackSchema(BaseModel):
    id: int
    route_id: int
    run: int
    created_at: datetime
    coordinates: CoordinatesSchema | None = None

    def to_domain(self) -> Track:
        return Track(
            id=self.id,
            route_id=self.route_id,
            run=self.run,
            created_at=self.created_at,
            coordinates=_coords(self.coordinates),
        )

    @classmethod
    def from_domain(cls, t: Track) -> "TrackSchema":
        return cls(
            id=t.id,
            route_id=t.route_id,
            run=t.run,
            created_at=t.created_at,
            coordinates=CoordinatesSchema.from_domain(t.coordinates),
        )


class JourneyEndpointSchema(BaseModel):
    name: str
    id: int
    coordinates: CoordinatesSchema
    time: str = Field(..., pattern=TIME_PATTERN)
    distance: float | None = None

    def to_domain(self) -> JourneyEndpoint:
        return JourneyEndpoint(
            name=self.name,
            id=self.id,
            coordinates=self.coordinates.to_domain(),
            time=self.time,
            distance=self.distance,
        )


class RouteSchema(BaseModel):
    id: int
    name: str
    operator: str | None = None
    type: TransportType | None = None
    destinations: list[str] | None = None
    stops: list[StopSchema] | None = None
    run: int | None = None
    reports: list[ReportSchema] | None = None
    departure: JourneyEndpointSchema | None = None
    arrival: JourneyEndpointSchema | None = None
    travel_time: float | None = None

    def to_domain(self) -> Route:
        return Route(
            id=self.id,
            name=self.name,
            operator=self.operator,
            type=self.type,
            destinations=tuple(self.destinations or ()),
            stops=tuple(s.to_domain() for s in self.stops or ()),
            run=self.run,
            reports=tuple(r.to_domain() for r in self.reports or ()),
            departure=self.departure.to_domain() if self.departure else None,
            arrival=self.arrival.to_domain() if self.arrival else None,
            travel_time=self.travel_time,
        )


class JourneySearchResultSchema(BaseModel):
    departure: JourneyEndpointSchema
    arrival: JourneyEndpointSchema
    travel_time: float
    transfers: int
    routes: list[RouteSchema] = []

    def to_domain(self) -> JourneySearchResult:
        return JourneySearchResult(
            departure=self.departure.to_domain(),
            arrival=self.arrival.to_domain(),
            travel_time=self.travel_time,
            transfers=self.transfers,
            routes=tuple(r.to_domain() for r in self.routes),
        )


class RouteSummarySchema(BaseModel):
    """Route header used by the view payloads (no nested stops)."""

    id: int
    name: str
    operator: str | None = None
    type: TransportType
    destinations: list[str] = []

    @classmethod
    def from_domain(cls, r: Route) -> "RouteSummarySchema":
        return cls(
            id=r.id,
            name=r.name,
            operator=r.operator,
            type=r.display_type,
            destinations=list(r.destinations),
        )
