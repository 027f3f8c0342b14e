from __future__ import annotations

from pydantic import BaseModel, Field

from src.adapters.api.schemas.transit import (
    ReportViewSchema,
    RouteSummarySchema,
    StopSchema,
    TrackSchema,
)


class DashboardSchema(BaseModel):
    operator: str
    total_routes: int
    active_routes: int
    report_count: int
    recent_reports: list[ReportViewSchema]
    recent_routes: list[RouteSummarySchema]


class ReportsSchema(BaseModel):
    operator: str
    poll_interval_s: int
    reports: list[ReportViewSchema]


class TimetableCellSchema(BaseModel):
    run: int
    time: str | None = None
    label: str
    conditions: list[str] = []


class TimetableRowSchema(BaseModel):
    stop_id: int
    stop_name: str
    cells: list[TimetableCellSchema]


class TimetableSchema(BaseModel):
    destination: str | None = None
    runs: list[int]
    rows: list[TimetableRowSchema]


class RouteTimetableSchema(BaseModel):
    route: RouteSummarySchema
    runs: list[int]
    all_destinations: TimetableSchema
    destinations: list[TimetableSchema]


class StopTimeSchema(BaseModel):
    name: str
    time: str | None = None
    scheduled_time: str | None = None


class LegSchema(BaseModel):
    route_id: int
    name: str
    operator: str | None = None
    run: int | None = None
    delay_minutes: int
    is_delayed: bool
    departure_name: str | None = None
    departure_time: str | None = None
    arrival_name: str | None = None
    arrival_time: str | None = None
    stops: list[StopTimeSchema] = []


class JourneyOptionSchema(BaseModel):
    departure_name: str
    departure_time: str
    arrival_name: str
    arrival_time: str
    travel_time: float
    transfers: int
    legs: list[LegSchema]


class RouteTracksSchema(BaseModel):
    route_id: int
    current: TrackSchema | None = None
    tracks: list[TrackSchema]


class TrackingSchema(BaseModel):
    poll_interval_s: int
    routes: list[RouteTracksSchema]


class SchedulesSchema(BaseModel):
    operator: str
    stops: list[StopSchema]


class SelectionSchema(BaseModel):
    active_operator: str | None = None
    comparison_operators: list[str]


class SetActiveOperatorSchema(BaseModel):
    operator: str | None = Field(default=None, min_length=1)
