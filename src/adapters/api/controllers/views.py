from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from src.adapters.api.dependencies import (
    get_dashboard_view_service,
    get_journey_search_service,
    get_operator_selection,
)
from src.adapters.api.schemas.transit import (
    CreateReportSchema,
    ReportViewSchema,
    RouteSummarySchema,
    StopSchema,
    TrackSchema,
)
from src.adapters.api.schemas.views import (
    DashboardSchema,
    JourneyOptionSchema,
    LegSchema,
    ReportsSchema,
    RouteTimetableSchema,
    RouteTracksSchema,
    SchedulesSchema,
    StopTimeSchema,
    TimetableCellSchema,
    TimetableRowSchema,
    TimetableSchema,
    TrackingSchema,
)
from src.app.ports.output import RouteSearchFilter
from src.app.services.dashboard_view_service import (
    REPORTS_POLL_INTERVAL_S,
    TRACKS_POLL_INTERVAL_S,
    DashboardViewService,
)
from src.app.services.journey_presenter import JourneyOptionView, JourneySearchService
from src.app.services.operator_selection import OperatorSelectionStore
from src.domain.algorithms.clock import format_time
from src.domain.algorithms.schedule_matrix import RunSchedules, cell_label
from src.domain.models import Stop

router = APIRouter(prefix="/views", tags=["views"])


def _timetable_to_schema(
    *,
    destination: str | None,
    runs: tuple[int, ...],
    stops: tuple[Stop, ...],
    stop_schedules: dict[int, RunSchedules],
) -> TimetableSchema:
    rows: list[TimetableRowSchema] = []
    for stop in stops:
        by_run = stop_schedules.get(stop.id, {})
        cells = []
        for run in runs:
            schedule = by_run.get(run)
            cells.append(
                TimetableCellSchema(
                    run=run,
                    time=format_time(schedule.time) if schedule else None,
                    label=cell_label(stop_schedules, stop.id, run),
                    conditions=[c.name for c in schedule.conditions] if schedule else [],
                )
            )
        rows.append(TimetableRowSchema(stop_id=stop.id, stop_name=stop.name, cells=cells))
    return TimetableSchema(destination=destination, runs=list(runs), rows=rows)


def _journey_to_schema(option: JourneyOptionView) -> JourneyOptionSchema:
    return JourneyOptionSchema(
        departure_name=option.departure_name,
        departure_time=option.departure_time,
        arrival_name=option.arrival_name,
        arrival_time=option.arrival_time,
        travel_time=option.travel_time,
        transfers=option.transfers,
        legs=[
            LegSchema(
                route_id=leg.route_id,
                name=leg.name,
                operator=leg.operator,
                run=leg.run,
                delay_minutes=leg.delay_minutes,
                is_delayed=leg.is_delayed,
                departure_name=leg.departure_name,
                departure_time=leg.departure_time,
                arrival_name=leg.arrival_name,
                arrival_time=leg.arrival_time,
                stops=[
                    StopTimeSchema(
                        name=s.name, time=s.time, scheduled_time=s.scheduled_time
                    )
                    for s in leg.stops
                ],
            )
            for leg in option.legs
        ],
    )


@router.get("/dashboard", response_model=DashboardSchema)
async def get_dashboard(
    operator: str = Query(..., min_length=1),
    service: DashboardViewService = Depends(get_dashboard_view_service),
) -> DashboardSchema:
    view = await service.dashboard(operator=operator)
    return DashboardSchema(
        operator=view.operator,
        total_routes=view.total_routes,
        active_routes=view.active_routes,
        report_count=view.report_count,
        recent_reports=[ReportViewSchema.from_domain(r) for r in view.recent_reports],
        recent_routes=[RouteSummarySchema.from_domain(r) for r in view.recent_routes],
    )


@router.get("/reports", response_model=ReportsSchema)
async def list_reports(
    operator: str = Query(..., min_length=1),
    service: DashboardViewService = Depends(get_dashboard_view_service),
) -> ReportsSchema:
    reports = await service.reports(operator=operator)
    return ReportsSchema(
        operator=operator,
        poll_interval_s=REPORTS_POLL_INTERVAL_S,
        reports=[ReportViewSchema.from_domain(r) for r in reports],
    )


@router.get("/operators", response_model=list[str])
async def list_operators(
    service: DashboardViewService = Depends(get_dashboard_view_service),
) -> list[str]:
    return list(await service.operators())


@router.get("/routes", response_model=list[RouteSummarySchema])
async def list_routes(
    operator: str | None = Query(default=None, min_length=1),
    q: str = Query(default=""),
    service: DashboardViewService = Depends(get_dashboard_view_service),
) -> list[RouteSummarySchema]:
    routes = await service.routes(operator=operator, query=q)
    return [RouteSummarySchema.from_domain(r) for r in routes]


@router.post(
    "/routes/{route_id}/reports", response_model=ReportViewSchema, status_code=201
)
async def create_report(
    route_id: int,
    req: CreateReportSchema,
    operator: str | None = Query(default=None, min_length=1),
    service: DashboardViewService = Depends(get_dashboard_view_service),
) -> ReportViewSchema:
    created = await service.create_report(
        route_id=route_id, report=req.to_domain(), operator=operator
    )
    return ReportViewSchema.from_domain(created)


@router.delete("/reports/{report_id}", status_code=204)
async def delete_report(
    report_id: int,
    operator: str | None = Query(default=None, min_length=1),
    service: DashboardViewService = Depends(get_dashboard_view_service),
) -> Response:
    await service.delete_report(report_id=report_id, operator=operator)
    return Response(status_code=204)


@router.get("/routes/{route_id}/timetable", response_model=RouteTimetableSchema)
async def get_route_timetable(
    route_id: int,
    destination: str | None = Query(default=None),
    service: DashboardViewService = Depends(get_dashboard_view_service),
) -> RouteTimetableSchema:
    view = await service.route_timetable(route_id=route_id, destination=destination)
    if view is None:
        raise HTTPException(status_code=404, detail="Route not found")

    matrix = view.all_destinations
    return RouteTimetableSchema(
        route=RouteSummarySchema.from_domain(view.route),
        runs=list(view.runs),
        all_destinations=_timetable_to_schema(
            destination=None,
            runs=matrix.runs,
            stops=view.route.stops,
            stop_schedules=matrix.stop_schedules,
        ),
        destinations=[
            _timetable_to_schema(
                destination=t.destination,
                runs=t.runs,
                stops=t.stops,
                stop_schedules=t.stop_schedules,
            )
            for t in view.destinations
        ],
    )


@router.get("/search", response_model=list[JourneyOptionSchema])
async def search_journeys(
    from_latitude: float | None = Query(default=None, alias="fromLatitude", ge=-90, le=90),
    from_longitude: float | None = Query(
        default=None, alias="fromLongitude", ge=-180, le=180
    ),
    to_latitude: float | None = Query(default=None, alias="toLatitude", ge=-90, le=90),
    to_longitude: float | None = Query(default=None, alias="toLongitude", ge=-180, le=180),
    radius: float | None = Query(default=None, gt=0),
    transfer_radius: float | None = Query(default=None, alias="transferRadius", gt=0),
    max_transfers: int | None = Query(default=None, alias="maxTransfers", ge=0),
    service: JourneySearchService = Depends(get_journey_search_service),
) -> list[JourneyOptionSchema]:
    options = await service.search(
        RouteSearchFilter(
            from_latitude=from_latitude,
            from_longitude=from_longitude,
            to_latitude=to_latitude,
            to_longitude=to_longitude,
            radius=radius,
            transfer_radius=transfer_radius,
            max_transfers=max_transfers,
        )
    )
    return [_journey_to_schema(o) for o in options]


@router.get("/tracking", response_model=TrackingSchema)
async def get_tracking(
    route_id: list[int] = Query(default=[]),
    service: DashboardViewService = Depends(get_dashboard_view_service),
) -> TrackingSchema:
    views = await service.tracking(tuple(dict.fromkeys(route_id)))
    return TrackingSchema(
        poll_interval_s=TRACKS_POLL_INTERVAL_S,
        routes=[
            RouteTracksSchema(
                route_id=v.route_id,
                current=TrackSchema.from_domain(v.current) if v.current else None,
                tracks=[TrackSchema.from_domain(t) for t in v.tracks],
            )
            for v in views
        ],
    )


@router.get("/tracking/routes", response_model=list[RouteSummarySchema])
async def list_tracking_routes(
    selection: OperatorSelectionStore = Depends(get_operator_selection),
    service: DashboardViewService = Depends(get_dashboard_view_service),
) -> list[RouteSummarySchema]:
    routes = await service.comparison_routes(selection.comparison_operators)
    return [RouteSummarySchema.from_domain(r) for r in routes]


@router.get("/schedules", response_model=SchedulesSchema)
async def list_schedules(
    operator: str = Query(..., min_length=1),
    q: str = Query(default=""),
    service: DashboardViewService = Depends(get_dashboard_view_service),
) -> SchedulesSchema:
    stops = await service.schedules(operator=operator, query=q)
    return SchedulesSchema(
        operator=operator, stops=[StopSchema.from_domain(s) for s in stops]
    )
