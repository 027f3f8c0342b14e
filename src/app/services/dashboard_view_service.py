from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from src.app.ports.output import ITransitApi
from src.domain.algorithms.schedule_matrix import (
    DestinationTimetable,
    ScheduleMatrix,
    build_all_destinations_matrix,
    build_destination_matrices,
    route_runs,
)
from src.domain.exceptions import TransitApiError
from src.domain.models import NewReport, Report, Route, Stop, Track, current_position

logger = logging.getLogger(__name__)

TRACKS_POLL_INTERVAL_S = 15
REPORTS_POLL_INTERVAL_S = 30
RECENT_ITEMS = 5

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def _report_time(report: Report) -> datetime:
    ts = report.created_at
    if ts is None:
        return _OLDEST
    # Upstream may mix naive and aware timestamps; treat naive as UTC.
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def newest_first(reports: list[Report] | tuple[Report, ...]) -> tuple[Report, ...]:
    return tuple(sorted(reports, key=_report_time, reverse=True))


def reports_of_routes(routes: tuple[Route, ...]) -> tuple[Report, ...]:
    """Flatten the reports embedded in routes, filling in the owning route id."""

    out: list[Report] = []
    for route in routes:
        for report in route.reports:
            if report.route_id is None:
                report = replace(report, route_id=route.id)
            out.append(report)
    return tuple(out)


@dataclass(frozen=True, slots=True)
class DashboardView:
    operator: str
    total_routes: int
    active_routes: int
    report_count: int
    recent_reports: tuple[Report, ...]
    recent_routes: tuple[Route, ...]


@dataclass(frozen=True, slots=True)
class RouteTimetableView:
    route: Route
    runs: tuple[int, ...]
    all_destinations: ScheduleMatrix
    destinations: tuple[DestinationTimetable, ...]


@dataclass(frozen=True, slots=True)
class RouteTracksView:
    route_id: int
    tracks: tuple[Track, ...]
    current: Track | None


@dataclass(slots=True)
class DashboardViewService:
    """Read models behind the admin dashboard pages.

    All data comes from the transit API; this only reshapes it.
    """

    transit_api: ITransitApi

    async def dashboard(self, *, operator: str) -> DashboardView:
        routes = await self.transit_api.get_operator_routes(operator)
        reports = reports_of_routes(routes)
        return DashboardView(
            operator=operator,
            total_routes=len(routes),
            active_routes=sum(1 for r in routes if r.is_active),
            report_count=len(reports),
            recent_reports=newest_first(reports)[:RECENT_ITEMS],
            recent_routes=routes[:RECENT_ITEMS],
        )

    async def reports(self, *, operator: str) -> tuple[Report, ...]:
        routes = await self.transit_api.get_operator_routes(operator)
        return newest_first(reports_of_routes(routes))

    async def create_report(
        self, *, route_id: int, report: NewReport, operator: str | None = None
    ) -> Report:
        created = await self.transit_api.create_report(
            route_id, report, operator=operator
        )
        logger.info("Created %s report %s on route %s", report.type.value, created.id, route_id)
        return created

    async def delete_report(self, *, report_id: int, operator: str | None = None) -> None:
        await self.transit_api.delete_report(report_id, operator=operator)
        logger.info("Deleted report %s", report_id)

    async def route_timetable(
        self, *, route_id: int, destination: str | None = None
    ) -> RouteTimetableView | None:
        route = await self.transit_api.get_route(route_id, destination=destination)
        if route is None:
            return None
        return RouteTimetableView(
            route=route,
            runs=route_runs(route),
            all_destinations=build_all_destinations_matrix(route.stops),
            destinations=build_destination_matrices(route.stops),
        )

    async def operators(self) -> tuple[str, ...]:
        return await self.transit_api.list_operators()

    async def routes(
        self, *, operator: str | None = None, query: str = ""
    ) -> tuple[Route, ...]:
        """Routes of one operator, or of every operator when none is given."""

        if operator:
            routes = await self.transit_api.get_operator_routes(operator)
        else:
            routes = await self.transit_api.list_routes()
        needle = query.strip().lower()
        return tuple(
            r
            for r in routes
            if needle in r.name.lower() or needle in (r.operator or "").lower()
        )

    async def schedules(self, *, operator: str, query: str = "") -> tuple[Stop, ...]:
        routes = await self.transit_api.get_operator_routes(operator)
        needle = query.strip().lower()
        stops = (s for r in routes for s in r.stops)
        return tuple(s for s in stops if needle in s.name.lower())

    async def comparison_routes(self, operators: tuple[str, ...]) -> tuple[Route, ...]:
        """Routes of every selected operator; one failing operator is skipped."""

        async def one(operator: str) -> tuple[Route, ...]:
            try:
                return await self.transit_api.get_operator_routes(operator)
            except TransitApiError as exc:
                logger.warning("Routes for operator %s unavailable: %s", operator, exc)
                return ()

        results = await asyncio.gather(*(one(op) for op in operators))
        return tuple(r for routes in results for r in routes)

    async def tracking(self, route_ids: tuple[int, ...]) -> tuple[RouteTracksView, ...]:
        async def one(route_id: int) -> RouteTracksView:
            try:
                tracks = await self.transit_api.get_route_tracks(route_id)
            except TransitApiError as exc:
                logger.warning("Tracks for route %s unavailable: %s", route_id, exc)
                tracks = ()
            located = sorted(
                (t for t in tracks if t.coordinates is not None),
                key=lambda t: t.created_at,
                reverse=True,
            )
            return RouteTracksView(
                route_id=route_id,
                tracks=tuple(located),
                current=current_position(located),
            )

        # Fan out per route; results are combined once all have settled.
        return tuple(await asyncio.gather(*(one(rid) for rid in route_ids)))
