from __future__ import annotations

from dataclasses import dataclass, replace

from src.app.ports.output import ITransitApi, RouteSearchFilter
from src.domain.algorithms.clock import add_minutes, format_time
from src.domain.models import JourneySearchResult, ReportType, Route

# Placeholder heuristic: the magnitude is not read from the report.
ASSUMED_DELAY_MINUTES = 5

# Without an explicit radius, search widens from 1 km in 500 m steps until
# something is found or 25 km is reached.
INITIAL_SEARCH_RADIUS_M = 1000
SEARCH_RADIUS_STEP_M = 500
MAX_SEARCH_RADIUS_M = 25000


@dataclass(frozen=True, slots=True)
class StopTimeView:
    name: str
    time: str | None
    scheduled_time: str | None


@dataclass(frozen=True, slots=True)
class LegView:
    route_id: int
    name: str
    operator: str | None
    run: int | None
    delay_minutes: int
    departure_name: str | None
    departure_time: str | None
    arrival_name: str | None
    arrival_time: str | None
    stops: tuple[StopTimeView, ...] = ()

    @property
    def is_delayed(self) -> bool:
        return self.delay_minutes > 0


@dataclass(frozen=True, slots=True)
class JourneyOptionView:
    departure_name: str
    departure_time: str
    arrival_name: str
    arrival_time: str
    travel_time: float
    transfers: int
    legs: tuple[LegView, ...] = ()


def leg_delay_minutes(leg: Route) -> int:
    if leg.has_report_of_type(ReportType.DELAY):
        return ASSUMED_DELAY_MINUTES
    return 0


def display_time(raw: str | None, delay_minutes: int) -> str | None:
    if raw is None:
        return None
    if delay_minutes > 0:
        return add_minutes(raw, delay_minutes)
    return format_time(raw)


def present_leg(leg: Route) -> LegView:
    delay = leg_delay_minutes(leg)

    stops: list[StopTimeView] = []
    for stop in leg.stops:
        # A leg's stop carries the schedule of the run being ridden first.
        scheduled = stop.schedules[0].time if stop.schedules else None
        stops.append(
            StopTimeView(
                name=stop.name,
                time=display_time(scheduled, delay),
                scheduled_time=format_time(scheduled) if scheduled else None,
            )
        )

    return LegView(
        route_id=leg.id,
        name=leg.name,
        operator=leg.operator,
        run=leg.run,
        delay_minutes=delay,
        departure_name=leg.departure.name if leg.departure else None,
        departure_time=display_time(
            leg.departure.time if leg.departure else None, delay
        ),
        arrival_name=leg.arrival.name if leg.arrival else None,
        arrival_time=display_time(leg.arrival.time if leg.arrival else None, delay),
        stops=tuple(stops),
    )


def present_journey(result: JourneySearchResult) -> JourneyOptionView:
    """Display times for one journey option.

    Delays shift only the affected leg's times; the journey-level departure
    and arrival keep the times computed by the upstream search.
    """

    return JourneyOptionView(
        departure_name=result.departure.name,
        departure_time=format_time(result.departure.time),
        arrival_name=result.arrival.name,
        arrival_time=format_time(result.arrival.time),
        travel_time=result.travel_time,
        transfers=result.transfers,
        legs=tuple(present_leg(leg) for leg in result.routes),
    )


@dataclass(slots=True)
class JourneySearchService:
    """Journey search delegated upstream, presented with known delays."""

    transit_api: ITransitApi

    async def search(self, search: RouteSearchFilter) -> tuple[JourneyOptionView, ...]:
        if search.radius is not None:
            results = await self.transit_api.search_routes(search)
        else:
            results = await self._widening_search(search)
        return tuple(present_journey(r) for r in results)

    async def _widening_search(
        self, search: RouteSearchFilter
    ) -> tuple[JourneySearchResult, ...]:
        radius = INITIAL_SEARCH_RADIUS_M
        while True:
            results = await self.transit_api.search_routes(replace(search, radius=radius))
            if results or radius >= MAX_SEARCH_RADIUS_M:
                return results
            radius += SEARCH_RADIUS_STEP_M
