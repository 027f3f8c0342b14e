from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import httpx
import pytest

from src.adapters.api.dependencies import (
    get_dashboard_view_service,
    get_journey_search_service,
    get_operator_selection,
)
from src.adapters.selection.storage import InMemorySelectionStorage
from src.app.ports.output import RouteSearchFilter
from src.app.services.dashboard_view_service import DashboardViewService
from src.app.services.journey_presenter import JourneySearchService
from src.app.services.operator_selection import OperatorSelectionStore
from src.domain.exceptions import SchemaViolation, UpstreamStatusError, UpstreamUnavailable
from src.domain.models import (
    Coordinates,
    JourneyEndpoint,
    JourneySearchResult,
    NewReport,
    Report,
    ReportType,
    Route,
    Schedule,
    Stop,
    Track,
    TransportType,
)
from src.main import app

_HERE = Coordinates(latitude=50.06, longitude=19.94)


def _at(hour: int) -> datetime:
    return datetime(2025, 10, 4, hour, tzinfo=timezone.utc)


def _scenario_route() -> Route:
    return Route(
        id=7,
        name="R",
        operator="LUZ",
        type=TransportType.BUS,
        destinations=("X", "Y"),
        stops=(
            Stop(
                id=1,
                name="A",
                schedules=(
                    Schedule(id=1, time="08:00", run=1, destination="X", sequence=1),
                    Schedule(id=3, time="09:00", run=2, destination="Y", sequence=1),
                ),
            ),
            Stop(
                id=2,
                name="B",
                schedules=(Schedule(id=2, time="08:10", run=1, destination="X", sequence=2),),
            ),
            Stop(id=3, name="C"),
        ),
    )


@dataclass(slots=True)
class FakeTransitApi:
    routes_by_operator: dict[str, tuple[Route, ...]] = field(default_factory=dict)
    operators: tuple[str, ...] = ()
    all_routes: tuple[Route, ...] = ()
    routes_by_id: dict[int, Route] = field(default_factory=dict)
    tracks_by_route: dict[int, tuple[Track, ...]] = field(default_factory=dict)
    search_results: tuple[JourneySearchResult, ...] = ()
    failing_operators: frozenset[str] = frozenset()
    created: list[tuple[int, NewReport, str | None]] = field(default_factory=list)
    deleted: list[int] = field(default_factory=list)
    searches: list[RouteSearchFilter] = field(default_factory=list)
    create_error: Exception | None = None

    async def list_operators(self) -> tuple[str, ...]:
        return self.operators

    async def list_routes(self) -> tuple[Route, ...]:
        return self.all_routes

    async def get_operator_routes(self, operator: str) -> tuple[Route, ...]:
        if operator in self.failing_operators:
            raise UpstreamUnavailable(f"{operator} is down")
        return self.routes_by_operator.get(operator, ())

    async def get_route(self, route_id: int, *, destination: str | None = None) -> Route | None:
        return self.routes_by_id.get(route_id)

    async def get_route_tracks(self, route_id: int) -> tuple[Track, ...]:
        if route_id not in self.tracks_by_route:
            raise UpstreamStatusError(500, "boom")
        return self.tracks_by_route[route_id]

    async def search_routes(self, search: RouteSearchFilter) -> tuple[JourneySearchResult, ...]:
        self.searches.append(search)
        return self.search_results

    async def create_report(
        self, route_id: int, report: NewReport, *, operator: str | None = None
    ) -> Report:
        if self.create_error is not None:
            raise self.create_error
        self.created.append((route_id, report, operator))
        return Report(
            id=99,
            type=report.type,
            route_id=route_id,
            description=report.description,
            coordinates=report.coordinates,
            created_at=_at(12),
        )

    async def delete_report(self, report_id: int, *, operator: str | None = None) -> None:
        self.deleted.append(report_id)


def _install(api: FakeTransitApi) -> None:
    app.dependency_overrides[get_dashboard_view_service] = lambda: DashboardViewService(
        transit_api=api
    )
    app.dependency_overrides[get_journey_search_service] = lambda: JourneySearchService(
        transit_api=api
    )


@pytest.mark.unit
@pytest.mark.anyio
async def test_dashboard_summarizes_operator_routes() -> None:
    bus = Route(
        id=1,
        name="1",
        type=TransportType.BUS,
        reports=(
            Report(id=10, type=ReportType.DELAY, created_at=_at(8)),
            Report(id=11, type=ReportType.ACCIDENT, created_at=_at(10)),
        ),
    )
    tram = Route(id=2, name="2", type=TransportType.TRAM, reports=(Report(id=12, created_at=_at(9)),))
    _install(FakeTransitApi(routes_by_operator={"LUZ": (bus, tram)}))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/views/dashboard", params={"operator": "LUZ"})

    app.dependency_overrides.clear()

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["total_routes"] == 2
    assert payload["active_routes"] == 1
    assert payload["report_count"] == 3
    assert [r["id"] for r in payload["recent_reports"]] == [11, 12, 10]
    assert [r["route_id"] for r in payload["recent_reports"]] == [1, 2, 1]
    assert payload["recent_reports"][0]["severity"] == "critical"


@pytest.mark.unit
@pytest.mark.anyio
async def test_route_timetable_matrices() -> None:
    route = _scenario_route()
    _install(FakeTransitApi(routes_by_id={7: route}))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/views/routes/7/timetable")

    app.dependency_overrides.clear()

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["runs"] == [1, 2]

    rows = payload["all_destinations"]["rows"]
    assert [r["stop_name"] for r in rows] == ["A", "B", "C"]
    assert [[c["label"] for c in r["cells"]] for r in rows] == [
        ["08:00", "09:00"],
        ["08:10", "-"],
        ["-", "-"],
    ]

    x, y = payload["destinations"]
    assert (x["destination"], x["runs"]) == ("X", [1])
    assert [r["stop_name"] for r in x["rows"]] == ["A", "B"]
    assert (y["destination"], y["runs"]) == ("Y", [2])
    assert [r["stop_name"] for r in y["rows"]] == ["A"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_route_timetable_not_found() -> None:
    _install(FakeTransitApi())

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/views/routes/404/timetable")

    app.dependency_overrides.clear()

    assert resp.status_code == 404


@pytest.mark.unit
@pytest.mark.anyio
async def test_create_report() -> None:
    api = FakeTransitApi()
    _install(api)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.post(
            "/views/routes/7/reports",
            params={"operator": "LUZ"},
            json={
                "type": "failure",
                "description": "Bus broke down",
                "coordinates": {"latitude": 50.06, "longitude": 19.94},
            },
        )

    app.dependency_overrides.clear()

    assert resp.status_code == 201
    assert resp.json()["label"] == "Awaria"
    ((route_id, report, operator),) = api.created
    assert (route_id, report.type, operator) == (7, ReportType.FAILURE, "LUZ")


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize(
    "body",
    [
        {"type": "delay", "description": "x" * 256, "coordinates": {"latitude": 0, "longitude": 0}},
        {"type": "delay"},
        {"type": "teleported", "coordinates": {"latitude": 0, "longitude": 0}},
        {"type": "delay", "coordinates": {"latitude": 91, "longitude": 0}},
    ],
)
async def test_invalid_report_is_rejected_locally(body: dict) -> None:
    api = FakeTransitApi()
    _install(api)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.post("/views/routes/7/reports", json=body)

    app.dependency_overrides.clear()

    assert resp.status_code == 422
    assert api.created == []


@pytest.mark.unit
@pytest.mark.anyio
async def test_upstream_rejection_is_surfaced_verbatim() -> None:
    _install(FakeTransitApi(create_error=UpstreamStatusError(400, {"message": "Route closed"})))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.post(
            "/views/routes/7/reports",
            json={"type": "other", "coordinates": {"latitude": 0, "longitude": 0}},
        )

    app.dependency_overrides.clear()

    assert resp.status_code == 400
    assert resp.json() == {"message": "Route closed"}


@pytest.mark.unit
@pytest.mark.anyio
async def test_upstream_outage_and_bad_payload_map_to_502() -> None:
    _install(FakeTransitApi(failing_operators=frozenset({"LUZ"})))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        outage = await client.get("/views/reports", params={"operator": "LUZ"})

    class _BrokenApi(FakeTransitApi):
        async def get_operator_routes(self, operator: str) -> tuple[Route, ...]:
            raise SchemaViolation("routes", [{"type": "missing", "msg": "Field required"}])

    _install(_BrokenApi())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        broken = await client.get("/views/reports", params={"operator": "LUZ"})

    app.dependency_overrides.clear()

    assert outage.status_code == 502
    assert broken.status_code == 502
    assert broken.json()["errors"][0]["type"] == "missing"


@pytest.mark.unit
@pytest.mark.anyio
async def test_delete_report() -> None:
    api = FakeTransitApi()
    _install(api)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.delete("/views/reports/5")

    app.dependency_overrides.clear()

    assert resp.status_code == 204
    assert api.deleted == [5]


@pytest.mark.unit
@pytest.mark.anyio
async def test_search_applies_delay_to_reported_leg() -> None:
    end = JourneyEndpoint(name="Dworzec", id=1, coordinates=_HERE, time="10:00:00")
    leg = Route(
        id=12,
        name="12",
        reports=(Report(id=1, type=ReportType.DELAY),),
        departure=end,
        arrival=JourneyEndpoint(name="Rynek", id=2, coordinates=_HERE, time="10:20:00"),
    )
    api = FakeTransitApi(
        search_results=(
            JourneySearchResult(
                departure=end, arrival=leg.arrival, travel_time=20, transfers=0, routes=(leg,)
            ),
        )
    )
    _install(api)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get(
            "/views/search",
            params={"fromLatitude": 50.06, "fromLongitude": 19.94, "maxTransfers": 1},
        )

    app.dependency_overrides.clear()

    assert resp.status_code == 200
    (option,) = resp.json()
    assert option["departure_time"] == "10:00"
    assert option["legs"][0]["departure_time"] == "10:05"
    assert option["legs"][0]["arrival_time"] == "10:25"
    assert api.searches[0].max_transfers == 1
    assert api.searches[0].to_latitude is None
    assert api.searches[0].radius == 1000


@pytest.mark.unit
@pytest.mark.anyio
async def test_tracking_tolerates_failing_route() -> None:
    tracks = (
        Track(id=1, route_id=1, run=1, created_at=_at(8), coordinates=_HERE),
        Track(id=2, route_id=1, run=1, created_at=_at(9), coordinates=_HERE),
        Track(id=3, route_id=1, run=1, created_at=_at(10)),
    )
    _install(FakeTransitApi(tracks_by_route={1: tracks}))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/views/tracking?route_id=1&route_id=2&route_id=1")

    app.dependency_overrides.clear()

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["poll_interval_s"] == 15
    first, second = payload["routes"]
    assert [t["id"] for t in first["tracks"]] == [2, 1]
    # The newest sample has no position, so it is neither drawn nor current.
    assert first["current"]["id"] == 2
    assert second == {"route_id": 2, "current": None, "tracks": []}


@pytest.mark.unit
@pytest.mark.anyio
async def test_tracking_routes_follow_comparison_selection() -> None:
    store = OperatorSelectionStore(storage=InMemorySelectionStorage())
    store.toggle_comparison_operator("MPK")
    store.toggle_comparison_operator("KMŁ")
    _install(
        FakeTransitApi(
            routes_by_operator={
                "LUZ": (Route(id=1, name="1"),),
                "MPK": (Route(id=2, name="2"),),
            },
            failing_operators=frozenset({"KMŁ"}),
        )
    )
    app.dependency_overrides[get_operator_selection] = lambda: store

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/views/tracking/routes")

    app.dependency_overrides.clear()

    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()] == [1, 2]
    assert resp.json()[0]["type"] == "bus"


@pytest.mark.unit
@pytest.mark.anyio
async def test_schedules_filter_stops_by_name() -> None:
    route = _scenario_route()
    _install(FakeTransitApi(routes_by_operator={"LUZ": (route,)}))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/views/schedules", params={"operator": "LUZ", "q": "b"})

    app.dependency_overrides.clear()

    assert resp.status_code == 200
    assert [s["name"] for s in resp.json()["stops"]] == ["B"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_operators_are_listed() -> None:
    _install(FakeTransitApi(operators=("LUZ", "MPK", "KMŁ")))

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/views/operators")

    app.dependency_overrides.clear()

    assert resp.status_code == 200
    assert resp.json() == ["LUZ", "MPK", "KMŁ"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_routes_of_one_operator_or_all_filtered_by_name() -> None:
    _install(
        FakeTransitApi(
            routes_by_operator={
                "LUZ": (Route(id=1, name="Linia 12", operator="LUZ"), Route(id=2, name="7", operator="LUZ")),
            },
            all_routes=(
                Route(id=1, name="Linia 12", operator="LUZ"),
                Route(id=3, name="S1", operator="Koleje Małopolskie", type=TransportType.TRAIN),
                Route(id=4, name="52", operator="MPK"),
            ),
        )
    )

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        own = await client.get("/views/routes", params={"operator": "LUZ"})
        by_route_name = await client.get("/views/routes", params={"operator": "LUZ", "q": "LINIA"})
        by_operator_name = await client.get("/views/routes", params={"q": "małopolskie"})
        everything = await client.get("/views/routes")

    app.dependency_overrides.clear()

    assert [r["id"] for r in own.json()] == [1, 2]
    assert [r["id"] for r in by_route_name.json()] == [1]
    assert [r["id"] for r in by_operator_name.json()] == [3]
    assert by_operator_name.json()[0]["type"] == "train"
    assert [r["id"] for r in everything.json()] == [1, 3, 4]
