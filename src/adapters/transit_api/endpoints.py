"""URL builders for the transit API.

Pure functions: no state, no I/O. Every path segment is percent-encoded
(operator names may contain non-ASCII characters) and query parameters whose
value is None are omitted. A bare `?` is never emitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import quote, urlencode

from src.app.ports.output import RouteSearchFilter, StopSearchFilter

API_BASE_PATH = "/api/v1"


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


def _format_value(value: Any) -> str:
    # Match JS number formatting: 18.0 -> "18".
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _with_query(path: str, params: Mapping[str, Any]) -> str:
    present = [(k, _format_value(v)) for k, v in params.items() if v is not None]
    if not present:
        return path
    return f"{path}?{urlencode(present)}"


def route_search_params(search: RouteSearchFilter | None) -> dict[str, Any]:
    if search is None:
        return {}
    return {
        "fromLatitude": search.from_latitude,
        "fromLongitude": search.from_longitude,
        "toLatitude": search.to_latitude,
        "toLongitude": search.to_longitude,
        "radius": search.radius,
        "transferRadius": search.transfer_radius,
        "maxTransfers": search.max_transfers,
    }


def stop_search_params(search: StopSearchFilter | None) -> dict[str, Any]:
    if search is None:
        return {}
    return {
        "latitude": search.latitude,
        "longitude": search.longitude,
        "radius": search.radius,
    }


@dataclass(frozen=True, slots=True)
class OperatorEndpoints:
    base: str

    def get_all(self) -> str:
        return f"{self.base}/operators"

    def get_data(self, name: str) -> str:
        return f"{self.base}/operators/{_segment(name)}"

    def get_routes(self, name: str) -> str:
        return f"{self.get_data(name)}/routes"

    def get_reports(self, name: str) -> str:
        return f"{self.get_data(name)}/reports"

    def get_schedules(self, name: str) -> str:
        return f"{self.get_data(name)}/schedules"

    def get_stops(self, name: str) -> str:
        return f"{self.get_data(name)}/stops"


@dataclass(frozen=True, slots=True)
class RouteEndpoints:
    base: str

    def get_all(self, search: RouteSearchFilter | None = None) -> str:
        return _with_query(f"{self.base}/routes", route_search_params(search))

    def get_by_id(self, route_id: int, destination: str | None = None) -> str:
        return _with_query(
            f"{self.base}/routes/{_segment(route_id)}",
            {"destination": destination or None},
        )

    def get_reports(self, route_id: int) -> str:
        return f"{self.base}/routes/{_segment(route_id)}/reports"

    def create_report(self, route_id: int) -> str:
        return self.get_reports(route_id)

    def get_tracks(self, route_id: int) -> str:
        return f"{self.base}/routes/{_segment(route_id)}/tracks"

    def create_track(self, route_id: int) -> str:
        return self.get_tracks(route_id)


@dataclass(frozen=True, slots=True)
class StopEndpoints:
    base: str

    def get_all(self, search: StopSearchFilter | None = None) -> str:
        return _with_query(f"{self.base}/stops", stop_search_params(search))

    def get_by_id(self, stop_id: int) -> str:
        return f"{self.base}/stops/{_segment(stop_id)}"


@dataclass(frozen=True, slots=True)
class ReportEndpoints:
    base: str

    def delete(self, report_id: int) -> str:
        return f"{self.base}/reports/{_segment(report_id)}"


@dataclass(frozen=True, slots=True)
class TransitApiEndpoints:
    """Endpoint builders rooted at `base` (the proxy path by default)."""

    base: str = API_BASE_PATH

    @property
    def operators(self) -> OperatorEndpoints:
        return OperatorEndpoints(self.base)

    @property
    def routes(self) -> RouteEndpoints:
        return RouteEndpoints(self.base)

    @property
    def stops(self) -> StopEndpoints:
        return StopEndpoints(self.base)

    @property
    def reports(self) -> ReportEndpoints:
        return ReportEndpoints(self.base)


api = TransitApiEndpoints()
