from __future__ import annotations

from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from src.adapters.api.schemas.transit import (
    JourneySearchResultSchema,
    ReportSchema,
    RouteSchema,
    TrackSchema,
)
from src.domain.exceptions import SchemaViolation
from src.domain.models import JourneySearchResult, Report, Route, Track

T = TypeVar("T")

_OPERATORS = TypeAdapter(list[str])
_ROUTE = TypeAdapter(RouteSchema)
_ROUTES = TypeAdapter(list[RouteSchema])
_REPORT = TypeAdapter(ReportSchema)
_TRACKS = TypeAdapter(list[TrackSchema])
_SEARCH_RESULTS = TypeAdapter(list[JourneySearchResultSchema])


def _validate(resource: str, adapter: TypeAdapter[T], payload: Any) -> T:
    try:
        return adapter.validate_python(payload)
    except ValidationError as exc:
        raise SchemaViolation(
            resource, exc.errors(include_url=False, include_context=False)
        ) from exc


def _domain_error(resource: str, exc: ValueError) -> SchemaViolation:
    # Cross-field invariants are checked by the domain dataclasses.
    return SchemaViolation(resource, [{"type": "value_error", "msg": str(exc)}])


def parse_operators(payload: Any) -> tuple[str, ...]:
    names = _validate("operators", _OPERATORS, payload)
    return tuple(n for n in names if n.strip())


def parse_routes(payload: Any) -> tuple[Route, ...]:
    routes = _validate("routes", _ROUTES, payload)
    try:
        return tuple(r.to_domain() for r in routes)
    except ValueError as exc:
        raise _domain_error("routes", exc) from exc


def parse_route(payload: Any) -> Route:
    route = _validate("route", _ROUTE, payload)
    try:
        return route.to_domain()
    except ValueError as exc:
        raise _domain_error("route", exc) from exc


def parse_report(payload: Any) -> Report:
    return _validate("report", _REPORT, payload).to_domain()


def parse_tracks(payload: Any) -> tuple[Track, ...]:
    return tuple(t.to_domain() for t in _validate("tracks", _TRACKS, payload))


def parse_search_results(payload: Any) -> tuple[JourneySearchResult, ...]:
    results = _validate("route search", _SEARCH_RESULTS, payload)
    try:
        return tuple(r.to_domain() for r in results)
    except ValueError as exc:
        raise _domain_error("route search", exc) from exc
