from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from src.adapters.api.schemas.transit import CreateReportSchema
from src.adapters.settings import TransitRuntimeConfig
from src.app.ports.output import ITransitApi, RouteSearchFilter
from src.domain.exceptions import (
    SchemaViolation,
    UpstreamStatusError,
    UpstreamUnavailable,
)
from src.domain.models import (
    JourneySearchResult,
    NewReport,
    Report,
    Route,
    Track,
    validate_operator_name,
)

from . import parsing
from .endpoints import TransitApiEndpoints, route_search_params
from .response_cache import CacheKey, ResponseCache

logger = logging.getLogger(__name__)

# Resources whose payloads embed reports; dropped on report create/delete.
_REPORT_BEARING = ("operator_routes", "routes", "route", "route_search")


def _response_body(resp: httpx.Response) -> Any:
    if "application/json" in resp.headers.get("content-type", ""):
        try:
            return resp.json()
        except ValueError:
            pass
    return resp.text


@dataclass(slots=True)
class HttpTransitApi(ITransitApi):
    """Typed client for the external transit API.

    Env vars (via TransitRuntimeConfig):
      - TRANSIT_API_BASE_URL
      - TRANSIT_API_TIMEOUT_S (default 15)
      - TRANSIT_CACHE_TTL_S (default 30)

    Notes:
      - Responses are validated once here and returned as domain types.
      - Reads are cached per canonical key; report writes invalidate the
        keys whose payloads they change.
      - Tracks are never served from cache (only de-duplicated in flight).
    """

    base_url: str | None = None
    timeout_s: float | None = None
    cache_ttl_s: float | None = None
    transport: httpx.AsyncBaseTransport | None = None

    _cache: ResponseCache = field(init=False, repr=False)
    _endpoints: TransitApiEndpoints = field(
        default_factory=lambda: TransitApiEndpoints(base=""), init=False, repr=False
    )

    def __post_init__(self) -> None:
        cfg = TransitRuntimeConfig.from_env()
        if self.base_url is None:
            self.base_url = cfg.transit_api_base_url
        if self.timeout_s is None:
            self.timeout_s = cfg.transit_api_timeout_s
        if self.cache_ttl_s is None:
            self.cache_ttl_s = cfg.cache_ttl_s
        self._cache = ResponseCache(ttl_s=float(self.cache_ttl_s))

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    async def _request(
        self, method: str, path: str, *, json: Any | None = None
    ) -> Any:
        url = f"{(self.base_url or '').rstrip('/')}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.request(method, url, json=json)
        except httpx.HTTPError as exc:
            logger.warning("Upstream %s %s failed: %s", method, url, exc)
            raise UpstreamUnavailable(f"Transit API unreachable: {exc}") from exc

        if resp.status_code >= 400:
            logger.info("Upstream %s %s -> HTTP %s", method, url, resp.status_code)
            raise UpstreamStatusError(resp.status_code, _response_body(resp))

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise SchemaViolation(
                path, [{"type": "json_invalid", "msg": "Response is not JSON"}]
            ) from exc

    async def list_operators(self) -> tuple[str, ...]:
        async def fetch() -> tuple[str, ...]:
            payload = await self._request("GET", self._endpoints.operators.get_all())
            return parsing.parse_operators(payload or [])

        return await self._cache.get_or_fetch(CacheKey.of("operators"), fetch)

    async def get_operator_routes(self, operator: str) -> tuple[Route, ...]:
        operator = validate_operator_name(operator)

        async def fetch() -> tuple[Route, ...]:
            payload = await self._request(
                "GET", self._endpoints.operators.get_data(operator)
            )
            return parsing.parse_routes(payload or [])

        return await self._cache.get_or_fetch(
            CacheKey.of("operator_routes", operator=operator), fetch
        )

    async def list_routes(self) -> tuple[Route, ...]:
        async def fetch() -> tuple[Route, ...]:
            payload = await self._request("GET", self._endpoints.routes.get_all())
            return parsing.parse_routes(payload or [])

        return await self._cache.get_or_fetch(CacheKey.of("routes"), fetch)

    async def get_route(
        self, route_id: int, *, destination: str | None = None
    ) -> Route | None:
        async def fetch() -> Route | None:
            try:
                payload = await self._request(
                    "GET", self._endpoints.routes.get_by_id(route_id, destination)
                )
            except UpstreamStatusError as exc:
                if exc.status_code == 404:
                    return None
                raise
            if not payload:
                return None
            return parsing.parse_route(payload)

        key = CacheKey.of(
            "route", route_id=route_id, filters={"destination": destination}
        )
        return await self._cache.get_or_fetch(key, fetch)

    async def get_route_tracks(self, route_id: int) -> tuple[Track, ...]:
        async def fetch() -> tuple[Track, ...]:
            payload = await self._request(
                "GET", self._endpoints.routes.get_tracks(route_id)
            )
            return parsing.parse_tracks(payload or [])

        return await self._cache.get_or_fetch(
            CacheKey.of("route_tracks", route_id=route_id), fetch, ttl_s=0.0
        )

    async def search_routes(
        self, search: RouteSearchFilter
    ) -> tuple[JourneySearchResult, ...]:
        async def fetch() -> tuple[JourneySearchResult, ...]:
            payload = await self._request("GET", self._endpoints.routes.get_all(search))
            return parsing.parse_search_results(payload or [])

        key = CacheKey.of("route_search", filters=route_search_params(search))
        return await self._cache.get_or_fetch(key, fetch)

    async def create_report(
        self, route_id: int, report: NewReport, *, operator: str | None = None
    ) -> Report:
        body = CreateReportSchema.from_domain(report).model_dump(
            mode="json", exclude_none=True
        )
        payload = await self._request(
            "POST", self._endpoints.routes.create_report(route_id), json=body
        )
        self._invalidate_reports(route_id=route_id, operator=operator)
        return parsing.parse_report(payload)

    async def delete_report(self, report_id: int, *, operator: str | None = None) -> None:
        await self._request("DELETE", self._endpoints.reports.delete(report_id))
        self._invalidate_reports(route_id=None, operator=operator)

    def _invalidate_reports(self, *, route_id: int | None, operator: str | None) -> None:
        dropped = self._cache.invalidate(
            resources=_REPORT_BEARING, operator=operator, route_id=route_id
        )
        logger.debug("Invalidated %d cached responses after report change", dropped)
