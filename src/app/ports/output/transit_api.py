from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from src.domain.models import (
    JourneySearchResult,
    NewReport,
    Report,
    Route,
    Track,
)


@dataclass(frozen=True, slots=True)
class RouteSearchFilter:
    from_latitude: float | None = None
    from_longitude: float | None = None
    to_latitude: float | None = None
    to_longitude: float | None = None
    radius: float | None = None
    transfer_radius: float | None = None
    max_transfers: int | None = None


@dataclass(frozen=True, slots=True)
class StopSearchFilter:
    latitude: float | None = None
    longitude: float | None = None
    radius: float | None = None


class ITransitApi(ABC):
    """Port for the external transit API (single source of truth)."""

    @abstractmethod
    async def list_operators(self) -> tuple[str, ...]:
        raise NotImplementedError

    @abstractmethod
    async def get_operator_routes(self, operator: str) -> tuple[Route, ...]:
        """Routes of an operator, including their stops and reports."""

    @abstractmethod
    async def list_routes(self) -> tuple[Route, ...]:
        """Routes of every operator."""

    @abstractmethod
    async def get_route(
        self, route_id: int, *, destination: str | None = None
    ) -> Route | None:
        """Return the route, or None when the upstream has no such route."""

    @abstractmethod
    async def get_route_tracks(self, route_id: int) -> tuple[Track, ...]:
        raise NotImplementedError

    @abstractmethod
    async def search_routes(
        self, search: RouteSearchFilter
    ) -> tuple[JourneySearchResult, ...]:
        raise NotImplementedError

    @abstractmethod
    async def create_report(
        self, route_id: int, report: NewReport, *, operator: str | None = None
    ) -> Report:
        raise NotImplementedError

    @abstractmethod
    async def delete_report(self, report_id: int, *, operator: str | None = None) -> None:
        raise NotImplementedError
