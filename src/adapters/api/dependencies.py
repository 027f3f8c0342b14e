from __future__ import annotations

from functools import lru_cache

from fastapi import Request

from src.adapters.extraction.http_schedule_extractor import HttpScheduleExtractor
from src.adapters.proxy.upstream_proxy import UpstreamProxy
from src.adapters.selection.storage import JsonFileSelectionStorage
from src.adapters.transit_api.http_transit_api import HttpTransitApi
from src.app.ports.output import ITransitApi
from src.app.services.dashboard_view_service import DashboardViewService
from src.app.services.journey_presenter import JourneySearchService
from src.app.services.operator_selection import OperatorSelectionStore
from src.app.services.schedule_import_service import ScheduleImportService
from src.domain.exceptions import OperatorSelectionUnavailable


@lru_cache(maxsize=1)
def get_transit_api() -> ITransitApi:
    # One process-wide gateway so its response cache is shared across requests.
    return HttpTransitApi()


def get_upstream_proxy() -> UpstreamProxy:
    return UpstreamProxy()


def get_dashboard_view_service() -> DashboardViewService:
    return DashboardViewService(transit_api=get_transit_api())


def get_journey_search_service() -> JourneySearchService:
    return JourneySearchService(transit_api=get_transit_api())


def get_schedule_import_service() -> ScheduleImportService:
    return ScheduleImportService(extractor=HttpScheduleExtractor())


def create_operator_selection_store() -> OperatorSelectionStore:
    return OperatorSelectionStore(storage=JsonFileSelectionStorage())


def get_operator_selection(request: Request) -> OperatorSelectionStore:
    store = getattr(request.app.state, "operator_selection", None)
    if store is None:
        raise OperatorSelectionUnavailable(
            "Operator selection used before the store was installed"
        )
    return store
