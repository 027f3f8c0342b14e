from .schedule_extractor import IScheduleExtractor
from .selection_storage import ISelectionStorage
from .transit_api import ITransitApi, RouteSearchFilter, StopSearchFilter

__all__ = [
    "IScheduleExtractor",
    "ISelectionStorage",
    "ITransitApi",
    "RouteSearchFilter",
    "StopSearchFilter",
]
