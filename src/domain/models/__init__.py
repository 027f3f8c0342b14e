from .geo import Coordinates
from .operator import DEFAULT_OPERATOR, validate_operator_name
from .report import (
    MAX_DESCRIPTION_LENGTH,
    NewReport,
    Report,
    ReportSeverity,
    ReportType,
)
from .route import JourneyEndpoint, JourneySearchResult, Route, TransportType
from .schedule import Condition, Schedule
from .stop import Stop
from .track import Track, current_position

__all__ = [
    "Condition",
    "Coordinates",
    "DEFAULT_OPERATOR",
    "JourneyEndpoint",
    "JourneySearchResult",
    "MAX_DESCRIPTION_LENGTH",
    "NewReport",
    "Report",
    "ReportSeverity",
    "ReportType",
    "Route",
    "Schedule",
    "Stop",
    "Track",
    "TransportType",
    "current_position",
    "validate_operator_name",
]
