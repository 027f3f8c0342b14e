from .operator_selection import OperatorSelectionError, OperatorSelectionUnavailable
from .schedule_import import ExtractionFailed, ScheduleImportError, UnsupportedImportFile
from .transit_api import (
    SchemaViolation,
    TransitApiError,
    UpstreamStatusError,
    UpstreamUnavailable,
)

__all__ = [
    "ExtractionFailed",
    "OperatorSelectionError",
    "OperatorSelectionUnavailable",
    "ScheduleImportError",
    "SchemaViolation",
    "TransitApiError",
    "UnsupportedImportFile",
    "UpstreamStatusError",
    "UpstreamUnavailable",
]
