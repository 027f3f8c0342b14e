class ScheduleImportError(Exception):
    """Base exception for schedule file import failures."""


class UnsupportedImportFile(ScheduleImportError):
    """Raised when the uploaded file is missing, too large or of the wrong type."""


class ExtractionFailed(ScheduleImportError):
    """Raised when the extraction collaborator could not produce schedules."""
