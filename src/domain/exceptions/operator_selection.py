class OperatorSelectionError(Exception):
    """Base exception for operator selection state."""


class OperatorSelectionUnavailable(OperatorSelectionError):
    """Raised when selection state is used without an installed store."""
