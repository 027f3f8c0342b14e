from __future__ import annotations

DEFAULT_OPERATOR = "LUZ"


def validate_operator_name(name: str) -> str:
    """Return the operator name, rejecting blank values.

    Operator names partition every route/stop/report/track query upstream.
    """

    if not isinstance(name, str) or not name.strip():
        raise ValueError("Operator name must be a non-empty string")
    return name
