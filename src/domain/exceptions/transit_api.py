from __future__ import annotations

from typing import Any


class TransitApiError(Exception):
    """Base exception for failures talking to the upstream transit API."""


class UpstreamUnavailable(TransitApiError):
    """Raised when the upstream API cannot be reached."""


class UpstreamStatusError(TransitApiError):
    """Raised when the upstream API answers with a non-2xx status."""

    def __init__(self, status_code: int, body: Any) -> None:
        super().__init__(f"Upstream responded with HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class SchemaViolation(TransitApiError):
    """Raised when an upstream payload does not match the expected schema."""

    def __init__(self, resource: str, errors: list[dict[str, Any]]) -> None:
        super().__init__(f"Invalid {resource} payload from upstream")
        self.resource = resource
        self.errors = errors
