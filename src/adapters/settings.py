from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_TRANSIT_API_BASE_URL = "https://jak-doczlapie-hackyeah.b.solvro.pl/api/v1"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    return float(raw)


def _env_str(name: str) -> str | None:
    value = os.getenv(name)
    if value is not None:
        value = value.strip() or None
    return value


@dataclass(frozen=True, slots=True)
class TransitRuntimeConfig:
    transit_api_base_url: str
    transit_api_timeout_s: float
    cache_ttl_s: float
    extractor_url: str | None
    extractor_api_key: str | None
    extractor_timeout_s: float
    selection_path: str
    reveal_errors: bool
    log_level: str

    @staticmethod
    def from_env() -> "TransitRuntimeConfig":
        base_url = _env_str("TRANSIT_API_BASE_URL") or DEFAULT_TRANSIT_API_BASE_URL

        return TransitRuntimeConfig(
            transit_api_base_url=base_url.rstrip("/"),
            transit_api_timeout_s=_env_float("TRANSIT_API_TIMEOUT_S", 15.0),
            cache_ttl_s=_env_float("TRANSIT_CACHE_TTL_S", 30.0),
            extractor_url=_env_str("SCHEDULE_EXTRACTOR_URL"),
            extractor_api_key=_env_str("SCHEDULE_EXTRACTOR_API_KEY"),
            extractor_timeout_s=_env_float("SCHEDULE_EXTRACTOR_TIMEOUT_S", 120.0),
            selection_path=_env_str("OPERATOR_SELECTION_PATH")
            or "data/operator_selection.json",
            reveal_errors=_env_bool("TRANSIT_REVEAL_ERRORS", False),
            log_level=(_env_str("LOG_LEVEL") or "INFO").upper(),
        )
