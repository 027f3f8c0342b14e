from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .geo import Coordinates


@dataclass(frozen=True, slots=True)
class Track:
    """One GPS sample for a route + run."""

    id: int
    route_id: int
    run: int
    created_at: datetime
    coordinates: Coordinates | None = None


def current_position(tracks: tuple[Track, ...] | list[Track]) -> Track | None:
    """The sample with the greatest `created_at`, if any."""

    if not tracks:
        return None
    return max(tracks, key=lambda t: t.created_at)
