from __future__ import annotations

from dataclasses import dataclass

from .geo import Coordinates
from .schedule import Schedule


@dataclass(frozen=True, slots=True)
class Stop:
    id: int
    name: str
    type: str | None = None
    coordinates: Coordinates | None = None
    schedules: tuple[Schedule, ...] = ()
