from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Condition:
    """A symbol modifying a timetable entry (e.g. "school days only")."""

    id: int
    name: str
    description: str | None = None


@dataclass(frozen=True, slots=True)
class Schedule:
    """One scheduled visit of a run at a stop.

    `time` is a wall-clock string (HH:MM or HH:MM:SS) without a date.
    `sequence`, when present, orders stops within a destination.
    """

    id: int
    time: str
    run: int | None = None
    destination: str | None = None
    sequence: int | None = None
    conditions: tuple[Condition, ...] = ()
