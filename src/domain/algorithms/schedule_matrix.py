"""Run-indexed timetable matrices built from a route's stops.

A route interleaves several runs (vehicle circulations) and several branch
destinations at the same physical stops. The all-destinations matrix lists
every run at every stop; the per-destination matrices keep each directional
table dense by only including the runs and stops serving that destination.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from src.domain.models import Route, Schedule, Stop

from .clock import format_time

NO_SERVICE = "-"

# Larger than any real sequence, so stops without one sort last.
_MISSING_SEQUENCE = float("inf")

RunSchedules = dict[int, Schedule]


@dataclass(frozen=True, slots=True)
class ScheduleMatrix:
    runs: tuple[int, ...]
    stop_schedules: dict[int, RunSchedules] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DestinationTimetable:
    destination: str
    runs: tuple[int, ...]
    stops: tuple[Stop, ...]
    stop_schedules: dict[int, RunSchedules] = field(default_factory=dict)


def collect_runs(schedules: Iterable[Schedule]) -> tuple[int, ...]:
    """Distinct runs in strictly ascending order; schedules without a run are ignored."""

    return tuple(sorted({s.run for s in schedules if s.run is not None}))


def route_runs(route: Route) -> tuple[int, ...]:
    """All runs operated on a route, e.g. to offer when filing a report."""

    return collect_runs(s for stop in route.stops for s in stop.schedules)


def _index_by_run(schedules: Iterable[Schedule]) -> RunSchedules:
    by_run: RunSchedules = {}
    for schedule in schedules:
        if schedule.run is None:
            continue
        # Duplicate (stop, run): the last schedule wins.
        by_run[schedule.run] = schedule
    return by_run


def build_all_destinations_matrix(stops: Sequence[Stop]) -> ScheduleMatrix:
    runs = collect_runs(s for stop in stops for s in stop.schedules)
    stop_schedules = {stop.id: _index_by_run(stop.schedules) for stop in stops}
    return ScheduleMatrix(runs=runs, stop_schedules=stop_schedules)


def build_destination_matrices(
    stops: Sequence[Stop],
) -> tuple[DestinationTimetable, ...]:
    """One timetable per destination, sorted by destination label.

    Only schedules carrying both a run and a destination participate; a
    schedule with a run but no destination appears in the all-destinations
    matrix only.
    """

    # destination -> stop position -> schedules (insertion keeps stop order)
    grouped: dict[str, dict[int, list[Schedule]]] = {}
    for position, stop in enumerate(stops):
        for schedule in stop.schedules:
            if schedule.run is None or not schedule.destination:
                continue
            per_stop = grouped.setdefault(schedule.destination, {})
            per_stop.setdefault(position, []).append(schedule)

    out: list[DestinationTimetable] = []
    for destination in sorted(grouped):
        per_stop = grouped[destination]

        def min_sequence(position: int) -> float:
            seqs = [s.sequence for s in per_stop[position] if s.sequence is not None]
            return float(min(seqs)) if seqs else _MISSING_SEQUENCE

        # sorted() is stable: ties keep the route's original stop order.
        positions = sorted(per_stop, key=min_sequence)
        ordered = tuple(stops[p] for p in positions)

        out.append(
            DestinationTimetable(
                destination=destination,
                runs=collect_runs(s for p in positions for s in per_stop[p]),
                stops=ordered,
                stop_schedules={stops[p].id: _index_by_run(per_stop[p]) for p in positions},
            )
        )

    return tuple(out)


def cell_label(
    stop_schedules: Mapping[int, RunSchedules], stop_id: int, run: int
) -> str:
    schedule = stop_schedules.get(stop_id, {}).get(run)
    if schedule is None:
        return NO_SERVICE
    return format_time(schedule.time)
