from __future__ import annotations

MINUTES_PER_DAY = 24 * 60


def format_time(raw: str) -> str:
    """Truncate an HH:MM[:SS] wall-clock string to HH:MM."""

    return raw.strip()[:5]


def parse_minutes(raw: str) -> int:
    parts = raw.strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time: {raw!r}")
    hh, mm = int(parts[0]), int(parts[1])
    return hh * 60 + mm


def add_minutes(raw: str, minutes: int) -> str:
    """Add minutes to a wall-clock time, wrapping at 24:00.

    There is no date tracking: 23:58 + 5 gives 00:03.
    """

    total = (parse_minutes(raw) + int(minutes)) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"
