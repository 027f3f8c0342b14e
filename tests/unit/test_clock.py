import pytest

from src.domain.algorithms.clock import add_minutes, format_time


@pytest.mark.parametrize(
    ("raw", "minutes", "expected"),
    [
        ("23:58", 5, "00:03"),
        ("10:00", 5, "10:05"),
        ("10:00:59", 5, "10:05"),
        ("00:00", 1440, "00:00"),
        ("23:59", 0, "23:59"),
    ],
)
def test_add_minutes_wraps_at_midnight(raw: str, minutes: int, expected: str) -> None:
    assert add_minutes(raw, minutes) == expected


def test_format_time_drops_seconds() -> None:
    assert format_time("07:45:00") == "07:45"
    assert format_time("07:45") == "07:45"


def test_add_minutes_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        add_minutes("soon", 5)
