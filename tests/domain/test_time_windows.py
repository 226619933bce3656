from __future__ import annotations

from datetime import date

import pytest

from tabrecon.config import InvalidDateError
from tabrecon.domain.time_windows import DateWindow, parse_business_date


def test_parse_business_date_accepts_iso_dates() -> None:
    assert parse_business_date("2024-02-29") == date(2024, 2, 29)
    assert parse_business_date(date(2024, 1, 1)) == date(2024, 1, 1)


@pytest.mark.parametrize("value", ["2023-02-29", "10/03/2024", "2024-3-10x", ""])
def test_parse_business_date_rejects_invalid_values(value: str) -> None:
    with pytest.raises(InvalidDateError):
        parse_business_date(value)


def test_around_widens_both_sides() -> None:
    window = DateWindow.around(date(2024, 3, 10), date(2024, 3, 11), days=2)

    assert window == DateWindow(date(2024, 3, 8), date(2024, 3, 13))


def test_preceding_excludes_anchor() -> None:
    window = DateWindow.preceding(date(2024, 3, 1), 3)

    assert window == DateWindow(date(2024, 2, 27), date(2024, 2, 29))


def test_window_rejects_inverted_bounds_and_negative_days() -> None:
    with pytest.raises(ValueError, match="after its end"):
        DateWindow(date(2024, 3, 2), date(2024, 3, 1))
    with pytest.raises(ValueError, match="non-negative"):
        DateWindow.around(date(2024, 3, 2), days=-1)
    with pytest.raises(ValueError, match="at least one day"):
        DateWindow.preceding(date(2024, 3, 2), 0)
