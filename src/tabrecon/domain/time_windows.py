"""Calendar-date windows used to assemble historical batches."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta

from tabrecon.config.errors import InvalidDateError

BUSINESS_DATE_FORMAT = "%Y-%m-%d"


def parse_business_date(value: str | date) -> date:
    """Parse a ``YYYY-MM-DD`` business date; ``date`` instances pass through."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), BUSINESS_DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDateError(f"Invalid business date {value!r}; expected YYYY-MM-DD") from exc


def _non_negative(days: int) -> int:
    if days < 0:
        raise ValueError("Window size in days must be non-negative")
    return days


@dataclass(frozen=True)
class DateWindow:
    """Inclusive range of business dates."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("Date window start must not be after its end")

    @classmethod
    def around(cls, start: date, end: date | None = None, *, days: int) -> DateWindow:
        """Return ``[start - days, end + days]``; ``end`` defaults to ``start``."""

        margin = timedelta(days=_non_negative(days))
        return cls(start=start - margin, end=(end or start) + margin)

    @classmethod
    def preceding(cls, anchor: date, days: int) -> DateWindow:
        """Return the ``days`` calendar days strictly before ``anchor``."""

        if days < 1:
            raise ValueError("A preceding window needs at least one day")
        return cls(start=anchor - timedelta(days=days), end=anchor - timedelta(days=1))


__all__ = [
    "BUSINESS_DATE_FORMAT",
    "DateWindow",
    "parse_business_date",
]
