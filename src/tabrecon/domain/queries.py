"""In-memory filtering of stored rows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from tabrecon.domain.model import as_text, parse_number

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from tabrecon.domain.model import Row, Scalar


type _Predicate = Callable[[float, float], bool]


class QueryOperator(StrEnum):
    EQUALS = "equals"
    CONTAINS = "contains"
    GT = "gt"
    LT = "lt"
    BETWEEN = "between"


@dataclass(frozen=True, slots=True)
class QueryCondition:
    """One filter on a stored row field.

    ``equals`` and ``contains`` compare the cell's text form. ``gt``, ``lt`` and
    ``between`` (inclusive, bounded by ``value`` and ``value2``) compare numerically
    and never match a cell or bound that does not parse as a number. A row lacking
    the field never matches.
    """

    field: str
    operator: QueryOperator
    value: str
    value2: str | None = None

    def __post_init__(self) -> None:
        if self.operator is QueryOperator.BETWEEN and self.value2 is None:
            raise ValueError("'between' conditions need a second value")

    def matches(self, row: Row) -> bool:
        cell = row.get(self.field)
        if cell is None:
            return False
        match self.operator:
            case QueryOperator.EQUALS:
                return as_text(cell) == self.value
            case QueryOperator.CONTAINS:
                text = as_text(cell)
                return text is not None and self.value in text
            case QueryOperator.GT:
                return _compare(cell, self.value, lambda left, right: left > right)
            case QueryOperator.LT:
                return _compare(cell, self.value, lambda left, right: left < right)
            case QueryOperator.BETWEEN:
                low = parse_number(self.value)
                high = parse_number(self.value2)
                number = parse_number(cell)
                if low is None or high is None or number is None:
                    return False
                return low <= number <= high


def _compare(cell: Scalar, bound: str, predicate: _Predicate) -> bool:
    number = parse_number(cell)
    limit = parse_number(bound)
    if number is None or limit is None:
        return False
    return predicate(number, limit)


def filter_rows(
    rows: Iterable[Row],
    conditions: Sequence[QueryCondition] = (),
    *,
    limit: int | None = None,
) -> list[Row]:
    """Return rows satisfying every condition, truncated to ``limit``."""

    selected = [row for row in rows if all(condition.matches(row) for condition in conditions)]
    if limit is not None:
        del selected[max(limit, 0) :]
    return selected


__all__ = ["QueryCondition", "QueryOperator", "filter_rows"]
