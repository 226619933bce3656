"""Canonical in-memory table: rows of scalar cells grouped into dated batches."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from datetime import date

type Scalar = str | float | bool | None
type Row = dict[str, Scalar]

NORMALIZED_STATUS_FIELD = "normalized_status"


def as_text(value: Scalar) -> str | None:
    """Render a scalar the way string operations and exports see it."""

    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_number(value: Scalar) -> float | None:
    """Parse a cell as a finite 64-bit float, returning ``None`` when it is not numeric.

    Digit separators (``1_000``) and the ``nan``/``inf`` spellings are not numbers here.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    else:
        text = value.strip()
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def ordered_columns(rows: Iterable[Row]) -> list[str]:
    """Return the union of column names across ``rows`` in first-seen order."""

    seen: dict[str, None] = {}
    for row in rows:
        for name in row:
            seen.setdefault(name, None)
    return list(seen)


@dataclass(slots=True)
class Batch:
    """Ordered rows belonging to one logical source, configuration and business date.

    ``business_date`` is ``None`` for batches that span several dates, such as the
    output of a historical window load or a union of a fresh upload with history.
    """

    source_name: str
    rows: list[Row] = field(default_factory=list[Row])
    config_id: str | None = None
    business_date: date | None = None
    file_name: str | None = None

    @property
    def columns(self) -> list[str]:
        return ordered_columns(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def has_column(self, name: str) -> bool:
        return any(name in row for row in self.rows)


def union_rows(parts: Sequence[Sequence[Row]]) -> list[Row]:
    """Concatenate row sequences, padding every row to the ordered column union.

    Columns keep the order in which they first appear across ``parts``; cells a row
    lacks are filled with ``None``. No deduplication happens across parts.
    """

    columns = ordered_columns(row for part in parts for row in part)
    return [{name: row.get(name) for name in columns} for part in parts for row in part]


def union_batches(
    source_name: str,
    batches: Sequence[Batch],
    *,
    config_id: str | None = None,
) -> Batch:
    """Merge batches of one source into a single undated batch using ``union_rows``."""

    rows = union_rows([batch.rows for batch in batches])
    dates = {batch.business_date for batch in batches}
    business_date = dates.pop() if len(dates) == 1 else None
    return Batch(
        source_name=source_name,
        rows=rows,
        config_id=config_id,
        business_date=business_date,
    )
