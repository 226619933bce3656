"""CSV export of reconciliation result partitions."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from tabrecon.domain.model import Partition, as_text, ordered_columns, parse_number

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tabrecon.domain.model import ReconciliationResult, Row

log = logging.getLogger(__name__)

AMOUNT_DIFFERENCE_COLUMN = "amount_difference"
PARTITION_SUFFIXES: dict[Partition, str] = {
    Partition.MATCHED: "_matched",
    Partition.ONLY_IN_A: "_only_in_a",
    Partition.ONLY_IN_B: "_only_in_b",
    Partition.AMOUNT_MISMATCH: "_amount_mismatch",
    Partition.STATUS_MISMATCH: "_status_mismatch",
}


def _is_identifier(name: str) -> bool:
    return "id" in name.lower() and "normalized" not in name


def _is_auxiliary(name: str) -> bool:
    return name.startswith("source") or "normalized" in name or "original" in name


def order_columns(
    columns: Sequence[str],
    *,
    amount_columns: tuple[str, str] | None = None,
) -> list[str]:
    """Order export columns by priority, keeping first-seen order inside each group.

    Identifiers come first, then time, amount and status columns, then the
    ``source*``/normalized/original helper columns, then everything else. When
    ``amount_columns`` is given the A amount and then the B amount lead the amount
    group.
    """

    ordered: list[str] = []

    def take(names: Sequence[str]) -> None:
        for name in names:
            if name in columns and name not in ordered:
                ordered.append(name)

    take([name for name in columns if _is_identifier(name)])
    take([name for name in columns if "time" in name.lower()])
    if amount_columns is not None:
        take(amount_columns)
    take([name for name in columns if "amount" in name.lower()])
    take([name for name in columns if "status" in name.lower()])
    take([name for name in columns if _is_auxiliary(name)])
    take(columns)
    return ordered


def _cell(value: object) -> str:
    if value is None or isinstance(value, str | float | bool):
        return as_text(value) or ""
    return str(value)


def _amount_difference(row: Row, amount_columns: tuple[str, str]) -> str:
    left = parse_number(row.get(amount_columns[0]))
    right = parse_number(row.get(amount_columns[1]))
    if left is None or right is None:
        return ""
    return f"{left - right:.2f}"


def write_rows(
    rows: Sequence[Row],
    path: str | Path,
    *,
    amount_columns: tuple[str, str] | None = None,
    with_difference: bool = False,
) -> Path:
    """Write ``rows`` to ``path``; an empty sequence produces an empty file."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    if not rows:
        target.write_text("", encoding="utf-8")
        log.info("Exported empty partition to %s", target)
        return target

    header = order_columns(ordered_columns(rows), amount_columns=amount_columns)
    difference = with_difference and amount_columns is not None
    with target.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow([*header, AMOUNT_DIFFERENCE_COLUMN] if difference else header)
        for row in rows:
            record = [_cell(row.get(name)) for name in header]
            if difference and amount_columns is not None:
                record.append(_amount_difference(row, amount_columns))
            writer.writerow(record)
    log.info("Exported %d rows to %s", len(rows), target)
    return target


def export_partition(result: ReconciliationResult, kind: Partition, path: str | Path) -> Path:
    """Write one result partition to ``path``."""

    mismatch = kind is Partition.AMOUNT_MISMATCH
    return write_rows(
        result.partition(kind),
        path,
        amount_columns=result.amount_columns if mismatch else None,
        with_difference=mismatch,
    )


def export_all(result: ReconciliationResult, base_path: str | Path) -> dict[Partition, Path]:
    """Write every partition next to ``base_path`` using per-partition suffixes."""

    base = str(base_path).removesuffix(".csv")
    return {
        kind: export_partition(result, kind, f"{base}{suffix}.csv")
        for kind, suffix in PARTITION_SUFFIXES.items()
    }
