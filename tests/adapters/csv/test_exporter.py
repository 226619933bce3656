from __future__ import annotations

import csv
from typing import TYPE_CHECKING

from tabrecon.adapters.csv import (
    AMOUNT_DIFFERENCE_COLUMN,
    export_all,
    export_partition,
    order_columns,
)
from tabrecon.domain.model import AmountParsePolicy, Partition
from tabrecon.domain.reconciliation import reconcile
from tests.helpers.configs import matched_row

if TYPE_CHECKING:
    from pathlib import Path


def _read(path: Path) -> list[list[str]]:
    with path.open(newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


def test_order_columns_groups_by_priority() -> None:
    columns = ["note", "status", "amount_b", "Total", "created_time", "order_id", "source_file"]

    ordered = order_columns(columns, amount_columns=("Total", "amount_b"))

    assert ordered == [
        "order_id",
        "created_time",
        "Total",
        "amount_b",
        "status",
        "source_file",
        "note",
    ]


def test_amount_mismatch_export_appends_difference(tmp_path: Path) -> None:
    result = reconcile(
        [matched_row("1", amount="25.5")],
        [matched_row("1", amount="15.5")],
        "id",
        "id",
        "amount",
        "amount",
    )

    path = export_partition(result, Partition.AMOUNT_MISMATCH, tmp_path / "diff.csv")
    header, record = _read(path)

    assert header[-1] == AMOUNT_DIFFERENCE_COLUMN
    assert header[:3] == ["id", "id_b", "amount"]
    assert record[-1] == "10.00"


def test_difference_left_empty_for_unparsable_amount(tmp_path: Path) -> None:
    result = reconcile(
        [matched_row("1", amount="n/a")],
        [matched_row("1", amount="0")],
        "id",
        "id",
        "amount",
        "amount",
        amount_policy=AmountParsePolicy.STRICT,
    )

    path = export_partition(result, Partition.AMOUNT_MISMATCH, tmp_path / "diff.csv")
    header, record = _read(path)

    assert header[-1] == AMOUNT_DIFFERENCE_COLUMN
    assert record[-1] == ""


def test_empty_partition_writes_empty_file(tmp_path: Path) -> None:
    result = reconcile([matched_row("1")], [matched_row("1")], "id", "id")

    path = export_partition(result, Partition.ONLY_IN_A, tmp_path / "only_a.csv")

    assert path.read_text(encoding="utf-8") == ""


def test_export_all_writes_one_file_per_partition(tmp_path: Path) -> None:
    result = reconcile([matched_row("1"), matched_row("2")], [matched_row("1")], "id", "id")

    paths = export_all(result, tmp_path / "run.csv")

    assert {path.name for path in paths.values()} == {
        "run_matched.csv",
        "run_only_in_a.csv",
        "run_only_in_b.csv",
        "run_amount_mismatch.csv",
        "run_status_mismatch.csv",
    }
    assert _read(paths[Partition.ONLY_IN_A])[1][0] == "2"
