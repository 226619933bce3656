"""Reusable builders for channel configurations and batches in tests."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

from tabrecon.domain.model import (
    NORMALIZED_STATUS_FIELD,
    Batch,
    ChannelConfig,
    ColumnMapping,
    DateRange,
    FieldType,
    FileConfig,
    FormatRule,
    MatchConfig,
    RuleOperation,
    SourceConfig,
    StatusMapping,
)

if TYPE_CHECKING:
    from pathlib import Path

    from tabrecon.domain.model import Row

BUSINESS_DATE = date(2024, 3, 10)


def make_batch(rows: list[Row], *, source_name: str = "shop") -> Batch:
    return Batch(source_name=source_name, rows=[dict(row) for row in rows])


def matched_row(identifier: str, status: str | None = "PAID", amount: str = "10") -> Row:
    return {"id": identifier, NORMALIZED_STATUS_FIELD: status, "amount": amount}


def make_channel_config(
    *,
    use_history_a: bool = False,
    use_history_b: bool = False,
    history_days: int | None = None,
) -> ChannelConfig:
    """Shop export (A) against payment gateway export (B).

    A carries ``Order No``, ``State`` and ``Total``; B carries ``Reference`` such as
    ``INV-1001``, ``Result`` and ``Amount`` in cents.
    """

    source_a = SourceConfig(
        mappings=(
            ColumnMapping("Order No", FieldType.IDENTIFIER, "order_id"),
            ColumnMapping("State", FieldType.STATUS, "status"),
            ColumnMapping("Total", FieldType.AMOUNT, "amount"),
        )
    )
    source_b = SourceConfig(
        mappings=(
            ColumnMapping(
                "Reference",
                FieldType.IDENTIFIER,
                "order_id",
                format_rules=(FormatRule(RuleOperation.DEL_PRE, "4"),),
                save_original=True,
            ),
            ColumnMapping("Result", FieldType.STATUS, "status"),
            ColumnMapping(
                "Amount",
                FieldType.AMOUNT,
                "amount",
                format_rules=(FormatRule(RuleOperation.DIVIDE_NUMBER, "100"),),
            ),
        )
    )
    return ChannelConfig(
        id="config-1",
        name="Shop vs Gateway",
        source_a_name="shop",
        source_b_name="gateway",
        source_a_config=source_a,
        source_b_config=source_b,
        match_config=MatchConfig(
            source_a_id_field="order_id",
            source_b_id_field="order_id",
            source_a_status_mapping=(StatusMapping(("paid", "complete"), "PAID"),),
            source_b_status_mapping=(StatusMapping(("SUCCESS",), "PAID"),),
            use_historical_source_a=use_history_a,
            use_historical_source_b=use_history_b,
            history_days=history_days,
        ),
    )


def make_file_config(
    path: Path,
    source_name: str,
    *,
    business_date: date = BUSINESS_DATE,
    remove_duplicate: bool = False,
) -> FileConfig:
    return FileConfig(
        source_name=source_name,
        file_path=str(path),
        file_name=path.name,
        date_range=DateRange(start=business_date, end=business_date),
        remove_duplicate=remove_duplicate,
    )


def write_csv(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
