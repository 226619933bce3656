from __future__ import annotations

from datetime import date

import pytest

from tabrecon.domain.model import Batch, as_text, parse_number, union_batches, union_rows


def test_parse_number_handles_text_and_rejects_garbage() -> None:
    assert parse_number(" 12.50 ") == 12.5
    assert parse_number(3.0) == 3.0
    assert parse_number("") is None
    assert parse_number("12,50") is None
    assert parse_number(True) is None
    assert parse_number(None) is None


@pytest.mark.parametrize(
    "value", ["nan", "NaN", "inf", "-Infinity", "1e400", "1_000", float("nan")]
)
def test_parse_number_rejects_non_finite_and_separated_digits(value: str | float) -> None:
    assert parse_number(value) is None


def test_as_text_renders_booleans_lowercase() -> None:
    assert as_text(True) == "true"
    assert as_text(1.5) == "1.5"
    assert as_text(None) is None


def test_union_rows_pads_missing_columns_in_first_seen_order() -> None:
    merged = union_rows([[{"id": "1", "amount": "5"}], [{"id": "2", "note": "late"}]])

    assert merged == [
        {"id": "1", "amount": "5", "note": None},
        {"id": "2", "amount": None, "note": "late"},
    ]
    assert list(merged[1]) == ["id", "amount", "note"]


def test_union_keeps_duplicates_across_parts() -> None:
    merged = union_rows([[{"id": "1"}], [{"id": "1"}]])

    assert len(merged) == 2


def test_union_batches_drops_date_when_dates_differ() -> None:
    first = Batch("shop", [{"id": "1"}], business_date=date(2024, 3, 9))
    second = Batch("shop", [{"id": "2"}], business_date=date(2024, 3, 10))
    same_day = Batch("shop", [{"id": "3"}], business_date=date(2024, 3, 10))

    assert union_batches("shop", [first, second]).business_date is None
    assert union_batches("shop", [second, same_day]).business_date == date(2024, 3, 10)
