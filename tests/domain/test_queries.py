from __future__ import annotations

import pytest

from tabrecon.domain.queries import QueryCondition, QueryOperator, filter_rows

ROWS = [
    {"order_id": "1001", "amount": "10.00", "channel": "web"},
    {"order_id": "1002", "amount": "25.50", "channel": "mobile web"},
    {"order_id": "1003", "amount": "n/a", "channel": "store"},
    {"order_id": "1004", "amount": None, "channel": None},
]


def test_equals_and_contains_compare_text() -> None:
    assert filter_rows(ROWS, [QueryCondition("order_id", QueryOperator.EQUALS, "1002")]) == [
        ROWS[1]
    ]
    selected = filter_rows(ROWS, [QueryCondition("channel", QueryOperator.CONTAINS, "web")])
    assert [row["order_id"] for row in selected] == ["1001", "1002"]


def test_numeric_operators_skip_unparsable_cells() -> None:
    greater = filter_rows(ROWS, [QueryCondition("amount", QueryOperator.GT, "5")])
    lower = filter_rows(ROWS, [QueryCondition("amount", QueryOperator.LT, "20")])

    assert [row["order_id"] for row in greater] == ["1001", "1002"]
    assert [row["order_id"] for row in lower] == ["1001"]


def test_between_is_inclusive() -> None:
    condition = QueryCondition("amount", QueryOperator.BETWEEN, "10", "25.5")

    assert [row["order_id"] for row in filter_rows(ROWS, [condition])] == ["1001", "1002"]


def test_between_requires_second_value() -> None:
    with pytest.raises(ValueError, match="second value"):
        QueryCondition("amount", QueryOperator.BETWEEN, "10")


def test_conditions_combine_and_limit_truncates() -> None:
    conditions = [
        QueryCondition("amount", QueryOperator.GT, "0"),
        QueryCondition("channel", QueryOperator.CONTAINS, "web"),
    ]

    assert len(filter_rows(ROWS, conditions)) == 2
    assert filter_rows(ROWS, conditions, limit=1) == [ROWS[0]]
    assert filter_rows(ROWS, limit=0) == []


def test_missing_field_never_matches() -> None:
    assert filter_rows(ROWS, [QueryCondition("unknown", QueryOperator.CONTAINS, "")]) == []
