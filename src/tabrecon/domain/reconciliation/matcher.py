"""Matcher: join two cleaned batches on their identifier and partition the pairs.

Rows join on exact identifier equality; an absent identifier never joins. A joined
pair whose canonical statuses are equal (and present) is either ``matched`` or,
when both amount fields are configured and their parsed values differ,
``amount_mismatch``. Every other joined pair lands in ``status_mismatch``, so each
A row contributes to exactly one partition per B partner.

Amounts are compared with exact float equality. Under ``AmountParsePolicy.ZERO``
an amount that does not parse counts as ``0.0``, which can hide or invent
differences; ``AmountParsePolicy.STRICT`` routes such pairs to
``amount_mismatch`` instead.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tabrecon.domain.model import (
    NORMALIZED_STATUS_FIELD,
    AmountParsePolicy,
    ReconciliationResult,
    ordered_columns,
    parse_number,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tabrecon.domain.model import Row, Scalar

log = logging.getLogger(__name__)

COLLISION_SUFFIX = "_b"


def joined_column_names(a_columns: Sequence[str], b_columns: Sequence[str]) -> dict[str, str]:
    """Map each B column to its name in a joined row.

    A B column that collides with an A column (or with an earlier renamed B
    column) becomes ``<name>_b``, then ``<name>_b2``, ``<name>_b3`` and so on.
    """

    taken = set(a_columns)
    renamed: dict[str, str] = {}
    for name in b_columns:
        candidate = name
        if candidate in taken:
            candidate = f"{name}{COLLISION_SUFFIX}"
            counter = 2
            while candidate in taken:
                candidate = f"{name}{COLLISION_SUFFIX}{counter}"
                counter += 1
        taken.add(candidate)
        renamed[name] = candidate
    return renamed


def _amount(value: Scalar, policy: AmountParsePolicy) -> float | None:
    number = parse_number(value)
    if number is None and policy is AmountParsePolicy.ZERO:
        return 0.0
    return number


def _amounts_differ(
    a_value: Scalar,
    b_value: Scalar,
    policy: AmountParsePolicy,
) -> bool:
    left = _amount(a_value, policy)
    right = _amount(b_value, policy)
    if left is None or right is None:
        return True
    return left != right


def _statuses_agree(a_row: Row, b_row: Row) -> bool:
    a_status = a_row.get(NORMALIZED_STATUS_FIELD)
    return a_status is not None and a_status == b_row.get(NORMALIZED_STATUS_FIELD)


def reconcile(
    a_rows: Sequence[Row],
    b_rows: Sequence[Row],
    id_a: str,
    id_b: str,
    amount_a: str | None = None,
    amount_b: str | None = None,
    *,
    amount_policy: AmountParsePolicy = AmountParsePolicy.ZERO,
) -> ReconciliationResult:
    """Partition ``a_rows`` and ``b_rows`` by identifier, status and amount."""

    a_columns = ordered_columns(a_rows)
    b_columns = ordered_columns(b_rows)
    renamed = joined_column_names(a_columns, b_columns)
    amounts = (amount_a, amount_b) if amount_a and amount_b else None

    def join(a_row: Row, b_row: Row) -> Row:
        joined: Row = {name: a_row.get(name) for name in a_columns}
        for name in b_columns:
            joined[renamed[name]] = b_row.get(name)
        return joined

    index: dict[Scalar, list[Row]] = {}
    for b_row in b_rows:
        key = b_row.get(id_b)
        if key is not None:
            index.setdefault(key, []).append(b_row)

    result = ReconciliationResult()
    if amounts is not None:
        result.amount_columns = (amounts[0], renamed.get(amounts[1], amounts[1]))

    a_keys: set[Scalar] = set()
    for a_row in a_rows:
        key = a_row.get(id_a)
        partners = index.get(key, []) if key is not None else []
        if not partners:
            result.only_in_a.append(a_row)
            continue
        a_keys.add(key)
        for b_row in partners:
            pair = join(a_row, b_row)
            if not _statuses_agree(a_row, b_row):
                result.status_mismatch.append(pair)
            elif amounts is not None and _amounts_differ(
                a_row.get(amounts[0]), b_row.get(amounts[1]), amount_policy
            ):
                result.amount_mismatch.append(pair)
            else:
                result.matched.append(pair)

    for b_row in b_rows:
        key = b_row.get(id_b)
        if key is None or key not in a_keys:
            result.only_in_b.append(b_row)

    log.info(
        "Matched %d, only in A %d, only in B %d, amount mismatch %d, status mismatch %d",
        len(result.matched),
        len(result.only_in_a),
        len(result.only_in_b),
        len(result.amount_mismatch),
        len(result.status_mismatch),
    )
    return result
