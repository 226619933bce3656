"""Fail-fast checks that configured match fields exist before matching."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tabrecon.config.errors import UnknownFieldError
from tabrecon.domain.model import NORMALIZED_STATUS_FIELD

if TYPE_CHECKING:
    from tabrecon.domain.model import Batch


def _require(batch: Batch, field: str | None, *, label: str, role: str) -> None:
    if not field or not batch.rows or batch.has_column(field):
        return
    raise UnknownFieldError(field, source=label, available=batch.columns, role=role)


def validate_match_fields(
    batch_a: Batch,
    batch_b: Batch,
    *,
    id_a: str,
    id_b: str,
    amount_a: str | None = None,
    amount_b: str | None = None,
    label_a: str = "source A",
    label_b: str = "source B",
) -> None:
    """Raise ``UnknownFieldError`` for the first configured field a batch lacks.

    Empty batches carry no columns and are not checked.
    """

    _require(batch_a, id_a, label=label_a, role="identifier field")
    _require(batch_b, id_b, label=label_b, role="identifier field")
    _require(batch_a, NORMALIZED_STATUS_FIELD, label=label_a, role="status field")
    _require(batch_b, NORMALIZED_STATUS_FIELD, label=label_b, role="status field")
    _require(batch_a, amount_a, label=label_a, role="amount field")
    _require(batch_b, amount_b, label=label_b, role="amount field")
