"""Deduplicator: keep the first row per correlation key."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tabrecon.config.errors import UnknownFieldError
from tabrecon.domain.cleaning.orchestrator import CleaningPhase
from tabrecon.domain.errors import Stage

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tabrecon.domain.cleaning.context import CleaningContext
    from tabrecon.domain.model import Batch, Row, Scalar


def dedupe(rows: Iterable[Row], key_field: str) -> list[Row]:
    """Return ``rows`` with later duplicates of a key dropped, order preserved.

    Rows whose key is absent are never treated as duplicates of each other; all of
    them survive.
    """

    seen: set[Scalar] = set()
    survivors: list[Row] = []
    for row in rows:
        key = row.get(key_field)
        if key is None:
            survivors.append(row)
            continue
        if key in seen:
            continue
        seen.add(key)
        survivors.append(row)
    return survivors


class DeduplicationPhase(CleaningPhase):
    """Coordinates intra-batch deduplication once transformation finished."""

    name: str = "deduplication"
    stage: Stage = Stage.DEDUPE

    def __init__(self, key_field: str) -> None:
        self.key_field = key_field

    def run(self, batch: Batch, *, context: CleaningContext) -> None:
        if not batch.rows:
            return
        if not batch.has_column(self.key_field):
            raise UnknownFieldError(
                self.key_field,
                source=context.source_label,
                available=batch.columns,
                role="identifier field",
            )
        survivors = dedupe(batch.rows, self.key_field)
        context.counters.duplicates_removed += len(batch.rows) - len(survivors)
        batch.rows[:] = survivors
