"""Shared context for the cleaning pipeline."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class CleaningCounters:
    """Per-run bookkeeping reported back to the caller."""

    input_rows: int = 0
    transformed_fields: int = 0
    unmatched_statuses: int = 0
    duplicates_removed: int = 0


@dataclass(slots=True)
class CleaningContext:
    """Mutable context shared across cleaning phases for one batch."""

    source_label: str
    counters: CleaningCounters

    @classmethod
    def for_source(cls, source_label: str) -> CleaningContext:
        return cls(source_label=source_label, counters=CleaningCounters())
