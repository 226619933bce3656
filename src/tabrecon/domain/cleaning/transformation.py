"""Rule pipeline: derive canonical fields from raw columns."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tabrecon.config.errors import UnknownFieldError
from tabrecon.domain.cleaning.orchestrator import CleaningPhase
from tabrecon.domain.cleaning.rules import apply_rules
from tabrecon.domain.errors import Stage

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tabrecon.domain.cleaning.context import CleaningContext
    from tabrecon.domain.model import Batch, ColumnMapping, Row, Scalar


def apply_mapping(row: Row, mapping: ColumnMapping) -> Scalar:
    """Transform ``mapping.source_column`` and store it under ``mapping.field_name``.

    The raw column is left in place. With ``save_original`` the untransformed value
    is also written to ``<field_name>_original``.
    """

    raw = row.get(mapping.source_column)
    value = apply_rules(raw, mapping.format_rules)
    row[mapping.field_name] = value
    if mapping.save_original:
        row[mapping.original_field_name] = raw
    return value


class TransformationPhase(CleaningPhase):
    """Apply every column mapping to every row, in mapping order."""

    name: str = "transformation"
    stage: Stage = Stage.CLEAN

    def __init__(self, mappings: Sequence[ColumnMapping]) -> None:
        self.mappings = tuple(mappings)

    def run(self, batch: Batch, *, context: CleaningContext) -> None:
        if not batch.rows:
            return
        available = batch.columns
        for mapping in self.mappings:
            if mapping.source_column not in available:
                raise UnknownFieldError(
                    mapping.source_column,
                    source=context.source_label,
                    available=available,
                    role="source column",
                )
            # later mappings may read fields derived by earlier ones
            available.append(mapping.field_name)

        for row in batch.rows:
            for mapping in self.mappings:
                apply_mapping(row, mapping)
        context.counters.transformed_fields += len(self.mappings) * len(batch.rows)
