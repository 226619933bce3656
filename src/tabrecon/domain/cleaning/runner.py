"""Entry points for running the cleaning pipeline on one batch."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .context import CleaningContext, CleaningCounters
from .deduplication import DeduplicationPhase
from .orchestrator import CleaningPipeline
from .status import StatusNormalizationPhase
from .transformation import TransformationPhase

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tabrecon.domain.model import Batch, ColumnMapping, StatusMapping


def build_cleaning_pipeline(
    *,
    mappings: Sequence[ColumnMapping],
    status_field: str | None,
    status_mappings: Sequence[StatusMapping],
    id_field: str,
    remove_duplicate: bool,
) -> CleaningPipeline:
    """Transform, then normalize status, then optionally deduplicate on ``id_field``."""

    pipeline = (
        CleaningPipeline()
        .with_phase(TransformationPhase(mappings))
        .with_phase(StatusNormalizationPhase(status_field, status_mappings))
    )
    if remove_duplicate:
        pipeline = pipeline.with_phase(DeduplicationPhase(id_field))
    return pipeline


def run_cleaning_pipeline(
    batch: Batch,
    *,
    mappings: Sequence[ColumnMapping],
    status_field: str | None,
    status_mappings: Sequence[StatusMapping],
    id_field: str,
    remove_duplicate: bool,
    source_label: str | None = None,
) -> CleaningCounters:
    """Clean ``batch`` in place and return the run's counters."""

    context = CleaningContext.for_source(source_label or batch.source_name)
    pipeline = build_cleaning_pipeline(
        mappings=mappings,
        status_field=status_field,
        status_mappings=status_mappings,
        id_field=id_field,
        remove_duplicate=remove_duplicate,
    )
    pipeline.run(batch, context=context)
    return context.counters
