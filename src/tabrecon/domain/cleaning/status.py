"""Status normalizer: collapse raw status aliases into one canonical status."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tabrecon.config.errors import UnknownFieldError
from tabrecon.domain.cleaning.orchestrator import CleaningPhase
from tabrecon.domain.errors import Stage
from tabrecon.domain.model import NORMALIZED_STATUS_FIELD, as_text

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tabrecon.domain.cleaning.context import CleaningContext
    from tabrecon.domain.model import Batch, Row, Scalar, StatusMapping

log = logging.getLogger(__name__)


def canonical_status(raw: Scalar, mappings: Sequence[StatusMapping]) -> str | None:
    """Return the target of the first mapping whose aliases contain ``raw``."""

    text = as_text(raw)
    if text is None:
        return None
    for mapping in mappings:
        if text in mapping.source_statuses:
            return mapping.target_status
    return None


def normalize_status(row: Row, field: str, mappings: Sequence[StatusMapping]) -> str | None:
    """Set ``normalized_status`` on ``row``; ``None`` marks an unrecognised status."""

    status = canonical_status(row.get(field), mappings)
    row[NORMALIZED_STATUS_FIELD] = status
    return status


class StatusNormalizationPhase(CleaningPhase):
    name: str = "status-normalization"
    stage: Stage = Stage.NORMALIZE

    def __init__(self, status_field: str | None, mappings: Sequence[StatusMapping]) -> None:
        self.status_field = status_field
        self.mappings = tuple(mappings)

    def run(self, batch: Batch, *, context: CleaningContext) -> None:
        if self.status_field is None:
            if batch.rows:
                log.warning(
                    "No status field configured for %s; every row keeps an absent status",
                    context.source_label,
                )
            for row in batch.rows:
                row[NORMALIZED_STATUS_FIELD] = None
            context.counters.unmatched_statuses += len(batch.rows)
            return

        if batch.rows and not batch.has_column(self.status_field):
            raise UnknownFieldError(
                self.status_field,
                source=context.source_label,
                available=batch.columns,
                role="status field",
            )

        unmatched = 0
        for row in batch.rows:
            if normalize_status(row, self.status_field, self.mappings) is None:
                unmatched += 1
        context.counters.unmatched_statuses += unmatched
        if unmatched:
            log.info(
                "%s: %d of %d rows have no canonical status",
                context.source_label,
                unmatched,
                len(batch.rows),
            )
