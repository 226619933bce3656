"""Phase-based orchestrator for the cleaning pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from tabrecon.domain.cleaning.context import CleaningContext
from tabrecon.domain.errors import StageError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tabrecon.domain.errors import Stage
    from tabrecon.domain.model import Batch

log = logging.getLogger(__name__)


class CleaningPhase(Protocol):
    """Contract implemented by each cleaning phase."""

    name: str
    stage: Stage

    def run(self, batch: Batch, *, context: CleaningContext) -> None: ...


@dataclass(slots=True)
class CleaningPipeline:
    """Compose and execute the ordered cleaning phases.

    Phases mutate ``batch.rows`` in place. Any failure is re-raised as a
    ``StageError`` naming the phase's stage and the batch's source, with the
    original exception chained.
    """

    phases: Sequence[CleaningPhase] = field(default_factory=tuple)

    def with_phase(self, phase: CleaningPhase) -> CleaningPipeline:
        """Return a new pipeline appending ``phase`` at the end."""

        return CleaningPipeline(phases=(*self.phases, phase))

    def run(self, batch: Batch, *, context: CleaningContext | None = None) -> Batch:
        """Execute the configured phases in-order against ``batch``."""

        active_context = context or CleaningContext.for_source(batch.source_name)
        active_context.counters.input_rows = len(batch)
        for phase in self.phases:
            log.debug("Running %s phase on %s", phase.name, active_context.source_label)
            try:
                phase.run(batch, context=active_context)
            except Exception as exc:
                raise StageError(phase.stage, str(exc), source=active_context.source_label) from exc
        return batch
