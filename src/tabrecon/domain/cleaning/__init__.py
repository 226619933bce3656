"""Cleaning pipeline for raw tabular batches.

Each phase mutates a ``Batch`` in place and records counters on a shared
``CleaningContext``: column transformation first, then status normalization, then
optional deduplication on the correlation key.
"""

from __future__ import annotations

from .context import CleaningContext, CleaningCounters
from .deduplication import DeduplicationPhase, dedupe
from .orchestrator import CleaningPhase, CleaningPipeline
from .rules import apply_rule, apply_rules
from .runner import build_cleaning_pipeline, run_cleaning_pipeline
from .status import StatusNormalizationPhase, canonical_status, normalize_status
from .transformation import TransformationPhase, apply_mapping

__all__ = [
    "CleaningContext",
    "CleaningCounters",
    "CleaningPhase",
    "CleaningPipeline",
    "DeduplicationPhase",
    "StatusNormalizationPhase",
    "TransformationPhase",
    "apply_mapping",
    "apply_rule",
    "apply_rules",
    "build_cleaning_pipeline",
    "canonical_status",
    "dedupe",
    "normalize_status",
    "run_cleaning_pipeline",
]
