"""Failures raised by reconciliation runs and the stores around them."""

from __future__ import annotations

from enum import StrEnum


class Stage(StrEnum):
    """Named steps of a reconciliation run, used to label failures."""

    LOAD = "load"
    CLEAN = "clean"
    NORMALIZE = "normalize"
    DEDUPE = "dedupe"
    STORE = "store"
    HISTORY = "history"
    MATCH = "match"
    SAVE = "save"


class ReconciliationError(RuntimeError):
    """Base class for fatal reconciliation failures."""


class StageError(ReconciliationError):
    """A run failed inside one stage; the message names the stage and source."""

    def __init__(self, stage: Stage, message: str, *, source: str | None = None) -> None:
        self.stage = stage
        self.source = source
        where = f"{stage.value} stage" if source is None else f"{stage.value} stage for {source}"
        super().__init__(f"{where} failed: {message}")


class BatchStoreError(ReconciliationError):
    """Reading or writing the batch store failed."""


class TaskNotFoundError(ReconciliationError):
    """No task (or task result) exists for the requested id."""


class ConfigNotFoundError(ReconciliationError):
    """No channel configuration exists for the requested id."""


class UploadNotFoundError(ReconciliationError):
    """No stored batch exists for the requested upload id."""
