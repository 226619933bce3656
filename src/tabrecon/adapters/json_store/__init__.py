"""JSON file stores for channel configurations and reconciliation tasks."""

from __future__ import annotations

from .configs import CONFIGS_FILENAME, JsonConfigRepository
from .tasks import RESULT_SUFFIX, TASKS_FILENAME, JsonTaskRepository

__all__ = [
    "CONFIGS_FILENAME",
    "RESULT_SUFFIX",
    "TASKS_FILENAME",
    "JsonConfigRepository",
    "JsonTaskRepository",
]
