"""JSON file store for reconciliation tasks and their full results.

Task summaries live in ``tasks.json``; each task's result sits beside it in
``<task_id>_result.json``. A summary file that no longer parses is treated as
corrupt: it is removed and the store starts over empty.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from tabrecon.domain.errors import TaskNotFoundError

from .schema import ResultPayload, TaskPayload
from .translator import result_from_payload, result_to_payload, task_from_payload, task_to_payload

if TYPE_CHECKING:
    from pathlib import Path

    from tabrecon.domain.model import ReconciliationResult, ReconciliationTask

log = logging.getLogger(__name__)

TASKS_FILENAME = "tasks.json"
RESULT_SUFFIX = "_result.json"

_TASK_LIST = TypeAdapter(list[TaskPayload])


class JsonTaskRepository:
    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self.path = directory / TASKS_FILENAME

    def result_path(self, task_id: str) -> Path:
        return self.directory / f"{task_id}{RESULT_SUFFIX}"

    def load_all(self) -> list[ReconciliationTask]:
        if not self.path.exists():
            return []
        try:
            payloads = _TASK_LIST.validate_json(self.path.read_bytes())
        except ValidationError as exc:
            log.warning("Discarding corrupt task file %s: %s", self.path, exc)
            self.path.unlink(missing_ok=True)
            return []
        return [task_from_payload(payload) for payload in payloads]

    def get(self, task_id: str) -> ReconciliationTask:
        for task in self.load_all():
            if task.task_id == task_id:
                return task
        raise TaskNotFoundError(f"No task with id {task_id}")

    def by_config(self, config_id: str) -> list[ReconciliationTask]:
        return [task for task in self.load_all() if task.config_id == config_id]

    def save(self, task: ReconciliationTask, result: ReconciliationResult) -> None:
        """Upsert the task summary and overwrite its result file."""

        tasks = self.load_all()
        for index, existing in enumerate(tasks):
            if existing.task_id == task.task_id:
                tasks[index] = task
                break
        else:
            tasks.append(task)
        self._write(tasks)
        self.result_path(task.task_id).write_text(
            result_to_payload(result).model_dump_json(by_alias=True, indent=2),
            encoding="utf-8",
        )
        log.info("Saved task %s (%s)", task.task_id, task.task_name)

    def load_result(self, task_id: str) -> ReconciliationResult:
        path = self.result_path(task_id)
        if not path.exists():
            raise TaskNotFoundError(f"No result stored for task {task_id}")
        try:
            payload = ResultPayload.model_validate_json(path.read_bytes())
        except ValidationError as exc:
            log.warning("Discarding corrupt result file %s: %s", path, exc)
            path.unlink(missing_ok=True)
            raise TaskNotFoundError(f"Result for task {task_id} was corrupt") from exc
        return result_from_payload(payload)

    def delete(self, task_id: str) -> bool:
        tasks = self.load_all()
        remaining = [task for task in tasks if task.task_id != task_id]
        self._write(remaining)
        self.result_path(task_id).unlink(missing_ok=True)
        removed = len(remaining) != len(tasks)
        if removed:
            log.info("Deleted task %s", task_id)
        return removed

    def _write(self, tasks: list[ReconciliationTask]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        payloads = [task_to_payload(task) for task in tasks]
        self.path.write_bytes(_TASK_LIST.dump_json(payloads, by_alias=True, indent=2))
