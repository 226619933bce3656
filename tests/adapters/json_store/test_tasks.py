from __future__ import annotations

import json
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import pytest

from tabrecon.adapters.json_store import TASKS_FILENAME, JsonTaskRepository
from tabrecon.domain.errors import TaskNotFoundError
from tabrecon.domain.model import (
    DateRange,
    ReconciliationResult,
    ReconciliationStats,
    ReconciliationTask,
)

if TYPE_CHECKING:
    from pathlib import Path


def _task(task_id: str = "task_1", config_id: str = "config-1") -> ReconciliationTask:
    return ReconciliationTask(
        task_id=task_id,
        task_name="Shop vs Gateway 2024-03-10",
        config_id=config_id,
        config_name="Shop vs Gateway",
        source_a_name="shop",
        source_b_name="gateway",
        date_range=DateRange(date(2024, 3, 10), date(2024, 3, 10)),
        created_at=datetime(2024, 3, 10, 12, tzinfo=UTC),
        source_a_file_name="shop.csv",
        source_b_file_name="gateway.csv",
        stats=ReconciliationStats(1, 0, 1, 1, 0, 2, 3),
    )


def _result() -> ReconciliationResult:
    return ReconciliationResult(
        matched=[{"id": "1", "amount": 10.0, "flag": True}],
        only_in_b=[{"id": "9", "amount": None}],
        amount_mismatch=[{"id": "2", "amount": "5", "amount_b": "6"}],
        amount_columns=("amount", "amount_b"),
    )


def test_save_and_load_task_with_result(tmp_path: Path) -> None:
    repository = JsonTaskRepository(tmp_path)

    repository.save(_task(), _result())

    assert repository.get("task_1") == _task()
    assert repository.load_result("task_1") == _result()
    assert repository.result_path("task_1").name == "task_1_result.json"


def test_save_upserts_by_task_id(tmp_path: Path) -> None:
    repository = JsonTaskRepository(tmp_path)
    repository.save(_task(), _result())
    repository.save(_task("task_2", config_id="config-2"), ReconciliationResult())
    repository.save(_task(), ReconciliationResult())

    assert [task.task_id for task in repository.load_all()] == ["task_1", "task_2"]
    assert repository.load_result("task_1") == ReconciliationResult()
    assert [task.task_id for task in repository.by_config("config-2")] == ["task_2"]


def test_corrupt_task_file_is_discarded(tmp_path: Path) -> None:
    (tmp_path / TASKS_FILENAME).write_text("{not json", encoding="utf-8")
    repository = JsonTaskRepository(tmp_path)

    assert repository.load_all() == []
    assert not (tmp_path / TASKS_FILENAME).exists()


def test_corrupt_result_file_raises_not_found(tmp_path: Path) -> None:
    repository = JsonTaskRepository(tmp_path)
    repository.save(_task(), _result())
    repository.result_path("task_1").write_text("[]", encoding="utf-8")

    with pytest.raises(TaskNotFoundError, match="corrupt"):
        repository.load_result("task_1")
    assert not repository.result_path("task_1").exists()


def test_legacy_result_keys_are_accepted(tmp_path: Path) -> None:
    repository = JsonTaskRepository(tmp_path)
    repository.result_path("task_old").write_text(
        json.dumps({"matched": [], "diffAmount": [{"id": "7"}]}), encoding="utf-8"
    )

    assert repository.load_result("task_old").amount_mismatch == [{"id": "7"}]


def test_delete_removes_summary_and_result(tmp_path: Path) -> None:
    repository = JsonTaskRepository(tmp_path)
    repository.save(_task(), _result())

    assert repository.delete("task_1")
    assert not repository.delete("task_1")
    assert not repository.result_path("task_1").exists()
    with pytest.raises(TaskNotFoundError):
        repository.get("task_1")
