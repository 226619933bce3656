"""Application orchestration entry points."""

from __future__ import annotations

import csv
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from tabrecon.adapters.csv import read_csv_batch
from tabrecon.adapters.json_store import JsonConfigRepository, JsonTaskRepository
from tabrecon.adapters.sqlalchemy import SqlAlchemyBatchStoreUnitOfWork, is_started, startup
from tabrecon.config import ConfigurationError, get_reconcile_config, get_storage_config
from tabrecon.domain.batch_store import BatchStore
from tabrecon.domain.cleaning import run_cleaning_pipeline
from tabrecon.domain.errors import ReconciliationError, Stage, StageError
from tabrecon.domain.model import (
    FieldType,
    ReconciliationStats,
    ReconciliationTask,
    union_batches,
)
from tabrecon.domain.reconciliation import reconcile, validate_match_fields
from tabrecon.domain.time_windows import DateWindow

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from datetime import date

    from tabrecon.config import StorageConfig
    from tabrecon.domain.model import (
        AmountParsePolicy,
        Batch,
        ChannelConfig,
        FileConfig,
        ReconciliationResult,
        SourceConfig,
        StatusMapping,
    )

log = getLogger(__name__)

DOUBLE_CHECK_SUFFIX = "_doublecheck"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


@contextmanager
def _stage(stage: Stage, source: str | None = None) -> Iterator[None]:
    """Label any failure inside the block with ``stage`` and ``source``."""

    try:
        yield
    except StageError:
        raise
    except (ConfigurationError, ReconciliationError, OSError, ValueError, csv.Error) as exc:
        raise StageError(stage, str(exc), source=source) from exc


def build_batch_store() -> BatchStore:
    """Return a batch store over the SQLAlchemy adapter, starting it if needed."""

    if not is_started():
        startup()
    return BatchStore(SqlAlchemyBatchStoreUnitOfWork)


def build_task_repository(storage: StorageConfig | None = None) -> JsonTaskRepository:
    return JsonTaskRepository((storage or get_storage_config()).tasks_dir())


def build_config_repository(storage: StorageConfig | None = None) -> JsonConfigRepository:
    return JsonConfigRepository((storage or get_storage_config()).configs_dir())


@dataclass(frozen=True, slots=True)
class ReconcileRequest:
    """One reconciliation run: a saved configuration plus the two uploaded files."""

    config: ChannelConfig
    source_a_file: FileConfig
    source_b_file: FileConfig
    task_name: str = ""

    @property
    def business_date(self) -> date:
        return self.source_a_file.date_range.start


@dataclass(frozen=True, slots=True)
class _Side:
    label: str
    name: str
    file: FileConfig
    source: SourceConfig
    id_field: str
    status_mappings: tuple[StatusMapping, ...]
    use_history: bool


def _sides(request: ReconcileRequest) -> tuple[_Side, _Side]:
    config = request.config
    match = config.match_config
    side_a = _Side(
        label="source A",
        name=request.source_a_file.source_name or config.source_a_name,
        file=request.source_a_file,
        source=config.source_a_config,
        id_field=match.source_a_id_field,
        status_mappings=match.source_a_status_mapping,
        use_history=match.use_historical_source_a,
    )
    side_b = _Side(
        label="source B",
        name=request.source_b_file.source_name or config.source_b_name,
        file=request.source_b_file,
        source=config.source_b_config,
        id_field=match.source_b_id_field,
        status_mappings=match.source_b_status_mapping,
        use_history=match.use_historical_source_b,
    )
    return side_a, side_b


def _load_and_clean(side: _Side) -> Batch:
    with _stage(Stage.LOAD, side.name):
        batch = read_csv_batch(side.file.file_path, side.file.header, source_name=side.name)
    if side.file.file_name:
        batch.file_name = side.file.file_name

    counters = run_cleaning_pipeline(
        batch,
        mappings=side.source.mappings,
        status_field=side.source.field_for(FieldType.STATUS),
        status_mappings=side.status_mappings,
        id_field=side.id_field,
        remove_duplicate=side.file.remove_duplicate,
        source_label=side.name,
    )
    log.info(
        "Cleaned %s (%s): %d rows in, %d rows out, %d duplicates removed, %d unmatched statuses",
        side.label,
        side.name,
        counters.input_rows,
        len(batch),
        counters.duplicates_removed,
        counters.unmatched_statuses,
    )
    return batch


def _store_with_history(
    store: BatchStore,
    side: _Side,
    batch: Batch,
    *,
    config: ChannelConfig,
    business_date: date,
    history_days: int,
) -> Batch:
    with _stage(Stage.STORE, side.name):
        store.put(
            batch,
            config_id=config.id,
            config_name=config.name,
            source_name=side.name,
            business_date=business_date,
            file_name=side.file.file_name or batch.file_name,
        )
    if not side.use_history or history_days == 0:
        return batch

    # the current date's slice is the batch just stored
    with _stage(Stage.HISTORY, side.name):
        window = DateWindow.preceding(business_date, history_days)
        history = store.load_window(config.id, side.name, window)
    merged = union_batches(side.name, [history, batch], config_id=config.id)
    log.info(
        "Extended %s with %d historical rows from %s to %s",
        side.name,
        len(history),
        window.start,
        window.end,
    )
    return merged


def _match(
    config: ChannelConfig,
    batch_a: Batch,
    batch_b: Batch,
    *,
    amount_policy: AmountParsePolicy,
) -> ReconciliationResult:
    match = config.match_config
    amount_a = config.source_a_config.field_for(FieldType.AMOUNT)
    amount_b = config.source_b_config.field_for(FieldType.AMOUNT)
    with _stage(Stage.MATCH):
        validate_match_fields(
            batch_a,
            batch_b,
            id_a=match.source_a_id_field,
            id_b=match.source_b_id_field,
            amount_a=amount_a,
            amount_b=amount_b,
            label_a=batch_a.source_name,
            label_b=batch_b.source_name,
        )
        return reconcile(
            batch_a.rows,
            batch_b.rows,
            match.source_a_id_field,
            match.source_b_id_field,
            amount_a,
            amount_b,
            amount_policy=amount_policy,
        )


def run_reconciliation(
    request: ReconcileRequest,
    *,
    store: BatchStore | None = None,
    tasks: JsonTaskRepository | None = None,
    amount_policy: AmountParsePolicy | None = None,
    clock: Callable[[], datetime] = _utcnow,
) -> tuple[ReconciliationTask, ReconciliationResult]:
    """Load, clean, store and match both uploads, then record the task.

    Each source is stored under the business date (source A's date range start)
    before matching, so a retried run simply overwrites what a failed run left.
    """

    settings = get_reconcile_config()
    effective_store = store or build_batch_store()
    effective_tasks = tasks or build_task_repository()
    policy = amount_policy or settings.amount_policy
    config = request.config
    history_days = config.match_config.history_days
    if history_days is None:
        history_days = settings.history_days
    business_date = request.business_date

    log.info(
        "Starting reconciliation for %s (%s) on %s: history_days=%s, amount_policy=%s",
        config.name,
        config.id,
        business_date,
        history_days,
        policy,
    )

    side_a, side_b = _sides(request)
    batch_a = _load_and_clean(side_a)
    batch_b = _load_and_clean(side_b)
    batch_a = _store_with_history(
        effective_store,
        side_a,
        batch_a,
        config=config,
        business_date=business_date,
        history_days=history_days,
    )
    batch_b = _store_with_history(
        effective_store,
        side_b,
        batch_b,
        config=config,
        business_date=business_date,
        history_days=history_days,
    )

    result = _match(config, batch_a, batch_b, amount_policy=policy)

    created_at = clock()
    task = ReconciliationTask(
        task_id=f"task_{_millis(created_at)}",
        task_name=request.task_name or f"{config.name} {business_date.isoformat()}",
        config_id=config.id,
        config_name=config.name,
        source_a_name=side_a.name,
        source_b_name=side_b.name,
        task_type=request.source_a_file.file_type,
        date_range=request.source_a_file.date_range,
        created_at=created_at,
        source_a_file_name=side_a.file.file_name,
        source_b_file_name=side_b.file.file_name,
        stats=ReconciliationStats.from_result(
            result, total_source_a=len(batch_a), total_source_b=len(batch_b)
        ),
        used_historical_source_a=side_a.use_history,
        used_historical_source_b=side_b.use_history,
    )
    with _stage(Stage.SAVE):
        effective_tasks.save(task, result)

    log.info("Finished reconciliation %s: %s", task.task_id, task.stats)
    return task, result


def double_check_task(
    task_id: str,
    extended_days: int,
    *,
    store: BatchStore | None = None,
    tasks: JsonTaskRepository | None = None,
    configs: JsonConfigRepository | None = None,
    amount_policy: AmountParsePolicy | None = None,
    clock: Callable[[], datetime] = _utcnow,
) -> tuple[ReconciliationTask, ReconciliationResult]:
    """Re-match a finished task over its date range widened by ``extended_days``.

    Both sides come entirely from the batch store; stored rows are already
    cleaned, so no rule or status processing runs again.
    """

    effective_store = store or build_batch_store()
    effective_tasks = tasks or build_task_repository()
    effective_configs = configs or build_config_repository()
    policy = amount_policy or get_reconcile_config().amount_policy

    original = effective_tasks.get(task_id)
    config = effective_configs.get(original.config_id)
    window = DateWindow.around(
        original.date_range.start, original.date_range.end, days=extended_days
    )
    log.info("Double checking %s over %s to %s", task_id, window.start, window.end)

    with _stage(Stage.HISTORY, original.source_a_name):
        batch_a = effective_store.load_window(config.id, original.source_a_name, window)
    with _stage(Stage.HISTORY, original.source_b_name):
        batch_b = effective_store.load_window(config.id, original.source_b_name, window)

    result = _match(config, batch_a, batch_b, amount_policy=policy)

    created_at = clock()
    history_label = f"historical data (±{extended_days} days)"
    task = ReconciliationTask(
        task_id=f"task_{_millis(created_at)}{DOUBLE_CHECK_SUFFIX}",
        task_name=f"{original.task_name} (Double Check)",
        config_id=original.config_id,
        config_name=original.config_name,
        source_a_name=original.source_a_name,
        source_b_name=original.source_b_name,
        task_type=original.task_type,
        date_range=original.date_range,
        created_at=created_at,
        source_a_file_name=history_label,
        source_b_file_name=history_label,
        stats=ReconciliationStats.from_result(
            result, total_source_a=len(batch_a), total_source_b=len(batch_b)
        ),
        used_historical_source_a=True,
        used_historical_source_b=True,
    )
    with _stage(Stage.SAVE):
        effective_tasks.save(task, result)

    log.info("Finished double check %s: %s", task.task_id, task.stats)
    return task, result
