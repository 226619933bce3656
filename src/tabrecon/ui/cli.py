# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from tabrecon.adapters.csv import export_all, export_partition, read_headers
from tabrecon.app import (
    ReconcileRequest,
    build_batch_store,
    build_config_repository,
    build_task_repository,
    double_check_task,
    run_reconciliation,
)
from tabrecon.config import ConfigurationError, configure_logging
from tabrecon.domain.model import DateRange, FileConfig, Partition
from tabrecon.domain.queries import QueryCondition, QueryOperator
from tabrecon.domain.time_windows import parse_business_date

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date
    from types import FrameType

    from tabrecon.domain.model import (
        ChannelConfig,
        ReconciliationResult,
        ReconciliationTask,
        SourceConfig,
    )

log = logging.getLogger(__name__)

ALL_PARTITIONS = "all"


def _date_arg(value: str) -> date:
    try:
        return parse_business_date(value)
    except ConfigurationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reconcile two tabular data sources")
    subparsers = parser.add_subparsers(dest="command", required=True)

    headers = subparsers.add_parser("headers", help="Print the columns of a CSV file")
    headers.add_argument("file", type=Path, help="CSV file to inspect")
    headers.add_argument(
        "--header-row",
        type=_non_negative_int,
        default=1,
        help="1-based header line, 0 when the file has none (default: %(default)s)",
    )

    reconcile = subparsers.add_parser("reconcile", help="Reconcile two uploaded files")
    reconcile.add_argument("--config-id", required=True, help="Saved configuration to use")
    reconcile.add_argument("--file-a", type=Path, required=True, help="CSV file for source A")
    reconcile.add_argument("--file-b", type=Path, required=True, help="CSV file for source B")
    reconcile.add_argument(
        "--date",
        type=_date_arg,
        required=True,
        help="Business date (YYYY-MM-DD) the uploads belong to",
    )
    reconcile.add_argument(
        "--end-date",
        type=_date_arg,
        help="Inclusive end of the uploads' date range (defaults to --date)",
    )
    reconcile.add_argument("--task-name", default="", help="Name recorded on the task")
    reconcile.add_argument("--task-type", default="", help="Free-form task type label")
    for side in ("a", "b"):
        reconcile.add_argument(
            f"--header-{side}",
            type=_non_negative_int,
            help=f"Header line of source {side.upper()} (defaults to the configuration)",
        )
        reconcile.add_argument(
            f"--dedupe-{side}",
            action=argparse.BooleanOptionalAction,
            default=None,
            help=f"Drop duplicate identifiers in source {side.upper()} (defaults to config)",
        )
    reconcile.add_argument("--export", type=Path, help="Write every partition next to this path")

    double_check = subparsers.add_parser(
        "double-check",
        help="Re-match a finished task over a widened window of stored batches",
    )
    double_check.add_argument("task_id", help="Task to re-check")
    double_check.add_argument(
        "--days",
        type=_non_negative_int,
        default=3,
        help="Days added on both sides of the task's date range (default: %(default)s)",
    )
    double_check.add_argument("--export", type=Path, help="Write every partition next to this path")

    export = subparsers.add_parser("export", help="Export a stored task result to CSV")
    export.add_argument("task_id", help="Task whose result to export")
    export.add_argument("output", type=Path, help="Target file (or base path for 'all')")
    export.add_argument(
        "--partition",
        choices=[ALL_PARTITIONS, *(kind.value for kind in Partition)],
        default=ALL_PARTITIONS,
        help="Partition to export (default: %(default)s)",
    )

    uploads = subparsers.add_parser("uploads", help="Stored upload management")
    uploads_sub = uploads.add_subparsers(dest="uploads_command", required=True)
    uploads_list = uploads_sub.add_parser("list", help="List stored uploads, newest first")
    uploads_list.add_argument("--config-id", help="Only uploads of this configuration")
    uploads_delete = uploads_sub.add_parser("delete", help="Delete one stored upload")
    uploads_delete.add_argument("file_id", help="Upload id to delete")

    cleanup = subparsers.add_parser("cleanup", help="Delete stored batches before a date")
    cleanup.add_argument(
        "--before",
        type=_date_arg,
        required=True,
        help="Cutoff date (YYYY-MM-DD); batches dated earlier are removed",
    )

    clear = subparsers.add_parser("clear", help="Delete every stored batch")
    clear.add_argument("--yes", action="store_true", help="Confirm deleting all stored data")

    query = subparsers.add_parser("query", help="Filter stored rows")
    query.add_argument("--config-id", help="Only rows of this configuration")
    query.add_argument("--source", help="Only rows of this source")
    query.add_argument(
        "--where",
        nargs="+",
        action="append",
        default=[],
        metavar="FIELD OP VALUE [VALUE2]",
        help="Condition; OP is one of equals, contains, gt, lt, between",
    )
    query.add_argument("--limit", type=_non_negative_int, help="Maximum number of rows")

    tasks = subparsers.add_parser("tasks", help="Reconciliation task history")
    tasks_sub = tasks.add_subparsers(dest="tasks_command", required=True)
    tasks_list = tasks_sub.add_parser("list", help="List recorded tasks")
    tasks_list.add_argument("--config-id", help="Only tasks of this configuration")
    tasks_show = tasks_sub.add_parser("show", help="Print a task summary")
    tasks_show.add_argument("task_id")
    tasks_delete = tasks_sub.add_parser("delete", help="Delete a task and its result")
    tasks_delete.add_argument("task_id")

    configs = subparsers.add_parser("configs", help="Channel configuration management")
    configs_sub = configs.add_subparsers(dest="configs_command", required=True)
    configs_sub.add_parser("list", help="List saved configurations")
    configs_import = configs_sub.add_parser("import", help="Import a configuration file")
    configs_import.add_argument("path", type=Path)
    configs_export = configs_sub.add_parser("export", help="Export a configuration file")
    configs_export.add_argument("config_id")
    configs_export.add_argument("path", type=Path)
    configs_delete = configs_sub.add_parser("delete", help="Delete a saved configuration")
    configs_delete.add_argument("config_id")

    return parser


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    return _build_parser().parse_args(list(argv))


def _parse_conditions(raw: Sequence[Sequence[str]]) -> list[QueryCondition]:
    conditions: list[QueryCondition] = []
    for parts in raw:
        if len(parts) not in (3, 4):
            raise ValueError(f"Expected FIELD OP VALUE [VALUE2], got: {' '.join(parts)}")
        field, operator, value, *rest = parts
        try:
            parsed_operator = QueryOperator(operator)
        except ValueError as exc:
            choices = ", ".join(item.value for item in QueryOperator)
            raise ValueError(f"Unknown operator {operator!r}; expected one of {choices}") from exc
        conditions.append(
            QueryCondition(
                field=field,
                operator=parsed_operator,
                value=value,
                value2=rest[0] if rest else None,
            )
        )
    return conditions


def _file_config(
    path: Path,
    *,
    source_name: str,
    source: SourceConfig,
    date_range: DateRange,
    header: int | None,
    remove_duplicate: bool | None,
    file_type: str,
) -> FileConfig:
    return FileConfig(
        source_name=source_name,
        file_path=str(path),
        file_name=path.name,
        date_range=date_range,
        header=source.header if header is None else header,
        remove_duplicate=source.remove_duplicate if remove_duplicate is None else remove_duplicate,
        timezone=source.timezone,
        file_type=file_type,
    )


def _reconcile_request(args: argparse.Namespace, config: ChannelConfig) -> ReconcileRequest:
    date_range = DateRange(start=args.date, end=args.end_date or args.date)
    if date_range.end < date_range.start:
        raise ValueError("--end-date must not be before --date")
    return ReconcileRequest(
        config=config,
        source_a_file=_file_config(
            args.file_a,
            source_name=config.source_a_name,
            source=config.source_a_config,
            date_range=date_range,
            header=args.header_a,
            remove_duplicate=args.dedupe_a,
            file_type=args.task_type,
        ),
        source_b_file=_file_config(
            args.file_b,
            source_name=config.source_b_name,
            source=config.source_b_config,
            date_range=date_range,
            header=args.header_b,
            remove_duplicate=args.dedupe_b,
            file_type=args.task_type,
        ),
        task_name=args.task_name,
    )


def _print_task(task: ReconciliationTask) -> None:
    stats = task.stats
    print(
        f"{task.task_id}  {task.task_name}  [{task.date_range.start} .. {task.date_range.end}]  "
        f"matched={stats.matched_count} only_a={stats.only_in_source_a_count} "
        f"only_b={stats.only_in_source_b_count} amount={stats.amount_mismatch_count} "
        f"status={stats.status_mismatch_count} "
        f"totals={stats.total_source_a}/{stats.total_source_b}"
    )


def _export(result: ReconciliationResult, output: Path, partition: str) -> None:
    if partition == ALL_PARTITIONS:
        for kind, path in export_all(result, output).items():
            log.info("Exported %s to %s", kind, path)
        return
    path = export_partition(result, Partition(partition), output)
    log.info("Exported %s to %s", partition, path)


def _run_reconcile(args: argparse.Namespace) -> None:
    config = build_config_repository().get(args.config_id)
    task, result = run_reconciliation(_reconcile_request(args, config))
    _print_task(task)
    if args.export is not None:
        _export(result, args.export, ALL_PARTITIONS)


def _run_double_check(args: argparse.Namespace) -> None:
    task, result = double_check_task(args.task_id, args.days)
    _print_task(task)
    if args.export is not None:
        _export(result, args.export, ALL_PARTITIONS)


def _run_uploads(args: argparse.Namespace) -> None:
    store = build_batch_store()
    if args.uploads_command == "list":
        for record in store.list_uploads(args.config_id):
            print(
                f"{record.file_id}  {record.config_name}  {record.source_name}  "
                f"{record.business_date}  {record.file_name}  rows={record.record_count}  "
                f"uploaded={record.upload_time.isoformat()}"
            )
    else:
        record = store.delete_upload(args.file_id)
        print(f"Deleted {record.file_id} ({record.record_count} rows)")


def _run_query(args: argparse.Namespace, conditions: list[QueryCondition]) -> None:
    rows = build_batch_store().query_rows(
        config_id=args.config_id,
        source_name=args.source,
        conditions=conditions,
        limit=args.limit,
    )
    for row in rows:
        print(json.dumps(row, ensure_ascii=False))


def _run_tasks(args: argparse.Namespace) -> None:
    tasks = build_task_repository()
    if args.tasks_command == "list":
        listed = tasks.by_config(args.config_id) if args.config_id else tasks.load_all()
        for task in listed:
            _print_task(task)
    elif args.tasks_command == "show":
        _print_task(tasks.get(args.task_id))
    elif not tasks.delete(args.task_id):
        raise ValueError(f"No task with id {args.task_id}")


def _run_configs(args: argparse.Namespace) -> None:
    configs = build_config_repository()
    if args.configs_command == "list":
        for config in configs.load_all():
            print(f"{config.id}  {config.name}  {config.source_a_name} <> {config.source_b_name}")
    elif args.configs_command == "import":
        config = configs.import_file(args.path)
        print(f"Imported {config.name} as {config.id}")
    elif args.configs_command == "export":
        configs.export_file(args.config_id, args.path)
    elif not configs.delete(args.config_id):
        raise ValueError(f"No configuration with id {args.config_id}")


def _dispatch(args: argparse.Namespace, conditions: list[QueryCondition]) -> None:
    if args.command == "headers":
        for name in read_headers(args.file, args.header_row):
            print(name)
    elif args.command == "reconcile":
        _run_reconcile(args)
    elif args.command == "double-check":
        _run_double_check(args)
    elif args.command == "export":
        result = build_task_repository().load_result(args.task_id)
        _export(result, args.output, args.partition)
    elif args.command == "uploads":
        _run_uploads(args)
    elif args.command == "cleanup":
        removed = build_batch_store().cleanup_before(args.before)
        print(f"Removed {removed} stored batches dated before {args.before}")
    elif args.command == "clear":
        removed = build_batch_store().clear_all()
        print(f"Removed {removed} stored batches")
    elif args.command == "query":
        _run_query(args, conditions)
    elif args.command == "tasks":
        _run_tasks(args)
    elif args.command == "configs":
        _run_configs(args)
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    log_file = os.getenv("TABRECON_LOG_FILE")
    configure_logging(log_file=Path(log_file) if log_file else None)
    signal(SIGINT, sigint_handler)

    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        conditions = _parse_conditions(parsed_args.where) if parsed_args.command == "query" else []
        if parsed_args.command == "clear" and not parsed_args.yes:
            raise ValueError("Refusing to clear the batch store without --yes")  # noqa: TRY301
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        _dispatch(parsed_args, conditions)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    main()
