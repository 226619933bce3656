"""Batch Store: dated, per-source persistence of cleaned batches.

Every (config id, source name, business date) triple holds at most one batch.
``put`` replaces the stored batch wholesale inside a single unit of work, so a
reader never observes the triple half written and re-running a put is
idempotent. Historical windows are assembled by concatenating stored batches in
ascending date order without any cross-date deduplication.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from tabrecon.domain.errors import BatchStoreError, UploadNotFoundError
from tabrecon.domain.model import Batch, UploadRecord, union_rows
from tabrecon.domain.queries import filter_rows

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from datetime import date

    from tabrecon.domain.model import Row
    from tabrecon.domain.ports import BatchStoreUnitOfWorkFactory
    from tabrecon.domain.queries import QueryCondition
    from tabrecon.domain.time_windows import DateWindow

log = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@contextmanager
def _storage_context(operation: str, **context: object) -> Iterator[None]:
    try:
        yield
    except (BatchStoreError, OSError) as exc:
        details = ", ".join(f"{key}={value}" for key, value in context.items() if value is not None)
        suffix = f" ({details})" if details else ""
        raise BatchStoreError(f"Batch store {operation} failed{suffix}: {exc}") from exc


class BatchStore:
    """Domain service over a unit-of-work factory for the batch tables."""

    def __init__(
        self,
        unit_of_work: BatchStoreUnitOfWorkFactory,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock

    def put(
        self,
        batch: Batch,
        *,
        config_id: str,
        config_name: str,
        source_name: str,
        business_date: date,
        file_name: str | None = None,
    ) -> UploadRecord:
        """Replace whatever is stored for the triple with ``batch``."""

        record = UploadRecord(
            file_id=str(uuid.uuid4()),
            config_id=config_id,
            config_name=config_name,
            source_name=source_name,
            file_name=file_name or batch.file_name or "",
            business_date=business_date,
            upload_time=self._clock(),
            record_count=len(batch),
        )
        with (
            _storage_context(
                "put", config=config_id, source=source_name, date=business_date.isoformat()
            ),
            self._unit_of_work() as uow,
        ):
            repositories = uow.repositories
            removed = repositories.rows.delete_batch(config_id, source_name, business_date)
            repositories.uploads.delete_batch(config_id, source_name, business_date)
            repositories.rows.add_rows(record, batch.rows)
            repositories.uploads.add(record)
            uow.commit()

        if removed:
            log.info(
                "Replaced %d stored rows for %s/%s on %s",
                removed,
                config_id,
                source_name,
                business_date,
            )
        log.info(
            "Stored %d rows for %s/%s on %s as %s",
            record.record_count,
            config_id,
            source_name,
            business_date,
            record.file_id,
        )
        return record

    def load_window(self, config_id: str, source_name: str, window: DateWindow) -> Batch:
        """Return every stored row for ``source_name`` whose date lies in ``window``."""

        with (
            _storage_context(
                "load_window",
                config=config_id,
                source=source_name,
                window=f"{window.start.isoformat()}..{window.end.isoformat()}",
            ),
            self._unit_of_work() as uow,
        ):
            dated_rows = uow.repositories.rows.rows_between(
                config_id, source_name, window.start, window.end
            )

        dates = {business_date for business_date, _ in dated_rows}
        log.info(
            "Loaded %d historical rows across %d days for %s/%s (%s to %s)",
            len(dated_rows),
            len(dates),
            config_id,
            source_name,
            window.start,
            window.end,
        )
        return Batch(
            source_name=source_name,
            rows=union_rows([[row for _, row in dated_rows]]),
            config_id=config_id,
            business_date=dates.pop() if len(dates) == 1 else None,
        )

    def cleanup_before(self, cutoff: date) -> int:
        """Delete every batch dated strictly before ``cutoff``; return the batch count."""

        with (
            _storage_context("cleanup", cutoff=cutoff.isoformat()),
            self._unit_of_work() as uow,
        ):
            rows = uow.repositories.rows.delete_before(cutoff)
            uploads = uow.repositories.uploads.delete_before(cutoff)
            uow.commit()
        log.info("Removed %d batches (%d rows) dated before %s", uploads, rows, cutoff)
        return uploads

    def delete_upload(self, file_id: str) -> UploadRecord:
        """Delete one stored batch by its upload id."""

        with _storage_context("delete_upload", file_id=file_id), self._unit_of_work() as uow:
            record = uow.repositories.uploads.get(file_id)
            if record is None:
                raise UploadNotFoundError(f"No upload with id {file_id}")
            uow.repositories.rows.delete_batch(
                record.config_id, record.source_name, record.business_date
            )
            uow.repositories.uploads.delete(file_id)
            uow.commit()
        log.info("Deleted upload %s (%d rows)", file_id, record.record_count)
        return record

    def clear_all(self) -> int:
        """Delete every stored batch; return the number of upload records removed."""

        with _storage_context("clear_all"), self._unit_of_work() as uow:
            rows = uow.repositories.rows.delete_all()
            uploads = uow.repositories.uploads.delete_all()
            uow.commit()
        log.info("Cleared batch store: %d uploads, %d rows", uploads, rows)
        return uploads

    def list_uploads(self, config_id: str | None = None) -> list[UploadRecord]:
        with _storage_context("list_uploads", config=config_id), self._unit_of_work() as uow:
            return uow.repositories.uploads.list(config_id)

    def query_rows(
        self,
        *,
        config_id: str | None = None,
        source_name: str | None = None,
        conditions: Sequence[QueryCondition] = (),
        limit: int | None = None,
    ) -> list[Row]:
        """Filter stored rows of an optional config/source with ``conditions``."""

        with (
            _storage_context("query", config=config_id, source=source_name),
            self._unit_of_work() as uow,
        ):
            rows = uow.repositories.rows.rows_for(config_id, source_name)
        selected = filter_rows(rows, conditions, limit=limit)
        log.info(
            "Query over %d stored rows with %d conditions returned %d rows",
            len(rows),
            len(conditions),
            len(selected),
        )
        return selected


__all__ = ["BatchStore"]
