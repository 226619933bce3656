"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select

from tabrecon.adapters.sqlalchemy.mappings import batch_row_table, upload_metadata_table
from tabrecon.domain.model import UploadRecord

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from sqlalchemy import Delete, RowMapping
    from sqlalchemy.orm import Session

    from tabrecon.domain.model import Row


class SqlAlchemyBatchRowRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add_rows(self, record: UploadRecord, rows: Sequence[Row]) -> None:
        if not rows:
            return
        self.session.execute(
            insert(batch_row_table),
            [
                {
                    "record_id": str(uuid.uuid4()),
                    "file_id": record.file_id,
                    "config_id": record.config_id,
                    "config_name": record.config_name,
                    "source_name": record.source_name,
                    "business_date": record.business_date,
                    "position": position,
                    "upload_time": record.upload_time,
                    "file_name": record.file_name,
                    "data": row,
                }
                for position, row in enumerate(rows)
            ],
        )

    def delete_batch(self, config_id: str, source_name: str, business_date: date) -> int:
        stmt = (
            delete(batch_row_table)
            .where(batch_row_table.c.config_id == config_id)
            .where(batch_row_table.c.source_name == source_name)
            .where(batch_row_table.c.business_date == business_date)
        )
        return self._rowcount(stmt)

    def rows_between(
        self,
        config_id: str,
        source_name: str,
        start: date,
        end: date,
    ) -> list[tuple[date, Row]]:
        stmt = (
            select(batch_row_table.c.business_date, batch_row_table.c.data)
            .where(batch_row_table.c.config_id == config_id)
            .where(batch_row_table.c.source_name == source_name)
            .where(batch_row_table.c.business_date.between(start, end))
            .order_by(batch_row_table.c.business_date, batch_row_table.c.position)
        )
        return [(business_date, data) for business_date, data in self.session.execute(stmt)]

    def rows_for(self, config_id: str | None, source_name: str | None) -> list[Row]:
        stmt = select(batch_row_table.c.data)
        if config_id is not None:
            stmt = stmt.where(batch_row_table.c.config_id == config_id)
        if source_name is not None:
            stmt = stmt.where(batch_row_table.c.source_name == source_name)
        stmt = stmt.order_by(
            batch_row_table.c.business_date,
            batch_row_table.c.source_name,
            batch_row_table.c.position,
        )
        return list(self.session.execute(stmt).scalars())

    def delete_before(self, cutoff: date) -> int:
        return self._rowcount(
            delete(batch_row_table).where(batch_row_table.c.business_date < cutoff)
        )

    def delete_all(self) -> int:
        return self._rowcount(delete(batch_row_table))

    def _rowcount(self, stmt: Delete) -> int:
        result = self.session.execute(stmt)
        return int(getattr(result, "rowcount", 0) or 0)


class SqlAlchemyUploadRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, record: UploadRecord) -> None:
        self.session.execute(
            insert(upload_metadata_table).values(
                file_id=record.file_id,
                config_id=record.config_id,
                config_name=record.config_name,
                source_name=record.source_name,
                file_name=record.file_name,
                business_date=record.business_date,
                upload_time=record.upload_time,
                record_count=record.record_count,
            )
        )

    def get(self, file_id: str) -> UploadRecord | None:
        stmt = select(upload_metadata_table).where(upload_metadata_table.c.file_id == file_id)
        found = self.session.execute(stmt).mappings().one_or_none()
        return None if found is None else _to_record(found)

    def list(self, config_id: str | None = None) -> list[UploadRecord]:
        stmt = select(upload_metadata_table)
        if config_id is not None:
            stmt = stmt.where(upload_metadata_table.c.config_id == config_id)
        stmt = stmt.order_by(
            upload_metadata_table.c.upload_time.desc(),
            upload_metadata_table.c.business_date.desc(),
        )
        return [_to_record(found) for found in self.session.execute(stmt).mappings()]

    def delete(self, file_id: str) -> int:
        return self._rowcount(
            delete(upload_metadata_table).where(upload_metadata_table.c.file_id == file_id)
        )

    def delete_batch(self, config_id: str, source_name: str, business_date: date) -> int:
        stmt = (
            delete(upload_metadata_table)
            .where(upload_metadata_table.c.config_id == config_id)
            .where(upload_metadata_table.c.source_name == source_name)
            .where(upload_metadata_table.c.business_date == business_date)
        )
        return self._rowcount(stmt)

    def delete_before(self, cutoff: date) -> int:
        return self._rowcount(
            delete(upload_metadata_table).where(upload_metadata_table.c.business_date < cutoff)
        )

    def delete_all(self) -> int:
        return self._rowcount(delete(upload_metadata_table))

    def _rowcount(self, stmt: Delete) -> int:
        result = self.session.execute(stmt)
        return int(getattr(result, "rowcount", 0) or 0)


def _to_record(found: RowMapping) -> UploadRecord:
    return UploadRecord(
        file_id=found["file_id"],
        config_id=found["config_id"],
        config_name=found["config_name"],
        source_name=found["source_name"],
        file_name=found["file_name"],
        business_date=found["business_date"],
        upload_time=found["upload_time"],
        record_count=found["record_count"],
    )
