"""Ports for persisting cleaned batches and their upload records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import date

    from tabrecon.domain.model import Row, UploadRecord


@runtime_checkable
class BatchRowRepository(Protocol):
    """Persistence contract for the rows of stored batches.

    Rows are addressed by the indexed (config id, source name, business date)
    triple and keep their in-batch position.
    """

    def add_rows(self, record: UploadRecord, rows: Sequence[Row]) -> None: ...

    def delete_batch(self, config_id: str, source_name: str, business_date: date) -> int: ...

    def rows_between(
        self,
        config_id: str,
        source_name: str,
        start: date,
        end: date,
    ) -> list[tuple[date, Row]]: ...

    def rows_for(self, config_id: str | None, source_name: str | None) -> list[Row]: ...

    def delete_before(self, cutoff: date) -> int: ...

    def delete_all(self) -> int: ...


@runtime_checkable
class UploadRepository(Protocol):
    """Persistence contract for upload metadata records."""

    def add(self, record: UploadRecord) -> None: ...

    def get(self, file_id: str) -> UploadRecord | None: ...

    def list(self, config_id: str | None = None) -> list[UploadRecord]: ...

    def delete(self, file_id: str) -> int: ...

    def delete_batch(self, config_id: str, source_name: str, business_date: date) -> int: ...

    def delete_before(self, cutoff: date) -> int: ...

    def delete_all(self) -> int: ...
