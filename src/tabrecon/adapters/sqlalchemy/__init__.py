"""SQLAlchemy adapter package for the tabrecon batch store."""

from __future__ import annotations

from .mappings import batch_row_table, metadata, upload_metadata_table
from .repositories import SqlAlchemyBatchRowRepository, SqlAlchemyUploadRepository
from .unit_of_work import (
    SqlAlchemyBatchStoreUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyBatchRowRepository",
    "SqlAlchemyBatchStoreUnitOfWork",
    "SqlAlchemyUploadRepository",
    "StartupError",
    "batch_row_table",
    "configured_engine",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
    "upload_metadata_table",
]
