"""SQLAlchemy table metadata for the batch store."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Dialect,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

if TYPE_CHECKING:
    from tabrecon.domain.model import Row

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class RowPayload(TypeDecorator[dict[str, Any]]):
    """Serialise a row as a JSON object, keeping column order."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Row | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(value, ensure_ascii=False)

    def process_result_value(self, value: str | None, dialect: Dialect) -> dict[str, Any]:
        _ = dialect
        if value is None:
            return {}
        loaded = json.loads(value)
        if not isinstance(loaded, dict):
            raise ValueError("Stored row payload is not a JSON object")
        return cast(dict[str, Any], loaded)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

batch_row_table = Table(
    "batch_row",
    metadata,
    Column("record_id", String(36), primary_key=True),
    Column("file_id", String(36), nullable=False),
    Column("config_id", String(255), nullable=False),
    Column("config_name", String(255), nullable=False),
    Column("source_name", String(255), nullable=False),
    Column("business_date", Date, nullable=False),
    Column("position", Integer, nullable=False),
    Column("upload_time", UTCDateTime(), nullable=False),
    Column("file_name", String(1024), nullable=False),
    Column("data", RowPayload(), nullable=False),
    Index("ix_batch_row_lookup", "config_id", "source_name", "business_date"),
)

upload_metadata_table = Table(
    "upload_metadata",
    metadata,
    Column("file_id", String(36), primary_key=True),
    Column("config_id", String(255), nullable=False),
    Column("config_name", String(255), nullable=False),
    Column("source_name", String(255), nullable=False),
    Column("file_name", String(1024), nullable=False),
    Column("business_date", Date, nullable=False),
    Column("upload_time", UTCDateTime(), nullable=False),
    Column("record_count", Integer, nullable=False),
    Index("ix_upload_metadata_lookup", "config_id", "source_name", "business_date"),
)
