from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, inspect

from tabrecon.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyBatchStoreUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from tabrecon.domain.errors import BatchStoreError
from tabrecon.domain.model import UploadRecord

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def _record(file_id: str = "file-1") -> UploadRecord:
    return UploadRecord(
        file_id=file_id,
        config_id="config-1",
        config_name="Shop vs Gateway",
        source_name="shop",
        file_name="shop.csv",
        business_date=date(2024, 3, 10),
        upload_time=datetime(2024, 3, 10, 12, tzinfo=UTC),
        record_count=1,
    )


def test_unit_of_work_requires_startup() -> None:
    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyBatchStoreUnitOfWork()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:", future=True)
    engine_b = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_startup_applies_migrations() -> None:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)

    startup(engine=engine, force=True)

    tables = set(inspect(engine).get_table_names())
    assert {"batch_row", "upload_metadata", "alembic_version"} <= tables


def test_rows_written_without_commit_are_rolled_back(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyBatchStoreUnitOfWork() as uow:
        uow.repositories.uploads.add(_record())

    with SqlAlchemyBatchStoreUnitOfWork() as uow:
        assert uow.repositories.uploads.get("file-1") is None


def test_database_errors_surface_as_batch_store_errors(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)

    with SqlAlchemyBatchStoreUnitOfWork() as uow:
        uow.repositories.uploads.add(_record())
        uow.commit()

    with pytest.raises(BatchStoreError), SqlAlchemyBatchStoreUnitOfWork() as uow:
        uow.repositories.uploads.add(_record())
        uow.commit()

    with SqlAlchemyBatchStoreUnitOfWork() as uow:
        assert uow.repositories.uploads.list() == [_record()]
