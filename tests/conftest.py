from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from tabrecon.adapters.sqlalchemy.migrations import upgrade_head
from tabrecon.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyBatchStoreUnitOfWork,
    shutdown,
    startup,
)
from tabrecon.domain.batch_store import BatchStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TABRECON_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("TABRECON_HISTORY_DAYS", raising=False)
    monkeypatch.delenv("TABRECON_AMOUNT_POLICY", raising=False)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyBatchStoreUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyBatchStoreUnitOfWork:
        return SqlAlchemyBatchStoreUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()


@pytest.fixture
def batch_store(
    sqlite_unit_of_work: Callable[[], SqlAlchemyBatchStoreUnitOfWork],
) -> BatchStore:
    return BatchStore(sqlite_unit_of_work)
