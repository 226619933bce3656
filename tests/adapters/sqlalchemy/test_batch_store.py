from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

from tabrecon.domain.batch_store import BatchStore
from tabrecon.domain.errors import BatchStoreError, UploadNotFoundError
from tabrecon.domain.queries import QueryCondition, QueryOperator
from tabrecon.domain.time_windows import DateWindow
from tests.helpers.configs import make_batch

if TYPE_CHECKING:
    from collections.abc import Callable

    from tabrecon.adapters.sqlalchemy import SqlAlchemyBatchStoreUnitOfWork
    from tabrecon.domain.model import Row

DAY = date(2024, 3, 10)


def _put(store: BatchStore, business_date: date, rows: list[Row]) -> None:
    store.put(
        make_batch(rows),
        config_id="config-1",
        config_name="Shop vs Gateway",
        source_name="shop",
        business_date=business_date,
        file_name=f"shop-{business_date.isoformat()}.csv",
    )


def test_put_replaces_existing_batch_for_same_day(batch_store: BatchStore) -> None:
    _put(batch_store, DAY, [{"id": "1"}, {"id": "2"}])
    _put(batch_store, DAY, [{"id": "3"}])

    batch = batch_store.load_window("config-1", "shop", DateWindow(DAY, DAY))
    uploads = batch_store.list_uploads("config-1")

    assert batch.rows == [{"id": "3"}]
    assert batch.business_date == DAY
    assert len(uploads) == 1
    assert uploads[0].record_count == 1
    assert uploads[0].file_name == "shop-2024-03-10.csv"


def test_load_window_concatenates_dates_in_order(batch_store: BatchStore) -> None:
    for offset in (-3, -2, 0, 2, 3):
        _put(batch_store, DAY + timedelta(days=offset), [{"id": str(offset)}])
    _put(batch_store, DAY - timedelta(days=2), [{"id": "-2"}, {"id": "-2b", "note": "x"}])

    window = DateWindow.around(DAY, days=2)
    batch = batch_store.load_window("config-1", "shop", window)

    assert [row["id"] for row in batch.rows] == ["-2", "-2b", "0", "2"]
    assert batch.rows[0] == {"id": "-2", "note": None}
    assert batch.business_date is None


def test_load_window_of_empty_range_is_empty(batch_store: BatchStore) -> None:
    batch = batch_store.load_window("config-1", "shop", DateWindow(DAY, DAY))

    assert batch.rows == []
    assert batch.source_name == "shop"


def test_sources_and_configs_are_isolated(batch_store: BatchStore) -> None:
    _put(batch_store, DAY, [{"id": "1"}])
    batch_store.put(
        make_batch([{"id": "9"}]),
        config_id="config-2",
        config_name="Other",
        source_name="shop",
        business_date=DAY,
    )

    rows = batch_store.load_window("config-1", "shop", DateWindow(DAY, DAY)).rows
    gateway = batch_store.load_window("config-1", "gateway", DateWindow(DAY, DAY)).rows

    assert rows == [{"id": "1"}]
    assert gateway == []


def test_cleanup_before_returns_removed_batch_count(batch_store: BatchStore) -> None:
    for offset in (-5, -4, 0):
        _put(batch_store, DAY + timedelta(days=offset), [{"id": str(offset)}])

    removed = batch_store.cleanup_before(DAY - timedelta(days=1))

    assert removed == 2
    assert [upload.business_date for upload in batch_store.list_uploads()] == [DAY]


def test_delete_upload_removes_rows_and_metadata(batch_store: BatchStore) -> None:
    _put(batch_store, DAY, [{"id": "1"}])
    upload = batch_store.list_uploads()[0]

    deleted = batch_store.delete_upload(upload.file_id)

    assert deleted.file_id == upload.file_id
    assert batch_store.list_uploads() == []
    assert batch_store.load_window("config-1", "shop", DateWindow(DAY, DAY)).rows == []
    with pytest.raises(UploadNotFoundError, match=r"^No upload with id ") as excinfo:
        batch_store.delete_upload(upload.file_id)
    assert not isinstance(excinfo.value, BatchStoreError)


def test_clear_all_and_query(batch_store: BatchStore) -> None:
    _put(batch_store, DAY, [{"id": "1", "amount": "5"}, {"id": "2", "amount": "50"}])

    selected = batch_store.query_rows(
        config_id="config-1",
        conditions=[QueryCondition("amount", QueryOperator.GT, "10")],
    )

    assert selected == [{"id": "2", "amount": "50"}]
    assert batch_store.clear_all() == 1
    assert batch_store.query_rows() == []


def test_uploads_are_listed_newest_first(
    sqlite_unit_of_work: Callable[[], SqlAlchemyBatchStoreUnitOfWork],
) -> None:
    moments = iter(
        [datetime(2024, 3, 10, 8, tzinfo=UTC), datetime(2024, 3, 10, 9, tzinfo=UTC)]
    )
    store = BatchStore(sqlite_unit_of_work, clock=lambda: next(moments))

    _put(store, DAY - timedelta(days=1), [{"id": "1"}])
    _put(store, DAY, [{"id": "2"}])

    uploads = store.list_uploads()

    assert [upload.business_date for upload in uploads] == [DAY, DAY - timedelta(days=1)]
    assert uploads[0].upload_time == datetime(2024, 3, 10, 9, tzinfo=UTC)


def test_stored_cells_keep_scalar_types(batch_store: BatchStore) -> None:
    _put(batch_store, DAY, [{"id": "1", "amount": 12.5, "flag": True, "note": None}])

    row = batch_store.load_window("config-1", "shop", DateWindow(DAY, DAY)).rows[0]

    assert row == {"id": "1", "amount": 12.5, "flag": True, "note": None}
