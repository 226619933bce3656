"""CSV adapters: raw batch loading and result export."""

from __future__ import annotations

from .exporter import (
    AMOUNT_DIFFERENCE_COLUMN,
    PARTITION_SUFFIXES,
    export_all,
    export_partition,
    order_columns,
    write_rows,
)
from .reader import read_csv_batch, read_headers

__all__ = [
    "AMOUNT_DIFFERENCE_COLUMN",
    "PARTITION_SUFFIXES",
    "export_all",
    "export_partition",
    "order_columns",
    "read_csv_batch",
    "read_headers",
    "write_rows",
]
