"""CSV loading into raw batches."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from tabrecon.config.errors import ConfigurationError
from tabrecon.domain.model import Batch

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from tabrecon.domain.model import Row

log = logging.getLogger(__name__)

CSV_ENCODING = "utf-8-sig"


def _generated_name(index: int) -> str:
    return f"column{index}"


def _unique_names(raw: Sequence[str]) -> list[str]:
    names: list[str] = []
    seen: set[str] = set()
    for index, cell in enumerate(raw):
        name = cell.strip() or _generated_name(index)
        candidate = name
        counter = 2
        while candidate in seen:
            candidate = f"{name}_{counter}"
            counter += 1
        seen.add(candidate)
        names.append(candidate)
    return names


def _records(path: Path) -> Iterator[list[str]]:
    with path.open(newline="", encoding=CSV_ENCODING) as handle:
        yield from csv.reader(handle)


def _split(path: Path, header_row: int) -> tuple[list[str] | None, list[list[str]]]:
    if header_row < 0:
        raise ConfigurationError(f"Header row must be 0 (no header) or positive, got {header_row}")
    records = list(_records(path))
    if header_row == 0:
        return None, records
    if header_row > len(records):
        raise ConfigurationError(
            f"Header row {header_row} is beyond the end of {path.name} ({len(records)} lines)"
        )
    return records[header_row - 1], records[header_row:]


def read_headers(path: str | Path, header_row: int = 1) -> list[str]:
    """Return the column names a batch read with ``header_row`` would carry."""

    header, records = _split(Path(path), header_row)
    if header is not None:
        return _unique_names(header)
    width = max((len(record) for record in records), default=0)
    return [_generated_name(index) for index in range(width)]


def read_csv_batch(
    path: str | Path,
    header_row: int = 1,
    *,
    source_name: str | None = None,
) -> Batch:
    """Load a CSV file as a raw batch of string cells.

    ``header_row`` is 1-based; lines above it are skipped. ``0`` means the file has
    no header and columns are named ``column0``, ``column1`` and so on. Empty cells
    become ``None``; blank lines are dropped.
    """

    csv_path = Path(path)
    header, records = _split(csv_path, header_row)
    names = _unique_names(header) if header is not None else []

    rows: list[Row] = []
    for record in records:
        if not any(cell.strip() for cell in record):
            continue
        while len(names) < len(record):
            names.append(_generated_name(len(names)))
        rows.append(
            {
                name: (record[index] if index < len(record) and record[index] != "" else None)
                for index, name in enumerate(names)
            }
        )

    log.info("Read %d rows from %s", len(rows), csv_path)
    return Batch(source_name=source_name or csv_path.stem, rows=rows, file_name=csv_path.name)
