"""Reconciliation outputs, task summaries and upload records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from .rows import Row

if TYPE_CHECKING:
    from datetime import date, datetime

    from .settings import DateRange


class Partition(StrEnum):
    MATCHED = "matched"
    ONLY_IN_A = "only_in_a"
    ONLY_IN_B = "only_in_b"
    AMOUNT_MISMATCH = "amount_mismatch"
    STATUS_MISMATCH = "status_mismatch"


@dataclass(slots=True)
class ReconciliationResult:
    """Partitions produced by the matcher.

    ``matched``, ``amount_mismatch`` and ``status_mismatch`` hold joined rows (one per
    A/B pair sharing the identifier); ``only_in_a`` and ``only_in_b`` hold the
    unjoined source rows. ``amount_columns`` names the A and B amount columns inside
    joined rows when both sides configured an amount field.
    """

    matched: list[Row] = field(default_factory=list[Row])
    only_in_a: list[Row] = field(default_factory=list[Row])
    only_in_b: list[Row] = field(default_factory=list[Row])
    amount_mismatch: list[Row] = field(default_factory=list[Row])
    status_mismatch: list[Row] = field(default_factory=list[Row])
    amount_columns: tuple[str, str] | None = None

    def partition(self, kind: Partition) -> list[Row]:
        match kind:
            case Partition.MATCHED:
                return self.matched
            case Partition.ONLY_IN_A:
                return self.only_in_a
            case Partition.ONLY_IN_B:
                return self.only_in_b
            case Partition.AMOUNT_MISMATCH:
                return self.amount_mismatch
            case Partition.STATUS_MISMATCH:
                return self.status_mismatch


@dataclass(frozen=True, slots=True)
class ReconciliationStats:
    matched_count: int
    only_in_source_a_count: int
    only_in_source_b_count: int
    amount_mismatch_count: int
    status_mismatch_count: int
    total_source_a: int
    total_source_b: int

    @classmethod
    def from_result(
        cls,
        result: ReconciliationResult,
        *,
        total_source_a: int,
        total_source_b: int,
    ) -> ReconciliationStats:
        return cls(
            matched_count=len(result.matched),
            only_in_source_a_count=len(result.only_in_a),
            only_in_source_b_count=len(result.only_in_b),
            amount_mismatch_count=len(result.amount_mismatch),
            status_mismatch_count=len(result.status_mismatch),
            total_source_a=total_source_a,
            total_source_b=total_source_b,
        )


@dataclass(frozen=True, slots=True)
class ReconciliationTask:
    """Summary record of one reconciliation run."""

    task_id: str
    task_name: str
    config_id: str
    config_name: str
    source_a_name: str
    source_b_name: str
    date_range: DateRange
    created_at: datetime
    source_a_file_name: str
    source_b_file_name: str
    stats: ReconciliationStats
    task_type: str = ""
    used_historical_source_a: bool = False
    used_historical_source_b: bool = False


@dataclass(frozen=True, slots=True)
class UploadRecord:
    """Metadata written alongside every stored batch."""

    file_id: str
    config_id: str
    config_name: str
    source_name: str
    file_name: str
    business_date: date
    upload_time: datetime
    record_count: int
