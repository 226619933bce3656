"""Domain model for tabrecon: rows, configuration and results."""

from __future__ import annotations

from .results import (
    Partition,
    ReconciliationResult,
    ReconciliationStats,
    ReconciliationTask,
    UploadRecord,
)
from .rows import (
    NORMALIZED_STATUS_FIELD,
    Batch,
    Row,
    Scalar,
    as_text,
    ordered_columns,
    parse_number,
    union_batches,
    union_rows,
)
from .settings import (
    AmountParsePolicy,
    ChannelConfig,
    ColumnMapping,
    DateRange,
    FieldType,
    FileConfig,
    FormatRule,
    MatchConfig,
    RuleOperation,
    SourceConfig,
    StatusMapping,
    field_for,
)

__all__ = [
    "NORMALIZED_STATUS_FIELD",
    "AmountParsePolicy",
    "Batch",
    "ChannelConfig",
    "ColumnMapping",
    "DateRange",
    "FieldType",
    "FileConfig",
    "FormatRule",
    "MatchConfig",
    "Partition",
    "ReconciliationResult",
    "ReconciliationStats",
    "ReconciliationTask",
    "Row",
    "RuleOperation",
    "Scalar",
    "SourceConfig",
    "StatusMapping",
    "UploadRecord",
    "as_text",
    "field_for",
    "ordered_columns",
    "parse_number",
    "union_batches",
    "union_rows",
]
