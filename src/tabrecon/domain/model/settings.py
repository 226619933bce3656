"""User-supplied configuration: column mappings, status aliases and match settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date


class FieldType(StrEnum):
    """Semantic role of a canonical field derived from a raw column."""

    TIME = "Time"
    IDENTIFIER = "Identifier"
    STATUS = "Status"
    AMOUNT = "Amount"
    PLAIN_TEXT = "PlainText"


class RuleOperation(StrEnum):
    """Known format rule operations; anything else is carried as a raw string."""

    DEL_PRE = "DEL_PRE"
    DEL_AFTER = "DEL_AFTER"
    DEL_CHAR = "DEL_CHAR"
    REPLACE_TWO_CHAR = "REPLACE_TWO_CHAR"
    BRA_VALUE = "BRA_VALUE"
    DIVIDE_NUMBER = "DIVIDE_NUMBER"
    ABS_VALUE = "ABS_VALUE"
    ADD_CHAR_PRE = "ADD_CHAR_PRE"
    ADD_CHAR_AFTER = "ADD_CHAR_AFTER"
    XENDIT_TIME = "XENDIT_TIME"


class AmountParsePolicy(StrEnum):
    """How the matcher treats amount cells that do not parse as numbers."""

    ZERO = "zero"
    STRICT = "strict"


@dataclass(frozen=True, slots=True)
class FormatRule:
    """One step of a column's transformation chain.

    ``operation`` is kept as the raw tag so unknown operations survive a config
    round-trip; the rule pipeline treats them as no-ops.
    """

    operation: str
    value: str = ""
    position: str = "pre"


@dataclass(frozen=True, slots=True)
class ColumnMapping:
    source_column: str
    field_type: FieldType
    field_name: str
    format_rules: tuple[FormatRule, ...] = ()
    save_original: bool = False
    id: str = ""

    @property
    def original_field_name(self) -> str:
        return f"{self.field_name}_original"


@dataclass(frozen=True, slots=True)
class StatusMapping:
    """Raw status aliases that collapse to one canonical status."""

    source_statuses: tuple[str, ...]
    target_status: str


@dataclass(frozen=True, slots=True)
class MatchConfig:
    source_a_id_field: str
    source_b_id_field: str
    source_a_status_mapping: tuple[StatusMapping, ...] = ()
    source_b_status_mapping: tuple[StatusMapping, ...] = ()
    use_historical_source_a: bool = False
    use_historical_source_b: bool = False
    history_days: int | None = None


@dataclass(frozen=True, slots=True)
class SourceConfig:
    """Per-source cleaning settings stored with a channel configuration."""

    header: int = 1
    timezone: str = ""
    remove_duplicate: bool = False
    mappings: tuple[ColumnMapping, ...] = ()

    def field_for(self, field_type: FieldType) -> str | None:
        return field_for(self.mappings, field_type)


def field_for(mappings: Iterable[ColumnMapping], field_type: FieldType) -> str | None:
    """Return the target field name of the first mapping with ``field_type``."""

    for mapping in mappings:
        if mapping.field_type is field_type:
            return mapping.field_name
    return None


@dataclass(frozen=True, slots=True)
class ChannelConfig:
    """A saved reconciliation setup pairing two named sources."""

    id: str
    name: str
    source_a_name: str
    source_b_name: str
    match_config: MatchConfig
    source_a_config: SourceConfig = field(default_factory=SourceConfig)
    source_b_config: SourceConfig = field(default_factory=SourceConfig)
    config_type: str = ""
    created_at: str = ""
    updated_at: str = ""


@dataclass(frozen=True, slots=True)
class DateRange:
    start: date
    end: date


@dataclass(frozen=True, slots=True)
class FileConfig:
    """One uploaded file for a single reconciliation run."""

    source_name: str
    file_path: str
    file_name: str
    date_range: DateRange
    header: int = 1
    remove_duplicate: bool = False
    timezone: str = ""
    file_type: str = ""
