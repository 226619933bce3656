"""Pydantic models describing the JSON documents kept on disk.

Documents use camelCase keys. Field types written by older exports
(``OrderTime``, ``OrderStatus`` and friends) are accepted and mapped onto
``FieldType``.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tabrecon.domain.model import FieldType

CellValue = str | float | bool | None
RowPayload = dict[str, CellValue]

LEGACY_FIELD_TYPES: dict[str, FieldType] = {
    "OrderTime": FieldType.TIME,
    "OrderStatus": FieldType.STATUS,
    "OrderAmount": FieldType.AMOUNT,
    "OrderString": FieldType.PLAIN_TEXT,
    "OrderId": FieldType.IDENTIFIER,
}


class JsonStoreModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


class FormatRulePayload(JsonStoreModel):
    position: str = Field(default="pre", alias="type")
    operation: str
    value: str = ""


class ColumnMappingPayload(JsonStoreModel):
    id: str = ""
    source_column: str
    field_type: FieldType
    field_name: str
    save_original: bool = False
    format_rules: list[FormatRulePayload] = Field(default_factory=list[FormatRulePayload])

    @field_validator("field_type", mode="before")
    @classmethod
    def _accept_legacy_type(cls, value: object) -> object:
        if isinstance(value, str):
            return LEGACY_FIELD_TYPES.get(value, value)
        return value


class SourceConfigPayload(JsonStoreModel):
    header: int = Field(default=1, ge=0)
    timezone: str = ""
    remove_duplicate: bool = False
    mappings: list[ColumnMappingPayload] = Field(default_factory=list[ColumnMappingPayload])


class StatusMappingPayload(JsonStoreModel):
    source_status: list[str]
    target_status: str


class MatchConfigPayload(JsonStoreModel):
    source_a_id_field: str
    source_b_id_field: str
    source_a_status_mapping: list[StatusMappingPayload] = Field(
        default_factory=list[StatusMappingPayload]
    )
    source_b_status_mapping: list[StatusMappingPayload] = Field(
        default_factory=list[StatusMappingPayload]
    )
    use_historical_source_a: bool = False
    use_historical_source_b: bool = False
    history_days: int | None = Field(default=None, ge=0)


class ChannelConfigPayload(JsonStoreModel):
    id: str = ""
    name: str
    source_a_name: str
    source_b_name: str
    config_type: str = Field(default="", alias="type")
    created_at: str = ""
    updated_at: str = ""
    source_a_config: SourceConfigPayload = Field(default_factory=SourceConfigPayload)
    source_b_config: SourceConfigPayload = Field(default_factory=SourceConfigPayload)
    match_config: MatchConfigPayload


class DateRangePayload(JsonStoreModel):
    start: date
    end: date


class StatsPayload(JsonStoreModel):
    matched_count: int = 0
    only_in_source_a_count: int = 0
    only_in_source_b_count: int = 0
    amount_mismatch_count: int = Field(
        default=0,
        validation_alias=AliasChoices("amountMismatchCount", "diffAmountCount"),
        serialization_alias="amountMismatchCount",
    )
    status_mismatch_count: int = 0
    total_source_a: int = 0
    total_source_b: int = 0


class TaskPayload(JsonStoreModel):
    task_id: str
    task_name: str
    config_id: str
    config_name: str
    source_a_name: str
    source_b_name: str
    task_type: str = ""
    date_range: DateRangePayload
    created_at: datetime
    source_a_file_name: str = ""
    source_b_file_name: str = ""
    stats: StatsPayload
    used_historical_source_a: bool = False
    used_historical_source_b: bool = False


class ResultPayload(JsonStoreModel):
    matched: list[RowPayload] = Field(default_factory=list[RowPayload])
    only_in_a: list[RowPayload] = Field(default_factory=list[RowPayload])
    only_in_b: list[RowPayload] = Field(default_factory=list[RowPayload])
    amount_mismatch: list[RowPayload] = Field(
        default_factory=list[RowPayload],
        validation_alias=AliasChoices("amountMismatch", "diffAmount"),
        serialization_alias="amountMismatch",
    )
    status_mismatch: list[RowPayload] = Field(default_factory=list[RowPayload])
    amount_columns: tuple[str, str] | None = None
