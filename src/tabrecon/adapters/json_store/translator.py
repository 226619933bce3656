"""Translate JSON store payloads to and from domain objects."""

from __future__ import annotations

from tabrecon.domain.model import (
    ChannelConfig,
    ColumnMapping,
    DateRange,
    FormatRule,
    MatchConfig,
    ReconciliationResult,
    ReconciliationStats,
    ReconciliationTask,
    SourceConfig,
    StatusMapping,
)

from .schema import (
    ChannelConfigPayload,
    ColumnMappingPayload,
    DateRangePayload,
    FormatRulePayload,
    MatchConfigPayload,
    ResultPayload,
    SourceConfigPayload,
    StatsPayload,
    StatusMappingPayload,
    TaskPayload,
)


def _mapping_from_payload(payload: ColumnMappingPayload) -> ColumnMapping:
    return ColumnMapping(
        id=payload.id,
        source_column=payload.source_column,
        field_type=payload.field_type,
        field_name=payload.field_name,
        save_original=payload.save_original,
        format_rules=tuple(
            FormatRule(operation=rule.operation, value=rule.value, position=rule.position)
            for rule in payload.format_rules
        ),
    )


def _mapping_to_payload(mapping: ColumnMapping) -> ColumnMappingPayload:
    return ColumnMappingPayload(
        id=mapping.id,
        source_column=mapping.source_column,
        field_type=mapping.field_type,
        field_name=mapping.field_name,
        save_original=mapping.save_original,
        format_rules=[
            FormatRulePayload(position=rule.position, operation=rule.operation, value=rule.value)
            for rule in mapping.format_rules
        ],
    )


def _source_from_payload(payload: SourceConfigPayload) -> SourceConfig:
    return SourceConfig(
        header=payload.header,
        timezone=payload.timezone,
        remove_duplicate=payload.remove_duplicate,
        mappings=tuple(_mapping_from_payload(mapping) for mapping in payload.mappings),
    )


def _source_to_payload(source: SourceConfig) -> SourceConfigPayload:
    return SourceConfigPayload(
        header=source.header,
        timezone=source.timezone,
        remove_duplicate=source.remove_duplicate,
        mappings=[_mapping_to_payload(mapping) for mapping in source.mappings],
    )


def _statuses_from_payload(payloads: list[StatusMappingPayload]) -> tuple[StatusMapping, ...]:
    return tuple(
        StatusMapping(source_statuses=tuple(item.source_status), target_status=item.target_status)
        for item in payloads
    )


def _statuses_to_payload(mappings: tuple[StatusMapping, ...]) -> list[StatusMappingPayload]:
    return [
        StatusMappingPayload(
            source_status=list(mapping.source_statuses),
            target_status=mapping.target_status,
        )
        for mapping in mappings
    ]


def config_from_payload(payload: ChannelConfigPayload) -> ChannelConfig:
    match = payload.match_config
    return ChannelConfig(
        id=payload.id,
        name=payload.name,
        source_a_name=payload.source_a_name,
        source_b_name=payload.source_b_name,
        config_type=payload.config_type,
        created_at=payload.created_at,
        updated_at=payload.updated_at,
        source_a_config=_source_from_payload(payload.source_a_config),
        source_b_config=_source_from_payload(payload.source_b_config),
        match_config=MatchConfig(
            source_a_id_field=match.source_a_id_field,
            source_b_id_field=match.source_b_id_field,
            source_a_status_mapping=_statuses_from_payload(match.source_a_status_mapping),
            source_b_status_mapping=_statuses_from_payload(match.source_b_status_mapping),
            use_historical_source_a=match.use_historical_source_a,
            use_historical_source_b=match.use_historical_source_b,
            history_days=match.history_days,
        ),
    )


def config_to_payload(config: ChannelConfig) -> ChannelConfigPayload:
    match = config.match_config
    return ChannelConfigPayload(
        id=config.id,
        name=config.name,
        source_a_name=config.source_a_name,
        source_b_name=config.source_b_name,
        config_type=config.config_type,
        created_at=config.created_at,
        updated_at=config.updated_at,
        source_a_config=_source_to_payload(config.source_a_config),
        source_b_config=_source_to_payload(config.source_b_config),
        match_config=MatchConfigPayload(
            source_a_id_field=match.source_a_id_field,
            source_b_id_field=match.source_b_id_field,
            source_a_status_mapping=_statuses_to_payload(match.source_a_status_mapping),
            source_b_status_mapping=_statuses_to_payload(match.source_b_status_mapping),
            use_historical_source_a=match.use_historical_source_a,
            use_historical_source_b=match.use_historical_source_b,
            history_days=match.history_days,
        ),
    )


def task_from_payload(payload: TaskPayload) -> ReconciliationTask:
    stats = payload.stats
    return ReconciliationTask(
        task_id=payload.task_id,
        task_name=payload.task_name,
        config_id=payload.config_id,
        config_name=payload.config_name,
        source_a_name=payload.source_a_name,
        source_b_name=payload.source_b_name,
        task_type=payload.task_type,
        date_range=DateRange(start=payload.date_range.start, end=payload.date_range.end),
        created_at=payload.created_at,
        source_a_file_name=payload.source_a_file_name,
        source_b_file_name=payload.source_b_file_name,
        stats=ReconciliationStats(
            matched_count=stats.matched_count,
            only_in_source_a_count=stats.only_in_source_a_count,
            only_in_source_b_count=stats.only_in_source_b_count,
            amount_mismatch_count=stats.amount_mismatch_count,
            status_mismatch_count=stats.status_mismatch_count,
            total_source_a=stats.total_source_a,
            total_source_b=stats.total_source_b,
        ),
        used_historical_source_a=payload.used_historical_source_a,
        used_historical_source_b=payload.used_historical_source_b,
    )


def task_to_payload(task: ReconciliationTask) -> TaskPayload:
    stats = task.stats
    return TaskPayload(
        task_id=task.task_id,
        task_name=task.task_name,
        config_id=task.config_id,
        config_name=task.config_name,
        source_a_name=task.source_a_name,
        source_b_name=task.source_b_name,
        task_type=task.task_type,
        date_range=DateRangePayload(start=task.date_range.start, end=task.date_range.end),
        created_at=task.created_at,
        source_a_file_name=task.source_a_file_name,
        source_b_file_name=task.source_b_file_name,
        stats=StatsPayload(
            matched_count=stats.matched_count,
            only_in_source_a_count=stats.only_in_source_a_count,
            only_in_source_b_count=stats.only_in_source_b_count,
            amount_mismatch_count=stats.amount_mismatch_count,
            status_mismatch_count=stats.status_mismatch_count,
            total_source_a=stats.total_source_a,
            total_source_b=stats.total_source_b,
        ),
        used_historical_source_a=task.used_historical_source_a,
        used_historical_source_b=task.used_historical_source_b,
    )


def result_from_payload(payload: ResultPayload) -> ReconciliationResult:
    return ReconciliationResult(
        matched=[dict(row) for row in payload.matched],
        only_in_a=[dict(row) for row in payload.only_in_a],
        only_in_b=[dict(row) for row in payload.only_in_b],
        amount_mismatch=[dict(row) for row in payload.amount_mismatch],
        status_mismatch=[dict(row) for row in payload.status_mismatch],
        amount_columns=payload.amount_columns,
    )


def result_to_payload(result: ReconciliationResult) -> ResultPayload:
    return ResultPayload(
        matched=result.matched,
        only_in_a=result.only_in_a,
        only_in_b=result.only_in_b,
        amount_mismatch=result.amount_mismatch,
        status_mismatch=result.status_mismatch,
        amount_columns=result.amount_columns,
    )
