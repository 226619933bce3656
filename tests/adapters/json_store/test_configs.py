from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from tabrecon.adapters.json_store import CONFIGS_FILENAME, JsonConfigRepository
from tabrecon.config import ConfigurationError
from tabrecon.domain.errors import ConfigNotFoundError
from tabrecon.domain.model import FieldType, RuleOperation
from tests.helpers.configs import make_channel_config

if TYPE_CHECKING:
    from pathlib import Path

NOW = datetime(2024, 3, 10, 12, tzinfo=UTC)

LEGACY_EXPORT = {
    "id": "config-old",
    "name": "Legacy channel",
    "type": "payments",
    "sourceAName": "shop",
    "sourceBName": "gateway",
    "sourceAConfig": {
        "header": 2,
        "removeDuplicate": True,
        "mappings": [
            {
                "id": "m1",
                "sourceColumn": "Order No",
                "fieldType": "OrderId",
                "fieldName": "order_id",
                "formatRules": [{"type": "pre", "operation": "DEL_PRE", "value": "3"}],
            },
            {"sourceColumn": "State", "fieldType": "OrderStatus", "fieldName": "status"},
        ],
    },
    "matchConfig": {
        "sourceAIdField": "order_id",
        "sourceBIdField": "order_id",
        "sourceAStatusMapping": [{"sourceStatus": ["paid"], "targetStatus": "PAID"}],
        "useHistoricalSourceB": True,
        "somethingNew": 1,
    },
}


def test_save_get_and_delete_round_trip(tmp_path: Path) -> None:
    repository = JsonConfigRepository(tmp_path)
    config = make_channel_config(use_history_b=True, history_days=3)

    repository.save(config)

    assert repository.get(config.id) == config
    assert repository.delete(config.id)
    assert not repository.delete(config.id)
    with pytest.raises(ConfigNotFoundError):
        repository.get(config.id)


def test_documents_use_camel_case_keys(tmp_path: Path) -> None:
    repository = JsonConfigRepository(tmp_path)
    repository.save(make_channel_config())

    document = json.loads((tmp_path / CONFIGS_FILENAME).read_text(encoding="utf-8"))

    assert document[0]["sourceAName"] == "shop"
    assert document[0]["matchConfig"]["sourceBIdField"] == "order_id"
    assert document[0]["sourceBConfig"]["mappings"][0]["formatRules"][0]["type"] == "pre"


def test_import_accepts_legacy_types_and_assigns_fresh_id(tmp_path: Path) -> None:
    source = tmp_path / "export.json"
    source.write_text(json.dumps(LEGACY_EXPORT), encoding="utf-8")
    repository = JsonConfigRepository(tmp_path / "store", clock=lambda: NOW)

    imported = repository.import_file(source)

    assert imported.id == f"config-{int(NOW.timestamp() * 1000)}"
    assert imported.created_at == NOW.isoformat()
    assert imported.config_type == "payments"
    mappings = imported.source_a_config.mappings
    assert [mapping.field_type for mapping in mappings] == [FieldType.IDENTIFIER, FieldType.STATUS]
    assert mappings[0].format_rules[0].operation == RuleOperation.DEL_PRE
    assert imported.source_a_config.header == 2
    assert imported.match_config.use_historical_source_b
    assert repository.load_all() == [imported]


def test_import_of_invalid_document_names_expected_keys(tmp_path: Path) -> None:
    source = tmp_path / "broken.json"
    source.write_text(json.dumps({"name": "missing everything"}), encoding="utf-8")

    with pytest.raises(ConfigurationError, match="camelCase"):
        JsonConfigRepository(tmp_path / "store").import_file(source)


def test_export_writes_single_document(tmp_path: Path) -> None:
    repository = JsonConfigRepository(tmp_path)
    config = make_channel_config()
    repository.save(config)

    target = repository.export_file(config.id, tmp_path / "out" / "config.json")

    assert json.loads(target.read_text(encoding="utf-8"))["name"] == config.name
