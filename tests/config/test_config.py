from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tabrecon.config import (
    DEFAULT_HISTORY_DAYS,
    ConfigurationError,
    get_database_config,
    get_reconcile_config,
    get_storage_config,
)
from tabrecon.domain.model import AmountParsePolicy

if TYPE_CHECKING:
    from pathlib import Path


def test_reconcile_config_defaults() -> None:
    config = get_reconcile_config()

    assert config.history_days == DEFAULT_HISTORY_DAYS
    assert config.amount_policy is AmountParsePolicy.ZERO


def test_reconcile_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TABRECON_HISTORY_DAYS", "2")
    monkeypatch.setenv("TABRECON_AMOUNT_POLICY", "Strict")

    config = get_reconcile_config()

    assert config.history_days == 2
    assert config.amount_policy is AmountParsePolicy.STRICT


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("TABRECON_HISTORY_DAYS", "five"),
        ("TABRECON_HISTORY_DAYS", "-1"),
        ("TABRECON_AMOUNT_POLICY", "lenient"),
    ],
)
def test_reconcile_config_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError, match=name):
        get_reconcile_config()


def test_storage_config_uses_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TABRECON_DATA_DIR", str(tmp_path / "custom"))
    monkeypatch.delenv("DATABASE_URI", raising=False)

    storage = get_storage_config()

    assert storage.configs_dir() == (tmp_path / "custom" / "configs").resolve()
    assert storage.tasks_dir().is_dir()
    assert get_database_config().uri.endswith("custom/batches.db")


def test_database_uri_environment_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    assert get_database_config().uri == "sqlite+pysqlite:///:memory:"
