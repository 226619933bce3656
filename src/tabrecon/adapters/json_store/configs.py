"""JSON file store for channel configurations."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import TypeAdapter, ValidationError

from tabrecon.config.errors import ConfigurationError
from tabrecon.domain.errors import ConfigNotFoundError

from .schema import ChannelConfigPayload
from .translator import config_from_payload, config_to_payload

if TYPE_CHECKING:
    from collections.abc import Callable

    from tabrecon.domain.model import ChannelConfig

log = logging.getLogger(__name__)

CONFIGS_FILENAME = "configs.json"

_CONFIG_LIST = TypeAdapter(list[ChannelConfigPayload])


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JsonConfigRepository:
    """Keep every channel configuration in one ``configs.json`` document."""

    def __init__(self, directory: Path, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self.directory = directory
        self.path = directory / CONFIGS_FILENAME
        self._clock = clock

    def load_all(self) -> list[ChannelConfig]:
        if not self.path.exists():
            return []
        try:
            payloads = _CONFIG_LIST.validate_json(self.path.read_bytes())
        except ValidationError as exc:
            raise ConfigurationError(f"Malformed configuration file {self.path}: {exc}") from exc
        return [config_from_payload(payload) for payload in payloads]

    def get(self, config_id: str) -> ChannelConfig:
        for config in self.load_all():
            if config.id == config_id:
                return config
        raise ConfigNotFoundError(f"No configuration with id {config_id}")

    def save(self, config: ChannelConfig) -> ChannelConfig:
        """Insert or replace ``config`` by id."""

        configs = self.load_all()
        for index, existing in enumerate(configs):
            if existing.id == config.id:
                configs[index] = config
                break
        else:
            configs.append(config)
        self._write(configs)
        log.info("Saved configuration %s (%s)", config.id, config.name)
        return config

    def delete(self, config_id: str) -> bool:
        configs = self.load_all()
        remaining = [config for config in configs if config.id != config_id]
        if len(remaining) == len(configs):
            return False
        self._write(remaining)
        log.info("Deleted configuration %s", config_id)
        return True

    def import_file(self, path: Path) -> ChannelConfig:
        """Read a single exported configuration and store it under a fresh id."""

        try:
            payload = ChannelConfigPayload.model_validate_json(path.read_bytes())
        except ValidationError as exc:
            raise ConfigurationError(
                f"Cannot import {path}: {exc}. Expected camelCase keys including "
                "sourceAName, sourceBName, sourceAConfig, sourceBConfig and a matchConfig "
                "with sourceAIdField and sourceBIdField."
            ) from exc
        now = self._clock()
        stamp = now.isoformat()
        config = replace(
            config_from_payload(payload),
            id=f"config-{int(now.timestamp() * 1000)}",
            created_at=stamp,
            updated_at=stamp,
        )
        return self.save(config)

    def export_file(self, config_id: str, path: Path) -> Path:
        payload = config_to_payload(self.get(config_id))
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
        log.info("Exported configuration %s to %s", config_id, path)
        return path

    def _write(self, configs: list[ChannelConfig]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        payloads = [config_to_payload(config) for config in configs]
        self.path.write_bytes(_CONFIG_LIST.dump_json(payloads, by_alias=True, indent=2))
