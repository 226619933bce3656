"""Reconciliation defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass

from tabrecon.domain.model.settings import AmountParsePolicy

from .env import optional_env_int
from .errors import ConfigurationError

DEFAULT_HISTORY_DAYS = 5


@dataclass(frozen=True, slots=True)
class ReconcileConfig:
    history_days: int = DEFAULT_HISTORY_DAYS
    amount_policy: AmountParsePolicy = AmountParsePolicy.ZERO


def get_reconcile_config() -> ReconcileConfig:
    history_days = optional_env_int("TABRECON_HISTORY_DAYS", DEFAULT_HISTORY_DAYS)
    if history_days < 0:
        raise ConfigurationError("TABRECON_HISTORY_DAYS must be non-negative")
    raw_policy = os.getenv("TABRECON_AMOUNT_POLICY", AmountParsePolicy.ZERO.value).strip().lower()
    try:
        policy = AmountParsePolicy(raw_policy)
    except ValueError as exc:
        choices = ", ".join(item.value for item in AmountParsePolicy)
        raise ConfigurationError(
            f"TABRECON_AMOUNT_POLICY must be one of: {choices}; got {raw_policy!r}"
        ) from exc
    return ReconcileConfig(history_days=history_days, amount_policy=policy)
