"""Configuration error definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class InvalidDateError(ConfigurationError):
    """Raised when a business date is not a ``YYYY-MM-DD`` calendar date."""


class UnknownFieldError(ConfigurationError):
    """Raised when a configured column is missing from a batch."""

    def __init__(
        self,
        field: str,
        *,
        source: str,
        available: Iterable[str],
        role: str = "field",
    ) -> None:
        self.field = field
        self.source = source
        self.role = role
        self.available = tuple(available)
        listing = ", ".join(self.available) if self.available else "<none>"
        super().__init__(
            f"Configured {role} '{field}' does not exist in {source}. Available columns: {listing}"
        )
