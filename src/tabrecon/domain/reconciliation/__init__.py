"""Matching of two cleaned batches into result partitions."""

from __future__ import annotations

from .matcher import joined_column_names, reconcile
from .validation import validate_match_fields

__all__ = ["joined_column_names", "reconcile", "validate_match_fields"]
