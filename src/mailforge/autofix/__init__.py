"""Deterministic, idempotent repairs for validation findings."""

from .fixer import FixResult, FixSummary, auto_fix
from .rules import RULES

__all__ = ["FixResult", "FixSummary", "RULES", "auto_fix"]
