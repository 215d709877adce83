"""
mailforge: email HTML synthesis, validation and auto-fix.
"""

from .config import EngineConfig, ScoringPolicy
from .errors import EngineFailure, InvalidModelError, MalformedDocumentError, UnresolvedIssue
from .pipeline import AutoFixResult, EmailEngine, GenerateResult, ValidateResult, auto_fix, generate, preview, validate

__all__ = [
    "AutoFixResult",
    "EmailEngine",
    "EngineConfig",
    "EngineFailure",
    "GenerateResult",
    "InvalidModelError",
    "MalformedDocumentError",
    "ScoringPolicy",
    "UnresolvedIssue",
    "ValidateResult",
    "auto_fix",
    "generate",
    "preview",
    "validate",
]

__version__ = "0.1.0"
