"""Error kinds raised inside the engine and the failure value returned at its boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


class EngineError(Exception):
    """Base class for failures that stop a core operation."""

    kind = "EngineError"


class InvalidModelError(EngineError):
    """The design description is missing required fields or carries invalid ones."""

    kind = "InvalidModel"

    def __init__(self, missing_fields: List[str], message: str | None = None) -> None:
        self.missing_fields = list(missing_fields)
        if message is None:
            message = "Invalid design model; missing or invalid fields: " + ", ".join(self.missing_fields)
        super().__init__(message)


class MalformedDocumentError(EngineError):
    """The HTML is too broken to analyze (binary data, no closing html tag)."""

    kind = "MalformedDocument"


@dataclass(slots=True)
class EngineFailure:
    """Typed error value handed back to callers instead of a raised exception."""

    kind: str
    message: str
    missing_fields: List[str] = field(default_factory=list)

    @classmethod
    def from_exception(cls, exc: EngineError) -> "EngineFailure":
        return cls(
            kind=exc.kind,
            message=str(exc),
            missing_fields=list(getattr(exc, "missing_fields", [])),
        )

    def as_dict(self) -> Dict:
        payload: Dict = {"kind": self.kind, "message": self.message}
        if self.missing_fields:
            payload["missingFields"] = self.missing_fields
        return payload


@dataclass(slots=True)
class UnresolvedIssue:
    """Repair that was attempted but could not be completed deterministically."""

    category: str
    message: str
    line: int | None = None
    snippet: str | None = None

    def as_dict(self) -> Dict:
        return {
            "category": self.category,
            "message": self.message,
            "line": self.line,
            "snippet": self.snippet,
        }
