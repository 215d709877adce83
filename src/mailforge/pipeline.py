"""
Public entry points: generate, validate, auto-fix and preview.

Failures of the two engine kinds (InvalidModel, MalformedDocument) come back
as an ``error`` value on the result instead of crossing this boundary as
exceptions. Each call works only on its own arguments.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Mapping

from .autofix import FixSummary
from .autofix import auto_fix as run_auto_fix
from .compat.preview import wrap_for_preview
from .config import EngineConfig
from .design.models import DesignBlockModel, SynthesisOptions
from .errors import EngineError, EngineFailure
from .synthesis import synthesize
from .validation import ComplianceMetrics
from .validation import validate as run_validation

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class GenerateResult:
    html: str | None = None
    metrics: ComplianceMetrics | None = None
    error: EngineFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> Dict:
        if self.error:
            return {"success": False, "error": self.error.as_dict()}
        return {"success": True, "html": self.html, "metrics": self.metrics.as_dict()}


@dataclass(slots=True)
class ValidateResult:
    metrics: ComplianceMetrics | None = None
    error: EngineFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> Dict:
        if self.error:
            return {"success": False, "error": self.error.as_dict()}
        return {"success": True, "metrics": self.metrics.as_dict()}


@dataclass(slots=True)
class AutoFixResult:
    html: str | None = None
    metrics: ComplianceMetrics | None = None
    summary: FixSummary | None = None
    error: EngineFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def as_dict(self) -> Dict:
        if self.error:
            return {"success": False, "error": self.error.as_dict()}
        return {
            "success": True,
            "html": self.html,
            "metrics": self.metrics.as_dict(),
            "summary": self.summary.as_dict(),
        }


class EmailEngine:
    """Synthesis, validation and repair bound to one configuration."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self.policy = self.config.policy()

    def generate(
        self,
        model: DesignBlockModel | Mapping | None = None,
        options: SynthesisOptions | Mapping | None = None,
    ) -> GenerateResult:
        try:
            html = synthesize(model, options, self.config)
            metrics = run_validation(html, self.policy, self.config.content_width)
        except EngineError as exc:
            LOGGER.warning("Generation failed: %s", exc)
            return GenerateResult(error=EngineFailure.from_exception(exc))
        return GenerateResult(html=html, metrics=metrics)

    def validate(self, html: str) -> ValidateResult:
        try:
            metrics = run_validation(html, self.policy, self.config.content_width)
        except EngineError as exc:
            LOGGER.warning("Validation failed: %s", exc)
            return ValidateResult(error=EngineFailure.from_exception(exc))
        return ValidateResult(metrics=metrics)

    def auto_fix(self, html: str) -> AutoFixResult:
        try:
            result = run_auto_fix(html, self.policy, self.config.content_width)
        except EngineError as exc:
            LOGGER.warning("Auto-fix failed: %s", exc)
            return AutoFixResult(error=EngineFailure.from_exception(exc))
        return AutoFixResult(html=result.html, metrics=result.metrics, summary=result.summary)

    def preview(self, html: str, mode: str) -> str:
        return wrap_for_preview(html, mode)


def generate(
    model: DesignBlockModel | Mapping | None = None,
    options: SynthesisOptions | Mapping | None = None,
    config: EngineConfig | None = None,
) -> GenerateResult:
    return EmailEngine(config).generate(model, options)


def validate(html: str, config: EngineConfig | None = None) -> ValidateResult:
    return EmailEngine(config).validate(html)


def auto_fix(html: str, config: EngineConfig | None = None) -> AutoFixResult:
    return EmailEngine(config).auto_fix(html)


def preview(html: str, mode: str) -> str:
    """Wrap html for one of the desktop/mobile, light/dark preview modes."""
    return wrap_for_preview(html, mode)
