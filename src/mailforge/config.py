"""Configuration helpers: runtime settings and the scoring policy table."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel, Field, ValidationError

LOGGER = logging.getLogger(__name__)


def _env_or_default(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def _env_path(name: str) -> Path | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return Path(value.strip())


DEFAULT_SPAM_TRIGGERS: List[str] = [
    "FREE",
    "WINNER",
    "CASH",
    "BONUS",
    "CLICK HERE",
    "100% OFF",
    "ACT NOW",
    "LIMITED TIME",
    "URGENT",
    "GUARANTEED",
    "NO COST",
    "INCREASE SALES",
    "EARN MONEY",
]


class QualityWeights(BaseModel):
    """Share of each sub-score in the overall quality score."""

    accessibility: float = Field(default=0.4, ge=0)
    compatibility: float = Field(default=0.4, ge=0)
    spam: float = Field(default=0.2, ge=0)


class SpamPolicy(BaseModel):
    triggers: List[str] = Field(default_factory=lambda: list(DEFAULT_SPAM_TRIGGERS))
    trigger_weight: int = 8
    exclamation_threshold: int = 3
    exclamation_weight: int = 2
    caps_run_min_words: int = 3
    caps_run_weight: int = 5
    image_heavy_min_images: int = 3
    image_heavy_max_text: int = 400
    image_heavy_weight: int = 25
    placeholder_link_weight: int = 5
    low_band: int = 15
    medium_band: int = 40


class ScoringPolicy(BaseModel):
    """
    Policy table behind every score the validator reports.

    The defaults mirror the weights the dashboard has always shipped with; a
    JSON file with the same shape can override any subset of them.
    """

    weights: QualityWeights = Field(default_factory=QualityWeights)
    severity_penalties: Dict[str, int] = Field(
        default_factory=lambda: {"critical": 15, "warning": 10, "info": 4}
    )
    level_bands: Dict[str, int] = Field(default_factory=lambda: {"AAA": 98, "AA": 90, "A": 80})
    grade_bands: Dict[str, int] = Field(default_factory=lambda: {"A": 90, "B": 80, "C": 70})
    contrast_normal: float = 4.5
    contrast_large: float = 3.0
    large_text_px: int = 18
    min_font_px: int = 13
    gmail_clip_bytes: int = 102400
    max_recommended_bytes: int = 102400
    spam: SpamPolicy = Field(default_factory=SpamPolicy)

    @classmethod
    def from_file(cls, path: Path) -> "ScoringPolicy":
        with path.open("r", encoding="utf-8") as fh:
            return cls.model_validate_json(fh.read())

    def penalty(self, severity: str) -> int:
        return self.severity_penalties.get(severity, 0)


DEFAULT_POLICY = ScoringPolicy()


@dataclass(slots=True)
class EngineConfig:
    """Runtime configuration for synthesis and validation."""

    content_width: int = field(default_factory=lambda: int(_env_or_default("MAILFORGE_CONTENT_WIDTH", "600")))
    background_color: str = field(default_factory=lambda: _env_or_default("MAILFORGE_BACKGROUND_COLOR", "#f4f4f4"))
    body_color: str = field(default_factory=lambda: _env_or_default("MAILFORGE_BODY_COLOR", "#ffffff"))
    title: str = field(default_factory=lambda: _env_or_default("MAILFORGE_TITLE", "Email Template"))
    policy_path: Path | None = field(default_factory=lambda: _env_path("MAILFORGE_POLICY_PATH"))
    log_level: str = field(default_factory=lambda: _env_or_default("MAILFORGE_LOG_LEVEL", "INFO"))

    def policy(self) -> ScoringPolicy:
        """Load the scoring policy, falling back to the built-in table."""
        if self.policy_path is None:
            return DEFAULT_POLICY
        try:
            return ScoringPolicy.from_file(self.policy_path)
        except (OSError, ValidationError) as exc:
            LOGGER.warning("Failed to load scoring policy %s (%s); using defaults.", self.policy_path, exc)
            return DEFAULT_POLICY
