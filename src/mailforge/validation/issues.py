"""Validation findings and the metrics bundle returned to callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

CRITICAL = "critical"
WARNING = "warning"
INFO = "info"

CLIENTS = ("outlook", "outlookCom", "gmail", "appleMail", "yahoo", "samsung")

# Repair rules, named after the FixSummary counter each one feeds.
TAGS_CLOSED = "tagsClosed"
STRUCTURAL_FIXES = "structuralFixes"
CSS_NORMALIZATIONS = "cssNormalizations"
ACCESSIBILITY_FIXES = "accessibilityFixes"
OUTLOOK_HARDENING = "outlookHardening"
FIX_RULES = (TAGS_CLOSED, STRUCTURAL_FIXES, CSS_NORMALIZATIONS, ACCESSIBILITY_FIXES, OUTLOOK_HARDENING)


@dataclass(slots=True)
class ValidationIssue:
    severity: str
    category: str
    message: str
    wcag_criterion: Optional[str] = None
    element: Optional[str] = None
    line: Optional[int] = None
    auto_fixable: bool = False
    # Arena index of the offending node and the repair that addresses it.
    node_id: Optional[int] = None
    fix_rule: Optional[str] = None

    def as_dict(self) -> Dict:
        payload: Dict = {
            "severity": self.severity,
            "category": self.category,
            "message": self.message,
            "autoFixable": self.auto_fixable,
        }
        if self.wcag_criterion:
            payload["wcagCriterion"] = self.wcag_criterion
        if self.element:
            payload["element"] = self.element
        if self.line is not None:
            payload["line"] = self.line
        return payload


@dataclass(slots=True)
class AccessibilityReport:
    score: int
    level: str
    issues: List[ValidationIssue] = field(default_factory=list)

    def as_dict(self) -> Dict:
        return {"score": self.score, "level": self.level, "issues": [issue.as_dict() for issue in self.issues]}


@dataclass(slots=True)
class SpamReport:
    score: int
    level: str
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def protection(self) -> int:
        return 100 - self.score

    def as_dict(self) -> Dict:
        return {
            "score": self.score,
            "level": self.level,
            "protection": self.protection,
            "issues": [issue.as_dict() for issue in self.issues],
        }


@dataclass(slots=True)
class CompatibilityReport:
    clients: Dict[str, bool]
    responsive: bool
    dark_mode: bool
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def pass_rate(self) -> float:
        return sum(self.clients.values()) / len(self.clients) if self.clients else 0.0

    def as_dict(self) -> Dict:
        return dict(self.clients)


@dataclass(slots=True)
class ComplianceMetrics:
    quality_score: int
    grade: str
    accessibility: AccessibilityReport
    spam: SpamReport
    compatibility: CompatibilityReport
    issues: List[ValidationIssue]
    warnings: List[ValidationIssue]
    file_size: int

    def all_issues(self) -> List[ValidationIssue]:
        return [*self.accessibility.issues, *self.spam.issues, *self.issues, *self.warnings]

    def structural_issues(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.category == "structure"]

    def as_dict(self) -> Dict:
        return {
            "qualityScore": self.quality_score,
            "grade": self.grade,
            "accessibility": self.accessibility.as_dict(),
            "spamRisk": self.spam.as_dict(),
            "compatibility": self.compatibility.as_dict(),
            "features": {
                "responsive": self.compatibility.responsive,
                "darkMode": self.compatibility.dark_mode,
                "passRate": round(self.compatibility.pass_rate, 4),
            },
            "validation": {
                "issues": [issue.as_dict() for issue in self.issues],
                "warnings": [issue.as_dict() for issue in self.warnings],
            },
            "fileSize": self.file_size,
        }
