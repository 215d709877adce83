"""Validate, repair what is repairable, re-validate."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from ..config import ScoringPolicy
from ..errors import UnresolvedIssue
from ..validation.document import Document, parse_document
from ..validation.engine import validate_document
from ..validation.issues import (
    ACCESSIBILITY_FIXES,
    CSS_NORMALIZATIONS,
    FIX_RULES,
    OUTLOOK_HARDENING,
    STRUCTURAL_FIXES,
    TAGS_CLOSED,
    ComplianceMetrics,
)
from .rules import RULES

LOGGER = logging.getLogger(__name__)

SKIPPED_TEXT_PARENTS = frozenset({"script", "style", "title", "head"})

_RULE_FIELDS: Dict[str, str] = {
    TAGS_CLOSED: "tags_closed",
    STRUCTURAL_FIXES: "structural_fixes",
    CSS_NORMALIZATIONS: "css_normalizations",
    ACCESSIBILITY_FIXES: "accessibility_fixes",
    OUTLOOK_HARDENING: "outlook_hardening",
}


@dataclass(slots=True)
class FixSummary:
    tags_closed: int = 0
    structural_fixes: int = 0
    css_normalizations: int = 0
    accessibility_fixes: int = 0
    outlook_hardening: int = 0
    unresolved: List[UnresolvedIssue] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {rule: getattr(self, attr) for rule, attr in _RULE_FIELDS.items()}

    def record(self, rule: str, count: int) -> None:
        attr = _RULE_FIELDS[rule]
        setattr(self, attr, getattr(self, attr) + count)

    @property
    def total(self) -> int:
        return sum(self.counts().values())

    def is_clean(self) -> bool:
        return self.total == 0

    def as_dict(self) -> Dict:
        payload: Dict = dict(self.counts())
        payload["total"] = self.total
        payload["unresolved"] = [issue.as_dict() for issue in self.unresolved]
        return payload


@dataclass(slots=True)
class FixResult:
    html: str
    metrics: ComplianceMetrics
    summary: FixSummary


def auto_fix(html: str, policy: ScoringPolicy | None = None, content_width: int = 600) -> FixResult:
    """
    Repair every auto-fixable issue and report what changed.

    Rules run in order against the latest accepted document. A rule whose
    edits would lower the quality score is rolled back and counts as zero,
    so the result never scores below the input. Running the fixer on its
    own output changes nothing and returns an all-zero summary.

    Raises:
        MalformedDocumentError: when the input cannot be analyzed at all.
    """
    document = parse_document(html)
    before = validate_document(document, policy, content_width)

    summary = FixSummary()
    current_html, current = html, before
    for rule in FIX_RULES:
        issues = [issue for issue in current.all_issues() if issue.auto_fixable and issue.fix_rule == rule]
        if not issues:
            continue
        count = RULES[rule](document, issues, content_width)
        LOGGER.debug("Rule %s applied %s repair(s)", rule, count)
        if not count:
            continue
        candidate_html = document.serialize()
        document = parse_document(candidate_html)
        candidate = validate_document(document, policy, content_width)
        if candidate.quality_score < current.quality_score:
            LOGGER.info(
                "Rolled back %s: quality would drop %s -> %s", rule, current.quality_score, candidate.quality_score
            )
            document = parse_document(current_html)
            continue
        summary.record(rule, count)
        current_html, current = candidate_html, candidate

    if summary.is_clean():
        return FixResult(html=html, metrics=before, summary=summary)

    if summary.tags_closed or summary.structural_fixes:
        summary.unresolved = _loose_text(document)
        for issue in summary.unresolved:
            LOGGER.warning("Unresolved %s issue at line %s: %s", issue.category, issue.line, issue.message)
    LOGGER.info(
        "Auto-fix applied %s repair(s); quality %s -> %s", summary.total, before.quality_score, current.quality_score
    )
    return FixResult(html=current_html, metrics=current, summary=summary)


def _loose_text(document: Document) -> List[UnresolvedIssue]:
    """Text inside <body> that no table holds; kept as-is, but reported."""
    body = document.first("body")
    if body is None:
        return []
    unresolved = []
    for node in document.walk(body.children):
        if node.kind != "text" or not node.data.strip():
            continue
        tags = {ancestor.tag for ancestor in document.lineage(node)}
        if "table" in tags or tags & SKIPPED_TEXT_PARENTS:
            continue
        unresolved.append(
            UnresolvedIssue(
                category="structure",
                message="Content sits outside any layout table after structural repair",
                line=node.line,
                snippet=node.snippet(),
            )
        )
    return unresolved
