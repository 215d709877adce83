"""Run every check over one document and combine them into ComplianceMetrics."""

from __future__ import annotations

import logging

from ..config import DEFAULT_POLICY, ScoringPolicy
from .accessibility import check_accessibility
from .best_practices import check_best_practices
from .compatibility import check_compatibility
from .document import Document, parse_document
from .issues import ComplianceMetrics
from .spam import check_spam
from .structure import check_structure

LOGGER = logging.getLogger(__name__)


def validate(html: str, policy: ScoringPolicy | None = None, content_width: int = 600) -> ComplianceMetrics:
    """
    Score an email document.

    Raises:
        MalformedDocumentError: when the input cannot be analyzed at all.
    """
    return validate_document(parse_document(html), policy, content_width)


def validate_document(
    document: Document, policy: ScoringPolicy | None = None, content_width: int = 600
) -> ComplianceMetrics:
    policy = policy or DEFAULT_POLICY
    accessibility = check_accessibility(document, policy)
    spam = check_spam(document.source, policy.spam)
    compatibility = check_compatibility(document, policy)
    issues = [*check_structure(document), *compatibility.issues]
    warnings = check_best_practices(document, policy, content_width)

    weights = policy.weights
    quality = round(
        weights.accessibility * accessibility.score
        + weights.compatibility * compatibility.pass_rate * 100
        + weights.spam * spam.protection
    )
    quality = min(max(quality, 0), 100)
    bands = sorted(policy.grade_bands.items(), key=lambda band: band[1], reverse=True)
    grade = next((name for name, floor in bands if quality >= floor), "D")

    LOGGER.info(
        "Validated email: quality %s (%s), accessibility %s, spam %s, %s issues, %s warnings",
        quality,
        grade,
        accessibility.score,
        spam.score,
        len(issues),
        len(warnings),
    )
    return ComplianceMetrics(
        quality_score=quality,
        grade=grade,
        accessibility=accessibility,
        spam=spam,
        compatibility=compatibility,
        issues=issues,
        warnings=warnings,
        file_size=len(document.source.encode("utf-8")),
    )
