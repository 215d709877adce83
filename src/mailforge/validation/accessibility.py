"""WCAG-flavored accessibility checks and the accessibility score."""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from ..compat.color import contrast_ratio
from ..config import ScoringPolicy
from .css import declaration_map, find_hex, px_value
from .document import Document, Node
from .issues import ACCESSIBILITY_FIXES, CRITICAL, INFO, WARNING, AccessibilityReport, ValidationIssue

LOGGER = logging.getLogger(__name__)

VAGUE_LINK_TEXT = frozenset({"click here", "read more", "learn more", "here", "link"})
NON_CONTENT_TAGS = frozenset({"head", "title", "style", "script"})
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
HEADING_DEFAULT_PX = {"h1": 32.0, "h2": 24.0, "h3": 18.72}
DEFAULT_FONT_PX = 16.0
DEFAULT_BACKGROUND = "#ffffff"

_WHITESPACE = re.compile(r"\s+")


def check_accessibility(document: Document, policy: ScoringPolicy) -> AccessibilityReport:
    issues: List[ValidationIssue] = []
    issues.extend(_check_images(document))
    issues.extend(_check_text(document, policy))
    issues.extend(_check_headings(document))
    issues.extend(_check_language(document))
    issues.extend(_check_tables(document))
    issues.extend(_check_links(document))

    score = 100
    for issue in issues:
        score -= policy.penalty(issue.severity)
    score = max(score, 0)
    bands = sorted(policy.level_bands.items(), key=lambda band: band[1], reverse=True)
    level = next((name for name, floor in bands if score >= floor), "Non-compliant")
    LOGGER.debug("Accessibility score %s (%s issues)", score, len(issues))
    return AccessibilityReport(score=score, level=level, issues=issues)


def _issue(severity: str, message: str, criterion: str, node: Node | None, fixable: bool = False) -> ValidationIssue:
    return ValidationIssue(
        severity=severity,
        category="accessibility",
        message=message,
        wcag_criterion=criterion,
        element=node.snippet() if node else None,
        line=node.line if node else None,
        auto_fixable=fixable,
        node_id=node.id if node and fixable else None,
        fix_rule=ACCESSIBILITY_FIXES if fixable else None,
    )


def _check_images(document: Document) -> List[ValidationIssue]:
    issues = []
    for img in document.elements("img"):
        alt = img.get("alt")
        if alt is None:
            issues.append(_issue(CRITICAL, "Image is missing alt text", "1.1.1", img, fixable=True))
        elif not alt.strip():
            issues.append(_issue(WARNING, "Image has empty alt text", "1.1.1", img, fixable=True))
    return issues


def _is_content(document: Document, node: Node) -> bool:
    return not any(ancestor.tag in NON_CONTENT_TAGS for ancestor in document.lineage(node))


def _effective_colors(document: Document, node: Node) -> Tuple[Optional[str], str]:
    foreground: Optional[str] = None
    background: Optional[str] = None
    for ancestor in document.lineage(node):
        styles = declaration_map(ancestor.get("style"))
        if foreground is None:
            foreground = find_hex(styles.get("color")) or find_hex(ancestor.get("color"))
        if background is None:
            background = (
                find_hex(styles.get("background-color"))
                or find_hex(styles.get("background"))
                or find_hex(ancestor.get("bgcolor"))
            )
        if foreground and background:
            break
    return foreground, background or DEFAULT_BACKGROUND


def _effective_font_size(document: Document, node: Node) -> float:
    for ancestor in document.lineage(node):
        size = px_value(declaration_map(ancestor.get("style")).get("font-size"))
        if size is not None:
            return size
        if ancestor.tag in HEADING_DEFAULT_PX:
            return HEADING_DEFAULT_PX[ancestor.tag]
    return DEFAULT_FONT_PX


def _check_text(document: Document, policy: ScoringPolicy) -> List[ValidationIssue]:
    issues = []
    for node in document.elements():
        if not document.direct_text(node).strip() or not _is_content(document, node):
            continue
        font_px = _effective_font_size(document, node)
        foreground, background = _effective_colors(document, node)
        if foreground is not None:
            ratio = contrast_ratio(foreground, background)
            large = font_px >= policy.large_text_px
            required = policy.contrast_large if large else policy.contrast_normal
            if ratio < required:
                severity = CRITICAL if not large and ratio < policy.contrast_large else WARNING
                issues.append(
                    _issue(
                        severity,
                        f"Insufficient color contrast {ratio:.2f}:1 ({foreground} on {background}, needs {required}:1)",
                        "1.4.3",
                        node,
                    )
                )
        if font_px < policy.min_font_px:
            issues.append(_issue(INFO, f"Font size {font_px:g}px is below {policy.min_font_px}px", "1.4.4", node))
    return issues


def _check_headings(document: Document) -> List[ValidationIssue]:
    issues = []
    previous: int | None = None
    for heading in document.elements(*HEADING_TAGS):
        level = int(heading.tag[1])
        if previous is None and level != 1:
            issues.append(_issue(INFO, f"First heading is <{heading.tag}> rather than <h1>", "1.3.1", heading))
        elif previous is not None and level > previous + 1:
            issues.append(_issue(WARNING, f"Heading level skips from h{previous} to h{level}", "1.3.1", heading))
        previous = level
    return issues


def _check_language(document: Document) -> List[ValidationIssue]:
    root = document.first("html")
    if root is not None and (root.get("lang") or "").strip():
        return []
    return [_issue(CRITICAL, "Missing lang attribute on <html>", "3.1.1", root, fixable=root is not None)]


def _check_tables(document: Document) -> List[ValidationIssue]:
    return [
        _issue(INFO, 'Layout table is missing role="presentation"', "1.3.1", table, fixable=True)
        for table in document.elements("table")
        if table.get("role") != "presentation"
    ]


def _check_links(document: Document) -> List[ValidationIssue]:
    issues = []
    for link in document.elements("a"):
        text = _WHITESPACE.sub(" ", document.text_content(link)).strip().lower()
        if text in VAGUE_LINK_TEXT:
            issues.append(_issue(INFO, f'Link text "{text}" does not describe its destination', "2.4.4", link))
    return issues
