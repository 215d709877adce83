"""Tag balance and document skeleton checks."""

from __future__ import annotations

from typing import List

from .document import Document
from .issues import CRITICAL, OUTLOOK_HARDENING, STRUCTURAL_FIXES, TAGS_CLOSED, WARNING, ValidationIssue


def check_structure(document: Document) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    for node in document.unclosed():
        issues.append(
            ValidationIssue(
                severity=CRITICAL,
                category="structure",
                message=f"Unclosed <{node.tag}> tag",
                element=node.snippet(),
                line=node.line,
                auto_fixable=True,
                node_id=node.id,
                fix_rule=TAGS_CLOSED,
            )
        )
    for node in document.strays():
        # Dropping a stray </html> could leave the document without one.
        fixable = node.tag != "html"
        issues.append(
            ValidationIssue(
                severity=CRITICAL,
                category="structure",
                message=f"Closing </{node.tag}> tag without a matching opening tag",
                element=node.snippet(),
                line=node.line,
                auto_fixable=fixable,
                node_id=node.id if fixable else None,
                fix_rule=STRUCTURAL_FIXES if fixable else None,
            )
        )
    if document.doctype() is None:
        issues.append(
            ValidationIssue(
                severity=WARNING,
                category="structure",
                message="Missing DOCTYPE declaration",
                auto_fixable=True,
                fix_rule=OUTLOOK_HARDENING,
            )
        )
    issues.sort(key=lambda issue: (issue.line or 0))
    return issues
