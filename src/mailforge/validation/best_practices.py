"""Best-practice warnings; reported alongside the scores but never part of them."""

from __future__ import annotations

import re
from typing import List

from ..compat.outlook import TABLE_SAFETY_ATTRS
from ..config import ScoringPolicy
from .css import declaration_map, has_duplicates, parse_declarations
from .document import Document
from .issues import CSS_NORMALIZATIONS, INFO, OUTLOOK_HARDENING, WARNING, ValidationIssue

MINIFY_WHITESPACE_RATIO = 0.3

_WHITESPACE = re.compile(r"\s")


def _warning(message: str, severity: str = WARNING, node=None, fix_rule: str | None = None) -> ValidationIssue:
    fixable = fix_rule is not None
    return ValidationIssue(
        severity=severity,
        category="bestPractice",
        message=message,
        element=node.snippet() if node is not None else None,
        line=node.line if node is not None else None,
        auto_fixable=fixable,
        node_id=node.id if node is not None and fixable else None,
        fix_rule=fix_rule,
    )


def _has_container(document: Document, width: int) -> bool:
    for node in document.elements("table", "div", "td"):
        if (node.get("width") or "").strip() == str(width):
            return True
        styles = declaration_map(node.get("style"))
        if f"{width}px" in (styles.get("max-width", ""), styles.get("width", "")):
            return True
    return False


def check_best_practices(document: Document, policy: ScoringPolicy, content_width: int = 600) -> List[ValidationIssue]:
    warnings: List[ValidationIssue] = []

    if not _has_container(document, content_width):
        warnings.append(_warning(f"Recommended email width is {content_width}px for desktop compatibility"))

    doctype = document.doctype()
    if doctype is not None and "xhtml" not in doctype.data.lower():
        warnings.append(
            _warning("Use the XHTML transitional DOCTYPE for best email client compatibility", node=doctype, fix_rule=OUTLOOK_HARDENING)
        )

    if not any((meta.get("name") or "").lower() == "viewport" for meta in document.elements("meta")):
        warnings.append(_warning("Missing viewport meta tag for mobile responsiveness"))

    for img in document.elements("img"):
        if not img.has("width"):
            warnings.append(_warning("Image is missing a width attribute", node=img))
        if (img.get("src") or "").strip().lower().startswith("data:image"):
            warnings.append(_warning("Inline base64 image increases file size; host images externally", node=img))

    for table in document.elements("table"):
        missing = [name for name, _ in TABLE_SAFETY_ATTRS if not table.has(name)]
        if missing:
            warnings.append(
                _warning(f"Table is missing {', '.join(missing)} attributes", node=table, fix_rule=OUTLOOK_HARDENING)
            )

    for node in document.elements():
        if has_duplicates(parse_declarations(node.get("style"))):
            warnings.append(
                _warning("Duplicate inline CSS declarations", severity=INFO, node=node, fix_rule=CSS_NORMALIZATIONS)
            )

    size = len(document.source.encode("utf-8"))
    if size > policy.max_recommended_bytes:
        warnings.append(_warning(f"Email HTML is {size / 1024:.2f} KB; keep it under {policy.max_recommended_bytes // 1024} KB", INFO))
    if document.source and len(_WHITESPACE.findall(document.source)) / len(document.source) > MINIFY_WHITESPACE_RATIO:
        warnings.append(_warning("High whitespace ratio; minifying would reduce file size", INFO))
    return warnings
