"""
Repair rules.

Each rule edits the arena in place for the issues routed to it and returns
how many repairs it made. Rules only add closing tags, attributes and MSO
comments, or remove markup that renders nothing (stray end tags, scripts,
unsafe CSS declarations), so visible content is never dropped.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

from ..compat.outlook import GHOST_TABLE_CLOSE, TABLE_SAFETY_ATTRS, XHTML_DOCTYPE, ghost_table_open
from ..validation.css import normalize_declarations
from ..validation.document import Document, Node
from ..validation.issues import (
    ACCESSIBILITY_FIXES,
    CSS_NORMALIZATIONS,
    OUTLOOK_HARDENING,
    STRUCTURAL_FIXES,
    TAGS_CLOSED,
    ValidationIssue,
)

LOGGER = logging.getLogger(__name__)

ALT_PLACEHOLDER = "Email image {index}"

Rule = Callable[[Document, List[ValidationIssue], int], int]


def _targets(document: Document, issues: List[ValidationIssue]) -> List[Node]:
    """Distinct live nodes the issues point at, in document order."""
    seen = set()
    nodes = []
    for issue in issues:
        if issue.node_id is None or issue.node_id in seen:
            continue
        seen.add(issue.node_id)
        node = document.node(issue.node_id)
        if not node.removed:
            nodes.append(node)
    return sorted(nodes, key=lambda node: node.id)


def close_tags(document: Document, issues: List[ValidationIssue], content_width: int) -> int:
    repaired = 0
    for node in _targets(document, issues):
        if node.is_element and not node.closed:
            # The end tag goes where the parser closed the element implicitly.
            node.end_raw = f"</{node.tag}>"
            node.closed = True
            repaired += 1
    return repaired


def remove_structural_debris(document: Document, issues: List[ValidationIssue], content_width: int) -> int:
    repaired = 0
    for node in _targets(document, issues):
        if node.tag == "script" and "</html" in document.text_content(node).lower():
            continue
        if node.kind == "stray" or node.tag == "script":
            LOGGER.debug("Removing %s <%s> at line %s", node.kind, node.tag, node.line)
            document.remove(node)
            repaired += 1
    return repaired


def normalize_css(document: Document, issues: List[ValidationIssue], content_width: int) -> int:
    repaired = 0
    for node in _targets(document, issues):
        original = node.get("style")
        if original is None:
            continue
        normalized = normalize_declarations(original)
        if normalized == original:
            continue
        if normalized:
            document.set_attr(node, "style", normalized)
        else:
            document.remove_attr(node, "style")
        repaired += 1
    return repaired


def add_accessibility_attributes(document: Document, issues: List[ValidationIssue], content_width: int) -> int:
    image_numbers = {img.id: idx for idx, img in enumerate(document.elements("img"), start=1)}
    repaired = 0
    for node in _targets(document, issues):
        if node.tag == "img" and not (node.get("alt") or "").strip():
            document.set_attr(node, "alt", ALT_PLACEHOLDER.format(index=image_numbers.get(node.id, 1)))
        elif node.tag == "html" and not (node.get("lang") or "").strip():
            document.set_attr(node, "lang", "en")
        elif node.tag == "table" and node.get("role") != "presentation":
            document.set_attr(node, "role", "presentation")
        else:
            continue
        repaired += 1
    return repaired


def harden_for_outlook(document: Document, issues: List[ValidationIssue], content_width: int) -> int:
    repaired = 0
    needs_doctype = any(issue.node_id is None or document.node(issue.node_id).kind == "decl" for issue in issues)
    if needs_doctype:
        repaired += _set_doctype(document)
    for node in _targets(document, issues):
        if node.tag == "table":
            missing = [(name, value) for name, value in TABLE_SAFETY_ATTRS if not node.has(name)]
            for name, value in missing:
                document.set_attr(node, name, value)
            repaired += bool(missing)
        elif node.tag == "body":
            document.insert(node, 0, "comment", ghost_table_open(content_width))
            document.insert(node, len(node.children), "comment", GHOST_TABLE_CLOSE)
            repaired += 1
    return repaired


def _set_doctype(document: Document) -> int:
    current = document.doctype()
    if current is None:
        document.insert(None, 0, "decl", XHTML_DOCTYPE + "\n", XHTML_DOCTYPE[2:-1])
        return 1
    if "xhtml" in current.data.lower():
        return 0
    current.raw = XHTML_DOCTYPE
    current.data = XHTML_DOCTYPE[2:-1]
    return 1


RULES: Dict[str, Rule] = {
    TAGS_CLOSED: close_tags,
    STRUCTURAL_FIXES: remove_structural_debris,
    CSS_NORMALIZATIONS: normalize_css,
    ACCESSIBILITY_FIXES: add_accessibility_attributes,
    OUTLOOK_HARDENING: harden_for_outlook,
}
