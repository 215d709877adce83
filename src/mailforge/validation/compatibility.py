"""
Email client compatibility matrix.

Each unsafe construct lists the clients it breaks; a client passes when no
finding names it. Inline-style findings point at their element so the fixer
can repair them; findings inside <style> blocks are reported only.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..compat.outlook import is_mso_conditional
from ..config import ScoringPolicy
from .css import parse_declarations
from .document import Document, Node
from .issues import (
    CLIENTS,
    CRITICAL,
    CSS_NORMALIZATIONS,
    OUTLOOK_HARDENING,
    STRUCTURAL_FIXES,
    WARNING,
    CompatibilityReport,
    ValidationIssue,
)

LOGGER = logging.getLogger(__name__)

NON_APPLE = ("outlook", "outlookCom", "gmail", "yahoo", "samsung")


@dataclass(frozen=True)
class UnsafeConstruct:
    name: str
    message: str
    severity: str
    breaks: Tuple[str, ...]
    # (property, value) -> bool, for inline declarations
    matches: Callable[[str, str], bool]
    # same construct inside a <style> block
    stylesheet: re.Pattern
    fix_rule: Optional[str] = None


_TRANSFORM_PROPS = frozenset({"transform", "-webkit-transform", "-ms-transform"})

CSS_CONSTRUCTS: Tuple[UnsafeConstruct, ...] = (
    UnsafeConstruct(
        "flexbox-grid",
        "Flexbox and CSS Grid are not supported in most email clients",
        CRITICAL,
        NON_APPLE,
        lambda prop, value: prop == "display" and bool(re.match(r"(?:inline-)?(?:flex|grid)\b", value, re.I)),
        re.compile(r"display\s*:\s*(?:inline-)?(?:flex|grid)\b", re.I),
        CSS_NORMALIZATIONS,
    ),
    UnsafeConstruct(
        "position",
        "CSS position is not fully supported",
        CRITICAL,
        ("outlook", "outlookCom", "gmail", "yahoo"),
        lambda prop, value: prop == "position" and bool(re.match(r"(?:absolute|fixed|sticky)\b", value, re.I)),
        re.compile(r"(?<![-\w])position\s*:\s*(?:absolute|fixed|sticky)\b", re.I),
        CSS_NORMALIZATIONS,
    ),
    UnsafeConstruct(
        "float",
        "CSS float is not recommended for emails",
        WARNING,
        ("outlook",),
        lambda prop, value: prop == "float" and bool(re.match(r"(?:left|right)\b", value, re.I)),
        re.compile(r"(?<![-\w])float\s*:\s*(?:left|right)\b", re.I),
    ),
    UnsafeConstruct(
        "transform",
        "CSS transform is not supported in most email clients",
        WARNING,
        NON_APPLE,
        lambda prop, value: prop in _TRANSFORM_PROPS,
        re.compile(r"(?<![-\w])(?:-webkit-|-ms-)?transform\s*:", re.I),
    ),
)

_BACKGROUND_URL = re.compile(r"background(?:-image)?\s*:[^;{}]*url\(", re.I)
_UNSAFE_IMAGE = re.compile(r"(?:\.(webp|svg)(?:[?#]|$)|^data:image/(webp|svg))", re.I)


def _issue(
    construct: str,
    severity: str,
    message: str,
    breaks: Tuple[str, ...],
    node: Node | None = None,
    fix_rule: str | None = None,
) -> Tuple[ValidationIssue, Tuple[str, ...]]:
    fixable = fix_rule is not None and node is not None
    issue = ValidationIssue(
        severity=severity,
        category="compatibility",
        message=f"{message} (affects {', '.join(breaks)})",
        element=node.snippet() if node else None,
        line=node.line if node else None,
        auto_fixable=fixable,
        node_id=node.id if fixable else None,
        fix_rule=fix_rule if fixable else None,
    )
    LOGGER.debug("Compatibility finding %s", construct)
    return issue, breaks


def stylesheet_text(document: Document) -> str:
    return "\n".join(document.direct_text(node) for node in document.elements("style"))


def check_compatibility(document: Document, policy: ScoringPolicy) -> CompatibilityReport:
    findings: List[Tuple[ValidationIssue, Tuple[str, ...]]] = []
    css = stylesheet_text(document)
    comments = [node.data for node in document.comments()]

    for node in document.elements():
        declarations = parse_declarations(node.get("style"))
        for construct in CSS_CONSTRUCTS:
            if any(construct.matches(prop, value) for prop, value in declarations):
                findings.append(
                    _issue(construct.name, construct.severity, construct.message, construct.breaks, node, construct.fix_rule)
                )
    for construct in CSS_CONSTRUCTS:
        if construct.stylesheet.search(css):
            findings.append(_issue(construct.name, construct.severity, construct.message + " in <style>", construct.breaks))

    for link in document.elements("link"):
        if (link.get("rel") or "").lower() == "stylesheet":
            findings.append(
                _issue("stylesheet", CRITICAL, "External stylesheets are stripped; use inline styles", NON_APPLE, link)
            )
    for script in document.elements("script"):
        findings.append(
            _issue("script", CRITICAL, "JavaScript is not supported in email clients", CLIENTS, script, STRUCTURAL_FIXES)
        )

    has_vml = any("<v:" in comment.lower() for comment in comments)
    if not has_vml:
        inline_backgrounds = [
            node
            for node in document.elements()
            if any(_BACKGROUND_URL.search(f"{prop}: {value}") for prop, value in parse_declarations(node.get("style")))
            or node.get("background")
        ]
        for node in inline_backgrounds:
            findings.append(_issue("background-image", WARNING, "Background image has no VML fallback", ("outlook",), node))
        if _BACKGROUND_URL.search(css):
            findings.append(_issue("background-image", WARNING, "Background image has no VML fallback", ("outlook",)))

    if not any(is_mso_conditional(comment) for comment in comments):
        findings.append(
            _issue(
                "mso",
                WARNING,
                "No MSO conditional comments; Outlook layout is not hardened",
                ("outlook",),
                document.first("body"),
                OUTLOOK_HARDENING,
            )
        )

    for img in document.elements("img"):
        match = _UNSAFE_IMAGE.search((img.get("src") or "").strip())
        if match:
            fmt = (match.group(1) or match.group(2)).lower()
            breaks = ("outlook", "yahoo") if fmt == "webp" else ("outlook", "outlookCom", "gmail", "yahoo")
            findings.append(_issue("image-format", WARNING, f"{fmt.upper()} images are not widely supported", breaks, img))

    size = len(document.source.encode("utf-8"))
    if size > policy.gmail_clip_bytes:
        findings.append(
            _issue("size", WARNING, f"Email is {size} bytes; Gmail clips messages over {policy.gmail_clip_bytes}", ("gmail",))
        )

    clients: Dict[str, bool] = {client: True for client in CLIENTS}
    for _, breaks in findings:
        for client in breaks:
            clients[client] = False
    lowered = css.lower()
    return CompatibilityReport(
        clients=clients,
        responsive="@media" in lowered and "max-width" in lowered,
        dark_mode="prefers-color-scheme" in lowered,
        issues=[issue for issue, _ in findings],
    )
