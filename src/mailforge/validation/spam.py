"""Spam-risk heuristics over the visible text of an email."""

from __future__ import annotations

import logging
import re
from typing import List

from bs4 import BeautifulSoup
from bs4.element import Comment, PreformattedString

from ..config import SpamPolicy
from .issues import INFO, WARNING, SpamReport, ValidationIssue

LOGGER = logging.getLogger(__name__)

HIDDEN_PARENTS = frozenset({"script", "style", "title", "head"})
PLACEHOLDER_HREFS = frozenset({"", "#"})

_WHITESPACE = re.compile(r"\s+")


def visible_text(soup: BeautifulSoup) -> str:
    """Text a reader would see: no comments, doctype, scripts, styles or title."""
    chunks = []
    for string in soup.find_all(string=True):
        if isinstance(string, (Comment, PreformattedString)):
            continue
        if any(parent.name in HIDDEN_PARENTS for parent in string.parents):
            continue
        chunks.append(str(string))
    return _WHITESPACE.sub(" ", " ".join(chunks)).strip()


def _trigger_pattern(phrase: str) -> re.Pattern:
    return re.compile(r"(?<!\w)" + re.escape(phrase) + r"(?!\w)", re.IGNORECASE)


def _caps_pattern(min_words: int) -> re.Pattern:
    word = r"[A-Z][A-Z0-9%$!']+"
    return re.compile(r"(?<!\w)" + word + r"(?:\s+" + word + r"){" + str(max(min_words - 1, 1)) + r",}")


def check_spam(html: str, policy: SpamPolicy) -> SpamReport:
    soup = BeautifulSoup(html, "html.parser")
    text = visible_text(soup)
    score = 0
    issues: List[ValidationIssue] = []

    def flag(severity: str, message: str, points: int) -> None:
        nonlocal score
        score += points
        issues.append(ValidationIssue(severity=severity, category="spam", message=message))

    for phrase in policy.triggers:
        count = len(_trigger_pattern(phrase).findall(text))
        if count:
            flag(WARNING, f'Spam trigger phrase "{phrase}" found {count} time(s)', count * policy.trigger_weight)

    exclamations = text.count("!")
    if exclamations > policy.exclamation_threshold:
        flag(WARNING, f"Excessive exclamation marks ({exclamations})", exclamations * policy.exclamation_weight)

    caps_runs = _caps_pattern(policy.caps_run_min_words).findall(text)
    if caps_runs:
        flag(WARNING, f"{len(caps_runs)} run(s) of all-caps words", len(caps_runs) * policy.caps_run_weight)

    images = soup.find_all("img")
    if len(images) > policy.image_heavy_min_images and len(text) < policy.image_heavy_max_text:
        flag(
            WARNING,
            f"Low text-to-image ratio ({len(images)} images, {len(text)} characters of text)",
            policy.image_heavy_weight,
        )

    placeholders = [
        link for link in soup.find_all("a", href=True) if link["href"].strip() in PLACEHOLDER_HREFS
    ]
    if placeholders:
        flag(INFO, f"{len(placeholders)} placeholder link(s) pointing nowhere", len(placeholders) * policy.placeholder_link_weight)

    score = min(max(score, 0), 100)
    if score < policy.low_band:
        level = "low"
    elif score < policy.medium_band:
        level = "medium"
    else:
        level = "high"
    LOGGER.debug("Spam score %s (%s)", score, level)
    return SpamReport(score=score, level=level, issues=issues)
