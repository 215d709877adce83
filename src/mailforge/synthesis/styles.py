"""Inline style maps and their deterministic serialization."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

StyleMap = Dict[str, Optional[str]]

MSO_LINE_HEIGHT = "mso-line-height-rule"


def _key(prop: object) -> str:
    return getattr(prop, "value", prop)  # StyleProperty or plain str


def merge_styles(defaults: Mapping[str, Optional[str]], overrides: Mapping | None = None) -> StyleMap:
    """
    Overlay overrides on defaults.

    Keys already in defaults keep their position; new keys are appended in
    the order the overrides list them.
    """
    merged: StyleMap = dict(defaults)
    for prop, value in (overrides or {}).items():
        merged[_key(prop)] = value
    return merged


def pick(overrides: Mapping | None, props: Iterable[str]) -> StyleMap:
    wanted = set(props)
    return {_key(prop): value for prop, value in (overrides or {}).items() if _key(prop) in wanted}


def omit(overrides: Mapping | None, props: Iterable[str]) -> StyleMap:
    unwanted = set(props)
    return {_key(prop): value for prop, value in (overrides or {}).items() if _key(prop) not in unwanted}


def with_mso_line_height(styles: StyleMap) -> StyleMap:
    """Pin line-height for Outlook right after the line-height declaration."""
    if "line-height" not in styles or MSO_LINE_HEIGHT in styles:
        return styles
    pinned: StyleMap = {}
    for prop, value in styles.items():
        pinned[prop] = value
        if prop == "line-height":
            pinned[MSO_LINE_HEIGHT] = "exactly"
    return pinned


def style_string(styles: Mapping[str, Optional[str]]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in styles.items() if value is not None)
