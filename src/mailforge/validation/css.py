"""Inline CSS helpers shared by the checks and the repair rules."""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from ..compat.color import is_hex_color, normalize_hex

Declaration = Tuple[str, str]

_HEX_TOKEN = re.compile(r"#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{3})\b")
_LENGTH = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(px|pt)?\s*(?:!important)?\s*$", re.IGNORECASE)

# property -> pattern over the value; matching declarations break layout in
# table-based clients and are stripped by the CSS normalizer.
STRIPPABLE_DECLARATIONS: Dict[str, re.Pattern] = {
    "display": re.compile(r"^\s*(?:inline-)?(?:flex|grid)\b", re.IGNORECASE),
    "position": re.compile(r"^\s*(?:absolute|fixed|sticky)\b", re.IGNORECASE),
}


def parse_declarations(style: str | None) -> List[Declaration]:
    """Split an inline style into (property, value) pairs, keeping source order."""
    if not style:
        return []
    declarations: List[Declaration] = []
    for chunk in _split(style):
        prop, sep, value = chunk.partition(":")
        prop = prop.strip().lower()
        value = value.strip()
        if sep and prop and value:
            declarations.append((prop, value))
    return declarations


def _split(style: str) -> List[str]:
    # Semicolons inside url(...) or quotes (data URIs) do not end a declaration.
    chunks: List[str] = []
    depth = 0
    quote: str | None = None
    start = 0
    for idx, ch in enumerate(style):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(depth - 1, 0)
        elif ch == ";" and depth == 0:
            chunks.append(style[start:idx])
            start = idx + 1
    chunks.append(style[start:])
    return chunks


def declaration_map(style: str | None) -> Dict[str, str]:
    """Last declaration wins, as in the browser cascade."""
    return dict(parse_declarations(style))


def has_duplicates(declarations: List[Declaration]) -> bool:
    props = [prop for prop, _ in declarations]
    return len(props) != len(set(props))


def is_strippable(prop: str, value: str) -> bool:
    pattern = STRIPPABLE_DECLARATIONS.get(prop)
    return bool(pattern and pattern.match(value))


def normalize_declarations(style: str | None) -> str:
    """Deduplicate (last wins), drop strippable declarations and sort by property."""
    merged = {prop: value for prop, value in declaration_map(style).items() if not is_strippable(prop, value)}
    return "; ".join(f"{prop}: {merged[prop]}" for prop in sorted(merged))


def find_hex(value: str | None) -> Optional[str]:
    if not value:
        return None
    if is_hex_color(value):
        return normalize_hex(value)
    match = _HEX_TOKEN.search(value)
    return normalize_hex(match.group(0)) if match else None


def px_value(value: str | None) -> Optional[float]:
    """Pixel size of a px/pt/unitless length; None for relative units."""
    if not value:
        return None
    match = _LENGTH.match(value)
    if not match:
        return None
    number = float(match.group(1))
    if (match.group(2) or "").lower() == "pt":
        return number * 4 / 3
    return number
