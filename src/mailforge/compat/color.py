"""Hex color parsing, luminance and contrast helpers."""

from __future__ import annotations

import re
from typing import Final, Tuple

HEX_PATTERN: Final = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

LIGHT_FOREGROUND: Final = "#ffffff"
DARK_FOREGROUND: Final = "#333333"


def parse_hex(value: str) -> Tuple[int, int, int]:
    """Return the (r, g, b) channels of a #rgb or #rrggbb color."""
    match = HEX_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"Not a hex color: {value!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def normalize_hex(value: str) -> str:
    r, g, b = parse_hex(value)
    return f"#{r:02x}{g:02x}{b:02x}"


def is_hex_color(value: str) -> bool:
    return bool(HEX_PATTERN.match(value.strip()))


def perceived_luminance(value: str) -> float:
    r, g, b = parse_hex(value)
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


def is_color_dark(value: str) -> bool:
    """True when the perceived luminance is below 0.5."""
    return perceived_luminance(value) < 0.5


def contrasting_color(value: str) -> str:
    """Pick a readable foreground for the given background."""
    return LIGHT_FOREGROUND if is_color_dark(value) else DARK_FOREGROUND


def relative_luminance(value: str) -> float:
    """WCAG 2.x relative luminance."""

    def _channel(channel: int) -> float:
        c = channel / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = parse_hex(value)
    return 0.2126 * _channel(r) + 0.7152 * _channel(g) + 0.0722 * _channel(b)


def contrast_ratio(first: str, second: str) -> float:
    l1 = relative_luminance(first)
    l2 = relative_luminance(second)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)
