"""Default palettes and per-style theme tokens."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

DEFAULT_LIGHT_COLORS: Dict[str, str] = {
    "background": "#ffffff",
    "text": "#333333",
    "secondaryText": "#666666",
    "link": "#0056b3",
    "border": "#e0e0e0",
    "success": "#28a745",
    "warning": "#ffc107",
    "error": "#dc3545",
}

DEFAULT_DARK_COLORS: Dict[str, str] = {
    "background": "#1a1a1a",
    "text": "#ffffff",
    "secondaryText": "#cccccc",
    "link": "#4da6ff",
    "border": "#404040",
    "success": "#4caf50",
    "warning": "#ff9800",
    "error": "#f44336",
}


@dataclass(slots=True, frozen=True)
class Theme:
    """Tokens a design style contributes to every block."""

    font_family: str
    heading_color: str
    button_radius: int
    heading_weight: str = "bold"


THEMES: Dict[str, Theme] = {
    "modern": Theme(font_family="Helvetica, Arial, sans-serif", heading_color="#111111", button_radius=6),
    "classic": Theme(font_family="Georgia, 'Times New Roman', serif", heading_color="#222222", button_radius=0),
    "minimal": Theme(font_family="Arial, sans-serif", heading_color="#111111", button_radius=2, heading_weight="normal"),
}

HEADING_SIZES: Dict[int, str] = {1: "32px", 2: "24px", 3: "20px"}


def get_theme(style: str) -> Theme:
    """Theme for a design style, with fallback to modern."""
    return THEMES.get(style, THEMES["modern"])
