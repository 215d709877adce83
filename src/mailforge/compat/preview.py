"""Preview wrappers for desktop/mobile and light/dark inspection."""

from __future__ import annotations

from typing import Final, Tuple

from .dark_mode import FORCE_DARK_CLASS

PREVIEW_MODES: Final[Tuple[str, ...]] = ("desktop-light", "desktop-dark", "mobile-light", "mobile-dark")
MOBILE_WIDTH: Final = 375
DARK_CANVAS: Final = "#1a1a1a"


def wrap_for_preview(html: str, mode: str) -> str:
    if mode not in PREVIEW_MODES:
        raise ValueError(f"Unknown preview mode {mode!r}; expected one of {', '.join(PREVIEW_MODES)}")
    device, scheme = mode.split("-")
    wrapped = html
    if scheme == "dark":
        wrapped = f'<div class="{FORCE_DARK_CLASS}" style="background-color: {DARK_CANVAS}; padding: 20px;">{wrapped}</div>'
    if device == "mobile":
        wrapped = f'<div style="max-width: {MOBILE_WIDTH}px; margin: 0 auto;">{wrapped}</div>'
    return wrapped
