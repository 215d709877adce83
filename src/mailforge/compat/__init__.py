"""Client compatibility helpers: colors, dark mode, Outlook fragments, previews."""

from .color import contrast_ratio, contrasting_color, is_color_dark
from .dark_mode import add_apple_mail_dark_mode_support, add_gmail_dark_mode_support, dark_mode_block
from .preview import wrap_for_preview

__all__ = [
    "add_apple_mail_dark_mode_support",
    "add_gmail_dark_mode_support",
    "contrast_ratio",
    "contrasting_color",
    "dark_mode_block",
    "is_color_dark",
    "wrap_for_preview",
]
