"""HTML synthesis: design model in, table-based email document out."""

from .engine import synthesize
from .styles import merge_styles, style_string

__all__ = ["merge_styles", "style_string", "synthesize"]
