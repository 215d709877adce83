"""Design block model: the typed description synthesis starts from."""

from .loader import load_model, load_options, starter_model
from .models import (
    ColorPalette,
    ColorRole,
    DesignBlock,
    DesignBlockModel,
    StyleProperty,
    SynthesisOptions,
    TypographyScale,
)

__all__ = [
    "ColorPalette",
    "ColorRole",
    "DesignBlock",
    "DesignBlockModel",
    "StyleProperty",
    "SynthesisOptions",
    "TypographyScale",
    "load_model",
    "load_options",
    "starter_model",
]
