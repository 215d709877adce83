"""Pydantic representation of a structured email design."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..compat.color import contrasting_color, is_hex_color, normalize_hex
from .defaults import DEFAULT_DARK_COLORS, DEFAULT_LIGHT_COLORS


class StyleProperty(str, Enum):
    """CSS properties a block may override."""

    FONT_FAMILY = "font-family"
    FONT_SIZE = "font-size"
    FONT_WEIGHT = "font-weight"
    LINE_HEIGHT = "line-height"
    LETTER_SPACING = "letter-spacing"
    COLOR = "color"
    BACKGROUND_COLOR = "background-color"
    TEXT_ALIGN = "text-align"
    PADDING = "padding"
    MARGIN = "margin"
    BORDER = "border"
    BORDER_RADIUS = "border-radius"
    WIDTH = "width"
    HEIGHT = "height"


# fontSize -> font-size and friends
_STYLE_ALIASES: Dict[str, str] = {
    "".join(part if idx == 0 else part.capitalize() for idx, part in enumerate(prop.value.split("-"))): prop.value
    for prop in StyleProperty
}


class ColorRole(str, Enum):
    BACKGROUND = "background"
    TEXT = "text"
    SECONDARY_TEXT = "secondaryText"
    LINK = "link"
    BORDER = "border"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class BoundingBox(BaseModel):
    x: int = Field(default=0, ge=0)
    y: int = Field(default=0, ge=0)
    w: int = Field(default=0, ge=0)
    h: int = Field(default=0, ge=0)


class _BlockBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    style: Dict[StyleProperty, str] = Field(default_factory=dict)
    color: str | None = None
    bbox: BoundingBox | None = None
    children: List["DesignBlock"] = Field(default_factory=list)

    @field_validator("style", mode="before")
    @classmethod
    def _normalize_style_keys(cls, value: object) -> object:
        if not isinstance(value, dict):
            return value
        return {_STYLE_ALIASES.get(str(key), key): str(val) for key, val in value.items()}

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not is_hex_color(value):
            raise ValueError(f"color must be a hex value, got {value!r}")
        return normalize_hex(value)


class HeadingBlock(_BlockBase):
    type: Literal["heading"] = "heading"
    text: str
    level: int = Field(default=1, ge=1, le=3)


class TextBlock(_BlockBase):
    type: Literal["text"] = "text"
    text: str


class ButtonBlock(_BlockBase):
    type: Literal["button"] = "button"
    text: str
    href: str = "#"


class ImageBlock(_BlockBase):
    type: Literal["image"] = "image"
    src: str
    alt: str | None = None
    href: str | None = None


class DividerBlock(_BlockBase):
    type: Literal["divider"] = "divider"


class SpacerBlock(_BlockBase):
    type: Literal["spacer"] = "spacer"
    height: int = Field(default=20, ge=1)


class DataRowBlock(_BlockBase):
    type: Literal["dataRow"] = "dataRow"
    label: str
    value: str


DesignBlock = Annotated[
    Union[HeadingBlock, TextBlock, ButtonBlock, ImageBlock, DividerBlock, SpacerBlock, DataRowBlock],
    Field(discriminator="type"),
]

for _block in (HeadingBlock, TextBlock, ButtonBlock, ImageBlock, DividerBlock, SpacerBlock, DataRowBlock):
    _block.model_rebuild()


class ColorPalette(BaseModel):
    """Light and dark colors keyed by semantic role."""

    model_config = ConfigDict(frozen=True)

    light: Dict[ColorRole, str] = Field(default_factory=lambda: dict(DEFAULT_LIGHT_COLORS), validate_default=True)
    dark: Dict[ColorRole, str] = Field(default_factory=lambda: dict(DEFAULT_DARK_COLORS), validate_default=True)

    @model_validator(mode="before")
    @classmethod
    def _accept_flat_mapping(cls, value: object) -> object:
        if not isinstance(value, dict) or not value or "light" in value or "dark" in value:
            return value
        # A flat {role: hex} mapping describes the light palette only.
        known_roles = {role.value for role in ColorRole}
        light = dict(value)
        dark = {}
        for role, hex_value in light.items():
            default = DEFAULT_DARK_COLORS.get(role) if role in known_roles else None
            if default is None and is_hex_color(str(hex_value)):
                default = contrasting_color(str(hex_value))
            dark[role] = default or hex_value
        return {"light": light, "dark": dark}

    @field_validator("light", "dark")
    @classmethod
    def _normalize_colors(cls, value: Dict[ColorRole, str]) -> Dict[ColorRole, str]:
        normalized = {}
        for role, hex_value in value.items():
            if not is_hex_color(hex_value):
                raise ValueError(f"{role.value} must be a hex color, got {hex_value!r}")
            normalized[role] = normalize_hex(hex_value)
        return normalized

    @model_validator(mode="after")
    def _roles_are_paired(self) -> "ColorPalette":
        unpaired = set(self.light) ^ set(self.dark)
        if unpaired:
            names = ", ".join(sorted(role.value for role in unpaired))
            raise ValueError(f"light and dark palettes must define the same roles (unpaired: {names})")
        return self


class TypographyScale(BaseModel):
    model_config = ConfigDict(frozen=True)

    families: List[str] = Field(default_factory=list)
    sizes: List[str] = Field(default_factory=list)


class LayoutSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = "single-column"


class DesignBlockModel(BaseModel):
    """Structured description of a whole template."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    layout: LayoutSpec = Field(default_factory=LayoutSpec)
    style: Literal["modern", "classic", "minimal"] = "modern"
    components: List[DesignBlock] = Field(min_length=1)
    colors: ColorPalette = Field(default_factory=ColorPalette)
    typography: TypographyScale = Field(default_factory=TypographyScale)


class SynthesisOptions(BaseModel):
    """Knobs for a single synthesis call; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    include_outlook_fixes: bool = Field(default=True, alias="includeOutlookFixes")
    include_dark_mode: bool = Field(default=True, alias="includeDarkMode")
    include_responsive: bool = Field(default=True, alias="includeResponsive")
    title: str | None = None
    background_color: str | None = Field(default=None, alias="backgroundColor")
    body_color: str | None = Field(default=None, alias="bodyColor")

    @field_validator("background_color", "body_color")
    @classmethod
    def _check_color(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not is_hex_color(value):
            raise ValueError(f"must be a hex color, got {value!r}")
        return normalize_hex(value)
