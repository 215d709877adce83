"""Design model -> complete, self-contained email document."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping

from ..compat import outlook
from ..compat.color import contrasting_color, is_color_dark
from ..compat.dark_mode import (
    add_apple_mail_dark_mode_support,
    add_gmail_dark_mode_support,
    dark_mode_block,
    meta_tags,
    role_class,
)
from ..config import EngineConfig
from ..design.defaults import HEADING_SIZES, Theme, get_theme
from ..design.loader import load_model, load_options, starter_model
from ..design.models import (
    ButtonBlock,
    ColorRole,
    DataRowBlock,
    DesignBlock,
    DesignBlockModel,
    DividerBlock,
    HeadingBlock,
    ImageBlock,
    SpacerBlock,
    SynthesisOptions,
    TextBlock,
)
from . import table_builder
from .styles import StyleMap, merge_styles, omit, pick, style_string, with_mso_line_height

LOGGER = logging.getLogger(__name__)

RESET_CSS = """    #outlook a { padding: 0; }
    .ExternalClass { width: 100%; }
    .ExternalClass, .ExternalClass p, .ExternalClass span, .ExternalClass font, .ExternalClass td, .ExternalClass div { line-height: 100%; }
    body { margin: 0; padding: 0; width: 100% !important; -webkit-text-size-adjust: 100%; -ms-text-size-adjust: 100%; }
    table, td { mso-table-lspace: 0pt; mso-table-rspace: 0pt; border-collapse: collapse !important; }
    img { border: 0; height: auto; line-height: 100%; outline: none; text-decoration: none; -ms-interpolation-mode: bicubic; }
    a[x-apple-data-detectors] { color: inherit !important; text-decoration: none !important; }"""

RESPONSIVE_CSS = """    @media only screen and (max-width: 600px) {
      .mobile-full-width { width: 100% !important; max-width: 100% !important; height: auto !important; }
      .stack-column { display: block !important; width: 100% !important; max-width: 100% !important; direction: ltr !important; }
      .mobile-padding { padding-left: 20px !important; padding-right: 20px !important; }
      .mobile-center { text-align: center !important; margin: 0 auto !important; }
    }"""

# Cell-level overrides; everything else styles the block's own element.
CELL_PROPERTIES = ("padding", "background-color")
DEFAULT_CELL_PADDING = "10px 20px"
BUTTON_PADDING_PX = 24


@dataclass(slots=True, frozen=True)
class RenderContext:
    """Everything block renderers need besides the block itself."""

    theme: Theme
    font_family: str
    text_color: str
    secondary_color: str
    heading_color: str
    link_color: str
    border_color: str
    body_color: str
    content_width: int
    outlook: bool
    dark_mode: bool

    def css_class(self, role: ColorRole) -> str | None:
        return role_class(role) if self.dark_mode else None

    def text_styles(self, styles: StyleMap) -> StyleMap:
        return with_mso_line_height(styles) if self.outlook else styles


def synthesize(
    model: DesignBlockModel | Mapping | None = None,
    options: SynthesisOptions | Mapping | None = None,
    config: EngineConfig | None = None,
) -> str:
    """
    Render a design model into a complete email document.

    A missing model falls back to the starter template. The output only
    depends on the arguments, so identical calls give identical bytes.

    Raises:
        InvalidModelError: when a raw mapping fails model validation.
    """
    config = config or EngineConfig()
    design = starter_model() if model is None else load_model(model)
    opts = load_options(options)
    context = _build_context(design, opts, config)

    fragments = [_render_block(block, context) for block in design.components]
    html = _assemble(design, opts, config, context, table_builder.join_blocks(fragments))
    LOGGER.info("Synthesized email (%s blocks, %s bytes)", len(design.components), len(html.encode("utf-8")))
    return html


def _build_context(design: DesignBlockModel, opts: SynthesisOptions, config: EngineConfig) -> RenderContext:
    theme = get_theme(design.style)
    light = design.colors.light
    body_color = opts.body_color or light.get(ColorRole.BACKGROUND, config.body_color)
    dark_body = is_color_dark(body_color)

    text_color = light.get(ColorRole.TEXT, "#333333")
    if is_color_dark(text_color) == dark_body:
        text_color = contrasting_color(body_color)
    secondary = light.get(ColorRole.SECONDARY_TEXT, text_color)
    if is_color_dark(secondary) == dark_body:
        secondary = text_color
    heading_color = contrasting_color(body_color) if dark_body else theme.heading_color

    families = design.typography.families
    return RenderContext(
        theme=theme,
        font_family=", ".join(families) if families else theme.font_family,
        text_color=text_color,
        secondary_color=secondary,
        heading_color=heading_color,
        link_color=light.get(ColorRole.LINK, "#0056b3"),
        border_color=light.get(ColorRole.BORDER, "#e0e0e0"),
        body_color=body_color,
        content_width=config.content_width,
        outlook=opts.include_outlook_fixes,
        dark_mode=opts.include_dark_mode,
    )


def _render_block(block: DesignBlock, context: RenderContext) -> str:
    content = _render_content(block, context)
    if block.children:
        content = table_builder.columns(
            [content, *(_render_content(child, context) for child in block.children)],
            include_outlook=context.outlook,
        )
        return table_builder.wrap_in_table(content, {"padding": "0"})
    cell = merge_styles({"padding": DEFAULT_CELL_PADDING}, pick(block.style, CELL_PROPERTIES))
    if isinstance(block, (SpacerBlock, DividerBlock)):
        cell["padding"] = pick(block.style, ["padding"]).get("padding", "0 20px")
    return table_builder.wrap_in_table(content, cell)


def _render_content(block: DesignBlock, context: RenderContext) -> str:
    if isinstance(block, HeadingBlock):
        return _render_heading(block, context)
    if isinstance(block, TextBlock):
        return _render_text(block, context)
    if isinstance(block, ButtonBlock):
        return _render_button(block, context)
    if isinstance(block, ImageBlock):
        return _render_image(block, context)
    if isinstance(block, DividerBlock):
        return table_builder.divider(block.color or context.border_color, context.css_class(ColorRole.BORDER))
    if isinstance(block, SpacerBlock):
        height = block.bbox.h if block.bbox and block.bbox.h else block.height
        return table_builder.spacer(height)
    if isinstance(block, DataRowBlock):
        return _render_data_row(block, context)
    raise TypeError(f"Unsupported block type: {type(block).__name__}")


def _render_heading(block: HeadingBlock, context: RenderContext) -> str:
    styles = merge_styles(
        {
            "margin": "0",
            "font-family": context.font_family,
            "font-size": HEADING_SIZES[block.level],
            "font-weight": context.theme.heading_weight,
            "line-height": "1.2",
            "color": block.color or context.heading_color,
        },
        omit(block.style, CELL_PROPERTIES),
    )
    return table_builder.heading(block.text, block.level, context.text_styles(styles), context.css_class(ColorRole.TEXT))


def _render_text(block: TextBlock, context: RenderContext) -> str:
    styles = merge_styles(
        {
            "margin": "0",
            "font-family": context.font_family,
            "font-size": "16px",
            "line-height": "24px",
            "color": block.color or context.text_color,
        },
        omit(block.style, CELL_PROPERTIES),
    )
    return table_builder.paragraph(block.text, context.text_styles(styles), context.css_class(ColorRole.TEXT))


def _render_button(block: ButtonBlock, context: RenderContext) -> str:
    overrides = {getattr(prop, "value", prop): value for prop, value in block.style.items()}
    background = block.color or overrides.pop("background-color", None) or context.link_color
    foreground = overrides.pop("color", None) or contrasting_color(background)
    align = overrides.pop("text-align", "center")
    radius = overrides.pop("border-radius", f"{context.theme.button_radius}px")
    font_size = overrides.get("font-size", "16px")

    link_styles = merge_styles(
        {
            "display": "inline-block",
            "padding": f"12px {BUTTON_PADDING_PX}px",
            "font-family": context.font_family,
            "font-size": font_size,
            "font-weight": "bold",
            "line-height": "20px",
            "color": foreground,
            "background-color": background,
            "border-radius": radius,
            "text-decoration": "none",
        },
        overrides,
    )
    link_styles = context.text_styles(link_styles)
    if context.outlook and block.bbox and block.bbox.w and block.bbox.h:
        return table_builder.vml_button(
            block.text,
            block.href,
            link_styles,
            background,
            foreground,
            block.bbox.w,
            block.bbox.h,
            _px(radius),
            font_size,
            align,
        )
    cell_styles = {"border-radius": radius, "background-color": background}
    return table_builder.button(block.text, block.href, cell_styles, link_styles, background, align, BUTTON_PADDING_PX)


def _render_image(block: ImageBlock, context: RenderContext) -> str:
    max_width = context.content_width - 40
    width = min(block.bbox.w, max_width) if block.bbox and block.bbox.w else max_width
    height = block.bbox.h if block.bbox and block.bbox.h else None
    styles = merge_styles(
        {
            "display": "block",
            "width": f"{width}px",
            "max-width": "100%",
            "height": "auto",
            "border": "0",
            "outline": "none",
            "text-decoration": "none",
        },
        omit(block.style, CELL_PROPERTIES),
    )
    return table_builder.image(block.src, block.alt, width, height, styles, block.href)


def _render_data_row(block: DataRowBlock, context: RenderContext) -> str:
    cell = {"padding": "12px 15px", "border-bottom": f"1px solid {context.border_color}"}
    text = {"margin": "0", "font-family": context.font_family, "font-size": "14px", "line-height": "20px"}
    label_text = merge_styles(text, {"font-weight": "bold", "color": context.secondary_color})
    value_text = merge_styles(text, {"color": block.color or context.text_color})
    value_text = merge_styles(value_text, omit(block.style, CELL_PROPERTIES))
    return table_builder.data_row(
        block.label,
        block.value,
        cell,
        merge_styles(cell, pick(block.style, ["background-color"])),
        context.text_styles(label_text),
        context.text_styles(value_text),
        label_class=context.css_class(ColorRole.SECONDARY_TEXT),
        value_class=context.css_class(ColorRole.TEXT),
    )


def _assemble(
    design: DesignBlockModel,
    opts: SynthesisOptions,
    config: EngineConfig,
    context: RenderContext,
    content: str,
) -> str:
    title = table_builder.escape_html(opts.title or config.title)
    background = opts.background_color or config.background_color
    width = config.content_width

    head: List[str] = [
        '<meta http-equiv="Content-Type" content="text/html; charset=UTF-8" />',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0"/>',
        '<meta name="x-apple-disable-message-reformatting"/>',
        *meta_tags(opts.include_dark_mode),
    ]
    if opts.include_outlook_fixes:
        head.append(outlook.non_mso_only('<meta http-equiv="X-UA-Compatible" content="IE=edge"/>'))
    head.append(f"<title>{title}</title>")
    if opts.include_outlook_fixes:
        head.extend([outlook.OFFICE_SETTINGS, outlook.MSO_STYLE])

    css = []
    if opts.include_dark_mode:
        css.append("    :root { color-scheme: light dark; supported-color-schemes: light dark; }")
    css.append(RESET_CSS)
    if opts.include_responsive:
        css.append(RESPONSIVE_CSS)
    if opts.include_dark_mode:
        css.append(dark_mode_block(design.colors.light, design.colors.dark))
        css.append(add_gmail_dark_mode_support(design.colors.dark))
        css.append(add_apple_mail_dark_mode_support(design.colors.dark))
    head.append('<style type="text/css">\n' + "\n".join(css) + "\n  </style>")

    html_attrs = 'xmlns="http://www.w3.org/1999/xhtml"'
    if opts.include_outlook_fixes:
        html_attrs += ' xmlns:v="urn:schemas-microsoft-com:vml" xmlns:o="urn:schemas-microsoft-com:office:office"'
    body_class = ' class="body"' if opts.include_dark_mode else ""
    bg_class = context.css_class(ColorRole.BACKGROUND)
    content_class = "mobile-full-width" + (f" {bg_class}" if bg_class else "")
    content_table = (
        f'<table {table_builder.PRESENTATION_ATTRS} width="{width}" align="center" class="{content_class}" '
        f'style="{style_string({"width": "100%", "max-width": f"{width}px", "background-color": context.body_color})}">\n'
        f"<tr>\n<td>\n{content}\n</td>\n</tr>\n</table>"
    )
    if opts.include_outlook_fixes:
        content_table = f"{outlook.ghost_table_open(width)}\n{content_table}\n{outlook.GHOST_TABLE_CLOSE}"

    lines = [
        outlook.XHTML_DOCTYPE,
        f'<html {html_attrs} lang="en">',
        "<head>",
        *(f"  {line}" for line in head),
        "</head>",
        f'<body{body_class} style="margin: 0; padding: 0; background-color: {background};">',
        f'<div role="article" aria-roledescription="email" lang="en" style="background-color: {background};">',
        f'<table {table_builder.PRESENTATION_ATTRS} width="100%" style="background-color: {background};">',
        "<tr>",
        '<td align="center" style="padding: 20px 0;">',
        content_table,
        "</td>",
        "</tr>",
        "</table>",
        "</div>",
        "</body>",
        "</html>",
    ]
    return "\n".join(lines) + "\n"


def _px(value: str) -> int:
    digits = "".join(ch for ch in value if ch.isdigit())
    return int(digits) if digits else 0
