"""
Table-based fragment builders.

Every builder is a pure function of its arguments and returns a complete,
balanced fragment; blocks never rely on markup emitted by their siblings.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..compat import outlook
from .styles import StyleMap, style_string

PRESENTATION_ATTRS = 'role="presentation" border="0" cellpadding="0" cellspacing="0"'

_ESCAPES = {"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#039;"}


def escape_html(text: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def _attrs(css_class: Optional[str] = None, styles: Optional[StyleMap] = None) -> str:
    parts = []
    if css_class:
        parts.append(f' class="{css_class}"')
    if styles:
        rendered = style_string(styles)
        if rendered:
            parts.append(f' style="{rendered}"')
    return "".join(parts)


def wrap_in_table(content: str, cell_styles: Optional[StyleMap] = None, css_class: Optional[str] = None) -> str:
    """Single full-width cell around arbitrary content."""
    return (
        f'<table {PRESENTATION_ATTRS} width="100%"{_attrs(css_class)}>\n'
        f"<tr>\n<td{_attrs(None, cell_styles)}>\n{content}\n</td>\n</tr>\n</table>"
    )


def heading(text: str, level: int, styles: StyleMap, css_class: Optional[str] = None) -> str:
    return f"<h{level}{_attrs(css_class, styles)}>{text}</h{level}>"


def paragraph(text: str, styles: StyleMap, css_class: Optional[str] = None) -> str:
    return f"<p{_attrs(css_class, styles)}>{text}</p>"


def image(
    src: str,
    alt: Optional[str],
    width: int,
    height: Optional[int],
    styles: StyleMap,
    href: Optional[str] = None,
) -> str:
    attributes = [f'src="{src}"']
    if alt is not None:
        attributes.append(f'alt="{alt}"')
    attributes.append(f'width="{width}"')
    if height:
        attributes.append(f'height="{height}"')
    tag = f"<img {' '.join(attributes)}{_attrs(None, styles)} />"
    if href:
        return f'<a href="{href}" target="_blank">{tag}</a>'
    return tag


def button(
    text: str,
    href: str,
    cell_styles: StyleMap,
    link_styles: StyleMap,
    background: str,
    align: str = "center",
    padding_px: int = 24,
) -> str:
    """
    Bulletproof button: the padding lives on the anchor, and Outlook gets
    letter-spaced &nbsp; spacers because Word ignores padding on inline elements.
    """
    spacer = f'<i style="letter-spacing: {padding_px}px; mso-font-width: -100%; mso-text-raise: 30pt;">&nbsp;</i>'
    closing_spacer = f'<i style="letter-spacing: {padding_px}px; mso-font-width: -100%;">&nbsp;</i>'
    return (
        f'<table {PRESENTATION_ATTRS} align="{align}">\n'
        f'<tr>\n<td align="center" bgcolor="{background}"{_attrs(None, cell_styles)}>\n'
        f'<a href="{href}" target="_blank"{_attrs(None, link_styles)}>'
        f"{outlook.mso_only(spacer)}"
        f'<span style="mso-text-raise: 15pt;">{text}</span>'
        f"{outlook.mso_only(closing_spacer)}"
        "</a>\n</td>\n</tr>\n</table>"
    )


def vml_button(
    text: str,
    href: str,
    link_styles: StyleMap,
    background: str,
    foreground: str,
    width: int,
    height: int,
    radius: int,
    font_size: str,
    align: str = "center",
) -> str:
    """Pixel-sized button: VML roundrect for Outlook, hidden anchor for everyone else."""
    hidden = dict(link_styles)
    hidden["mso-hide"] = "all"
    return (
        f'<table {PRESENTATION_ATTRS} align="{align}">\n<tr>\n<td align="center">\n'
        f"{outlook.vml_button(text, href, background, foreground, width, height, radius, font_size)}"
        f'<a href="{href}" target="_blank"{_attrs(None, hidden)}>{text}</a>\n'
        "</td>\n</tr>\n</table>"
    )


def divider(color: str, css_class: Optional[str] = None) -> str:
    return (
        f'<table {PRESENTATION_ATTRS} width="100%">\n<tr>\n'
        f'<td{_attrs(css_class, {"border-top": f"1px solid {color}", "font-size": "1px", "line-height": "1px"})}>&nbsp;</td>\n'
        "</tr>\n</table>"
    )


def spacer(height: int) -> str:
    return (
        f'<table {PRESENTATION_ATTRS} width="100%">\n<tr>\n'
        f'<td height="{height}" style="font-size: {height}px; line-height: {height}px;">&nbsp;</td>\n'
        "</tr>\n</table>"
    )


def data_row(
    label: str,
    value: str,
    label_cell: StyleMap,
    value_cell: StyleMap,
    label_text: StyleMap,
    value_text: StyleMap,
    label_width: int = 180,
    label_class: Optional[str] = None,
    value_class: Optional[str] = None,
) -> str:
    """Two cells that never stack, for product details and order summaries."""
    return (
        f'<table {PRESENTATION_ATTRS} width="100%">\n<tr>\n'
        f'<td align="left" valign="top" width="{label_width}"{_attrs(None, label_cell)}>'
        f"{paragraph(label, label_text, label_class)}</td>\n"
        f'<td align="left" valign="top"{_attrs(None, value_cell)}>'
        f"{paragraph(value, value_text, value_class)}</td>\n"
        "</tr>\n</table>"
    )


def columns(contents: Sequence[str], include_outlook: bool) -> str:
    """
    Side-by-side columns that collapse to one per row under the responsive
    breakpoint. Outlook ignores inline-block, so it gets a ghost table row.
    """
    width = 100 // max(len(contents), 1)
    parts: List[str] = []
    if include_outlook:
        parts.append(f"<!--[if (gte mso 9)|(IE)]><table {PRESENTATION_ATTRS} width=\"100%\"><tr><![endif]-->")
    for content in contents:
        if include_outlook:
            parts.append(f'<!--[if (gte mso 9)|(IE)]><td valign="top" width="{width}%"><![endif]-->')
        parts.append(
            f'<div class="stack-column" style="display: inline-block; width: 100%; max-width: {width}%; vertical-align: top;">\n'
            f"{wrap_in_table(content, {'padding': '5px 10px'})}\n</div>"
        )
        if include_outlook:
            parts.append("<!--[if (gte mso 9)|(IE)]></td><![endif]-->")
    if include_outlook:
        parts.append("<!--[if (gte mso 9)|(IE)]></tr></table><![endif]-->")
    return wrap_in_table("\n".join(parts), {"padding": "0", "font-size": "0"})


def join_blocks(fragments: Iterable[str]) -> str:
    return "\n".join(fragment for fragment in fragments if fragment)
