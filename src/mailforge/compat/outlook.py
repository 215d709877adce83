"""Outlook (Word rendering engine) fragments: MSO conditionals and VML."""

from __future__ import annotations

from typing import Final, Tuple

MSO_FONT_STACK: Final = "Arial, Helvetica, sans-serif"

XHTML_DOCTYPE: Final = (
    '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN" '
    '"http://www.w3.org/TR/xhtml1/DTD/xhtml1-transitional.dtd">'
)

# Attributes Outlook needs on every layout table to avoid phantom gaps.
TABLE_SAFETY_ATTRS: Final[Tuple[Tuple[str, str], ...]] = (
    ("border", "0"),
    ("cellpadding", "0"),
    ("cellspacing", "0"),
)

OFFICE_SETTINGS: Final = """<!--[if mso]>
  <xml>
    <o:OfficeDocumentSettings>
      <o:AllowPNG/>
      <o:PixelsPerInch>96</o:PixelsPerInch>
    </o:OfficeDocumentSettings>
  </xml>
  <![endif]-->"""

MSO_STYLE: Final = """<!--[if mso]>
  <style type="text/css">
    body, table, td, a { font-family: Arial, Helvetica, sans-serif !important; }
  </style>
  <![endif]-->"""

GHOST_TABLE_CLOSE: Final = "<!--[if (gte mso 9)|(IE)]></td></tr></table><![endif]-->"


def mso_only(content: str) -> str:
    return f"<!--[if mso]>{content}<![endif]-->"


def non_mso_only(content: str) -> str:
    return f"<!--[if !mso]><!-->{content}<!--<![endif]-->"


def ghost_table_open(width: int) -> str:
    """Fixed-width table Outlook renders in place of a max-width div."""
    return (
        "<!--[if (gte mso 9)|(IE)]>"
        f'<table role="presentation" align="center" border="0" cellspacing="0" cellpadding="0" width="{width}">'
        f'<tr><td align="center" valign="top" width="{width}">'
        "<![endif]-->"
    )


def is_mso_conditional(comment: str) -> bool:
    """True for the body of an <!--[if ...mso...]> comment."""
    head = comment.strip().lower()
    return head.startswith("[if") and "mso" in head.split("]", 1)[0]


def vml_button(
    text: str,
    href: str,
    background: str,
    foreground: str,
    width: int,
    height: int,
    radius: int,
    font_size: str = "16px",
) -> str:
    arcsize = round(radius / height * 100) if height else 0
    return mso_only(
        f'<v:roundrect xmlns:v="urn:schemas-microsoft-com:vml" xmlns:w="urn:schemas-microsoft-com:office:word" '
        f'href="{href}" style="height:{height}px;v-text-anchor:middle;width:{width}px;" arcsize="{arcsize}%" '
        f'stroke="f" fillcolor="{background}"><w:anchorlock/>'
        f'<center style="color:{foreground};font-family:{MSO_FONT_STACK};font-size:{font_size};font-weight:bold;">'
        f"{text}</center></v:roundrect>"
    )
