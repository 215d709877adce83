from pathlib import Path

import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from mailforge.compat.outlook import GHOST_TABLE_CLOSE, XHTML_DOCTYPE
from mailforge.errors import InvalidModelError
from mailforge.synthesis import merge_styles, style_string, synthesize


def _model(*components):
    return {"components": list(components)}


def test_default_document_skeleton():
    html = synthesize()

    assert html.startswith(XHTML_DOCTYPE)
    assert html.rstrip().endswith("</html>")
    assert '<meta name="color-scheme" content="light dark"/>' in html
    assert '<meta name="viewport"' in html
    assert 'lang="en"' in html
    assert 'width="600"' in html
    assert "<title>Email Template</title>" in html
    assert "Production Ready" in html


def test_synthesis_is_deterministic():
    model = _model({"type": "heading", "text": "Hi"}, {"type": "button", "text": "Go", "href": "https://example.com"})

    assert synthesize(model) == synthesize(model)


def test_title_is_escaped():
    html = synthesize(options={"title": "Tom & Jerry <News>"})

    assert "<title>Tom &amp; Jerry &lt;News&gt;</title>" in html


def test_block_text_is_emitted_verbatim():
    html = synthesize(_model({"type": "text", "text": "Hello <strong>World</strong>"}))

    assert "Hello <strong>World</strong>" in html


def test_dark_mode_toggle():
    on = synthesize()
    off = synthesize(options={"includeDarkMode": False})

    assert '<body class="body"' in on
    assert "[data-ogsc]" in on and ".force-dark" in on
    assert "[data-ogsc] .dark-mode-text {" in on and ".force-dark .dark-mode-bg {" in on
    assert 'class="dark-mode-text"' in on
    assert "color-scheme: light dark" in on

    assert 'class="body"' not in off
    assert "[data-ogsc]" not in off
    assert "prefers-color-scheme" not in off
    assert '<meta name="color-scheme" content="light"/>' in off


def test_outlook_toggle():
    on = synthesize()
    off = synthesize(options={"includeOutlookFixes": False})

    for marker in ("o:OfficeDocumentSettings", "xmlns:v=", "mso-line-height-rule: exactly", GHOST_TABLE_CLOSE):
        assert marker in on
        assert marker not in off


def test_responsive_toggle():
    assert "@media only screen and (max-width: 600px)" in synthesize()
    assert "@media only screen" not in synthesize(options={"includeResponsive": False})


def test_button_foreground_contrasts_with_background():
    html = synthesize(_model({"type": "button", "text": "Buy", "href": "https://example.com", "color": "#ffcc00"}))

    assert "color: #333333; background-color: #ffcc00" in html
    assert 'bgcolor="#ffcc00"' in html


def test_sized_button_gets_vml_for_outlook():
    button = {"type": "button", "text": "Go", "href": "https://example.com", "bbox": {"w": 200, "h": 40}}

    html = synthesize(_model(button))
    assert "v:roundrect" in html
    assert 'arcsize="15%"' in html
    assert "mso-hide: all" in html

    plain = synthesize(_model(button), {"includeOutlookFixes": False})
    assert "v:roundrect" not in plain


def test_image_without_alt_keeps_alt_absent():
    html = synthesize(_model({"type": "image", "src": "https://example.com/hero.png"}))

    assert '<img src="https://example.com/hero.png" width="560"' in html


def test_image_width_is_capped_by_bbox():
    html = synthesize(_model({"type": "image", "src": "https://example.com/a.png", "alt": "A", "bbox": {"w": 300, "h": 100}}))

    assert '<img src="https://example.com/a.png" alt="A" width="300" height="100"' in html


def test_children_render_as_stacking_columns():
    parent = {
        "type": "text",
        "text": "Left",
        "children": [{"type": "text", "text": "Right"}],
    }

    html = synthesize(_model(parent))
    assert html.count('class="stack-column"') == 2
    assert "max-width: 50%" in html


def test_cell_padding_override():
    html = synthesize(_model({"type": "text", "text": "Hi", "style": {"padding": "30px 20px"}}))

    assert '<td style="padding: 30px 20px">' in html


def test_spacer_and_data_row():
    html = synthesize(
        _model(
            {"type": "spacer", "height": 40},
            {"type": "dataRow", "label": "Size", "value": "Large"},
        )
    )

    assert '<td height="40" style="font-size: 40px; line-height: 40px;">' in html
    assert ">Size</p>" in html
    assert ">Large</p>" in html


def test_invalid_model_raises():
    with pytest.raises(InvalidModelError):
        synthesize({"components": []})


def test_style_helpers_keep_declaration_order():
    merged = merge_styles({"margin": "0", "color": "#000"}, {"color": "#111", "font-size": "14px"})

    assert style_string(merged) == "margin: 0; color: #111; font-size: 14px"
    assert style_string({"color": None, "margin": "0"}) == "margin: 0"
