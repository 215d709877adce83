from pathlib import Path

import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from mailforge.design import ColorRole, StyleProperty, load_model, load_options, starter_model
from mailforge.design.defaults import DEFAULT_DARK_COLORS, DEFAULT_LIGHT_COLORS
from mailforge.design.models import ButtonBlock, HeadingBlock, TextBlock
from mailforge.errors import InvalidModelError


def test_starter_model_is_heading_text_button():
    model = starter_model()

    assert [type(block) for block in model.components] == [HeadingBlock, TextBlock, ButtonBlock]
    assert model.components[2].href == "https://example.com"
    assert model.style == "modern"


def test_load_model_reports_missing_fields_with_paths():
    payload = {"components": [{"type": "heading", "level": 2}, {"type": "image"}]}

    with pytest.raises(InvalidModelError) as excinfo:
        load_model(payload)

    assert "components.0.text" in excinfo.value.missing_fields
    assert "components.1.src" in excinfo.value.missing_fields
    assert excinfo.value.kind == "InvalidModel"


def test_load_model_requires_components():
    with pytest.raises(InvalidModelError) as excinfo:
        load_model({"components": []})

    assert excinfo.value.missing_fields == ["components"]


def test_style_keys_accept_camel_case_and_reject_unknown_properties():
    model = load_model({"components": [{"type": "text", "text": "Hi", "style": {"fontSize": "18px"}}]})
    assert model.components[0].style == {StyleProperty.FONT_SIZE: "18px"}

    with pytest.raises(InvalidModelError) as excinfo:
        load_model({"components": [{"type": "text", "text": "Hi", "style": {"textShadow": "1px"}}]})
    assert any(field.startswith("components.0.style") for field in excinfo.value.missing_fields)


def test_block_color_must_be_hex():
    with pytest.raises(InvalidModelError) as excinfo:
        load_model({"components": [{"type": "text", "text": "Hi", "color": "red"}]})

    assert "components.0.color" in excinfo.value.missing_fields


def test_flat_palette_fills_dark_side():
    model = load_model(
        {
            "components": [{"type": "text", "text": "Hi"}],
            "colors": {"text": "#222", "link": "#0066CC"},
        }
    )

    assert model.colors.light[ColorRole.TEXT] == "#222222"
    assert model.colors.light[ColorRole.LINK] == "#0066cc"
    assert model.colors.dark[ColorRole.TEXT] == "#ffffff"
    assert model.colors.dark[ColorRole.LINK] == "#4da6ff"
    assert set(model.colors.light) == set(model.colors.dark)


def test_omitted_colors_fall_back_to_default_palettes():
    model = load_model({"components": [{"type": "text", "text": "Hi"}]})

    assert {role.value: hex_value for role, hex_value in model.colors.light.items()} == DEFAULT_LIGHT_COLORS
    assert {role.value: hex_value for role, hex_value in model.colors.dark.items()} == DEFAULT_DARK_COLORS
    assert len(starter_model().colors.dark) == len(ColorRole)


def test_unpaired_palette_is_rejected():
    payload = {
        "components": [{"type": "text", "text": "Hi"}],
        "colors": {"light": {"text": "#000000"}, "dark": {}},
    }

    with pytest.raises(InvalidModelError) as excinfo:
        load_model(payload)

    assert "colors" in excinfo.value.missing_fields


def test_options_use_camel_case_and_ignore_unknown_keys():
    options = load_options({"includeDarkMode": False, "bogus": 1, "backgroundColor": "#EEE"})

    assert options.include_dark_mode is False
    assert options.include_outlook_fixes is True
    assert options.include_responsive is True
    assert options.background_color == "#eeeeee"


def test_invalid_option_color_is_reported():
    with pytest.raises(InvalidModelError) as excinfo:
        load_options({"backgroundColor": "blue"})

    assert "backgroundColor" in excinfo.value.missing_fields
