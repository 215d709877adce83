from pathlib import Path
from itertools import product

import json
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from mailforge import EmailEngine, EngineConfig, auto_fix, generate, preview, validate

HERO = {
    "components": [
        {"type": "heading", "text": "Spring launch"},
        {"type": "image", "src": "https://example.com/hero.png"},
    ]
}

MODELS = [
    None,
    HERO,
    {
        "style": "classic",
        "colors": {"background": "#222222", "text": "#eeeeee"},
        "components": [
            {"type": "heading", "text": "Order summary", "level": 2},
            {"type": "dataRow", "label": "Item", "value": "Desk lamp"},
            {"type": "divider"},
            {"type": "spacer", "height": 30},
            {
                "type": "text",
                "text": "Left column",
                "children": [{"type": "button", "text": "Track", "href": "https://example.com/track"}],
            },
            {"type": "button", "text": "Reorder", "href": "https://example.com", "bbox": {"w": 180, "h": 44}},
        ],
    },
]


def test_generate_default():
    result = generate()

    assert result.ok
    assert result.metrics.accessibility.score >= 90
    assert result.metrics.grade == "A"
    assert result.as_dict()["success"] is True


def test_generate_reports_invalid_model():
    result = generate({"components": [{"type": "image"}]})

    assert not result.ok
    assert result.error.kind == "InvalidModel"
    assert "components.0.src" in result.error.missing_fields
    payload = result.as_dict()
    assert payload["success"] is False
    assert payload["error"]["missingFields"] == result.error.missing_fields


@pytest.mark.parametrize("operation", [validate, auto_fix])
def test_malformed_documents_come_back_as_errors(operation):
    result = operation("<p>not an email</p>")

    assert not result.ok
    assert result.error.kind == "MalformedDocument"
    assert result.as_dict() == {"success": False, "error": result.error.as_dict()}


@pytest.mark.parametrize("model", MODELS)
@pytest.mark.parametrize("outlook, dark_mode, responsive", list(product([True, False], repeat=3)))
def test_generated_documents_are_well_formed(model, outlook, dark_mode, responsive):
    options = {"includeOutlookFixes": outlook, "includeDarkMode": dark_mode, "includeResponsive": responsive}

    result = generate(model, options)
    assert result.ok
    assert result.metrics.structural_issues() == []
    assert result.metrics.compatibility.dark_mode is dark_mode
    assert result.metrics.compatibility.responsive is responsive


def test_generate_is_deterministic():
    assert generate(HERO).html == generate(HERO).html


def test_missing_alt_is_detected_and_repaired():
    generated = generate(HERO)
    issues = generated.metrics.accessibility.issues

    assert len(issues) == 1
    assert issues[0].severity == "critical"
    assert generated.metrics.accessibility.score == 85

    fixed = auto_fix(generated.html)
    assert fixed.ok
    assert fixed.summary.accessibility_fixes == 1
    assert fixed.summary.total == 1
    assert 'alt="Email image 1"' in fixed.html
    assert fixed.metrics.accessibility.score == 100


def test_preview_wraps_output():
    html = generate().html

    assert "force-dark" in preview(html, "mobile-dark")
    assert preview(html, "desktop-light") == html


def test_engine_uses_configured_policy(tmp_path):
    policy = tmp_path / "policy.json"
    policy.write_text(json.dumps({"weights": {"accessibility": 1.0, "compatibility": 0.0, "spam": 0.0}}), encoding="utf-8")
    engine = EmailEngine(EngineConfig(policy_path=policy))

    html = generate(HERO).html
    assert engine.validate(html).metrics.quality_score == 85
    assert validate(html).metrics.quality_score == 94


def test_results_serialize_to_json():
    html = generate(HERO).html

    for result in (generate(HERO), validate(html), auto_fix(html)):
        assert json.loads(json.dumps(result.as_dict()))["success"] is True
    assert set(auto_fix(html).as_dict()["summary"]) == {
        "tagsClosed",
        "structuralFixes",
        "cssNormalizations",
        "accessibilityFixes",
        "outlookHardening",
        "total",
        "unresolved",
    }
