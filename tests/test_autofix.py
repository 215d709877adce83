from pathlib import Path

import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from mailforge.autofix import RULES, auto_fix
from mailforge.compat.outlook import GHOST_TABLE_CLOSE, XHTML_DOCTYPE
from mailforge.config import DEFAULT_POLICY
from mailforge.errors import MalformedDocumentError
from mailforge.synthesis import synthesize
from mailforge.validation import parse_document, validate

BROKEN = """<html>
<head>
<title>Broken</title>
</head>
<body>
<table width="600">
<tr>
<td style="color: #111111; display: flex; color: #111111"><p>Hello
</tr>
<tr>
<td><img src="https://example.com/a.png" width="100"><span>Text</span></div></td>
</tr>
</table>
<script>track()</script>
</body>
</html>
"""


def wrap(body: str) -> str:
    return (
        f"{XHTML_DOCTYPE}\n"
        '<html lang="en">\n<head>\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0"/>\n'
        "</head>\n<body>\n<!--[if mso]><![endif]-->\n"
        f"{body}\n</body>\n</html>\n"
    )


def test_broken_document_is_repaired_rule_by_rule():
    result = auto_fix(BROKEN)

    assert result.summary.counts() == {
        "tagsClosed": 2,
        "structuralFixes": 2,
        "cssNormalizations": 1,
        "accessibilityFixes": 3,
        "outlookHardening": 3,
    }
    assert result.summary.total == 11
    assert result.summary.unresolved == []

    html = result.html
    assert html.startswith(XHTML_DOCTYPE + "\n")
    assert '<html lang="en">' in html
    assert '<td style="color: #111111"><p>Hello\n</p></td></tr>' in html
    assert 'alt="Email image 1"' in html
    assert 'role="presentation" border="0" cellpadding="0" cellspacing="0"' in html
    assert "</div>" not in html
    assert "<script>" not in html
    assert GHOST_TABLE_CLOSE in html
    assert "Hello" in html and "Text" in html


def test_repaired_document_validates_clean():
    result = auto_fix(BROKEN)

    assert result.metrics.structural_issues() == []
    assert result.metrics.accessibility.score == 100
    assert all(result.metrics.compatibility.clients.values())
    assert result.metrics == validate(result.html)


@pytest.mark.parametrize(
    "source",
    [
        BROKEN,
        synthesize(),
        synthesize(options={"includeOutlookFixes": False}),
        wrap('<p style="display: grid; position: absolute">Grid</p>'),
        wrap('<img src="https://example.com/a.png" alt="" width="10" />'),
    ],
)
def test_auto_fix_is_idempotent(source):
    once = auto_fix(source)
    twice = auto_fix(once.html)

    assert twice.html == once.html
    assert twice.summary.is_clean()
    assert twice.summary.as_dict()["total"] == 0


@pytest.mark.parametrize(
    "source",
    [
        BROKEN,
        synthesize(options={"includeOutlookFixes": False}),
        wrap("<table><tr><td>Hi</table></span>"),
    ],
)
def test_auto_fix_never_lowers_quality(source):
    assert auto_fix(source).metrics.quality_score >= validate(source).quality_score


def test_repairs_that_would_lower_quality_are_rolled_back():
    tables = '<table role="presentation"><tr><td>Hi</td></tr></table>\n' * 40
    filler = DEFAULT_POLICY.gmail_clip_bytes - 10 - len(wrap(tables + "<!--  -->").encode("utf-8"))
    source = wrap(tables + "<!-- " + "x" * filler + " -->")

    before = validate(source)
    assert before.compatibility.clients["gmail"] is True
    assert any(issue.fix_rule == "outlookHardening" for issue in before.warnings)

    result = auto_fix(source)
    assert result.metrics.quality_score >= before.quality_score
    assert result.metrics.compatibility.clients["gmail"] is True
    assert result.summary.is_clean()
    assert result.html == source


def test_clean_document_comes_back_untouched():
    html = synthesize()
    result = auto_fix(html)

    assert result.html == html
    assert result.summary.is_clean()


def test_empty_alt_gets_numbered_placeholder():
    images = (
        '<img src="https://example.com/a.png" alt="Logo" width="10" />'
        '<img src="https://example.com/b.png" alt="" width="10" />'
    )

    html = auto_fix(wrap(images)).html
    assert 'alt="Logo"' in html
    assert 'alt="Email image 2"' in html


def test_loose_content_is_kept_and_reported():
    result = auto_fix(wrap("<p>Loose</p></span>"))

    assert result.summary.structural_fixes == 1
    assert "<p>Loose</p>" in result.html
    assert "</span>" not in result.html
    assert len(result.summary.unresolved) == 1
    assert result.summary.unresolved[0].category == "structure"
    assert result.summary.as_dict()["unresolved"][0]["snippet"] == "Loose"


def test_report_only_findings_are_left_alone():
    result = auto_fix(wrap('<table role="presentation" border="0" cellpadding="0" cellspacing="0"><tr><td style="float: left">Hi</td></tr></table>'))

    assert 'style="float: left"' in result.html
    assert result.summary.is_clean()


def test_stray_html_end_tag_is_not_removed():
    source = wrap("<p>Hi</p>").replace("</body>", "</html></body>")

    result = auto_fix(source)
    assert result.html.count("</html>") == 2
    assert any(
        not issue.auto_fixable and "</html>" in issue.message for issue in result.metrics.structural_issues()
    )


def test_malformed_input_raises():
    with pytest.raises(MalformedDocumentError):
        auto_fix("<p>No document</p>")


def test_every_rule_is_registered():
    assert list(RULES) == ["tagsClosed", "structuralFixes", "cssNormalizations", "accessibilityFixes", "outlookHardening"]


def test_rules_edit_the_arena_in_place():
    document = parse_document(wrap('<table><tr><td>Hi</td></tr></table>'))
    issues = [issue for issue in validate(document.source).accessibility.issues if issue.auto_fixable]

    assert RULES["accessibilityFixes"](document, issues, 600) == 1
    assert '<table role="presentation">' in document.serialize()
