from pathlib import Path

import json
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from mailforge.cli import main


def _stdout_json(capsys):
    return json.loads(capsys.readouterr().out)


def test_generate_writes_html_and_prints_metrics(tmp_path, capsys):
    output = tmp_path / "email.html"

    assert main(["generate", "--title", "Launch", "-o", str(output)]) == 0
    payload = _stdout_json(capsys)
    assert payload["success"] is True
    assert "html" not in payload
    assert payload["metrics"]["grade"] == "A"
    assert "<title>Launch</title>" in output.read_text(encoding="utf-8")


def test_generate_from_model_file(tmp_path, capsys):
    model = tmp_path / "design.json"
    model.write_text(json.dumps({"components": [{"type": "text", "text": "From file"}]}), encoding="utf-8")

    assert main(["generate", "--model", str(model), "--no-dark-mode"]) == 0
    payload = _stdout_json(capsys)
    assert "From file" in payload["html"]
    assert payload["metrics"]["features"]["darkMode"] is False


def test_generate_rejects_bad_models(tmp_path, capsys):
    not_json = tmp_path / "broken.json"
    not_json.write_text("{", encoding="utf-8")
    assert main(["generate", "--model", str(not_json)]) == 1
    capsys.readouterr()

    invalid = tmp_path / "invalid.json"
    invalid.write_text(json.dumps({"components": []}), encoding="utf-8")
    assert main(["generate", "--model", str(invalid)]) == 1
    assert _stdout_json(capsys)["error"]["kind"] == "InvalidModel"


def test_validate_and_autofix(tmp_path, capsys):
    source = tmp_path / "email.html"
    source.write_text(
        '<html><body><table><tr><td><img src="https://example.com/a.png" width="10"></td></tr></table></body></html>',
        encoding="utf-8",
    )
    fixed = tmp_path / "fixed.html"

    assert main(["validate", str(source)]) == 0
    before = _stdout_json(capsys)["metrics"]

    assert main(["autofix", str(source), "-o", str(fixed)]) == 0
    payload = _stdout_json(capsys)
    assert payload["summary"]["accessibilityFixes"] == 3
    assert payload["metrics"]["qualityScore"] >= before["qualityScore"]
    assert 'alt="Email image 1"' in fixed.read_text(encoding="utf-8")


def test_validate_malformed_file(tmp_path, capsys):
    source = tmp_path / "broken.html"
    source.write_text("<p>no closing html</p>", encoding="utf-8")

    assert main(["validate", str(source)]) == 1
    assert _stdout_json(capsys)["error"]["kind"] == "MalformedDocument"


def test_preview(tmp_path, capsys):
    source = tmp_path / "email.html"
    source.write_text("<html><body>Hi</body></html>", encoding="utf-8")

    assert main(["preview", str(source), "--mode", "desktop-dark"]) == 0
    assert 'class="force-dark"' in capsys.readouterr().out
