"""
mailforge command line.

Usage:
    mailforge generate [--model design.json] [--no-dark-mode] [-o email.html]
    mailforge validate email.html
    mailforge autofix email.html [-o fixed.html]
    mailforge preview email.html --mode mobile-dark

Metrics are printed as JSON on stdout; the exit status is 1 when the engine
reports a failure.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List

from .compat.preview import PREVIEW_MODES
from .config import EngineConfig
from .pipeline import EmailEngine

LOGGER = logging.getLogger(__name__)


def _read(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def _write(html: str, output: str | None) -> None:
    if output:
        Path(output).write_text(html, encoding="utf-8")
        LOGGER.info("Output written to %s", output)


def _emit(payload: Dict) -> None:
    print(json.dumps(payload, indent=2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mailforge", description="Generate, validate and repair email HTML.")
    parser.add_argument("--log-level", default=None, help="Logging level (default: MAILFORGE_LOG_LEVEL or INFO)")
    parser.add_argument("--policy", default=None, help="JSON scoring policy overriding the built-in weights")
    commands = parser.add_subparsers(dest="command", required=True)

    gen = commands.add_parser("generate", help="Synthesize an email from a design model")
    gen.add_argument("--model", default=None, help="Design model JSON file (default: starter template)")
    gen.add_argument("--no-outlook", action="store_true", help="Skip MSO conditional comments and VML")
    gen.add_argument("--no-dark-mode", action="store_true", help="Skip dark-mode CSS")
    gen.add_argument("--no-responsive", action="store_true", help="Skip the mobile media query")
    gen.add_argument("--title", default=None, help="Document title")
    gen.add_argument("-o", "--output", default=None, help="Write the HTML here instead of into the JSON payload")

    val = commands.add_parser("validate", help="Score an email document")
    val.add_argument("file")

    fix = commands.add_parser("autofix", help="Repair auto-fixable issues")
    fix.add_argument("file")
    fix.add_argument("-o", "--output", default=None, help="Write the repaired HTML here")

    prev = commands.add_parser("preview", help="Wrap an email for a preview mode")
    prev.add_argument("file")
    prev.add_argument("--mode", choices=PREVIEW_MODES, required=True)
    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = EngineConfig()
    if args.policy:
        config.policy_path = Path(args.policy)
    logging.basicConfig(
        level=(args.log_level or config.log_level).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    engine = EmailEngine(config)

    if args.command == "generate":
        try:
            model = json.loads(_read(args.model)) if args.model else None
        except json.JSONDecodeError as exc:
            LOGGER.error("Model file %s is not valid JSON: %s", args.model, exc)
            return 1
        options = {
            "includeOutlookFixes": not args.no_outlook,
            "includeDarkMode": not args.no_dark_mode,
            "includeResponsive": not args.no_responsive,
            "title": args.title,
        }
        result = engine.generate(model, options)
        payload = result.as_dict()
        if result.ok and args.output:
            _write(result.html, args.output)
            payload.pop("html")
        _emit(payload)
        return 0 if result.ok else 1

    if args.command == "validate":
        result = engine.validate(_read(args.file))
        _emit(result.as_dict())
        return 0 if result.ok else 1

    if args.command == "autofix":
        result = engine.auto_fix(_read(args.file))
        payload = result.as_dict()
        if result.ok and args.output:
            _write(result.html, args.output)
            payload.pop("html")
        _emit(payload)
        return 0 if result.ok else 1

    print(engine.preview(_read(args.file), args.mode))
    return 0


if __name__ == "__main__":
    sys.exit(main())
