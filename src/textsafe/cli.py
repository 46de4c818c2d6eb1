"""CLI interface for textsafe.

Usage:
    # Convert (stdin: source text, stdout: converted text)
    echo '[{"name":"Alice","age":20}]' | textsafe convert --tool json-csv

    # Preview what would be redacted (stdout: JSON summary + sample)
    echo 'Mail me at john@x.com' | textsafe detect

    # Redact text (stdout: redacted text)
    echo 'Mail me at john@x.com' | textsafe --config redact.yaml redact

Failures are printed as the user-facing classified message on stderr and
exit with status 1.  Nothing leaves the machine.
"""

from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from dataclasses import replace

from .classifier import classify
from .config import load_config, load_from_yaml
from .converters import convert
from .redactor import apply_redaction, detect_sensitive
from .types import MaskStyle, RedactionConfig, ToolId

logger = logging.getLogger(__name__)

DEFAULT_LOG_LEVEL = os.environ.get("TEXTSAFE_LOG_LEVEL", "WARNING")


def _build_config(args: argparse.Namespace) -> RedactionConfig:
    config = load_from_yaml(args.config) if args.config else load_config({})
    if args.mask_style:
        advanced = replace(config.advanced, mask_style=MaskStyle(args.mask_style))
        config = replace(config, advanced=advanced)
    return config


def cmd_convert(args: argparse.Namespace) -> None:
    """Convert stdin with the selected tool."""
    text = sys.stdin.read()
    sys.stdout.write(convert(args.tool, text))


def cmd_detect(args: argparse.Namespace) -> None:
    """Report per-kind counts and a sample of matches."""
    config = _build_config(args)
    text = sys.stdin.read()
    result = detect_sensitive(text, config)
    json.dump(result.as_dict(), sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_redact(args: argparse.Namespace) -> None:
    """Redact stdin."""
    config = _build_config(args)
    text = sys.stdin.read()
    sys.stdout.write(apply_redaction(text, config))


# Classifier context per command
_CONTEXTS = {
    "convert": "convert",
    "detect": "preview",
    "redact": "redact",
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="textsafe",
        description="Local JSON/CSV/YAML conversion and sensitive-data redaction",
    )
    parser.add_argument("--config", default="", help="YAML redaction config")
    parser.add_argument(
        "--mask-style",
        choices=[s.value for s in MaskStyle],
        help="Override the config's mask style",
    )
    parser.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, help="Logging level")

    sub = parser.add_subparsers(dest="command", required=True)
    p_convert = sub.add_parser("convert", help="Convert stdin between JSON, CSV and YAML")
    p_convert.add_argument(
        "--tool",
        choices=[t.value for t in ToolId],
        default=ToolId.FORMAT.value,
        help="Conversion tool (default: format)",
    )
    sub.add_parser("detect", help="Preview sensitive data in stdin (JSON output)")
    sub.add_parser("redact", help="Redact sensitive data in stdin")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    cmds = {
        "convert": cmd_convert,
        "detect": cmd_detect,
        "redact": cmd_redact,
    }
    try:
        cmds[args.command](args)
    except Exception as exc:
        logger.debug("%s failed", args.command, exc_info=True)
        app_error = classify(_CONTEXTS[args.command], exc)
        sys.stderr.write(f"{app_error.message}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
