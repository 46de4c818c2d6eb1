"""Error classifier — maps raw failures to stage-tagged, user-facing errors."""

from __future__ import annotations
from typing import Literal

from .types import AppError, Stage

ErrorContext = Literal["format", "convert", "redact", "preview"]

LOCAL_NOTICE = "All processing is completed locally."

PARSE_HINT = (
    "We could not parse your input. "
    "Please check JSON, CSV, or YAML syntax and try again."
)
CONVERT_HINT = (
    "We could not complete the conversion. "
    "Please verify tool selection and input format."
)
REDACT_HINT = (
    "We could not complete redaction. "
    "Please review your redaction rules and input content."
)

_PARSE_KEYWORDS = (
    "unexpected token",
    "unexpected end",
    "invalid csv",
    "unsupported format",
    "yaml",
    "json",
    "parse",
)


def classify(context: ErrorContext, error: object) -> AppError:
    """Never raises.  Redaction contexts always map to the redact stage."""
    if context in ("redact", "preview"):
        return AppError(Stage.REDACT, f"Redact error: {REDACT_HINT} {LOCAL_NOTICE}")

    if _is_parse_like(_raw_message(error)):
        return AppError(Stage.PARSE, f"Parse error: {PARSE_HINT} {LOCAL_NOTICE}")

    return AppError(Stage.CONVERT, f"Convert error: {CONVERT_HINT} {LOCAL_NOTICE}")


def _raw_message(error: object) -> str:
    if error is None:
        return ""
    try:
        return str(error).lower()
    except Exception:
        return ""


def _is_parse_like(raw: str) -> bool:
    return any(keyword in raw for keyword in _PARSE_KEYWORDS)
