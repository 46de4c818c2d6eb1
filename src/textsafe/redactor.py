"""Redaction engine — detection (preview) and application over plain text.

Usage:
    from textsafe import RedactionConfig, detect_sensitive, apply_redaction

    config = RedactionConfig()                  # all quick rules on
    preview = detect_sensitive("Mail a@b.com", config)
    preview.summary.emails                      # 1
    apply_redaction("Mail a@b.com", config)     # "Mail [REDACTED]"

Rules run in a fixed order (email, phone, ip, token, then custom rules in
configured order).  In advanced mode, configured JSON keys are matched
case-insensitively against every object key of a JSON document.
"""

from __future__ import annotations
import json
import logging
import struct
from typing import Any, Iterable

from .converters import dump_json, parse_json
from .exceptions import ParseError
from .patterns import build_rules
from .types import (
    DetectResult,
    MaskStyle,
    PreviewSample,
    RedactionConfig,
)

logger = logging.getLogger(__name__)

MAX_SAMPLE = 10

_MASKS = {
    MaskStyle.REDACTED: "[REDACTED]",
    MaskStyle.ASTERISKS: "***",
}


def rolling_hash(value: str) -> str:
    """32-bit ``h * 31 + unit`` hash over UTF-16 code units, as 8 hex digits.

    A content fingerprint, not a cryptographic hash.
    """
    h = 0
    for (unit,) in struct.iter_unpack("<H", value.encode("utf-16-le", "surrogatepass")):
        h = (h * 31 + unit) & 0xFFFFFFFF
    return f"{h:08x}"


def mask_value(value: str, style: MaskStyle) -> str:
    """Return the replacement text for a matched span."""
    if style == MaskStyle.HASH:
        return f"#{rolling_hash(value)}"
    return _MASKS[style]


def detect_sensitive(text: str, config: RedactionConfig) -> DetectResult:
    """Count every match per kind and keep the first MAX_SAMPLE as samples.

    Raises RuleCompileError if a custom pattern is invalid.
    """
    result = DetectResult()
    style = config.advanced.mask_style

    for rule in build_rules(config):
        for m in rule.matcher.finditer(text):
            value = m.group()
            result.summary.add(rule.kind)
            if len(result.sample) < MAX_SAMPLE:
                result.sample.append(PreviewSample(
                    kind=rule.kind,
                    before=value,
                    after=mask_value(value, style),
                ))

    key_set = _json_key_set(config)
    if key_set:
        result.summary.customs += _count_json_keys(text, key_set)

    return result


def apply_redaction(text: str, config: RedactionConfig) -> str:
    """Mask every match of every rule, then mask values of configured JSON keys.

    Each rule sees the text as left by the rules before it.  The JSON key
    pass is skipped silently when the text is not JSON.
    """
    style = config.advanced.mask_style
    redacted = text

    for rule in build_rules(config):
        redacted = rule.matcher.sub(lambda value: mask_value(value, style), redacted)

    key_set = _json_key_set(config)
    if key_set:
        redacted = _redact_json_keys(redacted, key_set, style)

    return redacted


# ----------------------------------------------------------------------
# JSON keys
# ----------------------------------------------------------------------

def _json_key_set(config: RedactionConfig) -> frozenset[str]:
    if not config.include_advanced or not config.advanced.json_keys:
        return frozenset()
    return _normalize_keys(config.advanced.json_keys)


def _normalize_keys(keys: Iterable[str]) -> frozenset[str]:
    return frozenset(k.strip().lower() for k in keys if k.strip())


def _try_parse_json(text: str) -> tuple[bool, Any]:
    try:
        return True, parse_json(text)
    except ParseError:
        return False, None


def _count_json_keys(text: str, key_set: frozenset[str]) -> int:
    ok, document = _try_parse_json(text)
    if not ok:
        logger.debug("JSON key detection skipped: input is not JSON")
        return 0
    return count_key_matches(document, key_set)


def count_key_matches(value: Any, key_set: frozenset[str]) -> int:
    """Count object keys in ``key_set`` anywhere in a JSON value."""
    if isinstance(value, dict):
        total = 0
        for key, item in value.items():
            if key.lower() in key_set:
                total += 1
            total += count_key_matches(item, key_set)
        return total
    if isinstance(value, list):
        return sum(count_key_matches(item, key_set) for item in value)
    return 0


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def redact_by_keys(value: Any, key_set: frozenset[str], style: MaskStyle) -> Any:
    """Return a copy of ``value`` with every matching key's value masked."""
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for key, item in value.items():
            if key.lower() in key_set:
                out[key] = mask_value(_stringify(item), style)
            else:
                out[key] = redact_by_keys(item, key_set, style)
        return out
    if isinstance(value, list):
        return [redact_by_keys(item, key_set, style) for item in value]
    return value


def _redact_json_keys(text: str, key_set: frozenset[str], style: MaskStyle) -> str:
    ok, document = _try_parse_json(text)
    if not ok:
        logger.debug("JSON key redaction skipped: input is not JSON")
        return text
    return dump_json(redact_by_keys(document, key_set, style))
