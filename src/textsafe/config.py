"""YAML/dict config loader for redaction settings.

Accepts the camelCase shape a client UI sends as JSON, or snake_case keys,
optionally nested under a top-level ``textsafe`` key.

Example YAML:

    textsafe:
      quick_rules:
        email: true
        phone: true
        ip: false
        token: true
      include_advanced: true
      advanced:
        mask_style: HASH          # REDACTED | ASTERISKS | HASH
        json_keys:
          - password
          - apiKey
        custom_regex_rules:
          - name: account
            pattern: 'ACC-\\d{4}'
            flags: i
"""

from __future__ import annotations
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError
from .types import (
    AdvancedState,
    CustomRegexRule,
    MaskStyle,
    QuickRules,
    RedactionConfig,
)


def _get(data: dict[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _load_quick_rules(data: dict[str, Any]) -> QuickRules:
    return QuickRules(
        email=bool(data.get("email", True)),
        phone=bool(data.get("phone", True)),
        ip=bool(data.get("ip", True)),
        token=bool(data.get("token", True)),
    )


def _load_custom_rule(data: Any) -> CustomRegexRule:
    if not isinstance(data, dict) or not isinstance(data.get("pattern"), str):
        raise ConfigurationError(f"Custom regex rule needs a string 'pattern': {data!r}")
    flags = data.get("flags")
    return CustomRegexRule(
        name=str(data.get("name", "")),
        pattern=data["pattern"],
        flags=None if flags is None else str(flags),
    )


def _load_advanced(data: dict[str, Any]) -> AdvancedState:
    json_keys = _get(data, "jsonKeys", "json_keys", [])
    if not isinstance(json_keys, list):
        raise ConfigurationError("'jsonKeys' must be a list of strings")

    custom_rules = _get(data, "customRegexRules", "custom_regex_rules", [])
    if not isinstance(custom_rules, list):
        raise ConfigurationError("'customRegexRules' must be a list")

    style = _get(data, "maskStyle", "mask_style", MaskStyle.REDACTED.value)
    try:
        mask_style = MaskStyle(str(style).upper())
    except ValueError:
        raise ConfigurationError(f"Unknown mask style: {style!r}") from None

    return AdvancedState(
        json_keys=tuple(str(k) for k in json_keys),
        custom_regex_rules=tuple(_load_custom_rule(r) for r in custom_rules),
        mask_style=mask_style,
    )


def load_config(data: dict[str, Any] | None) -> RedactionConfig:
    """Normalize a config dict (from YAML or a JSON request body)."""
    data = data or {}
    # Support nested under "textsafe" key or flat
    if "textsafe" in data:
        data = data["textsafe"] or {}

    if not isinstance(data, dict):
        raise ConfigurationError("Redaction config must be a mapping")

    quick = _get(data, "quickRules", "quick_rules", {}) or {}
    advanced = data.get("advanced") or {}
    if not isinstance(quick, dict) or not isinstance(advanced, dict):
        raise ConfigurationError("'quickRules' and 'advanced' must be mappings")

    return RedactionConfig(
        quick_rules=_load_quick_rules(quick),
        advanced=_load_advanced(advanced),
        include_advanced=bool(_get(data, "includeAdvanced", "include_advanced", False)),
    )


def load_from_yaml(path: str | Path) -> RedactionConfig:
    """Load config from a YAML file."""
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid config file {path}: {exc}") from exc
    return load_config(data)
