"""Shared fixtures for textsafe tests."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from textsafe.types import (  # noqa: E402
    AdvancedState,
    CustomRegexRule,
    MaskStyle,
    QuickRules,
    RedactionConfig,
)

@pytest.fixture
def make_config():
    """Build a RedactionConfig: all quick rules on, advanced off by default."""

    def _make(
        *,
        quick_rules: QuickRules | None = None,
        include_advanced: bool = False,
        json_keys: tuple[str, ...] = (),
        custom_rules: tuple[CustomRegexRule, ...] = (),
        mask_style: MaskStyle = MaskStyle.REDACTED,
    ) -> RedactionConfig:
        return RedactionConfig(
            quick_rules=quick_rules or QuickRules(),
            advanced=AdvancedState(
                json_keys=json_keys,
                custom_regex_rules=custom_rules,
                mask_style=mask_style,
            ),
            include_advanced=include_advanced,
        )

    return _make
