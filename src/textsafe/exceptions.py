"""Exception hierarchy for the conversion and redaction engines.

Callers are expected to route any of these through
:func:`textsafe.classifier.classify` before showing them to a user.
"""


class TextSafeError(Exception):
    """Base exception for all textsafe errors."""


class ParseError(TextSafeError):
    """Raised when JSON, CSV or YAML input is malformed."""


class UnsupportedFormatError(ParseError):
    """Raised when ``format`` auto-detection exhausts every syntax."""

    def __init__(self) -> None:
        super().__init__("Unsupported format. Please provide valid JSON, CSV, or YAML.")


class RuleCompileError(TextSafeError):
    """Raised when a custom regex rule fails to compile."""

    def __init__(self, rule_name: str, reason: str) -> None:
        super().__init__(f"Invalid custom rule {rule_name!r}: {reason}")
        self.rule_name = rule_name


class ConversionError(TextSafeError):
    """Raised for conversion failures that are not parse failures."""


class ConfigurationError(TextSafeError):
    """Raised when a redaction config dict is malformed."""
