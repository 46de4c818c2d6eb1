"""textsafe — local JSON/CSV/YAML conversion and sensitive-data redaction."""

from .classifier import classify
from .config import load_config, load_from_yaml
from .converters import convert, run_tool
from .exceptions import (
    ConfigurationError,
    ConversionError,
    ParseError,
    RuleCompileError,
    TextSafeError,
    UnsupportedFormatError,
)
from .redactor import apply_redaction, detect_sensitive
from .types import (
    AdvancedState,
    AppError,
    CustomRegexRule,
    DetectResult,
    MaskStyle,
    PreviewSample,
    PreviewSummary,
    QuickRules,
    RedactionConfig,
    RedactKind,
    Stage,
    ToolId,
)

__all__ = [
    "convert", "run_tool",
    "detect_sensitive", "apply_redaction",
    "classify",
    "load_config", "load_from_yaml",
    "TextSafeError", "ParseError", "UnsupportedFormatError",
    "RuleCompileError", "ConversionError", "ConfigurationError",
    "ToolId", "MaskStyle", "RedactKind", "Stage",
    "QuickRules", "CustomRegexRule", "AdvancedState", "RedactionConfig",
    "PreviewSummary", "PreviewSample", "DetectResult", "AppError",
]
__version__ = "0.1.0"
