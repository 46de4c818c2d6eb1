"""Core types."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum


class ToolId(str, Enum):
    """Conversion direction selected by the caller."""
    JSON_CSV = "json-csv"
    CSV_JSON = "csv-json"
    YAML_JSON = "yaml-json"
    JSON_YAML = "json-yaml"
    FORMAT = "format"       # auto-detect source syntax and normalize it


class MaskStyle(str, Enum):
    REDACTED = "REDACTED"
    ASTERISKS = "ASTERISKS"
    HASH = "HASH"


class RedactKind(str, Enum):
    EMAIL = "email"
    PHONE = "phone"
    IP = "ip"
    TOKEN = "token"
    CUSTOM = "custom"


class Stage(str, Enum):
    PARSE = "parse"
    REDACT = "redact"
    CONVERT = "convert"
    FORMAT = "format"


@dataclass(frozen=True, slots=True)
class QuickRules:
    """Built-in detectors, each toggled independently."""
    email: bool = True
    phone: bool = True
    ip: bool = True
    token: bool = True


@dataclass(frozen=True, slots=True)
class CustomRegexRule:
    """A user-authored regex rule."""
    name: str                  # label only, never matched against
    pattern: str               # Python ``re`` syntax
    flags: str | None = None   # raw, sanitized at compile time


@dataclass(frozen=True, slots=True)
class AdvancedState:
    json_keys: tuple[str, ...] = ()
    custom_regex_rules: tuple[CustomRegexRule, ...] = ()
    mask_style: MaskStyle = MaskStyle.REDACTED


@dataclass(frozen=True, slots=True)
class RedactionConfig:
    """Full redaction configuration for one detect/apply call.

    ``include_advanced`` gates the advanced rules (custom regexes and JSON
    keys).  Quick rules are honored regardless.
    """
    quick_rules: QuickRules = field(default_factory=QuickRules)
    advanced: AdvancedState = field(default_factory=AdvancedState)
    include_advanced: bool = False


@dataclass(slots=True)
class PreviewSummary:
    """Exact per-kind match counts."""
    emails: int = 0
    phones: int = 0
    ips: int = 0
    tokens: int = 0
    customs: int = 0

    def add(self, kind: RedactKind, count: int = 1) -> None:
        attr = _SUMMARY_FIELDS[kind]
        setattr(self, attr, getattr(self, attr) + count)

    def as_dict(self) -> dict[str, int]:
        return {
            "emails": self.emails,
            "phones": self.phones,
            "ips": self.ips,
            "tokens": self.tokens,
            "customs": self.customs,
        }


_SUMMARY_FIELDS = {
    RedactKind.EMAIL: "emails",
    RedactKind.PHONE: "phones",
    RedactKind.IP: "ips",
    RedactKind.TOKEN: "tokens",
    RedactKind.CUSTOM: "customs",
}


@dataclass(frozen=True, slots=True)
class PreviewSample:
    """A single match shown for review before redaction."""
    kind: RedactKind
    before: str        # matched text
    after: str         # masked preview of that text

    def as_dict(self) -> dict[str, str]:
        return {"kind": self.kind.value, "before": self.before, "after": self.after}


@dataclass(slots=True)
class DetectResult:
    summary: PreviewSummary = field(default_factory=PreviewSummary)
    sample: list[PreviewSample] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "summary": self.summary.as_dict(),
            "sample": [s.as_dict() for s in self.sample],
        }


@dataclass(frozen=True, slots=True)
class AppError:
    """User-facing error produced by the classifier."""
    stage: Stage
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"stage": self.stage.value, "message": self.message}
