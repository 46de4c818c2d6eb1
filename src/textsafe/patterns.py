"""Rule compiler — turns a RedactionConfig into an ordered list of matchers.

Quick rules are cheap, deterministic regexes for structured secrets:
emails, phone numbers, IPv4 addresses and API-token shaped strings.
Custom rules are user-authored patterns, active only in advanced mode.

Every call to :func:`build_rules` produces fresh :class:`Matcher` values;
no matcher is shared between rules or between calls.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterator

from .exceptions import RuleCompileError
from .types import CustomRegexRule, RedactionConfig, RedactKind

logger = logging.getLogger(__name__)

# Each quick rule: (kind, QuickRules toggle, pattern source).  Declaration
# order is the order rules run in.
_QUICK_PATTERNS: list[tuple[RedactKind, str, str]] = [
    # Email
    (RedactKind.EMAIL, "email",
     r"\b[A-Za-z0-9._%+\-]+@[A-Za-z0-9.\-]+\.[A-Za-z]{2,}\b"),

    # Phone, optional country code and area-code parens
    (RedactKind.PHONE, "phone",
     r"\b(?:\+?\d{1,3}[\s\-]?)?"
     r"(?:\(?\d{3}\)?[\s\-]?)"
     r"\d{3}[\s\-]?\d{4}\b"),

    # IPv4, each octet 0-255
    (RedactKind.IP, "ip",
     r"\b(?:(?:25[0-5]|2[0-4]\d|1?\d?\d)\.){3}"
     r"(?:25[0-5]|2[0-4]\d|1?\d?\d)\b"),

    # Long opaque strings, plus GitHub / Stripe / Google key shapes
    (RedactKind.TOKEN, "token",
     r"\b(?:[A-Za-z0-9_\-]{24,}"
     r"|ghp_[A-Za-z0-9]{20,}"
     r"|sk_[A-Za-z0-9]{16,}"
     r"|AIza[0-9A-Za-z\-_]{20,})\b"),
]

# Custom flags accepted from callers; anything else is dropped
ALLOWED_FLAGS = "dgimsuvy"

_RE_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
}


@dataclass(frozen=True, slots=True)
class Matcher:
    """An immutable global matcher over a compiled pattern.

    ``sticky`` matchers only accept a contiguous run of matches starting at
    position 0.
    """
    regex: re.Pattern[str]
    sticky: bool = False

    def finditer(self, text: str) -> Iterator[re.Match[str]]:
        if not self.sticky:
            yield from self.regex.finditer(text)
            return

        pos = 0
        while pos <= len(text):
            m = self.regex.match(text, pos)
            if m is None:
                return
            yield m
            pos = m.end() if m.end() > m.start() else m.end() + 1

    def sub(self, repl: Callable[[str], str], text: str) -> str:
        """Replace every match with ``repl(matched_text)``."""
        parts: list[str] = []
        last = 0
        for m in self.finditer(text):
            parts.append(text[last:m.start()])
            parts.append(repl(m.group()))
            last = m.end()
        parts.append(text[last:])
        return "".join(parts)


@dataclass(frozen=True, slots=True)
class Rule:
    kind: RedactKind
    matcher: Matcher
    name: str = ""


def sanitize_flags(flags: str | None) -> str:
    """Keep allowed flag characters only, first occurrence wins."""
    if not flags:
        return ""
    return "".join(ch for ch in dict.fromkeys(flags) if ch in ALLOWED_FLAGS)


def compile_custom_rule(rule: CustomRegexRule) -> Matcher:
    """Compile a custom rule with the global flag always on.

    Raises RuleCompileError if the pattern is not a valid regex.
    """
    flags = sanitize_flags(rule.flags)
    if "g" not in flags:
        flags += "g"

    # ASCII classes for \d, \w and \b, like the quick rules
    re_flags = re.ASCII
    for ch in flags:
        re_flags |= _RE_FLAGS.get(ch, 0)

    try:
        regex = re.compile(rule.pattern, re_flags)
    except re.error as exc:
        raise RuleCompileError(rule.name, str(exc)) from exc

    return Matcher(regex=regex, sticky="y" in flags)


def build_rules(config: RedactionConfig) -> list[Rule]:
    """Build the ordered rule list: quick rules, then custom rules."""
    rules: list[Rule] = []

    for kind, toggle, source in _QUICK_PATTERNS:
        if getattr(config.quick_rules, toggle):
            rules.append(Rule(kind=kind, matcher=Matcher(re.compile(source, re.ASCII)), name=toggle))

    if config.include_advanced:
        for custom in config.advanced.custom_regex_rules:
            rules.append(Rule(
                kind=RedactKind.CUSTOM,
                matcher=compile_custom_rule(custom),
                name=custom.name,
            ))

    logger.debug("Compiled %d redaction rules", len(rules))
    return rules
