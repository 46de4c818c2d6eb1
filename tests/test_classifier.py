"""Tests for the error classifier."""

import json

import pytest

from textsafe import classify, convert
from textsafe.classifier import LOCAL_NOTICE
from textsafe.exceptions import ConversionError, ParseError, RuleCompileError, UnsupportedFormatError
from textsafe.types import Stage


@pytest.mark.parametrize("context", ["redact", "preview"])
def test_redaction_contexts_always_map_to_redact(context):
    for error in (RuleCompileError("bad", "missing ), unterminated subpattern"), ValueError("json"), None):
        app_error = classify(context, error)
        assert app_error.stage is Stage.REDACT
        assert app_error.message.startswith("Redact error: ")
        assert app_error.message.endswith(LOCAL_NOTICE)


@pytest.mark.parametrize("message", [
    "Unexpected token } in JSON at position 4",
    "Unexpected end of input",
    "Invalid CSV input: unexpected end of data",
    "Unsupported format. Please provide valid JSON, CSV, or YAML.",
    "bad YAML",
    "could not PARSE",
])
def test_parse_keywords_map_to_parse(message):
    app_error = classify("convert", RuntimeError(message))
    assert app_error.stage is Stage.PARSE
    assert app_error.message.startswith("Parse error: ")
    assert app_error.message.endswith(LOCAL_NOTICE)


def test_core_parse_failures_classify_as_parse():
    for tool, text in (("json-csv", "{bad"), ("csv-json", 'a\n"x'), ("yaml-json", "a: [1")):
        with pytest.raises(ParseError) as info:
            convert(tool, text)
        assert classify("convert", info.value).stage is Stage.PARSE
    assert classify("format", UnsupportedFormatError()).stage is Stage.PARSE


def test_other_failures_map_to_convert():
    app_error = classify("format", ConversionError("Unknown tool: 'xml'"))
    assert app_error.stage is Stage.CONVERT
    assert app_error.message.startswith("Convert error: ")
    assert app_error.message.endswith(LOCAL_NOTICE)


def test_classify_never_raises():
    class Unprintable:
        def __str__(self):
            raise RuntimeError("boom")

    assert classify("convert", Unprintable()).stage is Stage.CONVERT
    assert classify("convert", None).stage is Stage.CONVERT
    assert classify("convert", "plain string json failure").stage is Stage.PARSE


def test_app_error_as_dict():
    out = classify("preview", None).as_dict()
    assert out["stage"] == "redact"
    assert json.dumps(out)
