"""Tests for the format converter — explicit tools and format auto-detection."""

import json

import pytest
import yaml

from textsafe import convert
from textsafe import converters
from textsafe.exceptions import ConversionError, ParseError, UnsupportedFormatError
from textsafe.types import ToolId


# ── Blank input ──────────────────────────────────────────────────────

@pytest.mark.parametrize("tool", [t.value for t in ToolId])
def test_blank_input_yields_empty_output(tool):
    assert convert(tool, "") == ""
    assert convert(tool, "   \n\t  ") == ""


def test_unknown_tool_is_rejected():
    with pytest.raises(ConversionError):
        convert("xml-json", "<a/>")


# ── JSON → CSV ───────────────────────────────────────────────────────

def test_json_array_of_objects_to_csv():
    assert convert("json-csv", '[{"name":"Alice","age":20}]') == "name,age\r\nAlice,20"


def test_empty_json_array_to_empty_csv():
    assert convert("json-csv", "[]") == ""


def test_json_object_to_single_row():
    assert convert("json-csv", '{"name":"Alice"}') == "name\r\nAlice"


def test_json_primitive_array_to_value_column():
    assert convert("json-csv", '[1,"two",true]') == "value\r\n1\r\ntwo\r\ntrue"


def test_json_scalar_to_value_column():
    assert convert("json-csv", "123") == "value\r\n123"


def test_json_rows_with_different_keys_share_columns():
    out = convert("json-csv", '[{"a":1},{"b":2}]')
    assert out == "a,b\r\n1,\r\n,2"


def test_csv_cells_are_minimally_quoted():
    out = convert("json-csv", '[{"note":"a,b","plain":"x","quote":"say \\"hi\\""}]')
    assert out == 'note,plain,quote\r\n"a,b",x,"say ""hi"""'


def test_nested_and_null_cells():
    out = convert("json-csv", '[{"a":{"b":1},"c":null,"d":false}]')
    assert out == 'a,c,d\r\n"{""b"":1}",,false'


def test_invalid_json_to_csv_raises_parse_error():
    with pytest.raises(ParseError, match="Invalid JSON input"):
        convert("json-csv", "{bad json")


def test_json_nan_is_rejected():
    with pytest.raises(ParseError):
        convert("json-yaml", "NaN")


def test_lone_empty_cell_is_an_empty_line():
    assert convert("json-csv", '[{"a": null}]') == "a\r\n"
    assert convert("json-csv", '[{"a": null}, {"a": 1}]') == "a\r\n\r\n1"


def test_integral_floats_print_as_integers():
    assert convert("json-csv", '[{"a": 1.0, "b": 1e20, "c": 2.5}]') == "a,b,c\r\n1,100000000000000000000,2.5"
    assert convert("format", '{"a": 1.0}') == '{\n  "a": 1\n}'


def test_deeply_nested_json_is_a_parse_error():
    with pytest.raises(ParseError, match="Invalid JSON input"):
        convert("json-csv", "[" * 100000)


# ── CSV → JSON ───────────────────────────────────────────────────────

def test_csv_to_pretty_json_trims_headers():
    out = convert("csv-json", " name ,age\nAlice,20")
    assert out == '[\n  {\n    "name": "Alice",\n    "age": "20"\n  }\n]'


def test_csv_to_json_skips_blank_lines():
    out = convert("csv-json", "name\n\nAlice\n\nBob")
    assert json.loads(out) == [{"name": "Alice"}, {"name": "Bob"}]


def test_csv_header_only_is_empty_list():
    assert convert("csv-json", "name,age") == "[]"


def test_csv_unterminated_quote_raises():
    with pytest.raises(ParseError, match="unexpected end of data"):
        convert("csv-json", 'name,age\n"Alice,20')


def test_csv_field_count_mismatch_raises():
    with pytest.raises(ParseError, match="Too few fields"):
        convert("csv-json", "a,b\n1")
    with pytest.raises(ParseError, match="Too many fields"):
        convert("csv-json", "a,b\n1,2,3")


# ── YAML ↔ JSON ──────────────────────────────────────────────────────

def test_yaml_to_pretty_json_keeps_numbers():
    assert convert("yaml-json", "name: Alice\nage: 20") == '{\n  "name": "Alice",\n  "age": 20\n}'


def test_yaml_to_json_accepts_json_syntax():
    assert json.loads(convert("yaml-json", '{"a": [1, 2]}')) == {"a": [1, 2]}


def test_invalid_yaml_raises_parse_error():
    with pytest.raises(ParseError, match="Invalid YAML input"):
        convert("yaml-json", "a: [1, 2")


def test_json_to_yaml():
    assert convert("json-yaml", '{"name":"Alice"}') == "name: Alice\n"


def test_json_yaml_round_trip():
    source = json.dumps({
        "name": "Zoë",
        "tags": ["a", "yes", "123"],
        "nested": {"n": 1.5, "ok": True, "none": None, "empty": []},
        "rows": [{"id": 1}, {"id": 2}],
    })
    back = convert("yaml-json", convert("json-yaml", source))
    assert json.loads(back) == json.loads(source)


def test_json_yaml_round_trip_array():
    source = '[1, "two", {"three": [3]}]'
    assert json.loads(convert("yaml-json", convert("json-yaml", source))) == json.loads(source)


def test_non_finite_numbers_become_null():
    out = convert("yaml-json", "a: .inf\nb: -.inf\nc: .nan")
    assert out == '{\n  "a": null,\n  "b": null,\n  "c": null\n}'
    assert json.loads(out) == {"a": None, "b": None, "c": None}

    out = convert("format", '{"a": 1e400}')
    assert out == '{\n  "a": null\n}'


# ── Format (auto-detect) ─────────────────────────────────────────────

def test_format_pretty_prints_json():
    out = convert("format", '{"name":"Alice","age":20}')
    assert out == '{\n  "name": "Alice",\n  "age": 20\n}'


def test_format_normalizes_yaml():
    assert convert("format", "name: Alice") == "name: Alice\n"


def test_format_plain_text_is_yaml_scalar():
    assert convert("format", "hello world") == "hello world\n"


def test_format_multi_line_prose_is_yaml_scalar():
    assert convert("format", "a,b\nc") == "a,b c\n"


def test_format_falls_back_to_csv():
    assert convert("format", "name,age\nAlice,20") == "name,age\r\nAlice,20"


def test_format_falls_back_to_csv_when_yaml_fails(monkeypatch):
    def failing_load(text):
        raise yaml.YAMLError("mocked yaml parse failure")

    monkeypatch.setattr(converters.yaml, "safe_load", failing_load)
    assert convert("format", "name,age\nAlice,20") == "name,age\r\nAlice,20"


def test_format_unsupported_when_every_attempt_fails():
    with pytest.raises(UnsupportedFormatError) as info:
        convert("format", 'name,age\n"Alice,20')
    assert str(info.value) == "Unsupported format. Please provide valid JSON, CSV, or YAML."


def test_format_chain_order():
    assert [attempt.name for attempt in converters.FORMAT_CHAIN] == ["json", "yaml", "csv"]
