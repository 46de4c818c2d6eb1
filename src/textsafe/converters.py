"""FormatConverter — JSON / CSV / YAML conversion and auto-formatting.

Usage:
    from textsafe import convert

    convert("json-csv", '[{"name": "Alice", "age": 20}]')   # "name,age\\r\\nAlice,20"
    convert("format", "name: Alice")                        # "name: Alice\\n"

Every call works on a complete in-memory string.  Blank input yields blank
output for every tool without parsing anything.
"""

from __future__ import annotations
import csv
import io
import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable

import yaml

from .exceptions import ConversionError, ParseError, UnsupportedFormatError
from .types import ToolId

logger = logging.getLogger(__name__)

_CRLF = "\r\n"


def convert(tool: ToolId | str, text: str) -> str:
    """Run a conversion tool over ``text``.

    Raises ParseError on malformed input, UnsupportedFormatError when
    ``format`` cannot recognise the input, ConversionError otherwise.
    """
    try:
        tool = ToolId(tool)
    except ValueError:
        raise ConversionError(f"Unknown tool: {tool!r}") from None

    source = text.strip()
    if not source:
        return ""

    logger.debug("Running %s on %d chars", tool.value, len(source))
    return _TOOLS[tool](source)


run_tool = convert


# ----------------------------------------------------------------------
# JSON
# ----------------------------------------------------------------------

def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name}")


def parse_json(text: str) -> Any:
    """Strict JSON parse (no NaN / Infinity)."""
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as exc:
        raise ParseError(f"Invalid JSON input: {exc}") from exc


# Integral floats below this print as plain integers in JSON text
_MAX_PLAIN_INT = 1e21


def json_safe(value: Any) -> Any:
    """Copy ``value`` with floats normalized for JSON text.

    Non-finite floats become ``None`` and integral floats become ``int``,
    so ``1.0`` prints as ``1`` and ``.inf`` as ``null``.
    """
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) < _MAX_PLAIN_INT:
            return int(value)
        return value
    if isinstance(value, dict):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, list):
        return [json_safe(item) for item in value]
    return value


def dump_json(value: Any) -> str:
    """Pretty-print with 2-space indentation."""
    try:
        return json.dumps(json_safe(value), indent=2, ensure_ascii=False, allow_nan=False, default=str)
    except (TypeError, ValueError, RecursionError) as exc:
        raise ConversionError(f"Cannot represent value as JSON: {exc}") from exc


# ----------------------------------------------------------------------
# YAML
# ----------------------------------------------------------------------

def _load_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except (yaml.YAMLError, RecursionError) as exc:
        raise ParseError(f"Invalid YAML input: {exc}") from exc


def _dump_yaml(value: Any) -> str:
    try:
        out = yaml.safe_dump(
            value,
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )
    except yaml.YAMLError as exc:
        raise ConversionError(f"Cannot represent value as YAML: {exc}") from exc
    # Root scalars get an explicit document end marker
    if out.endswith("\n...\n"):
        out = out[:-4]
    return out


def _is_yaml_document(source: str, parsed: Any) -> bool:
    """Reject multi-line delimited text that YAML only folded into one plain scalar.

    Such input (``name,age\\nAlice,20``) is left to the CSV step when CSV
    can read it, or when every line carries a comma.  Other prose, like
    ``hello world`` or ``a,b\\nc``, is still a YAML scalar.
    """
    if not isinstance(parsed, str) or "\n" not in source:
        return True
    node = yaml.compose(source, Loader=yaml.SafeLoader)
    if not (isinstance(node, yaml.ScalarNode) and node.style is None):
        return True
    if all("," in line for line in source.splitlines() if line.strip()):
        return False
    try:
        _parse_csv(source)
    except ParseError:
        return True
    return False


# ----------------------------------------------------------------------
# CSV
# ----------------------------------------------------------------------

def _parse_csv(text: str) -> list[dict[str, str]]:
    """Header-mode CSV parse: trimmed headers, blank lines skipped."""
    reader = csv.reader(io.StringIO(text, newline=""), strict=True)
    try:
        records = [row for row in reader if row]
    except csv.Error as exc:
        raise ParseError(f"Invalid CSV input: {exc}") from exc

    if not records:
        return []

    header = [name.strip() for name in records[0]]
    rows: list[dict[str, str]] = []
    for index, record in enumerate(records[1:], start=1):
        if len(record) != len(header):
            which = "few" if len(record) < len(header) else "many"
            raise ParseError(
                f"Invalid CSV input: Too {which} fields: expected "
                f"{len(header)} fields but parsed {len(record)} (row {index})"
            )
        rows.append(dict(zip(header, record)))
    return rows


def _cell(value: Any) -> str:
    value = json_safe(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def _to_csv(rows: list[dict[str, Any]]) -> str:
    """Serialize rows with CRLF line endings and minimal quoting."""
    if not rows:
        return ""
    # Union of keys, first-seen order
    columns = list(dict.fromkeys(key for row in rows for key in row))

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator=_CRLF)
    writer.writerow(columns)
    for row in rows:
        cells = [_cell(row.get(column)) for column in columns]
        # A lone empty cell is an empty line, not a quoted ""
        if cells == [""]:
            buf.write(_CRLF)
        else:
            writer.writerow(cells)
    return buf.getvalue()[: -len(_CRLF)]


def normalize_rows(parsed: Any) -> list[dict[str, Any]]:
    """Shape any parsed JSON value into CSV rows.

    The first element decides how an array is read: objects become rows
    as-is, anything else becomes a ``{"value": element}`` row.
    """
    if isinstance(parsed, list):
        if not parsed:
            return []
        if isinstance(parsed[0], dict):
            return [item if isinstance(item, dict) else {"value": item} for item in parsed]
        return [{"value": item} for item in parsed]

    if isinstance(parsed, dict):
        return [parsed]

    return [{"value": parsed}]


# ----------------------------------------------------------------------
# Tools
# ----------------------------------------------------------------------

def _json_to_csv(source: str) -> str:
    return _to_csv(normalize_rows(parse_json(source)))


def _csv_to_json(source: str) -> str:
    return dump_json(_parse_csv(source))


def _yaml_to_json(source: str) -> str:
    return dump_json(_load_yaml(source))


def _json_to_yaml(source: str) -> str:
    return _dump_yaml(parse_json(source))


def _always(source: str, parsed: Any) -> bool:
    return True


@dataclass(frozen=True)
class _FormatAttempt:
    name: str
    parse: Callable[[str], Any]
    accepts: Callable[[str, Any], bool]
    render: Callable[[Any], str]


# Order is the precedence: JSON, then YAML, then CSV
FORMAT_CHAIN: tuple[_FormatAttempt, ...] = (
    _FormatAttempt("json", parse_json, _always, dump_json),
    _FormatAttempt("yaml", _load_yaml, _is_yaml_document, _dump_yaml),
    _FormatAttempt("csv", _parse_csv, _always, _to_csv),
)


def _format(source: str) -> str:
    for attempt in FORMAT_CHAIN:
        try:
            parsed = attempt.parse(source)
        except ParseError as exc:
            logger.debug("format: %s attempt failed: %s", attempt.name, exc)
            continue
        if attempt.accepts(source, parsed):
            logger.debug("format: detected %s", attempt.name)
            return attempt.render(parsed)
        logger.debug("format: %s attempt rejected", attempt.name)

    raise UnsupportedFormatError()


_TOOLS: dict[ToolId, Callable[[str], str]] = {
    ToolId.JSON_CSV: _json_to_csv,
    ToolId.CSV_JSON: _csv_to_json,
    ToolId.YAML_JSON: _yaml_to_json,
    ToolId.JSON_YAML: _json_to_yaml,
    ToolId.FORMAT: _format,
}
