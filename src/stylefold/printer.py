"""Print generated object literals in babel's layout."""

from __future__ import annotations

import json

INDENT = "  "


def js_string(value: str) -> str:
    """Quote *value* as a double-quoted JavaScript string literal."""
    return json.dumps(value, ensure_ascii=False)


def print_mapping(entries: list[str], indent: str = "") -> str:
    """Lay out already-rendered ``key: value`` entries as an object literal.

    One entry per line, indented one level deeper than *indent*, with the
    closing brace back at *indent*.  No entries give ``{}``.
    """
    if not entries:
        return "{}"
    inner = indent + INDENT
    body = ",\n".join(inner + entry for entry in entries)
    return "{\n" + body + "\n" + indent + "}"


def print_entry(key: str, value: str) -> str:
    return f"{js_string(key)}: {value}"


def line_indent(source: str, offset: int) -> str:
    """Leading whitespace of the line containing *offset*."""
    line_start = source.rfind("\n", 0, offset) + 1
    end = line_start
    while end < len(source) and source[end] in " \t":
        end += 1
    return source[line_start:end]
