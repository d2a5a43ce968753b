"""Turn statically known property values into style-sheet text.

Formatting rules:
    - strings are emitted as-is, numbers in decimal
    - ``[a, b]``   -> ``a, b``
    - ``[[a, b]]`` -> ``a b``  (one nesting level switches the joiner to a space)
    - a rule is ``.id {\\n  name: value;\\n}``; rules are joined by a newline

Anything else (booleans, null, mappings, deeper nesting, empty lists) raises
:class:`SerializationOverflow`.
"""

from __future__ import annotations

from typing import Mapping, Union

from stylefold.errors import SerializationOverflow

__all__ = [
    "StaticValue",
    "format_number",
    "serialize_value",
    "serialize_property",
    "serialize_rule",
    "join_rules",
]

StaticValue = Union[str, int, float, bool, None, list, dict]

INDENT = "  "


def format_number(value: int | float) -> str:
    """Render a number the way JavaScript's ``String(n)`` would for common values."""
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def _scalar(value: StaticValue) -> str:
    if isinstance(value, bool) or value is None:
        raise SerializationOverflow(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return format_number(value)
    raise SerializationOverflow(value)


def serialize_value(value: StaticValue) -> str:
    if not isinstance(value, list):
        return _scalar(value)
    if not value:
        raise SerializationOverflow(value)
    parts = []
    for item in value:
        if isinstance(item, list):
            if not item:
                raise SerializationOverflow(value)
            parts.append(" ".join(_scalar(inner) for inner in item))
        else:
            parts.append(_scalar(item))
    return ", ".join(parts)


def serialize_property(name: str, value: StaticValue) -> str:
    return f"{name}: {serialize_value(value)};"


def serialize_rule(identifier: str, properties: Mapping[str, StaticValue]) -> str:
    """Serialize one rule using the generated *identifier* as class selector."""
    lines = [f".{identifier} {{"]
    lines.extend(INDENT + serialize_property(name, value) for name, value in properties.items())
    lines.append("}")
    return "\n".join(lines)


def join_rules(blocks: list[str]) -> str:
    return "\n".join(blocks)
