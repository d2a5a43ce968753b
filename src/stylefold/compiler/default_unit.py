"""Default-unit plugin: appends a unit to bare numbers of selected properties."""

from __future__ import annotations

from typing import Iterable

from stylefold.compiler.naming import CompilationContext
from stylefold.compiler.serializer import StaticValue, format_number

DEFAULT_PROPERTIES = (
    "width",
    "height",
    "margin",
    "padding",
    "top",
    "right",
    "bottom",
    "left",
    "font-size",
)


class DefaultUnitPlugin:
    """Append *unit* to non-zero numeric values of the listed properties.

    The property list is explicit configuration; the compiler itself never
    interprets property names.  Numbers inside lists are converted too.
    """

    def __init__(self, properties: Iterable[str] = DEFAULT_PROPERTIES, unit: str = "px"):
        self.properties = frozenset(properties)
        self.unit = unit

    def _convert(self, value: StaticValue) -> StaticValue:
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return format_number(value) if value == 0 else f"{format_number(value)}{self.unit}"
        if isinstance(value, list):
            return [self._convert(item) for item in value]
        return value

    def process_properties(
        self,
        selector: str,
        properties: dict[str, StaticValue],
        context: CompilationContext,
    ) -> dict[str, StaticValue]:
        return {
            name: self._convert(value) if name in self.properties else value
            for name, value in properties.items()
        }
