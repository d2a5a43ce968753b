"""Hyphenate plugin: rewrites camelCase property names to kebab-case."""

from __future__ import annotations

import re

from stylefold.compiler.naming import CompilationContext
from stylefold.compiler.serializer import StaticValue

_UPPER = re.compile(r"[A-Z]")


def hyphenate(name: str) -> str:
    """``fontSize`` -> ``font-size``; ``msTransform`` -> ``-ms-transform``."""
    converted = _UPPER.sub(lambda m: "-" + m.group(0).lower(), name)
    if converted.startswith("ms-"):
        return "-" + converted
    return converted


class HyphenatePlugin:
    """Convert camelCase property names (``fontSize``) to ``font-size``.

    Names that are already hyphenated are left alone; order is preserved.
    """

    def process_properties(
        self,
        selector: str,
        properties: dict[str, StaticValue],
        context: CompilationContext,
    ) -> dict[str, StaticValue]:
        return {hyphenate(name): value for name, value in properties.items()}
