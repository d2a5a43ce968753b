"""Base protocol for compiler plugins."""

from __future__ import annotations

from typing import Protocol

from stylefold.compiler.naming import CompilationContext
from stylefold.compiler.serializer import StaticValue


class CompilerPlugin(Protocol):
    """A property-mapping-to-property-mapping stage run before serialization.

    Plugins may also define ``on_process_sheet(sheet, context)``, called once
    per call site after the sheet is assembled.
    """

    def process_properties(
        self,
        selector: str,
        properties: dict[str, StaticValue],
        context: CompilationContext,
    ) -> dict[str, StaticValue]: ...
