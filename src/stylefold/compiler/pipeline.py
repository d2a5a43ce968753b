"""Style-sheet compiler: static rules in, raw style text and class map out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from stylefold.compiler.base import CompilerPlugin
from stylefold.compiler.naming import CompilationContext, IdAllocator
from stylefold.compiler.serializer import StaticValue, join_rules, serialize_rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledSheet:
    """Compiled output for one call site.

    ``classes`` maps each selector name with static content to its generated
    identifier, in declaration order.
    """

    raw_text: str = ""
    classes: dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.classes


def apply_plugins(
    selector: str,
    properties: Mapping[str, StaticValue],
    plugins: Sequence[CompilerPlugin],
    context: CompilationContext,
) -> dict[str, StaticValue]:
    """Run every plugin's ``process_properties`` in order."""
    result = dict(properties)
    for plugin in plugins:
        result = plugin.process_properties(selector, result, context)
    return result


class StyleSheetCompiler:
    """Compile the static part of one call site's style description."""

    def __init__(
        self,
        allocator: IdAllocator,
        plugins: Sequence[CompilerPlugin] = (),
        options: Mapping[str, object] | None = None,
        filename: str = "<input>",
    ):
        self.allocator = allocator
        self.plugins = list(plugins)
        self.options = dict(options or {})
        self.filename = filename

    def compile(
        self,
        rules: Sequence[tuple[str, Mapping[str, StaticValue]]],
        call_index: int = 0,
    ) -> CompiledSheet:
        """Compile ``(selector, static properties)`` pairs in declaration order.

        Every selector gets a generated identifier; selectors whose property
        mapping ends up empty get an identifier but no text.
        """
        context = CompilationContext(
            call_index=call_index, filename=self.filename, options=self.options
        )
        blocks: list[str] = []
        classes: dict[str, str] = {}
        for selector, properties in rules:
            processed = apply_plugins(selector, properties, self.plugins, context)
            identifier = self.allocator.allocate(selector, context)
            classes[selector] = identifier
            if processed:
                blocks.append(serialize_rule(identifier, processed))

        sheet = CompiledSheet(raw_text=join_rules(blocks), classes=classes)
        for plugin in self.plugins:
            hook = getattr(plugin, "on_process_sheet", None)
            if hook is not None:
                hook(sheet, context)
        logger.debug(
            "Compiled call %d: %d rule(s), %d character(s)",
            call_index,
            len(classes),
            len(sheet.raw_text),
        )
        return sheet
