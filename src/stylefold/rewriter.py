"""Call-site rewriting: splice compiled output back into the source text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from stylefold.classifier import RAW_KEY, SelectorClassification, StyleClassification, Verdict
from stylefold.compiler.pipeline import CompiledSheet
from stylefold.errors import MalformedStyleDescription
from stylefold.model.nodes import (
    CallExpression,
    Entry,
    Identifier,
    KeyedMapping,
    Literal,
    Module,
    Span,
)
from stylefold.printer import INDENT, js_string, line_indent, print_entry, print_mapping

__all__ = ["CLASSES_KEY", "Edit", "CallRewriter", "apply_edits"]

# Key added to the options argument, mapping selector names to identifiers.
CLASSES_KEY = "classes"


@dataclass(frozen=True, order=True)
class Edit:
    """Replace the text covered by ``span`` with ``text``."""

    span: Span
    text: str


def apply_edits(source: str, edits: Iterable[Edit]) -> str:
    """Apply non-overlapping edits; every byte outside them is kept."""
    pieces: list[str] = []
    position = 0
    for edit in sorted(edits):
        if edit.span.start < position:
            raise ValueError(f"Overlapping edit at offset {edit.span.start}")
        pieces.append(source[position:edit.span.start])
        pieces.append(edit.text)
        position = edit.span.end
    pieces.append(source[position:])
    return "".join(pieces)


class CallRewriter:
    """Build the edits that rewrite one recognized call."""

    def __init__(self, module: Module):
        self.module = module

    def rewrite(
        self,
        call: CallExpression,
        styles: KeyedMapping,
        classification: StyleClassification,
        sheet: CompiledSheet,
        rewrite_declaration: bool = True,
    ) -> list[Edit]:
        """Return the edits for *call*, or none when nothing was compiled.

        When the style description is written inline it is replaced inside
        the call; when the call passes a reference, the referenced object
        literal is replaced where it is declared.  A call sharing a
        declaration that an earlier call already rewrote passes
        ``rewrite_declaration=False`` and only gets its options argument.

        Raises:
            MalformedStyleDescription: if an options literal already has a
                ``classes`` entry.
        """
        if sheet.is_empty:
            return []

        source = self.module.source
        call_indent = line_indent(source, call.arguments_span.start)
        inline = call.arguments[0] is styles

        edits: list[Edit] = []
        if inline:
            first = self._styles_text(classification, sheet, call_indent)
        else:
            first = self.module.text(call.arguments[0])
        if not inline and rewrite_declaration:
            styles_indent = line_indent(source, styles.span.start)
            edits.append(
                Edit(styles.span, self._styles_text(classification, sheet, styles_indent))
            )

        arguments = [first, self._options_text(call, sheet, call_indent)]
        arguments.extend(self.module.text(arg) for arg in call.arguments[2:])
        edits.append(Edit(call.arguments_span, "(" + ", ".join(arguments) + ")"))
        return edits

    # ---- first argument ----

    def _styles_text(
        self, classification: StyleClassification, sheet: CompiledSheet, indent: str
    ) -> str:
        entries: list[str] = []
        if sheet.raw_text:
            entries.append(print_entry(RAW_KEY, js_string(sheet.raw_text)))
        for selector in classification.selectors:
            verdict = selector.verdict
            if verdict is Verdict.STATIC:
                continue
            if verdict is Verdict.DYNAMIC:
                entries.append(self.module.text(selector.entry))
            else:
                entries.append(self._mixed_text(selector, indent + INDENT))
        return print_mapping(entries, indent)

    def _mixed_text(self, selector: SelectorClassification, indent: str) -> str:
        if selector.key_computed:
            key = js_string(selector.name or "")
        else:
            key = self.module.text(selector.entry.key)
        dynamic = [self.module.text(entry) for entry in selector.dynamic_entries]
        return f"{key}: {print_mapping(dynamic, indent)}"

    # ---- options argument ----

    def _options_text(self, call: CallExpression, sheet: CompiledSheet, indent: str) -> str:
        class_entries = [print_entry(name, js_string(ident)) for name, ident in sheet.classes.items()]
        classes = print_entry(CLASSES_KEY, print_mapping(class_entries, indent + INDENT))

        if len(call.arguments) < 2 or _is_absent(call.arguments[1]):
            return print_mapping([classes], indent)
        options = call.arguments[1]
        if isinstance(options, KeyedMapping):
            for entry in options.entries:
                if _is_classes_key(entry):
                    raise MalformedStyleDescription(
                        f"Options argument already defines {CLASSES_KEY!r}", entry.span
                    )
            existing = [self.module.text(entry) for entry in options.entries]
            return print_mapping(existing + [classes], indent)
        return print_mapping([f"...{self.module.text(options)}", classes], indent)


def _is_classes_key(entry: Entry) -> bool:
    # Computed keys are not resolved here; only plain keys are checked.
    return (
        not entry.computed
        and isinstance(entry.key, Literal)
        and entry.key.value == CLASSES_KEY
    )


def _is_absent(node: object) -> bool:
    if isinstance(node, Literal) and node.value is None:
        return True
    return isinstance(node, Identifier) and node.name == "undefined"
