"""Static/dynamic classification of style descriptions.

:meth:`Classifier.evaluate` is a small constant folder: it turns an expression
into a plain Python value when the value is fully known inside the module, and
returns :data:`DYNAMIC` otherwise.  Any function, call, unresolvable reference
or opaque expression anywhere in a subtree makes the whole subtree dynamic.

:meth:`Classifier.classify` applies it one level at a time to a style
description, splitting every selector's properties into a static and a
dynamic part.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from stylefold.compiler.serializer import StaticValue, format_number, serialize_value
from stylefold.errors import MalformedStyleDescription, SerializationOverflow
from stylefold.model.nodes import (
    Callable,
    CallExpression,
    Entry,
    Expression,
    Identifier,
    KeyedMapping,
    Literal,
    OrderedList,
    Other,
)
from stylefold.resolver import ReferenceResolver, Unresolved

__all__ = [
    "DYNAMIC",
    "RAW_KEY",
    "Verdict",
    "SelectorClassification",
    "StyleClassification",
    "Classifier",
]

logger = logging.getLogger(__name__)

# Reserved key carrying precompiled text in the rewritten first argument.
RAW_KEY = "@raw"


class _Dynamic:
    def __repr__(self) -> str:
        return "DYNAMIC"


DYNAMIC = _Dynamic()


class Verdict(Enum):
    STATIC = "static"
    MIXED = "mixed"
    DYNAMIC = "dynamic"


@dataclass
class SelectorClassification:
    """How one selector of a style description splits.

    Attributes:
        name: Selector name, or None when its computed key is unknown.
        entry: The selector's entry in the style description.
        static_props: Property name -> static value, in declaration order.
        dynamic_entries: Property entries that must stay in the source.
        verbatim: True when the selector could not be split at all and is
            kept exactly as written.
        key_computed: True when the selector key was written as ``[expr]``.
    """

    name: str | None
    entry: Entry
    static_props: dict[str, StaticValue] = field(default_factory=dict)
    dynamic_entries: list[Entry] = field(default_factory=list)
    verbatim: bool = False
    key_computed: bool = False

    @property
    def verdict(self) -> Verdict:
        if not self.verbatim and not self.dynamic_entries:
            return Verdict.STATIC
        if self.static_props:
            return Verdict.MIXED
        return Verdict.DYNAMIC

    @property
    def has_static_content(self) -> bool:
        return self.verdict is not Verdict.DYNAMIC


@dataclass
class StyleClassification:
    """Classification of a whole style description."""

    mapping: KeyedMapping
    selectors: list[SelectorClassification] = field(default_factory=list)

    @property
    def has_static_content(self) -> bool:
        return any(s.has_static_content for s in self.selectors)

    def static_rules(self) -> list[tuple[str, dict[str, StaticValue]]]:
        return [
            (s.name, s.static_props)
            for s in self.selectors
            if s.has_static_content and s.name is not None
        ]


class Classifier:
    """Split style descriptions into what can be precompiled and what cannot."""

    def __init__(self, resolver: ReferenceResolver):
        self._resolver = resolver

    # ---- values ----

    def evaluate(self, node: Expression) -> StaticValue | _Dynamic:
        """Fold *node* to a Python value, or return :data:`DYNAMIC`."""
        resolution = self._resolver.resolve(node)
        if isinstance(resolution, Unresolved):
            return DYNAMIC
        node = resolution.node

        if isinstance(node, Literal):
            return node.value
        if isinstance(node, OrderedList):
            items = []
            for item in node.items:
                value = self.evaluate(item)
                if value is DYNAMIC:
                    return DYNAMIC
                items.append(value)
            return items
        if isinstance(node, KeyedMapping):
            result: dict[str, StaticValue] = {}
            for entry in node.entries:
                name = self.key_name(entry)
                if name is None:
                    return DYNAMIC
                value = self.evaluate(entry.value)
                if value is DYNAMIC:
                    return DYNAMIC
                result[name] = value
            return result
        if isinstance(node, (Callable, CallExpression, Other, Identifier)):
            return DYNAMIC
        raise TypeError(f"Unknown expression node: {type(node).__name__}")

    def key_name(self, entry: Entry) -> str | None:
        """Return the string an entry's key evaluates to, or None if unknown."""
        key = entry.key
        if key is None:
            return None
        if entry.computed:
            resolution = self._resolver.resolve(key)
            if isinstance(resolution, Unresolved):
                return None
            key = resolution.node
        if not isinstance(key, Literal) or isinstance(key.value, bool):
            return None
        if isinstance(key.value, str):
            return key.value
        if isinstance(key.value, (int, float)):
            return format_number(key.value)
        return None

    # ---- style descriptions ----

    def classify(self, mapping: KeyedMapping) -> StyleClassification:
        """Classify every selector of a style description.

        Raises:
            MalformedStyleDescription: for spread entries at the top level,
                duplicate selector names, or a selector using the reserved
                raw-text key.
        """
        result = StyleClassification(mapping)
        seen: set[str] = set()
        for entry in mapping.entries:
            if entry.is_spread:
                raise MalformedStyleDescription(
                    "Spread entries in a style description cannot be precompiled",
                    entry.span,
                )
            name = self.key_name(entry)
            if name == RAW_KEY:
                raise MalformedStyleDescription(
                    f"Selector name {RAW_KEY!r} is reserved", entry.span
                )
            if name is not None:
                if name in seen:
                    raise MalformedStyleDescription(
                        f"Duplicate selector {name!r}", entry.span
                    )
                seen.add(name)
            result.selectors.append(self._classify_selector(name, entry))
        return result

    def _classify_selector(self, name: str | None, entry: Entry) -> SelectorClassification:
        selector = SelectorClassification(name, entry, key_computed=entry.computed)
        if name is None:
            selector.verbatim = True
            return selector

        resolution = self._resolver.resolve(entry.value)
        if isinstance(resolution, Unresolved) or not isinstance(resolution.node, KeyedMapping):
            selector.verbatim = True
            return selector

        seen: set[str] = set()
        for prop in resolution.node.entries:
            if prop.is_spread:
                return self._verbatim(selector)
            prop_name = self.key_name(prop)
            if prop_name is None:
                selector.dynamic_entries.append(prop)
                continue
            if prop_name in seen:
                return self._verbatim(selector)
            seen.add(prop_name)

            value = self.evaluate(prop.value)
            if value is DYNAMIC:
                selector.dynamic_entries.append(prop)
                continue
            try:
                serialize_value(value)
            except SerializationOverflow:
                logger.debug(
                    "Property %r of selector %r has no text form; keeping it dynamic",
                    prop_name,
                    name,
                )
                selector.dynamic_entries.append(prop)
                continue
            selector.static_props[prop_name] = value
        return selector

    @staticmethod
    def _verbatim(selector: SelectorClassification) -> SelectorClassification:
        selector.static_props.clear()
        selector.dynamic_entries.clear()
        selector.verbatim = True
        return selector
