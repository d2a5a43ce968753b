"""Find the style-sheet construction calls in a module."""

from __future__ import annotations

from typing import AbstractSet, Iterator

from stylefold.model.nodes import CallExpression, Identifier, Literal, Module, walk

__all__ = ["DEFAULT_IDENTIFIERS", "find_style_calls", "is_noop_call"]

DEFAULT_IDENTIFIERS = frozenset({"createStyleSheet"})


def find_style_calls(module: Module, names: AbstractSet[str]) -> Iterator[CallExpression]:
    """Yield calls to any of *names* in source order.

    Both ``createStyleSheet(...)`` and member calls such as
    ``jss.createStyleSheet(...)`` match.  An enclosing call is yielded before
    the calls nested inside its arguments.
    """
    for node in walk(module):
        if isinstance(node, CallExpression) and node.callee_name in names:
            yield node


def is_noop_call(call: CallExpression) -> bool:
    """True for ``f()``, ``f(null)`` and ``f(undefined)``: nothing to compile."""
    if not call.arguments:
        return True
    first = call.arguments[0]
    if isinstance(first, Literal) and first.value is None:
        return True
    return isinstance(first, Identifier) and first.name == "undefined"
