"""Syntax-tree model for the JavaScript subset the precompiler reads.

Expressions form a closed set of kinds: Literal, Identifier, OrderedList,
KeyedMapping, Callable, CallExpression and Other.  Every node is immutable and
remembers the character span it was parsed from, so rewrites can be spliced
back into the original text without reprinting anything else.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union


@dataclass(frozen=True, order=True)
class Span:
    """Half-open ``[start, end)`` range of character offsets into the source."""

    start: int
    end: int

    def overlaps(self, other: Span) -> bool:
        return self.start < other.end and other.start < self.end

    def slice(self, source: str) -> str:
        return source[self.start:self.end]


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Literal:
    """A primitive value: string, number, boolean or ``null`` (None)."""

    span: Span
    value: str | int | float | bool | None


@dataclass(frozen=True)
class Identifier:
    span: Span
    name: str


@dataclass(frozen=True)
class OrderedList:
    """An array literal."""

    span: Span
    items: tuple[Expression, ...] = ()


@dataclass(frozen=True)
class Entry:
    """One entry of an object literal.

    Attributes:
        span: The whole entry, key included.
        key: A Literal for plain keys, any expression for computed keys,
            and None for ``...spread`` entries.
        value: The entry's value (the spread argument for spread entries).
        computed: True for ``[expr]: value`` keys.
        shorthand: True for ``{name}`` entries.
    """

    span: Span
    key: Expression | None
    value: Expression
    computed: bool = False
    shorthand: bool = False

    @property
    def is_spread(self) -> bool:
        return self.key is None


@dataclass(frozen=True)
class KeyedMapping:
    """An object literal."""

    span: Span
    entries: tuple[Entry, ...] = ()


@dataclass(frozen=True)
class Callable:
    """Any function-valued expression: arrow, function expression or method."""

    span: Span
    name: str | None = None
    params: tuple[str, ...] = ()
    body: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class CallExpression:
    """A call.  ``arguments_span`` covers the parentheses and everything in them."""

    span: Span
    callee: Expression
    arguments: tuple[Expression, ...]
    arguments_span: Span
    callee_name: str | None = None


@dataclass(frozen=True)
class Other:
    """Every other expression, kept opaque apart from what analysis needs.

    Attributes:
        children: Nested expressions and statements, in source order.
        assigns: Names this expression writes to (``x = ...``, ``x++``).
        name: Property name of a member access (``a.b`` -> ``"b"``).
    """

    span: Span
    children: tuple[Node, ...] = ()
    assigns: tuple[str, ...] = ()
    name: str | None = None


Expression = Union[Literal, Identifier, OrderedList, KeyedMapping, Callable, CallExpression, Other]

EXPRESSION_TYPES = (Literal, Identifier, OrderedList, KeyedMapping, Callable, CallExpression, Other)


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Declarator:
    """``target = init`` inside a declaration.

    ``names`` lists every binding the target introduces; ``pattern`` is True
    when the target is a destructuring pattern rather than a plain name.
    """

    span: Span
    names: tuple[str, ...]
    init: Expression | None = None
    pattern: bool = False


@dataclass(frozen=True)
class VariableDeclaration:
    span: Span
    kind: str  # "const", "let", "var" or "param"
    declarators: tuple[Declarator, ...] = ()


@dataclass(frozen=True)
class FunctionDeclaration:
    span: Span
    name: str
    function: Callable


@dataclass(frozen=True)
class ClassDeclaration:
    span: Span
    name: str
    body: Other


@dataclass(frozen=True)
class ImportDeclaration:
    span: Span
    names: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExpressionStatement:
    span: Span
    expression: Expression


@dataclass(frozen=True)
class Block:
    span: Span
    body: tuple[Statement, ...] = ()


@dataclass(frozen=True)
class OtherStatement:
    """Control flow (if, loops, try, return, ...) reduced to its children."""

    span: Span
    children: tuple[Node, ...] = ()


Statement = Union[
    VariableDeclaration,
    FunctionDeclaration,
    ClassDeclaration,
    ImportDeclaration,
    ExpressionStatement,
    Block,
    OtherStatement,
]

Node = Union[Expression, Statement, Entry]


@dataclass(frozen=True)
class Module:
    """A parsed compilation unit."""

    source: str
    body: tuple[Statement, ...] = ()

    def text(self, node: Node | Span) -> str:
        """Return the exact source text of *node* (or a span)."""
        span = node if isinstance(node, Span) else node.span
        return span.slice(self.source)

    def position(self, offset: int) -> tuple[int, int]:
        """Return the 1-based ``(line, column)`` of a character offset."""
        line = self.source.count("\n", 0, offset) + 1
        line_start = self.source.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct children of *node* in source order."""
    if isinstance(node, OrderedList):
        yield from node.items
    elif isinstance(node, KeyedMapping):
        yield from node.entries
    elif isinstance(node, Entry):
        if node.computed and node.key is not None:
            yield node.key
        yield node.value
    elif isinstance(node, Callable):
        yield from node.body
    elif isinstance(node, CallExpression):
        yield node.callee
        yield from node.arguments
    elif isinstance(node, Other):
        yield from node.children
    elif isinstance(node, VariableDeclaration):
        for declarator in node.declarators:
            if declarator.init is not None:
                yield declarator.init
    elif isinstance(node, FunctionDeclaration):
        yield node.function
    elif isinstance(node, ClassDeclaration):
        yield node.body
    elif isinstance(node, ExpressionStatement):
        yield node.expression
    elif isinstance(node, Block):
        yield from node.body
    elif isinstance(node, OtherStatement):
        yield from node.children


def walk(module: Module) -> Iterator[Node]:
    """Pre-order traversal of every node in *module*."""
    stack: list[Node] = list(reversed(module.body))
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(list(iter_children(node))))
