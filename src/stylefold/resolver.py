"""Reference resolution confined to a single module.

A :class:`ScopeTable` is built once per module: it records every declaration
(with its initializer) and which scope each identifier occurrence lives in.
:class:`ReferenceResolver` then follows identifier chains to the expression
they name, returning :class:`Unresolved` whenever the answer is not knowable
from this module alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from stylefold.model.nodes import (
    Block,
    Callable,
    CallExpression,
    ClassDeclaration,
    Entry,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    Identifier,
    ImportDeclaration,
    KeyedMapping,
    Literal,
    Module,
    Node,
    OrderedList,
    Other,
    OtherStatement,
    Span,
    VariableDeclaration,
)

__all__ = [
    "Binding",
    "Scope",
    "ScopeTable",
    "build_scope_table",
    "Resolved",
    "Unresolved",
    "Resolution",
    "ReferenceResolver",
]

logger = logging.getLogger(__name__)


@dataclass
class Binding:
    """A declared name.

    ``kind`` is one of const, let, var, function, class, import or param.
    ``init`` is the initializer expression, or the Callable for functions.
    """

    name: str
    kind: str
    init: Expression | None
    span: Span
    reassigned: bool = False


@dataclass
class Scope:
    """A lexical scope; ``is_function`` marks where ``var`` hoists to."""

    parent: Scope | None = None
    is_function: bool = False
    bindings: dict[str, Binding] = field(default_factory=dict)

    def declare(self, binding: Binding) -> None:
        if binding.name in self.bindings:
            # Redeclaration makes the value depend on execution order.
            self.bindings[binding.name].reassigned = True
            return
        self.bindings[binding.name] = binding

    def lookup(self, name: str) -> Binding | None:
        scope: Scope | None = self
        while scope is not None:
            if name in scope.bindings:
                return scope.bindings[name]
            scope = scope.parent
        return None

    def function_scope(self) -> Scope:
        scope = self
        while not scope.is_function and scope.parent is not None:
            scope = scope.parent
        return scope


class ScopeTable:
    """Declarations of one module plus the scope of every identifier in it."""

    def __init__(self, root: Scope):
        self.root = root
        self._scopes: dict[Span, Scope] = {}

    def record(self, identifier: Identifier, scope: Scope) -> None:
        self._scopes[identifier.span] = scope

    def lookup(self, identifier: Identifier) -> Binding | None:
        scope = self._scopes.get(identifier.span)
        if scope is None:
            return None
        return scope.lookup(identifier.name)


class _ScopeBuilder:
    def __init__(self) -> None:
        self.table = ScopeTable(Scope(is_function=True))
        self._assignments: list[tuple[str, Scope]] = []

    def build(self, module: Module) -> ScopeTable:
        self._statements(module.body, self.table.root)
        for name, scope in self._assignments:
            binding = scope.lookup(name)
            if binding is not None:
                binding.reassigned = True
        return self.table

    # ---- statements ----

    def _statements(self, statements, scope: Scope) -> None:
        for statement in statements:
            self._statement(statement, scope)

    def _statement(self, node, scope: Scope) -> None:
        if isinstance(node, VariableDeclaration):
            target = scope.function_scope() if node.kind == "var" else scope
            for declarator in node.declarators:
                init = None if declarator.pattern else declarator.init
                kind = "param" if declarator.pattern else node.kind
                for name in declarator.names:
                    target.declare(Binding(name, kind, init, declarator.span))
                if declarator.init is not None:
                    self._expression(declarator.init, scope)
        elif isinstance(node, FunctionDeclaration):
            scope.declare(Binding(node.name, "function", node.function, node.span))
            self._expression(node.function, scope)
        elif isinstance(node, ClassDeclaration):
            scope.declare(Binding(node.name, "class", None, node.span))
            self._expression(node.body, scope)
        elif isinstance(node, ImportDeclaration):
            for name in node.names:
                scope.declare(Binding(name, "import", None, node.span))
        elif isinstance(node, ExpressionStatement):
            self._expression(node.expression, scope)
        elif isinstance(node, Block):
            self._statements(node.body, Scope(parent=scope))
        elif isinstance(node, OtherStatement):
            inner = Scope(parent=scope)
            for child in node.children:
                self._node(child, inner)

    def _node(self, node: Node, scope: Scope) -> None:
        if isinstance(node, (Literal, Identifier, OrderedList, KeyedMapping, Callable, CallExpression, Other)):
            self._expression(node, scope)
        else:
            self._statement(node, scope)

    # ---- expressions ----

    def _expression(self, node: Expression, scope: Scope) -> None:
        if isinstance(node, Identifier):
            self.table.record(node, scope)
        elif isinstance(node, OrderedList):
            for item in node.items:
                self._expression(item, scope)
        elif isinstance(node, KeyedMapping):
            for entry in node.entries:
                self._entry(entry, scope)
        elif isinstance(node, Callable):
            inner = Scope(parent=scope, is_function=True)
            if node.name:
                inner.declare(Binding(node.name, "function", node, node.span))
            for param in node.params:
                inner.declare(Binding(param, "param", None, node.span))
            self._statements(node.body, inner)
        elif isinstance(node, CallExpression):
            self._expression(node.callee, scope)
            for argument in node.arguments:
                self._expression(argument, scope)
        elif isinstance(node, Other):
            for name in node.assigns:
                self._assignments.append((name, scope))
            for child in node.children:
                self._node(child, scope)

    def _entry(self, entry: Entry, scope: Scope) -> None:
        if entry.computed and entry.key is not None:
            self._expression(entry.key, scope)
        self._expression(entry.value, scope)


def build_scope_table(module: Module) -> ScopeTable:
    """Build the declaration table and identifier scopes for *module*."""
    return _ScopeBuilder().build(module)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Resolved:
    """The expression a reference ultimately names."""

    node: Expression


@dataclass(frozen=True)
class Unresolved:
    """A reference whose value is not knowable inside this module."""

    name: str
    reason: str


Resolution = Union[Resolved, Unresolved]

_UNRESOLVABLE_KINDS = {
    "import": "imported from another module",
    "param": "bound by a parameter or destructuring pattern",
    "class": "a class",
}


class ReferenceResolver:
    """Follow identifier chains through a module's declarations."""

    def __init__(self, scopes: ScopeTable):
        self._scopes = scopes

    def resolve(self, node: Expression) -> Resolution:
        """Resolve *node* to the expression it stands for.

        Non-identifiers resolve to themselves; identifiers are followed
        through ``const a = b`` style chains until a non-identifier is reached.
        """
        seen: set[Span] = set()
        while isinstance(node, Identifier):
            if node.span in seen:
                return self._unresolved(node, "circular reference")
            seen.add(node.span)
            binding = self._scopes.lookup(node)
            if binding is None:
                return self._unresolved(node, "not declared in this module")
            if binding.kind in _UNRESOLVABLE_KINDS:
                return self._unresolved(node, _UNRESOLVABLE_KINDS[binding.kind])
            if binding.reassigned:
                return self._unresolved(node, "reassigned")
            if binding.init is None:
                return self._unresolved(node, "declared without an initializer")
            if binding.kind != "function" and node.span.start < binding.span.end:
                return self._unresolved(node, "used before its declaration")
            node = binding.init
        return Resolved(node)

    @staticmethod
    def _unresolved(node: Identifier, reason: str) -> Unresolved:
        logger.debug("Unresolved reference %r: %s", node.name, reason)
        return Unresolved(node.name, reason)
