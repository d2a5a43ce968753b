"""Lark Transformer that converts a JavaScript parse tree into the node model."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import LarkError, VisitError

from stylefold.model.nodes import (
    EXPRESSION_TYPES,
    Block,
    Callable,
    CallExpression,
    ClassDeclaration,
    Declarator,
    Entry,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    Identifier,
    ImportDeclaration,
    KeyedMapping,
    Literal,
    Module,
    OrderedList,
    Other,
    OtherStatement,
    Span,
    VariableDeclaration,
)
from stylefold.parser.errors import ParseError

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"

_STATEMENT_TYPES = (
    VariableDeclaration,
    FunctionDeclaration,
    ClassDeclaration,
    ImportDeclaration,
    ExpressionStatement,
    Block,
    OtherStatement,
)

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    "\n": "",
    "\r\n": "",
}


def _unescape(match: re.Match[str]) -> str:
    seq = match.group(1)
    if seq.startswith("u{"):
        return chr(int(seq[2:-1], 16))
    if seq[0] in "ux" and len(seq) > 1:
        return chr(int(seq[1:], 16))
    return _SIMPLE_ESCAPES.get(seq, seq)


def decode_string(raw: str) -> str:
    """Decode a quoted JavaScript string (or template) literal."""
    return _ESCAPE_RE.sub(_unescape, raw[1:-1])


def parse_number(raw: str) -> int | float:
    """Convert a JavaScript numeric literal to a Python number."""
    text = raw.replace("_", "")
    if text.endswith("n"):
        text = text[:-1]
    if text[:2].lower() in ("0x", "0b", "0o"):
        return int(text, 0)
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


def _pattern_names(node: object) -> tuple[str, ...]:
    """Collect the names bound by a destructuring pattern (or plain name)."""
    if isinstance(node, str):
        return (node,)
    if isinstance(node, Identifier):
        return (node.name,)
    if isinstance(node, OrderedList):
        return tuple(name for item in node.items for name in _pattern_names(item))
    if isinstance(node, KeyedMapping):
        return tuple(name for entry in node.entries for name in _pattern_names(entry.value))
    if isinstance(node, Other):
        # spread element / rest argument
        return tuple(name for child in node.children for name in _pattern_names(child))
    if isinstance(node, tuple):
        return tuple(name for item in node for name in _pattern_names(item))
    return ()


def _assigned_names(target: object) -> tuple[str, ...]:
    """Names whose value changes when *target* is assigned to.

    Writing to ``a.b`` or ``a[k]`` changes ``a``.
    """
    while isinstance(target, Other) and target.children:
        target = target.children[0]
    return _pattern_names(target)


def _nodes(children: list[object]) -> tuple:
    """Drop tokens and empty results, keeping model nodes in order."""
    return tuple(c for c in children if c is not None and not isinstance(c, Token))


class _Arguments:
    """Intermediate result for a parenthesised argument list."""

    def __init__(self, span: Span, items: tuple[Expression, ...]):
        self.span = span
        self.items = items


class _Params(tuple):
    """Names bound by a parameter list."""


@v_args(meta=True)
class ModuleTransformer(Transformer):  # type: ignore[type-arg]
    """Transform a Lark parse tree into frozen model nodes."""

    def __init__(self, source: str):
        super().__init__()
        self._source = source

    @staticmethod
    def _span(meta) -> Span:
        return Span(meta.start_pos, meta.end_pos)

    def __default__(self, data, children, meta):
        raise ParseError(f"Unhandled grammar rule: {data}")

    # ---- literals ----

    def identifier(self, meta, children) -> Identifier:
        return Identifier(self._span(meta), str(children[0]))

    def binding_name(self, meta, children) -> Identifier:
        return Identifier(self._span(meta), str(children[0]))

    def number(self, meta, children) -> Literal:
        return Literal(self._span(meta), parse_number(str(children[0])))

    def string(self, meta, children) -> Literal:
        return Literal(self._span(meta), decode_string(str(children[0])))

    def template(self, meta, children) -> Expression:
        raw = str(children[0])
        if "${" in raw:
            return Other(self._span(meta))
        return Literal(self._span(meta), decode_string(raw))

    def true_literal(self, meta, children) -> Literal:
        return Literal(self._span(meta), True)

    def false_literal(self, meta, children) -> Literal:
        return Literal(self._span(meta), False)

    def null_literal(self, meta, children) -> Literal:
        return Literal(self._span(meta), None)

    def this_expr(self, meta, children) -> Other:
        return Other(self._span(meta))

    # ---- arrays and objects ----

    def array_literal(self, meta, children) -> OrderedList:
        return OrderedList(self._span(meta), _nodes(children))

    def object_literal(self, meta, children) -> KeyedMapping:
        return KeyedMapping(self._span(meta), _nodes(children))

    def keyed_property(self, meta, children) -> Entry:
        key, value = children
        return Entry(self._span(meta), key, value)

    def computed_property(self, meta, children) -> Entry:
        key, value = children
        return Entry(self._span(meta), key, value, computed=True)

    def shorthand_property(self, meta, children) -> Entry:
        token = children[0]
        span = Span(token.start_pos, token.end_pos)
        return Entry(
            self._span(meta),
            Literal(span, str(token)),
            Identifier(span, str(token)),
            shorthand=True,
        )

    def spread_property(self, meta, children) -> Entry:
        return Entry(self._span(meta), None, children[0])

    def method(self, meta, children) -> Entry:
        key, params, body = _nodes(children)[-3:]
        return Entry(self._span(meta), key, Callable(self._span(meta), None, params, body))

    def prop_name(self, meta, children) -> str:
        return str(children[0])

    def name_key(self, meta, children) -> Literal:
        return Literal(self._span(meta), children[0])

    def string_key(self, meta, children) -> Literal:
        return Literal(self._span(meta), decode_string(str(children[0])))

    def number_key(self, meta, children) -> Literal:
        return Literal(self._span(meta), parse_number(str(children[0])))

    # ---- functions ----

    def params(self, meta, children) -> _Params:
        return _Params(_pattern_names(tuple(children)))

    def default_param(self, meta, children) -> _Params:
        return _Params(_pattern_names(children[0]))

    def rest_param(self, meta, children) -> _Params:
        return _Params(_pattern_names(children[0]))

    def function_body(self, meta, children) -> tuple:
        return _nodes(children)

    def function_expr(self, meta, children) -> Callable:
        name = str(children[0]) if isinstance(children[0], Token) else None
        params, body = children[-2:]
        return Callable(self._span(meta), name, params, body)

    def arrow_params(self, meta, children) -> _Params:
        if isinstance(children[0], Token):
            return _Params((str(children[0]),))
        return children[0]

    def arrow_function(self, meta, children) -> Callable:
        params, body = children
        if not isinstance(body, tuple):
            body = (ExpressionStatement(body.span, body),)
        return Callable(self._span(meta), None, params, body)

    def class_expr(self, meta, children) -> Other:
        return Other(self._span(meta), _nodes(children))

    def class_heritage(self, meta, children) -> Expression:
        return children[0]

    def class_body(self, meta, children) -> Other:
        members = []
        for child in _nodes(children):
            members.append(child.value if isinstance(child, Entry) else child)
        return Other(self._span(meta), tuple(members))

    def class_field(self, meta, children) -> Expression | None:
        nodes = _nodes(children)
        return nodes[1] if len(nodes) > 1 else None

    # ---- operators ----

    def sequence(self, meta, children) -> Other:
        return Other(self._span(meta), tuple(children))

    def assignment(self, meta, children) -> Other:
        target, value = children
        return Other(self._span(meta), (target, value), assigns=_assigned_names(target))

    def conditional_expr(self, meta, children) -> Other:
        return Other(self._span(meta), tuple(children))

    def binary_expr(self, meta, children) -> Other:
        return Other(self._span(meta), tuple(children))

    def negation(self, meta, children) -> Expression:
        operand = children[0]
        if (
            isinstance(operand, Literal)
            and isinstance(operand.value, (int, float))
            and not isinstance(operand.value, bool)
        ):
            return Literal(self._span(meta), -operand.value)
        return Other(self._span(meta), (operand,))

    def unary_expr(self, meta, children) -> Other:
        return Other(self._span(meta), tuple(children))

    def update_expr(self, meta, children) -> Other:
        target = children[0]
        return Other(self._span(meta), (target,), assigns=_assigned_names(target))

    # ---- member access and calls ----

    def member(self, meta, children) -> Other:
        obj, name = children
        return Other(self._span(meta), (obj,), name=name)

    def index(self, meta, children) -> Other:
        return Other(self._span(meta), tuple(children))

    def arguments(self, meta, children) -> _Arguments:
        return _Arguments(self._span(meta), tuple(children))

    def spread(self, meta, children) -> Other:
        return Other(self._span(meta), (children[0],))

    def call(self, meta, children) -> CallExpression:
        callee, args = children
        if isinstance(callee, Identifier):
            callee_name = callee.name
        elif isinstance(callee, Other):
            callee_name = callee.name
        else:
            callee_name = None
        return CallExpression(self._span(meta), callee, args.items, args.span, callee_name)

    def new_expr(self, meta, children) -> Other:
        callee = children[0]
        args = children[1].items if len(children) > 1 else ()
        return Other(self._span(meta), (callee, *args))

    bare_new = new_expr

    def tagged_template(self, meta, children) -> Other:
        return Other(self._span(meta), (children[0],))

    # ---- declarations ----

    def var_kind(self, meta, children) -> str:
        return str(children[0])

    def declarator(self, meta, children) -> Declarator:
        target = children[0]
        init = children[1] if len(children) > 1 else None
        return Declarator(
            self._span(meta),
            _pattern_names(target),
            init,
            pattern=not isinstance(target, Identifier),
        )

    def var_decl(self, meta, children) -> VariableDeclaration:
        kind, *declarators = children
        return VariableDeclaration(self._span(meta), kind, tuple(declarators))

    def function_decl(self, meta, children) -> FunctionDeclaration:
        name, params, body = children
        function = Callable(self._span(meta), str(name), params, body)
        return FunctionDeclaration(self._span(meta), str(name), function)

    def class_decl(self, meta, children) -> ClassDeclaration:
        name = str(children[0])
        nodes = _nodes(children)
        body = nodes[-1]
        if len(nodes) > 1:
            body = Other(body.span, (nodes[0], *body.children))
        return ClassDeclaration(self._span(meta), name, body)

    def import_default(self, meta, children) -> tuple[str, ...]:
        return (str(children[0]),)

    def import_namespace(self, meta, children) -> tuple[str, ...]:
        return (str(children[-1]),)

    def named_imports(self, meta, children) -> tuple[str, ...]:
        return tuple(name for names in children for name in names)

    def import_specifier(self, meta, children) -> tuple[str, ...]:
        return (str(children[-1]),)

    def import_decl(self, meta, children) -> ImportDeclaration:
        names = tuple(
            name for child in children if isinstance(child, tuple) for name in child
        )
        return ImportDeclaration(self._span(meta), names)

    def export_clause(self, meta, children) -> None:
        return None

    def export_specifier(self, meta, children) -> None:
        return None

    def export_decl(self, meta, children):
        nodes = _nodes(children)
        if nodes and isinstance(nodes[0], _STATEMENT_TYPES):
            return nodes[0]
        if nodes and isinstance(nodes[0], EXPRESSION_TYPES):
            return ExpressionStatement(self._span(meta), nodes[0])
        return OtherStatement(self._span(meta))

    # ---- statements ----

    def asi_statement(self, meta, children):
        return children[0]

    def expr_stmt(self, meta, children) -> ExpressionStatement:
        return ExpressionStatement(self._span(meta), children[0])

    def empty_stmt(self, meta, children) -> None:
        return None

    def block(self, meta, children) -> Block:
        return Block(self._span(meta), _nodes(children))

    def _other_statement(self, meta, children) -> OtherStatement:
        return OtherStatement(self._span(meta), _nodes(children))

    return_stmt = _other_statement
    throw_stmt = _other_statement
    jump_stmt = _other_statement
    if_stmt = _other_statement
    while_stmt = _other_statement
    do_while_stmt = _other_statement
    for_stmt = _other_statement
    for_in_stmt = _other_statement
    try_stmt = _other_statement

    def for_binding(self, meta, children):
        if len(children) == 2:
            kind, target = children
            declarator = Declarator(target.span, _pattern_names(target), None, pattern=True)
            return VariableDeclaration(self._span(meta), kind, (declarator,))
        target = children[0]
        return Other(self._span(meta), (target,), assigns=_assigned_names(target))

    def catch_clause(self, meta, children) -> Block:
        block = children[-1]
        if len(children) == 1:
            return block
        param = children[0]
        declarator = Declarator(param.span, _pattern_names(param), None, pattern=True)
        binding = VariableDeclaration(param.span, "param", (declarator,))
        return Block(self._span(meta), (binding, *block.body))

    def finally_clause(self, meta, children) -> Block:
        return children[0]

    def start(self, meta, children) -> Module:
        return Module(self._source, _nodes(children))


@lru_cache(maxsize=1)
def _parser() -> Lark:
    return Lark(
        GRAMMAR_PATH.read_text(),
        parser="earley",
        lexer="basic",
        start="start",
        propagate_positions=True,
        ambiguity="resolve",
    )


def parse_module(source: str) -> Module:
    """Parse JavaScript module source into a Module tree."""
    try:
        tree = _parser().parse(source)
    except LarkError as e:
        # Try to extract line/column from Lark exceptions.
        line = getattr(e, "line", None)
        column = getattr(e, "column", None)
        raise ParseError(str(e), line=line, column=column) from e
    try:
        return ModuleTransformer(source).transform(tree)
    except VisitError as e:
        raise ParseError(str(e.orig_exc)) from e
