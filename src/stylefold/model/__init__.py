"""stylefold model layer -- public type re-exports."""

from stylefold.model.diagnostic import Diagnostic, Severity
from stylefold.model.nodes import (
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
    Statement,
    VariableDeclaration,
    iter_children,
    walk,
)

__all__ = [
    # expressions
    "Span",
    "Literal",
    "Identifier",
    "OrderedList",
    "Entry",
    "KeyedMapping",
    "Callable",
    "CallExpression",
    "Other",
    "Expression",
    # statements
    "Declarator",
    "VariableDeclaration",
    "FunctionDeclaration",
    "ClassDeclaration",
    "ImportDeclaration",
    "ExpressionStatement",
    "Block",
    "OtherStatement",
    "Statement",
    "Module",
    "iter_children",
    "walk",
    # diagnostic
    "Severity",
    "Diagnostic",
]
