"""Abstract Syntax Tree (AST) definitions for ToyLang.

The AST classes defined in this module represent the syntactic structure
of parsed ToyLang programs. Nodes are frozen once built and each one is
owned by its parent; the ``Program`` node owns the whole tree.

Every node records the ``start``/``end`` offsets of the source text it
was parsed from. Those fields are keyword-only and take no part in
equality, so two trees for the same program compare equal however the
source was laid out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    start: int = field(default=0, compare=False, repr=False, kw_only=True)
    end: int = field(default=0, compare=False, repr=False, kw_only=True)


@dataclass(frozen=True)
class Program(Node):
    body: List[Node]


# Expressions

@dataclass(frozen=True)
class Identifier(Node):
    name: str


@dataclass(frozen=True)
class NumericLiteral(Node):
    value: Any  # int or float


@dataclass(frozen=True)
class StringLiteral(Node):
    value: str


@dataclass(frozen=True)
class BooleanLiteral(Node):
    value: bool


@dataclass(frozen=True)
class NullLiteral(Node):
    value: None = None


@dataclass(frozen=True)
class UnaryExpression(Node):
    operator: str
    argument: Node


@dataclass(frozen=True)
class BinaryExpression(Node):
    operator: str
    left: Node
    right: Node


@dataclass(frozen=True)
class LogicalExpression(Node):
    operator: str  # '&&' or '||'
    left: Node
    right: Node


@dataclass(frozen=True)
class AssignmentExpression(Node):
    operator: str  # '=', '+=', '-=', '*=', '/='
    left: Identifier
    right: Node


@dataclass(frozen=True)
class CallExpression(Node):
    callee: Node
    arguments: List[Node]


# Statements

@dataclass(frozen=True)
class ExpressionStatement(Node):
    expression: Node


@dataclass(frozen=True)
class VariableDeclaration(Node):
    id: Identifier
    init: Optional[Node]


@dataclass(frozen=True)
class VariableStatement(Node):
    declarations: List[VariableDeclaration]


@dataclass(frozen=True)
class BlockStatement(Node):
    body: List[Node]


@dataclass(frozen=True)
class EmptyStatement(Node):
    pass


@dataclass(frozen=True)
class IfStatement(Node):
    test: Node
    consequent: Node
    alternate: Optional[Node]


@dataclass(frozen=True)
class WhileStatement(Node):
    test: Node
    body: Node


@dataclass(frozen=True)
class DoWhileStatement(Node):
    body: Node
    test: Node


@dataclass(frozen=True)
class ForStatement(Node):
    init: Optional[Node]  # VariableStatement, expression or None
    test: Optional[Node]
    update: Optional[Node]
    body: Node


@dataclass(frozen=True)
class FunctionDeclaration(Node):
    name: Identifier
    params: List[Identifier]
    body: BlockStatement


@dataclass(frozen=True)
class ReturnStatement(Node):
    argument: Optional[Node]


LITERAL_TYPES = (NumericLiteral, StringLiteral, BooleanLiteral, NullLiteral)


def number_value(raw: str) -> Any:
    """Convert the text of a numeric literal to ``int`` or ``float``."""
    if '.' in raw:
        return float(raw)
    return int(raw)


def string_value(raw: str) -> str:
    """Strip the quotes of a string literal; literals have no escapes."""
    return raw[1:-1]
