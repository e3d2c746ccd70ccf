"""Render a ToyLang AST back to source text.

The output is not a pretty-printer's: every binary, logical, unary and
assignment expression is wrapped in parentheses so that precedence never
has to be reconstructed, and statements are laid out one per line.
Parsing the output yields a tree equal to the input. A built tree with an
else-less ``if`` right before an ``else`` is printed with braces around it,
which keeps its meaning but adds a block on reparse.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .ast import (
    Program, ExpressionStatement, VariableStatement, VariableDeclaration,
    BlockStatement, EmptyStatement, IfStatement, WhileStatement,
    DoWhileStatement, ForStatement, FunctionDeclaration, ReturnStatement,
    Identifier, NumericLiteral, StringLiteral, BooleanLiteral, NullLiteral,
    UnaryExpression, BinaryExpression, LogicalExpression,
    AssignmentExpression, CallExpression,
)

INDENT = '    '


def to_source(node: Any, keywords: Optional[Dict[str, str]] = None) -> str:
    """Return source text for ``node``.

    ``keywords`` maps keyword kinds (``'LET'``, ``'IF'`` ...) to the
    spelling to emit; English spellings are used for missing kinds.
    """
    spell = dict(_ENGLISH)
    if keywords:
        spell.update(keywords)
    if isinstance(node, Program):
        return '\n'.join(_statement(s, spell, 0) for s in node.body) + ('\n' if node.body else '')
    if _is_statement(node):
        return _statement(node, spell, 0)
    return _expression(node, spell)


_ENGLISH = {
    'LET': 'let', 'IF': 'if', 'ELSE': 'else', 'WHILE': 'while', 'DO': 'do',
    'FOR': 'for', 'TRUE': 'true', 'FALSE': 'false', 'NULL': 'null',
    'DEF': 'def', 'RETURN': 'return',
}

_STATEMENT_TYPES = (
    ExpressionStatement, VariableStatement, BlockStatement, EmptyStatement,
    IfStatement, WhileStatement, DoWhileStatement, ForStatement,
    FunctionDeclaration, ReturnStatement,
)


def _is_statement(node: Any) -> bool:
    return isinstance(node, _STATEMENT_TYPES)


def _statement(node: Any, kw: Dict[str, str], depth: int) -> str:
    pad = INDENT * depth
    if isinstance(node, ExpressionStatement):
        return f"{pad}{_expression(node.expression, kw)};"
    if isinstance(node, VariableStatement):
        return f"{pad}{_declarations(node, kw)};"
    if isinstance(node, BlockStatement):
        return pad + _block(node, kw, depth)
    if isinstance(node, EmptyStatement):
        return f"{pad};"
    if isinstance(node, IfStatement):
        consequent = node.consequent
        if node.alternate is not None and _dangles(consequent):
            # braces keep the else with this if
            consequent = BlockStatement([consequent])
        text = f"{pad}{kw['IF']} ({_expression(node.test, kw)}) {_body(consequent, kw, depth)}"
        if node.alternate is not None:
            text += f" {kw['ELSE']} {_body(node.alternate, kw, depth)}"
        return text
    if isinstance(node, WhileStatement):
        return f"{pad}{kw['WHILE']} ({_expression(node.test, kw)}) {_body(node.body, kw, depth)}"
    if isinstance(node, DoWhileStatement):
        return (f"{pad}{kw['DO']} {_body(node.body, kw, depth)} "
                f"{kw['WHILE']} ({_expression(node.test, kw)});")
    if isinstance(node, ForStatement):
        if node.init is None:
            init = ''
        elif isinstance(node.init, VariableStatement):
            init = _declarations(node.init, kw)
        else:
            init = _expression(node.init, kw)
        test = '' if node.test is None else ' ' + _expression(node.test, kw)
        update = '' if node.update is None else ' ' + _expression(node.update, kw)
        return f"{pad}{kw['FOR']} ({init};{test};{update}) {_body(node.body, kw, depth)}"
    if isinstance(node, FunctionDeclaration):
        params = ', '.join(p.name for p in node.params)
        return f"{pad}{kw['DEF']} {node.name.name}({params}) {_block(node.body, kw, depth)}"
    if isinstance(node, ReturnStatement):
        if node.argument is None:
            return f"{pad}{kw['RETURN']};"
        return f"{pad}{kw['RETURN']} {_expression(node.argument, kw)};"
    raise TypeError(f"Unsupported statement for printing: {type(node).__name__}")


def _dangles(node: Any) -> bool:
    """Whether printed ``node`` ends in an ``if`` that would take a following ``else``."""
    if isinstance(node, IfStatement):
        return node.alternate is None or _dangles(node.alternate)
    if isinstance(node, (WhileStatement, ForStatement)):
        return _dangles(node.body)
    return False


def _body(node: Any, kw: Dict[str, str], depth: int) -> str:
    if isinstance(node, BlockStatement):
        return _block(node, kw, depth)
    return _statement(node, kw, depth).lstrip()


def _block(node: BlockStatement, kw: Dict[str, str], depth: int) -> str:
    if not node.body:
        return '{}'
    lines: List[str] = ['{']
    lines += [_statement(s, kw, depth + 1) for s in node.body]
    lines.append(INDENT * depth + '}')
    return '\n'.join(lines)


def _declarations(node: VariableStatement, kw: Dict[str, str]) -> str:
    return f"{kw['LET']} " + ', '.join(_declaration(d, kw) for d in node.declarations)


def _declaration(node: VariableDeclaration, kw: Dict[str, str]) -> str:
    if node.init is None:
        return node.id.name
    return f"{node.id.name} = {_expression(node.init, kw)}"


def _expression(node: Any, kw: Dict[str, str]) -> str:
    if isinstance(node, Identifier):
        return node.name
    if isinstance(node, NumericLiteral):
        text = repr(node.value)
        # literals have no exponent form
        return format(node.value, 'f') if 'e' in text else text
    if isinstance(node, StringLiteral):
        quote = "'" if '"' in node.value else '"'
        return f"{quote}{node.value}{quote}"
    if isinstance(node, BooleanLiteral):
        return kw['TRUE'] if node.value else kw['FALSE']
    if isinstance(node, NullLiteral):
        return kw['NULL']
    if isinstance(node, UnaryExpression):
        return f"({node.operator}{_expression(node.argument, kw)})"
    if isinstance(node, (BinaryExpression, LogicalExpression, AssignmentExpression)):
        return f"({_expression(node.left, kw)} {node.operator} {_expression(node.right, kw)})"
    if isinstance(node, CallExpression):
        args = ', '.join(_expression(a, kw) for a in node.arguments)
        return f"{_expression(node.callee, kw)}({args})"
    raise TypeError(f"Unsupported expression for printing: {type(node).__name__}")
