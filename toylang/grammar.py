"""Declarative front end for ToyLang built on Lark.

The same language the recursive-descent parser accepts is written down
here as a Lark LALR(1) grammar. The parse tree is transformed into the
very same AST classes, so the two front ends can be checked against each
other: for any valid program :func:`parse_with_lark` and
:func:`toylang.parser.parse_program` return equal trees.

Keyword terminals are generated from the keyword spelling table. They
carry a higher priority than ``IDENTIFIER`` and are word-bounded, which
reproduces the first-match rule order of the hand-written lexer.

Lark reports the ``if``/``else`` shift/reduce conflict and resolves it by
shifting, which binds ``else`` to the nearest ``if``.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedToken, VisitError

from .ast import (
    Program, ExpressionStatement, VariableStatement, VariableDeclaration,
    BlockStatement, EmptyStatement, IfStatement, WhileStatement,
    DoWhileStatement, ForStatement, FunctionDeclaration, ReturnStatement,
    Identifier, NumericLiteral, StringLiteral, BooleanLiteral, NullLiteral,
    UnaryExpression, BinaryExpression, LogicalExpression,
    AssignmentExpression, CallExpression, number_value, string_value,
)
from .errors import LexError, ParseError
from .keywords import DEFAULT_KEYWORDS, KEYWORD_KINDS, keyword_pattern


TOYLANG_GRAMMAR = r"""
    start: statement* final_statement?

    // Statements
    ?statement: expression _SEMI -> expression_statement
              | variable_declarations _SEMI -> variable_statement
              | _RETURN [expression] _SEMI -> return_statement
              | block
              | empty_statement
              | if_statement
              | while_statement
              | do_while_statement
              | for_statement
              | function_declaration

    // the terminator may be left out at the end of the input
    ?final_statement: expression -> final_expression_statement
                    | variable_declarations -> final_variable_statement
                    | _RETURN [expression] -> final_return_statement

    block: _CURLY_START statement* _CURLY_END
    empty_statement: _SEMI

    variable_declarations: _LET variable_declaration (_COMMA variable_declaration)*
    variable_declaration: IDENTIFIER [SIMPLE_ASSIGNMENT assignment]

    if_statement: _IF _PAREN_START expression _PAREN_END statement [_ELSE statement]
    while_statement: _WHILE _PAREN_START expression _PAREN_END statement
    do_while_statement: _DO statement _WHILE _PAREN_START expression _PAREN_END _SEMI
    for_statement: _FOR _PAREN_START [for_init] _SEMI [expression] _SEMI [expression] _PAREN_END statement
    ?for_init: variable_declarations
             | expression

    function_declaration: _DEF IDENTIFIER _PAREN_START [parameters] _PAREN_END block
    parameters: IDENTIFIER (_COMMA IDENTIFIER)*

    // Expressions with precedence
    ?expression: assignment
    ?assignment: logical_or
               | logical_or (SIMPLE_ASSIGNMENT | COMPLEX_ASSIGNMENT) assignment -> assignment_expression
    ?logical_or: logical_and (LOGICAL_OR logical_and)*
    ?logical_and: equality (LOGICAL_AND equality)*
    ?equality: relational (EQUALITY_OPERATOR relational)*
    ?relational: additive (RELATIONAL_OPERATOR additive)*
    ?additive: multiplicative (ADDITIVE_OPERATOR multiplicative)*
    ?multiplicative: unary (MULTIPLICATIVE_OPERATOR unary)*
    ?unary: (ADDITIVE_OPERATOR | LOGICAL_NOT) unary -> unary_expression
          | call
    ?call: primary
         | call _PAREN_START [arguments] _PAREN_END -> call_expression
    arguments: assignment (_COMMA assignment)*
    ?primary: NUMBER -> numeric_literal
            | STRING -> string_literal
            | TRUE -> true_literal
            | FALSE -> false_literal
            | NULL -> null_literal
            | IDENTIFIER -> identifier
            | _PAREN_START expression _PAREN_END

    // Tokens
    _SEMI: ";"
    _CURLY_START: "{"
    _CURLY_END: "}"
    _PAREN_START: "("
    _PAREN_END: ")"
    _COMMA: ","

    NUMBER: /\d+(?:\.\d+)?/
    STRING: /"[^"\n]*"/ | /'[^'\n]*'/
    IDENTIFIER: /[A-Za-z_]\w*/

    EQUALITY_OPERATOR: /[=!]=/
    SIMPLE_ASSIGNMENT: "="
    COMPLEX_ASSIGNMENT: /[*\/+\-]=/
    ADDITIVE_OPERATOR: /[+\-]/
    MULTIPLICATIVE_OPERATOR: /[*\/]/
    RELATIONAL_OPERATOR: /[<>]=?/
    LOGICAL_AND: "&&"
    LOGICAL_OR: "||"
    LOGICAL_NOT: "!"

    %ignore /\s+/
    LINE_COMMENT: /\/\/[^\n]*/
    %ignore LINE_COMMENT
    BLOCK_COMMENT: /\/\*[\s\S]*?\*\//
    %ignore BLOCK_COMMENT
"""

# Keywords that carry no value in the tree are filtered out of it.
_KEPT_KEYWORDS = ('TRUE', 'FALSE', 'NULL')


def build_grammar(keywords: Optional[Dict[str, Tuple[str, ...]]] = None) -> str:
    """Append the keyword terminals for a spelling table to the grammar."""
    keywords = DEFAULT_KEYWORDS if keywords is None else keywords
    lines: List[str] = [TOYLANG_GRAMMAR]
    for kind in KEYWORD_KINDS:
        name = kind if kind in _KEPT_KEYWORDS else '_' + kind
        spellings = keywords.get(kind, ())
        if spellings:
            pattern = keyword_pattern(spellings).replace('/', '\\/')
            lines.append(f"    {name}.2: /{pattern}/")
        else:
            # a kind without spellings can never be produced
            lines.append(f"    %declare {name}")
    return '\n'.join(lines) + '\n'


_PARSERS: Dict[Tuple, Lark] = {}


def get_parser(keywords: Optional[Dict[str, Tuple[str, ...]]] = None) -> Lark:
    key = tuple(sorted((keywords or DEFAULT_KEYWORDS).items()))
    parser = _PARSERS.get(key)
    if parser is None:
        parser = Lark(
            build_grammar(keywords),
            parser='lalr',
            lexer='basic',
            propagate_positions=True,
            maybe_placeholders=True,
        )
        _PARSERS[key] = parser
    return parser


def _loc(meta) -> Dict[str, int]:
    if getattr(meta, 'empty', True):
        return {'start': 0, 'end': 0}
    return {'start': meta.start_pos, 'end': meta.end_pos}


def _token_loc(token: Token) -> Dict[str, int]:
    return {'start': token.start_pos, 'end': token.end_pos}


@v_args(meta=True)
class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def start(self, meta, items):
        end = items[-1].end if items else 0
        return Program([item for item in items if item is not None], start=0, end=end)

    # Statements
    def expression_statement(self, meta, items):
        return ExpressionStatement(items[0], **_loc(meta))

    final_expression_statement = expression_statement

    def variable_statement(self, meta, items):
        return VariableStatement(items[0].declarations, **_loc(meta))

    final_variable_statement = variable_statement

    def return_statement(self, meta, items):
        return ReturnStatement(items[0], **_loc(meta))

    final_return_statement = return_statement

    def block(self, meta, items):
        return BlockStatement(list(items), **_loc(meta))

    def empty_statement(self, meta, items):
        return EmptyStatement(**_loc(meta))

    def variable_declarations(self, meta, items):
        # spans `let` and the declarators; the statement rule adds the terminator
        return VariableStatement(list(items), **_loc(meta))

    def variable_declaration(self, meta, items):
        name, _, init = items
        return VariableDeclaration(Identifier(str(name), **_token_loc(name)), init, **_loc(meta))

    def if_statement(self, meta, items):
        test, consequent, alternate = items
        return IfStatement(test, consequent, alternate, **_loc(meta))

    def while_statement(self, meta, items):
        test, body = items
        return WhileStatement(test, body, **_loc(meta))

    def do_while_statement(self, meta, items):
        body, test = items
        return DoWhileStatement(body, test, **_loc(meta))

    def for_statement(self, meta, items):
        init, test, update, body = items
        return ForStatement(init, test, update, body, **_loc(meta))

    def function_declaration(self, meta, items):
        name, params, body = items
        return FunctionDeclaration(Identifier(str(name), **_token_loc(name)), params or [], body, **_loc(meta))

    def parameters(self, meta, items):
        return [Identifier(str(token), **_token_loc(token)) for token in items]

    # Expressions
    def assignment_expression(self, meta, items):
        left, operator, right = items
        if not isinstance(left, Identifier):
            raise ParseError('Invalid left-hand side in assignment expression',
                             left.start, operator.end_pos,
                             expected='IDENTIFIER', actual=type(left).__name__)
        return AssignmentExpression(str(operator), left, right, **_loc(meta))

    def _binary(self, node_class, items):
        left = items[0]
        for i in range(1, len(items), 2):
            right = items[i + 1]
            left = node_class(str(items[i]), left, right, start=left.start, end=right.end)
        return left

    def logical_or(self, meta, items):
        return self._binary(LogicalExpression, items)

    def logical_and(self, meta, items):
        return self._binary(LogicalExpression, items)

    def equality(self, meta, items):
        return self._binary(BinaryExpression, items)

    relational = equality
    additive = equality
    multiplicative = equality

    def unary_expression(self, meta, items):
        operator, argument = items
        return UnaryExpression(str(operator), argument, **_loc(meta))

    def call_expression(self, meta, items):
        callee, arguments = items
        return CallExpression(callee, arguments or [], **_loc(meta))

    def arguments(self, meta, items):
        return list(items)

    def numeric_literal(self, meta, items):
        return NumericLiteral(number_value(str(items[0])), **_loc(meta))

    def string_literal(self, meta, items):
        return StringLiteral(string_value(str(items[0])), **_loc(meta))

    def true_literal(self, meta, items):
        return BooleanLiteral(True, **_loc(meta))

    def false_literal(self, meta, items):
        return BooleanLiteral(False, **_loc(meta))

    def null_literal(self, meta, items):
        return NullLiteral(**_loc(meta))

    def identifier(self, meta, items):
        return Identifier(str(items[0]), **_loc(meta))


def parse_with_lark(source: str, keywords: Optional[Dict[str, Tuple[str, ...]]] = None) -> Program:
    """Parse ToyLang source into a Program AST with the Lark grammar.

    Lark's own exceptions are translated into :class:`LexError` and
    :class:`ParseError` with the same offsets the hand-written parser
    reports.
    """
    try:
        tree = get_parser(keywords).parse(source)
    except UnexpectedCharacters as e:
        char = source[e.pos_in_stream]
        if char in '"\'':
            raise LexError('Unterminated string literal', e.pos_in_stream, e.pos_in_stream + 1,
                           unterminated=True) from None
        raise LexError(f'Invalid token: {char!r}', e.pos_in_stream, e.pos_in_stream + 1) from None
    except UnexpectedToken as e:
        token = e.token
        if token.type == '$END':
            start = end = len(source)
            message = 'Unexpected end of input'
            actual = 'EOF'
        else:
            start, end = token.start_pos, token.end_pos
            message = f'Unexpected token {str(token)!r}'
            actual = token.type.lstrip('_')
        expected = ', '.join(sorted(name.lstrip('_') for name in e.expected))
        raise ParseError(f'{message}, expected one of {expected}', start, end,
                         expected=expected, actual=actual) from None
    except UnexpectedEOF as e:
        expected = ', '.join(sorted(name.lstrip('_') for name in e.expected))
        raise ParseError(f'Unexpected end of input, expected one of {expected}',
                         len(source), len(source), expected=expected, actual='EOF') from None
    try:
        program = ASTTransformer().transform(tree)
    except RecursionError:
        raise ParseError('Program nests too deeply', 0, len(source)) from None
    except VisitError as e:
        if isinstance(e.orig_exc, ParseError):
            raise e.orig_exc from None
        if isinstance(e.orig_exc, RecursionError):
            raise ParseError('Program nests too deeply', 0, len(source)) from None
        raise
    return Program(program.body, start=0, end=len(source))
