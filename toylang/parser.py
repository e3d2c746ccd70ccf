"""Recursive-descent parser for ToyLang.

The parser pulls tokens from a :class:`~toylang.lexer.Lexer` one at a
time and keeps a single lookahead token. Every grammar rule is a method;
expression rules are layered by precedence, lowest first::

    Assignment -> LogicalOr -> LogicalAnd -> Equality -> Relational
      -> Additive -> Multiplicative -> Unary -> Call -> Primary

Each binary level parses its operands with the next level up and loops
while the lookahead is one of its operators, which makes the operators
left-associative. Assignment is right-associative and only accepts an
identifier on its left-hand side.

Statement terminators may be left out only at the very end of the input.
The first error aborts parsing; no partial tree is returned.

:func:`parse_program` is the public entry point.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from .ast import (
    Program, ExpressionStatement, VariableStatement, VariableDeclaration,
    BlockStatement, EmptyStatement, IfStatement, WhileStatement,
    DoWhileStatement, ForStatement, FunctionDeclaration, ReturnStatement,
    Identifier, NumericLiteral, StringLiteral, BooleanLiteral, NullLiteral,
    UnaryExpression, BinaryExpression, LogicalExpression,
    AssignmentExpression, CallExpression, Node, number_value, string_value,
)
from .errors import ParseError
from .lexer import Lexer, Token, TokenType


class Parser:
    def __init__(self, keywords: Optional[Dict[str, Tuple[str, ...]]] = None):
        self.lexer = Lexer(keywords=keywords)
        self.lookahead: Optional[Token] = None
        self.previous: Optional[Token] = None
        self.statement_handlers = self._statement_handlers()

    def parse(self, source: str) -> Program:
        self.lexer.init(source)
        self.previous = None
        self.lookahead = self.lexer.next_token()
        try:
            return self.program()
        except RecursionError:
            token = self.lookahead
            raise ParseError('Program nests too deeply', token.start, token.end,
                             actual=token.type.value) from None

    # Token primitives

    def match(self, *types: TokenType) -> bool:
        return self.lookahead.type in types

    def expect(self, token_type: TokenType) -> Token:
        """Consume the lookahead if it has the given type, else fail."""
        token = self.lookahead
        if token.type is not token_type:
            if token.type is TokenType.EOF:
                message = f'Unexpected end of input, expected {token_type.display}'
            else:
                message = f'Unexpected token {token.value!r}, expected {token_type.display}'
            raise ParseError(message, token.start, token.end,
                             expected=token_type.value, actual=token.type.value)
        self.previous = token
        self.lookahead = self.lexer.next_token()
        return token

    def consume_terminator(self) -> None:
        if self.match(TokenType.EOF):
            return
        self.expect(TokenType.SEMI)

    def _end(self) -> int:
        return self.previous.end if self.previous is not None else 0

    # Statements

    def program(self) -> Program:
        body = self.statement_list(TokenType.EOF)
        return Program(body, start=0, end=len(self.lexer.source))

    def statement_list(self, stop: TokenType) -> List[Node]:
        statements: List[Node] = []
        while not self.match(stop, TokenType.EOF):
            statements.append(self.statement())
        return statements

    def statement(self) -> Node:
        handler = self.statement_handlers.get(self.lookahead.type)
        if handler is not None:
            return handler()
        return self.expression_statement()

    def _statement_handlers(self) -> Dict[TokenType, Callable[[], Node]]:
        return {
            TokenType.SEMI: self.empty_statement,
            TokenType.CURLY_START: self.block_statement,
            TokenType.LET: self.variable_statement,
            TokenType.IF: self.if_statement,
            TokenType.WHILE: self.while_statement,
            TokenType.DO: self.do_while_statement,
            TokenType.FOR: self.for_statement,
            TokenType.DEF: self.function_declaration,
            TokenType.RETURN: self.return_statement,
        }

    def empty_statement(self) -> EmptyStatement:
        token = self.expect(TokenType.SEMI)
        return EmptyStatement(start=token.start, end=token.end)

    def block_statement(self) -> BlockStatement:
        start = self.expect(TokenType.CURLY_START).start
        body = self.statement_list(TokenType.CURLY_END)
        self.expect(TokenType.CURLY_END)
        return BlockStatement(body, start=start, end=self._end())

    def variable_statement(self) -> VariableStatement:
        start = self.lookahead.start
        statement = self.variable_statement_init()
        self.consume_terminator()
        return VariableStatement(statement.declarations, start=start, end=self._end())

    def variable_statement_init(self) -> VariableStatement:
        """``let`` and its declarators, without the terminator."""
        start = self.expect(TokenType.LET).start
        declarations = [self.variable_declaration()]
        while self.match(TokenType.COMMA):
            self.expect(TokenType.COMMA)
            declarations.append(self.variable_declaration())
        return VariableStatement(declarations, start=start, end=self._end())

    def variable_declaration(self) -> VariableDeclaration:
        ident = self.identifier()
        init = None
        if self.match(TokenType.SIMPLE_ASSIGNMENT):
            self.expect(TokenType.SIMPLE_ASSIGNMENT)
            init = self.assignment_expression()
        return VariableDeclaration(ident, init, start=ident.start, end=self._end())

    def if_statement(self) -> IfStatement:
        start = self.expect(TokenType.IF).start
        self.expect(TokenType.PAREN_START)
        test = self.expression()
        self.expect(TokenType.PAREN_END)
        consequent = self.statement()
        alternate = None
        if self.match(TokenType.ELSE):
            self.expect(TokenType.ELSE)
            alternate = self.statement()
        return IfStatement(test, consequent, alternate, start=start, end=self._end())

    def while_statement(self) -> WhileStatement:
        start = self.expect(TokenType.WHILE).start
        self.expect(TokenType.PAREN_START)
        test = self.expression()
        self.expect(TokenType.PAREN_END)
        body = self.statement()
        return WhileStatement(test, body, start=start, end=self._end())

    def do_while_statement(self) -> DoWhileStatement:
        start = self.expect(TokenType.DO).start
        body = self.statement()
        self.expect(TokenType.WHILE)
        self.expect(TokenType.PAREN_START)
        test = self.expression()
        self.expect(TokenType.PAREN_END)
        self.consume_terminator()
        return DoWhileStatement(body, test, start=start, end=self._end())

    def for_statement(self) -> ForStatement:
        start = self.expect(TokenType.FOR).start
        self.expect(TokenType.PAREN_START)
        init: Optional[Node] = None
        if not self.match(TokenType.SEMI):
            if self.match(TokenType.LET):
                init = self.variable_statement_init()
            else:
                init = self.expression()
        self.expect(TokenType.SEMI)
        test = None if self.match(TokenType.SEMI) else self.expression()
        self.expect(TokenType.SEMI)
        update = None if self.match(TokenType.PAREN_END) else self.expression()
        self.expect(TokenType.PAREN_END)
        body = self.statement()
        return ForStatement(init, test, update, body, start=start, end=self._end())

    def function_declaration(self) -> FunctionDeclaration:
        start = self.expect(TokenType.DEF).start
        name = self.identifier()
        self.expect(TokenType.PAREN_START)
        params: List[Identifier] = []
        if not self.match(TokenType.PAREN_END):
            params.append(self.identifier())
            while self.match(TokenType.COMMA):
                self.expect(TokenType.COMMA)
                params.append(self.identifier())
        self.expect(TokenType.PAREN_END)
        body = self.block_statement()
        return FunctionDeclaration(name, params, body, start=start, end=self._end())

    def return_statement(self) -> ReturnStatement:
        start = self.expect(TokenType.RETURN).start
        argument = None
        if not self.match(TokenType.SEMI, TokenType.EOF):
            argument = self.expression()
        self.consume_terminator()
        return ReturnStatement(argument, start=start, end=self._end())

    def expression_statement(self) -> ExpressionStatement:
        start = self.lookahead.start
        expression = self.expression()
        self.consume_terminator()
        return ExpressionStatement(expression, start=start, end=self._end())

    # Expressions

    def expression(self) -> Node:
        return self.assignment_expression()

    def assignment_expression(self) -> Node:
        left = self.logical_or_expression()
        if not self.match(TokenType.SIMPLE_ASSIGNMENT, TokenType.COMPLEX_ASSIGNMENT):
            return left
        operator = self.lookahead
        if not isinstance(left, Identifier):
            raise ParseError('Invalid left-hand side in assignment expression',
                             left.start, operator.end,
                             expected=TokenType.IDENTIFIER.value, actual=type(left).__name__)
        self.expect(operator.type)
        right = self.assignment_expression()
        return AssignmentExpression(operator.value, left, right, start=left.start, end=self._end())

    def _binary(self, operand: Callable[[], Node], operator_type: TokenType, node_class) -> Node:
        left = operand()
        while self.match(operator_type):
            operator = self.expect(operator_type).value
            right = operand()
            left = node_class(operator, left, right, start=left.start, end=self._end())
        return left

    def logical_or_expression(self) -> Node:
        return self._binary(self.logical_and_expression, TokenType.LOGICAL_OR, LogicalExpression)

    def logical_and_expression(self) -> Node:
        return self._binary(self.equality_expression, TokenType.LOGICAL_AND, LogicalExpression)

    def equality_expression(self) -> Node:
        return self._binary(self.relational_expression, TokenType.EQUALITY_OPERATOR, BinaryExpression)

    def relational_expression(self) -> Node:
        return self._binary(self.additive_expression, TokenType.RELATIONAL_OPERATOR, BinaryExpression)

    def additive_expression(self) -> Node:
        return self._binary(self.multiplicative_expression, TokenType.ADDITIVE_OPERATOR, BinaryExpression)

    def multiplicative_expression(self) -> Node:
        return self._binary(self.unary_expression, TokenType.MULTIPLICATIVE_OPERATOR, BinaryExpression)

    def unary_expression(self) -> Node:
        if self.match(TokenType.ADDITIVE_OPERATOR, TokenType.LOGICAL_NOT):
            operator = self.expect(self.lookahead.type)
            argument = self.unary_expression()
            return UnaryExpression(operator.value, argument, start=operator.start, end=self._end())
        return self.call_expression()

    def call_expression(self) -> Node:
        node = self.primary_expression()
        while self.match(TokenType.PAREN_START):
            arguments = self.arguments()
            node = CallExpression(node, arguments, start=node.start, end=self._end())
        return node

    def arguments(self) -> List[Node]:
        self.expect(TokenType.PAREN_START)
        args: List[Node] = []
        if not self.match(TokenType.PAREN_END):
            args.append(self.assignment_expression())
            while self.match(TokenType.COMMA):
                self.expect(TokenType.COMMA)
                args.append(self.assignment_expression())
        self.expect(TokenType.PAREN_END)
        return args

    def primary_expression(self) -> Node:
        token = self.lookahead
        if token.type is TokenType.PAREN_START:
            self.expect(TokenType.PAREN_START)
            expression = self.expression()
            self.expect(TokenType.PAREN_END)
            return expression
        if token.type is TokenType.IDENTIFIER:
            return self.identifier()
        if token.type is TokenType.NUMBER:
            self.expect(TokenType.NUMBER)
            return NumericLiteral(number_value(token.value), start=token.start, end=token.end)
        if token.type is TokenType.STRING:
            self.expect(TokenType.STRING)
            return StringLiteral(string_value(token.value), start=token.start, end=token.end)
        if token.type in (TokenType.TRUE, TokenType.FALSE):
            self.expect(token.type)
            return BooleanLiteral(token.type is TokenType.TRUE, start=token.start, end=token.end)
        if token.type is TokenType.NULL:
            self.expect(TokenType.NULL)
            return NullLiteral(start=token.start, end=token.end)
        if token.type is TokenType.EOF:
            message = 'Unexpected end of input, expected an expression'
        else:
            message = f'Unexpected token {token.value!r}, expected an expression'
        raise ParseError(message, token.start, token.end,
                         expected='Expression', actual=token.type.value)

    def identifier(self) -> Identifier:
        token = self.expect(TokenType.IDENTIFIER)
        return Identifier(token.value, start=token.start, end=token.end)


def parse_program(source: str, keywords: Optional[Dict[str, Tuple[str, ...]]] = None) -> Program:
    """Parse the given source code into a Program AST."""
    return Parser(keywords).parse(source)
