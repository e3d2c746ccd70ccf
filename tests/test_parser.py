import pytest

from toylang.ast import (
    Program, ExpressionStatement, VariableStatement, VariableDeclaration,
    BlockStatement, EmptyStatement, IfStatement, DoWhileStatement,
    ForStatement, FunctionDeclaration, ReturnStatement, Identifier,
    NumericLiteral, StringLiteral, BooleanLiteral, NullLiteral,
    UnaryExpression, BinaryExpression, LogicalExpression,
    AssignmentExpression, CallExpression,
)
from toylang.errors import LexError, ParseError
from toylang.keywords import ENGLISH_KEYWORDS
from toylang.parser import parse_program


def expr(source):
    return parse_program(source).body[0].expression


def num(value):
    return NumericLiteral(value)


def test_multiplication_binds_tighter_than_addition():
    assert expr('1 + 2 * 3;') == BinaryExpression('+', num(1), BinaryExpression('*', num(2), num(3)))


def test_binary_operators_are_left_associative():
    assert expr('1 - 2 - 3;') == BinaryExpression('-', BinaryExpression('-', num(1), num(2)), num(3))


def test_assignment_is_right_associative():
    assert expr('a = b += 1;') == AssignmentExpression(
        '=', Identifier('a'), AssignmentExpression('+=', Identifier('b'), num(1)))


def test_logical_and_binds_tighter_than_or():
    a, b, c = Identifier('a'), Identifier('b'), Identifier('c')
    assert expr('a || b && c;') == LogicalExpression('||', a, LogicalExpression('&&', b, c))


def test_relational_binds_tighter_than_equality():
    a, b, c, d = (Identifier(n) for n in 'abcd')
    assert expr('a < b == c >= d;') == BinaryExpression(
        '==', BinaryExpression('<', a, b), BinaryExpression('>=', c, d))


def test_unary_and_grouping():
    assert expr('-(1 + 2) * !x;') == BinaryExpression(
        '*',
        UnaryExpression('-', BinaryExpression('+', num(1), num(2))),
        UnaryExpression('!', Identifier('x')),
    )


def test_literals():
    assert expr('"s";') == StringLiteral('s')
    assert expr("'it\"s';") == StringLiteral('it"s')
    assert expr('2.5;') == NumericLiteral(2.5)
    assert expr('true;') == BooleanLiteral(True)
    assert expr('Ghalat;') == BooleanLiteral(False)
    assert expr('null;') == NullLiteral()


def test_chained_calls():
    f = Identifier('f')
    assert expr('f(1)(2, 3)();') == CallExpression(
        CallExpression(CallExpression(f, [num(1)]), [num(2), num(3)]), [])


def test_dangling_else_binds_to_the_nearest_if():
    a, b = Identifier('a'), Identifier('b')
    program = parse_program('if (a) if (b) x; else y;')
    assert program.body == [
        IfStatement(a, IfStatement(b, ExpressionStatement(Identifier('x')),
                                   ExpressionStatement(Identifier('y'))), None),
    ]


def test_for_clauses_are_optional():
    assert parse_program('for (;;) {}').body == [ForStatement(None, None, None, BlockStatement([]))]


def test_for_with_declaration():
    statement = parse_program('for (let i = 0; i < 3; i += 1) x;').body[0]
    assert statement.init == VariableStatement([VariableDeclaration(Identifier('i'), num(0))])
    assert statement.update == AssignmentExpression('+=', Identifier('i'), num(1))


def test_multiple_declarators():
    assert parse_program('let a = 1, b;').body == [
        VariableStatement([
            VariableDeclaration(Identifier('a'), num(1)),
            VariableDeclaration(Identifier('b'), None),
        ]),
    ]


def test_function_declaration():
    a, b = Identifier('a'), Identifier('b')
    assert parse_program('def add(a, b) { return a + b; }').body == [
        FunctionDeclaration(Identifier('add'), [a, b], BlockStatement([
            ReturnStatement(BinaryExpression('+', a, b)),
        ])),
    ]


def test_do_while_and_empty_statements():
    assert parse_program(';do x; while (y);;').body == [
        EmptyStatement(),
        DoWhileStatement(ExpressionStatement(Identifier('x')), Identifier('y')),
        EmptyStatement(),
    ]


def test_empty_program():
    assert parse_program('') == Program([])
    assert parse_program('  // nothing here\n') == Program([])


def test_terminator_may_be_omitted_at_end_of_input():
    assert parse_program('print(1)').body == [
        ExpressionStatement(CallExpression(Identifier('print'), [num(1)])),
    ]
    assert parse_program('let x = 1').body == [VariableStatement([VariableDeclaration(Identifier('x'), num(1))])]
    assert parse_program('return').body == [ReturnStatement(None)]


def test_missing_terminator_inside_the_program():
    with pytest.raises(ParseError) as exc:
        parse_program('let x = 1\nlet y = 2;')
    assert exc.value.expected == 'SEMI'
    assert exc.value.actual == 'LET'
    assert exc.value.start == 10


def test_missing_terminator_inside_a_block():
    with pytest.raises(ParseError) as exc:
        parse_program('{ x }')
    assert exc.value.expected == 'SEMI'
    assert exc.value.actual == 'CURLY_END'


def test_invalid_assignment_target():
    for source in ('1 = 2;', 'f() = 1;', '(a + b) += 1;'):
        with pytest.raises(ParseError) as exc:
            parse_program(source)
        assert 'Invalid left-hand side' in exc.value.message


def test_missing_expression():
    with pytest.raises(ParseError) as exc:
        parse_program('let x = ;')
    assert exc.value.expected == 'Expression'
    assert exc.value.actual == 'SEMI'


def test_unclosed_block():
    with pytest.raises(ParseError) as exc:
        parse_program('{ x;')
    assert exc.value.expected == 'CURLY_END'
    assert exc.value.actual == 'EOF'


def test_lex_errors_surface_from_the_parser():
    with pytest.raises(LexError):
        parse_program('let s = "open;')


def test_keyword_table_is_passed_to_the_lexer():
    with pytest.raises(ParseError):
        parse_program('banao x = 1;', ENGLISH_KEYWORDS)
    assert parse_program('banao = 1;', ENGLISH_KEYWORDS).body == [
        ExpressionStatement(AssignmentExpression('=', Identifier('banao'), num(1))),
    ]


def test_locations():
    statement = parse_program('let x = 1 + 2;').body[0]
    assert (statement.start, statement.end) == (0, 14)
    init = statement.declarations[0].init
    assert (init.start, init.end) == (8, 13)


def test_locations_do_not_affect_equality():
    assert parse_program('x+1;') == parse_program('  x   +\n  1 ;')


def test_deep_nesting_is_a_parse_error():
    with pytest.raises(ParseError) as exc:
        parse_program('(' * 5000 + '1' + ')' * 5000 + ';')
    assert 'nests too deeply' in exc.value.message
    with pytest.raises(ParseError):
        parse_program('{' * 5000 + '}' * 5000)
