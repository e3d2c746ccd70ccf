from pathlib import Path

import pytest

from toylang.ast import BlockStatement, ExpressionStatement, Identifier, IfStatement, WhileStatement
from toylang.parser import parse_program
from toylang.printer import to_source

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_printed_program_parses_to_the_same_tree(covering_source):
    program = parse_program(covering_source)
    assert parse_program(to_source(program)) == program


@pytest.mark.parametrize('path', sorted(EXAMPLES.glob('*.toy')), ids=lambda p: p.name)
def test_examples_survive_printing(path):
    program = parse_program(path.read_text(encoding='utf-8'))
    assert parse_program(to_source(program)) == program


def test_expressions_are_fully_parenthesized():
    assert to_source(parse_program('let x=1+2*3;')) == 'let x = (1 + (2 * 3));\n'
    assert to_source(parse_program('a = b = !c;').body[0].expression) == '(a = (b = (!c)))'


def test_layout():
    program = parse_program('def f(n){if(n)return 1;else{return 2;}}')
    assert to_source(program) == (
        'def f(n) {\n'
        '    if (n) return 1; else {\n'
        '        return 2;\n'
        '    }\n'
        '}\n'
    )


def test_keyword_spellings_can_be_chosen():
    program = parse_program('let x = true; if (x) return;')
    text = to_source(program, {'LET': 'banao', 'TRUE': 'Sahi', 'IF': 'Agr', 'RETURN': 'WapisBhejo'})
    assert text == 'banao x = Sahi;\nAgr (x) WapisBhejo;\n'
    assert parse_program(text) == program


def test_large_decimal_literal():
    program = parse_program('100000000000000000000000.5;')
    assert parse_program(to_source(program)) == program


def test_else_stays_with_the_outer_if():
    a, b = Identifier('a'), Identifier('b')
    x, y = ExpressionStatement(Identifier('x')), ExpressionStatement(Identifier('y'))
    inner = IfStatement(b, x, None)
    reparsed = parse_program(to_source(IfStatement(a, inner, y))).body[0]
    assert reparsed.alternate == y
    assert reparsed.consequent == BlockStatement([inner])
    in_loop = IfStatement(a, WhileStatement(b, inner), y)
    assert parse_program(to_source(in_loop)).body[0].alternate == y
