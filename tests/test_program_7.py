from pathlib import Path

from toylang.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_7_fibonacci_and_stdlib(capsys):
    with open(EXAMPLES / 'program_7.toy', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = [line.rstrip() for line in capsys.readouterr().out.strip().splitlines()]
    assert out == ['0 1 1 2 3 5 8 13 21 34', '55 1.5 4 1024 3.5']
