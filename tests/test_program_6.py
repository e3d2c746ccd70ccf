from pathlib import Path

from toylang.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_6_loops(capsys):
    with open(EXAMPLES / 'program_6.toy', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    interp.run(ast)
    out = capsys.readouterr().out.strip().splitlines()
    # the do-while body runs once even though the condition is false
    assert out == ['while: 3', 'do-while: 9', 'for: 6']
