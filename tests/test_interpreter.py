import io
import sys

import pytest

from toylang.ast import BlockStatement, ExpressionStatement, NumericLiteral, Program
from toylang.environment import Environment
from toylang.errors import (
    ToyRuntimeError, UNDEFINED_VARIABLE, NOT_CALLABLE, ARITY_MISMATCH,
    TYPE_MISMATCH, OPERAND_MUST_BE_NUMBER, DIVISION_BY_ZERO, STACK_OVERFLOW,
    RETURN_OUTSIDE_FUNCTION, NUMERIC_OVERFLOW,
)
from toylang.interpreter import Interpreter, parse_program, run_program
from toylang.keywords import ENGLISH_KEYWORDS


def output(capsys, source, **options):
    run_program(source, **options)
    return capsys.readouterr().out.strip().splitlines()


def error_of(source, **options):
    with pytest.raises(ToyRuntimeError) as exc:
        run_program(source, **options)
    return exc.value


FACTORIAL = 'def f(n) { if (n == 0) { return 1; } return n * f(n - 1); }\n'


def test_if_else(capsys):
    assert output(capsys, 'if (true) { print(1); } else { print(2); }') == ['1']
    assert output(capsys, 'if (false) { print(1); } else { print(2); }') == ['2']


def test_recursive_function(capsys):
    assert output(capsys, FACTORIAL + 'print(f(5), f(0));') == ['120 1']


def test_iterative_loop(capsys):
    source = 'let fac = 1; for (let i = 1; i < 6; i += 1) { fac *= i; } print(fac);'
    assert output(capsys, source) == ['120']


def test_arity_mismatch():
    assert error_of(FACTORIAL + 'f();').name == ARITY_MISMATCH
    assert error_of(FACTORIAL + 'f(1, 2);').name == ARITY_MISMATCH


def test_undefined_variable_reports_location():
    err = error_of('print(nope);')
    assert err.name == UNDEFINED_VARIABLE
    assert (err.start, err.end) == (6, 10)


def test_assignment_to_undeclared_name():
    assert error_of('y = 1;').name == UNDEFINED_VARIABLE


def test_string_concatenation(capsys):
    assert output(capsys, 'print("a" + "b");') == ['ab']


def test_type_mismatch():
    assert error_of('"a" + 1;').name == TYPE_MISMATCH


def test_operands_must_be_numbers():
    for source in ('"a" - 1;', '-"a";', '"a" < "b";', 'true * 2;'):
        assert error_of(source).name == OPERAND_MUST_BE_NUMBER


def test_logical_operators_short_circuit(capsys):
    assert output(capsys, 'print(false && undefinedCall());') == ['false']
    assert output(capsys, 'print(true || undefinedCall());') == ['true']


def test_logical_operators_return_an_operand(capsys):
    assert output(capsys, 'print(1 && "x", null || 2, false || null, !0);') == ['x 2 null false']


def test_only_false_and_null_are_falsy(capsys):
    source = 'if (0) print("zero"); if ("") print("empty"); if (null) print("null"); if (false) print("false");'
    assert output(capsys, source) == ['zero', 'empty']


def test_equality_does_not_coerce(capsys):
    source = 'print(1 == "1", 1 == 1.0, null == false, "a" == "a", null != null);'
    assert output(capsys, source) == ['false true false true false']


def test_block_scoping(capsys):
    assert output(capsys, 'let x = 1; { let x = 2; print(x); } print(x);') == ['2', '1']
    assert output(capsys, 'let x = 1; { x = 2; } print(x);') == ['2']


def test_block_locals_are_gone_after_the_block():
    assert error_of('{ banao x = 1; } print(x);').name == UNDEFINED_VARIABLE


def test_for_loop_variable_stays_in_the_loop():
    assert error_of('for (let i = 0; i < 2; i += 1) {} print(i);').name == UNDEFINED_VARIABLE


def test_redeclaration_overwrites(capsys):
    assert output(capsys, 'let x = 1; let x = 2; print(x);') == ['2']


def test_compound_assignment(capsys):
    source = 'let s = "a"; s += "b"; let n = 10; n -= 3; n *= 2; n /= 7; print(s, n);'
    assert output(capsys, source) == ['ab 2']


def test_division(capsys):
    assert output(capsys, 'print(6 / 3, 7 / 2, 1.5 * 2);') == ['2 3.5 3']


def test_division_by_zero():
    assert error_of('print(1 / 0);').name == DIVISION_BY_ZERO
    assert error_of('let x = 4; x /= 0;').name == DIVISION_BY_ZERO


def test_stack_overflow_with_call_depth_limit():
    err = error_of('def f(n) { return f(n + 1); } f(0);', max_call_depth=50)
    assert err.name == STACK_OVERFLOW


def test_unbounded_recursion_is_a_stack_overflow():
    assert error_of('def f(n) { return f(n + 1); } f(0);').name == STACK_OVERFLOW


def test_call_depth_limit_allows_shallow_recursion(capsys):
    assert output(capsys, FACTORIAL + 'print(f(10));', max_call_depth=20) == ['3628800']


def test_return_outside_function():
    err = error_of('let x = 1;\nreturn x;')
    assert err.name == RETURN_OUTSIDE_FUNCTION
    assert err.start == 11


def test_not_callable():
    assert error_of('let x = 1; x();').name == NOT_CALLABLE
    assert error_of('"f"();').name == NOT_CALLABLE


def test_function_without_return_gives_null(capsys):
    assert output(capsys, 'def f() {} print(f());') == ['null']


def test_return_leaves_nested_loops(capsys):
    source = '''
    def find() {
        let i = 0;
        while (true) {
            for (let j = 0; j < 10; j += 1) {
                i += 1;
                if (i == 13) return i;
            }
        }
    }
    print(find());
    '''
    assert output(capsys, source) == ['13']


def test_closure_sees_later_assignments(capsys):
    source = 'let x = 1; def get() { return x; } x = 2; print(get());'
    assert output(capsys, source) == ['2']


def test_closure_keeps_its_scope_alive(capsys):
    source = '''
    def adder(n) {
        def add(m) { return n + m; }
        return add;
    }
    let add2 = adder(2);
    print(add2(40));
    '''
    assert output(capsys, source) == ['42']


def test_functions_are_values(capsys):
    source = 'def twice(f, x) { return f(f(x)); } def inc(n) { return n + 1; } print(twice(inc, 1), inc);'
    assert output(capsys, source) == ['3 <fn inc>']


def test_do_while_runs_body_first(capsys):
    assert output(capsys, 'let n = 0; do n += 1; while (false); print(n);') == ['1']


def test_native_errors_get_the_call_location():
    err = error_of('let x = 1;\nabs("x");')
    assert err.name == OPERAND_MUST_BE_NUMBER
    assert (err.start, err.end) == (11, 19)


def test_output_stream_and_keyword_options():
    buf = io.StringIO()
    run_program('let x = 1; print(x, "done");', output=buf, keywords=ENGLISH_KEYWORDS)
    assert buf.getvalue() == '1 done\n'


def test_run_in_a_given_environment():
    interp = Interpreter()
    env = Environment(parent=interp.global_env)
    interp.run(parse_program('let x = 40; x += 2;'), env)
    assert env.get('x') == 42
    assert 'x' not in interp.global_env


def test_debug_trace(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    interp = Interpreter(debug_level=3, debug_file=str(debug_file))
    interp.run(parse_program('def f(x) { return x; } let y = f(2); if (y) y;'))
    trace = debug_file.read_text(encoding='utf-8').splitlines()
    assert trace == [
        'define function f',
        'call f(2)',
        'declare y: number = 2',
        'if condition 2 -> True',
    ]


def test_no_trace_without_debug_level(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    Interpreter(debug_file=str(debug_file)).run(parse_program('let y = 1;'))
    assert not debug_file.exists()


BIG = 'let x = 1; for (let i = 0; i < 400; i += 1) { x *= 10; }\n'


def test_big_integers_stay_exact(capsys):
    assert output(capsys, BIG + 'print(x / 10 * 10 == x, x - x);') == ['true 0']


def test_numeric_overflow():
    err = error_of(BIG + 'print(x / 3);')
    assert err.name == NUMERIC_OVERFLOW
    assert err.start == len(BIG) + 6
    assert error_of(BIG + 'print(x + 0.5);').name == NUMERIC_OVERFLOW
    assert error_of(BIG + 'x *= 1.5;').name == NUMERIC_OVERFLOW


@pytest.mark.skipif(not hasattr(sys, 'get_int_max_str_digits'), reason='no int-to-str digit limit')
def test_huge_integers_print_in_exponent_form(capsys):
    source = 'let x = 1; for (let i = 0; i < 5000; i += 1) { x *= 10; } print(x, -x * 123, str(x) + "!");'
    assert output(capsys, source) == ['1e+5000 -1.23e+5002 1e+5000!']


def test_deep_nesting_outside_calls_is_a_stack_overflow():
    node = ExpressionStatement(NumericLiteral(1))
    for _ in range(5000):
        node = BlockStatement([node])
    with pytest.raises(ToyRuntimeError) as exc:
        Interpreter().run(Program([node]))
    assert exc.value.name == STACK_OVERFLOW
