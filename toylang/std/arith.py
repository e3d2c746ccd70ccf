"""Arithmetic helpers of the ToyLang standard library."""

import math
import time
from typing import Any, Dict, List

from toylang.callables import NativeFunction
from toylang.errors import ToyRuntimeError, ARITY_MISMATCH, OPERAND_MUST_BE_NUMBER, NUMERIC_OVERFLOW
from toylang.types import ErrorVal, is_number, normalize_number, type_name


def _numbers(name: str, args: List[Any]) -> List[Any]:
    for arg in args:
        if not is_number(arg):
            raise ToyRuntimeError(ErrorVal(OPERAND_MUST_BE_NUMBER,
                                           f'{name} expects numbers, got {type_name(arg)}'))
    return args


def _checked(name: str, fn, *args):
    try:
        return fn(*args)
    except OverflowError:
        raise ToyRuntimeError(ErrorVal(NUMERIC_OVERFLOW, f'{name} result is too large for a number')) from None
    except ValueError:
        raise ToyRuntimeError(ErrorVal(OPERAND_MUST_BE_NUMBER, f'{name} is undefined for these arguments')) from None


def std_abs(interpreter, args):
    (n,) = _numbers('abs', args)
    return abs(n)


def std_sqrt(interpreter, args):
    (n,) = _numbers('sqrt', args)
    if n < 0:
        raise ToyRuntimeError(ErrorVal(OPERAND_MUST_BE_NUMBER, 'sqrt of a negative number'))
    return normalize_number(_checked('sqrt', math.sqrt, n))


def std_pow(interpreter, args):
    base, exponent = _numbers('pow', args)
    return normalize_number(_checked('pow', math.pow, base, exponent))


def std_floor(interpreter, args):
    (n,) = _numbers('floor', args)
    return _checked('floor', math.floor, n)


def std_min(interpreter, args):
    if not args:
        raise ToyRuntimeError(ErrorVal(ARITY_MISMATCH, 'min expects at least 1 argument'))
    return min(_numbers('min', args))


def std_max(interpreter, args):
    if not args:
        raise ToyRuntimeError(ErrorVal(ARITY_MISMATCH, 'max expects at least 1 argument'))
    return max(_numbers('max', args))


def std_clock(interpreter, args):
    return time.time()


def arith_functions() -> Dict[str, NativeFunction]:
    return {
        'abs': NativeFunction('abs', 1, std_abs),
        'sqrt': NativeFunction('sqrt', 1, std_sqrt),
        'pow': NativeFunction('pow', 2, std_pow),
        'floor': NativeFunction('floor', 1, std_floor),
        'min': NativeFunction('min', None, std_min),
        'max': NativeFunction('max', None, std_max),
        'clock': NativeFunction('clock', 0, std_clock),
    }
