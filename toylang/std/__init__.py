"""ToyLang standard library.

Every entry is a :class:`~toylang.callables.NativeFunction`; the
interpreter checks finite arities before calling them.
"""

from typing import Optional, TextIO

from toylang.environment import Environment
from .arith import arith_functions
from .io import io_functions


def populate_global_environment(env: Environment, output: Optional[TextIO] = None) -> Environment:
    for name, fn in {**io_functions(output), **arith_functions()}.items():
        env.define(name, fn)
    return env
