"""Runtime values and helpers for ToyLang.

ToyLang values are plain Python objects: numbers are ``int`` or
``float``, strings are ``str``, booleans are ``bool`` and ``null`` is
``None``. The only value class defined by the interpreter itself is
:class:`ToyCallable`, the base of native and user-defined functions.

Python's ``bool`` is a subclass of ``int``, so every numeric check in
this module excludes booleans explicitly.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List, Optional


@dataclass
class ErrorVal:
    """Name and message of a runtime error, e.g. ``ArityMismatch``."""
    name: str
    message: str

    def __repr__(self) -> str:
        return f"Error(name={self.name!r}, message={self.message!r})"


class ToyCallable:
    """Common interface of every value that can be called.

    ``arity`` is the number of positional arguments expected, or ``None``
    when any number is accepted.
    """
    name: str
    arity: Optional[int]

    def call(self, interpreter: Any, args: List[Any]) -> Any:
        raise NotImplementedError


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    # Only false and null are falsy; 0 and "" are truthy.
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def values_equal(a: Any, b: Any) -> bool:
    """Equality without coercion between runtime types."""
    if is_number(a) and is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    if isinstance(a, ToyCallable):
        return a is b
    return a == b


def normalize_number(value: float) -> Any:
    """Collapse an integral float produced by arithmetic back to ``int``."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def to_string(value: Any) -> str:
    """Render a runtime value the way ``print`` shows it."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, int):
        try:
            return str(value)
        except ValueError:
            # past the host limit on int-to-str digits
            return _exponent_form(value)
    if isinstance(value, str):
        return value
    return repr(value)


def _exponent_form(value: int) -> str:
    """Render a huge integer like a float repr, with 17 significant digits."""
    sign = '-' if value < 0 else ''
    value = abs(value)
    exponent = int(math.log10(value))
    while 10 ** exponent > value:
        exponent -= 1
    while 10 ** (exponent + 1) <= value:
        exponent += 1
    digits = str(value // 10 ** (exponent - 16))
    fraction = digits[1:].rstrip('0')
    mantissa = digits[0] + ('.' + fraction if fraction else '')
    return f"{sign}{mantissa}e+{exponent}"


def type_name(value: Any) -> str:
    """Return the ToyLang type name of a runtime value."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'boolean'
    if is_number(value):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, ToyCallable):
        return 'function'
    return type(value).__name__
