from typing import Any, Optional
from toylang.types import ErrorVal

UNDEFINED_VARIABLE = 'UndefinedVariable'
NOT_CALLABLE = 'NotCallable'
ARITY_MISMATCH = 'ArityMismatch'
TYPE_MISMATCH = 'TypeMismatch'
OPERAND_MUST_BE_NUMBER = 'OperandMustBeNumber'
DIVISION_BY_ZERO = 'DivisionByZero'
STACK_OVERFLOW = 'StackOverflow'
RETURN_OUTSIDE_FUNCTION = 'ReturnOutsideFunction'
NUMERIC_OVERFLOW = 'NumericOverflow'


class ToyLangError(Exception):
    """Base class for every error reported to ToyLang users."""
    def __init__(self, message: str, start: Optional[int] = None, end: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.start = start
        self.end = end

    def __str__(self) -> str:
        if self.start is None:
            return self.message
        return f"{self.message} (at {self.start}:{self.end})"


class LexError(ToyLangError):
    """Raised when no lexical rule matches at the current position."""
    def __init__(self, message: str, start: int, end: int, unterminated: bool = False):
        super().__init__(message, start, end)
        self.unterminated = unterminated


class ParseError(ToyLangError):
    """Raised on the first token the grammar does not accept."""
    def __init__(self, message: str, start: int, end: int,
                 expected: Optional[str] = None, actual: Optional[str] = None):
        super().__init__(message, start, end)
        self.expected = expected
        self.actual = actual


class ToyRuntimeError(ToyLangError):
    """Exception type used to propagate ToyLang runtime errors."""
    def __init__(self, err: ErrorVal, node: Any = None):
        super().__init__(f"{err.name}: {err.message}")
        self.err = err
        self.node = None
        if node is not None:
            self.at(node)

    @property
    def name(self) -> str:
        return self.err.name

    def at(self, node: Any) -> 'ToyRuntimeError':
        """Attach a source location unless one is already recorded."""
        if self.node is None and node is not None:
            self.node = node
            self.start = node.start
            self.end = node.end
        return self


class ReturnSignal:
    """Carries a return value out of the statements of a function body.

    This is not an exception: statement execution hands it back as a
    result and every enclosing block or loop stops and passes it upwards
    until the function call that owns it unwraps the value.
    """
    __slots__ = ('value', 'node')

    def __init__(self, value: Any, node: Any = None):
        self.value = value
        self.node = node

    def __repr__(self) -> str:
        return f"<return {self.value!r}>"
