from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, TYPE_CHECKING

from toylang.ast import FunctionDeclaration
from toylang.environment import Environment
from toylang.errors import ReturnSignal
from toylang.types import ToyCallable

if TYPE_CHECKING:
    from toylang.interpreter import Interpreter


@dataclass(eq=False)
class NativeFunction(ToyCallable):
    """A function implemented in Python.

    ``fn`` receives the interpreter and the evaluated arguments. An
    ``arity`` of ``None`` accepts any number of arguments.
    """
    name: str
    arity: Optional[int]
    fn: Callable[['Interpreter', List[Any]], Any]

    def call(self, interpreter: 'Interpreter', args: List[Any]) -> Any:
        return self.fn(interpreter, args)

    def __repr__(self) -> str:
        return f"<native fn {self.name}>"


class UserFunction(ToyCallable):
    """Represents a user-defined ToyLang function.

    ``closure`` is the environment that was active where the function was
    declared. It is shared with that scope and with every invocation, so
    writes made through it are seen by all of them.
    """
    def __init__(self, declaration: FunctionDeclaration, closure: Environment):
        self.declaration = declaration
        self.closure = closure
        self.name = declaration.name.name

    @property
    def arity(self) -> int:
        return len(self.declaration.params)

    def call(self, interpreter: 'Interpreter', args: List[Any]) -> Any:
        call_env = Environment(parent=self.closure)
        for param, arg in zip(self.declaration.params, args):
            call_env.define(param.name, arg)
        result = interpreter.execute_block(self.declaration.body.body, call_env)
        if isinstance(result, ReturnSignal):
            return result.value
        return None

    def __repr__(self) -> str:
        return f"<fn {self.name}>"
