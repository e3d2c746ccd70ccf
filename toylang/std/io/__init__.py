from .basic_io import BasicIO
from toylang.callables import NativeFunction
from toylang.errors import ToyRuntimeError, TYPE_MISMATCH
from toylang.types import ErrorVal, to_string, type_name
from typing import List, Any, Dict, Optional, TextIO


def io_functions(output: Optional[TextIO] = None) -> Dict[str, NativeFunction]:
    basic_io = BasicIO(output)

    def std_print(interpreter, args: List[Any]) -> Any:
        basic_io.write_line(args)
        return None

    def std_input(interpreter, args: List[Any]) -> Any:
        prompt = args[0]
        if not isinstance(prompt, str):
            raise ToyRuntimeError(ErrorVal(TYPE_MISMATCH, f'input prompt must be a string, got {type_name(prompt)}'))
        return basic_io.read_line(prompt)

    def std_str(interpreter, args: List[Any]) -> Any:
        return to_string(args[0])

    def std_len(interpreter, args: List[Any]) -> Any:
        s = args[0]
        if not isinstance(s, str):
            raise ToyRuntimeError(ErrorVal(TYPE_MISMATCH, f'len expects a string, got {type_name(s)}'))
        return len(s)

    return {
        'print': NativeFunction('print', None, std_print),
        'input': NativeFunction('input', 1, std_input),
        'str': NativeFunction('str', 1, std_str),
        'len': NativeFunction('len', 1, std_len),
    }
