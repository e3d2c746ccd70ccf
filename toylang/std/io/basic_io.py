import builtins
from typing import Any, List, Optional, TextIO

from toylang.types import to_string


class BasicIO:
    """Console access for the standard library.

    ``output`` defaults to whatever ``sys.stdout`` is when a line is
    written, so redirected or captured output keeps working.
    """
    def __init__(self, output: Optional[TextIO] = None):
        self.output = output

    def write_line(self, values: List[Any]) -> None:
        print(' '.join(to_string(v) for v in values), file=self.output)

    def read_line(self, prompt: str) -> str:
        try:
            return builtins.input(prompt)
        except EOFError:
            return ''
