# ToyLang language package
# This package provides a lexer, parser and tree-walking interpreter for ToyLang.
from .parser import parse_program
from .grammar import parse_with_lark
from .interpreter import run_program, run_file, Interpreter
from .errors import ToyLangError, LexError, ParseError, ToyRuntimeError

__all__ = [
    'parse_program',
    'parse_with_lark',
    'run_program',
    'run_file',
    'Interpreter',
    'ToyLangError',
    'LexError',
    'ParseError',
    'ToyRuntimeError',
]
