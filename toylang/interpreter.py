"""Tree-walking interpreter for ToyLang.

The interpreter executes a :class:`~toylang.ast.Program` directly. Two
methods carry the dispatch: :meth:`Interpreter.execute` runs statements
and :meth:`Interpreter.evaluate` computes expression values. Both take
the environment to work in explicitly; a new environment is chained in
for every block, every ``for`` loop and every function call.

A ``return`` statement does not raise. ``execute`` hands back a
:class:`~toylang.errors.ReturnSignal` and every block or loop that sees
one stops and passes it on until the enclosing function call unwraps the
value. A signal that reaches the program itself is a runtime error.

Runtime errors are :class:`~toylang.errors.ToyRuntimeError` instances
that carry the location of the node that failed. They abort the whole
run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, TextIO, Tuple, Dict

from .ast import (
    Program, ExpressionStatement, VariableStatement, BlockStatement,
    EmptyStatement, IfStatement, WhileStatement, DoWhileStatement,
    ForStatement, FunctionDeclaration, ReturnStatement, Identifier,
    UnaryExpression, BinaryExpression, LogicalExpression,
    AssignmentExpression, CallExpression, LITERAL_TYPES, Node,
)
from .callables import UserFunction
from .environment import Environment
from .errors import (
    ToyRuntimeError, ReturnSignal, NOT_CALLABLE, ARITY_MISMATCH,
    TYPE_MISMATCH, OPERAND_MUST_BE_NUMBER, DIVISION_BY_ZERO, STACK_OVERFLOW,
    RETURN_OUTSIDE_FUNCTION, NUMERIC_OVERFLOW,
)
from .parser import parse_program
from .std import populate_global_environment
from .types import (
    ErrorVal, ToyCallable, is_number, is_truthy, values_equal, to_string,
    type_name,
)

DEFAULT_MAX_CALL_DEPTH: Optional[int] = None

NUMERIC_OPERATORS = ('-', '*', '/', '<', '>', '<=', '>=')


class Interpreter:
    """Core interpreter that executes ToyLang ASTs."""
    def __init__(self, debug_level: int = 0, debug_file: str = 'debug.txt',
                 max_call_depth: Optional[int] = DEFAULT_MAX_CALL_DEPTH,
                 output: Optional[TextIO] = None):
        self.global_env = populate_global_environment(Environment(), output)
        self.max_call_depth = max_call_depth
        self.call_depth = 0
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp: Optional[TextIO] = None
        self.debug_started = False

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp is None:
                # truncate on the first message, append after a reopen
                self.debug_fp = open(self.debug_file, 'a' if self.debug_started else 'w', encoding='utf-8')
                self.debug_started = True
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self) -> None:
        if self.debug_fp is not None:
            self.debug_fp.close()
            self.debug_fp = None

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> None:
        if env is None:
            env = self.global_env
        try:
            result = self.execute_block(program.body, env)
        except RecursionError:
            # nesting too deep for the host stack outside of any call
            raise ToyRuntimeError(ErrorVal(STACK_OVERFLOW, 'program nests too deeply'), program) from None
        finally:
            self.close()
        if isinstance(result, ReturnSignal):
            raise ToyRuntimeError(
                ErrorVal(RETURN_OUTSIDE_FUNCTION, 'return statement outside of a function'),
                result.node)

    def execute_block(self, statements: List[Node], env: Environment) -> Any:
        for stmt in statements:
            result = self.execute(stmt, env)
            # propagate return signals
            if isinstance(result, ReturnSignal):
                return result
        return None

    def execute(self, node: Node, env: Environment) -> Any:
        if isinstance(node, ExpressionStatement):
            self.evaluate(node.expression, env)
            return None
        if isinstance(node, VariableStatement):
            for decl in node.declarations:
                value = self.evaluate(decl.init, env) if decl.init is not None else None
                env.define(decl.id.name, value)
                if self.debug_level >= 2:
                    self.debug(f"declare {decl.id.name}: {type_name(value)} = {to_string(value)}")
            return None
        if isinstance(node, BlockStatement):
            return self.execute_block(node.body, Environment(parent=env))
        if isinstance(node, EmptyStatement):
            return None
        if isinstance(node, IfStatement):
            test = self.evaluate(node.test, env)
            truthy = is_truthy(test)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(test)} -> {truthy}")
            if truthy:
                return self.execute(node.consequent, env)
            if node.alternate is not None:
                return self.execute(node.alternate, env)
            return None
        if isinstance(node, WhileStatement):
            while is_truthy(self.evaluate(node.test, env)):
                res = self.execute(node.body, env)
                if isinstance(res, ReturnSignal):
                    return res
            return None
        if isinstance(node, DoWhileStatement):
            while True:
                res = self.execute(node.body, env)
                if isinstance(res, ReturnSignal):
                    return res
                if not is_truthy(self.evaluate(node.test, env)):
                    return None
        if isinstance(node, ForStatement):
            return self.execute_for(node, env)
        if isinstance(node, FunctionDeclaration):
            env.define(node.name.name, UserFunction(node, env))
            if self.debug_level >= 2:
                self.debug(f"define function {node.name.name}")
            return None
        if isinstance(node, ReturnStatement):
            value = self.evaluate(node.argument, env) if node.argument is not None else None
            return ReturnSignal(value, node)
        raise NotImplementedError(f"execute: unexpected node type {type(node).__name__}")

    def execute_for(self, node: ForStatement, env: Environment) -> Any:
        # the init clause gets its own scope so loop variables stay local
        for_env = Environment(parent=env)
        if isinstance(node.init, VariableStatement):
            self.execute(node.init, for_env)
        elif node.init is not None:
            self.evaluate(node.init, for_env)
        while True:
            if node.test is not None:
                test = self.evaluate(node.test, for_env)
                if self.debug_level >= 3:
                    self.debug(f"for condition {to_string(test)}")
                if not is_truthy(test):
                    return None
            res = self.execute(node.body, for_env)
            if isinstance(res, ReturnSignal):
                return res
            if node.update is not None:
                self.evaluate(node.update, for_env)

    def evaluate(self, node: Node, env: Environment) -> Any:
        if isinstance(node, LITERAL_TYPES):
            return node.value
        if isinstance(node, Identifier):
            try:
                return env.get(node.name)
            except ToyRuntimeError as err:
                raise err.at(node)
        if isinstance(node, LogicalExpression):
            left = self.evaluate(node.left, env)
            # the operand that decides the result is returned as is
            if node.operator == '&&':
                return self.evaluate(node.right, env) if is_truthy(left) else left
            if node.operator == '||':
                return left if is_truthy(left) else self.evaluate(node.right, env)
            raise NotImplementedError(f"unknown logical operator {node.operator}")
        if isinstance(node, BinaryExpression):
            left = self.evaluate(node.left, env)
            right = self.evaluate(node.right, env)
            return self.apply_binary_op(node, node.operator, left, right)
        if isinstance(node, UnaryExpression):
            operand = self.evaluate(node.argument, env)
            if node.operator == '!':
                return not is_truthy(operand)
            if node.operator == '-':
                if not is_number(operand):
                    raise ToyRuntimeError(ErrorVal(OPERAND_MUST_BE_NUMBER,
                                                   f'Operand must be a number, got {type_name(operand)}'), node)
                return -operand
            if node.operator == '+':
                return operand
            raise NotImplementedError(f"unknown unary operator {node.operator}")
        if isinstance(node, AssignmentExpression):
            return self.evaluate_assignment(node, env)
        if isinstance(node, CallExpression):
            callee = self.evaluate(node.callee, env)
            args = [self.evaluate(arg, env) for arg in node.arguments]
            return self.call_function(node, callee, args)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def evaluate_assignment(self, node: AssignmentExpression, env: Environment) -> Any:
        name = node.left.name
        value = self.evaluate(node.right, env)
        try:
            if node.operator != '=':
                current = env.get(name)
                # '+=' -> '+'
                value = self.apply_binary_op(node, node.operator[0], current, value)
            return env.assign(name, value)
        except ToyRuntimeError as err:
            raise err.at(node)

    def call_function(self, node: CallExpression, callee: Any, args: List[Any]) -> Any:
        if not isinstance(callee, ToyCallable):
            raise ToyRuntimeError(ErrorVal(NOT_CALLABLE, f'Can only call functions, got {type_name(callee)}'), node)
        arity = callee.arity
        # None means variadic
        if arity is not None and len(args) != arity:
            raise ToyRuntimeError(ErrorVal(ARITY_MISMATCH,
                                           f'{callee.name} expects {arity} arguments but got {len(args)}'), node)
        if self.max_call_depth is not None and self.call_depth >= self.max_call_depth:
            raise ToyRuntimeError(ErrorVal(STACK_OVERFLOW,
                                           f'maximum call depth of {self.max_call_depth} exceeded'), node)
        if self.debug_level >= 1:
            self.debug(f"call {callee.name}({', '.join(to_string(a) for a in args)})")
        self.call_depth += 1
        try:
            return callee.call(self, args)
        except RecursionError:
            raise ToyRuntimeError(ErrorVal(STACK_OVERFLOW, 'host call stack exhausted'), node) from None
        except ToyRuntimeError as err:
            # natives raise without a location
            err.at(node)
            raise
        finally:
            self.call_depth -= 1

    def apply_binary_op(self, node: Node, op: str, a: Any, b: Any) -> Any:
        try:
            return self._binary_op(node, op, a, b)
        except OverflowError:
            # ints are unbounded but mixing them with floats is not
            raise ToyRuntimeError(ErrorVal(NUMERIC_OVERFLOW, f'result of "{op}" is too large for a number'), node) from None

    def _binary_op(self, node: Node, op: str, a: Any, b: Any) -> Any:
        if op == '==':
            return values_equal(a, b)
        if op == '!=':
            return not values_equal(a, b)
        if op == '+':
            if is_number(a) and is_number(b):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            raise ToyRuntimeError(ErrorVal(TYPE_MISMATCH,
                                           f'cannot apply "+" to {type_name(a)} and {type_name(b)}'), node)
        if op in NUMERIC_OPERATORS:
            if not (is_number(a) and is_number(b)):
                raise ToyRuntimeError(ErrorVal(OPERAND_MUST_BE_NUMBER,
                                               f'Operands of "{op}" must be numbers, got {type_name(a)} and {type_name(b)}'), node)
            if op == '-':
                return a - b
            if op == '*':
                return a * b
            if op == '/':
                if b == 0:
                    raise ToyRuntimeError(ErrorVal(DIVISION_BY_ZERO, 'division by zero'), node)
                if isinstance(a, int) and isinstance(b, int) and a % b == 0:
                    return a // b
                return a / b
            if op == '<':
                return a < b
            if op == '>':
                return a > b
            if op == '<=':
                return a <= b
            if op == '>=':
                return a >= b
        raise NotImplementedError(f"unknown operator {op}")


def run_program(source: str, **options: Any) -> Interpreter:
    """Parse and run ToyLang source, returning the interpreter used."""
    keywords: Optional[Dict[str, Tuple[str, ...]]] = options.pop('keywords', None)
    ast_program = parse_program(source, keywords)
    interpreter = Interpreter(**options)
    interpreter.run(ast_program)
    return interpreter


def run_file(file_path: str, **options: Any) -> Interpreter:
    """Load, parse and run a ToyLang file."""
    source = Path(file_path).read_text(encoding='utf-8')
    return run_program(source, **options)
