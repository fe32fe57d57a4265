"""Tree-walking interpreter for the Ruistic language.

Statements are executed one after another against a chain of
environments. The only state the interpreter keeps between statements is
the current environment, which blocks replace on entry and restore on
exit.

Runtime errors are raised as `RuisticError` while an expression is being
evaluated and are always caught by the statement that owns the
expression. What happens next depends on the statement:

* ``print`` reports the error and moves on;
* ``if`` reports the error and runs neither branch;
* expression statements quietly discard it;
* ``var`` quietly binds ``nil`` instead;
* ``while`` quietly stops looping.

Quiet failures still show up in the debug log. Expressions nested deeply
enough to exhaust the Python stack fail the same way, as a
``RecursionError`` runtime error. No runtime error ever escapes to the
caller of `interpret`.
"""

from __future__ import annotations

import sys
from typing import Callable, Dict, List, Optional, TextIO

from .ast import (
    Assign, Binary, Block, Expr, Expression, Grouping, If, Literal, Print,
    Stmt, Unary, Var, Variable, While,
)
from .environment import Environment
from .errors import RuisticError
from .parser import parse
from .scanner import scan
from .tokens import Token, TokenType
from .types import NIL, ErrorVal, Value, is_truthy, to_string, type_name, values_equal


def _numbers(operator: Token, a: Value, b: Value) -> None:
    if not (type(a) is float and type(b) is float):
        raise RuisticError(
            ErrorVal('TypeError', f"operands of '{operator.lexeme}' must be numbers, "
                                  f"got {type_name(a)} and {type_name(b)}"),
            operator.line,
        )


def _add(operator: Token, a: Value, b: Value) -> Value:
    if type(a) is float and type(b) is float:
        return a + b
    if type(a) is str and type(b) is str:
        return a + b
    raise RuisticError(
        ErrorVal('TypeError', f"operands of '+' must be two numbers or two strings, "
                              f"got {type_name(a)} and {type_name(b)}"),
        operator.line,
    )


def _divide(operator: Token, a: Value, b: Value) -> Value:
    _numbers(operator, a, b)
    if b == 0.0:
        raise RuisticError(ErrorVal('ZeroDivisionError', 'division by zero'), operator.line)
    return a / b


def _arithmetic(fn: Callable[[float, float], Value]):
    def apply(operator: Token, a: Value, b: Value) -> Value:
        _numbers(operator, a, b)
        return fn(a, b)
    return apply


BINARY_OPERATORS: Dict[TokenType, Callable[[Token, Value, Value], Value]] = {
    TokenType.PLUS: _add,
    TokenType.MINUS: _arithmetic(lambda a, b: a - b),
    TokenType.STAR: _arithmetic(lambda a, b: a * b),
    TokenType.SLASH: _divide,
    TokenType.GREATER: _arithmetic(lambda a, b: a > b),
    TokenType.GREATER_EQUAL: _arithmetic(lambda a, b: a >= b),
    TokenType.LESS: _arithmetic(lambda a, b: a < b),
    TokenType.LESS_EQUAL: _arithmetic(lambda a, b: a <= b),
    TokenType.EQUAL_EQUAL: lambda operator, a, b: values_equal(a, b),
    TokenType.BANG_EQUAL: lambda operator, a, b: not values_equal(a, b),
}


class Interpreter:
    """Core interpreter that executes Ruistic statements."""
    def __init__(
        self,
        environment: Optional[Environment] = None,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
        debug_level: int = 0,
        debug_file: str = 'debug.txt',
    ):
        self.globals = environment if environment is not None else Environment()
        self.environment = self.globals
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w') if debug_level > 0 else None

    def debug(self, msg: str):
        if self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def report(self, prefix: str, error: RuisticError):
        print(f"{prefix}: {error}", file=self.err)

    # Public API
    def interpret(self, statements: List[Stmt]):
        for stmt in statements:
            self.execute(stmt)

    def execute_block(self, statements: List[Stmt], env: Environment):
        previous = self.environment
        self.environment = env
        if self.debug_level >= 3:
            self.debug(f"enter scope depth {env.depth}")
        try:
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.environment = previous
            if self.debug_level >= 3:
                self.debug(f"leave scope depth {env.depth}")

    def execute(self, node: Stmt):
        if isinstance(node, Expression):
            try:
                self.evaluate_checked(node.expression)
            except RuisticError as ex:
                # The result is discarded, and so is a failure.
                self.debug(f"expression statement failed ({ex})")
            return
        if isinstance(node, Print):
            try:
                value = self.evaluate_checked(node.expression)
            except RuisticError as ex:
                self.report("Runtime error", ex)
                return
            print(to_string(value), file=self.out)
            return
        if isinstance(node, Var):
            value: Value = NIL
            if node.initializer is not None:
                try:
                    value = self.evaluate_checked(node.initializer)
                except RuisticError as ex:
                    # Initializer failures bind nil without a diagnostic.
                    self.debug(f"initializer of {node.name.lexeme} failed ({ex}); using nil")
            self.environment.define(node.name.lexeme, value)
            if self.debug_level >= 2:
                self.debug(f"declare {node.name.lexeme}: {type_name(value)} = {to_string(value)}")
            return
        if isinstance(node, Block):
            self.execute_block(node.statements, Environment(parent=self.environment))
            return
        if isinstance(node, If):
            try:
                cond = self.evaluate_checked(node.condition)
            except RuisticError as ex:
                self.report("Runtime error in if statement", ex)
                return
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {to_string(cond)} -> {truthy}")
            if truthy:
                self.execute(node.then_branch)
            elif node.else_branch is not None:
                self.execute(node.else_branch)
            return
        if isinstance(node, While):
            while True:
                try:
                    cond = self.evaluate_checked(node.condition)
                except RuisticError as ex:
                    # A failing condition ends the loop like a false one.
                    self.debug(f"while condition failed ({ex}); leaving loop")
                    break
                if not is_truthy(cond):
                    break
                self.execute(node.body)
            return
        # catch any other nodes
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def evaluate(self, node: Expr) -> Value:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Grouping):
            return self.evaluate(node.inner)
        if isinstance(node, Variable):
            return self.environment.get(node.name.lexeme, node.name.line)
        if isinstance(node, Assign):
            value = self.evaluate(node.value)
            self.environment.assign(node.name.lexeme, value, node.name.line)
            if self.debug_level >= 2:
                self.debug(f"assign {node.name.lexeme} = {to_string(value)}")
            return value
        if isinstance(node, Unary):
            operand = self.evaluate(node.operand)
            if node.operator.type == TokenType.MINUS:
                if type(operand) is not float:
                    raise RuisticError(
                        ErrorVal('TypeError', f"operand of '-' must be a number, got {type_name(operand)}"),
                        node.operator.line,
                    )
                return -operand
            if node.operator.type == TokenType.BANG:
                return not is_truthy(operand)
            raise RuisticError(ErrorVal('TypeError', f"unknown unary operator '{node.operator.lexeme}'"),
                               node.operator.line)
        if isinstance(node, Binary):
            return self.evaluate_binary(node)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_checked(self, node: Expr) -> Value:
        """Evaluate `node`, turning Python stack exhaustion into a runtime error."""
        try:
            return self.evaluate(node)
        except RecursionError:
            raise RuisticError(ErrorVal('RecursionError', 'expression nesting too deep')) from None

    def evaluate_binary(self, node: Binary) -> Value:
        # Operator chains lean left (`1 + 2 + 3` is `(1 + 2) + 3`), so the
        # left spine is walked in a loop rather than by recursion.
        chain: List[Binary] = []
        left: Expr = node
        while isinstance(left, Binary):
            chain.append(left)
            left = left.left
        value = self.evaluate(left)
        for binary in reversed(chain):
            right = self.evaluate(binary.right)
            apply = BINARY_OPERATORS.get(binary.operator.type)
            if apply is None:
                raise RuisticError(ErrorVal('TypeError', f"unknown operator '{binary.operator.lexeme}'"),
                                   binary.operator.line)
            value = apply(binary.operator, value, right)
        return value


def interpret(
    statements: List[Stmt],
    environment: Optional[Environment] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> Environment:
    """Execute `statements` for effect against `environment`, mutating it in place."""
    interpreter = Interpreter(environment, out=out, err=err)
    interpreter.interpret(statements)
    return interpreter.globals


def run_program(
    source: str,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
    debug_level: int = 0,
) -> Interpreter:
    """Convenience function to scan, parse and run a Ruistic program from source string."""
    statements = parse(scan(source, err), err)
    interpreter = Interpreter(out=out, err=err, debug_level=debug_level)
    try:
        interpreter.interpret(statements)
    finally:
        interpreter.close()
    return interpreter
