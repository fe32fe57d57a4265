"""Abstract Syntax Tree (AST) definitions for the Ruistic language.

The parser produces these nodes and the interpreter walks them. Every
composite node owns its children outright, so a parsed program is a
strict tree. Names and operators are kept as tokens to give runtime
errors a line number.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .tokens import Token
from .types import Value


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


class Expr(Node):
    pass


class Stmt(Node):
    pass


# Expressions

@dataclass
class Literal(Expr):
    value: Value


@dataclass
class Unary(Expr):
    operator: Token
    operand: Expr


@dataclass
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass
class Grouping(Expr):
    inner: Expr


@dataclass
class Variable(Expr):
    name: Token


@dataclass
class Assign(Expr):
    name: Token
    value: Expr


# Statements

@dataclass
class Expression(Stmt):
    expression: Expr


@dataclass
class Print(Stmt):
    expression: Expr


@dataclass
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass
class Block(Stmt):
    statements: List[Stmt]


@dataclass
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass
class While(Stmt):
    condition: Expr
    body: Stmt
