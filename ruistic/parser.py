"""Parser for the Ruistic language.

A recursive-descent parser with one method per precedence level, highest
precedence at the bottom of the file:

    program     -> declaration* EOF
    declaration -> "var" IDENTIFIER ( "=" expression )? ";" | statement
    statement   -> exprStmt | printStmt | block | ifStmt | whileStmt | forStmt
    expression  -> assignment
    assignment  -> IDENTIFIER "=" assignment | equality
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | primary
    primary     -> NUMBER | STRING | "true" | "false" | "nil"
                 | IDENTIFIER | "(" expression ")"

`for` loops have no node of their own: they are rewritten into a block
holding the initializer and a `while` loop.

A statement that fails to parse raises `ParseError`. The error is
reported and the parser skips ahead to the next statement boundary, so
the statements around a broken one are still returned.
"""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .ast import (
    Assign, Binary, Block, Expr, Expression, Grouping, If, Literal, Print,
    Stmt, Unary, Var, Variable, While,
)
from .errors import ParseError
from .scanner import scan
from .tokens import Token, TokenType
from .types import NIL


STATEMENT_STARTS = {
    TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
    TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
}


class Parser:
    def __init__(self, tokens: List[Token], err: Optional[TextIO] = None):
        if not tokens or tokens[-1].type != TokenType.EOF:
            last_line = tokens[-1].line if tokens else 1
            tokens = list(tokens) + [Token(TokenType.EOF, '', None, last_line)]
        self.tokens = tokens
        self.err = err
        self.errors: List[ParseError] = []
        self.pos = 0

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    # Cursor helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def check(self, token_type: TokenType) -> bool:
        return self.peek().type == token_type

    def advance(self) -> Token:
        if not self.is_at_end():
            self.pos += 1
        return self.previous()

    def match(self, *types: TokenType) -> bool:
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, expected: TokenType, message: str) -> Token:
        if self.check(expected):
            return self.advance()
        raise ParseError(self.peek(), message)

    # Error recovery

    def report(self, error: ParseError):
        self.errors.append(error)
        print(error, file=self.err if self.err is not None else sys.stderr)

    def synchronize(self, start: int):
        """Discard tokens until the start of the next statement.

        `start` is where the failed statement began; at least one token
        is always consumed so that parsing makes progress.
        """
        if self.pos == start:
            self.advance()
        while not self.is_at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    def declaration_or_recover(self) -> Optional[Stmt]:
        start = self.pos
        try:
            return self.parse_declaration()
        except ParseError as error:
            self.report(error)
        except RecursionError:
            self.report(ParseError(self.peek(), "Expression nesting too deep."))
        self.synchronize(start)
        return None

    # Statements

    def parse_program(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while not self.is_at_end():
            stmt = self.declaration_or_recover()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_declaration(self) -> Stmt:
        if self.match(TokenType.VAR):
            return self.parse_var_declaration()
        return self.parse_statement()

    def parse_var_declaration(self) -> Var:
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            initializer = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def parse_statement(self) -> Stmt:
        if self.match(TokenType.IF):
            return self.parse_if_stmt()
        if self.match(TokenType.PRINT):
            return self.parse_print_stmt()
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.parse_block())
        if self.match(TokenType.WHILE):
            return self.parse_while_stmt()
        if self.match(TokenType.FOR):
            return self.parse_for_stmt()
        return self.parse_expression_stmt()

    def parse_print_stmt(self) -> Print:
        value = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def parse_expression_stmt(self) -> Expression:
        expr = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    def parse_block(self) -> List[Stmt]:
        # Recovery happens per statement here too, so one bad line in a
        # block does not throw the whole block away.
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration_or_recover()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def parse_if_stmt(self) -> If:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self.parse_statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.parse_statement()
        return If(condition, then_branch, else_branch)

    def parse_while_stmt(self) -> While:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.parse_statement()
        return While(condition, body)

    def parse_for_stmt(self) -> Stmt:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")
        # parse init
        initializer: Optional[Stmt]
        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.parse_var_declaration()
        else:
            initializer = self.parse_expression_stmt()
        # parse condition
        condition: Expr = Literal(True)
        if not self.check(TokenType.SEMICOLON):
            condition = self.parse_expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")
        # parse increment
        increment: Optional[Expr] = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.parse_expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")
        body = self.parse_statement()

        if increment is not None:
            body = Block([body, Expression(increment)])
        loop: Stmt = While(condition, body)
        if initializer is not None:
            loop = Block([initializer, loop])
        return loop

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_assignment()

    def parse_assignment(self) -> Expr:
        expr = self.parse_equality()
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.parse_assignment()
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            raise ParseError(equals, "Invalid assignment target.")
        return expr

    def parse_binary(self, operand, *operators: TokenType) -> Expr:
        node = operand()
        while self.match(*operators):
            op_token = self.previous()
            right = operand()
            node = Binary(node, op_token, right)
        return node

    def parse_equality(self) -> Expr:
        return self.parse_binary(self.parse_comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def parse_comparison(self) -> Expr:
        return self.parse_binary(
            self.parse_term,
            TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL,
        )

    def parse_term(self) -> Expr:
        return self.parse_binary(self.parse_factor, TokenType.MINUS, TokenType.PLUS)

    def parse_factor(self) -> Expr:
        return self.parse_binary(self.parse_unary, TokenType.SLASH, TokenType.STAR)

    def parse_unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            op_token = self.previous()
            operand = self.parse_unary()
            return Unary(op_token, operand)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(NIL)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise ParseError(self.peek(), "Expect expression.")


def parse(tokens: List[Token], err: Optional[TextIO] = None) -> List[Stmt]:
    """Parse a token list into top-level statements.

    Parse errors are reported to `err` (stderr by default); whatever
    statements could be recovered are returned.
    """
    return Parser(tokens, err).parse_program()


def parse_program(source: str, err: Optional[TextIO] = None) -> List[Stmt]:
    """Scan and parse Ruistic source code in one step."""
    return parse(scan(source, err), err)
