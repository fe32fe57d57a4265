"""Scanner for the Ruistic language.

The scanner walks the source text once, left to right, and produces a
list of tokens that always ends with an EOF token. Malformed input does
not stop it: each problem is recorded as a `ScanError`, written to the
diagnostic stream, and scanning carries on with the next character.
"""

from __future__ import annotations

import sys
from typing import Any, List, Optional, TextIO

from .errors import ScanError
from .tokens import KEYWORDS, Token, TokenType


SINGLE_CHAR_TOKENS = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
}

# (without '=', with '=')
ONE_OR_TWO_CHAR_TOKENS = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def is_alpha(c: str) -> bool:
    return 'a' <= c <= 'z' or 'A' <= c <= 'Z' or c == '_'


def is_alphanumeric(c: str) -> bool:
    return is_alpha(c) or is_digit(c)


class Scanner:
    def __init__(self, source: str, err: Optional[TextIO] = None):
        self.source = source
        self.err = err
        self.tokens: List[Token] = []
        self.errors: List[ScanError] = []
        self.start = 0
        self.current = 0
        self.line = 1

    @property
    def had_error(self) -> bool:
        return bool(self.errors)

    def scan_tokens(self) -> List[Token]:
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()
        self.tokens.append(Token(TokenType.EOF, '', None, self.line))
        return self.tokens

    def is_at_end(self) -> bool:
        return self.current >= len(self.source)

    def advance(self) -> str:
        c = self.source[self.current]
        self.current += 1
        return c

    def match(self, expected: str) -> bool:
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self) -> str:
        if self.is_at_end():
            return '\0'
        return self.source[self.current]

    def peek_next(self) -> str:
        if self.current + 1 >= len(self.source):
            return '\0'
        return self.source[self.current + 1]

    def add_token(self, token_type: TokenType, literal: Any = None, line: Optional[int] = None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(token_type, text, literal, self.line if line is None else line))

    def error(self, message: str, line: Optional[int] = None):
        error = ScanError(self.line if line is None else line, message)
        self.errors.append(error)
        print(error, file=self.err if self.err is not None else sys.stderr)

    def scan_token(self):
        c = self.advance()
        if c in SINGLE_CHAR_TOKENS:
            self.add_token(SINGLE_CHAR_TOKENS[c])
        elif c in ONE_OR_TWO_CHAR_TOKENS:
            single, double = ONE_OR_TWO_CHAR_TOKENS[c]
            self.add_token(double if self.match('=') else single)
        elif c == '/':
            if self.match('/'):
                self.line_comment()
            elif self.match('*'):
                self.block_comment()
            else:
                self.add_token(TokenType.SLASH)
        elif c in ' \r\t':
            pass
        elif c == '\n':
            self.line += 1
        elif c == '"':
            self.string()
        elif is_digit(c):
            self.number()
        elif is_alpha(c):
            self.identifier()
        else:
            self.error(f"Unexpected character {c!r}.")

    def line_comment(self):
        # The newline itself is left for scan_token so the line count stays in one place.
        while self.peek() != '\n' and not self.is_at_end():
            self.advance()

    def block_comment(self):
        start_line = self.line
        depth = 1
        while depth > 0:
            if self.is_at_end():
                self.error("Unterminated block comment.", start_line)
                return
            if self.peek() == '/' and self.peek_next() == '*':
                self.current += 2
                depth += 1
            elif self.peek() == '*' and self.peek_next() == '/':
                self.current += 2
                depth -= 1
            else:
                if self.advance() == '\n':
                    self.line += 1

    def string(self):
        start_line = self.line
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()
        if self.is_at_end():
            self.error("Unterminated string.", start_line)
            return
        self.advance()  # closing quote
        value = self.source[self.start + 1:self.current - 1]
        self.add_token(TokenType.STRING, value, start_line)

    def number(self):
        while is_digit(self.peek()):
            self.advance()
        # A fractional part needs at least one digit after the dot.
        if self.peek() == '.' and is_digit(self.peek_next()):
            self.advance()
            while is_digit(self.peek()):
                self.advance()
        self.add_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while is_alphanumeric(self.peek()):
            self.advance()
        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))


def scan(source: str, err: Optional[TextIO] = None) -> List[Token]:
    """Convert source code into a list of tokens ending with EOF.

    Scan errors are reported to `err` (stderr by default) and skipped.
    """
    return Scanner(source, err).scan_tokens()
