from typing import Optional
from ruistic.tokens import Token, TokenType
from ruistic.types import ErrorVal


class RuisticSyntaxError(Exception):
    """Base class for errors found before a program runs."""
    def __init__(self, line: int, message: str):
        super().__init__(message)
        self.line = line
        self.message = message


class ScanError(RuisticSyntaxError):
    """A malformed lexeme: unterminated string or comment, stray character."""
    def __str__(self) -> str:
        return f"[line {self.line}] Error: {self.message}"


class ParseError(RuisticSyntaxError):
    """Raised by the parser when a statement cannot be completed."""
    def __init__(self, token: Token, message: str):
        super().__init__(token.line, message)
        self.token = token

    def __str__(self) -> str:
        if self.token.type == TokenType.EOF:
            where = 'at end'
        else:
            where = f"at '{self.token.lexeme}'"
        return f"[line {self.line}] Error {where}: {self.message}"


class RuisticError(Exception):
    """Exception type used to propagate Ruistic runtime errors."""
    def __init__(self, err: ErrorVal, line: Optional[int] = None):
        super().__init__(f"RuisticError: {err.name}: {err.message}")
        self.err = err
        self.line = line

    def __str__(self) -> str:
        text = f"{self.err.name}: {self.err.message}"
        if self.line is not None:
            return f"[line {self.line}] {text}"
        return text
