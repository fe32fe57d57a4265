# Ruistic language package
# This package provides a scanner, parser and tree-walking interpreter for the Ruistic language.
from .environment import Environment
from .errors import ParseError, RuisticError, ScanError
from .interpreter import Interpreter, interpret, run_program
from .parser import parse, parse_program
from .scanner import scan

__all__ = [
    'scan',
    'parse',
    'parse_program',
    'interpret',
    'run_program',
    'Interpreter',
    'Environment',
    'RuisticError',
    'ScanError',
    'ParseError',
]
