from typing import Dict, Optional
from ruistic.errors import RuisticError
from ruistic.types import ErrorVal, Value


class Environment:
    """A scope mapping variable names to values, chained to its enclosing scope."""
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Value] = {}

    def define(self, name: str, value: Value):
        # Redefinition in the same scope simply overwrites.
        self.values[name] = value

    def get(self, name: str, line: Optional[int] = None) -> Value:
        if name in self.values:
            return self.values[name]
        if self.parent is not None:
            return self.parent.get(name, line)
        raise RuisticError(ErrorVal('NameError', f"undefined variable '{name}'"), line)

    def assign(self, name: str, value: Value, line: Optional[int] = None) -> Value:
        """Rebind `name` in the nearest scope that defines it."""
        if name in self.values:
            self.values[name] = value
            return value
        if self.parent is not None:
            return self.parent.assign(name, value, line)
        raise RuisticError(ErrorVal('NameError', f"undefined variable '{name}'"), line)

    def is_defined(self, name: str) -> bool:
        if name in self.values:
            return True
        return self.parent is not None and self.parent.is_defined(name)

    @property
    def depth(self) -> int:
        """Number of enclosing scopes; the global scope has depth 0."""
        return 0 if self.parent is None else self.parent.depth + 1
