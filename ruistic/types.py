"""Runtime values for Ruistic.

Ruistic has four kinds of value, all represented by plain Python objects
except for nil:

* Number  -> ``float``
* String  -> ``str``
* Boolean -> ``bool``
* Nil     -> the ``NIL`` singleton of :class:`Nil`

Because ``bool`` is a subclass of ``int`` in Python and ``1.0 == True``
holds, equality and type checks here always compare the exact Python type
first.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union


class Nil:
    """Marker object for the Ruistic `nil` value."""
    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Nil)

    def __hash__(self) -> int:
        return hash(Nil)

    def __repr__(self) -> str:
        return 'nil'


NIL = Nil()

Value = Union[float, str, bool, Nil]


@dataclass
class ErrorVal:
    """A runtime error description: a short kind name and a message."""
    name: str
    message: str

    def __repr__(self) -> str:
        return f"Error(name={self.name!r}, message={self.message!r})"


def is_truthy(value: Any) -> bool:
    # nil and false are the only falsy values; 0 and "" are truthy.
    if isinstance(value, Nil):
        return False
    if isinstance(value, bool):
        return value
    return True


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality: same kind of value and same payload."""
    if type(a) is not type(b):
        return False
    return a == b


def type_name(value: Any) -> str:
    """Return the Ruistic type name of a runtime value."""
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, Nil):
        return 'Nil'
    return type(value).__name__


def format_number(value: float) -> str:
    """Render a number the way `print` shows it.

    The digits are those of the shortest round-tripping representation,
    written out without an exponent, and integral values drop the
    trailing ``.0``.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    text = format(Decimal(repr(value)), 'f')
    if '.' in text:
        text = text.rstrip('0').rstrip('.')
    return text


def to_string(value: Any) -> str:
    """Convert a Ruistic value to the text `print` writes."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Nil):
        return 'nil'
    return str(value)
