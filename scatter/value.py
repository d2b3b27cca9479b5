"""Runtime values and how they are shown."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

_ESCAPES = {
    "\t": "\\t",
    "\r": "\\r",
    "\n": "\\n",
    "\\": "\\\\",
    '"': '\\"',
    "'": "\\'",
    "\0": "\\0",
}


@dataclass(frozen=True)
class Address:
    """A pointer to a function in a namespace."""

    namespace: int
    name: str


Value = Union[str, float, bool, Address]
"""A stack value: a string, a number, a boolean or a function address."""


def is_truthy(value: Value) -> bool:
    """Whether a value counts as true in a condition."""
    if isinstance(value, Address):
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return bool(value)
    if isinstance(value, (int, float)):
        return not math.isnan(value) and value != 0
    raise TypeError(f"not a value: {value!r}")


def _display_number(v: float) -> str:
    v = float(v)
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "inf" if v > 0 else "-inf"
    text = format(Decimal(repr(v)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def debug_string(text: str) -> str:
    """Quote a string, escaping quotes, backslashes and unprintable characters."""
    out = []
    for c in text:
        if c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif c.isprintable():
            out.append(c)
        else:
            out.append(f"\\u{{{ord(c):x}}}")
    return '"' + "".join(out) + '"'


def debug_value(value: Value) -> str:
    """Show a value as it appears in a printed stack: strings quoted."""
    if isinstance(value, Address):
        return f"Fn[{value.namespace}, {value.name}]"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return debug_string(value)
    if isinstance(value, (int, float)):
        return _display_number(value)
    raise TypeError(f"not a value: {value!r}")


def display_value(value: Value) -> str:
    """Show a value as printed by the program: strings unquoted."""
    if isinstance(value, str):
        return value
    return debug_value(value)