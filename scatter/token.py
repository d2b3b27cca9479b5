"""Lexical tokens and tokens tagged with their source range."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple, Union

from scatter.source_location import SourceLocation, SourceRange
from scatter.symbol import Symbol

_ESCAPES = {
    "\t": "\\t",
    "\r": "\\r",
    "\n": "\\n",
    "\\": "\\\\",
    '"': '\\"',
    "\0": "\\0",
}


def _debug_str(text: str) -> str:
    out = []
    for c in text:
        if c in _ESCAPES:
            out.append(_ESCAPES[c])
        elif c.isprintable():
            out.append(c)
        else:
            out.append(f"\\u{{{ord(c):x}}}")
    return '"' + "".join(out) + '"'


def _debug_number(v: float) -> str:
    if math.isnan(v):
        return "NaN"
    if math.isinf(v):
        return "inf" if v > 0 else "-inf"
    magnitude = abs(v)
    if magnitude != 0 and (magnitude < 1e-4 or magnitude >= 1e16):
        sign, digits, exponent = Decimal(repr(v)).as_tuple()
        text = "".join(map(str, digits)).rstrip("0") or "0"
        power = exponent + len(digits) - 1
        mantissa = text[0] + ("." + text[1:] if len(text) > 1 else "")
        return f"{'-' if sign else ''}{mantissa}e{power}"
    text = format(Decimal(repr(v)), "f")
    if "." in text:
        text = text.rstrip("0")
        if text.endswith("."):
            text += "0"
    else:
        text += ".0"
    return text


class TokenKind(enum.Enum):
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NAME = "name"
    SYMBOL = "symbol"


@dataclass(frozen=True)
class Token:
    """A token: its kind and the value it carries."""

    kind: TokenKind
    value: Union[str, float, bool, Symbol]

    def with_range(
        self, loc: Union[SourceRange, Tuple[SourceLocation, SourceLocation]]
    ) -> ParsedToken:
        if not isinstance(loc, SourceRange):
            start, end = loc
            loc = SourceRange(start, end)
        return ParsedToken(value=self, loc=loc)

    def at_location(self, loc: SourceLocation) -> ParsedToken:
        return ParsedToken(value=self, loc=SourceRange(loc, loc))

    def __str__(self) -> str:
        if self.kind is TokenKind.NAME:
            return str(self.value)
        if self.kind is TokenKind.STRING:
            return _debug_str(str(self.value))
        if self.kind is TokenKind.NUMBER:
            return _debug_number(float(self.value))  # type: ignore[arg-type]
        if self.kind is TokenKind.BOOL:
            return "true" if self.value else "false"
        return str(self.value)


@dataclass(frozen=True)
class ParsedToken:
    """A token with the source range it was read from."""

    value: Token
    loc: SourceRange