"""Punctuation symbols of the language."""

from __future__ import annotations

import enum


class Symbol(enum.Enum):
    COLON = ":"
    CURLY_OPEN = "{"
    CURLY_CLOSE = "}"
    PAREN_OPEN = "("
    PAREN_CLOSE = ")"
    SQUARE_OPEN = "["
    SQUARE_CLOSE = "]"
    LINE_END = "\u2424"
    HASH = "#"
    AT = "@"

    def __str__(self) -> str:
        return self.value