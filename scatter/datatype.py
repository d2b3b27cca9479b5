"""Value types known to the static arity analysis."""

from __future__ import annotations

import enum
import re
from typing import Optional

_USIZE_PATTERN = re.compile(r"\+?[0-9]+")
_USIZE_LIMIT = 2**64


def _is_usize(source: str) -> bool:
    return bool(_USIZE_PATTERN.fullmatch(source)) and int(source) < _USIZE_LIMIT


class Type(enum.Enum):
    """The type of a stack slot; UNKNOWN accepts any value."""

    BOOL = "b"
    NUMBER = "n"
    STRING = "s"
    ADDRESS = "a"
    UNKNOWN = "u"

    def assignable_to(self, other: Type) -> bool:
        """Whether a value of this type may be stored where `other` is expected."""
        return other is Type.UNKNOWN or self is other

    def stringify(self) -> str:
        """The one-letter code of this type."""
        return self.value

    @classmethod
    def parse_raw(cls, source: str) -> Optional[Type]:
        """Parse a one-letter type code, or return None."""
        try:
            return cls(source)
        except ValueError:
            return None

    @classmethod
    def parse_as_pop(cls, source: str) -> Optional[Type]:
        """Parse a popped slot: a type code, or an index meaning UNKNOWN."""
        parsed = cls.parse_raw(source)
        if parsed is not None:
            return parsed
        if _is_usize(source):
            return cls.UNKNOWN
        return None

    def union(self, other: Type) -> Type:
        """The narrowest type both this and `other` are assignable to."""
        if self.assignable_to(other):
            return other
        if other.assignable_to(self):
            return self
        return Type.UNKNOWN

    def inter(self, other: Type) -> Optional[Type]:
        """The type satisfying both constraints, or None if they conflict."""
        if self is other:
            return self
        if self is Type.UNKNOWN:
            return other
        if other is Type.UNKNOWN:
            return self
        return None