"""Syntax tree of a parsed module."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from scatter.source_location import SourceLocation, SourceRange


def _start_range() -> SourceRange:
    start = SourceLocation.start()
    return SourceRange(start, start)


@dataclass
class StringTerm:
    value: str


@dataclass(eq=False)
class NumberTerm:
    value: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NumberTerm):
            return NotImplemented
        return self.value == other.value

    __hash__ = None  # type: ignore[assignment]


@dataclass
class BoolTerm:
    value: bool


@dataclass
class AddressTerm:
    """A reference to a function, pushed rather than called."""

    name: str


@dataclass
class NameTerm:
    """A call by name; its source range does not take part in equality."""

    name: str
    range: SourceRange = field(default_factory=_start_range, compare=False)


@dataclass
class Block:
    terms: List[Term] = field(default_factory=list)


@dataclass
class Branch:
    """Condition/body pairs; the first arm whose condition holds runs."""

    arms: List[Tuple[Block, Block]] = field(default_factory=list)


@dataclass
class Loop:
    pre_condition: Optional[Block]
    body: Block
    post_condition: Optional[Block]


Term = Union[StringTerm, NumberTerm, BoolTerm, AddressTerm, NameTerm, Branch, Loop]


@dataclass
class Function:
    name: str
    body: Block


@dataclass(frozen=True)
class WildcardImport:
    """Import every function of a module."""


@dataclass
class NamedImport:
    names: List[str]


@dataclass
class ScopedImport:
    scope: str


@dataclass
class RelativeLocation:
    path: str


ImportNaming = Union[WildcardImport, NamedImport, ScopedImport]


@dataclass
class Import:
    naming: ImportNaming
    location: RelativeLocation


@dataclass
class Module:
    imports: List[Import] = field(default_factory=list)
    functions: List[Function] = field(default_factory=list)
    body: Block = field(default_factory=Block)


def term(value: Union[int, float, bool]) -> Term:
    """Build a literal term from a Python number or boolean."""
    if isinstance(value, bool):
        return BoolTerm(value)
    if isinstance(value, (int, float)):
        return NumberTerm(float(value))
    raise TypeError(f"cannot make a literal term from {value!r}")