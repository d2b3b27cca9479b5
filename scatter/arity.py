"""Stack effects ("arities") and the rules for combining them."""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from scatter.datatype import Type
from scatter.errors import DifferingSizesError, IncompatibleTypesError

_USIZE_PATTERN = re.compile(r"\+?[0-9]+")
_USIZE_LIMIT = 2**64


def _parse_usize(source: str) -> Optional[int]:
    if not _USIZE_PATTERN.fullmatch(source):
        return None
    value = int(source)
    return value if value < _USIZE_LIMIT else None


class MultiIndex:
    """A non-empty, sorted set of indices into an arity's popped values."""

    __slots__ = ("_indices",)

    def __init__(self, *args: int) -> None:
        if not args:
            raise ValueError("a MultiIndex holds at least one index")
        self._indices: List[int] = []
        for index in args:
            self.insert(index)

    @property
    def el(self) -> int:
        """The smallest index."""
        return self._indices[0]

    def contains(self, i: int) -> bool:
        return i in self._indices

    def insert(self, i: int) -> None:
        pos = bisect.bisect_left(self._indices, i)
        if pos < len(self._indices) and self._indices[pos] == i:
            return
        self._indices.insert(pos, i)

    def __iter__(self) -> Iterator[int]:
        return iter(tuple(self._indices))

    def iter_rest(self) -> Iterator[int]:
        """Iterate over every index except the first."""
        return iter(tuple(self._indices[1:]))

    def __contains__(self, i: object) -> bool:
        return i in self._indices

    def __len__(self) -> int:
        return len(self._indices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiIndex):
            return NotImplemented
        return self._indices == other._indices

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"MultiIndex({', '.join(map(str, self._indices))})"


Resultant = Union[Type, MultiIndex]
"""A pushed value: a concrete type, or one that depends on popped values."""


def resultant_stringify(resultant: Resultant) -> str:
    if isinstance(resultant, Type):
        return resultant.stringify()
    return "|".join(str(i) for i in resultant)


def resultant_parse(source: str) -> Optional[Resultant]:
    """Parse a type code or a '|'-separated list of indices, or return None."""
    parsed = Type.parse_raw(source)
    if parsed is not None:
        return parsed
    indices = [_parse_usize(segment) for segment in source.split("|")]
    if any(i is None for i in indices):
        return None
    return MultiIndex(*indices)  # type: ignore[arg-type]


def resultant_references(resultant: Resultant, i: int) -> bool:
    return isinstance(resultant, MultiIndex) and resultant.contains(i)


def resultant_union(left: Resultant, right: Resultant) -> Resultant:
    if isinstance(left, Type) and isinstance(right, Type):
        return left.union(right)
    if isinstance(left, Type):
        return left
    if isinstance(right, Type):
        return right
    return MultiIndex(*left, *right)


def _as_multi_index(value: Union[int, Tuple[int, ...], MultiIndex]) -> MultiIndex:
    if isinstance(value, MultiIndex):
        return MultiIndex(*value)
    if isinstance(value, tuple):
        return MultiIndex(*value)
    return MultiIndex(value)


@dataclass
class Arity:
    """A stack effect: `pops[0]` is the top of the stack consumed first."""

    pops: List[Type] = field(default_factory=list)
    pushes: List[Resultant] = field(default_factory=list)

    @classmethod
    def noop(cls) -> Arity:
        return cls()

    @classmethod
    def literal(cls, result: Type) -> Arity:
        return cls([], [result])

    @classmethod
    def unary(cls, a: Type, result: Type) -> Arity:
        return cls([a], [result])

    @classmethod
    def push_two(cls, a: Type, b: Type) -> Arity:
        return cls([], [a, b])

    @classmethod
    def pop_two(cls, a: Type, b: Type) -> Arity:
        return cls([b, a], [])

    @classmethod
    def binary(cls, a: Type, b: Type, result: Type) -> Arity:
        return cls([a, b], [result])

    @classmethod
    def generic(cls, pop_count: int, *args: Union[int, Tuple[int, ...], MultiIndex]) -> Arity:
        """Pop `pop_count` unknowns and push values depending on them."""
        return cls([Type.UNKNOWN] * pop_count, [_as_multi_index(a) for a in args])

    @classmethod
    def number_binary(cls) -> Arity:
        return cls.binary(Type.NUMBER, Type.NUMBER, Type.NUMBER)

    @classmethod
    def number_unary(cls) -> Arity:
        return cls.unary(Type.NUMBER, Type.NUMBER)

    def copy(self) -> Arity:
        return Arity(list(self.pops), list(self.pushes))

    def size(self) -> Tuple[int, int]:
        return len(self.pops), len(self.pushes)

    def pop_any(self) -> None:
        """Consume one value of any type."""
        if self.pushes:
            self.pushes.pop()
        else:
            self.pops.append(Type.UNKNOWN)

    def attempt_pop(self, term: Type) -> Resultant:
        """Consume one value expected to be of type `term`; return what was consumed."""
        if not self.pushes:
            self.pops.append(term)
            return MultiIndex(len(self.pops) - 1)

        top = self.pushes.pop()
        if isinstance(top, Type):
            if not top.assignable_to(term):
                raise IncompatibleTypesError()
            return top
        if term is Type.UNKNOWN:
            return top
        for x in top:
            if not term.assignable_to(self.pops[x]):
                raise IncompatibleTypesError()
            self.pushes = [term if resultant_references(p, x) else p for p in self.pushes]
            self.pops[x] = term
        return term

    def push(self, term: Resultant) -> None:
        self.pushes.append(term)

    @classmethod
    def serial(cls, first: Arity, second: Arity) -> Arity:
        """The effect of running `first` followed by `second`."""
        running = first.copy()
        resolved = [running.attempt_pop(p) for p in second.pops]
        for push in second.pushes:
            if isinstance(push, Type):
                running.push(push)
                continue
            combined = resolved[push.el]
            for other in push.iter_rest():
                combined = resultant_union(combined, resolved[other])
            running.push(combined)
        return running

    def stringify(self) -> str:
        parts = []
        for i in reversed(range(len(self.pops))):
            pop = self.pops[i]
            if pop is Type.UNKNOWN and any(resultant_references(p, i) for p in self.pushes):
                parts.append(f"{i} ")
            else:
                parts.append(f"{pop.stringify()} ")
        parts.append("-")
        parts.extend(f" {resultant_stringify(p)}" for p in self.pushes)
        return "".join(parts)

    def extend_pops(self) -> None:
        """Pop one more unknown value and push it straight back underneath."""
        self.pops.append(Type.UNKNOWN)
        self.pushes.insert(0, MultiIndex(len(self.pops) - 1))

    @staticmethod
    def _resolve_dependents(pushes: List[Resultant], pops: List[Type]) -> None:
        for n, push in enumerate(pushes):
            if isinstance(push, Type):
                continue
            resolved: Optional[Type] = None
            for index in push:
                if pops[index] is not Type.UNKNOWN:
                    resolved = pops[index] if resolved is None else resolved.inter(pops[index])
            if resolved is not None:
                pushes[n] = resolved

    @classmethod
    def parallel(cls, left: Arity, right: Arity) -> Arity:
        """The effect of running either `left` or `right`."""
        left = left.copy()
        right = right.copy()
        for _ in range(max(0, len(right.pops) - len(left.pops))):
            left.extend_pops()
        for _ in range(max(0, len(left.pops) - len(right.pops))):
            right.extend_pops()

        if left.size() != right.size():
            raise DifferingSizesError()

        result = cls.noop()
        for left_pop, right_pop in zip(left.pops, right.pops):
            expected = right_pop.inter(left_pop)
            if expected is None:
                raise IncompatibleTypesError()
            result.pops.append(expected)

        cls._resolve_dependents(left.pushes, result.pops)
        cls._resolve_dependents(right.pushes, result.pops)

        result.pushes = [resultant_union(a, b) for a, b in zip(left.pushes, right.pushes)]
        return result

    @classmethod
    def parse(cls, source: str) -> Optional[Arity]:
        """Parse the form produced by `stringify`, or return None."""
        pops_text, dash, pushes_text = source.partition("-")
        if not dash:
            return None

        pops: List[Type] = []
        for part in reversed(pops_text.split(" ")):
            part = part.strip()
            if not part:
                continue
            parsed = Type.parse_as_pop(part)
            if parsed is None:
                return None
            pops.append(parsed)

        pushes: List[Resultant] = []
        for part in pushes_text.split(" "):
            part = part.strip()
            if not part:
                continue
            parsed_push = resultant_parse(part)
            if parsed_push is None:
                return None
            pushes.append(parsed_push)

        return cls(pops, pushes)

    def __str__(self) -> str:
        return self.stringify()

    def __repr__(self) -> str:
        return f"Arity({self.stringify()!r})"