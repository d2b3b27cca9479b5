"""Positions in source text and a character crawler that tracks them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple


def _lines(text: str) -> List[str]:
    """Split text into lines at '\\n' or '\\r\\n', without a trailing empty line."""
    if not text:
        return []
    parts = text.split("\n")
    ended_with_newline = text.endswith("\n")
    if ended_with_newline:
        parts.pop()
    last = len(parts) - 1
    return [
        part[:-1] if part.endswith("\r") and (n < last or ended_with_newline) else part
        for n, part in enumerate(parts)
    ]


@dataclass(frozen=True)
class SourceLocation:
    """A zero-based position: character offset, line and column."""

    character: int
    line: int
    column: int

    @classmethod
    def start(cls) -> SourceLocation:
        return cls(character=0, line=0, column=0)

    def add(self, c: str) -> SourceLocation:
        """The location just after character `c` found at this location."""
        if c == "\n":
            return SourceLocation(character=self.character + 1, line=self.line + 1, column=0)
        return SourceLocation(
            character=self.character + 1, line=self.line, column=self.column + 1
        )

    def extract(self, string: str) -> Optional[str]:
        """The line of `string` holding this location, or None."""
        lines = _lines(string)
        return lines[self.line] if self.line < len(lines) else None

    def __str__(self) -> str:
        return f"{self.line + 1}:{self.column + 1}"


@dataclass(frozen=True)
class SourceRange:
    """A span of source text between two locations."""

    start: SourceLocation
    end: SourceLocation

    def extract(self, string: str) -> List[Tuple[int, str]]:
        """The numbered lines of `string` that this range covers."""
        if self.end.line < self.start.line:
            raise ValueError("range ends before it starts")
        return [
            (n, line)
            for n, line in enumerate(_lines(string))
            if self.start.line <= n <= self.end.line
        ]

    def __str__(self) -> str:
        if self.start.character == self.end.character:
            return str(self.start)
        return f"{self.start}-{self.end.line + 1}.{self.end.column + 1}"


@dataclass(frozen=True)
class SourcePositions:
    """Locations of the previous, current and next characters."""

    prev: Optional[SourceLocation]
    current: SourceLocation
    next: Optional[SourceLocation]


class SourceCrawler:
    """Iterate over characters with the following character and their positions."""

    def __init__(self, source: str) -> None:
        if not source:
            raise ValueError("cannot crawl an empty source")
        self._source = source
        self._pos = 0
        self._prev: Optional[SourceLocation] = None
        self._current = SourceLocation.start()

    def __iter__(self) -> Iterator[Tuple[str, Optional[str], SourcePositions]]:
        return self

    def __next__(self) -> Tuple[str, Optional[str], SourcePositions]:
        if self._pos >= len(self._source):
            raise StopIteration
        char = self._source[self._pos]
        self._pos += 1
        following = self._source[self._pos] if self._pos < len(self._source) else None

        positions = SourcePositions(
            prev=self._prev,
            current=self._current,
            next=self._current.add(char) if following is not None else None,
        )
        self._prev = positions.current
        if positions.next is not None:
            self._current = positions.next
        return char, following, positions

    def last_seen_location(self) -> SourceLocation:
        return self._current