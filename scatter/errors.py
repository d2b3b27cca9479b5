"""Exceptions raised by analysis, interpretation and code generation."""

from __future__ import annotations

import enum
from typing import Any, Iterable


class ArityCombineError(Exception):
    """Two arities could not be combined."""


class DifferingSizesError(ArityCombineError):
    """Combined arities pop or push a different number of values."""


class IncompatibleTypesError(ArityCombineError):
    """Combined arities disagree about a value's type."""


class AnalysisErrorKind(enum.Enum):
    INDEFINITE_SIZE = "indefinite size"
    INCOMPATIBLE_TYPES = "incompatible types"
    PENDING = "pending"


class AnalysisError(Exception):
    """Static analysis of a block failed or is not yet possible."""

    def __init__(self, kind: AnalysisErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind

    @classmethod
    def from_combine_error(cls, error: ArityCombineError) -> AnalysisError:
        """Map an arity combination failure to an analysis error."""
        if isinstance(error, DifferingSizesError):
            return cls(AnalysisErrorKind.INDEFINITE_SIZE)
        if isinstance(error, IncompatibleTypesError):
            return cls(AnalysisErrorKind.INCOMPATIBLE_TYPES)
        raise TypeError(f"not an arity combination error: {error!r}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AnalysisError):
            return NotImplemented
        return self.kind is other.kind

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return f"AnalysisError({self.kind.name})"


class InterpreterError(Exception):
    """A runtime failure, carrying the call backtrace at the point of failure."""

    def __init__(self, message: str, backtrace: Iterable[Any] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.backtrace = list(backtrace)


class CodegenError(Exception):
    """Code generation could not complete."""