"""Shared machinery for emitting source code from a program."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

from scatter.errors import CodegenError
from scatter.intrinsics import get_intrinsic_codegen_name

_INDENT = "  "


class CodegenTarget:
    """Accumulates indented lines of output."""

    def __init__(self) -> None:
        self._indentation = ""
        self._lines: List[str] = []

    def write_line(self, v: str) -> None:
        self._lines.append(f"{self._indentation}{v}\n")

    def increase_indent(self) -> None:
        self._indentation += _INDENT

    def decrease_indent(self) -> None:
        self._indentation = self._indentation[: -len(_INDENT)]

    def render(self) -> str:
        """All output written so far."""
        return "".join(self._lines)


@dataclass
class CodegenContext:
    """The namespace being emitted, the program and the output target.

    `program` must offer `resolve_function(namespace, name)` returning
    `(namespace, name)` or None.
    """

    namespace: int
    program: Any
    target: CodegenTarget = field(default_factory=CodegenTarget)

    @staticmethod
    def scoped_name(namespace: int, v: str) -> str:
        """The emitted identifier of a user function."""
        return f"user_fn_{namespace}_{v}"

    def get_scoped_name(self, v: str) -> str:
        return self.scoped_name(self.namespace, v)

    def resolve_name(self, v: str) -> str:
        """The emitted identifier for a name called from the current namespace."""
        codegen_name = get_intrinsic_codegen_name(v)
        if codegen_name is not None:
            return codegen_name
        resolved = self.program.resolve_function(self.namespace, v)
        if resolved is None:
            raise CodegenError(f"Unable to resolve name: {v}")
        namespace, original_name = resolved
        return self.scoped_name(namespace, original_name)