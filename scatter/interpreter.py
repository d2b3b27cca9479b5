"""A tree-walking interpreter over parsed blocks."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, TextIO, Tuple

from scatter.ast import (
    AddressTerm,
    Block,
    BoolTerm,
    Branch,
    Loop,
    NameTerm,
    NumberTerm,
    StringTerm,
    Term,
)
from scatter.errors import InterpreterError
from scatter.intrinsics import get_intrinsic
from scatter.value import Address, Value, display_value, is_truthy

BacktraceItem = Tuple[int, Term]


def _normalize(value: Any) -> Value:
    if isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    return value


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class InterpreterSnapshot:
    """The stack left behind by a finished run."""

    stack: List[Value] = field(default_factory=list)


class Interpreter:
    """Evaluates blocks of a program against a value stack.

    `program` must offer `namespaces` (each with a `functions` mapping of
    name to function) and `resolve_function(namespace, name)` returning a
    `(namespace, name)` pair or None.
    """

    def __init__(
        self,
        program: Any,
        stack: Optional[Iterable[Value]] = None,
        input_stream: Optional[TextIO] = None,
        output_stream: Optional[TextIO] = None,
    ) -> None:
        self.program = program
        self.stack: List[Value] = [_normalize(v) for v in (stack or ())]
        self.base_namespace = 0
        self.namespace_stack: List[int] = []
        self.backtrace: List[BacktraceItem] = []
        self._input = input_stream if input_stream is not None else sys.stdin
        self._output = output_stream if output_stream is not None else sys.stdout

    def execute(self, base_namespace: int, block: Block) -> InterpreterSnapshot:
        """Run `block` in `base_namespace` and return the resulting stack.

        Raises InterpreterError carrying the backtrace at the point of failure.
        """
        self.base_namespace = base_namespace
        try:
            self._evaluate_block(block)
        except InterpreterError as error:
            backtrace, self.backtrace = self.backtrace, []
            self.namespace_stack = []
            raise InterpreterError(error.message, backtrace) from None
        assert not self.backtrace, "Backtrace should be empty after successful execution"
        return InterpreterSnapshot(stack=list(self.stack))

    def readline(self) -> Optional[str]:
        """Read one input line without its newline, or None at end of input."""
        try:
            line = self._input.readline()
        except (OSError, UnicodeDecodeError) as error:
            raise InterpreterError("read_line failed") from error
        if not line:
            return None
        if line.endswith("\n"):
            line = line[:-1]
        return line

    def print_value(self, value: Value) -> None:
        """Write a value and a newline to the output."""
        self._output.write(display_value(value) + "\n")
        self._output.flush()

    def take(self) -> Value:
        if not self.stack:
            raise InterpreterError("Stack empty")
        return self.stack.pop()

    def take_number(self) -> float:
        value = self.take()
        if not _is_number(value):
            raise InterpreterError("Expected number on top of stack")
        return float(value)  # type: ignore[arg-type]

    def take_string(self) -> str:
        value = self.take()
        if not isinstance(value, str):
            raise InterpreterError("Expected string on top of stack")
        return value

    def push(self, *args: Value) -> None:
        """Push values in order; the last one ends up on top."""
        self.stack.extend(_normalize(v) for v in args)

    def take2(self) -> Tuple[Value, Value]:
        """Pop two values, returned in stack order (top last)."""
        top = self.take()
        second = self.take()
        return second, top

    def take3(self) -> Tuple[Value, Value, Value]:
        c = self.take()
        b = self.take()
        a = self.take()
        return a, b, c

    def take2_numbers(self) -> Tuple[float, float]:
        a, b = self.take2()
        if not (_is_number(a) and _is_number(b)):
            raise InterpreterError("Expected two numbers on top of stack")
        return float(a), float(b)  # type: ignore[arg-type]

    def _current_namespace(self) -> int:
        return self.namespace_stack[-1] if self.namespace_stack else self.base_namespace

    def evaluate_name(self, current_namespace: int, name: str) -> None:
        """Run the built-in or user function `name` as seen from a namespace."""
        intrinsic = get_intrinsic(name)
        if intrinsic is not None:
            intrinsic.func(self)
            return

        resolved = self.program.resolve_function(current_namespace, name)
        if resolved is None:
            raise InterpreterError(f"Unknown function name: {name}")
        resolved_namespace, resolved_name = resolved
        function = self.program.namespaces[resolved_namespace].functions[resolved_name]
        self.namespace_stack.append(resolved_namespace)
        self._evaluate_block(function.body)
        self.namespace_stack.pop()

    def _evaluate_block(self, block: Block) -> None:
        for item in block.terms:
            self._evaluate_term(item)

    def _evaluate_branch(self, branch: Branch) -> None:
        for condition, body in branch.arms:
            self._evaluate_block(condition)
            if is_truthy(self.take()):
                self._evaluate_block(body)
                return

    def _condition_holds(self, condition: Optional[Block]) -> bool:
        if condition is None:
            return True
        self._evaluate_block(condition)
        return is_truthy(self.take())

    def _evaluate_loop(self, loop: Loop) -> None:
        while True:
            if not self._condition_holds(loop.pre_condition):
                return
            self._evaluate_block(loop.body)
            if not self._condition_holds(loop.post_condition):
                return

    def _evaluate_term(self, item: Term) -> None:
        if isinstance(item, StringTerm):
            self.push(item.value)
        elif isinstance(item, NumberTerm):
            self.push(float(item.value))
        elif isinstance(item, BoolTerm):
            self.push(bool(item.value))
        elif isinstance(item, NameTerm):
            namespace = self._current_namespace()
            self.backtrace.append((namespace, item))
            self.evaluate_name(namespace, item.name)
            self.backtrace.pop()
        elif isinstance(item, Branch):
            self._evaluate_branch(item)
        elif isinstance(item, Loop):
            self._evaluate_loop(item)
        elif isinstance(item, AddressTerm):
            self.push(Address(self._current_namespace(), item.name))
        else:
            raise TypeError(f"not a term: {item!r}")