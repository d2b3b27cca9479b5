import io
from dataclasses import dataclass, field

import pytest

from scatter.ast import (
    AddressTerm,
    Block,
    BoolTerm,
    Branch,
    Function,
    Loop,
    NameTerm,
    NumberTerm,
    StringTerm,
)
from scatter.errors import InterpreterError
from scatter.interpreter import Interpreter, InterpreterSnapshot
from scatter.value import Address


@dataclass
class _Namespace:
    functions: dict = field(default_factory=dict)


class _Program:
    def __init__(self, *namespaces):
        self.namespaces = list(namespaces) or [_Namespace()]

    def resolve_function(self, namespace, name):
        if name in self.namespaces[namespace].functions:
            return namespace, name
        for n, ns in enumerate(self.namespaces):
            if name in ns.functions:
                return n, name
        return None


def _fn(name, *terms):
    return Function(name, Block(list(terms)))


def _interp(program=None, stack=None, stdin=""):
    return Interpreter(
        program or _Program(),
        stack=stack,
        input_stream=io.StringIO(stdin),
        output_stream=io.StringIO(),
    )


def test_empty_block_leaves_empty_stack():
    assert _interp().execute(0, Block()) == InterpreterSnapshot(stack=[])


def test_literals_pushed_in_order():
    block = Block([NumberTerm(4.0), StringTerm("s"), BoolTerm(False)])
    assert _interp().execute(0, block).stack == [4.0, "s", False]


def test_initial_stack_is_kept():
    snapshot = _interp(stack=[1, "a"]).execute(0, Block([BoolTerm(True)]))
    assert snapshot.stack == [1.0, "a", True]


def test_user_function_call():
    program = _Program(_Namespace({"generate": _fn("generate", NumberTerm(36.0))}))
    block = Block([NameTerm("generate"), NameTerm("generate")])
    assert _interp(program).execute(0, block).stack == [36.0, 36.0]


def test_unknown_function():
    with pytest.raises(InterpreterError) as excinfo:
        _interp().execute(0, Block([NameTerm("missing")]))
    assert excinfo.value.message == "Unknown function name: missing"
    assert [t.name for _, t in excinfo.value.backtrace] == ["missing"]


def test_backtrace_lists_nested_calls():
    program = _Program(
        _Namespace(
            {
                "outer": _fn("outer", NameTerm("inner")),
                "inner": _fn("inner", NameTerm("drop")),
            }
        )
    )
    interpreter = _interp(program)
    with pytest.raises(InterpreterError) as excinfo:
        interpreter.execute(0, Block([NameTerm("outer")]))
    assert excinfo.value.message == "Stack empty"
    assert [t.name for _, t in excinfo.value.backtrace] == ["outer", "inner", "drop"]
    assert all(ns == 0 for ns, _ in excinfo.value.backtrace)
    assert interpreter.backtrace == []


def test_branch_runs_first_true_arm():
    branch = Branch(
        [
            (Block([BoolTerm(False)]), Block([StringTerm("first")])),
            (Block([BoolTerm(True)]), Block([StringTerm("second")])),
            (Block([BoolTerm(True)]), Block([StringTerm("third")])),
        ]
    )
    assert _interp().execute(0, Block([branch])).stack == ["second"]


def test_branch_without_true_arm_does_nothing():
    branch = Branch([(Block([BoolTerm(False)]), Block([StringTerm("x")]))])
    assert _interp().execute(0, Block([branch])).stack == []


def test_loop_with_pre_condition_counts_down():
    loop = Loop(
        pre_condition=Block([NameTerm("dup")]),
        body=Block([NameTerm("--")]),
        post_condition=None,
    )
    assert _interp(stack=[5]).execute(0, Block([loop])).stack == [0.0]


def test_loop_with_post_condition_runs_body_first():
    loop = Loop(
        pre_condition=None,
        body=Block([StringTerm("ran")]),
        post_condition=Block([BoolTerm(False)]),
    )
    assert _interp().execute(0, Block([loop])).stack == ["ran"]


def test_address_uses_current_namespace():
    program = _Program(_Namespace(), _Namespace({"f": _fn("f", AddressTerm("g"))}))
    block = Block([AddressTerm("h"), NameTerm("f")])
    assert _interp(program).execute(0, block).stack == [Address(0, "h"), Address(1, "g")]


def test_push_and_take_order():
    interpreter = _interp()
    interpreter.push(1, 2, 3)
    assert interpreter.stack == [1.0, 2.0, 3.0]
    assert interpreter.take3() == (1.0, 2.0, 3.0)
    interpreter.push("a", "b")
    assert interpreter.take2() == ("a", "b")
    with pytest.raises(InterpreterError, match="Stack empty"):
        interpreter.take()


def test_typed_takes_reject_wrong_types():
    interpreter = _interp(stack=["x"])
    with pytest.raises(InterpreterError, match="Expected number on top of stack"):
        interpreter.take_number()
    interpreter.push(True)
    with pytest.raises(InterpreterError, match="Expected string on top of stack"):
        interpreter.take_string()
    interpreter.push(1, "x")
    with pytest.raises(InterpreterError, match="Expected two numbers on top of stack"):
        interpreter.take2_numbers()
    assert interpreter.stack == []


def test_take2_numbers():
    interpreter = _interp(stack=[3, 4])
    assert interpreter.take2_numbers() == (3.0, 4.0)


def test_readline_strips_only_newline():
    interpreter = _interp(stdin="a\r\nb")
    assert interpreter.readline() == "a\r"
    assert interpreter.readline() == "b"
    assert interpreter.readline() is None


def test_print_value_writes_display_form():
    output = io.StringIO()
    interpreter = Interpreter(_Program(), output_stream=output)
    interpreter.print_value("text")
    interpreter.print_value(Address(2, "f"))
    assert output.getvalue() == "text\nFn[2, f]\n"


def test_evaluate_name_directly():
    program = _Program(_Namespace({"one": _fn("one", NumberTerm(1.0))}))
    interpreter = _interp(program)
    interpreter.evaluate_name(0, "one")
    interpreter.evaluate_name(0, "dup")
    assert interpreter.stack == [1.0, 1.0]
    assert interpreter.namespace_stack == []