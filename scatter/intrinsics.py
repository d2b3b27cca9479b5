"""Built-in words of the language, their stack effects and their code names."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from scatter.arity import Arity
from scatter.convert import f64_to_char, f64_to_usize, usize_to_f64
from scatter.datatype import Type
from scatter.errors import AnalysisError, AnalysisErrorKind, InterpreterError
from scatter.value import Address, display_value, is_truthy

if TYPE_CHECKING:
    from scatter.interpreter import Interpreter

Intrinsic = Callable[["Interpreter"], None]


def _is_odd_integer(v: float) -> bool:
    return math.isfinite(v) and v == math.floor(v) and int(v) % 2 == 1


def _divide(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if math.isnan(a) or a == 0:
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _modulo(a: float, b: float) -> float:
    try:
        return math.fmod(a, b)
    except ValueError:
        return math.nan


def _power(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except OverflowError:
        return -math.inf if a < 0 and _is_odd_integer(b) else math.inf
    except ValueError:
        if a == 0:
            negative = math.copysign(1.0, a) < 0 and _is_odd_integer(b)
            return -math.inf if negative else math.inf
        return math.nan


def _plus(i: Interpreter) -> None:
    a, b = i.take2_numbers()
    i.push(a + b)


def _minus(i: Interpreter) -> None:
    a, b = i.take2_numbers()
    i.push(a - b)


def _times(i: Interpreter) -> None:
    a, b = i.take2_numbers()
    i.push(a * b)


def _divide_i(i: Interpreter) -> None:
    a, b = i.take2_numbers()
    i.push(_divide(a, b))


def _modulo_i(i: Interpreter) -> None:
    a, b = i.take2_numbers()
    i.push(_modulo(a, b))


def _pow_i(i: Interpreter) -> None:
    a, b = i.take2_numbers()
    i.push(_power(a, b))


def _or_i(i: Interpreter) -> None:
    a, b = i.take2()
    i.push(a if is_truthy(a) else b)


def _and_i(i: Interpreter) -> None:
    a, b = i.take2()
    i.push(b if is_truthy(a) else a)


def _swap(i: Interpreter) -> None:
    a, b = i.take2()
    i.push(b, a)


def _dup(i: Interpreter) -> None:
    v = i.take()
    i.push(v, v)


def _over(i: Interpreter) -> None:
    a, b = i.take2()
    i.push(a, b, a)


def _rot(i: Interpreter) -> None:
    a, b, c = i.take3()
    i.push(b, c, a)


def _drop(i: Interpreter) -> None:
    i.take()


def _greater(i: Interpreter) -> None:
    a, b = i.take2_numbers()
    i.push(a > b)


def _less(i: Interpreter) -> None:
    a, b = i.take2_numbers()
    i.push(a < b)


def _not(i: Interpreter) -> None:
    i.push(not is_truthy(i.take()))


def _decrement(i: Interpreter) -> None:
    i.push(i.take_number() - 1.0)


def _increment(i: Interpreter) -> None:
    i.push(i.take_number() + 1.0)


def _substring(i: Interpreter) -> None:
    end = f64_to_usize(i.take_number())
    if end is None:
        raise InterpreterError("Invalid substring end index")
    start = f64_to_usize(i.take_number())
    if start is None:
        raise InterpreterError("Invalid substring start index")
    original = i.take_string()
    start = min(start, len(original))
    end = max(min(end, len(original)), start)
    i.push(original[start:end])


def _join(i: Interpreter) -> None:
    first, second = i.take2()
    i.push(display_value(first) + display_value(second))


def _length(i: Interpreter) -> None:
    length = usize_to_f64(len(i.take_string()))
    if length is None:
        raise InterpreterError("String length is out of range")
    i.push(length)


def _to_char(i: Interpreter) -> None:
    s = i.take_string()
    if len(s) != 1:
        raise InterpreterError("to_ascii only works on strings with length: 1")
    i.push(float(ord(s)))


def _from_char(i: Interpreter) -> None:
    char = f64_to_char(i.take_number())
    if char is None:
        raise InterpreterError("from_char only works with valid unicode codepoints")
    i.push(char)


def _string_index(i: Interpreter) -> None:
    needle = i.take_string()
    haystack = i.take_string()
    found = haystack.find(needle)
    if found < 0:
        i.push(-1.0)
        return
    location = usize_to_f64(found)
    if location is None:
        raise InterpreterError("String index cannot be converted to number")
    i.push(location)


def _value_kind(v: object) -> str:
    if isinstance(v, bool):
        return "bool"
    if isinstance(v, str):
        return "string"
    if isinstance(v, (int, float)):
        return "number"
    return "address"


def _equals(i: Interpreter) -> None:
    a, b = i.take2()
    kind = _value_kind(a)
    if kind != _value_kind(b) or kind == "address":
        raise InterpreterError("Mismatched types cannot be compared with ==")
    i.push(a == b)


def _print(i: Interpreter) -> None:
    i.print_value(i.take())


def _readline(i: Interpreter) -> None:
    line = i.readline()
    if line is None:
        i.push("", False)
    else:
        i.push(line, True)


def _assert(i: Interpreter) -> None:
    message = i.take_string()
    if not is_truthy(i.take()):
        raise InterpreterError(f"Assertion failed: {message}")


def _eval_i(i: Interpreter) -> None:
    target = i.take()
    if not isinstance(target, Address):
        raise InterpreterError("Expected function pointer on top of stack")
    i.evaluate_name(target.namespace, target.name)


@dataclass(frozen=True)
class IntrinsicData:
    """A built-in word: its name, its stack effect and its implementation."""

    name: str
    arity: Arity
    func: Intrinsic


_N = Type.NUMBER
_S = Type.STRING
_B = Type.BOOL
_U = Type.UNKNOWN


def _build_intrinsics() -> Tuple[IntrinsicData, ...]:
    raw = (
        ("+", Arity.number_binary(), _plus),
        ("-", Arity.number_binary(), _minus),
        ("*", Arity.number_binary(), _times),
        ("/", Arity.number_binary(), _divide_i),
        ("%", Arity.number_binary(), _modulo_i),
        ("**", Arity.number_binary(), _pow_i),
        ("||", Arity.generic(2, (0, 1)), _or_i),
        ("&&", Arity.generic(2, (0, 1)), _and_i),
        ("swap", Arity.generic(2, 0, 1), _swap),
        ("dup", Arity.generic(1, 0, 0), _dup),
        ("over", Arity.generic(2, 1, 0, 1), _over),
        ("rot", Arity.generic(3, 1, 0, 2), _rot),
        ("drop", Arity([_U], []), _drop),
        ("print", Arity([_U], []), _print),
        ("readline", Arity.push_two(_S, _B), _readline),
        ("substring", Arity([_N, _N, _S], [_S]), _substring),
        ("to_char", Arity.unary(_S, _N), _to_char),
        ("from_char", Arity.unary(_N, _S), _from_char),
        ("index", Arity.binary(_S, _S, _N), _string_index),
        ("join", Arity.binary(_U, _U, _S), _join),
        ("length", Arity.unary(_S, _N), _length),
        ("assert", Arity.pop_two(_U, _S), _assert),
        ("eval", Arity.noop(), _eval_i),
        (">", Arity.binary(_N, _N, _B), _greater),
        ("<", Arity.binary(_N, _N, _B), _less),
        ("!", Arity.unary(_U, _B), _not),
        ("--", Arity.number_unary(), _decrement),
        ("++", Arity.number_unary(), _increment),
        ("==", Arity.binary(_U, _U, _B), _equals),
    )
    return tuple(IntrinsicData(name, arity, func) for name, arity, func in raw)


_INTRINSICS = _build_intrinsics()
_BY_NAME: Dict[str, IntrinsicData] = {data.name: data for data in _INTRINSICS}

_CODEGEN_NAMES = {
    "+": "plus",
    "index": "string_index",
    "eval": "eval_i",
    "-": "minus",
    "*": "times",
    "/": "divide",
    "%": "modulo",
    "**": "pow_i",
    "||": "or_i",
    "&&": "and_i",
    ">": "greater",
    "<": "less",
    "!": "not",
    "--": "decrement",
    "++": "increment",
    "==": "equals",
}


def get_intrinsics() -> Tuple[IntrinsicData, ...]:
    """Every built-in word, in definition order."""
    return _INTRINSICS


def get_intrinsic(name: str) -> Optional[IntrinsicData]:
    """The built-in word called `name`, or None."""
    return _BY_NAME.get(name)


def get_intrinsic_codegen_name(name: str) -> Optional[str]:
    """An identifier-safe name for a built-in word, or None if it is not one."""
    data = get_intrinsic(name)
    if data is None:
        return None
    return _CODEGEN_NAMES.get(data.name, data.name)


def get_intrinsic_arity(name: str) -> Optional[Arity]:
    """The stack effect of a built-in word, or None if it is not one.

    Raises AnalysisError for `eval`, whose effect cannot be known statically.
    """
    if name == "eval":
        raise AnalysisError(AnalysisErrorKind.INDEFINITE_SIZE)
    data = get_intrinsic(name)
    return data.arity.copy() if data is not None else None