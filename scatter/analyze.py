"""Static analysis of the stack effect of blocks and functions."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from scatter.arity import Arity
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
from scatter.datatype import Type
from scatter.errors import AnalysisError, AnalysisErrorKind, ArityCombineError
from scatter.intrinsics import get_intrinsic_arity

BlockAnalysisResult = Union[Arity, AnalysisError]
NamespaceArities = Dict[str, BlockAnalysisResult]
AritiesByNamespace = List[NamespaceArities]


@dataclass
class Analysis:
    """Known function arities and the namespace being analysed.

    `program` must offer `namespaces` (each with a `functions` mapping) and
    `resolve_function(namespace, name)` returning `(namespace, name)` or None.
    """

    arities: AritiesByNamespace
    namespace: int
    program: Any


class _Truthiness(enum.Enum):
    ALWAYS_TRUTHY = enum.auto()
    ALWAYS_FALSY = enum.auto()
    UNKNOWN = enum.auto()


def _serial(first: Arity, second: Arity) -> Arity:
    try:
        return Arity.serial(first, second)
    except ArityCombineError as error:
        raise AnalysisError.from_combine_error(error) from None


def _parallel(left: Arity, right: Arity) -> Arity:
    try:
        return Arity.parallel(left, right)
    except ArityCombineError as error:
        raise AnalysisError.from_combine_error(error) from None


def _block_truthiness(block: Block) -> _Truthiness:
    if not block.terms:
        return _Truthiness.UNKNOWN
    last = block.terms[-1]
    if isinstance(last, StringTerm):
        truthy = bool(last.value)
    elif isinstance(last, NumberTerm):
        value = float(last.value)
        truthy = value == value and value != 0
    elif isinstance(last, BoolTerm):
        truthy = bool(last.value)
    elif isinstance(last, AddressTerm):
        truthy = True
    else:
        return _Truthiness.UNKNOWN
    return _Truthiness.ALWAYS_TRUTHY if truthy else _Truthiness.ALWAYS_FALSY


def analyze_condition(analysis: Analysis, block: Block) -> Arity:
    """The effect of a condition block, including consuming its result."""
    result = analyze_block(analysis, block)
    result.pop_any()
    return result


def analyze_block(analysis: Analysis, block: Block) -> Arity:
    """The combined effect of every term in a block."""
    arity = Arity.noop()
    for item in block.terms:
        arity = _serial(arity, analyze_term(analysis, item))
    return arity


def _analyze_name(analysis: Analysis, name: str) -> Arity:
    intrinsic = get_intrinsic_arity(name)
    if intrinsic is not None:
        return intrinsic

    resolved = analysis.program.resolve_function(analysis.namespace, name)
    if resolved is None:
        raise AnalysisError(AnalysisErrorKind.PENDING)
    namespace, resolved_name = resolved

    if namespace >= len(analysis.arities):
        raise AnalysisError(AnalysisErrorKind.PENDING)
    known = analysis.arities[namespace].get(resolved_name)
    if known is None:
        raise AnalysisError(AnalysisErrorKind.PENDING)
    if isinstance(known, AnalysisError):
        raise AnalysisError(known.kind)
    return known.copy()


def _analyze_branch(analysis: Analysis, branch: Branch) -> Arity:
    running = Arity.noop()
    combined: Optional[Arity] = None

    def add_termination(arity: Arity) -> None:
        nonlocal combined
        combined = arity if combined is None else _parallel(combined, arity)

    for condition, body in branch.arms:
        running = _serial(running, analyze_condition(analysis, condition))

        truthiness = _block_truthiness(condition)
        possible = truthiness is not _Truthiness.ALWAYS_FALSY
        last_arm = truthiness is _Truthiness.ALWAYS_TRUTHY

        if possible:
            add_termination(_serial(running, analyze_block(analysis, body)))

        if last_arm:
            assert combined is not None, "Unable to combine last branch arm"
            return combined

    add_termination(running)
    assert combined is not None, "Unable to combine branch arms"
    return combined


def _analyze_loop(analysis: Analysis, loop: Loop) -> Arity:
    pre = None if loop.pre_condition is None else analyze_condition(analysis, loop.pre_condition)
    main = analyze_block(analysis, loop.body)
    post = (
        None if loop.post_condition is None else analyze_condition(analysis, loop.post_condition)
    )

    if pre is None and post is None:
        raise AnalysisError(AnalysisErrorKind.INDEFINITE_SIZE)

    running = Arity.noop()
    possible: Optional[Arity] = None
    seen: List[Arity] = []

    def record_exit(current: Arity, step: Arity) -> Arity:
        nonlocal possible
        current = _serial(current, step)
        possible = current.copy() if possible is None else _parallel(possible, current)
        return current

    while running not in seen:
        seen.append(running.copy())
        if pre is not None:
            running = record_exit(running, pre)
        running = _serial(running, main)
        if post is not None:
            running = record_exit(running, post)

    assert possible is not None, "Must have filled possible_arity at least once"
    return possible


def analyze_term(analysis: Analysis, term: Term) -> Arity:
    """The stack effect of a single term."""
    if isinstance(term, StringTerm):
        return Arity.literal(Type.STRING)
    if isinstance(term, NumberTerm):
        return Arity.literal(Type.NUMBER)
    if isinstance(term, BoolTerm):
        return Arity.literal(Type.BOOL)
    if isinstance(term, AddressTerm):
        return Arity.literal(Type.ADDRESS)
    if isinstance(term, NameTerm):
        return _analyze_name(analysis, term.name)
    if isinstance(term, Branch):
        return _analyze_branch(analysis, term)
    if isinstance(term, Loop):
        return _analyze_loop(analysis, term)
    raise TypeError(f"not a term: {term!r}")


def analyze_program(program: Any) -> AritiesByNamespace:
    """Analyse every function of every namespace until nothing more resolves.

    Functions whose analysis stays pending are left out of the result; those
    that fail are recorded with their AnalysisError.
    """
    analysis = Analysis(
        arities=[{} for _ in program.namespaces], namespace=0, program=program
    )

    resolved_something = True
    while resolved_something:
        resolved_something = False
        for index, namespace in enumerate(program.namespaces):
            analysis.namespace = index
            known = analysis.arities[index]
            for function in namespace.functions.values():
                if function.name in known:
                    continue
                try:
                    result: BlockAnalysisResult = analyze_block(analysis, function.body)
                except AnalysisError as error:
                    if error.kind is AnalysisErrorKind.PENDING:
                        continue
                    result = error
                resolved_something = True
                known[function.name] = result

    return analysis.arities


def analyze_block_in_namespace(
    arities: AritiesByNamespace, namespace: int, block: Block, program: Any
) -> Arity:
    """Analyse a block as if it appeared in `namespace`, given known arities."""
    analysis = Analysis(
        arities=[dict(known) for known in arities], namespace=namespace, program=program
    )
    return analyze_block(analysis, block)