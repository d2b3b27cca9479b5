import pytest

from scatter.arity import (
    Arity,
    MultiIndex,
    resultant_parse,
    resultant_references,
    resultant_stringify,
    resultant_union,
)
from scatter.datatype import Type
from scatter.errors import DifferingSizesError, IncompatibleTypesError

N = Type.NUMBER
S = Type.STRING
B = Type.BOOL
U = Type.UNKNOWN


def test_multi_index_insert_sorts_and_dedups():
    values = [3, 1, 3, 2, 0]
    mi = MultiIndex(values[0])
    for v in values[1:]:
        mi.insert(v)
    assert list(mi) == sorted(set(values))
    assert mi.el == min(values)


def test_multi_index_contains_and_rest():
    mi = MultiIndex(4, 2, 7)
    assert mi.contains(2)
    assert mi.contains(7)
    assert not mi.contains(3)
    assert list(mi.iter_rest()) == list(mi)[1:]


def test_multi_index_requires_an_index():
    with pytest.raises(ValueError):
        MultiIndex()


@pytest.mark.parametrize("source", ["n", "s", "0", "0|2", "1|3|5"])
def test_resultant_round_trip(source):
    assert resultant_stringify(resultant_parse(source)) == source


@pytest.mark.parametrize("source", ["x", "", "1|x", "|"])
def test_resultant_parse_rejects(source):
    assert resultant_parse(source) is None


def test_resultant_references():
    assert resultant_references(MultiIndex(0, 2), 2)
    assert not resultant_references(MultiIndex(0, 2), 1)
    assert not resultant_references(N, 0)


def test_resultant_union():
    assert resultant_union(N, S) == N.union(S)
    assert resultant_union(MultiIndex(0), S) is S
    assert resultant_union(N, MultiIndex(1)) is N
    assert resultant_union(MultiIndex(0), MultiIndex(2)) == MultiIndex(0, 2)


def test_stringify_number_binary():
    assert Arity.number_binary().stringify() == "n n - n"


@pytest.mark.parametrize(
    "source", ["n n - n", "- s b", "1 0 - 0 1", "1 0 - 0|1", "s n n - s", "u -", "-"]
)
def test_parse_stringify_round_trip(source):
    assert Arity.parse(source).stringify() == source


def test_parse_matches_constructors():
    assert Arity.parse("n n - n") == Arity.number_binary()
    assert Arity.parse("s n n - s") == Arity([N, N, S], [S])
    assert Arity.parse("1 0 - 0 1") == Arity.generic(2, 0, 1)
    assert Arity.parse("- s b") == Arity.push_two(S, B)


@pytest.mark.parametrize("source", ["n n n", "x - n", "n - y"])
def test_parse_rejects(source):
    assert Arity.parse(source) is None


def test_pop_two_order():
    assert Arity.pop_two(U, S).pops == [S, U]


@pytest.mark.parametrize(
    "arity",
    [Arity.noop(), Arity.number_binary(), Arity.generic(1, 0, 0), Arity.generic(3, 1, 0, 2)],
)
def test_serial_noop_is_identity(arity):
    assert Arity.serial(Arity.noop(), arity) == arity
    assert Arity.serial(arity, Arity.noop()) == arity


def test_serial_literal_then_unary():
    assert Arity.serial(Arity.literal(N), Arity.number_unary()) == Arity.literal(N)


def test_serial_incompatible_types():
    with pytest.raises(IncompatibleTypesError):
        Arity.serial(Arity.literal(S), Arity.number_unary())


def test_serial_dup():
    assert Arity.serial(Arity.literal(N), Arity.generic(1, 0, 0)) == Arity.parse("- n n")


def test_serial_swap():
    pushed = Arity.push_two(S, N)
    assert Arity.serial(pushed, Arity.generic(2, 0, 1)) == Arity.parse("- n s")


def test_serial_dependent_pop_narrows():
    identity = Arity.generic(1, 0)
    assert Arity.serial(identity, Arity.number_unary()) == Arity.number_unary()


def test_pop_any():
    a = Arity.noop()
    a.pop_any()
    assert a == Arity([U], [])
    b = Arity.literal(N)
    b.pop_any()
    assert b == Arity.noop()


def test_extend_pops():
    a = Arity.literal(S)
    a.extend_pops()
    assert a == Arity([U], [MultiIndex(0), S])


def test_copy_is_independent():
    a = Arity.number_unary()
    b = a.copy()
    b.push(N)
    b.pop_any()
    b.pop_any()
    b.pop_any()
    assert a == Arity.number_unary()
    assert a.size() == (len(a.pops), len(a.pushes))


def test_parallel_with_self():
    assert Arity.parallel(Arity.number_binary(), Arity.number_binary()) == Arity.number_binary()


def test_parallel_unions_pushes():
    assert Arity.parallel(Arity.literal(N), Arity.literal(S)) == Arity.literal(N.union(S))


def test_parallel_noop_and_unary():
    assert Arity.parallel(Arity.noop(), Arity.number_unary()) == Arity.number_unary()


def test_parallel_differing_sizes():
    with pytest.raises(DifferingSizesError):
        Arity.parallel(Arity.noop(), Arity.literal(N))


def test_parallel_incompatible_pops():
    with pytest.raises(IncompatibleTypesError):
        Arity.parallel(Arity.unary(N, N), Arity.unary(S, S))