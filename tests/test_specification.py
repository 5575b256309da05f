import pytest
import autograd.numpy as np

from mipbnb import IntegerProgramSpecification
from mipbnb.specification import fractionality_score


def test_binaries_are_integers():
    spec = IntegerProgramSpecification(integer_variables=[0, 2], binary_variables=[3])
    assert spec.integer_variables == frozenset({0, 2, 3})
    assert spec.binary_variables == frozenset({3})
    assert spec.general_integer_variables == frozenset({0, 2})
    assert spec.constrained_indices == [0, 2, 3]
    assert not spec.is_pure_continuous


def test_empty_specification_is_continuous():
    spec = IntegerProgramSpecification()
    assert spec.is_pure_continuous
    assert spec.is_integer_feasible([0.3, 1.7])
    assert spec.most_fractional_variable([0.5]) is None


def test_negative_index_rejected():
    with pytest.raises(ValueError):
        IntegerProgramSpecification(integer_variables=[-1])


def test_constructors():
    assert IntegerProgramSpecification.all_integer(3).integer_variables == frozenset({0, 1, 2})
    binary = IntegerProgramSpecification.all_binary(2)
    assert binary.binary_variables == frozenset({0, 1})
    assert binary.general_integer_variables == frozenset()


def test_fractional_variables():
    spec = IntegerProgramSpecification(integer_variables=[0, 1, 5])
    x = [1.0, 2.4, 0.7]
    assert spec.fractional_variables(x) == [(1, 2.4)]
    assert not spec.is_integer_feasible(x)
    assert spec.is_integer_feasible([1.0, 2.0000000001, 0.7])


def test_tolerance():
    spec = IntegerProgramSpecification(integer_variables=[0])
    assert spec.is_integer_feasible([3.001], tolerance=0.01)
    assert not spec.is_integer_feasible([3.001], tolerance=1e-6)


def test_most_fractional_variable():
    spec = IntegerProgramSpecification.all_integer(3)
    assert spec.most_fractional_variable([0.9, 1.45, 2.2]) == 1
    assert spec.most_fractional_variable([1.0, 2.0, 3.0]) is None


def test_most_fractional_ties_pick_lowest_index():
    spec = IntegerProgramSpecification.all_integer(2)
    assert spec.most_fractional_variable([0.5, 1.5]) == 0


def test_fractionality_score():
    assert fractionality_score(2.5) == 0.0
    assert np.isclose(fractionality_score(0.9), 0.4)
    assert np.isclose(fractionality_score(-1.2), 0.3)


def test_round():
    spec = IntegerProgramSpecification(integer_variables=[0, 2])
    original = np.array([0.6, 0.6, 2.4])
    rounded = spec.round(original)
    assert list(rounded) == [1.0, 0.6, 2.0]
    assert original[0] == 0.6


def test_equality_and_hash():
    a = IntegerProgramSpecification(integer_variables=[1, 0])
    b = IntegerProgramSpecification(integer_variables=(0, 1))
    c = IntegerProgramSpecification(binary_variables=[0, 1])
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert "integer_variables=[0, 1]" in repr(a)
