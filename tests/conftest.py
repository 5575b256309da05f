import pytest
import autograd.numpy as np

from mipbnb import (
    Constraint,
    IntegerProgramSpecification,
    LinprogRelaxationSolver,
    RelaxationResult,
    RelaxationStatus,
)


class RecordingSolver:
    """Relaxation solver that delegates to linprog and records every call."""

    def __init__(self):
        self.inner = LinprogRelaxationSolver()
        self.calls = []

    def solve(self, objective, constraints, minimize=True, tolerance=1e-8, x0=None):
        self.calls.append((np.array(objective), list(constraints), x0))
        return self.inner.solve(objective, constraints, minimize, tolerance, x0)


class FailingSolver:
    """Relaxation solver that always raises."""

    def solve(self, objective, constraints, minimize=True, tolerance=1e-8, x0=None):
        raise RuntimeError("solver exploded")


class UnboundedSolver:
    """Relaxation solver that always reports an unbounded LP."""

    def solve(self, objective, constraints, minimize=True, tolerance=1e-8, x0=None):
        value = float("-inf") if minimize else float("inf")
        return RelaxationResult(status=RelaxationStatus.UNBOUNDED, objective_value=value)


@pytest.fixture
def recording_solver():
    return RecordingSolver()


@pytest.fixture
def fractional_pair():
    """minimize x0 + x1  s.t.  x0 + x1 >= 1.5,  0 <= x0, x1 <= 1,  both integer."""
    objective = lambda x: x[0] + x[1]  # noqa: E731
    constraints = [
        Constraint.inequality(lambda x: 1.5 - x[0] - x[1]),
        Constraint.inequality(lambda x: x[0] - 1.0),
        Constraint.inequality(lambda x: x[1] - 1.0),
    ]
    spec = IntegerProgramSpecification(integer_variables=[0, 1])
    return objective, np.array([0.5, 0.5]), constraints, spec


@pytest.fixture
def textbook_max():
    """maximize 5x0 + 4x1  s.t.  6x0 + 4x1 <= 24,  x0 + 2x1 <= 6,  integer.

    The LP optimum is (3, 1.5) with value 21; the integer optimum is (4, 0) with 20.
    """
    objective = lambda x: 5 * x[0] + 4 * x[1]  # noqa: E731
    constraints = [
        Constraint.linear([6, 4], 24, "<="),
        Constraint.linear([1, 2], 6, "<="),
    ]
    spec = IntegerProgramSpecification.all_integer(2)
    return objective, np.zeros(2), constraints, spec


@pytest.fixture
def knapsack():
    """Five-item 0/1 knapsack; best value 90 (items 1 and 3)."""
    values = np.array([10.0, 40.0, 30.0, 50.0, 35.0])
    weights = np.array([5.0, 4.0, 6.0, 3.0, 7.0])
    capacity = 10.0
    objective = lambda x: np.dot(values, x)  # noqa: E731
    constraints = [Constraint.linear(weights, capacity, "<=")]
    spec = IntegerProgramSpecification.all_binary(5)
    return objective, np.zeros(5), constraints, spec, weights, capacity
