import pytest
import autograd.numpy as np

from mipbnb import (
    LinearConstraint,
    LinprogRelaxationSolver,
    Relation,
    RelaxationResult,
    RelaxationStatus,
    get_relaxation_solver,
    register_relaxation_solver,
)


def row(coefficients, relation, rhs):
    return LinearConstraint(np.array(coefficients, dtype=float), Relation(relation), rhs)


@pytest.fixture
def solver():
    return LinprogRelaxationSolver()


def test_minimize(solver):
    """min x0 + 2 x1  s.t.  x0 + x1 >= 2  ->  (2, 0) with value 2."""
    result = solver.solve([1.0, 2.0], [row([-1.0, -1.0], "<=", -2.0)], minimize=True)
    assert result.status == RelaxationStatus.OPTIMAL
    assert result.is_optimal
    assert result.objective_value == pytest.approx(2.0)
    assert np.allclose(result.solution, [2.0, 0.0])


def test_maximize_reports_original_sign(solver):
    result = solver.solve(
        [5.0, 4.0],
        [row([6.0, 4.0], "<=", 24.0), row([1.0, 2.0], "<=", 6.0)],
        minimize=False,
    )
    assert result.is_optimal
    assert result.objective_value == pytest.approx(21.0)
    assert np.allclose(result.solution, [3.0, 1.5])


def test_equality_rows(solver):
    result = solver.solve([0.0, 1.0], [row([1.0, 1.0], "==", 3.0), row([1.0, 0.0], "<=", 1.0)])
    assert result.is_optimal
    assert np.allclose(result.solution, [1.0, 2.0])


def test_domain_is_nonnegative(solver):
    result = solver.solve([1.0], [])
    assert result.is_optimal
    assert result.objective_value == pytest.approx(0.0)


def test_infeasible(solver):
    result = solver.solve([1.0], [row([1.0], "<=", 1.0), row([-1.0], "<=", -2.0)])
    assert result.status == RelaxationStatus.INFEASIBLE
    assert result.solution is None
    assert result.objective_value == float("inf")


def test_unbounded(solver):
    result = solver.solve([1.0], [], minimize=False)
    # HiGHS may not tell an unbounded LP from a dual-infeasible one
    assert result.status in (RelaxationStatus.UNBOUNDED, RelaxationStatus.INFEASIBLE)
    assert result.solution is None
    assert not result.is_optimal


def test_row_length_mismatch(solver):
    with pytest.raises(ValueError):
        solver.solve([1.0, 1.0], [row([1.0], "<=", 1.0)])


def test_unknown_method():
    with pytest.raises(ValueError):
        LinprogRelaxationSolver("simplex")


@pytest.mark.parametrize("name", ["highs", "highs-ds", "highs-ipm"])
def test_registered_solvers(name):
    solver = get_relaxation_solver(name)
    assert solver.method == name
    result = solver.solve([1.0, 1.0], [row([-1.0, -1.0], "<=", -1.0)])
    assert result.objective_value == pytest.approx(1.0)


def test_register_custom_solver():
    class ConstantSolver:
        def solve(self, objective, constraints, minimize=True, tolerance=1e-8, x0=None):
            return RelaxationResult(RelaxationStatus.OPTIMAL, 0.0, np.zeros(len(objective)))

    register_relaxation_solver("constant", ConstantSolver())
    assert isinstance(get_relaxation_solver("constant"), ConstantSolver)

    with pytest.raises(ValueError):
        get_relaxation_solver("missing")
