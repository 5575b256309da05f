__all__ = [
    "BranchAndBoundSolver",
    "Constraint",
    "LinearConstraint",
    "Relation",
    "IntegerProgramSpecification",
    "IntegerOptimizationResult",
    "IntegerSolutionStatus",
    "NodeSelection",
    "BranchingRule",
    "GradientMethod",
    "RelaxationResult",
    "RelaxationSolver",
    "RelaxationStatus",
    "LinprogRelaxationSolver",
    "NonAffineFunctionError",
    "extract_linear_coefficients",
    "linearize",
    "get_relaxation_solver",
    "register_relaxation_solver",
    "solve",
    "DEPTH_FIRST",
    "BREADTH_FIRST",
    "BEST_BOUND",
    "BEST_ESTIMATE",
    "MOST_FRACTIONAL",
    "PSEUDOCOST",
    "STRONG_BRANCHING",
]

from .constants import NodeSelection, BranchingRule, GradientMethod
from .constraint import Constraint, LinearConstraint, Relation
from .specification import IntegerProgramSpecification
from .linearize import NonAffineFunctionError, extract_linear_coefficients, linearize
from .solvers import (
    BranchAndBoundSolver,
    IntegerOptimizationResult,
    IntegerSolutionStatus,
    LinprogRelaxationSolver,
    RelaxationResult,
    RelaxationSolver,
    RelaxationStatus,
    get_relaxation_solver,
    register_relaxation_solver,
)

DEPTH_FIRST = NodeSelection.DEPTH_FIRST
BREADTH_FIRST = NodeSelection.BREADTH_FIRST
BEST_BOUND = NodeSelection.BEST_BOUND
BEST_ESTIMATE = NodeSelection.BEST_ESTIMATE

MOST_FRACTIONAL = BranchingRule.MOST_FRACTIONAL
PSEUDOCOST = BranchingRule.PSEUDOCOST
STRONG_BRANCHING = BranchingRule.STRONG_BRANCHING


def solve(
    objective,
    starting_point,
    constraints=(),
    integer_spec=None,
    minimize=True,
    **solver_kwargs,
) -> IntegerOptimizationResult:
    """Solve with a `BranchAndBoundSolver` built from ``solver_kwargs``."""
    solver = BranchAndBoundSolver(**solver_kwargs)
    return solver.solve(objective, starting_point, constraints, integer_spec, minimize)
