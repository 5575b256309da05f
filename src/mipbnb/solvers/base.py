from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

import autograd.numpy as anp  # type: ignore

from ..constraint import LinearConstraint, Relation
from ..specification import IntegerProgramSpecification

if TYPE_CHECKING:
    from .bnb.node import BBStats


ArrayLike = anp.ndarray


class RelaxationStatus(StrEnum):
    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    ERROR = "error"


@dataclass
class RelaxationResult:
    status: RelaxationStatus
    objective_value: float
    solution: Optional[ArrayLike] = None
    raw_result: Optional[object] = None

    @property
    def is_optimal(self) -> bool:
        return self.status == RelaxationStatus.OPTIMAL and self.solution is not None


class RelaxationSolver(Protocol):
    """
    Continuous LP solver consumed by branch-and-bound.

    Solves ``min/max objective . x`` subject to the given rows and ``x >= 0``.
    The objective value returned excludes any constant term.
    """

    def solve(
        self,
        objective: ArrayLike,
        constraints: Sequence[LinearConstraint],
        minimize: bool = True,
        tolerance: float = 1e-8,
        x0: Optional[ArrayLike] = None,
    ) -> RelaxationResult:
        ...


class IntegerSolutionStatus(StrEnum):
    OPTIMAL = "optimal"
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    NODE_LIMIT = "node_limit"
    TIME_LIMIT = "time_limit"


@dataclass(frozen=True, eq=False)
class IntegerOptimizationResult:
    """
    Outcome of a branch-and-bound solve.

    `relative_gap` is ``|objective_value - best_bound| / max(|objective_value|, 1)``
    and is infinite when no integer-feasible solution was found.
    """

    solution: ArrayLike
    objective_value: float
    best_bound: float
    relative_gap: float
    nodes_explored: int
    status: IntegerSolutionStatus
    solve_time: float
    integer_spec: IntegerProgramSpecification
    stats: Optional["BBStats"] = None

    @property
    def integer_solution(self) -> ArrayLike:
        """Solution with every declared integer entry rounded."""
        return self.integer_spec.round(self.solution)

    @property
    def has_solution(self) -> bool:
        return bool(anp.isfinite(self.objective_value))


__all__ = [
    "ArrayLike",
    "IntegerOptimizationResult",
    "IntegerSolutionStatus",
    "LinearConstraint",
    "Relation",
    "RelaxationResult",
    "RelaxationSolver",
    "RelaxationStatus",
]
