from __future__ import annotations

from typing import Dict

from .base import (
    IntegerOptimizationResult,
    IntegerSolutionStatus,
    LinearConstraint,
    Relation,
    RelaxationResult,
    RelaxationSolver,
    RelaxationStatus,
)
from .linprog_backend import LinprogRelaxationSolver
from .bnb_backend import BranchAndBoundSolver


_RELAXATION_SOLVERS: Dict[str, RelaxationSolver] = {
    "highs": LinprogRelaxationSolver("highs"),
    "highs-ds": LinprogRelaxationSolver("highs-ds"),
    "highs-ipm": LinprogRelaxationSolver("highs-ipm"),
}


def register_relaxation_solver(name: str, solver: RelaxationSolver) -> None:
    _RELAXATION_SOLVERS[name] = solver


def get_relaxation_solver(name: str) -> RelaxationSolver:
    if name not in _RELAXATION_SOLVERS:
        raise ValueError(f"No relaxation solver registered under '{name}'")
    return _RELAXATION_SOLVERS[name]


__all__ = [
    "BranchAndBoundSolver",
    "IntegerOptimizationResult",
    "IntegerSolutionStatus",
    "LinearConstraint",
    "LinprogRelaxationSolver",
    "Relation",
    "RelaxationResult",
    "RelaxationSolver",
    "RelaxationStatus",
    "get_relaxation_solver",
    "register_relaxation_solver",
]
