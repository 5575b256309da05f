"""
Utility Functions for Branch-and-Bound

Direction-aware comparisons, gap accounting and branch construction shared
across the B&B implementation.
"""

from __future__ import annotations

import math
from typing import Tuple

from ...constraint import Constraint
from .node import Incumbent, SearchNode


def infeasible_value(minimize: bool) -> float:
    """Bound carried by a dead node: +inf when minimizing, -inf when maximizing."""
    return float("inf") if minimize else float("-inf")


def unbounded_value(minimize: bool) -> float:
    return float("-inf") if minimize else float("inf")


def is_better(value: float, reference: float, minimize: bool) -> bool:
    """Strict improvement of `value` over `reference`."""
    return value < reference if minimize else value > reference


def cannot_improve(bound: float, incumbent: Incumbent, minimize: bool, tol: float) -> bool:
    """True when a node with `bound` cannot beat the incumbent by more than `tol`."""
    if minimize:
        return bound >= incumbent.objective_value - tol
    return bound <= incumbent.objective_value + tol


def relative_gap(value: float, bound: float) -> float:
    """|value - bound| / max(|value|, 1); the floor avoids blow-up near zero."""
    if math.isinf(value) or math.isinf(bound):
        return float("inf")
    return abs(value - bound) / max(abs(value), 1.0)


def branch_bounds(value: float) -> Tuple[float, float]:
    """(floor, ceil) of a fractional value; no integer lies strictly between them."""
    return float(math.floor(value)), float(math.ceil(value))


def branch_constraints(
    parent: SearchNode,
    branch_idx: int,
    branch_val: float,
    dimension: int,
) -> Tuple[Tuple[Constraint, ...], Tuple[Constraint, ...]]:
    """Constraint sets for the two children of `parent`.

    Left adds ``x[i] <= floor(v)``, right adds ``x[i] >= ceil(v)``; both keep
    every constraint of the parent.
    """
    floor_val, ceil_val = branch_bounds(branch_val)
    left = parent.constraints + (Constraint.bound(branch_idx, "<=", floor_val, dimension),)
    right = parent.constraints + (Constraint.bound(branch_idx, ">=", ceil_val, dimension),)
    return left, right
