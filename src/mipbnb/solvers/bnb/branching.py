"""
Branching Variable Selection Strategies

This module implements the strategies for selecting which variable to branch
on in the branch-and-bound tree.

Strategies:
- MOST_FRACTIONAL: Branch on the most fractional variable (simple, fast)
- PSEUDOCOST: Use historical bound degradations to estimate branching impact
- STRONG_BRANCHING: Solve both child relaxations for the leading candidates

Every strategy only ever returns an index that is fractional in the given
solution, so the floor/ceil split always partitions the integer points.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Tuple

import autograd.numpy as np  # type: ignore

from ...constants import DEFAULT_STRONG_BRANCH_LIMIT, BranchingRule
from ...specification import IntegerProgramSpecification, fractionality_score
from .node import BBStats, PseudocostData

logger = logging.getLogger(__name__)

# (index, value, direction) -> child relaxation bound, or None if the child is dead
ChildBoundFn = Callable[[int, float, str], Optional[float]]


def select_branching_variable(
    solution: np.ndarray,
    spec: IntegerProgramSpecification,
    rule: BranchingRule,
    tolerance: float,
    parent_bound: float = 0.0,
    minimize: bool = True,
    pseudocosts: Dict[int, PseudocostData] | None = None,
    child_bound: ChildBoundFn | None = None,
    strong_limit: int = DEFAULT_STRONG_BRANCH_LIMIT,
    stats: BBStats | None = None,
) -> Optional[int]:
    """Select branching variable based on rule."""
    violations = spec.fractional_variables(solution, tolerance)
    if not violations:
        return None

    if rule == BranchingRule.MOST_FRACTIONAL:
        return spec.most_fractional_variable(solution, tolerance)

    elif rule == BranchingRule.PSEUDOCOST:
        if pseudocosts is None:
            return spec.most_fractional_variable(solution, tolerance)
        return pseudocost_branching(violations, pseudocosts)

    else:  # STRONG_BRANCHING
        if child_bound is None:
            return spec.most_fractional_variable(solution, tolerance)
        # Evaluate the most fractional candidates first
        candidates = sorted(violations, key=lambda iv: fractionality_score(iv[1]))
        return strong_branching(
            candidates[:strong_limit],
            parent_bound,
            minimize,
            child_bound,
            stats,
            pseudocosts,
        )


def most_fractional_branching(violations: List[Tuple[int, float]]) -> int:
    """Select the most fractional variable for branching."""
    best_idx = violations[0][0]
    best_score = fractionality_score(violations[0][1])

    for idx, val in violations[1:]:
        score = fractionality_score(val)
        if score < best_score:
            best_idx = idx
            best_score = score

    return best_idx


def _branch_score(down: float, up: float) -> float:
    return min(down, up) + 0.1 * max(down, up)


def pseudocost_branching(
    violations: List[Tuple[int, float]],
    pseudocosts: Dict[int, PseudocostData],
) -> int:
    """Select variable with best pseudocost score."""
    best_idx = violations[0][0]
    best_score = float("-inf")

    for idx, val in violations:
        pc = pseudocosts.setdefault(idx, PseudocostData())
        down_dist = val - np.floor(val)
        up_dist = np.ceil(val) - val
        score = _branch_score(pc.down_cost * down_dist, pc.up_cost * up_dist)

        if score > best_score:
            best_idx = idx
            best_score = score

    if best_score <= 0.0:
        # No degradation observed anywhere: nothing to discriminate on
        return most_fractional_branching(violations)
    return best_idx


def degradation(parent_bound: float, child_bound: float, minimize: bool) -> float:
    """How much worse the child bound is than the parent's, in the objective's direction."""
    return child_bound - parent_bound if minimize else parent_bound - child_bound


def strong_branching(
    candidates: List[Tuple[int, float]],
    parent_bound: float,
    minimize: bool,
    child_bound: ChildBoundFn,
    stats: BBStats | None = None,
    pseudocosts: Dict[int, PseudocostData] | None = None,
) -> int:
    """
    Evaluate candidates by solving both child relaxations and update pseudocosts.

    A child that could not be solved contributes zero improvement: failed solves
    provide no information and should not be rewarded with infinite scores.
    """
    best_idx = candidates[0][0]
    best_score = float("-inf")

    for idx, val in candidates:
        improvements = {}
        for direction in ("down", "up"):
            bound = child_bound(idx, val, direction)
            if stats is not None:
                stats.strong_branch_calls += 1
            if bound is None or not np.isfinite(bound):
                improvements[direction] = 0.0
            else:
                improvements[direction] = max(0.0, degradation(parent_bound, bound, minimize))

        score = _branch_score(improvements["down"], improvements["up"])
        logger.debug(f"Strong branching x[{idx}]={val:.6g}: score {score:.6g}")

        if pseudocosts is not None:
            pc = pseudocosts.setdefault(idx, PseudocostData())
            pc.update("down", improvements["down"], val - np.floor(val))
            pc.update("up", improvements["up"], np.ceil(val) - val)

        if score > best_score:
            best_idx = idx
            best_score = score

    if best_score <= 0.0:
        return most_fractional_branching(candidates)
    return best_idx
