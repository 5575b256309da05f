"""
Branch-and-Bound MILP Solver

This package holds the building blocks of the branch-and-bound search; the
orchestrating `BranchAndBoundSolver` lives in ``mipbnb.solvers.bnb_backend``.

Modules:
- node: Search nodes, the identifier-keyed search tree, incumbent, statistics
  and pseudocost dataclasses
- queue: Open-node priority queue for the node selection strategies
- branching: Variable branching strategies
- utils: Direction-aware comparisons, gap accounting and branch construction
"""

from .node import (
    BBStats,
    Incumbent,
    PseudocostData,
    SearchNode,
    SearchTree,
)
from .queue import NodeQueue
from .branching import (
    most_fractional_branching,
    pseudocost_branching,
    select_branching_variable,
    strong_branching,
)
from .utils import branch_constraints, relative_gap

__all__ = [
    "BBStats",
    "Incumbent",
    "NodeQueue",
    "PseudocostData",
    "SearchNode",
    "SearchTree",
    "branch_constraints",
    "most_fractional_branching",
    "pseudocost_branching",
    "relative_gap",
    "select_branching_variable",
    "strong_branching",
]
