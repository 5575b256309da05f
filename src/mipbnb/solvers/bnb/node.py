"""
Branch-and-Bound Node and Statistics Dataclasses

This module contains the core data structures used by the branch-and-bound
solver: search nodes, the identifier-keyed search tree, the incumbent,
statistics and pseudocost information.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import autograd.numpy as np  # type: ignore

from ...constraint import Constraint


@dataclass(frozen=True, eq=False)
class SearchNode:
    """
    A node in the branch-and-bound tree.

    Nodes are immutable once created. A child's `constraints` are exactly its
    parent's plus one bound on `branched_variable`; the root has neither a
    parent nor a branched variable. `parent_id` is a lookup key into the
    owning `SearchTree`, never a reference.

    Bound semantics:
    - `relaxation_bound` is the node's own relaxation objective (constant term
      included), or the direction-appropriate infinity when the relaxation was
      infeasible, unbounded or failed.
    - `relaxation_solution` is None exactly when the node is dead.
    """

    node_id: int
    depth: int
    constraints: Tuple[Constraint, ...]
    relaxation_bound: float
    relaxation_solution: Optional[np.ndarray] = None
    parent_id: Optional[int] = None
    branched_variable: Optional[int] = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def is_dead(self) -> bool:
        return self.relaxation_solution is None

    @property
    def branching_constraint(self) -> Optional[Constraint]:
        """The bound added by this node's branch (None for the root)."""
        if self.is_root:
            return None
        return self.constraints[-1]


class SearchTree:
    """Flat arena of every node created during a solve, keyed by identifier."""

    def __init__(self):
        self._nodes: Dict[int, SearchNode] = {}
        self._next_id = 0

    def next_id(self) -> int:
        node_id = self._next_id
        self._next_id += 1
        return node_id

    def add(self, node: SearchNode) -> SearchNode:
        if node.node_id in self._nodes:
            raise ValueError(f"Node {node.node_id} already exists in the search tree")
        if node.parent_id is not None and node.parent_id not in self._nodes:
            raise ValueError(f"Parent {node.parent_id} of node {node.node_id} is unknown")
        self._nodes[node.node_id] = node
        return node

    def get(self, node_id: int) -> SearchNode:
        return self._nodes[node_id]

    def parent(self, node: SearchNode) -> Optional[SearchNode]:
        if node.parent_id is None:
            return None
        return self._nodes[node.parent_id]

    def children(self, node_id: int) -> List[SearchNode]:
        return [n for n in self._nodes.values() if n.parent_id == node_id]

    def path(self, node_id: int) -> List[SearchNode]:
        """Nodes from the root down to `node_id`."""
        path = []
        node: Optional[SearchNode] = self._nodes[node_id]
        while node is not None:
            path.append(node)
            node = self.parent(node)
        return path[::-1]

    def __contains__(self, node_id: int) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[SearchNode]:
        return iter(self._nodes.values())


@dataclass(frozen=True)
class Incumbent:
    """Best integer-feasible point found so far."""

    solution: np.ndarray = field(compare=False)
    objective_value: float


@dataclass
class BBStats:
    """Statistics from the branch-and-bound solve."""

    nodes_explored: int = 0
    nodes_pruned: int = 0
    nodes_infeasible: int = 0
    nodes_created: int = 0
    relaxation_solves: int = 0
    incumbent_updates: int = 0
    strong_branch_calls: int = 0
    max_depth: int = 0
    best_bound: float = float("-inf")
    gap: float = float("inf")


@dataclass
class PseudocostData:
    """Pseudocost information for a variable."""

    down_cost: float = 1.0  # Average bound degradation per unit down
    up_cost: float = 1.0  # Average bound degradation per unit up
    down_count: int = 0  # Number of down branches observed
    up_count: int = 0  # Number of up branches observed

    def update(self, direction: str, degradation: float, distance: float) -> None:
        """Fold one observed branch into the running average."""
        if distance <= 1e-6 or not np.isfinite(degradation):
            return
        unit_cost = max(degradation, 0.0) / distance
        if direction == "down":
            self.down_cost = (self.down_cost * self.down_count + unit_cost) / (self.down_count + 1)
            self.down_count += 1
        else:
            self.up_cost = (self.up_cost * self.up_count + unit_cost) / (self.up_count + 1)
            self.up_count += 1

    @property
    def is_initialized(self) -> bool:
        return self.down_count > 0 or self.up_count > 0
