"""
Open-Node Queue

Holds every node that has been created but not yet explored, ordered by the
active `NodeSelection` strategy. Implemented as a binary heap keyed by
``(priority, insertion sequence)`` so that equal priorities resolve in
insertion order.
"""

from __future__ import annotations

import heapq
from itertools import count
from typing import List, Optional, Tuple

from ...constants import NodeSelection
from .node import SearchNode


class NodeQueue:
    def __init__(
        self,
        strategy: NodeSelection | str = NodeSelection.BEST_BOUND,
        minimize: bool = True,
    ):
        self.strategy = NodeSelection(strategy)
        self.minimize = minimize
        self._heap: List[Tuple[float, int, SearchNode]] = []
        self._sequence = count()

    def priority(self, node: SearchNode) -> float:
        """Heap key for `node` (lower is explored first)."""
        if self.strategy == NodeSelection.DEPTH_FIRST:
            return -node.depth
        if self.strategy == NodeSelection.BREADTH_FIRST:
            return node.depth
        # BEST_BOUND and BEST_ESTIMATE: no separate estimate heuristic yet
        return node.relaxation_bound if self.minimize else -node.relaxation_bound

    def insert(self, node: SearchNode) -> None:
        heapq.heappush(self._heap, (self.priority(node), next(self._sequence), node))

    def extract_best(self) -> Optional[SearchNode]:
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]

    def peek(self) -> Optional[SearchNode]:
        if not self._heap:
            return None
        return self._heap[0][2]

    def best_bound(self) -> Optional[float]:
        """Most favorable relaxation bound among open nodes, or None if empty."""
        if not self._heap:
            return None
        if self.strategy in (NodeSelection.BEST_BOUND, NodeSelection.BEST_ESTIMATE):
            return self._heap[0][2].relaxation_bound
        bounds = [entry[2].relaxation_bound for entry in self._heap]
        return min(bounds) if self.minimize else max(bounds)

    def nodes(self) -> List[SearchNode]:
        """Open nodes in extraction order."""
        return [entry[2] for entry in sorted(self._heap)]

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
