"""
Branch-and-Bound MILP Backend

Implements an exact branch-and-bound search over LP relaxations for
mixed-integer linear programs, and for affine approximations of nonlinear
ones.

Features:
- Four node selection strategies (depth-first, breadth-first, best-bound,
  best-estimate)
- Three branching rules (most fractional, pseudocost, strong branching)
- Automatic [0, 1] bounds for binary variables
- Node pruning by infeasibility and by bound
- Relative optimality gap termination, node and time limits
- Pluggable relaxation solver (scipy.optimize.linprog by default)
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import autograd.numpy as np  # type: ignore

from ..constants import (
    DEFAULT_LP_TOLERANCE,
    DEFAULT_MAX_NODES,
    DEFAULT_REL_GAP,
    DEFAULT_STRONG_BRANCH_LIMIT,
    DEFAULT_TIME_LIMIT,
    BranchingRule,
    GradientMethod,
    NodeSelection,
)
from ..constraint import Constraint, LinearConstraint
from ..linearize import as_point, check_affine, linearize, linearize_constraint
from ..specification import IntegerProgramSpecification
from .base import (
    IntegerOptimizationResult,
    IntegerSolutionStatus,
    RelaxationSolver,
    RelaxationStatus,
)
from .bnb.branching import degradation, select_branching_variable
from .bnb.node import BBStats, Incumbent, PseudocostData, SearchNode, SearchTree
from .bnb.queue import NodeQueue
from .bnb.utils import (
    branch_bounds,
    branch_constraints,
    cannot_improve,
    infeasible_value,
    is_better,
    relative_gap,
    unbounded_value,
)
from .linprog_backend import LinprogRelaxationSolver

logger = logging.getLogger(__name__)


# Keys accepted by BranchAndBoundSolver.from_options -> constructor argument
_OPTION_KEYS = {
    "bb_max_nodes": "max_nodes",
    "bb_max_time": "time_limit",
    "bb_rel_gap": "relative_gap_tolerance",
    "bb_node_selection": "node_selection",
    "bb_branching": "branching_rule",
    "bb_lp_tol": "lp_tolerance",
    "bb_strong_branch_limit": "strong_branch_limit",
    "bb_check_affine": "check_affine",
    "bb_gradient_method": "gradient_method",
    "bb_verbose": "verbose",
    "relaxation_solver": "relaxation_solver",
}


class BranchAndBoundSolver:
    """
    Branch-and-bound solver for mixed-integer linear programs.

    The objective and the general constraints are linearized once at the
    starting point (they are assumed affine); every node then solves an LP
    relaxation made of those rows plus the bounds accumulated by branching.
    Configuration is fixed at construction time.
    """

    def __init__(
        self,
        max_nodes: int = DEFAULT_MAX_NODES,
        time_limit: float = DEFAULT_TIME_LIMIT,
        relative_gap_tolerance: float = DEFAULT_REL_GAP,
        node_selection: NodeSelection | str = NodeSelection.BEST_BOUND,
        branching_rule: BranchingRule | str = BranchingRule.MOST_FRACTIONAL,
        lp_tolerance: float = DEFAULT_LP_TOLERANCE,
        relaxation_solver: RelaxationSolver | str | None = None,
        strong_branch_limit: int = DEFAULT_STRONG_BRANCH_LIMIT,
        check_affine: bool = False,
        gradient_method: GradientMethod | str = GradientMethod.FINITE_DIFFERENCE,
        verbose: bool = False,
    ):
        if int(max_nodes) < 1:
            raise ValueError(f"max_nodes must be at least 1, got {max_nodes}")
        if float(time_limit) <= 0:
            raise ValueError(f"time_limit must be positive, got {time_limit}")
        if float(relative_gap_tolerance) < 0 or float(lp_tolerance) < 0:
            raise ValueError("Tolerances must be non-negative")
        if int(strong_branch_limit) < 1:
            raise ValueError(f"strong_branch_limit must be at least 1, got {strong_branch_limit}")

        self.max_nodes = int(max_nodes)
        self.time_limit = float(time_limit)
        self.relative_gap_tolerance = float(relative_gap_tolerance)
        self.node_selection = NodeSelection(node_selection)
        self.branching_rule = BranchingRule(branching_rule)
        self.lp_tolerance = float(lp_tolerance)
        self.strong_branch_limit = int(strong_branch_limit)
        self.check_affine = bool(check_affine)
        self.gradient_method = GradientMethod(gradient_method)
        self.verbose = bool(verbose)

        if relaxation_solver is None:
            self.relaxation_solver: RelaxationSolver = LinprogRelaxationSolver()
        elif isinstance(relaxation_solver, str):
            from . import get_relaxation_solver

            self.relaxation_solver = get_relaxation_solver(relaxation_solver)
        else:
            self.relaxation_solver = relaxation_solver

    @classmethod
    def from_options(cls, solver_options: Dict[str, object]) -> "BranchAndBoundSolver":
        """
        Build a solver from a ``bb_*`` options dictionary.

        Options:
            - bb_max_nodes: Maximum nodes to explore (default: 10000)
            - bb_max_time: Maximum time in seconds (default: 300)
            - bb_rel_gap: Relative optimality gap tolerance (default: 1e-4)
            - bb_node_selection: "depth_first", "breadth_first", "best_bound",
              "best_estimate" (default: "best_bound")
            - bb_branching: "most_fractional", "pseudocost", "strong_branching"
              (default: "most_fractional")
            - bb_lp_tol: LP / integrality tolerance (default: 1e-8)
            - bb_strong_branch_limit: Max strong branching candidates (default: 5)
            - bb_check_affine: Reject non-affine inputs (default: False)
            - bb_gradient_method: "finite_difference" or "autograd"
            - bb_verbose: Print progress (default: False)
            - relaxation_solver: Registered relaxation solver name (default: "highs")
        """
        options = dict(solver_options)
        kwargs = {}
        for key, arg in _OPTION_KEYS.items():
            if key in options:
                kwargs[arg] = options.pop(key)
        if options:
            raise ValueError(f"Unknown branch-and-bound options: {sorted(options)}")
        return cls(**kwargs)

    def solve(
        self,
        objective: Callable[[np.ndarray], float],
        starting_point: Sequence[float],
        constraints: Sequence[Constraint] = (),
        integer_spec: Optional[IntegerProgramSpecification] = None,
        minimize: bool = True,
    ) -> IntegerOptimizationResult:
        """
        Solve a mixed-integer program using branch-and-bound.

        Args:
            objective: Objective function (assumed affine)
            starting_point: Point at which the problem is linearized; also
                returned as the solution when no integer point is found
            constraints: Constraints (``g(x) <= 0`` / ``h(x) == 0`` or linear rows)
            integer_spec: Which indices must be integer / binary
            minimize: True to minimize, False to maximize

        Returns:
            IntegerOptimizationResult with the best integer solution found.
            Search-level failures are reported through its status; only
            malformed input raises.
        """
        start_time = time.time()
        x0 = as_point(starting_point)
        n_vars = len(x0)
        spec = integer_spec if integer_spec is not None else IntegerProgramSpecification()

        for idx in spec.constrained_indices:
            if idx >= n_vars:
                raise ValueError(
                    f"Integer variable index {idx} out of range for dimension {n_vars}"
                )
        for con in constraints:
            if not isinstance(con, Constraint):
                raise TypeError(f"Expected Constraint, got {type(con).__name__}")

        stats = BBStats()
        tree = SearchTree()
        queue = NodeQueue(self.node_selection, minimize)
        pseudocosts: Dict[int, PseudocostData] = {
            idx: PseudocostData() for idx in spec.constrained_indices
        }

        # Binary variables get x[i] <= 1; x >= 0 is the relaxation domain
        base_constraints = tuple(constraints) + tuple(
            Constraint.bound(idx, "<=", 1.0, n_vars) for idx in sorted(spec.binary_variables)
        )

        obj_coeffs, obj_constant = linearize(
            objective, x0, tolerance=self.lp_tolerance, method=self.gradient_method
        )
        if self.check_affine:
            check_affine(
                objective, x0, obj_coeffs,
                tolerance=self.lp_tolerance, method=self.gradient_method,
            )

        rows: Dict[Constraint, LinearConstraint] = {
            con: linearize_constraint(
                con, x0,
                tolerance=self.lp_tolerance,
                method=self.gradient_method,
                affine_check=self.check_affine,
            )
            for con in base_constraints
        }

        def relax(
            node_constraints: Tuple[Constraint, ...],
            hint: np.ndarray,
        ) -> Tuple[float, Optional[np.ndarray], RelaxationStatus]:
            for con in node_constraints:
                if con not in rows:
                    rows[con] = linearize_constraint(con, hint, tolerance=self.lp_tolerance)
            return self._solve_relaxation(
                obj_coeffs, obj_constant,
                [rows[con] for con in node_constraints],
                hint, minimize, stats,
            )

        def make_node(
            node_constraints: Tuple[Constraint, ...],
            hint: np.ndarray,
            depth: int,
            parent_id: Optional[int] = None,
            branched_variable: Optional[int] = None,
        ) -> SearchNode:
            bound, solution, status = relax(node_constraints, hint)
            node = tree.add(
                SearchNode(
                    node_id=tree.next_id(),
                    depth=depth,
                    constraints=node_constraints,
                    relaxation_bound=bound,
                    relaxation_solution=solution,
                    parent_id=parent_id,
                    branched_variable=branched_variable,
                )
            )
            stats.nodes_created += 1
            stats.max_depth = max(stats.max_depth, depth)
            if solution is None:
                stats.nodes_infeasible += 1
                logger.debug(f"Node {node.node_id} (depth {depth}) is dead: {status}")
            return node

        incumbent: Optional[Incumbent] = None

        def current_best_bound() -> float:
            open_bound = queue.best_bound()
            if open_bound is None:
                if incumbent is not None:
                    return incumbent.objective_value
                return infeasible_value(minimize)
            if incumbent is not None and is_better(incumbent.objective_value, open_bound, minimize):
                return incumbent.objective_value
            return open_bound

        def finish(status: IntegerSolutionStatus, best_bound: float) -> IntegerOptimizationResult:
            if incumbent is not None:
                solution = incumbent.solution
                value = incumbent.objective_value
                gap = relative_gap(value, best_bound)
            else:
                solution = x0.copy()
                value = infeasible_value(minimize)
                gap = float("inf")

            stats.best_bound = best_bound
            stats.gap = gap
            solve_time = time.time() - start_time

            if self.verbose:
                self._print_summary(status, stats, incumbent, solve_time)

            return IntegerOptimizationResult(
                solution=solution,
                objective_value=value,
                best_bound=best_bound,
                relative_gap=gap,
                nodes_explored=stats.nodes_explored,
                status=status,
                solve_time=solve_time,
                integer_spec=spec,
                stats=stats,
            )

        # Step 1: root relaxation
        root = make_node(base_constraints, x0, depth=0)
        if root.is_dead and root.relaxation_bound == unbounded_value(minimize):
            logger.warning("Root LP relaxation is unbounded; no finite bound is available")
        queue.insert(root)
        best_bound = root.relaxation_bound

        if self.verbose:
            print(f"Branch-and-Bound: {len(spec.constrained_indices)} integer variable(s) of {n_vars}")
            print(f"Strategy: {self.node_selection.value}, Branching: {self.branching_rule.value}")
            print(f"{'Nodes':>8} {'Incumbent':>12} {'Best Bound':>12} {'Gap':>10} {'Time':>8}")
            print("-" * 54)

        # Step 2: main loop
        while queue:
            # Limits are polled between nodes, never during a relaxation solve
            if stats.nodes_explored >= self.max_nodes:
                logger.debug(f"Node limit reached ({self.max_nodes})")
                return finish(IntegerSolutionStatus.NODE_LIMIT, best_bound)

            if time.time() - start_time > self.time_limit:
                logger.debug(f"Time limit reached ({self.time_limit}s)")
                return finish(IntegerSolutionStatus.TIME_LIMIT, best_bound)

            node = queue.extract_best()
            stats.nodes_explored += 1

            # Prune by infeasibility or by bound
            if node.is_dead or (
                incumbent is not None
                and cannot_improve(node.relaxation_bound, incumbent, minimize, self.lp_tolerance)
            ):
                stats.nodes_pruned += 1
                logger.debug(f"Pruned node {node.node_id} (bound {node.relaxation_bound})")
                best_bound = current_best_bound()
                continue

            solution = node.relaxation_solution

            if spec.is_integer_feasible(solution, self.lp_tolerance):
                value = self._evaluate(objective, solution)
                if incumbent is None or is_better(value, incumbent.objective_value, minimize):
                    incumbent = Incumbent(solution=solution.copy(), objective_value=value)
                    stats.incumbent_updates += 1
                    logger.debug(f"New incumbent {value:.6g} at node {node.node_id}")
                    best_bound = current_best_bound()
                    if self.verbose:
                        self._print_row(stats, incumbent, best_bound, start_time, marker=" *")
                else:
                    best_bound = current_best_bound()

                if relative_gap(incumbent.objective_value, best_bound) < self.relative_gap_tolerance:
                    return finish(IntegerSolutionStatus.OPTIMAL, best_bound)
                continue

            branch_idx = select_branching_variable(
                solution,
                spec,
                self.branching_rule,
                self.lp_tolerance,
                parent_bound=node.relaxation_bound,
                minimize=minimize,
                pseudocosts=pseudocosts,
                child_bound=self._child_bound_fn(node, relax, n_vars),
                strong_limit=self.strong_branch_limit,
                stats=stats,
            )
            if branch_idx is None:
                best_bound = current_best_bound()
                continue

            branch_val = float(solution[branch_idx])
            left_cons, right_cons = branch_constraints(node, branch_idx, branch_val, n_vars)
            left = make_node(left_cons, solution, node.depth + 1, node.node_id, branch_idx)
            right = make_node(right_cons, solution, node.depth + 1, node.node_id, branch_idx)

            # Strong branching already recorded these children's degradations
            if self.branching_rule != BranchingRule.STRONG_BRANCHING:
                self._update_pseudocosts(
                    pseudocosts, branch_idx, branch_val, node, left, right, minimize
                )

            queue.insert(left)
            queue.insert(right)
            best_bound = current_best_bound()

            if self.verbose and stats.nodes_explored % 100 == 0:
                self._print_row(stats, incumbent, best_bound, start_time)

        # Step 3: tree exhausted
        best_bound = current_best_bound()
        if incumbent is None:
            return finish(IntegerSolutionStatus.INFEASIBLE, best_bound)

        if relative_gap(incumbent.objective_value, best_bound) < self.relative_gap_tolerance:
            return finish(IntegerSolutionStatus.OPTIMAL, best_bound)
        return finish(IntegerSolutionStatus.FEASIBLE, best_bound)

    # =========================================================================
    # Relaxation Solving
    # =========================================================================

    def _solve_relaxation(
        self,
        obj_coeffs: np.ndarray,
        obj_constant: float,
        rows: List[LinearConstraint],
        hint: np.ndarray,
        minimize: bool,
        stats: BBStats,
    ) -> Tuple[float, Optional[np.ndarray], RelaxationStatus]:
        """Solve one LP relaxation; failures become dead nodes, never exceptions."""
        stats.relaxation_solves += 1
        try:
            result = self.relaxation_solver.solve(
                obj_coeffs,
                rows,
                minimize=minimize,
                tolerance=self.lp_tolerance,
                x0=hint,
            )
        except Exception as e:
            logger.debug(f"Relaxation solve failed: {e}")
            return infeasible_value(minimize), None, RelaxationStatus.ERROR

        if result.is_optimal:
            bound = float(result.objective_value) + obj_constant
            return bound, np.asarray(result.solution, dtype=float), result.status

        if result.status == RelaxationStatus.UNBOUNDED:
            return unbounded_value(minimize), None, result.status
        return infeasible_value(minimize), None, result.status

    def _child_bound_fn(self, parent: SearchNode, relax: Callable, n_vars: int):
        """Relaxation bound of a prospective child, used by strong branching."""
        if self.branching_rule != BranchingRule.STRONG_BRANCHING:
            return None

        def child_bound(idx: int, val: float, direction: str) -> Optional[float]:
            floor_val, ceil_val = branch_bounds(val)
            if direction == "down":
                extra = Constraint.bound(idx, "<=", floor_val, n_vars)
            else:
                extra = Constraint.bound(idx, ">=", ceil_val, n_vars)
            bound, solution, _ = relax(parent.constraints + (extra,), parent.relaxation_solution)
            return bound if solution is not None else None

        return child_bound

    # =========================================================================
    # Pseudocosts
    # =========================================================================

    def _update_pseudocosts(
        self,
        pseudocosts: Dict[int, PseudocostData],
        branch_idx: int,
        branch_val: float,
        parent: SearchNode,
        left: SearchNode,
        right: SearchNode,
        minimize: bool,
    ) -> None:
        """Update pseudocost data from the children just created."""
        pc = pseudocosts.setdefault(branch_idx, PseudocostData())
        floor_val, ceil_val = branch_bounds(branch_val)
        if not left.is_dead:
            pc.update(
                "down",
                degradation(parent.relaxation_bound, left.relaxation_bound, minimize),
                branch_val - floor_val,
            )
        if not right.is_dead:
            pc.update(
                "up",
                degradation(parent.relaxation_bound, right.relaxation_bound, minimize),
                ceil_val - branch_val,
            )

    # =========================================================================
    # Utility Methods
    # =========================================================================

    @staticmethod
    def _evaluate(objective: Callable, x: np.ndarray) -> float:
        val = objective(x)
        return float(val.item()) if hasattr(val, "item") else float(val)

    @staticmethod
    def _print_row(
        stats: BBStats,
        incumbent: Optional[Incumbent],
        best_bound: float,
        start_time: float,
        marker: str = "",
    ) -> None:
        elapsed = time.time() - start_time
        inc_str = (
            f"{incumbent.objective_value:>12.4e}" if incumbent is not None else f"{'-':>12}"
        )
        gap = relative_gap(incumbent.objective_value, best_bound) if incumbent else float("inf")
        print(f"{stats.nodes_explored:>8} {inc_str} {best_bound:>12.4e} "
              f"{gap:>10.2e} {elapsed:>7.1f}s{marker}")

    @staticmethod
    def _print_summary(
        status: IntegerSolutionStatus,
        stats: BBStats,
        incumbent: Optional[Incumbent],
        solve_time: float,
    ) -> None:
        print("-" * 54)
        print(f"Status: {status}")
        print(f"Nodes explored: {stats.nodes_explored}")
        print(f"Relaxation solves: {stats.relaxation_solves}")
        print(f"Nodes pruned: {stats.nodes_pruned}")
        if incumbent is not None:
            print(f"Best objective: {incumbent.objective_value:.6e}")
            print(f"Best bound: {stats.best_bound:.6e}")
            print(f"Gap: {stats.gap:.2e}")
        print(f"Solve time: {solve_time:.3f}s")
