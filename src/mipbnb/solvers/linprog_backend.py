from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

import autograd.numpy as np  # type: ignore
from scipy.optimize import linprog  # type: ignore

from .base import (
    ArrayLike,
    LinearConstraint,
    Relation,
    RelaxationResult,
    RelaxationStatus,
)

logger = logging.getLogger(__name__)

# HiGHS rejects feasibility tolerances below this
_MIN_HIGHS_TOLERANCE = 1e-10


class LinprogRelaxationSolver:
    """LP relaxations through ``scipy.optimize.linprog`` over ``x >= 0``."""

    SUPPORTED_METHODS = {"highs", "highs-ds", "highs-ipm"}

    # scipy.optimize.linprog status codes
    _STATUS_MAP: Dict[int, RelaxationStatus] = {
        0: RelaxationStatus.OPTIMAL,
        2: RelaxationStatus.INFEASIBLE,
        3: RelaxationStatus.UNBOUNDED,
    }

    def __init__(self, method: str = "highs", options: Optional[Dict[str, object]] = None):
        if method not in self.SUPPORTED_METHODS:
            raise ValueError(f"Method '{method}' is not supported by the linprog backend")
        self.method = method
        self.options = dict(options or {})

    def solve(
        self,
        objective: ArrayLike,
        constraints: Sequence[LinearConstraint],
        minimize: bool = True,
        tolerance: float = 1e-8,
        x0: Optional[ArrayLike] = None,  # noqa: ARG002 - HiGHS does not take a warm start
    ) -> RelaxationResult:
        c = np.asarray(objective, dtype=float)
        n_vars = len(c)
        sign = 1.0 if minimize else -1.0

        a_ub, b_ub, a_eq, b_eq = [], [], [], []
        for con in constraints:
            row = np.asarray(con.coefficients, dtype=float)
            if len(row) != n_vars:
                raise ValueError(
                    f"Constraint has {len(row)} coefficients, objective has {n_vars}"
                )
            if con.relation == Relation.EQUAL:
                a_eq.append(row)
                b_eq.append(con.rhs)
            else:
                a_ub.append(row)
                b_ub.append(con.rhs)

        tol = max(float(tolerance), _MIN_HIGHS_TOLERANCE)
        options = {
            "primal_feasibility_tolerance": tol,
            "dual_feasibility_tolerance": tol,
        }
        options.update(self.options)

        result = linprog(
            sign * c,
            A_ub=np.array(a_ub) if a_ub else None,
            b_ub=np.array(b_ub) if b_ub else None,
            A_eq=np.array(a_eq) if a_eq else None,
            b_eq=np.array(b_eq) if b_eq else None,
            bounds=(0, None),
            method=self.method,
            options=options,
        )

        status = self._STATUS_MAP.get(result.status, RelaxationStatus.ERROR)
        if status == RelaxationStatus.OPTIMAL:
            return RelaxationResult(
                status=status,
                objective_value=sign * float(result.fun),
                solution=np.array(result.x, dtype=float),
                raw_result=result,
            )

        logger.debug(f"linprog({self.method}) returned status {result.status}: {result.message}")
        if status == RelaxationStatus.UNBOUNDED:
            value = float("-inf") if minimize else float("inf")
        else:
            value = float("inf") if minimize else float("-inf")
        return RelaxationResult(status=status, objective_value=value, raw_result=result)
