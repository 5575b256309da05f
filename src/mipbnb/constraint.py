from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Optional, Sequence, Tuple

import autograd.numpy as np  # type: ignore


_SENSES = ("<=", ">=", "==")


@dataclass(frozen=True, eq=False)
class Constraint:
    """
    A constraint on the decision vector.

    General constraints wrap a callable: ``fun(x) <= 0`` for inequalities and
    ``fun(x) == 0`` for equalities. Linear constraints additionally carry their
    exact row ``coefficients . x (<= | ==) rhs`` so the solver never has to
    extract coefficients numerically for them.
    """

    fun: Callable[[np.ndarray], float]
    is_equality: bool = False
    coefficients: Optional[Tuple[float, ...]] = None
    rhs: Optional[float] = None
    name: Optional[str] = None

    @property
    def is_linear(self) -> bool:
        return self.coefficients is not None

    def __call__(self, x) -> float:
        return self.fun(x)

    def violation(self, x) -> float:
        """Amount by which ``x`` violates the constraint (0 if satisfied)."""
        val = float(self.fun(np.asarray(x, dtype=float)))
        if self.is_equality:
            return abs(val)
        return max(val, 0.0)

    @classmethod
    def inequality(cls, fun: Callable, name: Optional[str] = None) -> "Constraint":
        return cls(fun=fun, is_equality=False, name=name)

    @classmethod
    def equality(cls, fun: Callable, name: Optional[str] = None) -> "Constraint":
        return cls(fun=fun, is_equality=True, name=name)

    @classmethod
    def linear(
        cls,
        coefficients: Sequence[float],
        rhs: float,
        sense: str = "<=",
        name: Optional[str] = None,
    ) -> "Constraint":
        """
        Build ``coefficients . x (sense) rhs``.

        ``>=`` rows are stored negated so every inequality reads ``<=``.
        """
        if sense not in _SENSES:
            raise ValueError(f"Unknown constraint sense '{sense}', expected one of {_SENSES}")

        coeffs = tuple(float(c) for c in coefficients)
        rhs = float(rhs)
        if sense == ">=":
            coeffs = tuple(-c for c in coeffs)
            rhs = -rhs

        row = np.array(coeffs)

        def fun(x):
            return np.dot(row, x) - rhs

        return cls(
            fun=fun,
            is_equality=(sense == "=="),
            coefficients=coeffs,
            rhs=rhs,
            name=name,
        )

    @classmethod
    def bound(
        cls,
        index: int,
        sense: str,
        value: float,
        dimension: int,
    ) -> "Constraint":
        """Single-variable bound ``x[index] (sense) value``."""
        if not 0 <= index < dimension:
            raise ValueError(f"Bound index {index} out of range for dimension {dimension}")
        coeffs = [0.0] * dimension
        coeffs[index] = 1.0
        return cls.linear(coeffs, value, sense, name=f"x[{index}] {sense} {value:g}")

    def __repr__(self) -> str:
        if self.name is not None:
            return f"Constraint({self.name})"
        kind = "==" if self.is_equality else "<="
        if self.is_linear:
            return f"Constraint({list(self.coefficients)} . x {kind} {self.rhs:g})"
        return f"Constraint(fun(x) {kind} 0)"


class Relation(StrEnum):
    LESS_EQUAL = "<="
    EQUAL = "=="


@dataclass(frozen=True, eq=False)
class LinearConstraint:
    """A relaxation row: ``coefficients . x (relation) rhs``."""

    coefficients: np.ndarray
    relation: Relation
    rhs: float

    def is_satisfied(self, x, tolerance: float = 1e-6) -> bool:
        lhs = float(np.dot(self.coefficients, x))
        if self.relation == Relation.EQUAL:
            return abs(lhs - self.rhs) <= tolerance
        return lhs <= self.rhs + tolerance
