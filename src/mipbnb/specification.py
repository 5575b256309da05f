from __future__ import annotations

from typing import FrozenSet, Iterable, List, Optional, Tuple

import autograd.numpy as np  # type: ignore

from .constants import DEFAULT_INT_TOLERANCE


class IntegerProgramSpecification:
    """
    Declares which entries of the decision vector must take integer values.

    Binary variables are integer variables with an implicit ``[0, 1]`` range;
    the branch-and-bound solver injects the ``x[i] <= 1`` rows for them.

    Example:
        spec = IntegerProgramSpecification(integer_variables=[0, 2])
        spec.is_integer_feasible([1.0, 0.3, 4.0])  # True
    """

    def __init__(
        self,
        integer_variables: Iterable[int] = (),
        binary_variables: Iterable[int] = (),
    ):
        integer_variables = frozenset(int(i) for i in integer_variables)
        binary_variables = frozenset(int(i) for i in binary_variables)
        for idx in integer_variables | binary_variables:
            if idx < 0:
                raise ValueError(f"Variable indices must be non-negative, got {idx}")
        self._integer = integer_variables
        self._binary = binary_variables

    @classmethod
    def all_integer(cls, dimension: int) -> "IntegerProgramSpecification":
        return cls(integer_variables=range(dimension))

    @classmethod
    def all_binary(cls, dimension: int) -> "IntegerProgramSpecification":
        return cls(binary_variables=range(dimension))

    @property
    def integer_variables(self) -> FrozenSet[int]:
        """Indices declared integer, binaries included."""
        return self._integer | self._binary

    @property
    def binary_variables(self) -> FrozenSet[int]:
        return self._binary

    @property
    def general_integer_variables(self) -> FrozenSet[int]:
        """Integer indices that are not binary."""
        return self._integer - self._binary

    @property
    def constrained_indices(self) -> List[int]:
        return sorted(self.integer_variables)

    @property
    def is_pure_continuous(self) -> bool:
        return not self._integer and not self._binary

    def fractional_variables(
        self,
        x,
        tolerance: float = DEFAULT_INT_TOLERANCE,
    ) -> List[Tuple[int, float]]:
        """List of (index, value) for declared indices violating integrality."""
        x = np.asarray(x, dtype=float)
        violations = []
        for idx in self.constrained_indices:
            if idx >= len(x):
                continue
            val = float(x[idx])
            if abs(val - round(val)) > tolerance:
                violations.append((idx, val))
        return violations

    def is_integer_feasible(self, x, tolerance: float = DEFAULT_INT_TOLERANCE) -> bool:
        return not self.fractional_variables(x, tolerance)

    def most_fractional_variable(
        self,
        x,
        tolerance: float = DEFAULT_INT_TOLERANCE,
    ) -> Optional[int]:
        """Declared index whose fractional part is closest to 0.5, or None."""
        best_idx = None
        best_score = float("inf")
        for idx, val in self.fractional_variables(x, tolerance):
            score = fractionality_score(val)
            if score < best_score:
                best_idx = idx
                best_score = score
        return best_idx

    def round(self, x) -> np.ndarray:
        """Copy of ``x`` with every declared index rounded to the nearest integer."""
        x_rounded = np.array(x, dtype=float)
        for idx in self.constrained_indices:
            if idx < len(x_rounded):
                x_rounded[idx] = round(x_rounded[idx])
        return x_rounded

    def __eq__(self, other) -> bool:
        if not isinstance(other, IntegerProgramSpecification):
            return NotImplemented
        return self._integer == other._integer and self._binary == other._binary

    def __hash__(self) -> int:
        return hash((self._integer, self._binary))

    def __repr__(self) -> str:
        return (
            f"IntegerProgramSpecification(integer_variables={sorted(self._integer)}, "
            f"binary_variables={sorted(self._binary)})"
        )


def fractionality_score(val: float) -> float:
    """Compute fractionality score (lower = more fractional = better to branch).

    Score is 0.5 - |frac - 0.5|, so values closest to 0.5 get the lowest score.
    """
    return abs(0.5 - abs(val - round(val)))
