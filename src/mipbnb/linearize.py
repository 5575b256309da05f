"""
Linear Coefficient Extraction

Turns callables that are assumed affine over the relaxation domain into the
``c . x + d`` form consumed by relaxation solvers.

The default method uses one-sided finite differences, which is only correct
for genuinely affine inputs: a nonlinear function yields a linearization that
is valid at the sampling point and wrong elsewhere. ``check_affine`` can be
used to reject such inputs up front.
"""

from __future__ import annotations

import logging
from typing import Callable, Tuple

import autograd.numpy as np  # type: ignore
from autograd import grad  # type: ignore

from .constants import (
    AFFINE_CHECK_RTOL,
    AFFINE_CHECK_SHIFT,
    DEFAULT_LP_TOLERANCE,
    FINITE_DIFFERENCE_STEP,
    GradientMethod,
)
from .constraint import Constraint, LinearConstraint, Relation

logger = logging.getLogger(__name__)


class NonAffineFunctionError(ValueError):
    """Raised when a function expected to be affine has a varying gradient."""


def as_point(x) -> np.ndarray:
    point = np.array(x, dtype=float)
    if point.ndim != 1:
        raise ValueError(f"Expected a 1-D point, got shape {point.shape}")
    return point


def snap_to_integers(values: np.ndarray, tolerance: float) -> np.ndarray:
    """Round entries within ``10 * tolerance`` of an integer to that integer."""
    values = np.array(values, dtype=float)
    rounded = np.round(values)
    close = np.abs(values - rounded) < 10 * tolerance
    return np.where(close, rounded, values)


def _evaluate(fun: Callable, x: np.ndarray) -> float:
    val = fun(x)
    val = float(val.item()) if hasattr(val, "item") else float(val)
    if not np.isfinite(val):
        raise ValueError(f"Function evaluated to a non-finite value ({val}) at {x}")
    return val


def _finite_difference_gradient(
    fun: Callable,
    point: np.ndarray,
    step: float,
) -> np.ndarray:
    f0 = _evaluate(fun, point)
    gradient = np.zeros(len(point))
    for d in range(len(point)):
        shifted = point.copy()
        shifted[d] += step
        gradient[d] = (_evaluate(fun, shifted) - f0) / step
    return gradient


def extract_linear_coefficients(
    fun: Callable,
    point,
    *,
    step: float = FINITE_DIFFERENCE_STEP,
    tolerance: float = DEFAULT_LP_TOLERANCE,
    method: GradientMethod | str = GradientMethod.FINITE_DIFFERENCE,
) -> np.ndarray:
    """
    Approximate the gradient of an affine function at ``point``.

    Args:
        fun: Scalar function of a 1-D array
        point: Point at which to sample the gradient
        step: Forward-difference step ``h``
        tolerance: LP tolerance; coefficients within ``10 * tolerance`` of an
            integer are snapped to it
        method: "finite_difference" or "autograd" (exact gradient for
            autograd-traceable functions)

    Returns:
        Coefficient vector with one entry per dimension
    """
    point = as_point(point)
    method = GradientMethod(method)

    if method == GradientMethod.AUTOGRAD:
        coeffs = np.array(grad(fun)(point), dtype=float)
    else:
        coeffs = _finite_difference_gradient(fun, point, step)

    if not np.all(np.isfinite(coeffs)):
        raise ValueError(f"Non-finite linear coefficients extracted: {coeffs}")

    return snap_to_integers(coeffs, tolerance)


def linearize(
    fun: Callable,
    point,
    *,
    step: float = FINITE_DIFFERENCE_STEP,
    tolerance: float = DEFAULT_LP_TOLERANCE,
    method: GradientMethod | str = GradientMethod.FINITE_DIFFERENCE,
) -> Tuple[np.ndarray, float]:
    """Return ``(c, d)`` such that ``fun(x) ~= c . x + d``."""
    point = as_point(point)
    coeffs = extract_linear_coefficients(
        fun, point, step=step, tolerance=tolerance, method=method
    )
    constant = _evaluate(fun, point) - float(np.dot(coeffs, point))
    constant = float(snap_to_integers(np.array([constant]), tolerance)[0])
    if abs(constant) < tolerance:
        constant = 0.0
    return coeffs, constant


def check_affine(
    fun: Callable,
    point,
    coefficients: np.ndarray,
    *,
    step: float = FINITE_DIFFERENCE_STEP,
    tolerance: float = DEFAULT_LP_TOLERANCE,
    method: GradientMethod | str = GradientMethod.FINITE_DIFFERENCE,
    shift: float = AFFINE_CHECK_SHIFT,
    rtol: float = AFFINE_CHECK_RTOL,
) -> None:
    """
    Re-sample the gradient at a shifted point and compare.

    Raises:
        NonAffineFunctionError: if the two gradients disagree beyond ``rtol``
    """
    point = as_point(point)
    shifted = point + shift
    other = extract_linear_coefficients(
        fun, shifted, step=step, tolerance=tolerance, method=method
    )
    scale = max(1.0, float(np.max(np.abs(coefficients))) if len(coefficients) else 1.0)
    if not np.allclose(coefficients, other, rtol=rtol, atol=rtol * scale):
        raise NonAffineFunctionError(
            f"Gradient changed from {coefficients} at {point} to {other} at {shifted}; "
            "only affine functions can be linearized exactly"
        )


def linearize_constraint(
    constraint: Constraint,
    point,
    *,
    step: float = FINITE_DIFFERENCE_STEP,
    tolerance: float = DEFAULT_LP_TOLERANCE,
    method: GradientMethod | str = GradientMethod.FINITE_DIFFERENCE,
    affine_check: bool = False,
) -> LinearConstraint:
    """
    Convert a constraint into a relaxation row.

    ``g(x) = c . x + d <= 0`` becomes ``c . x <= -d`` (``==`` for equalities).
    Linear constraints already carry their row and are passed through.
    """
    point = as_point(point)
    relation = Relation.EQUAL if constraint.is_equality else Relation.LESS_EQUAL

    if constraint.is_linear:
        coeffs = np.array(constraint.coefficients, dtype=float)
        if len(coeffs) != len(point):
            raise ValueError(
                f"{constraint!r} has {len(coeffs)} coefficients, expected {len(point)}"
            )
        return LinearConstraint(coefficients=coeffs, relation=relation, rhs=float(constraint.rhs))

    coeffs, constant = linearize(
        constraint.fun, point, step=step, tolerance=tolerance, method=method
    )
    if affine_check:
        check_affine(
            constraint.fun, point, coeffs, step=step, tolerance=tolerance, method=method
        )

    return LinearConstraint(coefficients=coeffs, relation=relation, rhs=-constant)
