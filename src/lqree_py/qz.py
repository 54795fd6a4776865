"""Generalised eigenvalue utilities and RE solution return codes.

The roots of the pencil ``G0 y_t = G1 y_{t-1}`` are the ratios
``|b_ii / a_ii|`` of the diagonals of the complex QZ factors
``a = Q^H G0 Z`` and ``b = Q^H G1 Z``.  Roots above a divider slightly
larger than one are unstable and must be suppressed by the expectational
errors; the outcome of that suppression is summarised by the ``eu`` pair
of Sims (2002):

* ``(1, 1)`` -- a stable solution exists and is unique;
* ``exist != 1`` -- no stable solution exists;
* ``unique != 1`` -- a stable solution exists but is indeterminate;
* ``(-2, -2)`` -- coincident zeros, the pencil is singular.

References
----------
Sims, C. A. (2002). "Solving Linear Rational Expectations Models."
    *Computational Economics*, 20(1-2), 1-20.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

Array = np.ndarray

DEFAULT_DIV = 1.01


class SolutionWarning(RuntimeWarning):
    """Issued when the RE solution is not both existent and unique."""


_REASON_TEXT = {
    "coincident_zeros": "Coincident zeros!!!",
    "no_stable_solution": "Solution does not exist!!!",
    "indeterminacy": "Solution is not unique!!!",
}


@dataclass(frozen=True)
class ExistenceUniqueness:
    """Existence and uniqueness flags returned by the RE solver.

    Attributes
    ----------
    exist : int
        ``1`` when a stable solution exists.
    unique : int
        ``1`` when that solution is unique.
    """

    exist: int
    unique: int

    @property
    def ok(self) -> bool:
        return self.exist == 1 and self.unique == 1

    @property
    def reason(self) -> str:
        """``"ok"``, ``"coincident_zeros"``, ``"no_stable_solution"`` or
        ``"indeterminacy"``."""
        if self.exist == -2 and self.unique == -2:
            return "coincident_zeros"
        if self.exist != 1:
            return "no_stable_solution"
        if self.unique != 1:
            return "indeterminacy"
        return "ok"

    def as_tuple(self) -> tuple[int, int]:
        return (self.exist, self.unique)

    def describe(self) -> str:
        message = f"Warning: eu = ({self.exist},{self.unique})"
        if self.reason in _REASON_TEXT:
            message += f" - {_REASON_TEXT[self.reason]}"
        return message


def compute_generalized_eigenvalues(
    alpha: Array, beta: Array, singular_tol: float
) -> Array:
    """Moduli ``|beta_i / alpha_i|`` of the pencil roots.

    ``alpha`` is the diagonal of the factor of ``G0`` and ``beta`` that of
    ``G1``.  Entries where ``|alpha_i|`` is below *singular_tol* are mapped
    to infinity.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        eigenvalues = np.abs(beta / alpha)
    return np.where(np.abs(alpha) < singular_tol, np.inf, eigenvalues)


def has_coincident_zeros(alpha: Array, beta: Array, realsmall: float) -> bool:
    """True if some root has both ``|alpha_i|`` and ``|beta_i|`` negligible."""
    return bool(np.any((np.abs(alpha) < realsmall) & (np.abs(beta) < realsmall)))


def select_stability_divider(
    alpha: Array,
    beta: Array,
    div: float | None = None,
    realsmall: float = 1e-6,
) -> float:
    """Choose the modulus that separates stable from unstable roots.

    With no explicit *div*, start from ``1.01`` and pull the divider down
    to the midpoint between one and any root that falls in
    ``(1 + realsmall, div]`` so such roots are counted as unstable.
    """
    if div is not None:
        return float(div)
    roots = compute_generalized_eigenvalues(alpha, beta, singular_tol=realsmall)
    out = DEFAULT_DIV
    for root in roots[np.isfinite(roots)]:
        if 1.0 + realsmall < root <= out:
            out = 0.5 * (1.0 + root)
    return float(out)


def count_unstable(alpha: Array, beta: Array, div: float) -> int:
    """Number of roots with ``|beta_i| > div * |alpha_i|``."""
    return int(np.sum(np.abs(beta) > div * np.abs(alpha)))
