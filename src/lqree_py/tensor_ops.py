"""Kronecker-structured least squares and tolerance-grid checks."""

from __future__ import annotations

import numpy as np
from scipy.linalg import pinv

Array = np.ndarray


def vec(M: Array) -> Array:
    """Column-major vectorisation, ``vec(M)``."""
    return np.asarray(M).reshape(-1, order="F")


def kron_lstsq(C_z: Array, C_target: Array, *, materialize: bool = False) -> Array:
    r"""Least-squares solution of ``C_target = X @ C_z``.

    Flattening gives the linear system

    .. math::

        \operatorname{vec}(C_{target}) = (C_z^\top \otimes I_n)
        \operatorname{vec}(X)

    whose minimum-norm least-squares solution is
    ``pinv(kron(C_z.T, I)) @ vec(C_target)``.  Because
    :math:`(A \otimes B)^+ = A^+ \otimes B^+`, the same ``X`` is obtained
    without forming the operator as ``C_target @ pinv(C_z)``.

    Parameters
    ----------
    C_z : Array, shape (m, p)
        Right factor.
    C_target : Array, shape (n, p)
        Target matrix.
    materialize : bool
        Build the ``(n p) x (n m)`` Kronecker operator explicitly instead
        of applying it implicitly.

    Returns
    -------
    Array, shape (n, m)
        Best-fit ``X``.
    """
    C_z = np.asarray(C_z, dtype=float)
    C_target = np.asarray(C_target, dtype=float)
    if C_z.shape[1] != C_target.shape[1]:
        raise ValueError(
            f"C_z and C_target must have the same columns, got {C_z.shape} and {C_target.shape}"
        )
    n, m = C_target.shape[0], C_z.shape[0]
    if n == 0 or m == 0 or C_z.shape[1] == 0:
        return np.zeros((n, m), dtype=float)

    if not materialize:
        return C_target @ pinv(C_z)

    operator = np.kron(C_z.T, np.eye(n))
    return (pinv(operator) @ vec(C_target)).reshape((n, m), order="F")


def round_half_away(values: Array) -> Array:
    """Round to the nearest integer with ties away from zero."""
    values = np.asarray(values, dtype=float)
    magnitude = np.abs(values)
    whole = np.floor(magnitude)
    return np.sign(values) * (whole + (magnitude - whole >= 0.5))


def round_to_grid(values: Array, precision: float) -> Array:
    """Round every entry to the nearest multiple of *precision*."""
    if precision <= 0:
        raise ValueError("precision must be positive")
    return round_half_away(np.asarray(values, dtype=float) / precision) * precision


def residual_vanishes(residual: Array, precision: float) -> bool:
    """True if every entry of *residual* rounds to zero on the *precision* grid.

    This is ``|r| < precision / 2`` entrywise; a residual of exactly half a
    grid step rounds away from zero and fails.
    """
    return bool(np.all(round_to_grid(residual, precision) == 0.0))


def selection_matrix(start: int, size: int, total: int) -> Array:
    """0/1 matrix selecting entries ``start:start + size`` of a length-*total* vector."""
    out = np.zeros((size, total), dtype=float)
    out[np.arange(size), start + np.arange(size)] = 1.0
    return out
