"""Generalised Schur solver for linear rational-expectations systems.

Solves

.. math::

    G_0 y_t = G_1 y_{t-1} + c + \\Psi \\varepsilon_t + \\Pi \\eta_t

where :math:`\\eta_t` are expectational errors (:math:`E_t \\eta_{t+1} = 0`),
for the stable solution

.. math::

    y_t = \\Theta_1 y_{t-1} + \\Theta_c + \\Theta_0 \\varepsilon_t.

Algorithm outline
-----------------
1. Complex QZ of ``(G0, G1)``; choose the stability divider and detect
   coincident zeros.
2. ``scipy.linalg.ordqz`` moves the stable roots to the upper-left block.
3. The unstable block must be annihilated by the expectational errors:
   existence requires the loading ``Q2 Pi`` to have full row rank, and
   uniqueness requires the stable block loading ``Q1 Pi`` to lie in its
   row space.
4. Eliminate the expectational errors from the stable block and map the
   result back through ``Z``.

References
----------
Sims, C. A. (2002). "Solving Linear Rational Expectations Models."
    *Computational Economics*, 20(1-2), 1-20.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from scipy.linalg import ordqz, qz, svd

from .model import DimensionError
from .qz import (
    ExistenceUniqueness,
    count_unstable,
    has_coincident_zeros,
    select_stability_divider,
)

Array = np.ndarray


@dataclass(frozen=True)
class REResult:
    """Solution of a linear RE system.

    Attributes
    ----------
    B1 : Array, shape (n, n)
        Transition matrix :math:`\\Theta_1`.
    const : Array, shape (n,)
        Constant term :math:`\\Theta_c`.
    B2 : Array, shape (n, n_shocks)
        Shock impact matrix :math:`\\Theta_0`.
    fmat, fwt, ywt : Array
        Blocks of the forward-looking part of the solution, in the
        unstable coordinates.
    gev : Array, shape (n, 2)
        Diagonal pairs ``(a_ii, b_ii)`` of the ordered QZ factors.
    eu : ExistenceUniqueness
        Existence and uniqueness flags.
    """

    B1: Array
    const: Array
    B2: Array
    fmat: Array
    fwt: Array
    ywt: Array
    gev: Array
    eu: ExistenceUniqueness


def _truncated_svd(mat: Array, realsmall: float) -> tuple[Array, Array, Array]:
    """SVD keeping singular values above *realsmall*; returns ``(u, d, v)``."""
    n_rows, n_cols = mat.shape
    if mat.size == 0:
        return (
            np.zeros((n_rows, 0), dtype=complex),
            np.zeros(0, dtype=float),
            np.zeros((n_cols, 0), dtype=complex),
        )
    u, d, vh = svd(mat, full_matrices=False)
    big = d > realsmall
    return u[:, big], d[big], vh[big, :].conj().T


def _as_columns(mat: Array, n: int) -> Array:
    out = np.asarray(mat, dtype=float)
    if out.size == 0 and out.ndim < 2:
        return np.zeros((n, 0), dtype=float)
    if out.ndim == 1:
        return out.reshape(-1, 1)
    return out


def _solve_block(lhs: Array, rhs: Array) -> Array:
    if lhs.size == 0:
        return np.zeros((lhs.shape[1], rhs.shape[1]), dtype=complex)
    return np.linalg.solve(lhs, rhs)


def _check_inputs(
    G0: Array, G1: Array, const: Array, G2: Array, G3: Array
) -> None:
    n = G0.shape[0]
    if G0.shape != (n, n):
        raise DimensionError(f"G0 must be square, got {G0.shape}")
    if G1.shape != (n, n):
        raise DimensionError(f"G1 shape mismatch: expected {(n, n)}, got {G1.shape}")
    if const.shape != (n,):
        raise DimensionError(f"const must have {n} entries, got {const.size}")
    if G2.shape[0] != n:
        raise DimensionError(f"G2 must have {n} rows, got {G2.shape[0]}")
    if G3.shape[0] != n:
        raise DimensionError(f"G3 must have {n} rows, got {G3.shape[0]}")


def solve_re(
    G0: Array,
    G1: Array,
    const: Array | None,
    G2: Array,
    G3: Array,
    *,
    div: float | None = None,
    realsmall: float = 1e-6,
) -> REResult:
    """Solve ``G0 y_t = G1 y_{t-1} + const + G2 eps_t + G3 eta_t``.

    Parameters
    ----------
    G0, G1 : Array, shape (n, n)
        Pencil of the system.
    const : Array or None
        Constant vector; zeros when ``None``.
    G2 : Array, shape (n, n_shocks)
        Loading of the exogenous shocks.
    G3 : Array, shape (n, n_eta)
        Loading of the expectational errors.
    div : float or None
        Modulus separating stable from unstable roots.  Chosen
        automatically (slightly above one) when ``None``.
    realsmall : float
        Threshold for negligible singular values and QZ diagonals.

    Returns
    -------
    REResult
        The solution matrices and the ``eu`` flags.  When the pencil has
        coincident zeros ``eu == (-2, -2)`` and the transition matrices are
        zero-filled.

    Raises
    ------
    DimensionError
        If the inputs have inconsistent shapes.
    numpy.linalg.LinAlgError
        If the transformed system is singular.
    """
    G0 = np.atleast_2d(np.asarray(G0, dtype=float))
    G1 = np.atleast_2d(np.asarray(G1, dtype=float))
    n = G0.shape[0]
    G2 = _as_columns(G2, n)
    G3 = _as_columns(G3, n)
    c = np.zeros(n) if const is None else np.asarray(const, dtype=float).reshape(-1)
    _check_inputs(G0, G1, c, G2, G3)
    n_shocks = G2.shape[1]

    a, b, _, _ = qz(G0, G1, output="complex")
    alpha, beta = np.diag(a), np.diag(b)
    div = select_stability_divider(alpha, beta, div=div, realsmall=realsmall)

    if has_coincident_zeros(alpha, beta, realsmall):
        return REResult(
            B1=np.zeros((n, n)),
            const=np.zeros(n),
            B2=np.zeros((n, n_shocks)),
            fmat=np.zeros((0, 0)),
            fwt=np.zeros((0, n_shocks)),
            ywt=np.zeros((n, 0)),
            gev=np.column_stack([alpha, beta]),
            eu=ExistenceUniqueness(-2, -2),
        )

    def stable(alpha: Array, beta: Array) -> Array:
        return np.abs(beta) <= div * np.abs(alpha)

    stable_selector: Any = stable
    a, b, alpha, beta, Q, Z = ordqz(G0, G1, sort=stable_selector, output="complex")
    gev = np.column_stack([alpha, beta])

    nunstab = count_unstable(alpha, beta, div)
    nstab = n - nunstab
    q = Q.conj().T
    q1, q2 = q[:nstab, :], q[nstab:, :]
    usix = slice(nstab, n)

    ueta, deta, veta = _truncated_svd(q2 @ G3, realsmall)
    exist = int(deta.size >= nunstab)

    ueta1, deta1, veta1 = _truncated_svd(q1 @ G3, realsmall)
    if veta1.shape[1] == 0:
        unique = 1
    else:
        loose = veta1 - veta @ (veta.conj().T @ veta1)
        dl = svd(loose, compute_uv=False)
        unique = int(np.sum(np.abs(dl) > realsmall * n) == 0)

    # stable block rows purged of the expectational errors
    coupling = (
        ueta @ (veta.conj().T / deta[:, None]) @ (veta1 * deta1) @ ueta1.conj().T
    )
    tmat = np.hstack([np.eye(nstab), -coupling.conj().T])

    lhs = np.vstack(
        [tmat @ a, np.hstack([np.zeros((nunstab, nstab)), np.eye(nunstab)])]
    )
    rhs = np.vstack([tmat @ b, np.zeros((nunstab, n))])
    lhs_inv = np.linalg.inv(lhs)
    transition = lhs_inv @ rhs

    const_part = np.vstack(
        [
            tmat @ q @ c[:, None],
            _solve_block(a[usix, usix] - b[usix, usix], q2 @ c[:, None]),
        ]
    )
    constant = lhs_inv @ const_part
    impact = lhs_inv @ np.vstack(
        [tmat @ q @ G2, np.zeros((nunstab, n_shocks))]
    )

    fmat = _solve_block(b[usix, usix], a[usix, usix])
    fwt = -_solve_block(b[usix, usix], q2 @ G2)
    ywt = Z @ lhs_inv[:, usix]

    return REResult(
        B1=np.real(Z @ transition @ Z.conj().T),
        const=np.real(Z @ constant).reshape(-1),
        B2=np.real(Z @ impact),
        fmat=fmat,
        fwt=fwt,
        ywt=ywt,
        gev=gev,
        eu=ExistenceUniqueness(exist, unique),
    )
