"""Optimal-policy equilibrium of an LQ approximation.

Algorithm outline
-----------------
1. Validate the coefficient bundle against its block sizes.
2. Rewrite first-order conditions whose expectational row vanished for
   the given parameters (:mod:`lqree_py.prefilter`).
3. Solve ``G0 k_t = G1 k_{t-1} + G2 eps_t + G3 eta_t`` with a zero
   constant (:func:`lqree_py.gensys.solve_re`).  A return code other than
   ``(1, 1)`` is reported with a :class:`~lqree_py.qz.SolutionWarning`;
   the computation goes on with whatever the solver returned.
4. Reduce the state (:func:`lqree_py.reduction.reduce_state`).

References
----------
Benigno, P. and Woodford, M. (2008). "Linear-Quadratic Approximation of
    Optimal Policy Problems." *NBER Working Paper* 12672.
Sims, C. A. (2002). "Solving Linear Rational Expectations Models."
    *Computational Economics*, 20(1-2), 1-20.
"""

from __future__ import annotations

from typing import Sequence
import warnings

import numpy as np

from .gensys import REResult, solve_re
from .model import LQMatrices, validate_state_labels
from .prefilter import prefilter_degenerate_rows
from .qz import SolutionWarning
from .reduction import reduce_state
from .solution import REESolution


def solve_raw(
    matrices: LQMatrices,
    *,
    div: float | None = None,
    realsmall: float = 1e-6,
) -> REResult:
    """Pre-filter the system and solve it over the full augmented state."""
    blocks = matrices.blocks
    cleaned = prefilter_degenerate_rows(
        matrices.G0, matrices.G1, matrices.G3, blocks.ny
    )
    result = solve_re(
        cleaned.G0,
        cleaned.G1,
        np.zeros(blocks.nk),
        matrices.G2,
        cleaned.G3,
        div=div,
        realsmall=realsmall,
    )
    if not result.eu.ok:
        warnings.warn(result.eu.describe(), SolutionWarning, stacklevel=2)
    return result


def solve_lq_ree(
    matrices: LQMatrices,
    labels: Sequence[str] | None = None,
    *,
    precision: float = 1e-6,
    reduce: bool = True,
    return_labels: bool = False,
    div: float | None = None,
) -> REESolution | tuple[REESolution, tuple[str, ...]]:
    """Solve for the rational-expectations equilibrium of an LQ problem.

    Parameters
    ----------
    matrices : LQMatrices
        Numerical LQ coefficient bundle.
    labels : Sequence[str] or None
        Labels of the augmented state ``k_t``, one per row of ``G0``.
        Generated with :func:`~lqree_py.model.default_state_labels` when
        ``None``.
    precision : float
        Grid on which the multiplier-rule residual must round to zero for
        the multipliers to be eliminated.  Default ``1e-6``.
    reduce : bool
        Reduce the state as far as possible.  Default ``True``.
    return_labels : bool
        Also return the labels of the reduced state.
    div : float or None
        Stability divider passed to the RE solver.

    Returns
    -------
    REESolution or (REESolution, tuple[str, ...])
        The equilibrium law of motion, and its state labels when
        *return_labels* is set.

    Raises
    ------
    DimensionError
        If the labels or matrices are inconsistent with the block sizes.
    DegenerateSystemError
        If an equation is empty in both ``G0`` and ``G1``.
    """
    blocks = matrices.blocks
    state_labels = validate_state_labels(labels, blocks)
    raw = solve_raw(matrices, div=div)

    solution = reduce_state(
        raw.B1,
        raw.B2,
        blocks,
        state_labels,
        raw.eu,
        precision=precision,
        reduce=reduce,
    )
    if return_labels:
        return solution, solution.z_t
    return solution
