"""Reduction of the raw RE solution to a minimal state.

The RE solver returns ``k_t = B1 k_{t-1} + B2 eps_t`` over the augmented
state ``k_t = (hy_t, csi_t, FLM_t, GLM_t, hy_{t-1}, csi_{t-1}, GLM_{t-1})``.
Two reductions are applied:

1. The lagged block only copies last period's values, and the
   forward-looking multipliers ``FLM_t`` do not feed the dynamics once the
   unstable roots are suppressed.  Dropping both leaves
   ``x_t = (hy_t, csi_t, GLM_t)`` with ``x_t = C1 x_{t-1} + C2 eps_t``.
2. If the remaining multipliers are a static linear function of
   ``z_t = (hy_t, csi_t)``, i.e. ``GLM_t = Csi z_t`` for every realisation,
   they are substituted out.  ``Csi`` is the least-squares solution of

   .. math::

       [C1_{GLM} \\; C2_{GLM}] = Csi \\, [C1_z \\; C2_z]

   and the substitution is accepted only if the residual rounds to zero on
   the grid of the requested precision.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence
import warnings

import numpy as np

from .model import BlockSizes, DimensionError
from .qz import ExistenceUniqueness
from .solution import FullyReduced, PartiallyReduced, REESolution, Unreduced
from .tensor_ops import kron_lstsq, residual_vanishes, selection_matrix

Array = np.ndarray

REDUCTION_FAILED = "Warning: System failed to reduce. State space includes GLM_t."


class ReductionWarning(RuntimeWarning):
    """Issued when the multipliers cannot be eliminated from the state."""


@dataclass(frozen=True)
class MultiplierFit:
    """Best static rule ``GLM_t = csi @ z_t`` and its fit.

    Attributes
    ----------
    csi : Array, shape (nG, ny + ncsi)
        Least-squares coefficients.
    residual : Array, shape (nG, ny + ncsi + nG + n_shocks)
        ``C_GLM - csi @ C_z``.
    success : bool
        Whether the residual vanishes on the precision grid.
    """

    csi: Array
    residual: Array
    success: bool


def collapse_lags(B1: Array, B2: Array, blocks: BlockSizes) -> tuple[Array, Array]:
    """Drop the lag block and the ``FLM`` rows and columns.

    Returns
    -------
    C1 : Array, shape (ny + ncsi + nG, ny + ncsi + nG)
    C2 : Array, shape (ny + ncsi + nG, n_shocks)
    """
    B1 = np.asarray(B1, dtype=float)
    B2 = np.asarray(B2, dtype=float)
    if B1.shape != (blocks.nk, blocks.nk):
        raise DimensionError(
            f"B1 shape mismatch: expected {(blocks.nk, blocks.nk)}, got {B1.shape}"
        )
    if B2.shape[0] != blocks.nk:
        raise DimensionError(f"B2 must have {blocks.nk} rows, got {B2.shape[0]}")

    nz = blocks.nz
    keep = np.r_[0:nz, nz + blocks.nF : blocks.n_current]
    return B1[np.ix_(keep, keep)], B2[keep, :]


def eliminate_multipliers(
    C1: Array,
    C2: Array,
    blocks: BlockSizes,
    precision: float = 1e-6,
    *,
    materialize: bool = False,
) -> MultiplierFit:
    """Fit ``GLM_t = Csi z_t`` to the lag-collapsed dynamics.

    With no multipliers this is a passthrough that always succeeds.
    """
    nz = blocks.nz
    if blocks.nG == 0:
        return MultiplierFit(
            csi=np.zeros((0, nz)),
            residual=np.zeros((0, C1.shape[1] + C2.shape[1])),
            success=True,
        )

    C_glm = np.hstack([C1[nz:, :], C2[nz:, :]])
    C_z = np.hstack([C1[:nz, :], C2[:nz, :]])
    csi = kron_lstsq(C_z, C_glm, materialize=materialize)
    residual = C_glm - csi @ C_z
    return MultiplierFit(
        csi=csi,
        residual=residual,
        success=residual_vanishes(residual, precision),
    )


def _unreduced(
    B1: Array, B2: Array, blocks: BlockSizes, labels: tuple[str, ...], eu: ExistenceUniqueness
) -> Unreduced:
    nz = len(labels)
    return Unreduced(
        phi1=np.asarray(B1, dtype=float),
        phi2=np.asarray(B2, dtype=float),
        z_t=labels,
        eu=eu,
        sy=selection_matrix(0, blocks.ny, nz),
        scsi=selection_matrix(blocks.ny, blocks.ncsi, nz),
        sflm=selection_matrix(blocks.nz, blocks.nF, nz),
        svphi=selection_matrix(blocks.nz + blocks.nF, blocks.nG, nz),
    )


def reduce_state(
    B1: Array,
    B2: Array,
    blocks: BlockSizes,
    labels: Sequence[str],
    eu: ExistenceUniqueness,
    *,
    precision: float = 1e-6,
    reduce: bool = True,
    materialize: bool = False,
) -> REESolution:
    """Turn the raw RE solution into the smallest state the fit allows.

    Parameters
    ----------
    B1, B2 : Array
        Raw transition and shock matrices over ``k_t``.
    blocks : BlockSizes
        Sizes of the state blocks.
    labels : Sequence[str]
        Labels of ``k_t``.
    eu : ExistenceUniqueness
        Return code of the RE solver, carried into the result.
    precision : float
        Grid on which the multiplier-rule residual must round to zero.
    reduce : bool
        If ``False`` the raw solution is returned as :class:`Unreduced`.
    materialize : bool
        Form the Kronecker operator explicitly in the least-squares fit.

    Returns
    -------
    REESolution
        :class:`FullyReduced`, :class:`PartiallyReduced` (with a
        :class:`ReductionWarning`) or :class:`Unreduced`.
    """
    labels = tuple(labels)
    if len(labels) != blocks.nk:
        raise DimensionError(f"Expected {blocks.nk} state labels, got {len(labels)}")
    if not reduce:
        return _unreduced(B1, B2, blocks, labels, eu)

    C1, C2 = collapse_lags(B1, B2, blocks)
    fit = eliminate_multipliers(C1, C2, blocks, precision, materialize=materialize)
    nz = blocks.nz

    if fit.success:
        return FullyReduced(
            phi1=C1[:nz, :nz] + C1[:nz, nz:] @ fit.csi,
            phi2=C2[:nz, :],
            z_t=labels[:nz],
            eu=eu,
            sy=selection_matrix(0, blocks.ny, nz),
            scsi=selection_matrix(blocks.ny, blocks.ncsi, nz),
            csi=fit.csi,
        )

    warnings.warn(REDUCTION_FAILED, ReductionWarning, stacklevel=2)
    n_state = blocks.n_partial
    glm = slice(nz + blocks.nF, blocks.n_current)
    return PartiallyReduced(
        phi1=C1,
        phi2=C2,
        z_t=labels[:nz] + labels[glm],
        eu=eu,
        sy=selection_matrix(0, blocks.ny, n_state),
        scsi=selection_matrix(blocks.ny, blocks.ncsi, n_state),
        svphi=selection_matrix(nz, blocks.nG, n_state),
        phi_vphi_z=C1[nz:, :nz],
        phi_vphi_vphi=C1[nz:, nz:],
        phi_vphi_eps=C2[nz:, :],
    )
