"""Numerical LQ coefficient bundle and state-vector bookkeeping.

The LQ approximation of Benigno and Woodford (2008) delivers the first-order
conditions of the optimal-policy problem as a linear expectational system

.. math::

    G_0 k_t = G_1 k_{t-1} + G_2 \\varepsilon_t + G_3 \\eta_t

over the augmented state

.. math::

    k_t = (\\hat{y}_t, \\xi_t, \\varphi^F_t, \\varphi^G_t,
           \\hat{y}_{t-1}, \\xi_{t-1}, \\varphi^G_{t-1})

where :math:`\\hat{y}` are the endogenous variables, :math:`\\xi` the
exogenous states, and :math:`\\varphi^F`, :math:`\\varphi^G` the Lagrange
multipliers of the forward-looking and the remaining constraints.  The
block sizes are implied by the LQ coefficient matrices ``A0`` (``ny`` rows),
``B0`` (``ncsi`` columns), ``C0`` (``nF`` rows), and ``D0`` (``nG`` rows).

References
----------
Benigno, P. and Woodford, M. (2008). "Linear-Quadratic Approximation of
    Optimal Policy Problems." *NBER Working Paper* 12672.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import numpy as np

Array = np.ndarray

MATRIX_KEYS = ("A0", "B0", "C0", "D0", "G0", "G1", "G2", "G3")


class DimensionError(ValueError):
    """Raised when LQ matrices are inconsistent with their block sizes."""


def _as_float_matrix(array: Array | Sequence[Sequence[float]], name: str) -> Array:
    out = np.array(array, dtype=float)
    if out.size == 0 and out.ndim < 2:
        return np.zeros((0, 0), dtype=float)
    if out.ndim != 2:
        raise DimensionError(f"{name} must be a 2D matrix, got {out.ndim} dimensions")
    return out


@dataclass(frozen=True)
class BlockSizes:
    """Sizes of the variable blocks of the augmented LQ state.

    Attributes
    ----------
    ny : int
        Number of endogenous variables ``hy``.
    ncsi : int
        Number of exogenous states ``csi`` (one shock each).
    nF : int
        Number of forward-looking constraint multipliers ``FLM``.
    nG : int
        Number of remaining constraint multipliers ``GLM``.
    """

    ny: int
    ncsi: int
    nF: int
    nG: int

    def __post_init__(self) -> None:
        for name in ("ny", "ncsi", "nF", "nG"):
            if int(getattr(self, name)) < 0:
                raise DimensionError(f"{name} must be non-negative")

    @property
    def nk(self) -> int:
        """Size of the augmented state, current and lagged blocks."""
        return 2 * self.ny + 2 * self.ncsi + self.nF + 2 * self.nG

    @property
    def nz(self) -> int:
        """Size of the exogenous-plus-endogenous block ``(hy, csi)``."""
        return self.ny + self.ncsi

    @property
    def n_current(self) -> int:
        """Size of the current-period block ``(hy, csi, FLM, GLM)``."""
        return self.ny + self.ncsi + self.nF + self.nG

    @property
    def n_partial(self) -> int:
        """State size when multipliers ``GLM`` cannot be eliminated."""
        return self.ny + self.ncsi + self.nG

    def slices(self) -> dict[str, slice]:
        """Contiguous index ranges of each block inside ``k_t``."""
        bounds: dict[str, slice] = {}
        start = 0
        for name, size in (
            ("hy", self.ny),
            ("csi", self.ncsi),
            ("FLM", self.nF),
            ("GLM", self.nG),
            ("hy_lag", self.ny),
            ("csi_lag", self.ncsi),
            ("GLM_lag", self.nG),
        ):
            bounds[name] = slice(start, start + size)
            start += size
        return bounds


@dataclass(frozen=True)
class LQMatrices:
    """Numerical matrices of an LQ approximation.

    ``A0``, ``B0``, ``C0`` and ``D0`` only carry the block sizes; the RE
    system itself is ``G0, G1, G2, G3``.

    Raises
    ------
    DimensionError
        If ``G0``/``G1`` are not ``nk x nk``, ``G2`` is not ``nk x ncsi``,
        or ``G3`` does not have ``nk`` rows.
    """

    A0: Array
    B0: Array
    C0: Array
    D0: Array
    G0: Array
    G1: Array
    G2: Array
    G3: Array

    def __post_init__(self) -> None:
        for key in MATRIX_KEYS:
            matrix = _as_float_matrix(getattr(self, key), key)
            matrix.setflags(write=False)
            object.__setattr__(self, key, matrix)

        nk = self.blocks.nk
        ncsi = self.blocks.ncsi
        expected = {
            "G0": (nk, nk),
            "G1": (nk, nk),
            "G2": (nk, ncsi),
        }
        for key, shape in expected.items():
            actual = getattr(self, key).shape
            if actual != shape:
                raise DimensionError(
                    f"{key} shape mismatch: expected {shape}, got {actual}"
                )
        if self.G3.shape[0] != nk:
            raise DimensionError(
                f"G3 must have {nk} rows, got {self.G3.shape[0]}"
            )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "LQMatrices":
        """Build the bundle from a dict-like with the eight matrix keys."""
        missing = [key for key in MATRIX_KEYS if key not in mapping]
        if missing:
            raise DimensionError(f"Missing LQ matrices: {', '.join(missing)}")
        return cls(**{key: mapping[key] for key in MATRIX_KEYS})

    @property
    def blocks(self) -> BlockSizes:
        return BlockSizes(
            ny=int(self.A0.shape[0]),
            ncsi=int(self.B0.shape[1]),
            nF=int(self.C0.shape[0]),
            nG=int(self.D0.shape[0]),
        )

    @property
    def n_expectational(self) -> int:
        """Number of expectational-error columns in ``G3``."""
        return int(self.G3.shape[1])


def default_state_labels(blocks: BlockSizes) -> tuple[str, ...]:
    """Labels for ``k_t`` in block order, e.g. ``y1_t``, ``csi1_tL``."""
    labels: list[str] = []
    for prefix, size, suffix in (
        ("y", blocks.ny, "_t"),
        ("csi", blocks.ncsi, "_t"),
        ("FLM", blocks.nF, "_t"),
        ("GLM", blocks.nG, "_t"),
        ("y", blocks.ny, "_tL"),
        ("csi", blocks.ncsi, "_tL"),
        ("GLM", blocks.nG, "_tL"),
    ):
        labels.extend(f"{prefix}{i + 1}{suffix}" for i in range(size))
    return tuple(labels)


def validate_state_labels(
    labels: Sequence[Any] | None, blocks: BlockSizes
) -> tuple[str, ...]:
    if labels is None:
        return default_state_labels(blocks)
    out = tuple(str(label) for label in labels)
    if len(out) != blocks.nk:
        raise DimensionError(
            f"Expected {blocks.nk} state labels, got {len(out)}"
        )
    return out
