"""Clean-up of first-order conditions that lost their expectational term.

The first ``ny`` rows of ``G0`` are the one-period-ahead first-order
conditions of the LQ problem.  For some parameter values such a row can be
identically zero even though it was built symbolically as an expectational
equation.  The row then only restricts the lagged state, so it is rewritten
as a contemporaneous identity:

* ``G0[i] <- -G1[i]`` and ``G1[i] <- 0``;
* column ``i`` of ``G3`` is removed, since row ``i`` no longer carries an
  expectational error.

Without this the QZ step sees a singular leading matrix and misclassifies
the roots.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .model import DimensionError

Array = np.ndarray


class DegenerateSystemError(ValueError):
    """Raised when an equation is zero in both ``G0`` and ``G1``."""


@dataclass(frozen=True)
class PrefilterResult:
    G0: Array
    G1: Array
    G3: Array
    rows: tuple[int, ...]

    @property
    def changed(self) -> bool:
        return bool(self.rows)


def find_degenerate_rows(G0: Array, ny: int) -> tuple[int, ...]:
    """Indices among the first *ny* rows of *G0* that are identically zero."""
    head = np.asarray(G0, dtype=float)[:ny, :]
    return tuple(int(i) for i in np.flatnonzero(np.all(head == 0.0, axis=1)))


def prefilter_degenerate_rows(
    G0: Array, G1: Array, G3: Array, ny: int
) -> PrefilterResult:
    """Rewrite zero expectational rows of *G0* as backward-looking identities.

    The inputs are left untouched; patched copies are returned together
    with the indices of the rewritten rows.

    Raises
    ------
    DegenerateSystemError
        If a matched row of ``G1`` is also zero (the equation is empty).
    DimensionError
        If a matched row has no corresponding column in ``G3``.
    """
    G0 = np.array(G0, dtype=float)
    G1 = np.array(G1, dtype=float)
    G3 = np.array(G3, dtype=float)
    rows = find_degenerate_rows(G0, ny)
    if not rows:
        return PrefilterResult(G0=G0, G1=G1, G3=G3, rows=())

    for row in rows:
        if not np.any(G1[row, :] != 0.0):
            raise DegenerateSystemError(
                f"Equation {row} is identically zero in G0 and G1"
            )
        if row >= G3.shape[1]:
            raise DimensionError(
                f"G3 has {G3.shape[1]} columns, no expectational term for row {row}"
            )
        G0[row, :] = -G1[row, :]
        G1[row, :] = 0.0

    G3 = np.delete(G3, list(rows), axis=1)
    return PrefilterResult(G0=G0, G1=G1, G3=G3, rows=rows)
