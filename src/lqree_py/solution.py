"""Rational-expectations equilibrium of an LQ problem, in reduced form.

The law of motion is

.. math::

    z_t = \\Phi_1 z_{t-1} + \\Phi_2 \\varepsilon_t

over a state ``z_t`` whose composition depends on how far the reduction
went.  Each outcome is its own frozen dataclass carrying only the fields
that apply to it:

* :class:`FullyReduced` -- ``z_t = (hy_t, csi_t)``; the multipliers
  ``GLM_t = Csi z_t`` were substituted out.
* :class:`PartiallyReduced` -- ``z_t = (hy_t, csi_t, GLM_t)``; the lag
  block is gone but the multipliers could not be eliminated.
* :class:`Unreduced` -- ``z_t = k_t``, the full augmented state.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Mapping, Sequence

import numpy as np

from .qz import ExistenceUniqueness

Array = np.ndarray


@dataclass(frozen=True)
class REESolution:
    """Fields shared by every reduction outcome.

    Attributes
    ----------
    phi1 : Array, shape (n_z, n_z)
        Transition matrix.
    phi2 : Array, shape (n_z, n_shocks)
        Shock loading matrix.
    z_t : tuple[str, ...]
        Labels of the state variables, a subsequence of the LQ labels.
    eu : ExistenceUniqueness
        Return code of the RE solver.  Check it before trusting ``phi1``.
    sy : Array, shape (ny, n_z)
        Selects the endogenous variables from ``z_t``.
    scsi : Array, shape (ncsi, n_z)
        Selects the exogenous states from ``z_t``.
    """

    case: ClassVar[str] = ""
    phi1: Array
    phi2: Array
    z_t: tuple[str, ...]
    eu: ExistenceUniqueness
    sy: Array
    scsi: Array

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, np.ndarray):
                frozen = np.array(value, dtype=float)
                frozen.setflags(write=False)
                object.__setattr__(self, field.name, frozen)

    @property
    def n_states(self) -> int:
        return len(self.z_t)

    @property
    def n_shocks(self) -> int:
        return int(self.phi2.shape[1])

    @property
    def exists(self) -> bool:
        return self.eu.exist == 1

    @property
    def unique(self) -> bool:
        return self.eu.unique == 1

    @property
    def reduced(self) -> bool:
        return False

    def selections(self) -> dict[str, Array]:
        """Selection matrices present on this outcome, in state order."""
        return {"Sy": self.sy, "Scsi": self.scsi}

    def index(self, label: str) -> int:
        """Position of *label* in ``z_t``."""
        try:
            return self.z_t.index(label)
        except ValueError:
            raise KeyError(f"{label!r} is not a state variable") from None

    def transition_step(
        self, state: Array | Sequence[float], shocks: Array | Sequence[float]
    ) -> Array:
        """One step of ``z_t = Phi1 z_{t-1} + Phi2 eps_t``."""
        z = np.asarray(state, dtype=float).reshape(-1)
        e = np.asarray(shocks, dtype=float).reshape(-1)
        if z.size != self.n_states:
            raise ValueError(f"Expected state of size {self.n_states}, got {z.size}")
        if e.size != self.n_shocks:
            raise ValueError(f"Expected {self.n_shocks} shocks, got {e.size}")
        return self.phi1 @ z + self.phi2 @ e

    def to_dict(self) -> dict[str, Any]:
        """Record with the field names of the ``REE`` structure."""
        out: dict[str, Any] = {
            "Phi1": self.phi1,
            "Phi2": self.phi2,
            "z_t": list(self.z_t),
            "eu": list(self.eu.as_tuple()),
        }
        out.update(self.selections())
        return out


@dataclass(frozen=True)
class FullyReduced(REESolution):
    """Reduced state ``(hy_t, csi_t)`` with ``GLM_t = csi @ z_t``."""

    case: ClassVar[str] = "fully_reduced"
    csi: Array

    @property
    def reduced(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["Csi"] = self.csi
        return out


@dataclass(frozen=True)
class PartiallyReduced(REESolution):
    """State ``(hy_t, csi_t, GLM_t)`` after a failed multiplier elimination.

    Attributes
    ----------
    svphi : Array, shape (nG, n_z)
        Selects the multipliers ``GLM_t``.
    phi_vphi_z : Array, shape (nG, ny + ncsi)
        Response of ``GLM_t`` to ``(hy_{t-1}, csi_{t-1})``.
    phi_vphi_vphi : Array, shape (nG, nG)
        Response of ``GLM_t`` to ``GLM_{t-1}``.
    phi_vphi_eps : Array, shape (nG, n_shocks)
        Response of ``GLM_t`` to the shocks.
    """

    case: ClassVar[str] = "partially_reduced"
    svphi: Array
    phi_vphi_z: Array
    phi_vphi_vphi: Array
    phi_vphi_eps: Array

    def selections(self) -> dict[str, Array]:
        return {"Sy": self.sy, "Scsi": self.scsi, "Svphi": self.svphi}

    def to_dict(self) -> dict[str, Any]:
        out = super().to_dict()
        out["Phi_vphi_z"] = self.phi_vphi_z
        out["Phi_vphi_vphi"] = self.phi_vphi_vphi
        out["Phi_vphi_eps"] = self.phi_vphi_eps
        return out


@dataclass(frozen=True)
class Unreduced(REESolution):
    """Full augmented state ``k_t`` as returned by the RE solver."""

    case: ClassVar[str] = "unreduced"
    sflm: Array
    svphi: Array

    def selections(self) -> dict[str, Array]:
        return {"Sy": self.sy, "Scsi": self.scsi, "SFLM": self.sflm, "Svphi": self.svphi}


def _matrix(payload: Mapping[str, Any], key: str, n_cols: int) -> Array:
    out = np.asarray(payload[key], dtype=float)
    if out.size == 0:
        return np.zeros((0, n_cols), dtype=float)
    return out.reshape(-1, n_cols) if out.ndim < 2 else out


def solution_from_dict(payload: Mapping[str, Any]) -> REESolution:
    """Rebuild a solution from :meth:`REESolution.to_dict` output.

    The outcome is recognised from the keys present: ``Csi`` for a full
    reduction, ``Phi_vphi_z`` for a partial one and ``SFLM`` otherwise.
    """
    z_t = tuple(str(label) for label in payload["z_t"])
    nz = len(z_t)
    phi2 = np.asarray(payload["Phi2"], dtype=float)
    n_shocks = phi2.shape[1] if phi2.ndim == 2 else 0
    eu = ExistenceUniqueness(*(int(v) for v in np.asarray(payload["eu"]).reshape(-1)))
    common: dict[str, Any] = dict(
        phi1=_matrix(payload, "Phi1", nz),
        phi2=phi2.reshape(nz, n_shocks),
        z_t=z_t,
        eu=eu,
        sy=_matrix(payload, "Sy", nz),
        scsi=_matrix(payload, "Scsi", nz),
    )
    if "Csi" in payload:
        return FullyReduced(**common, csi=_matrix(payload, "Csi", nz))
    if "Phi_vphi_z" in payload:
        n_glm = _matrix(payload, "Svphi", nz).shape[0]
        return PartiallyReduced(
            **common,
            svphi=_matrix(payload, "Svphi", nz),
            phi_vphi_z=_matrix(payload, "Phi_vphi_z", nz - n_glm),
            phi_vphi_vphi=_matrix(payload, "Phi_vphi_vphi", n_glm),
            phi_vphi_eps=_matrix(payload, "Phi_vphi_eps", n_shocks),
        )
    if "SFLM" in payload:
        return Unreduced(
            **common,
            sflm=_matrix(payload, "SFLM", nz),
            svphi=_matrix(payload, "Svphi", nz),
        )
    raise KeyError("Cannot identify the solution case from the record keys")
