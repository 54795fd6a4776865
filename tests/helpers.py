"""Shared test helpers for the lqree_py test suite.

Provides small LQ coefficient bundles whose equilibrium is known in closed
form.  The endogenous variable follows the hybrid first-order condition

    y_{t-1} = gamma * y_{t-2} + beta * E_{t-1} y_t + kappa * csi_{t-1}

and the exogenous state is an AR(1), ``csi_t = rho * csi_{t-1} + eps_t``.
The stable solution is

    y_t = m * y_{t-1} + a * csi_t

where ``m`` is the stable root of ``beta * m**2 - m + gamma = 0`` and
``a = kappa / (1 - beta * (m + rho))``.  Optionally one multiplier obeys

    GLM_t = glm_rule[0] * y_t + glm_rule[1] * csi_t + glm_persistence * GLM_{t-1}

which is an exact static rule when ``glm_persistence == 0``.
"""

import numpy as np

from lqree_py.model import LQMatrices


def stable_root(beta: float, gamma: float) -> float:
    """Stable root of ``beta * m**2 - m + gamma = 0``."""
    return (1.0 - np.sqrt(1.0 - 4.0 * beta * gamma)) / (2.0 * beta)


def csi_loading(beta: float, gamma: float, kappa: float, rho: float) -> float:
    return kappa / (1.0 - beta * (stable_root(beta, gamma) + rho))


def make_policy_problem(
    beta: float = 0.5,
    gamma: float = 0.2,
    kappa: float = 0.3,
    rho: float = 0.8,
    glm_rule: tuple[float, float] = (0.5, -0.3),
    glm_persistence: float = 0.0,
    with_multiplier: bool = True,
    n_forward: int = 0,
    forward_loading: float = 2.0,
) -> tuple[LQMatrices, tuple[str, ...]]:
    """Build an LQ bundle with ``ny = ncsi = 1`` and ``nF``, ``nG`` 0 or 1.

    With ``n_forward=1`` a forward multiplier ``FLM_t = forward_loading * y_t``
    is added; it never feeds back into the other variables.

    Returns
    -------
    (LQMatrices, tuple[str, ...])
        The bundle and the labels of its augmented state.
    """
    current_block = ["y_t", "csi_t"] + ["FLM_t"] * n_forward
    lag_block = ["y_tL", "csi_tL"]
    if with_multiplier:
        current_block.append("GLM_t")
        lag_block.append("GLM_tL")
    labels = tuple(current_block + lag_block)
    idx = {name: i for i, name in enumerate(labels)}
    nk = len(labels)
    nG = 1 if with_multiplier else 0

    G0 = np.zeros((nk, nk))
    G1 = np.zeros((nk, nk))
    G2 = np.zeros((nk, 1))
    G3 = np.zeros((nk, 1))

    row = 0
    G0[row, idx["y_t"]] = beta
    G0[row, idx["y_tL"]] = -1.0
    G0[row, idx["csi_tL"]] = kappa
    G1[row, idx["y_tL"]] = -gamma
    G3[row, 0] = beta

    row += 1
    G0[row, idx["csi_t"]] = 1.0
    G1[row, idx["csi_t"]] = rho
    G2[row, 0] = 1.0

    if n_forward:
        row += 1
        G0[row, idx["FLM_t"]] = 1.0
        G0[row, idx["y_t"]] = -forward_loading

    if with_multiplier:
        row += 1
        G0[row, idx["GLM_t"]] = 1.0
        G0[row, idx["y_t"]] = -glm_rule[0]
        G0[row, idx["csi_t"]] = -glm_rule[1]
        G1[row, idx["GLM_t"]] = glm_persistence

    for current, lagged in (("y_t", "y_tL"), ("csi_t", "csi_tL"), ("GLM_t", "GLM_tL")):
        if lagged not in idx:
            continue
        row += 1
        G0[row, idx[lagged]] = 1.0
        G1[row, idx[current]] = 1.0

    matrices = LQMatrices(
        A0=np.zeros((1, 1)),
        B0=np.zeros((1, 1)),
        C0=np.zeros((n_forward, 1)),
        D0=np.zeros((nG, 1)),
        G0=G0,
        G1=G1,
        G2=G2,
        G3=G3,
    )
    return matrices, labels


def simulate(transition: np.ndarray, impact: np.ndarray, shocks: np.ndarray) -> np.ndarray:
    """Iterate ``x_t = transition @ x_{t-1} + impact @ e_t`` from zero."""
    state = np.zeros(transition.shape[0])
    path = []
    for e in shocks:
        state = transition @ state + impact @ e
        path.append(state)
    return np.asarray(path)
