"""lqree_py — Optimal-policy equilibria of linear-quadratic approximations.

This package solves the linear rational-expectations system produced by the
LQ approximation of an optimal-policy problem and reduces its solution to
the smallest state that reproduces the equilibrium dynamics.  Solutions are
computed with the generalised Schur (QZ) method of Sims (2002); the
Lagrange multipliers of the policy problem are then substituted out of the
state whenever they follow an exact static linear rule.

Key references:
    Benigno and Woodford (2008), NBER Working Paper 12672.
    Sims (2002), Computational Economics 20(1-2).
"""

from .gensys import REResult, solve_re
from .io import LQProblem, load_lq_problem, save_lq_problem
from .model import (
    BlockSizes,
    DimensionError,
    LQMatrices,
    default_state_labels,
    validate_state_labels,
)
from .prefilter import (
    DegenerateSystemError,
    PrefilterResult,
    find_degenerate_rows,
    prefilter_degenerate_rows,
)
from .qz import ExistenceUniqueness, SolutionWarning
from .reduction import (
    MultiplierFit,
    ReductionWarning,
    collapse_lags,
    eliminate_multipliers,
    reduce_state,
)
from .serialization import load_solution, save_solution, save_solution_mat
from .solution import (
    FullyReduced,
    PartiallyReduced,
    REESolution,
    Unreduced,
    solution_from_dict,
)
from .solver import solve_lq_ree, solve_raw
from .tensor_ops import kron_lstsq, residual_vanishes, round_to_grid, selection_matrix
from .version import __version__

__all__ = [
    "__version__",
    "BlockSizes",
    "LQMatrices",
    "LQProblem",
    "REResult",
    "REESolution",
    "FullyReduced",
    "PartiallyReduced",
    "Unreduced",
    "ExistenceUniqueness",
    "MultiplierFit",
    "PrefilterResult",
    "DimensionError",
    "DegenerateSystemError",
    "SolutionWarning",
    "ReductionWarning",
    "default_state_labels",
    "validate_state_labels",
    "find_degenerate_rows",
    "prefilter_degenerate_rows",
    "solve_re",
    "solve_raw",
    "solve_lq_ree",
    "collapse_lags",
    "eliminate_multipliers",
    "reduce_state",
    "kron_lstsq",
    "round_to_grid",
    "residual_vanishes",
    "selection_matrix",
    "solution_from_dict",
    "load_lq_problem",
    "save_lq_problem",
    "load_solution",
    "save_solution",
    "save_solution_mat",
]
