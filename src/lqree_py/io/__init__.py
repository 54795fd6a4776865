from .lq_mat import LQProblem, load_lq_problem, save_lq_problem

__all__ = [
    "LQProblem",
    "load_lq_problem",
    "save_lq_problem",
]
