from __future__ import annotations

from pathlib import Path
from typing import Annotated
import warnings

import numpy as np
import typer

from .io import load_lq_problem
from .model import LQMatrices
from .serialization import save_solution, save_solution_mat
from .solution import REESolution
from .solver import solve_lq_ree

app = typer.Typer(help="Optimal-policy RE solutions of LQ approximations")


def _demo_matrices(
    beta: float, gamma: float, kappa: float, rho: float
) -> tuple[LQMatrices, tuple[str, ...]]:
    # k_t = (y_t, csi_t, GLM_t, y_tL, csi_tL, GLM_tL)
    G0 = np.array(
        [
            [beta, 0.0, 0.0, -1.0, kappa, 0.0],
            [0.0, 1.0, 0.0, 0.0, 0.0, 0.0],
            [-0.5, 0.3, 1.0, 0.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 1.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 0.0, 0.0, 1.0],
        ]
    )
    G1 = np.zeros((6, 6))
    G1[0, 3] = -gamma
    G1[1, 1] = rho
    G1[3, 0] = 1.0
    G1[4, 1] = 1.0
    G1[5, 2] = 1.0
    G2 = np.zeros((6, 1))
    G2[1, 0] = 1.0
    G3 = np.zeros((6, 1))
    G3[0, 0] = beta
    matrices = LQMatrices(
        A0=np.zeros((1, 1)),
        B0=np.zeros((1, 1)),
        C0=np.zeros((0, 1)),
        D0=np.zeros((1, 1)),
        G0=G0,
        G1=G1,
        G2=G2,
        G3=G3,
    )
    labels = ("y_t", "csi_t", "GLM_t", "y_tL", "csi_tL", "GLM_tL")
    return matrices, labels


def _solve_reporting_warnings(
    matrices: LQMatrices,
    labels: tuple[str, ...] | None,
    precision: float,
    reduce: bool,
) -> REESolution:
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        solution = solve_lq_ree(matrices, labels, precision=precision, reduce=reduce)
    for item in caught:
        typer.echo(str(item.message), err=True)
    return solution


def _echo_solution(solution: REESolution) -> None:
    typer.echo(f"eu = {solution.eu.as_tuple()}")
    typer.echo(f"z_t = ({', '.join(solution.z_t)})")
    typer.echo("Phi1:")
    typer.echo(str(solution.phi1))
    typer.echo("Phi2:")
    typer.echo(str(solution.phi2))


@app.command("demo")
def demo(
    beta: Annotated[float, typer.Option(help="Weight on expected future output")] = 0.5,
    gamma: Annotated[float, typer.Option(help="Weight on lagged output")] = 0.2,
    kappa: Annotated[float, typer.Option(help="Loading on the exogenous state")] = 0.3,
    rho: Annotated[float, typer.Option(help="Persistence of the exogenous state")] = 0.8,
) -> None:
    matrices, labels = _demo_matrices(beta=beta, gamma=gamma, kappa=kappa, rho=rho)
    solution = _solve_reporting_warnings(matrices, labels, precision=1e-6, reduce=True)
    _echo_solution(solution)


@app.command("solve")
def solve_cmd(
    matrices: Annotated[str, typer.Option(help="LQmat file (.mat, .json or .npz)")],
    output: Annotated[str, typer.Option(help="Output solution path (.json or .mat)")],
    precision: Annotated[
        float, typer.Option(help="Grid for the multiplier-rule residual")
    ] = 1e-6,
    reduce: Annotated[bool, typer.Option(help="Reduce the state space")] = True,
) -> None:
    problem = load_lq_problem(matrices)
    solution = _solve_reporting_warnings(
        problem.matrices, problem.labels, precision=precision, reduce=reduce
    )
    target = Path(output)
    if target.suffix.lower() == ".mat":
        save_solution_mat(solution, target)
    else:
        save_solution(solution, target)
    typer.echo(f"REE ({solution.case}) written to {output}")


@app.command("inspect")
def inspect_cmd(
    matrices: Annotated[str, typer.Option(help="LQmat file (.mat, .json or .npz)")],
) -> None:
    problem = load_lq_problem(matrices)
    blocks = problem.matrices.blocks
    typer.echo(f"LQ matrices: {problem.path}")
    typer.echo(f"  ny={blocks.ny} ncsi={blocks.ncsi} nF={blocks.nF} nG={blocks.nG}")
    typer.echo(f"  state ({blocks.nk}): {', '.join(problem.labels)}")
    typer.echo(f"  expectational terms: {problem.matrices.n_expectational}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
