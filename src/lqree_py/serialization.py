from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import numpy as np
from scipy.io import savemat

from .solution import REESolution, solution_from_dict

Array = np.ndarray


def save_solution(solution: REESolution, path: str | Path) -> None:
    target = Path(path)
    payload = {
        "case": solution.case,
        **{key: _to_list(value) for key, value in solution.to_dict().items()},
    }
    target.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def load_solution(path: str | Path) -> REESolution:
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    return solution_from_dict(payload)


def save_solution_mat(solution: REESolution, path: str | Path) -> None:
    """Write the solution as a MATLAB ``REE`` struct."""
    record: dict[str, Any] = {}
    for key, value in solution.to_dict().items():
        if key == "z_t":
            record[key] = np.array(value, dtype=object)
        else:
            record[key] = np.asarray(value, dtype=float)
    savemat(Path(path), {"REE": record})


def _to_list(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return np.asarray(value, dtype=float).tolist()
    return value
