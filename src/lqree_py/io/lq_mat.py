from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any, Mapping, Sequence

import numpy as np
from scipy.io import loadmat, savemat

from ..model import MATRIX_KEYS, LQMatrices, validate_state_labels

Array = np.ndarray

LABELS_KEY = "LQk_t"
STRUCT_KEY = "LQmat"


@dataclass(frozen=True)
class LQProblem:
    """An LQ coefficient bundle and the labels of its augmented state."""

    path: Path | None
    matrices: LQMatrices
    labels: tuple[str, ...]


def load_lq_problem(path: str | Path) -> LQProblem:
    """Read an ``LQmat`` bundle from a ``.mat``, ``.json`` or ``.npz`` file.

    The matrices may sit in an ``LQmat`` struct/object or at the top level.
    Labels are read from ``LQk_t`` when present and generated otherwise.
    """
    source = Path(path)
    suffix = source.suffix.lower()
    if suffix == ".mat":
        payload = _read_mat(source)
    elif suffix == ".json":
        payload = json.loads(source.read_text(encoding="utf-8"))
    elif suffix == ".npz":
        with np.load(source, allow_pickle=False) as archive:
            payload = {key: archive[key] for key in archive.files}
    else:
        raise ValueError(f"Unsupported LQ matrices format: {source.suffix}")

    raw = payload.get(STRUCT_KEY, payload)
    matrices = LQMatrices.from_mapping(_matrix_mapping(raw))
    labels_obj = payload.get(LABELS_KEY)
    labels = None if labels_obj is None else _to_name_tuple(labels_obj)
    return LQProblem(
        path=source,
        matrices=matrices,
        labels=validate_state_labels(labels, matrices.blocks),
    )


def save_lq_problem(
    matrices: LQMatrices,
    path: str | Path,
    labels: Sequence[str] | None = None,
) -> None:
    """Write a bundle in the format implied by the file suffix."""
    target = Path(path)
    state_labels = validate_state_labels(labels, matrices.blocks)
    fields = {key: np.asarray(getattr(matrices, key), dtype=float) for key in MATRIX_KEYS}
    suffix = target.suffix.lower()
    if suffix == ".mat":
        savemat(
            target,
            {STRUCT_KEY: fields, LABELS_KEY: np.array(state_labels, dtype=object)},
        )
    elif suffix == ".json":
        payload = {
            STRUCT_KEY: {key: value.tolist() for key, value in fields.items()},
            LABELS_KEY: list(state_labels),
        }
        target.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    elif suffix == ".npz":
        np.savez(target, **fields, **{LABELS_KEY: np.array(state_labels, dtype=str)})
    else:
        raise ValueError(f"Unsupported LQ matrices format: {target.suffix}")


def _read_mat(path: Path) -> dict[str, Any]:
    payload = loadmat(path, squeeze_me=False, struct_as_record=False)
    out: dict[str, Any] = {k: v for k, v in payload.items() if not k.startswith("__")}
    struct = out.get(STRUCT_KEY)
    if struct is not None:
        record = np.asarray(struct).reshape(-1)[0]
        out[STRUCT_KEY] = {
            name: getattr(record, name) for name in record._fieldnames
        }
    return out


def _matrix_mapping(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {key: _as_matrix(raw[key]) for key in MATRIX_KEYS if key in raw}


def _as_matrix(value: Any) -> Array:
    out = np.asarray(value, dtype=float)
    if out.size == 0:
        rows = out.shape[0] if out.ndim == 2 else 0
        cols = out.shape[1] if out.ndim == 2 else 0
        return np.zeros((rows, cols), dtype=float)
    return out


def _to_name_tuple(names_obj: Any) -> tuple[str, ...]:
    arr = np.asarray(names_obj, dtype=object).reshape(-1)
    names: list[str] = []
    for item in arr:
        while isinstance(item, np.ndarray):
            item = item.reshape(-1)[0] if item.size else ""
        names.append(str(item).strip())
    return tuple(names)
