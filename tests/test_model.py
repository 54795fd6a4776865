import numpy as np
import pytest

from lqree_py.model import (
    BlockSizes,
    DimensionError,
    LQMatrices,
    default_state_labels,
    validate_state_labels,
)
from helpers import make_policy_problem


def test_block_sizes_follow_size_carriers():
    matrices, _ = make_policy_problem()
    blocks = matrices.blocks

    assert blocks == BlockSizes(ny=1, ncsi=1, nF=0, nG=1)
    assert blocks.nk == 6
    assert blocks.nz == 2
    assert blocks.n_current == 3
    assert blocks.n_partial == 3
    assert matrices.n_expectational == 1


def test_block_slices_cover_state_in_order():
    blocks = BlockSizes(ny=2, ncsi=1, nF=1, nG=1)
    slices = blocks.slices()

    assert list(slices) == ["hy", "csi", "FLM", "GLM", "hy_lag", "csi_lag", "GLM_lag"]
    assert slices["hy"] == slice(0, 2)
    assert slices["FLM"] == slice(3, 4)
    assert slices["GLM_lag"] == slice(8, 9)
    assert slices["GLM_lag"].stop == blocks.nk


def test_negative_block_size_is_rejected():
    with pytest.raises(DimensionError):
        BlockSizes(ny=-1, ncsi=1, nF=0, nG=0)


@pytest.mark.parametrize(
    "key, shape",
    [("G0", (5, 6)), ("G1", (6, 5)), ("G2", (6, 2)), ("G3", (5, 1))],
)
def test_inconsistent_matrix_shapes_raise(key, shape):
    matrices, _ = make_policy_problem()
    fields = {name: getattr(matrices, name) for name in ("A0", "B0", "C0", "D0", "G0", "G1", "G2", "G3")}
    fields[key] = np.zeros(shape)

    with pytest.raises(DimensionError, match=key):
        LQMatrices(**fields)


def test_from_mapping_reports_missing_keys():
    matrices, _ = make_policy_problem()
    mapping = {"A0": matrices.A0, "B0": matrices.B0, "G0": matrices.G0}

    with pytest.raises(DimensionError, match="C0"):
        LQMatrices.from_mapping(mapping)


def test_matrices_are_read_only_copies():
    matrices, _ = make_policy_problem()
    source = np.array(matrices.G0)
    rebuilt = LQMatrices(
        A0=matrices.A0,
        B0=matrices.B0,
        C0=matrices.C0,
        D0=matrices.D0,
        G0=source,
        G1=matrices.G1,
        G2=matrices.G2,
        G3=matrices.G3,
    )

    with pytest.raises(ValueError):
        rebuilt.G0[0, 0] = 99.0
    source[0, 0] = 99.0
    assert rebuilt.G0[0, 0] == matrices.G0[0, 0]


def test_default_state_labels_follow_block_order():
    blocks = BlockSizes(ny=2, ncsi=1, nF=1, nG=1)

    assert default_state_labels(blocks) == (
        "y1_t",
        "y2_t",
        "csi1_t",
        "FLM1_t",
        "GLM1_t",
        "y1_tL",
        "y2_tL",
        "csi1_tL",
        "GLM1_tL",
    )


def test_validate_state_labels():
    blocks = BlockSizes(ny=1, ncsi=1, nF=0, nG=0)

    assert validate_state_labels(None, blocks) == ("y1_t", "csi1_t", "y1_tL", "csi1_tL")
    assert validate_state_labels(["a", "b", "c", "d"], blocks) == ("a", "b", "c", "d")
    with pytest.raises(DimensionError):
        validate_state_labels(["a", "b"], blocks)
