"""Tests for the rewrite of first-order conditions without expectations.

A first-order condition whose row of ``G0`` vanishes for the chosen
parameters only restricts the lagged state.  The pre-filter moves that
restriction to the current period and removes the matching expectational
error column from ``G3``.
"""

import numpy as np
import pytest

from lqree_py.model import DimensionError
from lqree_py.prefilter import (
    DegenerateSystemError,
    find_degenerate_rows,
    prefilter_degenerate_rows,
)


def _system():
    G0 = np.array(
        [
            [0.0, 0.0, 0.0],
            [1.0, 2.0, 0.0],
            [0.0, 0.0, 1.0],
        ]
    )
    G1 = np.array(
        [
            [1.0, -0.5, 0.0],
            [0.0, 0.0, 0.3],
            [0.0, 0.0, 0.9],
        ]
    )
    G3 = np.array(
        [
            [1.0, 0.0],
            [0.0, 1.0],
            [0.0, 0.0],
        ]
    )
    return G0, G1, G3


def test_prefilter_is_noop_without_zero_rows():
    G0, G1, G3 = _system()
    G0[0, 0] = 1.0

    result = prefilter_degenerate_rows(G0, G1, G3, ny=2)

    assert result.rows == ()
    assert not result.changed
    np.testing.assert_array_equal(result.G0, G0)
    np.testing.assert_array_equal(result.G1, G1)
    np.testing.assert_array_equal(result.G3, G3)


def test_prefilter_rewrites_zero_row_as_identity():
    G0, G1, G3 = _system()

    result = prefilter_degenerate_rows(G0, G1, G3, ny=2)

    assert result.rows == (0,)
    np.testing.assert_array_equal(result.G0[0], -G1[0])
    np.testing.assert_array_equal(result.G1[0], np.zeros(3))
    np.testing.assert_array_equal(result.G3, G3[:, [1]])
    np.testing.assert_array_equal(result.G0[1:], G0[1:])
    np.testing.assert_array_equal(result.G1[1:], G1[1:])


def test_prefilter_does_not_mutate_inputs():
    G0, G1, G3 = _system()
    originals = [G0.copy(), G1.copy(), G3.copy()]

    prefilter_degenerate_rows(G0, G1, G3, ny=2)

    for before, after in zip(originals, (G0, G1, G3)):
        np.testing.assert_array_equal(before, after)


def test_prefilter_patches_several_rows_independently():
    G0, G1, G3 = _system()
    G0[1, :] = 0.0

    result = prefilter_degenerate_rows(G0, G1, G3, ny=2)

    assert result.rows == (0, 1)
    np.testing.assert_array_equal(result.G0[:2], -G1[:2])
    np.testing.assert_array_equal(result.G1[:2], np.zeros((2, 3)))
    assert result.G3.shape == (3, 0)


def test_prefilter_only_scans_expectational_rows():
    G0, G1, G3 = _system()
    G0[2, :] = 0.0

    assert find_degenerate_rows(G0, ny=2) == (0,)


def test_prefilter_is_idempotent():
    G0, G1, G3 = _system()

    once = prefilter_degenerate_rows(G0, G1, G3, ny=2)
    twice = prefilter_degenerate_rows(once.G0, once.G1, once.G3, ny=2)

    assert find_degenerate_rows(once.G0, ny=2) == ()
    assert twice.rows == ()
    np.testing.assert_array_equal(twice.G0, once.G0)
    np.testing.assert_array_equal(twice.G1, once.G1)
    np.testing.assert_array_equal(twice.G3, once.G3)


def test_prefilter_rejects_empty_equation():
    G0, G1, G3 = _system()
    G1[0, :] = 0.0

    with pytest.raises(DegenerateSystemError):
        prefilter_degenerate_rows(G0, G1, G3, ny=2)


def test_prefilter_requires_matching_expectational_column():
    G0, G1, _ = _system()

    with pytest.raises(DimensionError):
        prefilter_degenerate_rows(G0, G1, np.zeros((3, 0)), ny=2)
