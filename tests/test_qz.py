"""Tests for the generalised eigenvalue helpers and the ``eu`` return code."""

import numpy as np
import pytest

from lqree_py.qz import (
    ExistenceUniqueness,
    compute_generalized_eigenvalues,
    count_unstable,
    has_coincident_zeros,
    select_stability_divider,
)


@pytest.mark.parametrize(
    "eu, reason, text",
    [
        ((1, 1), "ok", None),
        ((0, 1), "no_stable_solution", "Solution does not exist!!!"),
        ((1, 0), "indeterminacy", "Solution is not unique!!!"),
        ((-2, -2), "coincident_zeros", "Coincident zeros!!!"),
    ],
)
def test_existence_uniqueness_reason_and_message(eu, reason, text):
    code = ExistenceUniqueness(*eu)

    assert code.reason == reason
    assert code.ok == (reason == "ok")
    message = code.describe()
    assert message.startswith(f"Warning: eu = ({eu[0]},{eu[1]})")
    if text is not None:
        assert message.endswith(text)


def test_generalized_eigenvalues_map_singular_alpha_to_infinity():
    alpha = np.array([1.0, 2.0, 0.0])
    beta = np.array([0.5, 3.0, 1.0])

    roots = compute_generalized_eigenvalues(alpha, beta, singular_tol=1e-12)

    np.testing.assert_allclose(roots[:2], [0.5, 1.5])
    assert np.isinf(roots[2])


def test_divider_moves_below_roots_just_above_one():
    alpha = np.ones(3)
    beta = np.array([0.9, 1.005, 1.5])

    div = select_stability_divider(alpha, beta)

    assert div == pytest.approx(0.5 * (1.0 + 1.005))
    assert count_unstable(alpha, beta, div) == 2


def test_divider_keeps_default_and_explicit_values():
    alpha = np.ones(2)
    beta = np.array([0.5, 1.5])

    assert select_stability_divider(alpha, beta) == pytest.approx(1.01)
    assert select_stability_divider(alpha, beta, div=2.0) == 2.0
    assert count_unstable(alpha, beta, 2.0) == 0


def test_coincident_zeros_detection():
    assert has_coincident_zeros(np.array([1.0, 1e-9]), np.array([0.0, 1e-9]), 1e-6)
    assert not has_coincident_zeros(np.array([1.0, 0.0]), np.array([0.0, 1.0]), 1e-6)


def test_divider_ignores_roots_with_negligible_leading_diagonal():
    alpha = np.array([1e-9, 1.0])
    beta = np.array([1.005e-9, 0.5])

    assert select_stability_divider(alpha, beta) == pytest.approx(1.01)
    assert select_stability_divider(alpha[1:], np.array([1.005])) == pytest.approx(1.0025)
