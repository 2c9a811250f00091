"""
Tests for partial correlations and hat-matrix diagonals.
"""

import numpy as np
import pytest

from pystreamreg.core.compute.tolerances import DEFAULT_EPSILON
from pystreamreg.regression._diagnostics import hat_diagonal, partial_correlations
from pystreamreg.regression._reduction import include_observation
from pystreamreg.regression.state import RegressionState


def _reduce(X, y, has_intercept=True):
    state = RegressionState.empty(X.shape[1] + int(has_intercept), DEFAULT_EPSILON, has_intercept)
    for row, target in zip(X, y):
        include_observation(state, row, target)
    return state


def _residualize(v, Z):
    coef, _, _, _ = np.linalg.lstsq(Z, v, rcond=None)
    return v - Z @ coef


# ═══════════════════════════════════════════════════════════════════════
# partial_correlations
# ═══════════════════════════════════════════════════════════════════════


class TestPartialCorrelations:

    def test_pearson_after_intercept(self, simple_regression_data):
        X, y, _ = simple_regression_data
        state = _reduce(X, y)
        out = partial_correlations(state, 1)
        corr = np.corrcoef(np.column_stack([X, y]), rowvar=False)
        expected_pairs = corr[:3, :3][np.tril_indices(3, k=-1)]
        assert out.shape == (6,)
        np.testing.assert_allclose(out[:3], expected_pairs, rtol=1e-9, atol=1e-12)
        np.testing.assert_allclose(out[3:], corr[3, :3], rtol=1e-9, atol=1e-12)

    def test_pair_layout(self, simple_regression_data):
        """Pair (i, j), i < j, sits at (j-1)*j/2 + i."""
        X, y, _ = simple_regression_data
        state = _reduce(X, y)
        out = partial_correlations(state, 1)
        corr = np.corrcoef(X, rowvar=False)
        assert out[0] == pytest.approx(corr[0, 1])
        assert out[1] == pytest.approx(corr[0, 2])
        assert out[2] == pytest.approx(corr[1, 2])

    def test_conditioning_on_more_variables(self, simple_regression_data):
        X, y, _ = simple_regression_data
        state = _reduce(X, y)
        out = partial_correlations(state, 2)
        Z = np.column_stack([np.ones(len(y)), X[:, 0]])
        e1 = _residualize(X[:, 1], Z)
        e2 = _residualize(X[:, 2], Z)
        ey = _residualize(y, Z)
        assert out.shape == (3,)
        assert out[0] == pytest.approx(np.corrcoef(e1, e2)[0, 1], rel=1e-9)
        assert out[1] == pytest.approx(np.corrcoef(e1, ey)[0, 1], rel=1e-9)
        assert out[2] == pytest.approx(np.corrcoef(e2, ey)[0, 1], rel=1e-9)

    def test_minus_one_means_zero(self, simple_regression_data):
        X, y, _ = simple_regression_data
        state = _reduce(X, y)
        np.testing.assert_array_equal(partial_correlations(state, -1), partial_correlations(state, 0))
        assert partial_correlations(state, 0).shape == (10,)

    @pytest.mark.parametrize("in_", [-2, 4, 10])
    def test_out_of_range_is_none(self, simple_regression_data, in_):
        X, y, _ = simple_regression_data
        assert partial_correlations(_reduce(X, y), in_) is None

    def test_zero_variance_is_nan(self, collinear_data):
        X, y = collinear_data
        state = _reduce(X, y)
        out = partial_correlations(state, 2)
        assert np.isnan(out[0])
        assert np.isnan(out[1])
        assert np.isfinite(out[2])

    def test_does_not_mutate(self, simple_regression_data):
        X, y, _ = simple_regression_data
        state = _reduce(X, y)
        d_before = state.d.copy()
        r_before = state.r.data.copy()
        partial_correlations(state, 1)
        np.testing.assert_array_equal(state.d, d_before)
        np.testing.assert_array_equal(state.r.data, r_before)


# ═══════════════════════════════════════════════════════════════════════
# hat_diagonal
# ═══════════════════════════════════════════════════════════════════════


class TestHatDiagonal:

    def test_matches_dense_leverage(self, simple_regression_data):
        X, y, _ = simple_regression_data
        state = _reduce(X, y)
        Xc = np.column_stack([np.ones(len(y)), X])
        gram_inv = np.linalg.inv(Xc.T @ Xc)
        for row in (X[0], X[17], np.array([0.3, -1.2, 2.0])):
            xc = np.concatenate(([1.0], row))
            assert hat_diagonal(state, row) == pytest.approx(xc @ gram_inv @ xc, rel=1e-9)

    def test_leverages_of_data_sum_to_rank(self, simple_regression_data):
        X, y, _ = simple_regression_data
        state = _reduce(X, y)
        total = sum(hat_diagonal(state, row) for row in X)
        assert total == pytest.approx(4.0, rel=1e-9)

    def test_without_intercept(self, simple_regression_data):
        X, y, _ = simple_regression_data
        state = _reduce(X, y, has_intercept=False)
        gram_inv = np.linalg.inv(X.T @ X)
        assert hat_diagonal(state, X[3]) == pytest.approx(X[3] @ gram_inv @ X[3], rel=1e-9)

    def test_row_too_long_is_nan(self, simple_regression_data):
        X, y, _ = simple_regression_data
        state = _reduce(X, y)
        assert np.isnan(hat_diagonal(state, np.ones(4)))

    def test_does_not_mutate(self, simple_regression_data):
        X, y, _ = simple_regression_data
        state = _reduce(X, y)
        d_before = state.d.copy()
        hat_diagonal(state, X[0])
        np.testing.assert_array_equal(state.d, d_before)
        np.testing.assert_array_equal(state.tol, 0.0)

    def test_dependent_column_skipped(self, collinear_data):
        X, y = collinear_data
        state = _reduce(X, y)
        Xr = np.column_stack([np.ones(len(y)), X[:, [0, 2]]])
        gram_inv = np.linalg.inv(Xr.T @ Xr)
        xr = np.array([1.0, X[5, 0], X[5, 2]])
        assert hat_diagonal(state, X[5]) == pytest.approx(xr @ gram_inv @ xr, rel=1e-9)
