"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def simple_regression_data(rng):
    """Well-conditioned dataset: 3 regressors, intercept 1.5, low noise."""
    n, p = 100, 3
    X = rng.standard_normal((n, p))
    beta_true = np.array([1.0, -2.0, 0.5])
    y = 1.5 + X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true


@pytest.fixture
def collinear_data(rng):
    """Dataset whose second column is exactly twice the first."""
    n = 60
    a = rng.standard_normal(n)
    c = rng.standard_normal(n)
    X = np.column_stack([a, 2.0 * a, c])
    y = 0.5 + 1.5 * a - 0.75 * c + rng.standard_normal(n) * 0.1
    return X, y


def _ols_reference(X, y, include_intercept=True):
    """Dense least-squares solution: (beta, SSE, design with constant)."""
    X = np.asarray(X, dtype=np.float64)
    if include_intercept:
        X = np.column_stack([np.ones(X.shape[0]), X])
    beta, _, _, _ = np.linalg.lstsq(X, y, rcond=None)
    resid = y - X @ beta
    return beta, float(resid @ resid), X


@pytest.fixture
def ols():
    """The dense least-squares reference solver."""
    return _ols_reference
