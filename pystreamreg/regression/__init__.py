"""
Incremental multiple linear regression.

This module provides ordinary least squares that is updated one
observation at a time (Gentleman/Miller, Algorithm AS274) and never
stores the design matrix.

Public API:
    UpdatingRegression(number_of_variables, include_intercept, ...)
    fit(X, y, ...) -> RegressionSolution

UpdatingRegression is the stateful engine: add observations, regress,
add more, regress again, reorder regressors for subset models, and read
partial correlations and leverages from the same reduction. fit() is a
one-shot wrapper that streams a whole dataset through it.

Example:
    >>> from pystreamreg.regression import UpdatingRegression
    >>> model = UpdatingRegression(2, include_intercept=True)
    >>> model.add_observations(X, y)
    >>> result = model.regress()
    >>> print(result.summary())
"""

from pystreamreg.regression.design import ObservationBatch
from pystreamreg.regression.solution import RegressionParams, RegressionSolution
from pystreamreg.regression.solvers import fit
from pystreamreg.regression.updating import UpdatingRegression

__all__ = [
    "fit",
    "UpdatingRegression",
    "ObservationBatch",
    "RegressionSolution",
    "RegressionParams",
]
