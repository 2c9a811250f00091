"""
One-shot entry point for updating regression.

This module provides the fit() function: it streams a dataset through an
UpdatingRegression and returns the full-model solution. Use
UpdatingRegression directly to keep adding data after the first fit.
"""

from __future__ import annotations

from numpy.typing import ArrayLike

from pystreamreg.core.compute.tolerances import DEFAULT_EPSILON
from pystreamreg.core.datasource import DataSource
from pystreamreg.core.exceptions import ValidationError
from pystreamreg.regression.design import ObservationBatch
from pystreamreg.regression.solution import RegressionSolution
from pystreamreg.regression.updating import UpdatingRegression


def fit(
    X: ArrayLike | None = None,
    y: ArrayLike | None = None,
    *,
    datasource: DataSource | None = None,
    x: str | list[str] | None = None,
    y_name: str | None = None,
    include_intercept: bool = True,
    tolerance_epsilon: float = DEFAULT_EPSILON,
    batch_size: int | None = None,
) -> RegressionSolution:
    """
    Fit a linear regression by streaming the data through AS274 updates.

    Solves the ordinary least squares problem:
        min_β ||y - Xβ||²

    with a constant column prepended when include_intercept is True. The
    design matrix is never formed; rows are folded into the orthogonal
    reduction one at a time.

    Args:
        X: Regressor matrix (n x k), without the constant column
        y: Response vector (n,)
        datasource: Alternative to X/y; columns are selected with x and
            y_name as for ObservationBatch.from_datasource
        x: Predictor column(s) of datasource
        y_name: Response column of datasource (default 'y')
        include_intercept: Prepend a constant regressor
        tolerance_epsilon: Relative tolerance for rank-deficiency detection
        batch_size: Rows per streamed batch when reading a datasource

    Returns:
        RegressionSolution on every regressor, coefficient 0 being the
        intercept when there is one

    Raises:
        ValidationError: If both or neither of X/y and datasource are given,
            or inputs are not finite numbers
        ModelSpecificationError: If there are not more rows than regressors

    Example:
        >>> import numpy as np
        >>> from pystreamreg.regression import fit
        >>>
        >>> X = np.random.randn(100, 2)
        >>> y = 1.0 + X @ [2.0, 3.0] + np.random.randn(100) * 0.1
        >>>
        >>> result = fit(X, y)
        >>> print(result.coefficients)
        >>> print(result.summary())
    """
    # === Input Validation ===
    if datasource is not None:
        if X is not None or y is not None:
            raise ValidationError("Pass either X and y or datasource, not both")
        batches = _datasource_batches(datasource, x, y_name, batch_size)
    else:
        if X is None or y is None:
            raise ValidationError("X and y are required when no datasource is given")
        batches = iter([ObservationBatch.from_arrays(X, y)])

    # === Stream ===
    model: UpdatingRegression | None = None
    for batch in batches:
        if model is None:
            model = UpdatingRegression(batch.k, include_intercept, tolerance_epsilon)
        model.add_batch(batch)

    if model is None:
        raise ValidationError("datasource: no observations")

    # === Solve ===
    return model.regress()


def _datasource_batches(
    source: DataSource,
    x: str | list[str] | None,
    y_name: str | None,
    batch_size: int | None,
):
    """Yield validated batches of a DataSource, all rows at once if batch_size is None."""
    if batch_size is None:
        yield ObservationBatch.from_datasource(source, x=x, y=y_name)
        return
    for chunk in source.batches(batch_size):
        yield ObservationBatch.from_datasource(chunk, x=x, y=y_name)
