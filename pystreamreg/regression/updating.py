"""
Incremental multiple linear regression (Miller's Algorithm AS274).

UpdatingRegression keeps an orthogonal reduction of the data instead of
the data itself. Observations are folded in one at a time; regress() can
be called at any point and again after more data arrives, for the full
model, the leading k regressors, or any subset of regressors.

Algorithm:
    Gentleman, W. M. (1974). Algorithm AS 75: Basic procedures for large,
        sparse or weighted linear least squares problems.
    Miller, A. J. (1992). Algorithm AS 274: Least squares routines to
        supplement those of Gentleman. Applied Statistics 41(2), 458-478.

Regressor indexing: with an intercept, regressor 0 is the constant and
caller column j is regressor j + 1.

Subset regressions reorder the reduction and the order persists: after
regress([2, 0]) the regressors in positions 0 and 1 are 0 and 2, and
get_order_of_regressors() reports it.
"""

from __future__ import annotations

import warnings
from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystreamreg.core.compute.linalg.packed import packed_symmetric_size, symmetric_index
from pystreamreg.core.compute.timing import Timer
from pystreamreg.core.compute.tolerances import DEFAULT_EPSILON
from pystreamreg.core.datasource import DataSource
from pystreamreg.core.exceptions import ModelSpecificationError, ValidationError
from pystreamreg.core.result import Result
from pystreamreg.core.validation import (
    check_1d,
    check_array,
    check_finite,
    check_indices,
    check_min_samples,
)
from pystreamreg.regression._diagnostics import hat_diagonal, partial_correlations
from pystreamreg.regression._reduction import include_observation, singcheck, tolset
from pystreamreg.regression._reorder import reorder_regressors
from pystreamreg.regression._solve import cov, regcf, ss
from pystreamreg.regression.design import ObservationBatch
from pystreamreg.regression.solution import RegressionParams, RegressionSolution
from pystreamreg.regression.state import RegressionState


class UpdatingRegression:
    """
    Streaming OLS without storing the design matrix.

    Implements the UpdatingRegression protocol. Not thread-safe: every
    method, regress() included, mutates the reduction.

    Args:
        number_of_variables: Regressors per observation, excluding the
            constant
        include_intercept: Prepend a constant regressor to every row
        tolerance_epsilon: Relative tolerance for rank-deficiency
            detection (its absolute value is used)

    Raises:
        ModelSpecificationError: If number_of_variables < 1

    Example:
        >>> model = UpdatingRegression(2, include_intercept=True)
        >>> for row, target in stream:
        ...     model.add_observation(row, target)
        >>> result = model.regress()
        >>> result.coefficients
    """

    def __init__(
        self,
        number_of_variables: int,
        include_intercept: bool,
        tolerance_epsilon: float = DEFAULT_EPSILON,
    ):
        if number_of_variables < 1:
            raise ModelSpecificationError(
                f"number_of_variables must be at least 1, got {number_of_variables}",
                expected=1,
                actual=number_of_variables,
            )
        nvars = number_of_variables + 1 if include_intercept else number_of_variables
        self._state = RegressionState.empty(
            nvars, abs(float(tolerance_epsilon)), bool(include_intercept)
        )

    @property
    def name(self) -> str:
        return 'cpu_as274'

    @property
    def state(self) -> RegressionState:
        """The live reduction. Mutating it directly voids every guarantee."""
        return self._state

    @property
    def n(self) -> int:
        return self._state.nobs

    @property
    def has_intercept(self) -> bool:
        return self._state.has_intercept

    @property
    def number_of_variables(self) -> int:
        """Regressors per caller row, excluding the constant."""
        return self._state.nvars - int(self._state.has_intercept)

    @property
    def number_of_regressors(self) -> int:
        """Regressors in the model, including the constant."""
        return self._state.nvars

    # === Adding data ===

    def add_observation(self, x: ArrayLike, y: float) -> None:
        """
        Add one observation.

        Raises:
            ModelSpecificationError: If len(x) is not number_of_variables
            ValidationError: If x or y is not finite
        """
        x_arr = check_array(x, 'x')
        check_1d(x_arr, 'x')
        expected = self.number_of_variables
        if x_arr.shape[0] != expected:
            raise ModelSpecificationError(
                f"x: observation has {x_arr.shape[0]} regressors, model expects {expected}",
                expected=expected,
                actual=x_arr.shape[0],
            )
        check_finite(x_arr, 'x')
        y_val = float(y)
        if not np.isfinite(y_val):
            raise ValidationError(f"y: non-finite response {y_val}")
        include_observation(self._state, x_arr, y_val)

    def add_observations(self, X: ArrayLike, y: ArrayLike) -> None:
        """
        Add a batch of observations, one row of X per element of y.

        Raises:
            DimensionError: If X and y have different lengths
            ModelSpecificationError: If the batch is empty, has no more
                rows than columns, or rows have the wrong length
        """
        batch = ObservationBatch.from_arrays(X, y)
        check_min_samples(batch.X, batch.k + 1, 'X')
        self.add_batch(batch)

    def add_batch(self, batch: ObservationBatch) -> None:
        """Fold a validated batch, row by row."""
        expected = self.number_of_variables
        if batch.k != expected:
            raise ModelSpecificationError(
                f"X: rows have {batch.k} regressors, model expects {expected}",
                expected=expected,
                actual=batch.k,
            )
        for row, target in zip(batch.X, batch.y):
            include_observation(self._state, row, float(target))

    def add_datasource(
        self,
        source: DataSource | Mapping[str, Any],
        *,
        x: str | list[str] | None = None,
        y: str | None = None,
        batch_size: int | None = None,
    ) -> None:
        """
        Stream a DataSource into the model.

        Args:
            source: DataSource holding the columns
            x, y: Column selection, as for ObservationBatch.from_datasource
            batch_size: Rows validated and folded at a time; all at once if None
        """
        if batch_size is None or not isinstance(source, DataSource):
            self.add_batch(ObservationBatch.from_datasource(source, x=x, y=y))
            return
        for chunk in source.batches(batch_size):
            self.add_batch(ObservationBatch.from_datasource(chunk, x=x, y=y))

    def clear(self) -> None:
        """Discard every observation and restore the original order."""
        self._state.clear()

    # === Regression ===

    def regress(self, regressors: int | Sequence[int] | None = None) -> RegressionSolution:
        """
        Estimate the model from the observations added so far.

        Args:
            regressors: None for every regressor; an int k for the
                regressors in the first k positions; a sequence of
                regressor indices for that subset (the reduction is
                reordered to bring them to the front)

        Returns:
            RegressionSolution with coefficients in ascending regressor
            index order (see regressor_order)

        Raises:
            ModelSpecificationError: Too few observations for the number
                of regressors, a count or index outside the model,
                repeated or no indices
        """
        if regressors is None:
            return self._regress_leading(self._state.nvars)
        if isinstance(regressors, (bool, np.bool_)):
            raise ModelSpecificationError(
                f"regressors: expected a count or a sequence of indices, got {regressors!r}"
            )
        if isinstance(regressors, (int, np.integer)):
            return self._regress_leading(int(regressors))
        return self._regress_subset(regressors)

    def _check_enough_data(self, k: int) -> None:
        if self._state.nobs <= k:
            raise ModelSpecificationError(
                f"{self._state.nobs} observations are not enough for {k} regressors",
                expected=k + 1,
                actual=self._state.nobs,
            )

    def _regress_leading(self, k: int) -> RegressionSolution:
        if k < 1:
            raise ModelSpecificationError(
                f"number of regressors must be at least 1, got {k}",
                expected=1,
                actual=k,
            )
        self._check_enough_data(k)
        if k > self._state.nvars:
            raise ModelSpecificationError(
                f"too many regressors requested: {k}, model has {self._state.nvars}",
                expected=self._state.nvars,
                actual=k,
            )
        timer = Timer()
        timer.start()
        return self._solve(k, timer)

    def _regress_subset(self, regressors: Sequence[int]) -> RegressionSolution:
        series = check_indices(regressors, self._state.nvars, 'regressors')
        self._check_enough_data(len(series))
        timer = Timer()
        timer.start()
        with timer.section('reorder'):
            reorder_regressors(self._state, series, 0)
        return self._solve(len(series), timer)

    def _solve(self, k: int, timer: Timer) -> RegressionSolution:
        state = self._state
        with timer.section('tolset'):
            tolset(state)
        with timer.section('singcheck'):
            singcheck(state)
        with timer.section('regcf'):
            beta = regcf(state, k)
        with timer.section('ss'):
            ss(state)
        with timer.section('cov'):
            covmat = cov(state, k)
        timer.stop()
        return self._assemble(beta, covmat, k, timer)

    def _assemble(
        self,
        beta: NDArray[np.floating[Any]],
        covmat: NDArray[np.floating[Any]] | None,
        k: int,
        timer: Timer,
    ) -> RegressionSolution:
        """Put coefficients and covariance back in ascending regressor order."""
        state = self._state
        order = state.vorder[:k].copy()
        dependent = order[state.lindep[:k]]
        rank = k - int(dependent.shape[0])

        if not np.array_equal(order, np.arange(k)):
            perm = np.argsort(order, kind='stable')
            beta = beta[perm]
            if covmat is not None:
                remapped = np.empty(packed_symmetric_size(k), dtype=np.float64)
                for i in range(k):
                    for j in range(i + 1):
                        remapped[symmetric_index(i, j)] = covmat[symmetric_index(perm[i], perm[j])]
                covmat = remapped
            order = order[perm]

        messages: tuple[str, ...] = ()
        if dependent.shape[0] > 0:
            columns = sorted(int(v) for v in dependent)
            message = (
                f"Regressors {columns} are linearly dependent on earlier regressors; "
                f"their coefficients are reported as NaN (rank {rank} of {k})"
            )
            warnings.warn(message, RuntimeWarning, stacklevel=5)
            messages = (message,)

        params = RegressionParams(
            coefficients=beta,
            covariance=covmat,
            is_symmetric_packed=True,
            n_observations=state.nobs,
            rank=rank,
            sum_y=state.sumy,
            sum_y_squared=state.sumsqy,
            error_sum_squares=float(state.rss[k - 1]),
            has_intercept=state.has_intercept,
            regressor_order=tuple(int(v) for v in order),
        )
        info: dict[str, Any] = {
            'method': 'as274',
            'rank': rank,
            'dependent_columns': sorted(int(v) for v in dependent),
            'order': [int(v) for v in state.vorder],
        }
        return RegressionSolution(
            _result=Result(
                params=params,
                info=info,
                timing=timer.result(),
                backend_name=self.name,
                warnings=messages,
            )
        )

    # === Reordering and diagnostics ===

    def reorder_regressors(self, regressors: Sequence[int], position: int = 0) -> None:
        """
        Move the given regressors to consecutive positions from position.

        Relative order of the other regressors is kept. Subsequent
        regress(k) calls use the new order.
        """
        series = check_indices(regressors, self._state.nvars, 'regressors')
        reorder_regressors(self._state, series, position)

    def get_order_of_regressors(self) -> NDArray[np.intp]:
        """Original regressor index held in each position."""
        return self._state.vorder.copy()

    def get_partial_correlations(self, in_: int) -> NDArray[np.floating[Any]] | None:
        """Partial correlations given the first in_ positions; see _diagnostics."""
        return partial_correlations(self._state, in_)

    def get_diagonal_of_hat_matrix(self, row: ArrayLike) -> float:
        """Leverage of a new row, regressors in original order as for add_observation."""
        return hat_diagonal(self._state, row)

    def __repr__(self) -> str:
        return (
            f"UpdatingRegression(number_of_variables={self.number_of_variables}, "
            f"include_intercept={self.has_intercept}, n={self.n})"
        )
