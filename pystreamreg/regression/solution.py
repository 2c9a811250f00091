"""
Regression solution types.

Contains the parameter payload produced by the updating regression and
the immutable user-facing solution wrapper.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pystreamreg.core.exceptions import OutOfRangeError
from pystreamreg.core.compute.linalg.packed import symmetric_index, unpack_symmetric
from pystreamreg.core.result import Result


@dataclass(frozen=True)
class RegressionParams:
    """
    Parameter payload of one regress() call.

    coefficients and covariance are indexed by output position; the
    original variable behind position i is regressor_order[i].

    covariance is packed symmetric (entry (i, j), i >= j, at
    i*(i+1)/2 + j) when is_symmetric_packed, otherwise a full row-major
    k x k matrix flattened. None when there were not more observations
    than coefficients.
    """
    coefficients: NDArray[np.floating[Any]]
    covariance: NDArray[np.floating[Any]] | None
    is_symmetric_packed: bool
    n_observations: int
    rank: int
    sum_y: float
    sum_y_squared: float
    error_sum_squares: float
    has_intercept: bool
    regressor_order: tuple[int, ...]


@dataclass(frozen=True)
class GlobalFit:
    """Whole-model fit statistics, computed once from the payload."""
    total_sum_squares: float
    error_sum_squares: float
    mean_square_error: float
    r_squared: float
    adjusted_r_squared: float

    @classmethod
    def from_params(cls, params: RegressionParams) -> GlobalFit:
        n = float(params.n_observations)
        rank = params.rank
        sse = np.float64(params.error_sum_squares)
        sst = np.float64(np.nan)
        if rank > 0:
            if params.has_intercept:
                sst = np.float64(params.sum_y_squared - params.sum_y * params.sum_y / n)
            else:
                sst = np.float64(params.sum_y_squared)

        with np.errstate(divide='ignore', invalid='ignore'):
            mse = sse / np.float64(n - rank)
            r_squared = 1.0 - sse / sst
            if params.has_intercept:
                adjusted = 1.0 - (sse * (n - 1.0)) / (sst * (n - rank))
            else:
                adjusted = 1.0 - (1.0 - r_squared) * (n / (n - rank))

        return cls(
            total_sum_squares=float(sst),
            error_sum_squares=float(sse),
            mean_square_error=float(mse),
            r_squared=float(r_squared),
            adjusted_r_squared=float(adjusted),
        )


@dataclass(frozen=True)
class RegressionSolution:
    """
    User-facing regression results.

    Wraps the Result envelope. Fit statistics are computed at
    construction; nothing here changes after that, and later observations
    added to the regression that produced it do not affect it.
    """
    _result: Result[RegressionParams]
    _fit: GlobalFit = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, '_fit', GlobalFit.from_params(self._result.params))

    @property
    def params(self) -> RegressionParams:
        return self._result.params

    # === Parameters ===

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self.params.coefficients.copy()

    @property
    def n_parameters(self) -> int:
        return self.params.coefficients.shape[0]

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self.n_parameters:
            raise OutOfRangeError(index, 0, self.n_parameters - 1)

    def parameter_estimate(self, index: int) -> float:
        self._check_index(index)
        return float(self.params.coefficients[index])

    def covariance(self, i: int, j: int) -> float:
        """Covariance of coefficients i and j; NaN if either is dependent."""
        self._check_index(i)
        self._check_index(j)
        packed = self.params.covariance
        if packed is None:
            return float('nan')
        if self.params.is_symmetric_packed:
            return float(packed[symmetric_index(i, j)])
        return float(packed[i * self.n_parameters + j])

    def covariance_matrix(self) -> NDArray[np.floating[Any]]:
        """Dense k x k covariance of the coefficients."""
        k = self.n_parameters
        packed = self.params.covariance
        if packed is None:
            return np.full((k, k), np.nan, dtype=np.float64)
        if self.params.is_symmetric_packed:
            return unpack_symmetric(packed, k)
        return packed.reshape(k, k).copy()

    def std_error(self, index: int) -> float:
        """
        Standard error of one coefficient.

        NaN when the variance is undefined or not positive (dependent
        columns, exact fits).
        """
        var = self.covariance(index, index)
        if not np.isnan(var) and var > 0.0:
            return float(np.sqrt(var))
        return float('nan')

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        return np.array([self.std_error(i) for i in range(self.n_parameters)], dtype=np.float64)

    # === Global fit ===

    @property
    def n(self) -> int:
        return self.params.n_observations

    @property
    def rank(self) -> int:
        return self.params.rank

    @property
    def has_intercept(self) -> bool:
        return self.params.has_intercept

    @property
    def regressor_order(self) -> tuple[int, ...]:
        return self.params.regressor_order

    @property
    def total_sum_squares(self) -> float:
        """
        Centered total sum of squares with an intercept, uncentered
        without. NaN when no regressor was estimable.
        """
        return self._fit.total_sum_squares

    @property
    def error_sum_squares(self) -> float:
        return self._fit.error_sum_squares

    @property
    def regression_sum_squares(self) -> float:
        return self._fit.total_sum_squares - self._fit.error_sum_squares

    @property
    def mean_square_error(self) -> float:
        return self._fit.mean_square_error

    @property
    def r_squared(self) -> float:
        return self._fit.r_squared

    @property
    def adjusted_r_squared(self) -> float:
        return self._fit.adjusted_r_squared

    # === Envelope ===

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Generate a plain-text summary."""
        lines = [
            "Updating Linear Regression Results",
            "=" * 60,
            f"Observations: {self.n}",
            f"Parameters: {self.n_parameters}",
            f"Rank: {self.rank}",
            f"Intercept: {'yes' if self.has_intercept else 'no'}",
            f"R-squared: {self.r_squared:.6f}",
            f"Adj. R-squared: {self.adjusted_r_squared:.6f}",
            f"Mean Square Error: {self.mean_square_error:.6g}",
            "",
            "Coefficients:",
            "-" * 60,
            f"{'Variable':<10} {'Estimate':>14} {'Std.Error':>12}",
            "-" * 60,
        ]

        for variable, coef, se in zip(
            self.regressor_order, self.params.coefficients, self.standard_errors
        ):
            label = "(const)" if self.has_intercept and variable == 0 else f"x[{variable}]"
            if np.isnan(coef):
                lines.append(f"  {label:<8}        (dependent)")
            else:
                se_str = f"{se:12.6f}" if not np.isnan(se) else "          NA"
                lines.append(f"  {label:<8} {coef:14.6f} {se_str}")

        lines.append("-" * 60)
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"RegressionSolution(n={self.n}, k={self.n_parameters}, "
            f"rank={self.rank}, r_squared={self.r_squared:.4f})"
        )
