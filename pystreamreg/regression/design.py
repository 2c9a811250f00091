"""
Observation batches.

ObservationBatch wraps a block of rows (X) and responses (y) that will be
folded into an updating regression. It knows it is feeding a regression;
DataSource doesn't.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystreamreg.core.datasource import DataSource
from pystreamreg.core.exceptions import ModelSpecificationError
from pystreamreg.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
)


@dataclass(frozen=True)
class ObservationBatch:
    """
    A validated block of observations.

    Construction:
        ObservationBatch.from_arrays(X, y)
        ObservationBatch.from_datasource(ds, x=['a', 'b'], y='c')
        ObservationBatch.from_datasource(ds)   # uses ds['X'] and ds['y']

    Guarantees: X is 2D float64, y is 1D float64 of the same length,
    both finite, and the batch is not empty.
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]

    @classmethod
    def from_arrays(cls, X: ArrayLike, y: ArrayLike) -> ObservationBatch:
        """Build a batch directly from array-likes."""
        return cls._build(check_array(X, 'X'), check_array(y, 'y'))

    @classmethod
    def from_datasource(
        cls,
        source: DataSource | Mapping[str, Any],
        *,
        x: str | list[str] | None = None,
        y: str | None = None,
    ) -> ObservationBatch:
        """
        Build a batch from a DataSource.

        Args:
            source: The DataSource, or one batch dict from DataSource.batches()
            x: Predictor column(s). If None and source has 'X', uses that;
               if None and y is given, uses all other columns (sorted).
            y: Response column. If None, uses 'y'.
        """
        y_name = y if y is not None else 'y'
        if y_name not in source:
            raise ValueError("Must specify y or DataSource must have 'y'")
        y_arr = source[y_name]

        if x is not None:
            names = [x] if isinstance(x, str) else list(x)
        elif 'X' in source:
            names = None
        elif y is not None:
            names = sorted(k for k in source.keys() if k != y)
            if not names:
                raise ValueError("No predictor columns available")
        else:
            raise ValueError("Must specify x or DataSource must have 'X'")

        X_arr = source['X'] if names is None else _stack_columns(source, names)
        return cls._build(check_array(X_arr, 'X'), check_array(y_arr, 'y'))

    @classmethod
    def _build(cls, X: NDArray, y: NDArray) -> ObservationBatch:
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))
        if X.shape[0] == 0:
            raise ModelSpecificationError("X: no observations in batch", expected=1, actual=0)
        check_finite(X, 'X')
        check_finite(y, 'y')
        return cls(_X=X, _y=y)

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Rows of regressor values (n x k), without the constant."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        return self._y

    @property
    def n(self) -> int:
        return self._X.shape[0]

    @property
    def k(self) -> int:
        """Number of regressor columns in each row."""
        return self._X.shape[1]


def _stack_columns(source: DataSource | Mapping[str, Any], names: list[str]) -> NDArray:
    """Stack named columns of a DataSource into a matrix."""
    arrays = []
    for name in names:
        arr = np.asarray(source[name], dtype=np.float64)
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        arrays.append(arr)
    return np.hstack(arrays)
