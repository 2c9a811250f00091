"""
Tests for ObservationBatch construction and validation.
"""

import numpy as np
import pytest

from pystreamreg.core.datasource import DataSource
from pystreamreg.core.exceptions import (
    DimensionError,
    ModelSpecificationError,
    ValidationError,
)
from pystreamreg.regression.design import ObservationBatch


class TestFromArrays:

    def test_shapes(self, simple_regression_data):
        X, y, _ = simple_regression_data
        batch = ObservationBatch.from_arrays(X, y)
        assert batch.n == 100
        assert batch.k == 3
        assert batch.X.dtype == np.float64

    def test_1d_x_is_single_regressor(self):
        batch = ObservationBatch.from_arrays([1.0, 2.0, 3.0], [2.0, 4.0, 6.0])
        assert batch.X.shape == (3, 1)

    def test_column_y_raveled(self):
        batch = ObservationBatch.from_arrays(np.ones((3, 2)), np.ones((3, 1)))
        assert batch.y.shape == (3,)

    def test_length_mismatch(self):
        with pytest.raises(DimensionError, match="X=3, y=2"):
            ObservationBatch.from_arrays(np.ones((3, 2)), np.ones(2))

    def test_empty_rejected(self):
        with pytest.raises(ModelSpecificationError, match="no observations"):
            ObservationBatch.from_arrays(np.empty((0, 2)), np.empty(0))

    def test_non_finite_rejected(self):
        X = np.ones((3, 2))
        X[1, 1] = np.nan
        with pytest.raises(ValidationError, match="non-finite"):
            ObservationBatch.from_arrays(X, np.ones(3))

    def test_3d_rejected(self):
        with pytest.raises(DimensionError):
            ObservationBatch.from_arrays(np.ones((2, 2, 2)), np.ones(2))


class TestFromDataSource:

    def test_default_keys(self, simple_regression_data):
        X, y, _ = simple_regression_data
        batch = ObservationBatch.from_datasource(DataSource.from_arrays(X=X, y=y))
        np.testing.assert_array_equal(batch.X, X)

    def test_named_columns(self):
        ds = DataSource.from_arrays(
            data=np.arange(12, dtype=float).reshape(4, 3), columns=['b', 'a', 'target'],
        )
        batch = ObservationBatch.from_datasource(ds, x=['a', 'b'], y='target')
        np.testing.assert_array_equal(batch.X[:, 0], [1.0, 4.0, 7.0, 10.0])
        np.testing.assert_array_equal(batch.y, [2.0, 5.0, 8.0, 11.0])

    def test_remaining_columns_sorted(self):
        ds = DataSource.from_arrays(
            data=np.arange(12, dtype=float).reshape(4, 3), columns=['b', 'a', 'target'],
        )
        batch = ObservationBatch.from_datasource(ds, y='target')
        np.testing.assert_array_equal(batch.X[0], [1.0, 0.0])

    def test_batch_dict(self):
        chunk = {'X': np.ones((2, 2)), 'y': np.zeros(2)}
        assert ObservationBatch.from_datasource(chunk).n == 2

    def test_missing_y(self):
        ds = DataSource.from_arrays(X=np.ones((3, 1)))
        with pytest.raises(ValueError, match="Must specify y"):
            ObservationBatch.from_datasource(ds)

    def test_missing_x(self):
        ds = DataSource.from_arrays(y=np.ones(3))
        with pytest.raises(ValueError, match="Must specify x"):
            ObservationBatch.from_datasource(ds)
