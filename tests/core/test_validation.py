"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, object rejection
    - check_finite: NaN/Inf detection
    - check_ndim / check_1d / check_2d: dimensionality checks
    - check_consistent_length: multi-array length matching
    - check_min_samples: minimum sample count
    - check_indices: regressor index lists
"""

import numpy as np
import pytest

from pystreamreg.core.exceptions import (
    DimensionError,
    ModelSpecificationError,
    ValidationError,
)
from pystreamreg.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_indices,
    check_min_samples,
    check_ndim,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to float64 and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "X")
        assert isinstance(result, np.ndarray)
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_int_array_promoted_to_float(self):
        arr = np.array([1, 2, 3], dtype=np.int32)
        assert check_array(arr, "X").dtype == np.float64

    def test_bool_accepted(self):
        result = check_array(np.array([True, False]), "mask")
        np.testing.assert_array_equal(result, [1.0, 0.0])

    def test_nested_list_to_2d(self):
        result = check_array([[1, 2], [3, 4]], "X")
        assert result.shape == (2, 2)

    def test_ragged_rejected(self):
        with pytest.raises(ValidationError, match="X"):
            check_array([[1, 2], [3]], "X")

    def test_strings_rejected(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            check_array(np.array(["a", "b"]), "X")


# ═══════════════════════════════════════════════════════════════════════
# check_finite
# ═══════════════════════════════════════════════════════════════════════


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0]), "x")

    def test_nan_rejected(self):
        with pytest.raises(ValidationError, match="1 NaN"):
            check_finite(np.array([1.0, np.nan]), "x")

    def test_inf_rejected(self):
        with pytest.raises(ValidationError, match="2 Inf"):
            check_finite(np.array([np.inf, -np.inf, 0.0]), "x")


# ═══════════════════════════════════════════════════════════════════════
# Dimensions
# ═══════════════════════════════════════════════════════════════════════


class TestDimensions:

    def test_check_ndim(self):
        check_ndim(np.zeros((2, 2, 2)), 3, "T")
        with pytest.raises(DimensionError, match="expected 2D"):
            check_ndim(np.zeros(3), 2, "T")

    def test_check_1d(self):
        check_1d(np.zeros(3), "y")
        with pytest.raises(DimensionError):
            check_1d(np.zeros((3, 1)), "y")

    def test_check_2d(self):
        check_2d(np.zeros((3, 1)), "X")
        with pytest.raises(DimensionError):
            check_2d(np.zeros(3), "X")

    def test_consistent_length(self):
        check_consistent_length(np.zeros((4, 2)), np.zeros(4), names=("X", "y"))

    def test_inconsistent_length(self):
        with pytest.raises(DimensionError, match="X=4, y=3"):
            check_consistent_length(np.zeros((4, 2)), np.zeros(3), names=("X", "y"))

    def test_names_must_match_arrays(self):
        with pytest.raises(ValueError):
            check_consistent_length(np.zeros(4), np.zeros(4), names=("X",))


class TestCheckMinSamples:

    def test_enough(self):
        check_min_samples(np.zeros((5, 2)), 5, "X")

    def test_too_few(self):
        with pytest.raises(ModelSpecificationError) as excinfo:
            check_min_samples(np.zeros((2, 2)), 5, "X")
        assert excinfo.value.expected == 5
        assert excinfo.value.actual == 2


# ═══════════════════════════════════════════════════════════════════════
# check_indices
# ═══════════════════════════════════════════════════════════════════════


class TestCheckIndices:

    def test_returns_sorted_ints(self):
        assert check_indices(np.array([2, 0]), 3, "regressors") == [0, 2]

    def test_empty_rejected(self):
        with pytest.raises(ModelSpecificationError, match="no regressors"):
            check_indices([], 3, "regressors")

    def test_too_many_rejected(self):
        with pytest.raises(ModelSpecificationError, match="4 regressors requested"):
            check_indices([0, 1, 2, 0], 3, "regressors")

    def test_out_of_range_rejected(self):
        with pytest.raises(ModelSpecificationError, match="index 3"):
            check_indices([0, 3], 3, "regressors")

    def test_negative_rejected(self):
        with pytest.raises(ModelSpecificationError):
            check_indices([-1], 3, "regressors")

    def test_non_integer_rejected(self):
        with pytest.raises(ModelSpecificationError, match="0.5 is not an integer"):
            check_indices([0.5, 2.9], 3, "regressors")

    def test_integral_float_rejected(self):
        with pytest.raises(ModelSpecificationError, match="not an integer"):
            check_indices([1.0], 3, "regressors")

    def test_bool_rejected(self):
        with pytest.raises(ModelSpecificationError, match="True is not an integer"):
            check_indices([True], 3, "regressors")

    def test_numpy_integers_accepted(self):
        assert check_indices([np.int64(1), np.int32(0)], 3, "regressors") == [0, 1]

    def test_repeated_rejected(self):
        with pytest.raises(ModelSpecificationError, match=r"repeated indices \[1\]"):
            check_indices([1, 1], 3, "regressors")
