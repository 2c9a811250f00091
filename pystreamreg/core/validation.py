"""
Input validation utilities for PyStreamReg.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pystreamreg.core.exceptions import (
    DimensionError,
    ModelSpecificationError,
    ValidationError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that result in object dtype (ragged rows, mixed
    types) or a non-numeric dtype.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray of dtype float64

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating ragged rows or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number) and result.dtype != np.bool_:
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    return result.astype(np.float64, copy=False)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Args:
        *arrays: Arrays to check
        names: Parameter names for error messages (must match number of arrays)

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples.

    Raises:
        ModelSpecificationError: If array has fewer than min_samples rows
    """
    n = array.shape[0]
    if n < min_samples:
        raise ModelSpecificationError(
            f"{name}: requires at least {min_samples} samples, got {n}",
            expected=min_samples,
            actual=n,
        )


def check_indices(indices: Sequence[int], upper: int, name: str) -> list[int]:
    """
    Validate a list of regressor indices.

    Indices must be integers in [0, upper), non-empty, and unique.

    Args:
        indices: Candidate indices
        upper: Exclusive upper bound (number of regressors in the model)
        name: Parameter name for error messages

    Returns:
        The indices sorted ascending, as Python ints

    Raises:
        ModelSpecificationError: If the list is empty or too long, an index
            is out of range, or an index is repeated
    """
    for i in indices:
        if isinstance(i, (bool, np.bool_)) or not isinstance(i, (int, np.integer)):
            raise ModelSpecificationError(f"{name}: index {i!r} is not an integer")
    values = [int(i) for i in indices]
    if not values:
        raise ModelSpecificationError(f"{name}: no regressors requested", expected=1, actual=0)
    if len(values) > upper:
        raise ModelSpecificationError(
            f"{name}: {len(values)} regressors requested, model has {upper}",
            expected=upper,
            actual=len(values),
        )
    for i in values:
        if i < 0 or i >= upper:
            raise ModelSpecificationError(
                f"{name}: index {i} outside [0, {upper})",
                expected=upper - 1,
                actual=i,
            )
    if len(set(values)) != len(values):
        repeated = sorted({i for i in values if values.count(i) > 1})
        raise ModelSpecificationError(f"{name}: repeated indices {repeated}")
    return sorted(values)
