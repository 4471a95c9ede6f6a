"""
Input validation utilities for PyLstsq.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pylstsq.core.exceptions import (
    ValidationError,
    DimensionError,
    NotEnoughDataError,
)


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Accepts any array-like and converts to numpy array. Rejects inputs
    that result in object dtype (indicating mixed types or non-numeric data).

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with float64 dtype

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    # Reject non-numeric dtypes (strings, bytes, datetime, etc.)
    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        raise ValidationError(f"{name}: complex dtype {result.dtype} is not supported")

    return result.astype(np.float64, copy=False)


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Args:
        array: Array to check
        name: Parameter name for error messages

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


def check_square(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is a square matrix.

    Raises:
        DimensionError: If array is not 2D or not square
    """
    check_2d(array, name)
    if array.shape[0] != array.shape[1]:
        raise DimensionError(f"{name}: expected square matrix, got shape {array.shape}")


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

    Args:
        array: Array to check
        min_samples: Minimum required samples (first dimension)
        name: Parameter name for error messages

    Raises:
        NotEnoughDataError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise NotEnoughDataError(
            f"{name}: requires at least {min_samples} samples, got {n}",
            n_rows=n,
            n_required=min_samples,
        )


def check_non_negative(value: float, name: str) -> None:
    """
    Verify a scalar hyperparameter is finite and >= 0.

    Raises:
        ValidationError: If value is negative, NaN or infinite
    """
    if not np.isfinite(value) or value < 0:
        raise ValidationError(f"{name}: must be a finite non-negative number, got {value!r}")


def check_positive(value: float, name: str) -> None:
    """
    Verify a scalar is finite and > 0.

    Raises:
        ValidationError: If value is not strictly positive
    """
    if not np.isfinite(value) or value <= 0:
        raise ValidationError(f"{name}: must be a finite positive number, got {value!r}")


def check_positive_int(value: int, name: str) -> None:
    """
    Verify value is an integer >= 1.

    Raises:
        ValidationError: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value < 1:
        raise ValidationError(f"{name}: must be a positive integer, got {value!r}")


def as_matrix(array: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """
    Convert to a float64 2D matrix; a 1D input becomes a single column.

    Raises:
        ValidationError: If input is non-numeric
        DimensionError: If input has more than 2 dimensions
    """
    result = check_array(array, name)
    if result.ndim == 1:
        result = result.reshape(-1, 1)
    check_2d(result, name)
    return result


def as_vector(array: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """
    Convert to a float64 1D vector; an (n, 1) column is raveled.

    Raises:
        ValidationError: If input is non-numeric
        DimensionError: If input cannot be viewed as a vector
    """
    result = check_array(array, name)
    if result.ndim == 2 and result.shape[1] == 1:
        result = result.ravel()
    check_1d(result, name)
    return result


def finite_rows(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
) -> NDArray[np.bool_]:
    """
    Boolean mask of rows where every feature and the target are finite.

    Args:
        X: Design matrix (n x p)
        y: Target vector (n,)

    Returns:
        Mask of shape (n,), True for rows usable in a fit
    """
    return np.isfinite(X).all(axis=1) & np.isfinite(y)
