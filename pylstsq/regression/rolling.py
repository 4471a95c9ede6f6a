"""
Windowed least-squares drivers.

Each driver fits once and then walks the data with Woodbury rank-1
updates, emitting one coefficient snapshot per window position:

    recursive_lstsq         growing window: fit rows [0, n), then add one
                            row per step
    rolling_lstsq           fixed window of n rows: each step adds the
                            entering row and removes the leaving one
    rolling_skipping_lstsq  fixed window that ignores rows with NaN/Inf;
                            positions with fewer than m valid rows emit
                            None

With fit_bias the intercept is modeled jointly and left unpenalized; each
snapshot then carries the bias as its last entry. Position i of the
output corresponds to the window ending at row n - 1 + i.

Within a step the entering row is added before the leaving row is
removed. Both orders give the same result in exact arithmetic, but adding
first never passes through a window of n - 1 rows, which is singular when
the window is only as tall as X is wide.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.exceptions import (
    NotEnoughDataError,
    SingularMatrixError,
    ValidationError,
)
from pylstsq.core.validation import (
    as_matrix,
    as_vector,
    check_consistent_length,
    check_positive_int,
    finite_rows,
)
from pylstsq.regression.online import OnlineLinearRegression


def recursive_lstsq(
    X: ArrayLike,
    y: ArrayLike,
    n: int,
    lambda_: float = 0.0,
    fit_bias: bool = False,
) -> list[NDArray[np.floating[Any]]]:
    """
    Growing-window least squares.

    Args:
        X: Design matrix (rows x p)
        y: Target (rows,)
        n: Size of the initial window, 1 <= n <= rows
        lambda_: Ridge strength
        fit_bias: Model an intercept

    Returns:
        rows - n + 1 coefficient vectors; entry i is the fit on rows
        [0, n + i). Rows with NaN/Inf after the initial window are skipped.
    """
    X_arr, y_arr = _check_driver_input(X, y, n)

    model = OnlineLinearRegression(lambda_=lambda_, fit_bias=fit_bias)
    model.fit(X_arr[:n], y_arr[:n])
    coefficients = [_snapshot(model)]

    for j in range(n, X_arr.shape[0]):
        model.update(X_arr[j], y_arr[j], 1.0)
        coefficients.append(_snapshot(model))
    return coefficients


def rolling_lstsq(
    X: ArrayLike,
    y: ArrayLike,
    n: int,
    lambda_: float = 0.0,
    fit_bias: bool = False,
) -> list[NDArray[np.floating[Any]]]:
    """
    Fixed-window least squares.

    Each step adds the entering row and only then removes the leaving one,
    rather than removing first. The state therefore never holds a window
    of n - 1 rows, which has a singular normal matrix when n equals the
    parameter count.

    Args:
        X: Design matrix (rows x p)
        y: Target (rows,)
        n: Window size, 1 <= n <= rows
        lambda_: Ridge strength
        fit_bias: Model an intercept

    Returns:
        rows - n + 1 coefficient vectors; entry i is the fit on rows
        [i, i + n).
    """
    X_arr, y_arr = _check_driver_input(X, y, n)

    model = OnlineLinearRegression(lambda_=lambda_, fit_bias=fit_bias)
    model.fit(X_arr[:n], y_arr[:n])
    coefficients = [_snapshot(model)]

    for j in range(n, X_arr.shape[0]):
        model.update(X_arr[j], y_arr[j], 1.0)
        model.update(X_arr[j - n], y_arr[j - n], -1.0)
        coefficients.append(_snapshot(model))
    return coefficients


def rolling_skipping_lstsq(
    X: ArrayLike,
    y: ArrayLike,
    n: int,
    m: int,
    lambda_: float = 0.0,
    fit_bias: bool = False,
) -> list[NDArray[np.floating[Any]] | None]:
    """
    Fixed-window least squares over valid (finite) rows only.

    A window position with fewer than m valid rows emits None. The first
    window that reaches m valid rows is fit from scratch on exactly those
    rows; later positions are reached by rank-1 updates applied only for
    valid rows. If the valid count drops below m, the incremental state is
    discarded and the next satisfying window is fit from scratch again.

    A window also needs at least as many valid rows as parameters (p, plus
    one with fit_bias), so m below that count is accepted but only takes
    effect up to it. A window whose valid rows are collinear cannot be
    bootstrapped; it emits None and the fit is retried at the next position.

    Args:
        X: Design matrix (rows x p), may contain NaN
        y: Target (rows,), may contain NaN
        n: Window size, 1 <= n <= rows
        m: Minimum valid rows per window, 1 <= m <= n
        lambda_: Ridge strength
        fit_bias: Model an intercept

    Returns:
        rows - n + 1 entries, each a coefficient vector or None
    """
    X_arr, y_arr = _check_driver_input(X, y, n, allow_non_finite=True)
    check_positive_int(m, 'm')
    if m > n:
        raise ValidationError(f"m: minimum valid rows ({m}) cannot exceed window size ({n})")
    gate = max(m, X_arr.shape[1] + int(fit_bias))

    valid = finite_rows(X_arr, y_arr)
    n_rows = X_arr.shape[0]

    coefficients: list[NDArray[np.floating[Any]] | None] = []
    model: OnlineLinearRegression | None = None
    n_valid = 0

    for right in range(n, n_rows + 1):
        left = right - n

        if model is None:
            # Bootstrap: count and fit the valid rows of this window
            window_valid = valid[left:right]
            n_valid = int(window_valid.sum())
            if n_valid < gate:
                coefficients.append(None)
                continue
            rows = np.flatnonzero(window_valid) + left
            model = OnlineLinearRegression(lambda_=lambda_, fit_bias=fit_bias)
            try:
                model.fit(X_arr[rows], y_arr[rows])
            except SingularMatrixError:
                model = None
                coefficients.append(None)
                continue
            coefficients.append(_snapshot(model))
            continue

        entering, leaving = right - 1, left - 1
        if valid[entering]:
            n_valid += 1
            model.update_unchecked(X_arr[entering], y_arr[entering], 1.0)
        if valid[leaving]:
            n_valid -= 1
            model.update_unchecked(X_arr[leaving], y_arr[leaving], -1.0)

        if n_valid >= gate:
            coefficients.append(_snapshot(model))
        else:
            coefficients.append(None)
            model = None

    return coefficients


def _snapshot(model: OnlineLinearRegression) -> NDArray[np.floating[Any]]:
    if model.fit_bias:
        return np.append(model.coefficients, model.bias)
    return np.array(model.coefficients)


def _check_driver_input(
    X: ArrayLike,
    y: ArrayLike,
    n: int,
    allow_non_finite: bool = False,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    X_arr = as_matrix(X, 'X')
    y_arr = as_vector(y, 'y')
    check_consistent_length(X_arr, y_arr, names=('X', 'y'))
    check_positive_int(n, 'n')

    n_rows = X_arr.shape[0]
    if n > n_rows:
        raise NotEnoughDataError(
            f"n: window size {n} exceeds the {n_rows} available rows",
            n_rows=n_rows,
            n_required=n,
        )
    if not allow_non_finite and not np.all(finite_rows(X_arr[:n], y_arr[:n])):
        raise ValidationError("X, y: initial window contains NaN/Inf rows")
    return X_arr, y_arr
