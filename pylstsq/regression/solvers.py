"""
Solver dispatch for least squares.

This module provides the public array-level API and backend selection:

    lstsq            one fit (ordinary, ridge, lasso, elastic-net)
    lstsq_report     ordinary fit with per-parameter inference table
    recursive_lstsq  growing-window coefficients, one per row
    rolling_lstsq    fixed-window coefficients, one per row, optional
                     null skipping
"""

from __future__ import annotations

from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.exceptions import ValidationError
from pylstsq.core.validation import (
    as_matrix,
    as_vector,
    check_consistent_length,
    finite_rows,
)
from pylstsq.core.compute.linalg.normal_equations import SolverMethod
from pylstsq.regression.config import LstsqConfig
from pylstsq.regression.design import BIAS_NAME, Design
from pylstsq.regression.solution import CoefficientReport, LstsqSolution, WindowedSolution
from pylstsq.regression.backends.cpu import (
    CPUCoordinateDescentBackend,
    CPUNormalEquationsBackend,
)
from pylstsq.regression import rolling


def lstsq(
    X: ArrayLike,
    y: ArrayLike,
    *,
    bias: bool = False,
    skip_null: bool = False,
    method: SolverMethod | str = SolverMethod.QR,
    l1_reg: float = 0.0,
    l2_reg: float = 0.0,
    tol: float = 1e-5,
    max_iter: int = 2000,
    feature_names: Sequence[str] | None = None,
) -> LstsqSolution:
    """
    Fit a linear least-squares model.

    The penalty follows from the strengths:
        l1_reg == 0, l2_reg == 0   ordinary least squares
        l1_reg == 0, l2_reg > 0    ridge with lambda = l2_reg
        l1_reg > 0                 lasso / elastic-net by coordinate descent

    Args:
        X: Feature matrix (n x p), without a bias column
        y: Response vector (n,)
        bias: Model an intercept (never penalized)
        skip_null: Drop rows with NaN/Inf instead of failing
        method: Normal-equations decomposition: 'qr' (default), 'svd',
            'cholesky'. Ignored by coordinate descent.
        l1_reg: L1 strength, >= 0
        l2_reg: L2 strength, >= 0
        tol: Coordinate-descent convergence threshold
        max_iter: Coordinate-descent sweep limit
        feature_names: Names for the columns of X

    Returns:
        LstsqSolution with coefficients, predictions, residuals and
        inference accessors

    Raises:
        ValidationError: Invalid options, or nulls with skip_null=False
        DimensionError: If X and y have inconsistent dimensions
        NotEnoughDataError: Fewer rows than features on a closed-form path

    Example:
        >>> result = lstsq(X, y, bias=True)
        >>> result.coefficients, result.bias
        >>> print(result.summary())
    """
    config = LstsqConfig(
        bias=bias,
        skip_null=skip_null,
        method=method,
        l1_reg=l1_reg,
        l2_reg=l2_reg,
        tol=tol,
        max_iter=max_iter,
    )
    design = Design.from_arrays(
        X, y, bias=config.bias, skip_null=config.skip_null, feature_names=feature_names,
    )
    backend_impl = _get_backend(config)
    result = backend_impl.solve(design)
    return LstsqSolution(_result=result, _design=design)


def lstsq_report(
    X: ArrayLike,
    y: ArrayLike,
    *,
    bias: bool = False,
    skip_null: bool = False,
    feature_names: Sequence[str] | None = None,
) -> CoefficientReport:
    """
    Ordinary least squares with a per-parameter inference table.

    Standard errors come from σ̂² = RSS / (n - p) and diag((X'X)⁻¹);
    p-values from the Student-t survival function at n - p degrees of
    freedom. The bias, when modeled, is reported last as '__bias__'.
    """
    return lstsq(
        X, y, bias=bias, skip_null=skip_null, feature_names=feature_names,
    ).report()


def recursive_lstsq(
    X: ArrayLike,
    y: ArrayLike,
    n: int,
    *,
    bias: bool = False,
    l2_reg: float = 0.0,
    feature_names: Sequence[str] | None = None,
) -> WindowedSolution:
    """
    Growing-window least squares: fit rows [0, n), then add one row at a time.

    Row j (j >= n - 1) gets the coefficients of the fit on rows [0, j].
    Rows before n - 1 have no fit. Nulls are not supported.

    Args:
        X: Feature matrix (rows x p)
        y: Response vector (rows,)
        n: Initial window size
        bias: Model an intercept
        l2_reg: Ridge strength
        feature_names: Names for the columns of X

    Raises:
        ValidationError: If the data contains NaN/Inf
    """
    X_arr, y_arr, names = _windowed_input(X, y, bias, feature_names)
    config = LstsqConfig(bias=bias, l2_reg=l2_reg, window_size=n)
    if not np.all(finite_rows(X_arr, y_arr)):
        raise ValidationError("recursive_lstsq: data must not contain NaN/Inf")

    snapshots = rolling.recursive_lstsq(
        X_arr, y_arr, config.window_size, config.l2_reg, config.bias,
    )
    return _assemble_windowed(X_arr, snapshots, config, names)


def rolling_lstsq(
    X: ArrayLike,
    y: ArrayLike,
    window_size: int,
    *,
    min_valid: int | None = None,
    bias: bool = False,
    skip_null: bool = False,
    l2_reg: float = 0.0,
    feature_names: Sequence[str] | None = None,
) -> WindowedSolution:
    """
    Fixed-window least squares.

    Row j (j >= window_size - 1) gets the coefficients of the fit on rows
    [j - window_size + 1, j].

    With skip_null, rows containing NaN/Inf are left out of each window
    and a window needs at least min_valid (default window_size) valid rows,
    and no fewer than the number of parameters, to produce coefficients.

    Args:
        X: Feature matrix (rows x p)
        y: Response vector (rows,)
        window_size: Rows per window
        min_valid: Minimum valid rows per window (requires skip_null)
        bias: Model an intercept
        skip_null: Skip rows with NaN/Inf instead of failing
        l2_reg: Ridge strength
        feature_names: Names for the columns of X

    Raises:
        ValidationError: Nulls with skip_null=False, or min_valid without skip_null
    """
    X_arr, y_arr, names = _windowed_input(X, y, bias, feature_names)
    config = LstsqConfig(
        bias=bias,
        skip_null=skip_null,
        l2_reg=l2_reg,
        window_size=window_size,
        min_valid=min_valid,
    )

    if config.skip_null:
        m = config.min_valid if config.min_valid is not None else config.window_size
        snapshots = rolling.rolling_skipping_lstsq(
            X_arr, y_arr, config.window_size, m, config.l2_reg, config.bias,
        )
    else:
        if config.min_valid is not None:
            raise ValidationError("min_valid requires skip_null=True")
        if not np.all(finite_rows(X_arr, y_arr)):
            raise ValidationError(
                "rolling_lstsq: data contains NaN/Inf; pass skip_null=True to skip those rows"
            )
        snapshots = rolling.rolling_lstsq(
            X_arr, y_arr, config.window_size, config.l2_reg, config.bias,
        )

    return _assemble_windowed(X_arr, snapshots, config, names)


def _get_backend(config: LstsqConfig):
    """
    Select and instantiate the appropriate backend.

    Args:
        config: Validated options

    Returns:
        Backend instance ready to solve
    """
    if config.regularization.uses_coordinate_descent:
        return CPUCoordinateDescentBackend(
            l1_reg=config.l1_reg,
            l2_reg=config.l2_reg,
            tol=config.tol,
            max_iter=config.max_iter,
        )
    return CPUNormalEquationsBackend(method=config.method, lambda_=config.l2_reg)


def _windowed_input(
    X: ArrayLike,
    y: ArrayLike,
    bias: bool,
    feature_names: Sequence[str] | None,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]], tuple[str, ...]]:
    X_arr = as_matrix(X, 'X')
    y_arr = as_vector(y, 'y')
    check_consistent_length(X_arr, y_arr, names=('X', 'y'))

    p = X_arr.shape[1]
    names = tuple(feature_names) if feature_names is not None else tuple(f"x{i}" for i in range(p))
    if len(names) != p:
        raise ValidationError(f"feature_names: expected {p} names, got {len(names)}")

    if bias:
        names = names + (BIAS_NAME,)
    return X_arr, y_arr, names


def _assemble_windowed(
    X: NDArray[np.floating[Any]],
    snapshots: list[NDArray[np.floating[Any]] | None],
    config: LstsqConfig,
    names: tuple[str, ...],
) -> WindowedSolution:
    if config.bias:
        X = np.column_stack([X, np.ones(X.shape[0], dtype=np.float64)])
    n_rows, k = X.shape
    window_size = config.window_size
    coefficients = np.full((n_rows, k), np.nan, dtype=np.float64)
    is_fit = np.zeros(n_rows, dtype=bool)

    for i, snapshot in enumerate(snapshots):
        if snapshot is not None:
            row = window_size - 1 + i
            coefficients[row] = snapshot
            is_fit[row] = True

    predictions = np.full(n_rows, np.nan, dtype=np.float64)
    predictions[is_fit] = np.einsum('ij,ij->i', X[is_fit], coefficients[is_fit])

    return WindowedSolution(
        coefficients=coefficients,
        predictions=predictions,
        is_fit=is_fit,
        feature_names=names,
        window_size=window_size,
    )
