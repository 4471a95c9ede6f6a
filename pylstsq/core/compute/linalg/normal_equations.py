"""
Normal-equation assembly and solver dispatch.

Every closed-form fit in PyLstsq reduces to a square system

    A Z = B,   A = X'X (+ lambda on the feature diagonal),   B = X'y

or its weighted form A = X'WX, B = X'Wy. This module builds those
systems and routes them to one of the decomposition strategies:

    SolverMethod.QR        column-pivoted QR (default)
    SolverMethod.SVD       thin SVD, falls back to QR on failure
    SolverMethod.CHOLESKY  Cholesky, strictly positive-definite A only

Ridge regularization is never applied to the bias row/column: when the
design carries its ones column last (has_bias=True), only the first
p - 1 diagonal entries receive lambda.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import DimensionError, ValidationError
from pylstsq.core.compute.precision import default_rcond
from pylstsq.core.compute.linalg.qr import qr_solve
from pylstsq.core.compute.linalg.svd import svd_solve, svd_solve_rcond
from pylstsq.core.compute.linalg.cholesky import cholesky_solve
from pylstsq.core.validation import check_non_negative


class SolverMethod(Enum):
    """Closed set of decomposition strategies for the normal equations."""
    QR = 'qr'
    SVD = 'svd'
    CHOLESKY = 'cholesky'

    @classmethod
    def parse(cls, value: SolverMethod | str) -> SolverMethod:
        """
        Strictly parse a user-facing method name.

        Accepts a SolverMethod, or one of 'qr', 'normal', 'svd',
        'cholesky', 'choleskey' (case-insensitive).

        Raises:
            ValidationError: On any other value
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in _METHOD_ALIASES:
                return _METHOD_ALIASES[key]
        valid = ", ".join(repr(k) for k in _METHOD_ALIASES)
        raise ValidationError(f"Unknown solver method: {value!r}. Expected one of {valid}")


_METHOD_ALIASES = {
    'qr': SolverMethod.QR,
    'normal': SolverMethod.QR,
    'svd': SolverMethod.SVD,
    'cholesky': SolverMethod.CHOLESKY,
    'choleskey': SolverMethod.CHOLESKY,
}


def add_ridge(
    A: NDArray[np.floating[Any]],
    lambda_: float,
    has_bias: bool,
) -> NDArray[np.floating[Any]]:
    """
    Add lambda to the feature diagonal of A in place and return A.

    The last diagonal entry is skipped when has_bias is set; lambda == 0
    leaves A untouched.
    """
    check_non_negative(lambda_, 'lambda_')
    n_features = A.shape[0] - int(has_bias)
    if lambda_ > 0 and n_features >= 1:
        idx = np.arange(n_features)
        A[idx, idx] += lambda_
    return A


def normal_equations(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    lambda_: float = 0.0,
    has_bias: bool = False,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Build A = X'X (+ ridge) and B = X'y.

    Args:
        X: Design matrix (n x p); when has_bias, its last column is the ones column
        y: Target (n,) or (n, k)
        lambda_: Ridge strength, >= 0
        has_bias: Whether the last column of X is the bias column

    Returns:
        (A, B)
    """
    if X.shape[0] != y.shape[0]:
        raise DimensionError(f"Inconsistent lengths: X={X.shape[0]}, y={y.shape[0]}")
    A = X.T @ X
    B = X.T @ y
    return add_ridge(A, lambda_, has_bias), B


def solve_normal_equations(
    A: NDArray[np.floating[Any]],
    B: NDArray[np.floating[Any]],
    method: SolverMethod | str = SolverMethod.QR,
) -> NDArray[np.floating[Any]]:
    """Solve A Z = B with the requested decomposition strategy."""
    method = SolverMethod.parse(method)
    if method is SolverMethod.QR:
        return qr_solve(A, B)
    elif method is SolverMethod.SVD:
        return svd_solve(A, B)
    elif method is SolverMethod.CHOLESKY:
        return cholesky_solve(A, B)
    else:
        raise ValidationError(f"Unsupported solver method: {method!r}")


def solve_lstsq(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    lambda_: float = 0.0,
    has_bias: bool = False,
    method: SolverMethod | str = SolverMethod.QR,
) -> NDArray[np.floating[Any]]:
    """
    Least squares (ridge when lambda_ > 0) via the normal equations.

    Returns:
        Coefficients (p,), bias last when has_bias
    """
    A, B = normal_equations(X, y, lambda_, has_bias)
    return solve_normal_equations(A, B, method)


def weighted_lstsq(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    w: NDArray[np.floating[Any]],
    method: SolverMethod | str = SolverMethod.QR,
) -> NDArray[np.floating[Any]]:
    """
    Weighted least squares: solve X'WX Z = X'Wy with W = diag(w).

    Args:
        X: Design matrix (n x p)
        y: Target (n,)
        w: Non-negative observation weights (n,)
        method: Decomposition strategy

    Raises:
        DimensionError: If X, y, w disagree on n
        ValidationError: If any weight is negative or non-finite
    """
    w = np.asarray(w, dtype=np.float64)
    if w.ndim != 1 or w.shape[0] != X.shape[0] or y.shape[0] != X.shape[0]:
        raise DimensionError(
            f"Inconsistent lengths: X={X.shape[0]}, y={y.shape[0]}, w={w.shape}"
        )
    if not np.all(np.isfinite(w)) or np.any(w < 0):
        raise ValidationError("w: weights must be finite and non-negative")

    XtW = X.T * w
    return solve_normal_equations(XtW @ X, XtW @ y, method)


def lstsq_rcond(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    rcond: float | None = None,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Least squares with small singular values of X zeroed out.

    Args:
        X: Design matrix (n x p)
        y: Target (n,)
        rcond: Relative cutoff; defaults to eps * max(n, p)

    Returns:
        (coefficients, singular_values of X)
    """
    return ridge_rcond(X, y, 0.0, False, rcond)


def ridge_rcond(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    lambda_: float,
    has_bias: bool,
    rcond: float | None = None,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Ridge regression through the truncated SVD solve.

    Returns:
        (coefficients, singular values) of the ridge-augmented system
    """
    if rcond is None:
        rcond = default_rcond(X.shape)
    check_non_negative(rcond, 'rcond')
    A, B = normal_equations(X, y, lambda_, has_bias)
    return svd_solve_rcond(A, B, rcond)
