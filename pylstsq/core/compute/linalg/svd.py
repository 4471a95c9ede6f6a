"""
SVD solvers for square normal-equation systems.

Two entry points:
    svd_solve        V Σ⁻¹ U' B with no truncation (generic solve path)
    svd_solve_rcond  singular values below rcond * max are zeroed before
                     inverting; the singular values are returned so rank
                     deficiency and conditioning can be surfaced

A failed factorization (LAPACK non-convergence) never reaches the caller:
both entry points fall back to the pivoted QR solve.
"""

import warnings
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.compute.linalg.qr import qr_solve
from pylstsq.core.validation import check_square


def svd_solve(
    A: NDArray[np.floating[Any]],
    B: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A Z = B via thin SVD, falling back to pivoted QR on failure.

    Args:
        A: Square system matrix (p x p)
        B: Right-hand side (p,) or (p, k)

    Returns:
        Solution Z with the same trailing shape as B
    """
    check_square(A, 'A')
    try:
        U, s, Vt = np.linalg.svd(A, full_matrices=False)
    except np.linalg.LinAlgError:
        return qr_solve(A, B)

    return Vt.T @ _scale_rows(U.T @ B, 1.0 / s)


def svd_solve_rcond(
    A: NDArray[np.floating[Any]],
    B: NDArray[np.floating[Any]],
    rcond: float,
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Truncated SVD solve of a normal-equations system A = X'X (+ ridge).

    The singular values of A are the squares of the singular values of
    the underlying design X. Those design singular values, sqrt(s), are
    what get reported and thresholded: every component with
    sqrt(s_i) < rcond * max(sqrt(s)) is dropped from the pseudo-inverse.

    Args:
        A: Square normal-equations matrix (p x p)
        B: Right-hand side (p,) or (p, k)
        rcond: Relative cutoff in [0, 1)

    Returns:
        (solution, singular_values) where singular_values has shape (p,).
        If the factorization fails the QR solution is returned with NaN
        singular values.
    """
    check_square(A, 'A')
    try:
        U, s, Vt = np.linalg.svd(A, full_matrices=False)
    except np.linalg.LinAlgError:
        warnings.warn(
            "SVD did not converge; falling back to pivoted QR "
            "(singular values unavailable)",
            RuntimeWarning,
            stacklevel=2,
        )
        return qr_solve(A, B), np.full(A.shape[0], np.nan)

    singular_values = np.sqrt(np.maximum(s, 0.0))
    if singular_values.size == 0:
        return np.zeros_like(B, dtype=np.float64), singular_values

    threshold = rcond * singular_values.max()
    keep = singular_values >= threshold
    keep &= s > 0

    s_inv = np.zeros_like(s)
    s_inv[keep] = 1.0 / s[keep]

    solution = Vt.T @ _scale_rows(U.T @ B, s_inv)
    return solution, singular_values


def _scale_rows(
    M: NDArray[np.floating[Any]],
    scale: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    if M.ndim == 1:
        return M * scale
    return M * scale[:, np.newaxis]
