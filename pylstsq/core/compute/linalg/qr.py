"""
Column-pivoted QR solvers for square normal-equation systems.

The default decomposition strategy. Given A (p x p, typically X'X or
X'X + lambda*I) and a right-hand side B, factor A P = Q R with column
pivoting so that |R[0,0]| >= |R[1,1]| >= ... and the numerical rank can be
read off the diagonal of R. Rank-deficient systems get the basic solution:
the coefficients of pivoted-out columns are zero.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import qr as scipy_qr, solve_triangular

from pylstsq.core.exceptions import SingularMatrixError
from pylstsq.core.validation import check_square


@dataclass(frozen=True)
class PivotedQRResult:
    """
    Result of a column-pivoted QR decomposition A[:, pivot] = Q R.

    Attributes:
        Q: Orthogonal matrix (p x p)
        R: Upper triangular matrix (p x p), diagonal non-increasing in magnitude
        pivot: Column permutation (p,)
        rank: Numerical rank determined from R diagonal
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    pivot: NDArray[np.intp]
    rank: int


def qr_decompose(A: NDArray[np.floating[Any]]) -> PivotedQRResult:
    """
    Column-pivoted QR decomposition using LAPACK (via SciPy).

    Args:
        A: Square matrix to decompose (p x p)

    Returns:
        PivotedQRResult with Q, R, pivot and numerical rank
    """
    check_square(A, 'A')
    Q, R, pivot = scipy_qr(A, mode='economic', pivoting=True)

    # Determine numerical rank from R diagonal
    diag_R = np.abs(np.diag(R))
    if len(diag_R) > 0 and diag_R[0] > 0:
        # Tolerance based on matrix size and machine epsilon
        tol = max(A.shape) * np.finfo(A.dtype).eps * diag_R[0]
        rank = int(np.sum(diag_R > tol))
    else:
        rank = 0

    return PivotedQRResult(Q=Q, R=R, pivot=pivot, rank=rank)


def qr_solve(
    A: NDArray[np.floating[Any]],
    B: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A Z = B via column-pivoted QR.

    The solution is computed as:
        A P = QR
        Z[pivot[:r]] = R[:r, :r]⁻¹ (Q'B)[:r],   Z[pivot[r:]] = 0
    where r is the numerical rank of A.

    Args:
        A: Square system matrix (p x p)
        B: Right-hand side (p,) or (p, k)

    Returns:
        Solution Z with the same trailing shape as B
    """
    qr_result = qr_decompose(A)
    return _solve_from_qr(qr_result, B)


def qr_inverse(A: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Invert A via column-pivoted QR: A⁻¹ = P R⁻¹ Q'.

    Raises:
        SingularMatrixError: If A is numerically rank-deficient
    """
    qr_result = qr_decompose(A)
    return _inverse_from_qr(qr_result)


def qr_solve_with_inverse(
    A: NDArray[np.floating[Any]],
    B: NDArray[np.floating[Any]],
) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
    """
    Factor A once and return both its inverse and the solution of A Z = B.

    Used to bootstrap online models, which need the inverse-information
    matrix alongside the initial weights.

    Returns:
        (inverse, solution)

    Raises:
        SingularMatrixError: If A is numerically rank-deficient
    """
    qr_result = qr_decompose(A)
    inverse = _inverse_from_qr(qr_result)
    solution = _solve_from_qr(qr_result, B)
    return inverse, solution


def _solve_from_qr(
    qr_result: PivotedQRResult,
    B: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    p = qr_result.R.shape[1]
    r = qr_result.rank

    Qtb = qr_result.Q.T @ B
    z = np.zeros((p,) + Qtb.shape[1:], dtype=np.float64)
    if r > 0:
        # Back substitution on the leading full-rank block
        z[:r] = solve_triangular(qr_result.R[:r, :r], Qtb[:r], lower=False)

    solution = np.empty_like(z)
    solution[qr_result.pivot] = z
    return solution


def _inverse_from_qr(qr_result: PivotedQRResult) -> NDArray[np.floating[Any]]:
    p = qr_result.R.shape[1]
    if qr_result.rank < p:
        raise SingularMatrixError(
            f"Normal-equations matrix is rank-deficient: rank={qr_result.rank}, "
            f"expected={p}. Cannot form the inverse-information matrix.",
            matrix_name="X'X",
            rank=qr_result.rank,
            expected_rank=p,
        )

    Rinv_Qt = solve_triangular(qr_result.R, qr_result.Q.T, lower=False)
    inverse = np.empty_like(Rinv_Qt)
    inverse[qr_result.pivot] = Rinv_Qt
    return inverse
