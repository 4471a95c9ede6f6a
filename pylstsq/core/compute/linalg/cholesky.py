"""
Cholesky solver for symmetric positive-definite normal equations.

Fast path for well-posed systems: A = L L', then two triangular solves.
Only valid when A is strictly positive definite. A failed factorization
raises NotPositiveDefiniteError; this path never substitutes another
method on its own.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import cho_factor, cho_solve

from pylstsq.core.exceptions import NotPositiveDefiniteError
from pylstsq.core.validation import check_square


def cholesky_solve(
    A: NDArray[np.floating[Any]],
    B: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve A Z = B via Cholesky factorization.

    Args:
        A: Symmetric positive-definite matrix (p x p)
        B: Right-hand side (p,) or (p, k)

    Returns:
        Solution Z with the same trailing shape as B

    Raises:
        NotPositiveDefiniteError: If A is not strictly positive definite
    """
    check_square(A, 'A')
    try:
        factor = cho_factor(A, lower=True, check_finite=True)
    except np.linalg.LinAlgError as e:
        min_eig = float(np.linalg.eigvalsh(A).min()) if np.all(np.isfinite(A)) else None
        raise NotPositiveDefiniteError(
            f"Cholesky factorization failed: normal-equations matrix is not "
            f"positive definite (min eigenvalue={min_eig}). Use method='qr' or "
            f"method='svd' for rank-deficient data.",
            matrix_name="X'X",
            min_eigenvalue=min_eig,
        ) from e

    return cho_solve(factor, B)
