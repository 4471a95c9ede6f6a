"""
Linear algebra kernels for PyLstsq.

All functions follow these conventions:
    - NumPy/SciPy (LAPACK under the hood); matrix products go through
      NumPy's BLAS, which may be multithreaded
    - Systems are square normal-equation matrices A with right-hand side B
    - Errors are raised immediately with clear messages

Submodules:
    qr: Column-pivoted QR solve and inverse (default strategy)
    svd: Thin SVD solve with QR fallback, rcond-truncated solve
    cholesky: Cholesky solve for positive-definite systems
    normal_equations: SolverMethod, system assembly, dispatch, weighted solve
    woodbury: Rank-1 update/downdate of an inverse and its weights
"""

from pylstsq.core.compute.linalg.qr import (
    PivotedQRResult,
    qr_decompose,
    qr_inverse,
    qr_solve,
    qr_solve_with_inverse,
)
from pylstsq.core.compute.linalg.svd import svd_solve, svd_solve_rcond
from pylstsq.core.compute.linalg.cholesky import cholesky_solve
from pylstsq.core.compute.linalg.normal_equations import (
    SolverMethod,
    add_ridge,
    lstsq_rcond,
    normal_equations,
    ridge_rcond,
    solve_lstsq,
    solve_normal_equations,
    weighted_lstsq,
)
from pylstsq.core.compute.linalg.woodbury import woodbury_update

__all__ = [
    # QR decomposition
    "PivotedQRResult",
    "qr_decompose",
    "qr_inverse",
    "qr_solve",
    "qr_solve_with_inverse",
    # SVD
    "svd_solve",
    "svd_solve_rcond",
    # Cholesky
    "cholesky_solve",
    # Normal equations
    "SolverMethod",
    "add_ridge",
    "lstsq_rcond",
    "normal_equations",
    "ridge_rcond",
    "solve_lstsq",
    "solve_normal_equations",
    "weighted_lstsq",
    # Online updates
    "woodbury_update",
]
