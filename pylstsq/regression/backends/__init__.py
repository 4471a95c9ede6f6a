"""
Regression backends.

Available backends:
    CPUNormalEquationsBackend: Ordinary / ridge least squares (QR, SVD, Cholesky)
    CPUCoordinateDescentBackend: Lasso / elastic-net
"""

from pylstsq.regression.backends.cpu import (
    CPUCoordinateDescentBackend,
    CPUNormalEquationsBackend,
)

__all__ = [
    "CPUNormalEquationsBackend",
    "CPUCoordinateDescentBackend",
]
