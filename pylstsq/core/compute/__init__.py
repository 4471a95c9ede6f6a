"""
Shared compute infrastructure for PyLstsq.

This module provides timing utilities, precision helpers, linear algebra
kernels and optimization routines shared by the regression models.

IMPORTANT: This is NOT where models live. Those go in pylstsq.regression.
This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    precision: Numerical precision constants and utilities
    linalg: Decomposition solvers and the Woodbury rank-1 update
    optimization: Coordinate descent
"""

from pylstsq.core.compute.timing import Timer

__all__ = [
    # Timing
    "Timer",
]
