"""
Optimization routines for PyLstsq.

Provides iterative solvers for penalties without a closed form
(coordinate descent for lasso / elastic-net).
"""

from pylstsq.core.compute.optimization.coordinate_descent import (
    CoordinateDescentResult,
    coordinate_descent,
    soft_threshold,
)

__all__ = [
    "CoordinateDescentResult",
    "coordinate_descent",
    "soft_threshold",
]
