"""
Core infrastructure for PyLstsq.

This module provides shared abstractions, utilities, and compute kernels
used by the regression models and windowed drivers.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing, precision, linear algebra kernels, optimization
"""

from pylstsq.core.result import Result
from pylstsq.core.exceptions import (
    PyLstsqError,
    ValidationError,
    DimensionError,
    NotEnoughDataError,
    ModelNotFitError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    ConvergenceError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyLstsqError",
    "ValidationError",
    "DimensionError",
    "NotEnoughDataError",
    "ModelNotFitError",
    "NumericalError",
    "SingularMatrixError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
]
