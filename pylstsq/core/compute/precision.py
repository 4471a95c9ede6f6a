"""
Numerical precision constants and utilities.

Provides machine epsilon and the small helpers the solvers use to decide
when a value is numerically zero.
"""

import numpy as np


# Machine epsilon for float64
EPSILON_64: float = float(np.finfo(np.float64).eps)  # ~2.22e-16


def machine_epsilon(dtype: np.dtype | type = np.float64) -> float:
    """
    Get machine epsilon for a given dtype.

    Args:
        dtype: NumPy dtype or type

    Returns:
        Machine epsilon for the dtype
    """
    return float(np.finfo(dtype).eps)


def is_effectively_zero(value: float) -> bool:
    """True if |value| does not exceed float64 machine epsilon."""
    return abs(value) <= EPSILON_64


def default_rcond(shape: tuple[int, ...]) -> float:
    """
    Default relative cutoff for small singular values.

    Same convention as numpy.linalg.lstsq: eps * max(n, p).
    """
    return EPSILON_64 * max(shape)
