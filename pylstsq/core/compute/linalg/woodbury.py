"""
Rank-1 update/downdate of a least-squares fit (Sherman-Morrison-Woodbury).

Given M = (X'X)⁻¹ and the weights β solving the normal equations, adding
(c = +1) or removing (c = -1) one observation (x, y) changes the system
by the rank-1 term c⁻¹ x'x. With u = M x':

    z  = 1 / (c + x u)
    M ← M - z u u'
    β ← β + z (y - x β) u

This is exact, costs O(p²), and never touches the rest of the data.
Combined, an add and a remove give an exact sliding window.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray


def woodbury_update(
    inverse: NDArray[np.floating[Any]],
    weights: NDArray[np.floating[Any]],
    x: NDArray[np.floating[Any]],
    y: float,
    c: float = 1.0,
) -> None:
    """
    Apply one rank-1 update in place.

    Args:
        inverse: Current inverse-information matrix (p x p), updated in place
        weights: Current weights (p,), updated in place
        x: Observation row (p,)
        y: Observed target
        c: +1.0 to add the observation, -1.0 to remove it

    Note:
        Removing an observation that leaves X'X singular divides by zero;
        the caller decides which rows may be removed.
    """
    u = inverse @ x
    z = 1.0 / (c + x @ u)

    # inverse is symmetric, so the left and right update vectors coincide
    inverse -= z * np.outer(u, u)

    residual = y - x @ weights
    weights += (z * residual) * u
