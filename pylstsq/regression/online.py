"""
Online (incremental) least squares.

OnlineLinearRegression keeps the inverse-information matrix
M = (X'X + λI_f)⁻¹ next to its weights. After one full fit, every new
observation is absorbed (c = +1) or an old one retracted (c = -1) with a
Woodbury rank-1 step in O(p²); the raw data is never revisited.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.exceptions import DimensionError, ModelNotFitError
from pylstsq.core.validation import as_vector, check_non_negative, check_square
from pylstsq.core.compute.linalg.normal_equations import normal_equations
from pylstsq.core.compute.linalg.qr import qr_solve_with_inverse
from pylstsq.core.compute.linalg.woodbury import woodbury_update
from pylstsq.regression.models import BaseLinearRegression


class OnlineLinearRegression(BaseLinearRegression):
    """
    Ordinary / ridge least squares with rank-1 update and downdate.

    fit() solves the normal equations once by pivoted QR and stores the
    inverse. update() then moves the fit by one observation at a time.
    With fit_bias the inverse covers the bias as well, so its dimension
    is len(coefficients) + 1.

    Args:
        lambda_: Ridge strength, >= 0; it stays on the feature diagonal
            of the information matrix through every update
        fit_bias: Model an intercept

    Example:
        >>> model = OnlineLinearRegression().fit(X[:50], y[:50])
        >>> for x_row, y_val in zip(X[50:], y[50:]):
        ...     model.update(x_row, y_val)
    """

    def __init__(self, lambda_: float = 0.0, fit_bias: bool = False):
        super().__init__(fit_bias=fit_bias)
        check_non_negative(lambda_, 'lambda_')
        self.lambda_ = float(lambda_)
        self._inverse: NDArray[np.floating[Any]] | None = None

    @property
    def inverse(self) -> NDArray[np.floating[Any]]:
        """Current inverse-information matrix as a read-only view."""
        if self._inverse is None:
            raise ModelNotFitError(
                "OnlineLinearRegression has no inverse-information matrix yet",
                operation='inverse',
            )
        view = self._inverse.view()
        view.flags.writeable = False
        return view

    def _fit_unchecked(self, X, y) -> None:
        A, B = normal_equations(self._design_with_bias(X), y, self.lambda_, self._fit_bias)
        inverse, weights = qr_solve_with_inverse(A, B)
        coefficients, bias = self._split_bias(weights)
        self._coefficients, self._bias, self._inverse = coefficients, bias, inverse

    def set_coeffs_and_bias(self, coeffs: ArrayLike, bias: float) -> None:
        """
        Replace coefficients and bias.

        The inverse no longer describes these weights, so it is dropped;
        update() is unavailable until fit() or set_coeffs_bias_inverse().
        """
        super().set_coeffs_and_bias(coeffs, bias)
        self._inverse = None

    def set_coeffs_bias_inverse(
        self,
        coeffs: ArrayLike,
        bias: float,
        inverse: ArrayLike,
    ) -> None:
        """
        Restore a complete online state.

        The inverse must be square with dimension len(coeffs) (no bias) or
        len(coeffs) + 1 (bias tracked jointly); fit_bias follows from it.

        Raises:
            DimensionError: If the inverse does not match the coefficients
        """
        coefficients = np.array(as_vector(coeffs, 'coeffs'), dtype=np.float64)
        inverse_arr = np.array(inverse, dtype=np.float64)
        check_square(inverse_arr, 'inverse')

        k = inverse_arr.shape[0]
        p = len(coefficients)
        if k not in (p, p + 1):
            raise DimensionError(
                f"inverse: dimension {k} does not match {p} coefficients "
                f"(expected {p} or {p + 1} with bias)"
            )
        fit_bias = k == p + 1
        bias = float(bias) if fit_bias else 0.0
        self._coefficients, self._bias, self._inverse, self._fit_bias = (
            coefficients, bias, inverse_arr, fit_bias
        )

    def update(self, x: ArrayLike, y: float, c: float = 1.0) -> bool:
        """
        Absorb (c=+1) or retract (c=-1) one observation, skipping NaN rows.

        Args:
            x: Feature row (p,) or (1, p), without a bias entry
            y: Observed target
            c: +1.0 to add the row, -1.0 to remove it

        Returns:
            True if the update was applied, False if the row contained
            non-finite values and was skipped

        Raises:
            ModelNotFitError: If called before fit()
            DimensionError: If x does not have one entry per coefficient,
                or y is not a single value
        """
        self._check_can_update()
        x_arr = self._as_row(x)
        y_val = self._as_target(y)
        if not (np.all(np.isfinite(x_arr)) and np.isfinite(y_val)):
            return False
        self._apply(x_arr, y_val, c)
        return True

    def update_unchecked(self, x: ArrayLike, y: float, c: float = 1.0) -> None:
        """
        Same as update() without the non-finite scan.

        For callers that already track row validity themselves.
        """
        self._check_can_update()
        self._apply(self._as_row(x), self._as_target(y), c)

    def _check_can_update(self) -> None:
        if self._inverse is None or self._coefficients is None:
            raise ModelNotFitError(
                "OnlineLinearRegression must be fit before update()",
                operation='update',
            )

    def _as_row(self, x: ArrayLike) -> NDArray[np.floating[Any]]:
        x_arr = np.asarray(x, dtype=np.float64).reshape(-1)
        if x_arr.shape[0] != len(self._coefficients):
            raise DimensionError(
                f"x: expected {len(self._coefficients)} features, got {x_arr.shape[0]}"
            )
        return x_arr

    @staticmethod
    def _as_target(y: ArrayLike) -> float:
        y_arr = np.asarray(y, dtype=np.float64).reshape(-1)
        if y_arr.shape[0] != 1:
            raise DimensionError(f"y: expected a single target value, got {y_arr.shape[0]}")
        return float(y_arr[0])

    def _apply(self, x: NDArray[np.floating[Any]], y: float, c: float) -> None:
        if self._fit_bias:
            x = np.append(x, 1.0)
            weights = np.append(self._coefficients, self._bias)
        else:
            weights = self._coefficients.copy()

        woodbury_update(self._inverse, weights, x, y, c)

        coefficients, bias = self._split_bias(weights)
        self._coefficients, self._bias = coefficients, bias
