"""
Batch linear regression models.

Two concrete models share one contract (fit, predict, coefficients, bias):

    LinearRegression  ordinary / ridge least squares via the normal
                      equations and a configurable decomposition
    ElasticNet        lasso / elastic-net via cyclic coordinate descent

A bias (intercept) is tracked outside the coefficient vector but solved
jointly: a ones column is appended to X before solving and the last
coefficient is peeled off into the bias. Regularization never touches it.

Models are single-owner and not safe for concurrent mutation; read-only
accessors may be shared between readers.
"""

from __future__ import annotations

import warnings
from abc import ABC, abstractmethod
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.exceptions import (
    ConvergenceError,
    DimensionError,
    ModelNotFitError,
    NotEnoughDataError,
)
from pylstsq.core.validation import (
    as_matrix,
    as_vector,
    check_consistent_length,
    check_finite,
    check_non_negative,
    check_positive,
    check_positive_int,
)
from pylstsq.core.compute.precision import EPSILON_64, is_effectively_zero
from pylstsq.core.compute.linalg.normal_equations import SolverMethod, solve_lstsq
from pylstsq.core.compute.optimization.coordinate_descent import coordinate_descent


class BaseLinearRegression(ABC):
    """
    Shared fit/predict contract for linear models.

    Subclasses implement _fit_unchecked(); everything else (validation,
    bias bookkeeping, prediction, read-only accessors) lives here.

    A model is unfit until its coefficients are populated. Reading the
    coefficients, predicting or updating an unfit model raises
    ModelNotFitError rather than returning an empty result.
    """

    # Closed-form solvers need at least as many rows as columns
    _requires_rows_ge_cols: bool = True

    def __init__(self, fit_bias: bool = False):
        self._fit_bias = bool(fit_bias)
        self._coefficients: NDArray[np.floating[Any]] | None = None
        self._bias = 0.0

    # === State accessors ===

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        """Feature coefficients (bias excluded) as a read-only view."""
        if self._coefficients is None:
            raise ModelNotFitError(
                f"{type(self).__name__} has not been fit yet",
                operation='coefficients',
            )
        view = self._coefficients.view()
        view.flags.writeable = False
        return view

    @property
    def bias(self) -> float:
        return self._bias

    @property
    def fit_bias(self) -> bool:
        return self._fit_bias

    @property
    def is_fit(self) -> bool:
        return self._coefficients is not None

    @property
    def n_features(self) -> int:
        return len(self.coefficients)

    def coefficients_as_list(self) -> list[float]:
        """Copy of the coefficients as plain floats."""
        return [float(c) for c in self.coefficients]

    def set_coeffs_and_bias(self, coeffs: ArrayLike, bias: float) -> None:
        """
        Replace coefficients and bias together.

        fit_bias becomes True exactly when |bias| exceeds machine epsilon,
        so a model built from values predicts the way it was described.
        """
        coefficients = np.array(as_vector(coeffs, 'coeffs'), dtype=np.float64)
        bias = float(bias)
        self._coefficients, self._bias, self._fit_bias = (
            coefficients, bias, not is_effectively_zero(bias)
        )

    @classmethod
    def from_values(cls, coeffs: ArrayLike, bias: float):
        """Build an already-fit model from known coefficients and bias."""
        model = cls()
        model.set_coeffs_and_bias(coeffs, bias)
        return model

    # === Fit / predict ===

    def fit(self, X: ArrayLike, y: ArrayLike):
        """
        Fit the model.

        Args:
            X: Feature matrix (n x p), without a bias column; one is
               appended internally when fit_bias is set
            y: Target (n,) or (n, 1)

        Returns:
            self

        Raises:
            DimensionError: If X and y disagree on the number of rows
            NotEnoughDataError: If there are no rows, or fewer rows than
                columns on a closed-form path
            ValidationError: If X or y contain NaN/Inf
        """
        X_arr, y_arr = self._check_fit_input(X, y)
        self._fit_unchecked(X_arr, y_arr)
        return self

    def predict(self, X: ArrayLike) -> NDArray[np.floating[Any]]:
        """
        Predict Xβ (+ bias).

        Raises:
            ModelNotFitError: If the model has not been fit
            DimensionError: If X does not have one column per coefficient
        """
        if self._coefficients is None:
            raise ModelNotFitError(
                f"{type(self).__name__} must be fit before predict()",
                operation='predict',
            )
        X_arr = as_matrix(X, 'X')
        if X_arr.shape[1] != len(self._coefficients):
            raise DimensionError(
                f"X: expected {len(self._coefficients)} columns, got {X_arr.shape[1]}"
            )
        result = X_arr @ self._coefficients
        if self._fit_bias and abs(self._bias) > EPSILON_64:
            result = result + self._bias
        return result

    @abstractmethod
    def _fit_unchecked(
        self,
        X: NDArray[np.floating[Any]],
        y: NDArray[np.floating[Any]],
    ) -> None:
        """Fit on validated float64 arrays."""
        ...

    # === Helpers ===

    def _check_fit_input(
        self,
        X: ArrayLike,
        y: ArrayLike,
    ) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        X_arr = as_matrix(X, 'X')
        y_arr = as_vector(y, 'y')
        check_consistent_length(X_arr, y_arr, names=('X', 'y'))

        n, p = X_arr.shape
        if p == 0:
            raise DimensionError("X: must have at least one feature column")
        if n == 0:
            raise NotEnoughDataError("X: no rows to fit", n_rows=0, n_required=1)
        if self._requires_rows_ge_cols and n < p:
            raise NotEnoughDataError(
                f"X: {n} rows is fewer than {p} features; no conclusive result",
                n_rows=n,
                n_required=p,
            )
        check_finite(X_arr, 'X')
        check_finite(y_arr, 'y')
        return X_arr, y_arr

    def _design_with_bias(self, X: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        if not self._fit_bias:
            return X
        return np.column_stack([X, np.ones(X.shape[0], dtype=np.float64)])

    def _split_bias(
        self,
        all_coefficients: NDArray[np.floating[Any]],
    ) -> tuple[NDArray[np.floating[Any]], float]:
        if self._fit_bias:
            return np.array(all_coefficients[:-1]), float(all_coefficients[-1])
        return np.array(all_coefficients), 0.0

    def __repr__(self) -> str:
        state = f"n_features={len(self._coefficients)}" if self.is_fit else "unfit"
        return f"{type(self).__name__}({state}, fit_bias={self._fit_bias})"


class LinearRegression(BaseLinearRegression):
    """
    Ordinary and ridge least squares.

    Solves (X'X + λI_f) β = X'y where I_f covers the feature diagonal only.

    Args:
        method: Decomposition strategy ('qr' default, 'svd', 'cholesky')
        lambda_: Ridge strength, >= 0 (0 gives ordinary least squares)
        fit_bias: Model an intercept

    Example:
        >>> model = LinearRegression(fit_bias=True).fit(X, y)
        >>> model.coefficients, model.bias
    """

    def __init__(
        self,
        method: SolverMethod | str = SolverMethod.QR,
        lambda_: float = 0.0,
        fit_bias: bool = False,
    ):
        super().__init__(fit_bias=fit_bias)
        check_non_negative(lambda_, 'lambda_')
        self.method = SolverMethod.parse(method)
        self.lambda_ = float(lambda_)

    def _fit_unchecked(self, X, y) -> None:
        all_coefficients = solve_lstsq(
            self._design_with_bias(X), y, self.lambda_, self._fit_bias, self.method,
        )
        self._coefficients, self._bias = self._split_bias(all_coefficients)


class ElasticNet(BaseLinearRegression):
    """
    Lasso / elastic-net regression by cyclic coordinate descent.

    Unlike the closed-form models, more features than rows is allowed.
    Non-convergence within max_iter is reported (converged=False and a
    RuntimeWarning) and the last iterate is kept. With
    raise_on_nonconvergence the last iterate is still kept but a
    ConvergenceError is raised instead of the warning.

    Args:
        l1_reg: L1 strength, >= 0
        l2_reg: L2 strength, >= 0
        fit_bias: Model an (unpenalized) intercept
        tol: Convergence threshold on the largest coordinate change
        max_iter: Maximum number of coordinate sweeps
        raise_on_nonconvergence: Raise ConvergenceError when max_iter is
            reached
    """

    _requires_rows_ge_cols = False

    def __init__(
        self,
        l1_reg: float = 0.0,
        l2_reg: float = 0.0,
        fit_bias: bool = False,
        tol: float = 1e-5,
        max_iter: int = 2000,
        raise_on_nonconvergence: bool = False,
    ):
        super().__init__(fit_bias=fit_bias)
        check_non_negative(l1_reg, 'l1_reg')
        check_non_negative(l2_reg, 'l2_reg')
        check_positive(tol, 'tol')
        check_positive_int(max_iter, 'max_iter')
        self.l1_reg = float(l1_reg)
        self.l2_reg = float(l2_reg)
        self.tol = float(tol)
        self.max_iter = int(max_iter)
        self.raise_on_nonconvergence = bool(raise_on_nonconvergence)
        self.converged: bool | None = None
        self.n_iter: int | None = None

    def regularizers(self) -> tuple[float, float]:
        return self.l1_reg, self.l2_reg

    def _fit_unchecked(self, X, y) -> None:
        cd = coordinate_descent(
            self._design_with_bias(X),
            y,
            self.l1_reg,
            self.l2_reg,
            self._fit_bias,
            self.tol,
            self.max_iter,
        )
        self._coefficients, self._bias = self._split_bias(cd.coefficients)
        self.converged = cd.converged
        self.n_iter = cd.n_iter

        if not cd.converged:
            message = (
                f"Coordinate descent did not converge in {self.max_iter} iterations "
                f"(max coordinate change={cd.max_change:.3e}, tol={self.tol:.1e})"
            )
            if self.raise_on_nonconvergence:
                raise ConvergenceError(
                    message,
                    iterations=cd.n_iter,
                    final_change=cd.max_change,
                    reason='max_iterations',
                    threshold=self.tol,
                )
            warnings.warn(message, RuntimeWarning, stacklevel=3)
