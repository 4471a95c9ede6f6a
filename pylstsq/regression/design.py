"""
Regression Design.

Design turns caller arrays into what the models consume: a finite
feature matrix, a target vector, and the bookkeeping needed to map results
back onto the caller's rows (which rows were skipped as null, whether an
intercept is modeled, what each coefficient is called).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.exceptions import DimensionError, ValidationError
from pylstsq.core.validation import (
    as_matrix,
    as_vector,
    check_consistent_length,
    check_min_samples,
    finite_rows,
)

BIAS_NAME = '__bias__'


@dataclass(frozen=True)
class Design:
    """
    Regression design specification.

    Immutable after construction. X and y hold only the rows that take
    part in the fit; mask records which of the caller's rows those are.

    Construction:
        Design.from_arrays(X, y)
        Design.from_arrays(X, y, bias=True, skip_null=True)
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _mask: NDArray[np.bool_]
    _has_bias: bool
    _feature_names: tuple[str, ...]

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        *,
        bias: bool = False,
        skip_null: bool = False,
        feature_names: Sequence[str] | None = None,
    ) -> Design:
        """
        Build Design from arrays.

        Args:
            X: Features (n x p); a 1D array is one feature
            y: Target (n,) or (n, 1)
            bias: Model an intercept
            skip_null: Drop rows where any feature or the target is NaN/Inf.
                When False such rows are an error.
            feature_names: One name per column of X; defaults to x0, x1, ...

        Raises:
            ValidationError: Nulls present with skip_null=False
            DimensionError: X and y lengths differ, or feature_names mismatch
            NotEnoughDataError: No usable rows
        """
        X_arr = as_matrix(X, 'X')
        y_arr = as_vector(y, 'y')
        check_consistent_length(X_arr, y_arr, names=('X', 'y'))

        p = X_arr.shape[1]
        if p == 0:
            raise DimensionError("X: must have at least one feature column")

        if feature_names is None:
            names = tuple(f"x{i}" for i in range(p))
        else:
            names = tuple(str(name) for name in feature_names)
            if len(names) != p:
                raise DimensionError(
                    f"feature_names: expected {p} names, got {len(names)}"
                )

        mask = finite_rows(X_arr, y_arr)
        if not mask.all():
            if not skip_null:
                raise ValidationError(
                    f"X, y: {int((~mask).sum())} rows contain NaN/Inf; "
                    f"pass skip_null=True to drop them"
                )
            X_arr = X_arr[mask]
            y_arr = y_arr[mask]

        check_min_samples(X_arr, 1, 'X')

        return cls(
            _X=X_arr,
            _y=y_arr,
            _mask=mask,
            _has_bias=bool(bias),
            _feature_names=names,
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Feature matrix over the usable rows (n x p), no bias column."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector over the usable rows (n,)."""
        return self._y

    @property
    def mask(self) -> NDArray[np.bool_]:
        """True for each caller row that takes part in the fit."""
        return self._mask

    @property
    def n(self) -> int:
        """Number of usable observations."""
        return self._X.shape[0]

    @property
    def n_total(self) -> int:
        """Number of rows the caller passed, skipped ones included."""
        return self._mask.shape[0]

    @property
    def p(self) -> int:
        """Number of features (bias excluded)."""
        return self._X.shape[1]

    @property
    def n_params(self) -> int:
        """Number of fitted parameters (features plus bias)."""
        return self.p + int(self._has_bias)

    @property
    def has_bias(self) -> bool:
        return self._has_bias

    @property
    def feature_names(self) -> tuple[str, ...]:
        """Parameter names, with the bias last when modeled."""
        if self._has_bias:
            return self._feature_names + (BIAS_NAME,)
        return self._feature_names

    def X_with_bias(self) -> NDArray[np.floating[Any]]:
        """Feature matrix with the ones column appended when bias is modeled."""
        if not self._has_bias:
            return self._X
        return np.column_stack([self._X, np.ones(self.n, dtype=np.float64)])

    def XtX(self) -> NDArray[np.floating[Any]]:
        """Compute X'X over all fitted parameters (for standard errors)."""
        Xb = self.X_with_bias()
        return Xb.T @ Xb

    def expand(self, values: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """Scatter per-usable-row values back to caller rows, NaN where skipped."""
        out = np.full(self.n_total, np.nan, dtype=np.float64)
        out[self._mask] = values
        return out
