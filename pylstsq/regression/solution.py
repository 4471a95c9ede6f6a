"""
Regression solution types.

Contains the parameter payload and the user-facing solution wrappers:

    LstsqParams        immutable payload computed by backends
    LstsqSolution      one fit: coefficients, bias, predictions, residuals,
                       standard errors, t statistics, p-values
    CoefficientReport  per-parameter {beta, std_err, t, p>|t|} table
    WindowedSolution   one coefficient vector per row for windowed drivers
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray
from scipy import stats

from pylstsq.core.result import Result
from pylstsq.core.exceptions import SingularMatrixError
from pylstsq.core.compute.linalg.qr import qr_inverse

if TYPE_CHECKING:
    from pylstsq.regression.design import Design


@dataclass(frozen=True)
class LstsqParams:
    """
    Parameter payload for a least-squares fit.

    This is the immutable data computed by backends. fitted_values and
    residuals cover the usable rows only.
    """
    coefficients: NDArray[np.floating[Any]]
    bias: float
    fitted_values: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    rss: float
    tss: float
    df_residual: int


@dataclass(frozen=True)
class CoefficientReport:
    """
    Per-parameter inference table.

    Attributes:
        features: Parameter names (bias last as '__bias__' when modeled)
        beta: Estimates
        std_err: Standard errors sqrt(σ̂² diag((X'X)⁻¹))
        t: t statistics beta / std_err
        p_value: Two-sided p-values from Student's t at df_residual
        df_residual: Residual degrees of freedom n - p
    """
    features: tuple[str, ...]
    beta: NDArray[np.floating[Any]]
    std_err: NDArray[np.floating[Any]]
    t: NDArray[np.floating[Any]]
    p_value: NDArray[np.floating[Any]]
    df_residual: int

    def __len__(self) -> int:
        return len(self.features)

    def to_dict(self) -> dict[str, list]:
        """Column-oriented dict, one list per report field."""
        return {
            'features': list(self.features),
            'beta': self.beta.tolist(),
            'std_err': self.std_err.tolist(),
            't': self.t.tolist(),
            'p>|t|': self.p_value.tolist(),
        }


@dataclass
class LstsqSolution:
    """
    User-facing least-squares results.

    Wraps the backend Result and provides convenient accessors for the
    coefficients and diagnostics. Standard errors and friends use the
    ordinary least-squares formulas on the fitted design.
    """
    _result: Result[LstsqParams]
    _design: 'Design'

    # Cached computations
    _standard_errors: NDArray[np.floating[Any]] | None = None
    _t_statistics: NDArray[np.floating[Any]] | None = None

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        """Feature coefficients (bias excluded)."""
        return self._result.params.coefficients

    @property
    def bias(self) -> float:
        return self._result.params.bias

    @property
    def beta(self) -> NDArray[np.floating[Any]]:
        """All fitted parameters, aligned with feature_names (bias last)."""
        if self._design.has_bias:
            return np.append(self.coefficients, self.bias)
        return self.coefficients

    @property
    def feature_names(self) -> tuple[str, ...]:
        return self._design.feature_names

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        """Predictions for every caller row; NaN where the row was skipped."""
        return self._design.expand(self._result.params.fitted_values)

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        """y - prediction for every caller row; NaN where the row was skipped."""
        return self._design.expand(self._result.params.residuals)

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def r_squared(self) -> float:
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - (self.rss / self.tss)

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def residual_std_error(self) -> float:
        df = self.df_residual
        if df <= 0:
            return float('nan')
        return float(np.sqrt(self.rss / df))

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """
        Standard errors of all parameters (bias last when modeled).

        Computed as SE(β) = sqrt(diag(σ̂² (X'X)⁻¹)) with σ̂² = RSS / (n - p).
        NaN when there are no residual degrees of freedom or X'X is singular.
        """
        if self._standard_errors is not None:
            return self._standard_errors

        k = self._design.n_params
        df = self.df_residual
        if df <= 0:
            self._standard_errors = np.full(k, np.nan, dtype=np.float64)
            return self._standard_errors

        sigma_sq = self.rss / df
        try:
            XtX_inv = qr_inverse(self._design.XtX())
        except SingularMatrixError:
            self._standard_errors = np.full(k, np.nan, dtype=np.float64)
            return self._standard_errors

        with np.errstate(invalid='ignore'):
            self._standard_errors = np.sqrt(sigma_sq * np.diag(XtX_inv))
        return self._standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        """t-statistics for all parameters."""
        if self._t_statistics is not None:
            return self._t_statistics

        se = self.standard_errors
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.beta / se
            t = np.where(np.isfinite(t), t, np.nan)
        self._t_statistics = t
        return self._t_statistics

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values: 2 * P(T > |t|), T ~ Student's t(n - p)."""
        df = self.df_residual
        if df <= 0:
            return np.full(self._design.n_params, np.nan, dtype=np.float64)
        return 2.0 * stats.t.sf(np.abs(self.t_statistics), df)

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def report(self) -> CoefficientReport:
        """Per-parameter {beta, std_err, t, p>|t|} table."""
        return CoefficientReport(
            features=self.feature_names,
            beta=self.beta,
            std_err=self.standard_errors,
            t=self.t_statistics,
            p_value=self.p_values,
            df_residual=self.df_residual,
        )

    def summary(self) -> str:
        """Generate a coefficient table summary."""
        lines = [
            "Least Squares Results",
            "=" * 72,
            f"Observations: {self._design.n} (skipped: {self._design.n_total - self._design.n})",
            f"Parameters: {self._design.n_params}",
            f"R-squared: {self.r_squared:.6f}",
            f"Residual Std. Error: {self.residual_std_error:.6f} on {self.df_residual} DF",
            "",
            "Coefficients:",
            "-" * 72,
            f"{'Name':<14} {'Estimate':>14} {'Std.Error':>12} {'t value':>10} {'Pr(>|t|)':>12}",
            "-" * 72,
        ]

        for name, coef, se, t, pv in zip(
            self.feature_names, self.beta, self.standard_errors,
            self.t_statistics, self.p_values,
        ):
            se_str = f"{se:12.6f}" if not np.isnan(se) else "          NA"
            t_str = f"{t:10.3f}" if not np.isnan(t) else "        NA"
            p_str = f"{pv:12.4g}" if not np.isnan(pv) else "          NA"
            lines.append(f"{name:<14} {coef:14.6f} {se_str} {t_str} {p_str}")

        lines.append("-" * 72)
        lines.append(f"Backend: {self.backend_name}")
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LstsqSolution(n={self._design.n}, p={self._design.n_params}, "
            f"backend={self.backend_name!r}, r_squared={self.r_squared:.4f})"
        )


@dataclass(frozen=True)
class WindowedSolution:
    """
    Output of a recursive or rolling driver, aligned with the caller's rows.

    Attributes:
        coefficients: (rows x k) parameters per row, bias last when modeled;
            NaN rows where no fit exists (before the first full window, or
            windows with too few valid rows)
        predictions: x_j · β_j for each row j (NaN without a fit)
        is_fit: True where the row has coefficients
        feature_names: Parameter names aligned with coefficient columns
        window_size: Initial (recursive) or fixed (rolling) window size
    """
    coefficients: NDArray[np.floating[Any]]
    predictions: NDArray[np.floating[Any]]
    is_fit: NDArray[np.bool_]
    feature_names: tuple[str, ...]
    window_size: int

    @property
    def n_fits(self) -> int:
        return int(self.is_fit.sum())

    def coefficients_at(self, row: int) -> NDArray[np.floating[Any]] | None:
        """Coefficients for one row, or None where there is no fit."""
        if not self.is_fit[row]:
            return None
        return self.coefficients[row]
