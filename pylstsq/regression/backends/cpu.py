"""
CPU backends for least-squares fits.

    CPUNormalEquationsBackend    ordinary / ridge via the normal equations
                                 (QR, SVD or Cholesky)
    CPUCoordinateDescentBackend  lasso / elastic-net via coordinate descent

Both fit one of the batch models on a Design and wrap the outcome in a
Result with diagnostics and per-stage timings.
"""

from typing import Any
import numpy as np

from pylstsq.core.result import Result
from pylstsq.core.compute.timing import Timer
from pylstsq.core.compute.linalg.normal_equations import SolverMethod
from pylstsq.core.compute.linalg.qr import qr_decompose
from pylstsq.regression.design import Design
from pylstsq.regression.models import BaseLinearRegression, ElasticNet, LinearRegression
from pylstsq.regression.solution import LstsqParams


class CPUNormalEquationsBackend:
    """
    CPU backend solving (X'X + λI_f) β = X'y.

    Args:
        method: Decomposition strategy for the normal equations
        lambda_: Ridge strength (0 for ordinary least squares)
    """

    def __init__(self, method: SolverMethod | str = SolverMethod.QR, lambda_: float = 0.0):
        self.method = SolverMethod.parse(method)
        self.lambda_ = float(lambda_)

    @property
    def name(self) -> str:
        return f'cpu_{self.method.value}'

    def solve(self, design: Design) -> Result[LstsqParams]:
        """
        Fit LinearRegression on the design.

        Raises:
            NotEnoughDataError: If the design has fewer rows than features
            NotPositiveDefiniteError: Cholesky method on a non-SPD system
        """
        timer = Timer()
        timer.start()

        model = LinearRegression(
            method=self.method, lambda_=self.lambda_, fit_bias=design.has_bias,
        )
        with timer.section('fit'):
            model.fit(design.X, design.y)

        params = _build_params(model, design, timer)
        with timer.section('rank'):
            rank = qr_decompose(design.XtX()).rank
        timer.stop()

        info: dict[str, Any] = {
            'method': self.method.value,
            'rank': rank,
            'regularization': 'l2' if self.lambda_ > 0 else 'normal',
            'lambda': self.lambda_,
        }

        warnings_list: list[str] = []
        if rank < design.n_params and self.lambda_ == 0:
            warnings_list.append(
                f"Design is rank-deficient (rank {rank} < {design.n_params}); "
                f"coefficients of dependent columns were set to zero"
            )

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


class CPUCoordinateDescentBackend:
    """
    CPU backend for lasso / elastic-net.

    Non-convergence is not an error: the result carries converged=False
    in info and a message in warnings.
    """

    def __init__(
        self,
        l1_reg: float,
        l2_reg: float = 0.0,
        tol: float = 1e-5,
        max_iter: int = 2000,
    ):
        self.l1_reg = float(l1_reg)
        self.l2_reg = float(l2_reg)
        self.tol = float(tol)
        self.max_iter = int(max_iter)

    @property
    def name(self) -> str:
        return 'cpu_cd'

    def solve(self, design: Design) -> Result[LstsqParams]:
        """Fit ElasticNet on the design."""
        timer = Timer()
        timer.start()

        model = ElasticNet(
            l1_reg=self.l1_reg,
            l2_reg=self.l2_reg,
            fit_bias=design.has_bias,
            tol=self.tol,
            max_iter=self.max_iter,
        )
        with timer.section('coordinate_descent'):
            model.fit(design.X, design.y)

        params = _build_params(model, design, timer)
        timer.stop()

        warnings_list: list[str] = []
        if not model.converged:
            warnings_list.append(
                f"Coordinate descent did not converge in {self.max_iter} iterations"
            )

        info: dict[str, Any] = {
            'method': 'coordinate_descent',
            'regularization': 'elastic_net' if self.l2_reg > 0 else 'l1',
            'l1_reg': self.l1_reg,
            'l2_reg': self.l2_reg,
            'converged': model.converged,
            'iterations': model.n_iter,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )


def _build_params(
    model: BaseLinearRegression,
    design: Design,
    timer: Timer,
) -> LstsqParams:
    with timer.section('residuals'):
        fitted_values = model.predict(design.X)
        residuals = design.y - fitted_values
        rss = float(residuals @ residuals)
        tss = float(np.sum((design.y - np.mean(design.y)) ** 2))

    return LstsqParams(
        coefficients=np.array(model.coefficients),
        bias=model.bias,
        fitted_values=fitted_values,
        residuals=residuals,
        rss=rss,
        tss=tss,
        df_residual=design.n - design.n_params,
    )
