"""
Linear least-squares regression.

This module provides batch models (ordinary, ridge, lasso, elastic-net),
an online model updated one row at a time, and windowed drivers built on
it.

Public API:
    lstsq(X, y, ...) -> LstsqSolution
    lstsq_report(X, y, ...) -> CoefficientReport
    recursive_lstsq(X, y, n, ...) -> WindowedSolution
    rolling_lstsq(X, y, window_size, ...) -> WindowedSolution

The lstsq() function handles:
    - Input validation
    - Design construction
    - Backend selection
    - Result wrapping

The low-level drivers returning per-window coefficient lists live in
pylstsq.regression.rolling.

Example:
    >>> from pylstsq.regression import lstsq
    >>> result = lstsq(X, y, bias=True)
    >>> print(result.coefficients)
    >>> print(result.summary())
"""

from pylstsq.regression.config import LstsqConfig, RegularizationKind
from pylstsq.regression.design import Design
from pylstsq.regression.models import BaseLinearRegression, ElasticNet, LinearRegression
from pylstsq.regression.online import OnlineLinearRegression
from pylstsq.regression.solution import (
    CoefficientReport,
    LstsqParams,
    LstsqSolution,
    WindowedSolution,
)
from pylstsq.regression.solvers import lstsq, lstsq_report, recursive_lstsq, rolling_lstsq

__all__ = [
    "lstsq",
    "lstsq_report",
    "recursive_lstsq",
    "rolling_lstsq",
    "LstsqConfig",
    "RegularizationKind",
    "Design",
    "BaseLinearRegression",
    "LinearRegression",
    "ElasticNet",
    "OnlineLinearRegression",
    "CoefficientReport",
    "LstsqParams",
    "LstsqSolution",
    "WindowedSolution",
]
