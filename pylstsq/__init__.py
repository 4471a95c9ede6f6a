"""
PyLstsq: linear least-squares solvers for Python.

Batch, online and windowed least squares with optional ridge, lasso and
elastic-net regularization, built on NumPy and SciPy.

Submodules:
    core: Exceptions, validation, linear algebra kernels, coordinate descent
    regression: Models, online updates, windowed drivers, array front end
"""

__version__ = "0.1.0"

from pylstsq import core
from pylstsq import regression
from pylstsq.regression import lstsq, lstsq_report, recursive_lstsq, rolling_lstsq

__all__ = [
    "__version__",
    "core",
    "regression",
    "lstsq",
    "lstsq_report",
    "recursive_lstsq",
    "rolling_lstsq",
]
