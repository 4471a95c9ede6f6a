"""
Exception hierarchy for PyLstsq.

All exceptions inherit from PyLstsqError so callers can catch any
library-specific error in one place. The three conditions every model
surfaces are:

    DimensionError      row/column counts of X, y or coefficients disagree
    NotEnoughDataError  zero rows, or fewer rows than features on a
                        closed-form path
    ModelNotFitError    coefficients read, prediction or update requested
                        before any successful fit

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class PyLstsqError(Exception):
    """Base exception for all PyLstsq errors."""
    pass


class ValidationError(PyLstsqError):
    """
    Input validation failed.

    Raised when user-provided inputs or configuration values fail
    validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when X and y disagree on the number of rows, or when a
    prediction/update matrix does not have one column per coefficient.
    """
    pass


class NotEnoughDataError(ValidationError):
    """
    Too few observations to fit.

    Attributes:
        n_rows: Number of rows that were available
        n_required: Minimum number of rows the fit needed
    """

    def __init__(
        self,
        message: str,
        n_rows: int | None = None,
        n_required: int | None = None,
    ):
        super().__init__(message)
        self.n_rows = n_rows
        self.n_required = n_required


class ModelNotFitError(PyLstsqError):
    """
    Model state was used before any successful fit.

    Attributes:
        operation: What was attempted ('predict', 'coefficients', 'update', ...)
    """

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class NumericalError(PyLstsqError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when an operation requires an actual inverse (for example the
    inverse-information matrix of an online model) but the matrix is
    numerically rank-deficient.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class NotPositiveDefiniteError(NumericalError):
    """
    Matrix is not positive definite.

    Raised by the Cholesky solver when the normal-equations matrix fails
    this requirement. The Cholesky path never falls back to another method.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        min_eigenvalue: Minimum eigenvalue, if computed
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        min_eigenvalue: float | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.min_eigenvalue = min_eigenvalue


class ConvergenceError(PyLstsqError):
    """
    Iterative algorithm failed to converge.

    Coordinate descent reports non-convergence as a warning and keeps the
    last iterate. ElasticNet(raise_on_nonconvergence=True) raises this
    instead.

    Attributes:
        iterations: Number of iterations completed
        final_change: Final parameter change
        reason: Why convergence failed (e.g., 'max_iterations')
        threshold: The convergence threshold that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold
