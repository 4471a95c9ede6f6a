"""
Generic result container for PyLstsq fits.

Every backend returns its parameter payload wrapped in a Result. The
envelope carries the shared metadata (solver method, rank, convergence
diagnostics, timings, non-fatal warnings) so user-facing solution classes
can expose them uniformly.

Design decisions:
    - Generic over parameter payload P
    - info dict for flexible metadata (method, rank, converged, iterations)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True)
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for a least-squares computation.

    Type Parameters:
        P: The parameter payload type

    Attributes:
        params: Fitted parameters (coefficients, bias, residuals, ...)
        info: Structured metadata (method, convergence, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> # Direct method (no convergence notion)
        >>> Result(
        ...     params=LstsqParams(...),
        ...     info={'method': 'qr', 'rank': 3},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='cpu_qr'
        ... )

        >>> # Iterative method
        >>> Result(
        ...     params=LstsqParams(...),
        ...     info={'method': 'coordinate_descent', 'converged': True, 'iterations': 23},
        ...     timing={'total_seconds': 0.5},
        ...     backend_name='cpu_cd'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
