"""
Per-call configuration for least-squares fits.

LstsqConfig is the validated form of the options a caller may pass:
intercept handling, null skipping, decomposition method, regularization
strengths, convergence controls and window sizes. Every field is checked
at construction; an unknown method string is an error, never a silent
default.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pylstsq.core.exceptions import ValidationError
from pylstsq.core.validation import (
    check_non_negative,
    check_positive,
    check_positive_int,
)
from pylstsq.core.compute.linalg.normal_equations import SolverMethod


class RegularizationKind(Enum):
    """Which penalty a (l1_reg, l2_reg) pair selects."""
    NORMAL = 'normal'
    L1 = 'l1'
    L2 = 'l2'
    ELASTIC_NET = 'elastic_net'

    @classmethod
    def from_strengths(cls, l1_reg: float, l2_reg: float) -> RegularizationKind:
        if l1_reg > 0 and l2_reg > 0:
            return cls.ELASTIC_NET
        if l1_reg > 0:
            return cls.L1
        if l2_reg > 0:
            return cls.L2
        return cls.NORMAL

    @property
    def uses_coordinate_descent(self) -> bool:
        return self in (RegularizationKind.L1, RegularizationKind.ELASTIC_NET)


@dataclass(frozen=True)
class LstsqConfig:
    """
    Validated least-squares options.

    Attributes:
        bias: Model an intercept
        skip_null: Drop rows with NaN among the inputs instead of failing
        method: Decomposition strategy; strings are parsed strictly into
            a SolverMethod ('qr'/'normal', 'svd', 'cholesky'/'choleskey')
        l1_reg: L1 strength, >= 0
        l2_reg: L2 strength, >= 0 (ridge lambda when l1_reg == 0)
        tol: Coordinate-descent convergence threshold, > 0
        max_iter: Coordinate-descent sweep limit, >= 1
        window_size: Window size for windowed drivers, if any
        min_valid: Minimum valid rows per window (null-skipping driver)
    """
    bias: bool = False
    skip_null: bool = False
    method: SolverMethod | str = SolverMethod.QR
    l1_reg: float = 0.0
    l2_reg: float = 0.0
    tol: float = 1e-5
    max_iter: int = 2000
    window_size: int | None = None
    min_valid: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, 'method', SolverMethod.parse(self.method))
        check_non_negative(self.l1_reg, 'l1_reg')
        check_non_negative(self.l2_reg, 'l2_reg')
        check_positive(self.tol, 'tol')
        check_positive_int(self.max_iter, 'max_iter')

        if self.window_size is not None:
            check_positive_int(self.window_size, 'window_size')
        if self.min_valid is not None:
            check_positive_int(self.min_valid, 'min_valid')
            if self.window_size is not None and self.min_valid > self.window_size:
                raise ValidationError(
                    f"min_valid ({self.min_valid}) cannot exceed "
                    f"window_size ({self.window_size})"
                )

    @property
    def regularization(self) -> RegularizationKind:
        return RegularizationKind.from_strengths(self.l1_reg, self.l2_reg)
