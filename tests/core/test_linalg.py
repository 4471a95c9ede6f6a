"""
Tests for the decomposition solvers and normal-equation dispatch.

Validates:
    - QR, SVD and Cholesky agree on well-posed systems
    - Rank-deficient systems: QR basic solution, Cholesky failure,
      singular inverse
    - Ridge never touches the bias diagonal entry
    - Weighted and rcond-truncated solves
    - Strict parsing of method names
"""

import warnings

import pytest
import numpy as np

from pylstsq.core.exceptions import (
    DimensionError,
    NotPositiveDefiniteError,
    SingularMatrixError,
    ValidationError,
)
from pylstsq.core.compute.linalg import (
    SolverMethod,
    add_ridge,
    cholesky_solve,
    lstsq_rcond,
    normal_equations,
    qr_decompose,
    qr_inverse,
    qr_solve,
    qr_solve_with_inverse,
    ridge_rcond,
    solve_lstsq,
    solve_normal_equations,
    svd_solve,
    svd_solve_rcond,
    weighted_lstsq,
)
from pylstsq.core.compute.precision import (
    EPSILON_64,
    default_rcond,
    is_effectively_zero,
    machine_epsilon,
)


@pytest.fixture
def spd_system(rng):
    X = rng.standard_normal((50, 4))
    y = rng.standard_normal(50)
    return normal_equations(X, y)


@pytest.fixture
def zero_column_data(rng):
    """Design whose last column is identically zero (rank p - 1)."""
    X = np.column_stack([rng.standard_normal((40, 2)), np.zeros(40)])
    y = X[:, 0] * 2.0 - X[:, 1] + rng.standard_normal(40) * 0.1
    return X, y


# ═══════════════════════════════════════════════════════════════════════
# Decomposition agreement
# ═══════════════════════════════════════════════════════════════════════


class TestDecompositionAgreement:

    def test_qr_matches_numpy(self, spd_system):
        A, B = spd_system
        np.testing.assert_allclose(qr_solve(A, B), np.linalg.solve(A, B), rtol=1e-10)

    def test_svd_matches_qr(self, spd_system):
        A, B = spd_system
        np.testing.assert_allclose(svd_solve(A, B), qr_solve(A, B), rtol=1e-9)

    def test_cholesky_matches_qr(self, spd_system):
        A, B = spd_system
        np.testing.assert_allclose(cholesky_solve(A, B), qr_solve(A, B), rtol=1e-9)

    @pytest.mark.parametrize("method", ['qr', 'svd', 'cholesky'])
    def test_solve_lstsq_matches_numpy_lstsq(self, simple_regression_data, method):
        X, y, _ = simple_regression_data
        expected = np.linalg.lstsq(X, y, rcond=None)[0]
        np.testing.assert_allclose(solve_lstsq(X, y, method=method), expected, rtol=1e-8)

    def test_multiple_right_hand_sides(self, spd_system):
        A, B = spd_system
        B2 = np.column_stack([B, 2 * B])
        Z = qr_solve(A, B2)
        assert Z.shape == (4, 2)
        np.testing.assert_allclose(Z[:, 1], 2 * Z[:, 0], rtol=1e-12)


# ═══════════════════════════════════════════════════════════════════════
# Rank deficiency
# ═══════════════════════════════════════════════════════════════════════


class TestRankDeficient:

    def test_qr_rank_detected(self, zero_column_data):
        X, y = zero_column_data
        A, _ = normal_equations(X, y)
        assert qr_decompose(A).rank == 2

    def test_qr_basic_solution_zeroes_dropped_column(self, zero_column_data):
        X, y = zero_column_data
        beta = solve_lstsq(X, y)
        assert beta[2] == 0.0
        expected = np.linalg.lstsq(X[:, :2], y, rcond=None)[0]
        np.testing.assert_allclose(beta[:2], expected, rtol=1e-10)

    def test_qr_inverse_raises_singular(self, zero_column_data):
        X, y = zero_column_data
        A, B = normal_equations(X, y)
        with pytest.raises(SingularMatrixError) as exc_info:
            qr_inverse(A)
        assert exc_info.value.rank == 2
        assert exc_info.value.expected_rank == 3
        with pytest.raises(SingularMatrixError):
            qr_solve_with_inverse(A, B)

    def test_cholesky_raises_not_positive_definite(self, zero_column_data):
        X, y = zero_column_data
        with pytest.raises(NotPositiveDefiniteError):
            solve_lstsq(X, y, method='cholesky')

    def test_cholesky_fine_with_ridge(self, zero_column_data):
        X, y = zero_column_data
        beta = solve_lstsq(X, y, lambda_=1.0, method='cholesky')
        assert np.all(np.isfinite(beta))
        assert abs(beta[2]) < 1e-12


class TestInverse:

    def test_inverse_matches_numpy(self, spd_system):
        A, _ = spd_system
        np.testing.assert_allclose(qr_inverse(A), np.linalg.inv(A), rtol=1e-9, atol=1e-12)

    def test_solve_with_inverse_consistent(self, spd_system):
        A, B = spd_system
        inverse, solution = qr_solve_with_inverse(A, B)
        np.testing.assert_allclose(inverse @ B, solution, rtol=1e-9)


# ═══════════════════════════════════════════════════════════════════════
# Ridge
# ═══════════════════════════════════════════════════════════════════════


class TestRidge:

    def test_ridge_skips_bias_entry(self):
        A = add_ridge(np.zeros((3, 3)), 2.0, has_bias=True)
        np.testing.assert_array_equal(np.diag(A), [2.0, 2.0, 0.0])

    def test_ridge_without_bias_covers_all(self):
        A = add_ridge(np.zeros((3, 3)), 2.0, has_bias=False)
        np.testing.assert_array_equal(np.diag(A), [2.0, 2.0, 2.0])

    def test_zero_lambda_is_ols(self, simple_regression_data):
        X, y, _ = simple_regression_data
        np.testing.assert_allclose(
            solve_lstsq(X, y, lambda_=0.0), solve_lstsq(X, y), rtol=1e-14,
        )

    def test_negative_lambda_rejected(self):
        with pytest.raises(ValidationError):
            add_ridge(np.eye(2), -1.0, has_bias=False)

    def test_ridge_shrinks(self, simple_regression_data):
        X, y, _ = simple_regression_data
        ols = solve_lstsq(X, y)
        ridge = solve_lstsq(X, y, lambda_=50.0)
        assert np.linalg.norm(ridge) < np.linalg.norm(ols)


# ═══════════════════════════════════════════════════════════════════════
# Weighted and rcond solves
# ═══════════════════════════════════════════════════════════════════════


class TestWeighted:

    def test_unit_weights_match_ols(self, simple_regression_data):
        X, y, _ = simple_regression_data
        np.testing.assert_allclose(
            weighted_lstsq(X, y, np.ones(len(y))), solve_lstsq(X, y), rtol=1e-10,
        )

    def test_zero_weight_drops_row(self, simple_regression_data):
        X, y, _ = simple_regression_data
        w = np.ones(len(y))
        w[:10] = 0.0
        np.testing.assert_allclose(
            weighted_lstsq(X, y, w), solve_lstsq(X[10:], y[10:]), rtol=1e-10,
        )

    def test_negative_weight_rejected(self, simple_regression_data):
        X, y, _ = simple_regression_data
        w = np.ones(len(y))
        w[0] = -1.0
        with pytest.raises(ValidationError, match="non-negative"):
            weighted_lstsq(X, y, w)

    def test_weight_length_mismatch(self, simple_regression_data):
        X, y, _ = simple_regression_data
        with pytest.raises(DimensionError):
            weighted_lstsq(X, y, np.ones(5))


class TestRcond:

    def test_singular_values_of_design(self, simple_regression_data):
        X, y, _ = simple_regression_data
        beta, singular_values = lstsq_rcond(X, y)
        np.testing.assert_allclose(
            np.sort(singular_values), np.sort(np.linalg.svd(X, compute_uv=False)),
            rtol=1e-8,
        )
        np.testing.assert_allclose(beta, solve_lstsq(X, y), rtol=1e-8)

    def test_duplicated_column_gives_minimum_norm(self, rng):
        x = rng.standard_normal(60)
        X = np.column_stack([x, rng.standard_normal(60), x])
        y = 2.0 * x + rng.standard_normal(60) * 0.1
        beta, singular_values = lstsq_rcond(X, y, rcond=1e-6)
        expected = np.linalg.lstsq(X, y, rcond=None)[0]
        np.testing.assert_allclose(beta, expected, atol=1e-6)
        np.testing.assert_allclose(beta[0], beta[2], atol=1e-6)
        assert singular_values.min() < 1e-6 * singular_values.max()

    def test_ridge_rcond_matches_ridge(self, simple_regression_data):
        X, y, _ = simple_regression_data
        beta, _ = ridge_rcond(X, y, 3.0, has_bias=False)
        np.testing.assert_allclose(beta, solve_lstsq(X, y, lambda_=3.0), rtol=1e-8)

    def test_svd_failure_falls_back_to_qr(self, spd_system, monkeypatch):
        A, B = spd_system

        def broken_svd(*args, **kwargs):
            raise np.linalg.LinAlgError("SVD did not converge")

        monkeypatch.setattr(np.linalg, 'svd', broken_svd)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always')
            solution, singular_values = svd_solve_rcond(A, B, 1e-10)
        np.testing.assert_allclose(solution, qr_solve(A, B), rtol=1e-12)
        assert np.all(np.isnan(singular_values))
        assert any(issubclass(w.category, RuntimeWarning) for w in caught)
        np.testing.assert_allclose(svd_solve(A, B), qr_solve(A, B), rtol=1e-12)


# ═══════════════════════════════════════════════════════════════════════
# Method parsing and precision helpers
# ═══════════════════════════════════════════════════════════════════════


class TestSolverMethod:

    @pytest.mark.parametrize("name,expected", [
        ('qr', SolverMethod.QR),
        ('normal', SolverMethod.QR),
        ('SVD', SolverMethod.SVD),
        ('cholesky', SolverMethod.CHOLESKY),
        ('choleskey', SolverMethod.CHOLESKY),
    ])
    def test_aliases(self, name, expected):
        assert SolverMethod.parse(name) is expected

    def test_enum_passthrough(self):
        assert SolverMethod.parse(SolverMethod.SVD) is SolverMethod.SVD

    @pytest.mark.parametrize("name", ['lu', '', None, 3])
    def test_unknown_rejected(self, name):
        with pytest.raises(ValidationError, match="Unknown solver method"):
            SolverMethod.parse(name)

    def test_dispatch_rejects_unknown(self, spd_system):
        A, B = spd_system
        with pytest.raises(ValidationError):
            solve_normal_equations(A, B, 'gaussian')


class TestPrecision:

    def test_machine_epsilon(self):
        assert machine_epsilon() == EPSILON_64
        assert machine_epsilon(np.float32) > EPSILON_64

    def test_is_effectively_zero(self):
        assert is_effectively_zero(0.0)
        assert is_effectively_zero(EPSILON_64 / 2)
        assert not is_effectively_zero(1e-10)

    def test_default_rcond(self):
        assert default_rcond((100, 3)) == pytest.approx(100 * EPSILON_64)
