"""
Tests for cyclic coordinate descent (lasso / elastic-net).
"""

import pytest
import numpy as np

from pylstsq.core.compute.linalg import solve_lstsq
from pylstsq.core.compute.optimization import (
    CoordinateDescentResult,
    coordinate_descent,
    soft_threshold,
)


class TestSoftThreshold:

    @pytest.mark.parametrize("z,t,expected", [
        (3.0, 1.0, 2.0),
        (-3.0, 1.0, -2.0),
        (0.5, 1.0, 0.0),
        (-0.5, 1.0, 0.0),
        (2.0, 0.0, 2.0),
    ])
    def test_values(self, z, t, expected):
        assert soft_threshold(z, t) == expected


class TestCoordinateDescent:

    def test_unpenalized_matches_ols(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = coordinate_descent(X, y, 0.0, 0.0, False, tol=1e-12, max_iter=10000)
        assert isinstance(result, CoordinateDescentResult)
        assert result.converged
        np.testing.assert_allclose(result.coefficients, solve_lstsq(X, y), atol=1e-8)

    def test_unpenalized_with_bias_matches_ols(self, bias_regression_data):
        X, y, _, _ = bias_regression_data
        Xb = np.column_stack([X, np.ones(len(y))])
        result = coordinate_descent(Xb, y, 0.0, 0.0, True, tol=1e-12, max_iter=10000)
        assert result.converged
        np.testing.assert_allclose(result.coefficients, solve_lstsq(Xb, y), atol=1e-7)

    def test_l2_only_matches_ridge(self, simple_regression_data):
        X, y, _ = simple_regression_data
        n = len(y)
        l2 = 0.5
        result = coordinate_descent(X, y, 0.0, l2, False, tol=1e-12, max_iter=10000)
        # The L2 strength is scaled by n inside coordinate descent
        np.testing.assert_allclose(
            result.coefficients, solve_lstsq(X, y, lambda_=n * l2), atol=1e-8,
        )

    def test_large_l1_zeroes_everything(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = coordinate_descent(X, y, 100.0, 0.0, False)
        np.testing.assert_array_equal(result.coefficients, 0.0)
        assert result.converged

    def test_large_l1_bias_is_mean(self, bias_regression_data):
        X, y, _, _ = bias_regression_data
        Xb = np.column_stack([X, np.ones(len(y))])
        result = coordinate_descent(Xb, y, 100.0, 0.0, True)
        np.testing.assert_array_equal(result.coefficients[:-1], 0.0)
        assert result.coefficients[-1] == pytest.approx(np.mean(y))

    def test_sparsity_grows_with_l1(self, simple_regression_data):
        X, y, _ = simple_regression_data
        n_zero = [
            int(np.sum(coordinate_descent(X, y, l1, 0.0, False).coefficients == 0.0))
            for l1 in (0.01, 0.7, 1.2, 5.0)
        ]
        assert n_zero == sorted(n_zero)
        assert n_zero[0] == 0
        assert n_zero[-1] == 3

    def test_zero_column_coefficient_is_zero(self, rng):
        X = np.column_stack([rng.standard_normal(30), np.zeros(30)])
        y = X[:, 0] * 2.0
        result = coordinate_descent(X, y, 0.01, 0.0, False)
        assert result.coefficients[1] == 0.0

    def test_more_features_than_rows(self, rng):
        X = rng.standard_normal((10, 25))
        y = X[:, 0] * 3.0
        result = coordinate_descent(X, y, 0.1, 0.1, False, max_iter=5000)
        assert result.coefficients.shape == (25,)
        assert np.all(np.isfinite(result.coefficients))

    def test_not_converged_reports(self, simple_regression_data):
        X, y, _ = simple_regression_data
        result = coordinate_descent(X, y, 0.0, 0.0, False, tol=1e-300, max_iter=2)
        assert not result.converged
        assert result.n_iter == 2
        assert result.max_change > 0.0
