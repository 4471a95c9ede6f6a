"""
Tests for OnlineLinearRegression.

An online model fit on k - 1 rows and updated with row k must agree with
a batch fit on all k rows; removing a row must agree with a fit without
it. NaN rows are skipped rather than corrupting the state.
"""

import pytest
import numpy as np

from pylstsq.core.exceptions import (
    DimensionError,
    ModelNotFitError,
    SingularMatrixError,
)
from pylstsq.regression import LinearRegression, OnlineLinearRegression


class TestOnlineFit:

    def test_fit_matches_batch(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression().fit(X, y)
        batch = LinearRegression().fit(X, y)
        np.testing.assert_allclose(online.coefficients, batch.coefficients, rtol=1e-10)

    def test_inverse_matches_numpy(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression().fit(X, y)
        np.testing.assert_allclose(online.inverse, np.linalg.inv(X.T @ X), rtol=1e-9)

    def test_inverse_includes_bias(self, bias_regression_data):
        X, y, _, _ = bias_regression_data
        online = OnlineLinearRegression(fit_bias=True).fit(X, y)
        assert online.inverse.shape == (4, 4)

    def test_singular_fit_raises(self, collinear_data):
        X, y = collinear_data
        X = np.column_stack([X[:, :2], np.zeros(len(y))])
        with pytest.raises(SingularMatrixError):
            OnlineLinearRegression().fit(X, y)

    def test_inverse_before_fit(self):
        with pytest.raises(ModelNotFitError):
            OnlineLinearRegression().inverse


class TestOnlineUpdate:

    def test_add_one_row_matches_refit(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression().fit(X[:-1], y[:-1])
        assert online.update(X[-1], y[-1])
        batch = LinearRegression().fit(X, y)
        np.testing.assert_allclose(online.coefficients, batch.coefficients, rtol=1e-9)

    def test_many_adds_match_refit_with_bias(self, bias_regression_data):
        X, y, _, _ = bias_regression_data
        online = OnlineLinearRegression(fit_bias=True).fit(X[:20], y[:20])
        for j in range(20, len(y)):
            online.update(X[j], y[j])
        batch = LinearRegression(fit_bias=True).fit(X, y)
        np.testing.assert_allclose(online.coefficients, batch.coefficients, rtol=1e-8)
        assert online.bias == pytest.approx(batch.bias, rel=1e-8)

    def test_remove_row_matches_refit(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression().fit(X, y)
        online.update(X[0], y[0], c=-1.0)
        batch = LinearRegression().fit(X[1:], y[1:])
        np.testing.assert_allclose(online.coefficients, batch.coefficients, rtol=1e-9)

    def test_ridge_preserved_across_updates(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression(lambda_=5.0).fit(X[:40], y[:40])
        for j in range(40, 70):
            online.update(X[j], y[j])
        batch = LinearRegression(lambda_=5.0).fit(X[:70], y[:70])
        np.testing.assert_allclose(online.coefficients, batch.coefficients, rtol=1e-9)

    def test_nan_row_skipped(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression().fit(X, y)
        before = np.array(online.coefficients)
        assert online.update([np.nan, 1.0, 2.0], 1.0) is False
        assert online.update(X[0], np.inf) is False
        np.testing.assert_array_equal(online.coefficients, before)

    def test_update_unchecked(self, simple_regression_data):
        X, y, _ = simple_regression_data
        a = OnlineLinearRegression().fit(X[:-1], y[:-1])
        b = OnlineLinearRegression().fit(X[:-1], y[:-1])
        a.update(X[-1], y[-1])
        b.update_unchecked(X[-1], y[-1])
        np.testing.assert_allclose(a.coefficients, b.coefficients)

    def test_update_before_fit(self):
        with pytest.raises(ModelNotFitError) as exc_info:
            OnlineLinearRegression().update([1.0, 2.0], 3.0)
        assert exc_info.value.operation == 'update'

    def test_update_wrong_width(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression().fit(X, y)
        with pytest.raises(DimensionError):
            online.update([1.0, 2.0], 1.0)

    def test_update_multi_value_target_rejected(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression().fit(X[:-2], y[:-2])
        before = online.coefficients.copy()
        with pytest.raises(DimensionError, match="single target"):
            online.update(X[-1], y[-2:])
        with pytest.raises(DimensionError, match="single target"):
            online.update_unchecked(X[-1], [])
        np.testing.assert_array_equal(online.coefficients, before)

    def test_row_vector_accepted(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression().fit(X[:-1], y[:-1])
        assert online.update(X[-1:], y[-1:])


class TestOnlineState:

    def test_set_coeffs_and_bias_drops_inverse(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression().fit(X, y)
        online.set_coeffs_and_bias([1.0, 2.0, 3.0], 0.0)
        with pytest.raises(ModelNotFitError):
            online.update(X[0], y[0])

    def test_restore_full_state(self, bias_regression_data):
        X, y, _, _ = bias_regression_data
        source = OnlineLinearRegression(fit_bias=True).fit(X[:-1], y[:-1])

        restored = OnlineLinearRegression()
        restored.set_coeffs_bias_inverse(source.coefficients, source.bias, source.inverse)
        assert restored.fit_bias

        source.update(X[-1], y[-1])
        restored.update(X[-1], y[-1])
        np.testing.assert_allclose(restored.coefficients, source.coefficients, rtol=1e-12)
        assert restored.bias == pytest.approx(source.bias)

    def test_restore_without_bias(self):
        model = OnlineLinearRegression()
        model.set_coeffs_bias_inverse([1.0, 2.0], 7.0, np.eye(2))
        assert not model.fit_bias
        assert model.bias == 0.0

    def test_restore_inverse_dimension_mismatch(self):
        with pytest.raises(DimensionError):
            OnlineLinearRegression().set_coeffs_bias_inverse([1.0, 2.0], 0.0, np.eye(4))

    def test_restore_inverse_not_square(self):
        with pytest.raises(DimensionError):
            OnlineLinearRegression().set_coeffs_bias_inverse([1.0, 2.0], 0.0, np.ones((2, 3)))

    def test_internal_inverse_not_aliased(self, simple_regression_data):
        X, y, _ = simple_regression_data
        online = OnlineLinearRegression().fit(X, y)
        with pytest.raises(ValueError):
            online.inverse[0, 0] = 1.0
