"""
Tests for the Result envelope and timing utilities.
"""

import dataclasses

import pytest

from pylstsq.core.result import Result
from pylstsq.core.compute.timing import Timer


class TestResult:

    def _make(self, warnings=()):
        return Result(
            params={'beta': [1.0]},
            info={'method': 'qr'},
            timing=None,
            backend_name='cpu_qr',
            warnings=warnings,
        )

    def test_fields(self):
        r = self._make()
        assert r.params == {'beta': [1.0]}
        assert r.info['method'] == 'qr'
        assert r.timing is None
        assert r.backend_name == 'cpu_qr'
        assert r.warnings == ()

    def test_immutable(self):
        r = self._make()
        with pytest.raises(dataclasses.FrozenInstanceError):
            r.backend_name = 'other'

    def test_has_warning(self):
        r = self._make(warnings=("Coordinate descent did not converge in 5 iterations",))
        assert r.has_warning("did not converge")
        assert not r.has_warning("singular")

    def test_default_warnings_empty(self):
        r = Result(params=None, info={}, timing=None, backend_name='x')
        assert r.warnings == ()


class TestTimer:

    def test_sections_reported(self):
        timer = Timer()
        timer.start()
        with timer.section('solve'):
            pass
        with timer.section('solve'):
            pass
        timer.stop()
        result = timer.result()
        assert 'total_seconds' in result
        assert 'solve' in result
        assert result['total_seconds'] >= 0.0

    def test_result_before_stop_raises(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError):
            timer.result()

    def test_stop_before_start_raises(self):
        with pytest.raises(RuntimeError):
            Timer().stop()
