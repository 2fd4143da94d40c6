"""
Unit tests for conventions module.
"""

import pytest

from fsl.numerics import SQRT_EPSILON
from fsl.conventions import Frequency, SolverConventions


class TestFrequency:
    """Tests for payment frequencies."""

    @pytest.mark.parametrize("s, expected", [
        ("annual", Frequency.ANNUALLY),
        ("Semi-Annual", Frequency.SEMIANNUALLY),
        ("QUARTERLY", Frequency.QUARTERLY),
        ("12", Frequency.MONTHLY),
    ])
    def test_from_string(self, s, expected):
        assert Frequency.from_string(s) == expected

    def test_unknown(self):
        with pytest.raises(ValueError):
            Frequency.from_string("fortnightly")

    def test_period(self):
        assert Frequency.SEMIANNUALLY.period == 0.5
        assert Frequency.QUARTERLY.period == 0.25


class TestSolverConventions:
    """Tests for SolverConventions class."""

    def test_default(self):
        conv = SolverConventions.default()

        assert conv.tolerance == SQRT_EPSILON
        assert conv.max_iterations == 100
        assert conv.bump == 0.01
        assert conv.method == "secant"

    def test_strict(self):
        conv = SolverConventions.strict()
        assert conv.tolerance == 1e-12
        assert conv.max_iterations == 200

    def test_newton(self):
        assert SolverConventions.newton().method == "newton"

    @pytest.mark.parametrize("kwargs", [
        {"tolerance": 0.0},
        {"max_iterations": 0},
        {"method": "bisection"},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            SolverConventions(**kwargs)
