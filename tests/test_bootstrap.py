"""
Unit tests for curve bootstrapping.
"""

import math

import numpy as np
import pandas as pd
import pytest

from fsl.conventions import SolverConventions
from fsl.curves import (
    Curve,
    CurveOrderError,
    Instrument,
    InstrumentError,
    Bootstrapper,
    BootstrapError,
    bootstrap,
    cash_deposit,
    create_flat_curve,
    duration,
    extrapolated_duration,
    forward_rate_agreement,
    interest_rate_swap,
    present_value,
    solve_knot,
    zero_coupon_bond,
)


@pytest.fixture
def swap_instruments():
    """Deposits followed by semiannual par swaps."""
    return [
        cash_deposit(0.5, 0.030),
        cash_deposit(1.0, 0.032),
        interest_rate_swap(2.0, 0.035),
        interest_rate_swap(3.0, 0.037),
        interest_rate_swap(5.0, 0.040),
    ]


@pytest.fixture
def sloped_curve():
    return Curve([1.0, 2.0, 3.0], [0.03, 0.04, 0.05], extrapolated=0.05)


class TestPresentValue:
    """Tests for present value and durations."""

    def test_zero_coupon_bond_prices_to_zero(self):
        curve = create_flat_curve(0.05)
        inst = zero_coupon_bond(2.0, math.exp(-0.1))

        assert present_value(inst, curve) == pytest.approx(0.0, abs=1e-15)

    def test_empty_instrument(self):
        with pytest.raises(InstrumentError):
            present_value([], create_flat_curve(0.05))

    def test_none_instrument(self):
        with pytest.raises(TypeError):
            present_value(None, create_flat_curve(0.05))

    def test_duration_is_parallel_shift_sensitivity(self, sloped_curve):
        """d pv / d shift = -duration."""
        inst = interest_rate_swap(5.0, 0.04)
        eps = 1e-5

        def shifted(s):
            return Curve(sloped_curve.times, sloped_curve.rates + s, sloped_curve.extrapolated + s)

        dpv = (present_value(inst, shifted(eps)) - present_value(inst, shifted(-eps))) / (2 * eps)

        np.testing.assert_allclose(dpv, -duration(inst, sloped_curve), rtol=1e-6)

    def test_extrapolated_duration_sensitivity(self, sloped_curve):
        """d pv / d extrapolated = -extrapolated_duration."""
        inst = interest_rate_swap(5.0, 0.04)
        eps = 1e-5
        f = sloped_curve.extrapolated

        up = present_value(inst, sloped_curve.with_extrapolated(f + eps))
        down = present_value(inst, sloped_curve.with_extrapolated(f - eps))

        np.testing.assert_allclose(
            (up - down) / (2 * eps),
            -extrapolated_duration(inst, sloped_curve),
            rtol=1e-6
        )

    def test_durations_agree_on_empty_curve(self):
        curve = create_flat_curve(0.04)
        inst = interest_rate_swap(3.0, 0.04)

        assert extrapolated_duration(inst, curve) == duration(inst, curve)

    def test_extrapolated_duration_ignores_known_flows(self, sloped_curve):
        inst = zero_coupon_bond(2.0, 0.9)
        assert extrapolated_duration(inst, sloped_curve) == 0.0


class TestSolveKnot:
    """Tests for single instrument solves."""

    @pytest.mark.parametrize("method", ["secant", "newton", "exact"])
    def test_zero_coupon_bond(self, method):
        u, result = solve_knot(zero_coupon_bond(2.0, 0.9), Curve(), method=method)

        assert u == 2.0
        assert result.converged
        np.testing.assert_allclose(result.root, -math.log(0.9) / 2, atol=1e-7)

    def test_curve_not_modified(self, sloped_curve):
        solve_knot(zero_coupon_bond(4.0, 0.8), sloped_curve)

        assert len(sloped_curve) == 3
        assert sloped_curve.extrapolated == 0.05

    def test_maturity_before_curve_end(self, sloped_curve):
        with pytest.raises(CurveOrderError):
            solve_knot(zero_coupon_bond(3.0, 0.9), sloped_curve)

    def test_exact_needs_single_flow_past_curve(self):
        with pytest.raises(ValueError):
            solve_knot(interest_rate_swap(2.0, 0.04), Curve(), method="exact")

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            solve_knot(zero_coupon_bond(1.0, 0.95), Curve(), method="bisect")

    def test_exact_zero_final_flow(self):
        """A zero amount past the curve cannot be priced and reports NaN."""
        inst = Instrument(((0.0, -0.9), (2.0, 0.0)))
        u, result = solve_knot(inst, Curve(), method="exact")

        assert u == 2.0
        assert not result.converged
        assert math.isnan(result.root)

    def test_exact_zero_final_flow_bootstrap(self):
        inst = Instrument(((0.0, -0.9), (2.0, 0.0)))
        result = Bootstrapper(method="exact").bootstrap([inst])

        assert not result.success
        assert result.failed_index == 0
        assert len(result.curve) == 0


class TestBootstrapper:
    """Tests for Bootstrapper class."""

    @pytest.mark.parametrize("method", ["secant", "newton", "exact"])
    def test_single_zero_coupon_bond(self, method):
        """Discount at maturity reproduces the bond price."""
        curve = bootstrap([zero_coupon_bond(2.0, 0.9)], method=method)

        assert len(curve) == 1
        np.testing.assert_allclose(curve.discount(2.0), 0.9, atol=1e-7)

    def test_zero_coupon_bond_strip(self):
        prices = [0.97, 0.94, 0.9, 0.85]
        instruments = [zero_coupon_bond(float(u), D) for u, D in zip([1, 2, 3, 5], prices)]
        curve = bootstrap(instruments, method="exact")

        for u, D in zip([1, 2, 3, 5], prices):
            np.testing.assert_allclose(curve.discount(u), D, rtol=1e-12)

    def test_deposit_forward_rates(self, swap_instruments):
        curve = bootstrap(swap_instruments[:2])

        np.testing.assert_allclose(curve.forward(0.5), 0.030, atol=1e-6)
        np.testing.assert_allclose(curve.forward(1.0), 0.034, atol=1e-6)

    def test_swap_curve_reprices(self, swap_instruments):
        """Every instrument reprices to par on the bootstrapped curve."""
        result = Bootstrapper().bootstrap(swap_instruments)

        assert result.success
        assert result.failed_index is None
        np.testing.assert_allclose(result.curve.times, [0.5, 1.0, 2.0, 3.0, 5.0])
        assert len(result.repricing_errors) == 5
        for err in result.repricing_errors.values():
            assert abs(err) < 1e-7

    def test_secant_and_newton_agree(self, swap_instruments):
        secant_curve = bootstrap(swap_instruments, method="secant")
        newton_curve = bootstrap(swap_instruments, method="newton")

        np.testing.assert_allclose(secant_curve.rates, newton_curve.rates, atol=1e-6)

    def test_extrapolated_rate_is_last_knot(self, swap_instruments):
        curve = bootstrap(swap_instruments)
        assert curve.extrapolated == curve.back()[1]

    def test_seed_curve_extended(self):
        curve = Curve([1.0], [0.03])
        bootstrap([zero_coupon_bond(2.0, math.exp(-0.07))], curve)

        assert len(curve) == 2
        np.testing.assert_allclose(curve.forward(1.5), 0.04, atol=1e-6)

    def test_forward_rate_agreement(self):
        curve = bootstrap([cash_deposit(1.0, 0.03), forward_rate_agreement(1.0, 2.0, 0.05)])
        np.testing.assert_allclose(curve.forward(1.5), 0.05, atol=1e-6)

    def test_prices(self):
        """Non-zero targets for instruments without a price flow."""
        inst = Instrument(((2.0, 1.0),))
        curve = bootstrap([inst], prices=[0.9])

        np.testing.assert_allclose(curve.discount(2.0), 0.9, atol=1e-7)

    def test_out_of_order(self):
        with pytest.raises(CurveOrderError):
            bootstrap([zero_coupon_bond(2.0, 0.9), zero_coupon_bond(1.0, 0.95)])

    def test_none_instrument(self):
        with pytest.raises(TypeError):
            bootstrap([zero_coupon_bond(1.0, 0.95), None])

    def test_price_length_mismatch(self):
        with pytest.raises(ValueError):
            bootstrap([zero_coupon_bond(1.0, 0.95)], prices=[0.0, 0.0])

    def test_non_convergence_reported(self, swap_instruments):
        """An exhausted iteration budget stops at the failing instrument."""
        result = Bootstrapper(max_iterations=2).bootstrap(swap_instruments)

        assert not result.success
        assert result.failed_index == 0
        assert not result.solves[0].converged
        assert len(result.curve) == 0
        assert "DEP 0.5" in result.message

    def test_unpriceable_instrument(self):
        """Present value that never crosses zero fails to calibrate."""
        instruments = [zero_coupon_bond(1.0, 0.95), zero_coupon_bond(2.0, -0.5)]
        result = Bootstrapper().bootstrap(instruments)

        assert not result.success
        assert result.failed_index == 1
        assert len(result.curve) == 1

    def test_bootstrap_error(self, swap_instruments):
        with pytest.raises(BootstrapError) as excinfo:
            bootstrap(swap_instruments, max_iterations=2)

        assert excinfo.value.index == 0
        assert excinfo.value.instrument is swap_instruments[0]
        assert not excinfo.value.result.success

    def test_from_conventions(self):
        bootstrapper = Bootstrapper.from_conventions(SolverConventions.newton())

        assert bootstrapper.method == "newton"
        assert bootstrapper.max_iterations == 100

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            Bootstrapper(method="brent")

    def test_to_frame(self, swap_instruments):
        result = Bootstrapper().bootstrap(swap_instruments)
        df = result.to_frame()

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["time", "forward", "iterations", "residual"]
        assert len(df) == 5
        np.testing.assert_allclose(df["time"], result.curve.times)
