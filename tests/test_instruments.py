"""
Unit tests for instruments module.
"""

import dataclasses
import math

import numpy as np
import pytest

from fsl.conventions import Frequency
from fsl.curves import (
    CashFlow,
    Instrument,
    InstrumentError,
    zero_coupon_bond,
    cash_deposit,
    forward_rate_agreement,
    interest_rate_swap,
)


class TestInstrument:
    """Tests for the Instrument container."""

    def test_cash_flows_normalized(self):
        inst = Instrument(((0, -1), (1, 2)))

        assert inst.cash_flows == (CashFlow(0.0, -1.0), CashFlow(1.0, 2.0))
        assert inst.maturity == 1.0
        assert len(inst) == 2
        assert inst[1].amount == 2.0

    def test_iteration(self):
        inst = Instrument(((0.0, -1.0), (0.5, 0.02), (1.0, 1.02)))
        assert [u for u, _ in inst] == [0.0, 0.5, 1.0]

    def test_arrays(self):
        inst = Instrument.from_arrays([0.0, 1.0], [-0.9, 1.0], label="zcb")

        np.testing.assert_array_equal(inst.times, [0.0, 1.0])
        np.testing.assert_array_equal(inst.amounts, [-0.9, 1.0])
        assert inst.to_array().shape == (2, 2)
        assert inst.label == "zcb"

    def test_empty_rejected(self):
        with pytest.raises(InstrumentError):
            Instrument(())

    def test_unordered_rejected(self):
        with pytest.raises(InstrumentError):
            Instrument(((1.0, -1.0), (0.5, 1.0)))

    def test_negative_time_rejected(self):
        with pytest.raises(InstrumentError):
            Instrument(((-0.5, -1.0), (1.0, 1.0)))

    def test_mismatched_arrays_rejected(self):
        with pytest.raises(InstrumentError):
            Instrument.from_arrays([0.0, 1.0], [1.0])

    def test_immutable(self):
        inst = zero_coupon_bond(1.0, 0.95)
        with pytest.raises(dataclasses.FrozenInstanceError):
            inst.label = "other"

    def test_error_is_value_error(self):
        assert issubclass(InstrumentError, ValueError)


class TestConstructors:
    """Tests for standard instrument constructors."""

    def test_zero_coupon_bond(self):
        inst = zero_coupon_bond(2.0, 0.9)

        np.testing.assert_array_equal(inst.times, [0.0, 2.0])
        np.testing.assert_array_equal(inst.amounts, [-0.9, 1.0])
        assert inst.maturity == 2.0

    def test_cash_deposit(self):
        inst = cash_deposit(1.0, 0.05)

        np.testing.assert_array_equal(inst.times, [0.0, 1.0])
        np.testing.assert_allclose(inst.amounts, [-1.0, math.exp(0.05)])

    def test_forward_rate_agreement(self):
        inst = forward_rate_agreement(1.0, 2.0, 0.05)

        np.testing.assert_array_equal(inst.times, [1.0, 2.0])
        np.testing.assert_allclose(inst.amounts, [-1.0, math.exp(0.05)])

    def test_swap_semiannual(self):
        inst = interest_rate_swap(2.0, 0.04)

        np.testing.assert_allclose(inst.times, [0.0, 0.5, 1.0, 1.5, 2.0])
        np.testing.assert_allclose(inst.amounts, [-1.0, 0.02, 0.02, 0.02, 1.02])

    @pytest.mark.parametrize("frequency", [Frequency.ANNUALLY, "annual", 1])
    def test_swap_annual(self, frequency):
        inst = interest_rate_swap(3.0, 0.05, frequency)

        np.testing.assert_allclose(inst.times, [0.0, 1.0, 2.0, 3.0])
        np.testing.assert_allclose(inst.amounts, [-1.0, 0.05, 0.05, 1.05])

    def test_swap_quarterly(self):
        inst = interest_rate_swap(1.0, 0.04, Frequency.QUARTERLY)

        assert len(inst) == 5
        assert inst.maturity == 1.0
        assert inst[-1].amount == pytest.approx(1.01)

    def test_swap_par_on_flat_curve(self):
        """Coupons sum to the notional for a zero rate."""
        inst = interest_rate_swap(5.0, 0.0)
        assert sum(inst.amounts) == pytest.approx(0.0)

    @pytest.mark.parametrize("build", [
        lambda: zero_coupon_bond(0.0, 1.0),
        lambda: cash_deposit(-1.0, 0.05),
        lambda: forward_rate_agreement(2.0, 1.0, 0.05),
        lambda: interest_rate_swap(0.0, 0.05),
    ])
    def test_invalid_maturity(self, build):
        with pytest.raises(InstrumentError):
            build()
