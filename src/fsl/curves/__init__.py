"""
Curves package - piecewise flat forward curves and bootstrapping.

Provides:
- Curve / CurveView: piecewise flat right-continuous forward curve
- Instrument: time-ordered cash flows with standard constructors
- Bootstrapper: sequential calibration of curve knots to instruments
"""

from .pwflat import (
    Curve,
    CurveView,
    CurveOrderError,
    create_flat_curve,
    extrapolate,
)
from .instruments import (
    CashFlow,
    Instrument,
    InstrumentError,
    zero_coupon_bond,
    cash_deposit,
    forward_rate_agreement,
    interest_rate_swap,
)
from .bootstrap import (
    Bootstrapper,
    BootstrapResult,
    BootstrapError,
    present_value,
    duration,
    extrapolated_duration,
    solve_knot,
    bootstrap,
)

__all__ = [
    "Curve",
    "CurveView",
    "CurveOrderError",
    "create_flat_curve",
    "extrapolate",
    "CashFlow",
    "Instrument",
    "InstrumentError",
    "zero_coupon_bond",
    "cash_deposit",
    "forward_rate_agreement",
    "interest_rate_swap",
    "Bootstrapper",
    "BootstrapResult",
    "BootstrapError",
    "present_value",
    "duration",
    "extrapolated_duration",
    "solve_knot",
    "bootstrap",
]
