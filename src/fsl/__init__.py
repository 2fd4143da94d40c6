"""
FSL: Financial Software Library

A modular library for:
- Closed-form option pricing (Black model, Black-Scholes/Merton)
- Piecewise flat forward curves with forward/integral/discount/spot queries
- Bootstrapping curves from zero coupon bonds, deposits, FRAs and swaps
- One-dimensional root finding (secant and Newton)
- Variance swap replication and Monte Carlo helpers

Scope: scalar double precision times and rates; single-threaded.
"""

__version__ = "0.1.0"

# Core modules
from .numerics import NAN, EPSILON, SQRT_EPSILON, Welford
from .conventions import Frequency, SolverConventions
from .root1d import RootResult, Secant, Newton, bracket, secant, newton

# Curves
from .curves import (
    Curve,
    CurveView,
    CurveOrderError,
    create_flat_curve,
    extrapolate,
    CashFlow,
    Instrument,
    InstrumentError,
    zero_coupon_bond,
    cash_deposit,
    forward_rate_agreement,
    interest_rate_swap,
    Bootstrapper,
    BootstrapResult,
    BootstrapError,
    present_value,
    duration,
    extrapolated_duration,
    solve_knot,
    bootstrap,
)

# Options
from .options import (
    black_moneyness,
    black_put_value,
    black_call_value,
    black_put_delta,
    black_put_gamma,
    black_put_vega,
    black_put_implied,
    black_bsm,
    bsm_put_value,
    bsm_call_value,
    bsm_put_delta,
    bsm_put_gamma,
    bsm_put_vega,
    bsm_put_implied,
)

# Monte Carlo
from .monte import monte, monte_carlo, brownian

# Variance swaps
from .vswap import static_payoff, vswap_weights, par_variance

__all__ = [
    # Version
    "__version__",
    # Numerics
    "NAN",
    "EPSILON",
    "SQRT_EPSILON",
    "Welford",
    # Conventions
    "Frequency",
    "SolverConventions",
    # Root finding
    "RootResult",
    "Secant",
    "Newton",
    "bracket",
    "secant",
    "newton",
    # Curves
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
    # Options
    "black_moneyness",
    "black_put_value",
    "black_call_value",
    "black_put_delta",
    "black_put_gamma",
    "black_put_vega",
    "black_put_implied",
    "black_bsm",
    "bsm_put_value",
    "bsm_call_value",
    "bsm_put_delta",
    "bsm_put_gamma",
    "bsm_put_vega",
    "bsm_put_implied",
    # Monte Carlo
    "monte",
    "monte_carlo",
    "brownian",
    # Variance swaps
    "static_payoff",
    "vswap_weights",
    "par_variance",
]
