"""
Options module - closed-form option pricing.

Provides:
- Black model on a forward (value, greeks, implied volatility)
- Black-Scholes/Merton model as a discounted Black model
"""

from .black import (
    black_moneyness,
    black_put_value,
    black_call_value,
    black_put_delta,
    black_put_gamma,
    black_put_vega,
    black_put_implied,
)
from .bsm import (
    black_bsm,
    bsm_put_value,
    bsm_call_value,
    bsm_put_delta,
    bsm_put_gamma,
    bsm_put_vega,
    bsm_put_implied,
)

__all__ = [
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
]
