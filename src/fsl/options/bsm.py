"""
Black-Scholes/Merton model.

The stock is S_t = s0 exp((r - sigma^2/2) t + sigma B_t). Writing
F = S_t gives a Black model with forward f = s0 exp(r t) and
volatility s = sigma sqrt(t), so every BSM quantity is a discounted
Black quantity with the chain rule applied:

- value = D * black value
- delta = black delta (dF/ds0 = 1/D cancels D)
- gamma = black gamma / D
- vega  = D * black vega * sqrt(t)
"""

import math
from typing import Optional, Tuple

from ..numerics import SQRT_EPSILON
from .black import (
    black_put_delta,
    black_put_gamma,
    black_put_implied,
    black_put_value,
    black_put_vega,
)


def black_bsm(r: float, s0: float, sigma: float, t: float) -> Tuple[float, float, float]:
    """
    Convert Black-Scholes/Merton parameters to the Black model.

    Args:
        r: Continuously compounded interest rate
        s0: Spot price
        sigma: Volatility
        t: Time to expiry in years

    Returns:
        Tuple of (discount D, forward f, Black volatility s)

    Raises:
        ValueError: unless s0, sigma and t are positive
    """
    if s0 <= 0 or sigma <= 0 or t <= 0:
        raise ValueError("s0, sigma, and t must be positive")
    D = math.exp(-r * t)
    f = s0 / D
    s = sigma * math.sqrt(t)

    return D, f, s


def bsm_put_value(r: float, s0: float, sigma: float, t: float, k: float) -> float:
    """Put value exp(-r t) E[max(k - S_t, 0)]."""
    D, f, s = black_bsm(r, s0, sigma, t)

    return D * black_put_value(f, s, k)


def bsm_call_value(r: float, s0: float, sigma: float, t: float, k: float) -> float:
    """Call value by parity: put + s0 - k exp(-r t)."""
    D, _, _ = black_bsm(r, s0, sigma, t)

    return bsm_put_value(r, s0, sigma, t, k) + s0 - k * D


def bsm_put_delta(r: float, s0: float, sigma: float, t: float, k: float) -> float:
    """Put delta with respect to s0."""
    _, f, s = black_bsm(r, s0, sigma, t)

    return black_put_delta(f, s, k)


def bsm_put_gamma(r: float, s0: float, sigma: float, t: float, k: float) -> float:
    """Put gamma with respect to s0."""
    D, f, s = black_bsm(r, s0, sigma, t)

    return black_put_gamma(f, s, k) / D


def bsm_put_vega(r: float, s0: float, sigma: float, t: float, k: float) -> float:
    """Put vega with respect to sigma."""
    D, f, s = black_bsm(r, s0, sigma, t)

    return D * black_put_vega(f, s, k) * math.sqrt(t)


def bsm_put_implied(
    r: float,
    s0: float,
    p: float,
    t: float,
    k: float,
    sigma: Optional[float] = None,
    tol: float = SQRT_EPSILON,
    max_iter: int = 100
) -> float:
    """
    Implied BSM volatility of a put with value p.

    Solves for the Black volatility of the forward put value p/D and
    converts back with sqrt(t).

    Args:
        r: Interest rate
        s0: Spot price
        p: Put value
        t: Time to expiry
        k: Strike
        sigma: Initial volatility guess (default: maximum vega point)
        tol: Tolerance on the forward put value
        max_iter: Maximum iterations

    Returns:
        Implied volatility, NaN if the solver does not converge
    """
    D, f, s = black_bsm(r, s0, 1.0 if sigma is None else sigma, t)
    if sigma is None:
        s = None

    implied = black_put_implied(f, p / D, k, s, tol, max_iter)

    return implied / math.sqrt(t)


__all__ = [
    "black_bsm",
    "bsm_put_value",
    "bsm_call_value",
    "bsm_put_delta",
    "bsm_put_gamma",
    "bsm_put_vega",
    "bsm_put_implied",
]
