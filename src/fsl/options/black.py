"""
Black model for options on a forward.

The forward at expiry is F = f exp(s Z - s^2/2) with Z standard normal,
f the forward price and s the total volatility (sigma sqrt(T)).
Values are undiscounted forward values E[max(k - F, 0)].

Implements:
- Moneyness z = (log(k/f) + s^2/2)/s, so F <= k iff Z <= z
- Put value, delta, gamma and vega
- Call value by put-call parity
- Implied volatility from a put value via bounded Newton iteration
"""

import math
from typing import Optional

from scipy.stats import norm

from ..numerics import INFINITY, SQRT_EPSILON
from ..root1d import Newton


# Standard normal CDF and PDF
N = norm.cdf
n = norm.pdf


def _check_positive(f: float, s: float, k: float) -> None:
    if f <= 0 or s <= 0 or k <= 0:
        raise ValueError("f, s, and k must be positive")


def black_moneyness(f: float, s: float, k: float) -> float:
    """
    Black moneyness (log(k/f) + s^2/2)/s.

    Args:
        f: Forward price
        s: Volatility
        k: Strike

    Raises:
        ValueError: unless f, s and k are positive
    """
    _check_positive(f, s, k)

    return (math.log(k / f) + s * s / 2) / s


def black_put_value(f: float, s: float, k: float) -> float:
    """
    Forward put value E[max(k - F, 0)] = k N(z) - f N(z - s).
    """
    z = black_moneyness(f, s, k)

    return float(k * N(z) - f * N(z - s))


def black_call_value(f: float, s: float, k: float) -> float:
    """Forward call value by parity: put + f - k."""
    return black_put_value(f, s, k) + f - k


def black_put_delta(f: float, s: float, k: float) -> float:
    """
    Put delta (d/df) E[max(k - F, 0)] = -N(z - s).
    """
    z = black_moneyness(f, s, k)

    return float(-N(z - s))


def black_put_gamma(f: float, s: float, k: float) -> float:
    """
    Put gamma (d/df)^2 E[max(k - F, 0)] = n(z - s)/(f s).
    """
    z = black_moneyness(f, s, k)

    return float(n(z - s) / (f * s))


def black_put_vega(f: float, s: float, k: float) -> float:
    """
    Put vega (d/ds) E[max(k - F, 0)] = f n(z - s).
    """
    z = black_moneyness(f, s, k)

    return float(f * n(z - s))


def black_put_implied(
    f: float,
    p: float,
    k: float,
    s: Optional[float] = None,
    tol: float = SQRT_EPSILON,
    max_iter: int = 100
) -> float:
    """
    Implied volatility of a forward put with value p.

    Uses Newton iteration on the put value with vega as derivative,
    keeping iterates in (0, inf). The default seed sqrt(2 |log(f/k)|)
    maximizes vega, so the put value is convex below it and concave
    above it and Newton converges monotonically from there. The seed is
    floored at 0.1 near the money.

    Args:
        f: Forward price
        p: Put value
        k: Strike
        s: Initial volatility guess (default: maximum vega point)
        tol: Tolerance on the put value
        max_iter: Maximum iterations

    Returns:
        Implied volatility, NaN if Newton does not converge

    Raises:
        ValueError: unless f, k, s are positive and max(k - f, 0) < p < k
    """
    if f <= 0 or k <= 0:
        raise ValueError("f and k must be positive")
    if s is None:
        s = max(math.sqrt(2 * abs(math.log(f / k))), 0.1)
    if s <= 0:
        raise ValueError("Initial guess s must be positive")
    if not max(k - f, 0.0) < p < k:
        raise ValueError(f"Put value {p} must be between {max(k - f, 0.0)} and {k}")

    def value(s_: float) -> float:
        return black_put_value(f, s_, k) - p

    def vega(s_: float) -> float:
        return black_put_vega(f, s_, k)

    result = Newton(s, tol, max_iter).solve(value, vega, 0.0, INFINITY)

    return result.root


__all__ = [
    "N",
    "n",
    "black_moneyness",
    "black_put_value",
    "black_call_value",
    "black_put_delta",
    "black_put_gamma",
    "black_put_vega",
    "black_put_implied",
]
