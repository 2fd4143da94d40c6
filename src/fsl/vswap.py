"""
Variance swap replication.

The realized variance of X over t_0 < ... < t_n satisfies, to second order,

    sum (dX_j/X_j)^2 = f(X_n) - f(X_0) + sum f'(X_j) dX_j

for f(x) = -2 log(x/x0) + 2 (x - x0)/z, whose second derivative is
2/x^2. The dynamic term is a futures hedge with zero expected value, so
the par variance is E[f(X_n)]/(t_n - t_0).

The static payoff is replicated with forward puts below the separator z
and calls above it (Carr-Madan). On a discrete strike grid f is replaced
by its piecewise linear interpolant, whose kinks at the interior strikes
give the option weights f'[i] - f'[i-1]. The end strikes carry no option.
"""

import math
from typing import Sequence

import numpy as np

from .numerics import NAN


def static_payoff(x0: float, z: float, x: float) -> float:
    """Static payoff -2 log(x/x0) + 2 (x - x0)/z."""
    return -2 * math.log(x / x0) + 2 * (x - x0) / z


def difference_quotient(k: Sequence[float], f: Sequence[float]) -> np.ndarray:
    """
    Slopes (f[i+1] - f[i])/(k[i+1] - k[i]) on each strike interval.

    Returns an array one shorter than k.
    """
    k = np.asarray(k, dtype=float)
    f = np.asarray(f, dtype=float)
    if k.shape != f.shape:
        raise ValueError("Strikes and values must have the same length")

    return np.diff(f) / np.diff(k)


def _check_strikes(k: np.ndarray) -> None:
    if k.ndim != 1 or len(k) < 3:
        raise ValueError("Need at least 3 strikes")
    if not np.all(np.diff(k) > 0):
        raise ValueError("Strikes must be strictly increasing")
    if k[0] <= 0:
        raise ValueError("Strikes must be positive")


def vswap_weights(x0: float, z: float, k: Sequence[float]) -> np.ndarray:
    """
    Option weights at each strike.

    w[i] = f'[i] - f'[i-1] at the interior strikes, 0 at k[0] and k[n-1].
    Weights approximate f''(k) dk = 2 dk/k^2 and are positive.
    """
    if x0 <= 0 or z <= 0:
        raise ValueError("x0 and z must be positive")
    k = np.asarray(k, dtype=float)
    _check_strikes(k)

    slopes = difference_quotient(k, [static_payoff(x0, z, ki) for ki in k])
    w = np.zeros(len(k))
    w[1:-1] = np.diff(slopes)

    return w


def _monotone(x: np.ndarray, increasing: bool) -> bool:
    """Monotonicity check ignoring NaN and zero prices."""
    x = x[~np.isnan(x) & (x != 0)]
    d = np.diff(x)
    return bool(np.all(d >= 0) if increasing else np.all(d <= 0))


def par_variance(
    dt: float,
    x0: float,
    z: float,
    k: Sequence[float],
    p: Sequence[float],
    c: Sequence[float]
) -> float:
    """
    Par variance E[sigma^2] of a variance swap from forward option prices.

    With m the last strike at or below z and f'_+ the slope to its right,

        dt * var = f(k[m]) + f'_+ (x0 - k[m])
                   + sum_{i <= m} w[i] p[i] + sum_{i > m} w[i] c[i]

    Args:
        dt: Swap tenor t_n - t_0 in years
        x0: Initial forward price
        z: Put/call separator
        k: Strictly increasing strikes
        p: Forward put prices at each strike
        c: Forward call prices at each strike

    Returns:
        Annualized par variance; NaN if a needed price is NaN

    Raises:
        ValueError: for bad strikes, mismatched lengths, or puts that
            decrease / calls that increase with strike
    """
    if dt <= 0:
        raise ValueError("dt must be positive")
    k = np.asarray(k, dtype=float)
    p = np.asarray(p, dtype=float)
    c = np.asarray(c, dtype=float)
    if not (k.shape == p.shape == c.shape):
        raise ValueError("Strikes, puts and calls must have the same length")
    if not _monotone(p, increasing=True):
        raise ValueError("Put prices must be non-decreasing in strike")
    if not _monotone(c, increasing=False):
        raise ValueError("Call prices must be non-increasing in strike")

    w = vswap_weights(x0, z, k)
    n = len(k)
    m = min(max(int(np.searchsorted(k, z, side="right")) - 1, 0), n - 2)

    slope = (static_payoff(x0, z, k[m + 1]) - static_payoff(x0, z, k[m])) / (k[m + 1] - k[m])
    s2 = static_payoff(x0, z, k[m]) + slope * (x0 - k[m])

    for i in range(1, n - 1):
        price = p[i] if i <= m else c[i]
        if np.isnan(price):
            return NAN
        s2 += w[i] * price

    return float(s2 / dt)


__all__ = [
    "static_payoff",
    "difference_quotient",
    "vswap_weights",
    "par_variance",
]
