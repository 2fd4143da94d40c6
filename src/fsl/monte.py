"""
Monte Carlo helpers.

Implements:
- monte: sample mean and variance of a sequence of draws
- monte_carlo: mean and variance of a zero-argument variate
- brownian: Brownian motion sampled at increasing times

Randomness always comes from a caller-supplied numpy Generator; there
is no module-level random state.
"""

from typing import Callable, Iterable, Sequence, Tuple

import numpy as np

from .numerics import Welford


def monte(samples: Iterable[float]) -> Tuple[float, float]:
    """
    Sample mean and variance of samples.

    Variance is the population variance accumulated with Welford's method.
    """
    return Welford().update(samples).result()


def monte_carlo(variate: Callable[[], float], n: int) -> Tuple[float, float]:
    """
    Mean and variance of n draws of variate.

    Args:
        variate: Zero-argument callable returning one sample
        n: Number of samples

    Returns:
        Tuple of (mean, variance)
    """
    if n <= 0:
        raise ValueError("Number of samples must be positive")
    acc = Welford()
    for _ in range(n):
        acc.add(variate())

    return acc.result()


def brownian(times: Sequence[float], rng: np.random.Generator) -> np.ndarray:
    """
    Brownian motion B(t) at increasing times, starting from B(0) = 0.

    Args:
        times: Sample times, non-decreasing and non-negative
        rng: Random generator, e.g. np.random.default_rng(seed)

    Returns:
        Array of samples B(times[i])
    """
    t = np.asarray(times, dtype=float)
    dt = np.diff(t, prepend=0.0)
    if np.any(dt < 0):
        raise ValueError("Times must be non-negative and non-decreasing")

    return np.cumsum(rng.standard_normal(len(t)) * np.sqrt(dt))


__all__ = [
    "monte",
    "monte_carlo",
    "brownian",
]
