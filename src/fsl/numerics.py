"""
Numeric primitives shared by the solvers and curves.

Provides:
- NAN, EPSILON, INFINITY and SQRT_EPSILON constants for float64
- sgn / samesign helpers used for root bracketing
- Welford: running sample mean and variance
"""

import math
import sys
from typing import Iterable, Tuple

NAN = float("nan")
INFINITY = float("inf")
EPSILON = sys.float_info.epsilon

# 2^-26 for IEEE doubles, the usual square-root-of-epsilon tolerance.
SQRT_EPSILON = math.ldexp(1.0, -(sys.float_info.mant_dig // 2))


def is_nan(x: float) -> bool:
    """True if x is NaN."""
    return x != x


def sgn(x: float) -> float:
    """Sign of x as -1, 0 or 1."""
    return 1.0 if x > 0 else -1.0 if x < 0 else 0.0


def samesign(x: float, y: float) -> bool:
    """True if x and y have the same sign (zero only matches zero)."""
    return sgn(x) == sgn(y)


class Welford:
    """
    Running mean and variance using Welford's update.

    Variance is the population variance (sum of squared deviations / n).
    """

    def __init__(self):
        self.count = 0
        self.mean = 0.0
        self._m2 = 0.0

    def add(self, x: float) -> "Welford":
        self.count += 1
        delta = x - self.mean
        self.mean += delta / self.count
        self._m2 += delta * (x - self.mean)
        return self

    def update(self, xs: Iterable[float]) -> "Welford":
        for x in xs:
            self.add(x)
        return self

    @property
    def variance(self) -> float:
        if self.count == 0:
            return NAN
        return self._m2 / self.count

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    def result(self) -> Tuple[float, float]:
        """Return (mean, variance)."""
        if self.count == 0:
            return NAN, NAN
        return self.mean, self.variance

    def __repr__(self) -> str:
        return f"Welford(count={self.count}, mean={self.mean}, variance={self.variance})"


__all__ = [
    "NAN",
    "INFINITY",
    "EPSILON",
    "SQRT_EPSILON",
    "is_nan",
    "sgn",
    "samesign",
    "Welford",
]
