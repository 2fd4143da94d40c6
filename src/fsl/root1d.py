"""
One-dimensional root finding.

Implements:
- Secant iteration that switches to false position once a sign change
  is bracketed, so the bracket is never lost
- Newton iteration with optional bounds [a, b]; steps leaving the bounds
  are pulled back by bisecting toward the violated bound

Both solvers return a RootResult. Non-convergence within the iteration
budget is not an error: the root is NaN and the residual and iteration
count are still reported.
"""

from dataclasses import dataclass
import logging
import math
from typing import Callable, Dict

from .numerics import INFINITY, NAN, SQRT_EPSILON, samesign

logger = logging.getLogger(__name__)

Func = Callable[[float], float]


@dataclass
class RootResult:
    """
    Result of a one-dimensional root search.

    Attributes:
        root: Root estimate, NaN if the search did not converge
        residual: Function value at the last iterate
        iterations: Number of iterations used
        method: Name of the solver
    """
    root: float
    residual: float
    iterations: int
    method: str

    @property
    def converged(self) -> bool:
        return not math.isnan(self.root)

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "root": self.root,
            "residual": self.residual,
            "iterations": self.iterations,
            "method": self.method,
            "converged": self.converged,
        }


def bracket(x: float, x0: float, a: float = -INFINITY, b: float = INFINITY) -> float:
    """
    Move x into [a, b] given the last bracketed guess x0.

    Returns the midpoint of x0 and the violated bound if x is outside
    [a, b]. Returns NaN if the bracket is ill-posed (a >= b or x0 not in (a, b)).
    """
    if a >= b or a >= x0 or x0 >= b:
        return NAN

    if x < a:
        return (x0 + a) / 2
    if x > b:
        return (x0 + b) / 2

    return x


class Secant:
    """
    Secant method with bracketing.

    Before a sign change is seen both endpoints shift as in the plain
    secant method. Once y0 and y1 differ in sign a new iterate only
    replaces the endpoint whose value has the same sign.

    Attributes:
        x0, x1: Initial guesses
        tolerance: Convergence threshold on |f(x)|
        iterations: Iteration budget
    """

    def __init__(
        self,
        x0: float,
        x1: float,
        tolerance: float = SQRT_EPSILON,
        iterations: int = 100
    ):
        self.x0 = x0
        self.x1 = x1
        self.tolerance = tolerance
        self.iterations = iterations

    @staticmethod
    def next(x0: float, y0: float, x1: float, y1: float) -> float:
        """Zero of the line through (x0, y0) and (x1, y1)."""
        return (x0 * y1 - x1 * y0) / (y1 - y0)

    def solve(self, f: Func) -> RootResult:
        """
        Find a root of f starting from the two seeds.

        Args:
            f: Scalar function

        Returns:
            RootResult with the last iterate x1 and residual f(x1)
        """
        x0, x1 = self.x0, self.x1
        y0, y1 = f(x0), f(x1)
        bounded = not samesign(y0, y1)
        n = 0

        while True:
            n += 1
            if math.isnan(y1) or abs(y1) <= self.tolerance or n >= self.iterations:
                break
            if y1 == y0:
                logger.debug("Secant stalled at iter %s: f(x0) == f(x1) == %s", n, y1)
                break
            x = self.next(x0, y0, x1, y1)
            y = f(x)
            logger.debug("Secant iter %s: x=%s y=%s bounded=%s", n, x, y, bounded)
            if bounded and samesign(y, y1):
                x1, y1 = x, y
            else:
                x0, y0 = x1, y1
                x1, y1 = x, y
                bounded = not samesign(y0, y1)

        if math.isnan(y1) or abs(y1) > self.tolerance:
            logger.debug("Secant failed to converge after %s iterations (residual %s)", n, y1)
            return RootResult(NAN, y1, n, "secant")

        return RootResult(x1, y1, n, "secant")


class Newton:
    """
    Newton's method with optional bounds.

    Attributes:
        x0: Initial guess
        tolerance: Convergence threshold on |f(x)|
        iterations: Iteration budget
    """

    def __init__(
        self,
        x0: float,
        tolerance: float = SQRT_EPSILON,
        iterations: int = 100
    ):
        self.x0 = x0
        self.tolerance = tolerance
        self.iterations = iterations

    @staticmethod
    def next(x: float, y: float, dy: float) -> float:
        """Newton step from x."""
        return x - y / dy

    def solve(
        self,
        f: Func,
        df: Func,
        a: float = -INFINITY,
        b: float = INFINITY
    ) -> RootResult:
        """
        Find a root of f in [a, b] using derivative df.

        Args:
            f: Scalar function
            df: Derivative of f
            a: Lower bound
            b: Upper bound

        Returns:
            RootResult with the last iterate and its residual
        """
        x0 = self.x0
        y0 = f(x0)
        n = 0

        while True:
            n += 1
            if math.isnan(y0) or abs(y0) <= self.tolerance or n >= self.iterations:
                break
            dy = df(x0)
            if dy == 0 or math.isnan(dy):
                logger.debug("Zero derivative; aborting Newton at iter %s", n)
                break
            x0 = bracket(self.next(x0, y0, dy), x0, a, b)
            y0 = f(x0)
            logger.debug("Newton iter %s: x=%s y=%s deriv=%s", n, x0, y0, dy)

        if math.isnan(y0) or abs(y0) > self.tolerance:
            logger.debug("Newton failed to converge after %s iterations (residual %s)", n, y0)
            return RootResult(NAN, y0, n, "newton")

        return RootResult(x0, y0, n, "newton")


def secant(
    f: Func,
    x0: float,
    x1: float,
    tolerance: float = SQRT_EPSILON,
    iterations: int = 100
) -> RootResult:
    """Solve f(x) = 0 with the secant method from seeds x0, x1."""
    return Secant(x0, x1, tolerance, iterations).solve(f)


def newton(
    f: Func,
    df: Func,
    x0: float,
    a: float = -INFINITY,
    b: float = INFINITY,
    tolerance: float = SQRT_EPSILON,
    iterations: int = 100
) -> RootResult:
    """Solve f(x) = 0 with Newton's method from seed x0 inside [a, b]."""
    return Newton(x0, tolerance, iterations).solve(f, df, a, b)


__all__ = [
    "RootResult",
    "bracket",
    "Secant",
    "Newton",
    "secant",
    "newton",
]
