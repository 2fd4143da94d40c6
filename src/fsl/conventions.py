"""
Payment frequencies and numerical solver conventions.

Frequencies:
- ANNUALLY: 1 payment per year
- SEMIANNUALLY: 2 payments per year
- QUARTERLY: 4 payments per year
- MONTHLY: 12 payments per year

Solver conventions bundle the tolerance, iteration budget and seeding
used by the root finders and the curve bootstrapper.
"""

from dataclasses import dataclass
from enum import Enum

from .numerics import SQRT_EPSILON


class Frequency(Enum):
    """Number of payments per year."""
    ANNUALLY = 1
    SEMIANNUALLY = 2
    QUARTERLY = 4
    MONTHLY = 12

    @classmethod
    def from_string(cls, s: str) -> "Frequency":
        """Parse frequency from string representation."""
        mapping = {
            "ANNUAL": cls.ANNUALLY,
            "ANNUALLY": cls.ANNUALLY,
            "1": cls.ANNUALLY,
            "SEMI": cls.SEMIANNUALLY,
            "SEMIANNUAL": cls.SEMIANNUALLY,
            "SEMIANNUALLY": cls.SEMIANNUALLY,
            "2": cls.SEMIANNUALLY,
            "QUARTERLY": cls.QUARTERLY,
            "4": cls.QUARTERLY,
            "MONTHLY": cls.MONTHLY,
            "12": cls.MONTHLY,
        }
        key = str(s).upper().replace(" ", "").replace("-", "").replace("_", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown payment frequency: {s}")

    @property
    def period(self) -> float:
        """Length of one payment period in years."""
        return 1.0 / self.value


BOOTSTRAP_METHODS = ("secant", "newton", "exact")


@dataclass
class SolverConventions:
    """
    Container for root-finding and bootstrap settings.

    Attributes:
        tolerance: Absolute tolerance on the function value
        max_iterations: Iteration budget before reporting non-convergence
        bump: Offset of the second secant seed from the first
        method: Bootstrap solve method ("secant", "newton" or "exact")
    """
    tolerance: float = SQRT_EPSILON
    max_iterations: int = 100
    bump: float = 0.01
    method: str = "secant"

    def __post_init__(self):
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        if self.method not in BOOTSTRAP_METHODS:
            raise ValueError(f"Unknown bootstrap method: {self.method}")

    @classmethod
    def default(cls) -> "SolverConventions":
        """Secant iteration at sqrt(epsilon) with 100 iterations."""
        return cls()

    @classmethod
    def strict(cls) -> "SolverConventions":
        """Tight tolerance for repricing checks."""
        return cls(tolerance=1e-12, max_iterations=200)

    @classmethod
    def newton(cls) -> "SolverConventions":
        """Newton iteration using the curve duration as derivative."""
        return cls(method="newton")


__all__ = [
    "Frequency",
    "SolverConventions",
    "BOOTSTRAP_METHODS",
]
