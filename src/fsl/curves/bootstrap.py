"""
Curve bootstrapping engine.

Implements sequential bootstrap of a piecewise flat forward curve:
1. Take instruments in order of increasing maturity
2. For each instrument solve for the extrapolated forward rate that
   prices it to its target (0 for par instruments)
3. Commit (maturity, rate) as a new knot and move on

Each solve searches over views of the committed knots with a trial
extrapolated rate, so the committed curve is untouched until the root
is found.

Solve methods:
- secant: seeds at the current extrapolated rate and that rate + bump
- newton: derivative d pv / d rate = -extrapolated_duration
- exact: closed form when only the final cash flow is past the curve
"""

from dataclasses import dataclass, field
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from ..conventions import BOOTSTRAP_METHODS, SolverConventions
from ..numerics import NAN, SQRT_EPSILON
from ..root1d import RootResult, Newton, Secant
from .instruments import Instrument, InstrumentError
from .pwflat import Curve, CurveOrderError, CurveView

logger = logging.getLogger(__name__)


class BootstrapError(RuntimeError):
    """
    Raised when an instrument fails to calibrate.

    Attributes:
        index: Position of the failing instrument
        instrument: The failing instrument
        result: BootstrapResult up to the failure
    """

    def __init__(self, message: str, index: int, instrument: Instrument, result=None):
        super().__init__(message)
        self.index = index
        self.instrument = instrument
        self.result = result


def _check_instrument(instrument: Optional[Instrument]) -> Instrument:
    if instrument is None:
        raise TypeError("Instrument is None")
    if len(instrument) == 0:
        raise InstrumentError("Instrument cash flows are empty")
    return instrument


def present_value(instrument: Instrument, curve: CurveView) -> float:
    """
    Present value sum c_i D(t_i) of the cash flows.

    Raises:
        InstrumentError: if the instrument has no cash flows
    """
    _check_instrument(instrument)
    pv = 0.0
    for u, c in instrument:
        pv += c * curve.discount(u)

    return pv


def duration(instrument: Instrument, curve: CurveView) -> float:
    """
    Sensitivity sum t_i c_i D(t_i) to a parallel shift of the forward curve.

    The derivative of present value with respect to a uniform shift of
    every forward rate is -duration.
    """
    _check_instrument(instrument)
    dur = 0.0
    for u, c in instrument:
        dur += u * c * curve.discount(u)

    return dur


def extrapolated_duration(instrument: Instrument, curve: CurveView) -> float:
    """
    Sensitivity sum (t_i - T) c_i D(t_i) over cash flows past the last knot T.

    The derivative of present value with respect to the extrapolated
    rate is -extrapolated_duration. Equals duration() on a curve with no knots.
    """
    _check_instrument(instrument)
    T, _ = curve.back()
    dur = 0.0
    for u, c in instrument:
        if u > T:
            dur += (u - T) * c * curve.discount(u)

    return dur


def _seed(curve: CurveView) -> float:
    """Starting rate for a solve: extrapolated, else last knot, else 0."""
    if not math.isnan(curve.extrapolated):
        return curve.extrapolated
    if curve.size():
        return curve.back()[1]
    return 0.0


def _exact_rate(instrument: Instrument, curve: CurveView, price: float) -> RootResult:
    """Closed form rate when only the last cash flow lies past the curve."""
    T, _ = curve.back()
    known = [(u, c) for u, c in instrument if u <= T]
    beyond = [(u, c) for u, c in instrument if u > T]
    if len(beyond) != 1:
        raise ValueError(
            f"Exact bootstrap needs exactly one cash flow past {T}, got {len(beyond)}"
        )
    u, c = beyond[0]
    pv_known = sum(c_ * curve.discount(u_) for u_, c_ in known)
    denominator = c * curve.discount(T)
    if denominator == 0:
        return RootResult(NAN, NAN, 1, "exact")
    ratio = (price - pv_known) / denominator
    if not ratio > 0:
        return RootResult(NAN, NAN, 1, "exact")

    rate = -math.log(ratio) / (u - T)
    residual = present_value(instrument, curve.with_extrapolated(rate)) - price

    return RootResult(rate, residual, 1, "exact")


def solve_knot(
    instrument: Instrument,
    curve: CurveView,
    price: float = 0.0,
    method: str = "secant",
    tolerance: float = SQRT_EPSILON,
    iterations: int = 100,
    bump: float = 0.01
) -> Tuple[float, RootResult]:
    """
    Solve for the knot rate at the instrument maturity.

    The curve is not modified.

    Args:
        instrument: Cash flows to price
        curve: Curve bootstrapped so far
        price: Target present value
        method: "secant", "newton" or "exact"
        tolerance: Tolerance on the present value error
        iterations: Iteration budget
        bump: Distance between the two secant seeds

    Returns:
        Tuple of (maturity, RootResult); the root is NaN on failure

    Raises:
        TypeError: if instrument is None
        InstrumentError: if the instrument has no cash flows
        CurveOrderError: if the maturity is not past the last knot
    """
    _check_instrument(instrument)
    if method not in BOOTSTRAP_METHODS:
        raise ValueError(f"Unknown bootstrap method: {method}")

    u_ = instrument.maturity
    t_, _ = curve.back()
    if not u_ > t_:
        raise CurveOrderError(f"Last cash flow {u_} must be past end of curve {t_}")

    view = curve.with_extrapolated(curve.extrapolated)

    def error(rate: float) -> float:
        return present_value(instrument, view.with_extrapolated(rate)) - price

    def derivative(rate: float) -> float:
        return -extrapolated_duration(instrument, view.with_extrapolated(rate))

    f_ = _seed(view)
    if method == "exact":
        result = _exact_rate(instrument, view, price)
    elif method == "newton":
        result = Newton(f_, tolerance, iterations).solve(error, derivative)
    else:
        result = Secant(f_, f_ + bump, tolerance, iterations).solve(error)

    return u_, result


@dataclass
class BootstrapResult:
    """
    Result of curve bootstrap.

    Attributes:
        curve: Bootstrapped curve (knots up to the failure if unsuccessful)
        repricing_errors: Present value minus target by instrument label
        success: Whether every instrument calibrated
        message: Summary of the outcome
        failed_index: Position of the first failing instrument, if any
        solves: Root search result for each attempted instrument
    """
    curve: Curve
    repricing_errors: Dict[str, float]
    success: bool
    message: str
    failed_index: Optional[int] = None
    solves: List[RootResult] = field(default_factory=list, repr=False)

    def to_frame(self) -> pd.DataFrame:
        """
        One row per solved instrument.

        Columns: time, forward, iterations, residual
        """
        solved = [res for res in self.solves if res.converged]
        knots = list(self.curve.points())[len(self.curve) - len(solved):]
        rows = []
        for (t, f), res in zip(knots, solved):
            rows.append({
                "time": t,
                "forward": f,
                "iterations": res.iterations,
                "residual": res.residual,
            })
        return pd.DataFrame(rows, columns=["time", "forward", "iterations", "residual"])


class Bootstrapper:
    """
    Bootstrap a piecewise flat forward curve from instruments.

    The bootstrapper:
    1. Checks each instrument matures after the last knot
    2. Solves for the forward rate that prices it to target
    3. Stops at the first instrument that fails to calibrate
    4. Verifies that instruments reprice within tolerance

    Attributes:
        method: Solve method ("secant", "newton" or "exact")
        tolerance: Tolerance on present value error
        max_iterations: Iteration budget per instrument
        bump: Distance between secant seeds
        verify: Whether to record repricing errors
    """

    def __init__(
        self,
        method: str = "secant",
        tolerance: float = SQRT_EPSILON,
        max_iterations: int = 100,
        bump: float = 0.01,
        verify: bool = True
    ):
        if method not in BOOTSTRAP_METHODS:
            raise ValueError(f"Unknown bootstrap method: {method}")
        self.method = method
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.bump = bump
        self.verify = verify

    @classmethod
    def from_conventions(cls, conventions: SolverConventions, verify: bool = True) -> "Bootstrapper":
        return cls(
            method=conventions.method,
            tolerance=conventions.tolerance,
            max_iterations=conventions.max_iterations,
            bump=conventions.bump,
            verify=verify
        )

    def add(self, curve: Curve, instrument: Instrument, price: float = 0.0) -> RootResult:
        """
        Extend curve by the knot that prices instrument to price.

        On success the knot is appended and the extrapolated rate set to
        the solved rate; on failure the curve is left unchanged.
        """
        u, result = solve_knot(
            instrument, curve, price,
            method=self.method,
            tolerance=self.tolerance,
            iterations=self.max_iterations,
            bump=self.bump
        )
        if result.converged:
            curve.extend(u, result.root)
            curve.extrapolated = result.root
            logger.debug(
                "Added knot (%s, %s) for %s in %s iterations",
                u, result.root, instrument.label or "instrument", result.iterations
            )
        return result

    def bootstrap(
        self,
        instruments: Sequence[Instrument],
        curve: Optional[Curve] = None,
        prices: Optional[Sequence[float]] = None
    ) -> BootstrapResult:
        """
        Bootstrap curve from instruments.

        Args:
            instruments: Instruments in order of increasing maturity
            curve: Seed curve, extended in place (default: empty curve)
            prices: Target present values (default: all 0)

        Returns:
            BootstrapResult with curve and diagnostics

        Raises:
            TypeError: for a None instrument
            InstrumentError: for an instrument without cash flows
            CurveOrderError: for an instrument not maturing past the curve
        """
        if curve is None:
            curve = Curve()
        if prices is None:
            prices = [0.0] * len(instruments)
        if len(prices) != len(instruments):
            raise ValueError("Instruments and prices must have the same length")

        solves: List[RootResult] = []
        for i, (inst, price) in enumerate(zip(instruments, prices)):
            result = self.add(curve, _check_instrument(inst), price)
            solves.append(result)
            if not result.converged:
                name = inst.label or f"#{i}"
                message = (
                    f"Bootstrap failed at {name}: no convergence after "
                    f"{result.iterations} iterations (residual {result.residual:.3e})"
                )
                logger.error(message)
                return BootstrapResult(
                    curve=curve,
                    repricing_errors={},
                    success=False,
                    message=message,
                    failed_index=i,
                    solves=solves
                )

        repricing_errors = {}
        if self.verify:
            repricing_errors = self._verify_repricing(curve, instruments, prices)

        return BootstrapResult(
            curve=curve,
            repricing_errors=repricing_errors,
            success=True,
            message="Bootstrap successful",
            solves=solves
        )

    def _verify_repricing(
        self,
        curve: Curve,
        instruments: Sequence[Instrument],
        prices: Sequence[float]
    ) -> Dict[str, float]:
        """
        Reprice every instrument on the final curve.

        Returns dict of {label: error} where error = present value - price.
        """
        errors = {}
        for i, (inst, price) in enumerate(zip(instruments, prices)):
            name = inst.label or f"#{i}"
            if name in errors:
                name = f"{name} #{i}"
            errors[name] = present_value(inst, curve) - price

        return errors


def bootstrap(
    instruments: Sequence[Instrument],
    curve: Optional[Curve] = None,
    prices: Optional[Sequence[float]] = None,
    **kwargs
) -> Curve:
    """
    Convenience function to bootstrap a curve.

    Keyword arguments are passed to Bootstrapper.

    Raises:
        BootstrapError: naming the first instrument that failed to calibrate
    """
    result = Bootstrapper(**kwargs).bootstrap(instruments, curve, prices)

    if not result.success:
        i = result.failed_index
        raise BootstrapError(result.message, i, instruments[i], result)

    return result.curve


__all__ = [
    "BootstrapError",
    "BootstrapResult",
    "Bootstrapper",
    "present_value",
    "duration",
    "extrapolated_duration",
    "solve_knot",
    "bootstrap",
]
