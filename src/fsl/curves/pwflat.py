"""
Piecewise flat right-continuous forward curve.

The curve is determined by knot points (t[i], f[i]) with t strictly
increasing and an extrapolated rate _f used beyond the last knot:

           { f[i] if t[i-1] < u <= t[i]
    f(u) = { _f   if u > t[n-1]
           { NaN  if u < 0

Note f(t[i]) = f[i]. The discount D(u) = exp(-int_0^u f(s) ds) is the
price of a zero coupon bond paying 1 at u, and the spot rate
r(u) = (1/u) int_0^u f(s) ds is the average forward rate.

Two curve types are provided:
- CurveView: borrows knot arrays without copying them
- Curve: owns a growable knot buffer and can be extended
"""

from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..numerics import NAN


class CurveOrderError(ValueError):
    """Raised when knot times are not strictly increasing."""


def forward(u: float, t: np.ndarray, f: np.ndarray, extrapolated: float = NAN) -> float:
    """
    Forward rate at time u.

    Args:
        u: Query time
        t: Knot times (strictly increasing)
        f: Knot forward rates
        extrapolated: Rate beyond the last knot

    Returns:
        f[i] for the smallest i with t[i] >= u, the extrapolated rate
        past the last knot, NaN for u < 0
    """
    if u < 0:
        return NAN
    n = len(t)
    if n == 0:
        return extrapolated

    i = int(np.searchsorted(t, u, side="left"))

    return extrapolated if i == n else float(f[i])


def integral(u: float, t: np.ndarray, f: np.ndarray, extrapolated: float = NAN) -> float:
    """
    Integral of the forward curve from 0 to u.

    Sums f[i] * (t[i] - t[i-1]) over knots at or before u and adds the
    partial interval up to u at the next knot rate, or at the
    extrapolated rate past the last knot.
    """
    if u < 0:
        return NAN
    if u == 0:
        return 0.0
    n = len(t)
    if n == 0:
        return u * extrapolated

    # number of knots with t[i] <= u
    i = int(np.searchsorted(t, u, side="right"))

    I = 0.0
    t_ = 0.0
    if i > 0:
        I = float(np.dot(f[:i], np.diff(t[:i], prepend=0.0)))
        t_ = float(t[i - 1])
    if u > t_:
        I += (extrapolated if i == n else float(f[i])) * (u - t_)

    return I


def discount(u: float, t: np.ndarray, f: np.ndarray, extrapolated: float = NAN) -> float:
    """Discount D(u) = exp(-int_0^u f(s) ds)."""
    return float(np.exp(-integral(u, t, f, extrapolated)))


def spot(u: float, t: np.ndarray, f: np.ndarray, extrapolated: float = NAN) -> float:
    """
    Spot rate r(u) = (int_0^u f(s) ds) / u.

    Equals f[0] for u <= t[0] to avoid dividing by a small time.
    """
    if u < 0:
        return NAN
    if len(t) == 0:
        return extrapolated

    return float(f[0]) if u <= t[0] else integral(u, t, f, extrapolated) / u


class CurveView:
    """
    Non-owning view of a piecewise flat forward curve.

    The time and rate arrays are used as given; no copy is made when
    they are already numpy arrays of the right dtype. A view is cheap to
    create, which is what root searches over the extrapolated rate rely on.

    Attributes:
        times: Knot times
        rates: Knot forward rates
        extrapolated: Rate beyond the last knot
    """

    def __init__(
        self,
        times: Optional[Sequence[float]] = None,
        rates: Optional[Sequence[float]] = None,
        extrapolated: float = NAN,
        dtype=np.float64
    ):
        t = np.asarray(times if times is not None else (), dtype=dtype)
        f = np.asarray(rates if rates is not None else (), dtype=dtype)
        if t.shape != f.shape or t.ndim != 1:
            raise ValueError("Times and rates must be one dimensional with the same length")
        self._t = t
        self._f = f
        self._extrapolated = float(extrapolated)

    @property
    def times(self) -> np.ndarray:
        return self._t

    @property
    def rates(self) -> np.ndarray:
        return self._f

    @property
    def extrapolated(self) -> float:
        return self._extrapolated

    @property
    def dtype(self):
        return self.times.dtype

    def size(self) -> int:
        return len(self.times)

    def __len__(self) -> int:
        return self.size()

    def back(self) -> Tuple[float, float]:
        """Last knot on the curve, (0, 0) if there are none."""
        if self.size() == 0:
            return (0.0, 0.0)
        return (float(self.times[-1]), float(self.rates[-1]))

    def points(self) -> Iterable[Tuple[float, float]]:
        """Iterate over (time, rate) knots."""
        return zip(self.times.tolist(), self.rates.tolist())

    def with_extrapolated(self, extrapolated: float) -> "CurveView":
        """View of the same knots with a different extrapolated rate."""
        return CurveView(self.times, self.rates, extrapolated, dtype=self.dtype)

    def forward(self, u: float) -> float:
        return forward(u, self.times, self.rates, self.extrapolated)

    def __call__(self, u: float) -> float:
        return self.forward(u)

    def integral(self, u: float) -> float:
        return integral(u, self.times, self.rates, self.extrapolated)

    def discount(self, u: float) -> float:
        return discount(u, self.times, self.rates, self.extrapolated)

    def spot(self, u: float) -> float:
        return spot(u, self.times, self.rates, self.extrapolated)

    def to_frame(self) -> pd.DataFrame:
        """
        Knots as a DataFrame.

        Columns: time, forward, spot, discount
        """
        t = self.times.tolist()
        return pd.DataFrame({
            "time": t,
            "forward": self.rates.tolist(),
            "spot": [self.spot(u) for u in t],
            "discount": [self.discount(u) for u in t],
        })

    def __repr__(self) -> str:
        return f"{type(self).__name__}(points={self.size()}, extrapolated={self.extrapolated})"


def extrapolate(curve: CurveView, extrapolated: float) -> CurveView:
    """View of curve with a new extrapolated rate."""
    return curve.with_extrapolated(extrapolated)


class Curve(CurveView):
    """
    Piecewise flat forward curve owning its knots.

    Knots live in preallocated buffers that grow by doubling, so
    extending the curve does not reallocate on every point and views
    of the committed knots are slices rather than copies.

    Conventions:
        - Knot times are strictly increasing and positive
        - The extrapolated rate can be changed without touching the knots
        - Construction with no knots gives a flat curve at the extrapolated rate
    """

    def __init__(
        self,
        times: Sequence[float] = (),
        rates: Sequence[float] = (),
        extrapolated: float = NAN,
        dtype=np.float64
    ):
        t = np.array(times, dtype=dtype)
        f = np.array(rates, dtype=dtype)
        if t.shape != f.shape or t.ndim != 1:
            raise ValueError("Times and rates must be one dimensional with the same length")
        if len(t) and t[0] <= 0:
            raise CurveOrderError(f"Knot times must be positive, got {t[0]}")
        if len(t) > 1 and not np.all(np.diff(t) > 0):
            raise CurveOrderError("Knot times must be strictly increasing")

        self._n = len(t)
        capacity = max(8, 2 * self._n)
        self._tbuf = np.empty(capacity, dtype=dtype)
        self._fbuf = np.empty(capacity, dtype=dtype)
        self._tbuf[:self._n] = t
        self._fbuf[:self._n] = f
        self._extrapolated = float(extrapolated)

    @property
    def times(self) -> np.ndarray:
        return self._tbuf[:self._n]

    @property
    def rates(self) -> np.ndarray:
        return self._fbuf[:self._n]

    @property
    def extrapolated(self) -> float:
        return self._extrapolated

    @extrapolated.setter
    def extrapolated(self, value: float) -> None:
        self._extrapolated = float(value)

    def _grow(self) -> None:
        capacity = 2 * len(self._tbuf)
        tbuf = np.empty(capacity, dtype=self._tbuf.dtype)
        fbuf = np.empty(capacity, dtype=self._fbuf.dtype)
        tbuf[:self._n] = self._tbuf[:self._n]
        fbuf[:self._n] = self._fbuf[:self._n]
        self._tbuf, self._fbuf = tbuf, fbuf

    def extend(self, time: float, rate: float) -> "Curve":
        """
        Append the knot (time, rate).

        Raises:
            CurveOrderError: if time is not after the last knot time
        """
        last, _ = self.back()
        if not time > last:
            raise CurveOrderError(f"Time must be increasing: {time} <= {last}")
        if self._n == len(self._tbuf):
            self._grow()
        self._tbuf[self._n] = time
        self._fbuf[self._n] = rate
        self._n += 1

        return self

    def view(self, extrapolated: Optional[float] = None) -> CurveView:
        """
        Borrow the committed knots.

        The view is invalidated by a later extend() that grows the buffer.
        """
        if extrapolated is None:
            extrapolated = self._extrapolated
        return CurveView(self.times, self.rates, extrapolated, dtype=self.dtype)

    def with_extrapolated(self, extrapolated: float) -> CurveView:
        return self.view(extrapolated)

    def copy(self) -> "Curve":
        """Create a deep copy of the curve."""
        return Curve(self.times, self.rates, self._extrapolated, dtype=self.dtype)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Curve):
            return NotImplemented
        e, oe = self.extrapolated, other.extrapolated
        same_extrapolation = (np.isnan(e) and np.isnan(oe)) or e == oe
        return (
            np.array_equal(self.times, other.times)
            and np.array_equal(self.rates, other.rates)
            and bool(same_extrapolation)
        )

    __hash__ = None

    @classmethod
    def from_frame(cls, frame: pd.DataFrame, extrapolated: float = NAN) -> "Curve":
        """Build a curve from a DataFrame with time and forward columns."""
        return cls(
            frame["time"].to_numpy(dtype=float),
            frame["forward"].to_numpy(dtype=float),
            extrapolated
        )


def create_flat_curve(rate: float) -> Curve:
    """Curve with no knots and a constant forward rate."""
    return Curve(extrapolated=rate)


__all__ = [
    "CurveOrderError",
    "forward",
    "integral",
    "discount",
    "spot",
    "CurveView",
    "Curve",
    "extrapolate",
    "create_flat_curve",
]
