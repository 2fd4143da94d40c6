"""
Fixed income instruments as time-ordered cash flows.

An instrument is the list of net payments (time, amount) of a contract,
with negative amounts paid and positive amounts received. Prices are
folded into the cash flows so a fairly priced instrument has present
value 0.

Constructors:
- zero_coupon_bond: pay D at 0, receive 1 at maturity
- cash_deposit: pay 1 at 0, receive exp(r u) at maturity
- forward_rate_agreement: pay 1 at u, receive exp(f (v - u)) at v
- interest_rate_swap: par fixed leg paying coupons at a given frequency
"""

from dataclasses import dataclass
import math
from typing import Iterator, NamedTuple, Sequence, Tuple, Union

import numpy as np

from ..conventions import Frequency


class InstrumentError(ValueError):
    """Raised for empty or badly ordered cash flows."""


class CashFlow(NamedTuple):
    """A single payment of amount at time (years)."""
    time: float
    amount: float


@dataclass(frozen=True)
class Instrument:
    """
    Immutable sequence of cash flows.

    Attributes:
        cash_flows: Cash flows in non-decreasing time order
        label: Optional name used in bootstrap diagnostics
    """
    cash_flows: Tuple[CashFlow, ...]
    label: str = ""

    def __post_init__(self):
        flows = tuple(CashFlow(float(u), float(c)) for u, c in self.cash_flows)
        if not flows:
            raise InstrumentError("Instrument cash flows are empty")
        if flows[0].time < 0:
            raise InstrumentError(f"Cash flow times must be non-negative, got {flows[0].time}")
        for prev, cur in zip(flows, flows[1:]):
            if cur.time < prev.time:
                raise InstrumentError("Cash flow times must be non-decreasing")
        object.__setattr__(self, "cash_flows", flows)

    @classmethod
    def from_arrays(
        cls,
        times: Sequence[float],
        amounts: Sequence[float],
        label: str = ""
    ) -> "Instrument":
        """Build from parallel arrays of times and amounts."""
        if len(times) != len(amounts):
            raise InstrumentError("Cash flow times and amounts must have the same size")
        return cls(tuple(zip(times, amounts)), label)

    @property
    def times(self) -> np.ndarray:
        return np.array([cf.time for cf in self.cash_flows])

    @property
    def amounts(self) -> np.ndarray:
        return np.array([cf.amount for cf in self.cash_flows])

    @property
    def maturity(self) -> float:
        """Time of the last cash flow."""
        return self.cash_flows[-1].time

    def __len__(self) -> int:
        return len(self.cash_flows)

    def __iter__(self) -> Iterator[CashFlow]:
        return iter(self.cash_flows)

    def __getitem__(self, i: int) -> CashFlow:
        return self.cash_flows[i]

    def to_array(self) -> np.ndarray:
        """Two row array of times and amounts."""
        return np.vstack([self.times, self.amounts])


def zero_coupon_bond(u: float, D: float) -> Instrument:
    """
    Zero coupon bond with maturity u and price D.

    Cash flows: (0, -D), (u, 1)
    """
    if u <= 0:
        raise InstrumentError("Maturity must be positive")
    return Instrument(((0.0, -D), (u, 1.0)), label=f"ZCB {u:g}")


def cash_deposit(u: float, r: float) -> Instrument:
    """
    Spot starting deposit with maturity u and continuously compounded rate r.

    Cash flows: (0, -1), (u, exp(r u))
    """
    if u <= 0:
        raise InstrumentError("Maturity must be positive")
    return Instrument(((0.0, -1.0), (u, math.exp(r * u))), label=f"DEP {u:g}")


def forward_rate_agreement(u: float, v: float, f: float) -> Instrument:
    """
    Forward rate agreement over [u, v] at continuously compounded rate f.

    Cash flows: (u, -1), (v, exp(f (v - u)))
    """
    if u < 0 or v <= u:
        raise InstrumentError("FRA requires 0 <= u < v")
    return Instrument(((u, -1.0), (v, math.exp(f * (v - u)))), label=f"FRA {u:g}x{v:g}")


def interest_rate_swap(
    u: float,
    c: float,
    frequency: Union[Frequency, str, int] = Frequency.SEMIANNUALLY
) -> Instrument:
    """
    Par interest rate swap as a fixed rate bond priced at par.

    Cash flows: (0, -1), coupon c/n at each period end i/n, and
    1 + c/n at maturity u.

    Args:
        u: Maturity in years
        c: Par coupon rate
        frequency: Payments per year (default: semiannual, the usual
            fixed leg convention for par swap quotes)
    """
    if u <= 0:
        raise InstrumentError("Maturity must be positive")
    if isinstance(frequency, str):
        frequency = Frequency.from_string(frequency)
    elif isinstance(frequency, int):
        frequency = Frequency(frequency)

    du = frequency.period
    periods = max(int(math.floor(u * frequency.value + 1e-9)), 1)

    flows = [(0.0, -1.0)]
    flows.extend((du * i, c * du) for i in range(1, periods + 1))
    flows[-1] = (u, 1.0 + c * du)

    return Instrument(tuple(flows), label=f"IRS {u:g}")


__all__ = [
    "InstrumentError",
    "CashFlow",
    "Instrument",
    "zero_coupon_bond",
    "cash_deposit",
    "forward_rate_agreement",
    "interest_rate_swap",
]
