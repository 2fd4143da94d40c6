#!/usr/bin/env python
"""
FSL Demo Script

This script demonstrates the main workflow of the library:
1. Bootstrap a piecewise flat forward curve from market instruments
2. Verify that every instrument reprices on the curve
3. Price Black and Black-Scholes/Merton puts and recover implied vols
4. Replicate a variance swap from option prices
5. Estimate a normal probability by Monte Carlo

Usage:
    python run_demo.py [--method {secant,newton,exact}] [--verbose]
"""

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List

import numpy as np
import pandas as pd
from scipy.stats import norm

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fsl.conventions import BOOTSTRAP_METHODS, SolverConventions
from fsl.curves import (
    Bootstrapper,
    BootstrapResult,
    Instrument,
    cash_deposit,
    interest_rate_swap,
    zero_coupon_bond,
)
from fsl.options import (
    black_put_value,
    black_call_value,
    black_put_delta,
    black_put_vega,
    black_put_implied,
    bsm_put_value,
    bsm_put_implied,
)
from fsl.monte import brownian, monte, monte_carlo
from fsl.vswap import par_variance


# (maturity, rate) quotes: deposits up to 1Y, par swaps beyond
MARKET_QUOTES = [
    ("DEP", 0.25, 0.0510),
    ("DEP", 0.50, 0.0505),
    ("DEP", 1.00, 0.0490),
    ("IRS", 2.00, 0.0460),
    ("IRS", 3.00, 0.0440),
    ("IRS", 5.00, 0.0420),
    ("IRS", 7.00, 0.0415),
    ("IRS", 10.00, 0.0410),
]


def build_instruments(method: str) -> List[Instrument]:
    """Instruments for the demo curve."""
    instruments = []
    for kind, u, rate in MARKET_QUOTES:
        if method == "exact":
            # closed form solves need one cash flow past the curve
            instruments.append(zero_coupon_bond(u, math.exp(-rate * u)))
        elif kind == "DEP":
            instruments.append(cash_deposit(u, rate))
        else:
            instruments.append(interest_rate_swap(u, rate))
        print(f"  Added: {instruments[-1].label:>8s} @ {rate*100:.3f}%")

    return instruments


def build_curve(method: str) -> BootstrapResult:
    """Bootstrap the forward curve."""
    print("\n" + "="*60)
    print(f"Bootstrapping Forward Curve ({method})")
    print("="*60)

    instruments = build_instruments(method)
    conventions = SolverConventions(method=method)
    result = Bootstrapper.from_conventions(conventions).bootstrap(instruments)

    if not result.success:
        print(f"\n{result.message}")
        return result

    print(f"\nBootstrap complete: {len(result.curve)} knots")
    print(result.to_frame().to_string(index=False))

    print("\nCurve:")
    print(result.curve.to_frame().to_string(index=False, float_format="{:.6f}".format))

    print("\nRepricing errors:")
    for name, err in result.repricing_errors.items():
        print(f"  {name:>8s}: {err:+.2e}")

    return result


def price_options() -> pd.DataFrame:
    """Black puts across strikes with implied vol round trips."""
    print("\n" + "="*60)
    print("Black Model Puts (f = 100, s = 0.2)")
    print("="*60)

    f, s = 100.0, 0.2
    rows = []
    for k in [80.0, 90.0, 100.0, 110.0, 120.0]:
        p = black_put_value(f, s, k)
        rows.append({
            "strike": k,
            "put": p,
            "call": black_call_value(f, s, k),
            "delta": black_put_delta(f, s, k),
            "vega": black_put_vega(f, s, k),
            "implied": black_put_implied(f, p, k),
        })
    df = pd.DataFrame(rows)
    print(df.to_string(index=False, float_format="{:.6f}".format))

    r, s0, sigma, t, k = 0.05, 100.0, 0.25, 2.0, 105.0
    p = bsm_put_value(r, s0, sigma, t, k)
    print(f"\nBSM put (r={r}, s0={s0}, sigma={sigma}, t={t}, k={k}): {p:.6f}")
    print(f"BSM implied vol: {bsm_put_implied(r, s0, p, t, k):.10f}")

    return df


def replicate_variance_swap() -> float:
    """Par variance from a grid of Black option prices."""
    print("\n" + "="*60)
    print("Variance Swap Replication")
    print("="*60)

    f, sigma, dt = 100.0, 0.2, 1.0
    k = np.arange(40.0, 250.5, 0.5)
    s = sigma * math.sqrt(dt)
    p = [black_put_value(f, s, ki) for ki in k]
    c = [black_call_value(f, s, ki) for ki in k]

    var = par_variance(dt, f, f, k, p, c)
    print(f"  Strikes: {len(k)} from {k[0]:.1f} to {k[-1]:.1f}")
    print(f"  Par variance: {var:.6f} (volatility {math.sqrt(var):.4%})")

    return var


def run_monte_carlo(seed: int = 42) -> None:
    """Monte Carlo estimates with a seeded generator."""
    print("\n" + "="*60)
    print("Monte Carlo")
    print("="*60)

    rng = np.random.default_rng(seed)
    mean, var = monte_carlo(lambda: float(rng.standard_normal() <= 1.0), 10_000)
    print(f"  P(Z <= 1): {mean:.4f} (exact {norm.cdf(1.0):.4f}, variance {var:.4f})")

    ends = [brownian([0.5, 1.0, 2.0], rng)[-1] for _ in range(5_000)]
    mean, var = monte(ends)
    print(f"  B(2): mean {mean:+.4f}, variance {var:.4f}")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="FSL Demo")
    parser.add_argument(
        "--method",
        choices=BOOTSTRAP_METHODS,
        default="secant",
        help="Bootstrap solve method"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log solver iterations"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    print("="*60)
    print("FSL DEMO")
    print("="*60)

    result = build_curve(args.method)
    price_options()
    replicate_variance_swap()
    run_monte_carlo()

    print("\n" + "="*60)
    print("DEMO COMPLETE")
    print("="*60)

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
