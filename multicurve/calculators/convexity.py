"""
Par-spread calculators for the forward-rate model with futures convexity.

Futures rates exceed forward rates by the Ho-Lee adjustment
0.5 * sigma^2 * t_fix * t_end, which does not depend on the curves.
"""

from typing import Tuple

from multicurve.instruments import RateFuture

from .base import DispatchingCalculator
from .discounting import PAR_SPREAD, PAR_SPREAD_SENSITIVITY, forward_rate


def convexity_adjustment(future: RateFuture, volatility: float) -> float:
    return 0.5 * volatility * volatility * future.last_trading_time * future.end_time


def forward_convexity_calculators(volatility: float) -> Tuple[DispatchingCalculator, DispatchingCalculator]:
    """Par-spread and sensitivity calculators with convexity-adjusted futures."""
    if volatility < 0:
        raise ValueError(f"Volatility must be non-negative: {volatility}")

    def future_par_spread(future: RateFuture, provider) -> float:
        curve = provider.index_curve(future.index)
        rate = forward_rate(curve, future.start_time, future.end_time, future.accrual_factor)
        return rate + convexity_adjustment(future, volatility) - future.implied_rate

    par_spread = PAR_SPREAD.with_handlers(
        "forward convexity par spread", {RateFuture: future_par_spread}
    )
    return par_spread, PAR_SPREAD_SENSITIVITY
