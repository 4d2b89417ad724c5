"""
Par-spread calculators under the one-factor Hull-White model.

Futures are adjusted by the piecewise-constant volatility convexity factor
gamma(t0, t1, t2): the futures rate is (gamma * P(t1) / P(t2) - 1) / delta.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from multicurve.errors import ConfigurationError
from multicurve.instruments import RateFuture

from .base import DispatchingCalculator, PointSensitivity, add_point
from .discounting import PAR_SPREAD, PAR_SPREAD_SENSITIVITY


@dataclass(frozen=True)
class HullWhiteParameters:
    """Mean reversion and a piecewise constant volatility.

    volatilities[k] applies between volatility_times[k - 1] and
    volatility_times[k], with implicit bounds 0 and infinity.
    """

    mean_reversion: float
    volatilities: Tuple[float, ...]
    volatility_times: Tuple[float, ...] = ()

    def __post_init__(self):
        if self.mean_reversion <= 0:
            raise ValueError(f"Mean reversion must be positive: {self.mean_reversion}")
        if len(self.volatilities) != len(self.volatility_times) + 1:
            raise ValueError("Need exactly one more volatility than volatility times")
        times = (0.0,) + tuple(self.volatility_times)
        if any(later <= earlier for earlier, later in zip(times[:-1], times[1:])):
            raise ValueError("Volatility times must be positive and increasing")
        object.__setattr__(self, "volatilities", tuple(self.volatilities))
        object.__setattr__(self, "volatility_times", tuple(self.volatility_times))

    def futures_convexity_factor(self, t0: float, t1: float, t2: float) -> float:
        """Convexity factor of a future fixing at t0 on the period t1 to t2."""
        a = self.mean_reversion
        s = [0.0] + [t for t in self.volatility_times if t < t0] + [max(t0, 0.0)]
        factor2 = 0.0
        for k in range(len(s) - 1):
            sigma = self.volatilities[k]
            factor2 += (
                sigma * sigma
                * (math.exp(a * s[k + 1]) - math.exp(a * s[k]))
                * (2.0 - math.exp(-a * (t2 - s[k + 1])) - math.exp(-a * (t2 - s[k])))
            )
        factor1 = math.exp(-a * t1) - math.exp(-a * t2)
        return math.exp(factor1 / (2.0 * a ** 3) * factor2)


def _parameters(provider) -> HullWhiteParameters:
    parameters = getattr(provider, "hull_white_parameters", None)
    if parameters is None:
        raise ConfigurationError("Hull-White calculators need a provider carrying Hull-White parameters")
    return parameters


def _gamma(future: RateFuture, provider) -> float:
    return _parameters(provider).futures_convexity_factor(
        future.last_trading_time, future.start_time, future.end_time
    )


def future_par_spread(future: RateFuture, provider) -> float:
    curve = provider.index_curve(future.index)
    ratio = curve.discount_factor(future.start_time) / curve.discount_factor(future.end_time)
    return (_gamma(future, provider) * ratio - 1.0) / future.accrual_factor - future.implied_rate


def future_sensitivity(future: RateFuture, provider) -> PointSensitivity:
    name = provider.index_curve_name(future.index)
    curve = provider.curve(name)
    scaled = _gamma(future, provider) * curve.discount_factor(future.start_time) / curve.discount_factor(future.end_time)
    sensitivity: PointSensitivity = {}
    add_point(sensitivity, name, future.start_time, -future.start_time * scaled / future.accrual_factor)
    add_point(sensitivity, name, future.end_time, future.end_time * scaled / future.accrual_factor)
    return sensitivity


HULL_WHITE_PAR_SPREAD = PAR_SPREAD.with_handlers(
    "Hull-White par spread", {RateFuture: future_par_spread}
)

HULL_WHITE_PAR_SPREAD_SENSITIVITY = PAR_SPREAD_SENSITIVITY.with_handlers(
    "Hull-White par spread sensitivity", {RateFuture: future_sensitivity}
)
