"""
Curves interpolated between node times.
"""

import math
from datetime import date
from typing import Optional

import numpy as np

from multicurve.interpolation import Interpolator

from .base import TimeLike, YieldCurve


class InterpolatedYieldCurve(YieldCurve):
    """Zero rates interpolated between node times."""

    def __init__(self, name: str, interpolator: Interpolator, reference_date: Optional[date] = None):
        super().__init__(name, reference_date)
        self.interpolator = interpolator

    @property
    def node_times(self) -> np.ndarray:
        return self.interpolator.pillars

    @property
    def parameters(self) -> np.ndarray:
        return self.interpolator.values.copy()

    def zero_rate(self, t: TimeLike) -> float:
        return self.interpolator.interpolate(self._to_year_fraction(t))

    def parameter_sensitivity(self, t: float) -> np.ndarray:
        return self.interpolator.node_sensitivity(t)


class InterpolatedDiscountCurve(YieldCurve):
    """Discount factors interpolated between node times."""

    def __init__(self, name: str, interpolator: Interpolator, reference_date: Optional[date] = None):
        super().__init__(name, reference_date)
        if np.any(interpolator.values <= 0):
            raise ValueError(f"Discount factors of {name} must be positive")
        self.interpolator = interpolator

    @property
    def node_times(self) -> np.ndarray:
        return self.interpolator.pillars

    @property
    def parameters(self) -> np.ndarray:
        return self.interpolator.values.copy()

    def discount_factor(self, t: TimeLike) -> float:
        time_frac = self._to_year_fraction(t)
        if time_frac <= 0:
            return 1.0
        return self.interpolator.interpolate(time_frac)

    def zero_rate(self, t: TimeLike) -> float:
        time_frac = self._to_year_fraction(t)
        if time_frac <= 0:
            time_frac = float(self.node_times[0])
        df_val = self.discount_factor(time_frac)
        if df_val <= 0:
            raise ValueError(f"Non-positive discount factor: {df_val}")
        return -math.log(df_val) / time_frac

    def parameter_sensitivity(self, t: float) -> np.ndarray:
        if t <= 0:
            return np.zeros(self.n_parameters)
        df_val = self.discount_factor(t)
        return -self.interpolator.node_sensitivity(t) / (t * df_val)


class PeriodicYieldCurve(YieldCurve):
    """Periodically compounded yields interpolated between node times."""

    def __init__(
        self,
        name: str,
        interpolator: Interpolator,
        periods_per_year: int,
        reference_date: Optional[date] = None,
    ):
        super().__init__(name, reference_date)
        if periods_per_year <= 0:
            raise ValueError("Number of compounding periods per year must be positive")
        self.interpolator = interpolator
        self.periods_per_year = periods_per_year

    @property
    def node_times(self) -> np.ndarray:
        return self.interpolator.pillars

    @property
    def parameters(self) -> np.ndarray:
        return self.interpolator.values.copy()

    def periodic_rate(self, t: TimeLike) -> float:
        return self.interpolator.interpolate(self._to_year_fraction(t))

    def zero_rate(self, t: TimeLike) -> float:
        m = self.periods_per_year
        return m * math.log(1.0 + self.periodic_rate(t) / m)

    def parameter_sensitivity(self, t: float) -> np.ndarray:
        m = self.periods_per_year
        return self.interpolator.node_sensitivity(t) / (1.0 + self.periodic_rate(t) / m)
