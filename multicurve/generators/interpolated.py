"""
Generators for curves interpolated between node times.

Node times come either from the node instruments (through a node-time
calculator) or from pinned node dates converted at the valuation date.
"""

import copy
import math
from datetime import date
from typing import Optional, Sequence

import numpy as np

from multicurve.curves import (
    InterpolatedDiscountCurve,
    InterpolatedYieldCurve,
    PeriodicYieldCurve,
    YieldCurve,
)
from multicurve.instruments.node_time import NodeTime
from multicurve.interpolation import InterpolatorSpec

from .base import CurveGenerator


class InterpolatedGenerator(CurveGenerator):
    """Common behaviour of the interpolated generators."""

    def __init__(
        self,
        interpolator: InterpolatorSpec,
        node_time: NodeTime = NodeTime.MATURITY,
        node_times: Optional[Sequence[float]] = None,
        reference_date: Optional[date] = None,
    ):
        self.interpolator = interpolator
        self.node_time = node_time
        self.node_times = None if node_times is None else np.asarray(node_times, dtype=float)
        self.reference_date = reference_date
        self.pinned = node_times is not None

    @property
    def n_parameters(self) -> int:
        if self.node_times is None:
            raise ValueError(f"{self.__class__.__name__} has not been finalised against instruments")
        return len(self.node_times)

    def final_generator(self, instruments: Sequence) -> "InterpolatedGenerator":
        if self.pinned:
            return self
        times = [self.node_time.time(instrument) for instrument in instruments]
        return self._with_node_times(times)

    def _with_node_times(self, times: Sequence[float]) -> "InterpolatedGenerator":
        finalised = copy.copy(self)
        finalised.node_times = np.asarray(times, dtype=float)
        return finalised

    def _matched_rates(self, rates: Sequence[float]) -> np.ndarray:
        rates = np.asarray(rates, dtype=float)
        if len(rates) == self.n_parameters:
            return rates
        return np.full(self.n_parameters, rates.mean() if len(rates) else 0.0)

    def __repr__(self) -> str:
        times = None if self.node_times is None else self.node_times.tolist()
        return f"{self.__class__.__name__}(interpolator={self.interpolator}, node_times={times})"


class YieldInterpolatedGenerator(InterpolatedGenerator):
    """Continuously compounded zero rates interpolated between node times."""

    def initial_guess(self, rates: Sequence[float]) -> np.ndarray:
        return self._matched_rates(rates)

    def generate_curve(self, name: str, parameters: Sequence[float], provider=None) -> YieldCurve:
        return InterpolatedYieldCurve(
            name, self.interpolator.bind(self.node_times, parameters), self.reference_date
        )


class DiscountFactorInterpolatedGenerator(InterpolatedGenerator):
    """Discount factors interpolated between node times."""

    def initial_guess(self, rates: Sequence[float]) -> np.ndarray:
        return np.exp(-self._matched_rates(rates) * self.node_times)

    def generate_curve(self, name: str, parameters: Sequence[float], provider=None) -> YieldCurve:
        return InterpolatedDiscountCurve(
            name, self.interpolator.bind(self.node_times, parameters), self.reference_date
        )


class PeriodicYieldInterpolatedGenerator(InterpolatedGenerator):
    """Periodically compounded yields interpolated between node times."""

    def __init__(
        self,
        interpolator: InterpolatorSpec,
        periods_per_year: int,
        node_time: NodeTime = NodeTime.MATURITY,
        node_times: Optional[Sequence[float]] = None,
        reference_date: Optional[date] = None,
    ):
        super().__init__(interpolator, node_time, node_times, reference_date)
        if periods_per_year <= 0:
            raise ValueError("Number of compounding periods per year must be positive")
        self.periods_per_year = periods_per_year

    def initial_guess(self, rates: Sequence[float]) -> np.ndarray:
        m = self.periods_per_year
        return np.array([m * (math.exp(rate / m) - 1.0) for rate in self._matched_rates(rates)])

    def generate_curve(self, name: str, parameters: Sequence[float], provider=None) -> YieldCurve:
        return PeriodicYieldCurve(
            name,
            self.interpolator.bind(self.node_times, parameters),
            self.periods_per_year,
            self.reference_date,
        )
