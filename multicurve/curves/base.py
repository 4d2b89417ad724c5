"""
Base curve class shared by every calibrated curve.
"""

import math
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Dict, Optional, Union

import numpy as np

from multicurve.conventions.daycount import time_between

TimeLike = Union[datetime, date, float]


class YieldCurve(ABC):
    """A calibrated curve described by continuously compounded zero rates.

    Times are year fractions (ACT/365F) from the valuation date; dates are
    accepted when the curve knows its reference date.
    """

    def __init__(self, name: str, reference_date: Optional[date] = None):
        self.name = name
        self.reference_date = reference_date

    def _to_year_fraction(self, t: TimeLike) -> float:
        """Convert a date or datetime to the curve's year fraction basis."""
        if isinstance(t, (int, float)):
            return float(t)
        if self.reference_date is None:
            raise ValueError(f"Curve {self.name} has no reference date to convert {t}")
        return time_between(self.reference_date, t)

    @abstractmethod
    def zero_rate(self, t: TimeLike) -> float:
        """Continuously compounded zero rate at t."""

    def discount_factor(self, t: TimeLike) -> float:
        """Discount factor at t."""
        time_frac = self._to_year_fraction(t)
        if time_frac <= 0:
            return 1.0
        return math.exp(-self.zero_rate(time_frac) * time_frac)

    def forward_rate(self, start: TimeLike, end: TimeLike, accrual: Optional[float] = None) -> float:
        """Simply compounded forward rate between start and end."""
        t1, t2 = self._to_year_fraction(start), self._to_year_fraction(end)
        accrual = t2 - t1 if accrual is None else accrual
        if accrual <= 0:
            raise ValueError("Forward period must be positive")
        return (self.discount_factor(t1) / self.discount_factor(t2) - 1.0) / accrual

    @property
    @abstractmethod
    def parameters(self) -> np.ndarray:
        """The calibrated parameters."""

    @property
    def n_parameters(self) -> int:
        return len(self.parameters)

    @abstractmethod
    def parameter_sensitivity(self, t: float) -> np.ndarray:
        """Sensitivity of zero_rate(t) to this curve's own parameters."""

    def parameter_sensitivities(self, t: float) -> Dict[str, np.ndarray]:
        """Sensitivity of zero_rate(t) to the parameters of every curve it is built on."""
        return {self.name: self.parameter_sensitivity(t)}

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, parameters={self.parameters.tolist()})"
