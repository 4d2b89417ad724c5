"""
Curves defined as a spread over an already-calibrated base curve.
"""

from typing import Dict

import numpy as np

from .base import TimeLike, YieldCurve


class SpreadCurve(YieldCurve):
    """Zero rates of a base curve plus (or minus) those of a spread curve.

    Only the spread curve's parameters belong to this curve; the base curve's
    parameters are reported separately by ``parameter_sensitivities``.
    """

    def __init__(self, name: str, base: YieldCurve, spread: YieldCurve, subtract: bool = False):
        super().__init__(name, base.reference_date)
        self.base = base
        self.spread = spread
        self.subtract = subtract

    @property
    def _sign(self) -> float:
        return -1.0 if self.subtract else 1.0

    @property
    def parameters(self) -> np.ndarray:
        return self.spread.parameters

    def zero_rate(self, t: TimeLike) -> float:
        return self.base.zero_rate(t) + self._sign * self.spread.zero_rate(t)

    def spread_rate(self, t: TimeLike) -> float:
        """The signed increment over the base curve at t."""
        return self._sign * self.spread.zero_rate(t)

    def parameter_sensitivity(self, t: float) -> np.ndarray:
        return self._sign * self.spread.parameter_sensitivity(t)

    def parameter_sensitivities(self, t: float) -> Dict[str, np.ndarray]:
        sensitivities = dict(self.base.parameter_sensitivities(t))
        own = self.parameter_sensitivity(t)
        if self.name in sensitivities:
            sensitivities[self.name] = sensitivities[self.name] + own
        else:
            sensitivities[self.name] = own
        return sensitivities

    def __str__(self) -> str:
        operator = "-" if self.subtract else "+"
        return f"SpreadCurve({self.name} = {self.base.name} {operator} spread)"
