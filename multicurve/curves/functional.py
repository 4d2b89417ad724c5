"""
Closed-form curves with a fixed, small number of parameters.
"""

import math
from datetime import date
from typing import Optional, Sequence

import numpy as np

from .base import TimeLike, YieldCurve

# exp(50) years is far beyond any curve horizon
_MAX_LOG_DECAY = 50.0


class ConstantYieldCurve(YieldCurve):
    """A flat continuously compounded zero rate."""

    def __init__(self, name: str, rate: float, reference_date: Optional[date] = None):
        super().__init__(name, reference_date)
        self.rate = float(rate)

    @property
    def parameters(self) -> np.ndarray:
        return np.array([self.rate])

    def zero_rate(self, t: TimeLike) -> float:
        return self.rate

    def parameter_sensitivity(self, t: float) -> np.ndarray:
        return np.ones(1)


class NelsonSiegelCurve(YieldCurve):
    """Nelson-Siegel zero rates.

    z(t) = b0 + b1 * f1(t / tau) + b2 * (f1(t / tau) - exp(-t / tau)),
    with f1(x) = (1 - exp(-x)) / x. Parameters are (b0, b1, b2, tau), or
    (b0, b1, b2, log(tau)) with log_decay, which keeps tau positive for any
    parameter vector.
    """

    def __init__(
        self,
        name: str,
        parameters: Sequence[float],
        reference_date: Optional[date] = None,
        log_decay: bool = False,
    ):
        super().__init__(name, reference_date)
        if len(parameters) != 4:
            raise ValueError("Nelson-Siegel needs exactly 4 parameters (b0, b1, b2, tau)")
        self._parameters = np.asarray(parameters, dtype=float)
        self.log_decay = log_decay
        if log_decay:
            if not math.isfinite(parameters[3]) or abs(parameters[3]) > _MAX_LOG_DECAY:
                raise ValueError(f"Nelson-Siegel log decay parameter out of range: {parameters[3]}")
            self.decay = math.exp(parameters[3])
        else:
            if parameters[3] <= 0:
                raise ValueError(f"Nelson-Siegel decay parameter must be positive: {parameters[3]}")
            self.decay = float(parameters[3])

    @property
    def parameters(self) -> np.ndarray:
        return self._parameters.copy()

    def zero_rate(self, t: TimeLike) -> float:
        b0, b1, b2, _ = self._parameters
        x = self._to_year_fraction(t) / self.decay
        if x <= 0:
            return b0 + b1
        decay = math.exp(-x)
        f1 = (1.0 - decay) / x
        return b0 + b1 * f1 + b2 * (f1 - decay)

    def parameter_sensitivity(self, t: float) -> np.ndarray:
        _, b1, b2, _ = self._parameters
        tau = self.decay
        x = t / tau
        if x <= 0:
            return np.array([1.0, 1.0, 0.0, 0.0])
        decay = math.exp(-x)
        f1 = (1.0 - decay) / x
        df1_dx = (decay * (x + 1.0) - 1.0) / (x * x)
        df2_dx = df1_dx + decay
        dx_dtau = -t / (tau * tau)
        d_tau = (b1 * df1_dx + b2 * df2_dx) * dx_dtau
        # d tau / d log(tau) = tau
        return np.array([1.0, f1, f1 - decay, d_tau * tau if self.log_decay else d_tau])
