"""
Linear interpolation methods for yield curves.
"""
import math

import numpy as np

from .base import Interpolator


class LinearInterpolator(Interpolator):
    """Linear interpolation on the node values.

    Used on zero rates for yield curves and on discount factors for
    discount-factor curves.
    """

    def _interpolate(self, t: float) -> float:
        i = self._segment(t)
        t1, t2 = self.pillars[i], self.pillars[i + 1]
        weight = (t - t1) / (t2 - t1)
        return float(self.values[i] + weight * (self.values[i + 1] - self.values[i]))

    def _first_derivative(self, t: float) -> float:
        i = self._segment(t)
        return float((self.values[i + 1] - self.values[i]) / (self.pillars[i + 1] - self.pillars[i]))

    def _node_sensitivity(self, t: float) -> np.ndarray:
        i = self._segment(t)
        weight = (t - self.pillars[i]) / (self.pillars[i + 1] - self.pillars[i])
        sensitivity = np.zeros(self.size)
        sensitivity[i] = 1.0 - weight
        sensitivity[i + 1] = weight
        return sensitivity

    def first_derivative_sensitivity(self, t: float) -> np.ndarray:
        i = self._segment(min(max(t, self.pillars[0]), self.pillars[-1]))
        width = self.pillars[i + 1] - self.pillars[i]
        sensitivity = np.zeros(self.size)
        sensitivity[i] = -1.0 / width
        sensitivity[i + 1] = 1.0 / width
        return sensitivity


class LogLinearInterpolator(Interpolator):
    """Linear interpolation on the logarithm of strictly positive node values.

    On discount factors this gives piecewise constant forward rates.
    """

    def __init__(self, pillars, values, left_extrapolator=None, right_extrapolator=None):
        super().__init__(pillars, values, left_extrapolator, right_extrapolator)
        if np.any(self.values <= 0):
            raise ValueError("Log-linear interpolation needs strictly positive values")
        self.log_values = np.log(self.values)

    def _log_weight(self, t: float):
        i = self._segment(t)
        weight = (t - self.pillars[i]) / (self.pillars[i + 1] - self.pillars[i])
        return i, weight

    def _interpolate(self, t: float) -> float:
        i, weight = self._log_weight(t)
        return math.exp(self.log_values[i] + weight * (self.log_values[i + 1] - self.log_values[i]))

    def _first_derivative(self, t: float) -> float:
        i = self._segment(t)
        slope = (self.log_values[i + 1] - self.log_values[i]) / (self.pillars[i + 1] - self.pillars[i])
        return self._interpolate(t) * slope

    def _node_sensitivity(self, t: float) -> np.ndarray:
        i, weight = self._log_weight(t)
        value = self._interpolate(t)
        sensitivity = np.zeros(self.size)
        sensitivity[i] = value * (1.0 - weight) / self.values[i]
        sensitivity[i + 1] = value * weight / self.values[i + 1]
        return sensitivity


class PiecewiseConstantInterpolator(Interpolator):
    """Piecewise constant (step function) interpolation.

    Holds the left node value until the next node.
    """

    def _interpolate(self, t: float) -> float:
        i = int(np.searchsorted(self.pillars, t, side="right")) - 1
        return float(self.values[min(max(i, 0), self.size - 1)])

    def _first_derivative(self, t: float) -> float:
        return 0.0

    def _node_sensitivity(self, t: float) -> np.ndarray:
        i = int(np.searchsorted(self.pillars, t, side="right")) - 1
        sensitivity = np.zeros(self.size)
        sensitivity[min(max(i, 0), self.size - 1)] = 1.0
        return sensitivity

    def first_derivative_sensitivity(self, t: float) -> np.ndarray:
        return np.zeros(self.size)
