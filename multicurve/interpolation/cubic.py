"""
Cubic interpolation methods backed by scipy.
"""
from scipy.interpolate import CubicSpline, PchipInterpolator

from .base import Interpolator


class MonotoneCubicInterpolator(Interpolator):
    """Shape-preserving piecewise cubic Hermite interpolation (Fritsch-Carlson).

    Monotone node data give a monotone interpolant with no overshoot between
    nodes.
    """

    def __init__(self, pillars, values, left_extrapolator=None, right_extrapolator=None):
        super().__init__(pillars, values, left_extrapolator, right_extrapolator)
        self._spline = PchipInterpolator(self.pillars, self.values, extrapolate=False)
        self._slope = self._spline.derivative()

    def _interpolate(self, t: float) -> float:
        return float(self._spline(t))

    def _first_derivative(self, t: float) -> float:
        return float(self._slope(t))


class NaturalCubicSplineInterpolator(Interpolator):
    """C2 cubic spline with zero curvature at both end nodes."""

    def __init__(self, pillars, values, left_extrapolator=None, right_extrapolator=None):
        super().__init__(pillars, values, left_extrapolator, right_extrapolator)
        self._spline = CubicSpline(self.pillars, self.values, bc_type="natural", extrapolate=False)
        self._slope = self._spline.derivative()

    def _interpolate(self, t: float) -> float:
        return float(self._spline(t))

    def _first_derivative(self, t: float) -> float:
        return float(self._slope(t))
