"""
Factory functions and unbound interpolator specifications.
"""
import math
from dataclasses import dataclass
from typing import Sequence

from .base import Interpolator
from .cubic import MonotoneCubicInterpolator, NaturalCubicSplineInterpolator
from .extrapolation import get_extrapolator
from .linear import LinearInterpolator, LogLinearInterpolator, PiecewiseConstantInterpolator

INTERPOLATORS = {
    "LINEAR": LinearInterpolator,
    "LOG_LINEAR": LogLinearInterpolator,
    "PIECEWISE_CONSTANT": PiecewiseConstantInterpolator,
    "MONOTONE_CUBIC": MonotoneCubicInterpolator,
    "NATURAL_CUBIC_SPLINE": NaturalCubicSplineInterpolator,
}


def create_interpolator(
    method: str,
    pillars: Sequence[float],
    values: Sequence[float],
    left_extrapolator: str = "FLAT",
    right_extrapolator: str = "FLAT",
) -> Interpolator:
    """
    Create an interpolator based on method name.

    Args:
        method: Interpolation method name
        pillars: Time points
        values: Values to interpolate
        left_extrapolator: Extrapolation policy name below the first pillar
        right_extrapolator: Extrapolation policy name above the last pillar

    Returns:
        Configured interpolator
    """
    method_upper = method.upper()
    if method_upper not in INTERPOLATORS:
        raise ValueError(
            f"Unknown interpolation method: {method}. "
            f"Available: {', '.join(INTERPOLATORS)}"
        )
    return INTERPOLATORS[method_upper](
        pillars,
        values,
        get_extrapolator(left_extrapolator),
        get_extrapolator(right_extrapolator),
    )


@dataclass(frozen=True)
class InterpolatorSpec:
    """An interpolation scheme plus extrapolation policies, not yet bound to nodes."""

    method: str = "LINEAR"
    left_extrapolator: str = "FLAT"
    right_extrapolator: str = "FLAT"

    def __post_init__(self):
        if self.method.upper() not in INTERPOLATORS:
            raise ValueError(f"Unknown interpolation method: {self.method}")
        get_extrapolator(self.left_extrapolator)
        get_extrapolator(self.right_extrapolator)

    def bind(self, pillars: Sequence[float], values: Sequence[float]) -> Interpolator:
        """Create the interpolator on concrete node data."""
        return create_interpolator(
            self.method, pillars, values, self.left_extrapolator, self.right_extrapolator
        )

    def __str__(self) -> str:
        return f"{self.method.upper()}[{self.left_extrapolator.upper()}, {self.right_extrapolator.upper()}]"


def discount_factor_to_zero_rate(df: float, time: float) -> float:
    """Convert discount factor to continuously compounded zero rate."""
    if df <= 0:
        raise ValueError("Discount factor must be positive")
    if time <= 0:
        raise ValueError("Time must be positive")

    return -math.log(df) / time


def zero_rate_to_discount_factor(rate: float, time: float) -> float:
    """Convert zero rate to discount factor."""
    return math.exp(-rate * time)
