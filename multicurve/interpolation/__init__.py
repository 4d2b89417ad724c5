"""
Interpolation methods for yield curves.

Interpolators are bound to node data and extrapolate through pluggable
policies. ``InterpolatorSpec`` is the unbound form held by curve
configurations until calibration supplies the node times.
"""

# Base classes
from .base import Interpolator

# Cubic interpolation methods
from .cubic import MonotoneCubicInterpolator, NaturalCubicSplineInterpolator

# Extrapolation
from .extrapolation import (
    Extrapolator,
    FlatExtrapolator,
    LinearExtrapolator,
    get_extrapolator,
)

# Factory and utilities
from .factory import (
    InterpolatorSpec,
    create_interpolator,
    discount_factor_to_zero_rate,
    zero_rate_to_discount_factor,
)

# Linear interpolation methods
from .linear import (
    LinearInterpolator,
    LogLinearInterpolator,
    PiecewiseConstantInterpolator,
)

__all__ = [
    # Base classes
    'Interpolator',

    # Linear interpolation methods
    'LinearInterpolator',
    'LogLinearInterpolator',
    'PiecewiseConstantInterpolator',

    # Cubic interpolation methods
    'MonotoneCubicInterpolator',
    'NaturalCubicSplineInterpolator',

    # Extrapolation
    'Extrapolator',
    'FlatExtrapolator',
    'LinearExtrapolator',
    'get_extrapolator',

    # Factory and utilities
    'InterpolatorSpec',
    'create_interpolator',
    'discount_factor_to_zero_rate',
    'zero_rate_to_discount_factor',
]
