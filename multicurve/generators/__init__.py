"""
Curve generator strategies.

A generator is finalised against the node instruments of its curve and then
maps calibrated parameters to a curve object.
"""

from .base import CurveGenerator
from .functional import (
    CONSTANT,
    NELSON_SIEGEL,
    FunctionalForm,
    FunctionalFormRegistry,
    FunctionalGenerator,
)
from .interpolated import (
    DiscountFactorInterpolatedGenerator,
    InterpolatedGenerator,
    PeriodicYieldInterpolatedGenerator,
    YieldInterpolatedGenerator,
)
from .spread import SpreadGenerator

__all__ = [
    'CurveGenerator',

    # Interpolated
    'InterpolatedGenerator',
    'YieldInterpolatedGenerator',
    'DiscountFactorInterpolatedGenerator',
    'PeriodicYieldInterpolatedGenerator',

    # Functional forms
    'FunctionalForm',
    'FunctionalFormRegistry',
    'FunctionalGenerator',
    'NELSON_SIEGEL',
    'CONSTANT',

    # Composition
    'SpreadGenerator',
]
