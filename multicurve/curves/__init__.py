"""
Calibrated curve objects.

Every curve reports continuously compounded zero rates and the sensitivity of
those rates to its parameters:

- InterpolatedYieldCurve: zero rates interpolated between node times
- InterpolatedDiscountCurve: discount factors interpolated between node times
- PeriodicYieldCurve: periodically compounded yields between node times
- ConstantYieldCurve, NelsonSiegelCurve: closed-form curves
- SpreadCurve: a base curve plus a calibrated increment
"""

from .base import TimeLike, YieldCurve
from .functional import ConstantYieldCurve, NelsonSiegelCurve
from .interpolated import (
    InterpolatedDiscountCurve,
    InterpolatedYieldCurve,
    PeriodicYieldCurve,
)
from .spread import SpreadCurve

__all__ = [
    # Base
    'YieldCurve',
    'TimeLike',

    # Interpolated curves
    'InterpolatedYieldCurve',
    'InterpolatedDiscountCurve',
    'PeriodicYieldCurve',

    # Closed-form curves
    'ConstantYieldCurve',
    'NelsonSiegelCurve',

    # Composed curves
    'SpreadCurve',
]
