"""
Par-spread and par-spread sensitivity calculators, one pair per model.
"""

from .base import (
    DispatchingCalculator,
    ParSpreadCalculator,
    PointSensitivity,
    SensitivityCalculator,
    add_point,
)
from .convexity import convexity_adjustment, forward_convexity_calculators
from .discounting import PAR_SPREAD, PAR_SPREAD_SENSITIVITY
from .hullwhite import (
    HULL_WHITE_PAR_SPREAD,
    HULL_WHITE_PAR_SPREAD_SENSITIVITY,
    HullWhiteParameters,
)
from .issuer import ISSUER_PAR_SPREAD, ISSUER_PAR_SPREAD_SENSITIVITY, bond_dirty_price

__all__ = [
    # Protocols and dispatch
    'ParSpreadCalculator',
    'SensitivityCalculator',
    'PointSensitivity',
    'DispatchingCalculator',
    'add_point',

    # Discounting
    'PAR_SPREAD',
    'PAR_SPREAD_SENSITIVITY',

    # Forward with convexity
    'forward_convexity_calculators',
    'convexity_adjustment',

    # Hull-White
    'HullWhiteParameters',
    'HULL_WHITE_PAR_SPREAD',
    'HULL_WHITE_PAR_SPREAD_SENSITIVITY',

    # Issuer
    'ISSUER_PAR_SPREAD',
    'ISSUER_PAR_SPREAD_SENSITIVITY',
    'bond_dirty_price',
]
