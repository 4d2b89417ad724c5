"""
Curve setup, curve type configuration and the compiled builder.

Typical use::

    setup = discounting_setup().building("USD-OIS")
    setup.using("USD-OIS").for_discounting("USD").for_index(SOFR).with_interpolator("LINEAR")
    setup.with_node("USD-OIS", deposit).with_node("USD-OIS", swap)
    provider, bundle = setup.get_builder().build_curves(valuation_date)
"""

from .builder import BuildResult, CurveBuilder
from .curve_type import CurveShape, CurveTypeSetUp, KnownCurveSetUp
from .models import (
    CurveModel,
    DiscountingModel,
    ForwardConvexityModel,
    HullWhiteModel,
    IssuerModel,
)
from .setup import (
    CurveSetUp,
    Node,
    discounting_setup,
    forward_convexity_setup,
    hull_white_setup,
    issuer_setup,
)

__all__ = [
    # Setup
    'CurveSetUp',
    'Node',
    'discounting_setup',
    'forward_convexity_setup',
    'hull_white_setup',
    'issuer_setup',

    # Curve types
    'CurveTypeSetUp',
    'KnownCurveSetUp',
    'CurveShape',

    # Models
    'CurveModel',
    'DiscountingModel',
    'ForwardConvexityModel',
    'HullWhiteModel',
    'IssuerModel',

    # Compiled builder
    'CurveBuilder',
    'BuildResult',
]
