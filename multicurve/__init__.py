"""
multicurve: multi-curve interest-rate and issuer curve calibration.

Curves are declared on a setup, grouped into sequential blocks of jointly
solved units, and calibrated so that their node instruments reprice to
market quotes.
"""

from multicurve.builder import (
    CurveBuilder,
    CurveSetUp,
    DiscountingModel,
    ForwardConvexityModel,
    HullWhiteModel,
    IssuerModel,
    discounting_setup,
    forward_convexity_setup,
    hull_white_setup,
    issuer_setup,
)
from multicurve.calibration import BuildingBlockBundle, RootFinderConfig
from multicurve.errors import CalibrationError, ConfigurationError, UnsupportedCombination
from multicurve.instruments import FixingSeries
from multicurve.interpolation import InterpolatorSpec
from multicurve.provider import FxMatrix, ParameterProvider

__version__ = "0.1.0"

__all__ = [
    # Setup and builder
    'CurveSetUp',
    'CurveBuilder',
    'discounting_setup',
    'forward_convexity_setup',
    'hull_white_setup',
    'issuer_setup',

    # Models
    'DiscountingModel',
    'ForwardConvexityModel',
    'HullWhiteModel',
    'IssuerModel',

    # Inputs and outputs
    'InterpolatorSpec',
    'RootFinderConfig',
    'FixingSeries',
    'FxMatrix',
    'ParameterProvider',
    'BuildingBlockBundle',

    # Errors
    'ConfigurationError',
    'CalibrationError',
    'UnsupportedCombination',
]
