"""
Model variants of the curve setup.

A model decides which calculators price the node instruments, which
repository solves the blocks, and the structural rules its curves follow.
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple

from multicurve.calculators import (
    HULL_WHITE_PAR_SPREAD,
    HULL_WHITE_PAR_SPREAD_SENSITIVITY,
    ISSUER_PAR_SPREAD,
    ISSUER_PAR_SPREAD_SENSITIVITY,
    PAR_SPREAD,
    PAR_SPREAD_SENSITIVITY,
    HullWhiteParameters,
    forward_convexity_calculators,
)
from multicurve.calibration import (
    CalibrationRepository,
    HullWhiteCalibrationRepository,
    RootFinderConfig,
)
from multicurve.conventions import IborIndex
from multicurve.errors import UnsupportedCombination
from multicurve.instruments import NodeTime

CalculatorPair = Tuple[object, object]


class CurveModel(ABC):
    """Strategy object parameterising a curve setup."""

    name = "model"
    # at most one index per curve
    single_index = False
    supports_issuers = False

    @abstractmethod
    def calculators(self) -> CalculatorPair:
        """Par-spread and sensitivity calculators of the model."""

    def repository(self, config: RootFinderConfig) -> CalibrationRepository:
        return CalibrationRepository(config)

    def default_node_time(self, curve_type) -> NodeTime:
        """Node-time convention of a curve that did not choose one."""
        return NodeTime.MATURITY

    def convexity_free(self, config: RootFinderConfig) -> Tuple[CalibrationRepository, CalculatorPair]:
        """Repository and calculators that calibrate without convexity adjustments."""
        raise UnsupportedCombination(f"The {self.name} model has no convexity-free calibration")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class DiscountingModel(CurveModel):
    """Plain multi-curve discounting; futures are not convexity adjusted."""

    name = "discounting"

    def calculators(self) -> CalculatorPair:
        return PAR_SPREAD, PAR_SPREAD_SENSITIVITY


class ForwardConvexityModel(CurveModel):
    """Forward curves with a Ho-Lee futures convexity adjustment.

    Ibor index curves pin their nodes at the start of the last fixing period.
    """

    name = "forward convexity"
    single_index = True

    def __init__(self, volatility: float):
        if volatility < 0:
            raise ValueError(f"Volatility must be non-negative: {volatility}")
        self.volatility = volatility

    def calculators(self) -> CalculatorPair:
        return forward_convexity_calculators(self.volatility)

    def default_node_time(self, curve_type) -> NodeTime:
        if any(isinstance(index, IborIndex) for index in curve_type.indices):
            return NodeTime.LAST_FIXING_START
        return NodeTime.MATURITY

    def convexity_free(self, config: RootFinderConfig):
        return CalibrationRepository(config), (PAR_SPREAD, PAR_SPREAD_SENSITIVITY)

    def __repr__(self) -> str:
        return f"ForwardConvexityModel(volatility={self.volatility})"


class HullWhiteModel(CurveModel):
    """Curves calibrated under a one-factor Hull-White model of one currency."""

    name = "Hull-White one factor"
    single_index = True

    def __init__(self, parameters: HullWhiteParameters, currency: str):
        self.parameters = parameters
        self.currency = currency

    def calculators(self) -> CalculatorPair:
        return HULL_WHITE_PAR_SPREAD, HULL_WHITE_PAR_SPREAD_SENSITIVITY

    def repository(self, config: RootFinderConfig) -> CalibrationRepository:
        return HullWhiteCalibrationRepository(self.parameters, self.currency, config)

    def convexity_free(self, config: RootFinderConfig):
        return CalibrationRepository(config), (PAR_SPREAD, PAR_SPREAD_SENSITIVITY)

    def __repr__(self) -> str:
        return f"HullWhiteModel(currency={self.currency!r}, mean_reversion={self.parameters.mean_reversion})"


class IssuerModel(CurveModel):
    """Issuer curves; bonds are routed to curves by issuer matchers."""

    name = "issuer"
    supports_issuers = True

    def calculators(self) -> CalculatorPair:
        return ISSUER_PAR_SPREAD, ISSUER_PAR_SPREAD_SENSITIVITY


def resolve_model(model: Optional[CurveModel]) -> CurveModel:
    return DiscountingModel() if model is None else model
