"""
Per-curve type configuration: roles, shape and node-time convention.

Shape choices are exclusive. The first call wins and a later conflicting
call raises ConfigurationError at the offending call.
"""

import re
from datetime import date
from enum import Enum
from typing import Hashable, List, Optional, Tuple, Union

from multicurve.conventions import IborIndex, OvernightIndex, time_between, to_date
from multicurve.conventions.daycount import DateLike
from multicurve.curves import YieldCurve
from multicurve.errors import ConfigurationError, UnsupportedCombination
from multicurve.generators import (
    CurveGenerator,
    DiscountFactorInterpolatedGenerator,
    FunctionalForm,
    FunctionalFormRegistry,
    FunctionalGenerator,
    PeriodicYieldInterpolatedGenerator,
    SpreadGenerator,
    YieldInterpolatedGenerator,
)
from multicurve.instruments import NodeTime
from multicurve.interpolation import InterpolatorSpec
from multicurve.legal_entity import IssuerMatcher, LegalEntityFilter, ShortNameFilter

from .models import CurveModel

_CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


class CurveShape(Enum):
    """What the interpolated nodes of a curve hold."""

    YIELD = "YIELD"
    DISCOUNT_FACTOR = "DISCOUNT_FACTOR"
    PERIODIC_YIELD = "PERIODIC_YIELD"


class _RoleSetUp:
    """Discounting, index and issuer roles shared by calibrated and known curves."""

    def __init__(self, curve_name: str, model: CurveModel):
        self.curve_name = curve_name
        self.model = model
        self.currencies: List[str] = []
        self.indices: List[Hashable] = []
        self.issuer: Optional[IssuerMatcher] = None

    def for_discounting(self, *currencies: str):
        """Use this curve to discount cash flows in the given currencies."""
        if not currencies:
            raise ConfigurationError(f"No currency given to discount with {self.curve_name}")
        for currency in currencies:
            if not isinstance(currency, str):
                raise UnsupportedCombination(
                    f"Cannot discount with {self.curve_name} for a key of type {type(currency).__name__}"
                )
            if not _CURRENCY_PATTERN.match(currency):
                raise ConfigurationError(f"Discounting key {currency!r} is not a currency code")
            if currency not in self.currencies:
                self.currencies.append(currency)
        return self

    def for_index(self, *indices: Union[IborIndex, OvernightIndex]):
        """Use this curve to forecast the given ibor or overnight indices."""
        if not indices:
            raise ConfigurationError(f"No index given for {self.curve_name}")
        for index in indices:
            if not isinstance(index, (IborIndex, OvernightIndex)):
                raise UnsupportedCombination(
                    f"Cannot forecast {index!r} with {self.curve_name}: not an ibor or overnight index"
                )
        combined = self.indices + [index for index in indices if index not in self.indices]
        if self.model.single_index and len(combined) > 1:
            raise ConfigurationError(
                f"The {self.model.name} model allows one index per curve; "
                f"{self.curve_name} was given {[str(index) for index in combined]}"
            )
        self.indices = combined
        return self

    def for_issuer(self, key: Hashable, legal_entity_filter: Optional[LegalEntityFilter] = None):
        """Use this curve for bonds whose issuer's filtered key equals key."""
        if not self.model.supports_issuers:
            raise ConfigurationError(f"The {self.model.name} model has no issuer curves")
        if self.issuer is not None:
            raise ConfigurationError(f"Issuer of {self.curve_name} is already set to {self.issuer}")
        self.issuer = IssuerMatcher(key, legal_entity_filter or ShortNameFilter())
        return self

    @property
    def ibor_indices(self) -> List[IborIndex]:
        return [index for index in self.indices if isinstance(index, IborIndex)]

    @property
    def overnight_indices(self) -> List[OvernightIndex]:
        return [index for index in self.indices if isinstance(index, OvernightIndex)]


class CurveTypeSetUp(_RoleSetUp):
    """How one calibrated curve is represented and what it is used for."""

    def __init__(self, curve_name: str, model: CurveModel):
        super().__init__(curve_name, model)
        self.interpolator: Optional[InterpolatorSpec] = None
        self.form: Optional[FunctionalForm] = None
        self.shape: Optional[CurveShape] = None
        self.periods_per_year: Optional[int] = None
        self.node_dates: Optional[Tuple[date, ...]] = None
        self.node_time: Optional[NodeTime] = None
        self.spread_base: Optional[str] = None
        self.spread_subtract = False

    # ------------------------------------------------------------------
    # Generator policy
    # ------------------------------------------------------------------
    def with_interpolator(self, interpolator: Union[InterpolatorSpec, str]) -> "CurveTypeSetUp":
        if self.form is not None:
            raise ConfigurationError(
                f"{self.curve_name} uses the {self.form.name} functional form; it cannot be interpolated"
            )
        if self.interpolator is not None:
            raise ConfigurationError(f"Interpolator of {self.curve_name} is already {self.interpolator}")
        if isinstance(interpolator, str):
            interpolator = InterpolatorSpec(interpolator)
        self.interpolator = interpolator
        return self

    def functional_form(self, family: Union[FunctionalForm, str]) -> "CurveTypeSetUp":
        if isinstance(family, str):
            family = FunctionalFormRegistry.get(family)
        if self.form is not None:
            raise ConfigurationError(f"Functional form of {self.curve_name} is already {self.form.name}")
        conflicts = [
            label for label, value in (
                ("an interpolator", self.interpolator),
                ("node dates", self.node_dates),
                ("an interpolated shape", self.shape),
            ) if value is not None
        ]
        if conflicts:
            raise ConfigurationError(
                f"{self.curve_name} already has {conflicts[0]}; it cannot use the {family.name} form"
            )
        self.form = family
        return self

    def as_spread_over(self, curve_name: str, subtract: bool = False) -> "CurveTypeSetUp":
        """Calibrate an increment over (or under, with subtract) another curve."""
        if curve_name == self.curve_name:
            raise ConfigurationError(f"{self.curve_name} cannot be a spread over itself")
        if self.spread_base is not None:
            raise ConfigurationError(f"{self.curve_name} is already a spread over {self.spread_base}")
        self.spread_base = curve_name
        self.spread_subtract = subtract
        return self

    def using_node_dates(self, *dates: DateLike) -> "CurveTypeSetUp":
        """Pin node times to these dates instead of the node instruments."""
        if self.node_dates is not None:
            raise ConfigurationError(f"Node dates of {self.curve_name} are already set")
        if self.form is not None:
            raise ConfigurationError(f"{self.curve_name} uses a functional form; it has no node dates")
        if self.shape is CurveShape.PERIODIC_YIELD:
            raise ConfigurationError(f"{self.curve_name} uses periodic compounding; it cannot pin node dates")
        if len(dates) < 2:
            raise ConfigurationError(f"{self.curve_name} needs at least two node dates, got {len(dates)}")
        pinned = sorted(to_date(d) for d in dates)
        if len(set(pinned)) != len(pinned):
            raise ConfigurationError(f"Node dates of {self.curve_name} repeat a date")
        self.node_dates = tuple(pinned)
        return self

    def continuous_interpolation_on_yield(self) -> "CurveTypeSetUp":
        return self._set_shape(CurveShape.YIELD)

    def continuous_interpolation_on_discount_factors(self) -> "CurveTypeSetUp":
        return self._set_shape(CurveShape.DISCOUNT_FACTOR)

    def periodic_interpolation_on_yield(self, periods_per_year: int) -> "CurveTypeSetUp":
        if self.node_dates is not None:
            raise ConfigurationError(f"{self.curve_name} pins node dates; it cannot use periodic compounding")
        if periods_per_year <= 0:
            raise ConfigurationError(f"Periods per year must be positive, got {periods_per_year}")
        self._set_shape(CurveShape.PERIODIC_YIELD)
        self.periods_per_year = periods_per_year
        return self

    def _set_shape(self, shape: CurveShape) -> "CurveTypeSetUp":
        if self.form is not None:
            raise ConfigurationError(f"{self.curve_name} uses a functional form; it has no interpolated shape")
        if self.shape is not None:
            raise ConfigurationError(f"{self.curve_name} is already interpolated on {self.shape.value}")
        self.shape = shape
        return self

    # ------------------------------------------------------------------
    # Node times
    # ------------------------------------------------------------------
    def using_instrument_maturity(self) -> "CurveTypeSetUp":
        return self._set_node_time(NodeTime.MATURITY)

    def using_last_fixing_end_time(self) -> "CurveTypeSetUp":
        return self._set_node_time(NodeTime.LAST_FIXING_END)

    def using_last_fixing_start_time(self) -> "CurveTypeSetUp":
        return self._set_node_time(NodeTime.LAST_FIXING_START)

    def _set_node_time(self, node_time: NodeTime) -> "CurveTypeSetUp":
        if self.node_time is not None:
            raise ConfigurationError(f"Node times of {self.curve_name} already use {self.node_time.value}")
        self.node_time = node_time
        return self

    @property
    def effective_node_time(self) -> NodeTime:
        return self.node_time if self.node_time is not None else self.model.default_node_time(self)

    # ------------------------------------------------------------------
    # Materialisation
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """Raise ConfigurationError unless a generator can be built."""
        if self.interpolator is None and self.form is None:
            raise ConfigurationError(
                f"{self.curve_name} needs an interpolator or a functional form"
            )

    def build_curve_generator(self, valuation_date: DateLike) -> CurveGenerator:
        """The generator of this curve, with node dates converted at valuation_date."""
        self.validate()
        valuation_date = to_date(valuation_date)
        if self.form is not None:
            generator: CurveGenerator = FunctionalGenerator(self.form, valuation_date)
        else:
            node_times = None
            if self.node_dates is not None:
                if self.node_dates[0] <= valuation_date:
                    raise ConfigurationError(
                        f"Node date {self.node_dates[0]} of {self.curve_name} is not after {valuation_date}"
                    )
                node_times = [time_between(valuation_date, d) for d in self.node_dates]
            generator = self._interpolated_generator(node_times, valuation_date)
        if self.spread_base is not None:
            generator = SpreadGenerator(generator, self.spread_base, self.spread_subtract)
        return generator

    def _interpolated_generator(self, node_times, valuation_date: date) -> CurveGenerator:
        shape = self.shape or CurveShape.YIELD
        if shape is CurveShape.PERIODIC_YIELD:
            return PeriodicYieldInterpolatedGenerator(
                self.interpolator, self.periods_per_year, self.effective_node_time, node_times, valuation_date
            )
        if shape is CurveShape.DISCOUNT_FACTOR:
            return DiscountFactorInterpolatedGenerator(
                self.interpolator, self.effective_node_time, node_times, valuation_date
            )
        return YieldInterpolatedGenerator(
            self.interpolator, self.effective_node_time, node_times, valuation_date
        )

    def __repr__(self) -> str:
        policy = self.form.name if self.form is not None else self.interpolator
        return f"CurveTypeSetUp({self.curve_name!r}, {policy})"


class KnownCurveSetUp(_RoleSetUp):
    """A pre-constructed curve, injected as known data and never calibrated."""

    def __init__(self, curve: YieldCurve, model: CurveModel):
        super().__init__(curve.name, model)
        self.curve = curve

    def __repr__(self) -> str:
        return f"KnownCurveSetUp({self.curve_name!r})"
