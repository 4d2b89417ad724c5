"""
Calibrated output: named curves with their discounting, index and issuer roles.
"""

import copy
from typing import Dict, Hashable, Iterable, List, Optional, Tuple

from multicurve.curves import YieldCurve
from multicurve.errors import ConfigurationError
from multicurve.legal_entity import IssuerMatcher, LegalEntity


class FxMatrix:
    """Spot FX rates; ``rate(a, b)`` is the number of b per unit of a."""

    def __init__(self, rates: Optional[Dict[Tuple[str, str], float]] = None):
        self._rates: Dict[Tuple[str, str], float] = {}
        for (ccy1, ccy2), value in (rates or {}).items():
            self.add_rate(ccy1, ccy2, value)

    def add_rate(self, ccy1: str, ccy2: str, rate: float) -> "FxMatrix":
        if rate <= 0:
            raise ValueError(f"FX rate {ccy1}/{ccy2} must be positive: {rate}")
        self._rates[(ccy1, ccy2)] = rate
        self._rates[(ccy2, ccy1)] = 1.0 / rate
        return self

    def rate(self, ccy1: str, ccy2: str) -> float:
        if ccy1 == ccy2:
            return 1.0
        if (ccy1, ccy2) in self._rates:
            return self._rates[(ccy1, ccy2)]
        # one cross through a common currency
        for (first, middle), value in self._rates.items():
            if first == ccy1 and (middle, ccy2) in self._rates:
                return value * self._rates[(middle, ccy2)]
        raise ValueError(f"No FX rate available for {ccy1}/{ccy2}")

    @property
    def currencies(self) -> List[str]:
        return sorted({ccy for pair in self._rates for ccy in pair})

    def merged_with(self, other: "FxMatrix") -> "FxMatrix":
        merged = self.copy()
        merged._rates.update(other._rates)
        return merged

    def copy(self) -> "FxMatrix":
        copied = FxMatrix()
        copied._rates = dict(self._rates)
        return copied

    def __len__(self) -> int:
        return len(self._rates) // 2

    def __repr__(self) -> str:
        return f"FxMatrix({self.currencies})"


class ParameterProvider:
    """A named collection of curves plus the roles they play.

    Curves are immutable, so copies share them and only the role maps are
    duplicated.
    """

    def __init__(self, fx_matrix: Optional[FxMatrix] = None):
        self._curves: Dict[str, YieldCurve] = {}
        self._discounting: Dict[str, str] = {}
        self._indices: Dict[Hashable, str] = {}
        self._issuers: List[Tuple[IssuerMatcher, str]] = []
        self.fx_matrix = fx_matrix.copy() if fx_matrix is not None else FxMatrix()

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------
    def set_curve(
        self,
        curve: YieldCurve,
        currency: Optional[str] = None,
        indices: Iterable[Hashable] = (),
        issuer: Optional[IssuerMatcher] = None,
    ) -> "ParameterProvider":
        """Add or replace a curve and register its roles."""
        self._curves[curve.name] = curve
        if currency is not None:
            self._discounting[currency] = curve.name
        for index in indices:
            self._indices[index] = curve.name
        if issuer is not None:
            self._issuers = [(m, n) for m, n in self._issuers if n != curve.name]
            self._issuers.append((issuer, curve.name))
        return self

    def add_all(self, other: "ParameterProvider") -> "ParameterProvider":
        """Take every curve, role and FX rate of other; other wins on conflicts."""
        self._curves.update(other._curves)
        self._discounting.update(other._discounting)
        self._indices.update(other._indices)
        names = {name for _, name in other._issuers}
        self._issuers = [(m, n) for m, n in self._issuers if n not in names] + list(other._issuers)
        self.fx_matrix = self.fx_matrix.merged_with(other.fx_matrix)
        return self

    def copy(self) -> "ParameterProvider":
        copied = copy.copy(self)
        copied._curves = dict(self._curves)
        copied._discounting = dict(self._discounting)
        copied._indices = dict(self._indices)
        copied._issuers = list(self._issuers)
        copied.fx_matrix = self.fx_matrix.copy()
        return copied

    def __deepcopy__(self, memo):
        return self.copy()

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def has_curve(self, name: str) -> bool:
        return name in self._curves

    def curve(self, name: str) -> YieldCurve:
        if name not in self._curves:
            raise ConfigurationError(f"No curve called {name}. Available: {self.curve_names}")
        return self._curves[name]

    @property
    def curve_names(self) -> List[str]:
        return list(self._curves)

    def discounting_curve_name(self, currency: str) -> str:
        if currency not in self._discounting:
            raise ConfigurationError(f"No discounting curve for {currency}")
        return self._discounting[currency]

    def discounting_curve(self, currency: str) -> YieldCurve:
        return self._curves[self.discounting_curve_name(currency)]

    def index_curve_name(self, index: Hashable) -> str:
        if index not in self._indices:
            raise ConfigurationError(f"No forward curve for index {index}")
        return self._indices[index]

    def index_curve(self, index: Hashable) -> YieldCurve:
        return self._curves[self.index_curve_name(index)]

    def issuer_curve_name(self, entity: LegalEntity) -> str:
        for matcher, name in self._issuers:
            if matcher.matches(entity):
                return name
        raise ConfigurationError(f"No issuer curve matches {entity.short_name}")

    def issuer_curve(self, entity: LegalEntity) -> YieldCurve:
        return self._curves[self.issuer_curve_name(entity)]

    @property
    def discounting_currencies(self) -> List[str]:
        return list(self._discounting)

    @property
    def indices(self) -> List[Hashable]:
        return list(self._indices)

    def fx_rate(self, ccy1: str, ccy2: str) -> float:
        return self.fx_matrix.rate(ccy1, ccy2)

    def __contains__(self, name: str) -> bool:
        return name in self._curves

    def __len__(self) -> int:
        return len(self._curves)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.curve_names})"


class HullWhiteOneFactorProvider(ParameterProvider):
    """Curves plus the one-factor Hull-White parameters of one currency."""

    def __init__(self, parameters, currency: str, fx_matrix: Optional[FxMatrix] = None):
        super().__init__(fx_matrix)
        self.hull_white_parameters = parameters
        self.hull_white_currency = currency

    @classmethod
    def from_provider(cls, provider: ParameterProvider, parameters, currency: str) -> "HullWhiteOneFactorProvider":
        wrapped = cls(parameters, currency)
        wrapped.add_all(provider)
        return wrapped
