"""
Legal entities, legal-entity filters and issuer matchers.

A filter extracts a classification key from an entity (its short name, its
region, its rating from one agency, ...). An ``IssuerMatcher`` pairs a filter
with the key an issuer curve is registered under; a bond is routed to that
curve when the filter applied to its issuer yields the key.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Hashable, List, Optional, Sequence


@dataclass(frozen=True)
class CreditRating:
    """A rating assigned by one agency."""

    agency: str
    rating: str


@dataclass(frozen=True)
class Region:
    """A region with its member countries and currencies."""

    name: str
    countries: FrozenSet[str] = frozenset()
    currencies: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class LegalEntity:
    """Borrower or bond issuer."""

    short_name: str
    name: Optional[str] = None
    ticker: Optional[str] = None
    sector: Optional[str] = None
    region: Optional[Region] = None
    ratings: FrozenSet[CreditRating] = frozenset()

    def rating_from(self, agency: str) -> Optional[str]:
        for rating in self.ratings:
            if rating.agency == agency:
                return rating.rating
        return None


class LegalEntityFilter(ABC):
    """Extracts the classification key of a legal entity."""

    @abstractmethod
    def filtered_data(self, entity: LegalEntity) -> Hashable:
        """The key of entity under this classification; None when not classified."""

    def __eq__(self, other) -> bool:
        return type(other) is type(self) and vars(other) == vars(self)

    def __hash__(self) -> int:
        return hash(type(self))


class ShortNameFilter(LegalEntityFilter):
    """Classifies by issuer short name."""

    def filtered_data(self, entity: LegalEntity) -> Hashable:
        return entity.short_name


class TickerFilter(LegalEntityFilter):
    """Classifies by issuer ticker."""

    def filtered_data(self, entity: LegalEntity) -> Hashable:
        return entity.ticker


class SectorFilter(LegalEntityFilter):
    """Classifies by industry sector."""

    def filtered_data(self, entity: LegalEntity) -> Hashable:
        return entity.sector


class RegionFilter(LegalEntityFilter):
    """Classifies by region name, or by country or currency membership."""

    def __init__(self, use_name: bool = True, country: Optional[str] = None, currency: Optional[str] = None):
        """
        Args:
            use_name: Include the region name in the key
            country: When set, include whether the region contains this country
            currency: When set, include whether the region uses this currency
        """
        self.use_name = use_name
        self.country = country
        self.currency = currency

    def filtered_data(self, entity: LegalEntity) -> Hashable:
        region = entity.region
        if region is None:
            return None
        key = []
        if self.use_name:
            key.append(region.name)
        if self.country is not None:
            key.append(self.country in region.countries)
        if self.currency is not None:
            key.append(self.currency in region.currencies)
        return key[0] if len(key) == 1 else tuple(key)


class CreditRatingFilter(LegalEntityFilter):
    """Classifies by the rating of one agency."""

    def __init__(self, agency: str):
        self.agency = agency

    def filtered_data(self, entity: LegalEntity) -> Hashable:
        return entity.rating_from(self.agency)


class CustomFilter(LegalEntityFilter):
    """Classifies with an arbitrary key function."""

    def __init__(self, key_function: Callable[[LegalEntity], Hashable]):
        self.key_function = key_function

    def filtered_data(self, entity: LegalEntity) -> Hashable:
        return self.key_function(entity)


class CombinedFilter(LegalEntityFilter):
    """Combines filters; the key is the tuple of each filter's key."""

    def __init__(self, filters: Sequence[LegalEntityFilter]):
        if not filters:
            raise ValueError("Need at least one filter to combine")
        self.filters: List[LegalEntityFilter] = list(filters)

    def add_filter(self, filter_instance: LegalEntityFilter) -> "CombinedFilter":
        return CombinedFilter(self.filters + [filter_instance])

    def filtered_data(self, entity: LegalEntity) -> Hashable:
        return tuple(f.filtered_data(entity) for f in self.filters)


@dataclass(frozen=True)
class IssuerMatcher:
    """Routes entities whose filtered key equals this matcher's key."""

    key: Hashable
    filter: LegalEntityFilter = field(default_factory=ShortNameFilter)

    def matches(self, entity: LegalEntity) -> bool:
        return self.filter.filtered_data(entity) == self.key

    def __str__(self) -> str:
        return f"{self.filter.__class__.__name__}={self.key}"
