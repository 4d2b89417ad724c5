"""
Instrument definition and derivative interfaces.

A definition holds dates and a market quote; converting it at a valuation
date (with historical fixings) gives a derivative that holds curve times only.
"""

from abc import ABC, abstractmethod
from datetime import date

from multicurve.conventions.daycount import DateLike, to_date

from .fixings import FixingSeries


class InstrumentDerivative(ABC):
    """Instrument described in curve times from the valuation date."""

    @property
    @abstractmethod
    def maturity_time(self) -> float:
        """Time of the last payment."""

    @property
    def last_fixing_start_time(self) -> float:
        return self.maturity_time

    @property
    def last_fixing_end_time(self) -> float:
        return self.maturity_time


class InstrumentDefinition(ABC):
    """Instrument described by dates, convertible to a derivative."""

    @property
    @abstractmethod
    def maturity_date(self) -> date:
        """Date of the last payment."""

    @abstractmethod
    def to_derivative(self, fixings: FixingSeries, valuation_date: DateLike) -> InstrumentDerivative:
        """Convert to a derivative at the valuation date."""

    @abstractmethod
    def initial_rate_guess(self) -> float:
        """A rate used to seed the calibration of this node."""

    def is_alive(self, valuation_date: DateLike) -> bool:
        """Whether this node can still be converted at valuation_date."""
        return self.maturity_date > to_date(valuation_date)

    def _check_alive(self, valuation_date: DateLike) -> None:
        if not self.is_alive(valuation_date):
            raise ValueError(
                f"{self.__class__.__name__} matured on {self.maturity_date}, "
                f"on or before valuation date {to_date(valuation_date)}"
            )
