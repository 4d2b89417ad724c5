"""
Short-term interest rate futures.
"""

from dataclasses import dataclass
from datetime import date

from multicurve.conventions.daycount import DateLike, time_between, to_date
from multicurve.conventions.indices import IborIndex, add_tenor

from .base import InstrumentDefinition, InstrumentDerivative
from .fixings import FixingSeries


@dataclass(frozen=True)
class RateFuture(InstrumentDerivative):
    """A rate future in curve times, quoted by price (1 - rate)."""

    index: IborIndex
    last_trading_time: float
    start_time: float
    end_time: float
    accrual_factor: float
    price: float

    @property
    def currency(self) -> str:
        return self.index.currency

    @property
    def implied_rate(self) -> float:
        return 1.0 - self.price

    @property
    def maturity_time(self) -> float:
        return self.end_time

    @property
    def last_fixing_start_time(self) -> float:
        return self.start_time

    @property
    def last_fixing_end_time(self) -> float:
        return self.end_time


@dataclass(frozen=True)
class RateFutureDefinition(InstrumentDefinition):
    """Future settling on the index fixing at the last trading date."""

    index: IborIndex
    last_trading_date: date
    start_date: date
    end_date: date
    price: float

    def __post_init__(self):
        if not self.last_trading_date <= self.start_date < self.end_date:
            raise ValueError("Future dates must satisfy last trading <= start < end")

    @classmethod
    def from_last_trading_date(
        cls, index: IborIndex, last_trading_date: DateLike, price: float
    ) -> "RateFutureDefinition":
        calendar = index.calendar
        last_trading = to_date(last_trading_date)
        start = calendar.add_business_days(last_trading, index.spot_lag)
        end = add_tenor(start, index.tenor, calendar, index.adjustment)
        return cls(index, last_trading, start, end, price)

    def is_alive(self, valuation_date: DateLike) -> bool:
        """Futures drop out once they stop trading, even while their period accrues."""
        return self.last_trading_date >= to_date(valuation_date)

    @property
    def maturity_date(self) -> date:
        return self.end_date

    def to_derivative(self, fixings: FixingSeries, valuation_date: DateLike) -> RateFuture:
        valuation_date = to_date(valuation_date)
        if self.last_trading_date < valuation_date:
            raise ValueError(
                f"Future on {self.index} stopped trading on {self.last_trading_date}, "
                f"before valuation date {valuation_date}"
            )
        return RateFuture(
            index=self.index,
            last_trading_time=time_between(valuation_date, self.last_trading_date),
            start_time=time_between(valuation_date, self.start_date),
            end_time=time_between(valuation_date, self.end_date),
            accrual_factor=self.index.day_count.year_fraction(self.start_date, self.end_date),
            price=self.price,
        )

    def initial_rate_guess(self) -> float:
        return 1.0 - self.price
