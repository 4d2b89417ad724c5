"""
Cash deposits.
"""

from dataclasses import dataclass
from datetime import date
from typing import Union

from multicurve.conventions.calendars import Calendar, get_calendar
from multicurve.conventions.daycount import (
    ACT_360,
    DateLike,
    DayCountConvention,
    time_between,
    to_date,
)
from multicurve.conventions.indices import add_tenor

from .base import InstrumentDefinition, InstrumentDerivative
from .fixings import FixingSeries


@dataclass(frozen=True)
class Deposit(InstrumentDerivative):
    """A deposit paying simple interest from start_time to end_time."""

    currency: str
    start_time: float
    end_time: float
    accrual_factor: float
    rate: float

    @property
    def maturity_time(self) -> float:
        return self.end_time

    @property
    def last_fixing_start_time(self) -> float:
        return self.start_time


@dataclass(frozen=True)
class DepositDefinition(InstrumentDefinition):
    """Definition of a cash deposit quoted by its simple rate."""

    currency: str
    start_date: date
    end_date: date
    rate: float
    day_count: DayCountConvention = ACT_360

    def __post_init__(self):
        if self.end_date <= self.start_date:
            raise ValueError("Deposit end date must be after its start date")

    @classmethod
    def from_tenor(
        cls,
        currency: str,
        trade_date: DateLike,
        tenor: str,
        rate: float,
        spot_lag: int = 0,
        calendar: Union[str, Calendar] = "WEEKEND",
        day_count: DayCountConvention = ACT_360,
    ) -> "DepositDefinition":
        """Deposit starting spot_lag business days after trade_date and running for tenor."""
        calendar = get_calendar(calendar)
        start = calendar.add_business_days(to_date(trade_date), spot_lag) if spot_lag else to_date(trade_date)
        return cls(currency, start, add_tenor(start, tenor, calendar), rate, day_count)

    @property
    def maturity_date(self) -> date:
        return self.end_date

    def is_alive(self, valuation_date: DateLike) -> bool:
        """A deposit quotes a rate only until it starts; after that its accrual is history."""
        return self.start_date >= to_date(valuation_date)

    def to_derivative(self, fixings: FixingSeries, valuation_date: DateLike) -> Deposit:
        if not self.is_alive(valuation_date):
            raise ValueError(
                f"Deposit started on {self.start_date}, before valuation date {to_date(valuation_date)}"
            )
        return Deposit(
            currency=self.currency,
            start_time=time_between(valuation_date, self.start_date),
            end_time=time_between(valuation_date, self.end_date),
            accrual_factor=self.day_count.year_fraction(self.start_date, self.end_date),
            rate=self.rate,
        )

    def initial_rate_guess(self) -> float:
        return self.rate
