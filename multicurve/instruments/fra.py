"""
Forward rate agreements on a term index.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from multicurve.conventions.daycount import DateLike, time_between, to_date
from multicurve.conventions.indices import IborIndex, add_tenor

from .base import InstrumentDefinition, InstrumentDerivative
from .fixings import FixingSeries


@dataclass(frozen=True)
class FRA(InstrumentDerivative):
    """A FRA in curve times; fixed_rate is set once the index has fixed."""

    index: IborIndex
    fixing_time: float
    start_time: float
    end_time: float
    accrual_factor: float
    rate: float
    fixed_rate: Optional[float] = None

    @property
    def currency(self) -> str:
        return self.index.currency

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
class FRADefinition(InstrumentDefinition):
    """FRA on index fixing at fixing_date for the period start_date to end_date."""

    index: IborIndex
    fixing_date: date
    start_date: date
    end_date: date
    rate: float

    def __post_init__(self):
        if not self.fixing_date <= self.start_date < self.end_date:
            raise ValueError("FRA dates must satisfy fixing <= start < end")

    @classmethod
    def from_start_tenor(
        cls, index: IborIndex, trade_date: DateLike, start_tenor: str, rate: float
    ) -> "FRADefinition":
        """FRA starting start_tenor after spot, covering one index tenor (3Mx6M style)."""
        calendar = index.calendar
        spot = calendar.add_business_days(to_date(trade_date), index.spot_lag)
        start = add_tenor(spot, start_tenor, calendar, index.adjustment)
        end = add_tenor(start, index.tenor, calendar, index.adjustment)
        fixing = calendar.add_business_days(start, -index.spot_lag)
        return cls(index, fixing, start, end, rate)

    @property
    def maturity_date(self) -> date:
        return self.end_date

    def to_derivative(self, fixings: FixingSeries, valuation_date: DateLike) -> FRA:
        self._check_alive(valuation_date)
        valuation_date = to_date(valuation_date)
        fixed_rate = None
        if self.fixing_date < valuation_date or (
            self.fixing_date == valuation_date and fixings.has_fixing(self.index, valuation_date)
        ):
            fixed_rate = fixings.fixing(self.index, self.fixing_date)
        return FRA(
            index=self.index,
            fixing_time=max(time_between(valuation_date, self.fixing_date), 0.0),
            start_time=max(time_between(valuation_date, self.start_date), 0.0),
            end_time=time_between(valuation_date, self.end_date),
            accrual_factor=self.index.day_count.year_fraction(self.start_date, self.end_date),
            rate=self.rate,
            fixed_rate=fixed_rate,
        )

    def initial_rate_guess(self) -> float:
        return self.rate
