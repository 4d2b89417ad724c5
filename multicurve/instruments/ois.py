"""
Fixed versus compounded overnight swaps.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

from dateutil.relativedelta import relativedelta

from multicurve.conventions.daycount import (
    ACT_360,
    DateLike,
    DayCountConvention,
    time_between,
    to_date,
)
from multicurve.conventions.indices import OvernightIndex, add_tenor
from multicurve.conventions.types import Frequency

from .base import InstrumentDefinition, InstrumentDerivative
from .fixings import FixingSeries


@dataclass(frozen=True)
class OISSwap(InstrumentDerivative):
    """An OIS in curve times.

    Each period i accrues from start_times[i] to end_times[i] and pays at
    end_times[i]. first_period_accrued is the compounded overnight factor
    already fixed in the first period (1.0 for forward-starting swaps).
    """

    currency: str
    index: OvernightIndex
    fixed_rate: float
    start_times: Tuple[float, ...]
    end_times: Tuple[float, ...]
    fixed_accruals: Tuple[float, ...]
    first_period_accrued: float = 1.0

    @property
    def maturity_time(self) -> float:
        return self.end_times[-1]

    @property
    def last_fixing_start_time(self) -> float:
        return self.start_times[-1]

    @property
    def last_fixing_end_time(self) -> float:
        return self.end_times[-1]


@dataclass(frozen=True)
class OISSwapDefinition(InstrumentDefinition):
    """Fixed leg against a compounded overnight leg on the same schedule."""

    currency: str
    index: OvernightIndex
    start_date: date
    end_date: date
    fixed_rate: float
    frequency: Frequency = Frequency.ANNUAL
    fixed_day_count: DayCountConvention = ACT_360

    def __post_init__(self):
        if self.end_date <= self.start_date:
            raise ValueError("Swap end date must be after its start date")

    @classmethod
    def from_tenor(
        cls,
        index: OvernightIndex,
        trade_date: DateLike,
        tenor: str,
        fixed_rate: float,
        spot_lag: int = 2,
        frequency: Frequency = Frequency.ANNUAL,
        fixed_day_count: DayCountConvention = ACT_360,
    ) -> "OISSwapDefinition":
        """Spot-starting swap of the given tenor."""
        start = index.calendar.add_business_days(to_date(trade_date), spot_lag)
        end = add_tenor(start, tenor, index.calendar)
        return cls(index.currency, index, start, end, fixed_rate, frequency, fixed_day_count)

    @property
    def maturity_date(self) -> date:
        return self.end_date

    def schedule(self) -> List[Tuple[date, date]]:
        """Accrual periods, rolled forward from the start date with a short final stub."""
        calendar = self.index.calendar
        periods = []
        period_start = self.start_date
        i = 1
        while period_start < self.end_date:
            unadjusted = self.start_date + relativedelta(months=self.frequency.months() * i)
            period_end = min(calendar.adjust(unadjusted), self.end_date)
            if period_end <= period_start:
                period_end = self.end_date
            periods.append((period_start, period_end))
            period_start = period_end
            i += 1
        return periods

    def to_derivative(self, fixings: FixingSeries, valuation_date: DateLike) -> OISSwap:
        self._check_alive(valuation_date)
        valuation_date = to_date(valuation_date)
        alive = [(start, end) for start, end in self.schedule() if end > valuation_date]
        first_start = alive[0][0]
        accrued = 1.0
        if first_start < valuation_date:
            accrued = self._accrued_factor(fixings, first_start, valuation_date)
        return OISSwap(
            currency=self.currency,
            index=self.index,
            fixed_rate=self.fixed_rate,
            start_times=tuple(max(time_between(valuation_date, start), 0.0) for start, _ in alive),
            end_times=tuple(time_between(valuation_date, end) for _, end in alive),
            fixed_accruals=tuple(self.fixed_day_count.year_fraction(start, end) for start, end in alive),
            first_period_accrued=accrued,
        )

    def _accrued_factor(self, fixings: FixingSeries, start: date, valuation_date: date) -> float:
        """Compound the published overnight fixings from start up to the valuation date."""
        calendar = self.index.calendar
        factor = 1.0
        day = start
        while day < valuation_date:
            next_day = min(calendar.next_business_day(day), valuation_date)
            rate = fixings.fixing(self.index, day)
            factor *= 1.0 + rate * self.index.day_count.year_fraction(day, next_day)
            day = next_day
        return factor

    def initial_rate_guess(self) -> float:
        return self.fixed_rate
