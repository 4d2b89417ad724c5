"""
Fixed coupon bonds for issuer curve calibration.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Tuple

from dateutil.relativedelta import relativedelta

from multicurve.conventions.calendars import WEEKEND_ONLY
from multicurve.conventions.daycount import DateLike, time_between, to_date
from multicurve.conventions.types import Frequency
from multicurve.legal_entity import LegalEntity

from .base import InstrumentDefinition, InstrumentDerivative
from .fixings import FixingSeries


@dataclass(frozen=True)
class FixedCouponBond(InstrumentDerivative):
    """Remaining cash flows of a bond and its market dirty price at settlement."""

    issuer: LegalEntity
    currency: str
    settlement_time: float
    payment_times: Tuple[float, ...]
    payment_amounts: Tuple[float, ...]
    dirty_price: float

    @property
    def maturity_time(self) -> float:
        return self.payment_times[-1]


@dataclass(frozen=True)
class FixedCouponBondDefinition(InstrumentDefinition):
    """Bullet bond paying coupon / frequency per period, quoted by clean price per unit notional."""

    issuer: LegalEntity
    currency: str
    issue_date: date
    maturity: date
    coupon: float
    clean_price: float
    frequency: Frequency = Frequency.SEMIANNUAL
    settlement_lag: int = 0

    def __post_init__(self):
        if self.maturity <= self.issue_date:
            raise ValueError("Maturity must be after issue date")
        if self.coupon < 0:
            raise ValueError("Coupon rate must be non-negative")

    @property
    def maturity_date(self) -> date:
        return self.maturity

    @property
    def coupon_amount(self) -> float:
        return self.coupon / self.frequency.periods_per_year

    def payment_schedule(self) -> List[date]:
        """Coupon dates rolled back from maturity."""
        dates = []
        i = 0
        current = self.maturity
        while current > self.issue_date:
            dates.append(current)
            i += 1
            current = self.maturity - relativedelta(months=self.frequency.months() * i)
        return sorted(dates)

    def accrued_interest(self, settlement: date) -> float:
        """Coupon accrued since the previous coupon date, actual/actual within the period."""
        dates = [self.issue_date] + self.payment_schedule()
        for previous, following in zip(dates[:-1], dates[1:]):
            if previous <= settlement < following:
                return self.coupon_amount * (settlement - previous).days / (following - previous).days
        return 0.0

    def to_derivative(self, fixings: FixingSeries, valuation_date: DateLike) -> FixedCouponBond:
        self._check_alive(valuation_date)
        valuation_date = to_date(valuation_date)
        settlement = WEEKEND_ONLY.add_business_days(valuation_date, self.settlement_lag)
        remaining = [day for day in self.payment_schedule() if day > settlement]
        if not remaining:
            raise ValueError(f"Bond maturing {self.maturity} has no payments after settlement {settlement}")
        amounts = [self.coupon_amount] * len(remaining)
        amounts[-1] += 1.0
        return FixedCouponBond(
            issuer=self.issuer,
            currency=self.currency,
            settlement_time=time_between(valuation_date, settlement),
            payment_times=tuple(time_between(valuation_date, day) for day in remaining),
            payment_amounts=tuple(amounts),
            dirty_price=self.clean_price + self.accrued_interest(settlement),
        )

    def initial_rate_guess(self) -> float:
        return self.coupon
