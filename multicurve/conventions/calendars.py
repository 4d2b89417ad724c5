"""
QuantLib-backed business day calendars and date adjustment.
"""

from datetime import date, timedelta
from typing import Union

import QuantLib as ql

from .daycount import DateLike, to_date, to_ql_date
from .types import BusinessDayAdjustment


def _to_py_date(ql_date: ql.Date) -> date:
    return date(ql_date.year(), ql_date.month(), ql_date.dayOfMonth())


class Calendar:
    """Business day calendar backed by a QuantLib calendar."""

    def __init__(self, name: str, ql_calendar: ql.Calendar):
        self.name = name
        self._ql_calendar = ql_calendar

    def is_business_day(self, dt: DateLike) -> bool:
        """Check if date is a business day (not weekend or holiday)."""
        return self._ql_calendar.isBusinessDay(to_ql_date(dt))

    def add_business_days(self, start_date: DateLike, days: int) -> date:
        """Add business days to a date."""
        ql_result = self._ql_calendar.advance(to_ql_date(start_date), days, ql.Days)
        return _to_py_date(ql_result)

    def next_business_day(self, dt: DateLike) -> date:
        """The first business day strictly after dt."""
        return self.add_business_days(dt, 1)

    def adjust(
        self,
        dt: DateLike,
        adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
    ) -> date:
        """Apply a business day adjustment to a date."""
        dt = to_date(dt)
        if adjustment == BusinessDayAdjustment.NO_ADJUSTMENT:
            return dt

        step = 1 if adjustment in (
            BusinessDayAdjustment.FOLLOWING,
            BusinessDayAdjustment.MODIFIED_FOLLOWING,
        ) else -1
        adjusted = dt
        while not self.is_business_day(adjusted):
            adjusted += timedelta(days=step)

        modified = adjustment in (
            BusinessDayAdjustment.MODIFIED_FOLLOWING,
            BusinessDayAdjustment.MODIFIED_PRECEDING,
        )
        if modified and adjusted.month != dt.month:
            adjusted = dt
            while not self.is_business_day(adjusted):
                adjusted -= timedelta(days=step)
        return adjusted

    def __deepcopy__(self, memo):
        return self

    def __eq__(self, other) -> bool:
        return isinstance(other, Calendar) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"Calendar({self.name!r})"


TARGET = Calendar("TARGET", ql.TARGET())
USNY = Calendar("USNY", ql.UnitedStates(ql.UnitedStates.FederalReserve))
UK = Calendar("UK", ql.UnitedKingdom(ql.UnitedKingdom.Settlement))
WEEKEND_ONLY = Calendar("WEEKEND", ql.WeekendsOnly())

CALENDARS = {
    "TARGET": TARGET,
    "EUR": TARGET,
    "USNY": USNY,
    "USD": USNY,
    "UK": UK,
    "GBP": UK,
    "WEEKEND": WEEKEND_ONLY,
}


def get_calendar(name: Union[str, Calendar]) -> Calendar:
    """Get a calendar by name."""
    if isinstance(name, Calendar):
        return name
    if name not in CALENDARS:
        raise ValueError(
            f"Unknown calendar: {name}. Available: {list(CALENDARS.keys())}"
        )
    return CALENDARS[name]
