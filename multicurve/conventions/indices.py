"""
Rate indices and tenor arithmetic.

Indices are frozen dataclasses so they can key the role maps of a
``ParameterProvider``.
"""

import re
from dataclasses import dataclass, field
from datetime import date

from dateutil.relativedelta import relativedelta

from .calendars import Calendar, get_calendar
from .daycount import ACT_360, DateLike, DayCountConvention, to_date
from .types import BusinessDayAdjustment

_TENOR_PATTERN = re.compile(r"^(\d+)([DWMY])$")


def parse_tenor(tenor: str) -> relativedelta:
    """Parse a tenor string such as ``"2D"``, ``"3M"`` or ``"10Y"``."""
    match = _TENOR_PATTERN.match(tenor.strip().upper())
    if match is None:
        raise ValueError(f"Invalid tenor: {tenor}")
    amount, unit = int(match.group(1)), match.group(2)
    if unit == "D":
        return relativedelta(days=amount)
    if unit == "W":
        return relativedelta(weeks=amount)
    if unit == "M":
        return relativedelta(months=amount)
    return relativedelta(years=amount)


def add_tenor(
    start: DateLike,
    tenor: str,
    calendar: Calendar,
    adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
) -> date:
    """Add a tenor to a date and adjust the result to a business day.

    Day tenors count business days.
    """
    start = to_date(start)
    if tenor.strip().upper().endswith("D"):
        return calendar.add_business_days(start, parse_tenor(tenor).days)
    return calendar.adjust(start + parse_tenor(tenor), adjustment)


@dataclass(frozen=True)
class IborIndex:
    """Term rate index (EURIBOR 3M, USD LIBOR 3M, ...)."""

    name: str
    currency: str
    tenor: str
    spot_lag: int = 2
    day_count: DayCountConvention = ACT_360
    calendar: Calendar = field(default_factory=lambda: get_calendar("TARGET"))
    adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING

    def __post_init__(self):
        parse_tenor(self.tenor)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class OvernightIndex:
    """Overnight rate index (SOFR, ESTR, FED FUNDS, ...)."""

    name: str
    currency: str
    publication_lag: int = 0
    day_count: DayCountConvention = ACT_360
    calendar: Calendar = field(default_factory=lambda: get_calendar("TARGET"))

    def __str__(self) -> str:
        return self.name
