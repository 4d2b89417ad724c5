"""
Market conventions: day counts, calendars, rate indices and tenors.
"""

from .calendars import CALENDARS, Calendar, get_calendar
from .daycount import (
    ACT_360,
    ACT_365F,
    ACT_ACT,
    THIRTY_360E,
    THIRTY_360U,
    DayCountConvention,
    get_day_count_convention,
    time_between,
    to_date,
)
from .indices import IborIndex, OvernightIndex, add_tenor, parse_tenor
from .types import BusinessDayAdjustment, Frequency

__all__ = [
    # Day counts
    'DayCountConvention',
    'ACT_360',
    'ACT_365F',
    'ACT_ACT',
    'THIRTY_360E',
    'THIRTY_360U',
    'get_day_count_convention',
    'time_between',
    'to_date',

    # Calendars
    'Calendar',
    'CALENDARS',
    'get_calendar',

    # Indices and tenors
    'IborIndex',
    'OvernightIndex',
    'add_tenor',
    'parse_tenor',

    # Enums
    'BusinessDayAdjustment',
    'Frequency',
]
