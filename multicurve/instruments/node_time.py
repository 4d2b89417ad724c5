"""
Node-time calculators: the curve time a calibrated instrument pins.
"""

from enum import Enum


class NodeTime(Enum):
    """Which time of an instrument derivative becomes its curve node."""

    MATURITY = "MATURITY"
    LAST_FIXING_START = "LAST_FIXING_START"
    LAST_FIXING_END = "LAST_FIXING_END"

    def time(self, derivative) -> float:
        if self is NodeTime.MATURITY:
            return derivative.maturity_time
        if self is NodeTime.LAST_FIXING_START:
            return derivative.last_fixing_start_time
        return derivative.last_fixing_end_time
