"""Shared fixtures for the curve builder tests."""

from datetime import date

import pytest

from multicurve.conventions import IborIndex, OvernightIndex, get_calendar
from multicurve.instruments import DepositDefinition, OISSwapDefinition
from multicurve.interpolation import InterpolatorSpec


@pytest.fixture
def valuation_date() -> date:
    """A Wednesday with no USNY or TARGET holiday nearby."""
    return date(2024, 3, 13)


@pytest.fixture
def sofr() -> OvernightIndex:
    return OvernightIndex("SOFR", "USD", calendar=get_calendar("USNY"))


@pytest.fixture
def fed_funds() -> OvernightIndex:
    return OvernightIndex("FEDFUNDS", "USD", calendar=get_calendar("USNY"))


@pytest.fixture
def euribor_3m() -> IborIndex:
    return IborIndex("EURIBOR3M", "EUR", "3M")


@pytest.fixture
def cubic_linear() -> InterpolatorSpec:
    return InterpolatorSpec("MONOTONE_CUBIC", "LINEAR", "LINEAR")


@pytest.fixture
def usd_deposit(valuation_date) -> DepositDefinition:
    """2-day deposit at 1.5%."""
    return DepositDefinition.from_tenor("USD", valuation_date, "2D", 0.015, calendar="USNY")


@pytest.fixture
def usd_ois_1y(valuation_date, sofr) -> OISSwapDefinition:
    """1Y SOFR swap at 1.8%."""
    return OISSwapDefinition.from_tenor(sofr, valuation_date, "1Y", 0.018)
