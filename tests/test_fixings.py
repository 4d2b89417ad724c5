"""Tests for fixing series and their use in conversion."""

from datetime import date

import pandas as pd
import pytest

from multicurve.instruments import (
    DepositDefinition,
    FixingSeries,
    FRADefinition,
    OISSwapDefinition,
    RateFutureDefinition,
)


class TestFixingSeries:
    """Tests for FixingSeries."""

    def test_lookup(self, sofr):
        fixings = FixingSeries({sofr: {date(2024, 3, 12): 0.0531}})
        assert fixings.fixing(sofr, date(2024, 3, 12)) == pytest.approx(0.0531)
        assert fixings.has_fixing(sofr, date(2024, 3, 12))
        assert not fixings.has_fixing(sofr, date(2024, 3, 11))
        assert sofr in fixings
        assert len(fixings) == 1

    def test_accepts_pandas_series(self, sofr):
        series = pd.Series([0.053, 0.0531], index=pd.to_datetime(["2024-03-11", "2024-03-12"]))
        fixings = FixingSeries({sofr: series})
        assert fixings.fixing(sofr, date(2024, 3, 11)) == pytest.approx(0.053)

    def test_missing_fixing(self, sofr, fed_funds):
        fixings = FixingSeries({sofr: {date(2024, 3, 12): 0.0531}})
        with pytest.raises(ValueError, match="No fixing"):
            fixings.fixing(sofr, date(2024, 3, 8))
        with pytest.raises(ValueError, match="No fixing series"):
            fixings.fixing(fed_funds, date(2024, 3, 12))

    def test_later_values_win(self, sofr):
        fixings = FixingSeries({sofr: {date(2024, 3, 12): 0.05}})
        fixings.add(sofr, {date(2024, 3, 12): 0.06})
        assert fixings.fixing(sofr, date(2024, 3, 12)) == pytest.approx(0.06)

    def test_merge_and_copy_are_independent(self, sofr, fed_funds):
        first = FixingSeries({sofr: {date(2024, 3, 12): 0.05}})
        second = FixingSeries({fed_funds: {date(2024, 3, 12): 0.052}})
        merged = first.merged_with(second)
        assert fed_funds in merged
        assert fed_funds not in first
        copied = merged.copy()
        copied.add(sofr, {date(2024, 3, 11): 0.049})
        assert not merged.has_fixing(sofr, date(2024, 3, 11))


class TestConversionWithFixings:
    """Definitions consult fixings for periods that already started."""

    def test_seasoned_ois_compounds_fixings(self, sofr):
        definition = OISSwapDefinition(
            "USD", sofr, date(2024, 3, 11), date(2025, 3, 11), 0.05
        )
        fixings = FixingSeries({sofr: {date(2024, 3, 11): 0.0530, date(2024, 3, 12): 0.0532}})
        swap = definition.to_derivative(fixings, date(2024, 3, 13))
        expected = (1 + 0.0530 / 360) * (1 + 0.0532 / 360)
        assert swap.first_period_accrued == pytest.approx(expected)
        assert swap.start_times[0] == 0.0

    def test_seasoned_ois_without_fixings_fails(self, sofr):
        definition = OISSwapDefinition(
            "USD", sofr, date(2024, 3, 11), date(2025, 3, 11), 0.05
        )
        with pytest.raises(ValueError, match="No fixing"):
            definition.to_derivative(FixingSeries(), date(2024, 3, 13))

    def test_fixed_fra_uses_fixing(self, euribor_3m):
        definition = FRADefinition(
            euribor_3m, date(2024, 3, 11), date(2024, 3, 13), date(2024, 6, 13), 0.039
        )
        fixings = FixingSeries({euribor_3m: {date(2024, 3, 11): 0.0391}})
        fra = definition.to_derivative(fixings, date(2024, 3, 12))
        assert fra.fixed_rate == pytest.approx(0.0391)

    def test_matured_definition_is_rejected(self, sofr):
        definition = OISSwapDefinition("USD", sofr, date(2023, 3, 13), date(2024, 3, 13), 0.05)
        with pytest.raises(ValueError, match="matured"):
            definition.to_derivative(FixingSeries(), date(2024, 3, 13))

    def test_started_deposit_is_rejected(self):
        definition = DepositDefinition("USD", date(2024, 3, 11), date(2024, 6, 11), 0.05)
        assert definition.is_alive(date(2024, 3, 11))
        assert not definition.is_alive(date(2024, 3, 13))
        with pytest.raises(ValueError, match="started"):
            definition.to_derivative(FixingSeries(), date(2024, 3, 13))

    def test_future_expires_at_last_trading_date(self, euribor_3m):
        definition = RateFutureDefinition.from_last_trading_date(euribor_3m, date(2024, 3, 12), 0.961)
        assert definition.maturity_date > date(2024, 3, 13)
        assert definition.is_alive(date(2024, 3, 12))
        assert not definition.is_alive(date(2024, 3, 13))
