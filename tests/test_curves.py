"""Tests for curve objects."""

import math
from datetime import date

import numpy as np
import pytest

from multicurve.curves import (
    ConstantYieldCurve,
    InterpolatedDiscountCurve,
    InterpolatedYieldCurve,
    NelsonSiegelCurve,
    PeriodicYieldCurve,
    SpreadCurve,
)
from multicurve.interpolation import LinearInterpolator

TIMES = [0.5, 1.0, 2.0]


def _yield_curve(name="BASE", rates=(0.02, 0.025, 0.03), reference_date=None):
    return InterpolatedYieldCurve(name, LinearInterpolator(TIMES, list(rates)), reference_date)


class TestInterpolatedYieldCurve:
    """Tests for zero-rate interpolated curves."""

    def test_discount_factor(self):
        curve = _yield_curve()
        assert curve.discount_factor(1.0) == pytest.approx(math.exp(-0.025))
        assert curve.discount_factor(0.0) == 1.0

    def test_forward_rate(self):
        curve = _yield_curve()
        expected = (curve.discount_factor(1.0) / curve.discount_factor(2.0) - 1.0) / 1.0
        assert curve.forward_rate(1.0, 2.0) == pytest.approx(expected)

    def test_forward_rate_needs_positive_period(self):
        with pytest.raises(ValueError):
            _yield_curve().forward_rate(2.0, 1.0)

    def test_dates_use_reference_date(self):
        curve = _yield_curve(reference_date=date(2024, 1, 1))
        assert curve.zero_rate(date(2025, 1, 1)) == pytest.approx(curve.zero_rate(366 / 365))

    def test_dates_need_reference_date(self):
        with pytest.raises(ValueError, match="reference date"):
            _yield_curve().zero_rate(date(2025, 1, 1))

    def test_parameters_are_node_values(self):
        curve = _yield_curve()
        np.testing.assert_allclose(curve.parameters, [0.02, 0.025, 0.03])
        assert curve.n_parameters == 3
        np.testing.assert_allclose(curve.node_times, TIMES)


class TestInterpolatedDiscountCurve:
    """Tests for discount-factor interpolated curves."""

    def test_zero_rate_from_discount_factor(self):
        dfs = [math.exp(-0.02 * t) for t in TIMES]
        curve = InterpolatedDiscountCurve("DF", LinearInterpolator(TIMES, dfs))
        assert curve.zero_rate(1.0) == pytest.approx(0.02)
        assert curve.discount_factor(2.0) == pytest.approx(dfs[-1])

    def test_sensitivity_matches_bump(self):
        dfs = [math.exp(-0.02 * t) for t in TIMES]
        curve = InterpolatedDiscountCurve("DF", LinearInterpolator(TIMES, dfs))
        bumped = list(dfs)
        bumped[1] += 1e-7
        bumped_curve = InterpolatedDiscountCurve("DF", LinearInterpolator(TIMES, bumped))
        numeric = (bumped_curve.zero_rate(1.5) - curve.zero_rate(1.5)) / 1e-7
        assert curve.parameter_sensitivity(1.5)[1] == pytest.approx(numeric, rel=1e-4)

    def test_rejects_non_positive_discount_factors(self):
        with pytest.raises(ValueError):
            InterpolatedDiscountCurve("DF", LinearInterpolator(TIMES, [1.0, 0.0, 0.9]))


class TestPeriodicYieldCurve:
    """Tests for periodically compounded curves."""

    def test_zero_rate(self):
        curve = PeriodicYieldCurve("P", LinearInterpolator(TIMES, [0.04, 0.04, 0.04]), 2)
        assert curve.zero_rate(1.0) == pytest.approx(2 * math.log(1.02))

    def test_needs_positive_periods(self):
        with pytest.raises(ValueError):
            PeriodicYieldCurve("P", LinearInterpolator(TIMES, [0.04, 0.04, 0.04]), 0)


class TestFunctionalCurves:
    """Tests for closed-form curves."""

    def test_constant(self):
        curve = ConstantYieldCurve("C", 0.03)
        assert curve.zero_rate(7.0) == 0.03
        np.testing.assert_allclose(curve.parameter_sensitivity(7.0), [1.0])

    def test_nelson_siegel_short_and_long_end(self):
        curve = NelsonSiegelCurve("NS", [0.04, -0.02, 0.01, 2.0])
        assert curve.zero_rate(0.0) == pytest.approx(0.02)
        assert curve.zero_rate(500.0) == pytest.approx(0.04, abs=1e-4)

    def test_nelson_siegel_sensitivity_matches_bump(self):
        parameters = np.array([0.04, -0.02, 0.01, 2.0])
        curve = NelsonSiegelCurve("NS", parameters)
        analytic = curve.parameter_sensitivity(3.0)
        for i in range(4):
            bumped = parameters.copy()
            bumped[i] += 1e-7
            numeric = (NelsonSiegelCurve("NS", bumped).zero_rate(3.0) - curve.zero_rate(3.0)) / 1e-7
            assert analytic[i] == pytest.approx(numeric, rel=1e-4, abs=1e-9)

    def test_nelson_siegel_log_decay_sensitivity(self):
        parameters = np.array([0.04, -0.02, 0.01, np.log(2.0)])
        curve = NelsonSiegelCurve("NS", parameters, log_decay=True)
        assert curve.zero_rate(3.0) == pytest.approx(NelsonSiegelCurve("NS", [0.04, -0.02, 0.01, 2.0]).zero_rate(3.0))
        bumped = parameters.copy()
        bumped[3] += 1e-7
        numeric = (NelsonSiegelCurve("NS", bumped, log_decay=True).zero_rate(3.0) - curve.zero_rate(3.0)) / 1e-7
        assert curve.parameter_sensitivity(3.0)[3] == pytest.approx(numeric, rel=1e-4)

    def test_nelson_siegel_validates_parameters(self):
        with pytest.raises(ValueError):
            NelsonSiegelCurve("NS", [0.04, -0.02, 0.01])
        with pytest.raises(ValueError):
            NelsonSiegelCurve("NS", [0.04, -0.02, 0.01, 0.0])


class TestSpreadCurve:
    """Tests for curves composed over a base curve."""

    def test_adds_spread(self):
        base = _yield_curve()
        spread = _yield_curve("INCREMENT", (0.001, 0.002, 0.003))
        curve = SpreadCurve("FWD", base, spread)
        assert curve.zero_rate(1.0) == pytest.approx(0.025 + 0.002)
        assert curve.spread_rate(1.0) == pytest.approx(0.002)

    def test_subtracts_spread(self):
        base = _yield_curve()
        spread = _yield_curve("INCREMENT", (0.001, 0.002, 0.003))
        curve = SpreadCurve("FWD", base, spread, subtract=True)
        assert curve.zero_rate(1.0) == pytest.approx(0.025 - 0.002)

    def test_sensitivities_include_base(self):
        base = _yield_curve()
        spread = _yield_curve("INCREMENT", (0.001, 0.002, 0.003))
        sensitivities = SpreadCurve("FWD", base, spread).parameter_sensitivities(1.5)
        assert set(sensitivities) == {"BASE", "FWD"}
        np.testing.assert_allclose(sensitivities["BASE"], [0.0, 0.5, 0.5])
        np.testing.assert_allclose(sensitivities["FWD"], [0.0, 0.5, 0.5])
