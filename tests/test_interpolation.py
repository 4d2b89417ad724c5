"""Tests for interpolators, extrapolators and interpolator specs."""

import numpy as np
import pytest

from multicurve.interpolation import (
    InterpolatorSpec,
    LinearInterpolator,
    LogLinearInterpolator,
    MonotoneCubicInterpolator,
    NaturalCubicSplineInterpolator,
    PiecewiseConstantInterpolator,
    create_interpolator,
    discount_factor_to_zero_rate,
    get_extrapolator,
    zero_rate_to_discount_factor,
)

PILLARS = [0.5, 1.0, 2.0, 5.0]
VALUES = [0.010, 0.012, 0.015, 0.020]


class TestLinearInterpolator:
    """Tests for LinearInterpolator."""

    def test_reproduces_nodes(self):
        interp = LinearInterpolator(PILLARS, VALUES)
        for t, v in zip(PILLARS, VALUES):
            assert interp.interpolate(t) == pytest.approx(v)

    def test_midpoint(self):
        interp = LinearInterpolator(PILLARS, VALUES)
        assert interp.interpolate(1.5) == pytest.approx(0.0135)

    def test_unsorted_input_is_sorted(self):
        interp = LinearInterpolator(PILLARS[::-1], VALUES[::-1])
        assert list(interp.pillars) == PILLARS
        assert interp.interpolate(1.5) == pytest.approx(0.0135)

    def test_flat_extrapolation_by_default(self):
        interp = LinearInterpolator(PILLARS, VALUES)
        assert interp.interpolate(0.1) == pytest.approx(0.010)
        assert interp.interpolate(10.0) == pytest.approx(0.020)

    def test_linear_extrapolation(self):
        interp = LinearInterpolator(PILLARS, VALUES, get_extrapolator("LINEAR"), get_extrapolator("LINEAR"))
        slope_right = (0.020 - 0.015) / 3.0
        assert interp.interpolate(8.0) == pytest.approx(0.020 + 3.0 * slope_right)
        slope_left = (0.012 - 0.010) / 0.5
        assert interp.interpolate(0.25) == pytest.approx(0.010 - 0.25 * slope_left)

    def test_node_sensitivity(self):
        interp = LinearInterpolator(PILLARS, VALUES)
        np.testing.assert_allclose(interp.node_sensitivity(1.5), [0.0, 0.5, 0.5, 0.0])

    def test_linear_extrapolation_sensitivity(self):
        interp = LinearInterpolator(PILLARS, VALUES, right_extrapolator=get_extrapolator("LINEAR"))
        # value(8) = v3 + 3 * (v3 - v2) / 3 = 2 v3 - v2
        np.testing.assert_allclose(interp.node_sensitivity(8.0), [0.0, 0.0, -1.0, 2.0])

    def test_needs_two_points(self):
        with pytest.raises(ValueError, match="at least 2"):
            LinearInterpolator([1.0], [0.01])

    def test_rejects_duplicate_pillars(self):
        with pytest.raises(ValueError, match="Duplicate"):
            LinearInterpolator([1.0, 1.0, 2.0], [0.01, 0.02, 0.03])

    def test_rejects_length_mismatch(self):
        with pytest.raises(ValueError):
            LinearInterpolator([1.0, 2.0], [0.01])


class TestOtherSchemes:
    """Tests for the non-linear schemes."""

    def test_log_linear_geometric_midpoint(self):
        interp = LogLinearInterpolator([1.0, 2.0], [0.9, 0.8])
        assert interp.interpolate(1.5) == pytest.approx(np.sqrt(0.9 * 0.8))

    def test_log_linear_needs_positive_values(self):
        with pytest.raises(ValueError):
            LogLinearInterpolator([1.0, 2.0], [0.9, -0.1])

    def test_piecewise_constant_holds_left_value(self):
        interp = PiecewiseConstantInterpolator(PILLARS, VALUES)
        assert interp.interpolate(0.75) == pytest.approx(0.010)

    def test_monotone_cubic_reproduces_nodes_and_stays_monotone(self):
        interp = MonotoneCubicInterpolator(PILLARS, VALUES)
        for t, v in zip(PILLARS, VALUES):
            assert interp.interpolate(t) == pytest.approx(v)
        grid = np.linspace(0.5, 5.0, 200)
        values = interp.interpolate_many(grid)
        assert np.all(np.diff(values) >= -1e-15)

    def test_monotone_cubic_sensitivity_sums_to_one(self):
        interp = MonotoneCubicInterpolator(PILLARS, VALUES)
        assert interp.node_sensitivity(1.7).sum() == pytest.approx(1.0, abs=1e-6)

    def test_natural_spline_reproduces_nodes(self):
        interp = NaturalCubicSplineInterpolator(PILLARS, VALUES)
        assert interp.interpolate(2.0) == pytest.approx(0.015)


class TestInterpolatorSpec:
    """Tests for unbound interpolator specs and the factory."""

    def test_bind(self):
        spec = InterpolatorSpec("MONOTONE_CUBIC", "LINEAR", "FLAT")
        interp = spec.bind(PILLARS, VALUES)
        assert isinstance(interp, MonotoneCubicInterpolator)
        assert str(interp.left_extrapolator) == "LINEAR"
        assert str(interp.right_extrapolator) == "FLAT"

    def test_unknown_method(self):
        with pytest.raises(ValueError, match="Unknown interpolation method"):
            InterpolatorSpec("QUINTIC")

    def test_unknown_extrapolator(self):
        with pytest.raises(ValueError, match="Unknown extrapolator"):
            InterpolatorSpec("LINEAR", right_extrapolator="EXPONENTIAL")

    def test_factory_is_case_insensitive(self):
        interp = create_interpolator("linear", PILLARS, VALUES)
        assert isinstance(interp, LinearInterpolator)


def test_rate_conversions():
    df = zero_rate_to_discount_factor(0.03, 2.0)
    assert discount_factor_to_zero_rate(df, 2.0) == pytest.approx(0.03)
    with pytest.raises(ValueError):
        discount_factor_to_zero_rate(0.0, 1.0)
