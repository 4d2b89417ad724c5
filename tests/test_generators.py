"""Tests for generator strategies and the functional-form registry."""

import numpy as np
import pytest

from multicurve.curves import ConstantYieldCurve, InterpolatedYieldCurve, SpreadCurve
from multicurve.errors import ConfigurationError, UnsupportedCombination
from multicurve.generators import (
    NELSON_SIEGEL,
    DiscountFactorInterpolatedGenerator,
    FunctionalForm,
    FunctionalFormRegistry,
    FunctionalGenerator,
    PeriodicYieldInterpolatedGenerator,
    SpreadGenerator,
    YieldInterpolatedGenerator,
)
from multicurve.instruments import Deposit, NodeTime
from multicurve.interpolation import InterpolatorSpec
from multicurve.provider import ParameterProvider

LINEAR = InterpolatorSpec("LINEAR")


def _deposits():
    return [
        Deposit("USD", 0.1, 0.5, 0.4, 0.02),
        Deposit("USD", 0.1, 1.0, 0.9, 0.025),
    ]


class TestInterpolatedGenerators:
    """Tests for interpolated generators."""

    def test_final_generator_uses_node_times(self):
        generator = YieldInterpolatedGenerator(LINEAR).final_generator(_deposits())
        np.testing.assert_allclose(generator.node_times, [0.5, 1.0])
        assert generator.n_parameters == 2

    def test_last_fixing_start_node_times(self):
        generator = YieldInterpolatedGenerator(LINEAR, NodeTime.LAST_FIXING_START)
        np.testing.assert_allclose(generator.final_generator(_deposits()).node_times, [0.1, 0.1])

    def test_unfinalised_generator_has_no_size(self):
        with pytest.raises(ValueError, match="finalised"):
            YieldInterpolatedGenerator(LINEAR).n_parameters

    def test_final_generator_does_not_mutate_original(self):
        generator = YieldInterpolatedGenerator(LINEAR)
        generator.final_generator(_deposits())
        assert generator.node_times is None

    def test_pinned_node_times(self):
        generator = YieldInterpolatedGenerator(LINEAR, node_times=[0.25, 2.0])
        final = generator.final_generator(_deposits())
        np.testing.assert_allclose(final.node_times, [0.25, 2.0])

    def test_yield_curve(self):
        generator = YieldInterpolatedGenerator(LINEAR).final_generator(_deposits())
        curve = generator.generate_curve("USD", generator.initial_guess([0.02, 0.025]))
        assert isinstance(curve, InterpolatedYieldCurve)
        assert curve.zero_rate(1.0) == pytest.approx(0.025)

    def test_discount_factor_guess(self):
        generator = DiscountFactorInterpolatedGenerator(LINEAR).final_generator(_deposits())
        guess = generator.initial_guess([0.02, 0.025])
        np.testing.assert_allclose(guess, np.exp(-np.array([0.02 * 0.5, 0.025 * 1.0])))
        curve = generator.generate_curve("USD", guess)
        assert curve.zero_rate(1.0) == pytest.approx(0.025)

    def test_periodic_guess_round_trips(self):
        generator = PeriodicYieldInterpolatedGenerator(LINEAR, 4).final_generator(_deposits())
        curve = generator.generate_curve("USD", generator.initial_guess([0.02, 0.025]))
        assert curve.zero_rate(0.5) == pytest.approx(0.02)


class TestFunctionalForms:
    """Tests for the registry of parametric families."""

    def test_nelson_siegel_is_registered(self):
        assert FunctionalFormRegistry.get("nelson_siegel") is NELSON_SIEGEL
        assert "NELSON_SIEGEL" in FunctionalFormRegistry.names()

    def test_unknown_family(self):
        with pytest.raises(UnsupportedCombination):
            FunctionalFormRegistry.get("SVENSSON")

    def test_register_new_family(self):
        form = FunctionalFormRegistry.register(
            FunctionalForm(
                name="FLAT_TEST",
                n_parameters=1,
                factory=lambda name, parameters: ConstantYieldCurve(name, parameters[0]),
                initial_guess=lambda rates, times: [0.01],
            )
        )
        assert FunctionalFormRegistry.is_registered("flat_test")
        generator = FunctionalGenerator(form).final_generator(_deposits())
        assert generator.node_times == (0.5, 1.0)
        assert generator.generate_curve("X", [0.03]).zero_rate(2.0) == 0.03

    def test_nelson_siegel_generator(self):
        deposits = [Deposit("USD", 0.0, t, t, 0.02) for t in (1.0, 2.0, 5.0)]
        generator = FunctionalGenerator(NELSON_SIEGEL).final_generator(deposits)
        assert generator.n_parameters == 4
        guess = generator.initial_guess([0.01, 0.025, 0.03])
        np.testing.assert_allclose(guess, [0.03, -0.02, 0.01, np.log(2.0)])

    def test_nelson_siegel_guess_has_curvature(self):
        deposits = [Deposit("USD", 0.0, t, t, 0.02) for t in (1.0, 2.0, 3.0)]
        generator = FunctionalGenerator(NELSON_SIEGEL).final_generator(deposits)
        guess = generator.initial_guess([0.01, 0.02, 0.03])
        assert guess[2] != 0.0

    def test_nelson_siegel_decay_stays_positive(self):
        generator = FunctionalGenerator(NELSON_SIEGEL)
        curve = generator.generate_curve("NS", [0.03, -0.01, 0.005, -1.0])
        assert curve.decay == pytest.approx(np.exp(-1.0))


class TestSpreadGenerator:
    """Tests for the spread-over composition."""

    def test_needs_base_curve(self):
        generator = SpreadGenerator(YieldInterpolatedGenerator(LINEAR), "BASE").final_generator(_deposits())
        with pytest.raises(ConfigurationError, match="BASE"):
            generator.generate_curve("FWD", [0.0, 0.0], ParameterProvider())

    def test_starts_from_zero_increment(self):
        generator = SpreadGenerator(YieldInterpolatedGenerator(LINEAR), "BASE").final_generator(_deposits())
        np.testing.assert_allclose(generator.initial_guess([0.02, 0.025]), [0.0, 0.0])

    def test_generates_spread_curve(self):
        provider = ParameterProvider().set_curve(ConstantYieldCurve("BASE", 0.02))
        generator = SpreadGenerator(YieldInterpolatedGenerator(LINEAR), "BASE").final_generator(_deposits())
        curve = generator.generate_curve("FWD", [0.001, 0.002], provider)
        assert isinstance(curve, SpreadCurve)
        assert curve.zero_rate(1.0) == pytest.approx(0.022)
        assert generator.n_parameters == 2
