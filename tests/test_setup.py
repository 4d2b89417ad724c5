"""Tests for the setup accumulator and curve type configuration."""

from datetime import date

import pytest

from multicurve.builder import (
    CurveSetUp,
    CurveShape,
    DiscountingModel,
    discounting_setup,
    forward_convexity_setup,
    hull_white_setup,
    issuer_setup,
)
from multicurve.calculators import HullWhiteParameters
from multicurve.curves import ConstantYieldCurve
from multicurve.errors import ConfigurationError, UnsupportedCombination
from multicurve.generators import (
    FunctionalGenerator,
    PeriodicYieldInterpolatedGenerator,
    SpreadGenerator,
    YieldInterpolatedGenerator,
)
from multicurve.instruments import NodeTime
from multicurve.legal_entity import SectorFilter


class TestBlocks:
    """Block and unit declaration rules."""

    def test_building_only_once(self):
        setup = discounting_setup().building("USD")
        with pytest.raises(ConfigurationError):
            setup.building("EUR")
        with pytest.raises(ConfigurationError):
            setup.building_first("EUR")

    def test_building_first_only_once(self):
        setup = discounting_setup().building_first("USD")
        with pytest.raises(ConfigurationError):
            setup.building("EUR")

    def test_then_building_needs_a_block(self):
        with pytest.raises(ConfigurationError):
            discounting_setup().then_building("EUR")

    def test_then_building_appends(self):
        setup = discounting_setup().building("USD").then_building("USD-FWD")
        assert setup.blocks == [[["USD"]], [["USD-FWD"]]]

    def test_names_in_one_call_form_one_unit(self):
        setup = discounting_setup().building("USD", "USD-FWD")
        assert setup.blocks == [[["USD", "USD-FWD"]]]

    def test_sequences_form_separate_units(self):
        setup = discounting_setup().building(["USD"], ["EUR", "EUR-FWD"])
        assert setup.blocks == [[["USD"], ["EUR", "EUR-FWD"]]]

    def test_mixed_arguments_rejected(self):
        with pytest.raises(ConfigurationError):
            discounting_setup().building("USD", ["EUR"])

    def test_duplicate_curve_names(self):
        with pytest.raises(ConfigurationError, match="twice"):
            discounting_setup().building("USD", "USD")
        setup = discounting_setup().building("USD")
        with pytest.raises(ConfigurationError, match="twice"):
            setup.then_building("USD")

    def test_empty_block(self):
        with pytest.raises(ConfigurationError):
            discounting_setup().building()

    def test_remove_curve(self, usd_deposit):
        setup = discounting_setup().building("USD", "USD-FWD").then_building("EUR")
        setup.using("EUR").with_interpolator("LINEAR")
        setup.with_node("EUR", usd_deposit)
        setup.remove_curve("EUR")
        assert setup.blocks == [[["USD", "USD-FWD"]]]
        assert setup.nodes("EUR") == []
        with pytest.raises(ConfigurationError):
            setup.curve_type("EUR")


class TestCurveType:
    """Curve type configuration conflicts."""

    def test_using_twice(self):
        setup = discounting_setup().building("USD")
        setup.using("USD")
        with pytest.raises(ConfigurationError):
            setup.using("USD")

    def test_interpolator_then_functional_form(self):
        curve_type = discounting_setup().using("USD").with_interpolator("LINEAR")
        with pytest.raises(ConfigurationError):
            curve_type.functional_form("NELSON_SIEGEL")

    def test_functional_form_then_interpolator(self):
        curve_type = discounting_setup().using("USD").functional_form("NELSON_SIEGEL")
        with pytest.raises(ConfigurationError):
            curve_type.with_interpolator("LINEAR")

    def test_interpolator_twice(self):
        curve_type = discounting_setup().using("USD").with_interpolator("LINEAR")
        with pytest.raises(ConfigurationError):
            curve_type.with_interpolator("MONOTONE_CUBIC")

    def test_unknown_functional_form(self):
        with pytest.raises(UnsupportedCombination):
            discounting_setup().using("USD").functional_form("SVENSSON")

    def test_shapes_are_exclusive(self):
        curve_type = discounting_setup().using("USD").continuous_interpolation_on_yield()
        with pytest.raises(ConfigurationError):
            curve_type.continuous_interpolation_on_discount_factors()
        with pytest.raises(ConfigurationError):
            curve_type.periodic_interpolation_on_yield(2)

    def test_node_dates_conflict_with_periodic(self):
        curve_type = discounting_setup().using("USD").periodic_interpolation_on_yield(2)
        with pytest.raises(ConfigurationError):
            curve_type.using_node_dates(date(2025, 1, 1), date(2026, 1, 1))
        other = discounting_setup().using("EUR").using_node_dates(date(2025, 1, 1), date(2026, 1, 1))
        with pytest.raises(ConfigurationError):
            other.periodic_interpolation_on_yield(2)

    def test_node_dates_conflict_with_functional_form(self):
        curve_type = discounting_setup().using("USD").functional_form("NELSON_SIEGEL")
        with pytest.raises(ConfigurationError):
            curve_type.using_node_dates(date(2025, 1, 1), date(2026, 1, 1))

    def test_node_dates_need_two_entries(self):
        with pytest.raises(ConfigurationError):
            discounting_setup().using("USD").using_node_dates(date(2025, 1, 1))

    def test_node_time_only_once(self):
        curve_type = discounting_setup().using("USD").using_instrument_maturity()
        with pytest.raises(ConfigurationError):
            curve_type.using_last_fixing_end_time()

    def test_spread_over_only_once(self):
        curve_type = discounting_setup().using("FWD").as_spread_over("USD")
        with pytest.raises(ConfigurationError):
            curve_type.as_spread_over("EUR")
        with pytest.raises(ConfigurationError):
            discounting_setup().using("FWD").as_spread_over("FWD")

    def test_discounting_keys(self):
        curve_type = discounting_setup().using("USD").for_discounting("USD")
        assert curve_type.currencies == ["USD"]
        with pytest.raises(UnsupportedCombination):
            curve_type.for_discounting(840)
        with pytest.raises(ConfigurationError):
            curve_type.for_discounting("usd")

    def test_unknown_index_type(self):
        with pytest.raises(UnsupportedCombination):
            discounting_setup().using("USD").for_index("SOFR")

    def test_discounting_model_allows_several_indices(self, sofr, fed_funds):
        curve_type = discounting_setup().using("USD").for_index(sofr, fed_funds)
        assert curve_type.overnight_indices == [sofr, fed_funds]

    def test_single_index_models_reject_two_indices(self, sofr, fed_funds):
        with pytest.raises(ConfigurationError):
            forward_convexity_setup(0.01).using("USD").for_index(sofr, fed_funds)
        parameters = HullWhiteParameters(0.01, (0.01,))
        curve_type = hull_white_setup(parameters, "USD").using("USD").for_index(sofr)
        with pytest.raises(ConfigurationError):
            curve_type.for_index(fed_funds)

    def test_issuer_only_on_issuer_model(self):
        with pytest.raises(ConfigurationError):
            discounting_setup().using("DBR").for_issuer("DBR")
        curve_type = issuer_setup().using("DBR").for_issuer("SOVEREIGN", SectorFilter())
        assert curve_type.issuer.key == "SOVEREIGN"
        with pytest.raises(ConfigurationError):
            curve_type.for_issuer("DBR")


class TestGeneratorMaterialisation:
    """build_curve_generator turns the configuration into a generator."""

    def test_default_is_yield_interpolated(self, valuation_date):
        generator = discounting_setup().using("USD").with_interpolator("LINEAR").build_curve_generator(valuation_date)
        assert isinstance(generator, YieldInterpolatedGenerator)
        assert generator.node_time is NodeTime.MATURITY

    def test_periodic(self, valuation_date):
        curve_type = discounting_setup().using("USD").with_interpolator("LINEAR").periodic_interpolation_on_yield(4)
        generator = curve_type.build_curve_generator(valuation_date)
        assert isinstance(generator, PeriodicYieldInterpolatedGenerator)
        assert generator.periods_per_year == 4

    def test_node_dates_are_pinned(self, valuation_date):
        curve_type = discounting_setup().using("USD").with_interpolator("LINEAR")
        curve_type.using_node_dates(date(2025, 3, 13), date(2026, 3, 13))
        generator = curve_type.build_curve_generator(valuation_date)
        assert generator.pinned
        assert generator.node_times[0] == pytest.approx(365 / 365)

    def test_node_dates_before_valuation(self, valuation_date):
        curve_type = discounting_setup().using("USD").with_interpolator("LINEAR")
        curve_type.using_node_dates(date(2024, 1, 2), date(2026, 3, 13))
        with pytest.raises(ConfigurationError):
            curve_type.build_curve_generator(valuation_date)

    def test_functional_form(self, valuation_date):
        generator = discounting_setup().using("USD").functional_form("NELSON_SIEGEL").build_curve_generator(valuation_date)
        assert isinstance(generator, FunctionalGenerator)

    def test_spread_wraps_generator(self, valuation_date):
        curve_type = discounting_setup().using("FWD").with_interpolator("LINEAR").as_spread_over("USD", subtract=True)
        generator = curve_type.build_curve_generator(valuation_date)
        assert isinstance(generator, SpreadGenerator)
        assert generator.subtract

    def test_needs_a_generator_policy(self, valuation_date):
        with pytest.raises(ConfigurationError):
            discounting_setup().using("USD").build_curve_generator(valuation_date)

    def test_forward_convexity_index_curves_use_last_fixing_start(self, euribor_3m):
        curve_type = forward_convexity_setup(0.01).using("EUR3M").for_index(euribor_3m)
        assert curve_type.effective_node_time is NodeTime.LAST_FIXING_START
        curve_type.using_last_fixing_end_time()
        assert curve_type.effective_node_time is NodeTime.LAST_FIXING_END

    def test_shape_enum(self):
        curve_type = discounting_setup().using("USD").continuous_interpolation_on_discount_factors()
        assert curve_type.shape is CurveShape.DISCOUNT_FACTOR


class TestGetBuilder:
    """Structural validation when compiling a builder."""

    def test_no_blocks(self):
        with pytest.raises(ConfigurationError):
            discounting_setup().get_builder()

    def test_curve_without_nodes(self):
        setup = discounting_setup().building("USD")
        setup.using("USD").with_interpolator("LINEAR")
        with pytest.raises(ConfigurationError, match="no nodes"):
            setup.get_builder()

    def test_curve_without_type(self, usd_deposit):
        setup = discounting_setup().building("USD").with_node("USD", usd_deposit)
        with pytest.raises(ConfigurationError, match="no type"):
            setup.get_builder()

    def test_nodes_for_undeclared_curve(self, usd_deposit, usd_ois_1y):
        setup = discounting_setup().building("USD")
        setup.using("USD").with_interpolator("LINEAR")
        setup.with_node("USD", usd_deposit).with_node("USD", usd_ois_1y)
        setup.with_node("EUR", usd_deposit)
        with pytest.raises(ConfigurationError, match="in no block"):
            setup.get_builder()

    def test_spread_base_must_come_first(self, usd_deposit, usd_ois_1y):
        setup = discounting_setup().building("FWD").then_building("USD")
        setup.using("FWD").with_interpolator("LINEAR").as_spread_over("USD")
        setup.using("USD").with_interpolator("LINEAR")
        for name in ("FWD", "USD"):
            setup.with_node(name, usd_deposit).with_node(name, usd_ois_1y)
        with pytest.raises(ConfigurationError, match="before its base"):
            setup.get_builder()

    def test_known_curve_with_nodes(self, usd_deposit):
        setup = discounting_setup().building("USD")
        setup.using_known_curve(ConstantYieldCurve("USD", 0.02)).for_discounting("USD")
        setup.with_node("USD", usd_deposit)
        with pytest.raises(ConfigurationError, match="Pre-constructed"):
            setup.get_builder()

    def test_known_curve_and_type_conflict(self):
        setup = discounting_setup().building("USD")
        setup.using_known_curve(ConstantYieldCurve("USD", 0.02))
        with pytest.raises(ConfigurationError):
            setup.using("USD")

    def test_root_finding_settings_validated(self):
        with pytest.raises(ConfigurationError):
            discounting_setup().root_finding_maximum_steps(0)
        setup = discounting_setup().root_finding_absolute_tolerance(1e-12).root_finding_method("broyden")
        assert setup.root_finder_config.absolute_tolerance == 1e-12
        assert setup.root_finder_config.method == "BROYDEN"


class TestCopy:
    """copy() gives a fully independent setup."""

    def test_nodes_do_not_leak(self, usd_deposit, usd_ois_1y):
        original = discounting_setup().building("USD")
        original.using("USD").with_interpolator("LINEAR")
        original.with_node("USD", usd_deposit)
        copied = original.copy()

        copied.with_node("USD", usd_ois_1y)
        assert len(original.nodes("USD")) == 1
        assert len(copied.nodes("USD")) == 2

        original.with_node("USD", usd_ois_1y).with_node("USD", usd_ois_1y)
        assert len(copied.nodes("USD")) == 2

    def test_blocks_and_types_do_not_leak(self, sofr):
        original = discounting_setup().building("USD")
        original.using("USD").with_interpolator("LINEAR")
        copied = original.copy()
        copied.then_building("USD-FWD")
        copied.curve_type("USD").for_index(sofr)
        assert original.blocks == [[["USD"]]]
        assert original.curve_type("USD").indices == []

    def test_model_is_shared(self):
        original = CurveSetUp(DiscountingModel()).building("USD")
        original.using("USD")
        copied = original.copy()
        assert copied.model is original.model
        assert copied.curve_type("USD").model is copied.model

    def test_builder_snapshot_ignores_later_edits(self, usd_deposit, usd_ois_1y, valuation_date):
        setup = discounting_setup().building("USD")
        setup.using("USD").with_interpolator("LINEAR").for_discounting("USD")
        setup.with_node("USD", usd_deposit).with_node("USD", usd_ois_1y)
        builder = setup.get_builder()
        setup.remove_nodes("USD")
        assert len(builder.definitions_for_curves(valuation_date)["USD"]) == 2
