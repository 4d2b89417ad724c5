"""
Calibration repository: solves the units of one block for their curve parameters.

Units are solved in order. Each unit's parameters are found by root finding on
the residual vector (model par spread minus market quote) of its node
instruments, with the curves of earlier units, earlier blocks and known data
held fixed. After each unit the building-block matrix d parameters / d quotes
is computed, propagating dependence on earlier curves' quotes by the chain rule.
"""

import logging
from collections import OrderedDict
from typing import Dict, Hashable, Mapping, Optional, Sequence, Tuple

import numpy as np

from multicurve.calculators import ParSpreadCalculator, SensitivityCalculator
from multicurve.errors import CalibrationError, ConfigurationError
from multicurve.legal_entity import IssuerMatcher
from multicurve.provider import HullWhiteOneFactorProvider, ParameterProvider

from .building_block import BuildingBlockBundle, CurveBuildingBlock
from .bundles import UnitBundle
from .rootfinding import RootFinderConfig, find_root

logger = logging.getLogger(__name__)


class CalibrationRepository:
    """Sequential unit-by-unit calibration of one block."""

    def __init__(self, config: Optional[RootFinderConfig] = None):
        self.config = config if config is not None else RootFinderConfig()

    def initial_provider(self, known_data: ParameterProvider) -> ParameterProvider:
        """The provider the block's curves are added to."""
        return known_data.copy()

    def make_curves_from_derivatives(
        self,
        units: Sequence[UnitBundle],
        known_data: ParameterProvider,
        known_bundle: Optional[BuildingBlockBundle],
        discounting_curves: Mapping[str, Sequence[str]],
        index_curves: Mapping[str, Sequence[Hashable]],
        par_spread: ParSpreadCalculator,
        sensitivity: SensitivityCalculator,
        issuer_curves: Optional[Mapping[str, IssuerMatcher]] = None,
    ) -> Tuple[ParameterProvider, BuildingBlockBundle]:
        """Calibrate every unit of a block.

        Args:
            units: The block's units, in solving order
            known_data: Curves (and FX rates) already available, from known data
                and earlier blocks. It is not modified.
            known_bundle: Building blocks of the curves in known_data, if any
            discounting_curves: Currencies discounted by each calibrated curve
            index_curves: Indices forecast by each calibrated curve
            par_spread: Residual calculator of the model
            sensitivity: Point sensitivity calculator of the model
            issuer_curves: Issuer matcher of each calibrated issuer curve

        Returns:
            The provider holding known_data plus the calibrated curves, and the
            building-block bundle extended with the new curves
        """
        provider = self.initial_provider(known_data)
        bundle = known_bundle.copy() if known_bundle is not None else BuildingBlockBundle()
        roles = _Roles(discounting_curves, index_curves, issuer_curves or {})

        for position, unit in enumerate(units, start=1):
            logger.info("Calibrating unit %s/%s: %s", position, len(units), unit.curve_names)
            self._check_sizes(unit)
            parameters, jacobian = self._solve_unit(unit, provider, roles, par_spread, sensitivity)
            provider = _with_unit_curves(unit, parameters, provider, roles)
            self._add_building_blocks(
                unit, provider, bundle, jacobian, sensitivity
            )
        return provider, bundle

    # ------------------------------------------------------------------
    # Solving
    # ------------------------------------------------------------------
    @staticmethod
    def _check_sizes(unit: UnitBundle) -> None:
        for curve in unit.curves:
            if len(curve.instruments) != curve.n_parameters:
                raise CalibrationError(
                    f"Curve {curve.curve_name} has {len(curve.instruments)} instruments "
                    f"for {curve.n_parameters} parameters",
                    curve_names=[curve.curve_name],
                )
            if len(curve.initial_guess) != curve.n_parameters:
                raise CalibrationError(
                    f"Curve {curve.curve_name} has an initial guess of size {len(curve.initial_guess)} "
                    f"for {curve.n_parameters} parameters",
                    curve_names=[curve.curve_name],
                )

    def _solve_unit(self, unit, provider, roles, par_spread, sensitivity):
        instruments = unit.instruments
        offsets = unit.parameter_offsets()

        def residuals(x: np.ndarray) -> np.ndarray:
            trial = _with_unit_curves(unit, x, provider, roles)
            return np.array([par_spread(instrument, trial) for instrument in instruments])

        def jacobian(x: np.ndarray) -> np.ndarray:
            trial = _with_unit_curves(unit, x, provider, roles)
            own, _ = _residual_derivatives(instruments, trial, sensitivity, offsets, unit.n_parameters)
            return own

        label = ", ".join(unit.curve_names)
        try:
            result = find_root(residuals, jacobian, unit.initial_guess, self.config, label=label)
        except CalibrationError as exc:
            exc.curve_names = unit.curve_names
            raise
        logger.info(
            "Calibrated %s in %s iterations (residual %.3e)", label, result.iterations, result.residual_norm
        )
        return result.root, result.jacobian if self.config.method == "NEWTON" else jacobian(result.root)

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------
    @staticmethod
    def _add_building_blocks(unit, provider, bundle, jacobian, sensitivity) -> None:
        offsets = unit.parameter_offsets()
        _, dependencies = _residual_derivatives(
            unit.instruments, provider, sensitivity, offsets, unit.n_parameters
        )
        # dependencies on curves calibrated elsewhere without a building block are fixed inputs
        dependencies = {name: matrix for name, matrix in dependencies.items() if name in bundle}

        unit_map: "OrderedDict[str, Tuple[int, int]]" = OrderedDict()
        column = 0
        for name in dependencies:
            for dependency_name, (_, count) in bundle.block(name).unit_map.items():
                if dependency_name not in unit_map:
                    unit_map[dependency_name] = (column, count)
                    column += count
        for curve in unit.curves:
            unit_map[curve.curve_name] = (column, curve.n_parameters)
            column += curve.n_parameters
        block = CurveBuildingBlock(unit_map)

        try:
            inverse = np.linalg.inv(jacobian)
        except np.linalg.LinAlgError as exc:
            raise CalibrationError(
                f"Singular Jacobian for the building block of {unit.curve_names}",
                curve_names=unit.curve_names,
            ) from exc

        # residuals are model minus quote, so d residual / d own quotes is -I
        matrix = np.zeros((unit.n_parameters, block.n_columns))
        own_start = block.start(unit.curves[0].curve_name)
        matrix[:, own_start:] = inverse
        for name, derivative in dependencies.items():
            previous_block, previous_matrix = bundle.get(name)
            expanded = np.zeros((previous_matrix.shape[0], block.n_columns))
            for previous_name, (start, count) in previous_block.unit_map.items():
                target = block.start(previous_name)
                expanded[:, target:target + count] = previous_matrix[:, start:start + count]
            matrix -= inverse @ derivative @ expanded

        for curve_name, (start, count) in offsets.items():
            bundle.add(curve_name, block, matrix[start:start + count, :])


class HullWhiteCalibrationRepository(CalibrationRepository):
    """Calibration under the one-factor Hull-White model of one currency."""

    def __init__(self, parameters, currency: str, config: Optional[RootFinderConfig] = None):
        super().__init__(config)
        self.parameters = parameters
        self.currency = currency

    def initial_provider(self, known_data: ParameterProvider) -> ParameterProvider:
        return HullWhiteOneFactorProvider.from_provider(known_data, self.parameters, self.currency)


class _Roles:
    def __init__(self, discounting, indices, issuers):
        self.discounting = discounting
        self.indices = indices
        self.issuers = issuers

    def register(self, provider: ParameterProvider, curve) -> None:
        name = curve.name
        provider.set_curve(curve, indices=self.indices.get(name, ()), issuer=self.issuers.get(name))
        for currency in self.discounting.get(name, ()):
            provider.set_curve(curve, currency=currency)


def _with_unit_curves(unit: UnitBundle, parameters, provider: ParameterProvider, roles: _Roles) -> ParameterProvider:
    """A copy of provider holding the unit's curves generated from parameters."""
    trial = provider.copy()
    offsets = unit.parameter_offsets()
    for curve_bundle in unit.curves:
        start, count = offsets[curve_bundle.curve_name]
        try:
            curve = curve_bundle.generator.generate_curve(
                curve_bundle.curve_name, parameters[start:start + count], trial
            )
        except ConfigurationError:
            raise
        except ValueError as exc:
            raise CalibrationError(
                f"Cannot generate curve {curve_bundle.curve_name}: {exc}",
                curve_names=[curve_bundle.curve_name],
            ) from exc
        roles.register(trial, curve)
    return trial


def _residual_derivatives(
    instruments: Sequence,
    provider: ParameterProvider,
    sensitivity: SensitivityCalculator,
    offsets: Mapping[str, Tuple[int, int]],
    n_parameters: int,
) -> Tuple[np.ndarray, Dict[str, np.ndarray]]:
    """d residuals / d unit parameters, and d residuals / d parameters of other curves."""
    own = np.zeros((len(instruments), n_parameters))
    others: Dict[str, np.ndarray] = OrderedDict()
    for row, instrument in enumerate(instruments):
        for curve_name, points in sensitivity(instrument, provider).items():
            curve = provider.curve(curve_name)
            for time, value in points:
                for name, derivative in curve.parameter_sensitivities(time).items():
                    if name in offsets:
                        start, count = offsets[name]
                        own[row, start:start + count] += value * derivative
                    else:
                        if name not in others:
                            others[name] = np.zeros((len(instruments), len(derivative)))
                        others[name][row, :] += value * derivative
    return own, others
