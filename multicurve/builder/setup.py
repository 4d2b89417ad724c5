"""
Fluent curve setup: the accumulator a builder is compiled from.

Curve names are grouped into blocks of units. Units within a block are
solved in order, each jointly over its curves' nodes; blocks are solved in
sequence and later blocks see earlier curves as known data.

The setup is mutated by one authoring thread. ``copy()`` and
``get_builder()`` take deep copies, so later edits never leak.
"""

import copy
import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from multicurve.calibration import BuildingBlockBundle, CalibrationRepository, RootFinderConfig
from multicurve.calculators import HullWhiteParameters
from multicurve.curves import YieldCurve
from multicurve.errors import ConfigurationError
from multicurve.instruments import FixingSeries, InstrumentDefinition
from multicurve.provider import FxMatrix, ParameterProvider

from .builder import CurveBuilder
from .curve_type import CurveTypeSetUp, KnownCurveSetUp
from .models import (
    CurveModel,
    DiscountingModel,
    ForwardConvexityModel,
    HullWhiteModel,
    IssuerModel,
    resolve_model,
)

logger = logging.getLogger(__name__)

UnitSpec = Union[str, Sequence[str]]


@dataclass
class Node:
    """One calibration constraint of a curve."""

    definition: InstrumentDefinition
    attributes: Dict[str, Any] = field(default_factory=dict)


class CurveSetUp:
    """Accumulates blocks, curve types, nodes and known inputs."""

    def __init__(self, model: Optional[CurveModel] = None):
        self.model = resolve_model(model)
        self._blocks: List[List[List[str]]] = []
        self._curve_types: Dict[str, CurveTypeSetUp] = {}
        self._known_curves: Dict[str, KnownCurveSetUp] = {}
        self._nodes: Dict[str, List[Node]] = {}
        self._known_data = ParameterProvider()
        self._known_bundle: Optional[BuildingBlockBundle] = None
        self._fixings = FixingSeries()
        self._root_finder = RootFinderConfig()
        self._repository: Optional[CalibrationRepository] = None
        self._calculators = None

    # ------------------------------------------------------------------
    # Blocks and units
    # ------------------------------------------------------------------
    def building(self, *curves: UnitSpec) -> "CurveSetUp":
        """Declare the first block.

        Curve names given as strings form one unit. Sequences of names give
        one unit each, solved in the order given.
        """
        if self._blocks:
            raise ConfigurationError("The first block is already defined; use then_building")
        self._blocks.append(self._units(curves))
        return self

    def building_first(self, *curves: UnitSpec) -> "CurveSetUp":
        return self.building(*curves)

    def then_building(self, *curves: UnitSpec) -> "CurveSetUp":
        """Append a block solved after every earlier one."""
        if not self._blocks:
            raise ConfigurationError("then_building needs a first block; call building first")
        self._blocks.append(self._units(curves))
        return self

    def _units(self, curves: Sequence[UnitSpec]) -> List[List[str]]:
        if not curves:
            raise ConfigurationError("A block needs at least one curve")
        if all(isinstance(curve, str) for curve in curves):
            units = [list(curves)]
        elif any(isinstance(curve, str) for curve in curves):
            raise ConfigurationError("Give a block either curve names or sequences of curve names, not both")
        else:
            units = [list(unit) for unit in curves]

        declared = set(self.curve_names)
        for unit in units:
            if not unit:
                raise ConfigurationError("A unit needs at least one curve")
            for name in unit:
                if not isinstance(name, str) or not name:
                    raise ConfigurationError(f"Curve names must be non-empty strings, got {name!r}")
                if name in declared:
                    raise ConfigurationError(f"Curve {name} is declared twice")
                declared.add(name)
        return units

    # ------------------------------------------------------------------
    # Curve types
    # ------------------------------------------------------------------
    def using(self, curve_name: str) -> CurveTypeSetUp:
        """Create the type configuration of a curve."""
        self._check_type_free(curve_name)
        curve_type = CurveTypeSetUp(curve_name, self.model)
        self._curve_types[curve_name] = curve_type
        return curve_type

    def using_known_curve(self, curve: YieldCurve) -> KnownCurveSetUp:
        """Inject a pre-constructed curve; its roles are set on the returned setup."""
        self._check_type_free(curve.name)
        known = KnownCurveSetUp(copy.deepcopy(curve), self.model)
        self._known_curves[curve.name] = known
        return known

    def _check_type_free(self, curve_name: str) -> None:
        if curve_name in self._curve_types:
            raise ConfigurationError(f"Curve {curve_name} already has a type configuration")
        if curve_name in self._known_curves:
            raise ConfigurationError(f"Curve {curve_name} is a pre-constructed curve")

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------
    def with_node(
        self,
        curve_name: str,
        definition: InstrumentDefinition,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> "CurveSetUp":
        """Append a node; nodes keep their insertion order."""
        if not isinstance(definition, InstrumentDefinition):
            raise TypeError(f"Nodes need an instrument definition, got {type(definition).__name__}")
        self._nodes.setdefault(curve_name, []).append(Node(definition, dict(attributes or {})))
        return self

    def remove_nodes(self, curve_name: str) -> "CurveSetUp":
        self._nodes.pop(curve_name, None)
        return self

    def remove_curve(self, curve_name: str) -> "CurveSetUp":
        """Forget a curve: its nodes, its type and its place in every unit."""
        self._nodes.pop(curve_name, None)
        self._curve_types.pop(curve_name, None)
        self._known_curves.pop(curve_name, None)
        blocks = []
        for block in self._blocks:
            units = [[name for name in unit if name != curve_name] for unit in block]
            units = [unit for unit in units if unit]
            if units:
                blocks.append(units)
        self._blocks = blocks
        return self

    # ------------------------------------------------------------------
    # Known inputs
    # ------------------------------------------------------------------
    def with_known_data(self, known_data: ParameterProvider) -> "CurveSetUp":
        """Merge already-built curves; later data wins on name clashes."""
        self._known_data.add_all(known_data.copy())
        return self

    def with_known_bundle(self, known_bundle: BuildingBlockBundle) -> "CurveSetUp":
        if self._known_bundle is None:
            self._known_bundle = known_bundle.copy()
        else:
            self._known_bundle.add_all(known_bundle)
        return self

    def with_fixing_series(self, fixings: FixingSeries) -> "CurveSetUp":
        self._fixings = self._fixings.merged_with(fixings)
        return self

    def with_fx_rates(self, fx_matrix: FxMatrix) -> "CurveSetUp":
        self._known_data.fx_matrix = self._known_data.fx_matrix.merged_with(fx_matrix)
        return self

    # ------------------------------------------------------------------
    # Calibration settings
    # ------------------------------------------------------------------
    def root_finding_absolute_tolerance(self, tolerance: float) -> "CurveSetUp":
        self._root_finder = dataclasses.replace(self._root_finder, absolute_tolerance=tolerance)
        return self

    def root_finding_relative_tolerance(self, tolerance: float) -> "CurveSetUp":
        self._root_finder = dataclasses.replace(self._root_finder, relative_tolerance=tolerance)
        return self

    def root_finding_maximum_steps(self, max_steps: int) -> "CurveSetUp":
        self._root_finder = dataclasses.replace(self._root_finder, max_steps=max_steps)
        return self

    def root_finding_method(self, method: str) -> "CurveSetUp":
        self._root_finder = dataclasses.replace(self._root_finder, method=method)
        return self

    def with_calibration_repository(self, repository: CalibrationRepository) -> "CurveSetUp":
        """Replace the model's repository; it is shared, not copied."""
        self._repository = repository
        return self

    def with_calculators(self, par_spread, sensitivity) -> "CurveSetUp":
        """Replace the model's par-spread calculator pair; shared, not copied."""
        self._calculators = (par_spread, sensitivity)
        return self

    @property
    def root_finder_config(self) -> RootFinderConfig:
        return self._root_finder

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------
    @property
    def blocks(self) -> List[List[List[str]]]:
        return copy.deepcopy(self._blocks)

    @property
    def curve_names(self) -> List[str]:
        return [name for block in self._blocks for unit in block for name in unit]

    def nodes(self, curve_name: str) -> List[Node]:
        return list(self._nodes.get(curve_name, []))

    def curve_type(self, curve_name: str) -> CurveTypeSetUp:
        if curve_name not in self._curve_types:
            raise ConfigurationError(f"Curve {curve_name} has no type configuration")
        return self._curve_types[curve_name]

    # ------------------------------------------------------------------
    # Copy and compile
    # ------------------------------------------------------------------
    def copy(self) -> "CurveSetUp":
        """A fully independent setup sharing only the repository and calculators."""
        return copy.deepcopy(self)

    def __deepcopy__(self, memo):
        copied = self.__class__.__new__(self.__class__)
        memo[id(self)] = copied
        shared = ("model", "_repository", "_calculators")
        for key in shared:
            memo[id(self.__dict__[key])] = self.__dict__[key]
        for key, value in self.__dict__.items():
            copied.__dict__[key] = value if key in shared else copy.deepcopy(value, memo)
        return copied

    def get_builder(self) -> CurveBuilder:
        """Validate the setup and compile an immutable builder from a snapshot of it."""
        self._validate()
        snapshot = self.copy()
        repository = snapshot._repository or snapshot.model.repository(snapshot._root_finder)
        calculators = snapshot._calculators or snapshot.model.calculators()
        logger.info(
            "Compiled %s builder: %s blocks, %s curves",
            self.model.name, len(snapshot._blocks), len(snapshot.curve_names),
        )
        return CurveBuilder(
            model=snapshot.model,
            blocks=snapshot._blocks,
            curve_types=snapshot._curve_types,
            known_curves=snapshot._known_curves,
            nodes={name: [node.definition for node in nodes] for name, nodes in snapshot._nodes.items()},
            known_data=snapshot._known_data,
            known_bundle=snapshot._known_bundle,
            fixings=snapshot._fixings,
            root_finder=snapshot._root_finder,
            repository=repository,
            calculators=calculators,
        )

    def _validate(self) -> None:
        if not self._blocks:
            raise ConfigurationError("No curves to build; call building first")

        declared = set(self.curve_names)
        for name in self._curve_types:
            if name not in declared:
                raise ConfigurationError(f"Curve {name} has a type configuration but is in no block")
        for name, nodes in self._nodes.items():
            if nodes and name not in declared:
                raise ConfigurationError(f"Curve {name} has nodes but is in no block")

        available = set(self._known_data.curve_names) | set(self._known_curves)
        for block in self._blocks:
            for unit in block:
                for name in unit:
                    self._validate_curve(name, available)
                    available.add(name)

    def _validate_curve(self, name: str, available: set) -> None:
        if name in self._known_curves:
            if self._nodes.get(name):
                raise ConfigurationError(f"Pre-constructed curve {name} cannot also have nodes")
            return
        if name not in self._curve_types:
            raise ConfigurationError(f"Curve {name} has no type configuration")
        if not self._nodes.get(name):
            raise ConfigurationError(f"Curve {name} has no nodes")
        curve_type = self._curve_types[name]
        curve_type.validate()
        if self.model.single_index and len(curve_type.indices) > 1:
            raise ConfigurationError(f"The {self.model.name} model allows one index per curve ({name})")
        if curve_type.spread_base is not None and curve_type.spread_base not in available:
            raise ConfigurationError(
                f"Spread curve {name} is built before its base curve {curve_type.spread_base}"
            )

    def __repr__(self) -> str:
        return f"CurveSetUp(model={self.model.name!r}, blocks={self._blocks})"


def discounting_setup() -> CurveSetUp:
    return CurveSetUp(DiscountingModel())


def forward_convexity_setup(volatility: float) -> CurveSetUp:
    return CurveSetUp(ForwardConvexityModel(volatility))


def hull_white_setup(parameters: HullWhiteParameters, currency: str) -> CurveSetUp:
    return CurveSetUp(HullWhiteModel(parameters, currency))


def issuer_setup() -> CurveSetUp:
    return CurveSetUp(IssuerModel())
