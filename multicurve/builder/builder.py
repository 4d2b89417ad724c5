"""
Compiled curve builder and its valuation-date cache.

A builder is immutable apart from its cache, which maps a valuation date to
the calibrated ``(ParameterProvider, BuildingBlockBundle)``. The check and the
insert for one date happen under that date's lock, so concurrent calls for
the same date calibrate once. Fixings are not part of the cache key.
"""

import logging
import threading
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from multicurve.calibration import (
    BuildingBlockBundle,
    CalibrationRepository,
    RootFinderConfig,
    SingleCurveBundle,
    UnitBundle,
)
from multicurve.conventions.daycount import DateLike, to_date
from multicurve.instruments import FixingSeries, InstrumentDefinition
from multicurve.provider import ParameterProvider

from .curve_type import CurveTypeSetUp, KnownCurveSetUp
from .models import CurveModel

logger = logging.getLogger(__name__)

BuildResult = Tuple[ParameterProvider, BuildingBlockBundle]


class _DateLock:
    """Lock of one valuation date, dropped once no call is using it."""

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class CurveBuilder:
    """Calibrates the compiled blocks for any valuation date.

    Built by ``CurveSetUp.get_builder``; every argument is a private snapshot.
    """

    def __init__(
        self,
        model: CurveModel,
        blocks: List[List[List[str]]],
        curve_types: Dict[str, CurveTypeSetUp],
        known_curves: Dict[str, KnownCurveSetUp],
        nodes: Dict[str, List[InstrumentDefinition]],
        known_data: ParameterProvider,
        known_bundle: Optional[BuildingBlockBundle],
        fixings: FixingSeries,
        root_finder: RootFinderConfig,
        repository: CalibrationRepository,
        calculators,
    ):
        self.model = model
        self._blocks = blocks
        self._curve_types = curve_types
        self._nodes = nodes
        self._known_bundle = known_bundle
        self._fixings = fixings
        self.root_finder = root_finder
        self.repository = repository
        self.par_spread, self.sensitivity = calculators

        self._known_data = known_data
        for known in known_curves.values():
            self._known_data.set_curve(known.curve, indices=known.indices, issuer=known.issuer)
            for currency in known.currencies:
                self._known_data.set_curve(known.curve, currency=currency)
        self._known_names = set(known_curves)

        self._cache: Dict[date, BuildResult] = {}
        self._lock = threading.Lock()
        self._date_locks: Dict[date, _DateLock] = {}

    # ------------------------------------------------------------------
    # Calibration
    # ------------------------------------------------------------------
    def build_curves(self, valuation_date: DateLike, fixings: Optional[FixingSeries] = None) -> BuildResult:
        """Calibrated curves and building blocks at valuation_date.

        Args:
            valuation_date: Date the curves start from
            fixings: Fixings overlaid on those of the setup

        Returns:
            The parameter provider and the building-block bundle. A second
            call for the same date returns the cached result.
        """
        key = to_date(valuation_date)
        with self._lock:
            date_lock = self._date_locks.setdefault(key, _DateLock())
            date_lock.users += 1

        try:
            with date_lock.lock:
                with self._lock:
                    cached = self._cache.get(key)
                if cached is not None:
                    logger.info("Using cached curves for %s", key)
                    return cached

                result = self._calibrate(key, fixings, self.repository, self.par_spread, self.sensitivity)
                with self._lock:
                    self._cache[key] = result
                return result
        finally:
            with self._lock:
                date_lock.users -= 1
                if not date_lock.users:
                    del self._date_locks[key]

    def build_curves_without_convexity(
        self, valuation_date: DateLike, fixings: Optional[FixingSeries] = None
    ) -> BuildResult:
        """Calibrate with the model's convexity-free calculators; never cached."""
        repository, (par_spread, sensitivity) = self.model.convexity_free(self.root_finder)
        return self._calibrate(to_date(valuation_date), fixings, repository, par_spread, sensitivity)

    def _calibrate(self, valuation_date: date, fixings, repository, par_spread, sensitivity) -> BuildResult:
        all_fixings = self._fixings.merged_with(fixings)
        provider = self._known_data.copy()
        bundle = self._known_bundle.copy() if self._known_bundle is not None else None
        discounting, indices, issuers = self._roles()

        logger.info("Building %s blocks at %s", len(self._blocks), valuation_date)
        for number, block in enumerate(self._blocks, start=1):
            units = []
            for unit in block:
                curves = [
                    self._curve_bundle(name, valuation_date, all_fixings)
                    for name in unit if name not in self._known_names
                ]
                if curves:
                    units.append(UnitBundle(curves))
            if not units:
                continue
            logger.info("Block %s/%s: %s", number, len(self._blocks), [u.curve_names for u in units])
            provider, bundle = repository.make_curves_from_derivatives(
                units, provider, bundle, discounting, indices, par_spread, sensitivity, issuers
            )
        if bundle is None:
            bundle = BuildingBlockBundle()
        return provider, bundle

    def _curve_bundle(self, name: str, valuation_date: date, fixings: FixingSeries) -> SingleCurveBundle:
        curve_type = self._curve_types[name]
        node_time = curve_type.effective_node_time
        definitions = self._alive(name, valuation_date)
        derivatives = [definition.to_derivative(fixings, valuation_date) for definition in definitions]
        guesses = [definition.initial_rate_guess() for definition in definitions]

        # stable, so equal node times keep insertion order
        order = sorted(range(len(derivatives)), key=lambda i: node_time.time(derivatives[i]))
        derivatives = [derivatives[i] for i in order]
        guesses = [guesses[i] for i in order]

        generator = curve_type.build_curve_generator(valuation_date).final_generator(derivatives)
        return SingleCurveBundle(name, derivatives, generator.initial_guess(guesses), generator)

    def _alive(self, name: str, valuation_date: date) -> List[InstrumentDefinition]:
        definitions = self._nodes.get(name, [])
        alive = [definition for definition in definitions if definition.is_alive(valuation_date)]
        if len(alive) < len(definitions):
            logger.warning(
                "Dropped %s expired nodes of %s at %s", len(definitions) - len(alive), name, valuation_date
            )
        return alive

    def _roles(self):
        discounting: Dict[str, Sequence[str]] = {}
        indices: Dict[str, Sequence] = {}
        issuers: Dict[str, object] = {}
        for name, curve_type in self._curve_types.items():
            discounting[name] = tuple(curve_type.currencies)
            indices[name] = tuple(curve_type.indices)
            if curve_type.issuer is not None:
                issuers[name] = curve_type.issuer
        return discounting, indices, issuers

    # ------------------------------------------------------------------
    # Inspection and cache control
    # ------------------------------------------------------------------
    def definitions_for_curves(self, valuation_date: DateLike) -> Mapping[str, List[InstrumentDefinition]]:
        """Node definitions still alive at valuation_date, per calibrated curve.

        Does not touch the cache; see ``reset_cache``.
        """
        valuation_date = to_date(valuation_date)
        return {
            name: [d for d in self._nodes.get(name, []) if d.is_alive(valuation_date)]
            for name in self.curve_names
            if name not in self._known_names
        }

    def reset_cache(self, valuation_date: Optional[DateLike] = None) -> None:
        """Drop the cached result of one valuation date, or of every date."""
        with self._lock:
            if valuation_date is None:
                self._cache.clear()
            else:
                self._cache.pop(to_date(valuation_date), None)

    @property
    def cached_dates(self) -> List[date]:
        with self._lock:
            return sorted(self._cache)

    @property
    def active_dates(self) -> List[date]:
        """Valuation dates with a build_curves call in progress."""
        with self._lock:
            return sorted(self._date_locks)

    @property
    def curve_names(self) -> List[str]:
        return [name for block in self._blocks for unit in block for name in unit]

    @property
    def blocks(self) -> List[List[List[str]]]:
        return [[list(unit) for unit in block] for block in self._blocks]

    def __repr__(self) -> str:
        return f"CurveBuilder(model={self.model.name!r}, curves={self.curve_names})"
