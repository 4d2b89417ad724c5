"""
Generators for closed-form curve families, and the open registry of families.
"""

import copy
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from multicurve.curves import ConstantYieldCurve, NelsonSiegelCurve, YieldCurve
from multicurve.errors import UnsupportedCombination

from .base import CurveGenerator

# curvature and decay floors keep the decay column of the Jacobian away from zero
_MIN_CURVATURE = 1e-4
_MIN_DECAY = 0.25


@dataclass(frozen=True)
class FunctionalForm:
    """A named parametric curve family.

    initial_guess maps the per-node rate guesses and node maturities to
    starting parameters.
    """

    name: str
    n_parameters: int
    factory: Callable[[str, Sequence[float]], YieldCurve]
    initial_guess: Callable[[Sequence[float], Sequence[float]], Sequence[float]]


class FunctionalFormRegistry:
    """Registry of parametric curve families, keyed by upper-case name."""

    _forms: Dict[str, FunctionalForm] = {}

    @classmethod
    def register(cls, form: FunctionalForm) -> FunctionalForm:
        cls._forms[form.name.upper()] = form
        return form

    @classmethod
    def get(cls, name: str) -> FunctionalForm:
        try:
            return cls._forms[name.upper()]
        except KeyError:
            raise UnsupportedCombination(
                f"Unsupported functional form {name}. Registered: {cls.names()}"
            ) from None

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._forms)

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name.upper() in cls._forms


def _nelson_siegel_guess(rates: Sequence[float], times: Sequence[float]) -> Sequence[float]:
    """Level, slope and curvature read off the node rates, decay at the mid maturity."""
    rates = np.asarray(rates, dtype=float)
    if not len(rates):
        return [0.0, 0.0, _MIN_CURVATURE, 0.0]
    times = np.asarray(times, dtype=float)
    if len(times) != len(rates):
        times = np.arange(1.0, len(rates) + 1.0)
    order = np.argsort(times, kind="stable")
    times, rates = times[order], rates[order]
    short_rate, long_rate = float(rates[0]), float(rates[-1])
    mid_time = float(np.median(times))
    mid_rate = float(np.interp(mid_time, times, rates))
    curvature = 2.0 * mid_rate - short_rate - long_rate
    if abs(curvature) < _MIN_CURVATURE:
        curvature = math.copysign(_MIN_CURVATURE, curvature)
    return [long_rate, short_rate - long_rate, curvature, math.log(max(mid_time, _MIN_DECAY))]


NELSON_SIEGEL = FunctionalFormRegistry.register(
    FunctionalForm(
        name="NELSON_SIEGEL",
        n_parameters=4,
        factory=lambda name, parameters: NelsonSiegelCurve(name, parameters, log_decay=True),
        initial_guess=_nelson_siegel_guess,
    )
)

CONSTANT = FunctionalFormRegistry.register(
    FunctionalForm(
        name="CONSTANT",
        n_parameters=1,
        factory=lambda name, parameters: ConstantYieldCurve(name, parameters[0]),
        initial_guess=lambda rates, times: [float(np.mean(rates)) if len(rates) else 0.0],
    )
)


class FunctionalGenerator(CurveGenerator):
    """Generator for a registered parametric family; no interpolation."""

    def __init__(self, form: FunctionalForm, reference_date=None):
        self.form = form
        self.reference_date = reference_date
        self.node_times: Sequence[float] = ()

    @property
    def n_parameters(self) -> int:
        return self.form.n_parameters

    def final_generator(self, instruments: Sequence) -> "FunctionalGenerator":
        finalised = copy.copy(self)
        finalised.node_times = tuple(instrument.maturity_time for instrument in instruments)
        return finalised

    def initial_guess(self, rates: Sequence[float]) -> np.ndarray:
        return np.asarray(self.form.initial_guess(rates, self.node_times), dtype=float)

    def generate_curve(self, name: str, parameters: Sequence[float], provider=None) -> YieldCurve:
        curve = self.form.factory(name, parameters)
        curve.reference_date = self.reference_date
        return curve

    def __repr__(self) -> str:
        return f"FunctionalGenerator({self.form.name})"
