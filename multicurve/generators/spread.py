"""
Generator composing a calibrated increment over an already-built curve.
"""

from typing import Sequence

import numpy as np

from multicurve.curves import SpreadCurve, YieldCurve
from multicurve.errors import ConfigurationError

from .base import CurveGenerator


class SpreadGenerator(CurveGenerator):
    """Adds (or subtracts) the wrapped generator's curve to a named base curve.

    The base curve must be available from the provider when the curve is
    generated: known data, an earlier block, or an earlier curve of the
    same unit.
    """

    def __init__(self, generator: CurveGenerator, base_curve_name: str, subtract: bool = False):
        self.generator = generator
        self.base_curve_name = base_curve_name
        self.subtract = subtract

    @property
    def n_parameters(self) -> int:
        return self.generator.n_parameters

    def final_generator(self, instruments: Sequence) -> "SpreadGenerator":
        return SpreadGenerator(
            self.generator.final_generator(instruments), self.base_curve_name, self.subtract
        )

    def initial_guess(self, rates: Sequence[float]) -> np.ndarray:
        # start from a zero increment over the base curve
        return self.generator.initial_guess(np.zeros(len(rates)))

    def generate_curve(self, name: str, parameters: Sequence[float], provider=None) -> YieldCurve:
        if provider is None or not provider.has_curve(self.base_curve_name):
            raise ConfigurationError(
                f"Base curve {self.base_curve_name} of spread curve {name} is not available"
            )
        base = provider.curve(self.base_curve_name)
        spread = self.generator.generate_curve(f"{name} [spread]", parameters, provider)
        return SpreadCurve(name, base, spread, self.subtract)

    def __repr__(self) -> str:
        operator = "-" if self.subtract else "+"
        return f"SpreadGenerator({self.base_curve_name} {operator} {self.generator!r})"
