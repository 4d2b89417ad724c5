"""
Inputs of one calibration: per-curve and per-unit instrument bundles.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

import numpy as np

from multicurve.generators import CurveGenerator


@dataclass
class SingleCurveBundle:
    """Ordered node instruments, starting parameters and generator of one curve."""

    curve_name: str
    instruments: Sequence
    initial_guess: np.ndarray
    generator: CurveGenerator

    @property
    def n_parameters(self) -> int:
        return self.generator.n_parameters


@dataclass
class UnitBundle:
    """Curves calibrated jointly against the union of their instruments."""

    curves: List[SingleCurveBundle] = field(default_factory=list)

    @property
    def curve_names(self) -> List[str]:
        return [bundle.curve_name for bundle in self.curves]

    @property
    def instruments(self) -> List:
        return [instrument for bundle in self.curves for instrument in bundle.instruments]

    @property
    def n_parameters(self) -> int:
        return sum(bundle.n_parameters for bundle in self.curves)

    @property
    def initial_guess(self) -> np.ndarray:
        if not self.curves:
            return np.zeros(0)
        return np.concatenate([np.asarray(bundle.initial_guess, dtype=float) for bundle in self.curves])

    def parameter_offsets(self) -> Dict[str, Tuple[int, int]]:
        """Curve name to (start, count) in the unit's parameter vector."""
        offsets = {}
        start = 0
        for bundle in self.curves:
            offsets[bundle.curve_name] = (start, bundle.n_parameters)
            start += bundle.n_parameters
        return offsets

    def __len__(self) -> int:
        return len(self.curves)
