"""
Extrapolation policies applied outside an interpolator's node range.
"""
from abc import ABC, abstractmethod

import numpy as np

from .base import Interpolator


class Extrapolator(ABC):
    """Extends an interpolator beyond its first or last node."""

    name = ""

    @abstractmethod
    def extrapolate(self, interpolator: Interpolator, t: float, left: bool) -> float:
        """Value at t outside the node range."""

    @abstractmethod
    def node_sensitivity(self, interpolator: Interpolator, t: float, left: bool) -> np.ndarray:
        """Sensitivity of the extrapolated value to each node value."""

    def __eq__(self, other) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(type(self))

    def __str__(self) -> str:
        return self.name


class FlatExtrapolator(Extrapolator):
    """Holds the end node value constant."""

    name = "FLAT"

    def extrapolate(self, interpolator: Interpolator, t: float, left: bool) -> float:
        return float(interpolator.values[0] if left else interpolator.values[-1])

    def node_sensitivity(self, interpolator: Interpolator, t: float, left: bool) -> np.ndarray:
        sensitivity = np.zeros(interpolator.size)
        sensitivity[0 if left else -1] = 1.0
        return sensitivity


class LinearExtrapolator(Extrapolator):
    """Extends the interpolant along its slope at the end node."""

    name = "LINEAR"

    def extrapolate(self, interpolator: Interpolator, t: float, left: bool) -> float:
        x_end = interpolator.pillars[0] if left else interpolator.pillars[-1]
        y_end = interpolator.values[0] if left else interpolator.values[-1]
        return float(y_end + interpolator.first_derivative(x_end) * (t - x_end))

    def node_sensitivity(self, interpolator: Interpolator, t: float, left: bool) -> np.ndarray:
        x_end = interpolator.pillars[0] if left else interpolator.pillars[-1]
        sensitivity = (t - x_end) * interpolator.first_derivative_sensitivity(x_end)
        sensitivity[0 if left else -1] += 1.0
        return sensitivity


EXTRAPOLATORS = {
    "FLAT": FlatExtrapolator,
    "LINEAR": LinearExtrapolator,
}


def get_extrapolator(name: str) -> Extrapolator:
    """Get an extrapolator by name."""
    name_upper = name.upper()
    if name_upper not in EXTRAPOLATORS:
        raise ValueError(
            f"Unknown extrapolator: {name}. Available: {list(EXTRAPOLATORS.keys())}"
        )
    return EXTRAPOLATORS[name_upper]()
