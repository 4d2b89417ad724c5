"""
Base classes for curve interpolation methods.
"""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence

import numpy as np

if TYPE_CHECKING:
    from .extrapolation import Extrapolator

# Central difference step for node sensitivities of non-linear schemes
_BUMP = 1.0e-6


class Interpolator(ABC):
    """Base class for 1-D interpolators bound to node data.

    Values outside the node range are delegated to the left and right
    extrapolators. Node sensitivities (d value / d node value) drive the
    calibration Jacobian; schemes that are linear in the node values override
    them analytically, the others fall back to central differences.
    """

    def __init__(
        self,
        pillars: Sequence[float],
        values: Sequence[float],
        left_extrapolator: Optional["Extrapolator"] = None,
        right_extrapolator: Optional["Extrapolator"] = None,
    ):
        """
        Args:
            pillars: Node times (in years)
            values: Node values (zero rates, discount factors, ...)
            left_extrapolator: Policy below the first node, flat by default
            right_extrapolator: Policy above the last node, flat by default
        """
        if len(pillars) != len(values):
            raise ValueError("Pillars and values must have same length")
        if len(pillars) < 2:
            raise ValueError("Need at least 2 points for interpolation")

        order = np.argsort(np.asarray(pillars, dtype=float), kind="stable")
        self.pillars = np.asarray(pillars, dtype=float)[order]
        self.values = np.asarray(values, dtype=float)[order]

        if len(np.unique(self.pillars)) != len(self.pillars):
            raise ValueError("Duplicate pillar dates not allowed")

        from .extrapolation import FlatExtrapolator

        self.left_extrapolator = left_extrapolator or FlatExtrapolator()
        self.right_extrapolator = right_extrapolator or FlatExtrapolator()
        self._bumped: Optional[List["Interpolator"]] = None

    @property
    def size(self) -> int:
        return len(self.pillars)

    def interpolate(self, t: float) -> float:
        """Value at time t, extrapolating outside the node range."""
        if t < self.pillars[0]:
            return self.left_extrapolator.extrapolate(self, t, left=True)
        if t > self.pillars[-1]:
            return self.right_extrapolator.extrapolate(self, t, left=False)
        return self._interpolate(t)

    def interpolate_many(self, times: Sequence[float]) -> List[float]:
        """Interpolate values at multiple times."""
        return [self.interpolate(t) for t in times]

    def node_sensitivity(self, t: float) -> np.ndarray:
        """Sensitivity of the value at t to each node value."""
        if t < self.pillars[0]:
            return self.left_extrapolator.node_sensitivity(self, t, left=True)
        if t > self.pillars[-1]:
            return self.right_extrapolator.node_sensitivity(self, t, left=False)
        return self._node_sensitivity(t)

    def first_derivative(self, t: float) -> float:
        """Slope of the interpolant at t inside the node range (end nodes included)."""
        t = min(max(t, self.pillars[0]), self.pillars[-1])
        return self._first_derivative(t)

    def first_derivative_sensitivity(self, t: float) -> np.ndarray:
        """Sensitivity of the slope at t to each node value."""
        t = min(max(t, self.pillars[0]), self.pillars[-1])
        up, down = self._bumped_pairs()
        return np.array(
            [(u.first_derivative(t) - d.first_derivative(t)) / (2.0 * _BUMP) for u, d in zip(up, down)]
        )

    def with_values(self, values: Sequence[float]) -> "Interpolator":
        """A copy of this interpolator on new node values."""
        return type(self)(self.pillars, values, self.left_extrapolator, self.right_extrapolator)

    @abstractmethod
    def _interpolate(self, t: float) -> float:
        """Interpolate inside [first pillar, last pillar]."""

    @abstractmethod
    def _first_derivative(self, t: float) -> float:
        """Slope inside [first pillar, last pillar]."""

    def _node_sensitivity(self, t: float) -> np.ndarray:
        up, down = self._bumped_pairs()
        return np.array(
            [(u._interpolate(t) - d._interpolate(t)) / (2.0 * _BUMP) for u, d in zip(up, down)]
        )

    def _bumped_pairs(self):
        if self._bumped is None:
            bumped = []
            for i in range(self.size):
                for sign in (1.0, -1.0):
                    values = self.values.copy()
                    values[i] += sign * _BUMP
                    bumped.append(self.with_values(values))
            self._bumped = bumped
        return self._bumped[0::2], self._bumped[1::2]

    def _segment(self, t: float) -> int:
        """Index i of the segment [pillars[i], pillars[i + 1]] containing t."""
        i = int(np.searchsorted(self.pillars, t, side="right")) - 1
        return min(max(i, 0), self.size - 2)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(n={self.size}, "
            f"left={self.left_extrapolator}, right={self.right_extrapolator})"
        )
