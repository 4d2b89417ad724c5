"""
Base class for curve generators.

A generator maps a calibrated parameter vector to a concrete curve. It is
first finalised against the ordered node instruments of its curve, which fixes
its node times and therefore its number of parameters.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np

from multicurve.curves import YieldCurve

if TYPE_CHECKING:
    from multicurve.provider import ParameterProvider


class CurveGenerator(ABC):
    """Strategy turning parameters into a curve."""

    @property
    @abstractmethod
    def n_parameters(self) -> int:
        """Number of parameters of the final generator."""

    @abstractmethod
    def final_generator(self, instruments: Sequence) -> "CurveGenerator":
        """The generator to use for this ordered array of node instruments."""

    @abstractmethod
    def initial_guess(self, rates: Sequence[float]) -> np.ndarray:
        """Starting parameters from per-instrument rate guesses."""

    @abstractmethod
    def generate_curve(
        self,
        name: str,
        parameters: Sequence[float],
        provider: Optional["ParameterProvider"] = None,
    ) -> YieldCurve:
        """Build the curve called name from parameters.

        The provider holds the curves already known, for generators that
        compose over another curve.
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
