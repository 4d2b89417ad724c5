"""
Calculator protocols and type dispatch.

A par-spread calculator returns the residual of one node instrument (model
quote minus market quote). Its sensitivity partner returns point
sensitivities of that residual to continuously compounded zero rates:
``{curve_name: [(time, d residual / d zero(time)), ...]}``.
"""

from typing import Callable, Dict, List, Mapping, Protocol, Tuple, Type

from multicurve.errors import UnsupportedCombination

PointSensitivity = Dict[str, List[Tuple[float, float]]]


class ParSpreadCalculator(Protocol):
    def __call__(self, derivative, provider) -> float:
        ...


class SensitivityCalculator(Protocol):
    def __call__(self, derivative, provider) -> PointSensitivity:
        ...


def add_point(sensitivity: PointSensitivity, curve_name: str, time: float, value: float) -> None:
    """Record one point sensitivity; points at or before the valuation date carry none."""
    if time <= 0 or value == 0.0:
        return
    sensitivity.setdefault(curve_name, []).append((time, value))


class DispatchingCalculator:
    """Calls the handler registered for the derivative's type (or a base type)."""

    def __init__(self, name: str, handlers: Mapping[Type, Callable]):
        self.name = name
        self._handlers = dict(handlers)

    def __call__(self, derivative, provider):
        for klass in type(derivative).__mro__:
            handler = self._handlers.get(klass)
            if handler is not None:
                return handler(derivative, provider)
        raise UnsupportedCombination(
            f"{self.name} cannot handle {type(derivative).__name__}"
        )

    def with_handlers(self, name: str, handlers: Mapping[Type, Callable]) -> "DispatchingCalculator":
        """A calculator extending (and overriding) these handlers."""
        merged = dict(self._handlers)
        merged.update(handlers)
        return DispatchingCalculator(name, merged)

    def handles(self, klass: Type) -> bool:
        return any(k in self._handlers for k in klass.__mro__)

    def __repr__(self) -> str:
        return f"DispatchingCalculator({self.name})"
