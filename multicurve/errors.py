"""Exception taxonomy for curve construction."""

from typing import Optional, Sequence


class ConfigurationError(ValueError):
    """Raised when a curve setup is structurally invalid."""

    pass


class UnsupportedCombination(NotImplementedError):
    """Raised for key types, functional families or instruments with no handler."""

    pass


class CalibrationError(RuntimeError):
    """Raised when the root finder cannot calibrate a unit of curves."""

    def __init__(
        self,
        message: str,
        *,
        curve_names: Optional[Sequence[str]] = None,
        iterations: Optional[int] = None,
        residual_norm: Optional[float] = None,
    ):
        super().__init__(message)
        self.curve_names = list(curve_names) if curve_names else []
        self.iterations = iterations
        self.residual_norm = residual_norm
