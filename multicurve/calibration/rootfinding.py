"""Multi-dimensional root finding (Newton and Broyden) for curve calibration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

import numpy as np

from multicurve.errors import CalibrationError, ConfigurationError

logger = logging.getLogger(__name__)

VectorFunc = Callable[[np.ndarray], np.ndarray]

ROOT_FINDING_METHODS = ("NEWTON", "BROYDEN")

# Levenberg-Marquardt damping tried when the Newton step is rejected
_INITIAL_DAMPING = 1e-6
_DAMPING_GROWTH = 10.0
_MAX_DAMPING_STEPS = 30


@dataclass(frozen=True)
class RootFinderConfig:
    """Tolerances and iteration cap of the calibration root finder.

    A unit is converged when the largest absolute residual is within
    absolute_tolerance, or within relative_tolerance times the largest
    initial residual.
    """

    absolute_tolerance: float = 1e-10
    relative_tolerance: float = 1e-10
    max_steps: int = 100
    method: str = "NEWTON"

    def __post_init__(self):
        if self.absolute_tolerance < 0 or self.relative_tolerance < 0:
            raise ConfigurationError("Root-finding tolerances must be non-negative")
        if self.max_steps < 1:
            raise ConfigurationError(f"Root-finding needs at least one step, got {self.max_steps}")
        if self.method.upper() not in ROOT_FINDING_METHODS:
            raise ConfigurationError(
                f"Unknown root-finding method: {self.method}. Available: {list(ROOT_FINDING_METHODS)}"
            )
        object.__setattr__(self, "method", self.method.upper())


@dataclass
class VectorRootResult:
    root: np.ndarray
    residuals: np.ndarray
    jacobian: np.ndarray
    iterations: int
    method: str

    @property
    def residual_norm(self) -> float:
        return float(np.max(np.abs(self.residuals))) if len(self.residuals) else 0.0


def _norm(values: np.ndarray) -> float:
    return float(np.max(np.abs(values))) if len(values) else 0.0


def find_root(
    function: VectorFunc,
    jacobian: VectorFunc,
    initial_guess: np.ndarray,
    config: RootFinderConfig,
    label: str = "",
) -> VectorRootResult:
    """Solve function(x) = 0 from initial_guess.

    Args:
        function: Residual vector at x
        jacobian: Analytic Jacobian of function at x (square)
        initial_guess: Starting point
        config: Tolerances, iteration cap and method
        label: Name used in log and error messages

    Returns:
        The root, with the residuals and Jacobian there

    Raises:
        CalibrationError: When the Jacobian is singular, no trial point around an
        iterate is accepted by the model, or the residuals are not within
        tolerance after ``config.max_steps`` steps.
    """
    x = np.asarray(initial_guess, dtype=float).copy()
    residuals = np.asarray(function(x), dtype=float)
    target = max(config.absolute_tolerance, config.relative_tolerance * _norm(residuals))
    matrix = np.asarray(jacobian(x), dtype=float)

    for step in range(config.max_steps + 1):
        norm = _norm(residuals)
        logger.debug("%s %s iter %s: residual=%.3e", label, config.method, step, norm)
        if norm <= target:
            return VectorRootResult(x, residuals, matrix, step, config.method)
        if step == config.max_steps:
            break

        try:
            delta = np.linalg.solve(matrix, -residuals)
        except np.linalg.LinAlgError as exc:
            logger.error("Singular Jacobian for %s at iteration %s", label, step)
            raise CalibrationError(
                f"Singular Jacobian while calibrating {label} at iteration {step}",
                iterations=step,
                residual_norm=norm,
            ) from exc

        x_new, residuals_new, damped = _accepted_step(function, x, residuals, matrix, delta, label, step)

        if config.method == "BROYDEN" and not damped:
            correction = residuals_new - residuals - matrix @ delta
            matrix = matrix + np.outer(correction, delta) / float(delta @ delta)
        else:
            matrix = np.asarray(jacobian(x_new), dtype=float)
        x, residuals = x_new, residuals_new

    norm = _norm(residuals)
    logger.error(
        "Root finding for %s failed after %s steps: residual %.3e > tolerance %.3e",
        label, config.max_steps, norm, target,
    )
    raise CalibrationError(
        f"Failed to calibrate {label} within {config.max_steps} steps "
        f"(residual {norm:.3e}, tolerance {target:.3e})",
        iterations=config.max_steps,
        residual_norm=norm,
    )


def _trial(function: VectorFunc, x: np.ndarray):
    """Residuals at x, or None when x is rejected by the model or gives non-finite residuals."""
    try:
        residuals = np.asarray(function(x), dtype=float)
    except (CalibrationError, ValueError, ArithmeticError) as exc:
        logger.debug("Rejected trial point %s: %s", x, exc)
        return None
    if not np.all(np.isfinite(residuals)):
        return None
    return residuals


def _accepted_step(function, x, residuals, matrix, delta, label, step):
    """The Newton step if it lowers the residual, else a Levenberg-Marquardt damped one.

    When no damped step lowers the residual either, a valid Newton point is
    still taken so the iteration cap decides. Returns the new point, its
    residuals and whether the step left the plain Newton path.
    """
    current = float(residuals @ residuals)
    newton_x = x + delta
    newton_residuals = _trial(function, newton_x)
    if newton_residuals is not None and float(newton_residuals @ newton_residuals) < current:
        return newton_x, newton_residuals, False

    normal = matrix.T @ matrix
    gradient = matrix.T @ residuals
    scale = float(np.max(np.diag(normal))) or 1.0
    damping = _INITIAL_DAMPING
    for _ in range(_MAX_DAMPING_STEPS):
        damped = np.linalg.solve(normal + damping * scale * np.eye(len(x)), -gradient)
        x_new = x + damped
        residuals_new = _trial(function, x_new)
        if residuals_new is not None and float(residuals_new @ residuals_new) < current:
            logger.debug("%s iter %s: damped step (lambda=%.1e)", label, step, damping)
            return x_new, residuals_new, True
        damping *= _DAMPING_GROWTH

    if newton_residuals is not None:
        return newton_x, newton_residuals, True
    norm = _norm(residuals)
    logger.error("No step reduces the residual of %s at iteration %s", label, step)
    raise CalibrationError(
        f"No step reduces the residual while calibrating {label} at iteration {step}",
        iterations=step,
        residual_norm=norm,
    )
