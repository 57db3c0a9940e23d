"""
Exception Types
===============
Error hierarchy for the simulator.

    BallisticsError
    ├── ConfigurationError   (ValueError)   bad inputs, rejected before a run
    ├── DomainError          (ArithmeticError)
    │   ├── VectorDivisionError  (ZeroDivisionError)
    │   └── NoSolutionError      no real launch angle / no zero bracket
    └── SimulationError      (RuntimeError)
        └── UnreachableError     projectile never reaches the target plane

Physics functions raise these instead of letting NaN or infinity leak into
downstream arithmetic.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .integrator import TrajectoryResult

__all__ = (
    'BallisticsError',
    'ConfigurationError',
    'DomainError',
    'VectorDivisionError',
    'NoSolutionError',
    'SimulationError',
    'UnreachableError',
)


class BallisticsError(Exception):
    """Base class for all simulator errors."""


class ConfigurationError(BallisticsError, ValueError):
    """Invalid simulation input (mass, time step, diameter, ...)."""


class DomainError(BallisticsError, ArithmeticError):
    """A physics formula was evaluated outside its valid domain."""


class VectorDivisionError(DomainError, ZeroDivisionError):
    """Vector divided by zero, or zero vector normalized."""


class NoSolutionError(DomainError):
    """No real launch angle reaches the requested target placement."""

    def __init__(self, target_range: float, altitude_delta: float,
                 muzzle_speed: float, note: str = ""):
        self.target_range = target_range
        self.altitude_delta = altitude_delta
        self.muzzle_speed = muzzle_speed
        msg = (f"No launch angle reaches {target_range} m downrange at "
               f"{altitude_delta:+} m with muzzle speed {muzzle_speed} m/s")
        if note:
            msg += f". {note}"
        super().__init__(msg)


class SimulationError(BallisticsError, RuntimeError):
    """Trajectory integration failed."""


class UnreachableError(SimulationError):
    """
    The projectile never reached the target plane.

    Carries the reason and the trajectory computed up to the point the run
    was abandoned.
    """

    NO_PROGRESS = "No downrange progress"
    MAX_TICKS = "Tick budget exhausted"
    MAXIMUM_DROP = "Maximum drop reached"

    def __init__(self, reason: str, target_range: float,
                 partial: Optional[TrajectoryResult] = None):
        self.reason = reason
        self.target_range = target_range
        self.partial = partial

        msg = f"Target at {target_range} m not reached ({reason})"
        if partial is not None:
            self.last_distance: Optional[float] = partial.position.x
            msg += (f", last distance {partial.position.x:.3f} m "
                    f"after {partial.ticks} ticks")
        else:
            self.last_distance = None
        super().__init__(msg)
