"""
Ballistic Trajectory Simulator
==============================
Computes the flight of a rifle bullet from the muzzle to a target plane and
the scope adjustments needed to hit the target:
  - Barometric pressure and humid-air density
  - Ballistic-coefficient drag on the wind-relative velocity
  - Gravity
  - Fixed-step Euler or RK4 integration in three dimensions
  - Analytic (drag-free) and drag-aware elevation solving

Plots live in ``ballistic_sim.visualization`` (imports matplotlib).
"""

from .vector import Vector3
from .atmosphere import (
    pressure_at_altitude, air_density, saturation_vapor_pressure, Environment,
)
from .drag_model import drag_coefficient, drag_force, drag_acceleration
from .projectile import ProjectileProfile, compute_acceleration, NEGLIGIBLE_DRAG_BC
from .integrator import simulate, SimulationState, TrajectoryResult, CrossingPoint
from .target import Target, ShotAssessment, assess_shot
from .elevation import solve_elevation_angle, zero_elevation_angle
from .config import ShotSettings, load_settings
from .validation import validate_drag_free, ValidationResult
from .exceptions import (
    BallisticsError, ConfigurationError, DomainError, VectorDivisionError,
    NoSolutionError, SimulationError, UnreachableError,
)
from .logger import logger, set_console_level, enable_file_logging, disable_file_logging

__version__ = "1.0.0"
__all__ = [
    'Vector3',
    'pressure_at_altitude', 'air_density', 'saturation_vapor_pressure', 'Environment',
    'drag_coefficient', 'drag_force', 'drag_acceleration',
    'ProjectileProfile', 'compute_acceleration', 'NEGLIGIBLE_DRAG_BC',
    'simulate', 'SimulationState', 'TrajectoryResult', 'CrossingPoint',
    'Target', 'ShotAssessment', 'assess_shot',
    'solve_elevation_angle', 'zero_elevation_angle',
    'ShotSettings', 'load_settings',
    'validate_drag_free', 'ValidationResult',
    'BallisticsError', 'ConfigurationError', 'DomainError', 'VectorDivisionError',
    'NoSolutionError', 'SimulationError', 'UnreachableError',
    'logger', 'set_console_level', 'enable_file_logging', 'disable_file_logging',
]
