"""
Projectile Definition & Forces
===============================
Defines the ProjectileProfile dataclass and the acceleration acting on the
projectile:
  - Gravity
  - Aerodynamic drag on the velocity relative to the air mass (wind)

Coordinate system:
  x = downrange
  y = lateral (right to left)
  z = altitude (up positive)
"""

import math
from dataclasses import dataclass

from .atmosphere import Environment
from .conversions import GRAVITY, bc_to_si, grains_to_kg
from .drag_model import drag_acceleration, drag_coefficient
from .exceptions import ConfigurationError
from .vector import Vector3


GRAVITY_VECTOR = Vector3(0.0, 0.0, -GRAVITY)

# A ballistic coefficient of exactly 1.0 marks a drag-free projectile
NEGLIGIBLE_DRAG_BC = 1.0


@dataclass(frozen=True)
class ProjectileProfile:
    """
    Physical properties of the bullet. Immutable for the duration of a run.
    """
    mass: float = grains_to_kg(200.0)     # kg
    ballistic_coefficient: float = 0.3    # lb/in² (G1 convention)
    diameter: float = 0.00782             # m
    muzzle_velocity: float = 1005.0       # m/s
    name: str = "200 gr .308"

    def __post_init__(self):
        for attr in ('mass', 'ballistic_coefficient', 'diameter'):
            value = getattr(self, attr)
            if not (math.isfinite(value) and value > 0.0):
                raise ConfigurationError(f"{attr} must be positive, got {value}")
        if not (math.isfinite(self.muzzle_velocity) and self.muzzle_velocity >= 0.0):
            raise ConfigurationError(
                f"muzzle_velocity must be non-negative, got {self.muzzle_velocity}"
            )

    @property
    def area(self) -> float:
        """Frontal area (m²)."""
        return math.pi * (self.diameter / 2) ** 2

    @property
    def has_drag(self) -> bool:
        return self.ballistic_coefficient != NEGLIGIBLE_DRAG_BC

    @property
    def drag_coefficient(self) -> float:
        return drag_coefficient(bc_to_si(self.ballistic_coefficient), self.mass, self.area)

    @property
    def caliber(self) -> float:
        """Diameter in mm."""
        return self.diameter * 1000


def compute_acceleration(position: Vector3, velocity: Vector3,
                         profile: ProjectileProfile,
                         environment: Environment) -> Vector3:
    """
    Total acceleration (m/s²) at the given state.

    Air density is evaluated at the projectile's current height, and drag
    acts on ``velocity - wind``.
    """
    if not profile.has_drag:
        return GRAVITY_VECTOR

    rho = environment.density_at(position.z)
    v_rel = velocity.subtract(environment.wind)
    a_drag = drag_acceleration(v_rel, rho, profile.area,
                               profile.drag_coefficient, profile.mass)
    return a_drag.add(GRAVITY_VECTOR)
