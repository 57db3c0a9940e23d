"""
Aerodynamic Drag Model
======================
Ballistic-coefficient drag: the coefficient is derived from the projectile's
mass, frontal area and ballistic coefficient, and the force follows the
quadratic drag law.

    Cd = M / (A · BC)
    F  = ½ ρ A v² Cd

The resulting deceleration acts along the velocity relative to the air mass,
so a crosswind or head/tail wind changes both the magnitude and direction of
drag.
"""

from .exceptions import DomainError
from .vector import Vector3, ZERO


def drag_coefficient(bc: float, mass: float, area: float) -> float:
    """
    Drag coefficient from ballistic coefficient (kg/m²), mass (kg) and
    frontal area (m²).
    """
    if bc <= 0.0:
        raise DomainError(f"Ballistic coefficient must be positive, got {bc}")
    if area <= 0.0:
        raise DomainError(f"Frontal area must be positive, got {area}")
    return mass / (area * bc)


def drag_force(rho: float, area: float, speed: float, cd: float) -> float:
    """Magnitude of the drag force (N)."""
    return 0.5 * rho * area * speed ** 2 * cd


def drag_acceleration(velocity_rel: Vector3, rho: float, area: float,
                      cd: float, mass: float) -> Vector3:
    """
    Drag deceleration vector (m/s²).

    a_drag = -(F / m) · v̂_rel

    Parameters
    ----------
    velocity_rel : Vector3
        Velocity relative to the air mass (m/s)
    rho : float
        Air density (kg/m³)
    area : float
        Frontal area (m²)
    cd : float
        Drag coefficient
    mass : float
        Projectile mass (kg)
    """
    speed = velocity_rel.magnitude()
    if speed == 0.0:
        return ZERO
    f_mag = drag_force(rho, area, speed, cd)
    return velocity_rel.scale(-f_mag / (mass * speed))
