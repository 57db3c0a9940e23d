"""
Atmospheric Model
=================
Air pressure as a function of height (standard-atmosphere barometric formula)
and density of humid air from relative humidity, temperature and pressure.

The Environment value object bundles the shooter's weather and wind; its
derived quantities are recomputed on every call so a change of altitude is
never answered from a stale value.

Valid within the troposphere. The barometric formula has no real value once
1 − L·H/T₀ reaches zero (H ≈ 44.3 km); such heights raise DomainError.
"""

import math
from dataclasses import dataclass, field

import numpy as np

from .conversions import (
    GRAVITY, MOLAR_MASS_DRY_AIR, MOLAR_MASS_WATER_VAPOR, UNIV_GAS_CONSTANT,
    c_to_k,
)
from .exceptions import ConfigurationError, DomainError
from .vector import Vector3


# ── Standard atmosphere constants ─────────────────────────────────────────
SEA_LEVEL_PRESSURE_KPA = 101.325     # kPa
SEA_LEVEL_TEMP         = 288.15      # K
LAPSE_RATE             = 0.0065      # K/m
BAROMETRIC_EXPONENT    = GRAVITY * MOLAR_MASS_DRY_AIR / (UNIV_GAS_CONSTANT * LAPSE_RATE)
MAX_ALTITUDE           = SEA_LEVEL_TEMP / LAPSE_RATE   # ≈ 44330.8 m, base of the power hits 0

# Magnus / Tetens saturation vapour pressure, temperature in °C
MAGNUS_P0_HPA          = 6.1078
MAGNUS_A               = 7.5
MAGNUS_B               = 237.3       # °C


def pressure_at_altitude(height: float) -> float:
    """
    Absolute pressure (kPa) at ``height`` metres above sea level.

        P = 101.325 · (1 − 0.0065·H / 288.15) ^ (g·M / (R·0.0065))
    """
    base = 1.0 - LAPSE_RATE * height / SEA_LEVEL_TEMP
    if not base > 0.0:
        raise DomainError(
            f"Height {height} m is outside the barometric formula's domain "
            f"(must be below {MAX_ALTITUDE:.1f} m)"
        )
    return SEA_LEVEL_PRESSURE_KPA * base ** BAROMETRIC_EXPONENT


def saturation_vapor_pressure(temperature: float) -> float:
    """Saturation vapour pressure of water (Pa) at ``temperature`` °C.

    The Magnus fit has a pole at −237.3 °C; at or below it there is no value.
    """
    if not temperature + MAGNUS_B > 0.0:
        raise DomainError(
            f"Temperature {temperature} °C is outside the Magnus formula's domain "
            f"(must be above {-MAGNUS_B} °C)"
        )
    p_hpa = MAGNUS_P0_HPA * 10.0 ** (MAGNUS_A * temperature / (temperature + MAGNUS_B))
    return p_hpa * 100.0


def air_density(humidity: float, temperature: float, pressure: float) -> float:
    """
    Density of humid air (kg/m³).

    Parameters
    ----------
    humidity : float
        Relative humidity as a fraction (0.0 dry – 1.0 saturated)
    temperature : float
        Air temperature (°C)
    pressure : float
        Observed absolute pressure (Pa, not kPa)

    The air is treated as a mixture of dry air and water vapour, each an
    ideal gas at its partial pressure:

        ρ = (P_d·M_dry + P_v·M_vapor) / (R·T)
    """
    if not 0.0 <= humidity <= 1.0:
        raise DomainError(f"Relative humidity {humidity} is outside [0, 1]")
    if not pressure > 0.0:
        raise DomainError(f"Pressure must be positive, got {pressure} Pa")
    t_k = c_to_k(temperature)
    if not t_k > 0.0:
        raise DomainError(f"Temperature {temperature} °C is below absolute zero")

    p_v = humidity * saturation_vapor_pressure(temperature)
    p_d = pressure - p_v
    if p_d <= 0.0:
        raise DomainError(
            f"Vapour pressure {p_v:.1f} Pa exceeds total pressure {pressure} Pa"
        )
    return (p_d * MOLAR_MASS_DRY_AIR + p_v * MOLAR_MASS_WATER_VAPOR) / (UNIV_GAS_CONSTANT * t_k)


@dataclass(frozen=True)
class Environment:
    """
    Weather at the firing point.

    ``altitude`` is the shooter's height above sea level; heights passed to
    the methods are relative to it (the projectile's z coordinate).
    """
    humidity: float = 0.25           # fraction 0-1
    temperature: float = 30.0        # °C
    altitude: float = 0.0            # m ASL
    wind: Vector3 = field(default_factory=Vector3)   # m/s, air-mass velocity

    def __post_init__(self):
        if not 0.0 <= self.humidity <= 1.0:
            raise ConfigurationError(f"humidity must be within [0, 1], got {self.humidity}")
        if not c_to_k(self.temperature) > 0.0:
            raise ConfigurationError(f"temperature {self.temperature} °C is below absolute zero")
        if not self.temperature + MAGNUS_B > 0.0:
            raise ConfigurationError(
                f"temperature must be above {-MAGNUS_B} °C, got {self.temperature}")
        if not math.isfinite(self.altitude):
            raise ConfigurationError(f"altitude must be finite, got {self.altitude}")

    def pressure_at(self, height: float = 0.0) -> float:
        """Absolute pressure (Pa) at ``height`` m above the shooter."""
        return pressure_at_altitude(self.altitude + height) * 1000.0

    def density_at(self, height: float = 0.0) -> float:
        """Air density (kg/m³) at ``height`` m above the shooter."""
        return air_density(self.humidity, self.temperature, self.pressure_at(height))

    @property
    def density(self) -> float:
        """Air density at the muzzle."""
        return self.density_at(0.0)


# ── Vectorized version for plotting ───────────────────────────────────────
def density_profile(environment: Environment, heights: np.ndarray) -> dict:
    """
    Pressure and density for an array of heights above the shooter.
    Returns dict with keys: 'height', 'pressure', 'density'.
    """
    P = np.array([environment.pressure_at(h) for h in heights])
    rho = np.array([environment.density_at(h) for h in heights])
    return {
        'height': heights,
        'pressure': P,
        'density': rho,
    }
