"""
Shot Settings
=============
Immutable bundle of every input of a shot, with the documented defaults,
and the TOML loader used by the command line runner.

Example file:

    [shot]
    distance = 300.0        # m
    angle = 0.0             # mrad
    time_step = 0.0001      # s
    method = "rk4"

    [environment]
    humidity = 0.4
    temperature = 12.0      # °C
    altitude = 350.0        # m ASL
    wind = [0.0, 3.0, 0.0]  # m/s (x downrange, y right-to-left, z up)

    [projectile]
    mass_grains = 175.0
    muzzle_velocity = 790.0
    ballistic_coefficient = 0.505
    diameter = 0.00782

    [target]
    altitude = 355.0        # m ASL, centre of the target
    height = 0.61
    width = 0.4
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

try:
    import tomllib
except ImportError:
    import tomli as tomllib

from .atmosphere import Environment
from .conversions import grains_to_kg, mrad_to_rad
from .exceptions import ConfigurationError
from .logger import logger
from .projectile import ProjectileProfile
from .target import Target
from .vector import Vector3


@dataclass(frozen=True)
class ShotSettings:
    """All inputs of one shot, in user units."""
    # shot
    distance: float = 100.0                 # m, along the X axis
    angle: float = 0.0                      # mrad above horizontal
    time_step: float = 1e-4                 # s
    method: str = 'rk4'
    max_drop: Optional[float] = None        # m below the muzzle
    # environment
    humidity: float = 0.25                  # 0.0 – 1.0
    temperature: float = 30.0               # °C
    altitude_shooter: float = 0.0           # m ASL
    wind: Tuple[float, float, float] = (0.0, 0.0, 0.0)   # m/s
    # projectile
    bullet_mass: float = 200.0              # grains
    muzzle_velocity: float = 1005.0         # m/s
    ballistic_coefficient: float = 0.3      # lb/in²
    diameter: float = 0.00782               # m
    bullet_name: str = "200 gr .308"
    # target
    altitude_target: float = 0.0            # m ASL, centre of the target
    target_height: float = 0.61             # m
    target_width: float = 0.4               # m

    @property
    def launch_angle(self) -> float:
        """Configured elevation in radians."""
        return mrad_to_rad(self.angle)

    def environment(self) -> Environment:
        return Environment(
            humidity=self.humidity,
            temperature=self.temperature,
            altitude=self.altitude_shooter,
            wind=Vector3(*self.wind),
        )

    def projectile(self) -> ProjectileProfile:
        return ProjectileProfile(
            mass=grains_to_kg(self.bullet_mass),
            ballistic_coefficient=self.ballistic_coefficient,
            diameter=self.diameter,
            muzzle_velocity=self.muzzle_velocity,
            name=self.bullet_name,
        )

    def target(self) -> Target:
        return Target(
            range=self.distance,
            altitude_offset=self.altitude_target - self.altitude_shooter,
            height=self.target_height,
            width=self.target_width,
        )

    def replace(self, **changes: Any) -> ShotSettings:
        """Copy with the given fields changed; ``None`` values are ignored."""
        changes = {k: v for k, v in changes.items() if v is not None}
        unknown = set(changes) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise ConfigurationError(f"Unknown settings: {sorted(unknown)}")
        return dataclasses.replace(self, **changes)


# (table, key) in the TOML file → ShotSettings field
_TOML_KEYS: Dict[str, Dict[str, str]] = {
    'shot': {
        'distance': 'distance',
        'angle': 'angle',
        'time_step': 'time_step',
        'method': 'method',
        'max_drop': 'max_drop',
    },
    'environment': {
        'humidity': 'humidity',
        'temperature': 'temperature',
        'altitude': 'altitude_shooter',
        'wind': 'wind',
    },
    'projectile': {
        'mass_grains': 'bullet_mass',
        'muzzle_velocity': 'muzzle_velocity',
        'ballistic_coefficient': 'ballistic_coefficient',
        'diameter': 'diameter',
        'name': 'bullet_name',
    },
    'target': {
        'altitude': 'altitude_target',
        'height': 'target_height',
        'width': 'target_width',
    },
}


_TEXT_FIELDS = frozenset(('method', 'bullet_name'))


def _parse_number(key: str, value: Any) -> float:
    # TOML booleans are ints to Python
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from None


def _parse_wind(value: Any) -> Tuple[float, float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ConfigurationError(f"wind must be a list of 3 numbers, got {value!r}")
    wind = tuple(_parse_number('wind', v) for v in value)
    if not all(math.isfinite(v) for v in wind):
        raise ConfigurationError(f"wind components must be finite, got {value!r}")
    return wind  # type: ignore[return-value]


def settings_from_mapping(data: Mapping[str, Any],
                          base: Optional[ShotSettings] = None) -> ShotSettings:
    """Build settings from a parsed TOML document."""
    base = base or ShotSettings()
    changes: Dict[str, Any] = {}

    unknown_tables = set(data) - set(_TOML_KEYS)
    if unknown_tables:
        raise ConfigurationError(f"Unknown sections: {sorted(unknown_tables)}")

    for table, keys in _TOML_KEYS.items():
        section = data.get(table, {})
        if not isinstance(section, Mapping):
            raise ConfigurationError(f"[{table}] must be a table")
        unknown = set(section) - set(keys)
        if unknown:
            raise ConfigurationError(f"Unknown keys in [{table}]: {sorted(unknown)}")
        missing = set(keys) - set(section)
        if missing:
            logger.debug("[%s] not provided: %s, defaults used", table, sorted(missing))
        for key, value in section.items():
            name = keys[key]
            if name == 'wind':
                value = _parse_wind(value)
            elif name in _TEXT_FIELDS:
                if not isinstance(value, str):
                    raise ConfigurationError(f"[{table}] {key} must be a string, got {value!r}")
            else:
                value = _parse_number(f"[{table}] {key}", value)
            changes[name] = value

    return base.replace(**changes)


def load_settings(path: str, base: Optional[ShotSettings] = None) -> ShotSettings:
    """Read shot settings from a TOML file."""
    with open(path, 'rb') as fp:
        try:
            data = tomllib.load(fp)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Cannot parse {path}: {exc}") from exc
    logger.debug("Loaded settings from %s", path)
    return settings_from_mapping(data, base)
