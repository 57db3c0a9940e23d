"""
Target Geometry & Scope Adjustments
===================================
Classifies a finished trajectory against a rectangular target and derives
the scope corrections (milliradians) that move the point of impact onto the
target centre.

All adjustments are relative: the scope is assumed zeroed for the launch
angle that was simulated. 0.1 mrad moves the impact about 1 cm at 100 m.
"""

import math
from dataclasses import dataclass

from .exceptions import ConfigurationError
from .integrator import TrajectoryResult
from .vector import Vector3


@dataclass(frozen=True)
class Target:
    """Rectangular target standing in the plane x = range."""
    range: float = 100.0              # m, along the firing axis
    altitude_offset: float = 0.0      # m, target centre relative to the shooter
    height: float = 0.61              # m
    width: float = 0.4                # m

    def __post_init__(self):
        if not (math.isfinite(self.range) and self.range >= 0.0):
            raise ConfigurationError(f"range must be non-negative, got {self.range}")
        if not math.isfinite(self.altitude_offset):
            raise ConfigurationError(f"altitude_offset must be finite, got {self.altitude_offset}")
        for attr in ('height', 'width'):
            value = getattr(self, attr)
            if not (math.isfinite(value) and value > 0.0):
                raise ConfigurationError(f"{attr} must be positive, got {value}")

    @property
    def centre(self) -> Vector3:
        return Vector3(self.range, 0.0, self.altitude_offset)


@dataclass(frozen=True)
class ShotAssessment:
    """Where the shot crossed the target plane and how to correct it."""
    impact: Vector3                 # m, point on the target plane
    time_of_flight: float           # s
    impact_speed: float             # m/s
    vertical_miss: float            # m, + above the centre
    lateral_miss: float             # m, + left of the centre
    elevation_adjustment: float     # mrad, + dial up
    windage_adjustment: float       # mrad, + dial left
    hit: bool

    def describe(self) -> str:
        verdict = "HIT" if self.hit else "MISS"
        return (f"{verdict}: {self.vertical_miss * 100:+.1f} cm vertical, "
                f"{self.lateral_miss * 100:+.1f} cm lateral; "
                f"adjust elevation {self.elevation_adjustment:+.2f} mrad, "
                f"windage {self.windage_adjustment:+.2f} mrad")


def correction_mrad(miss: float, distance: float) -> float:
    """Angular correction (mrad) cancelling ``miss`` metres at ``distance``."""
    if distance == 0.0:
        return 0.0
    return math.atan(-miss / distance) * 1000.0


def assess_shot(result: TrajectoryResult, target: Target) -> ShotAssessment:
    """
    Compare the trajectory's crossing of the target plane with the target.
    """
    c = result.crossing()
    vertical = c.position.z - target.altitude_offset
    lateral = c.position.y
    hit = abs(vertical) <= target.height / 2 and abs(lateral) <= target.width / 2
    return ShotAssessment(
        impact=c.position,
        time_of_flight=c.time,
        impact_speed=c.velocity.magnitude(),
        vertical_miss=vertical,
        lateral_miss=lateral,
        elevation_adjustment=correction_mrad(vertical, target.range),
        windage_adjustment=correction_mrad(lateral, target.range),
        hit=hit,
    )
