"""
Elevation Solver
================
Back-solving the launch angle for a target placement.

1. **Analytic (drag-free)** — closed-form solution of vacuum projectile
   motion through (R, Δh):

       D  = v⁴ − g·(g·R² + 2·Δh·v²)
       θ± = atan((v² ± √D) / (g·R))

   D < 0 means no real angle exists for that speed, range and height.
   θ₊ is the lofted arc and θ₋ the flat one; θ₊ is reported unless it is
   not a number.

2. **Zeroing (with drag)** — root of the simulated miss height at the target
   plane, bracketed upward from the flat analytic angle and refined with
   Brent's method.
"""

import math
from typing import Optional

from scipy.optimize import brentq

from .atmosphere import Environment
from .conversions import GRAVITY
from .exceptions import ConfigurationError, NoSolutionError, UnreachableError
from .integrator import DEFAULT_TIME_STEP, simulate
from .logger import logger
from .projectile import ProjectileProfile
from .target import Target


MAX_ZERO_ANGLE   = math.pi / 4     # rad, beyond this the range only shrinks
ZERO_SEARCH_STEP = 1e-3            # rad, initial bracket width
ZERO_TOLERANCE   = 1e-10           # rad
DISCRIMINANT_EPS = 1e-12           # relative to v⁴


def solve_elevation_angle(target_range: float, altitude_delta: float,
                          muzzle_speed: float, lofted: bool = True) -> float:
    """
    Launch angle (rad) for a drag-free trajectory through
    (target_range, altitude_delta).

    Parameters
    ----------
    target_range : float
        Horizontal distance to the target (m, ≥ 0)
    altitude_delta : float
        Target altitude minus shooter altitude (m)
    muzzle_speed : float
        Launch speed (m/s, ≥ 0)
    lofted : bool
        Prefer the high arc θ₊ (default) or the flat arc θ₋. The other root
        is used only when the preferred one is NaN.

    Raises
    ------
    NoSolutionError
        The discriminant is negative: the target is out of reach.
    """
    if not target_range >= 0.0:
        raise ConfigurationError(f"target_range must be non-negative, got {target_range}")
    if not muzzle_speed >= 0.0:
        raise ConfigurationError(f"muzzle_speed must be non-negative, got {muzzle_speed}")
    if target_range == 0.0:
        return 0.0

    v2 = muzzle_speed ** 2
    d = v2 ** 2 - GRAVITY * (GRAVITY * target_range ** 2 + 2.0 * altitude_delta * v2)
    if -DISCRIMINANT_EPS * v2 ** 2 < d < 0.0:
        # rounding at the maximum-range angle, both arcs coincide
        d = 0.0
    if d < 0.0:
        raise NoSolutionError(target_range, altitude_delta, muzzle_speed,
                              "muzzle speed too low for this placement")

    root = math.sqrt(d)
    theta_high = math.atan((v2 + root) / (GRAVITY * target_range))
    theta_low = math.atan((v2 - root) / (GRAVITY * target_range))

    first, second = (theta_high, theta_low) if lofted else (theta_low, theta_high)
    return second if math.isnan(first) else first


def zero_elevation_angle(environment: Environment, profile: ProjectileProfile,
                         target: Target, time_step: float = DEFAULT_TIME_STEP,
                         method: str = 'rk4',
                         max_drop: Optional[float] = None) -> float:
    """
    Launch angle (rad) whose simulated trajectory, with drag and wind,
    crosses the target plane at the target's altitude offset.

    The flat analytic angle seeds the search; the bracket is widened in
    steps that double until the miss height changes sign, then Brent's
    method refines the root.

    Raises
    ------
    NoSolutionError
        No angle up to 45° brings the projectile to the target height.
    """
    seed = solve_elevation_angle(target.range, target.altitude_offset,
                                 profile.muzzle_velocity, lofted=False)
    if target.range == 0.0:
        return seed
    if max_drop is None:
        max_drop = max(target.range, 2.0 * abs(target.altitude_offset))

    def miss(angle: float) -> Optional[float]:
        try:
            result = simulate(environment, profile, angle, target.range,
                              time_step=time_step, method=method,
                              max_drop=max_drop, record_history=False)
        except UnreachableError:
            return None
        return result.crossing().position.z - target.altitude_offset

    def no_solution():
        return NoSolutionError(target.range, target.altitude_offset,
                               profile.muzzle_velocity,
                               "no zero found with drag")

    lo, f_lo = seed, miss(seed)
    if f_lo == 0.0:
        return lo

    step = ZERO_SEARCH_STEP
    if f_lo is not None and f_lo > 0.0:
        # seed already shoots high: walk down
        hi, f_hi = lo, f_lo
        while True:
            lo = hi - step
            if lo < -MAX_ZERO_ANGLE:
                raise no_solution()
            f_lo = miss(lo)
            if f_lo is None or f_lo < 0.0:
                break
            hi, f_hi = lo, f_lo
            step *= 2.0
    else:
        while True:
            hi = lo + step
            if hi > MAX_ZERO_ANGLE:
                raise no_solution()
            f_hi = miss(hi)
            if f_hi is not None and f_hi >= 0.0:
                break
            if f_hi is not None:
                lo, f_lo = hi, f_hi
            step *= 2.0

    if f_lo is None:
        # lo was abandoned before the plane (max_drop); the low shots that
        # still arrive sit just under hi, so halve towards it
        while hi - lo > ZERO_TOLERANCE:
            mid = 0.5 * (lo + hi)
            f_mid = miss(mid)
            if f_mid is None:
                lo = mid
            elif f_mid < 0.0:
                lo, f_lo = mid, f_mid
                break
            elif f_mid == 0.0:
                return mid
            else:
                hi, f_hi = mid, f_mid
        if f_lo is None:
            raise no_solution()

    logger.debug("zero bracket [%.6f, %.6f] rad, miss [%.4f, %.4f] m",
                 lo, hi, f_lo, f_hi)
    if f_hi == 0.0:
        return hi

    def refine(angle: float) -> float:
        m = miss(angle)
        if m is None:
            raise no_solution()
        return m

    return brentq(refine, lo, hi, xtol=ZERO_TOLERANCE)
