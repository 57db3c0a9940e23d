"""
Validation Against Closed-Form Ballistics
==========================================
Without drag the trajectory has an exact solution, so the integrator can be
checked against it:

    range        R   = v² sin(2θ) / g
    apex         H   = (v sinθ)² / (2g)
    time of flight T = 2 v sinθ / g

For each elevation the drag-free projectile is simulated to the analytic
range; the height at the target plane should be zero and the apex and
flight time should match. The round trip through the elevation solver is
checked as well: the solved angle must land the projectile back at the
target height.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .atmosphere import Environment
from .conversions import GRAVITY
from .elevation import solve_elevation_angle
from .integrator import simulate
from .projectile import NEGLIGIBLE_DRAG_BC, ProjectileProfile


DEFAULT_ELEVATIONS_DEG = (5.0, 15.0, 30.0, 45.0, 60.0)


@dataclass
class ValidationResult:
    """Result of one validation comparison."""
    elevation_deg: float
    ref_range: float        # analytic range (m)
    landing_height: float   # simulated height at the analytic range (m)
    ref_max_alt: float
    sim_max_alt: float
    alt_error_pct: float
    ref_tof: float
    sim_tof: float
    tof_error_pct: float
    solved_elevation_deg: float   # elevation solver output for ref_range

    @property
    def solver_error_deg(self) -> float:
        """Distance of the solved angle to the nearer arc (θ or 90° − θ)."""
        return min(abs(self.solved_elevation_deg - self.elevation_deg),
                   abs(self.solved_elevation_deg - (90.0 - self.elevation_deg)))


def validate_drag_free(muzzle_speed: float = 300.0,
                       elevations_deg: Sequence[float] = DEFAULT_ELEVATIONS_DEG,
                       time_step: float = 1e-3, method: str = 'rk4',
                       verbose: bool = True) -> List[ValidationResult]:
    """
    Simulate drag-free shots at each elevation and compare against the
    closed-form trajectory.
    """
    profile = ProjectileProfile(ballistic_coefficient=NEGLIGIBLE_DRAG_BC,
                                muzzle_velocity=muzzle_speed,
                                name="drag-free")
    environment = Environment()
    results = []

    if verbose:
        print(f"\n{'='*75}")
        print(f"  VALIDATION: drag-free, v0 = {muzzle_speed} m/s, "
              f"{method.upper()}, dt = {time_step} s")
        print(f"{'='*75}")
        print(f"{'Elev°':>6} {'Range (m)':>10} {'Land z':>9} "
              f"{'Ref Alt':>9} {'Sim Alt':>9} {'Err %':>7} "
              f"{'Ref ToF':>8} {'Sim ToF':>8} {'Err %':>7} {'Solved°':>8}")
        print("-" * 75)

    for elev in elevations_deg:
        theta = math.radians(elev)
        ref_range = muzzle_speed ** 2 * math.sin(2 * theta) / GRAVITY
        ref_alt = (muzzle_speed * math.sin(theta)) ** 2 / (2 * GRAVITY)
        ref_tof = 2 * muzzle_speed * math.sin(theta) / GRAVITY

        traj = simulate(environment, profile, theta, ref_range,
                        time_step=time_step, method=method, record_history=False)
        crossing = traj.crossing()
        solved = solve_elevation_angle(ref_range, 0.0, muzzle_speed)

        vr = ValidationResult(
            elevation_deg=elev,
            ref_range=ref_range,
            landing_height=crossing.position.z,
            ref_max_alt=ref_alt,
            sim_max_alt=traj.max_altitude,
            alt_error_pct=100.0 * (traj.max_altitude - ref_alt) / ref_alt,
            ref_tof=ref_tof,
            sim_tof=crossing.time,
            tof_error_pct=100.0 * (crossing.time - ref_tof) / ref_tof,
            solved_elevation_deg=math.degrees(solved),
        )
        results.append(vr)

        if verbose:
            print(f"{elev:>6.1f} {ref_range:>10.1f} {vr.landing_height:>+9.4f} "
                  f"{ref_alt:>9.2f} {vr.sim_max_alt:>9.2f} {vr.alt_error_pct:>+7.3f} "
                  f"{ref_tof:>8.3f} {vr.sim_tof:>8.3f} {vr.tof_error_pct:>+7.3f} "
                  f"{vr.solved_elevation_deg:>8.3f}")

    if verbose:
        avg_alt_err = np.mean([abs(r.alt_error_pct) for r in results])
        avg_tof_err = np.mean([abs(r.tof_error_pct) for r in results])
        max_land = np.max([abs(r.landing_height) for r in results])
        print("-" * 75)
        print(f"  Mean absolute errors — Apex: {avg_alt_err:.3f}% | "
              f"Time: {avg_tof_err:.3f}% | Worst landing height: {max_land:.4f} m")
        status = "✓ PASS" if avg_alt_err < 0.5 and avg_tof_err < 0.5 else "✗ CHECK TIME STEP"
        print(f"  Status: {status}")
        print(f"{'='*75}\n")

    return results
