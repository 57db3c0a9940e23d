"""
Trajectory Integrator
=====================
Fixed-step time integration of the projectile from the muzzle to the target
plane (x = target range). The clock is simulated: each tick advances time by
exactly ``time_step`` and nothing waits on the wall clock.

Two steppers integrate the same equations of motion:

1. **Euler** (semi-implicit) — velocity updated first, position advanced with
   the new velocity:
       v_{n+1} = v_n + a(x_n, v_n)·dt
       x_{n+1} = x_n + v_{n+1}·dt
2. **RK4** — classical 4th-order Runge-Kutta; exact for the drag-free
   (constant acceleration) case.

Lifecycle of a run: pre-launch (origin, muzzle velocity at the launch angle)
→ in-flight ticks → terminal once x ≥ target range. A run that stops making
downrange progress, exhausts its tick budget or drops past ``max_drop``
raises UnreachableError instead of looping forever.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, NamedTuple, Optional, Tuple

import numpy as np

from .atmosphere import Environment
from .exceptions import ConfigurationError, UnreachableError
from .logger import logger
from .projectile import ProjectileProfile, compute_acceleration
from .vector import Vector3, ZERO


DEFAULT_TIME_STEP   = 1e-4        # s
DEFAULT_MAX_TICKS   = 1_000_000
DEFAULT_STALL_TICKS = 1_000

METHODS = ('euler', 'rk4')

Acceleration = Callable[[Vector3, Vector3], Vector3]


@dataclass
class SimulationState:
    """Mutable per-run state, advanced once per tick."""
    position: Vector3 = ZERO
    velocity: Vector3 = ZERO
    time: float = 0.0
    max_altitude: float = 0.0
    ticks: int = 0


class CrossingPoint(NamedTuple):
    """State interpolated onto the target plane."""
    time: float
    position: Vector3
    velocity: Vector3


@dataclass(frozen=True)
class TrajectoryResult:
    """Final state of a run plus its recorded history."""
    profile: ProjectileProfile
    environment: Environment
    method: str
    time_step: float
    launch_angle: float       # rad
    target_range: float       # m

    position: Vector3
    velocity: Vector3
    time: float
    max_altitude: float
    ticks: int

    # State one tick before the final one (equal to the final state when no
    # tick was taken); used to interpolate the target-plane crossing.
    previous_position: Vector3 = ZERO
    previous_velocity: Vector3 = ZERO
    previous_time: float = 0.0

    # Arrays of shape (ticks + 1,), empty when history is off
    time_history: np.ndarray = field(default_factory=lambda: np.empty(0))
    x: np.ndarray = field(default_factory=lambda: np.empty(0))
    y: np.ndarray = field(default_factory=lambda: np.empty(0))
    z: np.ndarray = field(default_factory=lambda: np.empty(0))
    vx: np.ndarray = field(default_factory=lambda: np.empty(0))
    vy: np.ndarray = field(default_factory=lambda: np.empty(0))
    vz: np.ndarray = field(default_factory=lambda: np.empty(0))
    density_history: np.ndarray = field(default_factory=lambda: np.empty(0))

    @property
    def speed(self) -> np.ndarray:
        """Speed history (m/s)."""
        return np.sqrt(self.vx ** 2 + self.vy ** 2 + self.vz ** 2)

    @property
    def speed_final(self) -> float:
        """Speed at the final tick (m/s)."""
        return self.velocity.magnitude()

    @property
    def drift(self) -> float:
        """Lateral displacement at the final tick (m)."""
        return self.position.y

    def crossing(self) -> CrossingPoint:
        """
        Linear interpolation of the last tick onto x = target_range.
        """
        dx = self.position.x - self.previous_position.x
        if self.ticks == 0 or dx <= 0.0:
            return CrossingPoint(self.time, self.position, self.velocity)
        f = (self.target_range - self.previous_position.x) / dx
        f = min(max(f, 0.0), 1.0)
        return CrossingPoint(
            self.previous_time + f * (self.time - self.previous_time),
            self.previous_position + (self.position - self.previous_position) * f,
            self.previous_velocity + (self.velocity - self.previous_velocity) * f,
        )

    def summary(self) -> str:
        """Human-readable summary string."""
        c = self.crossing()
        lines = [
            f"╔══════════════════════════════════════════════════════╗",
            f"║  TRAJECTORY SUMMARY — {self.profile.name:<30s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Method       : {self.method.upper():<36s} ║",
            f"║  Timestep     : {self.time_step:<36g} ║",
            f"║  Ticks        : {self.ticks:<36d} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Muzzle vel   : {self.profile.muzzle_velocity:>10.1f} m/s{'':<22s} ║",
            f"║  Elevation    : {self.launch_angle * 1000:>10.3f} mrad{'':<21s} ║",
            f"╠══════════════════════════════════════════════════════╣",
            f"║  Range        : {self.target_range:>10.1f} m{'':<24s} ║",
            f"║  Flight time  : {c.time:>10.4f} s{'':<24s} ║",
            f"║  Height       : {c.position.z:>10.4f} m{'':<24s} ║",
            f"║  Drift        : {c.position.y:>10.4f} m{'':<24s} ║",
            f"║  Max altitude : {self.max_altitude:>10.4f} m{'':<24s} ║",
            f"║  Impact vel   : {c.velocity.magnitude():>10.1f} m/s{'':<22s} ║",
            f"╚══════════════════════════════════════════════════════╝",
        ]
        return '\n'.join(lines)


# ══════════════════════════════════════════════════════════════════════════
#  Steppers
# ══════════════════════════════════════════════════════════════════════════

def _euler_step(pos: Vector3, vel: Vector3, dt: float,
                accel: Acceleration) -> Tuple[Vector3, Vector3]:
    acc = accel(pos, vel)
    vel = vel + acc * dt
    pos = pos + vel * dt
    return pos, vel


def _rk4_step(pos: Vector3, vel: Vector3, dt: float,
              accel: Acceleration) -> Tuple[Vector3, Vector3]:
    k1v = accel(pos, vel)
    k1x = vel

    k2v = accel(pos + k1x * (0.5 * dt), vel + k1v * (0.5 * dt))
    k2x = vel + k1v * (0.5 * dt)

    k3v = accel(pos + k2x * (0.5 * dt), vel + k2v * (0.5 * dt))
    k3x = vel + k2v * (0.5 * dt)

    k4v = accel(pos + k3x * dt, vel + k3v * dt)
    k4x = vel + k3v * dt

    pos = pos + (k1x + k2x * 2.0 + k3x * 2.0 + k4x) * (dt / 6.0)
    vel = vel + (k1v + k2v * 2.0 + k3v * 2.0 + k4v) * (dt / 6.0)
    return pos, vel


_STEPPERS = {
    'euler': _euler_step,
    'rk4': _rk4_step,
}


# ══════════════════════════════════════════════════════════════════════════
#  Simulation loop
# ══════════════════════════════════════════════════════════════════════════

def _check_config(target_range, time_step, method, max_ticks, stall_ticks, max_drop):
    if not (math.isfinite(time_step) and time_step > 0.0):
        raise ConfigurationError(f"time_step must be positive, got {time_step}")
    if not (math.isfinite(target_range) and target_range >= 0.0):
        raise ConfigurationError(f"target_range must be non-negative, got {target_range}")
    if method not in _STEPPERS:
        raise ConfigurationError(f"Unknown method '{method}'. Available: {list(METHODS)}")
    if max_ticks <= 0 or stall_ticks <= 0:
        raise ConfigurationError("max_ticks and stall_ticks must be positive")
    if max_drop is not None and not max_drop > 0.0:
        raise ConfigurationError(f"max_drop must be positive, got {max_drop}")


def simulate(environment: Environment, profile: ProjectileProfile,
             launch_angle: float, target_range: float,
             time_step: float = DEFAULT_TIME_STEP, method: str = 'rk4',
             max_ticks: int = DEFAULT_MAX_TICKS,
             stall_ticks: int = DEFAULT_STALL_TICKS,
             max_drop: Optional[float] = None,
             record_history: bool = True) -> TrajectoryResult:
    """
    Integrate the trajectory until the projectile reaches the target plane.

    Parameters
    ----------
    environment : Environment
        Weather and wind (read-only during the run)
    profile : ProjectileProfile
        Bullet properties (read-only during the run)
    launch_angle : float
        Elevation of the bore above horizontal (rad)
    target_range : float
        Downrange distance of the target plane (m)
    time_step : float
        Fixed tick length (s)
    method : str
        'euler' or 'rk4'
    max_ticks : int
        Hard cap on the number of ticks
    stall_ticks : int
        Consecutive ticks without downrange progress tolerated
    max_drop : float, optional
        Abandon the run once the projectile is this far below the muzzle (m)
    record_history : bool
        Keep per-tick arrays in the result

    Raises
    ------
    ConfigurationError
        Invalid step, range, method or budget (before any tick)
    UnreachableError
        The target plane is never reached
    """
    _check_config(target_range, time_step, method, max_ticks, stall_ticks, max_drop)
    step = _STEPPERS[method]

    def accel(p, v):
        return compute_acceleration(p, v, profile, environment)

    state = SimulationState(
        position=ZERO,
        velocity=Vector3.from_length_and_elevation(profile.muzzle_velocity, launch_angle),
    )
    prev = (state.position, state.velocity, state.time)
    history = [_sample(state, environment, profile)] if record_history else []
    stalled = 0

    logger.debug("simulate: %s, v0=%.3f m/s, angle=%.6f rad, range=%.3f m, dt=%g",
                 method, profile.muzzle_velocity, launch_angle, target_range, time_step)

    def result():
        return _build_result(state, prev, history, environment, profile,
                             method, time_step, launch_angle, target_range)

    while state.position.x < target_range:
        if state.ticks >= max_ticks:
            _give_up(UnreachableError.MAX_TICKS, target_range, result())

        prev = (state.position, state.velocity, state.time)
        state.position, state.velocity = step(state.position, state.velocity, time_step, accel)
        state.ticks += 1
        state.time = state.ticks * time_step

        if state.position.z > state.max_altitude:
            state.max_altitude = state.position.z
        if record_history:
            history.append(_sample(state, environment, profile))

        if state.position.x > prev[0].x:
            stalled = 0
        else:
            stalled += 1
            if stalled >= stall_ticks:
                _give_up(UnreachableError.NO_PROGRESS, target_range, result())

        if max_drop is not None and state.position.z < -max_drop:
            _give_up(UnreachableError.MAXIMUM_DROP, target_range, result())

    logger.debug("simulate: reached %.3f m after %d ticks (t=%.6f s)",
                 state.position.x, state.ticks, state.time)
    return result()


def _sample(state, environment, profile):
    """One history row. Density is NaN for drag-free profiles, which never
    consult the air (and may climb past the barometric formula's ceiling)."""
    rho = environment.density_at(state.position.z) if profile.has_drag else math.nan
    return (state.time, *state.position, *state.velocity, rho)


def _give_up(reason: str, target_range: float, partial: TrajectoryResult):
    logger.warning("Trajectory abandoned: %s at x=%.3f m after %d ticks",
                   reason, partial.position.x, partial.ticks)
    raise UnreachableError(reason, target_range, partial)


def _build_result(state, prev, history, environment, profile, method,
                  time_step, launch_angle, target_range) -> TrajectoryResult:
    """Freeze the state and convert the history list to arrays."""
    arrays = {}
    if history:
        columns = np.array(history).T
        for key, col in zip(('time_history', 'x', 'y', 'z', 'vx', 'vy', 'vz',
                                'density_history'), columns):
            arrays[key] = col

    return TrajectoryResult(
        profile=profile,
        environment=environment,
        method=method,
        time_step=time_step,
        launch_angle=launch_angle,
        target_range=target_range,
        position=state.position,
        velocity=state.velocity,
        time=state.time,
        max_altitude=state.max_altitude,
        ticks=state.ticks,
        previous_position=prev[0],
        previous_velocity=prev[1],
        previous_time=prev[2],
        **arrays,
    )
