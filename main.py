#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  BALLISTIC TRAJECTORY SIMULATOR — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Runs one shot:
    1. Collect settings (defaults, optional TOML file, command line flags)
    2. Air density at the muzzle
    3. Launch angle (configured, analytic drag-free solution, or zeroed
       with drag)
    4. Trajectory to the target plane
    5. Hit/miss against the target and scope adjustments
    6. Optional plots and drag-free validation table

  Usage:
    python main.py                          # defaults: 100 m, 200 gr @ 1005 m/s
    python main.py --range 600 --zero       # zero with drag for 600 m
    python main.py --config shot.toml --wind-y 4 --plot outputs
═══════════════════════════════════════════════════════════════════════════════
"""

import argparse
import logging
import sys
from typing import List, Optional

from ballistic_sim import (
    ShotSettings, load_settings, simulate, assess_shot,
    solve_elevation_angle, zero_elevation_angle, validate_drag_free,
    BallisticsError, logger, enable_file_logging,
)
from ballistic_sim.logger import set_console_level
from ballistic_sim.conversions import rad_to_mrad
from ballistic_sim.integrator import METHODS


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        description="Ballistic trajectory simulator and scope adjustment calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  python main.py --range 300 --angle 1.2
  python main.py --range 800 --zero --wind-y -3.5
  python main.py --config shot.toml --plot outputs
""",
    )
    p.add_argument('--config', type=str, default=None,
                   help='TOML settings file (flags override it)')

    # ── Shot ─────────────────────────────────────────────────────
    shot = p.add_argument_group('Shot')
    shot.add_argument('--range', dest='distance', type=float, default=None,
                      help='Target distance along the firing axis [m] (default 100)')
    shot.add_argument('--angle', type=float, default=None,
                      help='Launch elevation [mrad] (default 0)')
    aim = shot.add_mutually_exclusive_group()
    aim.add_argument('--solve', action='store_true',
                     help='Use the analytic drag-free elevation instead of --angle')
    aim.add_argument('--zero', action='store_true',
                     help='Zero the elevation with drag and wind')
    shot.add_argument('--lofted', action='store_true',
                      help='With --solve, report the high arc instead of the flat one')
    shot.add_argument('--time-step', type=float, default=None,
                      help='Integration step [s] (default 1e-4)')
    shot.add_argument('--method', type=str, default=None, choices=METHODS,
                      help='Integration method (default rk4)')
    shot.add_argument('--max-drop', type=float, default=None,
                      help='Abandon the shot this far below the muzzle [m]')

    # ── Environment ──────────────────────────────────────────────
    env = p.add_argument_group('Environment')
    env.add_argument('--humidity', type=float, default=None,
                     help='Relative humidity 0-1 (default 0.25)')
    env.add_argument('--temperature', type=float, default=None,
                     help='Air temperature [°C] (default 30)')
    env.add_argument('--altitude', dest='altitude_shooter', type=float, default=None,
                     help='Shooter altitude [m ASL] (default 0)')
    env.add_argument('--wind-x', type=float, default=None,
                     help='Wind along the firing axis [m/s], + away from the shooter')
    env.add_argument('--wind-y', type=float, default=None,
                     help='Crosswind [m/s], + from right to left')
    env.add_argument('--wind-z', type=float, default=None,
                     help='Vertical wind [m/s], + up')

    # ── Projectile ───────────────────────────────────────────────
    proj = p.add_argument_group('Projectile')
    proj.add_argument('--mass', dest='bullet_mass', type=float, default=None,
                      help='Bullet mass [grains] (default 200)')
    proj.add_argument('--velocity', dest='muzzle_velocity', type=float, default=None,
                      help='Muzzle velocity [m/s] (default 1005)')
    proj.add_argument('--bc', dest='ballistic_coefficient', type=float, default=None,
                      help='G1 ballistic coefficient [lb/in²] (default 0.3, 1.0 = no drag)')
    proj.add_argument('--diameter', type=float, default=None,
                      help='Bullet diameter [m] (default 0.00782)')

    # ── Target ───────────────────────────────────────────────────
    tgt = p.add_argument_group('Target')
    tgt.add_argument('--target-altitude', dest='altitude_target', type=float, default=None,
                     help='Altitude of the target centre [m ASL] (default 0)')
    tgt.add_argument('--target-height', type=float, default=None,
                     help='Target height [m] (default 0.61)')
    tgt.add_argument('--target-width', type=float, default=None,
                     help='Target width [m] (default 0.4)')

    # ── Output ───────────────────────────────────────────────────
    out = p.add_argument_group('Output')
    out.add_argument('--plot', type=str, default=None, metavar='DIR',
                     help='Write trajectory and atmosphere plots to DIR')
    out.add_argument('--validate', action='store_true',
                     help='Print the drag-free validation table')
    out.add_argument('-v', '--verbose', action='store_true',
                     help='Debug logging on the console')
    out.add_argument('--log-file', type=str, default=None,
                     help='Write debug log to this file')
    return p


def settings_from_args(args) -> ShotSettings:
    """Defaults, then the TOML file, then the command line."""
    settings = ShotSettings()
    if args.config:
        settings = load_settings(args.config, settings)

    wind = list(settings.wind)
    for i, value in enumerate((args.wind_x, args.wind_y, args.wind_z)):
        if value is not None:
            wind[i] = value

    return settings.replace(
        distance=args.distance,
        angle=args.angle,
        time_step=args.time_step,
        method=args.method,
        max_drop=args.max_drop,
        humidity=args.humidity,
        temperature=args.temperature,
        altitude_shooter=args.altitude_shooter,
        wind=tuple(wind),
        bullet_mass=args.bullet_mass,
        muzzle_velocity=args.muzzle_velocity,
        ballistic_coefficient=args.ballistic_coefficient,
        diameter=args.diameter,
        altitude_target=args.altitude_target,
        target_height=args.target_height,
        target_width=args.target_width,
    )


def run(settings: ShotSettings, solve: bool = False, zero: bool = False,
        lofted: bool = False, plot_dir: Optional[str] = None) -> None:
    environment = settings.environment()
    profile = settings.projectile()
    target = settings.target()

    section("Conditions")
    print(f"  Humidity      : {environment.humidity:.0%}")
    print(f"  Temperature   : {environment.temperature:.1f} °C")
    print(f"  Altitude      : {environment.altitude:.1f} m ASL")
    print(f"  Pressure      : {environment.pressure_at() / 1000:.3f} kPa")
    print(f"  Air density   : {environment.density:.5f} kg/m³")
    print(f"  Wind          : ({environment.wind.x:+.1f}, {environment.wind.y:+.1f}, "
          f"{environment.wind.z:+.1f}) m/s")
    print(f"  Bullet        : {profile.name}, {profile.mass * 1000:.2f} g, "
          f"Ø{profile.caliber:.2f} mm, BC {profile.ballistic_coefficient}")
    print(f"  Target        : {target.range:.1f} m, {target.altitude_offset:+.2f} m, "
          f"{target.height:.2f} × {target.width:.2f} m")

    section("Launch angle")
    if zero:
        angle = zero_elevation_angle(environment, profile, target,
                                     time_step=settings.time_step, method=settings.method)
        print(f"  Zeroed with drag      : {rad_to_mrad(angle):.3f} mrad")
    elif solve:
        angle = solve_elevation_angle(target.range, target.altitude_offset,
                                      profile.muzzle_velocity, lofted=lofted)
        print(f"  Drag-free solution    : {rad_to_mrad(angle):.3f} mrad")
    else:
        angle = settings.launch_angle
        print(f"  Configured            : {settings.angle:.3f} mrad")

    section("Trajectory")
    result = simulate(environment, profile, angle, target.range,
                      time_step=settings.time_step, method=settings.method,
                      max_drop=settings.max_drop,
                      record_history=plot_dir is not None)
    print(result.summary())

    section("Target")
    assessment = assess_shot(result, target)
    print(f"  {assessment.describe()}")
    print(f"  Drop correction       : {assessment.elevation_adjustment:+.2f} mrad")
    print(f"  Wind correction       : {assessment.windage_adjustment:+.2f} mrad")

    if plot_dir:
        import matplotlib.pyplot as plt
        from ballistic_sim.visualization import (
            ensure_output_dir, plot_trajectory, plot_atmosphere,
        )
        out = ensure_output_dir(plot_dir)
        fig = plot_trajectory(result, target, save_path=f'{out}/trajectory.png')
        plt.close(fig)
        fig = plot_atmosphere(environment, save_path=f'{out}/atmosphere.png')
        plt.close(fig)
        print(f"\n  ✓ Saved: {out}/trajectory.png, {out}/atmosphere.png")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logger.setLevel(logging.DEBUG)
        set_console_level(logging.DEBUG)
    if args.log_file:
        enable_file_logging(args.log_file)

    try:
        settings = settings_from_args(args)
        run(settings, solve=args.solve, zero=args.zero, lofted=args.lofted,
            plot_dir=args.plot)
        if args.validate:
            validate_drag_free(verbose=True)
    except (BallisticsError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
