"""
Tests for the Integrator, Elevation Solver and Target Assessment
================================================================
Run: python -m pytest tests/ -v
"""

import sys
import os
import math
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ballistic_sim.atmosphere import Environment
from ballistic_sim.conversions import GRAVITY
from ballistic_sim.elevation import solve_elevation_angle, zero_elevation_angle
from ballistic_sim.exceptions import (
    ConfigurationError, DomainError, NoSolutionError, UnreachableError,
)
from ballistic_sim.integrator import simulate, DEFAULT_STALL_TICKS
from ballistic_sim.projectile import ProjectileProfile, NEGLIGIBLE_DRAG_BC
from ballistic_sim.target import Target, assess_shot, correction_mrad
from ballistic_sim.validation import validate_drag_free
from ballistic_sim.vector import Vector3, ZERO


def drag_free(v0):
    return ProjectileProfile(ballistic_coefficient=NEGLIGIBLE_DRAG_BC,
                             muzzle_velocity=v0, name="drag-free")


class TestElevationSolver:
    """Closed-form launch angle."""

    def test_zero_range_is_zero_angle(self):
        assert solve_elevation_angle(0.0, 5.0, 100.0) == 0.0

    def test_unreachable_target(self):
        with pytest.raises(NoSolutionError):
            solve_elevation_angle(10000.0, 0.0, 50.0)

    def test_unreachable_is_domain_error(self):
        with pytest.raises(DomainError):
            solve_elevation_angle(100.0, 1.0e6, 100.0)

    def test_zero_speed_cannot_reach(self):
        with pytest.raises(NoSolutionError):
            solve_elevation_angle(100.0, 0.0, 0.0)

    def test_lofted_arc_preferred(self):
        high = solve_elevation_angle(100.0, 0.0, 1005.0)
        low = solve_elevation_angle(100.0, 0.0, 1005.0, lofted=False)
        assert high > math.pi / 4 > low
        assert abs(high + low - math.pi / 2) < 1e-9

    def test_flat_arc_matches_range_equation(self):
        low = solve_elevation_angle(100.0, 0.0, 1005.0, lofted=False)
        expected = 0.5 * math.asin(GRAVITY * 100.0 / 1005.0 ** 2)
        assert abs(low - expected) < 1e-6 * expected

    def test_maximum_range_single_arc(self):
        r_max = 100.0 ** 2 / GRAVITY
        angle = solve_elevation_angle(r_max, 0.0, 100.0)
        assert abs(angle - math.pi / 4) < 1e-6

    def test_invalid_input(self):
        with pytest.raises(ConfigurationError):
            solve_elevation_angle(-1.0, 0.0, 100.0)
        with pytest.raises(ConfigurationError):
            solve_elevation_angle(100.0, 0.0, -5.0)


class TestIntegrator:
    """Fixed-step trajectory integration."""

    def test_round_trip_lofted(self):
        """The solved angle lands the drag-free projectile at the target height."""
        angle = solve_elevation_angle(500.0, 0.0, 100.0)
        result = simulate(Environment(), drag_free(100.0), angle, 500.0, time_step=1e-3)
        crossing = result.crossing()
        assert result.position.x >= 500.0
        assert abs(crossing.position.x - 500.0) < 1e-9
        assert abs(crossing.position.z) < 1e-3
        assert abs(crossing.time - 2 * 100.0 * math.sin(angle) / GRAVITY) < 1e-3

    def test_round_trip_flat_with_altitude(self):
        angle = solve_elevation_angle(300.0, 10.0, 200.0, lofted=False)
        result = simulate(Environment(), drag_free(200.0), angle, 300.0, time_step=1e-3)
        assert abs(result.crossing().position.z - 10.0) < 1e-3

    def test_apex_matches_projectile_motion(self):
        v0, theta = 300.0, math.radians(30.0)
        r = v0 ** 2 * math.sin(2 * theta) / GRAVITY
        apex = (v0 * math.sin(theta)) ** 2 / (2 * GRAVITY)
        rk4 = simulate(Environment(), drag_free(v0), theta, r, time_step=1e-3)
        euler = simulate(Environment(), drag_free(v0), theta, r, time_step=1e-3,
                         method='euler')
        assert abs(rk4.max_altitude - apex) < 1e-3
        assert abs(euler.max_altitude - apex) < 1e-3 * apex
        assert abs(rk4.max_altitude - apex) < abs(euler.max_altitude - apex)

    def test_zero_muzzle_velocity_unreachable(self):
        for profile in (ProjectileProfile(muzzle_velocity=0.0), drag_free(0.0)):
            with pytest.raises(UnreachableError) as info:
                simulate(Environment(), profile, 0.0, 100.0, time_step=1e-3)
            assert info.value.reason == UnreachableError.NO_PROGRESS
            assert info.value.partial.ticks == DEFAULT_STALL_TICKS
            assert info.value.partial.position.x == 0.0

    def test_stall_budget(self):
        with pytest.raises(UnreachableError) as info:
            simulate(Environment(), drag_free(0.0), 0.0, 100.0, time_step=1e-3,
                     stall_ticks=5)
        assert info.value.partial.ticks == 5

    def test_tick_budget(self):
        with pytest.raises(UnreachableError) as info:
            simulate(Environment(), drag_free(100.0), 0.0, 1000.0, time_step=1e-3,
                     max_ticks=10)
        assert info.value.reason == UnreachableError.MAX_TICKS
        assert info.value.partial.ticks == 10
        assert info.value.last_distance == info.value.partial.position.x

    def test_maximum_drop(self):
        with pytest.raises(UnreachableError) as info:
            simulate(Environment(), drag_free(50.0), 0.0, 10000.0, time_step=1e-3,
                     max_drop=100.0)
        assert info.value.reason == UnreachableError.MAXIMUM_DROP
        assert info.value.partial.position.z < -100.0
        assert info.value.partial.position.x < 10000.0

    def test_configuration_errors(self):
        env, prof = Environment(), ProjectileProfile()
        for dt in (0.0, -1e-3, float('nan')):
            with pytest.raises(ConfigurationError):
                simulate(env, prof, 0.0, 100.0, time_step=dt)
        with pytest.raises(ConfigurationError):
            simulate(env, prof, 0.0, -1.0)
        with pytest.raises(ConfigurationError):
            simulate(env, prof, 0.0, 100.0, method='verlet')
        with pytest.raises(ConfigurationError):
            simulate(env, prof, 0.0, 100.0, max_drop=0.0)

    def test_zero_range_terminates_immediately(self):
        result = simulate(Environment(), ProjectileProfile(), 0.0, 0.0)
        assert result.ticks == 0
        assert result.position == ZERO
        assert result.crossing().time == 0.0

    def test_drag_slows_bullet(self):
        result = simulate(Environment(), ProjectileProfile(), 0.0, 100.0)
        crossing = result.crossing()
        assert 700.0 < crossing.velocity.magnitude() < 850.0
        assert 0.09 < crossing.time < 0.14
        assert -0.1 < crossing.position.z < -0.04
        assert result.max_altitude == 0.0

    def test_crosswind_drift(self):
        wind = Environment(wind=Vector3(0.0, 5.0, 0.0))
        result = simulate(wind, ProjectileProfile(), 0.0, 300.0)
        assert result.drift > 0.0
        still = simulate(Environment(), ProjectileProfile(), 0.0, 300.0)
        assert still.drift == 0.0

    def test_headwind_costs_speed(self):
        head = simulate(Environment(wind=Vector3(-10.0, 0.0, 0.0)),
                        ProjectileProfile(), 0.0, 300.0)
        tail = simulate(Environment(wind=Vector3(10.0, 0.0, 0.0)),
                        ProjectileProfile(), 0.0, 300.0)
        assert head.crossing().velocity.x < tail.crossing().velocity.x

    def test_history(self):
        result = simulate(Environment(), ProjectileProfile(), 0.0, 100.0)
        assert len(result.x) == result.ticks + 1
        assert result.x[0] == 0.0 and result.x[-1] == result.position.x
        assert result.speed[0] == pytest.approx(1005.0)
        bare = simulate(Environment(), ProjectileProfile(), 0.0, 100.0,
                        record_history=False)
        assert bare.x.size == 0
        assert bare.density_history.size == 0
        assert bare.position == result.position

    def test_result_record(self):
        env = Environment()
        result = simulate(env, ProjectileProfile(), 0.05, 100.0, time_step=1e-3)
        assert len(result.density_history) == result.ticks + 1
        assert result.density_history[0] == env.density
        # climbing into thinner air
        assert result.density_history[-1] < result.density_history[0]
        assert result.speed_final == result.velocity.magnitude()
        with pytest.raises(AttributeError):
            result.ticks = 0
        free = simulate(env, drag_free(300.0), 0.1, 100.0, time_step=1e-3)
        assert all(math.isnan(rho) for rho in free.density_history)

    def test_deterministic(self):
        a = simulate(Environment(), ProjectileProfile(), 0.001, 200.0)
        b = simulate(Environment(), ProjectileProfile(), 0.001, 200.0)
        assert a.position == b.position
        assert a.ticks == b.ticks
        assert a.time == b.time

    def test_summary(self):
        text = simulate(Environment(), ProjectileProfile(), 0.0, 100.0).summary()
        assert 'TRAJECTORY SUMMARY' in text
        assert 'RK4' in text


class TestZeroing:
    """Drag-aware elevation search."""

    def test_zero_hits_target_height(self):
        env, prof = Environment(), ProjectileProfile()
        for target in (Target(range=300.0), Target(range=300.0, altitude_offset=5.0)):
            angle = zero_elevation_angle(env, prof, target, time_step=1e-3)
            result = simulate(env, prof, angle, target.range, time_step=1e-3)
            assert abs(result.crossing().position.z - target.altitude_offset) < 1e-4

    def test_drag_needs_more_elevation(self):
        target = Target(range=300.0)
        angle = zero_elevation_angle(Environment(), ProjectileProfile(), target,
                                     time_step=1e-3)
        flat = solve_elevation_angle(300.0, 0.0, 1005.0, lofted=False)
        assert angle > flat

    def test_drag_free_zero_is_analytic(self):
        target = Target(range=300.0)
        angle = zero_elevation_angle(Environment(), drag_free(300.0), target,
                                     time_step=1e-3)
        flat = solve_elevation_angle(300.0, 0.0, 300.0, lofted=False)
        assert abs(angle - flat) < 1e-7

    def test_zero_with_tight_drop_limit(self):
        # the drag-free seed falls past max_drop; the zero still exists
        env, prof, target = Environment(), ProjectileProfile(), Target(range=300.0)
        loose = zero_elevation_angle(env, prof, target, time_step=1e-3)
        tight = zero_elevation_angle(env, prof, target, time_step=1e-3, max_drop=0.01)
        assert abs(tight - loose) < 1e-7
        result = simulate(env, prof, tight, target.range, time_step=1e-3, max_drop=0.01)
        assert abs(result.crossing().position.z) < 1e-4

    def test_zero_out_of_reach(self):
        with pytest.raises(NoSolutionError):
            zero_elevation_angle(Environment(), ProjectileProfile(muzzle_velocity=50.0),
                                 Target(range=10000.0))


class TestTarget:
    """Hit classification and scope adjustments."""

    def test_correction(self):
        assert abs(correction_mrad(0.1, 100.0) + 1.0) < 1e-5
        assert correction_mrad(0.1, 0.0) == 0.0

    def test_centred_shot(self):
        target = Target(range=100.0)
        angle = solve_elevation_angle(100.0, 0.0, 1005.0, lofted=False)
        result = simulate(Environment(), drag_free(1005.0), angle, 100.0)
        shot = assess_shot(result, target)
        assert shot.hit
        assert abs(shot.elevation_adjustment) < 0.01
        assert abs(shot.windage_adjustment) < 1e-9

    def test_drop_needs_elevation(self):
        result = simulate(Environment(), ProjectileProfile(), 0.0, 100.0)
        shot = assess_shot(result, Target(range=100.0))
        assert shot.hit
        assert shot.vertical_miss < 0
        assert 0.3 < shot.elevation_adjustment < 1.0
        assert 'HIT' in shot.describe()

    def test_miss_high_target(self):
        result = simulate(Environment(), ProjectileProfile(), 0.0, 100.0)
        shot = assess_shot(result, Target(range=100.0, altitude_offset=2.0))
        assert not shot.hit
        assert shot.elevation_adjustment > 19.0
        assert 'MISS' in shot.describe()

    def test_windage(self):
        result = simulate(Environment(wind=Vector3(0.0, 5.0, 0.0)),
                          ProjectileProfile(), 0.0, 300.0)
        shot = assess_shot(result, Target(range=300.0, altitude_offset=-1.0))
        assert shot.lateral_miss > 0
        assert shot.windage_adjustment < 0

    def test_invalid_target(self):
        with pytest.raises(ConfigurationError):
            Target(height=0.0)
        with pytest.raises(ConfigurationError):
            Target(range=-5.0)


class TestValidation:
    """Integrator against closed-form ballistics."""

    def test_drag_free_table(self):
        rows = validate_drag_free(muzzle_speed=100.0, time_step=1e-3, verbose=False)
        assert len(rows) == 5
        for row in rows:
            assert abs(row.landing_height) < 1e-3
            assert abs(row.alt_error_pct) < 0.01
            assert abs(row.tof_error_pct) < 0.01
            assert row.solver_error_deg < 1e-4

    def test_report(self, capsys):
        validate_drag_free(muzzle_speed=100.0, elevations_deg=(30.0,), verbose=True)
        out = capsys.readouterr().out
        assert 'VALIDATION' in out
        assert 'PASS' in out


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
