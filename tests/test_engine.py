"""Tests for the variety engine: initialization, integration and bounds."""

import math
import unittest

import numpy as np

from variety_sim3d.core.engine import Particle, VarietyEngine
from variety_sim3d.params import VarietyParams


def make_engine(**overrides) -> VarietyEngine:
    params = VarietyParams(**overrides).clamp()
    return VarietyEngine(params)


class TestReinitialize(unittest.TestCase):
    def test_initial_layout(self) -> None:
        engine = make_engine(body_count=20, seed=3)
        self.assertEqual(len(engine.particles), 20)
        for i, pt in enumerate(engine.particles):
            self.assertEqual(pt.index, i)
            self.assertTrue(all(-8.0 <= c <= 8.0 for c in pt.position))
            self.assertEqual(pt.velocity, (0.0, 0.0, 0.0))
        self.assertAlmostEqual(engine.theoretical_minimum, 190.0 ** 1.5, places=6)

    def test_seed_reproducible(self) -> None:
        a = make_engine(body_count=6, seed=11)
        b = make_engine(body_count=6, seed=11)
        self.assertTrue(np.array_equal(a.positions(), b.positions()))

    def test_reinitialize_replaces_particles(self) -> None:
        engine = make_engine(body_count=4)
        engine.step()
        engine.reinitialize(9)
        self.assertEqual(len(engine.particles), 9)
        self.assertEqual(engine.params.body_count, 9)
        self.assertAlmostEqual(engine.theoretical_minimum, 36.0 ** 1.5, places=6)
        self.assertTrue(all(pt.velocity == (0.0, 0.0, 0.0) for pt in engine.particles))

    def test_single_body(self) -> None:
        engine = make_engine(body_count=1)
        self.assertEqual(engine.theoretical_minimum, 0.0)
        variety, grad = engine.compute_variety_and_gradient()
        self.assertEqual(variety, 0.0)
        self.assertTrue(np.all(grad == 0.0))
        engine.step()
        self.assertEqual(engine.variety, 0.0)


class TestStep(unittest.TestCase):
    def test_compute_is_pure(self) -> None:
        engine = make_engine(body_count=5)
        before = engine.positions()
        v1, g1 = engine.compute_variety_and_gradient()
        v2, g2 = engine.compute_variety_and_gradient()
        self.assertEqual(v1, v2)
        self.assertTrue(np.array_equal(g1, g2))
        self.assertTrue(np.array_equal(before, engine.positions()))

    def test_step_integrates_damped_velocity(self) -> None:
        engine = make_engine(body_count=3, learning_rate=0.01, seed=5)
        for pt in engine.particles:
            pt.vx, pt.vy, pt.vz = 0.2, -0.1, 0.05
        pos0 = engine.positions()
        vel0 = engine.velocities()
        _variety, grad = engine.compute_variety_and_gradient()

        engine.step()

        expected_vel = vel0 * 0.9 + grad * 0.01
        self.assertTrue(np.allclose(engine.velocities(), expected_vel, atol=1e-12))
        self.assertTrue(np.allclose(engine.positions(), pos0 + expected_vel, atol=1e-12))

    def test_step_records_variety_before_update(self) -> None:
        engine = make_engine(body_count=4)
        expected, _grad = engine.compute_variety_and_gradient()
        returned = engine.step()
        self.assertEqual(returned, expected)
        self.assertEqual(engine.variety, expected)
        self.assertEqual(engine.step_count, 1)

    def test_excluded_particle_untouched(self) -> None:
        engine = make_engine(body_count=3, seed=2)
        engine.particles[1].vx = 0.3
        frozen = (engine.particles[1].position, engine.particles[1].velocity)
        others = [engine.particles[0].position, engine.particles[2].position]

        engine.step(exclude_index=1)

        self.assertEqual((engine.particles[1].position, engine.particles[1].velocity), frozen)
        self.assertNotEqual(engine.particles[0].position, others[0])
        self.assertNotEqual(engine.particles[2].position, others[1])

    def test_bad_exclude_index_raises(self) -> None:
        engine = make_engine(body_count=3)
        with self.assertRaises(IndexError):
            engine.step(exclude_index=3)
        with self.assertRaises(IndexError):
            engine.step(exclude_index=-1)


class TestBounds(unittest.TestCase):
    def test_reflection_on_positive_wall(self) -> None:
        engine = make_engine(body_count=1)
        pt = engine.particles[0]
        pt.x, pt.y, pt.z = 9.5, 0.0, 0.0
        pt.vx, pt.vy, pt.vz = 1.0, 0.0, 0.0

        engine.step()

        # pre-clamp velocity is 0.9 (damped), pre-clamp x would be 10.4
        self.assertEqual(pt.x, 10.0)
        self.assertAlmostEqual(pt.vx, -0.45, places=12)

    def test_reflection_on_negative_wall_per_axis(self) -> None:
        engine = make_engine(body_count=1)
        pt = engine.particles[0]
        pt.x, pt.y, pt.z = 0.0, -9.9, 3.0
        pt.vx, pt.vy, pt.vz = 0.5, -2.0, 0.0

        engine.step()

        self.assertEqual(pt.y, -10.0)
        self.assertAlmostEqual(pt.vy, 0.9, places=12)
        self.assertAlmostEqual(pt.x, 0.45, places=12)
        self.assertAlmostEqual(pt.vx, 0.45, places=12)

    def test_validate_state(self) -> None:
        engine = make_engine(body_count=2)
        self.assertEqual(engine.validate_state(), [])
        engine.particles[0].x = float("nan")
        engine.particles[1].y = 12.0
        issues = engine.validate_state()
        self.assertTrue(any("non-finite" in issue for issue in issues))
        self.assertTrue(any("out of box" in issue for issue in issues))


class TestDrag(unittest.TestCase):
    def test_set_drag_position_zeroes_velocity(self) -> None:
        engine = make_engine(body_count=3)
        engine.particles[2].vx = 1.0
        engine.set_drag_position(2, (1.0, -2.0, 3.0))
        self.assertEqual(engine.particles[2].position, (1.0, -2.0, 3.0))
        self.assertEqual(engine.particles[2].velocity, (0.0, 0.0, 0.0))

    def test_set_drag_position_bad_index(self) -> None:
        engine = make_engine(body_count=3)
        with self.assertRaises(IndexError):
            engine.set_drag_position(5, (0.0, 0.0, 0.0))


class TestConvergence(unittest.TestCase):
    def test_variety_decreases_over_run(self) -> None:
        engine = make_engine(body_count=8, learning_rate=0.05, seed=1)
        engine.step()
        after_one = engine.variety
        for _ in range(99):
            engine.step()
        after_hundred = engine.variety

        self.assertLess(after_hundred, after_one)
        self.assertGreaterEqual(after_hundred, engine.theoretical_minimum - 1e-9)
        self.assertEqual(engine.validate_state(), [])

    def test_particle_dataclass(self) -> None:
        pt = Particle(index=0, x=1.0, y=2.0, z=3.0)
        self.assertEqual(pt.position, (1.0, 2.0, 3.0))
        self.assertTrue(math.isclose(sum(pt.velocity), 0.0))


if __name__ == "__main__":
    unittest.main()
