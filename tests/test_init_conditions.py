"""Tests for initial condition generation."""

import random
import unittest

from variety_sim3d.core.init_conditions import create_from_params, create_uniform_distribution
from variety_sim3d.params import VarietyParams


class TestUniformInitialization(unittest.TestCase):
    """Tests for the uniform cube layout."""

    def test_particle_count(self) -> None:
        particles = create_uniform_distribution(random.Random(1), 50)
        self.assertEqual(len(particles), 50)

    def test_inside_cube_and_at_rest(self) -> None:
        particles = create_uniform_distribution(random.Random(2), 200, half_extent=8.0)
        for p in particles:
            self.assertTrue(-8.0 <= p.x <= 8.0)
            self.assertTrue(-8.0 <= p.y <= 8.0)
            self.assertTrue(-8.0 <= p.z <= 8.0)
            self.assertEqual((p.vx, p.vy, p.vz), (0.0, 0.0, 0.0))

    def test_spread_covers_cube(self) -> None:
        """A large sample should reach close to every face."""
        particles = create_uniform_distribution(random.Random(3), 2000, half_extent=8.0)
        xs = [p.x for p in particles]
        self.assertLess(min(xs), -7.5)
        self.assertGreater(max(xs), 7.5)

    def test_same_seed_same_layout(self) -> None:
        a = create_uniform_distribution(random.Random(9), 10)
        b = create_uniform_distribution(random.Random(9), 10)
        self.assertEqual(a, b)

    def test_from_params(self) -> None:
        params = VarietyParams(body_count=7, init_half_extent=2.0).clamp()
        particles = create_from_params(params, random.Random(0))
        self.assertEqual(len(particles), 7)
        self.assertTrue(all(abs(p.x) <= 2.0 for p in particles))


if __name__ == "__main__":
    unittest.main()
