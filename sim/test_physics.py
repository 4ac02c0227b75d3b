#!/usr/bin/env python3
"""
Tests for the low-level kinematic helpers.
"""

from __future__ import annotations

import math
import unittest

from sim import physics


class PhysicsTests(unittest.TestCase):
    def test_distances(self) -> None:
        self.assertEqual(physics.distance(0.0, 0.0, 3.0, 4.0), 5.0)
        self.assertEqual(physics.squared_distance(0.0, 0.0, 3.0, 4.0), 25.0)
        self.assertEqual(physics.squared_distance(1.0, 1.0, 1.0, 1.0), 0.0)

    def test_heading_between_uses_screen_axes(self) -> None:
        self.assertAlmostEqual(physics.heading_between(0.0, 0.0, 1.0, 0.0), 0.0)
        self.assertAlmostEqual(physics.heading_between(0.0, 0.0, 0.0, 1.0), math.pi / 2)
        self.assertAlmostEqual(physics.heading_between(0.0, 0.0, -1.0, 0.0), math.pi)

    def test_advance(self) -> None:
        x, y = physics.advance(10.0, 10.0, math.pi / 2, 5.0)
        self.assertAlmostEqual(x, 10.0)
        self.assertAlmostEqual(y, 15.0)

    def test_accelerate_caps(self) -> None:
        self.assertEqual(physics.accelerate(0.0, 30.0, 0.5, 80.0), 15.0)
        self.assertEqual(physics.accelerate(75.0, 30.0, 0.5, 80.0), 80.0)

    def test_axial_distance_sign(self) -> None:
        self.assertEqual(physics.axial_distance(0.0, 0.0, 0.0, 1.0, 3.0, 20.0), 20.0)
        self.assertEqual(physics.axial_distance(0.0, 0.0, 0.0, 1.0, 0.0, -5.0), -5.0)


if __name__ == "__main__":
    unittest.main()
