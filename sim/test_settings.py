#!/usr/bin/env python3
"""
Tests for the validated light / settings records and the tuning policy.
"""

from __future__ import annotations

import unittest

from pydantic import ValidationError

from sim.errors import ConfigurationError
from sim.geometry import Direction
from sim.settings import LightState, LightStates, SimulationSettings
from sim.traffic_policy import TrafficPolicy


class LightStatesTests(unittest.TestCase):
    def test_loose_mapping_is_normalised(self) -> None:
        lights = LightStates.of({"n": "green", "East": "YELLOW", "S": LightState.RED, "W": "red"})
        self.assertIs(lights.for_direction(Direction.NORTH), LightState.GREEN)
        self.assertIs(lights.for_direction("E"), LightState.YELLOW)
        self.assertTrue(lights.is_red("S"))
        self.assertTrue(lights.allows_entry("N"))
        self.assertTrue(lights.allows_entry("E"))
        self.assertFalse(lights.allows_entry("W"))

    def test_missing_direction_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            LightStates.of({"N": "GREEN", "E": "RED", "S": "RED"})

    def test_unknown_colour_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            LightStates.of({"N": "BLUE", "E": "RED", "S": "RED", "W": "RED"})

    def test_frozen(self) -> None:
        lights = LightStates.uniform(LightState.RED)
        with self.assertRaises(ValidationError):
            lights.states = {}


class SimulationSettingsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        s = SimulationSettings()
        self.assertEqual(s.max_speed, 80.0)
        self.assertEqual(s.spawn_rate_per_ten_seconds, 5.0)
        self.assertEqual(s.spawn_interval_ms, 2000.0)

    def test_rejects_non_positive(self) -> None:
        with self.assertRaises(ValidationError):
            SimulationSettings(max_speed=0)
        with self.assertRaises(ValidationError):
            SimulationSettings(spawn_rate_per_ten_seconds=-1)


class TrafficPolicyTests(unittest.TestCase):
    def test_defaults(self) -> None:
        p = TrafficPolicy()
        self.assertEqual((p.stop_zone, p.following_gap, p.spawn_clearance), (30.0, 35.0, 60.0))
        self.assertEqual(p.path_steps, 28)

    def test_rejects_non_positive(self) -> None:
        with self.assertRaises(ConfigurationError):
            TrafficPolicy(following_gap=0.0)
        with self.assertRaises(ConfigurationError):
            TrafficPolicy(path_steps=-2)


if __name__ == "__main__":
    unittest.main()
