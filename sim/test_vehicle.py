#!/usr/bin/env python3
"""
Tests for the per-vehicle lifecycle state machine and path following.
"""

from __future__ import annotations

import math
import unittest
from typing import List, Optional
from unittest import mock

from sim.errors import InvalidRoute
from sim.geometry import Direction, IntersectionGeometry, Point, TurnType
from sim.settings import LightState, LightStates
from sim.vehicle import Route, Vehicle, VehicleState

N, E, S, W = Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST

RED = LightStates.uniform(LightState.RED)
GREEN = LightStates.uniform(LightState.GREEN)


class VehicleTests(unittest.TestCase):
    def setUp(self) -> None:
        self.geo = IntersectionGeometry()
        self.live: List[Vehicle] = []

    def _vehicle(self, vid: int, origin: Direction, destination: Direction,
                 lane: int = 0, y: Optional[float] = None) -> Vehicle:
        v = Vehicle(vid, Route(origin, destination), self.geo, lane=lane,
                    neighbours=lambda: list(self.live))
        if y is not None:
            v.y = y
        self.live.append(v)
        return v

    def test_initial_state(self) -> None:
        v = self._vehicle(1, N, S)
        self.assertIs(v.state, VehicleState.APPROACHING)
        self.assertEqual((v.x, v.y), (385.0, 0.0))
        self.assertAlmostEqual(v.heading, math.pi / 2)
        self.assertEqual(v.speed, 0.0)
        self.assertIs(v.turn_type, TurnType.STRAIGHT)
        self.assertEqual(v.target, Point(385.0, 800.0))

    def test_same_arm_route_rejected(self) -> None:
        with self.assertRaises(InvalidRoute):
            Route(N, N)

    def test_approach_accelerates_to_cap(self) -> None:
        v = self._vehicle(1, N, S)
        v.max_speed = 40.0
        for _ in range(30):
            v.update(100.0, GREEN, 0.0)
            self.assertLessEqual(v.speed, 40.0)
        self.assertEqual(v.speed, 40.0)
        self.assertGreater(v.y, 0.0)

    def test_red_light_stops_near_stop_line(self) -> None:
        v = self._vehicle(1, N, S, y=320.0)
        v.update(100.0, RED, 100.0)
        self.assertIs(v.state, VehicleState.WAITING)
        self.assertEqual(v.speed, 0.0)
        self.assertEqual(v.wait_start_ms, 100.0)
        for now in (200.0, 300.0, 400.0):
            v.update(100.0, RED, now)
            self.assertIs(v.state, VehicleState.WAITING)
            self.assertEqual(v.speed, 0.0)
            self.assertEqual(v.y, 320.0)

    def test_wait_time_recorded_on_release(self) -> None:
        v = self._vehicle(1, N, S, y=320.0)
        v.update(100.0, RED, 100.0)
        v.update(100.0, RED, 200.0)
        self.assertEqual(v.wait_time_ms, 100.0)
        v.update(100.0, GREEN, 1600.0)
        self.assertIs(v.state, VehicleState.CROSSING)
        self.assertEqual(v.wait_time_ms, 1500.0)
        self.assertIsNone(v.wait_start_ms)

    def test_yellow_also_releases(self) -> None:
        v = self._vehicle(1, N, S, y=320.0)
        v.update(100.0, RED, 100.0)
        lights = LightStates.of({"N": "YELLOW", "E": "RED", "S": "RED", "W": "RED"})
        v.update(100.0, lights, 200.0)
        self.assertIs(v.state, VehicleState.CROSSING)

    def test_far_from_stop_line_ignores_red(self) -> None:
        v = self._vehicle(1, N, S, y=100.0)
        v.update(100.0, RED, 100.0)
        self.assertIs(v.state, VehicleState.APPROACHING)
        self.assertGreater(v.speed, 0.0)

    def test_close_follower_stops_even_on_green(self) -> None:
        leader = self._vehicle(1, N, S, y=200.0)
        follower = self._vehicle(2, N, S, y=180.0)
        found = follower.car_ahead()
        self.assertIsNotNone(found)
        self.assertIs(found[0], leader)
        self.assertEqual(found[1], 20.0)
        self.assertIsNone(leader.car_ahead())

        follower.update(100.0, GREEN, 100.0)
        self.assertIs(follower.state, VehicleState.WAITING)
        self.assertEqual(follower.speed, 0.0)
        self.assertIsNone(follower.wait_start_ms)

    def test_car_ahead_picks_nearest_same_origin(self) -> None:
        me = self._vehicle(1, N, S, y=100.0)
        far = self._vehicle(2, N, S, y=250.0)
        near = self._vehicle(3, N, E, lane=1, y=150.0)
        other_arm = Vehicle(4, Route(E, W), self.geo)
        other_arm.x, other_arm.y = 385.0, 110.0
        self.live.append(other_arm)
        found = me.car_ahead()
        self.assertIs(found[0], near)
        self.assertEqual(found[1], 50.0)
        self.assertIsNotNone(far)

    def test_enters_box_and_binds_path(self) -> None:
        v = self._vehicle(1, N, S, y=345.0)
        v.update(100.0, GREEN, 100.0)
        self.assertIs(v.state, VehicleState.APPROACHING)
        self.assertTrue(v.in_intersection)
        v.update(100.0, GREEN, 200.0)
        self.assertIs(v.state, VehicleState.CROSSING)
        self.assertTrue(v.has_assigned_path)
        self.assertIsNotNone(v.path)
        self.assertEqual(v.path.start, self.geo.entry_point(N, 0))
        self.assertEqual(v.path.end, self.geo.exit_point(S, 0))
        self.assertGreater(v.path_progress, 0.0)
        self.assertLess(v.path_progress, 1.0)

    def test_released_vehicle_binds_path_when_it_reaches_the_box(self) -> None:
        v = self._vehicle(1, N, E, lane=1, y=320.0)
        v.update(100.0, RED, 100.0)
        v.update(100.0, GREEN, 200.0)
        self.assertIs(v.state, VehicleState.CROSSING)
        self.assertIsNone(v.path)
        for i in range(40):
            v.update(50.0, GREEN, 250.0 + 50.0 * i)
            if v.has_assigned_path:
                break
        self.assertTrue(v.has_assigned_path)
        self.assertIn(v.state, (VehicleState.CROSSING, VehicleState.EXITING))

    def test_path_completion_snaps_to_last_point(self) -> None:
        v = self._vehicle(1, N, E, lane=1)
        v.state = VehicleState.CROSSING
        v.entered_intersection = True
        v.begin_turn_if_needed()
        profile = v.path
        v.x, v.y = profile.start
        v.in_intersection = True
        v.speed = 96.0
        v.update(2000.0, GREEN, 2000.0)
        self.assertIsNone(v.path)
        self.assertEqual(v.path_progress, 0.0)
        self.assertEqual((v.x, v.y), tuple(profile.end))
        self.assertEqual((v.x, v.y), tuple(self.geo.exit_point(E, 1)))
        self.assertEqual(v.heading, profile.end_heading())

    def test_progress_stays_in_unit_interval(self) -> None:
        v = self._vehicle(1, W, S, lane=0)
        v.state = VehicleState.CROSSING
        v.entered_intersection = True
        v.begin_turn_if_needed()
        v.in_intersection = True
        v.speed = 10.0
        cap = v.max_speed * v.policy.crossing_speed_factor
        for i in range(200):
            v.update(20.0, GREEN, 20.0 * i)
            self.assertGreaterEqual(v.path_progress, 0.0)
            self.assertLessEqual(v.path_progress, 1.0)
            if v.state is VehicleState.CROSSING:
                self.assertLessEqual(v.speed, cap)
        self.assertIsNone(v.path)

    def test_crossing_leaves_box_then_exits(self) -> None:
        v = self._vehicle(1, N, S, lane=0)
        v.state = VehicleState.CROSSING
        v.entered_intersection = True
        v.x, v.y = 385.0, 470.0
        v.in_intersection = False
        v.update(20.0, GREEN, 20.0)
        self.assertIs(v.state, VehicleState.EXITING)

    def test_exiting_completes_beyond_canvas(self) -> None:
        v = self._vehicle(1, N, S, lane=0)
        v.state = VehicleState.EXITING
        v.x, v.y = 385.0, 840.0
        v.update(20.0, GREEN, 20.0)
        self.assertIs(v.state, VehicleState.EXITING)
        self.assertEqual(v.speed, v.max_speed)
        v.y = 860.0
        v.update(20.0, GREEN, 40.0)
        self.assertTrue(v.is_completed)
        y = v.y
        v.update(20.0, GREEN, 60.0)
        self.assertEqual(v.y, y)

    def test_lane_tactics(self) -> None:
        left = self._vehicle(1, N, W, lane=1)
        right = self._vehicle(2, E, S, lane=0)
        straight = self._vehicle(3, S, N, lane=1)
        for v in (left, right, straight):
            v.update(16.0, GREEN, 16.0)
        self.assertEqual(left.lane, 0)
        self.assertEqual(right.lane, 1)
        self.assertEqual(straight.lane, 1)
        self.assertIs(left.turn_type, TurnType.LEFT)

    def test_lane_tactics_reapplied_while_exiting(self) -> None:
        left = self._vehicle(1, N, W, lane=0)
        right = self._vehicle(2, E, S, lane=1)
        for v, wrong in ((left, 1), (right, 0)):
            v.state = VehicleState.EXITING
            v.x, v.y = 300.0, 300.0
            v.lane = wrong
            v.update(16.0, GREEN, 16.0)
            self.assertIs(v.state, VehicleState.EXITING)
        self.assertEqual(left.lane, 0)
        self.assertEqual(right.lane, 1)

    def test_turn_type_override_drives_lane_tactics(self) -> None:
        v = Vehicle(1, Route(N, S), self.geo, lane=0, turn_type=TurnType.RIGHT)
        self.assertIs(v.route.turn, TurnType.STRAIGHT)
        self.assertIs(v.turn_type, TurnType.RIGHT)
        v.update(16.0, GREEN, 16.0)
        self.assertEqual(v.lane, 1)
        self.assertIs(v.snapshot().turn, TurnType.RIGHT)
        self.assertEqual(v.snapshot().as_dict()["turn"], "RIGHT")

    def test_unresolvable_target_keeps_last_value(self) -> None:
        v = self._vehicle(1, N, S)
        before = v.target
        with mock.patch.object(IntersectionGeometry, "exit_target",
                               side_effect=KeyError("S")):
            with self.assertLogs("vehicle", level="WARNING"):
                v.calculate_target()
        self.assertEqual(v.target, before)

    def test_snapshot(self) -> None:
        v = self._vehicle(7, S, E, lane=0)
        snap = v.snapshot().as_dict()
        self.assertEqual(snap["id"], 7)
        self.assertEqual(snap["state"], "approaching")
        self.assertEqual(snap["origin"], "S")
        self.assertEqual(snap["turn"], "LEFT")


if __name__ == "__main__":
    unittest.main()
