#!/usr/bin/env python3
"""
sim/vehicle.py
==============
A single simulated vehicle and its lifecycle state machine.

Each vehicle:
  - owns its position / heading / speed and tactical lane
  - reacts each tick to the light of its origin arm and to the vehicle
    directly ahead of it on the same arm
  - follows a :class:`~sim.paths.PathProfile` through the box, then drives
    straight until it leaves the canvas

Lifecycle::

    approaching ──▶ waiting ──▶ crossing ──▶ exiting ──▶ completed
         └──────────────────────▲

Neighbour information reaches a vehicle through a read-only callable that
lists the live vehicles; the vehicle never holds a reference to the fleet.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from sim import physics
from sim.errors import InvalidDirection, InvalidRoute
from sim.geometry import (
    Direction,
    IntersectionGeometry,
    Point,
    TurnType,
    check_lane,
    classify_turn,
    parse_direction,
)
from sim.paths import PathBuilder, PathProfile
from sim.settings import LightStates
from sim.traffic_policy import TrafficPolicy

log = logging.getLogger("vehicle")

# UI colour palette, picked at spawn time by the fleet's random source
VEHICLE_COLORS: Tuple[Tuple[int, int, int], ...] = (
    ( 86, 168, 255),
    (255,  88,  88),
    (100, 226, 170),
    (246, 191,  90),
    (180, 120, 255),
    (255, 160, 100),
)


class VehicleState(str, Enum):
    APPROACHING = "approaching"
    WAITING = "waiting"
    CROSSING = "crossing"
    EXITING = "exiting"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Route:
    """Origin and destination arm; they must differ."""

    origin: Direction
    destination: Direction

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin", parse_direction(self.origin))
        object.__setattr__(self, "destination", parse_direction(self.destination))
        if self.origin is self.destination:
            raise InvalidRoute(f"route {self.origin.value}→{self.destination.value} "
                               "starts and ends on the same arm")

    @property
    def turn(self) -> TurnType:
        return classify_turn(self.origin, self.destination)


@dataclass(frozen=True)
class VehicleSnapshot:
    """Read-only per-tick view of a vehicle for rendering collaborators."""

    id: int
    x: float
    y: float
    heading: float
    speed: float
    lane: int
    state: VehicleState
    origin: Direction
    destination: Direction
    turn: TurnType
    color: Tuple[int, int, int]
    wait_time_ms: float

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id":           self.id,
            "x":            self.x,
            "y":            self.y,
            "heading":      self.heading,
            "speed":        self.speed,
            "lane":         self.lane,
            "state":        self.state.value,
            "origin":       self.origin.value,
            "destination":  self.destination.value,
            "turn":         self.turn.value,
            "color":        self.color,
            "wait_time_ms": self.wait_time_ms,
        }


VehicleSource = Callable[[], Sequence["Vehicle"]]


class Vehicle:
    """
    One vehicle crossing the intersection.

    Parameters
    ----------
    vehicle_id : int
        Unique identifier assigned by the fleet.
    route : Route
        Origin and destination arm.
    geometry : IntersectionGeometry
        Layout used for stop lines, the box footprint and the canvas bounds.
    lane : int
        Starting lane, 0 (left) or 1 (right).
    neighbours : callable or None
        Returns the live vehicles; used only for the car-ahead check.
    policy : TrafficPolicy or None
        Kinematic thresholds; defaults when *None*.
    max_speed : float
        Cruise speed cap in units/s.
    turn_type : TurnType or None
        Overrides the turn derived from *route* for lane tactics only.
    color : tuple
        RGB colour forwarded to the renderer.
    path_builder : PathBuilder or None
        Shared builder; one is created from *geometry* and *policy* when *None*.
    """

    def __init__(
        self,
        vehicle_id: int,
        route: Route,
        geometry: IntersectionGeometry,
        lane: int = 0,
        neighbours: Optional[VehicleSource] = None,
        policy: Optional[TrafficPolicy] = None,
        max_speed: float = 80.0,
        turn_type: Optional[TurnType] = None,
        color: Tuple[int, int, int] = VEHICLE_COLORS[0],
        path_builder: Optional[PathBuilder] = None,
    ) -> None:
        self.id        = vehicle_id
        self.route     = route
        self.lane      = check_lane(lane)
        self.turn_type = turn_type or route.turn
        self.color     = color
        self.max_speed = max_speed
        self.geometry  = geometry
        self.policy    = policy or TrafficPolicy()
        self._neighbours = neighbours or (lambda: ())
        self._paths = path_builder or PathBuilder(geometry, self.policy)

        spawn = geometry.spawn_point(route.origin)
        self.x       = spawn.x
        self.y       = spawn.y
        self.heading = geometry.initial_heading(route.origin)
        self.speed   = 0.0

        self.state: VehicleState = VehicleState.APPROACHING
        self.path: Optional[PathProfile] = None
        self.path_progress: float = 0.0
        self.has_assigned_path: bool = False
        self.in_intersection: bool = geometry.contains(self.x, self.y)
        self.entered_intersection: bool = False
        self.wait_start_ms: Optional[float] = None
        self.wait_time_ms: float = 0.0

        self.target: Point = spawn
        self.calculate_target()

    # ── properties ────────────────────────────────────────────────────────

    @property
    def origin(self) -> Direction:
        return self.route.origin

    @property
    def destination(self) -> Direction:
        return self.route.destination

    @property
    def is_waiting(self) -> bool:
        return self.state is VehicleState.WAITING

    @property
    def is_completed(self) -> bool:
        return self.state is VehicleState.COMPLETED

    # ── targets & lanes ───────────────────────────────────────────────────

    def calculate_target(self) -> None:
        """Resolve the canvas exit target; keep the last valid one on failure."""
        try:
            self.target = self.geometry.exit_target(self.route.destination)
        except (InvalidDirection, KeyError, TypeError) as exc:
            log.warning("vehicle %s: no exit target for %r (%s); keeping %s",
                        self.id, self.route.destination, exc, self.target)

    def prepare_for_turn(self) -> None:
        """Tactical lane: left turners keep left, right turners keep right."""
        if self.turn_type is TurnType.LEFT:
            self.lane = 0
        elif self.turn_type is TurnType.RIGHT:
            self.lane = 1

    def begin_turn_if_needed(self) -> None:
        """Bind the path through the box, once."""
        if self.has_assigned_path:
            return
        self.path = self._paths.build(self.route.origin, self.route.destination, self.lane)
        self.path_progress = 0.0
        self.has_assigned_path = True
        log.debug("vehicle %s bound %s path (%.1f units)",
                  self.id, self.route.turn.value, self.path.total)

    # ── neighbours ────────────────────────────────────────────────────────

    def car_ahead(self) -> Optional[Tuple["Vehicle", float]]:
        """Nearest same-origin vehicle strictly ahead, with its axial distance.

        Linear in the number of live vehicles.
        """
        ux, uy = self.route.origin.inbound_vector
        closest: Optional[Vehicle] = None
        closest_dist = math.inf
        for other in self._neighbours():
            if other.id == self.id or other.route.origin is not self.route.origin:
                continue
            d = physics.axial_distance(self.x, self.y, ux, uy, other.x, other.y)
            if 0 < d < closest_dist:
                closest, closest_dist = other, d
        if closest is None:
            return None
        return closest, closest_dist

    # ── tick ──────────────────────────────────────────────────────────────

    def update(self, delta_ms: float, lights: LightStates, now_ms: float,
               max_speed: Optional[float] = None) -> None:
        """Advance one tick of *delta_ms* milliseconds at simulation time *now_ms*."""
        if self.state is VehicleState.COMPLETED:
            return
        if max_speed is not None:
            self.max_speed = max_speed
        dt = delta_ms / 1000.0

        previous = self.state
        if self.state is VehicleState.APPROACHING:
            self._update_approaching(dt, lights, now_ms)
        elif self.state is VehicleState.WAITING:
            self._update_waiting(lights, now_ms)
        elif self.state is VehicleState.CROSSING:
            self._update_crossing(dt)
        elif self.state is VehicleState.EXITING:
            self._update_exiting()
        if self.state is not previous:
            log.debug("vehicle %s %s → %s", self.id, previous.value, self.state.value)

        self._move(dt)
        self.in_intersection = self.geometry.contains(self.x, self.y)

    def _update_approaching(self, dt: float, lights: LightStates, now_ms: float) -> None:
        self.prepare_for_turn()
        to_stop = self.geometry.distance_to_stop_line(self.route.origin, self.x, self.y)
        ahead = self.car_ahead()
        following = ahead is not None and ahead[1] < self.policy.following_gap

        if to_stop <= self.policy.stop_zone or following:
            if lights.is_red(self.route.origin) or following:
                self.state = VehicleState.WAITING
                self.speed = 0.0
                if not following:
                    self.wait_start_ms = now_ms
                return

        self.speed = physics.accelerate(self.speed, self.policy.approach_accel,
                                        dt, self.max_speed)
        if self.in_intersection:
            self.state = VehicleState.CROSSING
            self.entered_intersection = True
            self.begin_turn_if_needed()

    def _update_waiting(self, lights: LightStates, now_ms: float) -> None:
        self.speed = 0.0
        if self.wait_start_ms is not None:
            self.wait_time_ms = now_ms - self.wait_start_ms
        if lights.allows_entry(self.route.origin):
            self.state = VehicleState.CROSSING
            self.wait_start_ms = None

    def _update_crossing(self, dt: float) -> None:
        cap = self.max_speed * self.policy.crossing_speed_factor
        self.speed = physics.accelerate(self.speed, self.policy.crossing_accel, dt, cap)
        if self.in_intersection:
            if not self.entered_intersection:
                self.entered_intersection = True
                self.begin_turn_if_needed()
        elif self.entered_intersection:
            self.state = VehicleState.EXITING

    def _update_exiting(self) -> None:
        self.prepare_for_turn()
        self.speed = self.max_speed
        if self.geometry.is_beyond_canvas(self.x, self.y, self.policy.exit_margin):
            self.state = VehicleState.COMPLETED

    # ── motion ────────────────────────────────────────────────────────────

    def _move(self, dt: float) -> None:
        step = self.speed * dt
        if self.path is None:
            self.x, self.y = physics.advance(self.x, self.y, self.heading, step)
            return

        prof = self.path
        s_new = prof.total * self.path_progress + step
        if s_new >= prof.total:
            end = prof.end
            self.x, self.y = end.x, end.y
            self.heading = prof.end_heading()
            self.path = None
            self.path_progress = 0.0
            log.debug("vehicle %s finished its path at (%.1f, %.1f)", self.id, self.x, self.y)
            return

        self.x, self.y, self.heading = prof.locate(s_new)
        self.path_progress = s_new / prof.total

    # ── serialisation ─────────────────────────────────────────────────────

    def snapshot(self) -> VehicleSnapshot:
        return VehicleSnapshot(
            id=self.id,
            x=self.x,
            y=self.y,
            heading=self.heading,
            speed=self.speed,
            lane=self.lane,
            state=self.state,
            origin=self.route.origin,
            destination=self.route.destination,
            turn=self.turn_type,
            color=self.color,
            wait_time_ms=self.wait_time_ms,
        )

    def __repr__(self) -> str:
        return (f"Vehicle(id={self.id}, {self.route.origin.value}→"
                f"{self.route.destination.value}, state={self.state.value}, "
                f"x={self.x:.1f}, y={self.y:.1f}, speed={self.speed:.1f})")
