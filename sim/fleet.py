#!/usr/bin/env python3
"""
sim/fleet.py
============
Population manager for the live vehicles of one intersection.

:class:`FleetManager` owns the vehicles and runs the per-tick pass:

1. accumulate the spawn timer and attempt one spawn when it fires,
2. update every live vehicle, in spawn order, against one light snapshot,
3. sweep completed vehicles, raising one :class:`CompletionEvent` each.

Spawns are applied before the update pass and removals after it, so the
collection is never mutated while it is being iterated.  Vehicles spawned
earlier are updated first, which means a later vehicle's car-ahead check sees
their positions for the current tick.

The car-ahead check is linear per vehicle, i.e. quadratic per tick; that is
fine for the handful of vehicles a single intersection holds.  Each fleet is
self-contained, so several intersections can be ticked independently.
"""

from __future__ import annotations

import logging
import functools
import random
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from sim import physics
from sim.geometry import (
    DIRECTIONS,
    Direction,
    IntersectionGeometry,
    TurnType,
    check_lane,
    parse_direction,
)
from sim.paths import PathBuilder
from sim.settings import LightStates, SimulationSettings
from sim.traffic_policy import TrafficPolicy
from sim.vehicle import VEHICLE_COLORS, Route, Vehicle, VehicleSnapshot

log = logging.getLogger("fleet")


@dataclass(frozen=True)
class CompletionEvent:
    """Raised once per vehicle in the tick it completes."""

    vehicle_id: int
    wait_time_ms: float
    route: Route

    def as_dict(self) -> Dict[str, Any]:
        return {
            "vehicle_id": self.vehicle_id,
            "wait_time_ms": self.wait_time_ms,
            "origin": self.route.origin.value,
            "destination": self.route.destination.value,
        }


CompletionCallback = Callable[[CompletionEvent], None]


class FleetManager:
    """Spawns, advances and retires the vehicles of one intersection.

    Parameters
    ----------
    geometry : IntersectionGeometry
        Intersection layout shared by every vehicle.
    settings : SimulationSettings or None
        Speed cap and spawn rate; defaults when *None*.
    policy : TrafficPolicy or None
        Fixed thresholds; defaults when *None*.
    rng : random.Random or None
        Source for origin, destination, lane and colour picks.
    seed : int or None
        Seed for a private :class:`random.Random` when *rng* is not given.
    on_vehicle_completed : callable or None
        Invoked with each :class:`CompletionEvent`.
    """

    def __init__(
        self,
        geometry: IntersectionGeometry,
        settings: Optional[SimulationSettings] = None,
        policy: Optional[TrafficPolicy] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        on_vehicle_completed: Optional[CompletionCallback] = None,
    ) -> None:
        self.geometry = geometry
        self.settings = settings or SimulationSettings()
        self.policy = policy or TrafficPolicy()
        self._rng = rng or random.Random(seed)
        self.on_vehicle_completed = on_vehicle_completed
        self._paths = PathBuilder(geometry, self.policy)
        self._vehicles: Dict[int, Vehicle] = {}
        # live view over the dict; vehicles never get a handle on the fleet
        self._neighbours = functools.partial(tuple, self._vehicles.values())
        self._next_id: int = 1
        self.spawn_timer_ms: float = 0.0
        self.clock_ms: float = 0.0
        self.spawned: int = 0
        self.rejected_spawns: int = 0
        self.completed: int = 0

    # ── lifecycle ─────────────────────────────────────────────────────────

    def reset(self, settings: Optional[SimulationSettings] = None) -> None:
        """Drop every vehicle and restart the timers."""
        if settings is not None:
            self.settings = settings
        self._vehicles.clear()
        self._next_id = 1
        self.spawn_timer_ms = 0.0
        self.clock_ms = 0.0
        self.spawned = 0
        self.rejected_spawns = 0
        self.completed = 0

    def update_settings(self, settings: SimulationSettings) -> None:
        log.info("settings updated: max_speed=%.1f spawn_rate=%.2f/10s",
                 settings.max_speed, settings.spawn_rate_per_ten_seconds)
        self.settings = settings

    # ── queries ───────────────────────────────────────────────────────────

    @property
    def count(self) -> int:
        return len(self._vehicles)

    def vehicles(self) -> Tuple[Vehicle, ...]:
        """Live vehicles in spawn order (a copy; safe to hold across ticks)."""
        return tuple(self._vehicles.values())

    def get(self, vehicle_id: int) -> Optional[Vehicle]:
        return self._vehicles.get(vehicle_id)

    def snapshots(self) -> List[VehicleSnapshot]:
        return [v.snapshot() for v in self._vehicles.values()]

    def waiting_vehicles(self, direction: Any) -> List[Vehicle]:
        d = parse_direction(direction)
        return [v for v in self._vehicles.values() if v.origin is d and v.is_waiting]

    # ── tick ──────────────────────────────────────────────────────────────

    def update(self, delta_ms: float, lights: LightStates) -> List[CompletionEvent]:
        """Advance the whole fleet by *delta_ms* milliseconds.

        Returns the completion events raised this tick.  Non-positive deltas
        are logged and ignored.
        """
        if not delta_ms > 0:
            log.warning("ignoring non-positive tick delta %r ms", delta_ms)
            return []
        self.clock_ms += delta_ms

        # 1. spawn
        self.spawn_timer_ms += delta_ms
        if self.spawn_timer_ms >= self.settings.spawn_interval_ms:
            self.spawn()
            self.spawn_timer_ms = 0.0

        # 2. advance
        max_speed = self.settings.max_speed
        for vehicle in list(self._vehicles.values()):
            vehicle.update(delta_ms, lights, self.clock_ms, max_speed=max_speed)

        # 3. retire
        events = [
            CompletionEvent(v.id, v.wait_time_ms, v.route)
            for v in self._vehicles.values()
            if v.is_completed
        ]
        for event in events:
            log.info("vehicle %s completed %s→%s waited=%.0fms", event.vehicle_id,
                     event.route.origin.value, event.route.destination.value,
                     event.wait_time_ms)
            if self.on_vehicle_completed is not None:
                self.on_vehicle_completed(event)
        for event in events:
            del self._vehicles[event.vehicle_id]
        self.completed += len(events)
        return events

    # ── spawning ──────────────────────────────────────────────────────────

    def spawn(
        self,
        origin: Any = None,
        destination: Any = None,
        lane: Optional[int] = None,
    ) -> Optional[Vehicle]:
        """Try to add one vehicle.

        Unspecified origin / destination / lane are drawn from the fleet's
        random source (lane 0 for left turns, 1 for right turns, either for
        straight).  Returns ``None`` when the origin's spawn point is still
        occupied.
        """
        a = parse_direction(origin) if origin is not None else self._rng.choice(DIRECTIONS)
        if destination is None:
            b = self._rng.choice([d for d in DIRECTIONS if d is not a])
        else:
            b = parse_direction(destination)
        route = Route(a, b)
        turn = route.turn
        if lane is None:
            if turn is TurnType.LEFT:
                lane = 0
            elif turn is TurnType.RIGHT:
                lane = 1
            else:
                lane = self._rng.randint(0, 1)
        lane = check_lane(lane)

        if not self._spawn_is_clear(a):
            self.rejected_spawns += 1
            log.debug("spawn from %s rejected: spawn point occupied", a.value)
            return None

        vehicle = Vehicle(
            vehicle_id=self._next_id,
            route=route,
            geometry=self.geometry,
            lane=lane,
            neighbours=self._neighbours,
            policy=self.policy,
            max_speed=self.settings.max_speed,
            color=self._rng.choice(VEHICLE_COLORS),
            path_builder=self._paths,
        )
        self._next_id += 1
        self._vehicles[vehicle.id] = vehicle
        self.spawned += 1
        log.debug("spawned vehicle %s %s→%s %s lane=%d", vehicle.id, a.value, b.value,
                  turn.value, lane)
        return vehicle

    def _spawn_is_clear(self, origin: Direction) -> bool:
        spawn = self.geometry.spawn_point(origin)
        clearance = self.policy.spawn_clearance
        return not any(
            v.origin is origin
            and physics.distance(v.x, v.y, spawn.x, spawn.y) < clearance
            for v in self._vehicles.values()
        )
