#!/usr/bin/env python3
"""
main.py
=======
Headless driver for the intersection core.

Runs a :class:`~sim.fleet.FleetManager` against a fixed demo light cycle,
publishes vehicle snapshots and completion events on the
:class:`~bus.event_bus.EventBus`, and logs a summary at the end.
Run it from the repository root with ``python main.py``; the runner modules
are not installed with the package.

Environment overrides::

    INTERSECTION_MAX_SPEED     units/s          (config.DEFAULT_MAX_SPEED)
    INTERSECTION_SPAWN_RATE    per 10 s         (config.DEFAULT_SPAWN_RATE)
    INTERSECTION_TICK_MS       ms per tick      (config.DEFAULT_TICK_MS)
    INTERSECTION_DURATION_S    simulated secs   (config.DEFAULT_DURATION_S)
    INTERSECTION_SEED          RNG seed         (unset → random)
    INTERSECTION_LOG_LEVEL     DEBUG/INFO/...   (config.DEFAULT_LOG_LEVEL)
    INTERSECTION_REALTIME      1 → sleep between ticks
"""

import logging
import os
import time
from typing import Any, Dict, List, Optional, Tuple

import config
from bus import TOPIC_COMPLETED, TOPIC_SNAPSHOT, EventBus
from logging_setup import setup_logging
from sim.fleet import CompletionEvent, FleetManager
from sim.geometry import Direction, IntersectionGeometry
from sim.settings import LightState, LightStates, SimulationSettings

log = logging.getLogger("main")

_NS = (Direction.NORTH, Direction.SOUTH)
_EW = (Direction.EAST, Direction.WEST)


class DemoLightCycle:
    """Two-phase fixed-time cycle: NS green → yellow → all red → EW green → ...

    Stands in for the external signal controller so the core can be run on
    its own.
    """

    def __init__(self, green_ms: float, yellow_ms: float, all_red_ms: float) -> None:
        self._phases: List[Tuple[float, Tuple[Direction, ...], LightState]] = [
            (green_ms, _NS, LightState.GREEN),
            (yellow_ms, _NS, LightState.YELLOW),
            (all_red_ms, (), LightState.RED),
            (green_ms, _EW, LightState.GREEN),
            (yellow_ms, _EW, LightState.YELLOW),
            (all_red_ms, (), LightState.RED),
        ]
        self._index = 0
        self._elapsed = 0.0

    def advance(self, delta_ms: float) -> LightStates:
        self._elapsed += delta_ms
        while self._elapsed >= self._phases[self._index][0]:
            self._elapsed -= self._phases[self._index][0]
            self._index = (self._index + 1) % len(self._phases)
        return self.current()

    def current(self) -> LightStates:
        _, active, colour = self._phases[self._index]
        return LightStates(states={
            d: (colour if d in active else LightState.RED) for d in Direction
        })


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        log.warning("ignoring %s=%r (not a number), using %s", name, raw, default)
        return default


def _env_seed() -> Optional[int]:
    raw = os.environ.get("INTERSECTION_SEED")
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        log.warning("ignoring INTERSECTION_SEED=%r (not an integer)", raw)
        return None


def run(fleet: FleetManager, lights: DemoLightCycle, bus: EventBus,
        tick_ms: float, duration_ms: float, realtime: bool = False) -> Dict[str, Any]:
    """Tick *fleet* until its clock reaches *duration_ms*, draining the bus every tick.

    Returns a summary of the run, including the bus metrics.
    """
    waits: List[float] = []
    peak_live = 0
    try:
        while fleet.clock_ms < duration_ms:
            fleet.update(tick_ms, lights.advance(tick_ms))
            bus.publish(
                TOPIC_SNAPSHOT,
                sender="fleet",
                payload={"vehicles": [s.as_dict() for s in fleet.snapshots()]},
                ts=fleet.clock_ms,
            )
            for event in bus.poll(TOPIC_SNAPSHOT):
                peak_live = max(peak_live, len(event.payload["vehicles"]))
            for event in bus.poll(TOPIC_COMPLETED):
                waits.append(event.payload["wait_time_ms"])
            if realtime:
                time.sleep(tick_ms / 1000.0)
    except KeyboardInterrupt:
        log.info("Interrupted at %.1f s", fleet.clock_ms / 1000.0)

    return {
        "spawned": fleet.spawned,
        "rejected": fleet.rejected_spawns,
        "completed": fleet.completed,
        "live": fleet.count,
        "peak_live": peak_live,
        "mean_wait_ms": sum(waits) / len(waits) if waits else 0.0,
        "bus": bus.metrics.report(),
    }


def main() -> None:
    level_name = os.environ.get("INTERSECTION_LOG_LEVEL", config.DEFAULT_LOG_LEVEL).upper()
    setup_logging(getattr(logging, level_name, logging.INFO))

    geometry = IntersectionGeometry(
        canvas_width=config.CANVAS_WIDTH,
        canvas_height=config.CANVAS_HEIGHT,
        intersection_size=config.INTERSECTION_SIZE,
        road_width=config.ROAD_WIDTH,
        lane_width=config.LANE_WIDTH,
    )
    settings = SimulationSettings(
        max_speed=_env_float("INTERSECTION_MAX_SPEED", config.DEFAULT_MAX_SPEED),
        spawn_rate_per_ten_seconds=_env_float("INTERSECTION_SPAWN_RATE",
                                              config.DEFAULT_SPAWN_RATE),
    )
    tick_ms = _env_float("INTERSECTION_TICK_MS", config.DEFAULT_TICK_MS)
    duration_ms = _env_float("INTERSECTION_DURATION_S", config.DEFAULT_DURATION_S) * 1000.0
    realtime = os.environ.get("INTERSECTION_REALTIME") == "1"

    bus = EventBus(max_queue=config.SNAPSHOT_QUEUE_SIZE)
    lights = DemoLightCycle(config.DEMO_GREEN_MS, config.DEMO_YELLOW_MS,
                            config.DEMO_ALL_RED_MS)

    def on_completed(event: CompletionEvent) -> None:
        bus.publish(TOPIC_COMPLETED, sender="fleet", payload=event.as_dict(),
                    ts=fleet.clock_ms)

    fleet = FleetManager(geometry, settings, seed=_env_seed(),
                         on_vehicle_completed=on_completed)
    log.info("Starting simulation: %.0f s at %.1f ms/tick, max_speed=%.0f, spawn_rate=%.1f/10s",
             duration_ms / 1000.0, tick_ms, settings.max_speed,
             settings.spawn_rate_per_ten_seconds)

    summary = run(fleet, lights, bus, tick_ms, duration_ms, realtime)
    log.info("Spawned %d (rejected %d), completed %d, live %d (peak %d), mean wait %.0f ms",
             summary["spawned"], summary["rejected"], summary["completed"],
             summary["live"], summary["peak_live"], summary["mean_wait_ms"])
    log.info("Bus metrics: %s", summary["bus"])


if __name__ == "__main__":
    main()
