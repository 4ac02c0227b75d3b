#!/usr/bin/env python3
"""
sim/traffic_policy.py
=====================
Tunable kinematic, queueing and spawn thresholds for the intersection
simulation.  Every constant lives in the frozen :class:`TrafficPolicy`
dataclass so that experiments can swap policies without touching code.

Runtime settings that a user adjusts while the simulation runs (speed cap,
spawn rate) live in :class:`sim.settings.SimulationSettings` instead.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from sim.errors import ConfigurationError


@dataclass(frozen=True)
class TrafficPolicy:
    """Immutable bag of every fixed simulation threshold.

    Groups: longitudinal control, queueing, retirement, spawn envelope,
    path discretisation.
    """

    # ── Longitudinal control ──────────────────────────────────────────────
    approach_accel: float = 30.0
    """Acceleration (units/s²) while approaching the stop line."""

    crossing_accel: float = 40.0
    """Acceleration (units/s²) inside the intersection."""

    crossing_speed_factor: float = 1.2
    """Crossing speed cap as a multiple of the configured max speed."""

    # ── Queueing ──────────────────────────────────────────────────────────
    stop_zone: float = 30.0
    """Distance to the stop line at which a red light forces a stop."""

    following_gap: float = 35.0
    """A vehicle closer than this to the one ahead stops regardless of the light."""

    # ── Retirement ────────────────────────────────────────────────────────
    exit_margin: float = 50.0
    """How far beyond a canvas edge a vehicle must be to complete."""

    # ── Spawn envelope ────────────────────────────────────────────────────
    spawn_clearance: float = 60.0
    """No spawn while a same-origin vehicle is this close to the spawn point."""

    # ── Path discretisation ───────────────────────────────────────────────
    path_steps: int = 28
    """Segments per straight line or quarter-circle arc."""

    snap_steps: int = 4
    """Segments in the exit-snap correction tail."""

    def __post_init__(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) <= 0:
                raise ConfigurationError(f"{f.name} must be positive")
