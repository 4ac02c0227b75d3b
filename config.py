#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via environment variables (see :mod:`main`).
This module is a thin, import-safe leaf; it never imports from
other project packages.
"""

# ── Geometry (fixed at construction) ─────────────────────────────────────────
CANVAS_WIDTH: float = 800.0
CANVAS_HEIGHT: float = 800.0
INTERSECTION_SIZE: float = 120.0
ROAD_WIDTH: float = 120.0
LANE_WIDTH: float = 30.0

# ── Runtime settings defaults ────────────────────────────────────────────────
DEFAULT_MAX_SPEED: float = 80.0           # units per second
DEFAULT_SPAWN_RATE: float = 5.0           # vehicles per ten seconds

# ── Runner defaults ──────────────────────────────────────────────────────────
DEFAULT_TICK_MS: float = 1000.0 / 60.0
DEFAULT_DURATION_S: float = 60.0
DEFAULT_LOG_LEVEL: str = "INFO"

# ── Demo light cycle (the real controller lives outside the core) ────────────
DEMO_GREEN_MS: float = 8000.0
DEMO_YELLOW_MS: float = 2000.0
DEMO_ALL_RED_MS: float = 1000.0

# ── Event bus ────────────────────────────────────────────────────────────────
SNAPSHOT_QUEUE_SIZE: int = 120

# ── Log files (relative to the working directory) ────────────────────────────
LOG_FILE: str = "intersection.log"
FLEET_DEBUG_LOG_FILE: str = "fleet_debug.log"
