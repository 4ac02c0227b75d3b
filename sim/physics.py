#!/usr/bin/env python3
"""
sim/physics.py
==============
Low-level kinematic helpers used by :mod:`sim.paths`, :mod:`sim.vehicle` and
:mod:`sim.fleet`.

Keeping these in a separate module avoids circular imports and makes unit
testing straightforward.
"""

from __future__ import annotations

import math
from typing import Tuple


def distance(x0: float, y0: float, x1: float, y1: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x1 - x0, y1 - y0)


def squared_distance(x0: float, y0: float, x1: float, y1: float) -> float:
    """Squared Euclidean distance (no square root)."""
    dx = x1 - x0
    dy = y1 - y0
    return dx * dx + dy * dy


def heading_between(x0: float, y0: float, x1: float, y1: float) -> float:
    """Heading in radians of the vector from *(x0, y0)* to *(x1, y1)*."""
    return math.atan2(y1 - y0, x1 - x0)


def advance(x: float, y: float, heading: float, step: float) -> Tuple[float, float]:
    """Move *step* units from *(x, y)* along *heading*."""
    return x + math.cos(heading) * step, y + math.sin(heading) * step


def accelerate(speed: float, rate: float, dt: float, cap: float) -> float:
    """Increase *speed* by ``rate * dt`` without exceeding *cap*."""
    return min(cap, speed + rate * dt)


def axial_distance(x: float, y: float, ux: float, uy: float,
                   ox: float, oy: float) -> float:
    """Signed distance from *(x, y)* to *(ox, oy)* projected on the unit axis *(ux, uy)*.

    Positive → *(ox, oy)* lies ahead of *(x, y)* along the axis.
    Zero / negative → it is level with or behind it.

    Parameters
    ----------
    x, y : float
        Reference position.
    ux, uy : float
        Unit travel vector (+1/−1/0 for the cardinal axes).
    ox, oy : float
        The other position.
    """
    return (ox - x) * ux + (oy - y) * uy
