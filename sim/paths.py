#!/usr/bin/env python3
"""
sim/paths.py
============
Polyline paths through the intersection box.

Vehicles follow these paths with distance parameterisation: every path is
paired with a cumulative arc-length table (:class:`PathProfile`) so a speed
in units/s maps to a position independent of how densely the path is
sampled.

Turns are quarter-circle arcs around a box corner; straight crossings are
lines.  Each turn gets an *exit snap* tail so it ends exactly on the target
lane centre.
"""

from __future__ import annotations

import bisect
import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from sim import physics
from sim.errors import InvalidRoute
from sim.geometry import (
    Direction,
    IntersectionGeometry,
    Point,
    TurnType,
    check_lane,
    classify_turn,
    parse_direction,
)
from sim.traffic_policy import TrafficPolicy

log = logging.getLogger("paths")

DEFAULT_STEPS: int = 28
SNAP_STEPS: int = 4

_PI = math.pi

# ── Turn arcs: (origin, turn) → (corner, start angle, end angle, exit arm, exit lane)
# Right turns hug the inside corner; left turns swing around the far corner.
_TURN_ARCS: Dict[Tuple[Direction, TurnType], Tuple[str, float, float, Direction, int]] = {
    (Direction.NORTH, TurnType.RIGHT): ("NE", _PI, 1.5 * _PI, Direction.EAST, 1),
    (Direction.EAST, TurnType.RIGHT): ("SE", -0.5 * _PI, 0.0, Direction.SOUTH, 1),
    (Direction.SOUTH, TurnType.RIGHT): ("SW", 0.0, 0.5 * _PI, Direction.WEST, 1),
    (Direction.WEST, TurnType.RIGHT): ("NW", 0.5 * _PI, _PI, Direction.NORTH, 1),

    (Direction.NORTH, TurnType.LEFT): ("NW", 0.0, -0.5 * _PI, Direction.WEST, 0),
    (Direction.EAST, TurnType.LEFT): ("NE", 0.5 * _PI, _PI, Direction.NORTH, 0),
    (Direction.SOUTH, TurnType.LEFT): ("SE", -_PI, -0.5 * _PI, Direction.EAST, 0),
    (Direction.WEST, TurnType.LEFT): ("SW", _PI, 0.5 * _PI, Direction.SOUTH, 0),
}


@dataclass(frozen=True)
class PathProfile:
    """A polyline with its cumulative-length table.

    Attributes
    ----------
    points : tuple of Point
        At least two points.
    lens : tuple of float
        ``lens[i]`` is the arc length from ``points[0]`` to ``points[i]``.
    total : float
        ``lens[-1]``.
    """

    points: Tuple[Point, ...]
    lens: Tuple[float, ...]
    total: float

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def end_heading(self) -> float:
        """Heading of the last segment."""
        prev, last = self.points[-2], self.points[-1]
        return physics.heading_between(prev.x, prev.y, last.x, last.y)

    def locate(self, s: float) -> Tuple[float, float, float]:
        """Position and heading at arc length *s* (``0 <= s <= total``).

        The segment is the first index whose cumulative length reaches *s*;
        the position is linearly interpolated inside it.
        """
        i = bisect.bisect_left(self.lens, s)
        i1 = min(max(i, 1), len(self.lens) - 1)
        i0 = i1 - 1
        s0, s1 = self.lens[i0], self.lens[i1]
        t = (s - s0) / (s1 - s0) if s1 > s0 else 0.0
        p0, p1 = self.points[i0], self.points[i1]
        x = p0.x + t * (p1.x - p0.x)
        y = p0.y + t * (p1.y - p0.y)
        return x, y, physics.heading_between(p0.x, p0.y, p1.x, p1.y)


def _to_points(xs: np.ndarray, ys: np.ndarray) -> List[Point]:
    return [Point(float(x), float(y)) for x, y in zip(xs, ys)]


def build_line_path(p0: Sequence[float], p1: Sequence[float],
                    steps: int = DEFAULT_STEPS) -> List[Point]:
    """Return ``steps + 1`` equally spaced points from *p0* to *p1* inclusive."""
    t = np.linspace(0.0, 1.0, steps + 1)
    xs = p0[0] + t * (p1[0] - p0[0])
    ys = p0[1] + t * (p1[1] - p0[1])
    points = _to_points(xs, ys)
    points[-1] = Point(float(p1[0]), float(p1[1]))
    return points


def build_arc_path(cx: float, cy: float, radius: float, a0: float, a1: float,
                   steps: int = DEFAULT_STEPS) -> List[Point]:
    """Return ``steps + 1`` points on the arc around *(cx, cy)* from *a0* to *a1*."""
    angles = np.linspace(a0, a1, steps + 1)
    return _to_points(cx + radius * np.cos(angles), cy + radius * np.sin(angles))


def with_exit_snap(points: List[Point], target: Point,
                   steps: int = SNAP_STEPS) -> List[Point]:
    """Append a short straight tail so *points* ends exactly on *target*.

    Paths already within one unit of the target are returned unchanged.
    """
    last = points[-1]
    if physics.squared_distance(last.x, last.y, target.x, target.y) <= 1.0:
        return points
    tail = build_line_path(last, target, steps)
    return points + tail[1:]


def cumulative_lengths(points: Sequence[Sequence[float]]) -> PathProfile:
    """Pair *points* with their cumulative Euclidean length table."""
    if len(points) < 2:
        raise ValueError("a path needs at least two points")
    arr = np.asarray(points, dtype=float)
    seg = np.hypot(*np.diff(arr, axis=0).T)
    lens = np.concatenate(([0.0], np.cumsum(seg)))
    return PathProfile(
        points=tuple(Point(float(x), float(y)) for x, y in arr),
        lens=tuple(float(v) for v in lens),
        total=float(lens[-1]),
    )


class PathBuilder:
    """Builds the path a vehicle follows through one intersection.

    Parameters
    ----------
    geometry : IntersectionGeometry
        Supplies the entry/exit lane points, corners and turn radii.
    policy : TrafficPolicy or None
        Supplies the discretisation step counts; defaults when *None*.
    """

    def __init__(self, geometry: IntersectionGeometry,
                 policy: Optional[TrafficPolicy] = None) -> None:
        self.geometry = geometry
        self.policy = policy or TrafficPolicy()

    def straight(self, origin: Direction, destination: Direction, lane: int) -> List[Point]:
        a = self.geometry.entry_point(origin, lane)
        b = self.geometry.exit_point(destination, lane)
        return build_line_path(a, b, self.policy.path_steps)

    def turn(self, origin: Direction, turn: TurnType) -> List[Point]:
        """Quarter-circle arc for a LEFT or RIGHT turn from *origin*, exit-snapped."""
        corner_name, a0, a1, exit_dir, exit_lane = _TURN_ARCS[(origin, turn)]
        corner = self.geometry.corner(corner_name)
        radius = (self.geometry.right_turn_radius if turn is TurnType.RIGHT
                  else self.geometry.left_turn_radius)
        base = build_arc_path(corner.x, corner.y, radius, a0, a1, self.policy.path_steps)
        return with_exit_snap(base, self.geometry.exit_point(exit_dir, exit_lane),
                              self.policy.snap_steps)

    def build(self, origin, destination, lane: int = 1) -> PathProfile:
        """Build the path for the route *origin* → *destination*.

        Raises
        ------
        InvalidRoute
            When origin and destination are the same arm.
        """
        a = parse_direction(origin)
        b = parse_direction(destination)
        check_lane(lane)
        turn = classify_turn(a, b)
        if turn is TurnType.NONE:
            raise InvalidRoute(f"no path from {a.value} back to itself")
        points = self.straight(a, b, lane) if turn is TurnType.STRAIGHT else self.turn(a, turn)
        profile = cumulative_lengths(points)
        log.debug("path %s→%s %s lane=%d points=%d length=%.1f",
                  a.value, b.value, turn.value, lane, len(profile.points), profile.total)
        return profile


def build_path(geometry: IntersectionGeometry, origin, destination,
               lane: int = 1) -> PathProfile:
    """One-off :meth:`PathBuilder.build` with the default policy."""
    return PathBuilder(geometry).build(origin, destination, lane)
