#!/usr/bin/env python3
"""
sim/geometry.py
===============
Static layout of a single four-way intersection.

Screen coordinates are used throughout: the origin is the top-left corner of
the canvas and *y* grows downward, so a vehicle arriving from the north
travels toward +y.

Provides:

* :class:`Direction` / :class:`TurnType` enums and :func:`classify_turn`.
* :func:`parse_direction`: strict conversion of user input to a
  :class:`Direction`.
* :class:`IntersectionGeometry`: entry/exit lane points at the box boundary,
  stop lines, spawn and exit tables, light positions and footprint tests.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple

from sim.errors import ConfigurationError, InvalidDirection, InvalidLane


class Direction(Enum):
    """Cardinal arm of the intersection, in clockwise order."""
    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"

    @property
    def clockwise(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) + 1) % 4]

    @property
    def counter_clockwise(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) - 1) % 4]

    @property
    def opposite(self) -> "Direction":
        return _CLOCKWISE[(_CLOCKWISE.index(self) + 2) % 4]

    @property
    def inbound_vector(self) -> Tuple[float, float]:
        """Unit travel vector of a vehicle arriving *from* this arm."""
        return _INBOUND_VECTORS[self]


class TurnType(Enum):
    """Manoeuvre implied by a (from, to) pair."""
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    STRAIGHT = "STRAIGHT"
    NONE = "NONE"


class Point(NamedTuple):
    x: float
    y: float


class StopLine(NamedTuple):
    x1: float
    y1: float
    x2: float
    y2: float


_CLOCKWISE: Tuple[Direction, ...] = (
    Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST,
)

_INBOUND_VECTORS: Dict[Direction, Tuple[float, float]] = {
    Direction.NORTH: (0.0, 1.0),
    Direction.EAST: (-1.0, 0.0),
    Direction.SOUTH: (0.0, -1.0),
    Direction.WEST: (1.0, 0.0),
}

_ALIASES: Dict[str, Direction] = {
    "N": Direction.NORTH, "NORTH": Direction.NORTH,
    "E": Direction.EAST, "EAST": Direction.EAST,
    "S": Direction.SOUTH, "SOUTH": Direction.SOUTH,
    "W": Direction.WEST, "WEST": Direction.WEST,
}

DIRECTIONS: Tuple[Direction, ...] = _CLOCKWISE


def parse_direction(value: Any) -> Direction:
    """Return the :class:`Direction` named by *value*.

    Accepts a :class:`Direction` or a case-insensitive ``"N"`` / ``"north"``
    style string.  Anything else raises :class:`InvalidDirection`; there is
    no silent default.
    """
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        found = _ALIASES.get(value.strip().upper())
        if found is not None:
            return found
    raise InvalidDirection(f"not a cardinal direction: {value!r}")


def classify_turn(origin: Any, destination: Any) -> TurnType:
    """Classify the manoeuvre from *origin* to *destination*.

    Right is the adjacent clockwise arm (N→E, E→S, S→W, W→N), left the
    adjacent counter-clockwise arm (N→W, W→S, S→E, E→N) and the opposite arm
    is straight.  Equal arms give :attr:`TurnType.NONE`.
    """
    a = parse_direction(origin)
    b = parse_direction(destination)
    if a is b:
        return TurnType.NONE
    if b is a.clockwise:
        return TurnType.RIGHT
    if b is a.counter_clockwise:
        return TurnType.LEFT
    return TurnType.STRAIGHT


def check_lane(lane: Any) -> int:
    """Validate a lane index (0 = left, 1 = right)."""
    if lane not in (0, 1) or isinstance(lane, bool):
        raise InvalidLane(f"lane must be 0 or 1, got {lane!r}")
    return int(lane)


@dataclass(frozen=True)
class IntersectionGeometry:
    """Geometry constants of the intersection and every point derived from them.

    Parameters
    ----------
    canvas_width, canvas_height : float
        Size of the simulated area; vehicles spawn on and retire beyond its
        edges.
    intersection_size : float
        Side of the square box; half of it is the turn-arc reference.
    road_width : float
        Full width of each road (both directions); half of it bounds the
        intersection footprint.
    lane_width : float
        Width of a single lane.
    center_x, center_y : float or None
        Intersection centre; defaults to the canvas centre.
    """

    canvas_width: float = 800.0
    canvas_height: float = 800.0
    intersection_size: float = 120.0
    road_width: float = 120.0
    lane_width: float = 30.0
    center_x: Optional[float] = None
    center_y: Optional[float] = None

    def __post_init__(self) -> None:
        for name in ("canvas_width", "canvas_height", "intersection_size",
                     "road_width", "lane_width"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive")
        if self.lane_width > self.road_width / 2:
            raise ConfigurationError("two lanes must fit in half the road width")
        if self.road_width > min(self.canvas_width, self.canvas_height):
            raise ConfigurationError("road is wider than the canvas")
        if self.center_x is None:
            object.__setattr__(self, "center_x", self.canvas_width / 2)
        if self.center_y is None:
            object.__setattr__(self, "center_y", self.canvas_height / 2)

    # ── derived scalars ───────────────────────────────────────────────────

    @property
    def half_intersection(self) -> float:
        return self.intersection_size / 2

    @property
    def half_road(self) -> float:
        return self.road_width / 2

    @property
    def stop_line_offset(self) -> float:
        """Distance of every stop line from the centre."""
        return self.half_intersection + 5

    @property
    def right_turn_radius(self) -> float:
        return self.half_intersection - self.lane_width / 2

    @property
    def left_turn_radius(self) -> float:
        return self.half_intersection + self.lane_width / 2

    def lane_offset(self, lane: int) -> float:
        """Lateral offset of *lane* from the road centreline."""
        return (-1 if check_lane(lane) == 0 else 1) * (self.lane_width / 2)

    # ── boundary lane points ──────────────────────────────────────────────

    def entry_point(self, direction: Any, lane: int) -> Point:
        """Lane centre at the box edge for a vehicle arriving from *direction*."""
        d = parse_direction(direction)
        o = self.lane_offset(lane)
        cx, cy, h = self.center_x, self.center_y, self.half_intersection
        if d is Direction.NORTH:
            return Point(cx + o, cy - h)
        if d is Direction.SOUTH:
            return Point(cx - o, cy + h)
        if d is Direction.EAST:
            return Point(cx + h, cy + o)
        return Point(cx - h, cy - o)

    def exit_point(self, direction: Any, lane: int) -> Point:
        """Lane centre at the box edge for a vehicle leaving toward *direction*."""
        d = parse_direction(direction)
        o = self.lane_offset(lane)
        cx, cy, h = self.center_x, self.center_y, self.half_intersection
        if d is Direction.NORTH:
            return Point(cx - o, cy - h)
        if d is Direction.SOUTH:
            return Point(cx + o, cy + h)
        if d is Direction.EAST:
            return Point(cx + h, cy - o)
        return Point(cx - h, cy + o)

    def corner(self, name: str) -> Point:
        """Box corner ``"NE"``, ``"SE"``, ``"SW"`` or ``"NW"``."""
        if name not in ("NE", "SE", "SW", "NW"):
            raise ConfigurationError(f"unknown corner {name!r}")
        h = self.half_intersection
        dx = h if "E" in name else -h
        dy = -h if "N" in name else h
        return Point(self.center_x + dx, self.center_y + dy)

    # ── layout tables ─────────────────────────────────────────────────────

    def stop_line(self, direction: Any) -> StopLine:
        d = parse_direction(direction)
        cx, cy = self.center_x, self.center_y
        hr, off = self.half_road, self.stop_line_offset
        if d is Direction.NORTH:
            return StopLine(cx - hr, cy - off, cx + hr, cy - off)
        if d is Direction.EAST:
            return StopLine(cx + off, cy - hr, cx + off, cy + hr)
        if d is Direction.SOUTH:
            return StopLine(cx - hr, cy + off, cx + hr, cy + off)
        return StopLine(cx - off, cy - hr, cx - off, cy + hr)

    def spawn_point(self, direction: Any) -> Point:
        """Canvas-edge point where vehicles from *direction* appear."""
        d = parse_direction(direction)
        lo = self.lane_width / 2
        if d is Direction.NORTH:
            return Point(self.center_x - lo, 0.0)
        if d is Direction.EAST:
            return Point(self.canvas_width, self.center_y - lo)
        if d is Direction.SOUTH:
            return Point(self.center_x + lo, self.canvas_height)
        return Point(0.0, self.center_y + lo)

    def exit_target(self, direction: Any) -> Point:
        """Canvas-edge point a vehicle leaving toward *direction* heads for."""
        d = parse_direction(direction)
        lo = self.lane_width / 2
        if d is Direction.NORTH:
            return Point(self.center_x + lo, 0.0)
        if d is Direction.EAST:
            return Point(self.canvas_width, self.center_y + lo)
        if d is Direction.SOUTH:
            return Point(self.center_x - lo, self.canvas_height)
        return Point(0.0, self.center_y - lo)

    def light_position(self, direction: Any) -> Point:
        """Anchor for the signal head a renderer draws for *direction*."""
        d = parse_direction(direction)
        cx, cy, h = self.center_x, self.center_y, self.half_intersection
        if d is Direction.NORTH:
            return Point(cx - 25, cy - h - 40)
        if d is Direction.EAST:
            return Point(cx + h + 15, cy - 25)
        if d is Direction.SOUTH:
            return Point(cx + 25, cy + h + 15)
        return Point(cx - h - 40, cy + 25)

    def stop_lines(self) -> Dict[Direction, StopLine]:
        return {d: self.stop_line(d) for d in DIRECTIONS}

    def spawn_points(self) -> Dict[Direction, Point]:
        return {d: self.spawn_point(d) for d in DIRECTIONS}

    def exit_targets(self) -> Dict[Direction, Point]:
        return {d: self.exit_target(d) for d in DIRECTIONS}

    def light_positions(self) -> Dict[Direction, Point]:
        return {d: self.light_position(d) for d in DIRECTIONS}

    # ── queries ───────────────────────────────────────────────────────────

    def contains(self, x: float, y: float) -> bool:
        """True when *(x, y)* lies inside the intersection footprint."""
        hr = self.half_road
        return (self.center_x - hr <= x <= self.center_x + hr
                and self.center_y - hr <= y <= self.center_y + hr)

    def is_beyond_canvas(self, x: float, y: float, margin: float = 50.0) -> bool:
        """True once *(x, y)* is more than *margin* past any canvas edge."""
        return (x < -margin or x > self.canvas_width + margin
                or y < -margin or y > self.canvas_height + margin)

    def distance_to_stop_line(self, direction: Any, x: float, y: float) -> float:
        """Absolute distance from *(x, y)* to the stop line of *direction*,
        measured along that arm's travel axis."""
        d = parse_direction(direction)
        line = self.stop_line(d)
        if d in (Direction.NORTH, Direction.SOUTH):
            return abs(y - line.y1)
        return abs(x - line.x1)

    @staticmethod
    def initial_heading(direction: Any) -> float:
        """Heading of a vehicle arriving from *direction*."""
        return {
            Direction.NORTH: math.pi / 2,
            Direction.EAST: math.pi,
            Direction.SOUTH: -math.pi / 2,
            Direction.WEST: 0.0,
        }[parse_direction(direction)]

    @staticmethod
    def exit_heading(direction: Any) -> float:
        """Heading of a vehicle leaving toward *direction*."""
        return {
            Direction.NORTH: -math.pi / 2,
            Direction.EAST: 0.0,
            Direction.SOUTH: math.pi / 2,
            Direction.WEST: math.pi,
        }[parse_direction(direction)]
