"""
sim: intersection simulation core
=================================

Modules
-------
geometry
    :class:`IntersectionGeometry` layout, :class:`Direction`, :func:`classify_turn`.
paths
    :class:`PathBuilder` arc / line paths and :class:`PathProfile` length tables.
vehicle
    :class:`Vehicle` lifecycle state machine.
fleet
    :class:`FleetManager` spawn / update / retire loop.
settings
    :class:`LightStates` and :class:`SimulationSettings` validated inputs.
traffic_policy
    :class:`TrafficPolicy` fixed thresholds.
physics
    Low-level distance and heading helpers.
errors
    :class:`SimulationError` hierarchy.
"""

from .errors import (
    ConfigurationError,
    InvalidDirection,
    InvalidLane,
    InvalidRoute,
    SimulationError,
)
from .geometry import Direction, IntersectionGeometry, Point, TurnType, classify_turn
from .paths import PathBuilder, PathProfile, build_path, cumulative_lengths
from .settings import LightState, LightStates, SimulationSettings
from .traffic_policy import TrafficPolicy
from .vehicle import Route, Vehicle, VehicleSnapshot, VehicleState
from .fleet import CompletionEvent, FleetManager

__all__ = [
    "CompletionEvent",
    "ConfigurationError",
    "Direction",
    "FleetManager",
    "IntersectionGeometry",
    "InvalidDirection",
    "InvalidLane",
    "InvalidRoute",
    "LightState",
    "LightStates",
    "PathBuilder",
    "PathProfile",
    "Point",
    "Route",
    "SimulationError",
    "SimulationSettings",
    "TrafficPolicy",
    "TurnType",
    "Vehicle",
    "VehicleSnapshot",
    "VehicleState",
    "build_path",
    "classify_turn",
    "cumulative_lengths",
]
