#!/usr/bin/env python3
"""
sim/settings.py
===============
Validated, immutable records for the values the core receives from its
collaborators every tick or at runtime:

* :class:`LightState` / :class:`LightStates`: one signal colour per arm,
  supplied fresh each tick by the (external) light controller.
* :class:`SimulationSettings`: speed cap and spawn rate, adjustable while
  the simulation runs by swapping in a new instance.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sim.geometry import DIRECTIONS, Direction, parse_direction


class LightState(str, Enum):
    """Signal colour shown to one approach."""
    RED = "RED"
    YELLOW = "YELLOW"
    GREEN = "GREEN"


class LightStates(BaseModel):
    """Snapshot of the signal colour for every approach."""

    model_config = ConfigDict(frozen=True)

    states: Dict[Direction, LightState]

    @field_validator("states", mode="before")
    @classmethod
    def _normalise(cls, value: Any) -> Dict[Direction, LightState]:
        if not isinstance(value, Mapping):
            raise ValueError("light states must be a mapping of direction → colour")
        out: Dict[Direction, LightState] = {}
        for key, colour in value.items():
            out[parse_direction(key)] = LightState(
                colour.upper() if isinstance(colour, str) else colour
            )
        missing = [d.value for d in DIRECTIONS if d not in out]
        if missing:
            raise ValueError(f"missing light state for {', '.join(missing)}")
        return out

    @classmethod
    def of(cls, mapping: Mapping[Any, Any]) -> "LightStates":
        """Build from a loose ``{"N": "RED", ...}`` style mapping."""
        return cls(states=dict(mapping))

    @classmethod
    def uniform(cls, state: LightState) -> "LightStates":
        return cls(states={d: state for d in DIRECTIONS})

    def for_direction(self, direction: Any) -> LightState:
        return self.states[parse_direction(direction)]

    def is_red(self, direction: Any) -> bool:
        return self.for_direction(direction) is LightState.RED

    def allows_entry(self, direction: Any) -> bool:
        """GREEN and YELLOW both release a waiting vehicle."""
        return self.for_direction(direction) in (LightState.GREEN, LightState.YELLOW)


class SimulationSettings(BaseModel):
    """Runtime-tunable settings.

    Attributes
    ----------
    max_speed : float
        Cruise speed cap in units per second.
    spawn_rate_per_ten_seconds : float
        Spawn attempts per ten-second window.
    """

    model_config = ConfigDict(frozen=True)

    max_speed: float = Field(default=80.0, gt=0)
    spawn_rate_per_ten_seconds: float = Field(default=5.0, gt=0)

    @property
    def spawn_interval_ms(self) -> float:
        """Milliseconds between two spawn attempts."""
        return 10000.0 / self.spawn_rate_per_ten_seconds
