#!/usr/bin/env python3
"""
sim/errors.py
=============
Exception hierarchy for the intersection core.

Every error derives from :class:`SimulationError`; the argument-shaped ones
also derive from :class:`ValueError` so callers that only care about bad
input can catch them generically.
"""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for all simulation-core errors."""


class InvalidDirection(SimulationError, ValueError):
    """A direction outside N / E / S / W was supplied."""


class InvalidLane(SimulationError, ValueError):
    """A lane index other than 0 (left) or 1 (right) was supplied."""


class InvalidRoute(SimulationError, ValueError):
    """A path was requested for a route whose origin equals its destination."""


class ConfigurationError(SimulationError, ValueError):
    """Geometry or tuning constants are inconsistent."""
