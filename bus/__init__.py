"""
bus: in-memory event transport
==============================

Carries the simulation outputs (vehicle snapshots, completion events) from
the runner to rendering and statistics collaborators without coupling them
to the core.

Modules
-------
message
    :class:`SimEvent` dataclass.
event_bus
    :class:`EventBus` publish / poll transport.
metrics
    :class:`BusMetrics` counter snapshot.
"""

from .message import SimEvent
from .event_bus import TOPIC_COMPLETED, TOPIC_SNAPSHOT, EventBus
from .metrics import BusMetrics

__all__ = [
    "SimEvent",
    "EventBus",
    "BusMetrics",
    "TOPIC_COMPLETED",
    "TOPIC_SNAPSHOT",
]
