"""
EventBus: In-memory pub/sub for simulation outputs.

Supports:
    - Topic-based messaging
    - Bounded per-topic queues (oldest events are dropped first)
    - Logging of events

Intended usage:
    - The runner publishes vehicle snapshots to 'fleet.snapshot' every tick
    - Completion events go to 'vehicle.completed' for statistics consumers
    - Consumers drain a topic with poll()
"""

import logging
import uuid
from collections import deque
from typing import Deque, Dict, List, Optional

from .message import SimEvent
from .metrics import BusMetrics

log = logging.getLogger("event_bus")

TOPIC_SNAPSHOT = "fleet.snapshot"
TOPIC_COMPLETED = "vehicle.completed"


class EventBus:
    """
    Transport layer between the simulation core and its collaborators.

    Attributes:
        max_queue (int or None): Per-topic capacity; None means unbounded.
        metrics (BusMetrics): Published / delivered / dropped counters.
    """

    def __init__(self, max_queue: Optional[int] = None):
        """
        Initialize an EventBus instance.

        Args:
            max_queue (int or None): Maximum number of undelivered events kept per topic.
        """
        if max_queue is not None and max_queue < 1:
            raise ValueError("max_queue must be at least 1")
        self._topics: Dict[str, Deque[SimEvent]] = {}
        self.max_queue = max_queue
        self.metrics = BusMetrics()

    def publish(self, topic: str, sender: str, payload: dict, ts: float = 0.0) -> str:
        """
        Publish an event to a specific topic.

        Args:
            topic (str): The topic name (e.g., 'fleet.snapshot', 'vehicle.completed').
            sender (str): ID of the publisher.
            payload (dict): Arbitrary data dictionary representing the event contents.
            ts (float): Simulation time of the event in milliseconds.

        Returns:
            str: The unique event ID.
        """
        queue = self._topics.setdefault(topic, deque())
        if self.max_queue is not None and len(queue) >= self.max_queue:
            dropped = queue.popleft()
            self.metrics.dropped += 1
            log.debug("queue_full topic=%s dropped=%s", topic, dropped.id)

        event = SimEvent(
            id=str(uuid.uuid4()),
            topic=topic,
            sender=sender,
            payload=payload,
            ts=ts,
        )
        queue.append(event)
        self.metrics.published += 1
        log.debug("publish topic=%s sender=%s id=%s", topic, sender, event.id)
        return event.id

    def poll(self, topic: str) -> List[SimEvent]:
        """
        Retrieve and clear all events from a given topic.

        Args:
            topic (str): The topic name to poll events from.

        Returns:
            List[SimEvent]: Events published to the topic since the last poll, oldest first.
        """
        queue = self._topics.get(topic)
        if not queue:
            return []
        events = list(queue)
        queue.clear()
        self.metrics.delivered += len(events)
        return events

    def pending(self, topic: str) -> int:
        """
        Number of undelivered events on a topic.

        Args:
            topic (str): The topic name.

        Returns:
            int: Queue length for the topic (0 if never published to).
        """
        return len(self._topics.get(topic, ()))
