"""
BusMetrics: Tracks simple statistics for EventBus message flow.
"""


class BusMetrics:
    """
    Tracks metrics for published, delivered and dropped events.

    Attributes:
        published (int): Total number of events accepted by the bus.
        delivered (int): Number of events handed out by poll().
        dropped (int): Number of events discarded because a topic queue was full.
    """

    def __init__(self):
        """Initialize all counters to zero."""
        self.published = 0
        self.delivered = 0
        self.dropped = 0

    def report(self) -> dict:
        """
        Return a snapshot of current metrics.

        Returns:
            dict: Dictionary containing 'published', 'delivered' and 'dropped' counters.
        """
        return {
            "published": self.published,
            "delivered": self.delivered,
            "dropped": self.dropped,
        }
