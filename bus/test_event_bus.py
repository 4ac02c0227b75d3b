#!/usr/bin/env python3
"""
Tests for the in-memory event bus.
"""

import unittest

from bus import TOPIC_COMPLETED, TOPIC_SNAPSHOT, EventBus


class EventBusTests(unittest.TestCase):
    def test_publish_then_poll_drains_topic(self):
        bus = EventBus()
        first = bus.publish(TOPIC_COMPLETED, "fleet", {"vehicle_id": 1}, ts=100.0)
        bus.publish(TOPIC_COMPLETED, "fleet", {"vehicle_id": 2}, ts=120.0)
        self.assertEqual(bus.pending(TOPIC_COMPLETED), 2)

        events = bus.poll(TOPIC_COMPLETED)
        self.assertEqual([e.payload["vehicle_id"] for e in events], [1, 2])
        self.assertEqual(events[0].id, first)
        self.assertEqual(events[0].ts, 100.0)
        self.assertEqual(events[0].sender, "fleet")
        self.assertEqual(bus.poll(TOPIC_COMPLETED), [])
        self.assertEqual(bus.pending(TOPIC_COMPLETED), 0)

    def test_topics_are_isolated(self):
        bus = EventBus()
        bus.publish(TOPIC_SNAPSHOT, "runner", {"vehicles": []})
        self.assertEqual(bus.poll(TOPIC_COMPLETED), [])
        self.assertEqual(bus.pending(TOPIC_SNAPSHOT), 1)
        self.assertEqual(bus.pending("unknown"), 0)

    def test_bounded_queue_drops_oldest(self):
        bus = EventBus(max_queue=2)
        for i in range(5):
            bus.publish(TOPIC_SNAPSHOT, "runner", {"tick": i})
        events = bus.poll(TOPIC_SNAPSHOT)
        self.assertEqual([e.payload["tick"] for e in events], [3, 4])
        self.assertEqual(bus.metrics.report(),
                         {"published": 5, "delivered": 2, "dropped": 3})

    def test_rejects_empty_capacity(self):
        with self.assertRaises(ValueError):
            EventBus(max_queue=0)


if __name__ == "__main__":
    unittest.main()
