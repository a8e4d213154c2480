"""
BusMetrics: Tracks simple statistics for EventBus message flow.
"""

from typing import Dict


class BusMetrics:
    """
    Tracks published and polled message counts, per topic and in total.

    Attributes:
        published (int): Total number of messages published.
        polled (int): Total number of messages handed to consumers.
        discarded (int): Messages evicted because a topic queue was full.
        by_topic (dict): Published count per topic.
    """

    def __init__(self):
        """Initialize all counters to zero."""
        self.published = 0
        self.polled = 0
        self.discarded = 0
        self.by_topic: Dict[str, int] = {}

    def count_publish(self, topic: str) -> None:
        self.published += 1
        self.by_topic[topic] = self.by_topic.get(topic, 0) + 1

    def report(self) -> dict:
        """
        Return a snapshot of current metrics.

        Returns:
            dict: 'published', 'polled', 'discarded' and a copy of 'by_topic'.
        """
        return {
            "published": self.published,
            "polled": self.polled,
            "discarded": self.discarded,
            "by_topic": dict(self.by_topic),
        }
