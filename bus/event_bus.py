"""
EventBus: In-memory pub/sub channel between the simulation core and its views.

Supports:
    - Topic-based messaging
    - Bounded per-topic queues (oldest messages are discarded first)
    - Message counters via BusMetrics

Intended usage:
    - BusSink publishes 'light.colors', 'reflector.pulse' and 'status.text'
    - The pygame view polls those topics once per frame
"""

import logging
import uuid
from collections import deque
from typing import Callable, Deque, Dict, List, Optional

from .message import BusMessage
from .metrics import BusMetrics

log = logging.getLogger(__name__)


class EventBus:
    """
    Transport for state-change notifications.

    Attributes:
        max_queue (int): Upper bound on undelivered messages per topic.
        metrics (BusMetrics): Running counters.
    """

    def __init__(self, max_queue: int = 1000, clock: Optional[Callable[[], float]] = None):
        """
        Initialize an EventBus instance.

        Args:
            max_queue (int): Messages kept per topic before the oldest is discarded.
            clock (callable): Returns the timestamp stamped on each message;
                defaults to a constant 0.0 so that runs stay deterministic.
        """
        if max_queue <= 0:
            raise ValueError("max_queue must be > 0")
        self._topics: Dict[str, Deque[BusMessage]] = {}
        self.max_queue = max_queue
        self.metrics = BusMetrics()
        self._clock = clock or (lambda: 0.0)

    def publish(self, topic: str, sender: str, payload: dict) -> str:
        """
        Publish a message to a specific topic.

        Args:
            topic (str): The topic name (e.g., 'light.colors').
            sender (str): ID of the sender (e.g., 'J0', 'EV').
            payload (dict): Message contents.

        Returns:
            str: The unique message ID.
        """
        queue = self._topics.setdefault(topic, deque())
        if len(queue) >= self.max_queue:
            queue.popleft()
            self.metrics.discarded += 1
            log.warning("queue_full topic=%s, oldest message discarded", topic)

        msg_id = str(uuid.uuid4())
        queue.append(BusMessage(
            id=msg_id,
            topic=topic,
            sender=sender,
            payload=payload,
            ts=self._clock(),
        ))
        self.metrics.count_publish(topic)
        log.debug("publish topic=%s sender=%s id=%s", topic, sender, msg_id)
        return msg_id

    def poll(self, topic: str) -> List[BusMessage]:
        """
        Retrieve and clear all messages from a given topic.

        Args:
            topic (str): The topic name to poll messages from.

        Returns:
            List[BusMessage]: Messages published to the topic since the last poll, oldest first.
        """
        queue = self._topics.get(topic)
        if not queue:
            return []
        msgs = list(queue)
        queue.clear()
        self.metrics.polled += len(msgs)
        return msgs

    def pending(self, topic: str) -> int:
        """Number of undelivered messages on *topic*."""
        return len(self._topics.get(topic, ()))

    def topics(self) -> List[str]:
        return sorted(self._topics)
