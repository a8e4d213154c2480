"""
bus — In-memory notification transport
======================================

Provides a lightweight pub/sub channel that carries light-colour changes,
reflector pulses and status text from the simulation core to whatever is
presenting it, without coupling the two.

Modules
-------
message
    :class:`BusMessage` dataclass.
event_bus
    :class:`EventBus` publish / poll transport.
metrics
    :class:`BusMetrics` counter snapshot.
sink
    :class:`BusSink` adapter implementing the simulation's presentation sink.
"""

from .message   import BusMessage
from .event_bus import EventBus
from .metrics   import BusMetrics
from .sink      import BusSink, TOPIC_LIGHTS, TOPIC_PULSE, TOPIC_STATUS

__all__ = [
    "BusMessage",
    "EventBus",
    "BusMetrics",
    "BusSink",
    "TOPIC_LIGHTS",
    "TOPIC_PULSE",
    "TOPIC_STATUS",
]
