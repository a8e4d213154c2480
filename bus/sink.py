"""
BusSink: PresentationSink implementation that forwards simulation
notifications onto an EventBus.

Topics:
    - 'light.colors'     sender 'J<n>',  payload {'junction': n, 'colors': {'NORTH': 'RED', ...}}
    - 'reflector.pulse'  sender sensor,  payload {'sensor': id, 'duration_ms': ms}
    - 'status.text'      sender subject, payload {'subject': subject, 'message': text}
"""

from typing import Mapping, Union

from .event_bus import EventBus

TOPIC_LIGHTS = "light.colors"
TOPIC_PULSE = "reflector.pulse"
TOPIC_STATUS = "status.text"


class BusSink:
    """
    Adapter from the simulation's notification calls to bus messages.

    Attributes:
        bus (EventBus): Destination bus.
    """

    def __init__(self, bus: EventBus):
        self.bus = bus

    def apply_light_colors(self, junction_id: int, colors: Mapping) -> None:
        payload = {
            "junction": junction_id,
            "colors": {_name(a): _name(c) for a, c in colors.items()},
        }
        self.bus.publish(TOPIC_LIGHTS, f"J{junction_id}", payload)

    def reflector_pulse(self, sensor_id: str, duration_ms: int) -> None:
        self.bus.publish(TOPIC_PULSE, sensor_id, {"sensor": sensor_id, "duration_ms": int(duration_ms)})

    def status_text(self, subject: Union[int, str], message: str) -> None:
        sender = f"J{subject}" if isinstance(subject, int) else str(subject)
        self.bus.publish(TOPIC_STATUS, sender, {"subject": subject, "message": message})


def _name(value) -> str:
    """Enum members travel as their string value."""
    return getattr(value, "value", str(value))
