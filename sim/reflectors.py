"""
sim/reflectors.py
=================
Roadside "smart reflector" sensors and the per-junction detection chain.

A :class:`ReflectorSensor` hears the siren directly within
``siren_detection_radius`` and relays a neighbour's detection within
``reflector_chain_radius``.  Its signal flash is an explicit
``(signaling, remaining)`` pulse advanced by :meth:`ReflectorSensor.tick`.

A :class:`ReflectorChain` holds one junction's sensors in approach order
and records which of them have fired; at most one new sensor joins the
chain per scan.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence

from sim.physics import Vec3, distance
from sim.sink import NullSink, PresentationSink

log = logging.getLogger("reflectors")


class ReflectorSensor:
    """A single roadside sensor.

    Parameters
    ----------
    sensor_id : str
        Unique identifier, e.g. ``"J0_R03"``.
    position : Vec3
        Fixed world position.
    detection_radius : float
        Direct siren-detection radius.
    chain_radius : float
        Relay radius to a neighbouring, already-fired sensor.
    pulse_s : float
        Duration of the signal flash.
    """

    def __init__(
        self,
        sensor_id: str,
        position: Vec3,
        detection_radius: float,
        chain_radius: float,
        pulse_s: float,
    ) -> None:
        self.id = sensor_id
        self.position = position
        self.detection_radius = detection_radius
        self.chain_radius = chain_radius
        self.pulse_s = pulse_s
        self.signaling = False
        self.pulse_remaining = 0.0

    def __repr__(self) -> str:
        return f"ReflectorSensor({self.id!r}, x={self.position.x:.1f}, z={self.position.z:.1f})"

    def can_detect_vehicle(self, vehicle_pos: Vec3) -> bool:
        return distance(self.position, vehicle_pos) < self.detection_radius

    def is_near_other_sensor(self, other_pos: Vec3) -> bool:
        return distance(self.position, other_pos) < self.chain_radius

    def trigger_signal(self, sink: PresentationSink) -> bool:
        """Start a flash.  A sensor that is already flashing is left alone."""
        if self.signaling:
            return False
        self.signaling = True
        self.pulse_remaining = self.pulse_s
        sink.reflector_pulse(self.id, int(round(self.pulse_s * 1000)))
        return True

    def tick(self, dt: float) -> None:
        if not self.signaling:
            return
        self.pulse_remaining -= dt
        if self.pulse_remaining <= 0:
            self.signaling = False
            self.pulse_remaining = 0.0


class ReflectorChain:
    """Ordered sensors leading into one junction plus the fired subset."""

    def __init__(self, sensors: Sequence[ReflectorSensor] = ()) -> None:
        self.sensors: List[ReflectorSensor] = list(sensors)
        self.fired: List[ReflectorSensor] = []

    def __len__(self) -> int:
        return len(self.fired)

    def __iter__(self) -> Iterator[ReflectorSensor]:
        return iter(self.fired)

    @property
    def last(self) -> Optional[ReflectorSensor]:
        return self.fired[-1] if self.fired else None

    def scan(
        self, vehicle_pos: Vec3, sink: Optional[PresentationSink] = None,
    ) -> Optional[ReflectorSensor]:
        """Fire the first un-fired sensor that detects or relays the vehicle.

        A sensor qualifies when it hears the siren directly, or when the
        chain is non-empty and it is within relay range of the most recently
        fired sensor.  Scanning stops at the first match.
        """
        sink = sink or NullSink()
        last = self.last
        for sensor in self.sensors:
            if sensor in self.fired:
                continue
            direct = sensor.can_detect_vehicle(vehicle_pos)
            if direct or (last is not None and sensor.is_near_other_sensor(last.position)):
                sensor.trigger_signal(sink)
                self.fired.append(sensor)
                log.debug(
                    "%s fired (%s), chain length %d",
                    sensor.id, "direct" if direct else "relay", len(self.fired),
                )
                return sensor
        return None

    def clear(self) -> None:
        self.fired = []

    def tick(self, dt: float) -> None:
        """Advance every sensor's signal pulse."""
        for sensor in self.sensors:
            sensor.tick(dt)
