"""
sim/sink.py
===========
Outbound port from the simulation core to its presentation layer.

The core only *reports* state changes; it never waits on or reads from the
sink.  :class:`bus.sink.BusSink` is the production implementation,
:class:`NullSink` discards everything.
"""

from __future__ import annotations

from typing import Mapping, Protocol, Union

from sim.light_cycle import LightColor
from sim.network import Approach

Subject = Union[int, str]


class PresentationSink(Protocol):
    def apply_light_colors(
        self, junction_id: int, colors: Mapping[Approach, LightColor],
    ) -> None:
        """A junction's displayed light colours should change."""

    def reflector_pulse(self, sensor_id: str, duration_ms: int) -> None:
        """A reflector should flash for *duration_ms*."""

    def status_text(self, subject: Subject, message: str) -> None:
        """Free-text status for a junction id or the emergency vehicle."""


class NullSink:
    """Sink that drops every notification."""

    def apply_light_colors(self, junction_id, colors) -> None:
        pass

    def reflector_pulse(self, sensor_id, duration_ms) -> None:
        pass

    def status_text(self, subject, message) -> None:
        pass
