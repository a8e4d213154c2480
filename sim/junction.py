"""
sim/junction.py
===============
Per-junction signal state machine.

A :class:`JunctionController` owns four :class:`ApproachLight` objects,
a :class:`~sim.light_cycle.LightCycle` and the junction's
:class:`~sim.reflectors.ReflectorChain`.  It is in exactly one of two
modes:

``NORMAL``
    The light cycle drives the lights.
``PREEMPTED``
    An emergency override drives the lights; the cycle is paused and
    restarts from its ALL_RED phase on release.

Lights refuse ordinary colour changes while overridden, so the override
always wins.  A junction that does not have all four lights never cycles
and never preempts; it only logs a warning.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, Mapping, Optional, Sequence

from sim.light_cycle import LightColor, LightCycle, Phase, phase_colors
from sim.network import Approach
from sim.physics import Vec3
from sim.reflectors import ReflectorChain, ReflectorSensor
from sim.sink import NullSink, PresentationSink

log = logging.getLogger("junction")

__all__ = [
    "Approach",
    "ApproachLight",
    "JunctionController",
    "JunctionMode",
    "LightColor",
    "TriggerReason",
]


class JunctionMode(str, Enum):
    NORMAL = "NORMAL"
    PREEMPTED = "PREEMPTED"


class TriggerReason(str, Enum):
    """Which preemption condition(s) have held for the current episode."""

    NONE = "NONE"
    ZONE = "ZONE"
    SENSORS = "SENSORS"
    ZONE_AND_SENSORS = "ZONE_AND_SENSORS"

    @property
    def label(self) -> str:
        return _REASON_LABEL[self]


_REASON_LABEL = {
    TriggerReason.NONE: "",
    TriggerReason.ZONE: "Zone",
    TriggerReason.SENSORS: "Reflectors Active",
    TriggerReason.ZONE_AND_SENSORS: "Zone & Reflectors Active",
}


class ApproachLight:
    """One signal head controlling a single approach.

    Parameters
    ----------
    light_id : str
        Identifier such as ``"J0_EAST"``.
    approach : Approach
        Travel direction this head controls.
    """

    def __init__(
        self, light_id: str, approach: Approach, color: LightColor = LightColor.RED,
    ) -> None:
        self.id = light_id
        self.approach = approach
        self.color = color
        self.is_overridden = False

    def __repr__(self) -> str:
        flag = " overridden" if self.is_overridden else ""
        return f"ApproachLight({self.id!r}, {self.color.value}{flag})"

    def set_color(self, color: LightColor, priority: bool = False) -> bool:
        """Change colour; ordinary changes are ignored while overridden."""
        if self.is_overridden and not priority:
            log.debug("[%s] change to %s blocked by override", self.id, color.value)
            return False
        self.color = color
        return True

    def set_priority(self, make_green: bool) -> None:
        self.is_overridden = True
        self.set_color(LightColor.GREEN if make_green else LightColor.RED, priority=True)

    def release_priority(self) -> None:
        self.is_overridden = False


class JunctionController:
    """Combined normal-cycle / preemption state for one junction.

    Parameters
    ----------
    index : int
        Junction index (west to east).
    center : Vec3
        Junction centre.
    lights : mapping of Approach → ApproachLight
        Normally all four approaches.
    cycle : LightCycle
        Phase sequencer for normal operation.
    reflectors : sequence of ReflectorSensor
        Sensors leading into the junction, in chaining order.
    sink : PresentationSink or None
        Receives light-colour changes and reflector pulses.
    """

    def __init__(
        self,
        index: int,
        center: Vec3,
        lights: Mapping[Approach, ApproachLight],
        cycle: LightCycle,
        reflectors: Sequence[ReflectorSensor] = (),
        sink: Optional[PresentationSink] = None,
    ) -> None:
        self.index = index
        self.center = center
        self.lights: Dict[Approach, ApproachLight] = dict(lights)
        self.cycle = cycle
        self.chain = ReflectorChain(reflectors)
        self.sink: PresentationSink = sink or NullSink()
        self.mode = JunctionMode.NORMAL
        self.has_vehicle_passed = False
        self.zone_triggered = False
        self.sensors_triggered = False
        self._warned_unconfigured = False
        self.apply_phase()

    def __repr__(self) -> str:
        return f"JunctionController({self.id}, {self.mode.value}, {self.cycle.phase.value})"

    # ── queries ───────────────────────────────────────────────────────────

    @property
    def id(self) -> str:
        return f"J{self.index}"

    @property
    def is_configured(self) -> bool:
        return all(a in self.lights for a in Approach)

    @property
    def is_preempted(self) -> bool:
        return self.mode is JunctionMode.PREEMPTED

    @property
    def reason(self) -> TriggerReason:
        if self.zone_triggered and self.sensors_triggered:
            return TriggerReason.ZONE_AND_SENSORS
        if self.zone_triggered:
            return TriggerReason.ZONE
        if self.sensors_triggered:
            return TriggerReason.SENSORS
        return TriggerReason.NONE

    def light(self, approach: Approach) -> Optional[ApproachLight]:
        return self.lights.get(approach)

    def color_for(self, approach: Approach) -> Optional[LightColor]:
        light = self.lights.get(approach)
        return light.color if light is not None else None

    def colors(self) -> Dict[Approach, LightColor]:
        return {a: light.color for a, light in self.lights.items()}

    def is_consistent(self) -> bool:
        """Every light's override flag matches the junction mode."""
        return all(l.is_overridden == self.is_preempted for l in self.lights.values())

    # ── normal cycle ──────────────────────────────────────────────────────

    def apply_phase(self) -> None:
        """Push the current cycle phase to the lights (non-override path)."""
        if not self._check_configured("apply phase"):
            return
        before = self.colors()
        for approach, color in phase_colors(self.cycle.phase).items():
            self.lights[approach].set_color(color)
        self._notify_if_changed(before)

    def tick(self, dt: float) -> None:
        """Advance reflector pulses and, in NORMAL mode, the light cycle."""
        self.chain.tick(dt)
        if self.is_preempted or not self.is_configured:
            return
        if self.cycle.tick(dt) is not None:
            self.apply_phase()

    # ── transitions ───────────────────────────────────────────────────────

    def preempt(self, direction: Vec3) -> bool:
        """Enter PREEMPTED, giving green to the axis of *direction*.

        The vehicle's dominant travel axis and its reverse go GREEN, the
        crossing axis goes RED.  Calling again while preempted only
        re-asserts the same colours.  Returns ``True`` on the transition.
        """
        if not self._check_configured("preempt"):
            return False
        green_axis = "EW" if abs(direction.x) >= abs(direction.z) else "NS"
        before = self.colors()
        for approach, light in self.lights.items():
            light.set_priority(approach.axis == green_axis)
        self._notify_if_changed(before)
        if self.is_preempted:
            return False
        self.mode = JunctionMode.PREEMPTED
        log.info("%s: PREEMPTED (%s green)", self.id, green_axis)
        return True

    def release(self) -> bool:
        """Leave PREEMPTED after the emergency vehicle has cleared the junction.

        Releases every override, restarts the cycle at ALL_RED with its full
        duration, clears the reflector chain and marks the junction passed.
        Returns ``True`` on the transition.
        """
        if not self.is_preempted:
            return False
        for light in self.lights.values():
            light.release_priority()
        self.mode = JunctionMode.NORMAL
        self.cycle.reset_to(Phase.ALL_RED)
        self.apply_phase()
        self.chain.clear()
        self.has_vehicle_passed = True
        self.zone_triggered = False
        self.sensors_triggered = False
        log.info("%s: released, cycle restarts at %s", self.id, self.cycle.phase.value)
        return True

    def reset_for_activation(self) -> None:
        """Forget a previous emergency run so the junction can preempt again."""
        self.has_vehicle_passed = False
        if not self.is_preempted:
            self.chain.clear()
            self.zone_triggered = False
            self.sensors_triggered = False

    # ── internals ─────────────────────────────────────────────────────────

    def _check_configured(self, action: str) -> bool:
        if self.is_configured:
            return True
        if not self._warned_unconfigured:
            missing = [a.value for a in Approach if a not in self.lights]
            log.warning("%s: cannot %s, missing lights %s", self.id, action, missing)
            self._warned_unconfigured = True
        return False

    def _notify_if_changed(self, before: Mapping[Approach, LightColor]) -> None:
        after = self.colors()
        if after != before:
            self.sink.apply_light_colors(self.index, after)
