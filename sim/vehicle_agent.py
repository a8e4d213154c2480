"""
sim/vehicle_agent.py
====================
A single ordinary vehicle on the east-west corridor.

Each agent owns its position, a signed nominal speed (the sign is the
travel direction along ``x``), its lane offset and two flags:

``stopped_for_signal``
    Held at a red or yellow light.  Implies zero speed, except while
    creeping to make way for the emergency vehicle.
``evading``
    Shifting laterally out of the emergency vehicle's lane.

Per tick the agent reads the relevant junction's light, reacts to the
emergency vehicle, then integrates its motion.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence, Tuple

from sim.emergency import EmergencyVehicleSnapshot
from sim.junction import ApproachLight, Approach, JunctionController, LightColor
from sim.physics import Vec3, clamp, damp, sign
from sim.traffic_policy import PreemptionPolicy

log = logging.getLogger("vehicle_agent")

# UI colour palette
VEHICLE_COLORS: Tuple[Tuple[int, int, int], ...] = (
    ( 86, 168, 255),
    (255,  88,  88),
    (100, 226, 170),
    (246, 191,  90),
    (180, 120, 255),
    (255, 160, 100),
)

_SNAP_EPS = 0.01


@dataclass
class VehicleAgent:
    """One ordinary vehicle.

    Attributes
    ----------
    id : str
        Unique identifier (e.g. ``VEH_003``).
    x : float
        Longitudinal position along the corridor.
    z : float
        Current lateral offset.
    speed : float
        Signed nominal speed; positive travels east.
    policy : PreemptionPolicy
        Shared tunables.
    color : tuple
        RGB colour for the view.
    """

    id: str
    x: float
    z: float
    speed: float
    policy: PreemptionPolicy = field(repr=False)
    color: Tuple[int, int, int] = VEHICLE_COLORS[0]

    current_speed: float = field(init=False)
    initial_z: float = field(init=False)
    target_z: float = field(init=False)
    stopped_for_signal: bool = field(default=False, init=False)
    evading: bool = field(default=False, init=False)
    creeping: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.current_speed = self.speed
        self.initial_z = self.z
        self.target_z = self.z

    @property
    def direction(self) -> int:
        return sign(self.speed)

    @property
    def position(self) -> Vec3:
        return Vec3(self.x, 0.0, self.z)

    @property
    def length(self) -> float:
        return self.policy.vehicle_length

    # ── junction lookup ───────────────────────────────────────────────────

    def find_relevant(
        self, junctions: Sequence[JunctionController],
    ) -> Tuple[Optional[JunctionController], Optional[ApproachLight]]:
        """Nearest junction ahead within look-ahead and the light facing us.

        A junction counts while its centre is less than one vehicle length
        behind and less than ``detection_distance + detection_margin`` ahead.
        Ties go to the lower junction index.
        """
        p = self.policy
        best: Optional[JunctionController] = None
        best_gap = 0.0
        for junction in junctions:
            gap = (junction.center.x - self.x) * self.direction
            if -self.length < gap < p.detection_distance + p.detection_margin:
                if best is None or gap < best_gap:
                    best, best_gap = junction, gap
        if best is None:
            return None, None
        approach = Approach.EAST if self.direction > 0 else Approach.WEST
        light = best.light(approach)
        if light is None:
            log.debug("%s: %s has no %s light", self.id, best.id, approach.value)
            return None, None
        return best, light

    # ── signal handling ───────────────────────────────────────────────────

    def handle_light(
        self,
        junction: Optional[JunctionController],
        light: Optional[ApproachLight],
        needs_way: bool,
    ) -> None:
        """Stop, go or creep according to the relevant light."""
        self.creeping = False
        if junction is None or light is None:
            self.stopped_for_signal = False
            if not self.evading:
                self.current_speed = self.speed
            return

        slow = abs(self.current_speed) < abs(self.speed)
        if needs_way and self.evading and (self.stopped_for_signal or slow):
            self._creep()
            return

        p = self.policy
        gap = (junction.center.x - self.x) * self.direction
        if 0 < gap < p.detection_distance:
            color = light.color
            holding = color in (LightColor.RED, LightColor.YELLOW)
            if holding and gap < p.stop_window:
                if not self.evading:
                    self.stopped_for_signal = True
                    self.current_speed = 0.0
            elif color is LightColor.GREEN or (self.stopped_for_signal and not holding):
                self.stopped_for_signal = False
                if not self.evading:
                    self.current_speed = self.speed
        elif gap <= 0:
            self.stopped_for_signal = False

    def _creep(self) -> None:
        self.stopped_for_signal = False
        self.creeping = True
        self.current_speed = self.speed * self.policy.creep_fraction
        log.debug("%s: creeping to make way (%.2f)", self.id, self.current_speed)

    # ── emergency vehicle ─────────────────────────────────────────────────

    def needs_way(self, snap: EmergencyVehicleSnapshot) -> bool:
        """Emergency vehicle is right behind or alongside, in a nearby lane."""
        if not snap.active:
            return False
        p = self.policy
        dx = self.x - snap.position.x
        dz = abs(self.z - snap.position.z)
        return -p.evade_distance / 2.0 < dx < self.length * 2.0 and dz < p.lane_width * 1.5

    def in_evasion_window(self, snap: EmergencyVehicleSnapshot) -> bool:
        if not snap.active:
            return False
        dx = self.x - snap.position.x
        ahead_or_overlap = (
            (self.speed > 0 and dx > -self.length * 1.5)
            or (self.speed < 0 and dx < self.length * 1.5)
        )
        return ahead_or_overlap and abs(dx) < self.policy.evade_distance

    def start_evade(self, emergency_lane_z: float) -> None:
        """Shift away from *emergency_lane_z* when sharing that lane."""
        if self.evading and self.target_z != self.initial_z:
            return
        p = self.policy
        if abs(self.z - emergency_lane_z) >= p.lane_width * p.evade_lane_match:
            self.evading = False
            self.target_z = self.initial_z
            return
        self.evading = True
        if emergency_lane_z <= self.initial_z:
            shifted = self.initial_z + p.evade_shift
        else:
            shifted = self.initial_z - p.evade_shift
        limit = p.lateral_limit
        self.target_z = clamp(shifted, -limit, limit)
        log.debug("%s: evading to z=%.2f", self.id, self.target_z)

    def stop_evade(self) -> None:
        if not self.evading and abs(self.z - self.initial_z) < 0.1:
            return
        self.evading = False
        self.target_z = self.initial_z

    def react_to_emergency(self, snap: EmergencyVehicleSnapshot, needs_way: bool) -> None:
        if not self.in_evasion_window(snap):
            if self.evading:
                self.stop_evade()
            return
        if not self.evading:
            self.start_evade(snap.lane_z)
        if self.evading and self.stopped_for_signal and needs_way:
            self._creep()

    # ── integration ───────────────────────────────────────────────────────

    def integrate(self, dt: float) -> None:
        """Advance position, wrap at the road ends and settle the lane offset."""
        if not self.stopped_for_signal or self.evading:
            self.x += self.current_speed * dt

        extent = self.policy.road_extent
        if self.current_speed > 0 and self.x > extent:
            self.x = -extent
        elif self.current_speed < 0 and self.x < -extent:
            self.x = extent

        if abs(self.z - self.target_z) > _SNAP_EPS:
            self.z = damp(self.z, self.target_z, self.policy.lateral_damping, dt)
        else:
            self.z = self.target_z
            if not self.evading and self.z != self.initial_z:
                self.target_z = self.initial_z

        if not self.stopped_for_signal and not self.evading:
            if abs(self.current_speed) < abs(self.speed):
                self.current_speed = self.speed
                self.creeping = False
        if self.stopped_for_signal and not self.evading:
            self.current_speed = 0.0

    # ── tick ──────────────────────────────────────────────────────────────

    def tick(
        self,
        junctions: Sequence[JunctionController],
        snap: EmergencyVehicleSnapshot,
        dt: float,
    ) -> None:
        needs_way = self.needs_way(snap)
        junction, light = self.find_relevant(junctions)
        self.handle_light(junction, light, needs_way)
        self.react_to_emergency(snap, needs_way)
        self.integrate(dt)

    def as_dict(self) -> Dict[str, Any]:
        """Plain payload for the view and the tick trace."""
        return {
            "id":       self.id,
            "x":        self.x,
            "z":        self.z,
            "speed":    self.current_speed,
            "stopped":  self.stopped_for_signal,
            "evading":  self.evading,
            "creeping": self.creeping,
            "color":    self.color,
        }
