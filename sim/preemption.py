"""
sim/preemption.py
=================
Cross-junction orchestrator that decides, once per tick, which junctions
enter or leave emergency preemption.

Per junction that the emergency vehicle has not yet passed:

1. **Heading** – is the vehicle moving toward the junction centre?
2. **Zone trigger** – heading toward it and inside ``preemption_radius``.
3. **Sensor trigger** – the junction's reflector chain fires a sensor.
4. **Release** – the vehicle *and* its current path target are both past
   ``release_threshold`` beyond the centre along the travel direction.

Steps 2 and 3 each record their own flag on the junction, so the status
text reports the combined trigger reason regardless of which one acted
first.  The zone check always runs before the sensor scan.
"""

from __future__ import annotations

import logging
from typing import Dict, Sequence, Set, Tuple

from sim.emergency import EmergencyVehicleSnapshot
from sim.junction import JunctionController, TriggerReason
from sim.physics import ZERO, Vec3, distance, project
from sim.traffic_policy import PreemptionPolicy

log = logging.getLogger("preemption")


class PreemptionCoordinator:
    """Drive every :class:`~sim.junction.JunctionController` from the
    emergency vehicle's snapshot.

    Parameters
    ----------
    policy : PreemptionPolicy
        Source of radii, thresholds and the stall-warning delay.
    """

    def __init__(self, policy: PreemptionPolicy) -> None:
        self.policy = policy
        self._stalled_for: Dict[int, float] = {}
        self._stall_warned: Set[int] = set()

    def reset(self) -> None:
        self._stalled_for.clear()
        self._stall_warned.clear()

    # ── geometry ──────────────────────────────────────────────────────────

    def is_moving_toward(self, center: Vec3, snap: EmergencyVehicleSnapshot) -> bool:
        """Heading check along the vehicle's travel direction.

        True when the current target lies on the far side of *center* (or
        on it), when reaching the target brings the vehicle closer to
        *center*, or when the vehicle is already within
        ``near_field_factor * junction_size`` of it.
        """
        p = self.policy
        if distance(snap.position, center) < p.near_field_factor * p.junction_size:
            return True
        if snap.target is None or snap.direction == ZERO:
            return False
        u = snap.direction
        s_pos = project(snap.position, u)
        s_tgt = project(snap.target, u)
        s_ctr = project(center, u)
        if (s_tgt - s_ctr) * (s_pos - s_ctr) <= 0:
            return True
        return abs(s_ctr - s_tgt) < abs(s_ctr - s_pos)

    def has_passed(
        self, center: Vec3, snap: EmergencyVehicleSnapshot,
    ) -> Tuple[bool, bool]:
        """Return ``(vehicle_past, target_past)`` for the release test.

        A missing target or the path's final waypoint always counts as past.
        """
        threshold = self.policy.release_threshold
        u = snap.direction
        s_ctr = project(center, u)
        vehicle_past = project(snap.position, u) - s_ctr > threshold
        if snap.target is None or snap.is_final_target:
            target_past = True
        else:
            target_past = project(snap.target, u) - s_ctr > threshold
        return vehicle_past, target_past

    # ── tick ──────────────────────────────────────────────────────────────

    def update(
        self,
        junctions: Sequence[JunctionController],
        snap: EmergencyVehicleSnapshot,
        dt: float,
    ) -> None:
        """Evaluate triggers and release for every junction."""
        if not snap.active:
            return
        for junction in junctions:
            if junction.has_vehicle_passed:
                continue
            if snap.approaching:
                self._evaluate_triggers(junction, snap)
            if junction.is_preempted:
                self._evaluate_release(junction, snap, dt)

    def _evaluate_triggers(
        self, junction: JunctionController, snap: EmergencyVehicleSnapshot,
    ) -> None:
        before = junction.reason
        moving = self.is_moving_toward(junction.center, snap)
        gap = distance(snap.position, junction.center)

        if moving and gap < self.policy.preemption_radius:
            junction.preempt(snap.direction)
            if junction.is_preempted and not junction.zone_triggered:
                log.info("%s: vehicle in preemption zone (%.1f)", junction.id, gap)
                junction.zone_triggered = True

        if moving and junction.is_configured and junction.chain.sensors:
            fired = junction.chain.scan(snap.position, junction.sink)
            if fired is not None:
                junction.preempt(snap.direction)
                if not junction.sensors_triggered:
                    log.info("%s: reflector %s detected vehicle", junction.id, fired.id)
                    junction.sensors_triggered = True

        reason = junction.reason
        if reason is not before and reason is not TriggerReason.NONE:
            junction.sink.status_text(junction.index, f"{junction.id}: Preempting ({reason.label})")
            log.debug("%s: trigger reason %s -> %s", junction.id, before.value, reason.value)

    def _evaluate_release(
        self, junction: JunctionController, snap: EmergencyVehicleSnapshot, dt: float,
    ) -> None:
        vehicle_past, target_past = self.has_passed(junction.center, snap)
        if vehicle_past and target_past:
            junction.release()
            self._stalled_for.pop(junction.index, None)
            self._stall_warned.discard(junction.index)
            log.info("Vehicle has passed %s, lights released", junction.id)
            junction.sink.status_text(junction.index, f"{junction.id}: Passed")
            return

        if not vehicle_past:
            self._stalled_for.pop(junction.index, None)
            return
        waited = self._stalled_for.get(junction.index, 0.0) + dt
        self._stalled_for[junction.index] = waited
        if waited >= self.policy.release_stall_warning_s and junction.index not in self._stall_warned:
            self._stall_warned.add(junction.index)
            log.warning(
                "%s: release pending for %.1fs, vehicle at (%.1f, %.1f) is past "
                "but its target %s is not",
                junction.id, waited, snap.position.x, snap.position.z, snap.target,
            )
