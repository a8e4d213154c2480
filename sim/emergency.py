"""
sim/emergency.py
================
The emergency vehicle and its read-only per-tick snapshot.

Lifecycle::

    INACTIVE ──activate()──▶ APPROACHING ──path end──▶ DEACTIVATING ──fade──▶ FADED

While APPROACHING the vehicle drives its predetermined path at constant
speed.  DEACTIVATING is the fade-out window; junction and vehicle logic
still treat the vehicle as present during it.  Everything downstream reads
an :class:`EmergencyVehicleSnapshot` rather than the mutable vehicle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from sim.physics import EAST, ZERO, Vec3
from sim.sink import NullSink, PresentationSink

log = logging.getLogger("emergency")

STATUS_SUBJECT = "EV"


class EmergencyState(str, Enum):
    INACTIVE = "INACTIVE"
    APPROACHING = "APPROACHING"
    DEACTIVATING = "DEACTIVATING"
    FADED = "FADED"


@dataclass(frozen=True)
class EmergencyVehicleSnapshot:
    """Immutable view of the emergency vehicle for one tick.

    Attributes
    ----------
    position : Vec3
        Current position.
    direction : Vec3
        Unit heading (never zero once the vehicle has a path).
    target : Vec3 or None
        Current path waypoint; ``None`` once the path end is reached.
    target_index : int
        Index of *target* in the path.
    is_final_target : bool
        ``True`` when *target* is the last waypoint or there is none left.
    state : EmergencyState
    """

    position: Vec3
    direction: Vec3
    target: Optional[Vec3]
    target_index: int
    is_final_target: bool
    state: EmergencyState

    @property
    def active(self) -> bool:
        """Present on the road: approaching or still fading out."""
        return self.state in (EmergencyState.APPROACHING, EmergencyState.DEACTIVATING)

    @property
    def approaching(self) -> bool:
        return self.state is EmergencyState.APPROACHING

    @property
    def lane_z(self) -> float:
        """Lateral lane the vehicle is heading for."""
        return self.target.z if self.target is not None else self.position.z

    @classmethod
    def absent(cls) -> "EmergencyVehicleSnapshot":
        return cls(ZERO, EAST, None, 0, True, EmergencyState.INACTIVE)


class EmergencyVehicle:
    """Path-following emergency vehicle.

    Parameters
    ----------
    path : sequence of Vec3
        Predetermined route; the vehicle starts on ``path[0]``.
    speed : float
        Cruise speed in units per second.
    fade_s : float
        Length of the fade-out window after the path end.
    sink : PresentationSink or None
        Receives ``"Approaching"`` / ``"Reached Destination / Fading"`` /
        ``"Departed"`` status text.
    """

    def __init__(
        self,
        path: Sequence[Vec3],
        speed: float,
        fade_s: float,
        sink: Optional[PresentationSink] = None,
    ) -> None:
        self.path: List[Vec3] = list(path)
        self.speed = speed
        self.fade_s = fade_s
        self.sink: PresentationSink = sink or NullSink()
        if not self.path:
            log.warning("Emergency vehicle path is empty; it will never activate")
        self._place_at_start()

    def __repr__(self) -> str:
        return (
            f"EmergencyVehicle({self.state.value}, x={self.position.x:.1f}, "
            f"z={self.position.z:.1f}, target={self.target_index})"
        )

    def _place_at_start(self) -> None:
        self.state = EmergencyState.INACTIVE
        self.target_index = 0
        self.fade_elapsed = 0.0
        self.position = self.path[0] if self.path else ZERO
        self.direction = EAST
        if len(self.path) > 1:
            heading = (self.path[1] - self.path[0]).normalized()
            if heading != ZERO:
                self.direction = heading

    # ── lifecycle ─────────────────────────────────────────────────────────

    def activate(self) -> bool:
        """Put the vehicle on the start of its path and begin the run."""
        if not self.path:
            log.warning("Cannot activate emergency vehicle without a path")
            return False
        self._place_at_start()
        self.state = EmergencyState.APPROACHING
        log.info("Emergency vehicle activated at (%.1f, %.1f)", self.position.x, self.position.z)
        self.sink.status_text(STATUS_SUBJECT, "Approaching")
        return True

    def deactivate(self) -> None:
        """Start the fade-out window."""
        if self.state is not EmergencyState.APPROACHING:
            return
        self.state = EmergencyState.DEACTIVATING
        self.fade_elapsed = 0.0
        log.info("Emergency vehicle reached destination, fading out")
        self.sink.status_text(STATUS_SUBJECT, "Reached Destination / Fading")

    @property
    def fade_progress(self) -> float:
        """0 while driving, rising to 1 over the fade window."""
        if self.state is EmergencyState.FADED:
            return 1.0
        if self.state is EmergencyState.DEACTIVATING:
            return min(1.0, self.fade_elapsed / self.fade_s)
        return 0.0

    @property
    def opacity(self) -> float:
        return max(0.0, 1.0 - self.fade_progress)

    # ── tick ──────────────────────────────────────────────────────────────

    def update(self, dt: float) -> None:
        if self.state is EmergencyState.DEACTIVATING:
            self.fade_elapsed += dt
            if self.fade_elapsed >= self.fade_s:
                self.state = EmergencyState.FADED
                log.info("Emergency vehicle departed")
                self.sink.status_text(STATUS_SUBJECT, "Departed")
            return
        if self.state is not EmergencyState.APPROACHING:
            return

        target = self.path[self.target_index]
        offset = target - self.position
        gap = offset.length()
        step = self.speed * dt

        if gap <= step:
            self.position = target
            self.target_index += 1
            if self.target_index >= len(self.path):
                self.deactivate()
                return
            heading = (self.path[self.target_index] - self.position).normalized()
            if heading != ZERO:
                self.direction = heading
            log.debug("waypoint %d reached, next %s", self.target_index - 1, self.path[self.target_index])
        else:
            self.direction = offset.scaled(1.0 / gap)
            self.position = self.position + self.direction.scaled(step)

    def snapshot(self) -> EmergencyVehicleSnapshot:
        has_target = self.target_index < len(self.path)
        return EmergencyVehicleSnapshot(
            position=self.position,
            direction=self.direction,
            target=self.path[self.target_index] if has_target else None,
            target_index=self.target_index,
            is_final_target=self.target_index >= len(self.path) - 1,
            state=self.state,
        )
