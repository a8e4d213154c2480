"""
sim/network.py
==============
Static road layout for the emergency corridor.

Defines the :class:`Approach` and :class:`Arm` enums and
:class:`RoadLayout`, a parametric description that locates junction
centres along an east-west corridor, places smart reflectors on the arms
leading into each junction, and generates the emergency vehicle's
predetermined route.

:func:`default_layout` builds the layout from the default policy.
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import List, Optional, Tuple

from sim.physics import Vec3
from sim.traffic_policy import PreemptionPolicy

log = logging.getLogger("network")


# ── Approach roles / arms ─────────────────────────────────────────────────────

class Approach(str, Enum):
    """Traffic-light role, named after the travel direction it controls.

    ``EAST`` is the light facing east-bound traffic (entering from the west
    arm), ``NORTH`` faces north-bound traffic, and so on.
    """

    NORTH = "NORTH"
    SOUTH = "SOUTH"
    EAST = "EAST"
    WEST = "WEST"

    @property
    def axis(self) -> str:
        """``"EW"`` or ``"NS"``."""
        return "EW" if self in (Approach.EAST, Approach.WEST) else "NS"


class Arm(str, Enum):
    """Side of a junction a road arm leaves from."""

    N = "N"
    S = "S"
    E = "E"
    W = "W"

    @property
    def bound(self) -> Approach:
        """Travel direction of traffic entering the junction along this arm."""
        return _ARM_BOUND[self]


_ARM_BOUND = {
    Arm.W: Approach.EAST,
    Arm.E: Approach.WEST,
    Arm.S: Approach.NORTH,
    Arm.N: Approach.SOUTH,
}


# ── Road layout ───────────────────────────────────────────────────────────────

class RoadLayout:
    """Junction centres, reflector placements and the emergency route.

    The corridor is ``num_junctions + 1`` straight segments of
    ``road_length`` separated by square junction boxes of
    ``junction_size``, centred on the origin along ``x``.  Each junction
    also has a north and a south arm of ``road_length``.

    Parameters
    ----------
    policy : PreemptionPolicy
        Source of every layout parameter.
    """

    def __init__(self, policy: PreemptionPolicy) -> None:
        self.policy = policy
        self._centers: List[Vec3] = self._compute_centers()
        log.info(
            "Junction centers: %s",
            ", ".join(f"({c.x:.1f}, {c.z:.1f})" for c in self._centers),
        )

    def _compute_centers(self) -> List[Vec3]:
        p = self.policy
        current_x = -p.corridor_length / 2.0
        centers: List[Vec3] = []
        for i in range(p.num_junctions + 1):
            current_x += p.road_length
            if i < p.num_junctions:
                centers.append(Vec3(current_x + p.junction_size / 2.0, 0.0, 0.0))
                current_x += p.junction_size
        centers.sort(key=lambda c: c.x)
        return centers

    # ── queries ───────────────────────────────────────────────────────────

    @property
    def junction_count(self) -> int:
        return len(self._centers)

    def junction_centers(self) -> List[Vec3]:
        """Junction centres ordered west to east."""
        return list(self._centers)

    def junction_center(self, index: int) -> Optional[Vec3]:
        """Centre of junction *index*, or ``None`` for an invalid index."""
        if 0 <= index < len(self._centers):
            return self._centers[index]
        log.warning("junction_center: invalid junction index %s", index)
        return None

    def reflector_positions(self, index: int, arm: Arm = Arm.W) -> List[Vec3]:
        """Reflector positions on *arm* of junction *index*.

        Reflectors sit on the arm's centre line, spaced
        ``reflector_spacing`` apart.  The list is ordered in the sequence an
        approaching vehicle should chain them: nearest-to-junction first for
        the west and south arms, placement order for the east and north arms.
        Returns an empty list for an invalid index or arm.
        """
        center = self.junction_center(index)
        if center is None:
            return []
        try:
            arm = Arm(arm)
        except ValueError:
            log.warning("reflector_positions: unknown arm %r", arm)
            return []

        p = self.policy
        count = int(math.floor(p.road_length / p.reflector_spacing))
        half = p.junction_size / 2.0
        offsets = [(i + 0.5) * p.reflector_spacing for i in range(count)]

        if arm is Arm.W:
            start = center.x - half - p.road_length
            positions = [Vec3(start + o, 0.0, center.z) for o in offsets]
            positions.reverse()
        elif arm is Arm.E:
            start = center.x + half
            positions = [Vec3(start + o, 0.0, center.z) for o in offsets]
        elif arm is Arm.S:
            start = center.z - half - p.road_length
            positions = [Vec3(center.x, 0.0, start + o) for o in offsets]
            positions.reverse()
        else:
            start = center.z + half
            positions = [Vec3(center.x, 0.0, start + o) for o in offsets]
        return positions

    def emergency_path(self) -> List[Vec3]:
        """Predetermined west-to-east emergency route.

        Starts ``0.2 * road_length`` before the west end, passes an approach,
        centre and exit waypoint at every junction and ends the same margin
        past the east end, all on ``emergency_lane_z``.
        """
        p = self.policy
        lane_z = p.emergency_lane_z
        margin = p.road_length * 0.2
        half = p.corridor_length / 2.0

        path = [Vec3(-half - margin, 0.0, lane_z)]
        if self._centers:
            for c in self._centers:
                path.append(Vec3(c.x - p.junction_size, 0.0, lane_z))
                path.append(Vec3(c.x, 0.0, lane_z))
                path.append(Vec3(c.x + p.junction_size, 0.0, lane_z))
        else:
            path.append(Vec3(0.0, 0.0, lane_z))
        path.append(Vec3(half + margin, 0.0, lane_z))

        unique = [pt for i, pt in enumerate(path) if i == 0 or pt != path[i - 1]]
        log.debug("Emergency path: %s", unique)
        return unique

    def get_bounds(self, margin: float = 20.0) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """Return ``((min_x, max_x), (min_z, max_z))`` covering roads and arms."""
        p = self.policy
        half_x = p.corridor_length / 2.0 + margin
        half_z = p.junction_size / 2.0 + p.road_length + margin
        return ((-half_x, half_x), (-half_z, half_z))


def default_layout(policy: Optional[PreemptionPolicy] = None) -> RoadLayout:
    """Build a :class:`RoadLayout` from *policy* (defaults when ``None``)."""
    return RoadLayout(policy or PreemptionPolicy())
