#!/usr/bin/env python3
"""
sim/world.py
============
Explicit simulation context for the emergency corridor.

:class:`SimulationWorld` owns every piece of mutable state: the junction
controllers, the emergency vehicle, the preemption coordinator and the
ordinary vehicles.  One call to :meth:`SimulationWorld.tick` performs one
strictly ordered step::

    activation countdown
    → emergency vehicle
    → preemption coordinator
    → junction cycles / reflector pulses
    → vehicle agents

Nothing outside the world mutates this state between ticks.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

from sim.emergency import EmergencyState, EmergencyVehicle, EmergencyVehicleSnapshot
from sim.junction import Approach, ApproachLight, JunctionController
from sim.light_cycle import LightCycle, default_cycle
from sim.network import Arm, RoadLayout
from sim.physics import clamp
from sim.preemption import PreemptionCoordinator
from sim.reflectors import ReflectorSensor
from sim.sink import NullSink, PresentationSink
from sim.traffic_policy import PreemptionPolicy
from sim.vehicle_agent import VEHICLE_COLORS, VehicleAgent

log = logging.getLogger("world")


class SimulationWorld:
    """Corridor with signalised junctions, one emergency vehicle and traffic.

    Parameters
    ----------
    policy : PreemptionPolicy or None
        Tunable constants; uses defaults when *None*.
    layout : RoadLayout or None
        Static geometry; built from *policy* when *None*.
    sink : PresentationSink or None
        Receives light, reflector and status notifications.
    seed : int or None
        Random seed for the vehicle population.
    reflector_arm : Arm
        Arm of every junction that carries reflectors.
    auto_activate : bool
        Dispatch the emergency vehicle after
        ``policy.emergency_activation_delay_s``.  When ``False`` call
        :meth:`activate_emergency` yourself.
    """

    def __init__(
        self,
        policy: Optional[PreemptionPolicy] = None,
        layout: Optional[RoadLayout] = None,
        sink: Optional[PresentationSink] = None,
        seed: Optional[int] = None,
        reflector_arm: Arm = Arm.W,
        auto_activate: bool = True,
    ) -> None:
        self.policy = policy or PreemptionPolicy()
        self.layout = layout or RoadLayout(self.policy)
        self.sink: PresentationSink = sink or NullSink()
        self.seed = seed
        self.reflector_arm = reflector_arm
        self.auto_activate = auto_activate
        self.coordinator = PreemptionCoordinator(self.policy)
        self._init_state()

    # ── initialisation / reset ────────────────────────────────────────────

    def _init_state(self) -> None:
        self._rng = random.Random(self.seed)
        self.time = 0.0
        self.tick_count = 0
        self.coordinator.reset()
        self.junctions: List[JunctionController] = self._build_junctions()
        self.emergency = EmergencyVehicle(
            self.layout.emergency_path(),
            speed=self.policy.emergency_speed,
            fade_s=self.policy.emergency_fade_s,
            sink=self.sink,
        )
        self.vehicles: List[VehicleAgent] = [
            self._make_random_vehicle(idx) for idx in range(self.policy.num_vehicles)
        ]
        self._activation_remaining: Optional[float] = (
            self.policy.emergency_activation_delay_s if self.auto_activate else None
        )
        log.info(
            "World ready: %d junctions, %d vehicles, %d waypoints",
            len(self.junctions), len(self.vehicles), len(self.emergency.path),
        )

    def reset(self) -> None:
        """Rebuild junctions, vehicles and the emergency vehicle from scratch."""
        self._init_state()

    def _build_junctions(self) -> List[JunctionController]:
        p = self.policy
        junctions = []
        for index, center in enumerate(self.layout.junction_centers()):
            lights = {a: ApproachLight(f"J{index}_{a.value}", a) for a in Approach}
            sensors = [
                ReflectorSensor(
                    f"J{index}_R{k:02d}",
                    pos,
                    detection_radius=p.siren_detection_radius,
                    chain_radius=p.reflector_chain_radius,
                    pulse_s=p.reflector_pulse_s,
                )
                for k, pos in enumerate(self.layout.reflector_positions(index, self.reflector_arm))
            ]
            junctions.append(
                JunctionController(
                    index, center, lights, LightCycle(default_cycle(p)), sensors, self.sink,
                )
            )
        return junctions

    def _make_random_vehicle(self, idx: int) -> VehicleAgent:
        """Random travel direction, lane side, start position and speed."""
        p = self.policy
        heading = 1 if self._rng.random() > 0.5 else -1
        lane_side = 1 if self._rng.random() > 0.5 else -1
        spread = p.corridor_length / 2.0 * 0.95
        return VehicleAgent(
            id=f"VEH_{idx:03d}",
            x=self._rng.uniform(-spread, spread),
            z=p.lane_width / 2.0 * lane_side,
            speed=heading * self._rng.uniform(p.min_vehicle_speed, p.max_vehicle_speed),
            policy=p,
            color=VEHICLE_COLORS[idx % len(VEHICLE_COLORS)],
        )

    # ── emergency dispatch ────────────────────────────────────────────────

    def activate_emergency(self) -> bool:
        """Reset junction pass flags and send the emergency vehicle off."""
        self._activation_remaining = None
        for junction in self.junctions:
            junction.reset_for_activation()
        self.coordinator.reset()
        return self.emergency.activate()

    def _tick_activation(self, dt: float) -> None:
        if self._activation_remaining is None:
            return
        self._activation_remaining -= dt
        if self._activation_remaining <= 0:
            self.activate_emergency()

    # ── tick ──────────────────────────────────────────────────────────────

    def tick(self, dt: float) -> EmergencyVehicleSnapshot:
        """Advance the whole world by *dt* seconds (clamped to ``max_tick_s``).

        Returns the emergency-vehicle snapshot the agents saw this tick.
        """
        dt = clamp(dt, 0.0, self.policy.max_tick_s)
        if dt <= 0:
            return self.emergency.snapshot()
        self.time += dt
        self.tick_count += 1

        self._tick_activation(dt)
        self.emergency.update(dt)
        snap = self.emergency.snapshot()
        self.coordinator.update(self.junctions, snap, dt)
        for junction in self.junctions:
            junction.tick(dt)
        for vehicle in self.vehicles:
            vehicle.tick(self.junctions, snap, dt)
        return snap

    # ── queries ───────────────────────────────────────────────────────────

    def is_finished(self) -> bool:
        return self.emergency.state is EmergencyState.FADED

    def junction(self, index: int) -> Optional[JunctionController]:
        if 0 <= index < len(self.junctions):
            return self.junctions[index]
        log.warning("junction: invalid junction index %s", index)
        return None

    def state(self) -> Dict[str, Any]:
        """Plain snapshot of the world for the view and debugging."""
        ev = self.emergency
        return {
            "time": self.time,
            "tick": self.tick_count,
            "emergency": {
                "state": ev.state.value,
                "x": ev.position.x,
                "z": ev.position.z,
                "target_index": ev.target_index,
                "opacity": ev.opacity,
            },
            "junctions": [
                {
                    "id": j.id,
                    "mode": j.mode.value,
                    "phase": j.cycle.phase.value,
                    "reason": j.reason.value,
                    "passed": j.has_vehicle_passed,
                    "chain": len(j.chain),
                    "lights": {a.value: c.value for a, c in j.colors().items()},
                }
                for j in self.junctions
            ],
            "vehicles": [v.as_dict() for v in self.vehicles],
        }
