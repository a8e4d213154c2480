#!/usr/bin/env python3
"""
sim/traffic_policy.py
=====================
Tunable layout, signal, preemption and vehicle parameters for the corridor
simulation.  Every constant lives in the frozen :class:`PreemptionPolicy`
dataclass so that experiments can swap policies without touching code.

All distances are world units, all durations are seconds and all speeds
are world units per second.  Values are read once at setup; nothing is
reconfigured while a run is in progress.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PreemptionPolicy:
    """Immutable bag of every tunable simulation parameter.

    Groups: road layout, light cycle, emergency vehicle, preemption,
    smart reflectors, ordinary vehicles, tick clock.
    """

    # ── Road layout ───────────────────────────────────────────────────────
    num_junctions: int = 3
    """Junctions along the east-west corridor."""

    road_length: float = 70.0
    """Length of each straight road segment between junctions."""

    road_width: float = 8.0
    """Full carriageway width (both lanes)."""

    junction_size: float = 12.0
    """Side of the square junction box."""

    lane_width: float = 3.5
    """Width of a single lane; lane centres sit at ``±lane_width / 2``."""

    # ── Light cycle ───────────────────────────────────────────────────────
    green_s: float = 8.0
    """Duration of EW_GREEN and NS_GREEN."""

    yellow_s: float = 2.0
    """Duration of EW_YELLOW and NS_YELLOW."""

    all_red_s: float = 1.0
    """Duration of each ALL_RED clearance phase."""

    # ── Emergency vehicle ─────────────────────────────────────────────────
    emergency_speed: float = 15.0
    """Constant cruise speed along the predetermined path."""

    emergency_lane_z: float = -1.75
    """Lateral offset of the emergency route from the road centre line."""

    emergency_activation_delay_s: float = 2.0
    """Time after start-up before the emergency vehicle is dispatched."""

    emergency_fade_s: float = 2.0
    """Fade-out window after the path end is reached."""

    # ── Preemption ────────────────────────────────────────────────────────
    preemption_radius: float = 150.0
    """Distance from a junction centre at which proximity preemption starts."""

    near_field_factor: float = 1.5
    """Within ``near_field_factor * junction_size`` the heading check is skipped."""

    release_stall_warning_s: float = 10.0
    """Warn when release has been pending this long after the vehicle passed."""

    # ── Smart reflectors ──────────────────────────────────────────────────
    reflector_spacing: float = 6.0
    """Distance between consecutive reflectors on an approach arm."""

    siren_detection_radius: float = 60.0
    """Direct detection radius of a single reflector."""

    reflector_chain_radius: float = 4.0
    """Radius within which a reflector relays the signal of its neighbour."""

    reflector_pulse_s: float = 1.5
    """Duration of a reflector's signal flash."""

    # ── Ordinary vehicles ─────────────────────────────────────────────────
    num_vehicles: int = 10
    min_vehicle_speed: float = 3.6
    max_vehicle_speed: float = 10.8
    vehicle_length: float = 2.8
    vehicle_width: float = 1.3

    evade_distance: float = 25.0
    """Longitudinal window in which vehicles make way for the emergency vehicle."""

    evade_shift: float = 2.5
    """Lateral shift applied when evading."""

    evade_edge_margin: float = 0.2
    """Clearance kept between an evading vehicle and the road edge."""

    evade_lane_match: float = 0.8
    """Fraction of ``lane_width`` within which a vehicle counts as in the emergency lane."""

    stop_distance: float = 8.0
    """Stop-line offset before a junction centre for red/yellow lights."""

    detection_distance: float = 25.0
    """How far ahead a vehicle reads a traffic light."""

    detection_margin: float = 5.0
    """Extra look-ahead used when choosing the relevant junction."""

    creep_fraction: float = 0.3
    """Fraction of nominal speed used while creeping to make way."""

    lateral_damping: float = 5.0
    """Exponential damping rate for lateral lane changes (1/s)."""

    # ── Tick clock ────────────────────────────────────────────────────────
    max_tick_s: float = 0.05
    """Upper clamp on a single simulation step."""

    def __post_init__(self) -> None:
        if self.num_junctions < 0:
            raise ValueError("num_junctions must be >= 0")
        if self.num_vehicles < 0:
            raise ValueError("num_vehicles must be >= 0")
        for name in (
            "road_length", "road_width", "junction_size", "lane_width",
            "green_s", "yellow_s", "all_red_s",
            "emergency_speed", "emergency_fade_s",
            "preemption_radius", "reflector_spacing",
            "siren_detection_radius", "reflector_chain_radius",
            "reflector_pulse_s", "max_tick_s",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")
        if self.min_vehicle_speed > self.max_vehicle_speed:
            raise ValueError("min_vehicle_speed must not exceed max_vehicle_speed")

    # ── Derived geometry ──────────────────────────────────────────────────
    @property
    def corridor_length(self) -> float:
        """Total east-west length: road segments plus junction boxes."""
        return (
            (self.num_junctions + 1) * self.road_length
            + self.num_junctions * self.junction_size
        )

    @property
    def road_extent(self) -> float:
        """Half-length at which ordinary vehicles wrap to the other end."""
        return self.corridor_length / 2.0 + self.vehicle_length * 2.0

    @property
    def release_threshold(self) -> float:
        """Distance past a junction centre at which the vehicle has cleared it."""
        return self.junction_size / 2.0 + self.road_width

    @property
    def stop_window(self) -> float:
        """Distance to the junction centre below which a red light stops a vehicle."""
        return self.stop_distance + self.vehicle_length / 2.0

    @property
    def lateral_limit(self) -> float:
        """Largest lateral offset a vehicle may take without leaving the road."""
        return self.road_width / 2.0 - self.vehicle_width / 2.0 - self.evade_edge_margin
