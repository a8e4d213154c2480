#!/usr/bin/env python3
"""
Tests for the per-junction NORMAL / PREEMPTED state machine.

Checks the override guard on a single light, axis selection on preempt,
idempotence of both transitions, the cycle restart on release and the
degraded behaviour of a junction that is missing a light.
"""

from __future__ import annotations

import unittest
from typing import List, Optional, Sequence

from sim.junction import (
    Approach,
    ApproachLight,
    JunctionController,
    JunctionMode,
    LightColor,
    TriggerReason,
)
from sim.light_cycle import LightCycle, Phase, default_cycle
from sim.physics import Vec3
from sim.reflectors import ReflectorSensor
from sim.traffic_policy import PreemptionPolicy


class RecordingSink:
    def __init__(self) -> None:
        self.colors: List[tuple] = []
        self.pulses: List[tuple] = []
        self.status: List[tuple] = []

    def apply_light_colors(self, junction_id, colors) -> None:
        self.colors.append((junction_id, dict(colors)))

    def reflector_pulse(self, sensor_id, duration_ms) -> None:
        self.pulses.append((sensor_id, duration_ms))

    def status_text(self, subject, message) -> None:
        self.status.append((subject, message))


def make_junction(
    approaches: Optional[Sequence[Approach]] = None,
    sink: Optional[RecordingSink] = None,
    reflectors: Sequence[ReflectorSensor] = (),
) -> JunctionController:
    policy = PreemptionPolicy()
    approaches = list(Approach) if approaches is None else approaches
    lights = {a: ApproachLight(f"J0_{a.value}", a) for a in approaches}
    return JunctionController(
        0, Vec3(0.0, 0.0, 0.0), lights, LightCycle(default_cycle(policy)),
        reflectors=reflectors, sink=sink,
    )


EAST_DIR = Vec3(1.0, 0.0, 0.0)
NORTH_DIR = Vec3(0.0, 0.0, 1.0)


class ApproachLightTests(unittest.TestCase):
    def test_override_blocks_ordinary_changes(self) -> None:
        light = ApproachLight("J0_EAST", Approach.EAST)
        light.set_priority(False)
        self.assertTrue(light.is_overridden)
        self.assertFalse(light.set_color(LightColor.GREEN))
        self.assertEqual(light.color, LightColor.RED)
        self.assertTrue(light.set_color(LightColor.GREEN, priority=True))
        self.assertEqual(light.color, LightColor.GREEN)

    def test_release_priority_allows_changes_again(self) -> None:
        light = ApproachLight("J0_EAST", Approach.EAST)
        light.set_priority(True)
        light.release_priority()
        self.assertTrue(light.set_color(LightColor.YELLOW))
        self.assertEqual(light.color, LightColor.YELLOW)


class JunctionNormalModeTests(unittest.TestCase):
    def test_initial_phase_is_pushed_to_lights_and_sink(self) -> None:
        sink = RecordingSink()
        junction = make_junction(sink=sink)
        self.assertEqual(junction.mode, JunctionMode.NORMAL)
        self.assertEqual(junction.color_for(Approach.EAST), LightColor.GREEN)
        self.assertEqual(junction.color_for(Approach.NORTH), LightColor.RED)
        self.assertEqual(len(sink.colors), 1)
        self.assertEqual(sink.colors[0][0], 0)

    def test_tick_follows_cycle(self) -> None:
        junction = make_junction()
        junction.tick(8.0)
        self.assertEqual(junction.cycle.phase, Phase.EW_YELLOW)
        self.assertEqual(junction.color_for(Approach.WEST), LightColor.YELLOW)
        junction.tick(3.0)
        self.assertEqual(junction.cycle.phase, Phase.NS_GREEN)
        self.assertEqual(junction.color_for(Approach.SOUTH), LightColor.GREEN)
        self.assertEqual(junction.color_for(Approach.EAST), LightColor.RED)


class JunctionPreemptionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sink = RecordingSink()
        self.junction = make_junction(sink=self.sink)
        self.junction.tick(11.0)  # NS_GREEN, so preempting east-west changes colours
        self.sink.colors.clear()

    def test_preempt_gives_green_to_travel_axis(self) -> None:
        self.assertTrue(self.junction.preempt(EAST_DIR))
        j = self.junction
        self.assertEqual(j.mode, JunctionMode.PREEMPTED)
        self.assertEqual(j.color_for(Approach.EAST), LightColor.GREEN)
        self.assertEqual(j.color_for(Approach.WEST), LightColor.GREEN)
        self.assertEqual(j.color_for(Approach.NORTH), LightColor.RED)
        self.assertEqual(j.color_for(Approach.SOUTH), LightColor.RED)
        self.assertTrue(all(l.is_overridden for l in j.lights.values()))
        self.assertTrue(j.is_consistent())

    def test_preempt_north_bound_greens_north_south(self) -> None:
        junction = make_junction()
        junction.preempt(NORTH_DIR)
        self.assertEqual(junction.color_for(Approach.NORTH), LightColor.GREEN)
        self.assertEqual(junction.color_for(Approach.SOUTH), LightColor.GREEN)
        self.assertEqual(junction.color_for(Approach.EAST), LightColor.RED)

    def test_diagonal_tie_prefers_east_west(self) -> None:
        junction = make_junction()
        junction.preempt(Vec3(0.5, 0.0, -0.5))
        self.assertEqual(junction.color_for(Approach.EAST), LightColor.GREEN)

    def test_preempt_is_idempotent(self) -> None:
        self.junction.preempt(EAST_DIR)
        self.assertEqual(len(self.sink.colors), 1)
        self.assertFalse(self.junction.preempt(EAST_DIR))
        self.assertEqual(self.junction.mode, JunctionMode.PREEMPTED)
        self.assertEqual(len(self.sink.colors), 1, msg="no duplicate colour notification")

    def test_cycle_is_paused_while_preempted(self) -> None:
        self.junction.preempt(EAST_DIR)
        index, remaining = self.junction.cycle.index, self.junction.cycle.remaining
        self.junction.tick(30.0)
        self.assertEqual(self.junction.cycle.index, index)
        self.assertAlmostEqual(self.junction.cycle.remaining, remaining)
        self.assertEqual(self.junction.color_for(Approach.EAST), LightColor.GREEN)

    def test_release_restarts_cycle_at_all_red(self) -> None:
        self.junction.preempt(EAST_DIR)
        self.junction.zone_triggered = True
        self.assertTrue(self.junction.release())
        j = self.junction
        self.assertEqual(j.mode, JunctionMode.NORMAL)
        self.assertEqual(j.cycle.phase, Phase.ALL_RED)
        self.assertAlmostEqual(j.cycle.remaining, PreemptionPolicy().all_red_s)
        self.assertEqual(set(j.colors().values()), {LightColor.RED})
        self.assertFalse(any(l.is_overridden for l in j.lights.values()))
        self.assertTrue(j.has_vehicle_passed)
        self.assertEqual(j.reason, TriggerReason.NONE)
        self.assertTrue(j.is_consistent())

    def test_release_is_idempotent(self) -> None:
        self.junction.preempt(EAST_DIR)
        self.junction.release()
        self.assertFalse(self.junction.release())
        self.assertFalse(make_junction().release())

    def test_release_clears_reflector_chain(self) -> None:
        sensor = ReflectorSensor("J0_R00", Vec3(-10.0, 0.0, 0.0), 60.0, 4.0, 1.5)
        junction = make_junction(reflectors=[sensor])
        junction.chain.scan(Vec3(-20.0, 0.0, 0.0))
        junction.preempt(EAST_DIR)
        self.assertEqual(len(junction.chain), 1)
        junction.release()
        self.assertEqual(len(junction.chain), 0)

    def test_cycle_resumes_after_release(self) -> None:
        self.junction.preempt(EAST_DIR)
        self.junction.release()
        self.junction.tick(1.0)
        self.assertEqual(self.junction.cycle.phase, Phase.NS_GREEN)
        self.assertEqual(self.junction.color_for(Approach.SOUTH), LightColor.GREEN)
        self.assertEqual(self.junction.color_for(Approach.EAST), LightColor.RED)

    def test_reason_combines_flags(self) -> None:
        j = self.junction
        self.assertEqual(j.reason, TriggerReason.NONE)
        j.sensors_triggered = True
        self.assertEqual(j.reason, TriggerReason.SENSORS)
        j.zone_triggered = True
        self.assertEqual(j.reason, TriggerReason.ZONE_AND_SENSORS)
        self.assertEqual(j.reason.label, "Zone & Reflectors Active")

    def test_reset_for_activation_clears_passed_flag(self) -> None:
        self.junction.preempt(EAST_DIR)
        self.junction.release()
        self.junction.reset_for_activation()
        self.assertFalse(self.junction.has_vehicle_passed)


class UnconfiguredJunctionTests(unittest.TestCase):
    def test_missing_light_never_preempts(self) -> None:
        partial = [Approach.EAST, Approach.WEST, Approach.SOUTH]
        with self.assertLogs("junction", level="WARNING") as cm:
            junction = make_junction(approaches=partial)
        self.assertEqual(len(cm.output), 1)
        self.assertIn("NORTH", cm.output[0])
        self.assertFalse(junction.is_configured)
        self.assertFalse(junction.preempt(EAST_DIR))
        self.assertEqual(junction.mode, JunctionMode.NORMAL)
        junction.tick(20.0)
        self.assertEqual(set(junction.colors().values()), {LightColor.RED})
        self.assertIsNone(junction.color_for(Approach.NORTH))


if __name__ == "__main__":
    unittest.main()
