#!/usr/bin/env python3
"""
End-to-end tests for SimulationWorld.

Runs the default three-junction corridor until the emergency vehicle has
departed and checks, on every tick, that junction modes, light overrides,
reflector chains and vehicle flags stay consistent.
"""

from __future__ import annotations

import unittest

from sim.emergency import EmergencyState
from sim.junction import Approach, JunctionMode
from sim.test_junction import RecordingSink
from sim.world import SimulationWorld

DT = 0.05
MAX_TICKS = 1200  # 60 s of simulated time


class WorldSetupTests(unittest.TestCase):
    def setUp(self) -> None:
        self.world = SimulationWorld(seed=1)

    def test_default_corridor(self) -> None:
        self.assertEqual([j.center.x for j in self.world.junctions], [-82.0, 0.0, 82.0])
        for j in self.world.junctions:
            self.assertTrue(j.is_configured)
            self.assertEqual(len(j.chain.sensors), 11)
            self.assertEqual(j.chain.sensors[0].id, f"J{j.index}_R00")
            self.assertEqual(j.mode, JunctionMode.NORMAL)
        self.assertEqual(len(self.world.vehicles), self.world.policy.num_vehicles)
        self.assertEqual(self.world.emergency.state, EmergencyState.INACTIVE)

    def test_vehicles_start_in_a_lane(self) -> None:
        half_lane = self.world.policy.lane_width / 2.0
        half = self.world.policy.corridor_length / 2.0
        for v in self.world.vehicles:
            self.assertIn(v.z, (-half_lane, half_lane))
            self.assertLessEqual(abs(v.x), half)
            self.assertNotEqual(v.speed, 0.0)

    def test_same_seed_same_population(self) -> None:
        other = SimulationWorld(seed=1)
        self.assertEqual(
            [v.as_dict() for v in self.world.vehicles],
            [v.as_dict() for v in other.vehicles],
        )

    def test_tick_is_clamped(self) -> None:
        self.world.tick(1.0)
        self.assertAlmostEqual(self.world.time, self.world.policy.max_tick_s)
        self.world.tick(0.0)
        self.world.tick(-1.0)
        self.assertEqual(self.world.tick_count, 1)

    def test_activation_delay(self) -> None:
        for _ in range(35):
            self.world.tick(DT)
        self.assertEqual(self.world.emergency.state, EmergencyState.INACTIVE)
        for _ in range(10):
            self.world.tick(DT)
        self.assertEqual(self.world.emergency.state, EmergencyState.APPROACHING)

    def test_manual_activation_only(self) -> None:
        world = SimulationWorld(seed=1, auto_activate=False)
        for _ in range(100):
            world.tick(DT)
        self.assertEqual(world.emergency.state, EmergencyState.INACTIVE)
        self.assertTrue(world.activate_emergency())
        self.assertEqual(world.emergency.state, EmergencyState.APPROACHING)

    def test_emergency_moves_before_preemption_in_a_tick(self) -> None:
        world = SimulationWorld(seed=1, auto_activate=False)
        world.activate_emergency()
        snap = world.tick(DT)
        self.assertEqual(snap.position, world.emergency.position)
        self.assertEqual(snap.target_index, 1)
        self.assertTrue(world.junctions[0].is_preempted)
        self.assertFalse(world.junctions[2].is_preempted)

    def test_invalid_junction_index(self) -> None:
        with self.assertLogs("world", level="WARNING"):
            self.assertIsNone(self.world.junction(7))
        self.assertIs(self.world.junction(1), self.world.junctions[1])

    def test_state_payload(self) -> None:
        state = self.world.state()
        self.assertEqual(set(state), {"time", "tick", "emergency", "junctions", "vehicles"})
        self.assertEqual(state["junctions"][0]["lights"]["EAST"], "GREEN")
        self.assertEqual(state["emergency"]["state"], "INACTIVE")


class WorldRunTests(unittest.TestCase):
    def _run(self, world: SimulationWorld) -> dict:
        first_preempt_x = {}
        prev_chain = {j.index: 0 for j in world.junctions}
        prev_mode = {j.index: j.mode for j in world.junctions}
        for _ in range(MAX_TICKS):
            snap = world.tick(DT)
            for j in world.junctions:
                self.assertTrue(j.is_consistent(), msg=f"{j.id} at t={world.time:.2f}")
                chain = len(j.chain)
                if j.is_preempted:
                    first_preempt_x.setdefault(j.index, snap.position.x)
                    self.assertGreaterEqual(chain, prev_chain[j.index])
                    self.assertLessEqual(chain - prev_chain[j.index], 1)
                elif prev_mode[j.index] is JunctionMode.PREEMPTED:
                    self.assertEqual(chain, 0, msg=f"{j.id} chain kept after release")
                prev_chain[j.index] = chain
                prev_mode[j.index] = j.mode
            for v in world.vehicles:
                if v.stopped_for_signal:
                    self.assertEqual(v.current_speed, 0.0, msg=v.id)
            if world.is_finished():
                break
        return first_preempt_x

    def test_full_run_preempts_and_releases_every_junction(self) -> None:
        sink = RecordingSink()
        world = SimulationWorld(sink=sink, seed=7)
        first_preempt_x = self._run(world)

        self.assertTrue(world.is_finished())
        for j in world.junctions:
            self.assertTrue(j.has_vehicle_passed, msg=j.id)
            self.assertEqual(j.mode, JunctionMode.NORMAL)
            self.assertLess(first_preempt_x[j.index], j.center.x, msg=j.id)

        messages = [m for _, m in sink.status]
        for j in world.junctions:
            self.assertIn(f"{j.id}: Passed", messages)
        self.assertEqual(messages[0], "Approaching")
        self.assertEqual(messages[-1], "Departed")

    def test_junction_missing_a_light_is_skipped(self) -> None:
        world = SimulationWorld(seed=7)
        world.junctions[1].lights.pop(Approach.NORTH)
        with self.assertLogs("junction", level="WARNING"):
            self._run(world)
        self.assertTrue(world.is_finished())
        self.assertTrue(world.junctions[0].has_vehicle_passed)
        self.assertTrue(world.junctions[2].has_vehicle_passed)
        self.assertFalse(world.junctions[1].has_vehicle_passed)
        self.assertEqual(world.junctions[1].mode, JunctionMode.NORMAL)

    def test_reset_restores_initial_state(self) -> None:
        world = SimulationWorld(seed=7)
        initial = [v.as_dict() for v in world.vehicles]
        for _ in range(200):
            world.tick(DT)
        world.reset()
        self.assertEqual(world.time, 0.0)
        self.assertEqual(world.tick_count, 0)
        self.assertEqual(world.emergency.state, EmergencyState.INACTIVE)
        self.assertTrue(all(j.mode is JunctionMode.NORMAL for j in world.junctions))
        self.assertEqual([v.as_dict() for v in world.vehicles], initial)


if __name__ == "__main__":
    unittest.main()
