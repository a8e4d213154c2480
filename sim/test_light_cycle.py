#!/usr/bin/env python3
"""
Tests for the fixed-time phase sequencer and the phase → colour mapping.
"""

from __future__ import annotations

import unittest

from sim.light_cycle import (
    LightColor,
    LightCycle,
    Phase,
    PhaseStep,
    default_cycle,
    phase_colors,
)
from sim.network import Approach
from sim.traffic_policy import PreemptionPolicy


class PhaseColorTests(unittest.TestCase):
    def test_ew_green_gives_east_west_green(self) -> None:
        colors = phase_colors(Phase.EW_GREEN)
        self.assertEqual(colors[Approach.EAST], LightColor.GREEN)
        self.assertEqual(colors[Approach.WEST], LightColor.GREEN)
        self.assertEqual(colors[Approach.NORTH], LightColor.RED)
        self.assertEqual(colors[Approach.SOUTH], LightColor.RED)

    def test_ns_yellow_mirrors_for_north_south(self) -> None:
        colors = phase_colors(Phase.NS_YELLOW)
        self.assertEqual(colors[Approach.NORTH], LightColor.YELLOW)
        self.assertEqual(colors[Approach.SOUTH], LightColor.YELLOW)
        self.assertEqual(colors[Approach.EAST], LightColor.RED)
        self.assertEqual(colors[Approach.WEST], LightColor.RED)

    def test_all_red(self) -> None:
        self.assertEqual(set(phase_colors(Phase.ALL_RED).values()), {LightColor.RED})


class LightCycleTests(unittest.TestCase):
    def setUp(self) -> None:
        self.policy = PreemptionPolicy()
        self.cycle = LightCycle(default_cycle(self.policy))

    def test_default_sequence(self) -> None:
        phases = [s.phase for s in self.cycle.steps]
        self.assertEqual(phases, [
            Phase.EW_GREEN, Phase.EW_YELLOW, Phase.ALL_RED,
            Phase.NS_GREEN, Phase.NS_YELLOW, Phase.ALL_RED,
        ])
        self.assertAlmostEqual(self.cycle.cycle_length, 22.0)

    def test_initial_state(self) -> None:
        self.assertEqual(self.cycle.index, 0)
        self.assertEqual(self.cycle.phase, Phase.EW_GREEN)
        self.assertAlmostEqual(self.cycle.remaining, self.policy.green_s)

    def test_tick_within_phase_returns_none(self) -> None:
        self.assertIsNone(self.cycle.tick(1.0))
        self.assertEqual(self.cycle.index, 0)
        self.assertAlmostEqual(self.cycle.remaining, 7.0)

    def test_boundary_advances_phase(self) -> None:
        self.assertEqual(self.cycle.tick(8.0), Phase.EW_YELLOW)
        self.assertEqual(self.cycle.index, 1)
        self.assertAlmostEqual(self.cycle.remaining, self.policy.yellow_s)

    def test_overshoot_carries_into_next_phase(self) -> None:
        self.cycle.tick(8.5)
        self.assertEqual(self.cycle.phase, Phase.EW_YELLOW)
        self.assertAlmostEqual(self.cycle.remaining, 1.5)

    def test_large_tick_skips_short_phases(self) -> None:
        self.assertEqual(self.cycle.tick(11.0), Phase.NS_GREEN)
        self.assertEqual(self.cycle.index, 3)
        self.assertAlmostEqual(self.cycle.remaining, 8.0)

    def test_full_cycles_return_to_start_for_mixed_tick_sizes(self) -> None:
        pattern = [0.25, 0.5, 1.0, 0.25]  # 2.0 s per repeat
        repeats_per_cycle = int(self.cycle.cycle_length / 2.0)
        for n_cycles in (1, 3):
            cycle = LightCycle(default_cycle(self.policy))
            for _ in range(n_cycles * repeats_per_cycle):
                for dt in pattern:
                    cycle.tick(dt)
            self.assertEqual(cycle.index, 0, msg=f"after {n_cycles} cycles")
            self.assertAlmostEqual(cycle.remaining, self.policy.green_s, places=9)

    def test_reset_to_all_red_uses_first_occurrence(self) -> None:
        self.cycle.tick(15.0)
        self.cycle.reset_to(Phase.ALL_RED)
        self.assertEqual(self.cycle.index, 2)
        self.assertAlmostEqual(self.cycle.remaining, self.policy.all_red_s)

    def test_reset_to_unknown_phase_falls_back_to_start(self) -> None:
        cycle = LightCycle([PhaseStep(Phase.EW_GREEN, 3.0), PhaseStep(Phase.EW_YELLOW, 1.0)])
        cycle.tick(3.5)
        cycle.reset_to(Phase.NS_GREEN)
        self.assertEqual(cycle.index, 0)
        self.assertAlmostEqual(cycle.remaining, 3.0)

    def test_invalid_cycles_rejected(self) -> None:
        with self.assertRaises(ValueError):
            LightCycle([])
        with self.assertRaises(ValueError):
            LightCycle([PhaseStep(Phase.EW_GREEN, 0.0)])


if __name__ == "__main__":
    unittest.main()
