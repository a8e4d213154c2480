#!/usr/bin/env python3
"""
Tests for the pandas tick trace.
"""

from __future__ import annotations

import os
import tempfile
import unittest

import pandas as pd

from sim.recorder import COLUMNS, TickRecorder
from sim.world import SimulationWorld


class TickRecorderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.world = SimulationWorld(seed=1, auto_activate=False)
        self.world.activate_emergency()
        self.recorder = TickRecorder()
        for _ in range(5):
            self.world.tick(0.05)
            self.recorder.record(self.world)

    def test_one_row_per_junction_per_tick(self) -> None:
        self.assertEqual(len(self.recorder), 5 * len(self.world.junctions))
        frame = self.recorder.to_frame()
        self.assertEqual(list(frame.columns), COLUMNS)
        self.assertEqual(frame["tick"].max(), 5)
        self.assertEqual(set(frame["junction"]), {0, 1, 2})

    def test_preemption_summary(self) -> None:
        summary = self.recorder.preemption_summary().set_index("junction")
        self.assertEqual(summary.loc[0, "first_tick"], 1)
        self.assertEqual(summary.loc[0, "preempted_ticks"], 5)
        self.assertTrue(pd.isna(summary.loc[2, "first_tick"]))
        self.assertEqual(summary.loc[2, "preempted_ticks"], 0)

    def test_empty_summary(self) -> None:
        summary = TickRecorder().preemption_summary()
        self.assertTrue(summary.empty)
        self.assertIn("first_tick", summary.columns)

    def test_save_csv(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out", "trace.csv")
            self.recorder.save_csv(path)
            loaded = pd.read_csv(path)
        self.assertEqual(len(loaded), len(self.recorder))
        self.assertEqual(loaded.loc[0, "light_east"], "GREEN")

    def test_clear(self) -> None:
        self.recorder.clear()
        self.assertEqual(len(self.recorder), 0)


if __name__ == "__main__":
    unittest.main()
