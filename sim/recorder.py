"""
sim/recorder.py
===============
Per-tick trace of junction and emergency-vehicle state.

:class:`TickRecorder` appends one row per junction after every world tick
and exports the trace as a :class:`pandas.DataFrame` or CSV file.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

import pandas as pd

from sim.junction import Approach
from sim.world import SimulationWorld

log = logging.getLogger("recorder")

COLUMNS = [
    "tick", "time", "junction", "mode", "phase", "reason", "passed", "chain",
    "light_north", "light_south", "light_east", "light_west",
    "ev_state", "ev_x", "ev_z", "ev_target",
]


class TickRecorder:
    """Collect junction rows from a :class:`~sim.world.SimulationWorld`."""

    def __init__(self) -> None:
        self.rows: List[Dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self.rows)

    def record(self, world: SimulationWorld) -> None:
        ev = world.emergency
        for j in world.junctions:
            colors = j.colors()
            self.rows.append({
                "tick":        world.tick_count,
                "time":        round(world.time, 6),
                "junction":    j.index,
                "mode":        j.mode.value,
                "phase":       j.cycle.phase.value,
                "reason":      j.reason.value,
                "passed":      j.has_vehicle_passed,
                "chain":       len(j.chain),
                "light_north": _color(colors, Approach.NORTH),
                "light_south": _color(colors, Approach.SOUTH),
                "light_east":  _color(colors, Approach.EAST),
                "light_west":  _color(colors, Approach.WEST),
                "ev_state":    ev.state.value,
                "ev_x":        ev.position.x,
                "ev_z":        ev.position.z,
                "ev_target":   ev.target_index,
            })

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=COLUMNS)

    def preemption_summary(self) -> pd.DataFrame:
        """Per junction: first preempted tick/time and preempted duration.

        Junctions that never preempted get ``NaN`` in the first-tick columns.
        """
        df = self.to_frame()
        if df.empty:
            return pd.DataFrame(columns=["junction", "first_tick", "first_time", "preempted_ticks"])
        preempted = df[df["mode"] == "PREEMPTED"]
        first = preempted.groupby("junction").agg(
            first_tick=("tick", "min"),
            first_time=("time", "min"),
            preempted_ticks=("tick", "count"),
        ).reset_index()
        summary = pd.DataFrame({"junction": sorted(df["junction"].unique())}).merge(
            first, how="left", on="junction",
        )
        summary["preempted_ticks"] = summary["preempted_ticks"].fillna(0).astype(int)
        return summary.reset_index(drop=True)

    def save_csv(self, path: str) -> str:
        folder = os.path.dirname(os.path.abspath(path))
        os.makedirs(folder, exist_ok=True)
        self.to_frame().to_csv(path, index=False)
        log.info("Wrote %d trace rows to %s", len(self.rows), path)
        return path

    def clear(self) -> None:
        self.rows = []


def _color(colors: Dict[Approach, Any], approach: Approach) -> str:
    color = colors.get(approach)
    return color.value if color is not None else ""
