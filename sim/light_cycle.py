"""
sim/light_cycle.py
==================
Fixed-time phase sequencer for one junction's normal operation.

The sequence is ``EW_GREEN → EW_YELLOW → ALL_RED → NS_GREEN → NS_YELLOW →
ALL_RED`` and repeats forever.  :func:`phase_colors` maps a phase to the
colour of each of the four approach lights; the mapping depends only on
the phase, never on the junction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence

from sim.network import Approach
from sim.traffic_policy import PreemptionPolicy

log = logging.getLogger("light_cycle")


class LightColor(str, Enum):
    RED = "RED"
    YELLOW = "YELLOW"
    GREEN = "GREEN"
    OFF = "OFF"


class Phase(str, Enum):
    EW_GREEN = "EW_GREEN"
    EW_YELLOW = "EW_YELLOW"
    NS_GREEN = "NS_GREEN"
    NS_YELLOW = "NS_YELLOW"
    ALL_RED = "ALL_RED"


@dataclass(frozen=True)
class PhaseStep:
    """One entry of a cycle: a phase and how long it lasts (seconds)."""

    phase: Phase
    duration: float


_AXIS_COLOR = {
    Phase.EW_GREEN: ("EW", LightColor.GREEN),
    Phase.EW_YELLOW: ("EW", LightColor.YELLOW),
    Phase.NS_GREEN: ("NS", LightColor.GREEN),
    Phase.NS_YELLOW: ("NS", LightColor.YELLOW),
}


def phase_colors(phase: Phase) -> Dict[Approach, LightColor]:
    """Colour of every approach light during *phase*.

    The active axis gets GREEN/YELLOW, everything else RED; ALL_RED turns
    all four lights red.
    """
    colors = {a: LightColor.RED for a in Approach}
    active = _AXIS_COLOR.get(phase)
    if active is not None:
        axis, color = active
        for approach in Approach:
            if approach.axis == axis:
                colors[approach] = color
    return colors


def default_cycle(policy: PreemptionPolicy) -> List[PhaseStep]:
    """The six-step cycle with durations taken from *policy*."""
    return [
        PhaseStep(Phase.EW_GREEN, policy.green_s),
        PhaseStep(Phase.EW_YELLOW, policy.yellow_s),
        PhaseStep(Phase.ALL_RED, policy.all_red_s),
        PhaseStep(Phase.NS_GREEN, policy.green_s),
        PhaseStep(Phase.NS_YELLOW, policy.yellow_s),
        PhaseStep(Phase.ALL_RED, policy.all_red_s),
    ]


class LightCycle:
    """Timed phase sequencer.

    State is ``(index, remaining)``.  Time left over when a phase expires
    is carried into the next one, so the phase reached after any sequence
    of ticks depends only on the total elapsed time.

    Parameters
    ----------
    steps : sequence of PhaseStep
        Non-empty, every duration > 0.
    """

    def __init__(self, steps: Sequence[PhaseStep]) -> None:
        if not steps:
            raise ValueError("a light cycle needs at least one phase")
        if any(s.duration <= 0 for s in steps):
            raise ValueError("phase durations must be > 0")
        self.steps: List[PhaseStep] = list(steps)
        self.index = 0
        self.remaining = self.steps[0].duration

    @property
    def phase(self) -> Phase:
        return self.steps[self.index].phase

    @property
    def cycle_length(self) -> float:
        return sum(s.duration for s in self.steps)

    def tick(self, dt: float) -> Optional[Phase]:
        """Advance by *dt* seconds.

        Returns the new phase when at least one boundary was crossed,
        otherwise ``None``.
        """
        self.remaining -= dt
        if self.remaining > 0:
            return None
        while self.remaining <= 0:
            self.index = (self.index + 1) % len(self.steps)
            self.remaining += self.steps[self.index].duration
        log.debug("phase -> %s (%.2fs)", self.phase.value, self.remaining)
        return self.phase

    def reset_to(self, phase: Phase) -> None:
        """Jump to the first step showing *phase* with its full duration.

        Falls back to step 0 when *phase* is not part of the cycle.
        """
        index = next((i for i, s in enumerate(self.steps) if s.phase == phase), 0)
        self.index = index
        self.remaining = self.steps[index].duration
