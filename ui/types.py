"""
ui/types.py
===========
Lightweight data containers used across every UI module.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

ColorRGB = Tuple[int, int, int]
ColorRGBA = Tuple[int, int, int, int]


@dataclass
class Camera:
    """Viewport mapping world ``(x, z)`` to screen pixels (``+z`` is down)."""
    screen_w: int
    screen_h: int
    world_x: float = 0.0
    world_z: float = 0.0
    zoom: float = 3.0

    def world_to_screen(self, wx: float, wz: float) -> Tuple[float, float]:
        cx = self.screen_w / 2
        cy = self.screen_h / 2
        sx = cx + (wx - self.world_x) * self.zoom
        sy = cy + (wz - self.world_z) * self.zoom
        return sx, sy

    def screen_to_world(self, sx: float, sy: float) -> Tuple[float, float]:
        cx = self.screen_w / 2
        cy = self.screen_h / 2
        wx = (sx - cx) / self.zoom + self.world_x
        wz = (sy - cy) / self.zoom + self.world_z
        return wx, wz

    def fit(self, bounds: Tuple[Tuple[float, float], Tuple[float, float]]) -> None:
        """Centre on *bounds* ``((min_x, max_x), (min_z, max_z))`` and zoom to fit."""
        (x0, x1), (z0, z1) = bounds
        self.world_x = (x0 + x1) / 2
        self.world_z = (z0 + z1) / 2
        span_x = max(1e-6, x1 - x0)
        span_z = max(1e-6, z1 - z0)
        self.zoom = min(self.screen_w / span_x, self.screen_h / span_z)


@dataclass
class StatusLine:
    """One status message received from the bus."""
    sender: str
    message: str
    received_s: float
