#!/usr/bin/env python3

from .types import Camera, ColorRGB, ColorRGBA, StatusLine
from .constants import ViewConstants
from .draw_road import RoadRenderer
from .draw_vehicles import VehicleRenderer
from .hud import HudRenderer
from .pygame_view import PygameCorridorView, run_pygame_view

__all__ = [
    "Camera",
    "ColorRGB",
    "ColorRGBA",
    "StatusLine",
    "ViewConstants",
    "RoadRenderer",
    "VehicleRenderer",
    "HudRenderer",
    "PygameCorridorView",
    "run_pygame_view",
]
