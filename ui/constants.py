#!/usr/bin/env python3
"""Visual constants shared across all renderers."""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

from .types import ColorRGB


class ViewConstants:
    """Mixin providing every visual / layout constant."""

    BG_COLOR: ColorRGB = (34, 52, 34)
    ROAD_COLOR: ColorRGB = (30, 30, 30)
    JUNCTION_COLOR: ColorRGB = (40, 40, 40)
    LANE_DASH_COLOR: ColorRGB = (200, 200, 200)
    LANE_EDGE_COLOR: ColorRGB = (90, 90, 90)
    HUD_BG_COLOR: ColorRGB = (22, 22, 22)
    HUD_BORDER_COLOR: ColorRGB = (42, 42, 42)
    HUD_TEXT_COLOR: ColorRGB = (220, 220, 220)
    HUD_DIM_COLOR: ColorRGB = (130, 130, 130)
    PREEMPT_COLOR: ColorRGB = (255, 136, 0)

    LIGHT_COLORS: Dict[str, ColorRGB] = {
        "RED":    (255, 60, 60),
        "YELLOW": (255, 200, 40),
        "GREEN":  (0, 230, 110),
        "OFF":    (60, 60, 60),
    }
    LIGHT_HOUSING_COLOR: ColorRGB = (15, 15, 15)

    REFLECTOR_IDLE_COLOR: ColorRGB = (90, 110, 130)
    REFLECTOR_PULSE_COLOR: ColorRGB = (80, 200, 255)
    REFLECTOR_GLOW_ALPHA = 110

    EMERGENCY_BODY_COLOR: ColorRGB = (245, 245, 245)
    EMERGENCY_SIREN_COLORS: Sequence[ColorRGB] = ((255, 40, 40), (40, 90, 255))
    SIREN_BLINK_MS = 300
    PATH_DOT_COLOR: ColorRGB = (255, 255, 255)
    PATH_DOT_ALPHA = 60

    STOPPED_OUTLINE_COLOR: ColorRGB = (255, 60, 60)
    EVADING_OUTLINE_COLOR: ColorRGB = (255, 200, 40)

    STATUS_LINES = 6
    WORLD_MARGIN = 12.0

    LEGEND_ITEMS: Sequence[Tuple[str, ColorRGB]] = (
        ("STOPPED", (255, 60, 60)),
        ("EVADING", (255, 200, 40)),
        ("REFLECTOR PULSE", (80, 200, 255)),
        ("PREEMPTED", (255, 136, 0)),
    )

    SCREENSHOT_DIR = "screenshots"
