"""
ui/helpers.py
=============
Pure utility functions shared across UI modules:
world-rectangle transforms, light placement around a junction box and
alpha-surface drawing.
"""

from __future__ import annotations

from typing import Dict, Tuple

import pygame

from ui.types import Camera


# ── Geometry ──────────────────────────────────────────────────────────────────

def world_rect(cam: Camera, x0: float, z0: float, x1: float, z1: float) -> pygame.Rect:
    """Screen rectangle covering the world box spanned by two corners."""
    sx0, sy0 = cam.world_to_screen(min(x0, x1), min(z0, z1))
    sx1, sy1 = cam.world_to_screen(max(x0, x1), max(z0, z1))
    return pygame.Rect(int(sx0), int(sy0), max(1, int(sx1 - sx0)), max(1, int(sy1 - sy0)))


def light_offsets(junction_size: float) -> Dict[str, Tuple[float, float]]:
    """Offset of each approach light from the junction centre.

    Each head stands on the near-side corner of the traffic it controls:
    east-bound traffic arrives from the west, so its light sits at the
    south-west corner, and so on.
    """
    h = junction_size / 2.0 + 1.0
    return {
        "EAST":  (-h,  h),
        "WEST":  ( h, -h),
        "NORTH": ( h,  h),
        "SOUTH": (-h, -h),
    }


# ── Alpha drawing ─────────────────────────────────────────────────────────────

def draw_alpha_circle(
    target: pygame.Surface,
    color: Tuple[int, ...],
    centre: Tuple[int, int],
    radius: int,
) -> None:
    """Draw a semi-transparent circle."""
    if radius < 1:
        return
    size = radius * 2
    tmp = pygame.Surface((size, size), pygame.SRCALPHA)
    pygame.draw.circle(tmp, color, (radius, radius), radius)
    target.blit(tmp, (centre[0] - radius, centre[1] - radius))


def draw_alpha_rect(
    target: pygame.Surface,
    color: Tuple[int, ...],
    rect: pygame.Rect,
) -> None:
    tmp = pygame.Surface((rect.w, rect.h), pygame.SRCALPHA)
    tmp.fill(color)
    target.blit(tmp, rect.topleft)
