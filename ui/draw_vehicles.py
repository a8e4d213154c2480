#!/usr/bin/env python3
"""Ordinary vehicles, the emergency vehicle and its route (mixin)."""

from __future__ import annotations

import pygame

from sim.emergency import EmergencyState

from .helpers import draw_alpha_circle, draw_alpha_rect, world_rect


class VehicleRenderer:
    """Mixin that draws every moving actor."""

    def draw_vehicles(self, surface: pygame.Surface) -> None:
        p = self.world.policy
        half_l = p.vehicle_length / 2.0
        half_w = p.vehicle_width / 2.0
        for v in self.world.vehicles:
            rect = world_rect(self.camera, v.x - half_l, v.z - half_w, v.x + half_l, v.z + half_w)
            pygame.draw.rect(surface, v.color, rect, border_radius=2)
            if v.stopped_for_signal:
                pygame.draw.rect(surface, self.STOPPED_OUTLINE_COLOR, rect, width=1, border_radius=2)
            elif v.evading:
                pygame.draw.rect(surface, self.EVADING_OUTLINE_COLOR, rect, width=1, border_radius=2)

    def draw_emergency_path(self, surface: pygame.Surface) -> None:
        ev = self.world.emergency
        if ev.state is not EmergencyState.APPROACHING:
            return
        r = max(1, int(self.camera.zoom * 0.3))
        for point in ev.path[ev.target_index:]:
            sx, sy = self.camera.world_to_screen(point.x, point.z)
            draw_alpha_circle(surface, (*self.PATH_DOT_COLOR, self.PATH_DOT_ALPHA), (int(sx), int(sy)), r)

    def draw_emergency(self, surface: pygame.Surface) -> None:
        ev = self.world.emergency
        if ev.state in (EmergencyState.INACTIVE, EmergencyState.FADED):
            return
        p = self.world.policy
        scale = max(0.05, ev.opacity)
        half_l = p.vehicle_length * 0.8 * scale
        half_w = p.vehicle_width * 0.6 * scale
        x, z = ev.position.x, ev.position.z
        rect = world_rect(self.camera, x - half_l, z - half_w, x + half_l, z + half_w)
        alpha = int(255 * ev.opacity)
        draw_alpha_rect(surface, (*self.EMERGENCY_BODY_COLOR, alpha), rect)

        blink = int((self.time_seconds * 1000) // self.SIREN_BLINK_MS) % 2
        siren = self.EMERGENCY_SIREN_COLORS[blink]
        r = max(1, int(self.camera.zoom * 0.4 * scale))
        draw_alpha_circle(surface, (*siren, alpha), rect.center, r)
