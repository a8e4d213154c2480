#!/usr/bin/env python3
"""
ui/draw_road.py
===============
Static corridor geometry plus the two pieces of junction state that the
bus delivers: approach-light colours and reflector pulses (mixin).
"""

from __future__ import annotations

import pygame

from .helpers import draw_alpha_circle, light_offsets, world_rect


class RoadRenderer:
    """Mixin drawing roads, junction boxes, lane markings, lights and reflectors."""

    def draw_road(self, surface: pygame.Surface) -> None:
        p = self.world.policy
        cam = self.camera
        half_x = p.corridor_length / 2.0
        half_w = p.road_width / 2.0
        arm = p.junction_size / 2.0 + p.road_length

        pygame.draw.rect(surface, self.ROAD_COLOR, world_rect(cam, -half_x, -half_w, half_x, half_w))
        for j in self.world.junctions:
            cx, cz = j.center.x, j.center.z
            pygame.draw.rect(
                surface, self.ROAD_COLOR,
                world_rect(cam, cx - half_w, cz - arm, cx + half_w, cz + arm),
            )
        for j in self.world.junctions:
            cx, cz = j.center.x, j.center.z
            h = p.junction_size / 2.0
            box = world_rect(cam, cx - h, cz - h, cx + h, cz + h)
            pygame.draw.rect(surface, self.JUNCTION_COLOR, box)
            if j.is_preempted:
                pygame.draw.rect(surface, self.PREEMPT_COLOR, box, width=2)

    def draw_lane_markings(self, surface: pygame.Surface) -> None:
        p = self.world.policy
        cam = self.camera
        half_x = p.corridor_length / 2.0
        half_w = p.road_width / 2.0
        h = p.junction_size / 2.0
        boxes = [(j.center.x - h, j.center.x + h) for j in self.world.junctions]

        for z in (-half_w, half_w):
            a = cam.world_to_screen(-half_x, z)
            b = cam.world_to_screen(half_x, z)
            pygame.draw.line(surface, self.LANE_EDGE_COLOR, a, b, 1)

        dash, gap = 3.0, 3.0
        x = -half_x
        while x < half_x:
            x_end = min(x + dash, half_x)
            if not any(lo <= x <= hi or lo <= x_end <= hi for lo, hi in boxes):
                a = cam.world_to_screen(x, 0.0)
                b = cam.world_to_screen(x_end, 0.0)
                pygame.draw.line(surface, self.LANE_DASH_COLOR, a, b, 1)
            x += dash + gap

    def draw_lights(self, surface: pygame.Surface) -> None:
        cam = self.camera
        offsets = light_offsets(self.world.policy.junction_size)
        bulb_r = max(2, int(cam.zoom * 0.9))
        for j in self.world.junctions:
            colors = self.light_colors.get(j.index, {})
            for approach, (ox, oz) in offsets.items():
                if approach not in colors:
                    continue
                sx, sy = cam.world_to_screen(j.center.x + ox, j.center.z + oz)
                pygame.draw.circle(surface, self.LIGHT_HOUSING_COLOR, (int(sx), int(sy)), bulb_r + 2)
                color = self.LIGHT_COLORS.get(colors[approach], self.LIGHT_COLORS["OFF"])
                pygame.draw.circle(surface, color, (int(sx), int(sy)), bulb_r)

    def draw_reflectors(self, surface: pygame.Surface) -> None:
        cam = self.camera
        dot_r = max(1, int(cam.zoom * 0.35))
        for j in self.world.junctions:
            for sensor in j.chain.sensors:
                sx, sy = cam.world_to_screen(sensor.position.x, sensor.position.z)
                centre = (int(sx), int(sy))
                if self.pulses.get(sensor.id, 0.0) > 0.0:
                    glow = (*self.REFLECTOR_PULSE_COLOR, self.REFLECTOR_GLOW_ALPHA)
                    draw_alpha_circle(surface, glow, centre, dot_r * 4)
                    pygame.draw.circle(surface, self.REFLECTOR_PULSE_COLOR, centre, dot_r + 1)
                else:
                    pygame.draw.circle(surface, self.REFLECTOR_IDLE_COLOR, centre, dot_r)
