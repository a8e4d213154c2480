#!/usr/bin/env python3
"""
Main view class — combines all UI mixins into one runnable Pygame window.

Module layout
─────────────
    ui/
    ├── types.py           – ColorRGB, ColorRGBA, Camera, StatusLine
    ├── constants.py       – ViewConstants mixin (all class-level constants)
    ├── helpers.py         – world_rect, light placement, alpha drawing
    ├── draw_road.py       – RoadRenderer mixin (roads, lights, reflectors)
    ├── draw_vehicles.py   – VehicleRenderer mixin (vehicles, emergency vehicle)
    ├── hud.py             – HudRenderer mixin  (junction table, status, legend)
    └── pygame_view.py     – PygameCorridorView (this file – main loop)

The view drives :meth:`SimulationWorld.tick` with the frame time and learns
about light colours, reflector pulses and status text only through the
:class:`~bus.EventBus` it polls each frame.
"""

from __future__ import annotations

import logging
import os
from collections import deque
from datetime import datetime
from typing import Deque, Dict, Optional

import pygame

from bus import TOPIC_LIGHTS, TOPIC_PULSE, TOPIC_STATUS, EventBus
from sim.world import SimulationWorld

from .constants import ViewConstants
from .draw_road import RoadRenderer
from .draw_vehicles import VehicleRenderer
from .hud import HudRenderer
from .types import Camera, StatusLine

log = logging.getLogger("pygame_view")


class PygameCorridorView(
    ViewConstants,
    RoadRenderer,
    VehicleRenderer,
    HudRenderer,
):
    """Top-down emergency-corridor visualiser powered by Pygame.

    Parameters
    ----------
    world : SimulationWorld
        Simulation to drive and draw.
    bus : EventBus
        Bus the world's :class:`~bus.BusSink` publishes on.
    """

    def __init__(
        self,
        world: SimulationWorld,
        bus: EventBus,
        width: int = 1280,
        height: int = 560,
        fps: int = 60,
    ) -> None:
        self.world = world
        self.bus = bus
        self.width = width
        self.height = height
        self.fps = fps

        self.screen: Optional[pygame.Surface] = None
        self.clock: Optional[pygame.time.Clock] = None
        self.font_small: Optional[pygame.font.Font] = None
        self.font_tiny: Optional[pygame.font.Font] = None
        self.font_title: Optional[pygame.font.Font] = None

        self.camera = Camera(width, height)
        self.camera.fit(world.layout.get_bounds(self.WORLD_MARGIN))
        self.time_seconds = 0.0

        # State fed by the bus
        self.light_colors: Dict[int, Dict[str, str]] = {}
        self.pulses: Dict[str, float] = {}
        self.status_lines: Deque[StatusLine] = deque(maxlen=50)

        # UI state
        self.paused = False
        self.show_debug = False
        self.show_legend = True
        self._screenshot_flash_until = 0.0

    # ------------------------------------------------------------------ #
    #  Bus polling                                                         #
    # ------------------------------------------------------------------ #
    def _poll_bus(self, dt: float) -> None:
        for msg in self.bus.poll(TOPIC_LIGHTS):
            self.light_colors[msg.payload["junction"]] = dict(msg.payload["colors"])
        for msg in self.bus.poll(TOPIC_PULSE):
            self.pulses[msg.payload["sensor"]] = msg.payload["duration_ms"] / 1000.0
        for msg in self.bus.poll(TOPIC_STATUS):
            self.status_lines.append(StatusLine(msg.sender, msg.payload["message"], self.world.time))

        for sensor_id in list(self.pulses):
            self.pulses[sensor_id] -= dt
            if self.pulses[sensor_id] <= 0:
                del self.pulses[sensor_id]

    def _reset(self) -> None:
        self.light_colors.clear()
        self.pulses.clear()
        self.status_lines.clear()
        self.paused = False
        self.world.reset()
        log.info("Simulation reset")

    # ------------------------------------------------------------------ #
    #  Fonts / resize / screenshot                                         #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _load_font(size: int, bold: bool = False) -> pygame.font.Font:
        return pygame.font.SysFont("consolas,dejavusansmono,monospace", size, bold=bold)

    def _handle_resize(self, new_w: int, new_h: int) -> None:
        self.width = max(400, new_w)
        self.height = max(300, new_h)
        self.camera = Camera(self.width, self.height)
        self.camera.fit(self.world.layout.get_bounds(self.WORLD_MARGIN))
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )

    def _take_screenshot(self) -> None:
        if self.screen is None:
            return
        os.makedirs(self.SCREENSHOT_DIR, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = os.path.join(self.SCREENSHOT_DIR, f"corridor_{stamp}.png")
        pygame.image.save(self.screen, path)
        self._screenshot_flash_until = self.time_seconds + 0.35

    # ------------------------------------------------------------------ #
    #  Main loop                                                           #
    # ------------------------------------------------------------------ #
    def run(self) -> None:
        pygame.init()
        pygame.display.set_caption("EMERGENCY PREEMPTION SIM")
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )
        self.clock = pygame.time.Clock()
        self.font_small = self._load_font(14, bold=True)
        self.font_tiny = self._load_font(12)
        self.font_title = self._load_font(28, bold=True)

        running = True
        while running:
            delta_time = self.clock.tick(self.fps) / 1000.0
            self.time_seconds += delta_time

            # ---- events ------------------------------------------------- #
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    self._handle_resize(event.w, event.h)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        self.paused = not self.paused
                    elif event.key == pygame.K_r:
                        self._reset()
                    elif event.key == pygame.K_F3:
                        self.show_debug = not self.show_debug
                    elif event.key == pygame.K_l:
                        self.show_legend = not self.show_legend
                    elif event.key == pygame.K_F12:
                        self._take_screenshot()

            # ---- simulation tick ---------------------------------------- #
            if not self.paused:
                self.world.tick(delta_time)
                self._poll_bus(delta_time)

            # ---- render ------------------------------------------------- #
            self.screen.fill(self.BG_COLOR)
            self.draw_road(self.screen)
            self.draw_lane_markings(self.screen)
            self.draw_reflectors(self.screen)
            self.draw_lights(self.screen)
            self.draw_emergency_path(self.screen)
            self.draw_vehicles(self.screen)
            self.draw_emergency(self.screen)

            self.draw_hud(self.screen)
            if self.show_legend:
                self._draw_legend(self.screen)
            if self.show_debug:
                self._draw_debug_overlay(self.screen, delta_time)
            if self.paused:
                self._draw_pause_banner(self.screen)
            if self.time_seconds < self._screenshot_flash_until:
                flash = pygame.Surface(
                    (self.width, self.height), pygame.SRCALPHA
                )
                flash.fill((255, 255, 255, 40))
                self.screen.blit(flash, (0, 0))

            pygame.display.flip()

        pygame.quit()


# ---------------------------------------------------------------------- #
#  Convenience entry point                                                 #
# ---------------------------------------------------------------------- #
def run_pygame_view(
    world: SimulationWorld,
    bus: EventBus,
    width: int = 1280,
    height: int = 560,
    fps: int = 60,
) -> None:
    view = PygameCorridorView(world=world, bus=bus, width=width, height=height, fps=fps)
    view.run()
