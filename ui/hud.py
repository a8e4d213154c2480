#!/usr/bin/env python3
"""Junction table, status feed, legend, debug overlay and pause banner (mixin)."""

from __future__ import annotations

import pygame


class HudRenderer:
    """Mixin that draws every overlay / HUD element."""

    # ------------------------------------------------------------------ #
    #  Junction table + status feed                                        #
    # ------------------------------------------------------------------ #

    def draw_hud(self, surface: pygame.Surface) -> None:
        if self.font_small is None or self.font_tiny is None:
            return

        junctions = self.world.junctions
        row_h = 16
        panel_w = 360
        panel_h = 30 + len(junctions) * row_h + 24 + self.STATUS_LINES * row_h
        panel = pygame.Rect(16, 16, panel_w, panel_h)
        pygame.draw.rect(surface, self.HUD_BG_COLOR, panel, border_radius=6)
        pygame.draw.rect(surface, self.HUD_BORDER_COLOR, panel, width=1, border_radius=6)

        ev = self.world.emergency
        header = self.font_small.render(
            f"EV {ev.state.value}   T {self.world.time:5.1f}s", True, self.HUD_TEXT_COLOR,
        )
        surface.blit(header, (panel.x + 10, panel.y + 6))

        y = panel.y + 30
        for j in junctions:
            color = self.PREEMPT_COLOR if j.is_preempted else self.HUD_TEXT_COLOR
            reason = j.reason.value if j.is_preempted else ""
            line = f"{j.id:<4}{j.mode.value:<11}{j.cycle.phase.value:<11}chain {len(j.chain):<3}{reason}"
            surface.blit(self.font_tiny.render(line, True, color), (panel.x + 10, y))
            y += row_h

        y += 8
        surface.blit(self.font_tiny.render("STATUS", True, self.HUD_DIM_COLOR), (panel.x + 10, y))
        y += row_h
        for status in list(self.status_lines)[-self.STATUS_LINES:]:
            text = f"{status.received_s:5.1f}s  {status.message}"
            surface.blit(self.font_tiny.render(text, True, self.HUD_TEXT_COLOR), (panel.x + 10, y))
            y += row_h

    # ------------------------------------------------------------------ #
    #  Legend                                                               #
    # ------------------------------------------------------------------ #

    def _draw_legend(self, surface: pygame.Surface) -> None:
        if self.font_tiny is None:
            return
        box_w, box_h = 150, len(self.LEGEND_ITEMS) * 18 + 10
        x = self.width - box_w - 10
        y = self.height - box_h - 16
        pygame.draw.rect(
            surface, self.HUD_BG_COLOR, (x - 6, y - 4, box_w, box_h), border_radius=4
        )
        pygame.draw.rect(
            surface, self.HUD_BORDER_COLOR, (x - 6, y - 4, box_w, box_h), width=1, border_radius=4
        )
        for label, color in self.LEGEND_ITEMS:
            pygame.draw.circle(surface, color, (x + 4, y + 6), 4)
            text = self.font_tiny.render(label, True, (200, 200, 200))
            surface.blit(text, (x + 14, y))
            y += 18

    # ------------------------------------------------------------------ #
    #  Debug / FPS overlay                                                 #
    # ------------------------------------------------------------------ #

    def _draw_debug_overlay(self, surface: pygame.Surface, dt: float) -> None:
        if self.font_tiny is None:
            return
        fps = self.clock.get_fps() if self.clock else 0.0
        metrics = self.bus.metrics.report()
        lines = [
            f"FPS  {fps:.1f}",
            f"DT   {dt * 1000:.1f} ms",
            f"TICK {self.world.tick_count}",
            f"VEH  {len(self.world.vehicles)}",
            f"ZOOM {self.camera.zoom:.2f}",
            f"BUS  pub {metrics['published']} / polled {metrics['polled']}",
        ]
        x, y = 16, self.height - 16 - len(lines) * 14
        for line in lines:
            text = self.font_tiny.render(line, True, (0, 255, 127))
            surface.blit(text, (x, y))
            y += 14

    # ------------------------------------------------------------------ #
    #  Pause banner                                                        #
    # ------------------------------------------------------------------ #

    def _draw_pause_banner(self, surface: pygame.Surface) -> None:
        overlay = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 100))
        surface.blit(overlay, (0, 0))
        if self.font_title:
            text = self.font_title.render("PAUSED", True, (220, 220, 220))
            surface.blit(text, text.get_rect(center=(self.width // 2, self.height // 2)))
