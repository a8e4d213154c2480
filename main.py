#!/usr/bin/env python3
"""
main.py
=======
Entry point.  Runs the emergency-preemption corridor either in a pygame
window or headless at a fixed tick rate.

Environment overrides
---------------------
EVP_HEADLESS    ``1`` runs without a window.
EVP_SEED        Seed for the vehicle population.
EVP_DURATION_S  Headless run length in simulated seconds.
EVP_TRACE_CSV   Write the per-tick junction trace to this CSV path.
EVP_LOG_LEVEL   ``DEBUG`` / ``INFO`` / ``WARNING`` ...
"""

import logging
import os
from typing import Optional

import config
from logging_setup import setup_logging
from bus import BusSink, EventBus, TOPIC_STATUS
from sim.recorder import TickRecorder
from sim.world import SimulationWorld


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default, cast):
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logging.getLogger("main").warning("Ignoring invalid %s=%r", name, raw)
        return default


def run_headless(
    world: SimulationWorld,
    bus: EventBus,
    duration_s: float,
    recorder: Optional[TickRecorder] = None,
) -> None:
    """Tick *world* at the configured rate until *duration_s* or the vehicle departs."""
    log = logging.getLogger("main")
    dt = 1.0 / config.DEFAULT_TICK_RATE_HZ
    while world.time < duration_s and not world.is_finished():
        world.tick(dt)
        if recorder is not None:
            recorder.record(world)
        for msg in bus.poll(TOPIC_STATUS):
            log.info("[%6.2fs] %s: %s", world.time, msg.sender, msg.payload["message"])
    log.info("Headless run stopped at %.2fs (%d ticks)", world.time, world.tick_count)


def main():
    level_name = os.environ.get(config.ENV_LOG_LEVEL, "INFO").strip().upper()
    setup_logging(getattr(logging, level_name, logging.INFO))
    log = logging.getLogger("main")

    seed = _env_number(config.ENV_SEED, config.DEFAULT_SEED, int)
    duration_s = _env_number(config.ENV_DURATION_S, config.DEFAULT_DURATION_S, float)
    trace_csv = os.environ.get(config.ENV_TRACE_CSV, "").strip()
    headless = _env_flag(config.ENV_HEADLESS)

    world = None
    bus = EventBus(max_queue=config.BUS_MAX_QUEUE, clock=lambda: world.time if world else 0.0)
    world = SimulationWorld(sink=BusSink(bus), seed=seed)
    recorder = TickRecorder() if trace_csv else None

    log.info("Starting %s run (seed=%s)", "headless" if headless else "pygame", seed)
    try:
        if headless:
            run_headless(world, bus, duration_s, recorder)
        else:
            from ui import run_pygame_view
            run_pygame_view(
                world, bus,
                width=config.WINDOW_WIDTH,
                height=config.WINDOW_HEIGHT,
                fps=config.TARGET_FPS,
            )
    except KeyboardInterrupt:
        log.info("Shutting down...")
    finally:
        if recorder is not None and len(recorder):
            recorder.save_csv(trace_csv)
        log.info("Bus metrics: %s", bus.metrics.report())


if __name__ == "__main__":
    main()
