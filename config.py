#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via environment variables (see :mod:`main`).
This module is a thin, import-safe leaf — it never imports from
other project packages.
"""

# ── Simulation defaults ──────────────────────────────────────────────────────
DEFAULT_TICK_RATE_HZ: float = 20.0
DEFAULT_SEED: int = 7
DEFAULT_DURATION_S: float = 60.0

# ── Event bus defaults ───────────────────────────────────────────────────────
BUS_MAX_QUEUE: int = 1000

# ── UI defaults ──────────────────────────────────────────────────────────────
WINDOW_WIDTH: int = 1280
WINDOW_HEIGHT: int = 560
TARGET_FPS: int = 60

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_FILE: str = "evp.log"
PREEMPTION_DEBUG_LOG: str = "preemption_debug.log"

# ── Environment variable names ───────────────────────────────────────────────
ENV_HEADLESS: str = "EVP_HEADLESS"
ENV_SEED: str = "EVP_SEED"
ENV_DURATION_S: str = "EVP_DURATION_S"
ENV_TRACE_CSV: str = "EVP_TRACE_CSV"
ENV_LOG_LEVEL: str = "EVP_LOG_LEVEL"
