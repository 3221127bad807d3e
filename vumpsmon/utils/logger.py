# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Logging setup for vumpsmon.

All modules log under the ``vumpsmon`` hierarchy; setup_logging attaches
a single rich handler to the package root logger.

File: vumpsmon/utils/logger.py
Date: October, 2026
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

ROOT_LOGGER = "vumpsmon"

VUMPSMON_THEME = Theme({
    "vumpsmon.main": "cyan",           # Primary text and headers
    "vumpsmon.accent": "bright_yellow", # Emphasis values
})


def get_console() -> Console:
    """Themed console shared by handlers and table output."""
    return Console(theme=VUMPSMON_THEME)


def setup_logging(
    level: int | str = logging.INFO,
    console: Console | None = None,
) -> logging.Logger:
    """
    Attach a RichHandler to the package logger.

    Repeated calls replace the previous handler instead of stacking them.

    Args:
        level: Logging level (int or name, e.g. "DEBUG")
        console: Optional rich console; a themed one is created otherwise

    Returns:
        The configured ``vumpsmon`` logger
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.handlers.clear()

    rich_h = RichHandler(
        console=console or get_console(),
        show_path=False,
        show_time=False,
        omit_repeated_times=False,
        markup=True,
    )
    rich_h.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(rich_h)
    return logger


__all__ = ["ROOT_LOGGER", "VUMPSMON_THEME", "get_console", "setup_logging"]
