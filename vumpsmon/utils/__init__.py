# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""Shared utilities: logging setup and console theme."""

from .logger import ROOT_LOGGER, VUMPSMON_THEME, get_console, setup_logging

__all__ = ["ROOT_LOGGER", "VUMPSMON_THEME", "get_console", "setup_logging"]
