# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Analysis module for vumpsmon callbacks.

Provides the concrete callback effects:
  - Observables: named observable logs and the energy/convergence preset
  - Console: tabulated progress output
  - Checkpoint: state snapshots, persistence and shutdown finalization

File: vumpsmon/analysis/__init__.py
Date: October, 2026
"""

from .checkpoint import CheckpointManager, SaveState, shutdown_guard
from .observables import (
    ConsoleEffect,
    RecordObservable,
    combine,
    record_energy_convergence,
)

__all__ = [
    # Observable recording
    "RecordObservable",
    "combine",
    "record_energy_convergence",
    "ConsoleEffect",
    # Checkpoint management
    "SaveState",
    "shutdown_guard",
    "CheckpointManager",
]
