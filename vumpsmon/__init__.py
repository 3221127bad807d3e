# file: vumpsmon/__init__.py

"""
vumpsmon: Scheduled observers and checkpoints for uniform-MPS solvers.

Callbacks are called by the solver once per completed iteration as
``state, envs = callback(iteration, state, model, envs)``.
"""

from .analysis import (
    CheckpointManager,
    ConsoleEffect,
    RecordObservable,
    SaveState,
    combine,
    record_energy_convergence,
    shutdown_guard,
)
from .backends import TensorNetworkBackend, UniformMPS, UniformMPSBackend
from .callbacks import EFFECTS, BaseCallback, Callback, CallbackList, Effect
from .conditions import (
    CONDITIONS,
    AllOf,
    Always,
    AnyOf,
    IterationElapsed,
    Never,
    TimeElapsed,
    TriggerCondition,
    all_of,
    any_of,
    build_condition,
)
from .config import MonitorConfig
from .driver import RunResult, run_callbacks
from .utils import setup_logging

__version__ = "0.1.0"

__all__ = [
    # Conditions
    "TriggerCondition",
    "Always",
    "Never",
    "IterationElapsed",
    "TimeElapsed",
    "AnyOf",
    "AllOf",
    "any_of",
    "all_of",
    "CONDITIONS",
    "build_condition",
    # Callbacks
    "Effect",
    "BaseCallback",
    "Callback",
    "CallbackList",
    "EFFECTS",
    # Effects
    "RecordObservable",
    "combine",
    "record_energy_convergence",
    "ConsoleEffect",
    "SaveState",
    "shutdown_guard",
    "CheckpointManager",
    # Backends
    "TensorNetworkBackend",
    "UniformMPS",
    "UniformMPSBackend",
    # Driver / config / logging
    "RunResult",
    "run_callbacks",
    "MonitorConfig",
    "setup_logging",
]
