# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Declarative monitor configuration using Pydantic.

A YAML file describes when observables are recorded and when the solver
state is checkpointed:

    log_level: INFO
    record:
      schedule: {every: 10}
      console: true
    checkpoint:
      savepath: ckpt/state.msgpack
      schedule: {period: 30, unit: m}
      params: {D: 16, g: 0.5}

Relative save paths are resolved against the directory of the YAML file.

File: vumpsmon/config.py
Date: October, 2026
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt

from .analysis import (
    ConsoleEffect,
    RecordObservable,
    SaveState,
    record_energy_convergence,
)
from .backends import TensorNetworkBackend
from .callbacks import Callback, CallbackList
from .conditions import (
    Always,
    IterationElapsed,
    TimeElapsed,
    TriggerCondition,
    all_of,
    any_of,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Enums
# ============================================================================

class TimeUnit(str, Enum):
    """Units accepted by TimeElapsed."""
    SECONDS = "s"
    MINUTES = "m"
    HOURS = "h"


class Combine(str, Enum):
    """How iteration and time schedules are joined when both are set."""
    ANY = "any"
    ALL = "all"


# ============================================================================
# Sub-Configurations
# ============================================================================

class ScheduleConfig(BaseModel):
    """Trigger schedule: every N iterations and/or every period of time."""
    model_config = ConfigDict(extra="forbid")

    every: Optional[PositiveInt] = None
    period: Optional[PositiveFloat] = None
    unit: TimeUnit = TimeUnit.MINUTES
    combine: Combine = Combine.ANY

    def build(self) -> TriggerCondition:
        """Instantiate the trigger condition (Always() if unconstrained)."""
        conditions: list[TriggerCondition] = []
        if self.every is not None:
            conditions.append(IterationElapsed(self.every))
        if self.period is not None:
            conditions.append(TimeElapsed(self.period, self.unit.value))

        if not conditions:
            return Always()
        join = any_of if self.combine is Combine.ANY else all_of
        return join(*conditions)


class RecordConfig(BaseModel):
    """Energy/convergence recording."""
    model_config = ConfigDict(extra="forbid")

    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    console: bool = False


class CheckpointConfig(BaseModel):
    """State checkpointing."""
    model_config = ConfigDict(extra="forbid")

    savepath: Path
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    save_every_tick: bool = True
    save_without_snapshot: bool = True
    params: Dict[str, Any] = Field(default_factory=dict)


class MonitorConfig(BaseModel):
    """
    Top-level configuration of the callback stack.

    Ties together:
      - Observable recording (and optional console echo)
      - Checkpointing
      - Log level
    """
    model_config = ConfigDict(extra="forbid")

    record: Optional[RecordConfig] = None
    checkpoint: Optional[CheckpointConfig] = None
    log_level: str = "INFO"

    @classmethod
    def load(cls, path: Union[str, Path]) -> "MonitorConfig":
        """Load from YAML file, resolving relative paths against its directory."""
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        cfg = cls(**data)
        if cfg.checkpoint is not None and not cfg.checkpoint.savepath.is_absolute():
            cfg.checkpoint.savepath = path.parent / cfg.checkpoint.savepath
        return cfg

    def save(self, path: Union[str, Path]) -> None:
        """Save to YAML file."""
        path = Path(path)
        data = self.model_dump(mode="json", exclude_none=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)

    def build(
        self,
        backend: Optional[TensorNetworkBackend] = None,
    ) -> tuple[CallbackList, Optional[SaveState]]:
        """
        Assemble the callback stack.

        Recording runs before checkpointing so saved logs include the
        current iteration.

        Args:
            backend: Solver backend; required when recording is configured

        Returns:
            (callbacks, checkpoint): The checkpoint is returned separately so
            the caller can finalize it on shutdown
        """
        callbacks: list[Callback] = []
        recorder: Optional[RecordObservable] = None

        if self.record is not None:
            if backend is None:
                raise ValueError("record configuration requires a solver backend")
            recorder = record_energy_convergence(backend)
            condition = self.record.schedule.build()
            if self.record.console:
                # One condition evaluation drives both effects
                effect = CallbackList.of(
                    Callback(Always(), recorder),
                    Callback(Always(), ConsoleEffect(recorder)),
                )
                callbacks.append(Callback(condition, effect))
            else:
                callbacks.append(Callback(condition, recorder))

        checkpoint: Optional[SaveState] = None
        if self.checkpoint is not None:
            ckpt_cfg = self.checkpoint
            checkpoint = SaveState(
                ckpt_cfg.params,
                recorder,
                ckpt_cfg.savepath,
                save_every_tick=ckpt_cfg.save_every_tick,
                save_without_snapshot=ckpt_cfg.save_without_snapshot,
            )
            callbacks.append(Callback(ckpt_cfg.schedule.build(), checkpoint))

        logger.debug("Built %d callbacks", len(callbacks))
        return CallbackList(callbacks), checkpoint


__all__ = [
    "TimeUnit",
    "Combine",
    "ScheduleConfig",
    "RecordConfig",
    "CheckpointConfig",
    "MonitorConfig",
]
