# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Checkpointing of solver state during optimization.

Record layout (msgpack via Flax serialization):
  {"data": {**params, "state": ..., "envs": ..., "observables": {name: log}}}

SaveState snapshots (state, envs) on every firing and optionally writes
the record each time. The owner finalizes it exactly once on shutdown,
either explicitly, as a context manager, or through shutdown_guard; the
final save is best effort and only ever warns.

File: vumpsmon/analysis/checkpoint.py
Date: October, 2026
"""

from __future__ import annotations

import copy
import logging
import shutil
import signal
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from flax import serialization

from ..callbacks import Callback, Effect, register_effect
from .observables import RecordObservable

logger = logging.getLogger(__name__)

# Record keys owned by SaveState
RESERVED_KEYS = ("state", "envs", "observables")


@register_effect("checkpoint")
class SaveState(Effect):
    """Snapshot (state, envs) with parameters and optional observable logs."""

    def __init__(
        self,
        params: dict[str, Any],
        observables: RecordObservable | Callback | None,
        savepath: str | Path,
        save_every_tick: bool = True,
        save_without_snapshot: bool = True,
    ):
        """
        Args:
            params: System parameters stored alongside the snapshot
            observables: Recorder (or callback wrapping one) saved with the record
            savepath: Checkpoint file path
            save_every_tick: Persist on every firing instead of only on finalize
            save_without_snapshot: Let finalize persist parameters even if no
                snapshot was ever taken
        """
        clashes = [key for key in RESERVED_KEYS if key in params]
        if clashes:
            raise ValueError(f"params use reserved checkpoint keys: {clashes}")

        if isinstance(observables, Callback):
            observables = observables.effect
        if observables is None:
            observables = RecordObservable()
        if not isinstance(observables, RecordObservable):
            raise TypeError(
                f"observables must be a RecordObservable, got {type(observables).__name__}"
            )

        self.data: dict[str, Any] = {**params, "state": None, "envs": None}
        self.observables = observables
        self.savepath = Path(savepath)
        self.save_every_tick = save_every_tick
        self.save_without_snapshot = save_without_snapshot
        self._finalized = False

    @property
    def has_snapshot(self) -> bool:
        return self.data["state"] is not None

    def __call__(self, iteration, state, model, envs):
        self.data["state"] = copy.deepcopy(state)
        self.data["envs"] = copy.deepcopy(envs)

        if self.save_every_tick:
            self.save()
        return state, envs

    def record(self) -> dict[str, Any]:
        """Full persisted record under the "data" tag."""
        return {"data": {**self.data, "observables": self.observables.data}}

    def save(self) -> None:
        """Write the current record to savepath."""
        CheckpointManager.save(self.savepath, self.record())

    def finalize(self) -> None:
        """
        Best-effort shutdown save; runs at most once and never raises.
        """
        if self._finalized:
            return
        self._finalized = True

        if not self.has_snapshot:
            logger.warning(
                "Program terminated before a checkpoint was reached. State was not saved!"
            )
            if not self.save_without_snapshot:
                return

        try:
            self.save()
        except (Exception, KeyboardInterrupt, SystemExit):
            # Interrupts during the final save are downgraded to a warning
            logger.warning(
                "Final checkpoint to %s failed", self.savepath, exc_info=True
            )

    def __enter__(self) -> SaveState:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.finalize()


@contextmanager
def shutdown_guard(
    *checkpoints: SaveState,
    signals: tuple[int, ...] = (signal.SIGTERM,),
) -> Iterator[tuple[SaveState, ...]]:
    """
    Finalize checkpoints on any exit from the block, including termination.

    While active, the given signals raise SystemExit so the block unwinds
    normally. They are ignored while the checkpoints are finalized, and the
    previous handlers are restored afterwards. Must be entered from the main
    thread.
    """

    def _raise_exit(signum, frame):
        raise SystemExit(128 + signum)

    previous = {sig: signal.signal(sig, _raise_exit) for sig in signals}
    try:
        yield checkpoints
    finally:
        try:
            for sig in previous:
                signal.signal(sig, signal.SIG_IGN)
            _finalize_all(checkpoints)
        finally:
            for sig, handler in previous.items():
                signal.signal(sig, handler)


def _finalize_all(checkpoints) -> None:
    """Finalize each checkpoint; one failure never skips the rest."""
    for ckpt in checkpoints:
        try:
            ckpt.finalize()
        except Exception:
            logger.warning("Finalizing checkpoint %r failed", ckpt, exc_info=True)


class CheckpointManager:
    """Low-level checkpoint I/O with atomic write guarantees."""

    @staticmethod
    def save(path: str | Path, record: dict[str, Any]) -> None:
        """
        Atomic checkpoint save via temporary file.

        Serializes the record to msgpack bytes with Flax (PyTrees, numpy and
        JAX arrays, complex scalars) and swaps the file into place.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(path.name + ".tmp")

        payload = serialization.to_bytes(record)
        try:
            tmp_path.write_bytes(payload)
            # Atomic swap
            shutil.move(str(tmp_path), str(path))
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        logger.debug("Checkpoint written to %s (%d bytes)", path, len(payload))

    @staticmethod
    def load(path: str | Path) -> dict[str, Any]:
        """
        Load checkpoint as a nested state dict.

        Sequences come back as dicts keyed "0", "1", ... and PyTree dataclasses
        as field dicts (Flax state-dict conventions).
        """
        path = Path(path)
        return serialization.msgpack_restore(path.read_bytes())


__all__ = ["SaveState", "shutdown_guard", "CheckpointManager"]
