# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Solver loop adapter honouring the callback integration contract.

Each iteration k = start, start + 1, ...:
  1. (state, envs[, converged]) = step(state, model, envs)
  2. (state, envs) = callback(k, state, model, envs)
  3. Stop on convergence or after max_iter iterations

The callback always runs after a completed iteration, which is the
precondition of time-based trigger conditions.

File: vumpsmon/driver.py
Date: October, 2026
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

StepFn = Callable[[Any, Any, Any], tuple]
CallbackFn = Callable[[int, Any, Any, Any], tuple[Any, Any]]


@dataclass
class RunResult:
    """Final solver state after the callback loop."""

    state: Any
    envs: Any
    iterations: int
    converged: bool
    elapsed: float


def run_callbacks(
    step: StepFn,
    state: Any,
    model: Any,
    envs: Any,
    callback: CallbackFn,
    max_iter: int,
    start: int = 1,
) -> RunResult:
    """
    Drive an external iteration, invoking ``callback`` once per iteration.

    Args:
        step: One solver iteration (state, model, envs) -> (state, envs)
              or (state, envs, converged)
        state: Initial state
        model: Hamiltonian / model, passed through untouched
        envs: Initial solver environment
        callback: Top-level callback, usually a CallbackList
        max_iter: Maximum number of iterations
        start: Index of the first iteration

    Returns:
        RunResult with the state/envs adopted from the last callback
    """
    if max_iter < 0:
        raise ValueError(f"max_iter must be non-negative, got {max_iter}")

    logger.info("Starting solve: max_iter=%d", max_iter)
    start_time = time.perf_counter()

    converged = False
    n_done = 0
    for iteration in range(start, start + max_iter):
        out = step(state, model, envs)
        if len(out) == 3:
            state, envs, converged = out
        else:
            state, envs = out

        state, envs = callback(iteration, state, model, envs)
        n_done += 1

        if converged:
            break

    elapsed = time.perf_counter() - start_time
    status = "converged" if converged else "max_iter reached"
    logger.info("Solve finished after %d iterations (%s, %.2fs)", n_done, status, elapsed)

    return RunResult(
        state=state,
        envs=envs,
        iterations=n_done,
        converged=bool(converged),
        elapsed=elapsed,
    )


__all__ = ["RunResult", "run_callbacks"]
