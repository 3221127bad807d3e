# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Trigger conditions deciding when a callback effect fires.

Every condition is a predicate over (iteration, state, model, envs):
  - IterationElapsed: every N-th iteration (iteration 0 included)
  - TimeElapsed: wall-clock period since the last firing
  - AnyOf / AllOf: OR / AND trees, built with any_of() / all_of()
  - Always / Never: constant predicates

Conditions never touch optimizer state. TimeElapsed is the only variant
with internal mutable state (its clock), so combinators evaluate every
child on every call to keep clock resets reproducible.

File: vumpsmon/conditions.py
Date: October, 2026
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

# Seconds per unit; long names alias the short symbols
_UNIT_SECONDS = {
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
    "seconds": 1.0,
    "minutes": 60.0,
    "hours": 3600.0,
}


class TriggerCondition(ABC):
    """Abstract predicate over the solver iteration context."""

    @abstractmethod
    def __call__(self, iteration: int, state: Any, model: Any, envs: Any) -> bool:
        """Return True if the attached effect should fire."""


class Always(TriggerCondition):
    """Fires on every iteration."""

    def __call__(self, iteration, state, model, envs) -> bool:
        return True

    def __repr__(self) -> str:
        return "Always()"


class Never(TriggerCondition):
    """Never fires."""

    def __call__(self, iteration, state, model, envs) -> bool:
        return False

    def __repr__(self) -> str:
        return "Never()"


class IterationElapsed(TriggerCondition):
    """Fires when the iteration index is a multiple of ``period``."""

    def __init__(self, period: int):
        """
        Args:
            period: Number of iterations between triggers (> 0)
        """
        period = int(period)
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        self.period = period

    def __call__(self, iteration, state, model, envs) -> bool:
        return iteration % self.period == 0

    def __repr__(self) -> str:
        return f"IterationElapsed(period={self.period})"


class TimeElapsed(TriggerCondition):
    """
    Fires once more than ``period`` wall-clock seconds passed since the
    last firing (or construction), then restarts its clock.

    Only meant to be evaluated after an iteration completes, never
    mid-iteration.
    """

    def __init__(self, period: float, unit: str = "m"):
        """
        Args:
            period: Time between triggers, expressed in ``unit``
            unit: "s", "m" or "h" (or "seconds", "minutes", "hours")
        """
        try:
            scale = _UNIT_SECONDS[unit]
        except KeyError:
            raise ValueError(
                f"invalid unit {unit!r}, expected 's', 'm' or 'h'"
            ) from None

        self.period = float(period) * scale
        self.start_tick = time.time()

    def reset(self) -> None:
        """Restart the clock from now."""
        self.start_tick = time.time()

    def __call__(self, iteration, state, model, envs) -> bool:
        now = time.time()
        if now - self.start_tick > self.period:
            self.start_tick = now
            return True
        return False

    def __repr__(self) -> str:
        return f"TimeElapsed(period={self.period}s)"


class _Combinator(TriggerCondition):
    """Shared storage for AND/OR trees."""

    def __init__(self, conditions):
        self.conditions: tuple[TriggerCondition, ...] = tuple(conditions)

    def _evaluate_all(self, iteration, state, model, envs) -> list[bool]:
        # No short-circuit: stateful children must see every call
        return [bool(c(iteration, state, model, envs)) for c in self.conditions]

    def __len__(self) -> int:
        return len(self.conditions)

    def __repr__(self) -> str:
        inner = ", ".join(repr(c) for c in self.conditions)
        return f"{type(self).__name__}({inner})"


class AnyOf(_Combinator):
    """True if at least one child condition is true."""

    def __call__(self, iteration, state, model, envs) -> bool:
        return any(self._evaluate_all(iteration, state, model, envs))


class AllOf(_Combinator):
    """True if every child condition is true."""

    def __call__(self, iteration, state, model, envs) -> bool:
        return all(self._evaluate_all(iteration, state, model, envs))


def _flatten(kind: type[_Combinator], conditions) -> list[TriggerCondition]:
    flat: list[TriggerCondition] = []
    for cond in conditions:
        if type(cond) is kind:
            flat.extend(cond.conditions)
        else:
            flat.append(cond)
    return flat


def any_of(*conditions: TriggerCondition) -> TriggerCondition:
    """
    OR-combine conditions, splicing nested AnyOf children in place.

    A single argument is returned unchanged.
    """
    if not conditions:
        raise ValueError("any_of() requires at least one condition")
    if len(conditions) == 1:
        return conditions[0]
    return AnyOf(_flatten(AnyOf, conditions))


def all_of(*conditions: TriggerCondition) -> TriggerCondition:
    """
    AND-combine conditions, splicing nested AllOf children in place.

    A single argument is returned unchanged.
    """
    if not conditions:
        raise ValueError("all_of() requires at least one condition")
    if len(conditions) == 1:
        return conditions[0]
    return AllOf(_flatten(AllOf, conditions))


# Name -> variant registry used by configuration
CONDITIONS: dict[str, type[TriggerCondition]] = {
    "always": Always,
    "never": Never,
    "iteration_elapsed": IterationElapsed,
    "time_elapsed": TimeElapsed,
}


def build_condition(name: str, **kwargs: Any) -> TriggerCondition:
    """Instantiate a registered condition variant by name."""
    try:
        cls = CONDITIONS[name]
    except KeyError:
        raise KeyError(
            f"unknown condition {name!r}, expected one of {sorted(CONDITIONS)}"
        ) from None
    return cls(**kwargs)


__all__ = [
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
]
