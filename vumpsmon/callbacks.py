# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Callback composition for iterative solvers.

A callback pairs a trigger condition with an effect. The solver calls the
top-level callback once per completed iteration as

    state, envs = callback(iteration, state, model, envs)

and continues from the returned pair. Effects may record data or write
files, and may return an updated (state, envs).

File: vumpsmon/callbacks.py
Date: October, 2026
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from .conditions import Always, TriggerCondition

Pair = tuple[Any, Any]
EffectFn = Callable[[int, Any, Any, Any], Pair]


class Effect(ABC):
    """Abstract effect acting on the solver state."""

    @abstractmethod
    def __call__(self, iteration: int, state: Any, model: Any, envs: Any) -> Pair:
        """Apply the effect and return (state, envs)."""


class BaseCallback(ABC):
    """Abstract base for anything the solver can call per iteration."""

    @abstractmethod
    def __call__(self, iteration: int, state: Any, model: Any, envs: Any) -> Pair:
        """Run for one completed iteration and return (state, envs)."""


@dataclass(frozen=True)
class Callback(BaseCallback):
    """
    Conditionally applied effect.

    Attributes:
        condition: Predicate (iteration, state, model, envs) -> bool
        effect: Callable (iteration, state, model, envs) -> (state, envs)
    """

    condition: TriggerCondition | Callable[..., bool]
    effect: Effect | EffectFn

    def __call__(self, iteration, state, model, envs) -> Pair:
        if self.condition(iteration, state, model, envs):
            state, envs = self.effect(iteration, state, model, envs)
        return state, envs


@dataclass(frozen=True)
class CallbackList(BaseCallback):
    """
    Ordered sequence of callbacks threading (state, envs) through each.

    Behaves as a callback with an always-true condition whose effect is
    running its children in order, so lists nest freely.
    """

    callbacks: tuple[BaseCallback, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "callbacks", tuple(self.callbacks))

    @classmethod
    def of(cls, *callbacks: BaseCallback) -> CallbackList:
        return cls(callbacks)

    @property
    def condition(self) -> TriggerCondition:
        return Always()

    @property
    def effect(self) -> CallbackList:
        return self

    def __call__(self, iteration, state, model, envs) -> Pair:
        for callback in self.callbacks:
            state, envs = callback(iteration, state, model, envs)
        return state, envs

    def __getitem__(self, idx):
        return self.callbacks[idx]

    def __len__(self) -> int:
        return len(self.callbacks)

    def __iter__(self) -> Iterator[BaseCallback]:
        return iter(self.callbacks)


# Name -> effect registry, populated by the modules defining effects
EFFECTS: dict[str, type[Effect]] = {}


def register_effect(name: str):
    """
    Class decorator adding an Effect subclass to EFFECTS.

    Re-registering a class with the same qualified name (module reload)
    replaces the entry; any other clash raises ValueError.
    """

    def decorator(cls: type[Effect]) -> type[Effect]:
        existing = EFFECTS.get(name)
        if existing is not None and _qualname(existing) != _qualname(cls):
            raise ValueError(f"effect {name!r} already registered")
        EFFECTS[name] = cls
        return cls

    return decorator


def _qualname(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


__all__ = [
    "Effect",
    "BaseCallback",
    "Callback",
    "CallbackList",
    "EFFECTS",
    "register_effect",
]
