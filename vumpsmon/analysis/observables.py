# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Observable recording during optimization.

RecordObservable evaluates named observable functions
(iteration, state, model, envs) -> value at every firing and appends the
results to per-name logs. Insertion order of names is preserved.

Presets:
  - record_energy_convergence: energies, times, errors
  - ConsoleEffect: tabulated echo of the latest recorded values

File: vumpsmon/analysis/observables.py
Date: October, 2026
"""

from __future__ import annotations

import time
from typing import Any, Callable, Iterator, Mapping

import numpy as np
from rich.console import Console
from rich.table import Table

from ..backends import TensorNetworkBackend
from ..callbacks import Effect, register_effect
from ..utils.logger import get_console

ObservableFn = Callable[[int, Any, Any, Any], Any]


@register_effect("record")
class RecordObservable(Effect):
    """
    Append-only logs of observables, one entry per name per firing.

    Attributes:
        data: Observable name -> list of recorded values
        observables: List of name -> function mappings, evaluated in order
    """

    def __init__(self, recipe: Mapping[str, ObservableFn] | None = None):
        """
        Args:
            recipe: Mapping of observable name to compute function
        """
        recipe = dict(recipe or {})
        self.data: dict[str, list] = {name: [] for name in recipe}
        self.observables: list[dict[str, ObservableFn]] = [recipe]

    @classmethod
    def from_parts(
        cls,
        data: dict[str, list],
        observables: list[dict[str, ObservableFn]],
    ) -> RecordObservable:
        """Assemble from existing logs and function mappings (no copy)."""
        obj = cls.__new__(cls)
        obj.data = data
        obj.observables = observables
        return obj

    def __call__(self, iteration, state, model, envs):
        for recipe in self.observables:
            for name, fn in recipe.items():
                self.data[name].append(fn(iteration, state, model, envs))
        return state, envs

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[str]:
        return iter(self.data)

    def __getitem__(self, name: str) -> list:
        return self.data[name]

    def as_arrays(self) -> dict[str, np.ndarray]:
        """Snapshot of every log as a numpy array."""
        return {name: np.asarray(values) for name, values in self.data.items()}

    def last(self) -> dict[str, Any]:
        """Most recent value per observable (names without entries skipped)."""
        return {name: values[-1] for name, values in self.data.items() if values}

    def __repr__(self) -> str:
        sizes = ", ".join(f"{k}[{len(v)}]" for k, v in self.data.items())
        return f"RecordObservable({sizes})"


def combine(a: RecordObservable, b: RecordObservable) -> RecordObservable:
    """
    Merge two recorders into one that fires both function sets.

    Logs are unioned by name (b wins on collisions) and shared by reference
    with the sources. Colliding names are not deduplicated: the surviving
    log receives one append per source on every firing.
    """
    return RecordObservable.from_parts(
        {**a.data, **b.data},
        [*a.observables, *b.observables],
    )


def record_energy_convergence(backend: TensorNetworkBackend) -> RecordObservable:
    """
    Preset tracking energy density, timestamps and convergence error.

    Observables:
      - energies: Re <ψ|H|ψ>
      - times: time.time() at evaluation
      - errors: max_i ε_i over unit-cell sites
    """

    def energies(iteration, state, model, envs):
        return float(np.real(backend.expectation_value(state, model, envs)))

    def times(iteration, state, model, envs):
        return time.time()

    def errors(iteration, state, model, envs):
        return max(
            backend.galerkin_error(state, site, envs)
            for site in range(backend.num_sites(state))
        )

    return RecordObservable({"energies": energies, "times": times, "errors": errors})


@register_effect("console")
class ConsoleEffect(Effect):
    """
    Print the latest values of a recorder as one table row per firing.

    Columns have fixed widths so rows line up across firings. Nothing is
    printed until the recorder holds at least one value.
    """

    iter_width = 6
    value_width = 18

    def __init__(self, recorder: RecordObservable, console: Console | None = None):
        """
        Args:
            recorder: Source of the values; must fire before this effect
            console: Rich console (themed default otherwise)
        """
        self.recorder = recorder
        self.console = console or get_console()
        self._header_printed = False

    def __call__(self, iteration, state, model, envs):
        latest = self.recorder.last()
        if not latest:
            return state, envs

        table = Table(
            box=None,
            show_header=not self._header_printed,
            header_style="vumpsmon.main",
        )
        table.add_column("Iter", justify="right", width=self.iter_width, no_wrap=True)
        for name in latest:
            table.add_column(name, justify="right", width=self.value_width, no_wrap=True)
        table.add_row(str(iteration), *(_format(v) for v in latest.values()))

        self.console.print(table)
        self._header_printed = True
        return state, envs


def _format(value: Any) -> str:
    if isinstance(value, (float, np.floating)):
        return f"{value:.10g}"
    return str(value)


__all__ = [
    "RecordObservable",
    "combine",
    "record_energy_convergence",
    "ConsoleEffect",
]
