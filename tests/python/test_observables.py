# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Tests for observable recording, presets and the uniform-MPS backend.

File: tests/python/test_observables.py
Date: October, 2026
"""

from __future__ import annotations

import io

import numpy as np
import pytest
from rich.console import Console

from vumpsmon import (
    Callback,
    ConsoleEffect,
    IterationElapsed,
    RecordObservable,
    UniformMPS,
    UniformMPSBackend,
    combine,
    record_energy_convergence,
)
from vumpsmon.utils import VUMPSMON_THEME


def _f(it, state, model, envs):
    return it * state


def _g(it, state, model, envs):
    return (state, envs)


# ============================================================================
# RecordObservable
# ============================================================================

def test_logs_track_every_firing():
    """After N firings each log holds N values computed at each firing."""
    rec = RecordObservable({"a": _f, "b": _g})
    args = [(it, it + 1, None, f"e{it}") for it in range(5)]

    for a in args:
        assert rec(*a) == (a[1], a[3])

    assert list(rec) == ["a", "b"]
    assert len(rec) == 2
    assert rec["a"] == [_f(*a) for a in args]
    assert rec.data["b"] == [_g(*a) for a in args]


def test_insertion_order_is_kept():
    names = ["zeta", "alpha", "mid"]
    rec = RecordObservable({n: _f for n in names})
    assert list(rec.data) == names


def test_empty_recorder():
    rec = RecordObservable()
    assert len(rec) == 0
    assert rec(0, "s", None, "e") == ("s", "e")
    assert rec.last() == {}


def test_observable_errors_propagate():
    def boom(it, state, model, envs):
        raise RuntimeError("bad observable")

    rec = RecordObservable({"x": boom})
    with pytest.raises(RuntimeError, match="bad observable"):
        Callback(IterationElapsed(1), rec)(1, None, None, None)


def test_as_arrays_and_last():
    rec = RecordObservable({"a": _f})
    for it in range(3):
        rec(it, 2.0, None, None)
    np.testing.assert_allclose(rec.as_arrays()["a"], [0.0, 2.0, 4.0])
    assert rec.last() == {"a": 4.0}


# ============================================================================
# combine
# ============================================================================

def test_combine_unions_logs():
    a = RecordObservable({"x": _f})
    b = RecordObservable({"y": _g})
    merged = combine(a, b)

    assert list(merged.data) == ["x", "y"]
    assert len(merged.observables) == 2

    merged(2, 3, None, "e")
    assert merged["x"] == [6]
    assert merged["y"] == [(3, "e")]
    # Logs are shared with the sources
    assert a["x"] is merged["x"]


def test_combine_keeps_duplicate_names():
    a = RecordObservable({"x": lambda it, s, h, e: "from_a"})
    b = RecordObservable({"x": lambda it, s, h, e: "from_b"})
    merged = combine(a, b)

    assert len(merged.data) == 1
    assert sum(len(obs) for obs in merged.observables) == 2

    merged(0, None, None, None)
    assert merged["x"] == ["from_a", "from_b"]


# ============================================================================
# Uniform MPS backend and energy preset
# ============================================================================

def test_product_state_energies(tfim_term):
    h, g = tfim_term
    backend = UniformMPSBackend()

    up = UniformMPS.product([1.0, 0.0])
    plus = UniformMPS.product([1.0, 1.0])

    assert backend.expectation_value(up, h).real == pytest.approx(-1.0, abs=1e-6)
    assert backend.expectation_value(plus, h).real == pytest.approx(-g, abs=1e-6)
    assert backend.num_sites(up) == 1
    assert up.bond_dim == 1 and up.physical_dim == 2


def test_product_state_two_site_cell(tfim_term):
    h, _ = tfim_term
    state = UniformMPS.product([1.0, 0.0], n_sites=2)
    backend = UniformMPSBackend()
    assert len(state) == 2
    assert backend.expectation_value(state, h).real == pytest.approx(-1.0, abs=1e-6)


def test_galerkin_error_detects_gauge_mismatch():
    backend = UniformMPSBackend()
    state = UniformMPS.product([1.0, 0.0])
    assert backend.galerkin_error(state, 0, None) == pytest.approx(0.0, abs=1e-6)

    shifted = state.replace(AC=(state.AC[0] * 0.0,))
    assert backend.galerkin_error(shifted, 0, None) == pytest.approx(1.0, abs=1e-6)


def test_record_energy_convergence(tfim_term):
    h, _ = tfim_term
    rec = record_energy_convergence(UniformMPSBackend())
    state = UniformMPS.product([1.0, 0.0])

    for it in range(3):
        rec(it, state, h, None)

    assert list(rec.data) == ["energies", "times", "errors"]
    assert rec["energies"] == pytest.approx([-1.0] * 3, abs=1e-6)
    assert all(isinstance(e, float) for e in rec["energies"])
    assert rec["errors"] == pytest.approx([0.0] * 3, abs=1e-6)
    assert rec["times"] == sorted(rec["times"])


# ============================================================================
# ConsoleEffect
# ============================================================================

def test_console_effect_prints_latest_row():
    buf = io.StringIO()
    console = Console(file=buf, width=120, color_system=None, theme=VUMPSMON_THEME)

    rec = RecordObservable({"energy": lambda it, s, h, e: -0.5 * it})
    echo = ConsoleEffect(rec, console=console)

    for it in (1, 2):
        rec(it, None, None, None)
        assert echo(it, "s", None, "e") == ("s", "e")

    out = buf.getvalue()
    assert out.count("energy") == 1
    assert "-0.5" in out and "-1" in out


def test_console_effect_silent_until_recorded():
    buf = io.StringIO()
    console = Console(file=buf, width=120, color_system=None, theme=VUMPSMON_THEME)

    rec = RecordObservable({"energy": lambda it, s, h, e: -0.5 * it})
    echo = ConsoleEffect(rec, console=console)

    echo(0, None, None, None)
    assert buf.getvalue() == ""

    rec(1, None, None, None)
    echo(1, None, None, None)
    assert buf.getvalue().count("energy") == 1


def test_console_effect_rows_line_up():
    buf = io.StringIO()
    console = Console(file=buf, width=120, color_system=None, theme=VUMPSMON_THEME)

    values = iter([-0.5, -0.4999999871234, 3.0])
    rec = RecordObservable({
        "energy": lambda it, s, h, e: next(values),
        "error": lambda it, s, h, e: 10.0 ** -it,
    })
    echo = ConsoleEffect(rec, console=console)

    for it in (1, 10, 100):
        rec(it, None, None, None)
        echo(it, None, None, None)

    lines = [line.rstrip() for line in buf.getvalue().splitlines() if line.strip()]
    header, *rows = lines
    assert "energy" in header and "error" in header
    assert len(rows) == 3
    assert len({len(row) for row in rows}) == 1
