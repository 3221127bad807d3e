# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures: deterministic wall clock and a TFIM bond term."""

from __future__ import annotations

import numpy as np
import pytest

from vumpsmon import conditions


class FakeClock:
    """Manually advanced replacement for time.time()."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(conditions.time, "time", fake)
    return fake


@pytest.fixture
def tfim_term():
    """Two-site transverse-field Ising term h = -ZZ - g/2 (XI + IX), g = 0.5."""
    g = 0.5
    x = np.array([[0.0, 1.0], [1.0, 0.0]])
    z = np.array([[1.0, 0.0], [0.0, -1.0]])
    eye = np.eye(2)
    h = -np.kron(z, z) - 0.5 * g * (np.kron(x, eye) + np.kron(eye, x))
    # [s1', s2', s1, s2]
    return h.reshape(2, 2, 2, 2), g
