# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Solver-side quantities needed by the built-in observable recipes.

The tensor-network library doing the actual optimization is external;
recipes only reach into it through this protocol.

File: vumpsmon/backends/base.py
Date: October, 2026
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TensorNetworkBackend(Protocol):
    """Minimal interface of a uniform-MPS solver backend."""

    def expectation_value(self, state: Any, model: Any, envs: Any) -> complex:
        """Energy density <ψ|H|ψ> per site."""
        ...

    def galerkin_error(self, state: Any, site: int, envs: Any) -> float:
        """Convergence measure of a single unit-cell site."""
        ...

    def num_sites(self, state: Any) -> int:
        """Unit-cell length."""
        ...


__all__ = ["TensorNetworkBackend"]
