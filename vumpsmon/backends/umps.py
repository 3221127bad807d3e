# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Reference backend for uniform MPS in mixed-canonical form.

Gauge conventions (per unit-cell site i, tensors indexed [left, phys, right]):
  - AL_i left-orthonormal, AR_i right-orthonormal
  - AC_i = AL_i · C_i = C_{i-1} · AR_i
  - C_i is the bond matrix right of site i

Energy density for a nearest-neighbour term h[s1', s2', s1, s2]:
  e = (1/n) Σ_i <AL_i AC_{i+1}| h |AL_i AC_{i+1}>

Galerkin error per site (left gauge mismatch):
  ε_i = ||AC_i - AL_i · C_i||

File: vumpsmon/backends/umps.py
Date: October, 2026
"""

from __future__ import annotations

from typing import Any

import jax.numpy as jnp
from flax import struct


@struct.dataclass
class UniformMPS:
    """
    Immutable unit-cell tensors of an infinite MPS.

    Attributes:
        AL: Left-orthonormal site tensors, each (D, d, D)
        AC: Center site tensors, each (D, d, D)
        AR: Right-orthonormal site tensors, each (D, d, D)
        C: Bond matrices, each (D, D)
    """

    AL: tuple[jnp.ndarray, ...]
    AC: tuple[jnp.ndarray, ...]
    AR: tuple[jnp.ndarray, ...]
    C: tuple[jnp.ndarray, ...]

    @classmethod
    def product(cls, vector, n_sites: int = 1) -> UniformMPS:
        """
        Bond-dimension-1 product state repeating ``vector`` on every site.

        The vector is normalized; all gauges coincide for D = 1.
        """
        v = jnp.asarray(vector)
        v = v / jnp.linalg.norm(v)
        a = v.reshape(1, -1, 1)
        c = jnp.ones((1, 1), dtype=a.dtype)
        return cls(
            AL=(a,) * n_sites,
            AC=(a,) * n_sites,
            AR=(a,) * n_sites,
            C=(c,) * n_sites,
        )

    @property
    def physical_dim(self) -> int:
        return int(self.AC[0].shape[1])

    @property
    def bond_dim(self) -> int:
        return max(int(c.shape[0]) for c in self.C)

    def __len__(self) -> int:
        return len(self.AC)


class UniformMPSBackend:
    """Energy and convergence measures for UniformMPS states."""

    def expectation_value(self, state: UniformMPS, model: Any, envs: Any = None) -> complex:
        h = jnp.asarray(model)
        n = len(state)
        total = 0.0
        for i in range(n):
            theta = jnp.einsum("asb,btc->astc", state.AL[i], state.AC[(i + 1) % n])
            total = total + jnp.einsum("auvc,uvst,astc->", theta.conj(), h, theta)
        return complex(total / n)

    def galerkin_error(self, state: UniformMPS, site: int, envs: Any = None) -> float:
        al_c = jnp.einsum("asb,bc->asc", state.AL[site], state.C[site])
        return float(jnp.linalg.norm(state.AC[site] - al_c))

    def num_sites(self, state: UniformMPS) -> int:
        return len(state)


__all__ = ["UniformMPS", "UniformMPSBackend"]
