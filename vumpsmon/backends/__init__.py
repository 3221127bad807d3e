# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Solver backends consumed by observable recipes.

File: vumpsmon/backends/__init__.py
Date: October, 2026
"""

from .base import TensorNetworkBackend
from .umps import UniformMPS, UniformMPSBackend

__all__ = ["TensorNetworkBackend", "UniformMPS", "UniformMPSBackend"]
