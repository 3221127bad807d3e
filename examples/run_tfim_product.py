# Copyright 2026 The vumpsmon Authors
# SPDX-License-Identifier: Apache-2.0

"""
Monitor a toy ground-state search for the transverse-field Ising chain.

The "solver" is a gradient descent over product states
|ψ(θ)> = ⊗ (cos θ |↑> + sin θ |↓>), with energy density
e(θ) = -cos²(2θ) - g sin(2θ). Recording, console output and
checkpointing are attached exactly as for an external VUMPS solver.

Usage:
    python run_tfim_product.py [--g 0.5] [--steps 200] [--config monitor.yaml]

File: examples/run_tfim_product.py
Date: October, 2026
"""

from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np

from vumpsmon import (
    MonitorConfig,
    UniformMPS,
    UniformMPSBackend,
    run_callbacks,
    setup_logging,
    shutdown_guard,
)


def tfim_term(g: float) -> np.ndarray:
    """Two-site term h = -ZZ - g/2 (XI + IX), indexed [s1', s2', s1, s2]."""
    x = np.array([[0.0, 1.0], [1.0, 0.0]])
    z = np.array([[1.0, 0.0], [0.0, -1.0]])
    eye = np.eye(2)
    h = -np.kron(z, z) - 0.5 * g * (np.kron(x, eye) + np.kron(eye, x))
    return h.reshape(2, 2, 2, 2)


def make_step(g: float, lr: float, tol: float):
    """Gradient step on θ; envs carries θ between iterations."""

    def step(state, model, theta):
        grad = 2.0 * np.sin(4.0 * theta) - 2.0 * g * np.cos(2.0 * theta)
        new_theta = theta - lr * grad
        new_state = UniformMPS.product([np.cos(new_theta), np.sin(new_theta)])
        return new_state, new_theta, abs(new_theta - theta) < tol

    return step


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[0])
    parser.add_argument("--g", type=float, default=0.5, help="Transverse field")
    parser.add_argument("--steps", type=int, default=200, help="Max iterations")
    parser.add_argument("--lr", type=float, default=0.05, help="Step size")
    parser.add_argument("--config", type=Path, default=None, help="Monitor YAML")
    parser.add_argument("--output", type=Path, default=Path("runs/tfim_product"))
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    if args.config is not None:
        cfg = MonitorConfig.load(args.config)
    else:
        cfg = MonitorConfig(
            record={"schedule": {"every": 10}, "console": True},
            checkpoint={
                "savepath": args.output / "checkpoint.msgpack",
                "schedule": {"period": 30, "unit": "s"},
                "params": {"g": args.g, "D": 1, "lr": args.lr},
            },
        )
    setup_logging(cfg.log_level)

    callbacks, checkpoint = cfg.build(UniformMPSBackend())
    theta0 = 0.3
    state = UniformMPS.product([np.cos(theta0), np.sin(theta0)])

    guarded = (checkpoint,) if checkpoint is not None else ()
    with shutdown_guard(*guarded):
        result = run_callbacks(
            make_step(args.g, args.lr, tol=1e-10),
            state,
            tfim_term(args.g),
            theta0,
            callbacks,
            max_iter=args.steps,
        )

    energy = UniformMPSBackend().expectation_value(result.state, tfim_term(args.g)).real
    print(f"Final energy density: {energy:.10f} (θ = {result.envs:.6f})")


if __name__ == "__main__":
    main()
