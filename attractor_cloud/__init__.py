# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
"""
Attractor particle cloud.

A point cloud seeded from vector outlines (or a built-in ring shape) and
pulled around by radial Gaussian attractors, integrated with Warp.

Main classes:
- Simulation: Tick driver owning the state pair
- SimulationConfig: Typed configuration with query-string and JSON forms
- Model / State: Seed description and per-tick particle buffers
- SolverVerlet: Velocity-Verlet integrator
"""

from .config import SimulationConfig, load_config, save_config
from .sim import (
    AddAttractor,
    Attractor,
    AttractorSet,
    Model,
    PingPongClock,
    RemoveAttractor,
    State,
    UpdateAttractor,
    default_attractors,
)
from .solvers import SolverVerlet, force_at
from .geometry import EmptyShapeError, PolylinePath, normalize_points, sample_paths
from .models import RingModel, generate_ring_points
from .simulation import Simulation

__all__ = [
    "Simulation",
    "SimulationConfig",
    "load_config",
    "save_config",
    "Model",
    "State",
    "Attractor",
    "AttractorSet",
    "AddAttractor",
    "RemoveAttractor",
    "UpdateAttractor",
    "default_attractors",
    "PingPongClock",
    "SolverVerlet",
    "force_at",
    "EmptyShapeError",
    "PolylinePath",
    "normalize_points",
    "sample_paths",
    "RingModel",
    "generate_ring_points",
]
