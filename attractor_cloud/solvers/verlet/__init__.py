# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Velocity-Verlet solver module

from .solver_verlet import SolverVerlet
from .kernels_particle import (
    attractor_force,
    color_by_velocity,
    eval_attractor_forces,
    eval_attractor_forces_3d,
    fill_color,
    finalize_velocity,
    force_at,
    integrate_positions,
)

__all__ = [
    "SolverVerlet",
    "attractor_force",
    "color_by_velocity",
    "eval_attractor_forces",
    "eval_attractor_forces_3d",
    "fill_color",
    "finalize_velocity",
    "force_at",
    "integrate_positions",
]
