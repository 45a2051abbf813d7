# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Solvers module for attractor particle simulations

from .solver import SolverBase
from .verlet import SolverVerlet, force_at

__all__ = [
    "SolverBase",
    "SolverVerlet",
    "force_at",
]
