# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0

from .state import State
from .model import Model
from .attractors import (
    MIN_RADIUS,
    AddAttractor,
    Attractor,
    AttractorSet,
    AttractorSnapshot,
    RemoveAttractor,
    UpdateAttractor,
    default_attractors,
)
from .clock import PingPongClock

__all__ = [
    "Model",
    "State",
    "MIN_RADIUS",
    "Attractor",
    "AttractorSet",
    "AttractorSnapshot",
    "AddAttractor",
    "RemoveAttractor",
    "UpdateAttractor",
    "default_attractors",
    "PingPongClock",
]
