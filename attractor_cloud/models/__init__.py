# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0

from .ring import RingModel, generate_ring_points

__all__ = [
    "RingModel",
    "generate_ring_points",
]
