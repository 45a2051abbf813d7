# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# State class for 3D attractor particle simulations

import warp as wp


class State:
    """
    Represents the time-varying state of a particle cloud.
    
    Contains particle positions, velocities, forces and colors. Two states
    are owned by the driver at any time and exchange roles every tick.
    
    Attributes:
        particle_q: Positions (vec3), shape [particle_count]
        particle_qd: Velocities (vec3), shape [particle_count]
        particle_f: Forces (vec3), shape [particle_count]
        particle_color: RGB colors in [0, 1] (vec3), shape [particle_count]
        particle_count: Number of particles
    """
    
    def __init__(self, particle_count: int = 0, device=None):
        self.particle_count = max(0, int(particle_count))
        self.device = wp.get_device(device)
        
        n = self.particle_count
        self.particle_q = wp.zeros(n, dtype=wp.vec3, device=self.device)      # Positions (vec3)
        self.particle_qd = wp.zeros(n, dtype=wp.vec3, device=self.device)     # Velocities (vec3)
        self.particle_f = wp.zeros(n, dtype=wp.vec3, device=self.device)      # Forces (vec3)
        self.particle_color = wp.zeros(n, dtype=wp.vec3, device=self.device)  # Colors (vec3)
    
    @property
    def count(self) -> int:
        return self.particle_count
    
    def validate(self):
        """
        Check that every buffer addresses the same set of particles.
        
        A mismatch is a programming error, never a recoverable condition.
        """
        for name in ("particle_q", "particle_qd", "particle_f", "particle_color"):
            arr = getattr(self, name)
            if arr is None or arr.shape[0] != self.particle_count:
                size = None if arr is None else arr.shape[0]
                raise RuntimeError(
                    f"State buffer '{name}' has {size} entries, expected {self.particle_count}"
                )
