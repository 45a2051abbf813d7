# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Procedural seed shape: two concentric sinusoidally perturbed rings

import numpy as np

from ..sim.model import Model, hsl_to_rgb


def generate_ring_points(count: int, lobes: int = 8, wobble: float = 0.05, spacing: float = 0.1):
    """
    Generate points and colors for two concentric wavy rings.
    
    The first ring takes count // 2 points, the second the rest. Ring c is
    displaced radially by sin(lobes * angle + c * pi) * wobble and pulled in
    by c * spacing; the two rings wave in opposite phase. Colors cycle the
    hue with the angle (taken modulo 1).
    
    Args:
        count: Total number of points
        lobes: Number of waves around each ring
        wobble: Amplitude of the radial wave
        spacing: Radial gap between the rings
    
    Returns:
        tuple: (points [count, 3] float32, colors [count, 3] float32)
    """
    count = max(0, int(count))
    count1 = count // 2
    counts = [count1, count - count1]
    
    points = np.zeros((count, 3), dtype=np.float32)
    colors = np.zeros((count, 3), dtype=np.float32)
    
    offset = 0
    for c, n in enumerate(counts):
        if n == 0:
            continue
        angle = 2.0 * np.pi * np.arange(n) / n
        off = np.sin(angle * lobes + c * np.pi) * wobble - c * spacing
        mag = 1.0 + off * 2.0
        
        points[offset:offset + n, 0] = np.cos(angle) * mag
        points[offset:offset + n, 1] = np.sin(angle) * mag
        colors[offset:offset + n] = [hsl_to_rgb(a, 0.75, 0.5) for a in angle]
        
        offset += n
    
    return points, colors


class RingModel(Model):
    """
    Point cloud seeded with the built-in ring shape.
    
    Used as the default seed and as the fallback when an external shape is
    missing or degenerate.
    
    Args:
        count: Number of particles
        device: Warp device
        normalize: Fit the rings to unit extent
    
    Example:
        >>> model = RingModel(count=8192, device='cpu')
        >>> state = model.state()
    """
    
    def __init__(self, count: int = 8192, device=None, normalize: bool = True):
        super().__init__(device=device)
        
        points, colors = generate_ring_points(count)
        
        seeded = Model.from_points(points, colors, device=device, normalize=normalize)
        self.particle_count = seeded.particle_count
        self.particle_q = seeded.particle_q
        self.particle_color = seeded.particle_color
        self.source = "rings"
        
        print(f"✓ Created ring shape: {self.particle_count} particles")
