# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Model class for 3D attractor particle simulations

import colorsys
from typing import Optional, Sequence

import numpy as np
import warp as wp

from .state import State
from ..geometry.normalize import normalize_points
from ..geometry.paths import PathElement, load_svg_paths
from ..geometry.sampler import sample_paths


# Seed color for shapes that carry no per-point color
BASE_HUE = 0.45
BASE_SATURATION = 0.75
BASE_LIGHTNESS = 0.5


def hsl_to_rgb(h: float, s: float, l: float):
    """HSL to RGB with the hue wrapped into [0, 1)."""
    return colorsys.hls_to_rgb(h % 1.0, l, s)


class Model:
    """
    Represents the static definition of a seeded point cloud.
    
    Stores the initial particle configuration that every fresh State is
    created from: normalised seed positions, seed colors and particle mass.
    
    Example:
        >>> model = Model.from_points(points, device='cpu')
        >>> state_in = model.state()
        >>> state_out = model.state()
    """
    
    def __init__(self, device=None):
        """
        Initialize an empty Model.
        
        Args:
            device: Warp device on which arrays are allocated (None = Warp default)
        """
        self.device = wp.get_device(device)
        
        self.particle_q = None          # Seed positions, shape [particle_count], vec3
        self.particle_color = None      # Seed colors, shape [particle_count], vec3
        self.particle_count = 0         # Total number of particles
        self.particle_mass = 1.0        # Uniform particle mass
        self.source = "empty"           # Description of the seed shape
    
    def state(self) -> State:
        """
        Create and return a new State object for this model.
        
        Positions and colors are copied from the seed configuration while
        velocities and forces start at zero, so either buffer of a fresh
        pair can safely be read by the first step.
        
        Returns:
            State: The state object
        """
        s = State(self.particle_count, device=self.device)
        
        if self.particle_count > 0:
            wp.copy(s.particle_q, self.particle_q)
            wp.copy(s.particle_color, self.particle_color)
        
        return s
    
    def _set_particles(self, points: np.ndarray, colors: np.ndarray):
        n = len(points)
        self.particle_count = n
        self.particle_q = wp.array(np.ascontiguousarray(points, dtype=np.float32).reshape(n, 3),
                                   dtype=wp.vec3, device=self.device)
        self.particle_color = wp.array(np.ascontiguousarray(colors, dtype=np.float32).reshape(n, 3),
                                       dtype=wp.vec3, device=self.device)
    
    @classmethod
    def from_points(cls, points, colors=None, device=None, normalize: bool = True,
                    source: str = "points") -> "Model":
        """
        Create a model from an explicit point set.
        
        Args:
            points: Array-like of shape [N, 3] (or flat [3N])
            colors: Optional RGB colors [N, 3]; defaults to the base seed color
            device: Warp device
            normalize: Recenter and fit the points to unit extent
            source: Label reported by the driver
        
        Returns:
            Model: The initialized model
        """
        model = cls(device=device)
        
        pts = np.array(points, dtype=np.float32).reshape(-1, 3)
        if normalize:
            normalize_points(pts)
        
        if colors is None:
            rgb = hsl_to_rgb(BASE_HUE, BASE_SATURATION, BASE_LIGHTNESS)
            cols = np.tile(np.array(rgb, dtype=np.float32), (len(pts), 1))
        else:
            cols = np.array(colors, dtype=np.float32).reshape(-1, 3)
            if len(cols) != len(pts):
                raise ValueError(f"Got {len(cols)} colors for {len(pts)} points")
        
        model._set_particles(pts, cols)
        model.source = source
        return model
    
    @classmethod
    def from_paths(cls, paths: Sequence[PathElement], count: int, device=None,
                   source: str = "paths") -> "Model":
        """
        Create a model by sampling `count` points along path geometry.
        
        Raises:
            EmptyShapeError: If the geometry is degenerate
        """
        points = sample_paths(paths, max(0, int(count)))
        return cls.from_points(points, device=device, source=source)
    
    @classmethod
    def from_svg(cls, svg_file: str, count: int, device=None) -> "Model":
        """Create a model from the <path> outlines of an SVG file."""
        paths = load_svg_paths(svg_file)
        model = cls.from_paths(paths, count, device=device, source=svg_file)
        
        print(f"✓ Loaded SVG from {svg_file}")
        print(f"  - {len(paths)} paths")
        print(f"  - {model.particle_count} particles")
        
        return model
