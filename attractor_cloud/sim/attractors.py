# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Radial attractors and the owned, ordered collection that holds them

import math
import threading
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import warp as wp


MIN_RADIUS = 1e-3


def _clamp_radius(radius: float) -> float:
    radius = float(radius)
    if not math.isfinite(radius) or radius <= 0.0:
        print(f"  ⚠ Attractor radius {radius} is invalid, clamped to {MIN_RADIUS}")
        return MIN_RADIUS
    return radius


class Attractor:
    """
    Point source of a radial force with a Gaussian profile.
    
    The force on a particle at offset d from the attractor is
    
        F(d) = d * (-coefficient * exp(|d|^2 * inv_exp_denominator))
    
    with coefficient = amplitude / radius^2 and
    inv_exp_denominator = 1 / (-2 * radius^2). A positive amplitude pulls
    particles in, a negative amplitude pushes them out.
    """
    
    def __init__(self, position=(0.0, 0.0, 0.0), radius: float = 1.0, amplitude: float = 0.05):
        self._position = tuple(float(c) for c in position)
        if len(self._position) != 3:
            raise ValueError(f"Attractor position must be a 3-vector, got {position}")
        self._radius = _clamp_radius(radius)
        self._amplitude = float(amplitude)
        self._update_coefficients()
    
    def _update_coefficients(self):
        r2 = self._radius * self._radius
        self.coefficient = self._amplitude / r2
        self.inv_exp_denominator = 1.0 / (-2.0 * r2)
    
    @property
    def position(self) -> Tuple[float, float, float]:
        return self._position
    
    @position.setter
    def position(self, value):
        value = tuple(float(c) for c in value)
        if len(value) != 3:
            raise ValueError(f"Attractor position must be a 3-vector, got {value}")
        self._position = value
    
    @property
    def radius(self) -> float:
        return self._radius
    
    @radius.setter
    def radius(self, value: float):
        self._radius = _clamp_radius(value)
        self._update_coefficients()
    
    @property
    def amplitude(self) -> float:
        return self._amplitude
    
    @amplitude.setter
    def amplitude(self, value: float):
        self._amplitude = float(value)
        self._update_coefficients()
    
    def copy(self) -> "Attractor":
        return Attractor(self._position, self._radius, self._amplitude)
    
    def to_text(self) -> str:
        """Serialize as 'x,y,z,radius,amplitude' (lossless float repr)."""
        x, y, z = self._position
        return ",".join(repr(v) for v in (x, y, z, self._radius, self._amplitude))
    
    @classmethod
    def from_text(cls, text: str) -> "Attractor":
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 5:
            raise ValueError(f"Attractor must be 'x,y,z,radius,amplitude', got '{text}'")
        try:
            x, y, z, radius, amplitude = (float(p) for p in parts)
        except ValueError:
            raise ValueError(f"Attractor contains a non-numeric field: '{text}'") from None
        return cls((x, y, z), radius, amplitude)
    
    def __eq__(self, other):
        if not isinstance(other, Attractor):
            return NotImplemented
        return (self._position == other._position
                and self._radius == other._radius
                and self._amplitude == other._amplitude)
    
    def __repr__(self):
        return f"Attractor(position={self._position}, radius={self._radius}, amplitude={self._amplitude})"


def default_attractors() -> List[Attractor]:
    """Gentle wide attractor with a small repulsive core."""
    return [
        Attractor((0.0, 0.0, 0.0), 1.0, 0.05),
        Attractor((0.0, 0.0, 0.0), 0.25, -0.05),
    ]


# ============================================================================
# Commands
# ============================================================================

@dataclass
class AddAttractor:
    attractor: Attractor = field(default_factory=lambda: Attractor((0.0, 0.0, 0.0), 1.0, 0.05))


@dataclass
class RemoveAttractor:
    index: int


@dataclass
class UpdateAttractor:
    """Set any of position, radius, amplitude on the attractor at index."""
    index: int
    position: Optional[Sequence[float]] = None
    radius: Optional[float] = None
    amplitude: Optional[float] = None


class AttractorSnapshot:
    """
    Immutable, device-resident copy of the attractor set for one solver step.
    """
    
    def __init__(self, attractors: Sequence[Attractor], device=None):
        self.device = wp.get_device(device)
        self.count = len(attractors)
        self.attractors = tuple(a.copy() for a in attractors)
        
        # Warp kernels index these arrays, keep at least one slot allocated
        n = max(1, self.count)
        pos_np = np.zeros((n, 3), dtype=np.float32)
        coeff_np = np.zeros(n, dtype=np.float32)
        denom_np = np.full(n, -0.5, dtype=np.float32)
        for i, a in enumerate(self.attractors):
            pos_np[i] = a.position
            coeff_np[i] = a.coefficient
            denom_np[i] = a.inv_exp_denominator
        
        self.position = wp.array(pos_np, dtype=wp.vec3, device=self.device)
        self.coefficient = wp.array(coeff_np, dtype=float, device=self.device)
        self.inv_exp_denominator = wp.array(denom_np, dtype=float, device=self.device)


class AttractorSet:
    """
    Owned, ordered collection of attractors.
    
    Mutated only through commands; every mutation is applied under a lock
    and invalidates the cached snapshot, so a solver step sees the set
    either fully before or fully after an edit.
    
    Example:
        >>> attractors = AttractorSet(default_attractors(), device='cpu')
        >>> attractors.apply(AddAttractor(Attractor((0.5, 0.0, 0.0), 0.2, 0.1)))
        >>> attractors.apply(UpdateAttractor(0, amplitude=0.1))
        >>> snapshot = attractors.snapshot()
    """
    
    def __init__(self, attractors: Optional[Sequence[Attractor]] = None, device=None):
        self.device = wp.get_device(device)
        self._attractors = [a.copy() for a in (attractors or [])]
        self._lock = threading.Lock()
        self._snapshot = None
        self.version = 0
    
    def __len__(self):
        with self._lock:
            return len(self._attractors)
    
    def __getitem__(self, index) -> Attractor:
        with self._lock:
            return self._attractors[index].copy()
    
    def to_list(self) -> List[Attractor]:
        with self._lock:
            return [a.copy() for a in self._attractors]
    
    def replace(self, attractors: Sequence[Attractor]):
        with self._lock:
            self._attractors = [a.copy() for a in attractors]
            self._invalidate()
    
    def apply(self, command):
        """
        Apply an AddAttractor, RemoveAttractor or UpdateAttractor command.
        
        Returns:
            int: Index of the affected attractor
        """
        with self._lock:
            if isinstance(command, AddAttractor):
                self._attractors.append(command.attractor.copy())
                index = len(self._attractors) - 1
            elif isinstance(command, RemoveAttractor):
                index = self._check_index(command.index)
                del self._attractors[index]
            elif isinstance(command, UpdateAttractor):
                index = self._check_index(command.index)
                target = self._attractors[index]
                if command.position is not None:
                    target.position = command.position
                if command.radius is not None:
                    target.radius = command.radius
                if command.amplitude is not None:
                    target.amplitude = command.amplitude
            else:
                raise ValueError(f"Unknown attractor command: {command!r}")
            self._invalidate()
            return index
    
    def snapshot(self) -> AttractorSnapshot:
        with self._lock:
            if self._snapshot is None:
                self._snapshot = AttractorSnapshot(self._attractors, device=self.device)
            return self._snapshot
    
    def _check_index(self, index: int) -> int:
        n = len(self._attractors)
        if not -n <= index < n:
            raise ValueError(f"Attractor index {index} out of range (have {n})")
        return index % n
    
    def _invalidate(self):
        self._snapshot = None
        self.version += 1
