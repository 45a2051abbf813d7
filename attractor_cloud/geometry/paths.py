# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# 2D path geometry: arc length and arc-length parameterised points

import os
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

import numpy as np


class PathElement(ABC):
    """
    One open or closed 2D outline.
    
    Concrete paths expose their total arc length and a mapping from
    arc-length offset to a 2D point. An optional 2x3 affine matrix
    [[a, c, e], [b, d, f]] is applied to sampled points before use.
    """
    
    transform: Optional[np.ndarray] = None
    
    @abstractmethod
    def length(self) -> float:
        """Total arc length (>= 0)."""
    
    @abstractmethod
    def point_at_length(self, s: float) -> np.ndarray:
        """2D point at arc-length offset s from the start."""
    
    def points_at_lengths(self, offsets: np.ndarray) -> np.ndarray:
        """Vectorised point_at_length, shape [len(offsets), 2]."""
        if len(offsets) == 0:
            return np.zeros((0, 2))
        return np.array([self.point_at_length(s) for s in offsets], dtype=np.float64)
    
    def apply_transform(self, points: np.ndarray) -> np.ndarray:
        if self.transform is None:
            return points
        m = np.asarray(self.transform, dtype=np.float64)
        return points @ m[:, :2].T + m[:, 2]


def _as_affine(transform) -> Optional[np.ndarray]:
    if transform is None:
        return None
    m = np.asarray(transform, dtype=np.float64)
    if m.shape == (3, 3):
        m = m[:2, :]
    if m.shape != (2, 3):
        raise ValueError(f"Path transform must be 2x3 or 3x3, got shape {m.shape}")
    return m


class PolylinePath(PathElement):
    """
    Piecewise-linear path through a list of 2D vertices.
    
    Args:
        vertices: Sequence of (x, y) points
        closed: If True, an edge joins the last vertex back to the first
        transform: Optional 2x3 (or 3x3 homogeneous) affine matrix
    
    Example:
        >>> square = PolylinePath([(0, 0), (1, 0), (1, 1), (0, 1)], closed=True)
        >>> square.length()
        4.0
    """
    
    def __init__(self, vertices: Sequence[Sequence[float]], closed: bool = False, transform=None):
        v = np.asarray(vertices, dtype=np.float64).reshape(-1, 2)
        if closed and len(v) > 1:
            v = np.vstack([v, v[:1]])
        self.vertices = v
        self.closed = closed
        self.transform = _as_affine(transform)
        
        if len(v) > 1:
            seg = np.linalg.norm(np.diff(v, axis=0), axis=1)
        else:
            seg = np.zeros(0)
        self._cumulative = np.concatenate([[0.0], np.cumsum(seg)])
    
    def length(self) -> float:
        return float(self._cumulative[-1])
    
    def point_at_length(self, s: float) -> np.ndarray:
        return self.points_at_lengths(np.array([s], dtype=np.float64))[0]
    
    def points_at_lengths(self, offsets: np.ndarray) -> np.ndarray:
        offsets = np.asarray(offsets, dtype=np.float64)
        v = self.vertices
        if len(v) == 0:
            return np.zeros((len(offsets), 2))
        if len(v) == 1 or self.length() == 0.0:
            return np.repeat(v[:1], len(offsets), axis=0)
        
        cum = self._cumulative
        s = np.clip(offsets, 0.0, cum[-1])
        seg = np.clip(np.searchsorted(cum, s, side="right") - 1, 0, len(v) - 2)
        seg_len = cum[seg + 1] - cum[seg]
        t = np.divide(s - cum[seg], seg_len, out=np.zeros_like(s), where=seg_len > 0)
        return v[seg] + (v[seg + 1] - v[seg]) * t[:, None]


class SvgPathElement(PathElement):
    """
    Adapter around an svgpathtools Path.
    
    Arc-length offsets are inverted to curve parameters with Path.ilength,
    so samples are spaced uniformly along the outline.
    """
    
    def __init__(self, path, transform=None):
        self.path = path
        self.transform = _as_affine(transform)
        self._length = float(path.length()) if len(path) > 0 else 0.0
    
    def length(self) -> float:
        return self._length
    
    def point_at_length(self, s: float) -> np.ndarray:
        s = min(max(float(s), 0.0), self._length)
        if s <= 0.0:
            z = self.path.start
        elif s >= self._length:
            z = self.path.end
        else:
            z = self.path.point(self.path.ilength(s))
        return np.array([z.real, z.imag], dtype=np.float64)


def parse_svg_paths(svg_text: str) -> List[SvgPathElement]:
    """
    Collect every <path> element of an SVG document.
    
    Each element's own transform attribute is consolidated into a single
    affine matrix. Elements without path data are skipped.
    """
    from svgpathtools import parse_path
    from svgpathtools.parser import parse_transform
    
    root = ET.fromstring(svg_text)
    elements = []
    for node in root.iter():
        tag = node.tag.rsplit("}", 1)[-1] if isinstance(node.tag, str) else ""
        if tag != "path":
            continue
        d = node.get("d")
        if not d or not d.strip():
            continue
        transform = node.get("transform")
        matrix = parse_transform(transform) if transform else None
        elements.append(SvgPathElement(parse_path(d), transform=matrix))
    return elements


def load_svg_paths(svg_file: str) -> List[SvgPathElement]:
    """Load the path elements of an SVG file."""
    if not os.path.exists(svg_file):
        raise FileNotFoundError(f"SVG not found: {svg_file}")
    with open(svg_file, "r", encoding="utf-8") as f:
        return parse_svg_paths(f.read())
