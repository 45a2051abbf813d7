# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Simulation configuration and its load/save boundary

import json
import math
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import parse_qs, urlencode

from .sim.attractors import Attractor, default_attractors


DEFAULT_COUNT = 2 ** 13


def parse_bool(text: str) -> bool:
    return text.strip().lower() == "true"


def parse_color(text: str) -> Tuple[float, float, float]:
    """Parse 'rrggbb' (optionally '#rrggbb') into RGB floats in [0, 1]."""
    value = text.strip().lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Color must be 'rrggbb', got '{text}'")
    return tuple(int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


def format_color(rgb) -> str:
    return "".join(f"{int(round(min(max(c, 0.0), 1.0) * 255)):02x}" for c in rgb)


def parse_zoom(value) -> float:
    zoom = float(value)
    if not math.isfinite(zoom) or zoom <= 0.0:
        raise ValueError(f"Zoom must be a positive number, got {value!r}")
    return zoom


@dataclass
class SimulationConfig:
    """Configuration for an attractor particle simulation."""
    # Particles
    count: int = DEFAULT_COUNT
    
    # Coloring
    velocity_coloring: bool = True
    color: Optional[str] = None         # 'rrggbb' override, takes precedence over velocity coloring
    
    # Shape
    svg: Optional[str] = None           # SVG file; the ring shape is used when unset
    
    # Time
    dt: float = 0.01
    loop: float = math.inf              # Steps before the clock reverses
    
    # Display
    zoom: float = 1.0                   # Visible half-extent of the view is 1 / zoom
    
    # Physics
    device: Optional[str] = None
    attractors: List[Attractor] = field(default_factory=default_attractors)
    
    def __post_init__(self):
        self.count = max(0, int(self.count))
        if self.color is not None:
            parse_color(self.color)
        self.zoom = parse_zoom(self.zoom)
    
    @property
    def color_rgb(self) -> Optional[Tuple[float, float, float]]:
        return None if self.color is None else parse_color(self.color)
    
    @property
    def view_size(self) -> float:
        """Half-extent of the visible square around the origin."""
        return 1.0 / self.zoom
    
    # ------------------------------------------------------------------
    # Query string form: count=...&velocity=...&attractor=x,y,z,r,a&...
    # ------------------------------------------------------------------
    
    @classmethod
    def from_query(cls, text: str) -> "SimulationConfig":
        """
        Parse the URL-parameter form.
        
        Repeated 'attractor' keys build the attractor list; when none are
        given the defaults are kept. Unknown keys are ignored and
        unparsable values keep their defaults.
        """
        params = parse_qs(text.lstrip("?"), keep_blank_values=False)
        config = cls()
        
        parsers = {
            "count": ("count", lambda t: max(0, int(float(t)))),
            "velocity": ("velocity_coloring", parse_bool),
            "color": ("color", lambda t: format_color(parse_color(t))),
            "svg": ("svg", str),
            "dt": ("dt", float),
            "loop": ("loop", float),
            "zoom": ("zoom", parse_zoom),
            "device": ("device", str),
        }
        
        for key, (attr, parse) in parsers.items():
            if key not in params:
                continue
            text_value = params[key][0]
            try:
                setattr(config, attr, parse(text_value))
            except ValueError:
                print(f"  ⚠ Ignoring invalid value for '{key}': {text_value!r}")
        
        if "attractor" in params:
            attractors = []
            for text_value in params["attractor"]:
                try:
                    attractors.append(Attractor.from_text(text_value))
                except ValueError as e:
                    print(f"  ⚠ Ignoring attractor: {e}")
            config.attractors = attractors
        
        return config
    
    def to_query(self) -> str:
        params = [
            ("count", str(self.count)),
            ("velocity", "true" if self.velocity_coloring else "false"),
            ("dt", repr(float(self.dt))),
            ("loop", repr(float(self.loop))),
            ("zoom", repr(float(self.zoom))),
        ]
        if self.color is not None:
            params.append(("color", self.color))
        if self.svg is not None:
            params.append(("svg", self.svg))
        if self.device is not None:
            params.append(("device", self.device))
        for attractor in self.attractors:
            params.append(("attractor", attractor.to_text()))
        return urlencode(params, safe=",")
    
    # ------------------------------------------------------------------
    # JSON form
    # ------------------------------------------------------------------
    
    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "velocity_coloring": self.velocity_coloring,
            "color": self.color,
            "svg": self.svg,
            "dt": self.dt,
            "loop": self.loop,
            "zoom": self.zoom,
            "device": self.device,
            "attractors": [a.to_text() for a in self.attractors],
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> "SimulationConfig":
        """
        Build a configuration from the JSON form.
        
        Values pass through the same checks as the constructor, so an
        invalid color raises ValueError here rather than at simulation time.
        """
        fields = {}
        for key, parse in (("count", int), ("dt", float), ("loop", float), ("zoom", float)):
            if key in data:
                fields[key] = parse(data[key])
        for key in ("color", "svg", "device"):
            if data.get(key) is not None:
                fields[key] = str(data[key])
        if "velocity_coloring" in data:
            value = data["velocity_coloring"]
            fields["velocity_coloring"] = parse_bool(value) if isinstance(value, str) else bool(value)
        if "attractors" in data:
            fields["attractors"] = [Attractor.from_text(t) for t in data["attractors"]]
        if "color" in fields:
            fields["color"] = format_color(parse_color(fields["color"]))
        return cls(**fields)


def save_config(config: SimulationConfig, path: str):
    """Write the configuration as JSON."""
    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)


def load_config(path: str) -> SimulationConfig:
    """Read a configuration written by save_config."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path, "r") as f:
        data = json.load(f)
    return SimulationConfig.from_dict(data)
