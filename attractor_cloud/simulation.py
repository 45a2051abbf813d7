# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Simulation driver: owns the state pair, reseeds shapes and advances ticks

import threading
import xml.etree.ElementTree as ET
from typing import Optional, Sequence

import numpy as np
import warp as wp

from .config import SimulationConfig, format_color, parse_color
from .geometry.paths import PathElement, load_svg_paths
from .geometry.sampler import EmptyShapeError, sample_paths
from .models.ring import RingModel
from .sim.attractors import AttractorSet
from .sim.clock import PingPongClock
from .sim.model import Model
from .solvers.verlet import SolverVerlet


# Errors that make a shape unusable; the driver reseeds with rings instead
SHAPE_ERRORS = (ValueError, OSError, ET.ParseError)


class Simulation:
    """
    Drives an attractor particle cloud one tick at a time.
    
    Architecture:
        - sim.Model: Seed configuration (positions, colors, mass)
        - sim.State: Two slots; the "read" slot feeds the solver and the
          "write" slot receives its output. The labels are exchanged after
          every step, buffers are never copied.
        - sim.AttractorSet: Attractors, edited through commands
        - solvers.SolverVerlet: Time integration
        - sim.PingPongClock: Signed dt per tick
    
    The renderer reads `render_buffers()` after each tick. Buffer identity
    changes every tick, so the references must be fetched again each frame.
    
    Example:
        >>> sim = Simulation(SimulationConfig(count=4096, device='cpu'))
        >>> for _ in range(600):
        >>>     sim.tick()
        >>>     positions, colors = sim.render_buffers()
    """
    
    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.device = wp.get_device(self.config.device)
        
        self.attractors = AttractorSet(self.config.attractors, device=self.device)
        self.clock = PingPongClock(dt=self.config.dt, loop=self.config.loop)
        
        self.model: Optional[Model] = None
        self.solver: Optional[SolverVerlet] = None
        self._slots = [None, None]
        self._read = 0
        
        # Background shape loading
        self._pending = None
        self._pending_error = None
        self._pending_lock = threading.Lock()
        self._loader: Optional[threading.Thread] = None
        self._generation = 0
        
        self.t = 0.0
        self.frame_count = 0
        
        self.reset()
    
    # ========================================================================
    # STATE SLOTS
    # ========================================================================
    
    @property
    def state_in(self):
        """State read by the next step (the most recently written one)."""
        return self._slots[self._read]
    
    @property
    def state_out(self):
        """State written by the next step."""
        return self._slots[1 - self._read]
    
    @property
    def particle_count(self) -> int:
        return 0 if self.model is None else self.model.particle_count
    
    def _swap(self):
        self._read = 1 - self._read
    
    def render_buffers(self):
        """Current positions and colors as device arrays (no copy)."""
        state = self.state_in
        return state.particle_q, state.particle_color
    
    def positions(self) -> np.ndarray:
        """Host copy of the current positions, shape [particle_count, 3]."""
        return self.state_in.particle_q.numpy().reshape(-1, 3)
    
    def colors(self) -> np.ndarray:
        return self.state_in.particle_color.numpy().reshape(-1, 3)
    
    # ========================================================================
    # RESET / RESEED
    # ========================================================================
    
    def reset(self, count: Optional[int] = None, svg: Optional[str] = None):
        """
        Reseed the cloud, optionally with a new count or SVG shape.
        
        Falls back to the ring shape when no SVG is configured or the SVG
        cannot produce any points (missing file, malformed markup or path
        data, degenerate outlines).
        """
        if count is not None:
            self.config.count = max(0, int(count))
        if svg is not None:
            self.config.svg = svg
        
        model = None
        if self.config.svg:
            try:
                model = Model.from_svg(self.config.svg, self.config.count, device=self.device)
            except SHAPE_ERRORS as e:
                print(f"  ⚠ Could not load shape '{self.config.svg}' ({e}), using rings")
        
        if model is None:
            model = RingModel(count=self.config.count, device=self.device)
        
        self._install(model)
    
    def set_count(self, count: int):
        self.reset(count=count)
    
    def load_paths(self, paths: Sequence[PathElement], count: Optional[int] = None):
        """Reseed synchronously from path geometry (ring fallback if degenerate)."""
        if count is not None:
            self.config.count = max(0, int(count))
        try:
            model = Model.from_paths(paths, self.config.count, device=self.device)
        except EmptyShapeError as e:
            print(f"  ⚠ {e}, using rings")
            model = RingModel(count=self.config.count, device=self.device)
        self._install(model)
    
    def load_shape_async(self, shape, count: Optional[int] = None) -> threading.Thread:
        """
        Sample a shape on a background thread.
        
        The sampled points are installed as a whole at the start of the
        first tick after sampling finishes; until then the current cloud
        keeps running. Only the most recent request is installed, results
        of earlier requests that finish later are dropped.
        
        Args:
            shape: SVG file path or a sequence of PathElement
            count: Particle count (defaults to the configured count)
        
        Returns:
            threading.Thread: The loader thread
        """
        if count is not None:
            self.config.count = max(0, int(count))
        total = self.config.count
        
        with self._pending_lock:
            self._generation += 1
            generation = self._generation
            self._pending = None
            self._pending_error = None
        
        def _worker():
            result = None
            error = None
            try:
                if isinstance(shape, str):
                    paths = load_svg_paths(shape)
                    source = shape
                else:
                    paths = list(shape)
                    source = "paths"
                result = (sample_paths(paths, total), source)
            except Exception as e:
                # Handed to the driver thread, which falls back or re-raises
                error = e
            with self._pending_lock:
                if generation != self._generation:
                    return
                self._pending = result
                self._pending_error = error
        
        self._loader = threading.Thread(target=_worker, daemon=True)
        self._loader.start()
        return self._loader
    
    def wait_for_shape(self, timeout: Optional[float] = None) -> bool:
        """Block until a background load finishes and install it."""
        if self._loader is not None:
            self._loader.join(timeout=timeout)
            if self._loader.is_alive():
                return False
            self._loader = None
        return self._install_pending()
    
    def _install_pending(self) -> bool:
        with self._pending_lock:
            pending, error = self._pending, self._pending_error
            self._pending = None
            self._pending_error = None
        
        if error is not None:
            if not isinstance(error, SHAPE_ERRORS):
                raise error
            print(f"  ⚠ Could not load shape ({error}), using rings")
            self._install(RingModel(count=self.config.count, device=self.device))
            return True
        if pending is None:
            return False
        
        points, source = pending
        self._install(Model.from_points(points, device=self.device, source=source))
        return True
    
    def _install(self, model: Model):
        """
        Replace the model and allocate a fresh state pair.
        
        Both slots start from the seed: same positions and colors, zero
        velocity and force, so the first frame shows the seed colors and the
        first step never reads uninitialised data.
        """
        self.model = model
        self.solver = SolverVerlet(
            model,
            velocity_coloring=self.config.velocity_coloring,
            color=self.config.color_rgb,
        )
        self._slots = [model.state(), model.state()]
        self._read = 0
        self.clock.reset()
        self.t = 0.0
        self.frame_count = 0
    
    # ========================================================================
    # CONFIGURATION
    # ========================================================================
    
    def apply(self, command) -> int:
        """Apply an attractor command; it takes effect from the next step."""
        index = self.attractors.apply(command)
        self.config.attractors = self.attractors.to_list()
        return index
    
    def set_velocity_coloring(self, enabled: bool):
        self.config.velocity_coloring = bool(enabled)
        self.solver.velocity_coloring = self.config.velocity_coloring
    
    def set_color(self, color: Optional[str]):
        self.config.color = None if color is None else format_color(parse_color(color))
        self.solver.color = self.config.color_rgb
    
    # ========================================================================
    # TIME STEPPING
    # ========================================================================
    
    def step(self, dt: float):
        """Advance one step with an explicit signed dt and swap the slots."""
        self.solver.step(self.state_in, self.state_out, self.attractors.snapshot(), dt)
        self._swap()
        self.t += dt
        self.frame_count += 1
    
    def tick(self) -> float:
        """
        Advance one display tick.
        
        Installs a finished background shape, asks the clock for the signed
        dt and steps the solver.
        
        Returns:
            float: The dt used for this tick
        """
        if self._loader is not None and not self._loader.is_alive():
            self._loader = None
            self._install_pending()
        
        dt = self.clock.advance()
        self.step(dt)
        return dt
