# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Velocity-Verlet solver for particles in an attractor field

from typing import Optional, Sequence

import warp as wp

from ..solver import SolverBase
from .kernels_particle import (
    color_by_velocity,
    eval_attractor_forces_3d,
    fill_color,
    finalize_velocity,
    integrate_positions,
)


class SolverVerlet(SolverBase):
    """
    A symplectic velocity-Verlet integrator with unit mass by default.
    
    Per step, with f_n stored in the input state:
    
        x_{n+1} = x_n + v_n * dt + f_n * dt^2 / 2m
        f_{n+1} = F(x_n)                    (field sampled at the old position)
        v_{n+1} = v_n + (f_n + f_{n+1}) * dt / 2m
    
    The update is deterministic and valid for negative dt, which runs the
    simulation backwards.
    
    Coloring policy after each step:
        - fixed color set: every particle takes it
        - velocity coloring: HSL(|v|^2, saturation, lightness)
        - otherwise: colors are carried over from the input state
    
    Example:
        >>> model = RingModel(count=1024, device='cpu')
        >>> solver = SolverVerlet(model)
        >>> attractors = AttractorSet(default_attractors(), device='cpu')
        >>> state_in = model.state()
        >>> state_out = model.state()
        >>>
        >>> for i in range(100):
        >>>     solver.step(state_in, state_out, attractors.snapshot(), dt=0.01)
        >>>     state_in, state_out = state_out, state_in
    """
    
    def __init__(self, model, velocity_coloring: bool = True,
                 color: Optional[Sequence[float]] = None,
                 saturation: float = 0.75, lightness: float = 0.5):
        """
        Initialize the Verlet solver.
        
        Args:
            model: The Model to be simulated
            velocity_coloring: Color particles by squared speed
            color: Optional fixed RGB color in [0, 1] overriding all other coloring
            saturation: HSL saturation for velocity coloring
            lightness: HSL lightness for velocity coloring
        """
        super().__init__(model)
        self.velocity_coloring = velocity_coloring
        self.color = color
        self.saturation = saturation
        self.lightness = lightness
    
    @property
    def inv_mass(self) -> float:
        return 1.0 / self.model.particle_mass
    
    def step(self, state_in, state_out, attractors, dt: float):
        """
        Advance the simulation by one timestep.
        
        Args:
            state_in: The input state (read only)
            state_out: The output state (fully overwritten)
            attractors: AttractorSnapshot acting on the particles
            dt: The signed timestep
        
        Returns:
            State: state_out
        """
        self._check_states(state_in, state_out)
        
        n = state_in.particle_count
        if n == 0:
            return state_out
        
        device = self.device
        inv_mass = self.inv_mass
        dt = float(dt)
        
        # Drift using the force stored at time n
        wp.launch(
            kernel=integrate_positions,
            dim=n,
            inputs=[
                state_in.particle_q,
                state_in.particle_qd,
                state_in.particle_f,
                inv_mass,
                dt,
            ],
            outputs=[state_out.particle_q],
            device=device,
        )
        
        # New force, sampled at the old positions
        eval_attractor_forces_3d(attractors, state_in.particle_q, state_out.particle_f, device=device)
        
        # Kick with the averaged force
        wp.launch(
            kernel=finalize_velocity,
            dim=n,
            inputs=[
                state_in.particle_qd,
                state_in.particle_f,
                state_out.particle_f,
                inv_mass,
                dt,
            ],
            outputs=[state_out.particle_qd],
            device=device,
        )
        
        self._update_colors(state_in, state_out)
        
        return state_out
    
    def _update_colors(self, state_in, state_out):
        n = state_in.particle_count
        
        if self.color is not None:
            r, g, b = (float(c) for c in self.color)
            wp.launch(
                kernel=fill_color,
                dim=n,
                inputs=[wp.vec3(r, g, b)],
                outputs=[state_out.particle_color],
                device=self.device,
            )
        elif self.velocity_coloring:
            wp.launch(
                kernel=color_by_velocity,
                dim=n,
                inputs=[state_out.particle_qd, self.saturation, self.lightness],
                outputs=[state_out.particle_color],
                device=self.device,
            )
        else:
            wp.copy(state_out.particle_color, state_in.particle_color)
