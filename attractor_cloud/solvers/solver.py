# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Base solver class for attractor particle simulations


class SolverBase:
    """
    Generic base class for particle solvers.
    
    A solver reads one State and writes the other; it never reads the
    output state before the step completes and never aliases the two.
    The caller swaps the roles after every step:
    
        solver.step(state_in, state_out, dt)
        state_in, state_out = state_out, state_in
    """
    
    def __init__(self, model):
        """
        Initialize the solver with a model.
        
        Args:
            model: The Model object describing the particle cloud
        """
        self.model = model
    
    @property
    def device(self):
        """
        Get the device used by the solver.
        
        Returns:
            The device used by the solver
        """
        return self.model.device
    
    def step(self, state_in, state_out, attractors, dt: float):
        """
        Simulate the model for a given time step.
        
        Must be implemented by concrete solver subclasses.
        
        Args:
            state_in: The input state
            state_out: The output state
            attractors: AttractorSnapshot acting on the particles
            dt: The signed time step (negative runs time backwards)
        """
        raise NotImplementedError("Concrete solvers must implement step()")
    
    def _check_states(self, state_in, state_out):
        if state_in is state_out:
            raise RuntimeError("state_in and state_out must be distinct buffers")
        if state_in.particle_count != state_out.particle_count:
            raise RuntimeError(
                f"State sizes differ: {state_in.particle_count} != {state_out.particle_count}"
            )
