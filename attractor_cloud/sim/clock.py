# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Signed time-step control: run forward, reverse after a step limit, stop at the origin

import math


class PingPongClock:
    """
    Produces the signed time step handed to the solver each tick.
    
    A step counter moves by the current sign (+1, -1 or 0) every tick.
    Once the counter passes `loop` the sign flips and the simulation runs
    backwards; when it returns to the origin the clock stops. With the
    default loop of infinity the clock only runs forward.
    
    Example:
        >>> clock = PingPongClock(dt=0.01, loop=100)
        >>> dt = clock.advance()   # 0.01 for 100 ticks, then -0.01, then 0.0
    """
    
    def __init__(self, dt: float = 0.01, loop: float = math.inf):
        self.dt = float(dt)
        self.loop = float(loop)
        self.steps = 0
        self.sign = 1
    
    @property
    def running(self) -> bool:
        return self.sign != 0
    
    def advance(self) -> float:
        """Move one tick and return the signed dt for this tick."""
        self.steps += self.sign
        if self.steps > self.loop:
            self.sign *= -1
        if self.steps <= 0:
            self.sign = 0
        return self.dt * self.sign
    
    def pause(self):
        self.sign = 0
    
    def resume(self):
        """Restart a stopped clock in the forward direction."""
        if self.sign == 0:
            self.sign = 1
    
    def reverse(self):
        self.sign *= -1
    
    def reset(self):
        self.steps = 0
        self.sign = 1
