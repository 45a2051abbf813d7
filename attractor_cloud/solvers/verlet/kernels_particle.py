# SPDX-FileCopyrightText: Copyright (c) 2025 NBEL
# SPDX-License-Identifier: Apache-2.0
#
# Attractor force field and velocity-Verlet kernels

import numpy as np
import warp as wp


@wp.func
def attractor_force(
    p: wp.vec3,
    attractor_q: wp.array(dtype=wp.vec3),
    attractor_coefficient: wp.array(dtype=float),
    attractor_inv_exp_denominator: wp.array(dtype=float),
    attractor_count: int,
):
    """
    Net force at p from a superposition of Gaussian-profile radial sources.
    
    For each attractor: d = p - a, F += d * (-coefficient * exp(|d|^2 * inv_exp_denominator)).
    No cutoff; every attractor acts at every distance.
    """
    f = wp.vec3(0.0, 0.0, 0.0)
    for k in range(attractor_count):
        d = p - attractor_q[k]
        exponent = wp.dot(d, d) * attractor_inv_exp_denominator[k]
        magnitude = -attractor_coefficient[k] * wp.exp(exponent)
        f = f + d * magnitude
    return f


@wp.func
def hue_to_channel(m1: float, m2: float, hue: float):
    h = hue - wp.floor(hue)
    c = m1
    if h < 1.0 / 6.0:
        c = m1 + (m2 - m1) * h * 6.0
    elif h < 0.5:
        c = m2
    elif h < 2.0 / 3.0:
        c = m1 + (m2 - m1) * (2.0 / 3.0 - h) * 6.0
    return c


@wp.func
def hsl_to_rgb(h: float, s: float, l: float):
    """HSL to RGB; the hue wraps modulo 1."""
    hue = h - wp.floor(h)
    m2 = l + s - l * s
    if l <= 0.5:
        m2 = l * (1.0 + s)
    m1 = 2.0 * l - m2
    return wp.vec3(
        hue_to_channel(m1, m2, hue + 1.0 / 3.0),
        hue_to_channel(m1, m2, hue),
        hue_to_channel(m1, m2, hue - 1.0 / 3.0),
    )


@wp.kernel
def eval_attractor_forces(
    x: wp.array(dtype=wp.vec3),
    attractor_q: wp.array(dtype=wp.vec3),
    attractor_coefficient: wp.array(dtype=float),
    attractor_inv_exp_denominator: wp.array(dtype=float),
    attractor_count: int,
    f: wp.array(dtype=wp.vec3),
):
    """
    Evaluate the attractor field at every particle position.
    
    Each thread processes one particle.
    """
    tid = wp.tid()
    f[tid] = attractor_force(
        x[tid], attractor_q, attractor_coefficient, attractor_inv_exp_denominator, attractor_count
    )


@wp.kernel
def integrate_positions(
    x: wp.array(dtype=wp.vec3),
    v: wp.array(dtype=wp.vec3),
    f: wp.array(dtype=wp.vec3),
    inv_mass: float,
    dt: float,
    x_new: wp.array(dtype=wp.vec3),
):
    """
    Velocity-Verlet drift.
    
    x_{n+1} = x_n + v_n * dt + f_n * (dt^2 / 2m)
    """
    tid = wp.tid()
    x_new[tid] = x[tid] + v[tid] * dt + f[tid] * (0.5 * dt * dt * inv_mass)


@wp.kernel
def finalize_velocity(
    v: wp.array(dtype=wp.vec3),
    f: wp.array(dtype=wp.vec3),
    f_new: wp.array(dtype=wp.vec3),
    inv_mass: float,
    dt: float,
    v_new: wp.array(dtype=wp.vec3),
):
    """
    Velocity-Verlet kick with the average of the old and new forces.
    
    v_{n+1} = v_n + (f_n + f_{n+1}) * (dt / 2m)
    """
    tid = wp.tid()
    v_new[tid] = v[tid] + (f[tid] + f_new[tid]) * (0.5 * dt * inv_mass)


@wp.kernel
def color_by_velocity(
    v: wp.array(dtype=wp.vec3),
    saturation: float,
    lightness: float,
    color: wp.array(dtype=wp.vec3),
):
    """
    Color each particle by its squared speed used directly as a hue.
    
    The hue is not normalised, so colors cycle as the speed grows.
    """
    tid = wp.tid()
    vel = v[tid]
    color[tid] = hsl_to_rgb(wp.dot(vel, vel), saturation, lightness)


@wp.kernel
def fill_color(
    value: wp.vec3,
    color: wp.array(dtype=wp.vec3),
):
    tid = wp.tid()
    color[tid] = value


# ============================================================================
# High-level wrapper functions
# ============================================================================

def eval_attractor_forces_3d(snapshot, x: wp.array, f: wp.array, device=None):
    """
    Evaluate attractor forces for all particles (wrapper function).
    
    Args:
        snapshot: AttractorSnapshot holding the attractor arrays
        x: Particle positions
        f: Output force array, overwritten
        device: Warp device (defaults to the array's device)
    """
    n = x.shape[0]
    if n == 0:
        return
    
    wp.launch(
        kernel=eval_attractor_forces,
        dim=n,
        inputs=[
            x,
            snapshot.position,
            snapshot.coefficient,
            snapshot.inv_exp_denominator,
            snapshot.count,
        ],
        outputs=[f],
        device=device or x.device,
    )


def force_at(p, attractors) -> np.ndarray:
    """
    Net attractor force at a single point, evaluated on the host.
    
    Args:
        p: 3-vector probe position
        attractors: Sequence of Attractor
    
    Returns:
        np.ndarray: Force 3-vector (float64)
    """
    p = np.asarray(p, dtype=np.float64)
    f = np.zeros(3, dtype=np.float64)
    for a in attractors:
        d = p - np.asarray(a.position, dtype=np.float64)
        exponent = float(d @ d) * a.inv_exp_denominator
        f += d * (-a.coefficient * np.exp(exponent))
    return f
