#!/usr/bin/env python3
"""
Headless attractor cloud run

Runs the particle simulation without a renderer, prints progress and
optionally saves a snapshot of the final cloud.

Usage:
    python run_headless.py                                  # Ring shape, defaults
    python run_headless.py --svg shape.svg --count 20000
    python run_headless.py --query "count=4096&attractor=0,0,0,1,0.05"
    python run_headless.py --steps 400 --loop 200 --snapshot cloud.png

Author: NBEL
License: Apache-2.0
"""

import argparse
import time

import numpy as np

from attractor_cloud import Attractor, Simulation, SimulationConfig, load_config, save_config
from attractor_cloud.config import format_color, parse_color, parse_zoom


def color_arg(text: str) -> str:
    try:
        return format_color(parse_color(text))
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def zoom_arg(text: str) -> float:
    try:
        return parse_zoom(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def attractor_arg(text: str) -> Attractor:
    try:
        return Attractor.from_text(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Headless attractor particle cloud')
    parser.add_argument('--config', type=str, default=None,
                        help='JSON config file to start from')
    parser.add_argument('--query', type=str, default=None,
                        help='URL-parameter config, e.g. "count=4096&velocity=false"')
    parser.add_argument('--count', '-n', type=int, default=None,
                        help='Particle count (default: 8192)')
    parser.add_argument('--svg', type=str, default=None,
                        help='SVG file whose <path> outlines seed the cloud')
    parser.add_argument('--attractor', '-a', type=attractor_arg, action='append', default=None,
                        help='Attractor "x,y,z,radius,amplitude" (repeatable, replaces defaults)')
    parser.add_argument('--steps', '-s', type=int, default=600,
                        help='Number of ticks to run (default: 600)')
    parser.add_argument('--loop', type=float, default=None,
                        help='Ticks before time reverses (default: never)')
    parser.add_argument('--no-velocity-color', action='store_true',
                        help='Keep seed colors instead of coloring by speed')
    parser.add_argument('--color', type=color_arg, default=None,
                        help='Fixed particle color as rrggbb')
    parser.add_argument('--zoom', type=zoom_arg, default=None,
                        help='View zoom for the snapshot (visible half-extent is 1/zoom)')
    parser.add_argument('--device', type=str, default=None,
                        help='Warp device (cuda or cpu, default: Warp default)')
    parser.add_argument('--snapshot', type=str, default=None,
                        help='Save a PNG scatter plot of the final cloud')
    parser.add_argument('--save-config', type=str, default=None,
                        help='Write the effective config to a JSON file')
    return parser.parse_args(argv)


def build_config(args) -> SimulationConfig:
    if args.config:
        config = load_config(args.config)
    elif args.query:
        config = SimulationConfig.from_query(args.query)
    else:
        config = SimulationConfig()
    
    if args.count is not None:
        config.count = max(0, args.count)
    if args.svg is not None:
        config.svg = args.svg
    if args.attractor:
        config.attractors = list(args.attractor)
    if args.loop is not None:
        config.loop = args.loop
    if args.no_velocity_color:
        config.velocity_coloring = False
    if args.color is not None:
        config.color = args.color
    if args.zoom is not None:
        config.zoom = args.zoom
    if args.device is not None:
        config.device = args.device
    
    return config


def save_snapshot(sim: Simulation, path: str):
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt
    
    pos = sim.positions()
    col = np.clip(sim.colors(), 0.0, 1.0)
    
    fig, ax = plt.subplots(figsize=(8, 8), facecolor='black')
    ax.set_facecolor('black')
    ax.scatter(pos[:, 0], pos[:, 1], c=col, s=0.5 * sim.config.zoom, linewidths=0)
    ax.set_aspect('equal')
    size = sim.config.view_size
    ax.set_xlim(-size, size)
    ax.set_ylim(-size, size)
    ax.axis('off')
    ax.set_title(f'{sim.particle_count} particles, t={sim.t:.2f}', color='white')
    
    plt.tight_layout()
    plt.savefig(path, dpi=150, facecolor='black')
    plt.close(fig)
    print(f"✓ Snapshot saved as: {path}")


def main():
    args = parse_args()
    config = build_config(args)
    
    print("=" * 60)
    print("Attractor Cloud (headless)")
    print("=" * 60)
    print(f"  Count: {config.count}")
    print(f"  Shape: {config.svg or 'rings'}")
    print(f"  Attractors: {len(config.attractors)}")
    for attractor in config.attractors:
        print(f"    - {attractor.to_text()}")
    
    sim = Simulation(config)
    print(f"  Device: {sim.device}")
    
    t_start = time.perf_counter()
    for step in range(args.steps):
        dt = sim.tick()
        
        if step % 100 == 0:
            pos = sim.positions()
            radius = np.linalg.norm(pos, axis=1).max() if len(pos) else 0.0
            print(f"  Step {step:5d}: dt={dt:+.3f}  max radius = {radius:.4f}")
    elapsed = time.perf_counter() - t_start
    
    print(f"\n✓ {args.steps} steps in {elapsed:.2f}s "
          f"({args.steps / max(elapsed, 1e-9):.1f} steps/s)")
    
    if args.snapshot:
        save_snapshot(sim, args.snapshot)
    if args.save_config:
        save_config(sim.config, args.save_config)
        print(f"✓ Config saved as: {args.save_config}")
    
    print("\n" + "=" * 60)
    print("Run complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
