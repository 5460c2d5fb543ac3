"""
Initial condition generators for the variety simulation.

Particles start at rest, spread uniformly inside a cube centred on the
origin. The generator only draws from the ``random.Random`` it is given so a
fixed seed always reproduces the same layout.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from variety_sim3d.params import VarietyParams


@dataclass(slots=True)
class InitialParticle:
    """
    Initial conditions for a single particle.

    Attributes:
        x, y, z: Position coordinates
        vx, vy, vz: Velocity components
    """
    x: float
    y: float
    z: float
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0


def create_uniform_distribution(
    rng: random.Random,
    n: int,
    *,
    half_extent: float = 8.0,
) -> list[InitialParticle]:
    """
    Create ``n`` resting particles uniform in [-half_extent, half_extent]^3.

    Args:
        rng: Random number generator
        n: Number of particles
        half_extent: Half-size of the sampling cube

    Returns:
        List of InitialParticle objects
    """
    h = float(half_extent)
    particles: list[InitialParticle] = []
    for _ in range(max(0, int(n))):
        x = (rng.random() - 0.5) * 2.0 * h
        y = (rng.random() - 0.5) * 2.0 * h
        z = (rng.random() - 0.5) * 2.0 * h
        particles.append(InitialParticle(x=x, y=y, z=z))
    return particles


def create_from_params(
    params: "VarietyParams",
    rng: random.Random,
    n: int | None = None,
) -> list[InitialParticle]:
    """Uniform layout using the sampling extent of ``params``."""
    count = params.body_count if n is None else n
    return create_uniform_distribution(rng, count, half_extent=params.init_half_extent)
