from __future__ import annotations

import math
import random
from dataclasses import dataclass

import numpy as np

from variety_sim3d.core.init_conditions import create_from_params
from variety_sim3d.params import VarietyParams
from variety_sim3d.physics.variety import compute_variety_and_gradient, theoretical_minimum


@dataclass(slots=True)
class Particle:
    index: int
    x: float
    y: float
    z: float
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0

    @property
    def position(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def velocity(self) -> tuple[float, float, float]:
        return (self.vx, self.vy, self.vz)


class VarietyEngine:
    """
    Damped gradient descent on the variety potential.

    The engine owns every particle. A collaborator may take over a single
    particle while dragging it: it moves it through ``set_drag_position``
    and passes its index to ``step`` so the integrator leaves it alone.
    """

    def __init__(self, params: VarietyParams) -> None:
        self.params = params
        self._rng = random.Random(params.seed)
        self.particles: list[Particle] = []
        self.variety: float = 0.0
        self.theoretical_minimum: float = 0.0
        self.step_count: int = 0
        self.reset()

    def reset(self) -> None:
        """Reseed the generator and rebuild ``params.body_count`` particles."""
        self._rng = random.Random(self.params.seed)
        self.reinitialize(self.params.body_count)

    def reinitialize(self, n: int) -> None:
        n = max(1, int(n))
        self.params.body_count = n
        initial = create_from_params(self.params, self._rng, n)
        self.particles = [
            Particle(index=i, x=ip.x, y=ip.y, z=ip.z, vx=ip.vx, vy=ip.vy, vz=ip.vz)
            for i, ip in enumerate(initial)
        ]
        self.theoretical_minimum = theoretical_minimum(n)
        self.variety = 0.0
        self.step_count = 0

    @property
    def learning_rate(self) -> float:
        return float(self.params.learning_rate)

    @property
    def velocity_damping(self) -> float:
        return float(self.params.velocity_damping)

    @property
    def bounds(self) -> float:
        return float(self.params.bounds)

    def positions(self) -> np.ndarray:
        pos = np.empty((len(self.particles), 3), dtype=np.float64)
        for i, pt in enumerate(self.particles):
            pos[i, 0] = pt.x
            pos[i, 1] = pt.y
            pos[i, 2] = pt.z
        return pos

    def velocities(self) -> np.ndarray:
        vel = np.empty((len(self.particles), 3), dtype=np.float64)
        for i, pt in enumerate(self.particles):
            vel[i, 0] = pt.vx
            vel[i, 1] = pt.vy
            vel[i, 2] = pt.vz
        return vel

    def compute_variety_and_gradient(self) -> tuple[float, np.ndarray]:
        """
        Variety of the current layout and the descent direction per particle.

        Pure: reads positions only. The returned gradients are already
        negated, so integration adds them directly.
        """
        return compute_variety_and_gradient(self.positions(), floor=self.params.distance_floor)

    def _check_index(self, index: int) -> int:
        index = int(index)
        if not 0 <= index < len(self.particles):
            raise IndexError(f"particle index {index} out of range (n={len(self.particles)})")
        return index

    def step(self, exclude_index: int | None = None) -> float:
        """
        Advance one gradient-descent step.

        Args:
            exclude_index: Particle under external control (being dragged),
                or None. Its position and velocity are not touched.

        Returns:
            The variety of the layout the step started from.
        """
        n = len(self.particles)
        if exclude_index is not None:
            exclude_index = self._check_index(exclude_index)

        variety, gradients = self.compute_variety_and_gradient()
        self.variety = float(variety)

        pos = self.positions()
        vel = self.velocities()
        active = np.ones(n, dtype=bool)
        if exclude_index is not None:
            active[exclude_index] = False

        # v = v * damping + grad * lr ; x += v
        vel[active] = vel[active] * self.velocity_damping + gradients[active] * self.learning_rate
        pos[active] += vel[active]

        bounce = float(self.params.bounce)
        for i, pt in enumerate(self.particles):
            if not active[i]:
                continue
            pt.x = float(pos[i, 0])
            pt.y = float(pos[i, 1])
            pt.z = float(pos[i, 2])
            pt.vx = float(vel[i, 0])
            pt.vy = float(vel[i, 1])
            pt.vz = float(vel[i, 2])
            self._apply_bounds(pt, bounce=bounce)

        self.step_count += 1
        return self.variety

    def _apply_bounds(self, pt: Particle, *, bounce: float) -> None:
        b = self.bounds
        if pt.x > b:
            pt.x = b
            pt.vx = -pt.vx * bounce
        elif pt.x < -b:
            pt.x = -b
            pt.vx = -pt.vx * bounce
        if pt.y > b:
            pt.y = b
            pt.vy = -pt.vy * bounce
        elif pt.y < -b:
            pt.y = -b
            pt.vy = -pt.vy * bounce
        if pt.z > b:
            pt.z = b
            pt.vz = -pt.vz * bounce
        elif pt.z < -b:
            pt.z = -b
            pt.vz = -pt.vz * bounce

    def set_drag_position(self, index: int, position: tuple[float, float, float]) -> None:
        """Place a dragged particle and drop its momentum."""
        pt = self.particles[self._check_index(index)]
        pt.x, pt.y, pt.z = (float(c) for c in position)
        pt.vx = pt.vy = pt.vz = 0.0

    def validate_state(self) -> list[str]:
        issues: list[str] = []
        b = self.bounds
        eps = 1e-9
        for i, pt in enumerate(self.particles):
            if not all(math.isfinite(c) for c in (pt.x, pt.y, pt.z, pt.vx, pt.vy, pt.vz)):
                issues.append(f"particle {i} has non-finite position/velocity")
                continue
            if abs(pt.x) > b + eps or abs(pt.y) > b + eps or abs(pt.z) > b + eps:
                issues.append(f"particle {i} out of box bounds")
        if not math.isfinite(self.variety):
            issues.append("variety is non-finite")
        return issues
