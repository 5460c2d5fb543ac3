"""
Frame-rate independent step scheduling.

Each rendered frame adds ``simulation_speed`` to a fractional counter and
one simulation step runs per whole unit accumulated. A speed of 0.5 steps on
every other frame, a speed of 2.5 alternates between two and three steps.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from variety_sim3d.core.engine import VarietyEngine


@dataclass
class StepAccumulator:
    simulation_speed: float = 0.5
    frame_counter: float = 0.0

    def advance(self, engine: "VarietyEngine", exclude_index: int | None = None) -> int:
        """
        Account for one frame and run the steps it owes.

        Returns:
            Number of ``engine.step`` calls made (possibly 0)
        """
        self.frame_counter += max(0.0, float(self.simulation_speed))
        steps = 0
        while self.frame_counter >= 1.0:
            engine.step(exclude_index)
            self.frame_counter -= 1.0
            steps += 1
        return steps

    def reset(self) -> None:
        self.frame_counter = 0.0
