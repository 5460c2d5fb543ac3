from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class VarietyParams:
    width: int = 1100
    height: int = 720

    body_count: int = 8
    learning_rate: float = 0.05
    simulation_speed: float = 0.5
    velocity_damping: float = 0.9
    bounce: float = 0.5  # velocity factor kept (and flipped) on a wall hit

    bounds: float = 10.0  # box half-size: [-bounds, +bounds]
    init_half_extent: float = 8.0
    distance_floor: float = 0.1
    particle_radius: float = 0.3  # pick radius for dragging

    camera_fov: float = 75.0  # vertical, degrees
    camera_start: tuple[float, float, float] = (15.0, 15.0, 15.0)
    camera_min_distance: float = 5.0
    camera_max_distance: float = 50.0
    camera_damping_enabled: bool = True
    camera_damping_factor: float = 0.05
    camera_rotate_speed: float = 0.5
    zoom_step: float = 0.95

    auto_rotate: bool = False
    auto_rotate_radius: float = 15.0
    auto_rotate_rate: float = 0.0001  # radians per millisecond

    seed: int = 1

    def clamp(self) -> "VarietyParams":
        self.width = max(320, int(self.width))
        self.height = max(240, int(self.height))
        self.body_count = max(1, min(200, int(self.body_count)))
        self.learning_rate = min(1.0, max(0.0, float(self.learning_rate)))
        self.simulation_speed = min(10.0, max(0.0, float(self.simulation_speed)))
        self.velocity_damping = min(1.0, max(0.0, float(self.velocity_damping)))
        self.bounce = min(1.0, max(0.0, float(self.bounce)))
        self.bounds = max(1.0, float(self.bounds))
        self.init_half_extent = min(self.bounds, max(0.0, float(self.init_half_extent)))
        self.distance_floor = max(1e-6, float(self.distance_floor))
        self.particle_radius = max(0.01, float(self.particle_radius))
        self.camera_fov = min(170.0, max(1.0, float(self.camera_fov)))
        self.camera_start = tuple(float(c) for c in self.camera_start)  # type: ignore[assignment]
        if len(self.camera_start) != 3:
            self.camera_start = (15.0, 15.0, 15.0)
        self.camera_min_distance = max(0.01, float(self.camera_min_distance))
        self.camera_max_distance = max(self.camera_min_distance, float(self.camera_max_distance))
        self.camera_damping_enabled = bool(self.camera_damping_enabled)
        self.camera_damping_factor = min(1.0, max(0.0, float(self.camera_damping_factor)))
        self.camera_rotate_speed = max(0.0, float(self.camera_rotate_speed))
        self.zoom_step = min(0.999, max(0.5, float(self.zoom_step)))
        self.auto_rotate = bool(self.auto_rotate)
        self.auto_rotate_radius = max(0.0, float(self.auto_rotate_radius))
        self.auto_rotate_rate = float(self.auto_rotate_rate)
        self.seed = int(self.seed)
        return self

    def validate(self) -> list[str]:
        warnings: list[str] = []

        if self.body_count < 2:
            warnings.append("body_count < 2: no pairs, variety stays at 0.")
        if self.learning_rate <= 0.0:
            warnings.append("learning_rate is 0: particles only coast on damped velocity.")
        if self.simulation_speed <= 0.0:
            warnings.append("simulation_speed is 0: no simulation steps will run.")
        if self.velocity_damping >= 1.0:
            warnings.append("velocity_damping=1 keeps full momentum; expect overshoot.")
        if not self.camera_damping_enabled and self.camera_damping_factor > 0.0:
            warnings.append("camera_damping_factor ignored while camera_damping_enabled is false.")
        if self.auto_rotate and self.auto_rotate_radius < self.camera_min_distance:
            warnings.append("auto_rotate_radius is below camera_min_distance.")
        if self.init_half_extent >= self.bounds:
            warnings.append("init_half_extent reaches the box: particles may start on a wall.")

        return warnings

    @classmethod
    def load(cls, path: str | Path) -> "VarietyParams":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("The parameter file must contain a JSON object.")
        # Older files used the slider names of the web version.
        if "numBodies" in data and "body_count" not in data:
            data["body_count"] = data["numBodies"]
        if "learningRate" in data and "learning_rate" not in data:
            data["learning_rate"] = data["learningRate"]
        if "simulationSpeed" in data and "simulation_speed" not in data:
            data["simulation_speed"] = data["simulationSpeed"]
        filtered: dict[str, Any] = {k: v for k, v in data.items() if k in cls.__annotations__}
        return cls(**filtered).clamp()

    def save(self, path: str | Path) -> None:
        data = asdict(self)
        data["camera_start"] = list(self.camera_start)
        Path(path).write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
