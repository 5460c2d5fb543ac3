from __future__ import annotations

import argparse
import sys
import time
from dataclasses import dataclass, replace
from pathlib import Path

from variety_sim3d.core.engine import VarietyEngine
from variety_sim3d.core.stepper import StepAccumulator
from variety_sim3d.params import VarietyParams
from variety_sim3d.rendering.camera import CameraPose, auto_rotate_position
from variety_sim3d.rendering.camera_controller import OrbitCamera
from variety_sim3d.ui.callbacks import KeyHandler, PointerEvent, PointerHandler
from variety_sim3d.utils.config_groups import RESET_KEYS, changed_keys, is_camera_related


@dataclass
class FrameResult:
    """What a renderer needs after one tick."""
    frame: int
    steps: int
    variety: float
    theoretical_minimum: float
    pose: CameraPose


class VarietyApp:
    """
    Headless application state: engine, camera, input and frame pacing.

    A front end forwards its events to ``handle_pointer``, ``handle_wheel``
    and ``handle_key``, calls ``tick`` once per displayed frame and draws
    ``engine.particles`` from the returned pose.
    """

    def __init__(self, params: VarietyParams) -> None:
        self.params = params
        self.engine = VarietyEngine(params)
        self.orbit = OrbitCamera.from_params(params)
        self.accumulator = StepAccumulator(simulation_speed=params.simulation_speed)
        self.pose = CameraPose(position=params.camera_start, target=self.orbit.target, fov=params.camera_fov)
        self.running = True
        self.auto_rotate = params.auto_rotate
        self.frame = 0

        self.pointer = PointerHandler(
            orbit=self.orbit,
            engine=self.engine,
            get_pose=lambda: self.pose,
            get_viewport=lambda: (self.params.width, self.params.height),
        )
        self.keys = KeyHandler(
            get_running=lambda: self.running,
            set_running=self._set_running,
            get_auto_rotate=lambda: self.auto_rotate,
            set_auto_rotate=self._set_auto_rotate,
            get_body_count=lambda: len(self.engine.particles),
            set_body_count=self.set_body_count,
            on_reset=self.reset,
        )

    # -------------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------------

    def _set_running(self, running: bool) -> None:
        self.running = bool(running)

    def _set_auto_rotate(self, enabled: bool) -> None:
        self.auto_rotate = bool(enabled)

    def toggle_pause(self) -> bool:
        self.running = not self.running
        return self.running

    def toggle_auto_rotate(self) -> bool:
        self.auto_rotate = not self.auto_rotate
        return self.auto_rotate

    def set_body_count(self, n: int) -> None:
        self.pointer.reset()
        self.engine.reinitialize(max(1, int(n)))

    def set_learning_rate(self, rate: float) -> None:
        self.params.learning_rate = float(rate)
        self.params.clamp()

    def set_simulation_speed(self, speed: float) -> None:
        self.params.simulation_speed = float(speed)
        self.params.clamp()
        self.accumulator.simulation_speed = self.params.simulation_speed

    def reset(self) -> None:
        self.pointer.reset()
        self.accumulator.reset()
        self.engine.reset()

    def apply_params(self, new_params: VarietyParams) -> set[str]:
        """
        Swap in edited parameters and refresh what depends on them.

        Returns:
            Names of the parameters that changed
        """
        new_params.clamp()
        changed = changed_keys(self.params, new_params)
        for key in changed:
            setattr(self.params, key, getattr(new_params, key))
        self.accumulator.simulation_speed = self.params.simulation_speed
        if any(is_camera_related(k) for k in changed):
            self.orbit.min_distance = self.params.camera_min_distance
            self.orbit.max_distance = self.params.camera_max_distance
            self.orbit.damping_enabled = self.params.camera_damping_enabled
            self.orbit.damping_factor = self.params.camera_damping_factor
            self.orbit.rotate_speed = self.params.camera_rotate_speed
            self.orbit.zoom_step = self.params.zoom_step
            self.pose = replace(self.pose, fov=self.params.camera_fov)
            self.auto_rotate = self.params.auto_rotate
        if changed & RESET_KEYS:
            self.reset()
        return changed

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def handle_pointer(self, event: PointerEvent) -> bool:
        return self.pointer.handle(event)

    def handle_wheel(self, delta_y: float) -> None:
        self.pointer.handle_wheel(delta_y)

    def handle_key(self, key: str) -> bool:
        return self.keys.handle_key(key)

    # -------------------------------------------------------------------------
    # Frame
    # -------------------------------------------------------------------------

    def tick(self, now_ms: float | None = None) -> FrameResult:
        steps = 0
        if self.running:
            steps = self.accumulator.advance(self.engine, self.pointer.dragged_index)

        position = self.orbit.update(self.pose.position, self.pose.up)
        self.pose = replace(self.pose, position=position, target=self.orbit.target)

        if self.auto_rotate:
            t = time.time() * 1000.0 if now_ms is None else float(now_ms)
            position = auto_rotate_position(
                t,
                self.pose.position[1],
                radius=self.params.auto_rotate_radius,
                rate=self.params.auto_rotate_rate,
            )
            self.orbit.target = (0.0, 0.0, 0.0)
            self.pose = replace(self.pose, position=position, target=self.orbit.target)

        self.frame += 1
        return FrameResult(
            frame=self.frame,
            steps=steps,
            variety=self.engine.variety,
            theoretical_minimum=self.engine.theoretical_minimum,
            pose=self.pose,
        )


def build_params(args: argparse.Namespace) -> VarietyParams:
    params = VarietyParams.load(args.params) if args.params else VarietyParams()
    if args.bodies is not None:
        params.body_count = args.bodies
    if args.learning_rate is not None:
        params.learning_rate = args.learning_rate
    if args.speed is not None:
        params.simulation_speed = args.speed
    if args.seed is not None:
        params.seed = args.seed
    return params.clamp()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the variety minimization headless")
    parser.add_argument("--params", type=Path, default=None, help="JSON parameter file")
    parser.add_argument("--bodies", "-n", type=int, default=None, help="Number of bodies")
    parser.add_argument("--learning-rate", "-l", type=float, default=None, help="Gradient step size")
    parser.add_argument("--speed", "-s", type=float, default=None, help="Simulation steps per frame")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--frames", "-f", type=int, default=600, help="Frames to run")
    parser.add_argument("--report-every", type=int, default=60, help="Print progress every N frames (0 = end only)")
    parser.add_argument("--save-params", type=Path, default=None, help="Write the effective parameters to JSON")
    args = parser.parse_args(argv)

    params = build_params(args)
    for warning in params.validate():
        print(f"[params] {warning}", file=sys.stderr)

    app = VarietyApp(params)
    print(f"Variety minimization: {len(app.engine.particles)} bodies, seed {params.seed}")
    print(f"Theoretical minimum: {app.engine.theoretical_minimum:.2f}")

    result = None
    total_steps = 0
    for _ in range(max(0, args.frames)):
        result = app.tick()
        total_steps += result.steps
        if args.report_every > 0 and result.frame % args.report_every == 0:
            print(f"  frame {result.frame:5d}  steps {total_steps:6d}  variety {result.variety:.2f}")

    if result is not None:
        ratio = result.variety / result.theoretical_minimum if result.theoretical_minimum > 0 else 0.0
        print(f"Final variety: {result.variety:.2f} ({ratio:.3f}x minimum) after {total_steps} steps")

    if args.save_params is not None:
        params.save(args.save_params)

    issues = app.engine.validate_state()
    for issue in issues:
        print(f"[state] {issue}", file=sys.stderr)
    return 1 if issues else 0


if __name__ == "__main__":
    raise SystemExit(main())
