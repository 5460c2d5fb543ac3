"""
Pointer and keyboard callbacks for the variety simulation.

Pointer input runs through an explicit state machine: the current
``InteractionMode`` and the event kind select one transition function, and
that function receives the whole event. Nothing is attached or detached per
gesture.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable

from variety_sim3d.rendering.camera import CameraPose, Vec3, sub
from variety_sim3d.rendering.picking import (
    DragPlane,
    clamp_to_box,
    intersect_plane,
    pick_particle,
    ray_from_camera,
    to_ndc,
)

if TYPE_CHECKING:
    from variety_sim3d.core.engine import VarietyEngine
    from variety_sim3d.rendering.camera_controller import OrbitCamera


PRIMARY_BUTTON = 0
SECONDARY_BUTTON = 2


class InteractionMode(Enum):
    IDLE = "idle"
    ROTATING = "rotating"
    PANNING = "panning"


@dataclass(frozen=True)
class PointerEvent:
    """
    A pointer event in client pixel coordinates.

    Attributes:
        kind: "down", "move" or "up"
        x, y: Client coordinates, origin top-left
        button: 0 primary, 2 secondary
    """
    kind: str
    x: float
    y: float
    button: int = PRIMARY_BUTTON


@dataclass
class DragState:
    index: int
    plane: DragPlane
    offset: Vec3


# =============================================================================
# Pointer Handler
# =============================================================================

class PointerHandler:
    """
    Routes pointer events to the orbit camera and the particle drag.

    Primary button rotates. Secondary button pans, unless it lands on a
    particle: then that particle follows the pointer on a plane facing the
    camera and the camera ignores input until the button is released.
    """

    def __init__(
        self,
        *,
        orbit: "OrbitCamera",
        engine: "VarietyEngine",
        get_pose: Callable[[], CameraPose],
        get_viewport: Callable[[], tuple[int, int]],
    ):
        self._orbit = orbit
        self._engine = engine
        self._get_pose = get_pose
        self._get_viewport = get_viewport

        self.mode = InteractionMode.IDLE
        self.drag: DragState | None = None
        self._last: tuple[float, float] = (0.0, 0.0)

        self._transitions: dict[tuple[InteractionMode, str], Callable[[PointerEvent], None]] = {
            (InteractionMode.IDLE, "down"): self._begin,
            (InteractionMode.ROTATING, "move"): self._rotate,
            (InteractionMode.ROTATING, "up"): self._end,
            (InteractionMode.PANNING, "move"): self._pan_or_drag,
            (InteractionMode.PANNING, "up"): self._end,
        }

    @property
    def dragged_index(self) -> int | None:
        return self.drag.index if self.drag is not None else None

    def handle(self, event: PointerEvent) -> bool:
        """
        Apply one pointer event.

        Returns:
            True if the event caused a transition or an action
        """
        # A secondary release always ends a drag, whatever the mode.
        if event.kind == "up" and event.button == SECONDARY_BUTTON and self.drag is not None:
            self._release_drag()
            return True
        transition = self._transitions.get((self.mode, event.kind))
        if transition is None:
            return False
        transition(event)
        return True

    def handle_wheel(self, delta_y: float) -> None:
        self._orbit.accumulate_zoom(delta_y)

    def reset(self) -> None:
        """Drop any gesture in progress, e.g. after the particles were rebuilt."""
        self.mode = InteractionMode.IDLE
        self.drag = None
        self._orbit.enabled = True

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _begin(self, event: PointerEvent) -> None:
        self._last = (event.x, event.y)
        if event.button == PRIMARY_BUTTON:
            self.mode = InteractionMode.ROTATING
        elif event.button == SECONDARY_BUTTON:
            self.mode = InteractionMode.PANNING
            self._try_grab(event)

    def _rotate(self, event: PointerEvent) -> None:
        dx = event.x - self._last[0]
        dy = event.y - self._last[1]
        self._last = (event.x, event.y)
        _width, height = self._get_viewport()
        self._orbit.accumulate_rotation(dx, dy, height)

    def _pan_or_drag(self, event: PointerEvent) -> None:
        dx = event.x - self._last[0]
        dy = event.y - self._last[1]
        self._last = (event.x, event.y)
        if self.drag is not None:
            self._move_dragged(event)
            return
        pose = self._get_pose()
        _width, height = self._get_viewport()
        offset = self._orbit.pan_offset_for_pointer(dx, dy, height, pose.position, pose.up, pose.fov)
        self._orbit.accumulate_pan(offset)

    def _end(self, event: PointerEvent) -> None:
        # Other buttons released mid-drag leave the gesture alone.
        if self.drag is not None:
            return
        self.mode = InteractionMode.IDLE

    def _release_drag(self) -> None:
        self.drag = None
        self._orbit.enabled = True
        self.mode = InteractionMode.IDLE

    # -------------------------------------------------------------------------
    # Particle drag
    # -------------------------------------------------------------------------

    def _ray(self, event: PointerEvent):
        pose = self._get_pose()
        width, height = self._get_viewport()
        ndc_x, ndc_y = to_ndc(event.x, event.y, width, height)
        return pose, ray_from_camera(pose, ndc_x, ndc_y, float(width) / float(max(1, height)))

    def _try_grab(self, event: PointerEvent) -> None:
        pose, ray = self._ray(event)
        positions = [pt.position for pt in self._engine.particles]
        index = pick_particle(ray, positions, self._engine.params.particle_radius)
        if index is None:
            return
        center = positions[index]
        plane = DragPlane.from_normal_and_point(sub(pose.target, pose.position), center)
        hit = intersect_plane(ray, plane)
        offset = sub(hit, center) if hit is not None else (0.0, 0.0, 0.0)
        self.drag = DragState(index=index, plane=plane, offset=offset)
        self._orbit.enabled = False

    def _move_dragged(self, event: PointerEvent) -> None:
        if self.drag is None:
            return
        _pose, ray = self._ray(event)
        hit = intersect_plane(ray, self.drag.plane)
        if hit is None:
            return
        new_position = clamp_to_box(sub(hit, self.drag.offset), self._engine.bounds)
        self._engine.set_drag_position(self.drag.index, new_position)


# =============================================================================
# Key Handler
# =============================================================================

class KeyHandler:
    """
    Keyboard shortcuts standing in for the control panel buttons.

    space pauses, r toggles auto-rotation, plus/minus change the body count,
    n reseeds the layout.
    """

    def __init__(
        self,
        *,
        get_running: Callable[[], bool],
        set_running: Callable[[bool], None],
        get_auto_rotate: Callable[[], bool],
        set_auto_rotate: Callable[[bool], None],
        get_body_count: Callable[[], int],
        set_body_count: Callable[[int], None],
        on_reset: Callable[[], None],
    ):
        self._get_running = get_running
        self._set_running = set_running
        self._get_auto_rotate = get_auto_rotate
        self._set_auto_rotate = set_auto_rotate
        self._get_body_count = get_body_count
        self._set_body_count = set_body_count
        self._on_reset = on_reset

    def handle_key(self, key: str) -> bool:
        """
        Process a key press event.

        Args:
            key: Key name (e.g., 'space', 'r', 'plus')

        Returns:
            True if the key was handled, False otherwise
        """
        if key == "space":
            self._set_running(not self._get_running())
            return True
        if key == "r":
            self._set_auto_rotate(not self._get_auto_rotate())
            return True
        if key in ("plus", "equal"):
            self._set_body_count(self._get_body_count() + 1)
            return True
        if key == "minus":
            self._set_body_count(max(1, self._get_body_count() - 1))
            return True
        if key == "n":
            self._on_reset()
            return True
        return False
