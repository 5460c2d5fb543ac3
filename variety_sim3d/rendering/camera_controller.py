"""
Orbit camera controller.

This module turns raw pointer and wheel deltas into a damped orbit around a
target point. Input is accumulated between frames and consumed by
``OrbitCamera.update`` once per frame.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from variety_sim3d.rendering.camera import (
    WORLD_UP,
    Spherical,
    SphericalDelta,
    Vec3,
    add,
    clamp_distance,
    clamp_phi,
    compute_camera_basis,
    length,
    normalize,
    quat_conjugate,
    quat_from_unit_vectors,
    quat_rotate,
    scale,
    spherical_from_vector,
    sub,
    vector_from_spherical,
)

if TYPE_CHECKING:
    from variety_sim3d.params import VarietyParams


@dataclass
class OrbitInput:
    """
    Input gathered during one frame, applied in a single call.

    Attributes:
        rotate_dx, rotate_dy: Pointer delta in pixels while rotating
        viewport_height: Height used to turn pixels into angles
        wheel_delta_y: Sum of wheel deltas (sign is what matters)
        pan: World-space pan offset
    """
    rotate_dx: float = 0.0
    rotate_dy: float = 0.0
    viewport_height: float = 1.0
    wheel_delta_y: float = 0.0
    pan: Vec3 = (0.0, 0.0, 0.0)


class OrbitCamera:
    """
    Orbit controls around a target point.

    Spherical coordinates are re-derived from the camera position on every
    update, so the caller stays free to move the camera in between.
    """

    def __init__(
        self,
        target: Vec3 = (0.0, 0.0, 0.0),
        *,
        min_distance: float = 5.0,
        max_distance: float = 50.0,
        damping_enabled: bool = True,
        damping_factor: float = 0.05,
        rotate_speed: float = 0.5,
        zoom_step: float = 0.95,
    ):
        self.target: Vec3 = tuple(float(c) for c in target)  # type: ignore[assignment]
        self.min_distance = float(min_distance)
        self.max_distance = float(max_distance)
        self.damping_enabled = bool(damping_enabled)
        self.damping_factor = float(damping_factor)
        self.rotate_speed = float(rotate_speed)
        self.zoom_step = float(zoom_step)
        self.enabled = True

        self.spherical = Spherical()
        self.spherical_delta = SphericalDelta()
        self.zoom_scale = 1.0
        self.pan_offset: Vec3 = (0.0, 0.0, 0.0)

    @classmethod
    def from_params(cls, params: "VarietyParams") -> "OrbitCamera":
        return cls(
            min_distance=params.camera_min_distance,
            max_distance=params.camera_max_distance,
            damping_enabled=params.camera_damping_enabled,
            damping_factor=params.camera_damping_factor,
            rotate_speed=params.camera_rotate_speed,
            zoom_step=params.zoom_step,
        )

    def accumulate_rotation(self, dx: float, dy: float, viewport_height: float) -> None:
        """
        Queue a rotation from a pointer move.

        Both axes are normalized by the viewport height, so a horizontal
        drag across a wide viewport turns further than one full turn.
        """
        if not self.enabled:
            return
        height = max(1.0, float(viewport_height))
        scaled_dx = float(dx) * self.rotate_speed
        scaled_dy = float(dy) * self.rotate_speed
        self.spherical_delta.theta -= 2.0 * math.pi * scaled_dx / height
        self.spherical_delta.phi -= 2.0 * math.pi * scaled_dy / height

    def accumulate_zoom(self, wheel_delta_y: float) -> None:
        """Wheel up (negative delta) zooms in, wheel down zooms out."""
        if not self.enabled:
            return
        if wheel_delta_y < 0:
            self.zoom_scale *= self.zoom_step
        elif wheel_delta_y > 0:
            self.zoom_scale /= self.zoom_step

    def accumulate_pan(self, offset: Vec3) -> None:
        if not self.enabled:
            return
        self.pan_offset = add(self.pan_offset, offset)

    def pan_offset_for_pointer(
        self,
        dx: float,
        dy: float,
        viewport_height: float,
        camera_position: Vec3,
        camera_up: Vec3 = WORLD_UP,
        fov: float = 75.0,
    ) -> Vec3:
        """
        World-space offset that keeps the target under the pointer.

        A drag of the full viewport height moves the target by the visible
        height of the view at the target's distance.
        """
        height = max(1.0, float(viewport_height))
        distance = length(sub(camera_position, self.target))
        visible = distance * math.tan(math.radians(float(fov)) / 2.0)
        _forward, right, up = compute_camera_basis(camera_position, self.target, camera_up)
        move_x = 2.0 * float(dx) * visible / height
        move_y = 2.0 * float(dy) * visible / height
        return add(scale(right, -move_x), scale(up, move_y))

    def apply_input(self, orbit_input: OrbitInput) -> None:
        if orbit_input.rotate_dx or orbit_input.rotate_dy:
            self.accumulate_rotation(orbit_input.rotate_dx, orbit_input.rotate_dy, orbit_input.viewport_height)
        if orbit_input.wheel_delta_y:
            self.accumulate_zoom(orbit_input.wheel_delta_y)
        if orbit_input.pan != (0.0, 0.0, 0.0):
            self.accumulate_pan(orbit_input.pan)

    def update(
        self,
        camera_position: Vec3,
        camera_up: Vec3 = WORLD_UP,
        orbit_input: OrbitInput | None = None,
    ) -> Vec3:
        """
        Consume pending input and return the new camera position.

        The caller is expected to point the camera at ``self.target``
        afterwards.
        """
        if orbit_input is not None:
            self.apply_input(orbit_input)

        if not self.enabled:
            self.spherical_delta.clear()
            self.zoom_scale = 1.0
            self.pan_offset = (0.0, 0.0, 0.0)
            return tuple(float(c) for c in camera_position)  # type: ignore[return-value]

        up = normalize(camera_up)
        if up == (0.0, 0.0, 0.0):
            up = WORLD_UP
        quat = quat_from_unit_vectors(up, WORLD_UP)
        quat_inverse = quat_conjugate(quat)

        offset = quat_rotate(quat, sub(camera_position, self.target))
        spherical = spherical_from_vector(offset)
        spherical.theta += self.spherical_delta.theta
        spherical.phi = clamp_phi(spherical.phi + self.spherical_delta.phi)
        spherical.radius = clamp_distance(
            spherical.radius * self.zoom_scale,
            self.min_distance,
            self.max_distance,
        )
        self.spherical = spherical

        self.target = add(self.target, self.pan_offset)
        offset = quat_rotate(quat_inverse, vector_from_spherical(spherical))
        new_position = add(self.target, offset)

        if self.damping_enabled:
            self.spherical_delta.theta *= 1.0 - self.damping_factor
            self.spherical_delta.phi *= 1.0 - self.damping_factor
        else:
            self.spherical_delta.clear()

        self.zoom_scale = 1.0
        self.pan_offset = (0.0, 0.0, 0.0)
        return new_position
