"""
Screen-space picking for dragging particles.

A pointer position becomes a world-space ray through a perspective camera;
the ray is tested against particle spheres and, while dragging, against a
plane through the grabbed particle facing the camera.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from variety_sim3d.rendering.camera import (
    CameraPose,
    Vec3,
    add,
    compute_camera_basis,
    dot,
    normalize,
    scale,
    sub,
)


@dataclass
class Ray:
    origin: Vec3
    direction: Vec3

    def at(self, t: float) -> Vec3:
        return add(self.origin, scale(self.direction, t))


@dataclass
class DragPlane:
    """Plane ``dot(normal, p) + constant = 0``."""
    normal: Vec3
    constant: float

    @classmethod
    def from_normal_and_point(cls, normal: Vec3, point: Vec3) -> "DragPlane":
        n = normalize(normal)
        return cls(normal=n, constant=-dot(n, point))


def to_ndc(x: float, y: float, width: float, height: float) -> tuple[float, float]:
    """Client pixel coordinates (origin top-left) to normalized device coordinates."""
    w = max(1.0, float(width))
    h = max(1.0, float(height))
    return (float(x) / w) * 2.0 - 1.0, -(float(y) / h) * 2.0 + 1.0


def ray_from_camera(pose: CameraPose, ndc_x: float, ndc_y: float, aspect: float) -> Ray:
    forward, right, up = compute_camera_basis(pose.position, pose.target, pose.up)
    half_h = math.tan(math.radians(pose.fov) / 2.0)
    half_w = half_h * float(aspect)
    direction = add(forward, add(scale(right, ndc_x * half_w), scale(up, ndc_y * half_h)))
    return Ray(origin=pose.position, direction=normalize(direction))


def intersect_sphere(ray: Ray, center: Vec3, radius: float) -> float | None:
    """Distance along ``ray`` to the first hit in front of the origin, or None."""
    oc = sub(center, ray.origin)
    tca = dot(oc, ray.direction)
    d2 = dot(oc, oc) - tca * tca
    r2 = float(radius) * float(radius)
    if d2 > r2:
        return None
    thc = math.sqrt(r2 - d2)
    t0 = tca - thc
    t1 = tca + thc
    if t1 < 0.0:
        return None
    return t0 if t0 >= 0.0 else t1


def pick_particle(ray: Ray, positions: Iterable[Vec3], radius: float) -> int | None:
    """Index of the nearest sphere hit by ``ray``, or None."""
    best_index: int | None = None
    best_t = math.inf
    for i, center in enumerate(positions):
        t = intersect_sphere(ray, (float(center[0]), float(center[1]), float(center[2])), radius)
        if t is not None and t < best_t:
            best_t = t
            best_index = i
    return best_index


def intersect_plane(ray: Ray, plane: DragPlane) -> Vec3 | None:
    denom = dot(plane.normal, ray.direction)
    if denom == 0.0:
        # Parallel: hit only if the origin already lies on the plane.
        if dot(plane.normal, ray.origin) + plane.constant == 0.0:
            return ray.origin
        return None
    t = -(dot(ray.origin, plane.normal) + plane.constant) / denom
    if t < 0.0:
        return None
    return ray.at(t)


def clamp_to_box(point: Vec3, half_extent: float) -> Vec3:
    b = float(half_extent)
    return (
        max(-b, min(b, point[0])),
        max(-b, min(b, point[1])),
        max(-b, min(b, point[2])),
    )
