"""
Camera geometry for the orbit controls.

Vectors are plain ``(x, y, z)`` tuples and quaternions ``(x, y, z, w)``
tuples. Spherical coordinates follow the Y-up convention: ``theta`` is the
azimuth measured from +Z toward +X and ``phi`` the polar angle from +Y.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

Vec3 = tuple[float, float, float]
Quat = tuple[float, float, float, float]

WORLD_UP: Vec3 = (0.0, 1.0, 0.0)
PHI_EPS = 0.01


@dataclass
class Spherical:
    """
    Spherical coordinates of a camera offset.

    Attributes:
        radius: Distance to the target
        theta: Azimuth in radians
        phi: Polar angle from the up axis in radians
    """
    radius: float = 1.0
    theta: float = 0.0
    phi: float = 0.0


@dataclass
class SphericalDelta:
    """Rotation requested by input but not yet applied to the camera."""
    theta: float = 0.0
    phi: float = 0.0

    def clear(self) -> None:
        self.theta = 0.0
        self.phi = 0.0


@dataclass
class CameraPose:
    """
    Where the camera is and what it looks at.

    Attributes:
        position: Eye position
        target: Look-at point
        up: Up vector
        fov: Vertical field of view in degrees
    """
    position: Vec3 = (15.0, 15.0, 15.0)
    target: Vec3 = (0.0, 0.0, 0.0)
    up: Vec3 = WORLD_UP
    fov: float = 75.0


def add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Vec3, b: Vec3) -> Vec3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def length(a: Vec3) -> float:
    return math.sqrt(dot(a, a))


def normalize(a: Vec3) -> Vec3:
    """Unit vector along ``a``; the zero vector is returned unchanged."""
    n = length(a)
    if n <= 0.0:
        return (0.0, 0.0, 0.0)
    return (a[0] / n, a[1] / n, a[2] / n)


def quat_from_unit_vectors(v_from: Vec3, v_to: Vec3) -> Quat:
    """
    Shortest-arc rotation taking unit vector ``v_from`` onto ``v_to``.

    Opposite vectors have no unique shortest arc; a half turn about an axis
    perpendicular to ``v_from`` is used.
    """
    r = dot(v_from, v_to) + 1.0
    if r < 1e-12:
        r = 0.0
        if abs(v_from[0]) > abs(v_from[2]):
            q = (-v_from[1], v_from[0], 0.0, r)
        else:
            q = (0.0, -v_from[2], v_from[1], r)
    else:
        c = cross(v_from, v_to)
        q = (c[0], c[1], c[2], r)
    n = math.sqrt(q[0] * q[0] + q[1] * q[1] + q[2] * q[2] + q[3] * q[3])
    return (q[0] / n, q[1] / n, q[2] / n, q[3] / n)


def quat_conjugate(q: Quat) -> Quat:
    """Inverse of a unit quaternion."""
    return (-q[0], -q[1], -q[2], q[3])


def quat_rotate(q: Quat, v: Vec3) -> Vec3:
    """Rotate ``v`` by the unit quaternion ``q``."""
    qx, qy, qz, qw = q
    vx, vy, vz = v
    # t = 2 * cross(q.xyz, v)
    tx = 2.0 * (qy * vz - qz * vy)
    ty = 2.0 * (qz * vx - qx * vz)
    tz = 2.0 * (qx * vy - qy * vx)
    # v' = v + w * t + cross(q.xyz, t)
    return (
        vx + qw * tx + (qy * tz - qz * ty),
        vy + qw * ty + (qz * tx - qx * tz),
        vz + qw * tz + (qx * ty - qy * tx),
    )


def spherical_from_vector(v: Vec3) -> Spherical:
    radius = length(v)
    if radius == 0.0:
        return Spherical(radius=0.0, theta=0.0, phi=0.0)
    theta = math.atan2(v[0], v[2])
    phi = math.acos(max(-1.0, min(1.0, v[1] / radius)))
    return Spherical(radius=radius, theta=theta, phi=phi)


def vector_from_spherical(s: Spherical) -> Vec3:
    sin_phi_radius = math.sin(s.phi) * s.radius
    return (
        sin_phi_radius * math.sin(s.theta),
        math.cos(s.phi) * s.radius,
        sin_phi_radius * math.cos(s.theta),
    )


def clamp_distance(
    distance: float,
    min_distance: float,
    max_distance: float,
) -> float:
    """
    Clamp camera distance to valid range.

    Args:
        distance: Current distance
        min_distance: Minimum allowed distance
        max_distance: Maximum allowed distance

    Returns:
        Clamped distance value
    """
    min_d = max(0.0, float(min_distance))
    max_d = max(min_d, float(max_distance))
    return max(min_d, min(max_d, float(distance)))


def clamp_phi(phi: float) -> float:
    """
    Keep the polar angle away from the poles.

    Returns:
        ``phi`` clamped to [PHI_EPS, π - PHI_EPS]
    """
    return max(PHI_EPS, min(math.pi - PHI_EPS, float(phi)))


def compute_camera_basis(
    position: Vec3,
    target: Vec3,
    up: Vec3 = WORLD_UP,
) -> tuple[Vec3, Vec3, Vec3]:
    """
    Orthonormal camera frame.

    Returns:
        (forward, right, up) unit vectors; forward points at the target
    """
    forward = normalize(sub(target, position))
    right = normalize(cross(forward, up))
    if right == (0.0, 0.0, 0.0):
        # Looking straight along the up axis: pick any perpendicular.
        right = normalize(cross(forward, (0.0, 0.0, 1.0)))
    cam_up = normalize(cross(right, forward))
    return forward, right, cam_up


def auto_rotate_position(
    time_ms: float,
    height: float,
    *,
    radius: float = 15.0,
    rate: float = 0.0001,
) -> Vec3:
    """
    Camera position on the slow auto-rotation circle around the origin.

    The height is kept; only x and z follow the circle.
    """
    angle = float(time_ms) * rate
    return (math.cos(angle) * radius, float(height), math.sin(angle) * radius)
