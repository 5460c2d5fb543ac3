"""
Tests for camera geometry helpers.
"""

import math

import pytest

from variety_sim3d.rendering.camera import (
    CameraPose,
    Spherical,
    auto_rotate_position,
    clamp_distance,
    clamp_phi,
    compute_camera_basis,
    length,
    normalize,
    quat_conjugate,
    quat_from_unit_vectors,
    quat_rotate,
    spherical_from_vector,
    vector_from_spherical,
)


def approx_vec(v, expected, tol=1e-9):
    return all(abs(a - b) < tol for a, b in zip(v, expected))


class TestSpherical:
    """Tests for Cartesian <-> spherical conversion."""

    def test_axis_conventions(self):
        s = spherical_from_vector((0.0, 0.0, 10.0))
        assert s.radius == pytest.approx(10.0)
        assert s.theta == pytest.approx(0.0)
        assert s.phi == pytest.approx(math.pi / 2)

        s = spherical_from_vector((0.0, 5.0, 0.0))
        assert s.phi == pytest.approx(0.0)

    def test_round_trip(self):
        v = (3.0, -4.0, 12.0)
        assert approx_vec(vector_from_spherical(spherical_from_vector(v)), v)

    def test_zero_vector(self):
        s = spherical_from_vector((0.0, 0.0, 0.0))
        assert (s.radius, s.theta, s.phi) == (0.0, 0.0, 0.0)

    def test_positive_theta_turns_toward_x(self):
        v = vector_from_spherical(Spherical(radius=2.0, theta=math.pi / 2, phi=math.pi / 2))
        assert approx_vec(v, (2.0, 0.0, 0.0))


class TestQuaternion:
    """Tests for the shortest-arc rotation helpers."""

    def test_identity_for_same_vector(self):
        q = quat_from_unit_vectors((0.0, 1.0, 0.0), (0.0, 1.0, 0.0))
        assert approx_vec(q, (0.0, 0.0, 0.0, 1.0))

    def test_maps_from_onto_to(self):
        src = normalize((1.0, 2.0, -0.5))
        q = quat_from_unit_vectors(src, (0.0, 1.0, 0.0))
        assert approx_vec(quat_rotate(q, src), (0.0, 1.0, 0.0))

    def test_opposite_vectors(self):
        q = quat_from_unit_vectors((0.0, -1.0, 0.0), (0.0, 1.0, 0.0))
        assert approx_vec(quat_rotate(q, (0.0, -1.0, 0.0)), (0.0, 1.0, 0.0))

    def test_conjugate_undoes_rotation(self):
        q = quat_from_unit_vectors((0.0, 0.0, 1.0), (0.0, 1.0, 0.0))
        v = (1.5, -2.0, 0.25)
        assert approx_vec(quat_rotate(quat_conjugate(q), quat_rotate(q, v)), v)

    def test_rotation_preserves_length(self):
        q = quat_from_unit_vectors(normalize((1.0, 1.0, 1.0)), (0.0, 1.0, 0.0))
        v = (4.0, -1.0, 2.0)
        assert length(quat_rotate(q, v)) == pytest.approx(length(v))


class TestClamps:
    def test_clamp_phi(self):
        assert clamp_phi(-5.0) == 0.01
        assert clamp_phi(10.0) == pytest.approx(math.pi - 0.01)
        assert clamp_phi(1.0) == 1.0

    def test_clamp_distance(self):
        assert clamp_distance(1.0, 5.0, 50.0) == 5.0
        assert clamp_distance(80.0, 5.0, 50.0) == 50.0
        assert clamp_distance(20.0, 5.0, 50.0) == 20.0


class TestCameraBasis:
    def test_looking_down_negative_z(self):
        forward, right, up = compute_camera_basis((0.0, 0.0, 20.0), (0.0, 0.0, 0.0))
        assert approx_vec(forward, (0.0, 0.0, -1.0))
        assert approx_vec(right, (1.0, 0.0, 0.0))
        assert approx_vec(up, (0.0, 1.0, 0.0))

    def test_looking_along_up_axis(self):
        forward, right, up = compute_camera_basis((0.0, 10.0, 0.0), (0.0, 0.0, 0.0))
        assert length(right) == pytest.approx(1.0)
        assert length(up) == pytest.approx(1.0)


class TestAutoRotate:
    def test_circle_keeps_height(self):
        assert approx_vec(auto_rotate_position(0.0, 15.0), (15.0, 15.0, 0.0))
        pos = auto_rotate_position(math.pi / 2 / 0.0001, 7.0)
        assert approx_vec(pos, (0.0, 7.0, 15.0), tol=1e-6)

    def test_pose_defaults(self):
        pose = CameraPose()
        assert pose.position == (15.0, 15.0, 15.0)
        assert pose.fov == 75.0
