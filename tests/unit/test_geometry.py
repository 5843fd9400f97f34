"""
Unit Tests for Geometry Module
==============================

Tests for transforms, angle normalisation and DH link builders.

Author: Robokin Project Team
License: MIT
"""

import numpy as np
import pytest

from robokin.geometry import (
    Transform,
    dh_chain,
    dh_transform,
    modified_dh_transform,
    normalize_angle,
)


# =============================================================================
# Transform Tests
# =============================================================================

class TestTransform:
    """Tests for Transform class."""

    def test_identity(self):
        """Test identity transform."""
        T = Transform()
        assert np.allclose(T.matrix, np.eye(4))
        assert np.allclose(T.position, [0, 0, 0])

    def test_from_position_rpy(self):
        """Test yaw-only rotation."""
        T = Transform.from_position_rpy([1, 2, 3], [0, 0, np.pi/2])
        assert np.allclose(T.position, [1, 2, 3])
        assert np.allclose(T.x_axis, [0, 1, 0], atol=1e-12)

    def test_inverse(self):
        """Test transform inverse."""
        T = Transform.from_position_rpy([1, 2, 3], [0.1, 0.2, 0.3])
        assert np.allclose((T @ T.inverse()).matrix, np.eye(4), atol=1e-12)

    def test_composition(self):
        """Test transform composition."""
        T1 = Transform.translation([1, 0, 0])
        T2 = Transform.translation([0, 1, 0])
        assert np.allclose((T1 @ T2).position, [1, 1, 0])

    def test_transform_point_and_vector(self):
        """Points are translated, vectors are not."""
        T = Transform.from_position_rpy([10, 0, 0], [0, 0, np.pi/2])
        assert np.allclose(T.transform_point([1, 0, 0]), [10, 1, 0])
        assert np.allclose(T.transform_vector([1, 0, 0]), [0, 1, 0])

    def test_rotation_about_point(self):
        """Rotating a point about an offset axis."""
        R = Transform.rotation_about(np.pi, [0, 0, 1], [1, 0, 0])
        assert np.allclose(R.transform_point([2, 0, 0]), [0, 0, 0], atol=1e-12)

    def test_from_plane_orthonormal(self):
        """Plane axes are orthonormal and right-handed."""
        T = Transform.from_plane([0, 0, 5], [1, 0, 0], [1, 1, 0])
        assert np.allclose(T.y_axis, [0, 1, 0])
        assert np.allclose(T.z_axis, [0, 0, 1])
        assert np.isclose(np.linalg.det(T.rotation), 1.0)

    def test_from_plane_parallel_axes(self):
        """Parallel axes are rejected."""
        with pytest.raises(ValueError):
            Transform.from_plane([0, 0, 0], [1, 0, 0], [2, 0, 0])

    def test_distance_to(self):
        """Test distance calculation."""
        T1 = Transform.from_position_rpy([0, 0, 0], [0, 0, 0])
        T2 = Transform.from_position_rpy([3, 4, 0], [0, 0, 0.5])
        pos_dist, rot_dist = T1.distance_to(T2)
        assert np.isclose(pos_dist, 5.0)
        assert np.isclose(rot_dist, 0.5)
        assert not T1.is_close(T2)
        assert T2.is_close(Transform(T2.matrix))

    def test_quaternion(self):
        """Half-turn about Z and a small turn about X."""
        half_turn = Transform.rotation_about(np.pi, [0, 0, 1])
        assert np.allclose(half_turn.quaternion, [0, 0, 0, 1], atol=1e-12)

        small = Transform.rotation_about(0.2, [1, 0, 0])
        assert np.allclose(small.quaternion, [np.cos(0.1), np.sin(0.1), 0, 0])


# =============================================================================
# Angle Tests
# =============================================================================

class TestNormalizeAngle:
    """Tests for normalize_angle."""

    @pytest.mark.parametrize("angle,expected", [
        (0.0, 0.0),
        (np.pi, np.pi),
        (-np.pi, np.pi),
        (3 * np.pi / 2, -np.pi / 2),
        (5 * np.pi, np.pi),
    ])
    def test_range(self, angle, expected):
        """Result lies on (-π, π]."""
        assert np.isclose(normalize_angle(angle), expected)


# =============================================================================
# DH Tests
# =============================================================================

class TestDH:
    """Tests for DH link builders."""

    def test_standard_link(self):
        """Standard link: rotate, then offset along the new X."""
        T = dh_transform(a=100, d=50, alpha=0.0, theta=np.pi/2)
        assert np.allclose(T[:3, 3], [0, 100, 50])

    def test_modified_link(self):
        """Modified link: offset along the old X first."""
        T = modified_dh_transform(a=100, d=50, alpha=0.0, theta=np.pi/2)
        assert np.allclose(T[:3, 3], [100, 0, 50])

    def test_modified_twist(self):
        """Twist rotates the offset direction."""
        T = modified_dh_transform(a=0, d=10, alpha=np.pi/2, theta=0.0)
        assert np.allclose(T[:3, 3], [0, -10, 0], atol=1e-12)

    def test_chain_is_cumulative(self):
        """Every chain frame is the product of the links before it."""
        a, d, alpha, theta = [10, 20], [1, 2], [0.3, -0.4], [0.5, 0.6]
        frames = dh_chain(a, d, alpha, theta)
        expected = dh_transform(10, 1, 0.3, 0.5) @ dh_transform(20, 2, -0.4, 0.6)
        assert len(frames) == 2
        assert np.allclose(frames[-1], expected)
