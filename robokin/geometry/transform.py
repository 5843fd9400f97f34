"""
Rigid Transforms and DH Chains
==============================

Homogeneous transforms and Denavit-Hartenberg link builders shared by
every kinematic solver.

Mathematical Background:

    Standard (distal) DH convention:
        T_i = Rot_z(θ) · Trans_z(d) · Trans_x(a) · Rot_x(α)

             ⎡ cθ  -sθcα   sθsα   a·cθ ⎤
        T = ⎢ sθ   cθcα  -cθsα   a·sθ ⎥
             ⎢ 0    sα     cα     d    ⎥
             ⎣ 0    0      0      1    ⎦

    Modified (proximal, Craig) DH convention:
        T_i = Rot_x(α) · Trans_x(a) · Rot_z(θ) · Trans_z(d)

             ⎡ cθ     -sθ     0     a     ⎤
        T = ⎢ sθcα   cθcα   -sα   -d·sα  ⎥
             ⎢ sθsα   cθsα    cα    d·cα  ⎥
             ⎣ 0       0      0     1     ⎦

    A chain is the running product T_1 · T_2 · ... · T_n, where every
    partial product is a joint frame expressed in the mechanism base.

Units are millimetres and radians throughout.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

# Type aliases
FloatArray = NDArray[np.floating]


def normalize_angle(angle: float) -> float:
    """Map an angle onto the half-open interval (-π, π]."""
    wrapped = float(np.mod(angle + np.pi, 2.0 * np.pi) - np.pi)
    if wrapped <= -np.pi:
        wrapped += 2.0 * np.pi
    return wrapped


# =============================================================================
# Transform
# =============================================================================

@dataclass
class Transform:
    """
    Rigid body transformation (SE(3)).

    Also used as an oriented "plane": the origin is the translation and
    the X/Y/Z axes are the rotation columns.

    Attributes:
        matrix: 4x4 homogeneous transformation matrix
    """
    matrix: FloatArray = field(default_factory=lambda: np.eye(4))

    def __post_init__(self) -> None:
        """Ensure matrix is proper shape."""
        self.matrix = np.array(self.matrix, dtype=float).reshape(4, 4)

    @classmethod
    def identity(cls) -> "Transform":
        """World XY plane."""
        return cls()

    @classmethod
    def from_position_rotation(
        cls,
        position: FloatArray,
        rotation: FloatArray
    ) -> "Transform":
        """
        Create transform from position and rotation matrix.

        Args:
            position: [x, y, z] position
            rotation: 3x3 rotation matrix

        Returns:
            Transform instance
        """
        matrix = np.eye(4)
        matrix[:3, :3] = rotation
        matrix[:3, 3] = position
        return cls(matrix)

    @classmethod
    def from_position_rpy(
        cls,
        position: FloatArray,
        rpy: FloatArray
    ) -> "Transform":
        """Plane at ``position`` turned by fixed-axis roll, pitch, yaw (Rz·Ry·Rx)."""
        roll, pitch, yaw = (float(v) for v in rpy)
        turned = (
            cls.rotation_about(yaw, [0.0, 0.0, 1.0])
            @ cls.rotation_about(pitch, [0.0, 1.0, 0.0])
            @ cls.rotation_about(roll, [1.0, 0.0, 0.0])
        )
        return cls.from_position_rotation(position, turned.rotation)

    @classmethod
    def from_plane(
        cls,
        origin: FloatArray,
        x_axis: FloatArray,
        y_axis: FloatArray
    ) -> "Transform":
        """
        Create a plane from an origin and two in-plane directions.

        The Y direction is re-orthogonalised against X, and Z completes
        a right-handed frame.

        Raises:
            ValueError: If the axes are degenerate or parallel
        """
        x = np.asarray(x_axis, dtype=float)
        y = np.asarray(y_axis, dtype=float)
        x_norm = np.linalg.norm(x)
        if x_norm < 1e-12:
            raise ValueError("x_axis must be non-zero")
        x = x / x_norm
        y = y - np.dot(y, x) * x
        y_norm = np.linalg.norm(y)
        if y_norm < 1e-12:
            raise ValueError("x_axis and y_axis must not be parallel")
        y = y / y_norm
        z = np.cross(x, y)
        return cls.from_position_rotation(origin, np.column_stack([x, y, z]))

    @classmethod
    def translation(cls, vector: FloatArray) -> "Transform":
        """Pure translation."""
        matrix = np.eye(4)
        matrix[:3, 3] = vector
        return cls(matrix)

    @classmethod
    def rotation_about(
        cls,
        angle: float,
        axis: FloatArray,
        point: FloatArray = (0.0, 0.0, 0.0)
    ) -> "Transform":
        """
        Rotation by ``angle`` about an axis through ``point``.

        Uses the Rodrigues formula R = I + sinθ·K + (1 - cosθ)·K².
        """
        k = np.asarray(axis, dtype=float)
        k = k / np.linalg.norm(k)
        K = np.array([
            [0.0, -k[2], k[1]],
            [k[2], 0.0, -k[0]],
            [-k[1], k[0], 0.0]
        ])
        R = np.eye(3) + np.sin(angle) * K + (1.0 - np.cos(angle)) * (K @ K)
        p = np.asarray(point, dtype=float)
        return cls.from_position_rotation(p - R @ p, R)

    @property
    def position(self) -> FloatArray:
        """Get position vector [x, y, z]."""
        return self.matrix[:3, 3].copy()

    @property
    def rotation(self) -> FloatArray:
        """Get 3x3 rotation matrix."""
        return self.matrix[:3, :3].copy()

    @property
    def x_axis(self) -> FloatArray:
        return self.matrix[:3, 0].copy()

    @property
    def y_axis(self) -> FloatArray:
        return self.matrix[:3, 1].copy()

    @property
    def z_axis(self) -> FloatArray:
        return self.matrix[:3, 2].copy()

    @property
    def quaternion(self) -> FloatArray:
        """Unit quaternion [w, x, y, z] with w >= 0."""
        R = self.rotation
        # Squared magnitudes of w, x, y, z from the diagonal
        diagonal = np.array([
            1.0 + R[0, 0] + R[1, 1] + R[2, 2],
            1.0 + R[0, 0] - R[1, 1] - R[2, 2],
            1.0 - R[0, 0] + R[1, 1] - R[2, 2],
            1.0 - R[0, 0] - R[1, 1] + R[2, 2],
        ])
        pivot = int(np.argmax(diagonal))
        scale = 2.0 * np.sqrt(max(diagonal[pivot], 0.0))

        # Pairwise products 4·q_i·q_j taken from the off-diagonal terms
        products = np.array([
            [diagonal[0], R[2, 1] - R[1, 2], R[0, 2] - R[2, 0], R[1, 0] - R[0, 1]],
            [R[2, 1] - R[1, 2], diagonal[1], R[0, 1] + R[1, 0], R[0, 2] + R[2, 0]],
            [R[0, 2] - R[2, 0], R[0, 1] + R[1, 0], diagonal[2], R[1, 2] + R[2, 1]],
            [R[1, 0] - R[0, 1], R[0, 2] + R[2, 0], R[1, 2] + R[2, 1], diagonal[3]],
        ])
        q = products[pivot] / scale
        return q if q[0] >= 0.0 else -q

    def inverse(self) -> "Transform":
        """Rigid inverse [Rᵀ | -Rᵀp]."""
        R = self.rotation
        return Transform.from_position_rotation(-R.T @ self.position, R.T)

    def __matmul__(self, other: "Transform") -> "Transform":
        return Transform(self.matrix @ other.matrix)

    def transform_point(self, point: FloatArray) -> FloatArray:
        return self.rotation @ np.asarray(point, dtype=float) + self.position

    def transform_vector(self, vector: FloatArray) -> FloatArray:
        """Rotate a direction, ignoring translation."""
        return self.rotation @ np.asarray(vector, dtype=float)

    def distance_to(self, other: "Transform") -> Tuple[float, float]:
        """
        Translation and rotation gap to another transform.

        Returns:
            (origin distance, angle in radians of the relative rotation)
        """
        relative = self.rotation.T @ other.rotation
        skew = np.array([
            relative[2, 1] - relative[1, 2],
            relative[0, 2] - relative[2, 0],
            relative[1, 0] - relative[0, 1],
        ])
        angle = np.arctan2(0.5 * np.linalg.norm(skew), 0.5 * (np.trace(relative) - 1.0))
        return float(np.linalg.norm(other.position - self.position)), float(angle)

    def is_close(
        self,
        other: "Transform",
        position_tolerance: float = 1e-6,
        rotation_tolerance: float = 1e-6
    ) -> bool:
        """Check whether two transforms coincide within tolerances."""
        pos_dist, rot_dist = self.distance_to(other)
        return pos_dist <= position_tolerance and rot_dist <= rotation_tolerance


# =============================================================================
# DH Link Builders
# =============================================================================

def dh_transform(a: float, d: float, alpha: float, theta: float) -> FloatArray:
    """
    Standard DH link matrix Rz(θ)·Tz(d)·Tx(a)·Rx(α).

    Args:
        a: Link length (mm)
        d: Link offset (mm)
        alpha: Link twist (rad)
        theta: Joint angle (rad)

    Returns:
        4x4 transformation matrix
    """
    ct, st = np.cos(theta), np.sin(theta)
    ca, sa = np.cos(alpha), np.sin(alpha)

    return np.array([
        [ct, -st * ca,  st * sa, a * ct],
        [st,  ct * ca, -ct * sa, a * st],
        [0.0, sa,       ca,      d     ],
        [0.0, 0.0,      0.0,     1.0   ]
    ])


def modified_dh_transform(a: float, d: float, alpha: float, theta: float) -> FloatArray:
    """Modified (Craig) DH link matrix Rx(α)·Tx(a)·Rz(θ)·Tz(d)."""
    ct, st = np.cos(theta), np.sin(theta)
    ca, sa = np.cos(alpha), np.sin(alpha)

    return np.array([
        [ct,      -st,      0.0,  a      ],
        [st * ca,  ct * ca, -sa, -d * sa ],
        [st * sa,  ct * sa,  ca,  d * ca ],
        [0.0,      0.0,      0.0, 1.0    ]
    ])


def dh_chain(
    a: Sequence[float],
    d: Sequence[float],
    alpha: Sequence[float],
    theta: Sequence[float],
    modified: bool = False
) -> List[FloatArray]:
    """
    Chain link matrices into cumulative joint frames.

    Args:
        a, d, alpha, theta: Per-link DH values (theta already includes
            joint values and offsets)
        modified: Use the modified (Craig) convention

    Returns:
        List of 4x4 matrices, one per link, each expressed in the chain base
    """
    link = modified_dh_transform if modified else dh_transform
    T = np.eye(4)
    frames = []
    for ai, di, alphai, thetai in zip(a, d, alpha, theta):
        T = T @ link(ai, di, alphai, thetai)
        frames.append(T)
    return frames
