"""
Offset Wrist Kinematics
=======================

Closed-form inverse kinematics for Universal Robots style arms, where
the wrist axes are offset instead of intersecting.

Mathematical Background:

    DH twists α = [π/2, 0, 0, π/2, -π/2, 0]; axes 2, 3 and 4 are
    parallel, so the point p5 = p - d6 · z6 always lies at distance d4
    from the arm plane:
        p5x · sin θ1 - p5y · cos θ1 = d4

    Axis 5 follows from the flange position along the same normal:
        cos θ5 = (px · sin θ1 - py · cos θ1 - d4) / d6

    Axis 6 from the flange axes projected on that normal, then the
    remaining planar chain (a2, a3) is solved for axes 2 and 3 and
    axis 4 absorbs the rest of θ2 + θ3 + θ4.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..geometry import FloatArray, Transform, dh_transform, normalize_angle
from ..mechanisms.targets import RobotConfigurations
from .robot import RobotKinematics


class OffsetWristKinematics(RobotKinematics):
    """Closed-form solver with 8 configuration branches."""

    solution_count = 8

    def inverse_kinematics(
        self,
        pose: Transform,
        configuration: RobotConfigurations,
        external: Sequence[float],
        prev_joints: Optional[FloatArray] = None
    ) -> Tuple[FloatArray, List[str]]:
        errors: List[str] = []
        tolerance = self.config.singularity_tolerance

        shoulder = bool(configuration & RobotConfigurations.SHOULDER)
        elbow = bool(configuration & RobotConfigurations.ELBOW)
        wrist = bool(configuration & RobotConfigurations.WRIST)
        if shoulder:
            elbow = not elbow
            wrist = not wrist

        a2, a3 = self._a[1], self._a[2]
        d1, d4, d5, d6 = self._d[0], self._d[3], self._d[4], self._d[5]

        R = pose.rotation
        p = pose.position
        p5 = p - d6 * R[:, 2]

        # Axis 1
        radius = np.hypot(p5[0], p5[1])
        ratio = d4 / radius if radius > tolerance else np.inf
        # Rounding at the boundary is clipped silently
        if abs(ratio) > 1.0 + tolerance:
            errors.append("Near overhead singularity.")
        ratio = float(np.clip(ratio, -1.0, 1.0))
        psi = np.arctan2(p5[1], p5[0])
        offset = np.arcsin(ratio)
        theta1 = psi + np.pi - offset if shoulder else psi + offset
        c1, s1 = np.cos(theta1), np.sin(theta1)

        # Axis 5
        c5 = (p[0] * s1 - p[1] * c1 - d4) / d6
        if abs(c5) > 1.0 + tolerance:
            errors.append("Target out of reach.")
        c5 = float(np.clip(c5, -1.0, 1.0))
        theta5 = np.arccos(c5)
        if wrist:
            theta5 = -theta5
        s5 = np.sin(theta5)

        # Axis 6
        normal = np.array([s1, -c1, 0.0])
        if abs(s5) < tolerance:
            errors.append("Near wrist singularity.")
            theta6 = self.mechanism.joints[5].dh_theta(0.0)
        else:
            theta6 = np.arctan2(-np.dot(R[:, 1], normal) / s5, np.dot(R[:, 0], normal) / s5)

        # Frame 4 from the flange
        R45 = dh_transform(self._a[4], d5, self._alpha[4], theta5)[:3, :3]
        R56 = dh_transform(self._a[5], d6, self._alpha[5], theta6)[:3, :3]
        R4 = R @ (R45 @ R56).T
        x4 = R4[:, 0]
        theta234 = np.arctan2(x4[2], x4[0] * c1 + x4[1] * s1)

        # Axes 2 and 3
        o4 = p5 - d5 * R4[:, 2]
        u = o4[0] * c1 + o4[1] * s1
        v = o4[2] - d1
        c3 = (u*u + v*v - a2*a2 - a3*a3) / (2.0 * a2 * a3)
        if abs(c3) > 1.0 + tolerance and "Target out of reach." not in errors:
            errors.append("Target out of reach.")
        c3 = float(np.clip(c3, -1.0, 1.0))
        theta3 = np.arccos(c3)
        if elbow:
            theta3 = -theta3
        theta2 = np.arctan2(v, u) - np.arctan2(a3 * np.sin(theta3), a2 + a3 * np.cos(theta3))
        theta4 = theta234 - theta2 - theta3

        thetas = [theta1, theta2, theta3, theta4, theta5, theta6]
        joints = self.joints_from_thetas(thetas)
        return np.array([normalize_angle(q) for q in joints]), errors
