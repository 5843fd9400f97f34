"""
Spherical Wrist Kinematics
==========================

Closed-form inverse kinematics for 6-axis arms whose last three axes
intersect (ABB, KUKA, Fanuc, Staubli style).

Mathematical Background:

    DH twists α = [π/2, 0, π/2, -π/2, π/2, 0], with a5 = a6 = 0 and
    d2 = d3 = d5 = 0.

    Wrist centre:
        w = p - d6 · z6

    Axis 1 points the arm plane at the wrist centre (shoulder flag: the
    arm reaches backwards over its own axis, θ1 + π).

    Axes 2-3 form a planar two-link chain with lengths a2 and
    L = √(a3² + d4²), the second link rotated by φ = atan2(d4, a3):
        cos γ = (u² + v² - a2² - L²) / (2 · a2 · L)
        θ2 = atan2(v, u) - atan2(L sin γ, a2 + L cos γ)
        θ3 = γ + φ

    Axes 4-6 are a ZYZ Euler decomposition of R3ᵀ · R:
        M = Rz(θ4) · Ry(θ5) · Rz(θ6)

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..geometry import FloatArray, Transform, dh_chain, normalize_angle
from ..mechanisms.targets import RobotConfigurations
from .robot import RobotKinematics


class SphericalWristKinematics(RobotKinematics):
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

        a1, a2, a3 = self._a[0], self._a[1], self._a[2]
        d1, d4, d6 = self._d[0], self._d[3], self._d[5]

        R = pose.rotation
        center = pose.position - d6 * R[:, 2]

        # Axis 1
        rho = np.hypot(center[0], center[1])
        if rho < tolerance:
            errors.append("Near overhead singularity.")
        theta1 = np.arctan2(center[1], center[0])
        u = rho - a1
        if shoulder:
            theta1 += np.pi
            u = -rho - a1
        v = center[2] - d1

        # Axes 2 and 3
        L = np.hypot(a3, d4)
        phi = np.arctan2(d4, a3)
        cos_gamma = (u*u + v*v - a2*a2 - L*L) / (2.0 * a2 * L)
        if abs(cos_gamma) > 1.0 + tolerance:
            errors.append("Target out of reach.")
        cos_gamma = float(np.clip(cos_gamma, -1.0, 1.0))
        gamma = np.arccos(cos_gamma)
        if elbow:
            gamma = -gamma
        theta2 = np.arctan2(v, u) - np.arctan2(L * np.sin(gamma), a2 + L * np.cos(gamma))
        theta3 = gamma + phi

        # Axes 4 to 6
        R3 = dh_chain(self._a[:3], self._d[:3], self._alpha[:3], [theta1, theta2, theta3])[-1][:3, :3]
        M = R3.T @ R

        theta5 = np.arccos(np.clip(M[2, 2], -1.0, 1.0))
        if wrist:
            theta5 = -theta5

        if abs(np.sin(theta5)) < tolerance:
            errors.append("Near wrist singularity.")
            theta4 = self.mechanism.joints[3].dh_theta(0.0)
            if M[2, 2] > 0:
                theta6 = np.arctan2(M[1, 0], M[0, 0]) - theta4
            else:
                theta6 = theta4 - np.arctan2(-M[1, 0], -M[0, 0])
        else:
            s = np.sign(np.sin(theta5))
            theta4 = np.arctan2(s * M[1, 2], s * M[0, 2])
            theta6 = np.arctan2(s * M[2, 1], -s * M[2, 0])

        thetas = [theta1, theta2, theta3, theta4, theta5, theta6]
        joints = self.joints_from_thetas(thetas)
        return np.array([normalize_angle(q) for q in joints]), errors
