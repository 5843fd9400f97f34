"""
Franka Kinematics
=================

Three interchangeable inverse kinematics strategies for the 7-axis
Franka Emika Panda, all sharing the modified-DH forward kinematics of
:class:`RobotKinematics`:

    - FrankaAnalyticalKinematics: closed form with joint 7 as the free
      parameter, 4 branches (shoulder x elbow)
    - FrankaNumericalKinematics: Newton iteration on a geometric
      Jacobian with a null-space term holding a redundant joint
    - FrankaToolboxKinematics: Levenberg-Marquardt solver from
      roboticstoolbox-python on an equivalent ETS chain

The redundancy parameter comes from ``target.external[0]``, else the
previous joints, else the middle of the joint range.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..geometry import FloatArray, Transform
from ..mechanisms.targets import RobotConfigurations
from .robot import RobotKinematics

logger = logging.getLogger(__name__)

MM_TO_M = 1e-3


def _unit(vector: FloatArray) -> FloatArray:
    return vector / np.linalg.norm(vector)


class FrankaKinematics(RobotKinematics):
    """Shared redundancy handling for the Franka strategies."""

    @property
    def redundant_axis(self) -> int:
        axis = self.mechanism.redundant_axis
        return self.config.franka.redundant_axis if axis is None else axis

    def redundant_value(
        self,
        axis: int,
        external: Sequence[float],
        prev_joints: Optional[FloatArray]
    ) -> float:
        if len(external) > 0:
            return float(external[0])
        if prev_joints is not None:
            return float(prev_joints[axis])
        return float(self._mid[axis])


# =============================================================================
# Analytical
# =============================================================================

class FrankaAnalyticalKinematics(FrankaKinematics):
    """
    Closed-form solution parameterised by joint 7.

    Adapted from the geometric solution in
    https://github.com/ffall007/franka_analytical_ik (He & Liu, 2021).
    """

    solution_count = 4

    def inverse_kinematics(
        self,
        pose: Transform,
        configuration: RobotConfigurations,
        external: Sequence[float],
        prev_joints: Optional[FloatArray] = None
    ) -> Tuple[FloatArray, List[str]]:
        errors: List[str] = []
        unreachable = False

        shoulder = bool(configuration & RobotConfigurations.SHOULDER)
        elbow = bool(configuration & RobotConfigurations.ELBOW)
        limits = self.mechanism.joints[5].limits

        q = np.zeros(7)
        q[6] = self.redundant_value(6, external, prev_joints)
        prev_q1 = float(prev_joints[0]) if prev_joints is not None else float(self._mid[0])

        d1, d3, d5, d7 = self._d[0], self._d[2], self._d[4], self._d[6]
        a4, a7 = self._a[3], self._a[6]

        LL24 = a4*a4 + d3*d3
        LL46 = a4*a4 + d5*d5
        L24 = np.sqrt(LL24)
        L46 = np.sqrt(LL46)

        theta_H46 = np.arctan(d5 / a4)
        theta_342 = np.arctan(d3 / a4)
        theta_46H = np.arctan2(1.0, d5 / a4)

        # Wrist points
        R = pose.rotation
        z_ee = R[:, 2]
        p_7 = pose.position - d7 * z_ee
        x_6 = _unit(R @ np.array([np.cos(q[6]), -np.sin(q[6]), 0.0]))
        p_6 = p_7 - a7 * x_6

        p_2 = np.array([0.0, 0.0, d1])
        V26 = p_6 - p_2
        LL26 = float(V26 @ V26)
        L26 = np.sqrt(LL26)

        # Joint 4 from the 2-4-6 triangle
        cos_246 = (LL24 + LL46 - LL26) / (2.0 * L24 * L46)
        if abs(cos_246) > 1.0:
            theta_246 = np.pi
            unreachable = True
        else:
            theta_246 = np.arccos(cos_246)
        q[3] = theta_246 + theta_H46 + theta_342 - 2.0 * np.pi

        # Joint 6
        cos_462 = (LL26 + LL46 - LL24) / (2.0 * L26 * L46)
        if abs(cos_462) > 1.0:
            theta_462 = 0.0
            unreachable = True
        else:
            theta_462 = np.arccos(cos_462)

        theta_26H = theta_46H + theta_462
        D26 = -L26 * np.cos(theta_26H)

        Z_6 = _unit(np.cross(z_ee, x_6))
        Y_6 = _unit(np.cross(Z_6, x_6))
        R_6 = np.column_stack([x_6, Y_6, Z_6])

        V_62 = R_6.T @ (-V26)
        phi_6 = np.arctan2(V_62[1], V_62[0])
        sin_6 = D26 / np.hypot(V_62[0], V_62[1])
        if abs(sin_6) > 1.0:
            theta_6 = 0.0
            if not unreachable:
                errors.append("Target not reachable.")
        else:
            theta_6 = np.arcsin(sin_6)

        q6 = theta_6 - phi_6 if elbow else np.pi - theta_6 - phi_6
        if q6 <= limits.lower:
            q6 += 2.0 * np.pi
        elif q6 >= limits.upper:
            q6 -= 2.0 * np.pi
        q[5] = q6

        # Joints 1 and 2
        theta_P26 = 1.5 * np.pi - theta_462 - theta_246 - theta_342
        theta_P = np.pi - theta_P26 - theta_26H
        LP6 = L26 * np.sin(theta_P26) / np.sin(theta_P)

        z_5 = R_6 @ np.array([np.sin(q6), np.cos(q6), 0.0])
        V2P = p_6 - LP6 * z_5 - p_2
        L2P = np.linalg.norm(V2P)

        if abs(V2P[2] / L2P) > 0.999:
            q[0] = prev_q1
            q[1] = 0.0
        else:
            q[0] = np.arctan2(V2P[1], V2P[0])
            q[1] = np.arccos(V2P[2] / L2P)
            if shoulder:
                q[0] += np.pi if q[0] < 0 else -np.pi
                q[1] = -q[1]

        # Joint 3
        z_3 = _unit(V2P)
        y_3 = _unit(np.cross(-V26, V2P))
        x_3 = np.cross(y_3, z_3)

        c1, s1 = np.cos(q[0]), np.sin(q[0])
        c2, s2 = np.cos(q[1]), np.sin(q[1])
        R_1 = np.array([[c1, -s1, 0.0], [s1, c1, 0.0], [0.0, 0.0, 1.0]])
        R_12 = np.array([[c2, -s2, 0.0], [0.0, 0.0, 1.0], [-s2, -c2, 0.0]])
        x_23 = (R_1 @ R_12).T @ x_3
        q[2] = np.arctan2(x_23[2], x_23[0])

        # Joint 5
        VH4 = p_2 + d3 * z_3 + a4 * x_3 - p_6 + d5 * z_5
        c6, s6 = np.cos(q6), np.sin(q6)
        R_56 = np.array([[c6, -s6, 0.0], [0.0, 0.0, -1.0], [s6, c6, 0.0]])
        V_5 = (R_6 @ R_56.T).T @ VH4
        q[4] = -np.arctan2(V_5[1], V_5[0])

        if unreachable:
            errors.append("Target out of reach.")

        return q, errors


# =============================================================================
# Numerical with null space
# =============================================================================

class FrankaNumericalKinematics(FrankaKinematics):
    """
    Newton iteration with a null-space term on the redundant joint.

    Positions are converted to metres so that position and orientation
    errors have comparable scale.
    """

    solution_count = 1

    def jacobian(self, joints: FloatArray) -> FloatArray:
        """
        Geometric Jacobian (6 x 7), linear rows in m/rad.

        With modified DH, joint i turns about the Z axis of frame i.
        """
        frames = self.frames(joints)
        p_ee = frames[-1][:3, 3]
        J = np.zeros((6, self.dof))
        for i, frame in enumerate(frames):
            z_i = frame[:3, 2] * self.mechanism.joints[i].sign
            J[:3, i] = np.cross(z_i, p_ee - frame[:3, 3]) * MM_TO_M
            J[3:, i] = z_i
        return J

    def task_error(self, joints: FloatArray, target: Transform) -> FloatArray:
        """[position (m), axis-angle] error from current flange to target."""
        current = self.forward_kinematics(joints)

        pos_error = (target.position - current.position) * MM_TO_M

        R_error = target.rotation @ current.rotation.T
        angle = np.arccos(np.clip((np.trace(R_error) - 1) / 2, -1, 1))
        axis = np.array([
            R_error[2, 1] - R_error[1, 2],
            R_error[0, 2] - R_error[2, 0],
            R_error[1, 0] - R_error[0, 1]
        ])
        axis_norm = np.linalg.norm(axis)
        if abs(angle) < 1e-10 or axis_norm < 1e-10:
            axis_angle = np.zeros(3)
        else:
            axis_angle = axis / axis_norm * angle

        return np.concatenate([pos_error, axis_angle])

    def inverse_kinematics(
        self,
        pose: Transform,
        configuration: RobotConfigurations,
        external: Sequence[float],
        prev_joints: Optional[FloatArray] = None
    ) -> Tuple[FloatArray, List[str]]:
        settings = self.config.franka
        axis = self.redundant_axis

        q = np.array(prev_joints if prev_joints is not None else self._mid, dtype=float)
        redundant = float(external[0]) if len(external) > 0 else None

        def distance(joints: FloatArray) -> float:
            error = self.task_error(joints, pose)
            value = float(error @ error)
            if redundant is not None:
                value += (redundant - joints[axis]) ** 2
            return value

        current = distance(q)
        for iteration in range(settings.max_iterations):
            if current < settings.tolerance:
                logger.debug(f"Franka IK converged in {iteration} iterations")
                return q, []

            J = self.jacobian(q)
            J_pinv = np.linalg.pinv(J)

            # Null space pulls the redundant joint to its target
            dq_null = np.zeros(self.dof)
            if redundant is not None:
                dq_null[axis] = settings.null_space_gain * (redundant - q[axis])
                dq_null = (np.eye(self.dof) - J_pinv @ J) @ dq_null

            dq = J_pinv @ self.task_error(q, pose) + dq_null

            best_alpha, best_distance = 0.0, current
            for alpha in settings.line_search_scales:
                trial = distance(q + alpha * dq)
                if trial < best_distance:
                    best_alpha, best_distance = alpha, trial

            if best_alpha == 0.0:
                break
            q = q + best_alpha * dq
            current = best_distance

        if current < settings.tolerance:
            return q, []
        logger.warning(f"Franka IK did not converge, squared error {current:.3g}")
        return q, ["Target unreachable."]


# =============================================================================
# roboticstoolbox backend
# =============================================================================

class FrankaToolboxKinematics(FrankaKinematics):
    """
    Levenberg-Marquardt solver from roboticstoolbox-python.

    The redundant joint is frozen as a constant rotation in the ETS
    chain, so the toolbox solves the remaining six axes.
    """

    solution_count = 1

    def __init__(self, mechanism, config=None) -> None:
        super().__init__(mechanism, config)
        import roboticstoolbox as rtb
        from spatialmath import SE3

        self._rtb = rtb
        self._se3 = SE3

    def _robot(self, axis: int, value: float):
        """ERobot with ``axis`` fixed at ``value`` (lengths in metres)."""
        ET = self._rtb.ET
        elements = []
        for i, joint in enumerate(self.mechanism.joints):
            elements.append(ET.Rx(joint.alpha))
            elements.append(ET.tx(joint.a * MM_TO_M))
            if i == axis:
                elements.append(ET.Rz(joint.dh_theta(value)))
            else:
                if joint.theta:
                    elements.append(ET.Rz(joint.theta))
                elements.append(ET.Rz(flip=True) if joint.sign < 0 else ET.Rz())
            elements.append(ET.tz(joint.d * MM_TO_M))
        return self._rtb.ERobot(self._rtb.ETS(elements), name=self.mechanism.name)

    def inverse_kinematics(
        self,
        pose: Transform,
        configuration: RobotConfigurations,
        external: Sequence[float],
        prev_joints: Optional[FloatArray] = None
    ) -> Tuple[FloatArray, List[str]]:
        settings = self.config.franka
        axis = self.redundant_axis
        value = self.redundant_value(axis, external, prev_joints)

        start = np.array(prev_joints if prev_joints is not None else self._mid, dtype=float)
        free = [i for i in range(self.dof) if i != axis]

        matrix = pose.matrix.copy()
        matrix[:3, 3] *= MM_TO_M
        target = self._se3(matrix, check=False)

        robot = self._robot(axis, value)
        solution = robot.ikine_LM(
            target,
            q0=start[free],
            ilimit=settings.toolbox_iterations,
            slimit=1,
            tol=settings.toolbox_tolerance,
            joint_limits=False,
        )

        q = start.copy()
        q[free] = solution.q
        q[axis] = value

        if not solution.success:
            logger.warning(f"Toolbox IK failed: {solution.reason}")
            return q, [f"Warning: Target unreachable ({solution.reason})"]
        return q, []
