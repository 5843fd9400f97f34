"""
Robot Arm Kinematics
====================

Common machinery for robot arm solvers: DH forward kinematics, target
to flange conversion, branch search and joint unwrapping. Concrete
solvers only implement :meth:`RobotKinematics.inverse_kinematics`.

Branch Selection:
    A Cartesian target with an explicit configuration is solved on that
    branch. Without one, and with previous joints available, every
    branch is solved and the one with the smallest wrap-aware squared
    joint distance to the previous joints wins (first on ties).

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..geometry import FloatArray, Transform, dh_chain
from ..mechanisms.mechanism import RobotArm
from ..mechanisms.targets import (
    CartesianTarget,
    JointTarget,
    RobotConfigurations,
    Target,
    absolute_joints,
)
from .base import MechanismKinematics
from .solution import SolutionBuilder

logger = logging.getLogger(__name__)


def squared_difference(a: Sequence[float], b: Sequence[float]) -> float:
    """Sum of squared wrap-aware angle differences."""
    diff = np.abs(np.asarray(a, dtype=float) - np.asarray(b, dtype=float))
    diff = np.mod(diff, 2.0 * np.pi)
    diff = np.minimum(diff, 2.0 * np.pi - diff)
    return float(np.sum(diff ** 2))


class RobotKinematics(MechanismKinematics):
    """
    Base class for robot arm solvers.

    Attributes:
        solution_count: Number of configuration branches the solver
            distinguishes (1 for purely numerical solvers)
    """

    solution_count = 1

    def __init__(self, mechanism: RobotArm, config=None) -> None:
        super().__init__(mechanism, config)
        joints = mechanism.joints
        self._a = np.array([j.a for j in joints])
        self._d = np.array([j.d for j in joints])
        self._alpha = np.array([j.alpha for j in joints])
        self._mid = np.array([j.limits.center() for j in joints])
        logger.info(f"{type(self).__name__} initialized for {mechanism.name}")

    # -------------------------------------------------------------------------
    # Forward kinematics
    # -------------------------------------------------------------------------

    def dh_thetas(self, joints: Sequence[float]) -> FloatArray:
        return np.array([j.dh_theta(q) for j, q in zip(self.mechanism.joints, joints)])

    def joints_from_thetas(self, thetas: Sequence[float]) -> FloatArray:
        return np.array([j.joint_value(t) for j, t in zip(self.mechanism.joints, thetas)])

    def frames(self, joints: Sequence[float]) -> List[FloatArray]:
        """Joint frames (4x4) in robot base coordinates."""
        return dh_chain(
            self._a, self._d, self._alpha, self.dh_thetas(joints),
            modified=self.mechanism.use_modified_dh,
        )

    def forward_kinematics(self, joints: Sequence[float]) -> Transform:
        """Flange pose in robot base coordinates."""
        return Transform(self.frames(joints)[-1])

    # -------------------------------------------------------------------------
    # Inverse kinematics
    # -------------------------------------------------------------------------

    @abstractmethod
    def inverse_kinematics(
        self,
        pose: Transform,
        configuration: RobotConfigurations,
        external: Sequence[float],
        prev_joints: Optional[FloatArray] = None
    ) -> Tuple[FloatArray, List[str]]:
        """
        Solve one branch for a flange pose in robot base coordinates.

        Args:
            pose: Flange pose
            configuration: Branch selector
            external: Target external values (redundancy parameter)
            prev_joints: Previous joints (seed for iterative solvers)

        Returns:
            Tuple of (joint values, soft errors)
        """

    def closest_solution(
        self,
        pose: Transform,
        external: Sequence[float],
        prev_joints: FloatArray
    ) -> Tuple[FloatArray, RobotConfigurations, List[str], float]:
        """
        Solve every branch and keep the one closest to ``prev_joints``.

        Returns:
            Tuple of (joints, configuration, errors, squared difference)
        """
        best = None
        for index in range(self.solution_count):
            configuration = RobotConfigurations(index)
            joints, errors = self.inverse_kinematics(pose, configuration, external, prev_joints)
            joints = absolute_joints(joints, prev_joints)
            difference = squared_difference(joints, prev_joints)
            if best is None or difference < best[3]:
                best = (joints, configuration, errors, difference)
        return best

    # -------------------------------------------------------------------------
    # Resolution hooks
    # -------------------------------------------------------------------------

    def flange_pose(self, target: CartesianTarget, base: Transform) -> Transform:
        """Flange pose in robot base coordinates for a Cartesian target."""
        world = target.frame.pose @ target.pose
        flange = world @ target.tool.tcp.inverse()
        return base.inverse() @ flange

    def _set_joints(
        self,
        builder: SolutionBuilder,
        target: Target,
        prev_joints: Optional[FloatArray]
    ) -> None:
        if isinstance(target, JointTarget):
            values = np.asarray(target.joints, dtype=float)
            if len(values) != self.dof:
                builder.errors.append(
                    f"Joint target contains {len(values)} value(s), should contain {self.dof} values."
                )
                padded = np.zeros(self.dof)
                n = min(len(values), self.dof)
                padded[:n] = values[:n]
                values = padded
            builder.joints[:] = values
            return

        if not isinstance(target, CartesianTarget):
            raise TypeError(f"Unsupported target type: {type(target).__name__}")

        pose = self.flange_pose(target, builder.planes[0])

        if target.configuration is None and prev_joints is not None:
            joints, configuration, errors, _ = self.closest_solution(
                pose, target.external, prev_joints
            )
        else:
            configuration = target.configuration or RobotConfigurations.NONE
            joints, errors = self.inverse_kinematics(
                pose, configuration, target.external, prev_joints
            )
            if prev_joints is not None:
                joints = absolute_joints(joints, prev_joints)

        builder.joints[:] = joints
        builder.configuration = configuration
        builder.extend_errors(errors)
        if errors:
            logger.warning(f"{self.mechanism.name}: {'; '.join(errors)}")
        else:
            logger.debug(f"{self.mechanism.name}: solved on branch {configuration!r}")

    def _set_planes(self, builder: SolutionBuilder, target: Target) -> None:
        frames = self.frames(builder.joints)
        for i, frame in enumerate(frames):
            builder.planes[i + 1] = Transform(frame)

        if isinstance(target, JointTarget):
            builder.configuration = self._classify(builder.joints, frames[-1])

    def _classify(self, joints: FloatArray, flange: FloatArray) -> RobotConfigurations:
        """Configuration branch a joint vector belongs to."""
        if self.dof == 7:
            return RobotConfigurations.NONE
        _, configuration, _, difference = self.closest_solution(
            Transform(flange), (), joints
        )
        if difference < self.config.angle_tolerance:
            return configuration
        return RobotConfigurations.UNDEFINED
