"""
External Axis Kinematics
========================

Solvers for positioners, tracks and custom mechanisms. External axes
take their values directly from ``Target.external`` and only need
forward kinematics.

Author: Robokin Project Team
License: MIT
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..geometry import FloatArray, Transform
from ..mechanisms.targets import Target, absolute_joints
from .base import MechanismKinematics
from .solution import SolutionBuilder


class ExternalKinematics(MechanismKinematics):
    """Reads joint values from ``Target.external`` by joint number."""

    label = "External"
    required = True

    def _set_joints(
        self,
        builder: SolutionBuilder,
        target: Target,
        prev_joints: Optional[FloatArray]
    ) -> None:
        for i, joint in enumerate(self.mechanism.joints):
            index = joint.external_index
            if 0 <= index < len(target.external):
                builder.joints[i] = target.external[index]
            elif self.required:
                builder.errors.append(f"{self.label} external axis not configured on this target.")


class PositionerKinematics(ExternalKinematics):
    """
    Rotary positioner.

    Joint i rotates its rest pose, and everything downstream of it, about
    the rest-pose Z axis of every joint j <= i.
    """

    label = "Positioner"

    def _set_joints(self, builder, target, prev_joints):
        super()._set_joints(builder, target, prev_joints)
        if prev_joints is not None:
            builder.joints[:] = absolute_joints(builder.joints, prev_joints)

    def _set_planes(self, builder: SolutionBuilder, target: Target) -> None:
        starts = self.mechanism.start_poses
        for i, start in enumerate(starts):
            plane = start
            for j in range(i, -1, -1):
                joint = self.mechanism.joints[j]
                rotation = Transform.rotation_about(
                    joint.sign * builder.joints[j], starts[j].z_axis, starts[j].position
                )
                plane = rotation @ plane
            builder.planes[i + 1] = plane


class TrackKinematics(ExternalKinematics):
    """Linear track; axis i translates along the i-th coordinate axis."""

    label = "Track"

    def _set_planes(self, builder: SolutionBuilder, target: Target) -> None:
        offset = np.zeros(3)
        for i, (joint, start) in enumerate(zip(self.mechanism.joints, self.mechanism.start_poses)):
            offset[i] += joint.sign * builder.joints[i]
            builder.planes[i + 1] = Transform.translation(offset) @ start


class CustomKinematics(ExternalKinematics):
    """Custom axes: missing values default to 0, frames stay at the base."""

    label = "Custom"
    required = False

    def _set_planes(self, builder: SolutionBuilder, target: Target) -> None:
        for i in range(self.dof):
            builder.planes[i + 1] = Transform()
